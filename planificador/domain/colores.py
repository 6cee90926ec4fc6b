from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")

NEUTRAL_COLOR = "#6b7280"

# El orden es parte del contrato: el índice de cada campaña sale del hash de
# su nombre, así que reordenar o deduplicar cambia los colores ya conocidos.
CAMPAIGN_PALETTE: tuple[str, ...] = (
    "#3b82f6",  # blue-500
    "#22c55e",  # green-500
    "#ec4899",  # pink-500
    "#6366f1",  # indigo-500
    "#ef4444",  # red-500
    "#a855f7",  # purple-500
    "#eab308",  # yellow-500
    "#14b8a6",  # teal-500
    "#f97316",  # orange-500
    "#06b6d4",  # cyan-500
    "#84cc16",  # lime-500
    "#f59e0b",  # amber-500
    "#10b981",  # emerald-500
    "#8b5cf6",  # violet-500
    "#0ea5e9",  # sky-500
    "#f43f5e",  # rose-500
    "#16a34a",  # green-600
    "#0ea5e9",  # sky-500
    "#64748b",  # slate-500
    "#2563eb",  # blue-600
    "#db2777",  # pink-600
    "#7f1d1d",  # red-900
    "#4f46e5",  # indigo-600
    "#9333ea",  # purple-600
    "#991b1b",  # red-800
    "#0d9488",  # teal-600
    "#facc15",  # yellow-400
    "#0891b2",  # cyan-600
    "#1e3a8a",  # blue-900
    "#d97706",  # amber-600
    "#059669",  # emerald-600
    "#ef4444",  # red-500
    "#c026d3",  # fuchsia-600
    "#e11d48",  # rose-600
    "#b91c1c",  # red-700
    "#1d4ed8",  # blue-700
    "#15803d",  # green-700
    "#06b6d4",  # cyan-500
    "#4338ca",  # indigo-700
    "#7f1d1d",  # red-900
    "#7e22ce",  # purple-700
    "#a16207",  # yellow-700
    "#0f766e",  # teal-700
    "#c2410c",  # orange-700
    "#0e7490",  # cyan-700
    "#4d7c0f",  # lime-700
    "#b45309",  # amber-700
    "#047857",  # emerald-700
    "#6d28d9",  # violet-700
    "#a21caf",  # fuchsia-700
    "#be123c",  # rose-700
    "#0369a1",  # sky-700
)

DEVELOPER_PALETTE: tuple[str, ...] = (
    "#22c55e",  # green-500
    "#ec4899",  # pink-500
    "#ef4444",  # red-500
    "#6366f1",  # indigo-500
    "#a855f7",  # purple-500
    "#eab308",  # yellow-500
    "#14b8a6",  # teal-500
    "#f97316",  # orange-500
    "#06b6d4",  # cyan-500
    "#3b82f6",  # blue-500
)

STATUS_COLORS: dict[str, str] = {
    "entregado": "#22c55e",
    "finalizado": "#3b82f6",
    "cancelado": "#9a3412",
    "en proceso": "#eab308",
    "proyectado": NEUTRAL_COLOR,
    "sin material": "#ef4444",
}


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x1_0000_0000 if value >= 0x8000_0000 else value


def _utf16_code_units(texto: str) -> list[int]:
    raw = texto.encode("utf-16-le")
    return [int.from_bytes(raw[i : i + 2], "little") for i in range(0, len(raw), 2)]


def name_hash(texto: str) -> int:
    """Hash ``h = c + ((h << 5) - h)`` con la aritmética de enteros de un navegador.

    El desplazamiento trunca a 32 bits con signo; la resta y la suma no, igual
    que en JavaScript. Hay que conservarlo bit a bit: los colores que ya ven los
    usuarios dependen de este valor.
    """
    h = 0
    for unit in _utf16_code_units(texto):
        h = unit + (_to_int32(_to_int32(h) << 5) - h)
    return h


def color_for(key: str | None, palette: Sequence[T], neutral: T | str = NEUTRAL_COLOR) -> T | str:
    if not key or not palette:
        return neutral
    return palette[abs(name_hash(key)) % len(palette)]


def campaign_color(campana: str | None) -> str:
    return color_for(campana, CAMPAIGN_PALETTE)


def developer_color(desarrollador: str | None) -> str:
    return color_for(desarrollador, DEVELOPER_PALETTE)


def status_color(estado: str | None) -> str:
    if not estado:
        return NEUTRAL_COLOR
    return STATUS_COLORS.get(estado.strip().lower(), NEUTRAL_COLOR)
