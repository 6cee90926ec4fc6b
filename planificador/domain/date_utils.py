from __future__ import annotations

import calendar
import logging
import re
from datetime import date, datetime, timedelta

logger = logging.getLogger(__name__)

_SERIALIZED_DATE_RE = re.compile(r"Date\((\d+),(\d+),(\d+)(?:,\d+)*\)")
_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_CANONICAL_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_LOOSE_DMY_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
# Número de serie de hoja de cálculo (días desde 30/12/1899); cinco cifras cubren 1927-2173.
_SERIAL_RE = re.compile(r"^(\d{5})(?:\.\d+)?$")
_SERIAL_EPOCH = date(1899, 12, 30)

MESES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)


def normalize_date(raw: str | None) -> str | None:
    """Lleva una fecha de la hoja a ``DD/MM/YYYY``.

    Acepta el formato serializado de la API de visualización (``Date(2024,2,1)``,
    con el mes empezando en 0), ISO ``YYYY-MM-DD``, ``D/M/YYYY`` sin ceros, el
    número de serie que devuelve la API de Sheets y el propio formato canónico.
    Lo que no reconoce lo devuelve tal cual.
    """
    if not raw:
        return None

    match = _SERIALIZED_DATE_RE.search(raw)
    if match:
        year, month_zero_based, day = (int(part) for part in match.groups())
        return f"{day:02d}/{month_zero_based + 1:02d}/{year}"

    valor = raw.strip()
    iso = _ISO_RE.match(valor)
    if iso:
        year_txt, month_txt, day_txt = iso.groups()
        return f"{day_txt}/{month_txt}/{year_txt}"

    loose = _LOOSE_DMY_RE.match(valor)
    if loose and not _CANONICAL_RE.match(valor):
        day, month, year = (int(part) for part in loose.groups())
        return f"{day:02d}/{month:02d}/{year}"

    serial = _from_serial(valor)
    if serial is not None:
        return format_date(serial)

    return raw


def parse_date(raw: str | None) -> date | None:
    """Convierte una fecha en texto a ``date``; ``None`` si no es interpretable."""
    if not raw:
        return None
    valor = raw.strip()
    if "Date(" in valor:
        valor = normalize_date(valor) or ""

    dmy = _LOOSE_DMY_RE.match(valor)
    if dmy:
        day, month, year = (int(part) for part in dmy.groups())
        return _safe_date(year, month, day, raw)

    iso = _ISO_RE.match(valor)
    if iso:
        year, month, day = (int(part) for part in iso.groups())
        return _safe_date(year, month, day, raw)

    serial = _from_serial(valor)
    if serial is not None:
        return serial

    try:
        return datetime.fromisoformat(valor).date()
    except ValueError:
        logger.debug("Fecha no interpretable: %r", raw)
        return None


def _from_serial(valor: str) -> date | None:
    match = _SERIAL_RE.match(valor)
    if not match:
        return None
    return _SERIAL_EPOCH + timedelta(days=int(match.group(1)))


def _safe_date(year: int, month: int, day: int, raw: str) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        logger.debug("Fecha fuera de rango: %r", raw)
        return None


def format_date(value: date) -> str:
    return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"


def to_iso(raw: str | None) -> str | None:
    """``DD/MM/YYYY`` (o cualquier forma aceptada) -> ``YYYY-MM-DD`` para formularios."""
    parsed = parse_date(raw)
    if parsed is None:
        return None
    return parsed.isoformat()


def from_iso(raw: str | None) -> str | None:
    """``YYYY-MM-DD`` de un formulario -> ``DD/MM/YYYY`` de almacenamiento."""
    if not raw:
        return None
    iso = _ISO_RE.match(raw.strip())
    if not iso:
        return None
    return normalize_date(raw.strip())


def format_display(raw: str | None) -> str:
    if not raw:
        return ""
    if _CANONICAL_RE.match(raw):
        return raw
    parsed = parse_date(raw)
    if parsed is None:
        return raw
    return format_date(parsed)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def add_months(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_title(year: int, month: int) -> str:
    return f"{MESES[month - 1]} {year}"
