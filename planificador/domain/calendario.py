from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Sequence

from planificador.domain.agrupacion import (
    active_campaigns_for_month,
    events_for_date,
    group_by_campaign,
    novedades_for_date,
)
from planificador.domain.colores import campaign_color, status_color
from planificador.domain.date_utils import month_bounds, month_title, parse_date
from planificador.domain.models import FestivoRecord, GroupedEvent, NovedadesRecord, TrainingRecord

WEEKDAY_LABELS: tuple[str, ...] = ("Lun", "Mar", "Mié", "Jue", "Vie", "Sáb")
MAX_EVENTOS_POR_CARRIL = 6

_SUNDAY = 6


class Carril(str, Enum):
    BASE = "base"
    ACTUALIZACION = "actualizacion"
    INCUMPLIMIENTO = "incumplimiento"


@dataclass(frozen=True)
class FiltrosCalendario:
    mostrar_actualizaciones: bool = True
    mostrar_incumplimientos: bool = True
    campana_seleccionada: str | None = None


@dataclass(frozen=True)
class EventoEnDia:
    grupo: GroupedEvent
    carril: Carril
    es_inicio: bool
    es_fin: bool
    estado: str | None
    color_estado: str
    color_campana: str
    atenuado: bool = False


@dataclass(frozen=True)
class DiaCalendario:
    fecha: date
    es_mes_actual: bool
    es_hoy: bool
    festivo: FestivoRecord | None = None
    novedades: tuple[NovedadesRecord, ...] = ()
    base: tuple[EventoEnDia, ...] = ()
    actualizaciones: tuple[EventoEnDia, ...] = ()
    incumplimientos: tuple[EventoEnDia, ...] = ()
    total_grupos: int = 0
    exceso: int = 0

    @property
    def es_festivo(self) -> bool:
        return self.festivo is not None


@dataclass(frozen=True)
class VistaMes:
    anio: int
    mes: int
    titulo: str
    dias: tuple[DiaCalendario, ...] = ()
    campanas_activas: tuple[str, ...] = field(default_factory=tuple)

    def semanas(self) -> list[tuple[DiaCalendario, ...]]:
        size = len(WEEKDAY_LABELS)
        return [self.dias[i : i + size] for i in range(0, len(self.dias), size)]


def visible_days(year: int, month: int) -> list[date]:
    """Días de la rejilla del mes: semanas completas de lunes a sábado.

    El domingo no se pinta nunca; la rejilla tiene seis columnas.
    """
    month_start, month_end = month_bounds(year, month)
    grid_start = month_start - timedelta(days=month_start.weekday())
    grid_end = month_end + timedelta(days=_SUNDAY - month_end.weekday())
    total = (grid_end - grid_start).days + 1
    dias = (grid_start + timedelta(days=offset) for offset in range(total))
    return [dia for dia in dias if dia.weekday() != _SUNDAY]


def holiday_for(day: date, festivos: Iterable[FestivoRecord]) -> FestivoRecord | None:
    for festivo in festivos:
        if parse_date(festivo.festivo) == day:
            return festivo
    return None


def date_markers(day: date, grupo: GroupedEvent) -> tuple[bool, bool]:
    start = parse_date(grupo.fecha_inicio)
    end = parse_date(grupo.fecha_fin)
    if start is None or end is None:
        return False, False
    return start == day, end == day


def _plain(texto: str | None) -> str:
    if not texto:
        return ""
    descompuesto = unicodedata.normalize("NFKD", texto.strip())
    return "".join(ch for ch in descompuesto if not unicodedata.combining(ch)).casefold()


def group_status(grupo: GroupedEvent) -> str | None:
    estados = [_plain(detalle.estado) for detalle in grupo.desarrollos]
    if "en proceso" in estados:
        return "En Proceso"
    if "finalizado" in estados:
        return "Finalizado"
    if "entregado" in estados:
        return "Entregado"
    if not grupo.desarrollos:
        return None
    return grupo.desarrollos[0].estado


def _mismo_texto(valor: str | None, esperado: str) -> bool:
    return (valor or "").casefold() == esperado


def classify_lane(grupo: GroupedEvent) -> Carril:
    # Solo ignora mayúsculas: "Actualización" con tilde se queda en el carril base.
    if any(_mismo_texto(detalle.estado, "incumplimiento") for detalle in grupo.desarrollos):
        return Carril.INCUMPLIMIENTO
    if any(_mismo_texto(detalle.desarrollo, "actualizacion") for detalle in grupo.desarrollos):
        return Carril.ACTUALIZACION
    return Carril.BASE


def _evento(day: date, grupo: GroupedEvent, carril: Carril, filtros: FiltrosCalendario) -> EventoEnDia:
    es_inicio, es_fin = date_markers(day, grupo)
    estado = group_status(grupo)
    atenuado = bool(filtros.campana_seleccionada) and grupo.campana != filtros.campana_seleccionada
    return EventoEnDia(
        grupo=grupo,
        carril=carril,
        es_inicio=es_inicio,
        es_fin=es_fin,
        estado=estado,
        color_estado=status_color(estado),
        color_campana=campaign_color(grupo.campana),
        atenuado=atenuado,
    )


def build_day(
    day: date,
    *,
    records: Sequence[TrainingRecord],
    festivos: Sequence[FestivoRecord],
    novedades: Sequence[NovedadesRecord],
    year: int,
    month: int,
    today: date,
    filtros: FiltrosCalendario | None = None,
) -> DiaCalendario:
    filtros = filtros or FiltrosCalendario()
    base = DiaCalendario(
        fecha=day,
        es_mes_actual=(day.year, day.month) == (year, month),
        es_hoy=day == today,
        novedades=tuple(novedades_for_date(novedades, day)),
    )

    festivo = holiday_for(day, festivos)
    if festivo is not None:
        return DiaCalendario(
            fecha=base.fecha,
            es_mes_actual=base.es_mes_actual,
            es_hoy=base.es_hoy,
            festivo=festivo,
            novedades=base.novedades,
        )

    grupos = group_by_campaign(events_for_date(records, day))
    carriles: dict[Carril, list[EventoEnDia]] = {carril: [] for carril in Carril}
    for grupo in grupos:
        carril = classify_lane(grupo)
        carriles[carril].append(_evento(day, grupo, carril, filtros))

    def _recortar(carril: Carril, visible: bool = True) -> tuple[EventoEnDia, ...]:
        if not visible:
            return ()
        return tuple(carriles[carril][:MAX_EVENTOS_POR_CARRIL])

    return DiaCalendario(
        fecha=base.fecha,
        es_mes_actual=base.es_mes_actual,
        es_hoy=base.es_hoy,
        novedades=base.novedades,
        base=_recortar(Carril.BASE),
        actualizaciones=_recortar(Carril.ACTUALIZACION, filtros.mostrar_actualizaciones),
        incumplimientos=_recortar(Carril.INCUMPLIMIENTO, filtros.mostrar_incumplimientos),
        total_grupos=len(grupos),
        exceso=max(0, len(grupos) - MAX_EVENTOS_POR_CARRIL),
    )


def build_month(
    year: int,
    month: int,
    *,
    records: Sequence[TrainingRecord],
    festivos: Sequence[FestivoRecord],
    novedades: Sequence[NovedadesRecord],
    today: date,
    filtros: FiltrosCalendario | None = None,
) -> VistaMes:
    dias = tuple(
        build_day(
            dia,
            records=records,
            festivos=festivos,
            novedades=novedades,
            year=year,
            month=month,
            today=today,
            filtros=filtros,
        )
        for dia in visible_days(year, month)
    )
    return VistaMes(
        anio=year,
        mes=month,
        titulo=month_title(year, month),
        dias=dias,
        campanas_activas=tuple(active_campaigns_for_month(records, year, month)),
    )
