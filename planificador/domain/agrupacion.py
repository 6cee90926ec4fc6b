from __future__ import annotations

from datetime import date
from typing import Iterable

from planificador.domain.date_utils import month_bounds, parse_date
from planificador.domain.models import (
    SIN_CAMPANA,
    DetalleDesarrollo,
    GroupedEvent,
    NovedadesRecord,
    TrainingRecord,
)


def derive_campana(cliente: str | None, segmento: str | None) -> str:
    return f"{cliente or ''} {segmento or ''}".strip()


def parse_interval(fecha_inicio: str | None, fecha_fin: str | None) -> tuple[date, date] | None:
    """Intervalo cerrado [inicio, fin] o ``None`` si falta, no parsea o está invertido."""
    start = parse_date(fecha_inicio)
    end = parse_date(fecha_fin)
    if start is None or end is None or start > end:
        return None
    return start, end


def active_interval(record: TrainingRecord) -> tuple[date, date] | None:
    return parse_interval(record.fecha_inicio, record.fecha_fin)


def events_for_date(records: Iterable[TrainingRecord], day: date) -> list[TrainingRecord]:
    activos: list[TrainingRecord] = []
    for record in records:
        interval = active_interval(record)
        if interval is None:
            continue
        start, end = interval
        if start <= day <= end:
            activos.append(record)
    return activos


def group_by_campaign(records: Iterable[TrainingRecord]) -> list[GroupedEvent]:
    cabeceras: dict[str, TrainingRecord] = {}
    detalles: dict[str, list[DetalleDesarrollo]] = {}

    for record in records:
        campana = record.campana or SIN_CAMPANA
        if campana not in cabeceras:
            cabeceras[campana] = record
            detalles[campana] = []
        detalles[campana].append(DetalleDesarrollo.desde_registro(record))

    return [
        GroupedEvent(
            campana=campana,
            coordinador=primero.coordinador,
            desarrollador=primero.desarrollador,
            cliente=primero.cliente,
            segmento=primero.segmento,
            segmento_menu=primero.segmento_menu,
            formador=primero.formador,
            fecha_solicitud=primero.fecha_solicitud,
            fecha_material=primero.fecha_material,
            fecha_inicio=primero.fecha_inicio,
            fecha_fin=primero.fecha_fin,
            desarrollos=tuple(detalles[campana]),
        )
        for campana, primero in cabeceras.items()
    ]


def active_campaigns_for_month(records: Iterable[TrainingRecord], year: int, month: int) -> list[str]:
    month_start, month_end = month_bounds(year, month)
    campanas: set[str] = set()
    for record in records:
        interval = active_interval(record)
        if interval is None or not record.campana:
            continue
        start, end = interval
        if start <= month_end and end >= month_start:
            campanas.add(record.campana)
    return sorted(campanas)


def novedades_for_date(novedades: Iterable[NovedadesRecord], day: date) -> list[NovedadesRecord]:
    activas: list[NovedadesRecord] = []
    for novedad in novedades:
        interval = parse_interval(novedad.fecha_inicio, novedad.fecha_fin)
        if interval is not None and interval[0] <= day <= interval[1]:
            activas.append(novedad)
    return activas
