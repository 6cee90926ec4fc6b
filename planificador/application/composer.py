from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Sequence

from planificador.domain.date_utils import format_date, normalize_date
from planificador.domain.models import GroupedEvent, TrainingRecord
from planificador.domain.services import ValidacionError, validar_cabecera, validar_intervalo

ESTADO_INICIAL = "Pendiente"


def _hoy_texto(today: date | None) -> str:
    return format_date(today or date.today())


def _fecha(valor: str | None) -> str:
    return normalize_date(valor) or ""


@dataclass(frozen=True)
class FormularioDesarrollo:
    """Campos que el usuario rellena para añadir un desarrollo a una campaña."""

    desarrollo: str | None = None
    nombre: str | None = None
    cantidad: str | None = None
    fecha_material: str | None = None
    fecha_inicio: str | None = None
    fecha_fin: str | None = None
    estado: str | None = None
    observaciones: str | None = None


def compose(grupo: GroupedEvent, form: FormularioDesarrollo, *, today: date | None = None) -> TrainingRecord:
    validar_intervalo(form.fecha_inicio, form.fecha_fin)
    return TrainingRecord(
        coordinador=grupo.coordinador,
        cliente=grupo.cliente,
        segmento=grupo.segmento,
        desarrollador=grupo.desarrollador,
        segmento_menu=grupo.segmento_menu,
        campana=grupo.campana,
        formador=grupo.formador,
        fecha_solicitud=grupo.fecha_solicitud or _hoy_texto(today),
        desarrollo=form.desarrollo or "",
        nombre=form.nombre or "",
        cantidad=form.cantidad or "",
        fecha_material=_fecha(form.fecha_material),
        fecha_inicio=_fecha(form.fecha_inicio),
        fecha_fin=_fecha(form.fecha_fin),
        estado=form.estado or ESTADO_INICIAL,
        observaciones=form.observaciones or "",
        row_index=None,
    )


@dataclass(frozen=True)
class CabeceraAlta:
    coordinador: str = ""
    cliente: str = ""
    segmento: str = ""
    desarrollador: str = ""
    segmento_menu: str = ""
    observaciones: str = ""
    campana: str = ""
    formador: str = ""
    fecha_solicitud: str = field(default_factory=lambda: date.today().isoformat())


@dataclass(frozen=True)
class FilaAlta:
    desarrollo: str = ""
    nombre: str = ""
    cantidad: str = ""
    fecha_material: str = ""
    fecha_inicio: str = ""
    fecha_fin: str = ""
    estado: str = ESTADO_INICIAL


def build_alta(cabecera: CabeceraAlta, filas: Sequence[FilaAlta]) -> list[TrainingRecord]:
    """Una fila de la hoja por desarrollo, todas con la misma cabecera."""
    validar_cabecera(cabecera.cliente, cabecera.campana)
    if not filas:
        raise ValidacionError("Añade al menos un desarrollo.")
    for fila in filas:
        validar_intervalo(fila.fecha_inicio, fila.fecha_fin)

    return [
        TrainingRecord(
            coordinador=cabecera.coordinador,
            cliente=cabecera.cliente,
            segmento=cabecera.segmento,
            desarrollador=cabecera.desarrollador,
            segmento_menu=cabecera.segmento_menu,
            campana=cabecera.campana,
            formador=cabecera.formador,
            fecha_solicitud=_fecha(cabecera.fecha_solicitud),
            observaciones=cabecera.observaciones,
            desarrollo=fila.desarrollo,
            nombre=fila.nombre,
            cantidad=fila.cantidad,
            fecha_material=_fecha(fila.fecha_material),
            fecha_inicio=_fecha(fila.fecha_inicio),
            fecha_fin=_fecha(fila.fecha_fin),
            estado=fila.estado or ESTADO_INICIAL,
        )
        for fila in filas
    ]
