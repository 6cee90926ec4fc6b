from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from planificador.domain.calendario import DiaCalendario, EventoEnDia, VistaMes
from planificador.domain.colores import developer_color
from planificador.domain.models import SIN_CAMPANA, GroupedEvent, NovedadesRecord


@dataclass(frozen=True)
class EtiquetaEvento:
    """Lo que pinta una celda por cada campaña, sin depender de Qt."""

    titulo: str
    iniciales: str
    color_campana: str
    color_estado: str
    color_desarrollador: str
    es_inicio: bool
    es_fin: bool
    atenuado: bool
    grupo: GroupedEvent = field(compare=False, repr=False)


@dataclass(frozen=True)
class ResumenCelda:
    fecha: date
    dia: int
    es_mes_actual: bool
    es_hoy: bool
    festivo: str | None
    novedades: tuple[str, ...]
    incumplimientos: tuple[EtiquetaEvento, ...]
    actualizaciones: tuple[EtiquetaEvento, ...]
    base: tuple[EtiquetaEvento, ...]
    exceso: str | None


def titulo_evento(grupo: GroupedEvent) -> str:
    total = len(grupo.desarrollos)
    sufijo = "desarrollos" if total > 1 else "desarrollo"
    return f"{grupo.campana or SIN_CAMPANA} ({total} {sufijo})"


def iniciales_desarrollador(nombre: str | None) -> str:
    if not nombre:
        return ""
    palabras = nombre.split()[:2]
    return "".join(palabra[0] for palabra in palabras).upper()


def texto_exceso(exceso: int) -> str | None:
    if exceso <= 0:
        return None
    return f"+{exceso} más"


def texto_novedad(novedad: NovedadesRecord) -> str:
    if novedad.desarrollador and novedad.novedad:
        return f"{novedad.desarrollador}: {novedad.novedad}"
    return novedad.novedad or novedad.desarrollador or ""


MARCA_INICIO = "▶"
MARCA_FIN = "⚑"


def texto_boton(etiqueta: EtiquetaEvento) -> str:
    """Iniciales (o título) con las marcas de primer y último día de la campaña."""
    partes = [etiqueta.iniciales or etiqueta.titulo]
    if etiqueta.es_inicio:
        partes.insert(0, MARCA_INICIO)
    if etiqueta.es_fin:
        partes.append(MARCA_FIN)
    return " ".join(partes)


def etiqueta_evento(evento: EventoEnDia) -> EtiquetaEvento:
    grupo = evento.grupo
    return EtiquetaEvento(
        titulo=titulo_evento(grupo),
        iniciales=iniciales_desarrollador(grupo.desarrollador),
        color_campana=evento.color_campana,
        color_estado=evento.color_estado,
        color_desarrollador=developer_color(grupo.desarrollador),
        es_inicio=evento.es_inicio,
        es_fin=evento.es_fin,
        atenuado=evento.atenuado,
        grupo=grupo,
    )


def resumen_celda(dia: DiaCalendario) -> ResumenCelda:
    return ResumenCelda(
        fecha=dia.fecha,
        dia=dia.fecha.day,
        es_mes_actual=dia.es_mes_actual,
        es_hoy=dia.es_hoy,
        festivo=dia.festivo.festividad if dia.festivo else None,
        novedades=tuple(texto for texto in map(texto_novedad, dia.novedades) if texto),
        incumplimientos=tuple(etiqueta_evento(e) for e in dia.incumplimientos),
        actualizaciones=tuple(etiqueta_evento(e) for e in dia.actualizaciones),
        base=tuple(etiqueta_evento(e) for e in dia.base),
        exceso=texto_exceso(dia.exceso),
    )


def resumen_mes(vista: VistaMes) -> list[list[ResumenCelda]]:
    """Rejilla lista para pintar: una lista de celdas por semana."""
    return [[resumen_celda(dia) for dia in semana] for semana in vista.semanas()]
