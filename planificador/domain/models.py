from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Optional

from planificador.core.errors import ValidationError

SIN_CAMPANA = "Sin campaña"


class CampoNoEditableError(ValidationError):
    pass


HEADER_FIELDS: tuple[str, ...] = (
    "coordinador",
    "cliente",
    "segmento",
    "desarrollador",
    "segmento_menu",
    "campana",
    "formador",
    "fecha_solicitud",
)

DEVELOPMENT_FIELDS: tuple[str, ...] = (
    "desarrollo",
    "nombre",
    "cantidad",
    "fecha_material",
    "fecha_inicio",
    "fecha_fin",
    "estado",
    "observaciones",
)

DATE_FIELDS: frozenset[str] = frozenset({"fecha_solicitud", "fecha_material", "fecha_inicio", "fecha_fin"})

# Nombre Python -> clave camelCase que viaja en los payloads.
_WIRE_NAMES: dict[str, str] = {
    "fecha_solicitud": "fechaSolicitud",
    "segmento_menu": "segmentoMenu",
    "fecha_material": "fechaMaterial",
    "fecha_inicio": "fechaInicio",
    "fecha_fin": "fechaFin",
    "row_index": "rowIndex",
}


def wire_name(campo: str) -> str:
    return _WIRE_NAMES.get(campo, campo)


@dataclass(frozen=True)
class TrainingRecord:
    """Fila de la hoja de planificación: un desarrollo dentro de una campaña.

    Los campos de cabecera (coordinador, cliente, segmento...) se repiten en
    todas las filas de una misma campaña; los de desarrollo son propios de la
    fila. ``row_index`` es la fila real en la hoja y falta en registros que
    todavía no se han enviado.
    """

    coordinador: Optional[str] = None
    cliente: Optional[str] = None
    segmento: Optional[str] = None
    desarrollador: Optional[str] = None
    segmento_menu: Optional[str] = None
    campana: Optional[str] = None
    formador: Optional[str] = None
    fecha_solicitud: Optional[str] = None
    desarrollo: Optional[str] = None
    nombre: Optional[str] = None
    cantidad: Optional[str] = None
    fecha_material: Optional[str] = None
    fecha_inicio: Optional[str] = None
    fecha_fin: Optional[str] = None
    estado: Optional[str] = None
    observaciones: Optional[str] = None
    row_index: Optional[int] = None

    def patch(self, campo: str, valor: Optional[str]) -> "TrainingRecord":
        if campo not in HEADER_FIELDS and campo not in DEVELOPMENT_FIELDS:
            raise CampoNoEditableError(f"El campo '{campo}' no es editable.")
        return replace(self, **{campo: valor})

    def to_payload(self) -> dict[str, Any]:
        payload = {wire_name(f.name): getattr(self, f.name) for f in fields(self)}
        if self.row_index is None:
            payload.pop("rowIndex")
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TrainingRecord":
        valores: dict[str, Any] = {}
        for f in fields(cls):
            clave = wire_name(f.name)
            if clave in payload:
                valores[f.name] = payload[clave]
        row_index = valores.get("row_index")
        if row_index is not None:
            valores["row_index"] = int(row_index)
        return cls(**valores)


@dataclass(frozen=True)
class DetalleDesarrollo:
    desarrollo: Optional[str]
    nombre: Optional[str]
    segmento: Optional[str]
    cantidad: Optional[str]
    estado: Optional[str]
    observaciones: Optional[str]
    row_index: Optional[int] = None

    @classmethod
    def desde_registro(cls, registro: TrainingRecord) -> "DetalleDesarrollo":
        return cls(
            desarrollo=registro.desarrollo,
            nombre=registro.nombre,
            segmento=registro.segmento,
            cantidad=registro.cantidad,
            estado=registro.estado,
            observaciones=registro.observaciones,
            row_index=registro.row_index,
        )


@dataclass(frozen=True)
class GroupedEvent:
    """Vista de una campaña en un día concreto.

    La cabecera se toma del primer registro que aporta al grupo; el resto solo
    añade entradas en ``desarrollos``. Si otras filas de la misma campaña traen
    una cabecera distinta, esa diferencia se pierde en esta vista.
    """

    campana: str
    coordinador: Optional[str] = None
    desarrollador: Optional[str] = None
    cliente: Optional[str] = None
    segmento: Optional[str] = None
    segmento_menu: Optional[str] = None
    formador: Optional[str] = None
    fecha_solicitud: Optional[str] = None
    fecha_material: Optional[str] = None
    fecha_inicio: Optional[str] = None
    fecha_fin: Optional[str] = None
    desarrollos: tuple[DetalleDesarrollo, ...] = field(default_factory=tuple)

    @property
    def row_indices(self) -> tuple[int, ...]:
        return tuple(d.row_index for d in self.desarrollos if d.row_index is not None)

    def reemplazar_detalle(self, registro: TrainingRecord) -> "GroupedEvent":
        if registro.row_index is None:
            return self
        nuevos = tuple(
            DetalleDesarrollo.desde_registro(registro) if detalle.row_index == registro.row_index else detalle
            for detalle in self.desarrollos
        )
        return replace(self, desarrollos=nuevos)


@dataclass(frozen=True)
class FestivoRecord:
    festivo: Optional[str]
    festividad: Optional[str]


@dataclass(frozen=True)
class NovedadesRecord:
    desarrollador: Optional[str]
    fecha_inicio: Optional[str]
    fecha_fin: Optional[str]
    novedad: Optional[str]


@dataclass(frozen=True)
class MasterData:
    festivos: tuple[FestivoRecord, ...] = ()
    desarrolladores: tuple[str, ...] = ()
    coordinadores: tuple[str, ...] = ()
    clientes: tuple[str, ...] = ()
    tipos_desarrollo: tuple[str, ...] = ()
    estados: tuple[str, ...] = ()


@dataclass(frozen=True)
class SheetsConfig:
    spreadsheet_id: str
    credentials_path: str
    hoja_registros: str = "Base_WT25"
    hoja_maestros: str = "DATA"
    hoja_novedades: str = "Novedades"
