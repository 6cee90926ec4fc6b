from __future__ import annotations

from typing import Any

from planificador.domain.date_utils import normalize_date, to_iso
from planificador.domain.models import (
    DATE_FIELDS,
    FestivoRecord,
    MasterData,
    NovedadesRecord,
    TrainingRecord,
)

FIRST_DATA_ROW = 2

# Orden de columnas A..P de la hoja de registros.
COLUMNAS_REGISTROS: tuple[str, ...] = (
    "fecha_solicitud",
    "coordinador",
    "cliente",
    "segmento",
    "desarrollador",
    "segmento_menu",
    "desarrollo",
    "nombre",
    "cantidad",
    "fecha_material",
    "fecha_inicio",
    "fecha_fin",
    "estado",
    "formador",
    "observaciones",
    "campana",
)

# Columnas de la hoja de maestros.
COL_DESARROLLADOR = 0
COL_FESTIVO = 3
COL_FESTIVIDAD = 4
COL_COORDINADOR = 6
COL_CLIENTE = 8
COL_TIPO_DESARROLLO = 10
COL_ESTADO = 12


def cell(row: list[Any], idx: int) -> str | None:
    if idx >= len(row):
        return None
    value = row[idx]
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def is_blank(row: list[Any]) -> bool:
    return not any(str(value).strip() for value in row if value is not None)


def data_rows(values: list[list[Any]]) -> list[tuple[int, list[Any]]]:
    """Filas de datos con su número real en la hoja; la fila 1 es la cabecera."""
    return [
        (row_number, row)
        for row_number, row in enumerate(values[1:], start=FIRST_DATA_ROW)
        if not is_blank(row)
    ]


def parse_training_row(row_number: int, row: list[Any]) -> TrainingRecord:
    valores: dict[str, Any] = {}
    for idx, campo in enumerate(COLUMNAS_REGISTROS):
        valor = cell(row, idx)
        valores[campo] = normalize_date(valor) if campo in DATE_FIELDS else valor
    return TrainingRecord(row_index=row_number, **valores)


def parse_training_records(values: list[list[Any]]) -> list[TrainingRecord]:
    return [parse_training_row(row_number, row) for row_number, row in data_rows(values)]


def parse_novedades(values: list[list[Any]]) -> list[NovedadesRecord]:
    return [
        NovedadesRecord(
            desarrollador=cell(row, 0),
            fecha_inicio=normalize_date(cell(row, 1)),
            fecha_fin=normalize_date(cell(row, 2)),
            novedad=cell(row, 3),
        )
        for _, row in data_rows(values)
    ]


def parse_master_data(values: list[list[Any]]) -> MasterData:
    festivos: list[FestivoRecord] = []
    desarrolladores: set[str] = set()
    coordinadores: set[str] = set()
    clientes: set[str] = set()
    tipos: set[str] = set()
    estados: set[str] = set()

    for _, row in data_rows(values):
        festivo = cell(row, COL_FESTIVO)
        festividad = cell(row, COL_FESTIVIDAD)
        if festivo and festividad:
            festivos.append(FestivoRecord(festivo=normalize_date(festivo), festividad=festividad))
        for destino, idx in (
            (desarrolladores, COL_DESARROLLADOR),
            (coordinadores, COL_COORDINADOR),
            (clientes, COL_CLIENTE),
            (tipos, COL_TIPO_DESARROLLO),
            (estados, COL_ESTADO),
        ):
            valor = cell(row, idx)
            if valor:
                destino.add(valor)

    return MasterData(
        festivos=tuple(festivos),
        desarrolladores=tuple(sorted(desarrolladores)),
        coordinadores=tuple(sorted(coordinadores)),
        clientes=tuple(sorted(clientes)),
        tipos_desarrollo=tuple(sorted(tipos)),
        estados=tuple(sorted(estados)),
    )


def record_to_row(record: TrainingRecord) -> list[str]:
    """Fila lista para ``USER_ENTERED``: las fechas van en ISO, que la hoja
    interpreta igual sea cual sea su configuración regional."""
    fila: list[str] = []
    for campo in COLUMNAS_REGISTROS:
        valor = getattr(record, campo) or ""
        if campo in DATE_FIELDS and valor:
            valor = to_iso(valor) or valor
        fila.append(valor)
    return fila


def row_range(row_number: int) -> str:
    last_column = chr(ord("A") + len(COLUMNAS_REGISTROS) - 1)
    return f"A{row_number}:{last_column}{row_number}"
