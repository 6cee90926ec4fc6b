from __future__ import annotations

import logging

from planificador.core.errors import ValidationError
from planificador.domain.date_utils import parse_date
from planificador.domain.models import SheetsConfig

logger = logging.getLogger(__name__)


class ValidacionError(ValidationError):
    pass


def validar_cabecera(cliente: str | None, campana: str | None) -> None:
    if not (cliente or "").strip() or not (campana or "").strip():
        raise ValidacionError("Cliente y Campaña son obligatorios")


def validar_intervalo(fecha_inicio: str | None, fecha_fin: str | None) -> None:
    """Rechaza intervalos invertidos al dar de alta.

    Las filas que ya existen en la hoja con el intervalo invertido no se
    rechazan: simplemente no aparecen en el calendario.
    """
    inicio = parse_date(fecha_inicio)
    fin = parse_date(fecha_fin)
    if inicio is not None and fin is not None and inicio > fin:
        raise ValidacionError("La fecha de inicio no puede ser posterior a la fecha de fin.")


def validar_sheets_config(config: SheetsConfig) -> None:
    if not config.spreadsheet_id.strip():
        raise ValidacionError("La URL o ID de la spreadsheet es obligatoria.")
    if not config.credentials_path.strip():
        raise ValidacionError("Debe seleccionar un archivo de credenciales JSON.")
