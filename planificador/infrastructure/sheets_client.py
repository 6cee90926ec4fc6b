from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import gspread
from google.auth.exceptions import DefaultCredentialsError
from gspread.utils import DateTimeOption, ValueRenderOption

from planificador.bootstrap.logging import log_operational_error
from planificador.domain.sheets_errors import SheetsPermissionError
from planificador.infrastructure.sheets_errors import map_gspread_exception

logger = logging.getLogger(__name__)

_ERRORES_GSPREAD = (
    gspread.exceptions.GSpreadException,
    FileNotFoundError,
    json.JSONDecodeError,
    DefaultCredentialsError,
    OSError,
)


class SheetsClient:
    """Acceso mínimo a un libro de Google Sheets con cuenta de servicio.

    Todas las excepciones de gspread/google-auth salen traducidas a la
    taxonomía de ``planificador.domain.sheets_errors``.
    """

    def __init__(self) -> None:
        self._spreadsheet: gspread.Spreadsheet | None = None
        self._worksheet_cache: dict[str, gspread.Worksheet] = {}

    @property
    def is_open(self) -> bool:
        return self._spreadsheet is not None

    def open_spreadsheet(self, credentials_path: Path, spreadsheet_id: str) -> gspread.Spreadsheet:
        logger.info("Conectando a Google Sheets con credenciales: %s", credentials_path.name)
        try:
            client = gspread.service_account(filename=str(credentials_path))
            spreadsheet = client.open_by_key(spreadsheet_id)
        except _ERRORES_GSPREAD as exc:
            raise self._mapear(exc, spreadsheet_id=spreadsheet_id) from exc
        self._spreadsheet = spreadsheet
        self._worksheet_cache = {}
        return spreadsheet

    def get_worksheet(self, name: str) -> gspread.Worksheet:
        if name in self._worksheet_cache:
            return self._worksheet_cache[name]
        spreadsheet = self._require_spreadsheet()
        try:
            worksheet = spreadsheet.worksheet(name)
        except _ERRORES_GSPREAD as exc:
            raise self._mapear(exc, worksheet_name=name) from exc
        self._worksheet_cache[name] = worksheet
        return worksheet

    def read_all_values(self, worksheet_name: str) -> list[list[Any]]:
        # Sin formato: las fechas llegan como número de serie, no según la configuración regional de la hoja.
        worksheet = self.get_worksheet(worksheet_name)
        try:
            return worksheet.get_all_values(
                value_render_option=ValueRenderOption.unformatted,
                date_time_render_option=DateTimeOption.serial_number,
            )
        except _ERRORES_GSPREAD as exc:
            raise self._mapear(exc, worksheet_name=worksheet_name) from exc

    def append_rows(self, worksheet_name: str, rows: list[list[Any]]) -> None:
        if not rows:
            return
        worksheet = self.get_worksheet(worksheet_name)
        try:
            worksheet.append_rows(rows, value_input_option="USER_ENTERED")
        except _ERRORES_GSPREAD as exc:
            raise self._mapear(exc, worksheet_name=worksheet_name) from exc

    def batch_update(self, worksheet_name: str, data: list[dict[str, Any]]) -> None:
        if not data:
            return
        worksheet = self.get_worksheet(worksheet_name)
        try:
            worksheet.batch_update(data, value_input_option="USER_ENTERED")
        except _ERRORES_GSPREAD as exc:
            raise self._mapear(exc, worksheet_name=worksheet_name) from exc

    def delete_row(self, worksheet_name: str, row_number: int) -> None:
        worksheet = self.get_worksheet(worksheet_name)
        try:
            worksheet.delete_rows(row_number)
        except _ERRORES_GSPREAD as exc:
            raise self._mapear(exc, worksheet_name=worksheet_name) from exc

    def _require_spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            raise RuntimeError("Spreadsheet no inicializado. Llama a open_spreadsheet primero.")
        return self._spreadsheet

    def _mapear(
        self,
        exc: Exception,
        *,
        spreadsheet_id: str | None = None,
        worksheet_name: str | None = None,
    ) -> Exception:
        mapped = map_gspread_exception(exc)
        if isinstance(mapped, SheetsPermissionError):
            log_operational_error(
                logger,
                "Permisos insuficientes en Google Sheets",
                exc=mapped,
                datos={
                    "spreadsheet_id": spreadsheet_id or getattr(self._spreadsheet, "id", None),
                    "worksheet": worksheet_name,
                },
            )
        return mapped
