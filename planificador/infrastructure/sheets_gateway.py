from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from planificador.domain.models import MasterData, NovedadesRecord, SheetsConfig, TrainingRecord
from planificador.domain.ports import SheetsConfigStorePort, SubmitPayload
from planificador.domain.services import validar_sheets_config
from planificador.domain.sheets_errors import SheetsConfigError
from planificador.infrastructure.sheets_client import SheetsClient
from planificador.infrastructure.sheets_rows import (
    parse_master_data,
    parse_novedades,
    parse_training_records,
    record_to_row,
    row_range,
)

logger = logging.getLogger(__name__)


class SheetsTrainingGateway:
    """Origen de datos del calendario sobre un libro de Google Sheets.

    Contrato de escritura para lotes: si una fila viene a la vez en ``data`` y
    en ``deletedRowIndices``, gana el borrado y la actualización se descarta.
    Los borrados se aplican de abajo arriba para que los números de fila
    pendientes sigan siendo válidos.
    """

    def __init__(self, client: SheetsClient, config_store: SheetsConfigStorePort) -> None:
        self._client = client
        self._config_store = config_store
        self._config: SheetsConfig | None = None

    def fetch_training_records(self) -> list[TrainingRecord]:
        config = self._open()
        return parse_training_records(self._client.read_all_values(config.hoja_registros))

    def fetch_master_data(self) -> MasterData:
        config = self._open()
        return parse_master_data(self._client.read_all_values(config.hoja_maestros))

    def fetch_novedades(self) -> list[NovedadesRecord]:
        config = self._open()
        return parse_novedades(self._client.read_all_values(config.hoja_novedades))

    def submit_records(self, payload: SubmitPayload) -> None:
        config = self._open()
        hoja = config.hoja_registros

        if isinstance(payload, list):
            self._append(hoja, [TrainingRecord.from_payload(item) for item in payload])
            return

        action = payload.get("action")
        data = payload.get("data")
        if action == "create":
            items = data if isinstance(data, list) else [data]
            self._append(hoja, [TrainingRecord.from_payload(item) for item in items])
            return
        if action != "update":
            raise ValueError(f"Acción no soportada: {action!r}")

        if isinstance(data, dict):
            record = TrainingRecord.from_payload({**data, "rowIndex": payload.get("rowIndex", data.get("rowIndex"))})
            self._apply_batch(hoja, [record], [])
            return
        records = [TrainingRecord.from_payload(item) for item in data or []]
        self._apply_batch(hoja, records, payload.get("deletedRowIndices") or [])

    def _apply_batch(self, hoja: str, records: list[TrainingRecord], deleted_row_indices: list[int]) -> None:
        deleted = {int(row) for row in deleted_row_indices}
        nuevos = [record for record in records if record.row_index is None]
        descartados = [record.row_index for record in records if record.row_index in deleted]
        if descartados:
            logger.info("Actualizaciones descartadas por borrado en filas %s", descartados)

        updates: list[dict[str, Any]] = [
            {"range": row_range(record.row_index), "values": [record_to_row(record)]}
            for record in records
            if record.row_index is not None and record.row_index not in deleted
        ]
        self._client.batch_update(hoja, updates)
        for row_number in sorted(deleted, reverse=True):
            self._client.delete_row(hoja, row_number)
        self._append(hoja, nuevos)
        logger.info(
            "Lote aplicado en %s: %s actualizadas, %s borradas, %s nuevas",
            hoja,
            len(updates),
            len(deleted),
            len(nuevos),
        )

    def _append(self, hoja: str, records: list[TrainingRecord]) -> None:
        if not records:
            return
        self._client.append_rows(hoja, [record_to_row(record) for record in records])
        logger.info("Añadidas %s filas en %s", len(records), hoja)

    def _open(self) -> SheetsConfig:
        if self._config is not None and self._client.is_open:
            return self._config
        config = self._config_store.load()
        if config is None:
            raise SheetsConfigError("Falta configurar el libro de Google Sheets y las credenciales.")
        validar_sheets_config(config)
        self._client.open_spreadsheet(Path(config.credentials_path), config.spreadsheet_id)
        self._config = config
        return config
