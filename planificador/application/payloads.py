from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable

from planificador.domain.agrupacion import derive_campana
from planificador.domain.models import TrainingRecord

ACTION_CREATE = "create"
ACTION_UPDATE = "update"


def con_campana(record: TrainingRecord) -> TrainingRecord:
    """La campaña nunca se edita a mano: se recalcula al enviar."""
    return replace(record, campana=derive_campana(record.cliente, record.segmento))


def build_bulk_payload(records: Iterable[TrainingRecord]) -> list[dict[str, Any]]:
    return [con_campana(record).to_payload() for record in records]


def build_create_payload(records: Iterable[TrainingRecord]) -> dict[str, Any]:
    return {"action": ACTION_CREATE, "data": build_bulk_payload(records)}


def build_update_payload(record: TrainingRecord) -> dict[str, Any]:
    if record.row_index is None:
        raise ValueError("Un registro sin fila no se puede actualizar; debe crearse.")
    return {
        "action": ACTION_UPDATE,
        "data": con_campana(record).to_payload(),
        "rowIndex": record.row_index,
    }


def build_batch_payload(
    records: Iterable[TrainingRecord],
    deleted_row_indices: Iterable[int] = (),
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "action": ACTION_UPDATE,
        "data": build_bulk_payload(records),
    }
    deleted = sorted(set(deleted_row_indices))
    if deleted:
        payload["deletedRowIndices"] = deleted
    return payload
