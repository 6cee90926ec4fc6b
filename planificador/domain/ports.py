from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from planificador.domain.models import MasterData, NovedadesRecord, SheetsConfig, TrainingRecord

# Bare list (alta masiva) o dict con "action" ("create" | "update").
SubmitPayload = list[dict[str, Any]] | dict[str, Any]


class TrainingDataSourcePort(Protocol):
    def fetch_training_records(self) -> list[TrainingRecord]:
        ...

    def fetch_master_data(self) -> MasterData:
        ...

    def fetch_novedades(self) -> list[NovedadesRecord]:
        ...

    def submit_records(self, payload: SubmitPayload) -> None:
        ...


class SheetsConfigStorePort(Protocol):
    def load(self) -> SheetsConfig | None:
        ...

    def save(self, config: SheetsConfig) -> SheetsConfig:
        ...

    def credentials_path(self) -> Path:
        ...
