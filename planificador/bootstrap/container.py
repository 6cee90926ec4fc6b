from __future__ import annotations

from dataclasses import dataclass

from planificador.application.calendario_service import CalendarioService
from planificador.domain.ports import SheetsConfigStorePort, TrainingDataSourcePort
from planificador.infrastructure.local_config import SheetsConfigStore
from planificador.infrastructure.sheets_client import SheetsClient
from planificador.infrastructure.sheets_gateway import SheetsTrainingGateway


@dataclass
class AppContainer:
    config_store: SheetsConfigStorePort
    source: TrainingDataSourcePort
    calendario_service: CalendarioService


def build_container(
    config_store: SheetsConfigStorePort | None = None,
    source: TrainingDataSourcePort | None = None,
) -> AppContainer:
    resolved_store = config_store or SheetsConfigStore()
    resolved_source = source or SheetsTrainingGateway(SheetsClient(), resolved_store)
    return AppContainer(
        config_store=resolved_store,
        source=resolved_source,
        calendario_service=CalendarioService(resolved_source),
    )
