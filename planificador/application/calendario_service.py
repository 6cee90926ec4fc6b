from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Sequence

from planificador.application.composer import CabeceraAlta, FilaAlta, FormularioDesarrollo, build_alta, compose
from planificador.application.edit_session import EditSession
from planificador.application.payloads import (
    build_batch_payload,
    build_create_payload,
    build_update_payload,
)
from planificador.bootstrap.logging import log_operational_error
from planificador.core.observability import OperationContext, log_event
from planificador.domain.agrupacion import events_for_date, group_by_campaign
from planificador.domain.calendario import FiltrosCalendario, VistaMes, build_month
from planificador.domain.models import SIN_CAMPANA, GroupedEvent, MasterData, NovedadesRecord, TrainingRecord
from planificador.domain.ports import SubmitPayload, TrainingDataSourcePort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatosCalendario:
    registros: tuple[TrainingRecord, ...] = ()
    maestros: MasterData = field(default_factory=MasterData)
    novedades: tuple[NovedadesRecord, ...] = ()


class CalendarioService:
    """Orquesta lectura, vista mensual y escrituras contra el origen de datos.

    Mantiene en memoria la última lectura completa; tras cada escritura que
    termina bien vuelve a leer para que el calendario refleje la hoja.
    """

    def __init__(self, source: TrainingDataSourcePort) -> None:
        self._source = source
        self._datos = DatosCalendario()

    @property
    def datos(self) -> DatosCalendario:
        return self._datos

    def cargar(self) -> DatosCalendario:
        try:
            registros = self._source.fetch_training_records()
            maestros = self._source.fetch_master_data()
            novedades = self._source.fetch_novedades()
        except Exception as exc:
            log_operational_error(logger, "No se pudieron cargar los datos de la hoja", exc=exc)
            raise
        self._datos = DatosCalendario(
            registros=tuple(registros),
            maestros=maestros,
            novedades=tuple(novedades),
        )
        logger.info(
            "Datos cargados: %s registros, %s festivos, %s novedades",
            len(registros),
            len(maestros.festivos),
            len(novedades),
        )
        return self._datos

    def vista_mes(
        self,
        year: int,
        month: int,
        *,
        today: date | None = None,
        filtros: FiltrosCalendario | None = None,
    ) -> VistaMes:
        return build_month(
            year,
            month,
            records=self._datos.registros,
            festivos=self._datos.maestros.festivos,
            novedades=self._datos.novedades,
            today=today or date.today(),
            filtros=filtros,
        )

    def grupos_del_dia(self, day: date) -> list[GroupedEvent]:
        return group_by_campaign(events_for_date(self._datos.registros, day))

    def registros_de(self, grupo: GroupedEvent) -> list[TrainingRecord]:
        filas = set(grupo.row_indices)
        return [r for r in self._datos.registros if r.row_index in filas]

    def abrir_detalle(self, grupo: GroupedEvent) -> EditSession:
        session = EditSession(self.guardar_lote)
        session.open(grupo, self.registros_de(grupo))
        return session

    def guardar_lote(self, records: Sequence[TrainingRecord], deleted_row_indices: Sequence[int]) -> None:
        payload = build_batch_payload(records, deleted_row_indices)
        self._enviar(
            "guardar_lote",
            payload,
            {"actualizados": len(payload["data"]), "borrados": len(payload.get("deletedRowIndices", []))},
        )

    def actualizar_registro(self, record: TrainingRecord) -> None:
        payload = build_update_payload(record)
        self._enviar("actualizar_registro", payload, {"row_index": record.row_index})

    def agregar_desarrollo(
        self,
        grupo: GroupedEvent,
        form: FormularioDesarrollo,
        *,
        today: date | None = None,
    ) -> TrainingRecord:
        nuevo = compose(grupo, form, today=today)
        if grupo.campana == SIN_CAMPANA:
            logger.warning("Alta de desarrollo sobre un grupo sin campaña")
        self._enviar("agregar_desarrollo", build_create_payload([nuevo]), {"campana": grupo.campana})
        return nuevo

    def crear_registros(self, cabecera: CabeceraAlta, filas: Sequence[FilaAlta]) -> list[TrainingRecord]:
        registros = build_alta(cabecera, filas)
        self._enviar("crear_registros", build_create_payload(registros), {"filas": len(registros)})
        return registros

    def _enviar(self, operacion: str, payload: SubmitPayload, resumen: dict[str, object]) -> None:
        with OperationContext(operacion) as ctx:
            try:
                self._source.submit_records(payload)
            except Exception as exc:
                log_operational_error(logger, "Envío a la hoja fallido", exc=exc, datos=resumen)
                raise
            log_event(logger, operacion, {**resumen, "elapsed_ms": ctx.elapsed_ms}, ctx.correlation_id)
        # Tras un envío correcto, un fallo al releer no llega al llamante.
        try:
            self.cargar()
        except Exception:  # noqa: BLE001
            logger.warning("Envío %s correcto; el calendario queda con la lectura anterior", operacion)
