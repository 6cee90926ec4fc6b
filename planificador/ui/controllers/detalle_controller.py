from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from planificador.application.calendario_service import CalendarioService
from planificador.application.composer import FormularioDesarrollo
from planificador.application.edit_session import EditSession
from planificador.core.errors import BusinessError
from planificador.domain.models import DetalleDesarrollo, GroupedEvent, MasterData, TrainingRecord
from planificador.ui.error_mapping import UiErrorMessage, map_error_to_ui_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResultadoAccion:
    ok: bool
    mensaje: str | None = None
    error: UiErrorMessage | None = None


class DetalleController:
    """Estado del diálogo de detalle de una campaña, agnóstico a Qt.

    El diálogo solo traduce clics en llamadas a este controlador y pinta lo
    que devuelve. Mientras hay un guardado en curso no se admiten ediciones.
    """

    def __init__(self, service: CalendarioService, grupo: GroupedEvent) -> None:
        self._service = service
        self._session: EditSession = service.abrir_detalle(grupo)

    @property
    def grupo(self) -> GroupedEvent:
        grupo = self._session.grupo
        if grupo is None:
            raise RuntimeError("El detalle ya está cerrado.")
        return grupo

    @property
    def session(self) -> EditSession:
        return self._session

    @property
    def maestros(self) -> MasterData:
        return self._service.datos.maestros

    @property
    def puede_editar(self) -> bool:
        return not self._session.committing

    @property
    def hay_cambios(self) -> bool:
        return self._session.has_pending_changes

    def detalles(self) -> tuple[DetalleDesarrollo, ...]:
        return self.grupo.desarrollos

    def esta_borrado(self, detalle: DetalleDesarrollo) -> bool:
        return self._session.is_deleted(detalle.row_index)

    def editar_campo(self, detalle: DetalleDesarrollo, campo: str, valor: str | None) -> ResultadoAccion:
        registro = self._registro(detalle)
        if registro is None:
            return ResultadoAccion(ok=False, mensaje="No se encuentra la fila en la última lectura.")
        try:
            self._session.set_field(registro, campo, valor)
        except BusinessError as exc:
            return ResultadoAccion(ok=False, error=map_error_to_ui_message(exc))
        return ResultadoAccion(ok=True)

    def alternar_eliminacion(self, detalle: DetalleDesarrollo) -> ResultadoAccion:
        registro = self._registro(detalle)
        if registro is None:
            return ResultadoAccion(ok=False, mensaje="No se encuentra la fila en la última lectura.")
        try:
            marcado = self._session.toggle_delete(registro)
        except BusinessError as exc:
            return ResultadoAccion(ok=False, error=map_error_to_ui_message(exc))
        return ResultadoAccion(ok=True, mensaje="Marcado para borrar" if marcado else "Borrado cancelado")

    def guardar(self) -> ResultadoAccion:
        try:
            enviado = self._session.commit()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Guardado del detalle fallido: %s", type(exc).__name__)
            return ResultadoAccion(ok=False, error=map_error_to_ui_message(exc))
        if not enviado:
            return ResultadoAccion(ok=True, mensaje="No hay cambios pendientes.")
        return ResultadoAccion(ok=True, mensaje="Cambios guardados.")

    def agregar_desarrollo(self, form: FormularioDesarrollo, *, today: date | None = None) -> ResultadoAccion:
        if self._session.committing:
            return ResultadoAccion(ok=False, mensaje="Guardado en curso.")
        if self._session.has_pending_changes:
            return ResultadoAccion(
                ok=False, mensaje="Guarda o descarta los cambios pendientes antes de añadir un desarrollo."
            )
        try:
            nuevo = self._service.agregar_desarrollo(self.grupo, form, today=today)
        except Exception as exc:  # noqa: BLE001
            return ResultadoAccion(ok=False, error=map_error_to_ui_message(exc))
        return ResultadoAccion(ok=True, mensaje=f"Desarrollo añadido: {nuevo.desarrollo or nuevo.nombre or ''}".strip())

    def cerrar(self) -> None:
        if self._session.committing:
            return
        if self._session.has_pending_changes:
            logger.info("Detalle cerrado con cambios sin guardar; se descartan")
        self._session.discard()

    def _registro(self, detalle: DetalleDesarrollo) -> TrainingRecord | None:
        return self._session.registro_de(detalle)
