from __future__ import annotations

import logging
import traceback

from PySide6.QtCore import QObject, Signal, Slot

from planificador.application.edit_session import EditSession

logger = logging.getLogger(__name__)


class CommitWorker(QObject):
    finished = Signal(bool)
    failed = Signal(object)

    def __init__(self, session: EditSession) -> None:
        super().__init__()
        self._session = session

    @Slot()
    def run(self) -> None:
        try:
            enviado = self._session.commit()
        except Exception as exc:
            logger.exception("Error al guardar el lote del detalle")
            self.failed.emit({"error": exc, "details": traceback.format_exc()})
            return
        self.finished.emit(enviado)
