from __future__ import annotations

import sys
from types import TracebackType

from planificador.bootstrap.container import AppContainer, build_container
from planificador.bootstrap.logging import registrar_incidente
from planificador.bootstrap.settings import resolve_log_dir


def construir_mensaje_error_ui(incident_id: str) -> str:
    return f"Ha ocurrido un error inesperado.\nID de incidente: {incident_id}"


def manejar_excepcion_ui(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_traceback: TracebackType | None,
) -> str:
    from PySide6.QtWidgets import QApplication, QMessageBox

    incident_id = registrar_incidente(exc_type, exc_value, exc_traceback, log_dir=resolve_log_dir())
    if QApplication.instance() is None:
        return incident_id
    try:
        QMessageBox.critical(None, "Error inesperado", construir_mensaje_error_ui(incident_id))
    except Exception:  # noqa: BLE001
        # Un segundo fallo pintando el diálogo no debe tumbar el proceso.
        pass
    return incident_id


def run_ui(container: AppContainer | None = None) -> int:
    from PySide6.QtWidgets import QApplication

    from planificador.ui.calendario_window import CalendarioWindow

    resolved_container = container or build_container()
    app = QApplication([])
    try:
        window = CalendarioWindow(resolved_container.calendario_service)
        window.recargar()
        window.show()
        return app.exec()
    except Exception:  # noqa: BLE001
        exc_type, exc_value, exc_traceback = sys.exc_info()
        if exc_type is not None and exc_value is not None:
            manejar_excepcion_ui(exc_type, exc_value, exc_traceback)
        return 2
