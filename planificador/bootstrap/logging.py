from __future__ import annotations

import json
import logging
import sys
import traceback
import uuid
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from types import TracebackType
from typing import Any

from planificador.core.observability import get_correlation_id, get_operacion

LOG_NAME = "planificador.log"
CRASH_LOG_NAME = "crash.log"
LOG_MAX_BYTES = 1_048_576
LOG_BACKUP_COUNT = 5

_crash_logger = logging.getLogger("planificador.crash")


class RegistroJsonFormatter(logging.Formatter):
    """Una línea JSON por evento.

    ``operacion`` y ``correlation_id`` salen del ``OperationContext`` activo
    cuando el registro no los trae; ``datos`` lleva los contadores del envío
    (filas, actualizados, borrados...) tal como los pasa quien loguea.
    """

    def format(self, record: logging.LogRecord) -> str:
        evento: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "nivel": record.levelname,
            "logger": record.name,
            "mensaje": record.getMessage(),
            "operacion": getattr(record, "operacion", None) or get_operacion(),
            "correlation_id": getattr(record, "correlation_id", None) or get_correlation_id(),
        }
        datos = getattr(record, "datos", None)
        if isinstance(datos, dict) and datos:
            evento["datos"] = datos
        if record.exc_info:
            evento["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(evento, ensure_ascii=False, default=str)


def _handler(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(RegistroJsonFormatter())
    return handler


def configure_logging(log_dir: Path, *, level: int = logging.INFO) -> None:
    """Deja el logger raíz con dos ficheros: el diario y ``crash.log`` (solo CRITICAL)."""
    log_dir.mkdir(parents=True, exist_ok=True)
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)
    root_logger.addHandler(_handler(log_dir / LOG_NAME, level))
    root_logger.addHandler(_handler(log_dir / CRASH_LOG_NAME, logging.CRITICAL))


def log_operational_error(
    logger: logging.Logger,
    message: str,
    *,
    exc: BaseException | None = None,
    datos: dict[str, Any] | None = None,
) -> None:
    exc_info: Any = False
    if exc is not None:
        exc_info = (type(exc), exc, exc.__traceback__)
    logger.error(message, exc_info=exc_info, extra={"datos": datos} if datos else None)


def generar_id_incidente() -> str:
    return f"INC-{uuid.uuid4().hex[:12].upper()}"


def registrar_incidente(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_traceback: TracebackType | None,
    *,
    log_dir: Path,
) -> str:
    """Registra una excepción no controlada en ``crash.log`` y devuelve su ID de incidente.

    Si el propio logging falla, la línea se escribe a mano en el mismo fichero.
    """
    incident_id = generar_id_incidente()
    datos = {
        "incident_id": incident_id,
        "python": sys.version.split()[0],
        "cwd": str(Path.cwd()),
    }
    try:
        _crash_logger.critical(
            "Excepción no controlada. incident_id=%s",
            incident_id,
            exc_info=(exc_type, exc_value, exc_traceback),
            extra={"datos": datos},
        )
    except Exception:  # noqa: BLE001
        log_dir.mkdir(parents=True, exist_ok=True)
        linea = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "nivel": "CRITICAL",
            "operacion": get_operacion(),
            "correlation_id": get_correlation_id(),
            "datos": datos,
            "exc_info": "".join(traceback.format_exception(exc_type, exc_value, exc_traceback)),
        }
        with (log_dir / CRASH_LOG_NAME).open("a", encoding="utf-8") as fichero:
            fichero.write(json.dumps(linea, ensure_ascii=False) + "\n")
    return incident_id


def install_exception_hook(log_dir: Path) -> None:
    def _hook(exc_type, exc_value, exc_traceback) -> None:
        registrar_incidente(exc_type, exc_value, exc_traceback, log_dir=log_dir)

    sys.excepthook = _hook
