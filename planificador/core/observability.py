from __future__ import annotations

from contextlib import AbstractContextManager
from contextvars import ContextVar, Token
from datetime import datetime, timezone
import logging
import time
import uuid
from typing import Any

_CORRELATION_ID: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_OPERACION: ContextVar[str | None] = ContextVar("operacion", default=None)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def get_correlation_id() -> str | None:
    return _CORRELATION_ID.get()


def set_correlation_id(correlation_id: str | None) -> Token[str | None]:
    return _CORRELATION_ID.set(correlation_id)


def reset_correlation_id(token: Token[str | None]) -> None:
    _CORRELATION_ID.reset(token)


def get_operacion() -> str | None:
    return _OPERACION.get()


class OperationContext(AbstractContextManager["OperationContext"]):
    """Agrupa bajo un mismo correlation_id los logs de una operación de usuario.

    Se usa alrededor de cada escritura contra la hoja (guardar lote, alta de
    desarrollos) para poder reconstruir qué filas viajaron en qué envío.
    """

    def __init__(self, operation_name: str) -> None:
        self.operation_name = operation_name
        self.correlation_id = generate_correlation_id()
        self._correlation_token: Token[str | None] | None = None
        self._operacion_token: Token[str | None] | None = None
        self._started_at: float | None = None

    def __enter__(self) -> "OperationContext":
        self._correlation_token = set_correlation_id(self.correlation_id)
        self._operacion_token = _OPERACION.set(self.operation_name)
        self._started_at = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, exc_tb: object) -> None:
        if self._operacion_token is not None:
            _OPERACION.reset(self._operacion_token)
        if self._correlation_token is not None:
            reset_correlation_id(self._correlation_token)
        return None

    @property
    def elapsed_ms(self) -> int:
        if self._started_at is None:
            return 0
        return int((time.perf_counter() - self._started_at) * 1000)


def log_event(
    logger: logging.Logger,
    event_name: str,
    payload: dict[str, Any],
    correlation_id: str,
) -> dict[str, Any]:
    event = {
        "event": event_name,
        "correlation_id": correlation_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "payload": payload,
    }
    logger.info(
        event_name,
        extra={
            "correlation_id": correlation_id,
            "operacion": event_name,
            "datos": payload,
        },
    )
    return event
