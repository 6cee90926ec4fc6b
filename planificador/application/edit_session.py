from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Mapping

from planificador.core.errors import ValidationError
from planificador.domain.models import DetalleDesarrollo, GroupedEvent, TrainingRecord

logger = logging.getLogger(__name__)

BatchUpdate = Callable[[list[TrainingRecord], list[int]], None]


class RegistroNoPersistidoError(ValidationError):
    pass


class EdicionBloqueadaError(ValidationError):
    pass


class EditSession:
    """Buffer de cambios pendientes del detalle de una campaña.

    Vive lo que vive el diálogo de detalle: ``open`` lo arranca vacío,
    ``commit`` lo envía como un único lote y ``discard`` lo tira al cerrar.

    - ``modified``: última foto completa de cada fila editada. Varias ediciones
      sobre la misma fila se acumulan sobre la foto pendiente, no sobre la
      original.
    - ``deleted``: filas marcadas para borrar; marcar dos veces desmarca.

    Una fila puede estar en ambos conjuntos: se envía en las dos listas y el
    transporte aplica "el borrado gana".
    """

    def __init__(self, batch_update: BatchUpdate) -> None:
        self._batch_update = batch_update
        self._lock = threading.Lock()
        self._committing = False
        self._grupo: GroupedEvent | None = None
        self._origen: dict[int, TrainingRecord] = {}
        self._modified: dict[int, TrainingRecord] = {}
        self._deleted: set[int] = set()

    def open(self, grupo: GroupedEvent, registros: Iterable[TrainingRecord]) -> None:
        with self._lock:
            self._ensure_idle()
            self._grupo = grupo
            self._origen = {r.row_index: r for r in registros if r.row_index is not None}
            self._modified = {}
            self._deleted = set()

    @property
    def grupo(self) -> GroupedEvent | None:
        return self._grupo

    @property
    def modified(self) -> Mapping[int, TrainingRecord]:
        return dict(self._modified)

    @property
    def deleted(self) -> frozenset[int]:
        return frozenset(self._deleted)

    @property
    def committing(self) -> bool:
        return self._committing

    @property
    def has_pending_changes(self) -> bool:
        return bool(self._modified or self._deleted)

    def registro_de(self, detalle: DetalleDesarrollo) -> TrainingRecord | None:
        if detalle.row_index is None:
            return None
        return self._modified.get(detalle.row_index) or self._origen.get(detalle.row_index)

    def is_deleted(self, row_index: int | None) -> bool:
        return row_index is not None and row_index in self._deleted

    def set_field(self, record: TrainingRecord, campo: str, valor: str | None) -> TrainingRecord:
        if record.row_index is None:
            raise RegistroNoPersistidoError(
                "El registro aún no está guardado; edítalo en el formulario de alta."
            )
        with self._lock:
            self._ensure_idle()
            base = self._modified.get(record.row_index, record)
            pending = base.patch(campo, valor)
            self._modified[record.row_index] = pending
            if self._grupo is not None:
                self._grupo = self._grupo.reemplazar_detalle(pending)
        logger.debug("Campo %s pendiente en fila %s", campo, record.row_index)
        return pending

    def toggle_delete(self, record: TrainingRecord) -> bool:
        if record.row_index is None:
            raise RegistroNoPersistidoError("Solo se pueden borrar registros guardados.")
        with self._lock:
            self._ensure_idle()
            if record.row_index in self._deleted:
                self._deleted.discard(record.row_index)
                return False
            self._deleted.add(record.row_index)
            return True

    def commit(self) -> bool:
        with self._lock:
            self._ensure_idle()
            if not self._modified and not self._deleted:
                return False
            records = list(self._modified.values())
            deleted = sorted(self._deleted)
            self._committing = True

        try:
            self._batch_update(records, deleted)
        except Exception:
            logger.warning(
                "Lote no guardado; se conservan %s cambios y %s borrados",
                len(records),
                len(deleted),
            )
            raise
        else:
            with self._lock:
                self._modified = {}
                self._deleted = set()
            logger.info("Lote guardado: %s cambios, %s borrados", len(records), len(deleted))
            return True
        finally:
            with self._lock:
                self._committing = False

    def discard(self) -> None:
        with self._lock:
            self._ensure_idle()
            self._grupo = None
            self._origen = {}
            self._modified = {}
            self._deleted = set()

    def _ensure_idle(self) -> None:
        if self._committing:
            raise EdicionBloqueadaError("Hay un guardado en curso; espera a que termine.")
