from __future__ import annotations

import logging
from dataclasses import replace

from planificador.application.calendario_service import CalendarioService
from planificador.application.composer import CabeceraAlta, FilaAlta
from planificador.domain.models import MasterData
from planificador.ui.controllers.detalle_controller import ResultadoAccion
from planificador.ui.error_mapping import map_error_to_ui_message

logger = logging.getLogger(__name__)


class AltaController:
    """Estado del diálogo "Nuevo registro": una cabecera común y N filas.

    Siempre queda al menos una fila; los errores de validación vuelven en el
    resultado para mostrarlos dentro del propio diálogo.
    """

    def __init__(self, service: CalendarioService) -> None:
        self._service = service
        self._filas: list[FilaAlta] = [FilaAlta()]
        self.guardando = False

    @property
    def maestros(self) -> MasterData:
        return self._service.datos.maestros

    @property
    def filas(self) -> tuple[FilaAlta, ...]:
        return tuple(self._filas)

    def agregar_fila(self) -> int:
        self._filas.append(FilaAlta())
        return len(self._filas) - 1

    def quitar_fila(self, indice: int) -> bool:
        if len(self._filas) == 1 or not 0 <= indice < len(self._filas):
            return False
        del self._filas[indice]
        return True

    def editar_fila(self, indice: int, campo: str, valor: str | None) -> None:
        self._filas[indice] = replace(self._filas[indice], **{campo: (valor or "").strip()})

    def guardar(self, cabecera: CabeceraAlta) -> ResultadoAccion:
        if self.guardando:
            return ResultadoAccion(ok=False, mensaje="Guardado en curso.")
        self.guardando = True
        try:
            creados = self._service.crear_registros(cabecera, self._filas)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Alta de registros fallida: %s", type(exc).__name__)
            return ResultadoAccion(ok=False, error=map_error_to_ui_message(exc))
        finally:
            self.guardando = False
        self._filas = [FilaAlta()]
        return ResultadoAccion(ok=True, mensaje=f"{len(creados)} registros creados.")
