from __future__ import annotations

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt
from PySide6.QtGui import QColor, QFont

from planificador.domain.colores import status_color
from planificador.domain.models import DetalleDesarrollo
from planificador.ui.controllers.detalle_controller import DetalleController

# (campo del registro, cabecera visible)
COLUMNAS_DETALLE: tuple[tuple[str, str], ...] = (
    ("desarrollo", "Desarrollo"),
    ("nombre", "Nombre"),
    ("segmento", "Segmento"),
    ("cantidad", "Cantidad"),
    ("estado", "Estado"),
    ("observaciones", "Observaciones"),
)

_COLOR_BORRADO = "#9ca3af"


class DesarrollosTableModel(QAbstractTableModel):
    """Tabla editable de los desarrollos de una campaña.

    Cada edición pasa por el controlador; las filas marcadas para borrar se
    pintan en gris y tachadas hasta que se guarda o se desmarca.
    """

    def __init__(self, controller: DetalleController) -> None:
        super().__init__()
        self._controller = controller
        self._detalles: tuple[DetalleDesarrollo, ...] = controller.detalles()
        self.last_error: str | None = None

    def rowCount(self, parent: QModelIndex | None = None) -> int:
        return len(self._detalles)

    def columnCount(self, parent: QModelIndex | None = None) -> int:
        return len(COLUMNAS_DETALLE)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):
        if not index.isValid():
            return None
        detalle = self._detalles[index.row()]
        campo = COLUMNAS_DETALLE[index.column()][0]
        if role in (Qt.DisplayRole, Qt.EditRole):
            return getattr(detalle, campo) or ""
        if role == Qt.ForegroundRole:
            if self._controller.esta_borrado(detalle):
                return QColor(_COLOR_BORRADO)
            if campo == "estado":
                return QColor(status_color(detalle.estado))
            return None
        if role == Qt.FontRole and self._controller.esta_borrado(detalle):
            font = QFont()
            font.setStrikeOut(True)
            return font
        return None

    def flags(self, index: QModelIndex):
        if not index.isValid():
            return Qt.NoItemFlags
        base = Qt.ItemIsSelectable | Qt.ItemIsEnabled
        if self._controller.puede_editar and not self._controller.esta_borrado(self._detalles[index.row()]):
            return base | Qt.ItemIsEditable
        return base

    def setData(self, index: QModelIndex, value, role: int = Qt.EditRole) -> bool:
        if not index.isValid() or role != Qt.EditRole:
            return False
        detalle = self._detalles[index.row()]
        campo = COLUMNAS_DETALLE[index.column()][0]
        valor = str(value).strip() if value is not None else None
        resultado = self._controller.editar_campo(detalle, campo, valor or None)
        if not resultado.ok:
            self.last_error = resultado.error.as_text() if resultado.error else resultado.mensaje
            return False
        self.last_error = None
        self.refrescar()
        return True

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole):
        if role != Qt.DisplayRole:
            return None
        if orientation == Qt.Horizontal:
            if 0 <= section < len(COLUMNAS_DETALLE):
                return COLUMNAS_DETALLE[section][1]
            return None
        return str(section + 1)

    def detalle_at(self, row: int) -> DetalleDesarrollo | None:
        if 0 <= row < len(self._detalles):
            return self._detalles[row]
        return None

    def alternar_borrado(self, row: int) -> bool:
        detalle = self.detalle_at(row)
        if detalle is None:
            return False
        resultado = self._controller.alternar_eliminacion(detalle)
        if not resultado.ok:
            self.last_error = resultado.error.as_text() if resultado.error else resultado.mensaje
            return False
        self.refrescar()
        return True

    def refrescar(self) -> None:
        self.beginResetModel()
        self._detalles = self._controller.detalles()
        self.endResetModel()
