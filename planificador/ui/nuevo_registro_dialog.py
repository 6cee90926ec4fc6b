from __future__ import annotations

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QComboBox,
    QDateEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from planificador.application.composer import CabeceraAlta
from planificador.ui.controllers.alta_controller import AltaController

# (campo de FilaAlta, cabecera visible)
COLUMNAS_ALTA: tuple[tuple[str, str], ...] = (
    ("desarrollo", "Desarrollo"),
    ("nombre", "Nombre"),
    ("cantidad", "Cantidad"),
    ("fecha_material", "Material (DD/MM/AAAA)"),
    ("fecha_inicio", "Inicio (DD/MM/AAAA)"),
    ("fecha_fin", "Fin (DD/MM/AAAA)"),
    ("estado", "Estado"),
)


def _combo_editable(opciones: tuple[str, ...]) -> QComboBox:
    combo = QComboBox()
    combo.setEditable(True)
    combo.addItem("")
    combo.addItems(list(opciones))
    return combo


class NuevoRegistroDialog(QDialog):
    def __init__(self, controller: AltaController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self.setWindowTitle("Nuevo registro")
        self._build_ui()
        self._cargar_filas()

    def _build_ui(self) -> None:
        maestros = self._controller.maestros
        cabecera = QFormLayout()
        self.coordinador_input = _combo_editable(maestros.coordinadores)
        self.cliente_input = _combo_editable(maestros.clientes)
        self.segmento_input = QLineEdit()
        self.desarrollador_input = _combo_editable(maestros.desarrolladores)
        self.segmento_menu_input = QLineEdit()
        self.campana_input = QLineEdit()
        self.formador_input = QLineEdit()
        self.fecha_solicitud_input = QDateEdit(QDate.currentDate())
        self.fecha_solicitud_input.setCalendarPopup(True)
        self.observaciones_input = QLineEdit()
        cabecera.addRow("Coordinador", self.coordinador_input)
        cabecera.addRow("Cliente *", self.cliente_input)
        cabecera.addRow("Segmento", self.segmento_input)
        cabecera.addRow("Desarrollador", self.desarrollador_input)
        cabecera.addRow("Segmento menú", self.segmento_menu_input)
        cabecera.addRow("Campaña *", self.campana_input)
        cabecera.addRow("Formador", self.formador_input)
        cabecera.addRow("Fecha de solicitud", self.fecha_solicitud_input)
        cabecera.addRow("Observaciones", self.observaciones_input)

        self.filas_table = QTableWidget(0, len(COLUMNAS_ALTA), self)
        self.filas_table.setHorizontalHeaderLabels([titulo for _, titulo in COLUMNAS_ALTA])
        self.filas_table.itemChanged.connect(self._on_item_changed)

        agregar = QPushButton("Añadir fila", self)
        quitar = QPushButton("Eliminar fila", self)
        agregar.clicked.connect(self._on_agregar_fila)
        quitar.clicked.connect(self._on_quitar_fila)
        acciones_filas = QHBoxLayout()
        acciones_filas.addWidget(agregar)
        acciones_filas.addWidget(quitar)
        acciones_filas.addStretch(1)

        self.error_label = QLabel("", self)
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("color: #b91c1c;")
        self.error_label.setVisible(False)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._on_guardar)
        buttons.rejected.connect(self.reject)
        self._buttons = buttons

        layout = QVBoxLayout(self)
        layout.addLayout(cabecera)
        layout.addWidget(self.filas_table)
        layout.addLayout(acciones_filas)
        layout.addWidget(self.error_label)
        layout.addWidget(buttons)

    def cabecera(self) -> CabeceraAlta:
        return CabeceraAlta(
            coordinador=self.coordinador_input.currentText().strip(),
            cliente=self.cliente_input.currentText().strip(),
            segmento=self.segmento_input.text().strip(),
            desarrollador=self.desarrollador_input.currentText().strip(),
            segmento_menu=self.segmento_menu_input.text().strip(),
            observaciones=self.observaciones_input.text().strip(),
            campana=self.campana_input.text().strip(),
            formador=self.formador_input.text().strip(),
            fecha_solicitud=self.fecha_solicitud_input.date().toString("yyyy-MM-dd"),
        )

    def _cargar_filas(self) -> None:
        self.filas_table.blockSignals(True)
        filas = self._controller.filas
        self.filas_table.setRowCount(len(filas))
        for row, fila in enumerate(filas):
            for col, (campo, _) in enumerate(COLUMNAS_ALTA):
                self.filas_table.setItem(row, col, QTableWidgetItem(getattr(fila, campo)))
        self.filas_table.blockSignals(False)

    def _on_item_changed(self, item: QTableWidgetItem) -> None:
        self._controller.editar_fila(item.row(), COLUMNAS_ALTA[item.column()][0], item.text())

    def _on_agregar_fila(self) -> None:
        self._controller.agregar_fila()
        self._cargar_filas()

    def _on_quitar_fila(self) -> None:
        if self._controller.quitar_fila(self.filas_table.currentRow()):
            self._cargar_filas()

    def _on_guardar(self) -> None:
        self._buttons.setEnabled(False)
        resultado = self._controller.guardar(self.cabecera())
        self._buttons.setEnabled(True)
        if resultado.ok:
            self.accept()
            return
        texto = resultado.error.as_text() if resultado.error else resultado.mensaje
        self.error_label.setText(texto or "")
        self.error_label.setVisible(True)
