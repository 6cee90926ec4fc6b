from __future__ import annotations

from datetime import date

from PySide6.QtCore import QThread, Slot
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from planificador.application.calendario_service import CalendarioService
from planificador.application.composer import ESTADO_INICIAL, FormularioDesarrollo
from planificador.domain.calendario import WEEKDAY_LABELS, FiltrosCalendario
from planificador.domain.colores import NEUTRAL_COLOR
from planificador.domain.date_utils import add_months
from planificador.domain.models import GroupedEvent
from planificador.ui.controllers.alta_controller import AltaController
from planificador.ui.controllers.detalle_controller import DetalleController
from planificador.ui.error_mapping import map_error_to_user_message
from planificador.ui.models_qt import DesarrollosTableModel
from planificador.ui.nuevo_registro_dialog import NuevoRegistroDialog
from planificador.ui.vistas.calendario_presenter import EtiquetaEvento, ResumenCelda, resumen_mes, texto_boton
from planificador.ui.workers.commit_worker import CommitWorker


class DetalleDialog(QDialog):
    def __init__(self, controller: DetalleController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._commit_thread: QThread | None = None
        self._commit_worker: CommitWorker | None = None
        grupo = controller.grupo
        self.setWindowTitle(grupo.campana)

        self._model = DesarrollosTableModel(controller)
        self._table = QTableView(self)
        self._table.setModel(self._model)

        cabecera = QLabel(
            f"Cliente: {grupo.cliente or '-'}  ·  Desarrollador: {grupo.desarrollador or '-'}  ·  "
            f"{grupo.fecha_inicio or '?'} → {grupo.fecha_fin or '?'}",
            self,
        )
        self._estado = QLabel("", self)
        self._borrar_button = QPushButton("Marcar / desmarcar borrado", self)
        self._guardar_button = QPushButton("Guardar", self)
        self._cerrar_button = QPushButton("Cerrar", self)
        self._borrar_button.clicked.connect(self._on_toggle_delete)
        self._guardar_button.clicked.connect(self._on_guardar)
        self._cerrar_button.clicked.connect(self.reject)

        botones = QHBoxLayout()
        botones.addWidget(self._borrar_button)
        botones.addStretch(1)
        botones.addWidget(self._guardar_button)
        botones.addWidget(self._cerrar_button)

        layout = QVBoxLayout(self)
        layout.addWidget(cabecera)
        layout.addWidget(self._table)
        layout.addWidget(self._construir_alta())
        layout.addWidget(self._estado)
        layout.addLayout(botones)

    def _construir_alta(self) -> QGroupBox:
        maestros = self._controller.maestros
        grupo = QGroupBox("Añadir desarrollo", self)
        form = QFormLayout(grupo)
        self._alta_desarrollo = QComboBox(grupo)
        self._alta_desarrollo.setEditable(True)
        self._alta_desarrollo.addItems(["", *maestros.tipos_desarrollo])
        self._alta_nombre = QLineEdit(grupo)
        self._alta_cantidad = QLineEdit(grupo)
        self._alta_material = QLineEdit(grupo)
        self._alta_inicio = QLineEdit(grupo)
        self._alta_fin = QLineEdit(grupo)
        for fecha in (self._alta_material, self._alta_inicio, self._alta_fin):
            fecha.setPlaceholderText("DD/MM/AAAA")
        self._alta_estado = QComboBox(grupo)
        self._alta_estado.setEditable(True)
        self._alta_estado.addItems(list(dict.fromkeys((ESTADO_INICIAL, *maestros.estados))))
        self._alta_observaciones = QLineEdit(grupo)
        form.addRow("Desarrollo", self._alta_desarrollo)
        form.addRow("Nombre", self._alta_nombre)
        form.addRow("Cantidad", self._alta_cantidad)
        form.addRow("Material", self._alta_material)
        form.addRow("Inicio", self._alta_inicio)
        form.addRow("Fin", self._alta_fin)
        form.addRow("Estado", self._alta_estado)
        form.addRow("Observaciones", self._alta_observaciones)
        self._alta_error = QLabel("", grupo)
        self._alta_error.setWordWrap(True)
        self._alta_error.setStyleSheet("color: #b91c1c;")
        self._alta_button = QPushButton("Añadir", grupo)
        self._alta_button.clicked.connect(self._on_agregar_desarrollo)
        form.addRow(self._alta_error)
        form.addRow(self._alta_button)
        return grupo

    def formulario_alta(self) -> FormularioDesarrollo:
        def _texto(valor: str) -> str | None:
            return valor.strip() or None

        return FormularioDesarrollo(
            desarrollo=_texto(self._alta_desarrollo.currentText()),
            nombre=_texto(self._alta_nombre.text()),
            cantidad=_texto(self._alta_cantidad.text()),
            fecha_material=_texto(self._alta_material.text()),
            fecha_inicio=_texto(self._alta_inicio.text()),
            fecha_fin=_texto(self._alta_fin.text()),
            estado=_texto(self._alta_estado.currentText()),
            observaciones=_texto(self._alta_observaciones.text()),
        )

    def _on_agregar_desarrollo(self) -> None:
        resultado = self._controller.agregar_desarrollo(self.formulario_alta())
        if resultado.ok:
            self._controller.cerrar()
            self.accept()
            return
        texto = resultado.error.as_text() if resultado.error else resultado.mensaje
        self._alta_error.setText(texto or "")

    def _on_toggle_delete(self) -> None:
        row = self._table.currentIndex().row()
        if row < 0:
            return
        if not self._model.alternar_borrado(row) and self._model.last_error:
            self._estado.setText(self._model.last_error)

    def _on_guardar(self) -> None:
        if self._commit_thread is not None:
            self._estado.setText("Guardado en curso…")
            return
        if not self._controller.hay_cambios:
            self._estado.setText("No hay cambios pendientes.")
            return
        self._set_guardando(True)
        self._commit_thread = QThread()
        self._commit_worker = CommitWorker(self._controller.session)
        self._commit_worker.moveToThread(self._commit_thread)
        self._commit_thread.started.connect(self._commit_worker.run)
        self._commit_worker.finished.connect(self._on_commit_finished)
        self._commit_worker.failed.connect(self._on_commit_failed)
        self._commit_worker.finished.connect(self._commit_thread.quit)
        self._commit_worker.failed.connect(self._commit_thread.quit)
        self._commit_worker.finished.connect(self._commit_worker.deleteLater)
        self._commit_worker.failed.connect(self._commit_worker.deleteLater)
        self._commit_thread.finished.connect(self._commit_thread.deleteLater)
        self._commit_thread.start()

    @Slot(bool)
    def _on_commit_finished(self, enviado: bool) -> None:
        self._commit_thread = None
        self._set_guardando(False)
        if enviado:
            self.accept()

    @Slot(object)
    def _on_commit_failed(self, payload: object) -> None:
        self._commit_thread = None
        self._set_guardando(False)
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, Exception):
            QMessageBox.warning(self, "No se pudo guardar", map_error_to_user_message(error))
        self._model.refrescar()

    def _set_guardando(self, guardando: bool) -> None:
        self._guardar_button.setEnabled(not guardando)
        self._borrar_button.setEnabled(not guardando)
        self._alta_button.setEnabled(not guardando)
        self._cerrar_button.setEnabled(not guardando)
        self._estado.setText("Guardando…" if guardando else "")
        self._model.refrescar()

    def reject(self) -> None:
        if self._commit_thread is not None:
            return
        self._controller.cerrar()
        super().reject()


class CalendarioWindow(QMainWindow):
    def __init__(self, service: CalendarioService, *, today: date | None = None) -> None:
        super().__init__()
        self._service = service
        self._today = today or date.today()
        self._anio = self._today.year
        self._mes = self._today.month
        self._filtros = FiltrosCalendario()
        self.setWindowTitle("Planificador de formación")

        self._titulo = QLabel("", self)
        anterior = QPushButton("◀", self)
        siguiente = QPushButton("▶", self)
        recargar = QPushButton("Recargar", self)
        nuevo = QPushButton("Nuevo registro", self)
        nuevo.clicked.connect(self._abrir_alta)
        anterior.clicked.connect(lambda: self._mover(-1))
        siguiente.clicked.connect(lambda: self._mover(1))
        recargar.clicked.connect(self.recargar)

        self._ver_actualizaciones = QCheckBox("Actualizaciones", self)
        self._ver_actualizaciones.setChecked(True)
        self._ver_incumplimientos = QCheckBox("Incumplimientos", self)
        self._ver_incumplimientos.setChecked(True)
        self._ver_actualizaciones.toggled.connect(self._on_filtros)
        self._ver_incumplimientos.toggled.connect(self._on_filtros)
        self._campana = QComboBox(self)
        self._campana.addItem("Todas las campañas", None)
        self._campana.currentIndexChanged.connect(self._on_filtros)

        barra = QHBoxLayout()
        barra.addWidget(anterior)
        barra.addWidget(self._titulo)
        barra.addWidget(siguiente)
        barra.addStretch(1)
        barra.addWidget(self._ver_actualizaciones)
        barra.addWidget(self._ver_incumplimientos)
        barra.addWidget(self._campana)
        barra.addWidget(nuevo)
        barra.addWidget(recargar)

        self._grid = QGridLayout()
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.addLayout(barra)
        layout.addLayout(self._grid)
        self.setCentralWidget(central)

    def recargar(self) -> None:
        try:
            self._service.cargar()
        except Exception as exc:  # noqa: BLE001
            QMessageBox.critical(self, "Error de carga", map_error_to_user_message(exc))
        self.pintar_mes()

    def pintar_mes(self) -> None:
        vista = self._service.vista_mes(self._anio, self._mes, today=self._today, filtros=self._filtros)
        self._titulo.setText(vista.titulo.capitalize())
        self._rellenar_campanas(vista.campanas_activas)
        self._limpiar_grid()
        for col, etiqueta in enumerate(WEEKDAY_LABELS):
            self._grid.addWidget(QLabel(etiqueta, self), 0, col)
        for fila, semana in enumerate(resumen_mes(vista), start=1):
            for col, celda in enumerate(semana):
                self._grid.addWidget(self._celda(celda), fila, col)

    def _celda(self, celda: ResumenCelda) -> QWidget:
        widget = QWidget(self)
        layout = QVBoxLayout(widget)
        cabecera = QLabel(str(celda.dia), widget)
        if not celda.es_mes_actual:
            cabecera.setStyleSheet("color: #9ca3af;")
        elif celda.es_hoy:
            cabecera.setStyleSheet("font-weight: bold;")
        layout.addWidget(cabecera)
        if celda.festivo:
            layout.addWidget(QLabel(celda.festivo, widget))
        for novedad in celda.novedades:
            layout.addWidget(QLabel(novedad, widget))
        for etiqueta in (*celda.incumplimientos, *celda.actualizaciones, *celda.base):
            layout.addWidget(self._boton_evento(etiqueta, widget))
        if celda.exceso:
            layout.addWidget(QLabel(celda.exceso, widget))
        layout.addStretch(1)
        return widget

    def _boton_evento(self, etiqueta: EtiquetaEvento, parent: QWidget) -> QPushButton:
        boton = QPushButton(texto_boton(etiqueta), parent)
        boton.setToolTip(etiqueta.titulo)
        # Qt no admite opacity en hojas de estilo; la campaña atenuada va en gris.
        fondo = NEUTRAL_COLOR if etiqueta.atenuado else etiqueta.color_campana
        boton.setStyleSheet(
            f"background-color: {fondo}; color: white; border-left: 4px solid {etiqueta.color_estado};"
            f" border-right: 4px solid {etiqueta.color_desarrollador};"
        )
        grupo = etiqueta.grupo
        boton.clicked.connect(lambda: self._abrir_detalle(grupo))
        return boton

    def _abrir_detalle(self, grupo: GroupedEvent) -> None:
        dialog = DetalleDialog(DetalleController(self._service, grupo), self)
        if dialog.exec() == QDialog.Accepted:
            self.pintar_mes()

    def _abrir_alta(self) -> None:
        dialog = NuevoRegistroDialog(AltaController(self._service), self)
        if dialog.exec() == QDialog.Accepted:
            self.pintar_mes()

    def _mover(self, delta: int) -> None:
        self._anio, self._mes = add_months(self._anio, self._mes, delta)
        self.pintar_mes()

    def _on_filtros(self) -> None:
        self._filtros = FiltrosCalendario(
            mostrar_actualizaciones=self._ver_actualizaciones.isChecked(),
            mostrar_incumplimientos=self._ver_incumplimientos.isChecked(),
            campana_seleccionada=self._campana.currentData(),
        )
        self.pintar_mes()

    def _limpiar_grid(self) -> None:
        while self._grid.count():
            item = self._grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

    def _rellenar_campanas(self, campanas: tuple[str, ...]) -> None:
        seleccionada = self._filtros.campana_seleccionada
        self._campana.blockSignals(True)
        self._campana.clear()
        self._campana.addItem("Todas las campañas", None)
        for campana in campanas:
            self._campana.addItem(campana, campana)
        indice = self._campana.findData(seleccionada) if seleccionada in campanas else 0
        self._campana.setCurrentIndex(max(indice, 0))
        self._campana.blockSignals(False)
