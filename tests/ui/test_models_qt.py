from __future__ import annotations

from datetime import date

import pytest

QtCore = pytest.importorskip("PySide6.QtCore", exc_type=ImportError)
QtWidgets = pytest.importorskip("PySide6.QtWidgets", exc_type=ImportError)

from planificador.application.calendario_service import CalendarioService
from planificador.domain.models import MasterData
from planificador.ui.controllers.detalle_controller import DetalleController
from planificador.ui.models_qt import COLUMNAS_DETALLE, DesarrollosTableModel

Qt = QtCore.Qt


class _SourceFake:
    def __init__(self, registros) -> None:
        self.registros = registros
        self.submitted: list = []

    def fetch_training_records(self):
        return list(self.registros)

    def fetch_master_data(self):
        return MasterData()

    def fetch_novedades(self):
        return []

    def submit_records(self, payload) -> None:
        self.submitted.append(payload)


@pytest.fixture
def qapp():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def model(qapp, registro):
    source = _SourceFake([registro(row_index=2, nombre="Uno"), registro(row_index=3, nombre="Dos")])
    service = CalendarioService(source)
    service.cargar()
    controller = DetalleController(service, service.grupos_del_dia(date(2024, 2, 13))[0])
    return DesarrollosTableModel(controller)


def _col(campo: str) -> int:
    return [c for c, _ in COLUMNAS_DETALLE].index(campo)


def test_modelo_expone_los_desarrollos(model) -> None:
    assert model.rowCount() == 2
    assert model.columnCount() == len(COLUMNAS_DETALLE)
    assert model.headerData(_col("nombre"), Qt.Horizontal) == "Nombre"
    assert model.data(model.index(1, _col("nombre"))) == "Dos"


def test_set_data_pasa_por_el_buffer(model) -> None:
    index = model.index(0, _col("nombre"))

    assert model.setData(index, "Uno bis", Qt.EditRole)

    assert model.data(model.index(0, _col("nombre"))) == "Uno bis"
    assert model.last_error is None


def test_filas_borradas_en_gris_y_no_editables(model) -> None:
    assert model.alternar_borrado(1)

    index = model.index(1, _col("nombre"))
    assert model.data(index, Qt.ForegroundRole).name() == "#9ca3af"
    assert model.data(index, Qt.FontRole).strikeOut()
    assert not (model.flags(index) & Qt.ItemIsEditable)
    assert model.flags(model.index(0, 0)) & Qt.ItemIsEditable
