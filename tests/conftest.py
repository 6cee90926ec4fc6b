from __future__ import annotations

import importlib
import os
import platform
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _is_linux_headless() -> bool:
    if platform.system() != "Linux":
        return False
    return not (os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))


if _is_linux_headless():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    os.environ.setdefault("QT_OPENGL", "software")


_UI_BACKEND_ERROR: str | None = None


def _detect_ui_backend_issue() -> str | None:
    try:
        importlib.import_module("PySide6")
        importlib.import_module("PySide6.QtWidgets")
        return None
    except Exception as exc:  # pragma: no cover - depende del host de ejecución
        return f"PySide6/Qt no disponible para tests UI: {exc}"


def pytest_configure(config: pytest.Config) -> None:
    global _UI_BACKEND_ERROR
    config.addinivalue_line("markers", "ui: tests de interfaz PySide6")
    _UI_BACKEND_ERROR = _detect_ui_backend_issue()


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    skip_ui = None
    if _UI_BACKEND_ERROR is not None:
        skip_ui = pytest.mark.skip(reason=_UI_BACKEND_ERROR)

    for item in items:
        if "tests/ui/" in item.nodeid:
            item.add_marker(pytest.mark.ui)
        if skip_ui is not None and "ui" in item.keywords:
            item.add_marker(skip_ui)


from planificador.domain.models import TrainingRecord


@pytest.fixture
def registro():
    """Factoría de filas de la hoja con valores razonables por defecto."""

    def _build(**overrides) -> TrainingRecord:
        valores = {
            "coordinador": "Laura",
            "cliente": "Acme",
            "segmento": "Retail",
            "desarrollador": "Ana Pérez",
            "segmento_menu": "Ventas",
            "campana": "Acme Retail",
            "formador": "Luis",
            "fecha_solicitud": "01/02/2024",
            "desarrollo": "Curso",
            "nombre": "Onboarding",
            "cantidad": "1",
            "fecha_material": "05/02/2024",
            "fecha_inicio": "12/02/2024",
            "fecha_fin": "16/02/2024",
            "estado": "Pendiente",
            "observaciones": "",
            "row_index": 2,
        }
        valores.update(overrides)
        return TrainingRecord(**valores)

    return _build
