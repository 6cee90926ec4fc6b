from __future__ import annotations

import faulthandler
import json
import logging
import sys

import pytest

from planificador.bootstrap.container import build_container
from planificador.bootstrap.logging import LOG_NAME
from planificador.domain.models import MasterData, SheetsConfig
from planificador.entrypoints.main import main


class _SourceFake:
    def __init__(self, registros) -> None:
        self.registros = registros

    def fetch_training_records(self):
        return list(self.registros)

    def fetch_master_data(self):
        return MasterData()

    def fetch_novedades(self):
        return []

    def submit_records(self, payload) -> None:
        raise AssertionError("el resumen no escribe")


class _StoreFake:
    def __init__(self, config) -> None:
        self.config = config

    def load(self):
        return self.config

    def save(self, config):
        return config

    def credentials_path(self):
        return None


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    destino = tmp_path / "logs"
    monkeypatch.setenv("PLANIFICADOR_LOG_DIR", str(destino))
    monkeypatch.setattr(faulthandler, "enable", lambda *args, **kwargs: None)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield destino
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def _mensajes(log_dir):
    for handler in logging.getLogger().handlers:
        handler.flush()
    lines = (log_dir / LOG_NAME).read_text(encoding="utf-8").splitlines()
    return [json.loads(line)["mensaje"] for line in lines if line.strip()]


def test_resumen_mes(log_dir, registro) -> None:
    container = build_container(config_store=_StoreFake(None), source=_SourceFake([registro()]))

    assert main(["--resumen", "2024-02"], container=container) == 0

    mensajes = _mensajes(log_dir)
    assert any(m.startswith("Resumen de febrero 2024") for m in mensajes)
    assert any(m.startswith("2024-02-12 1 campañas") and "Acme Retail (1 desarrollo)" in m for m in mensajes)


def test_resumen_mes_invalido(log_dir) -> None:
    with pytest.raises(SystemExit):
        main(["--resumen", "2024-13"])


def test_selfcheck_sin_configuracion(log_dir) -> None:
    container = build_container(config_store=_StoreFake(None), source=_SourceFake([]))

    assert main(["--selfcheck"], container=container) == 1


def test_selfcheck_ok(log_dir, tmp_path) -> None:
    credenciales = tmp_path / "credentials.json"
    credenciales.write_text("{}", encoding="utf-8")
    config = SheetsConfig(spreadsheet_id="abc", credentials_path=str(credenciales))
    container = build_container(config_store=_StoreFake(config), source=_SourceFake([]))

    assert main(["--selfcheck"], container=container) == 0
