from __future__ import annotations

import json
import logging
import sys

import pytest

from planificador.bootstrap import logging as logging_module
from planificador.bootstrap.logging import (
    CRASH_LOG_NAME,
    LOG_NAME,
    configure_logging,
    generar_id_incidente,
    install_exception_hook,
    log_operational_error,
    registrar_incidente,
)
from planificador.bootstrap.settings import resolve_log_dir
from planificador.core.observability import OperationContext, log_event


@pytest.fixture
def root_logger_restaurado():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def _lineas(path):
    for handler in logging.getLogger().handlers:
        handler.flush()
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def test_configure_logging_separa_crash_log(tmp_path, root_logger_restaurado) -> None:
    configure_logging(tmp_path)
    logger = logging.getLogger("planificador.prueba")

    logger.info("cargado")
    log_operational_error(logger, "envío fallido", exc=RuntimeError("boom"), datos={"filas": 3})
    logger.critical("caída")

    principal = _lineas(tmp_path / LOG_NAME)
    crash = _lineas(tmp_path / CRASH_LOG_NAME)

    assert [e["mensaje"] for e in principal] == ["cargado", "envío fallido", "caída"]
    assert principal[1]["datos"] == {"filas": 3}
    assert "RuntimeError: boom" in principal[1]["exc_info"]
    assert "datos" not in principal[0]
    assert [e["mensaje"] for e in crash] == ["caída"]


def test_lineas_llevan_la_operacion_y_los_contadores_del_envio(tmp_path, root_logger_restaurado) -> None:
    configure_logging(tmp_path)
    logger = logging.getLogger("planificador.application.calendario_service")

    with OperationContext("guardar_lote") as ctx:
        logger.info("enviando")
        log_event(logger, "guardar_lote", {"actualizados": 2, "borrados": 1}, ctx.correlation_id)
    logger.info("fuera")

    enviando, evento, fuera = _lineas(tmp_path / LOG_NAME)
    assert enviando["operacion"] == "guardar_lote"
    assert enviando["correlation_id"] == ctx.correlation_id
    assert evento["datos"] == {"actualizados": 2, "borrados": 1}
    assert evento["correlation_id"] == ctx.correlation_id
    assert fuera["operacion"] is None


def test_configure_logging_dos_veces_no_duplica(tmp_path, root_logger_restaurado) -> None:
    configure_logging(tmp_path)
    configure_logging(tmp_path)

    logging.getLogger("planificador.prueba").info("una vez")

    assert len(_lineas(tmp_path / LOG_NAME)) == 1


def test_resolve_log_dir_respeta_la_variable(tmp_path, monkeypatch) -> None:
    destino = tmp_path / "logs"
    monkeypatch.setenv("PLANIFICADOR_LOG_DIR", str(destino))

    assert resolve_log_dir() == destino
    assert destino.is_dir()


def test_registrar_incidente_devuelve_id(tmp_path, caplog) -> None:
    try:
        raise ValueError("inesperado")
    except ValueError as exc:
        with caplog.at_level(logging.CRITICAL):
            incident_id = registrar_incidente(type(exc), exc, exc.__traceback__, log_dir=tmp_path)

    assert incident_id.startswith("INC-")
    assert incident_id in caplog.text
    assert caplog.records[-1].datos["incident_id"] == incident_id
    assert generar_id_incidente() != generar_id_incidente()


def test_registrar_incidente_escribe_a_mano_si_el_logging_falla(tmp_path, monkeypatch) -> None:
    class _LoggerRoto:
        def critical(self, *args, **kwargs) -> None:
            raise OSError("disco lleno")

    monkeypatch.setattr(logging_module, "_crash_logger", _LoggerRoto())
    try:
        raise RuntimeError("sin capturar")
    except RuntimeError as exc:
        incident_id = registrar_incidente(type(exc), exc, exc.__traceback__, log_dir=tmp_path)

    linea = json.loads((tmp_path / CRASH_LOG_NAME).read_text(encoding="utf-8").splitlines()[-1])
    assert linea["nivel"] == "CRITICAL"
    assert linea["datos"]["incident_id"] == incident_id
    assert "RuntimeError: sin capturar" in linea["exc_info"]


def test_exception_hook_escribe_crash_log(tmp_path, monkeypatch, root_logger_restaurado) -> None:
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    configure_logging(tmp_path)
    install_exception_hook(tmp_path)

    try:
        raise RuntimeError("sin capturar")
    except RuntimeError as exc:
        sys.excepthook(type(exc), exc, exc.__traceback__)

    crash = _lineas(tmp_path / CRASH_LOG_NAME)
    assert crash[-1]["nivel"] == "CRITICAL"
    assert crash[-1]["datos"]["incident_id"].startswith("INC-")
    assert "RuntimeError: sin capturar" in crash[-1]["exc_info"]
