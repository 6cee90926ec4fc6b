from __future__ import annotations

import argparse
import faulthandler
import logging
import sys
from datetime import date
from pathlib import Path

from planificador.bootstrap.container import AppContainer, build_container
from planificador.bootstrap.logging import CRASH_LOG_NAME, configure_logging, install_exception_hook
from planificador.bootstrap.settings import resolve_log_dir
from planificador.core.errors import AppError
from planificador.domain.services import ValidacionError, validar_sheets_config
from planificador.ui.vistas.calendario_presenter import titulo_evento


def _parse_mes(texto: str) -> tuple[int, int]:
    try:
        anio_txt, mes_txt = texto.split("-", 1)
        anio, mes = int(anio_txt), int(mes_txt)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Mes no válido: {texto!r}; usa YYYY-MM") from exc
    if not 1 <= mes <= 12:
        raise argparse.ArgumentTypeError(f"Mes fuera de rango: {texto!r}")
    return anio, mes


def _run_selfcheck(container: AppContainer, log_dir: Path) -> int:
    logger = logging.getLogger(__name__)
    errors = 0

    config = container.config_store.load()
    if config is None:
        logger.error("Falta config.json con el ID de la spreadsheet y las credenciales")
        errors += 1
    else:
        try:
            validar_sheets_config(config)
        except ValidacionError as exc:
            logger.error("Configuración de Google Sheets incompleta: %s", exc)
            errors += 1
        credentials = Path(config.credentials_path)
        if not credentials.exists():
            logger.error("No se encontró el archivo de credenciales: %s", credentials)
            errors += 1
        else:
            logger.info("Credenciales encontradas: %s", credentials.name)

    if errors:
        logger.error("Selfcheck falló con %s error(es). crash.log=%s", errors, log_dir / CRASH_LOG_NAME)
        return 1
    logger.info("Selfcheck OK.")
    return 0


def _run_resumen(container: AppContainer, anio: int, mes: int, *, today: date | None = None) -> int:
    logger = logging.getLogger(__name__)
    service = container.calendario_service
    try:
        service.cargar()
    except AppError as exc:
        logger.error("No se pudo leer el libro: %s", exc)
        return 1

    vista = service.vista_mes(anio, mes, today=today)
    logger.info("Resumen de %s: %s campañas activas", vista.titulo, len(vista.campanas_activas))
    for dia in vista.dias:
        if not dia.es_mes_actual:
            continue
        if dia.festivo is not None:
            logger.info("%s festivo: %s", dia.fecha.isoformat(), dia.festivo.festividad)
            continue
        eventos = (*dia.incumplimientos, *dia.actualizaciones, *dia.base)
        if not eventos:
            continue
        logger.info(
            "%s %s campañas (+%s): %s",
            dia.fecha.isoformat(),
            dia.total_grupos,
            dia.exceso,
            "; ".join(f"[{e.carril.value}] {titulo_evento(e.grupo)}" for e in eventos),
        )
    return 0


def main(argv: list[str] | None = None, *, container: AppContainer | None = None) -> int:
    parser = argparse.ArgumentParser(description="Planificador de formación")
    parser.add_argument("--selfcheck", action="store_true", help="Valida la configuración sin abrir UI")
    parser.add_argument("--resumen", type=_parse_mes, metavar="YYYY-MM", help="Resume un mes sin abrir UI")
    args = parser.parse_args(argv)

    log_dir = resolve_log_dir()
    configure_logging(log_dir)
    install_exception_hook(log_dir)
    faulthandler.enable()

    logger = logging.getLogger(__name__)
    logger.info("Log dir: %s", log_dir)
    logger.info("Python: %s", sys.version)
    logger.info("CWD: %s", Path.cwd())

    resolved_container = container or build_container()
    if args.selfcheck:
        return _run_selfcheck(resolved_container, log_dir)
    if args.resumen:
        anio, mes = args.resumen
        return _run_resumen(resolved_container, anio, mes)

    from planificador.entrypoints.ui_main import run_ui

    return run_ui(resolved_container)
