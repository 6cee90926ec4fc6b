from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from planificador.bootstrap.settings import APP_DIR_NAME
from planificador.domain.models import SheetsConfig

logger = logging.getLogger(__name__)

_HOJAS_OPCIONALES = {
    "hoja_registros": "sheets_hoja_registros",
    "hoja_maestros": "sheets_hoja_maestros",
    "hoja_novedades": "sheets_hoja_novedades",
}


def resolve_appdata_dir() -> Path:
    env_dir = os.environ.get("LOCALAPPDATA")
    if env_dir:
        base_dir = Path(env_dir)
    else:
        base_dir = Path.home() / ".local" / "share"
    return base_dir / APP_DIR_NAME


class SheetsConfigStore:
    def __init__(self, base_dir: Path | None = None) -> None:
        self._base_dir = base_dir or resolve_appdata_dir()
        self._config_path = self._base_dir / "config.json"
        self._credentials_path = self._base_dir / "secrets" / "credentials.json"

    def load(self) -> SheetsConfig | None:
        if not self._config_path.exists():
            return None
        try:
            payload = json.loads(self._config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.exception("No se pudo leer config.json: %s", exc)
            return None
        spreadsheet_id = str(payload.get("sheets_spreadsheet_id", "")).strip()
        credentials_path = str(payload.get("path_credentials_json", "")).strip()
        if not spreadsheet_id and not credentials_path:
            return None
        hojas = {
            campo: str(payload[clave]).strip()
            for campo, clave in _HOJAS_OPCIONALES.items()
            if str(payload.get(clave, "")).strip()
        }
        return SheetsConfig(
            spreadsheet_id=spreadsheet_id,
            credentials_path=credentials_path or str(self._credentials_path),
            **hojas,
        )

    def save(self, config: SheetsConfig) -> SheetsConfig:
        payload = {
            "sheets_spreadsheet_id": config.spreadsheet_id,
            "path_credentials_json": config.credentials_path,
        }
        for campo, clave in _HOJAS_OPCIONALES.items():
            payload[clave] = getattr(config, campo)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        self._config_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        return config

    def credentials_path(self) -> Path:
        return self._credentials_path
