from __future__ import annotations

import json

import gspread
import pytest
from google.auth.exceptions import DefaultCredentialsError

from planificador.core.errors import TransientExternalError
from planificador.domain.sheets_errors import (
    SheetsApiDisabledError,
    SheetsConfigError,
    SheetsCredentialsError,
    SheetsNotFoundError,
    SheetsPermissionError,
    SheetsRateLimitError,
)
from planificador.infrastructure.sheets_errors import classify_api_error, map_gspread_exception


class _Response:
    def __init__(self, status_code: int, text: str) -> None:
        self.status_code = status_code
        self.text = text


def _api_error(status_code: int, text: str) -> gspread.exceptions.APIError:
    return gspread.exceptions.APIError(_Response(status_code, text))


@pytest.mark.parametrize(
    ("status_code", "text", "expected"),
    [
        (429, "Quota exceeded", SheetsRateLimitError),
        (503, "backend error", SheetsRateLimitError),
        (403, "Google Sheets API has not been used in project 123", SheetsApiDisabledError),
        (404, "Requested entity was not found", SheetsNotFoundError),
        (403, "PERMISSION_DENIED", SheetsPermissionError),
        (400, "algo raro", SheetsConfigError),
    ],
)
def test_map_api_error(status_code: int, text: str, expected: type[Exception]) -> None:
    mapped = map_gspread_exception(_api_error(status_code, text))

    assert type(mapped) is expected


def test_rate_limit_es_transitorio() -> None:
    assert isinstance(classify_api_error("[429] resource_exhausted", None), TransientExternalError)


def test_credenciales() -> None:
    missing = FileNotFoundError(2, "No such file", "/tmp/credentials.json")

    assert isinstance(map_gspread_exception(missing), SheetsCredentialsError)
    assert "/tmp/credentials.json" in str(map_gspread_exception(missing))
    assert isinstance(map_gspread_exception(json.JSONDecodeError("x", "doc", 0)), SheetsCredentialsError)
    assert isinstance(map_gspread_exception(DefaultCredentialsError("bad")), SheetsCredentialsError)


def test_pestana_inexistente() -> None:
    mapped = map_gspread_exception(gspread.exceptions.WorksheetNotFound("Novedades"))

    assert isinstance(mapped, SheetsNotFoundError)
    assert "Novedades" in str(mapped)


def test_errores_ya_mapeados_pasan_tal_cual() -> None:
    original = SheetsPermissionError("ya traducido")

    assert map_gspread_exception(original) is original


def test_error_desconocido_es_config_error() -> None:
    assert isinstance(map_gspread_exception(RuntimeError("boom")), SheetsConfigError)
