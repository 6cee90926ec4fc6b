from __future__ import annotations

from pathlib import Path

import gspread
import pytest
from gspread.utils import DateTimeOption, ValueRenderOption

from planificador.domain.sheets_errors import SheetsCredentialsError, SheetsNotFoundError
from planificador.infrastructure import sheets_client as sheets_client_module
from planificador.infrastructure.sheets_client import SheetsClient


class _WorksheetFake:
    def __init__(self) -> None:
        self.values = [["h"], ["a"]]
        self.appended: list = []
        self.batches: list = []
        self.deleted: list[int] = []
        self.read_options: dict = {}

    def get_all_values(self, **options):
        self.read_options = options
        return self.values

    def append_rows(self, rows, value_input_option: str):
        assert value_input_option == "USER_ENTERED"
        self.appended.extend(rows)

    def batch_update(self, data, value_input_option: str):
        assert value_input_option == "USER_ENTERED"
        self.batches.append(data)

    def delete_rows(self, row_number: int):
        self.deleted.append(row_number)


class _SpreadsheetFake:
    id = "sheet-id"

    def __init__(self) -> None:
        self.ws = _WorksheetFake()
        self.lookups = 0

    def worksheet(self, name: str):
        self.lookups += 1
        if name != "Base_WT25":
            raise gspread.exceptions.WorksheetNotFound(name)
        return self.ws


class _GspreadClientFake:
    def __init__(self, spreadsheet) -> None:
        self.spreadsheet = spreadsheet

    def open_by_key(self, key: str):
        assert key == "sheet-id"
        return self.spreadsheet


@pytest.fixture
def spreadsheet(monkeypatch):
    fake = _SpreadsheetFake()
    monkeypatch.setattr(
        sheets_client_module.gspread,
        "service_account",
        lambda filename: _GspreadClientFake(fake),
    )
    return fake


def test_operaciones_basicas(spreadsheet) -> None:
    client = SheetsClient()
    client.open_spreadsheet(Path("/tmp/creds.json"), "sheet-id")

    assert client.read_all_values("Base_WT25") == [["h"], ["a"]]
    client.append_rows("Base_WT25", [["x"]])
    client.append_rows("Base_WT25", [])
    client.batch_update("Base_WT25", [{"range": "A2:P2", "values": [["y"]]}])
    client.delete_row("Base_WT25", 4)

    assert spreadsheet.ws.appended == [["x"]]
    assert spreadsheet.ws.batches == [[{"range": "A2:P2", "values": [["y"]]}]]
    assert spreadsheet.ws.deleted == [4]
    assert spreadsheet.lookups == 1


def test_lectura_sin_formato_para_no_depender_de_la_configuracion_regional(spreadsheet) -> None:
    client = SheetsClient()
    client.open_spreadsheet(Path("/tmp/creds.json"), "sheet-id")

    client.read_all_values("Base_WT25")

    assert spreadsheet.ws.read_options == {
        "value_render_option": ValueRenderOption.unformatted,
        "date_time_render_option": DateTimeOption.serial_number,
    }


def test_pestana_inexistente_se_traduce(spreadsheet) -> None:
    client = SheetsClient()
    client.open_spreadsheet(Path("/tmp/creds.json"), "sheet-id")

    with pytest.raises(SheetsNotFoundError):
        client.read_all_values("Otra")


def test_credenciales_ausentes_se_traducen(monkeypatch) -> None:
    def _missing(filename):
        raise FileNotFoundError(2, "No such file", filename)

    monkeypatch.setattr(sheets_client_module.gspread, "service_account", _missing)

    with pytest.raises(SheetsCredentialsError):
        SheetsClient().open_spreadsheet(Path("/tmp/no-existe.json"), "sheet-id")


def test_sin_abrir_no_hay_hojas() -> None:
    with pytest.raises(RuntimeError):
        SheetsClient().get_worksheet("Base_WT25")
