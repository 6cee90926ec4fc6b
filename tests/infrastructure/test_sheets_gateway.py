from __future__ import annotations

from pathlib import Path

import pytest

from planificador.domain.models import SheetsConfig
from planificador.domain.sheets_errors import SheetsConfigError
from planificador.infrastructure.sheets_gateway import SheetsTrainingGateway
from planificador.infrastructure.sheets_rows import COLUMNAS_REGISTROS


class _ClientFake:
    def __init__(self, sheets: dict[str, list[list[str]]] | None = None) -> None:
        self.sheets = sheets or {}
        self.opened: list[tuple[Path, str]] = []
        self.calls: list[tuple] = []

    @property
    def is_open(self) -> bool:
        return bool(self.opened)

    def open_spreadsheet(self, credentials_path: Path, spreadsheet_id: str):
        self.opened.append((credentials_path, spreadsheet_id))

    def read_all_values(self, worksheet_name: str):
        return self.sheets.get(worksheet_name, [])

    def append_rows(self, worksheet_name: str, rows):
        if rows:
            self.calls.append(("append", worksheet_name, rows))

    def batch_update(self, worksheet_name: str, data):
        if data:
            self.calls.append(("batch_update", worksheet_name, data))

    def delete_row(self, worksheet_name: str, row_number: int):
        self.calls.append(("delete", worksheet_name, row_number))


class _StoreFake:
    def __init__(self, config: SheetsConfig | None) -> None:
        self.config = config

    def load(self):
        return self.config

    def save(self, config):
        self.config = config
        return config

    def credentials_path(self) -> Path:
        return Path("/tmp/credentials.json")


CONFIG = SheetsConfig(spreadsheet_id="sheet-id", credentials_path="/tmp/creds.json")


def _gateway(client: _ClientFake, config: SheetsConfig | None = CONFIG) -> SheetsTrainingGateway:
    return SheetsTrainingGateway(client, _StoreFake(config))


def test_lecturas_abren_el_libro_una_sola_vez() -> None:
    cabecera = list(COLUMNAS_REGISTROS)
    client = _ClientFake(
        {
            "Base_WT25": [cabecera, ["01/02/2024", "Laura", "Acme"]],
            "Novedades": [["h"], ["Ana", "2024-02-12", "2024-02-13", "Curso"]],
            "DATA": [["h"]],
        }
    )
    gateway = _gateway(client)

    registros = gateway.fetch_training_records()
    novedades = gateway.fetch_novedades()
    gateway.fetch_master_data()

    assert client.opened == [(Path("/tmp/creds.json"), "sheet-id")]
    assert registros[0].cliente == "Acme"
    assert registros[0].row_index == 2
    assert novedades[0].fecha_inicio == "12/02/2024"


def test_sin_configuracion_falla_con_error_de_configuracion() -> None:
    with pytest.raises(SheetsConfigError):
        _gateway(_ClientFake(), config=None).fetch_training_records()


def test_lista_plana_se_anade_al_final(registro) -> None:
    client = _ClientFake()

    _gateway(client).submit_records([registro(row_index=None).to_payload()])

    assert [c[0] for c in client.calls] == ["append"]
    assert client.calls[0][2][0][2] == "Acme"


def test_create_anade_filas(registro) -> None:
    client = _ClientFake()
    payload = {"action": "create", "data": [registro(row_index=None).to_payload(), registro(row_index=None).to_payload()]}

    _gateway(client).submit_records(payload)

    assert client.calls[0][0] == "append"
    assert len(client.calls[0][2]) == 2


def test_update_individual_reescribe_su_rango(registro) -> None:
    client = _ClientFake()
    record = registro(row_index=9, nombre="Editado")

    _gateway(client).submit_records({"action": "update", "data": record.to_payload(), "rowIndex": 9})

    op, hoja, data = client.calls[0]
    assert (op, hoja) == ("batch_update", "Base_WT25")
    assert data[0]["range"] == "A9:P9"
    assert data[0]["values"][0][7] == "Editado"


def test_lote_borrado_gana_y_se_borra_de_abajo_arriba(registro) -> None:
    client = _ClientFake()
    payload = {
        "action": "update",
        "data": [
            registro(row_index=3, nombre="Actualizada").to_payload(),
            registro(row_index=5, nombre="Borrada igualmente").to_payload(),
            registro(row_index=None, nombre="Nueva").to_payload(),
        ],
        "deletedRowIndices": [5, 8],
    }

    _gateway(client).submit_records(payload)

    ops = [c[0] for c in client.calls]
    assert ops == ["batch_update", "delete", "delete", "append"]
    assert [u["range"] for u in client.calls[0][2]] == ["A3:P3"]
    assert [c[2] for c in client.calls if c[0] == "delete"] == [8, 5]
    assert client.calls[-1][2][0][7] == "Nueva"


def test_accion_desconocida_falla() -> None:
    with pytest.raises(ValueError):
        _gateway(_ClientFake()).submit_records({"action": "delete", "data": []})
