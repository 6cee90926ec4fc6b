from __future__ import annotations

from datetime import date

import pytest

from planificador.application.composer import (
    ESTADO_INICIAL,
    CabeceraAlta,
    FilaAlta,
    FormularioDesarrollo,
    build_alta,
    compose,
)
from planificador.domain.agrupacion import group_by_campaign
from planificador.domain.services import ValidacionError

HOY = date(2024, 3, 5)


def test_compose_hereda_la_cabecera_del_grupo(registro) -> None:
    grupo = group_by_campaign([registro(fecha_solicitud="01/02/2024")])[0]
    form = FormularioDesarrollo(
        desarrollo="Actualización",
        nombre="Módulo 2",
        fecha_inicio="2024-03-11",
        fecha_fin="2024-03-15",
    )

    nuevo = compose(grupo, form, today=HOY)

    assert nuevo.row_index is None
    assert (nuevo.cliente, nuevo.segmento, nuevo.campana) == ("Acme", "Retail", "Acme Retail")
    assert nuevo.desarrollador == "Ana Pérez"
    assert nuevo.fecha_solicitud == "01/02/2024"
    assert nuevo.fecha_inicio == "11/03/2024"
    assert nuevo.fecha_fin == "15/03/2024"
    assert nuevo.estado == ESTADO_INICIAL


def test_compose_sin_fecha_de_solicitud_usa_hoy(registro) -> None:
    grupo = group_by_campaign([registro(fecha_solicitud=None)])[0]

    nuevo = compose(grupo, FormularioDesarrollo(nombre="X"), today=HOY)

    assert nuevo.fecha_solicitud == "05/03/2024"
    assert nuevo.fecha_inicio == ""
    assert nuevo.observaciones == ""


def test_compose_rechaza_intervalo_invertido(registro) -> None:
    grupo = group_by_campaign([registro()])[0]

    with pytest.raises(ValidacionError):
        compose(grupo, FormularioDesarrollo(fecha_inicio="2024-03-15", fecha_fin="2024-03-11"), today=HOY)


def test_build_alta_una_fila_por_desarrollo() -> None:
    cabecera = CabeceraAlta(
        cliente="Acme",
        segmento="Retail",
        campana="Acme Retail",
        observaciones="Urgente",
        fecha_solicitud="2024-03-05",
    )
    filas = [
        FilaAlta(desarrollo="Curso", nombre="Uno", fecha_inicio="2024-03-11", fecha_fin="2024-03-12"),
        FilaAlta(desarrollo="Curso", nombre="Dos", estado=""),
    ]

    registros = build_alta(cabecera, filas)

    assert [r.nombre for r in registros] == ["Uno", "Dos"]
    assert all(r.observaciones == "Urgente" for r in registros)
    assert all(r.fecha_solicitud == "05/03/2024" for r in registros)
    assert all(r.row_index is None for r in registros)
    assert registros[0].fecha_inicio == "11/03/2024"
    assert registros[1].estado == ESTADO_INICIAL


def test_build_alta_exige_cabecera_y_filas() -> None:
    with pytest.raises(ValidacionError, match="obligatorios"):
        build_alta(CabeceraAlta(cliente="Acme"), [FilaAlta()])
    with pytest.raises(ValidacionError, match="al menos un desarrollo"):
        build_alta(CabeceraAlta(cliente="Acme", campana="Acme Retail"), [])


def test_build_alta_rechaza_filas_con_intervalo_invertido() -> None:
    cabecera = CabeceraAlta(cliente="Acme", campana="Acme Retail")

    with pytest.raises(ValidacionError):
        build_alta(cabecera, [FilaAlta(fecha_inicio="2024-03-12", fecha_fin="2024-03-11")])
