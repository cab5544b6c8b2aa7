import pytest

from tablas_ley73 import (
    MOD40,
    TABLA_CUANTIA,
    obtener_fila_cuantia,
    obtener_porcentaje_edad,
    obtener_porcentaje_mod40,
)


def test_fila_cuantia_ratio_bajo_usa_primer_renglon():
    fila = obtener_fila_cuantia(0.5)

    assert fila.cuantia_basica == 80.0
    assert fila.incremento_anual == 0.563


def test_fila_cuantia_tope_exacto_pertenece_al_renglon():
    assert obtener_fila_cuantia(1.25).cuantia_basica == 77.11
    assert obtener_fila_cuantia(1.26).cuantia_basica == 58.18


def test_fila_cuantia_ratio_alto_usa_ultimo_renglon():
    assert obtener_fila_cuantia(6.0) == TABLA_CUANTIA[-1]
    assert obtener_fila_cuantia(25.0) == TABLA_CUANTIA[-1]
    assert obtener_fila_cuantia(25.0).cuantia_basica == 13.62
    assert obtener_fila_cuantia(25.0).incremento_anual == 2.435


def test_tabla_cuantia_ordenada_por_tope():
    topes = [fila.tope for fila in TABLA_CUANTIA]

    assert topes == sorted(topes)


@pytest.mark.parametrize("edad, esperado", [(60, 0.75), (62, 0.85), (64, 0.95), (65, 1.0)])
def test_porcentaje_edad_en_tabla(edad, esperado):
    assert obtener_porcentaje_edad(edad) == esperado


@pytest.mark.parametrize("edad", [55, 59, 66, 70])
def test_porcentaje_edad_fuera_de_tabla_es_cien(edad):
    assert obtener_porcentaje_edad(edad) == 1.0


def test_cuota_mod40_conocida():
    assert obtener_porcentaje_mod40(2025) == 0.13347
    assert obtener_porcentaje_mod40(2030) == 0.18800


def test_cuota_mod40_extrapolacion_plana():
    assert obtener_porcentaje_mod40(2019) == 0.10075
    assert obtener_porcentaje_mod40(2040) == 0.18800


def test_cuotas_mod40_crecientes():
    anios = sorted(MOD40.CUOTAS)
    cuotas = [obtener_porcentaje_mod40(anio) for anio in anios]

    assert cuotas == sorted(cuotas)
    assert len(set(cuotas)) == len(cuotas)
