from datetime import date
from unittest.mock import Mock, patch

import pytest
import requests

import asesor_ia
from asesor_ia import (
    MENSAJE_ERROR,
    AsesorError,
    GeneradorGemini,
    construir_prompt,
    construir_resumen,
    obtener_consejo,
)
from calculadora_pension import PerfilAsegurado, PlanModalidad40, comparar_escenarios


@pytest.fixture
def comparacion():
    perfil = PerfilAsegurado(edad_actual=55, edad_retiro=60, semanas_cotizadas=1000, salario_diario=400)
    plan = PlanModalidad40(activo=True, meses_inversion=60, salario_en_umas=25)
    return comparar_escenarios(perfil, plan, date(2025, 3, 1))


@pytest.fixture
def resumen():
    return {
        "pension_actual": 11727.7,
        "semanas_actuales": 1000,
        "inversion_total": 620000.4,
        "pension_optimizada": 39397.2,
        "meses_equilibrio": 22.43,
        "diferencia_mensual": 27669.6,
    }


def _respuesta(data):
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = data
    return response


def test_resumen_sin_datos_personales(comparacion):
    resumen = construir_resumen(comparacion)

    assert set(resumen) == {
        "pension_actual",
        "semanas_actuales",
        "inversion_total",
        "pension_optimizada",
        "meses_equilibrio",
        "diferencia_mensual",
    }
    assert resumen["semanas_actuales"] == 1000
    assert resumen["pension_optimizada"] == comparacion.optimizado.pension_mensual
    assert resumen["inversion_total"] == comparacion.inversion.total


def test_prompt_condensado(resumen):
    prompt = construir_prompt(resumen)

    assert prompt.startswith("DATA:")
    assert "ACTUAL: $11728/mes, 1000sem." in prompt
    assert "M40: Inversión $620000, Pensión $39397/mes." in prompt
    assert "ROI: 22.4 meses." in prompt
    assert "DIFF: $27670/mes." in prompt


def test_prompt_sin_punto_de_equilibrio(resumen):
    resumen["meses_equilibrio"] = None

    assert "ROI: N/D." in construir_prompt(resumen)


def test_consejo_con_generador_inyectado(comparacion):
    recibido = {}

    def generador(resumen):
        recibido.update(resumen)
        return "Conviene invertir."

    assert obtener_consejo(comparacion, generador) == "Conviene invertir."
    assert recibido == construir_resumen(comparacion)


def test_consejo_con_falla_devuelve_mensaje_fijo(comparacion):
    def generador(resumen):
        raise AsesorError("sin cuota")

    assert obtener_consejo(comparacion, generador) == MENSAJE_ERROR


def test_gemini_sin_api_key(monkeypatch, resumen):
    monkeypatch.setattr(asesor_ia, "GEMINI_API_KEY", None)

    with pytest.raises(AsesorError):
        GeneradorGemini()(resumen)


def test_gemini_respuesta_valida(resumen):
    data = {"candidates": [{"content": {"parts": [{"text": "Análisis "}, {"text": "breve."}]}}]}

    with patch("asesor_ia.requests.post", return_value=_respuesta(data)) as post:
        texto = GeneradorGemini(api_key="clave", modelo="gemini-test", timeout=5)(resumen)

    assert texto == "Análisis breve."
    args, kwargs = post.call_args
    assert args[0].endswith("/models/gemini-test:generateContent")
    assert kwargs["headers"]["x-goog-api-key"] == "clave"
    assert kwargs["timeout"] == 5
    assert kwargs["json"]["generationConfig"]["maxOutputTokens"] == 300
    assert kwargs["json"]["generationConfig"]["temperature"] == 0.7
    assert kwargs["json"]["systemInstruction"]["parts"][0]["text"] == asesor_ia.INSTRUCCION_SISTEMA
    assert kwargs["json"]["contents"][0]["parts"][0]["text"] == construir_prompt(resumen)


def test_gemini_error_http(resumen):
    response = Mock()
    response.raise_for_status.side_effect = requests.HTTPError("429 Too Many Requests")

    with patch("asesor_ia.requests.post", return_value=response):
        with pytest.raises(AsesorError):
            GeneradorGemini(api_key="clave")(resumen)


def test_gemini_sin_conexion(resumen):
    with patch("asesor_ia.requests.post", side_effect=requests.ConnectionError("sin red")):
        with pytest.raises(AsesorError):
            GeneradorGemini(api_key="clave")(resumen)


@pytest.mark.parametrize("data", [
    {},
    {"candidates": []},
    {"candidates": [{"content": {"parts": [{"text": "   "}]}}]},
])
def test_gemini_respuesta_vacia(resumen, data):
    with patch("asesor_ia.requests.post", return_value=_respuesta(data)):
        with pytest.raises(AsesorError):
            GeneradorGemini(api_key="clave")(resumen)


def test_consejo_con_gemini_caido(comparacion):
    with patch("asesor_ia.requests.post", side_effect=requests.Timeout("lento")):
        consejo = obtener_consejo(comparacion, GeneradorGemini(api_key="clave"))

    assert consejo == MENSAJE_ERROR
