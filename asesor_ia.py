"""
Asesoría en texto sobre la conveniencia de la Modalidad 40

El generador recibe solo el resumen numérico de la comparación, nunca los
datos del asegurado. Cualquier falla se sustituye por un mensaje fijo.
"""

import os
import logging
from typing import Callable, Dict, Optional

import requests

from calculadora_pension import ResultadoComparacion

logger = logging.getLogger(__name__)

# =========================================================
# CONFIG GEMINI
# =========================================================
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{modelo}:generateContent"
ASESOR_TIMEOUT = float(os.getenv("ASESOR_TIMEOUT", "20"))

INSTRUCCION_SISTEMA = (
    "Eres un asesor de pensiones IMSS Ley 73 experto. Analiza la viabilidad "
    "de la Modalidad 40 basándote en los datos. Sé extremadamente conciso, "
    "directo y profesional. Máximo 2 párrafos cortos."
)

MENSAJE_ERROR = "No se pudo generar el análisis. Verifica tu conexión o cuota de API."

GeneradorConsejo = Callable[[Dict], str]


class AsesorError(RuntimeError):
    """Falla del servicio de generación de texto"""


# =========================================================
# RESUMEN Y PROMPT
# =========================================================
def construir_resumen(comparacion: ResultadoComparacion) -> Dict:
    return {
        "pension_actual": comparacion.actual.pension_mensual,
        "semanas_actuales": comparacion.actual.semanas_totales,
        "inversion_total": comparacion.inversion.total,
        "pension_optimizada": comparacion.optimizado.pension_mensual,
        "meses_equilibrio": comparacion.meses_equilibrio,
        "diferencia_mensual": comparacion.ganancia_mensual,
    }


def construir_prompt(resumen: Dict) -> str:
    meses = resumen["meses_equilibrio"]
    roi = "N/D" if meses is None else f"{meses:.1f} meses"

    return (
        "DATA:\n"
        f"ACTUAL: ${resumen['pension_actual']:.0f}/mes, {resumen['semanas_actuales']}sem.\n"
        f"M40: Inversión ${resumen['inversion_total']:.0f}, "
        f"Pensión ${resumen['pension_optimizada']:.0f}/mes.\n"
        f"ROI: {roi}.\n"
        f"DIFF: ${resumen['diferencia_mensual']:.0f}/mes."
    )


# =========================================================
# CLIENTE GEMINI
# =========================================================
class GeneradorGemini:
    """Llama al endpoint generateContent con el prompt condensado."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        modelo: str = GEMINI_MODEL,
        timeout: float = ASESOR_TIMEOUT
    ) -> None:
        self.api_key = api_key or GEMINI_API_KEY
        self.modelo = modelo
        self.timeout = timeout

    def __call__(self, resumen: Dict) -> str:
        if not self.api_key:
            raise AsesorError("GEMINI_API_KEY no configurada")

        payload = {
            "systemInstruction": {"parts": [{"text": INSTRUCCION_SISTEMA}]},
            "contents": [{"role": "user", "parts": [{"text": construir_prompt(resumen)}]}],
            "generationConfig": {
                "maxOutputTokens": 300,
                "temperature": 0.7,
                "thinkingConfig": {"thinkingBudget": 0},
            },
        }

        try:
            response = requests.post(
                GEMINI_URL.format(modelo=self.modelo),
                json=payload,
                headers={
                    "content-type": "application/json",
                    "x-goog-api-key": self.api_key,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise AsesorError(f"Gemini no respondió: {exc}") from exc

        try:
            partes = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as exc:
            raise AsesorError("respuesta de Gemini sin candidatos") from exc

        texto = "".join(parte.get("text", "") for parte in partes).strip()
        if not texto:
            raise AsesorError("respuesta de Gemini vacía")
        return texto


# =========================================================
# PUNTO DE ENTRADA
# =========================================================
def obtener_consejo(
    comparacion: ResultadoComparacion,
    generador: Optional[GeneradorConsejo] = None
) -> str:
    """
    Devuelve el análisis en texto o MENSAJE_ERROR si el generador falla
    """
    generador = generador or GeneradorGemini()
    resumen = construir_resumen(comparacion)

    try:
        return generador(resumen)
    except Exception:
        logger.exception("Error al generar la asesoría")
        return MENSAJE_ERROR
