# routes/simulacion.py

import io
import os
from datetime import date
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from asesor_ia import GeneradorConsejo, GeneradorGemini, construir_resumen, obtener_consejo
from calculadora_pension import (
    DatosInvalidosError,
    PerfilAsegurado,
    PlanModalidad40,
    comparacion_a_dict,
    comparar_escenarios,
    validar_perfil,
    validar_plan,
)
from pdf_generator import generar_pdf_comparacion
from tablas_ley73 import (
    INFLACION_ANUAL_DEFECTO,
    LEY73,
    MOD40,
    SALARIO_MINIMO_2025,
    UMA_VALOR_2025,
)


router = APIRouter()

# =========================================================
# CONFIG (valores vigentes por defecto)
# =========================================================
UMA_VIGENTE = float(os.getenv("UMA_VIGENTE", UMA_VALOR_2025))
SALARIO_MINIMO_VIGENTE = float(os.getenv("SALARIO_MINIMO_VIGENTE", SALARIO_MINIMO_2025))
INFLACION_ANUAL = float(os.getenv("INFLACION_ANUAL", INFLACION_ANUAL_DEFECTO))


# =========================================================
# HELPERS
# =========================================================
def _hoy() -> date:
    return date.today()


def get_generador() -> GeneradorConsejo:
    return GeneradorGemini()


# =========================================================
# SCHEMAS (Pydantic)
# =========================================================
class PerfilEntrada(BaseModel):
    edad_actual: int = Field(..., ge=0, le=100)
    edad_retiro: int = Field(..., ge=LEY73.EDADES_RETIRO[0], le=LEY73.EDADES_RETIRO[-1])
    semanas_cotizadas: int = Field(..., ge=0)
    salario_diario: float = Field(..., gt=0)
    tiene_conyuge: bool = False
    hijos_menores_25: int = Field(0, ge=0)
    padres_dependientes: bool = False
    uma_base: float = Field(UMA_VIGENTE, gt=0)
    tasa_inflacion: float = Field(INFLACION_ANUAL, ge=0)
    salario_minimo: float = Field(SALARIO_MINIMO_VIGENTE, gt=0)


class PlanEntrada(BaseModel):
    activo: bool = False
    meses_inversion: int = Field(0, ge=0, le=MOD40.MESES_MAXIMOS)
    meses_retroactivos: int = Field(0, ge=0, le=MOD40.MESES_MAXIMOS)
    salario_en_umas: float = Field(
        MOD40.SALARIO_MAX_UMAS, ge=MOD40.SALARIO_MIN_UMAS, le=MOD40.SALARIO_MAX_UMAS
    )
    edad_inicio: Optional[int] = Field(None, ge=0)
    seguir_trabajando: bool = False


class SimulacionEntrada(BaseModel):
    perfil: PerfilEntrada
    plan: PlanEntrada = Field(default_factory=PlanEntrada)
    fecha_corte: Optional[date] = None


class ReporteEntrada(SimulacionEntrada):
    consejo: Optional[str] = Field(None, max_length=4000)


def _a_modelos(entrada: SimulacionEntrada) -> Tuple[PerfilAsegurado, PlanModalidad40, date]:
    perfil = PerfilAsegurado(**entrada.perfil.model_dump())
    plan = PlanModalidad40(**entrada.plan.model_dump())

    try:
        validar_perfil(perfil)
        validar_plan(plan, perfil)
    except DatosInvalidosError as exc:
        raise HTTPException(status_code=422, detail=exc.errores)

    return perfil, plan, entrada.fecha_corte or _hoy()


# =========================================================
# ROUTES
# =========================================================
@router.get("/parametros")
def parametros():
    """
    Valores por defecto y tablas que el formulario necesita mostrar.
    """
    return {
        "uma_base": UMA_VIGENTE,
        "salario_minimo": SALARIO_MINIMO_VIGENTE,
        "tasa_inflacion": INFLACION_ANUAL,
        "edades_retiro": list(LEY73.EDADES_RETIRO),
        "salario_en_umas": {"min": MOD40.SALARIO_MIN_UMAS, "max": MOD40.SALARIO_MAX_UMAS},
        "cuotas_mod40": {str(anio): cuota for anio, cuota in MOD40.CUOTAS.items()},
    }


@router.post("/calcular")
def calcular(payload: SimulacionEntrada):
    """
    Compara el escenario actual contra la Modalidad 40.
    """
    perfil, plan, fecha_corte = _a_modelos(payload)
    comparacion = comparar_escenarios(perfil, plan, fecha_corte)
    return comparacion_a_dict(comparacion)


@router.post("/asesoria")
def asesoria(payload: SimulacionEntrada, generador: GeneradorConsejo = Depends(get_generador)):
    """
    Análisis en texto; si el proveedor falla se devuelve el mensaje fijo.
    """
    perfil, plan, fecha_corte = _a_modelos(payload)
    comparacion = comparar_escenarios(perfil, plan, fecha_corte)

    return {
        "consejo": obtener_consejo(comparacion, generador),
        "resumen": construir_resumen(comparacion),
    }


@router.post("/reporte")
def reporte(payload: ReporteEntrada):
    """
    Reporte PDF de la comparación.
    """
    perfil, plan, fecha_corte = _a_modelos(payload)
    comparacion = comparar_escenarios(perfil, plan, fecha_corte)

    buffer = io.BytesIO()
    generar_pdf_comparacion(
        perfil, comparacion, consejo=payload.consejo, output=buffer, fecha_reporte=fecha_corte
    )

    return Response(
        content=buffer.getvalue(),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="reporte_mod40_{fecha_corte.year}.pdf"'},
    )
