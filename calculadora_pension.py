"""
Calculadora de Pensión IMSS Ley 73 con Modalidad 40
Compara la pensión proyectada sin estrategia contra la pensión con
Modalidad 40 y estima el costo y el punto de equilibrio de la inversión.

El motor es determinista: la fecha de cálculo se recibe como argumento
(`fecha_corte`) y nunca se lee del reloj.
"""

import math
from dataclasses import dataclass, field, asdict, replace
from datetime import date
from typing import Dict, List, Optional, Tuple

from tablas_ley73 import (
    INFLACION_ANUAL_DEFECTO,
    LEY73,
    MOD40,
    SALARIO_MINIMO_2025,
    UMA_VALOR_2025,
    obtener_fila_cuantia,
    obtener_porcentaje_edad,
    obtener_porcentaje_mod40,
)


# ============================================================================
# ERRORES
# ============================================================================

class DatosInvalidosError(ValueError):
    """Entradas rechazadas antes de entrar al motor"""

    def __init__(self, errores: List[str]):
        self.errores = list(errores)
        super().__init__("; ".join(self.errores))


# ============================================================================
# CLASES DE ENTRADA
# ============================================================================

@dataclass(frozen=True)
class PerfilAsegurado:
    """Datos del asegurado para un cálculo"""
    edad_actual: int
    edad_retiro: int
    semanas_cotizadas: int
    salario_diario: float
    tiene_conyuge: bool = False
    hijos_menores_25: int = 0
    padres_dependientes: bool = False
    uma_base: float = UMA_VALOR_2025
    tasa_inflacion: float = INFLACION_ANUAL_DEFECTO  # porcentaje anual
    salario_minimo: float = SALARIO_MINIMO_2025


@dataclass(frozen=True)
class PlanModalidad40:
    """Estrategia de continuación voluntaria (Modalidad 40)"""
    activo: bool = False
    meses_inversion: int = 0
    meses_retroactivos: int = 0
    salario_en_umas: float = MOD40.SALARIO_MAX_UMAS
    edad_inicio: Optional[int] = None  # None: los pagos inician a la edad actual
    seguir_trabajando: bool = False


# ============================================================================
# CLASES DE RESULTADOS
# ============================================================================

@dataclass(frozen=True)
class DesglosePension:
    """Componentes anuales de la pensión antes del factor de edad"""
    cuantia_basica: float
    incrementos_anuales: float
    factor_fox: float
    asignacion_familiar: float
    es_soledad: bool


@dataclass(frozen=True)
class ResultadoPension:
    """Resultado del cálculo para un escenario"""
    pension_mensual: float
    pension_anual: float
    semanas_totales: int
    salario_promedio: float
    porcentaje_pension: float
    pension_minima_garantizada: bool
    desglose: DesglosePension


@dataclass(frozen=True)
class DesgloseInversion:
    """Costo total de la Modalidad 40"""
    total: float = 0.0
    pago_retroactivo: float = 0.0
    total_mensualidades: float = 0.0


@dataclass(frozen=True)
class PagoMensual:
    """Pago proyectado de un mes de Modalidad 40"""
    mes: int
    anio: int
    mes_calendario: int
    uma: float
    porcentaje_cuota: float
    pago: float


@dataclass(frozen=True)
class ResultadoComparacion:
    """Escenario actual contra escenario optimizado"""
    actual: ResultadoPension
    optimizado: ResultadoPension
    inversion: DesgloseInversion
    ganancia_mensual: float
    meses_equilibrio: Optional[float]  # None: la inversión no se recupera
    pagos_mensuales: List[PagoMensual] = field(default_factory=list)


# ============================================================================
# UTILIDADES
# ============================================================================

def _factor_inflacion(tasa_inflacion: float, anios: float) -> float:
    return (1 + tasa_inflacion / 100) ** anios


def _desplazar_mes(anio: int, mes: int, meses: int) -> Tuple[int, int]:
    """Mueve (año, mes) un número de meses hacia adelante o hacia atrás."""
    indice = anio * 12 + (mes - 1) + meses
    return indice // 12, indice % 12 + 1


def _anios_hasta_inicio(
    plan: PlanModalidad40,
    edad_actual: int,
    edad_retiro: Optional[int] = None
) -> int:
    edad_inicio = edad_actual if plan.edad_inicio is None else plan.edad_inicio
    if edad_retiro is not None:
        edad_inicio = min(edad_inicio, max(edad_retiro, edad_actual))
    return max(0, edad_inicio - edad_actual)


def _semanas_trabajo(perfil: PerfilAsegurado, plan: PlanModalidad40) -> int:
    """Semanas de empleo formal acumuladas hasta la edad de inicio del plan."""
    if not plan.seguir_trabajando:
        return 0
    anios = _anios_hasta_inicio(plan, perfil.edad_actual, perfil.edad_retiro)
    return math.floor(anios * LEY73.SEMANAS_POR_ANIO)


def _semanas_modalidad(plan: PlanModalidad40) -> int:
    """Semanas acreditadas por los pagos de Modalidad 40."""
    if not plan.activo:
        return 0
    meses = plan.meses_inversion + plan.meses_retroactivos
    # redondeo previo: 50 * 4.34 no debe quedar en 216.999...
    return math.floor(round(meses * LEY73.SEMANAS_POR_MES, 6))


def _porcentaje_asignaciones(perfil: PerfilAsegurado) -> Tuple[float, bool]:
    """
    Asignaciones familiares o ayuda por soledad (Art. 164 LSS 1973)

    Returns:
        (porcentaje, es_soledad)
    """
    porcentaje = 0.0

    if perfil.tiene_conyuge:
        porcentaje += LEY73.ASIGNACION_CONYUGE

    porcentaje += perfil.hijos_menores_25 * LEY73.ASIGNACION_HIJO

    # Sin esposa ni hijos: padres dependientes o ayuda por soledad
    if not perfil.tiene_conyuge and perfil.hijos_menores_25 == 0:
        if perfil.padres_dependientes:
            porcentaje += LEY73.ASIGNACION_PADRES
        else:
            return LEY73.AYUDA_SOLEDAD, True

    return porcentaje, False


def calcular_pension_minima(salario_minimo_proyectado: float) -> float:
    """Pensión mínima garantizada mensual a partir del salario mínimo diario."""
    return salario_minimo_proyectado * LEY73.DIAS_POR_MES * (1 + LEY73.FACTOR_FOX)


# ============================================================================
# CÁLCULO DE PENSIÓN
# ============================================================================

def calcular_pension(perfil: PerfilAsegurado, plan: PlanModalidad40) -> ResultadoPension:
    """
    Calcula la pensión mensual Ley 73 para un escenario

    El mismo cálculo sirve para ambos escenarios: con `plan.activo` en
    False se obtiene la pensión sin estrategia. Los montos se expresan en
    pesos nominales a la fecha de retiro.

    Args:
        perfil: Datos del asegurado
        plan: Estrategia de Modalidad 40 (activa o no)

    Returns:
        ResultadoPension con la pensión final y su desglose
    """
    anios_retiro = max(0, perfil.edad_retiro - perfil.edad_actual)
    factor_retiro = _factor_inflacion(perfil.tasa_inflacion, anios_retiro)
    uma_retiro = perfil.uma_base * factor_retiro
    salario_minimo_retiro = perfil.salario_minimo * factor_retiro

    # 1. Semanas totales
    semanas_mod40 = _semanas_modalidad(plan)
    semanas_totales = perfil.semanas_cotizadas + _semanas_trabajo(perfil, plan) + semanas_mod40

    # 2. Salario promedio (últimas 250 semanas)
    salario_promedio = perfil.salario_diario
    if plan.activo:
        anios_inicio = _anios_hasta_inicio(plan, perfil.edad_actual, perfil.edad_retiro)
        uma_inicio = perfil.uma_base * _factor_inflacion(perfil.tasa_inflacion, anios_inicio)
        salario_mod40 = plan.salario_en_umas * uma_inicio
        peso_mod40 = min(LEY73.VENTANA_PROMEDIO, semanas_mod40)
        peso_actual = LEY73.VENTANA_PROMEDIO - peso_mod40
        salario_promedio = (
            perfil.salario_diario * peso_actual + salario_mod40 * peso_mod40
        ) / LEY73.VENTANA_PROMEDIO

    # 3. Cuantía básica e incrementos
    ratio = salario_promedio / uma_retiro if uma_retiro > 0 else math.inf
    fila = obtener_fila_cuantia(ratio)
    cuantia_diaria = salario_promedio * fila.cuantia_basica / 100
    semanas_extra = max(0, semanas_totales - LEY73.SEMANAS_MINIMAS)
    total_incrementos = math.floor(semanas_extra / LEY73.SEMANAS_POR_INCREMENTO)
    incremento_diario = salario_promedio * fila.incremento_anual / 100

    cuantia_anual = cuantia_diaria * LEY73.DIAS_POR_ANIO
    incrementos_anuales = incremento_diario * LEY73.DIAS_POR_ANIO * total_incrementos
    pension_base_anual = cuantia_anual + incrementos_anuales

    # 4. Factor Fox (11%, decreto 2004)
    factor_fox = pension_base_anual * LEY73.FACTOR_FOX
    pension_base_anual += factor_fox

    # 5. Asignaciones familiares o ayuda por soledad
    porcentaje_familia, es_soledad = _porcentaje_asignaciones(perfil)
    asignacion_familiar = pension_base_anual * porcentaje_familia

    # 6. Factor de edad (cesantía / vejez)
    porcentaje_edad = obtener_porcentaje_edad(perfil.edad_retiro)
    total_anual = (pension_base_anual + asignacion_familiar) * porcentaje_edad

    # 7. Pensión mínima garantizada
    pension_minima = calcular_pension_minima(salario_minimo_retiro)
    pension_mensual = total_anual / 12
    minima_garantizada = pension_mensual < pension_minima
    if minima_garantizada:
        pension_mensual = pension_minima

    return ResultadoPension(
        pension_mensual=pension_mensual,
        pension_anual=pension_mensual * 12,
        semanas_totales=semanas_totales,
        salario_promedio=salario_promedio,
        porcentaje_pension=porcentaje_edad * 100,
        pension_minima_garantizada=minima_garantizada,
        desglose=DesglosePension(
            cuantia_basica=cuantia_anual,
            incrementos_anuales=incrementos_anuales,
            factor_fox=factor_fox,
            asignacion_familiar=asignacion_familiar,
            es_soledad=es_soledad,
        ),
    )


# ============================================================================
# COSTO DE LA MODALIDAD 40
# ============================================================================

def proyectar_pagos_mensuales(
    plan: PlanModalidad40,
    uma_base: float,
    tasa_inflacion: float,
    edad_actual: int,
    fecha_corte: date
) -> List[PagoMensual]:
    """
    Proyecta cada pago mensual futuro de la Modalidad 40

    La UMA se lleva a la edad de inicio del plan y se actualiza cada
    febrero posterior al primer pago; la cuota es la del año calendario
    de cada pago.
    """
    if not plan.activo:
        return []

    anios_inicio = _anios_hasta_inicio(plan, edad_actual)
    uma = uma_base * _factor_inflacion(tasa_inflacion, anios_inicio)
    anio, mes = fecha_corte.year + anios_inicio, fecha_corte.month

    pagos = []
    for indice in range(plan.meses_inversion):
        if indice > 0 and mes == MOD40.MES_ACTUALIZACION_UMA:
            uma *= 1 + tasa_inflacion / 100
        cuota = obtener_porcentaje_mod40(anio)
        pagos.append(PagoMensual(
            mes=indice + 1,
            anio=anio,
            mes_calendario=mes,
            uma=uma,
            porcentaje_cuota=cuota,
            pago=plan.salario_en_umas * uma * MOD40.DIAS_POR_MES * cuota,
        ))
        anio, mes = _desplazar_mes(anio, mes, 1)

    return pagos


def calcular_costo_inversion(
    plan: PlanModalidad40,
    uma_base: float,
    tasa_inflacion: float,
    edad_actual: int,
    fecha_corte: date,
    deflactar_retroactivo: bool = True
) -> DesgloseInversion:
    """
    Calcula el costo total de la Modalidad 40

    Args:
        plan: Estrategia de Modalidad 40
        uma_base: Valor vigente de la UMA
        tasa_inflacion: Inflación anual en porcentaje
        edad_actual: Edad del asegurado a la fecha de corte
        fecha_corte: Fecha a partir de la cual se cuentan los meses
        deflactar_retroactivo: Reduce la UMA un año de inflación por cada
            cambio de año calendario en los meses retroactivos

    Returns:
        DesgloseInversion con el pago retroactivo y las mensualidades
    """
    if not plan.activo:
        return DesgloseInversion()

    inflacion = tasa_inflacion / 100
    # los meses atrasados se pagan con la cuota del año en curso
    cuota_vigente = obtener_porcentaje_mod40(fecha_corte.year)

    pago_retroactivo = 0.0
    anio, mes = fecha_corte.year, fecha_corte.month
    uma = uma_base
    for atraso in range(1, plan.meses_retroactivos + 1):
        anio_previo = anio
        anio, mes = _desplazar_mes(anio, mes, -1)
        if deflactar_retroactivo and anio < anio_previo:
            uma /= 1 + inflacion

        base_mensual = plan.salario_en_umas * uma * MOD40.DIAS_POR_MES * cuota_vigente
        recargos = base_mensual * MOD40.RECARGO_MENSUAL * atraso
        actualizacion = base_mensual * (inflacion / 12) * atraso
        pago_retroactivo += base_mensual + recargos + actualizacion

    pagos = proyectar_pagos_mensuales(plan, uma_base, tasa_inflacion, edad_actual, fecha_corte)
    total_mensualidades = sum(pago.pago for pago in pagos)

    return DesgloseInversion(
        total=pago_retroactivo + total_mensualidades,
        pago_retroactivo=pago_retroactivo,
        total_mensualidades=total_mensualidades,
    )


def calcular_meses_equilibrio(total_inversion: float, ganancia_mensual: float) -> Optional[float]:
    """Meses para recuperar la inversión; None si la ganancia no es positiva."""
    if ganancia_mensual <= 0:
        return None
    return total_inversion / ganancia_mensual


# ============================================================================
# COMPARACIÓN DE ESCENARIOS
# ============================================================================

def comparar_escenarios(
    perfil: PerfilAsegurado,
    plan: PlanModalidad40,
    fecha_corte: date
) -> ResultadoComparacion:
    """
    Calcula el escenario actual (plan desactivado) y el optimizado
    (plan tal como se recibe) a partir del mismo perfil
    """
    actual = calcular_pension(perfil, replace(plan, activo=False))
    optimizado = calcular_pension(perfil, plan)
    inversion = calcular_costo_inversion(
        plan, perfil.uma_base, perfil.tasa_inflacion, perfil.edad_actual, fecha_corte
    )

    ganancia_mensual = optimizado.pension_mensual - actual.pension_mensual

    return ResultadoComparacion(
        actual=actual,
        optimizado=optimizado,
        inversion=inversion,
        ganancia_mensual=ganancia_mensual,
        meses_equilibrio=calcular_meses_equilibrio(inversion.total, ganancia_mensual),
        pagos_mensuales=proyectar_pagos_mensuales(
            plan, perfil.uma_base, perfil.tasa_inflacion, perfil.edad_actual, fecha_corte
        ),
    )


def comparacion_a_dict(comparacion: ResultadoComparacion) -> Dict:
    """Diccionario listo para JSON; meses_equilibrio queda en None si no aplica."""
    return asdict(comparacion)


# ============================================================================
# VALIDACIÓN DE ENTRADAS
# ============================================================================

def _revisar_numeros(valores: Dict[str, float], errores: List[str]) -> None:
    for nombre, valor in valores.items():
        if not math.isfinite(valor):
            errores.append(f"{nombre} debe ser un número finito")
        elif valor < 0:
            errores.append(f"{nombre} no puede ser negativo")


def validar_perfil(perfil: PerfilAsegurado) -> None:
    """
    Valida el perfil antes de llamar al motor

    Raises:
        DatosInvalidosError: con la lista completa de reglas incumplidas
    """
    errores: List[str] = []
    _revisar_numeros({
        "edad_actual": perfil.edad_actual,
        "edad_retiro": perfil.edad_retiro,
        "semanas_cotizadas": perfil.semanas_cotizadas,
        "salario_diario": perfil.salario_diario,
        "hijos_menores_25": perfil.hijos_menores_25,
        "uma_base": perfil.uma_base,
        "tasa_inflacion": perfil.tasa_inflacion,
        "salario_minimo": perfil.salario_minimo,
    }, errores)

    if perfil.edad_retiro < perfil.edad_actual:
        errores.append("edad_retiro no puede ser menor que edad_actual")
    if perfil.edad_retiro not in LEY73.EDADES_RETIRO:
        errores.append(
            f"edad_retiro debe estar entre {LEY73.EDADES_RETIRO[0]} y {LEY73.EDADES_RETIRO[-1]}"
        )
    if perfil.salario_diario <= 0:
        errores.append("salario_diario debe ser mayor que cero")
    if perfil.uma_base <= 0:
        errores.append("uma_base debe ser mayor que cero")
    if perfil.salario_minimo <= 0:
        errores.append("salario_minimo debe ser mayor que cero")

    if errores:
        raise DatosInvalidosError(errores)


def validar_plan(plan: PlanModalidad40, perfil: Optional[PerfilAsegurado] = None) -> None:
    """
    Valida la estrategia de Modalidad 40; con perfil, revisa también la edad de inicio

    Raises:
        DatosInvalidosError: con la lista completa de reglas incumplidas
    """
    errores: List[str] = []
    _revisar_numeros({
        "meses_inversion": plan.meses_inversion,
        "meses_retroactivos": plan.meses_retroactivos,
        "salario_en_umas": plan.salario_en_umas,
    }, errores)

    if not MOD40.SALARIO_MIN_UMAS <= plan.salario_en_umas <= MOD40.SALARIO_MAX_UMAS:
        errores.append(
            f"salario_en_umas debe estar entre {MOD40.SALARIO_MIN_UMAS:g} y {MOD40.SALARIO_MAX_UMAS:g}"
        )

    for nombre in ("meses_inversion", "meses_retroactivos"):
        if getattr(plan, nombre) > MOD40.MESES_MAXIMOS:
            errores.append(f"{nombre} no puede exceder {MOD40.MESES_MAXIMOS} meses")

    if perfil is not None and plan.edad_inicio is not None:
        if not perfil.edad_actual <= plan.edad_inicio <= perfil.edad_retiro:
            errores.append("edad_inicio debe estar entre edad_actual y edad_retiro")

    if errores:
        raise DatosInvalidosError(errores)
