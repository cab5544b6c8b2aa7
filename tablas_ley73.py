"""
Tablas legales IMSS Ley 73 y Modalidad 40 (vigentes 2025)
Datos estáticos y sus búsquedas, sin lógica de cálculo
"""

from typing import Dict, NamedTuple, Tuple
from dataclasses import dataclass, field


# ============================================================================
# VALORES DE REFERENCIA 2025
# ============================================================================

# Valor de la UMA oficial (vigente desde febrero 2025)
UMA_VALOR_2025 = 113.43

# Salario mínimo general 2025 (resto del país)
SALARIO_MINIMO_2025 = 278.80

# Inflación anual promedio estimada, en porcentaje
INFLACION_ANUAL_DEFECTO = 4.5


# ============================================================================
# CONSTANTES LEY 73 / MODALIDAD 40
# ============================================================================

@dataclass(frozen=True)
class ConfigLey73:
    """Constantes del cálculo de pensión (Ley del Seguro Social 1973)"""
    SEMANAS_MINIMAS: int = 500
    SEMANAS_POR_INCREMENTO: int = 52
    VENTANA_PROMEDIO: int = 250
    SEMANAS_POR_ANIO: int = 52
    SEMANAS_POR_MES: float = 4.34
    DIAS_POR_ANIO: int = 365
    DIAS_POR_MES: float = 30.41
    FACTOR_FOX: float = 0.11
    ASIGNACION_CONYUGE: float = 0.15
    ASIGNACION_HIJO: float = 0.10
    ASIGNACION_PADRES: float = 0.10
    AYUDA_SOLEDAD: float = 0.15
    EDADES_RETIRO: Tuple[int, ...] = (60, 61, 62, 63, 64, 65)


@dataclass(frozen=True)
class ConfigMod40:
    """Constantes del costo de Modalidad 40"""
    DIAS_POR_MES: float = 30.4
    RECARGO_MENSUAL: float = 0.0147
    SALARIO_MIN_UMAS: float = 1.0
    SALARIO_MAX_UMAS: float = 25.0
    MES_ACTUALIZACION_UMA: int = 2  # la UMA se actualiza cada febrero
    MESES_MAXIMOS: int = 600  # tope por plan, para meses futuros y retroactivos
    CUOTAS: Dict[int, float] = field(default_factory=lambda: {
        2022: 0.10075,
        2023: 0.11166,
        2024: 0.12256,
        2025: 0.13347,
        2026: 0.14438,
        2027: 0.15529,
        2028: 0.16620,
        2029: 0.17711,
        2030: 0.18800,
    })


# Instancias globales
LEY73 = ConfigLey73()
MOD40 = ConfigMod40()


# ============================================================================
# TABLA ARTÍCULO 167: CUANTÍA BÁSICA E INCREMENTO ANUAL
# ============================================================================

class FilaCuantia(NamedTuple):
    """Renglón de la tabla: tope en veces la UMA y porcentajes aplicables"""
    tope: float
    cuantia_basica: float
    incremento_anual: float


TABLA_CUANTIA: Tuple[FilaCuantia, ...] = (
    FilaCuantia(1.00, 80.00, 0.563),
    FilaCuantia(1.25, 77.11, 0.814),
    FilaCuantia(1.50, 58.18, 1.178),
    FilaCuantia(1.75, 49.23, 1.430),
    FilaCuantia(2.00, 42.67, 1.615),
    FilaCuantia(2.25, 37.65, 1.756),
    FilaCuantia(2.50, 33.68, 1.868),
    FilaCuantia(2.75, 30.48, 1.958),
    FilaCuantia(3.00, 27.83, 2.033),
    FilaCuantia(3.25, 25.60, 2.096),
    FilaCuantia(3.50, 23.70, 2.149),
    FilaCuantia(3.75, 22.07, 2.195),
    FilaCuantia(4.00, 20.65, 2.235),
    FilaCuantia(4.25, 19.39, 2.271),
    FilaCuantia(4.50, 18.29, 2.302),
    FilaCuantia(4.75, 17.30, 2.330),
    FilaCuantia(5.00, 16.41, 2.355),
    FilaCuantia(5.25, 15.61, 2.378),
    FilaCuantia(5.50, 14.88, 2.399),
    FilaCuantia(5.75, 14.22, 2.418),
    FilaCuantia(6.00, 13.62, 2.435),
)

# Porcentaje de la pensión según la edad de retiro (cesantía / vejez)
PORCENTAJE_POR_EDAD: Dict[int, float] = {
    60: 0.75,
    61: 0.80,
    62: 0.85,
    63: 0.90,
    64: 0.95,
    65: 1.00,
}


# ============================================================================
# BÚSQUEDAS
# ============================================================================

def obtener_fila_cuantia(ratio: float) -> FilaCuantia:
    """
    Obtiene los porcentajes de cuantía básica e incremento anual

    Args:
        ratio: Salario promedio diario dividido entre la UMA

    Returns:
        Primer renglón cuyo tope cubre el ratio; el último renglón
        si el ratio rebasa todos los topes
    """
    for fila in TABLA_CUANTIA:
        if ratio <= fila.tope:
            return fila
    return TABLA_CUANTIA[-1]


def obtener_porcentaje_edad(edad: int) -> float:
    """Porcentaje de pensión por edad; 100% fuera de la tabla 60-65."""
    return PORCENTAJE_POR_EDAD.get(edad, 1.0)


def obtener_porcentaje_mod40(anio: int) -> float:
    """
    Cuota de Modalidad 40 para un año calendario

    Los años anteriores al primero conocido usan la cuota inicial y los
    posteriores al último usan la cuota final.
    """
    if anio in MOD40.CUOTAS:
        return MOD40.CUOTAS[anio]
    if anio < min(MOD40.CUOTAS):
        return MOD40.CUOTAS[min(MOD40.CUOTAS)]
    return MOD40.CUOTAS[max(MOD40.CUOTAS)]
