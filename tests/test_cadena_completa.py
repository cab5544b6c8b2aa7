import io
from datetime import date

from calculadora_pension import PerfilAsegurado, PlanModalidad40, comparar_escenarios
from pdf_generator import generar_pdf_comparacion

perfil_prueba = PerfilAsegurado(
    edad_actual=57,
    edad_retiro=62,
    semanas_cotizadas=820,
    salario_diario=650,
    tiene_conyuge=True,
    hijos_menores_25=1,
)


def test_cadena_completa_a_archivo(tmp_path):
    plan = PlanModalidad40(activo=True, meses_inversion=48, meses_retroactivos=3, salario_en_umas=20)
    comparacion = comparar_escenarios(perfil_prueba, plan, date(2025, 6, 1))
    destino = tmp_path / "reporte.pdf"

    resultado = generar_pdf_comparacion(
        perfil_prueba,
        comparacion,
        consejo="La inversión se recupera antes de los 75 años.\nConviene iniciar pronto.",
        output=str(destino),
        fecha_reporte=date(2025, 6, 1),
    )

    assert resultado == str(destino)
    assert destino.read_bytes().startswith(b"%PDF")


def test_cadena_completa_sin_plan_en_memoria():
    comparacion = comparar_escenarios(perfil_prueba, PlanModalidad40(), date(2025, 6, 1))
    buffer = io.BytesIO()

    generar_pdf_comparacion(perfil_prueba, comparacion, output=buffer, fecha_reporte=date(2025, 6, 1))

    assert comparacion.meses_equilibrio is None
    assert buffer.getvalue().startswith(b"%PDF")
