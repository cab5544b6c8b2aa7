import io
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import matplotlib.pyplot as plt
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from calculadora_pension import PerfilAsegurado, PlanModalidad40, comparar_escenarios
from pdf_generator import (
    MARGEN_INFERIOR,
    crear_grafica_comparacion,
    crear_grafica_desglose,
    crear_grafica_pagos,
    dibujar_consejo,
    estilo_tabla,
    generar_pdf_comparacion,
)

WIDTH, HEIGHT = A4
# posición del análisis debajo de la gráfica de pagos
Y_BAJO_GRAFICA = HEIGHT - 12 * cm

perfil = PerfilAsegurado(edad_actual=55, edad_retiro=60, semanas_cotizadas=1000, salario_diario=400)
comparacion = comparar_escenarios(
    perfil,
    PlanModalidad40(activo=True, meses_inversion=60, salario_en_umas=25),
    date(2025, 3, 1),
)

consejo_largo = "\n".join(
    "Conviene revisar la fecha de inicio y el salario registrado antes de pagar. " * 3
    for _ in range(16)
) + " FIN"


def test_consejo_corto_cabe_en_la_pagina():
    c = canvas.Canvas(io.BytesIO(), pagesize=A4)

    paginas, y_final = dibujar_consejo(c, "Conviene invertir.", Y_BAJO_GRAFICA, WIDTH, HEIGHT)

    assert paginas == 1
    assert MARGEN_INFERIOR <= y_final < Y_BAJO_GRAFICA


def test_consejo_largo_continua_en_otra_pagina():
    assert len(consejo_largo) <= 4000
    c = canvas.Canvas(io.BytesIO(), pagesize=A4)

    paginas, y_final = dibujar_consejo(c, consejo_largo, Y_BAJO_GRAFICA, WIDTH, HEIGHT)

    assert paginas == 2
    assert MARGEN_INFERIOR <= y_final <= HEIGHT


def test_reporte_con_consejo_largo():
    buffer = io.BytesIO()

    generar_pdf_comparacion(perfil, comparacion, consejo=consejo_largo, output=buffer,
                            fecha_reporte=date(2025, 3, 1))

    assert buffer.getvalue().startswith(b"%PDF")


def test_graficas_no_usan_registro_de_pyplot():
    antes = plt.get_fignums()

    imagenes = [
        crear_grafica_comparacion(11000.0, 39000.0),
        crear_grafica_desglose(comparacion.optimizado.desglose),
        crear_grafica_pagos(comparacion.pagos_mensuales),
    ]

    assert plt.get_fignums() == antes
    assert all(isinstance(imagen, ImageReader) for imagen in imagenes)


def test_graficas_en_hilos_concurrentes():
    def generar(indice):
        return crear_grafica_comparacion(1000.0 * indice, 2000.0 * indice).getSize()

    antes = plt.get_fignums()
    with ThreadPoolExecutor(max_workers=8) as pool:
        tamanos = list(pool.map(generar, range(1, 17)))

    assert len(tamanos) == 16
    assert all(ancho > 0 and alto > 0 for ancho, alto in tamanos)
    assert plt.get_fignums() == antes


def test_estilo_tabla_resalta_fila_total():
    comandos = estilo_tabla(5, fila_resaltada=4).getCommands()

    assert ("FONTNAME", (0, 4), (-1, 4), "Helvetica-Bold") in comandos


def test_estilo_tabla_ignora_fila_fuera_de_rango():
    sin_resaltar = estilo_tabla(3).getCommands()

    assert estilo_tabla(3, fila_resaltada=0).getCommands() == sin_resaltar
    assert estilo_tabla(3, fila_resaltada=7).getCommands() == sin_resaltar
