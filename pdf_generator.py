import io
import datetime
from xml.sax.saxutils import escape

from matplotlib.figure import Figure
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.units import cm
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Frame, Table, TableStyle, Paragraph
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle

from calculadora_pension import DesglosePension, PerfilAsegurado, ResultadoComparacion


# =============================
#     COLORES
# =============================

PRIMARY = colors.HexColor("#0F766E")
PRIMARY_DARK = colors.HexColor("#134E4A")
BLACK = colors.HexColor("#1E293B")
WHITE = colors.white
PRIMARY_LIGHT = colors.HexColor("#CCFBF1")
ZEBRA = colors.HexColor("#F0FDFA")

MARGEN_INFERIOR = 2 * cm

COLORES_GRAFICA = ["#0F766E", "#0D9488", "#2DD4BF", "#99F6E4"]

styles = getSampleStyleSheet()

text_style = ParagraphStyle(
    "Body",
    parent=styles["BodyText"],
    fontName="Helvetica",
    fontSize=11,
    leading=15,
    textColor=BLACK,
)


def _pesos(valor):
    return f"${valor:,.0f}"


def _texto_equilibrio(meses):
    if meses is None:
        return "No se recupera"
    return f"{meses:,.0f} meses ({meses / 12:.1f} años)"


def _figura_a_imagen(fig):
    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=200, bbox_inches="tight")
    buffer.seek(0)
    return ImageReader(buffer)


# =============================
#  GRÁFICAS
# =============================

def crear_grafica_comparacion(pension_actual, pension_optimizada):
    fig = Figure(figsize=(5.8, 3))
    ax = fig.subplots()

    barras = ["Base", "Optimizado"]
    valores = [pension_actual, pension_optimizada]

    ax.bar(barras, valores, color=COLORES_GRAFICA[:2], width=0.55)

    for i, v in enumerate(valores):
        ax.text(i, v * 1.03, _pesos(v), ha="center", fontsize=10, fontweight="bold")

    ax.set_title("Pensión mensual proyectada", fontsize=14, fontweight="bold")
    ax.set_ylabel("Pesos al retiro")
    ax.grid(axis="y", linestyle="--", alpha=0.35)

    return _figura_a_imagen(fig)


def crear_grafica_desglose(desglose: DesglosePension):
    etiqueta_familia = "Ayuda soledad" if desglose.es_soledad else "Asignaciones"
    etiquetas = ["Cuantía básica", "Incrementos", etiqueta_familia, "Factor Fox"]
    valores = [
        desglose.cuantia_basica,
        desglose.incrementos_anuales,
        desglose.asignacion_familiar,
        desglose.factor_fox,
    ]

    fig = Figure(figsize=(5, 3.2))
    ax = fig.subplots()
    ax.pie(valores, labels=etiquetas, colors=COLORES_GRAFICA, autopct="%1.0f%%",
           startangle=90, wedgeprops={"width": 0.45})
    ax.set_title("Composición anual (escenario optimizado)", fontsize=12, fontweight="bold")

    return _figura_a_imagen(fig)


def crear_grafica_pagos(pagos):
    fig = Figure(figsize=(5.8, 3))
    ax = fig.subplots()

    ax.plot([p.mes for p in pagos], [p.pago for p in pagos], color=COLORES_GRAFICA[0], linewidth=2)
    ax.set_title("Pago mensual de Modalidad 40", fontsize=14, fontweight="bold")
    ax.set_xlabel("Meses de inversión")
    ax.set_ylabel("Pesos")
    ax.grid(linestyle="--", alpha=0.35)

    return _figura_a_imagen(fig)


# =============================
#  TABLA
# =============================

def estilo_tabla(filas, fila_resaltada=None):
    """
    Encabezado en color, filas alternadas y, opcionalmente, una fila de
    total en negritas sobre fondo claro.
    """
    comandos = [
        ("BACKGROUND", (0, 0), (-1, 0), PRIMARY),
        ("TEXTCOLOR", (0, 0), (-1, 0), WHITE),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 11),
        ("ALIGN", (0, 0), (-1, 0), "CENTER"),

        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [WHITE, ZEBRA]),
        ("TEXTCOLOR", (0, 1), (-1, -1), BLACK),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 1), (-1, -1), 10),
        ("ALIGN", (1, 1), (-1, -1), "RIGHT"),

        ("LINEBELOW", (0, 0), (-1, -1), 0.25, PRIMARY_LIGHT),
        ("BOX", (0, 0), (-1, -1), 0.5, PRIMARY_DARK),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
    ]

    if fila_resaltada is not None and 0 < fila_resaltada < filas:
        comandos += [
            ("BACKGROUND", (0, fila_resaltada), (-1, fila_resaltada), PRIMARY_LIGHT),
            ("FONTNAME", (0, fila_resaltada), (-1, fila_resaltada), "Helvetica-Bold"),
            ("LINEABOVE", (0, fila_resaltada), (-1, fila_resaltada), 1, PRIMARY_DARK),
        ]

    return TableStyle(comandos)


def construir_tabla(datos, anchos=None, fila_resaltada=None):
    tabla = Table(datos, colWidths=anchos)
    tabla.setStyle(estilo_tabla(len(datos), fila_resaltada))
    return tabla


def _dibujar_parrafo(c, html, x, y, width, height):
    parrafo = Paragraph(html, text_style)
    _, alto = parrafo.wrapOn(c, width, height)
    parrafo.drawOn(c, x, y - alto)


def _titulo(c, texto, height):
    c.setFont("Helvetica-Bold", 18)
    c.setFillColor(PRIMARY)
    c.drawString(2 * cm, height - 2.5 * cm, texto)


def dibujar_consejo(c, consejo, y, width, height):
    """
    Dibuja el análisis desde `y` hacia abajo y abre páginas nuevas mientras
    quede texto.

    Returns:
        (paginas_usadas, y_final) con y_final >= MARGEN_INFERIOR
    """
    lineas = escape(consejo).split("\n")
    story = [Paragraph("<b>Análisis:</b>", text_style)]
    story += [Paragraph(linea or "&nbsp;", text_style) for linea in lineas]

    paginas = 1
    frame = Frame(2 * cm, MARGEN_INFERIOR, width - 4 * cm, y - MARGEN_INFERIOR,
                  leftPadding=0, rightPadding=0, topPadding=0, bottomPadding=0)
    frame.addFromList(story, c)

    while story:
        c.showPage()
        paginas += 1
        _titulo(c, "Análisis (continuación)", height)
        frame = Frame(2 * cm, MARGEN_INFERIOR, width - 4 * cm,
                      height - 3.5 * cm - MARGEN_INFERIOR,
                      leftPadding=0, rightPadding=0, topPadding=0, bottomPadding=0)
        pendientes = len(story)
        frame.addFromList(story, c)
        if len(story) == pendientes and frame._atTop:
            raise ValueError("el análisis contiene un bloque que no cabe en una página")

    return paginas, frame._y


# =============================
#  PÁGINA 1 : PORTADA
# =============================

def draw_cover_page(c, width, height, anio):
    path = c.beginPath()
    path.moveTo(0, height)
    path.lineTo(width, height - 3 * cm)
    path.lineTo(width, height)
    path.lineTo(0, height)
    path.close()

    c.setFillColor(PRIMARY)
    c.drawPath(path, fill=1, stroke=0)

    c.setFillColor(BLACK)
    c.setFont("Helvetica-Bold", 26)
    c.drawString(1.5 * cm, height - 8.5 * cm, "Estudio de pensión IMSS Ley 73")

    c.setFont("Helvetica", 15)
    c.drawString(1.5 * cm, height - 10 * cm,
                 "Escenario actual · Modalidad 40 · Costo y recuperación")

    c.setFont("Helvetica-Oblique", 12)
    c.drawString(1.5 * cm, height - 11.5 * cm, f"Reporte {anio}")

    c.setFillColor(PRIMARY_DARK)
    c.rect(0, 0, width, 20, fill=True, stroke=False)

    c.showPage()


# =============================
#     FUNCIÓN PRINCIPAL
# =============================

def generar_pdf_comparacion(
    perfil: PerfilAsegurado,
    comparacion: ResultadoComparacion,
    consejo=None,
    output=None,
    fecha_reporte=None,
):
    """
    Genera el reporte PDF de una comparación.

    `output` puede ser una ruta o un objeto tipo archivo (BytesIO); se
    devuelve tal cual al terminar.
    """
    fecha_reporte = fecha_reporte or datetime.date.today()
    actual = comparacion.actual
    optimizado = comparacion.optimizado
    inversion = comparacion.inversion

    if output is None:
        output = f"reporte_mod40_{fecha_reporte:%Y%m%d}.pdf"

    c = canvas.Canvas(output, pagesize=A4)
    width, height = A4

    # --- PÁGINA 1 : PORTADA ---
    draw_cover_page(c, width, height, fecha_reporte.year)

    # --- PÁGINA 2 : RESUMEN ---
    _titulo(c, "Resumen de su situación", height)

    resumen = [
        ["Concepto", "Actual", "Modalidad 40"],
        ["Pensión mensual", _pesos(actual.pension_mensual), _pesos(optimizado.pension_mensual)],
        ["Semanas cotizadas", f"{actual.semanas_totales}", f"{optimizado.semanas_totales}"],
        ["Salario promedio diario", _pesos(actual.salario_promedio), _pesos(optimizado.salario_promedio)],
        ["Porcentaje por edad", f"{actual.porcentaje_pension:.0f}%", f"{optimizado.porcentaje_pension:.0f}%"],
        ["Pensión mínima garantizada",
         "Sí" if actual.pension_minima_garantizada else "No",
         "Sí" if optimizado.pension_minima_garantizada else "No"],
    ]

    table = construir_tabla(resumen, anchos=[6.5 * cm, 4.5 * cm, 4.5 * cm], fila_resaltada=1)
    table.wrapOn(c, width, height)
    table.drawOn(c, 2 * cm, height - 10 * cm)

    inversion_tabla = [
        ["Inversión", "Monto"],
        ["Pago retroactivo", _pesos(inversion.pago_retroactivo)],
        ["Mensualidades", _pesos(inversion.total_mensualidades)],
        ["Recuperación", _texto_equilibrio(comparacion.meses_equilibrio)],
        ["Total", _pesos(inversion.total)],
    ]

    table = construir_tabla(inversion_tabla, anchos=[6.5 * cm, 9 * cm],
                            fila_resaltada=len(inversion_tabla) - 1)
    table.wrapOn(c, width, height)
    table.drawOn(c, 2 * cm, height - 16 * cm)

    _dibujar_parrafo(
        c,
        f"""
        Con {perfil.semanas_cotizadas} semanas y retiro a los {perfil.edad_retiro} años,
        su pensión estimada es de <b>{_pesos(actual.pension_mensual)}/mes</b>.
        Con Modalidad 40 pasaría a <b>{_pesos(optimizado.pension_mensual)}/mes</b>,
        una diferencia de <b>{_pesos(comparacion.ganancia_mensual)}/mes</b>.<br/>
        Montos en pesos nominales a la fecha de retiro.
        """,
        2 * cm, height - 17 * cm, width - 4 * cm, height,
    )

    c.showPage()

    # --- PÁGINA 3 : GRÁFICAS ---
    _titulo(c, "Análisis visual", height)

    c.drawImage(crear_grafica_comparacion(actual.pension_mensual, optimizado.pension_mensual),
                2 * cm, height - 12 * cm, width=14 * cm, height=7.2 * cm,
                preserveAspectRatio=True)
    c.drawImage(crear_grafica_desglose(optimizado.desglose),
                2 * cm, height - 22 * cm, width=14 * cm, height=9 * cm,
                preserveAspectRatio=True)

    c.showPage()

    # --- PÁGINA 4 : PAGOS Y RECOMENDACIÓN ---
    if comparacion.pagos_mensuales or consejo:
        _titulo(c, "Plan de pagos y recomendación", height)
        y = height - 3.5 * cm

        if comparacion.pagos_mensuales:
            c.drawImage(crear_grafica_pagos(comparacion.pagos_mensuales),
                        2 * cm, y - 7.2 * cm, width=14 * cm, height=7.2 * cm,
                        preserveAspectRatio=True)
            y -= 8.5 * cm

        if consejo:
            dibujar_consejo(c, consejo, y, width, height)

        c.showPage()

    c.save()

    return output
