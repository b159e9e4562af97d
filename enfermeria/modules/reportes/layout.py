"""
Diagramación de los reportes PDF.

Las páginas se describen como datos: cada página es una lista de
`Elemento` (texto) e `Imagen` con coordenadas en puntos medidas desde la
esquina superior izquierda. `pdf.renderizar` dibuja cualquier documento
descrito así.
"""
from typing import List, Optional, Tuple, Union
from pydantic import BaseModel, Field
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.utils import ImageReader
from io import BytesIO
import base64
import binascii
import logging

logger = logging.getLogger(__name__)

COLOR_TITULO = "#007A4D"
COLOR_SECCION = "#00AEEF"
COLOR_TEXTO = "#333333"

TEXTO_SIN_FIRMA = "(Firma no disponible)"
SIN_ADICIONES = "Ninguna"


class Elemento(BaseModel):
    texto: str
    x: float
    y: float
    alineacion: str = "left"
    ancho: Optional[float] = None
    fuente: str = "Helvetica"
    tamano: float = 10
    color: str = COLOR_TEXTO


class Imagen(BaseModel):
    datos: bytes
    x: float
    y: float
    ancho: float
    alto: float


class Pagina(BaseModel):
    elementos: List[Union[Imagen, Elemento]] = Field(default_factory=list)

    def textos(self) -> List[str]:
        return [e.texto for e in self.elementos if isinstance(e, Elemento)]


class DocumentoLayout(BaseModel):
    titulo: str
    tamano: Tuple[float, float]
    paginas: List[Pagina] = Field(default_factory=list)


class Columna(BaseModel):
    campo: str
    titulo: str
    x: float
    alineacion: str = "left"
    ancho: Optional[float] = None


# Reporte general (A4 horizontal)
MARGEN_GENERAL = 30
COLUMNAS_GENERAL = [
    Columna(campo="fecha", titulo="Fecha", x=50),
    Columna(campo="hora", titulo="Hora", x=100),
    Columna(campo="nombre_paciente", titulo="Paciente", x=170, ancho=60),
    Columna(campo="nombre_auxiliar", titulo="Auxiliar", x=240, ancho=70),
    Columna(campo="concepto", titulo="Concepto", x=310, ancho=80),
    Columna(campo="actividades_adicionales", titulo="Actividades Ad.", x=390, ancho=80),
    Columna(campo="precio", titulo="Base ($)", x=480, alineacion="right", ancho=80),
    Columna(campo="total", titulo="Total ($)", x=570, alineacion="right", ancho=80),
]
Y_ENCABEZADO_GENERAL = 70
Y_INICIO_PAGINA = 50
ALTO_FILA = 20
LIMITE_INFERIOR = 550

# Reporte individual (A4 vertical)
MARGEN_INDIVIDUAL = 50
ANCHO_FIRMA = 200
ALTO_FIRMA = 80
SANGRIA_ACTIVIDAD = 15


def formato_moneda(valor) -> str:
    """20000 -> '20.000'; 1234.5 -> '1.234,50'"""
    numero = float(valor or 0)
    texto = f"{numero:,.0f}" if numero.is_integer() else f"{numero:,.2f}"
    return texto.replace(",", "_").replace(".", ",").replace("_", ".")


def resumen_actividades(actividades: Optional[list]) -> str:
    # La primera actividad no cuenta como adición
    cantidad = len(actividades or [])
    return f"{cantidad - 1} adiciones" if cantidad > 1 else SIN_ADICIONES


def total_servicio(servicio: dict) -> float:
    return (servicio.get("precio") or 0) + sum(
        a.get("precio") or 0 for a in servicio.get("actividades") or []
    )


def decodificar_firma(firma: Optional[str]) -> Optional[bytes]:
    """
    Acepta una data URL (`data:image/png;base64,...`) o base64 plano.
    Devuelve None si no hay firma o no es una imagen legible.
    """
    if not firma:
        return None
    contenido = firma.split(",", 1)[1] if firma.startswith("data:") else firma
    try:
        datos = base64.b64decode(contenido, validate=True)
        ImageReader(BytesIO(datos)).getSize()
        return datos
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Firma con codificación inválida: {e}")
    except Exception as e:
        logger.warning(f"Firma no es una imagen legible: {e}")
    return None


def _fila(servicio: dict, y: float) -> List[Elemento]:
    valores = {
        "fecha": servicio.get("fecha") or "",
        "hora": servicio.get("hora") or "",
        "nombre_paciente": servicio.get("nombre_paciente") or "",
        "nombre_auxiliar": servicio.get("nombre_auxiliar") or "",
        "concepto": servicio.get("concepto") or "",
        "actividades_adicionales": resumen_actividades(servicio.get("actividades")),
        "precio": formato_moneda(servicio.get("precio")),
        "total": formato_moneda(total_servicio(servicio)),
    }
    return [
        Elemento(texto=str(valores[c.campo]), x=c.x, y=y, alineacion=c.alineacion, ancho=c.ancho)
        for c in COLUMNAS_GENERAL
    ]


def _encabezado(y: float) -> List[Elemento]:
    return [
        Elemento(
            texto=c.titulo, x=c.x, y=y, alineacion=c.alineacion, ancho=c.ancho,
            fuente="Helvetica-Bold", color=COLOR_SECCION
        )
        for c in COLUMNAS_GENERAL
    ]


def layout_reporte_general(servicios: List[dict]) -> DocumentoLayout:
    """
    Tabla de todos los servicios. Cuando la fila siguiente quedaría por
    debajo de LIMITE_INFERIOR se abre una página nueva y se repite el
    encabezado.
    """
    tamano = landscape(A4)
    ancho_util = tamano[0] - 2 * MARGEN_GENERAL
    documento = DocumentoLayout(titulo="Reporte General de Servicios", tamano=tamano)

    pagina = Pagina()
    pagina.elementos.append(Elemento(
        texto="Reporte General de Servicios", x=MARGEN_GENERAL, y=MARGEN_GENERAL,
        alineacion="center", ancho=ancho_util, fuente="Helvetica-Bold", tamano=16, color=COLOR_TITULO
    ))
    pagina.elementos.extend(_encabezado(Y_ENCABEZADO_GENERAL))
    documento.paginas.append(pagina)

    total_general = 0.0
    y = Y_ENCABEZADO_GENERAL + ALTO_FILA

    for servicio in servicios:
        pagina.elementos.extend(_fila(servicio, y))
        total_general += total_servicio(servicio)

        y += ALTO_FILA
        if y > LIMITE_INFERIOR:
            pagina = Pagina()
            documento.paginas.append(pagina)
            y = Y_INICIO_PAGINA
            pagina.elementos.extend(_encabezado(y))
            y += ALTO_FILA

    y += ALTO_FILA
    if y > LIMITE_INFERIOR:
        pagina = Pagina()
        documento.paginas.append(pagina)
        y = Y_INICIO_PAGINA

    pagina.elementos.append(Elemento(
        texto=f"TOTAL RECAUDADO (General): ${formato_moneda(total_general)}",
        x=MARGEN_GENERAL, y=y, alineacion="right", ancho=ancho_util,
        fuente="Helvetica-Bold", tamano=14, color=COLOR_TITULO
    ))
    return documento


class _Cursor:
    """Posición vertical del reporte individual; abre páginas al llegar al margen."""

    def __init__(self, documento: DocumentoLayout, margen: float):
        self.documento = documento
        self.margen = margen
        self.alto = documento.tamano[1]
        self.y = margen
        self.pagina = Pagina()
        documento.paginas.append(self.pagina)

    def reservar(self, alto: float):
        if self.y + alto > self.alto - self.margen:
            self.pagina = Pagina()
            self.documento.paginas.append(self.pagina)
            self.y = self.margen

    def texto(self, texto: str, x: float, tamano: float = 12, interlineado: float = 1.4, **kwargs):
        alto = tamano * interlineado
        self.reservar(alto)
        self.pagina.elementos.append(Elemento(texto=texto, x=x, y=self.y, tamano=tamano, **kwargs))
        self.y += alto

    def espacio(self, alto: float):
        self.y += alto


def layout_reporte_individual(servicio: dict) -> DocumentoLayout:
    tamano = A4
    margen = MARGEN_INDIVIDUAL
    ancho_util = tamano[0] - 2 * margen
    documento = DocumentoLayout(titulo="Reporte Individual de Servicio", tamano=tamano)
    cursor = _Cursor(documento, margen)

    cursor.texto(
        "Reporte Individual de Servicio", margen, tamano=20, alineacion="center",
        ancho=ancho_util, fuente="Helvetica-Bold", color=COLOR_TITULO
    )
    cursor.espacio(10)
    cursor.texto(
        f"Fecha: {servicio.get('fecha', '')} a las {servicio.get('hora', '')}", margen,
        alineacion="right", ancho=ancho_util
    )
    cursor.espacio(12)

    cursor.texto("DATOS DEL SERVICIO", margen, tamano=14, fuente="Helvetica-Bold", color=COLOR_SECCION)
    cursor.espacio(4)
    cursor.texto(f"Paciente: {servicio.get('nombre_paciente') or ''}", margen)
    cursor.texto(f"Auxiliar: {servicio.get('nombre_auxiliar') or ''}", margen)
    cursor.texto(f"Concepto: {servicio.get('concepto') or ''}", margen)
    cursor.texto(f"Familiar que recibe: {servicio.get('nombre_familiar') or ''}", margen)
    cursor.espacio(12)

    cursor.texto("DETALLE DE ACTIVIDADES", margen, tamano=14, fuente="Helvetica-Bold", color=COLOR_SECCION)
    cursor.espacio(4)
    cursor.texto(f"Servicio Base: ${formato_moneda(servicio.get('precio'))}", margen)

    for actividad in servicio.get("actividades") or []:
        cursor.reservar(12 * 1.4)
        cursor.pagina.elementos.append(Elemento(
            texto=f"${formato_moneda(actividad.get('precio'))}", x=margen, y=cursor.y,
            alineacion="right", ancho=ancho_util, tamano=12
        ))
        cursor.texto(
            f"- {actividad.get('descripcion') or ''}", margen + SANGRIA_ACTIVIDAD,
            ancho=ancho_util - SANGRIA_ACTIVIDAD - 80
        )
    cursor.espacio(12)

    cursor.texto(
        f"TOTAL COBRADO: ${formato_moneda(total_servicio(servicio))}", margen, tamano=16,
        alineacion="right", ancho=ancho_util, fuente="Helvetica-Bold", color=COLOR_TITULO
    )
    cursor.espacio(24)

    cursor.texto("Firma del Familiar:", margen)
    cursor.espacio(6)

    firma = decodificar_firma(servicio.get("firma"))
    if firma:
        cursor.reservar(ALTO_FIRMA)
        cursor.pagina.elementos.append(Imagen(
            datos=firma, x=margen, y=cursor.y, ancho=ANCHO_FIRMA, alto=ALTO_FIRMA
        ))
        cursor.espacio(ALTO_FIRMA)
    else:
        cursor.texto(TEXTO_SIN_FIRMA, margen)

    return documento
