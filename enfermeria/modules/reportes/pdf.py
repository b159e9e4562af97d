from io import BytesIO
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from enfermeria.modules.reportes.layout import DocumentoLayout, Elemento, Imagen


def _ajustar(c: canvas.Canvas, elemento: Elemento) -> str:
    texto = elemento.texto
    if not elemento.ancho:
        return texto
    while c.stringWidth(texto, elemento.fuente, elemento.tamano) > elemento.ancho and len(texto) > 3:
        texto = texto[:-4] + "..."
    return texto


def _dibujar_texto(c: canvas.Canvas, elemento: Elemento, alto_pagina: float):
    c.setFont(elemento.fuente, elemento.tamano)
    c.setFillColor(colors.HexColor(elemento.color))

    texto = _ajustar(c, elemento)
    # Las coordenadas del layout son desde arriba; reportlab dibuja desde abajo
    base = alto_pagina - elemento.y - elemento.tamano

    if elemento.alineacion == "right" and elemento.ancho:
        c.drawRightString(elemento.x + elemento.ancho, base, texto)
    elif elemento.alineacion == "center" and elemento.ancho:
        c.drawCentredString(elemento.x + elemento.ancho / 2, base, texto)
    else:
        c.drawString(elemento.x, base, texto)


def _dibujar_imagen(c: canvas.Canvas, imagen: Imagen, alto_pagina: float):
    c.drawImage(
        ImageReader(BytesIO(imagen.datos)),
        imagen.x,
        alto_pagina - imagen.y - imagen.alto,
        width=imagen.ancho,
        height=imagen.alto,
        mask="auto",
    )


def renderizar(documento: DocumentoLayout) -> bytes:
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=documento.tamano)
    c.setTitle(documento.titulo)
    alto_pagina = documento.tamano[1]

    for numero, pagina in enumerate(documento.paginas):
        if numero:
            c.showPage()
        for elemento in pagina.elementos:
            if isinstance(elemento, Imagen):
                _dibujar_imagen(c, elemento, alto_pagina)
            else:
                _dibujar_texto(c, elemento, alto_pagina)

    c.save()
    return buffer.getvalue()
