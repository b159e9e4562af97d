from fastapi import APIRouter
from fastapi.responses import StreamingResponse, PlainTextResponse
from io import BytesIO
from enfermeria.core.database import get_database
from enfermeria.core.exceptions import IdentificadorInvalido
from enfermeria.modules.reportes.service import ReporteService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reporte", tags=["Reportes"])


def pdf_response(pdf: bytes, filename: str) -> StreamingResponse:
    return StreamingResponse(
        BytesIO(pdf),
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'}
    )


@router.get("/individual/{servicio_id}")
def reporte_individual(servicio_id: str):
    """
    PDF de un servicio: datos, actividades, total cobrado y firma del familiar
    """
    try:
        db = get_database()
        reporte_service = ReporteService(db)

        resultado = reporte_service.reporte_individual(servicio_id)
        if not resultado:
            return PlainTextResponse("Servicio no encontrado", status_code=404)

        pdf, filename = resultado
        return pdf_response(pdf, filename)

    except IdentificadorInvalido as e:
        return PlainTextResponse(str(e), status_code=400)
    except Exception as e:
        logger.error(f"Error al generar PDF individual: {str(e)}")
        return PlainTextResponse("Error interno al generar el reporte.", status_code=500)


@router.get("/general")
def reporte_general():
    """
    PDF horizontal con todos los servicios ordenados por fecha y el total recaudado
    """
    try:
        db = get_database()
        reporte_service = ReporteService(db)

        pdf, filename = reporte_service.reporte_general()
        return pdf_response(pdf, filename)

    except Exception as e:
        logger.error(f"Error al generar PDF general: {str(e)}")
        return PlainTextResponse("Error interno al generar el reporte general.", status_code=500)
