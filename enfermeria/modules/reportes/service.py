from typing import Optional, Tuple
from pymongo import ASCENDING
from datetime import datetime
import unicodedata
import logging
import re

from enfermeria.modules.servicios.service import ServicioService
from enfermeria.modules.reportes.layout import layout_reporte_general, layout_reporte_individual
from enfermeria.modules.reportes.pdf import renderizar

logger = logging.getLogger(__name__)


def nombre_archivo(texto: str) -> str:
    """Nombre seguro para Content-Disposition (solo ASCII)"""
    ascii_ = unicodedata.normalize("NFKD", texto or "").encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^A-Za-z0-9_-]+", "_", ascii_).strip("_") or "sin_nombre"


class ReporteService:
    def __init__(self, db):
        self.db = db
        self.servicio_service = ServicioService(db)

    def reporte_individual(self, servicio_id: str) -> Optional[Tuple[bytes, str]]:
        servicio = self.servicio_service.get_servicio_by_id(servicio_id)
        if not servicio:
            return None

        pdf = renderizar(layout_reporte_individual(servicio))

        fecha_visita = servicio.get("fecha_visita")
        sufijo = fecha_visita.strftime("%Y%m%d") if fecha_visita else "sin_fecha"
        filename = f"Servicio_{nombre_archivo(servicio.get('nombre_paciente'))}_{sufijo}.pdf"

        logger.info(f"Reporte individual generado: {filename}")
        return pdf, filename

    def reporte_general(self) -> Tuple[bytes, str]:
        servicios = self.servicio_service.get_all_servicios(orden=ASCENDING)

        pdf = renderizar(layout_reporte_general(servicios))
        filename = f"ReporteGeneral_{datetime.now().strftime('%Y%m%d')}.pdf"

        logger.info(f"Reporte general generado con {len(servicios)} servicios")
        return pdf, filename
