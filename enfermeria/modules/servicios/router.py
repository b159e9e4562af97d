from fastapi.responses import StreamingResponse
from fastapi import APIRouter, HTTPException, Query, Response
from typing import List
from datetime import datetime
from enfermeria.core.database import get_database
from enfermeria.core.exceptions import ErrorValidacion, IdentificadorInvalido
from enfermeria.modules.servicios.service import ServicioService
from enfermeria.modules.servicios.schema import (
    ServicioCreate, ServicioUpdate, ServicioResponse, EliminacionMasivaResponse
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/servicios", tags=["Servicios"])


def error_validacion(e: ErrorValidacion) -> HTTPException:
    return HTTPException(status_code=400, detail={"message": e.message, "errors": e.errores})


@router.post("", response_model=ServicioResponse, status_code=201)
def crear_servicio(servicio: ServicioCreate):
    """
    Registrar una visita. `total` se calcula como precio base más
    la suma de las actividades.
    """
    try:
        db = get_database()
        servicio_service = ServicioService(db)

        return servicio_service.create_servicio(servicio.model_dump(exclude_unset=True))

    except ErrorValidacion as e:
        raise error_validacion(e)
    except Exception as e:
        logger.error(f"Error al crear servicio: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")


@router.get("", response_model=List[ServicioResponse])
def listar_servicios():
    """
    Todos los servicios, del más reciente al más antiguo
    """
    try:
        db = get_database()
        servicio_service = ServicioService(db)

        return servicio_service.get_all_servicios()

    except Exception as e:
        logger.error(f"Error al listar servicios: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")


@router.delete("", response_model=EliminacionMasivaResponse)
def eliminar_todos_los_servicios(
    confirmar: bool = Query(False, description="Debe ser true: elimina TODOS los servicios y TODA la agenda")
):
    """
    Elimina todos los servicios y todas las citas de la agenda.
    Irreversible; requiere `confirmar=true`.
    """
    if not confirmar:
        raise HTTPException(
            status_code=400,
            detail="Operación irreversible: envíe confirmar=true para eliminar todos los servicios y citas"
        )
    try:
        db = get_database()
        servicio_service = ServicioService(db)

        return servicio_service.delete_all_servicios()

    except Exception as e:
        logger.error(f"Error al eliminar todos los servicios: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")


@router.get("/export/excel")
def exportar_servicios_excel():
    try:
        db = get_database()
        servicio_service = ServicioService(db)

        excel_file = servicio_service.export_to_excel()
        filename = f"servicios_{datetime.now().strftime('%Y%m%d')}.xlsx"

        return StreamingResponse(
            excel_file,
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={
                "Content-Disposition": f"attachment; filename={filename}"
            }
        )

    except Exception as e:
        logger.error(f"Error al exportar servicios a Excel: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")


@router.get("/{servicio_id}", response_model=ServicioResponse)
def obtener_servicio(servicio_id: str):
    try:
        db = get_database()
        servicio_service = ServicioService(db)

        servicio = servicio_service.get_servicio_by_id(servicio_id)
        if not servicio:
            raise HTTPException(status_code=404, detail="Servicio no encontrado")

        return servicio

    except IdentificadorInvalido as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error al obtener servicio: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")


@router.put("/{servicio_id}", response_model=ServicioResponse)
def actualizar_servicio(servicio_id: str, servicio_update: ServicioUpdate):
    try:
        db = get_database()
        servicio_service = ServicioService(db)

        servicio = servicio_service.update_servicio(
            servicio_id, servicio_update.model_dump(exclude_unset=True)
        )
        if not servicio:
            raise HTTPException(status_code=404, detail="Servicio no encontrado")

        return servicio

    except IdentificadorInvalido as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ErrorValidacion as e:
        raise error_validacion(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error al actualizar servicio: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")


@router.delete("/{servicio_id}", status_code=204)
def eliminar_servicio(servicio_id: str):
    try:
        db = get_database()
        servicio_service = ServicioService(db)

        if not servicio_service.delete_servicio(servicio_id):
            raise HTTPException(status_code=404, detail="Servicio no encontrado")

        return Response(status_code=204)

    except IdentificadorInvalido as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error al eliminar servicio: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")
