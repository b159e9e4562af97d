from fastapi import APIRouter, HTTPException
from typing import List
from enfermeria.core.database import get_database
from enfermeria.core.exceptions import ErrorValidacion, IdentificadorInvalido
from enfermeria.modules.agenda.service import AgendaService
from enfermeria.modules.agenda.schema import (
    CitaCreate, CitaUpdate, CitaResponse, EventoResponse
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/agenda", tags=["Agenda"])


@router.get("", response_model=List[EventoResponse])
def listar_eventos():
    """
    Citas en formato de evento de calendario, ordenadas por inicio
    """
    try:
        db = get_database()
        agenda_service = AgendaService(db)

        return agenda_service.get_eventos()

    except Exception as e:
        logger.error(f"Error al obtener agenda: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")


@router.post("", response_model=CitaResponse, status_code=201)
def crear_cita(cita: CitaCreate):
    try:
        db = get_database()
        agenda_service = AgendaService(db)

        return agenda_service.create_cita(cita.model_dump(exclude_unset=True))

    except ErrorValidacion as e:
        raise HTTPException(status_code=400, detail={"message": e.message, "errors": e.errores})
    except Exception as e:
        logger.error(f"Error al crear cita: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")


@router.get("/{cita_id}", response_model=CitaResponse)
def obtener_cita(cita_id: str):
    try:
        db = get_database()
        agenda_service = AgendaService(db)

        cita = agenda_service.get_cita_by_id(cita_id)
        if not cita:
            raise HTTPException(status_code=404, detail="Cita no encontrada")

        return cita

    except IdentificadorInvalido as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error al obtener cita: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")


@router.patch("/{cita_id}", response_model=CitaResponse)
def actualizar_cita(cita_id: str, cita_update: CitaUpdate):
    """
    Reagendar una cita o marcarla como realizada
    """
    try:
        db = get_database()
        agenda_service = AgendaService(db)

        cita = agenda_service.update_cita(cita_id, cita_update.model_dump(exclude_unset=True))
        if not cita:
            raise HTTPException(status_code=404, detail="Cita no encontrada")

        return cita

    except IdentificadorInvalido as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ErrorValidacion as e:
        raise HTTPException(status_code=400, detail={"message": e.message, "errors": e.errores})
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error al actualizar cita: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")


@router.delete("/{cita_id}")
def eliminar_cita(cita_id: str):
    try:
        db = get_database()
        agenda_service = AgendaService(db)

        if not agenda_service.delete_cita(cita_id):
            raise HTTPException(status_code=404, detail="Cita no encontrada")

        return {"message": "Cita eliminada con éxito"}

    except IdentificadorInvalido as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error al eliminar cita: {str(e)}")
        raise HTTPException(status_code=500, detail="Error interno del servidor")
