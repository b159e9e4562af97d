from typing import Optional
from pydantic import BaseModel, field_serializer
from datetime import datetime, timezone


def _como_utc(valor: Optional[datetime]) -> Optional[datetime]:
    # En la colección se guardan en UTC sin zona
    if valor is not None and valor.tzinfo is None:
        return valor.replace(tzinfo=timezone.utc)
    return valor


class CitaCreate(BaseModel):
    title: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    realizado: Optional[bool] = None
    paciente: Optional[str] = None
    auxiliar: Optional[str] = None


# Reagendar o marcar como realizada; `end: null` quita la hora de fin
class CitaUpdate(BaseModel):
    title: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    realizado: Optional[bool] = None
    paciente: Optional[str] = None
    auxiliar: Optional[str] = None


class CitaResponse(BaseModel):
    id: str
    title: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    realizado: bool = False
    paciente: Optional[str] = None
    auxiliar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("start", "end")
    def serializar_utc(self, valor: Optional[datetime]) -> Optional[datetime]:
        return _como_utc(valor)

    class Config:
        from_attributes = True


class EventoExtendedProps(BaseModel):
    realizado: bool = False
    paciente: Optional[str] = None
    auxiliar: Optional[str] = None


class EventoResponse(BaseModel):
    """Forma de evento que consume el calendario del frontend"""
    id: str
    title: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    extendedProps: EventoExtendedProps
    color: str

    @field_serializer("start", "end")
    def serializar_utc(self, valor: Optional[datetime]) -> Optional[datetime]:
        return _como_utc(valor)
