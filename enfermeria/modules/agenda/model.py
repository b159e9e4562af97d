from datetime import datetime, timezone
from typing import Optional, List
from pydantic import BaseModel, Field, ValidationError, field_validator
from enfermeria.core.validacion import mensajes_de_error

COLOR_REALIZADO = "#007A4D"
COLOR_PENDIENTE = "#00AEEF"


class Cita(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, description="Título de la cita")
    start: datetime = Field(..., description="Inicio de la cita")
    end: Optional[datetime] = Field(None, description="Fin de la cita")
    realizado: bool = Field(default=False, description="Indica si la cita se realizó")
    paciente: Optional[str] = Field(None, max_length=100, description="Nombre del paciente")
    auxiliar: Optional[str] = Field(None, max_length=100, description="Auxiliar asignado")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    # MongoDB devuelve fechas naive en UTC
    @field_validator("start", "end")
    @classmethod
    def a_utc_naive(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Curación - Rosa Martínez",
                "start": "2024-07-25T10:30:00",
                "end": "2024-07-25T11:30:00",
                "realizado": False,
                "paciente": "Rosa Martínez",
                "auxiliar": "Lucía Gómez"
            }
        }


def validar_cita(data: dict) -> List[str]:
    try:
        cita = Cita.model_validate(data)
    except ValidationError as e:
        return mensajes_de_error(e.errors())
    if cita.end is not None and cita.end < cita.start:
        return ["end: no puede ser anterior a start"]
    return []


def color_evento(realizado: bool) -> str:
    return COLOR_REALIZADO if realizado else COLOR_PENDIENTE
