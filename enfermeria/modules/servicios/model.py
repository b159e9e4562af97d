from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ValidationError, field_validator
from enum import Enum
from enfermeria.core.validacion import mensajes_de_error


class ConceptoServicio(str, Enum):
    HIGIENE = "Higiene"
    MEDICACION = "Medicación"
    ACOMPANAMIENTO = "Acompañamiento"
    OTROS = "Otros"


PRECIO_BASE_DEFAULT = 20000


class Actividad(BaseModel):
    descripcion: str = Field(..., min_length=1, max_length=200, description="Descripción de la actividad adicional")
    precio: float = Field(default=0, ge=0, description="Precio de la actividad")


class Servicio(BaseModel):
    nombre_paciente: str = Field(..., min_length=1, max_length=100, description="Nombre del paciente")
    nombre_familiar: Optional[str] = Field(None, max_length=100, description="Familiar que recibe el servicio")
    nombre_auxiliar: Optional[str] = Field(None, max_length=100, description="Auxiliar de enfermería asignado")
    concepto: ConceptoServicio = Field(default=ConceptoServicio.OTROS, description="Concepto del servicio")
    fecha_visita: datetime = Field(..., description="Fecha y hora de la visita")
    precio: float = Field(default=PRECIO_BASE_DEFAULT, ge=0, description="Precio base del servicio")
    actividades: List[Actividad] = Field(default_factory=list, description="Actividades adicionales cobradas")
    firma: Optional[str] = Field(None, description="Firma del familiar (imagen en data URL o base64)")
    realizado: bool = Field(default=False, description="Indica si la visita se realizó")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    # La visita se registra en la hora local del domicilio: si llega con
    # offset se conserva la hora de reloj indicada y se descarta la zona
    @field_validator("fecha_visita")
    @classmethod
    def hora_local(cls, v: datetime) -> datetime:
        if v.tzinfo is not None:
            return v.replace(tzinfo=None)
        return v

    @property
    def total(self) -> float:
        return self.precio + sum(actividad.precio for actividad in self.actividades)

    class Config:
        use_enum_values = True
        validate_default = True
        json_schema_extra = {
            "example": {
                "nombre_paciente": "Rosa Martínez",
                "nombre_familiar": "Carlos Martínez",
                "nombre_auxiliar": "Lucía Gómez",
                "concepto": "Higiene",
                "fecha_visita": "2024-07-25T10:30:00",
                "precio": 20000,
                "actividades": [
                    {"descripcion": "Curación de herida", "precio": 5000}
                ],
                "realizado": False
            }
        }


def validar_servicio(data: dict) -> List[str]:
    """Devuelve la lista de violaciones del documento; vacía si es válido."""
    try:
        Servicio.model_validate(data)
    except ValidationError as e:
        return mensajes_de_error(e.errors())
    return []
