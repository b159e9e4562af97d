from typing import Optional, List, Dict, Any
from pydantic import BaseModel
from datetime import datetime


class ServicioCreate(BaseModel):
    """
    Las restricciones de negocio (obligatorios, mínimos, enum, longitudes)
    se validan en el servicio; aquí solo se declaran los tipos.
    `fecha` y `hora` se aceptan como alternativa a `fecha_visita`.
    """
    nombre_paciente: Optional[str] = None
    nombre_familiar: Optional[str] = None
    nombre_auxiliar: Optional[str] = None
    concepto: Optional[str] = None
    fecha_visita: Optional[datetime] = None
    fecha: Optional[str] = None
    hora: Optional[str] = None
    precio: Optional[float] = None
    actividades: Optional[List[Dict[str, Any]]] = None
    firma: Optional[str] = None
    realizado: Optional[bool] = None


class ServicioUpdate(BaseModel):
    nombre_paciente: Optional[str] = None
    nombre_familiar: Optional[str] = None
    nombre_auxiliar: Optional[str] = None
    concepto: Optional[str] = None
    fecha_visita: Optional[datetime] = None
    fecha: Optional[str] = None
    hora: Optional[str] = None
    precio: Optional[float] = None
    actividades: Optional[List[Dict[str, Any]]] = None
    firma: Optional[str] = None
    realizado: Optional[bool] = None


class ActividadResponse(BaseModel):
    descripcion: Optional[str] = None
    precio: float = 0


# Tolerante con documentos de versiones anteriores del esquema
class ServicioResponse(BaseModel):
    id: str
    nombre_paciente: Optional[str] = None
    nombre_familiar: Optional[str] = None
    nombre_auxiliar: Optional[str] = None
    concepto: Optional[str] = None
    fecha_visita: Optional[datetime] = None
    fecha: str = ""
    hora: str = ""
    precio: float = 0
    actividades: List[ActividadResponse] = []
    total: float = 0
    firma: Optional[str] = None
    realizado: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EliminacionMasivaResponse(BaseModel):
    message: str
    servicios_eliminados: int
    citas_eliminadas: int
