from typing import List, Optional, Dict, Any
from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from datetime import datetime, time
from io import BytesIO
import pandas as pd
import logging

from enfermeria.core.exceptions import ErrorValidacion, IdentificadorInvalido
from enfermeria.core.fechas import (
    parse_fecha, parse_hora, formatear_fecha, formatear_hora, fecha_visita_legacy
)
from enfermeria.modules.servicios.model import Servicio, validar_servicio

logger = logging.getLogger(__name__)

# Nombres usados por la primera versión del esquema
ALIAS_LEGACY = {
    "nombrePaciente": "nombre_paciente",
    "nombreFamiliar": "nombre_familiar",
    "nombreAuxiliar": "nombre_auxiliar",
}
CAMPOS_LEGACY = ("fecha", "hora") + tuple(ALIAS_LEGACY)


class ServicioService:
    def __init__(self, db):
        self.db = db
        self.collection = db["servicios"]
        self.agenda_collection = db["agenda"]

    def _object_id(self, servicio_id: str) -> ObjectId:
        if not ObjectId.is_valid(servicio_id):
            raise IdentificadorInvalido(servicio_id)
        return ObjectId(servicio_id)

    def _resolver_fecha_visita(self, data: dict, actual: Optional[datetime] = None) -> dict:
        """
        Convierte `fecha`/`hora` de la API en `fecha_visita`.
        Si solo llega una de las dos, la otra se toma de `actual`.
        """
        fecha = data.pop("fecha", None)
        hora = data.pop("hora", None)

        if data.get("fecha_visita") is not None or (fecha is None and hora is None):
            return data

        errores = []
        dia = momento = None
        try:
            dia = parse_fecha(fecha) if fecha is not None else None
        except ValueError as e:
            errores.append(f"fecha: {e}")
        try:
            momento = parse_hora(hora) if hora is not None else None
        except ValueError as e:
            errores.append(f"hora: {e}")
        if dia is None and fecha is None and actual is None:
            errores.append("fecha: es obligatorio")
        if errores:
            raise ErrorValidacion(errores)

        if dia is None:
            dia = actual.date()
        if momento is None:
            momento = actual.time() if actual is not None else time(0, 0)

        data["fecha_visita"] = datetime.combine(dia, momento)
        return data

    def _validar(self, data: dict) -> Servicio:
        errores = validar_servicio(data)
        if errores:
            raise ErrorValidacion(errores)
        return Servicio(**data)

    def _a_documento(self, servicio: Servicio) -> dict:
        documento = servicio.model_dump()
        documento["total"] = servicio.total
        return documento

    def _serializar(self, servicio: dict) -> dict:
        servicio["id"] = str(servicio["_id"])
        del servicio["_id"]

        for viejo, nuevo in ALIAS_LEGACY.items():
            if viejo in servicio:
                valor = servicio.pop(viejo)
                servicio.setdefault(nuevo, valor)

        if not servicio.get("fecha_visita"):
            servicio["fecha_visita"] = fecha_visita_legacy(servicio)

        if servicio.get("fecha_visita"):
            servicio["fecha"] = formatear_fecha(servicio["fecha_visita"])
            servicio["hora"] = formatear_hora(servicio["fecha_visita"])
        else:
            servicio["fecha"] = str(servicio.get("fecha") or "")
            servicio["hora"] = str(servicio.get("hora") or "")

        servicio["precio"] = servicio.get("precio") or 0
        servicio["actividades"] = servicio.get("actividades") or []
        if servicio.get("total") is None:
            servicio["total"] = servicio["precio"] + sum(
                a.get("precio") or 0 for a in servicio["actividades"]
            )
        return servicio

    def create_servicio(self, servicio_data: dict) -> dict:
        try:
            data = {k: v for k, v in servicio_data.items() if v is not None}
            data = self._resolver_fecha_visita(data)

            servicio = self._validar(data)

            result = self.collection.insert_one(self._a_documento(servicio))
            created = self.collection.find_one({"_id": result.inserted_id})

            logger.info(f"Servicio creado: {result.inserted_id}")
            return self._serializar(created)

        except ErrorValidacion:
            raise
        except Exception as e:
            logger.error(f"Error al crear servicio: {str(e)}")
            raise

    def get_servicio_by_id(self, servicio_id: str) -> Optional[dict]:
        oid = self._object_id(servicio_id)
        servicio = self.collection.find_one({"_id": oid})
        if servicio:
            return self._serializar(servicio)
        return None

    def get_all_servicios(self, orden: int = DESCENDING) -> List[dict]:
        """
        Orden por fecha de la visita; los empates se resuelven por _id
        para que el listado sea estable.
        """
        try:
            servicios = list(
                self.collection.find().sort([("fecha_visita", orden), ("_id", ASCENDING)])
            )
            return [self._serializar(s) for s in servicios]

        except Exception as e:
            logger.error(f"Error al obtener servicios: {str(e)}")
            raise

    def update_servicio(self, servicio_id: str, update_data: dict) -> Optional[dict]:
        oid = self._object_id(servicio_id)
        try:
            actual = self.collection.find_one({"_id": oid})
            if not actual:
                return None

            tiene_legacy = any(c in actual for c in CAMPOS_LEGACY)
            actual = self._serializar(actual)
            # null explícito: borra campos opcionales (firma, familiar...);
            # en campos obligatorios lo rechaza la validación
            cambios = self._resolver_fecha_visita(dict(update_data), actual.get("fecha_visita"))

            merged = {
                k: v for k, v in actual.items()
                if k not in ("id", "total", "updated_at") + CAMPOS_LEGACY
            }
            merged.update(cambios)
            merged["updated_at"] = datetime.now()

            servicio = self._validar(merged)
            documento = self._a_documento(servicio)

            operacion = {"$set": documento}
            if tiene_legacy:
                operacion["$unset"] = {c: "" for c in CAMPOS_LEGACY}

            self.collection.update_one({"_id": oid}, operacion)
            return self.get_servicio_by_id(servicio_id)

        except ErrorValidacion:
            raise
        except Exception as e:
            logger.error(f"Error al actualizar servicio: {str(e)}")
            raise

    def delete_servicio(self, servicio_id: str) -> bool:
        oid = self._object_id(servicio_id)
        result = self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    def delete_all_servicios(self) -> Dict[str, Any]:
        """
        Elimina TODOS los servicios y TODAS las citas de la agenda.
        Operación irreversible y sin filtro.
        """
        try:
            servicios = self.collection.delete_many({})
            citas = self.agenda_collection.delete_many({})

            logger.warning(
                f"Eliminación masiva: {servicios.deleted_count} servicios, "
                f"{citas.deleted_count} citas"
            )
            return {
                "message": "Todos los servicios y citas eliminados con éxito.",
                "servicios_eliminados": servicios.deleted_count,
                "citas_eliminadas": citas.deleted_count
            }

        except Exception as e:
            logger.error(f"Error al eliminar todos los servicios: {str(e)}")
            raise

    def export_to_excel(self) -> BytesIO:
        try:
            servicios = self.get_all_servicios()

            columnas = [
                "Fecha", "Hora", "Paciente", "Familiar", "Auxiliar", "Concepto",
                "Actividades", "Base", "Total", "Realizado"
            ]

            if not servicios:
                df = pd.DataFrame(columns=columnas)
            else:
                excel_data = []
                for servicio in servicios:
                    actividades = ", ".join(
                        a.get("descripcion") or "" for a in servicio.get("actividades", [])
                    )
                    excel_data.append({
                        "Fecha": servicio.get("fecha", ""),
                        "Hora": servicio.get("hora", ""),
                        "Paciente": servicio.get("nombre_paciente", ""),
                        "Familiar": servicio.get("nombre_familiar", ""),
                        "Auxiliar": servicio.get("nombre_auxiliar", ""),
                        "Concepto": servicio.get("concepto", ""),
                        "Actividades": actividades,
                        "Base": servicio.get("precio", 0),
                        "Total": servicio.get("total", 0),
                        "Realizado": "Sí" if servicio.get("realizado") else "No"
                    })
                df = pd.DataFrame(excel_data, columns=columnas)

            output = BytesIO()
            with pd.ExcelWriter(output, engine="openpyxl") as writer:
                df.to_excel(writer, index=False, sheet_name="Servicios")

            output.seek(0)
            return output

        except Exception as e:
            logger.error(f"Error al exportar servicios a Excel: {str(e)}")
            raise
