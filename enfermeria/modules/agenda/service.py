from typing import List, Optional
from bson import ObjectId
from pymongo import ASCENDING
from datetime import datetime
import logging

from enfermeria.core.exceptions import ErrorValidacion, IdentificadorInvalido
from enfermeria.modules.agenda.model import Cita, validar_cita, color_evento

logger = logging.getLogger(__name__)


class AgendaService:
    def __init__(self, db):
        self.db = db
        self.collection = db["agenda"]

    def _object_id(self, cita_id: str) -> ObjectId:
        if not ObjectId.is_valid(cita_id):
            raise IdentificadorInvalido(cita_id)
        return ObjectId(cita_id)

    def _validar(self, data: dict) -> Cita:
        errores = validar_cita(data)
        if errores:
            raise ErrorValidacion(errores)
        return Cita(**data)

    def _serializar(self, cita: dict) -> dict:
        cita["id"] = str(cita["_id"])
        del cita["_id"]
        cita["realizado"] = bool(cita.get("realizado", False))
        return cita

    def create_cita(self, cita_data: dict) -> dict:
        try:
            data = {k: v for k, v in cita_data.items() if v is not None}
            cita = self._validar(data)

            result = self.collection.insert_one(cita.model_dump())
            created = self.collection.find_one({"_id": result.inserted_id})

            logger.info(f"Cita creada: {result.inserted_id}")
            return self._serializar(created)

        except ErrorValidacion:
            raise
        except Exception as e:
            logger.error(f"Error al crear cita: {str(e)}")
            raise

    def get_cita_by_id(self, cita_id: str) -> Optional[dict]:
        oid = self._object_id(cita_id)
        cita = self.collection.find_one({"_id": oid})
        if cita:
            return self._serializar(cita)
        return None

    def get_all_citas(self) -> List[dict]:
        try:
            citas = list(self.collection.find().sort([("start", ASCENDING), ("_id", ASCENDING)]))
            return [self._serializar(c) for c in citas]

        except Exception as e:
            logger.error(f"Error al obtener agenda: {str(e)}")
            raise

    def get_eventos(self) -> List[dict]:
        """Proyección de cada cita al formato de evento del calendario"""
        return [
            {
                "id": cita["id"],
                "title": cita.get("title"),
                "start": cita.get("start"),
                "end": cita.get("end"),
                "extendedProps": {
                    "realizado": cita["realizado"],
                    "paciente": cita.get("paciente"),
                    "auxiliar": cita.get("auxiliar")
                },
                "color": color_evento(cita["realizado"])
            }
            for cita in self.get_all_citas()
        ]

    def update_cita(self, cita_id: str, update_data: dict) -> Optional[dict]:
        oid = self._object_id(cita_id)
        try:
            actual = self.collection.find_one({"_id": oid})
            if not actual:
                return None

            # Un null explícito borra el campo (p. ej. `end` al reagendar);
            # en campos obligatorios lo rechaza la validación
            cambios = dict(update_data)

            merged = {k: v for k, v in actual.items() if k != "_id"}
            merged.update(cambios)
            merged["updated_at"] = datetime.now()

            cita = self._validar(merged)

            self.collection.update_one({"_id": oid}, {"$set": cita.model_dump()})
            return self.get_cita_by_id(cita_id)

        except ErrorValidacion:
            raise
        except Exception as e:
            logger.error(f"Error al actualizar cita: {str(e)}")
            raise

    def delete_cita(self, cita_id: str) -> bool:
        oid = self._object_id(cita_id)
        result = self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0
