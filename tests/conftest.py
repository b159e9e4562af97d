import os
from typing import Generator

import mongomock
import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("DATABASE_NAME", "enfermeria_test")

from enfermeria.core import database  # noqa: E402
from enfermeria.core.config import settings  # noqa: E402
from enfermeria.main import app  # noqa: E402


@pytest.fixture()
def mongo_db():
    database.conexion.usar_cliente(mongomock.MongoClient())
    yield database.conexion.client[settings.DATABASE_NAME]
    database.conexion.cerrar()


@pytest.fixture()
def client(mongo_db) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def servicio_payload() -> dict:
    return {
        "nombre_paciente": "Rosa Martínez",
        "nombre_familiar": "Carlos Martínez",
        "nombre_auxiliar": "Lucía Gómez",
        "concepto": "Higiene",
        "fecha": "25/07/2024",
        "hora": "10:30",
        "precio": 20000,
        "actividades": [
            {"descripcion": "Curación de herida", "precio": 5000},
            {"descripcion": "Toma de tensión", "precio": 2500},
        ],
    }
