import mongomock
import pytest
from pymongo.errors import ServerSelectionTimeoutError

from enfermeria.core import database
from enfermeria.core.config import settings
from enfermeria.core.database import ConexionMongo


def test_sin_cliente_no_responde():
    conexion = ConexionMongo()

    assert conexion.conectada is False
    assert conexion.ping() is False


def test_cliente_inyectado():
    conexion = ConexionMongo()
    conexion.usar_cliente(mongomock.MongoClient())

    assert conexion.conectada is True
    assert conexion.ping() is True

    conexion.cerrar()
    assert conexion.conectada is False


def test_get_database_usa_la_conexion_compartida(mongo_db):
    db = database.get_database()

    assert db.name == settings.DATABASE_NAME
    db["servicios"].insert_one({"nombre_paciente": "Ana"})
    assert mongo_db["servicios"].count_documents({}) == 1


def test_sin_servidor_termina_el_proceso(monkeypatch):
    class ClienteCaido:
        def __init__(self, *args, **kwargs):
            self.admin = self

        def command(self, nombre):
            raise ServerSelectionTimeoutError("sin servidor")

        def close(self):
            pass

    monkeypatch.setattr(database, "MongoClient", ClienteCaido)
    conexion = ConexionMongo()

    with pytest.raises(SystemExit):
        conexion.conectar()
    assert conexion.conectada is False
