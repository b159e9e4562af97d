from typing import Optional
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError
from enfermeria.core.config import settings
import logging
import sys

logger = logging.getLogger(__name__)


class ConexionMongo:
    """
    Cliente único de MongoDB compartido por todos los requests.
    `usar_cliente` permite inyectar otro cliente (tests).
    """

    def __init__(self):
        self.client: Optional[MongoClient] = None

    @property
    def conectada(self) -> bool:
        return self.client is not None

    def usar_cliente(self, client: MongoClient):
        self.client = client

    def conectar(self):
        if self.conectada:
            return

        client = MongoClient(
            settings.MONGODB_URL,
            appname="enfermeria-domiciliaria",
            serverSelectionTimeoutMS=30000,
        )
        # Sin base de datos la API no puede atender nada: se detiene el proceso
        try:
            client.admin.command("ping")
        except PyMongoError as e:
            logger.critical(f"No se pudo conectar a MongoDB: {e}")
            client.close()
            sys.exit(1)

        self.client = client
        logger.info(f"Conectado a MongoDB. DB: {settings.DATABASE_NAME}")

    def cerrar(self):
        if self.client is not None:
            self.client.close()
            logger.info("Conexión a MongoDB cerrada")
        self.client = None

    def ping(self) -> bool:
        if self.client is None:
            return False
        try:
            self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB no responde: {e}")
            return False


conexion = ConexionMongo()


def get_database() -> Database:
    conexion.conectar()
    return conexion.client[settings.DATABASE_NAME]
