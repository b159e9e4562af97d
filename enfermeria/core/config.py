from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    MONGODB_URL: str
    DATABASE_NAME: str = "enfermeriaDB"
    PORT: int = 3000
    FRONTEND_DIR: str = "frontend"
    # "*" o lista separada por comas: "https://a.com,https://b.com"
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("MONGODB_URL")
    @classmethod
    def validar_mongodb_url(cls, v: str) -> str:
        """
        La URL se valida tal cual llega: no se intenta reparar.
        Una variable mal cargada (espacios, prefijo 'MONGODB_URL=',
        texto pegado al final) debe fallar al arrancar.
        """
        if not v:
            raise ValueError("MONGODB_URL no está definida")
        if any(c.isspace() for c in v):
            raise ValueError("MONGODB_URL no puede contener espacios ni saltos de línea")
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("MONGODB_URL debe comenzar con 'mongodb://' o 'mongodb+srv://'")
        if v.count("://") > 1:
            raise ValueError("MONGODB_URL contiene más de una URL")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validar_log_level(cls, v: str) -> str:
        nivel = v.upper()
        if nivel not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"LOG_LEVEL inválido: {v}")
        return nivel

    @property
    def cors_origins(self) -> List[str]:
        origenes = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        return origenes or ["*"]


settings = Settings()
