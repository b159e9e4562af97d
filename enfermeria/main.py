from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from contextlib import asynccontextmanager
from pathlib import Path
import logging
import uvicorn

from enfermeria.core.config import settings
from enfermeria.core.database import conexion
from enfermeria.core.validacion import mensajes_de_error
from enfermeria.modules.servicios.router import router as servicios_router
from enfermeria.modules.agenda.router import router as agenda_router
from enfermeria.modules.reportes.router import router as reportes_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("enfermeria-domiciliaria")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Conecta a MongoDB al iniciar; si no hay conexión el proceso termina.
    """
    logger.info("Iniciando aplicación...")
    conexion.conectar()

    yield

    logger.info("Cerrando aplicación...")
    conexion.cerrar()


def _frontend_dir() -> Path:
    return Path(settings.FRONTEND_DIR).resolve()


def _index_html() -> Path:
    return _frontend_dir() / "index.html"


def create_app() -> FastAPI:
    app = FastAPI(title="enfermeria-domiciliaria", version="2.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": {"message": "Datos no válidos", "errors": mensajes_de_error(exc.errors())}},
        )

    app.include_router(servicios_router)
    app.include_router(agenda_router)
    app.include_router(reportes_router)

    @app.get("/", tags=["root"])
    async def read_root(request: Request):
        index = _index_html()
        if "text/html" in request.headers.get("accept", "") and index.is_file():
            return FileResponse(index)
        return {"message": "API de Enfermería Domiciliaria", "status": "ok"}

    @app.get("/health", tags=["health"])
    def health():
        conectado = conexion.ping()
        return {"status": "ok" if conectado else "error", "database": settings.DATABASE_NAME}

    # Debe registrarse al final: cualquier ruta no atendida va al frontend
    @app.get("/{ruta:path}", include_in_schema=False)
    async def frontend(ruta: str):
        base = _frontend_dir()
        archivo = (base / ruta).resolve()
        if ruta and archivo.is_file() and base in archivo.parents:
            return FileResponse(archivo)

        index = _index_html()
        if index.is_file():
            return FileResponse(index)
        return JSONResponse(status_code=404, content={"detail": "Frontend no disponible"})

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("enfermeria.main:app", host="0.0.0.0", port=settings.PORT)
