from contextlib import asynccontextmanager
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import database
from .errors import ErrorKind, error_body
from .router import categories, events, users

load_dotenv()

# Configurar logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Incluir la traza de la excepción en las respuestas 500 (solo para diagnóstico)
INCLUDE_STACK_TRACE = os.getenv("INCLUDE_STACK_TRACE", "false").lower() in ("1", "true", "yes")


@asynccontextmanager
async def lifespan(app: FastAPI):
    database.ensure_indexes()
    logger.info("🚀 Events Server iniciado")
    yield
    logger.info("Events Server detenido")


app = FastAPI(
    title="API de Reaktor Events",
    description="API para la gestión de categorías, usuarios y eventos del calendario.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(categories.router)
app.include_router(events.router)
app.include_router(users.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Cabeceras o cuerpo que no se pueden interpretar: error de validación (400)."""
    logger.warning(f"Petición mal formada en {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ErrorKind.MALFORMED_REQUEST),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Cualquier fallo no previsto se enmascara como error de servidor (500)."""
    logger.error(f"Error no controlado en {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(ErrorKind.SERVER_ERROR, exc=exc if INCLUDE_STACK_TRACE else None),
    )


@app.get("/")
def root():
    return {"message": "Events Server activo y conectado"}
