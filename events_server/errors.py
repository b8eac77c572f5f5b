import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from fastapi import status
from fastapi.responses import JSONResponse

T = TypeVar("T")

# --- Mensajes generales ---
ELEMENTO_AGREGADO = "Elemento agregado correctamente."
ELEMENTO_MODIFICADO = "Elemento modificado correctamente."
ELEMENTO_ELIMINADO = "Elemento eliminado correctamente."


class ErrorKind(Enum):
    """
    Taxonomía de errores de dominio. Cada tipo lleva un código numérico estable
    y el mensaje que se devuelve al cliente.
    """

    # --- Usuarios ---
    USER_EXISTS = (1, "El usuario ya existe en el sistema.")
    EMAIL_EMPTY = (2, "El correo del usuario no puede ser nulo ni vacío.")
    USER_NOT_FOUND = (3, "El usuario no existe en el sistema.")
    USER_IN_USE = (4, "El usuario tiene eventos asociados y no puede eliminarse.")

    # --- Categorías ---
    CATEGORY_NAME_EMPTY = (6, "El nombre de la categoría no puede ser nulo ni vacío.")
    CATEGORY_EXISTS = (7, "La categoría ya existe en el sistema.")
    CATEGORY_NOT_FOUND = (8, "La categoría no existe en el sistema.")

    # --- Eventos ---
    INVALID_TITLE = (10, "El título del evento no puede ser nulo ni vacío.")
    INVALID_DATE_RANGE = (11, "La fecha de fin no puede ser anterior a la fecha de inicio.")
    EVENT_ALREADY_EXISTS = (12, "El evento ya existe en el sistema.")
    EVENT_NOT_FOUND = (13, "El evento no existe en el sistema.")
    EVENTS_NOT_FOUND = (15, "No hay eventos asociados al usuario.")
    CATEGORY_MISSING = (16, "El evento debe indicar el nombre de una categoría.")
    CATEGORY_IN_USE = (17, "La categoría tiene eventos asociados y no puede eliminarse.")

    # --- Generales ---
    MALFORMED_REQUEST = (19, "La petición no tiene un formato válido.")
    SERVER_ERROR = (20, "Error de servidor.")
    FORBIDDEN = (21, "No tiene permisos sobre este evento.")

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str = ""

    def __post_init__(self):
        if not self.message:
            object.__setattr__(self, "message", self.kind.message)


Result = Union[Ok[T], Err]


def error_body(kind: ErrorKind, message: Optional[str] = None, exc: Optional[BaseException] = None) -> dict:
    """Construye el cuerpo {codigo, message, [excepcion]} de una respuesta de error."""
    body = {"codigo": kind.code, "message": message or kind.message}
    if exc is not None:
        body["excepcion"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


def error_response(err: Err) -> JSONResponse:
    """Los fallos de dominio siempre se devuelven como 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(err.kind, err.message),
    )
