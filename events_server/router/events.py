from fastapi import APIRouter, Body, Depends, Header
from typing import List, Annotated, NamedTuple, Optional
import logging

from ..errors import ELEMENTO_ELIMINADO, Err, error_response
from ..service.eventService import EventService
from ..dependencies import get_event_service
from ..model.event_model import EventCreate, EventSummary
from ..security import TeacherIdentity, ViewerIdentity

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/events/manager",
    tags=["Eventos"]
)

# Definición del tipo inyectado (Dependencia del Servicio)
EventServiceDep = Annotated[EventService, Depends(get_event_service)]


class EventKeyHeaders(NamedTuple):
    titulo: Optional[str]
    fecha_inicio: Optional[int]
    fecha_fin: Optional[int]


def get_event_key_headers(
    titulo: Annotated[Optional[str], Header(description="Título del evento")] = None,
    fecha_inicio: Annotated[Optional[int], Header(alias="fechaInicio", description="Inicio en milisegundos")] = None,
    fecha_fin: Annotated[Optional[int], Header(alias="fechaFin", description="Fin en milisegundos")] = None,
) -> EventKeyHeaders:
    """Lee la clave compuesta de las cabeceras. Las ausentes llegan como None y las valida el servicio."""
    return EventKeyHeaders(titulo, fecha_inicio, fecha_fin)


EventKeyDep = Annotated[EventKeyHeaders, Depends(get_event_key_headers)]

EVENT_EXAMPLE = {
    "titulo": "Reunión de departamento",
    "fechaInicio": 1767258000000,
    "fechaFin": 1767261600000,
    "nombre": "Reuniones"
}

# --- Endpoints ---

# 1. POST /events/manager/ : Crear un nuevo evento
@router.post(
    "/",
    response_model=EventSummary,
    response_description="Añadir nuevo evento",
)
async def create_event(
    event: Annotated[EventCreate, Body(examples=[EVENT_EXAMPLE])],
    identity: TeacherIdentity,
    event_service: EventServiceDep
):
    """
    Crea un evento cuyo propietario es el usuario autenticado.
    Si el usuario aún no existe en el sistema se registra en este momento.
    """
    result = await event_service.create_event(identity, event)
    if isinstance(result, Err):
        return error_response(result)
    return result.value


# 2. PUT /events/manager/ : Reemplazar un evento existente
@router.put(
    "/",
    response_model=EventSummary,
    response_description="Reemplazar un evento identificado por su clave",
)
async def replace_event(
    key: EventKeyDep,
    event_update: Annotated[EventCreate, Body(examples=[EVENT_EXAMPLE])],
    identity: TeacherIdentity,
    event_service: EventServiceDep
):
    """
    Reemplaza por completo el evento cuya clave llega en las cabeceras
    (titulo, fechaInicio, fechaFin). Solo su propietario o un administrador.
    """
    result = await event_service.replace_event(identity, key.titulo, key.fecha_inicio, key.fecha_fin, event_update)
    if isinstance(result, Err):
        return error_response(result)
    return result.value


# 3. DELETE /events/manager/ : Eliminar un evento
@router.delete(
    "/",
    response_description="Eliminar un evento por su clave compuesta",
)
async def delete_event(key: EventKeyDep, identity: TeacherIdentity, event_service: EventServiceDep):
    """
    Elimina el evento cuya clave llega en las cabeceras. Solo su propietario o un administrador.
    """
    result = await event_service.delete_event(identity, key.titulo, key.fecha_inicio, key.fecha_fin)
    if isinstance(result, Err):
        return error_response(result)
    return {"message": ELEMENTO_ELIMINADO}


# 4. GET /events/manager/ : Obtener todos los eventos
@router.get(
    "/",
    response_model=List[EventSummary],
    response_description="Listar todos los eventos",
)
async def list_events(identity: TeacherIdentity, event_service: EventServiceDep):
    return await event_service.list_events()


# 5. GET /events/manager/filtro : Obtener un evento por su clave compuesta
@router.get(
    "/filtro",
    response_model=EventSummary,
    response_description="Obtener un evento por su clave compuesta",
)
async def get_event(key: EventKeyDep, identity: ViewerIdentity, event_service: EventServiceDep):
    """
    Busca el evento cuya clave llega en las cabeceras. Administración y
    dirección pueden ver cualquier evento; el profesorado solo los suyos.
    """
    result = await event_service.get_event(identity, key.titulo, key.fecha_inicio, key.fecha_fin)
    if isinstance(result, Err):
        return error_response(result)
    return result.value


# 6. GET /events/manager/{email} : Obtener los eventos del usuario autenticado
@router.get(
    "/{email}",
    response_model=List[EventSummary],
    response_description="Listar los eventos del usuario autenticado",
)
async def list_events_for_user(email: str, identity: TeacherIdentity, event_service: EventServiceDep):
    """
    Devuelve los eventos del usuario autenticado (todos, si es administrador).
    El email de la ruta se mantiene por compatibilidad; el filtro usa siempre la identidad.
    """
    if email != identity.email:
        logger.info(f"Ruta pedida para {email}, se filtra por la identidad {identity.email}")

    result = await event_service.list_events_for_identity(identity)
    if isinstance(result, Err):
        return error_response(result)
    return result.value
