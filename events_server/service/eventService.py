from typing import Iterable, List, Optional
from uuid import uuid4
import logging

from pymongo.errors import DuplicateKeyError

from ..crud.category_crud import CategoryCRUD
from ..crud.event_crud import EventCRUD
from ..errors import Err, ErrorKind, Ok, Result
from ..model.event_model import EventCreate, EventInDB, EventKey, EventSummary
from ..security import MODIFY_ANY_ROLES, VIEW_ANY_ROLES, Identity, Role, can_access_event
from .userService import UserService

logger = logging.getLogger(__name__)

# Las fechas viajan como milisegundos en un entero de 64 bits con signo
MAX_TIMESTAMP = 2**63 - 1


def _fail(kind: ErrorKind) -> Err:
    logger.error(kind.message)
    return Err(kind)


def build_event_key(titulo: Optional[str], fecha_inicio: Optional[int], fecha_fin: Optional[int]) -> Result[EventKey]:
    """
    Valida título y fechas y construye la clave compuesta del evento.
    Las fechas deben ser positivas y caber en 64 bits. La de fin no puede
    ser anterior a la de inicio (se admite que sean iguales).
    """
    if titulo is None or not titulo.strip():
        return _fail(ErrorKind.INVALID_TITLE)

    if fecha_inicio is None or fecha_fin is None or fecha_inicio <= 0 or fecha_fin <= 0:
        return _fail(ErrorKind.INVALID_DATE_RANGE)

    if fecha_inicio > MAX_TIMESTAMP or fecha_fin > MAX_TIMESTAMP:
        return _fail(ErrorKind.INVALID_DATE_RANGE)

    if fecha_fin < fecha_inicio:
        return _fail(ErrorKind.INVALID_DATE_RANGE)

    return Ok(EventKey(titulo=titulo, fecha_inicio=fecha_inicio, fecha_fin=fecha_fin))


class EventService:
    """
    Capa de Servicio para Eventos: validación, clave compuesta, existencia
    de categoría y usuario, y reglas de acceso por rol.
    """
    def __init__(self, crud_repository: EventCRUD, user_service: UserService, category_repository: CategoryCRUD):
        self.crud = crud_repository
        self.users = user_service
        self.categories = category_repository


    async def create_event(self, identity: Identity, event: EventCreate) -> Result[EventSummary]:
        key_result = build_event_key(event.titulo, event.fecha_inicio, event.fecha_fin)
        if isinstance(key_result, Err):
            return key_result
        key = key_result.value

        if event.nombre_categoria is None or not event.nombre_categoria.strip():
            return _fail(ErrorKind.CATEGORY_MISSING)

        if await self.crud.exists(key):
            return _fail(ErrorKind.EVENT_ALREADY_EXISTS)

        # El propietario se crea al registrar su primer evento
        owner = await self.users.get_or_create(identity.email, identity.nombre)

        if not await self.categories.exists(event.nombre_categoria):
            return _fail(ErrorKind.CATEGORY_NOT_FOUND)

        event_dict = key.as_filter()
        event_dict["_id"] = str(uuid4())
        event_dict["email"] = owner.email
        event_dict["nombreUsuario"] = owner.nombre
        event_dict["categoria"] = event.nombre_categoria

        try:
            created = await self.crud.create(event_dict)
        except DuplicateKeyError:
            return _fail(ErrorKind.EVENT_ALREADY_EXISTS)

        logger.info(f"Evento '{key.titulo}' creado por {owner.email}")
        return Ok(created.to_summary())


    async def _resolve(
        self,
        identity: Identity,
        titulo: Optional[str],
        fecha_inicio: Optional[int],
        fecha_fin: Optional[int],
        any_roles: Iterable[Role],
    ) -> Result[EventInDB]:
        """Valida la clave, busca el evento y comprueba que la identidad puede operar sobre él."""
        key_result = build_event_key(titulo, fecha_inicio, fecha_fin)
        if isinstance(key_result, Err):
            return key_result

        event = await self.crud.get_by_key(key_result.value)
        if event is None:
            return _fail(ErrorKind.EVENT_NOT_FOUND)

        if not can_access_event(identity, event, any_roles):
            logger.error(f"{identity.email} no puede acceder al evento '{event.titulo}' de {event.email}")
            return Err(ErrorKind.FORBIDDEN)

        return Ok(event)


    async def get_event(
        self, identity: Identity, titulo: Optional[str], fecha_inicio: Optional[int], fecha_fin: Optional[int]
    ) -> Result[EventSummary]:
        """Administración y dirección ven cualquier evento; el resto solo los suyos."""
        resolved = await self._resolve(identity, titulo, fecha_inicio, fecha_fin, VIEW_ANY_ROLES)
        if isinstance(resolved, Err):
            return resolved
        return Ok(resolved.value.to_summary())


    async def delete_event(
        self, identity: Identity, titulo: Optional[str], fecha_inicio: Optional[int], fecha_fin: Optional[int]
    ) -> Result[None]:
        """Solo el propietario o un administrador pueden eliminar el evento."""
        resolved = await self._resolve(identity, titulo, fecha_inicio, fecha_fin, MODIFY_ANY_ROLES)
        if isinstance(resolved, Err):
            return resolved
        event = resolved.value

        # Se borra la fila ya resuelta, no se vuelve a buscar por clave
        if await self.crud.delete_by_id(event.id) == 0:
            return _fail(ErrorKind.EVENT_NOT_FOUND)

        logger.info(f"Evento '{event.titulo}' eliminado por {identity.email}")
        return Ok(None)


    async def replace_event(
        self,
        identity: Identity,
        titulo: Optional[str],
        fecha_inicio: Optional[int],
        fecha_fin: Optional[int],
        event_update: EventCreate,
    ) -> Result[EventSummary]:
        """
        Reemplaza por completo el evento identificado por la clave actual.
        El propietario se conserva; la nueva clave no puede pertenecer a otro evento.
        """
        new_key_result = build_event_key(event_update.titulo, event_update.fecha_inicio, event_update.fecha_fin)
        if isinstance(new_key_result, Err):
            return new_key_result
        new_key = new_key_result.value

        if event_update.nombre_categoria is None or not event_update.nombre_categoria.strip():
            return _fail(ErrorKind.CATEGORY_MISSING)

        resolved = await self._resolve(identity, titulo, fecha_inicio, fecha_fin, MODIFY_ANY_ROLES)
        if isinstance(resolved, Err):
            return resolved
        current = resolved.value

        if new_key != current.key and await self.crud.exists(new_key):
            return _fail(ErrorKind.EVENT_ALREADY_EXISTS)

        if not await self.categories.exists(event_update.nombre_categoria):
            return _fail(ErrorKind.CATEGORY_NOT_FOUND)

        event_dict = new_key.as_filter()
        event_dict["email"] = current.email
        event_dict["nombreUsuario"] = current.nombre_usuario
        event_dict["categoria"] = event_update.nombre_categoria

        try:
            replaced = await self.crud.replace(current.id, event_dict)
        except DuplicateKeyError:
            return _fail(ErrorKind.EVENT_ALREADY_EXISTS)

        if replaced is None:
            return _fail(ErrorKind.EVENT_NOT_FOUND)

        logger.info(f"Evento '{current.titulo}' reemplazado por {identity.email}")
        return Ok(replaced.to_summary())


    async def list_events(self) -> List[EventSummary]:
        return await self.crud.list_summaries()


    async def list_events_for_identity(self, identity: Identity) -> Result[List[EventSummary]]:
        """
        Un administrador recibe todos los eventos. El resto recibe solo los
        suyos, y un listado vacío se señala con EVENTS_NOT_FOUND.
        """
        if identity.has_role(Role.ADMIN):
            return Ok(await self.list_events())

        events = await self.crud.list_summaries_by_owner(identity.email)
        if not events:
            return _fail(ErrorKind.EVENTS_NOT_FOUND)
        return Ok(events)
