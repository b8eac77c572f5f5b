from typing import List, Optional
import logging

from pymongo.errors import DuplicateKeyError

from ..crud.event_crud import EventCRUD
from ..crud.user_crud import UserCRUD
from ..errors import Err, ErrorKind, Ok, Result
from ..model.user_models import UserCreate, UserInDB

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class UserService:
    """
    Capa de Servicio para Usuarios. El email es la clave y no se puede modificar.
    """
    def __init__(self, crud_repository: UserCRUD, event_repository: EventCRUD):
        self.crud = crud_repository
        self.events = event_repository


    async def create_user(self, user: UserCreate) -> Result[UserInDB]:
        if _is_blank(user.email):
            logger.error(ErrorKind.EMAIL_EMPTY.message)
            return Err(ErrorKind.EMAIL_EMPTY)

        if await self.crud.exists(user.email):
            logger.error(ErrorKind.USER_EXISTS.message)
            return Err(ErrorKind.USER_EXISTS)

        try:
            created = await self.crud.create(user.email, user.nombre)
        except DuplicateKeyError:
            # Otra petición lo insertó entre la comprobación y la inserción
            logger.error(ErrorKind.USER_EXISTS.message)
            return Err(ErrorKind.USER_EXISTS)

        logger.info(f"Usuario {created.email} creado")
        return Ok(created)


    async def update_user(self, user: UserCreate) -> Result[UserInDB]:
        """Reemplaza el nombre del usuario."""
        if _is_blank(user.email):
            logger.error(ErrorKind.EMAIL_EMPTY.message)
            return Err(ErrorKind.EMAIL_EMPTY)

        updated = await self.crud.update_name(user.email, user.nombre)
        if updated is None:
            logger.error(ErrorKind.USER_NOT_FOUND.message)
            return Err(ErrorKind.USER_NOT_FOUND)

        logger.info(f"Usuario {updated.email} modificado")
        return Ok(updated)


    async def delete_user(self, email: str) -> Result[None]:
        """Elimina un usuario sin eventos asociados (borrado restringido)."""
        if not await self.crud.exists(email):
            logger.error(ErrorKind.USER_NOT_FOUND.message)
            return Err(ErrorKind.USER_NOT_FOUND)

        if await self.events.count_by_owner(email) > 0:
            logger.error(ErrorKind.USER_IN_USE.message)
            return Err(ErrorKind.USER_IN_USE)

        await self.crud.delete(email)
        logger.info(f"Usuario {email} eliminado")
        return Ok(None)


    async def list_users(self) -> List[UserInDB]:
        return await self.crud.list_all()


    async def get_or_create(self, email: str, nombre: Optional[str]) -> UserInDB:
        """
        Devuelve el usuario existente o lo crea con los datos de la identidad.
        Nunca falla por sí mismo: si una inserción concurrente gana la carrera,
        se devuelve el registro que quedó guardado.
        """
        existing = await self.crud.get_by_email(email)
        if existing is not None:
            return existing

        try:
            created = await self.crud.create(email, nombre)
            logger.info(f"Usuario {email} creado al registrar su primer evento")
            return created
        except DuplicateKeyError:
            stored = await self.crud.get_by_email(email)
            # Si otra petición lo borró justo después, el evento se asigna igualmente a esta identidad
            return stored if stored is not None else UserInDB(email=email, nombre=nombre)
