from typing import List
import logging

from pymongo.errors import DuplicateKeyError

from ..crud.category_crud import CategoryCRUD
from ..crud.event_crud import EventCRUD
from ..errors import Err, ErrorKind, Ok, Result
from ..model.category_models import CategoryCreate, CategoryInDB

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Capa de Servicio para Categorías.

    Las categorías se identifican por su nombre. No se puede eliminar una
    categoría mientras algún evento la referencie.
    """
    def __init__(self, crud_repository: CategoryCRUD, event_repository: EventCRUD):
        """Inyección de Dependencia de los CRUD/Repository."""
        self.crud = crud_repository
        self.events = event_repository


    async def create_category(self, category: CategoryCreate) -> Result[CategoryInDB]:
        """
        Valida el nombre y registra la categoría. Un nombre repetido devuelve
        CATEGORY_EXISTS tanto si se detecta antes como durante la inserción.
        """
        if category.nombre is None or not category.nombre.strip():
            logger.error(ErrorKind.CATEGORY_NAME_EMPTY.message)
            return Err(ErrorKind.CATEGORY_NAME_EMPTY)

        if await self.crud.exists(category.nombre):
            logger.error(ErrorKind.CATEGORY_EXISTS.message)
            return Err(ErrorKind.CATEGORY_EXISTS)

        try:
            created = await self.crud.create(category.nombre, category.color)
        except DuplicateKeyError:
            logger.error(ErrorKind.CATEGORY_EXISTS.message)
            return Err(ErrorKind.CATEGORY_EXISTS)

        logger.info(f"Categoría '{created.nombre}' creada")
        return Ok(created)


    async def get_category(self, nombre: str) -> Result[CategoryInDB]:
        category = await self.crud.get_by_name(nombre)
        if category is None:
            logger.error(ErrorKind.CATEGORY_NOT_FOUND.message)
            return Err(ErrorKind.CATEGORY_NOT_FOUND)
        return Ok(category)


    async def delete_category(self, nombre: str) -> Result[None]:
        if not await self.crud.exists(nombre):
            logger.error(ErrorKind.CATEGORY_NOT_FOUND.message)
            return Err(ErrorKind.CATEGORY_NOT_FOUND)

        if await self.events.count_by_category(nombre) > 0:
            logger.error(ErrorKind.CATEGORY_IN_USE.message)
            return Err(ErrorKind.CATEGORY_IN_USE)

        await self.crud.delete(nombre)
        logger.info(f"Categoría '{nombre}' eliminada")
        return Ok(None)


    async def list_categories(self) -> List[CategoryInDB]:
        return await self.crud.list_all()
