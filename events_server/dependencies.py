from . import database
from .crud.category_crud import CategoryCRUD
from .crud.event_crud import EventCRUD
from .crud.user_crud import UserCRUD
from .service.categoryService import CategoryService
from .service.eventService import EventService
from .service.userService import UserService

# Las colecciones se leen de `database` en cada llamada (no al importar),
# así los tests pueden sustituirlas con monkeypatch.

def get_category_crud() -> CategoryCRUD:
    return CategoryCRUD(database.categorias_collection)

def get_user_crud() -> UserCRUD:
    return UserCRUD(database.usuarios_collection)

def get_event_crud() -> EventCRUD:
    return EventCRUD(database.eventos_collection)

def get_category_service() -> CategoryService:
    """Provee el CategoryService, inyectándole los CRUD de categorías y eventos."""
    return CategoryService(crud_repository=get_category_crud(), event_repository=get_event_crud())

def get_user_service() -> UserService:
    """Provee el UserService, inyectándole los CRUD de usuarios y eventos."""
    return UserService(crud_repository=get_user_crud(), event_repository=get_event_crud())

def get_event_service() -> EventService:
    """Provee el EventService con su CRUD, el registro de usuarios y el CRUD de categorías."""
    return EventService(
        crud_repository=get_event_crud(),
        user_service=get_user_service(),
        category_repository=get_category_crud(),
    )
