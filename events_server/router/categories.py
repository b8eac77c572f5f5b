from fastapi import APIRouter, Body, Depends
from typing import List, Annotated

from ..errors import ELEMENTO_ELIMINADO, Err, error_response
from ..service.categoryService import CategoryService
from ..dependencies import get_category_service
from ..model.category_models import CategoryCreate, CategoryInDB
from ..security import TeacherIdentity

router = APIRouter(
    prefix="/events/categories",
    tags=["Categorías"]
)

# Definición del tipo inyectado (Dependencia del Servicio)
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]

# --- Endpoints ---

# 1. POST /events/categories/ : Crear una nueva categoría
@router.post(
    "/",
    response_model=CategoryInDB,
    response_description="Añadir nueva categoría",
)
async def create_category(
    category: Annotated[CategoryCreate, Body(
        examples=[{
            "nombre": "Excursiones",
            "color": "#22C55E",
        }]
    )],
    identity: TeacherIdentity,
    category_service: CategoryServiceDep
):
    """
    Crea una categoría. El nombre es obligatorio y único.
    """
    result = await category_service.create_category(category)
    if isinstance(result, Err):
        return error_response(result)
    return result.value


# 2. GET /events/categories/ : Obtener todas las categorías
@router.get(
    "/",
    response_model=List[CategoryInDB],
    response_description="Listar todas las categorías",
)
async def list_categories(identity: TeacherIdentity, category_service: CategoryServiceDep):
    return await category_service.list_categories()


# 3. GET /events/categories/{nombre} : Obtener una categoría por su nombre
@router.get(
    "/{nombre}",
    response_model=CategoryInDB,
    response_description="Obtener una categoría por su nombre",
)
async def get_category(nombre: str, identity: TeacherIdentity, category_service: CategoryServiceDep):
    result = await category_service.get_category(nombre)
    if isinstance(result, Err):
        return error_response(result)
    return result.value


# 4. DELETE /events/categories/{nombre} : Eliminar una categoría
@router.delete(
    "/{nombre}",
    response_description="Eliminar una categoría por su nombre",
)
async def delete_category(nombre: str, identity: TeacherIdentity, category_service: CategoryServiceDep):
    """
    Elimina una categoría. Falla si no existe o si algún evento la utiliza.
    """
    result = await category_service.delete_category(nombre)
    if isinstance(result, Err):
        return error_response(result)
    return {"message": ELEMENTO_ELIMINADO}
