from fastapi import APIRouter, Body, Depends
from typing import List, Annotated

from ..errors import ELEMENTO_ELIMINADO, Err, error_response
from ..service.userService import UserService
from ..dependencies import get_user_service
from ..model.user_models import UserCreate, UserInDB
from ..security import AdminIdentity

router = APIRouter(
    prefix="/events/users",
    tags=["Usuarios"]
)

UserServiceDep = Annotated[UserService, Depends(get_user_service)]

USER_EXAMPLE = {"email": "profesor@iesjandula.es", "nombre": "Ana García"}

# --- Endpoints (solo administración) ---

# 1. POST /events/users/ : Registrar un usuario
@router.post("/", response_model=UserInDB, response_description="Añadir nuevo usuario")
async def create_user(
    user: Annotated[UserCreate, Body(examples=[USER_EXAMPLE])],
    identity: AdminIdentity,
    user_service: UserServiceDep
):
    result = await user_service.create_user(user)
    if isinstance(result, Err):
        return error_response(result)
    return result.value


# 2. PUT /events/users/ : Modificar el nombre de un usuario
@router.put("/", response_model=UserInDB, response_description="Modificar un usuario")
async def update_user(
    user: Annotated[UserCreate, Body(examples=[USER_EXAMPLE])],
    identity: AdminIdentity,
    user_service: UserServiceDep
):
    """
    Cambia el nombre del usuario. El email identifica al usuario y no se modifica.
    """
    result = await user_service.update_user(user)
    if isinstance(result, Err):
        return error_response(result)
    return result.value


# 3. DELETE /events/users/{email} : Eliminar un usuario
@router.delete("/{email}", response_description="Eliminar un usuario")
async def delete_user(email: str, identity: AdminIdentity, user_service: UserServiceDep):
    result = await user_service.delete_user(email)
    if isinstance(result, Err):
        return error_response(result)
    return {"message": ELEMENTO_ELIMINADO}


# 4. GET /events/users/ : Listar todos los usuarios
@router.get("/", response_model=List[UserInDB], response_description="Listar todos los usuarios")
async def list_users(identity: AdminIdentity, user_service: UserServiceDep):
    return await user_service.list_users()
