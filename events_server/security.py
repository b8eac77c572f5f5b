from enum import Enum
from typing import Annotated, FrozenSet, Iterable, Optional
import logging
import os

import jwt
from dotenv import load_dotenv
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict

load_dotenv()

logger = logging.getLogger(__name__)

# Configurar seguridad HTTP Bearer para Swagger UI
security = HTTPBearer(auto_error=False)

# Clave secreta para validar tokens JWT (debe ser la misma que la del emisor de los tokens)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "clave_super_secreta_jwt_reaktor_events_2024")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")


class Role(str, Enum):
    TEACHER = "PROFESOR"
    ADMIN = "ADMINISTRADOR"
    DIRECTION = "DIRECCION"
    STUDENT = "ALUMNO"


# Roles que pueden ver cualquier evento / modificar cualquier evento
VIEW_ANY_ROLES = frozenset({Role.ADMIN, Role.DIRECTION})
MODIFY_ANY_ROLES = frozenset({Role.ADMIN})


class Identity(BaseModel):
    """Identidad verificada del usuario que hace la petición."""
    email: str
    nombre: Optional[str] = None
    roles: FrozenSet[Role] = frozenset()

    model_config = ConfigDict(frozen=True)

    def has_role(self, role: Role) -> bool:
        return role in self.roles

    def has_any_role(self, roles: Iterable[Role]) -> bool:
        return any(role in self.roles for role in roles)


def can_access_event(identity: Identity, event, any_roles: Iterable[Role] = VIEW_ANY_ROLES) -> bool:
    """
    Decide si la identidad puede operar sobre el evento: basta con tener
    alguno de los roles privilegiados o ser el propietario del evento.
    """
    return identity.has_any_role(any_roles) or identity.email == event.email


def _parse_roles(payload: dict) -> FrozenSet[Role]:
    """Acepta tanto el claim 'roles' (lista) como el claim 'role' (cadena)."""
    raw_roles = payload.get("roles")
    if raw_roles is None:
        raw_roles = [payload["role"]] if payload.get("role") else []
    elif isinstance(raw_roles, str):
        raw_roles = [raw_roles]

    roles = set()
    for raw in raw_roles:
        name = str(raw).upper().removeprefix("ROLE_")
        try:
            roles.add(Role(name))
        except ValueError:
            logger.warning(f"Rol desconocido en el token: {raw}")
    return frozenset(roles)


def verify_jwt_token(authorization: Optional[str]) -> dict:
    """
    Verifica el token JWT de la cabecera Authorization.
    Retorna los datos del usuario si el token es válido.
    Lanza HTTPException si el token es inválido o no está presente.
    """
    if not authorization:
        logger.warning("No se proporcionó cabecera Authorization")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No autorizado. Cabecera Authorization requerida"
        )

    if not authorization.startswith("Bearer "):
        logger.warning("Formato de token inválido")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Formato de token inválido. Use: Authorization: Bearer <token>"
        )

    token = authorization.removeprefix("Bearer ")

    try:
        # PyJWT valida también la expiración (claim 'exp')
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("Token expirado")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expirado")
    except jwt.InvalidTokenError:
        logger.warning("Token inválido")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido")


def get_current_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)]
) -> Identity:
    """Provee la identidad verificada a partir del token Bearer de la petición."""
    auth_header = f"Bearer {credentials.credentials}" if credentials else None
    payload = verify_jwt_token(auth_header)

    email = payload.get("email")
    if not email:
        logger.warning("Token sin claim 'email'")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token sin email")

    return Identity(email=email, nombre=payload.get("name"), roles=_parse_roles(payload))


def require_roles(*roles: Role):
    """Crea una dependencia que exige al menos uno de los roles indicados."""
    def dependency(identity: Annotated[Identity, Depends(get_current_identity)]) -> Identity:
        if not identity.has_any_role(roles):
            logger.warning(f"Acceso denegado a {identity.email}: requiere alguno de {[r.value for r in roles]}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permisos insuficientes")
        return identity
    return dependency


# Tipos inyectados por rol
TeacherIdentity = Annotated[Identity, Depends(require_roles(Role.TEACHER, Role.ADMIN))]
ViewerIdentity = Annotated[Identity, Depends(require_roles(Role.TEACHER, Role.ADMIN, Role.DIRECTION))]
AdminIdentity = Annotated[Identity, Depends(require_roles(Role.ADMIN))]
