from pydantic import BaseModel, Field
from typing import Optional

# Modelo para CREAR o MODIFICAR un usuario
class UserCreate(BaseModel):
    email: Optional[str] = Field(default=None, max_length=150, json_schema_extra={"example": "profesor@iesjandula.es"})
    nombre: Optional[str] = Field(default=None, max_length=100, json_schema_extra={"example": "Ana García"})

# Modelo para RESPUESTA (lo que devolvemos desde la API)
class UserInDB(BaseModel):
    email: str
    nombre: Optional[str] = None
