from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

# Modelo BASE
class CategoryBase(BaseModel):
    color: Optional[str] = Field(default=None, max_length=10, json_schema_extra={"example": "#3B82F6"})

# Modelo para CREAR una categoría. El nombre se valida en el servicio
# para poder devolver el código de error de dominio.
class CategoryCreate(CategoryBase):
    nombre: Optional[str] = Field(default=None, max_length=100, json_schema_extra={"example": "Excursiones"})

# Modelo para RESPUESTA (lo que devolvemos desde la API)
class CategoryInDB(CategoryBase):
    nombre: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "nombre": "Excursiones",
                "color": "#3B82F6"
            }
        }
    )
