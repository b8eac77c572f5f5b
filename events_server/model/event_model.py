from pydantic import BaseModel, Field, ConfigDict, StrictInt
from typing import Optional


# Clave compuesta del evento. Las fechas son milisegundos desde epoch.
class EventKey(BaseModel):
    titulo: str
    fecha_inicio: int = Field(..., alias="fechaInicio")
    fecha_fin: int = Field(..., alias="fechaFin")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def as_filter(self) -> dict:
        """Filtro de MongoDB que selecciona exactamente esta clave."""
        return self.model_dump(by_alias=True)


# Modelo para CREAR o REEMPLAZAR un evento. Todos los campos son opcionales
# aquí: la validación de título, fechas y categoría la hace el servicio.
class EventCreate(BaseModel):
    titulo: Optional[str] = Field(default=None, json_schema_extra={"example": "Reunión de departamento"})
    fecha_inicio: Optional[StrictInt] = Field(default=None, alias="fechaInicio", json_schema_extra={"example": 1767258000000})
    fecha_fin: Optional[StrictInt] = Field(default=None, alias="fechaFin", json_schema_extra={"example": 1767261600000})
    nombre_categoria: Optional[str] = Field(default=None, alias="nombre", json_schema_extra={"example": "Reuniones"})

    model_config = ConfigDict(populate_by_name=True)


# Proyección de lectura (desnormalizada) usada por los listados y por la consulta por clave.
class EventSummary(BaseModel):
    titulo: str
    fecha_inicio: int = Field(..., alias="fechaInicio")
    fecha_fin: int = Field(..., alias="fechaFin")
    email: str
    categoria: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "titulo": "Reunión de departamento",
                "fechaInicio": 1767258000000,
                "fechaFin": 1767261600000,
                "email": "profesor@iesjandula.es",
                "categoria": "Reuniones"
            }
        }
    )


# Documento completo tal y como se guarda en MongoDB
class EventInDB(EventSummary):
    id: str = Field(..., alias="_id")
    nombre_usuario: Optional[str] = Field(default=None, alias="nombreUsuario")

    @property
    def key(self) -> EventKey:
        return EventKey(titulo=self.titulo, fecha_inicio=self.fecha_inicio, fecha_fin=self.fecha_fin)

    def to_summary(self) -> EventSummary:
        return EventSummary(
            titulo=self.titulo,
            fecha_inicio=self.fecha_inicio,
            fecha_fin=self.fecha_fin,
            email=self.email,
            categoria=self.categoria,
        )
