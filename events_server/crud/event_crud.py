from typing import List, Optional

from pymongo import ReturnDocument
from pymongo.collection import Collection

from ..model.event_model import EventInDB, EventKey, EventSummary

# Campos de la proyección de lectura (EventSummary)
SUMMARY_PROJECTION = {"_id": 0, "titulo": 1, "fechaInicio": 1, "fechaFin": 1, "email": 1, "categoria": 1}


class EventCRUD:
    """
    Capa de Acceso a Datos (Repository) para Eventos (MongoDB).
    Toda la sintaxis de PyMongo se encapsula aquí.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    async def create(self, event_data: dict) -> EventInDB:
        """Inserta el documento del evento. Lanza DuplicateKeyError si la clave compuesta ya existe."""
        new_event = self.collection.insert_one(event_data)
        created_event = self.collection.find_one({"_id": new_event.inserted_id})
        return EventInDB.model_validate(created_event)


    async def get_by_key(self, key: EventKey) -> Optional[EventInDB]:
        """Busca un evento por su clave compuesta."""
        event_data = self.collection.find_one(key.as_filter())
        if event_data:
            return EventInDB.model_validate(event_data)
        return None


    async def exists(self, key: EventKey) -> bool:
        return self.collection.count_documents(key.as_filter(), limit=1) > 0


    async def replace(self, event_id: str, event_data: dict) -> Optional[EventInDB]:
        """Reemplaza el documento completo (sin parches parciales) y devuelve el resultado."""
        replaced = self.collection.find_one_and_replace(
            {"_id": event_id},
            event_data,
            return_document=ReturnDocument.AFTER
        )
        if replaced:
            return EventInDB.model_validate(replaced)
        return None


    async def delete_by_id(self, event_id: str) -> int:
        """Elimina un evento ya resuelto y devuelve el número de documentos eliminados (0 o 1)."""
        delete_result = self.collection.delete_one({"_id": event_id})
        return delete_result.deleted_count


    async def list_summaries(self) -> List[EventSummary]:
        """Devuelve la proyección de todos los eventos, ordenados por fecha de inicio."""
        cursor = self.collection.find({}, SUMMARY_PROJECTION).sort("fechaInicio", 1)
        return [EventSummary.model_validate(event) for event in cursor]


    async def list_summaries_by_owner(self, email: str) -> List[EventSummary]:
        """Devuelve la proyección de los eventos cuyo propietario es el email indicado."""
        cursor = self.collection.find({"email": email}, SUMMARY_PROJECTION).sort("fechaInicio", 1)
        return [EventSummary.model_validate(event) for event in cursor]


    async def count_by_category(self, nombre: str) -> int:
        return self.collection.count_documents({"categoria": nombre})


    async def count_by_owner(self, email: str) -> int:
        return self.collection.count_documents({"email": email})
