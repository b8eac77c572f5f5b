from typing import List, Optional

from pymongo import ReturnDocument
from pymongo.collection import Collection

from ..model.user_models import UserInDB


class UserCRUD:
    """
    Capa de Acceso a Datos (Repository) para Usuarios (MongoDB).
    El email del usuario es el _id del documento.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    async def create(self, email: str, nombre: Optional[str]) -> UserInDB:
        """Inserta el usuario. Lanza DuplicateKeyError si el email ya existe."""
        self.collection.insert_one({"_id": email, "email": email, "nombre": nombre})
        return UserInDB(email=email, nombre=nombre)


    async def get_by_email(self, email: str) -> Optional[UserInDB]:
        user_data = self.collection.find_one({"_id": email})
        if user_data:
            return UserInDB.model_validate(user_data)
        return None


    async def exists(self, email: str) -> bool:
        return self.collection.count_documents({"_id": email}, limit=1) > 0


    async def list_all(self) -> List[UserInDB]:
        cursor = self.collection.find({}, {"_id": 0}).sort("email", 1)
        return [UserInDB.model_validate(user) for user in cursor]


    async def update_name(self, email: str, nombre: Optional[str]) -> Optional[UserInDB]:
        """Actualiza el nombre y devuelve el documento actualizado."""
        updated_data = self.collection.find_one_and_update(
            {"_id": email},
            {"$set": {"nombre": nombre}},
            return_document=ReturnDocument.AFTER
        )
        if updated_data:
            return UserInDB.model_validate(updated_data)
        return None


    async def delete(self, email: str) -> int:
        """Elimina un usuario y devuelve el número de documentos eliminados (0 o 1)."""
        delete_result = self.collection.delete_one({"_id": email})
        return delete_result.deleted_count
