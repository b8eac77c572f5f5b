from typing import List, Optional

from pymongo.collection import Collection

from ..model.category_models import CategoryInDB


class CategoryCRUD:
    """
    Capa de Acceso a Datos (Repository) para Categorías (MongoDB).
    El nombre de la categoría es el _id del documento.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    async def create(self, nombre: str, color: Optional[str]) -> CategoryInDB:
        """Inserta la categoría. Lanza DuplicateKeyError si el nombre ya existe."""
        self.collection.insert_one({"_id": nombre, "nombre": nombre, "color": color})
        return CategoryInDB(nombre=nombre, color=color)


    async def get_by_name(self, nombre: str) -> Optional[CategoryInDB]:
        """Busca una categoría por su nombre."""
        category_data = self.collection.find_one({"_id": nombre})
        if category_data:
            return CategoryInDB.model_validate(category_data)
        return None


    async def exists(self, nombre: str) -> bool:
        return self.collection.count_documents({"_id": nombre}, limit=1) > 0


    async def list_all(self) -> List[CategoryInDB]:
        """Devuelve todas las categorías ordenadas por nombre."""
        cursor = self.collection.find({}, {"_id": 0}).sort("nombre", 1)
        return [CategoryInDB.model_validate(category) for category in cursor]


    async def delete(self, nombre: str) -> int:
        """Elimina una categoría y devuelve el número de documentos eliminados (0 o 1)."""
        delete_result = self.collection.delete_one({"_id": nombre})
        return delete_result.deleted_count
