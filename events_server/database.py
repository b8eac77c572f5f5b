from pymongo import ASCENDING
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi
from dotenv import load_dotenv
import logging
import os


load_dotenv()

logger = logging.getLogger(__name__)

uri = os.getenv('MONGODB_URI')
client = MongoClient(uri, server_api=ServerApi('1'))
db = client[os.getenv('MONGODB_DB', 'ReaktorEventsDB')]
usuarios_collection = db['usuarios']
categorias_collection = db['categorias']
eventos_collection = db['eventos']


def ensure_indexes():
    """
    Crea los índices de la colección de eventos. La clave compuesta
    (titulo, fechaInicio, fechaFin) es única: una inserción duplicada
    falla con DuplicateKeyError aunque dos peticiones pasen la comprobación previa.
    Usuarios y categorías usan su clave natural como _id.
    """
    eventos_collection.create_index(
        [("titulo", ASCENDING), ("fechaInicio", ASCENDING), ("fechaFin", ASCENDING)],
        unique=True,
        name="evento_clave_unica",
    )
    eventos_collection.create_index("email", name="evento_email")
    eventos_collection.create_index("categoria", name="evento_categoria")
    logger.info("Índices de la colección de eventos verificados")
