from datetime import datetime, timedelta, timezone

import jwt
import mongomock
import pytest

# Importamos el módulo cuyas colecciones serán "monkeypatched"
from events_server import database
from events_server.security import JWT_ALGORITHM, JWT_SECRET_KEY

PROFESOR_EMAIL = "profesor@iesjandula.es"


# Esta fixture se ejecutará ANTES de CADA test.
@pytest.fixture(scope="function", autouse=True)
def test_db(monkeypatch):
    # Nombre para la base de datos de prueba
    test_db_name = "ReaktorEventsDB_Test"

    # Cliente en memoria: cada test parte de una base de datos vacía
    test_client = mongomock.MongoClient()
    test_db = test_client[test_db_name]

    # Reemplazamos los objetos de la BBDD en events_server.database con los de test
    monkeypatch.setattr("events_server.database.client", test_client)
    monkeypatch.setattr("events_server.database.db", test_db)
    monkeypatch.setattr("events_server.database.usuarios_collection", test_db["usuarios"])
    monkeypatch.setattr("events_server.database.categorias_collection", test_db["categorias"])
    monkeypatch.setattr("events_server.database.eventos_collection", test_db["eventos"])
    database.ensure_indexes()

    # Ejecutar tests
    yield test_db

    test_client.drop_database(test_db_name)
    test_client.close()


def make_token(email, nombre="Usuario de prueba", roles=("PROFESOR",), expires_in=timedelta(hours=1)):
    """Firma un token JWT igual que el emisor de identidades."""
    now = datetime.now(timezone.utc)
    payload = {
        "email": email,
        "name": nombre,
        "roles": list(roles),
        "exp": now + expires_in,
        "iat": now,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


@pytest.fixture
def auth_headers():
    """Devuelve una función que construye la cabecera Authorization para una identidad."""
    def build(email=PROFESOR_EMAIL, nombre="Profesor de prueba", roles=("PROFESOR",), **extra_headers):
        headers = {"Authorization": f"Bearer {make_token(email, nombre, roles)}"}
        headers.update({key: str(value) for key, value in extra_headers.items()})
        return headers
    return build


@pytest.fixture
def expired_token():
    return make_token(PROFESOR_EMAIL, expires_in=timedelta(hours=-1))
