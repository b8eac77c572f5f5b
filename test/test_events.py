from fastapi.testclient import TestClient
from events_server.main import app
import json
import pytest

client = TestClient(app)

EVENTS_URL = "/events/manager/"
OTHER_TEACHER = "otro.profesor@iesjandula.es"


@pytest.fixture(autouse=True)
def work_category(test_db, auth_headers):
    # Todos los tests parten de una categoría "Work" existente
    response = client.post("/events/categories/", json={"nombre": "Work", "color": "#3B82F6"}, headers=auth_headers())
    assert response.status_code == 200


def new_event(titulo="Standup", inicio=1000, fin=2000, categoria="Work"):
    return {"titulo": titulo, "fechaInicio": inicio, "fechaFin": fin, "nombre": categoria}


def key_headers(auth_headers, titulo="Standup", inicio=1000, fin=2000, **identity):
    return auth_headers(titulo=titulo, fechaInicio=inicio, fechaFin=fin, **identity)

# --- Tests para POST /events/manager/ ---

def test_create_event(auth_headers):
    response = client.post(EVENTS_URL, json=new_event(), headers=auth_headers())
    data = response.json()
    print(f"==>> test_create_event: {json.dumps(data, indent=4)}")
    assert response.status_code == 200
    assert data == {
        "titulo": "Standup",
        "fechaInicio": 1000,
        "fechaFin": 2000,
        "email": "profesor@iesjandula.es",
        "categoria": "Work",
    }

def test_create_event_twice_fails(auth_headers):
    assert client.post(EVENTS_URL, json=new_event(), headers=auth_headers()).status_code == 200

    response = client.post(EVENTS_URL, json=new_event(), headers=auth_headers())
    assert response.status_code == 400
    assert response.json() == {"codigo": 12, "message": "El evento ya existe en el sistema."}

def test_create_event_same_key_other_owner_fails(auth_headers):
    # La clave no incluye al propietario: dos usuarios no comparten clave
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())
    response = client.post(EVENTS_URL, json=new_event(), headers=auth_headers(email=OTHER_TEACHER))
    assert response.status_code == 400
    assert response.json()["codigo"] == 12

def test_create_event_empty_title(auth_headers):
    for titulo in ("", "   ", None):
        response = client.post(EVENTS_URL, json=new_event(titulo=titulo), headers=auth_headers())
        assert response.status_code == 400
        assert response.json()["codigo"] == 10

@pytest.mark.parametrize("inicio, fin", [(0, 2000), (1000, 0), (-5, 2000), (None, 2000), (1000, None), (2000, 1000)])
def test_create_event_invalid_dates(auth_headers, inicio, fin):
    response = client.post(EVENTS_URL, json=new_event(inicio=inicio, fin=fin), headers=auth_headers())
    assert response.status_code == 400
    assert response.json() == {
        "codigo": 11,
        "message": "La fecha de fin no puede ser anterior a la fecha de inicio.",
    }

def test_create_event_same_start_and_end(auth_headers):
    response = client.post(EVENTS_URL, json=new_event(inicio=3000, fin=3000), headers=auth_headers())
    assert response.status_code == 200

def test_create_event_date_beyond_64_bits(auth_headers, test_db):
    response = client.post(EVENTS_URL, json=new_event(fin=2**63), headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["codigo"] == 11
    assert test_db["eventos"].count_documents({}) == 0

def test_create_event_without_category(auth_headers):
    response = client.post(EVENTS_URL, json=new_event(categoria=""), headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["codigo"] == 16

def test_create_event_unknown_category(auth_headers, test_db):
    response = client.post(EVENTS_URL, json=new_event(categoria="NoExiste"), headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["codigo"] == 8
    assert test_db["eventos"].count_documents({}) == 0

def test_create_event_registers_owner(auth_headers, test_db):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers(nombre="Ana García"))
    client.post(EVENTS_URL, json=new_event(titulo="Claustro"), headers=auth_headers(nombre="Ana García"))

    users = list(test_db["usuarios"].find({}))
    assert len(users) == 1
    assert users[0]["email"] == "profesor@iesjandula.es"
    assert users[0]["nombre"] == "Ana García"

def test_create_event_malformed_body(auth_headers):
    response = client.post(EVENTS_URL, json=new_event(inicio="mañana"), headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["codigo"] == 19

def test_create_event_boolean_dates_rejected(auth_headers, test_db):
    # true no se acepta como fecha aunque Python lo trate como 1
    response = client.post(EVENTS_URL, json=new_event(inicio=True, fin=True), headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["codigo"] == 19
    assert test_db["eventos"].count_documents({}) == 0

# --- Tests para GET /events/manager/filtro ---

def test_get_event_round_trip(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())

    response = client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers))
    assert response.status_code == 200
    data = response.json()
    assert (data["titulo"], data["fechaInicio"], data["fechaFin"]) == ("Standup", 1000, 2000)
    assert data["categoria"] == "Work"

def test_get_event_not_found(auth_headers):
    response = client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers))
    assert response.status_code == 400
    assert response.json()["codigo"] == 13

def test_get_event_end_before_start(auth_headers):
    response = client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers, inicio=2000, fin=1000))
    assert response.status_code == 400
    assert response.json()["codigo"] == 11

def test_get_event_same_start_and_end(auth_headers):
    client.post(EVENTS_URL, json=new_event(inicio=3000, fin=3000), headers=auth_headers())

    response = client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers, inicio=3000, fin=3000))
    assert response.status_code == 200
    assert (response.json()["fechaInicio"], response.json()["fechaFin"]) == (3000, 3000)

def test_get_event_date_beyond_64_bits(auth_headers):
    response = client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers, fin=2**63))
    assert response.status_code == 400
    assert response.json()["codigo"] == 11

def test_get_event_missing_headers(auth_headers):
    response = client.get(f"{EVENTS_URL}filtro", headers=auth_headers(titulo="Standup"))
    assert response.status_code == 400
    assert response.json()["codigo"] == 11

def test_get_event_malformed_header(auth_headers):
    response = client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers, inicio="ayer"))
    assert response.status_code == 400
    assert response.json()["codigo"] == 19

def test_get_event_of_other_teacher_forbidden(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())

    response = client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers, email=OTHER_TEACHER))
    assert response.status_code == 400
    assert response.json()["codigo"] == 21

@pytest.mark.parametrize("roles", [("ADMINISTRADOR",), ("DIRECCION",), ("PROFESOR", "DIRECCION")])
def test_get_event_privileged_roles(auth_headers, roles):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())

    response = client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers, email=OTHER_TEACHER, roles=roles))
    assert response.status_code == 200
    assert response.json()["email"] == "profesor@iesjandula.es"

def test_get_event_student_rejected(auth_headers):
    response = client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers, roles=("ALUMNO",)))
    assert response.status_code == 403

# --- Tests para DELETE /events/manager/ ---

def test_delete_event(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())

    delete_response = client.delete(EVENTS_URL, headers=key_headers(auth_headers))
    assert delete_response.status_code == 200
    assert delete_response.json() == {"message": "Elemento eliminado correctamente."}

    # Verificamos que ya no existe
    get_response = client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers))
    assert get_response.status_code == 400
    assert get_response.json()["codigo"] == 13

def test_delete_event_not_found(auth_headers):
    response = client.delete(EVENTS_URL, headers=key_headers(auth_headers))
    assert response.status_code == 400
    assert response.json()["codigo"] == 13

def test_delete_event_end_before_start(auth_headers):
    response = client.delete(EVENTS_URL, headers=key_headers(auth_headers, inicio=2000, fin=1000))
    assert response.status_code == 400
    assert response.json()["codigo"] == 11

def test_delete_event_same_start_and_end(auth_headers):
    client.post(EVENTS_URL, json=new_event(inicio=3000, fin=3000), headers=auth_headers())

    response = client.delete(EVENTS_URL, headers=key_headers(auth_headers, inicio=3000, fin=3000))
    assert response.status_code == 200
    assert client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers, inicio=3000, fin=3000)).json()["codigo"] == 13

def test_delete_event_date_beyond_64_bits(auth_headers):
    response = client.delete(EVENTS_URL, headers=key_headers(auth_headers, inicio=2**63, fin=2**63 + 1))
    assert response.status_code == 400
    assert response.json()["codigo"] == 11

def test_delete_event_of_other_teacher_forbidden(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())

    for roles in (("PROFESOR",), ("PROFESOR", "DIRECCION")):
        response = client.delete(EVENTS_URL, headers=key_headers(auth_headers, email=OTHER_TEACHER, roles=roles))
        assert response.status_code == 400
        assert response.json()["codigo"] == 21

    # El evento sigue existiendo
    assert client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers)).status_code == 200

def test_delete_event_by_admin(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())

    response = client.delete(
        EVENTS_URL,
        headers=key_headers(auth_headers, email="admin@iesjandula.es", roles=("ADMINISTRADOR",)),
    )
    assert response.status_code == 200

# --- Tests para PUT /events/manager/ ---

def test_replace_event(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())

    response = client.put(
        EVENTS_URL,
        json=new_event(titulo="Standup semanal", inicio=1500, fin=2500),
        headers=key_headers(auth_headers),
    )
    assert response.status_code == 200
    assert response.json()["titulo"] == "Standup semanal"
    assert response.json()["email"] == "profesor@iesjandula.es"

    old_response = client.get(f"{EVENTS_URL}filtro", headers=key_headers(auth_headers))
    assert old_response.json()["codigo"] == 13
    new_response = client.get(
        f"{EVENTS_URL}filtro", headers=key_headers(auth_headers, titulo="Standup semanal", inicio=1500, fin=2500)
    )
    assert new_response.status_code == 200

def test_replace_event_onto_existing_key(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())
    client.post(EVENTS_URL, json=new_event(titulo="Claustro"), headers=auth_headers())

    response = client.put(EVENTS_URL, json=new_event(titulo="Claustro"), headers=key_headers(auth_headers))
    assert response.status_code == 400
    assert response.json()["codigo"] == 12

def test_replace_event_unknown_category(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())

    response = client.put(EVENTS_URL, json=new_event(categoria="NoExiste"), headers=key_headers(auth_headers))
    assert response.status_code == 400
    assert response.json()["codigo"] == 8

def test_replace_event_of_other_teacher_forbidden(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())

    response = client.put(EVENTS_URL, json=new_event(titulo="Mío"), headers=key_headers(auth_headers, email=OTHER_TEACHER))
    assert response.status_code == 400
    assert response.json()["codigo"] == 21

# --- Tests para GET /events/manager/ y /events/manager/{email} ---

def test_list_events(auth_headers):
    client.post(EVENTS_URL, json=new_event(titulo="Tarde", inicio=5000, fin=6000), headers=auth_headers())
    client.post(EVENTS_URL, json=new_event(titulo="Mañana", inicio=1000, fin=2000), headers=auth_headers(email=OTHER_TEACHER))

    response = client.get(EVENTS_URL, headers=auth_headers())
    assert response.status_code == 200
    assert [event["titulo"] for event in response.json()] == ["Mañana", "Tarde"]

def test_list_events_for_user(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())
    client.post(EVENTS_URL, json=new_event(titulo="Ajeno"), headers=auth_headers(email=OTHER_TEACHER))

    response = client.get(f"{EVENTS_URL}profesor@iesjandula.es", headers=auth_headers())
    assert response.status_code == 200
    assert [event["titulo"] for event in response.json()] == ["Standup"]

def test_list_events_for_user_without_events(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers(email=OTHER_TEACHER))

    response = client.get(f"{EVENTS_URL}profesor@iesjandula.es", headers=auth_headers())
    assert response.status_code == 400
    assert response.json() == {"codigo": 15, "message": "No hay eventos asociados al usuario."}

def test_list_events_for_admin_returns_all(auth_headers):
    client.post(EVENTS_URL, json=new_event(), headers=auth_headers())
    client.post(EVENTS_URL, json=new_event(titulo="Ajeno"), headers=auth_headers(email=OTHER_TEACHER))

    response = client.get(
        f"{EVENTS_URL}admin@iesjandula.es",
        headers=auth_headers(email="admin@iesjandula.es", roles=("ADMINISTRADOR",)),
    )
    assert response.status_code == 200
    assert len(response.json()) == 2

# --- Errores no controlados ---

def test_unexpected_error_is_masked(auth_headers, monkeypatch):
    async def broken_listing(self):
        raise RuntimeError("MongoDB no disponible")

    monkeypatch.setattr("events_server.crud.event_crud.EventCRUD.list_summaries", broken_listing)
    safe_client = TestClient(app, raise_server_exceptions=False)

    response = safe_client.get(EVENTS_URL, headers=auth_headers())
    assert response.status_code == 500
    assert response.json() == {"codigo": 20, "message": "Error de servidor."}

    monkeypatch.setattr("events_server.main.INCLUDE_STACK_TRACE", True)
    response = safe_client.get(EVENTS_URL, headers=auth_headers())
    assert response.status_code == 500
    assert "MongoDB no disponible" in response.json()["excepcion"]
