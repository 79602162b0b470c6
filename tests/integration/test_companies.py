import pytest

from contapyme.models.companies import Company

CREATE_URL = "/api/companies/create"


@pytest.mark.parametrize("payload", [
    {"business_name": "Pyme SpA", "rut": "76.123.456-7"},
    {},
    {"rut": ""},
])
def test_create_without_session_is_unauthorized(client, payload):
    response = client.post(CREATE_URL, json=payload)
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_create_without_session_and_without_body_is_unauthorized(client):
    response = client.post(CREATE_URL)
    assert response.status_code == 401


@pytest.mark.parametrize("payload", [
    {"business_name": "Pyme SpA"},
    {"rut": "76.123.456-7"},
    {"business_name": "   ", "rut": "76.123.456-7"},
])
def test_create_with_missing_fields_is_rejected(auth_client, payload):
    response = auth_client.post(CREATE_URL, json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Faltan datos requeridos"


def test_create_company(auth_client, user, db_session):
    response = auth_client.post(CREATE_URL, json={
        "business_name": "Comercial Los Andes SpA",
        "rut": "76.123.456-7",
        "industry_sector": "Comercio",
        "email": "contacto@losandes.cl",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["company"]["rut"] == "76.123.456-7"
    assert body["company"]["user_id"] == user.id

    stored = db_session.query(Company).filter(Company.user_id == user.id).one()
    assert stored.business_name == "Comercial Los Andes SpA"


def test_duplicate_rut_for_same_user_conflicts(auth_client):
    payload = {"business_name": "Pyme SpA", "rut": "76.123.456-7"}
    assert auth_client.post(CREATE_URL, json=payload).status_code == 200

    response = auth_client.post(CREATE_URL, json=payload)
    assert response.status_code == 409


@pytest.mark.parametrize("other_rut", ["761234567", "76123456-7", "76.123.456-7 "])
def test_duplicate_rut_in_another_format_conflicts(auth_client, db_session, other_rut):
    assert auth_client.post(CREATE_URL, json={"business_name": "Pyme SpA", "rut": "76.123.456-7"}).status_code == 200

    response = auth_client.post(CREATE_URL, json={"business_name": "Pyme Dos SpA", "rut": other_rut})
    assert response.status_code == 409
    assert db_session.query(Company).count() == 1


def test_list_companies(auth_client):
    auth_client.post(CREATE_URL, json={"business_name": "Uno SpA", "rut": "76.000.001-1"})
    auth_client.post(CREATE_URL, json={"business_name": "Dos SpA", "rut": "76.000.002-K"})

    response = auth_client.get("/api/companies")
    assert response.status_code == 200
    assert [c["business_name"] for c in response.json()["data"]] == ["Uno SpA", "Dos SpA"]


def test_list_companies_requires_session(client):
    assert client.get("/api/companies").status_code == 401
