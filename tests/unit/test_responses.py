import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from contapyme.exceptions import ConflictError
from contapyme.utils.responses import add_exception_handlers, error_body, ok


@pytest.fixture
def app_client():
    app = FastAPI()
    add_exception_handlers(app)

    @app.get("/boom")
    def boom():
        raise RuntimeError("password=secreto en la cadena de conexión")

    @app.get("/conflict")
    def conflict():
        raise ConflictError("Ya existe", {"code": "1"})

    return TestClient(app, raise_server_exceptions=False)


def test_envelopes():
    assert ok(data=[1]) == {"success": True, "data": [1]}
    assert error_body("Falla") == {"success": False, "error": "Falla"}
    assert error_body("Falla", ["x"])["details"] == ["x"]


def test_unexpected_exception_hides_its_message(app_client):
    response = app_client.get("/boom")
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Error interno del servidor"}
    assert "secreto" not in response.text


def test_api_error_keeps_status_and_details(app_client):
    response = app_client.get("/conflict")
    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "Ya existe", "details": {"code": "1"}}


def test_unknown_route_uses_envelope(app_client):
    response = app_client.get("/nada")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}
