from contapyme.auth import ACCESS_COOKIE, REDIRECT_COOKIE, USER_ID_COOKIE
from contapyme.models.users import User


def login(client, email="contador@pyme.cl", password="clave-secreta-123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_register_creates_trial_user_with_plan_limits(client, db_session):
    response = client.post("/api/auth/register", json={
        "email": "Nuevo@Pyme.cl",
        "password": "secreto",
        "name": "Nuevo Usuario",
        "selectedPlan": "semestral",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"]["email"] == "nuevo@pyme.cl"

    user = db_session.query(User).filter(User.email == "nuevo@pyme.cl").one()
    assert user.subscription_status == "trial"
    assert user.max_companies == 5
    assert user.trial_ends_at is not None


def test_register_duplicate_email_conflicts(client, user):
    response = client.post("/api/auth/register", json={
        "email": user.email,
        "password": "otro",
        "name": "Otra Persona",
    })
    assert response.status_code == 409
    assert response.json()["success"] is False


def test_login_requires_email_and_password(client):
    response = client.post("/api/auth/login", json={"email": "contador@pyme.cl", "password": ""})
    assert response.status_code == 400
    assert response.json()["error"] == "Email y contraseña son requeridos"


def test_login_with_wrong_password_is_unauthorized(client, user):
    response = login(client, password="incorrecta")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Credenciales inválidas"}


def test_login_sets_session_cookies(client, user):
    response = login(client)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["redirect"] == "/"
    assert body["user"]["email"] == user.email
    assert body["user"]["plan"] == "monthly"
    assert ACCESS_COOKIE in response.cookies
    assert response.cookies[USER_ID_COOKIE] == str(user.id)
    assert REDIRECT_COOKIE in response.cookies


def test_session_roundtrip_and_logout(client, user):
    assert client.get("/api/auth/session").json() == {"user": None, "session": None}

    login(client)
    session = client.get("/api/auth/session").json()
    assert session["user"]["id"] == user.id
    assert session["session"]["access_token"]

    response = client.delete("/api/auth/session")
    assert response.status_code == 200
    assert client.get("/api/auth/session").json()["user"] is None


def test_stale_token_is_rejected_and_cleared(client):
    client.cookies.set(ACCESS_COOKIE, "not-a-jwt")
    response = client.get("/api/auth/session")
    assert response.json() == {"user": None, "session": None}
    cleared = response.headers.get_list("set-cookie")
    assert any(header.startswith(f"{ACCESS_COOKIE}=") for header in cleared)


def test_pending_redirect_is_delivered_once(client, user):
    assert client.post("/api/auth/redirect/ready").json() == {"redirect": None}

    login(client)
    assert client.post("/api/auth/redirect/ready").json() == {"redirect": "/"}
    assert client.post("/api/auth/redirect/ready").json() == {"redirect": None}
