import time

from fastapi.testclient import TestClient
from jose import jwt

from cndes.api.main import create_app
from cndes.config.settings import Settings
from cndes.core.entities.user import ADMIN_ROLE
from cndes.infrastructure.db.repository import UserRepository

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-secret"


def test_login_returns_reduced_user_and_token(client):
    response = client.post("/api/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["user"] == {"username": "admin", "role": "Admin", "name": "Administrador"}
    assert body["token"]
    assert body["tokenType"] == "bearer"
    assert "password" not in response.text


def test_wrong_password_is_rejected(client):
    response = client.post("/api/login", json={"username": ADMIN_USERNAME, "password": "nope"})

    assert response.status_code == 401
    assert "user" not in response.json()
    assert response.json()["message"]


def test_unknown_user_gets_the_same_answer(client):
    unknown = client.post("/api/login", json={"username": "ghost", "password": "nope"})
    wrong = client.post("/api/login", json={"username": ADMIN_USERNAME, "password": "nope"})
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()


def test_session_returns_current_user(client, auth_headers):
    response = client.get("/api/session", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["user"]["username"] == ADMIN_USERNAME


def test_garbage_token_is_rejected(client):
    response = client.get("/api/session", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert "message" in response.json()


def test_password_change_revokes_existing_tokens(client, auth_headers, login_as):
    response = client.put(f"/api/users/{ADMIN_USERNAME}", json={"password": "new-secret"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["changes"] == 1

    assert client.get("/api/session", headers=auth_headers).status_code == 401
    fresh = login_as(ADMIN_USERNAME, "new-secret")
    assert client.get("/api/session", headers=fresh).status_code == 200


def test_short_password_is_rejected(client, auth_headers):
    response = client.put(f"/api/users/{ADMIN_USERNAME}", json={"password": "123"}, headers=auth_headers)
    assert response.status_code == 400


def test_users_change_only_their_own_password(client, create_user, login_as):
    create_user("maria", "maria-secret")
    headers = login_as("maria", "maria-secret")

    other = client.put(f"/api/users/{ADMIN_USERNAME}", json={"password": "hijacked"}, headers=headers)
    assert other.status_code == 403

    own = client.put("/api/users/maria", json={"password": "maria-nueva"}, headers=headers)
    assert own.status_code == 200
    assert own.json()["changes"] == 1


def test_admin_changes_any_password(client, auth_headers, create_user, login_as):
    create_user("pedro", "pedro-secret")
    response = client.put("/api/users/pedro", json={"password": "reset-by-admin"}, headers=auth_headers)
    assert response.json()["changes"] == 1
    login_as("pedro", "reset-by-admin")


def test_user_list_is_admin_only(client, auth_headers, create_user, login_as):
    create_user("maria", "maria-secret")

    response = client.get("/api/users", headers=auth_headers)
    assert response.status_code == 200
    users = response.json()["data"]
    assert [u["username"] for u in users] == ["admin", "maria"]
    assert all(set(u) == {"username", "role", "name"} for u in users)

    forbidden = client.get("/api/users", headers=login_as("maria", "maria-secret"))
    assert forbidden.status_code == 403


def test_legacy_plaintext_password_is_upgraded(client, create_user, login_as):
    create_user("legado", "clave-vieja", hashed=False)

    headers = login_as("legado", "clave-vieja")

    stored = UserRepository().get("legado")
    assert stored.password_hash.startswith("$2")
    assert stored.password_hash != "clave-vieja"
    assert client.get("/api/session", headers=headers).status_code == 200
    login_as("legado", "clave-vieja")


def test_token_signed_with_the_old_placeholder_secret_is_rejected(settings):
    unset = Settings(**{**settings.model_dump(), "jwt_secret": ""})
    forged = jwt.encode(
        {"sub": ADMIN_USERNAME, "role": ADMIN_ROLE, "ver": 0, "type": "access", "exp": int(time.time()) + 3600},
        "change-me-in-production",
        algorithm="HS256",
    )

    with TestClient(create_app(unset)) as client:
        response = client.get("/api/users", headers={"Authorization": f"Bearer {forged}"})
        assert response.status_code == 401

        login = client.post("/api/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
        assert login.status_code == 200
        token = login.json()["token"]
        assert client.get("/api/users", headers={"Authorization": f"Bearer {token}"}).status_code == 200
