"""
Shared fixtures.

Every test gets its own SQLite file and uploads directory under tmp_path;
API tests run against a fresh app built by create_app().
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from cndes.api.main import create_app
from cndes.config.settings import Settings
from cndes.core.entities.user import User
from cndes.infrastructure.db.database import configure_database, init_db
from cndes.infrastructure.db.repository import UserRepository
from cndes.infrastructure.security.passwords import BcryptPasswordHasher

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-secret"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'registry.db'}",
        uploads_dir=str(tmp_path / "uploads"),
        client_dist_dir=str(tmp_path / "dist"),
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        seed_catalogs=True,
        load_demo_documents=False,
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        admin_name="Administrador",
    )


@pytest.fixture
def database(tmp_path):
    """Global engine pointed at an empty SQLite file, tables created."""
    configure_database(f"sqlite:///{tmp_path / 'registry.db'}")
    init_db()
    yield
    configure_database(None)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
    configure_database(None)


@pytest.fixture
def login_as(client):
    """Logs in and returns the Authorization header."""

    def _login(username, password) -> dict:
        response = client.post("/api/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
def auth_headers(login_as):
    return login_as(ADMIN_USERNAME, ADMIN_PASSWORD)


@pytest.fixture
def create_user(client):
    """Provisions an operator straight in the users table."""
    hasher = BcryptPasswordHasher(rounds=4)

    def _create(username, password, role="Usuario", hashed=True):
        UserRepository().add(User(
            username=username,
            name=username.title(),
            role=role,
            password_hash=hasher.hash(password) if hashed else password,
        ))
        return username

    return _create


@pytest.fixture
def document_payload():
    """Builds a valid submission body; keyword arguments override fields."""

    def _build(**overrides):
        payload = {
            "registrationDate": date.today().isoformat(),
            "type": "Entrada",
            "docNumber": "REF-2026-099",
            "docDate": date.today().isoformat(),
            "origin": "Ministerio de Hacienda",
            "destination": "Secretaría General",
            "summary": "Remisión de anteproyecto de presupuesto.",
            "observations": "",
            "status": "Pendiente",
            "attachments": [],
        }
        payload.update(overrides)
        return payload

    return _build
