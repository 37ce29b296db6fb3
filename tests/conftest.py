# Test configuration
import os

# Set test environment variables BEFORE importing app modules
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only-32chars"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["JWT_ISSUER"] = "CleanArchitectureApi"
os.environ["JWT_AUDIENCE"] = "CleanArchitectureApiUsers"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"  # Lower rounds for faster tests
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DEBUG"] = "false"
os.environ["SEED_DATABASE"] = "true"

import pytest
from fastapi.testclient import TestClient

from clean_api.app import app
from clean_api.database import DatabaseManager, db_manager
from clean_api.persistence.seed import run_seeding

ADMIN_EMAIL = "admin@localhost"
ADMIN_PASSWORD = "Admin123!"
USER_PASSWORD = "Passw0rd!"


def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def db(tmp_path):
    """Connected database manager with an empty schema."""
    manager = DatabaseManager(sqlite_url(tmp_path))
    await manager.connect()
    await manager.create_all()
    yield manager
    await manager.disconnect()


@pytest.fixture
async def seeded_db(db):
    """Database with roles, the administrator and the sample products."""
    async with db.unit_of_work() as uow:
        await run_seeding(uow.session)
    return db


@pytest.fixture
def client(tmp_path, monkeypatch):
    """TestClient running the app lifespan against a fresh seeded database."""
    monkeypatch.setattr(db_manager, "database_url", sqlite_url(tmp_path))
    with TestClient(app) as test_client:
        yield test_client


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def login(client):
    """Sign in through the API and return the auth response body."""

    def _login(email: str, password: str) -> dict:
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()

    return _login


@pytest.fixture
def admin_login(login):
    return login(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def admin_headers(admin_login):
    return bearer(admin_login["token"])


@pytest.fixture
def registered_user(client):
    """Register a standard user and return the auth response body."""
    response = client.post(
        "/api/auth/register",
        json={
            "email": "jane.doe@example.com",
            "password": USER_PASSWORD,
            "confirmPassword": USER_PASSWORD,
            "firstName": "Jane",
            "lastName": "Doe",
        },
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def user_headers(registered_user):
    return bearer(registered_user["token"])
