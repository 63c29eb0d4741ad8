import uuid
import pytest
from fastapi.testclient import TestClient

from todo_api.config import Settings
from todo_api.main import create_app

SECRET = "test-secret-key"
PASSWORD = "SecurePass123!"


@pytest.fixture
def settings(tmp_path):
    return Settings(secret_key=SECRET, database_url=f"sqlite:///{tmp_path / 'todo_api_test.db'}")


# Fresh app and database for each test
@pytest.fixture
def app(settings):
    application = create_app(settings)
    yield application
    application.state.db.drop_all()
    application.state.db.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(app):
    session = app.state.db.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(client):
    """Register and log in a fresh user; returns a dict with id, email, token and headers."""

    def _make(password: str = PASSWORD):
        name = f"user_{uuid.uuid4().hex[:8]}"
        email = f"{name}@example.com"
        r = client.post("/register", json={"username": name, "email": email, "password": password})
        assert r.status_code == 201, r.text
        r = client.post("/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        token = r.json()["token"]
        return {
            "id": r.json()["user_id"],
            "username": name,
            "email": email,
            "password": password,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make
