import os
import tempfile
import uuid

# point the app at a throwaway database before app.config is imported
_DB_PATH = os.path.join(tempfile.gettempdir(), f"synergy_test_{uuid.uuid4().hex}.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.database import SessionLocal, Base, engine, reset_db


@pytest.fixture(scope="session", autouse=True)
def remove_database_file():
    yield
    engine.dispose()
    if os.path.exists(_DB_PATH):
        os.remove(_DB_PATH)


# Recreate all tables for each test
@pytest.fixture(autouse=True)
def setup_database():
    reset_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(client):
    """Sign up and log in a user; returns a dict with id, email, token and auth headers."""
    def _make(name: str = "User", password: str = "Pass123!"):
        email = f"{name.lower()}_{uuid.uuid4().hex[:8]}@example.com"
        r = client.post("/signup", json={"name": name, "email": email, "password": password})
        assert r.status_code == 201, r.text
        r = client.post("/login", json={"username": email, "password": password})
        assert r.status_code == 200, r.text
        token = r.json()["access_token"]
        return {
            "id": r.json()["user"]["id"],
            "email": email,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }
    return _make


@pytest.fixture
def make_project(client):
    def _make(owner, name: str = "P1", description=None):
        r = client.post("/projects", json={"name": name, "description": description}, headers=owner["headers"])
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture
def add_member(client):
    def _add(project, by, user, role: str = "member"):
        r = client.post(
            f"/projects/{project['id']}/members",
            json={"user_id": user["id"], "role": role},
            headers=by["headers"],
        )
        assert r.status_code == 201, r.text
        return r.json()
    return _add
