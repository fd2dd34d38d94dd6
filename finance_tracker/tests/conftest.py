# finance_tracker/tests/conftest.py
# Test configuration and fixtures for pytest

import os

# Keep the app's own engine off disk before anything imports it
os.environ.setdefault("FINANCE_TRACKER_DATABASE_URL", "sqlite://")

import json

import pytest
import requests
from fastapi.testclient import TestClient
from requests.adapters import BaseAdapter
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from finance_tracker.main import app
from finance_tracker.dependencies import get_db
from finance_tracker.models import Base

# --- Test Database Setup ---
# One shared in-memory connection so every thread the TestClient uses sees
# the same tables.
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# --- Pytest Fixtures ---

@pytest.fixture(scope="function")
def db_session():
    """
    Create all tables, yield a session for the test, then drop everything so
    the next test starts clean.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    TestClient whose `get_db` dependency hands out the test session.
    """

    def override_get_db():
        try:
            yield db_session
        finally:
            db_session.close()

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


def register(client: TestClient, name: str = "Alice", email: str = "alice@mail.com",
             password: str = "s3cret-pass") -> dict:
    """Register a user and return the response body."""
    response = client.post(
        "/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    token = register(client)["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(client: TestClient) -> dict:
    token = register(client, name="Bob", email="bob@mail.com")["token"]
    return {"Authorization": f"Bearer {token}"}


# --- Client library fixtures ---

class FakeAdapter(BaseAdapter):
    """Transport adapter that replays queued (status, body) pairs."""

    def __init__(self, *responses):
        super().__init__()
        self.responses = list(responses)
        self.requests = []

    def queue(self, status_code: int, body=None):
        self.responses.append((status_code, body))

    def send(self, request, **kwargs):
        self.requests.append(request)
        status_code, body = self.responses.pop(0)

        response = requests.Response()
        response.status_code = status_code
        response._content = json.dumps(body if body is not None else {}).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


@pytest.fixture
def register_user(client: TestClient):
    """Callable fixture: register another user and return the response body."""

    def _register(**kwargs) -> dict:
        return register(client, **kwargs)

    return _register
