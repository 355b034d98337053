"""
TaskTrack API - Test Configuration

Shared fixtures for CI-safe testing without MongoDB.
"""

import os

TEST_SECRET = "test-secret-key-that-is-at-least-32-chars"

# Must be set before tasktrack.config is imported
os.environ.setdefault("JWT_SECRET_KEY", TEST_SECRET)
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime, timezone, timedelta

import pytest
from fastapi.testclient import TestClient

from tasktrack.main import app
from tasktrack.auth.dependencies import get_token_service, get_user_repository
from tasktrack.auth.repository import InMemoryUserRepository
from tasktrack.auth.tokens import TokenService
from tasktrack.tasks.repository import InMemoryTaskRepository
from tasktrack.tasks.router import get_task_repository


@pytest.fixture
def user_repository():
    """Provide a fresh in-memory user repository for each test."""
    return InMemoryUserRepository()


@pytest.fixture
def task_repository():
    """Provide a fresh in-memory task repository for each test."""
    return InMemoryTaskRepository()


@pytest.fixture
def token_service():
    return TokenService(secret_key=TEST_SECRET)


@pytest.fixture
def client(user_repository, task_repository, token_service):
    """Create test client with in-memory repositories."""
    app.dependency_overrides[get_user_repository] = lambda: user_repository
    app.dependency_overrides[get_task_repository] = lambda: task_repository
    app.dependency_overrides[get_token_service] = lambda: token_service

    # No context manager: the lifespan (MongoDB connect) is not run
    yield TestClient(app)
    # Clean up override after test
    app.dependency_overrides.clear()


@pytest.fixture
def registered_user(client):
    """Register a test user and return credentials."""
    credentials = {"username": "testuser", "password": "testpass1!"}
    client.post("/api/auth/register", json=credentials)
    return credentials


@pytest.fixture
def auth_token(client, registered_user):
    """Get an auth token for the registered user."""
    response = client.post("/api/auth/login", json=registered_user)
    return response.json()["token"]


@pytest.fixture
def auth_headers(auth_token):
    """Create Authorization headers for authenticated requests."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def second_user_credentials():
    """Credentials for a second test user."""
    return {"username": "seconduser", "password": "second2@pass"}


@pytest.fixture
def second_auth_headers(client, second_user_credentials):
    """Register a second user and build their Authorization headers."""
    response = client.post("/api/auth/register", json=second_user_credentials)
    return {"Authorization": f"Bearer {response.json()['token']}"}


class FrozenClock:
    """A clock that returns a fixed time for deterministic testing."""

    def __init__(self, frozen_time: datetime):
        self._frozen_time = frozen_time

    def __call__(self) -> datetime:
        return self._frozen_time

    def set(self, new_time: datetime) -> None:
        self._frozen_time = new_time

    def advance(self, delta: timedelta) -> None:
        self._frozen_time += delta


@pytest.fixture
def frozen_now() -> datetime:
    """A fixed 'now' time for testing."""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def frozen_clock(frozen_now) -> FrozenClock:
    return FrozenClock(frozen_now)
