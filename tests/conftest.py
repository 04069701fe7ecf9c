"""Pytest configuration and shared fixtures.

Every test gets its own SQLite file with the schema applied, so tests
never see each other's rows.
"""

import pytest
from fastapi.testclient import TestClient

from sports_events_api.app.core.config import settings
from sports_events_api.app.core.db import init_db
from sports_events_api.app.core.security import SessionContext
from sports_events_api.app.main import app
from sports_events_api.app.services import auth_service, venue_service


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "sports_events.db"))
    init_db()
    yield settings.database_url


async def sign_in(email: str, password: str = "password123") -> SessionContext:
    """Register an account and return a context carrying its token."""
    registered = await auth_service.register({"email": email, "password": password})
    assert registered.ok, registered
    result = await auth_service.login({"email": email, "password": password})
    assert result.ok, result
    return SessionContext(access_token=result.value.access_token)


@pytest.fixture
async def alice() -> SessionContext:
    return await sign_in("alice@example.com")


@pytest.fixture
async def bob() -> SessionContext:
    return await sign_in("bob@example.com")


@pytest.fixture
async def venue(alice):
    result = await venue_service.create_venue(
        {"name": "Madison Square Garden", "address": "4 Pennsylvania Plaza"}, alice
    )
    assert result.ok, result
    return result.value


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)
