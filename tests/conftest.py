"""Pytest configuration and shared fixtures.

API tests run the real application against `FakeSupabase`, wired in through
FastAPI dependency overrides.
"""

from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from app.database.supabase_client import get_service_supabase, get_session_client
from app.main import app, limiter
from app.modules.auth.service import clear_auth_cache
from tests.fakes import FakeSupabase
from tests.helpers import owner_from, register_tenant


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: fast tests without the HTTP stack")
    config.addinivalue_line("markers", "integration: API tests against the in-memory Supabase double")


@pytest.fixture(autouse=True)
def reset_state():
    """Auth token cache and the slowapi counters are process wide."""
    clear_auth_cache()
    limiter.reset()
    yield
    clear_auth_cache()


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def client(fake_supabase):
    app.dependency_overrides[get_service_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_session_client] = lambda: fake_supabase
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def owner(client) -> Dict[str, Any]:
    """A registered tenant with its signed-in owner."""
    return owner_from(register_tenant(client))


@pytest.fixture
def other_owner(client) -> Dict[str, Any]:
    """Owner of a second, unrelated tenant."""
    return owner_from(register_tenant(client, tenant_id="acme-studio", email="ops@acme.io", ip="10.0.0.2"))
