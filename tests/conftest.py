"""Pytest configuration and fixtures for the dashboard.

Unit tests get a fake record store (one MagicMock per logical table with
AsyncMock find/select/create/update/delete) and a MemoryCache driven by a
fake clock. API tests run app.main:app over ASGITransport with the fake
store on app.state and the caller identity overridden.
"""

from collections.abc import AsyncIterator, Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.v1.dependencies import get_current_user
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.cache import MemoryCache
from app.infrastructure.security import AuthUser
from app.main import app as fastapi_app


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeStore:
    """Stand-in for AirtableRESTClient: table(name) returns a mock per name."""

    def __init__(self) -> None:
        self.tables: dict[str, MagicMock] = {}

    def table(self, name: str) -> MagicMock:
        if name not in self.tables:
            table = MagicMock(name=f"table:{name}")
            table.find = AsyncMock(return_value=None)
            table.select = AsyncMock(return_value=[])
            table.create = AsyncMock()
            table.update = AsyncMock()
            table.delete = AsyncMock()
            self.tables[name] = table
        return self.tables[name]

    async def aclose(self) -> None:
        return None


def record(record_id: str, **fields: Any) -> StoreRecord:
    """StoreRecord with fields given as keyword arguments (spaces via dict unpacking)."""
    return StoreRecord(record_id, fields, "2025-01-01T00:00:00.000Z")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCache:
    return MemoryCache(clock=clock, default_ttl=300)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def make_record() -> Callable[..., StoreRecord]:
    return record


@pytest.fixture
def auth_user() -> AuthUser:
    return AuthUser(sub="auth0|ada", email="ada@example.com", name="Ada Lovelace")


@pytest.fixture
def admin_user() -> AuthUser:
    return AuthUser(sub="auth0|admin", email="admin@example.com", roles=("admin",))


@pytest.fixture
async def client(store: FakeStore, cache: MemoryCache, auth_user: AuthUser) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app with the fake store wired in.

    The lifespan does not run under ASGITransport, so app.state is filled
    here and restored afterwards.
    """
    fastapi_app.state.record_store = store
    fastapi_app.state.cache = cache
    fastapi_app.state.token_verifier = None
    fastapi_app.state.storage = None
    fastapi_app.dependency_overrides[get_current_user] = lambda: auth_user
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()
    fastapi_app.state.record_store = None


@pytest.fixture
def as_user() -> Callable[[AuthUser], None]:
    """Switch the caller identity of the API client mid-test."""

    def switch(user: AuthUser) -> None:
        fastapi_app.dependency_overrides[get_current_user] = lambda: user

    return switch
