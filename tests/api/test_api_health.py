"""Health, readiness and root endpoints."""

from app.core.config import get_settings
from app.main import app as fastapi_app


async def test_health_returns_ok_with_version(client) -> None:
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["version"] == get_settings().app_version


async def test_ready_when_record_store_is_configured(client) -> None:
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200


async def test_not_ready_without_record_store(client) -> None:
    fastapi_app.state.record_store = None
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503


async def test_root_describes_the_api(client) -> None:
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


async def test_request_id_header_is_echoed(client) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-1"})
    assert response.headers["x-request-id"] == "req-1"
