"""User routes over the fake record store."""

from unittest.mock import AsyncMock

import pytest

from app.main import app as fastapi_app


@pytest.fixture
def contact(store, make_record):
    ada = make_record(
        "recC",
        **{
            "Email": "ada@example.com",
            "First Name": "Ada",
            "Last Name": "Lovelace",
            "Auth0 ID": "auth0|ada",
            "Onboarding": "Applied",
        },
    )
    store.table("contacts").select.return_value = [ada]
    return ada


async def test_profile_is_found_by_email(client, contact, store) -> None:
    response = await client.get("/api/v1/user/profile")
    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["contact_id"] == "recC"
    assert profile["first_name"] == "Ada"
    assert profile["onboarding_completed"] is True
    store.table("contacts").update.assert_not_awaited()


async def test_profile_read_is_cached(client, contact, store) -> None:
    await client.get("/api/v1/user/profile")
    await client.get("/api/v1/user/profile")
    assert store.table("contacts").select.await_count == 1


async def test_unknown_contact_is_404(client) -> None:
    response = await client.get("/api/v1/user/profile")
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_contact_without_auth0_id_is_linked(client, store, make_record) -> None:
    unlinked = make_record("recC", Email="ada@example.com", **{"First Name": "Ada"})
    store.table("contacts").select.return_value = [unlinked]
    store.table("contacts").update.return_value = make_record(
        "recC", Email="ada@example.com", **{"Auth0 ID": "auth0|ada"}
    )
    response = await client.get("/api/v1/user/profile")
    assert response.status_code == 200
    store.table("contacts").update.assert_awaited_once_with("recC", {"Auth0 ID": "auth0|ada"})


async def test_check_email(client, contact) -> None:
    response = await client.get("/api/v1/user/check-email", params={"email": "ADA@example.com"})
    assert response.json() == {"email": "ada@example.com", "exists": True}


async def test_check_email_rejects_malformed_address(client) -> None:
    response = await client.get("/api/v1/user/check-email", params={"email": "nobody"})
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_missing_bearer_token_is_401(client) -> None:
    fastapi_app.dependency_overrides.clear()
    fastapi_app.state.token_verifier = AsyncMock()
    response = await client.get("/api/v1/user/profile")
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"
    fastapi_app.state.token_verifier = None


async def test_unconfigured_auth_is_503(client) -> None:
    fastapi_app.dependency_overrides.clear()
    response = await client.get(
        "/api/v1/user/profile", headers={"Authorization": "Bearer abc"}
    )
    assert response.status_code == 503
