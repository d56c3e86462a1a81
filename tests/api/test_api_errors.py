"""Error envelope for record store failures."""

from app.infrastructure.airtable import AirtableAPIError


async def test_record_store_failure_is_502(client, store) -> None:
    store.table("contacts").select.side_effect = AirtableAPIError(500, "upstream exploded")
    response = await client.get("/api/v1/user/check-email", params={"email": "ada@example.com"})
    assert response.status_code == 502
    body = response.json()
    assert body["error"] == "RECORD_STORE_ERROR"
    assert "upstream exploded" not in body["message"]


async def test_record_store_rate_limit_is_503(client, store) -> None:
    store.table("contacts").select.side_effect = AirtableAPIError(429, "slow down")
    response = await client.get("/api/v1/user/check-email", params={"email": "ada@example.com"})
    assert response.status_code == 503
    assert response.json()["error"] == "RECORD_STORE_UNAVAILABLE"


async def test_unknown_route_uses_envelope(client) -> None:
    response = await client.get("/api/v1/nope")
    assert response.status_code == 404
    assert response.json()["error"] == "HTTP_ERROR"


def _sign_in_admin(store, as_user, admin_user, make_record) -> None:
    store.table("contacts").select.return_value = [
        make_record("recA", Email="admin@example.com", **{"Auth0 ID": "auth0|admin"})
    ]
    as_user(admin_user)


async def test_update_of_missing_resource_is_404(
    client, store, as_user, admin_user, make_record
) -> None:
    _sign_in_admin(store, as_user, admin_user, make_record)
    store.table("resources").update.side_effect = AirtableAPIError(404, "NOT_FOUND")
    response = await client.patch("/api/v1/resources/recMissing", json={"name": "Handbook"})
    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "RESOURCE_NOT_FOUND"
    assert body["details"]["resource_id"] == "recMissing"


async def test_delete_of_missing_event_is_404(
    client, store, as_user, admin_user, make_record
) -> None:
    _sign_in_admin(store, as_user, admin_user, make_record)
    store.table("events").delete.side_effect = AirtableAPIError(404, "NOT_FOUND")
    response = await client.delete("/api/v1/events/recMissing")
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_write_failure_other_than_404_stays_502(
    client, store, as_user, admin_user, make_record
) -> None:
    _sign_in_admin(store, as_user, admin_user, make_record)
    store.table("events").delete.side_effect = AirtableAPIError(422, "INVALID_REQUEST")
    response = await client.delete("/api/v1/events/recE")
    assert response.status_code == 502
    assert response.json()["error"] == "RECORD_STORE_ERROR"
