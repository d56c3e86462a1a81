"""Points summary and reward claims."""

import pytest


@pytest.fixture
def wallet(store, make_record):
    store.table("points").select.return_value = [
        make_record("tx1", Points=80, Status="Completed", **{"User Auth0 ID": "auth0|ada"}),
        make_record("tx0", Points=40, Status="Pending", **{"User Auth0 ID": "auth0|ada"}),
    ]
    store.table("rewards").find.return_value = make_record(
        "rw1", Name="Hoodie", Status="Active", **{"Points Cost": 50}
    )


async def test_summary_counts_completed_transactions_only(client, wallet) -> None:
    response = await client.get("/api/v1/points/summary")
    assert response.status_code == 200
    summary = response.json()["summary"]
    assert summary["total_earned"] == 80
    assert summary["available"] == 80
    assert summary["transaction_count"] == 2


async def test_claim_reward(client, wallet, store, make_record) -> None:
    store.table("claimed_rewards").create.return_value = make_record(
        "cl1", Status="Pending", **{"Reward Record ID": "rw1", "Points Used": 50}
    )
    store.table("points").create.return_value = make_record(
        "tx2", Points=-50, Status="Completed", **{"User Auth0 ID": "auth0|ada"}
    )
    response = await client.post("/api/v1/points/rewards/rw1/claim")
    assert response.status_code == 201
    body = response.json()
    assert body["points_remaining"] == 30
    assert body["transaction"]["points"] == -50


async def test_claim_without_enough_points_is_409(client, wallet, store, make_record) -> None:
    store.table("rewards").find.return_value = make_record("rw2", Name="Laptop", **{"Points Cost": 500})
    response = await client.post("/api/v1/points/rewards/rw2/claim")
    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "INSUFFICIENT_POINTS"
    assert body["details"] == {"required": 500, "available": 80}
    store.table("claimed_rewards").create.assert_not_awaited()
