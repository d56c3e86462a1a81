"""Points transaction, reward and reward claim normalizers."""

from typing import Any, TypedDict

from app.application.dtos.points import PointsTransaction, Reward, RewardClaim
from app.domain.enums import TransactionStatus
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import (
    attachments_from,
    build_patch,
    read_fields,
    text_or_none,
)

TransactionFields = TypedDict(
    "TransactionFields",
    {
        "Points": int,
        "Type": str,
        "Description": str,
        "Status": str,
        "User Auth0 ID": str,
        "Team Record ID": str,
        "Initiative Record ID": str,
        "Initiative Name": str,
        "Cohort Record ID": str,
        "Cohort Name": str,
        "Milestone Record ID": str,
        "Milestone Name": str,
        "Created Time": str,
    },
    total=False,
)

RewardFields = TypedDict(
    "RewardFields",
    {
        "Name": str,
        "Description": str,
        "Points Cost": int,
        "Category": str,
        "Status": str,
        "Image": list[dict],
        "Inventory Count": int,
        "Is Limited": bool,
    },
    total=False,
)

ClaimFields = TypedDict(
    "ClaimFields",
    {
        "User Auth0 ID": str,
        "Reward Record ID": str,
        "Reward Name": str,
        "Points Used": int,
        "Status": str,
        "Delivery Details": str,
        "Fulfilled Date": str,
        "Created Time": str,
    },
    total=False,
)

TRANSACTION_FIELD_MAP: dict[str, str] = {
    "points": "Points",
    "type": "Type",
    "description": "Description",
    "status": "Status",
    "user_auth0_id": "User Auth0 ID",
    "team_id": "Team Record ID",
    "program_id": "Initiative Record ID",
    "program_name": "Initiative Name",
    "cohort_id": "Cohort Record ID",
    "cohort_name": "Cohort Name",
    "milestone_id": "Milestone Record ID",
    "milestone_name": "Milestone Name",
}

CLAIM_FIELD_MAP: dict[str, str] = {
    "user_auth0_id": "User Auth0 ID",
    "reward_id": "Reward Record ID",
    "reward_name": "Reward Name",
    "points_used": "Points Used",
    "status": "Status",
    "delivery_details": "Delivery Details",
    "fulfilled_date": "Fulfilled Date",
}


def normalize_transaction(record: StoreRecord | None) -> PointsTransaction | None:
    if record is None:
        return None
    raw = read_fields(record.fields, TransactionFields)
    return PointsTransaction(
        id=record.id,
        points=raw.get("Points", 0),
        type=raw.get("Type") or "Unknown",
        description=raw.get("Description", ""),
        status=raw.get("Status") or TransactionStatus.PENDING.value,
        user_auth0_id=raw.get("User Auth0 ID", ""),
        team_id=text_or_none(raw.get("Team Record ID")),
        program_id=text_or_none(raw.get("Initiative Record ID")),
        program_name=raw.get("Initiative Name", ""),
        cohort_id=text_or_none(raw.get("Cohort Record ID")),
        cohort_name=raw.get("Cohort Name", ""),
        milestone_id=text_or_none(raw.get("Milestone Record ID")),
        milestone_name=raw.get("Milestone Name", ""),
        created_time=text_or_none(raw.get("Created Time")) or record.created_time,
    )


def normalize_reward(record: StoreRecord | None) -> Reward | None:
    if record is None:
        return None
    raw = read_fields(record.fields, RewardFields)
    images = attachments_from(raw.get("Image"))
    return Reward(
        id=record.id,
        name=raw.get("Name", ""),
        description=raw.get("Description", ""),
        points_cost=raw.get("Points Cost", 0),
        category=raw.get("Category", ""),
        status=raw.get("Status") or "Available",
        image_url=images[0].url if images else "",
        inventory_count=raw.get("Inventory Count", 0),
        is_limited=raw.get("Is Limited", False),
    )


def normalize_claim(record: StoreRecord | None) -> RewardClaim | None:
    if record is None:
        return None
    raw = read_fields(record.fields, ClaimFields)
    return RewardClaim(
        id=record.id,
        user_auth0_id=raw.get("User Auth0 ID", ""),
        reward_id=text_or_none(raw.get("Reward Record ID")),
        reward_name=raw.get("Reward Name", ""),
        points_used=raw.get("Points Used", 0),
        status=raw.get("Status") or "Pending",
        delivery_details=raw.get("Delivery Details", ""),
        fulfilled_date=text_or_none(raw.get("Fulfilled Date")),
        created_time=text_or_none(raw.get("Created Time")) or record.created_time,
    )


def transaction_to_fields(updates: dict[str, Any]) -> dict[str, Any]:
    return build_patch(updates, TRANSACTION_FIELD_MAP, entity="points transaction")


def claim_to_fields(updates: dict[str, Any]) -> dict[str, Any]:
    return build_patch(updates, CLAIM_FIELD_MAP, entity="reward claim")
