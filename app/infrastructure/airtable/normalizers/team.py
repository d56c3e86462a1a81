"""Team and team member normalizers."""

from typing import Any, TypedDict

from app.application.dtos.team import Team, TeamMember
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import (
    attachments_from,
    build_patch,
    link,
    read_fields,
    text_or_none,
)

TeamFields = TypedDict(
    "TeamFields",
    {
        "Name": str,
        "Team Name": str,
        "Description": str,
        "Members": list[str],
        "Cohort": list[str],
        "Initiative": list[str],
        "Created Time": str,
    },
    total=False,
)

MemberContactFields = TypedDict(
    "MemberContactFields",
    {
        "First Name": str,
        "Last Name": str,
        "Email": str,
        "Headshot": list[dict],
    },
    total=False,
)

FIELD_MAP: dict[str, str] = {
    "name": "Name",
    "description": "Description",
    "member_ids": "Members",
    "cohort_ids": "Cohort",
    "initiative_ids": "Initiative",
}

_CONVERTERS = {"member_ids": link, "cohort_ids": link, "initiative_ids": link}


def normalize_team(record: StoreRecord | None) -> Team | None:
    if record is None:
        return None
    raw = read_fields(record.fields, TeamFields)
    return Team(
        id=record.id,
        name=raw.get("Name") or raw.get("Team Name") or "Unnamed Team",
        description=raw.get("Description", ""),
        member_ids=raw.get("Members", []),
        cohort_ids=raw.get("Cohort", []),
        initiative_ids=raw.get("Initiative", []),
        created_time=text_or_none(raw.get("Created Time")) or record.created_time,
        members=[],
    )


def normalize_team_member(
    contact: StoreRecord | None,
    role: str | None = None,
    participation_id: str | None = None,
) -> TeamMember | None:
    """Combine a contact record with its team participation (role defaults to Member)."""
    if contact is None:
        return None
    raw = read_fields(contact.fields, MemberContactFields)
    headshots = attachments_from(raw.get("Headshot"))
    return TeamMember(
        contact_id=contact.id,
        first_name=raw.get("First Name", ""),
        last_name=raw.get("Last Name", ""),
        email=raw.get("Email", ""),
        headshot_url=headshots[0].url if headshots else "",
        role=role or "Member",
        participation_id=participation_id,
    )


def team_to_fields(updates: dict[str, Any]) -> dict[str, Any]:
    return build_patch(updates, FIELD_MAP, entity="team", converters=_CONVERTERS)
