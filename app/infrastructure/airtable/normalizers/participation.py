"""Participation and application normalizers."""

from typing import Any, TypedDict

from app.application.dtos.participation import Application, Participation
from app.domain.enums import ApplicationStatus
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import (
    build_patch,
    first_id,
    link,
    read_fields,
    text_or_none,
)

ParticipationFields = TypedDict(
    "ParticipationFields",
    {
        "Contacts": list[str],
        "Cohorts": list[str],
        "Cohort": list[str],
        "Initiative": list[str],
        "Team": list[str],
        "Status": str,
        "Capacity": str,
    },
    total=False,
)

ApplicationFields = TypedDict(
    "ApplicationFields",
    {
        "Contact": list[str],
        "Cohort": list[str],
        "Status": str,
        "Type": str,
        "Team to Join": list[str],
        "Join Team Message": str,
        "Xtrapreneurs/Reason": str,
        "Xtrapreneurs/Commitment": str,
        "Created": str,
    },
    total=False,
)

PARTICIPATION_FIELD_MAP: dict[str, str] = {
    "contact_id": "Contacts",
    "cohort_id": "Cohorts",
    "initiative_id": "Initiative",
    "team_id": "Team",
    "status": "Status",
    "capacity": "Capacity",
}

APPLICATION_FIELD_MAP: dict[str, str] = {
    "contact_id": "Contact",
    "cohort_id": "Cohort",
    "status": "Status",
    "type": "Type",
    "team_to_join_id": "Team to Join",
    "join_team_message": "Join Team Message",
    "reason": "Xtrapreneurs/Reason",
    "commitment": "Xtrapreneurs/Commitment",
}

_PARTICIPATION_LINKS = {
    "contact_id": link,
    "cohort_id": link,
    "initiative_id": link,
    "team_id": link,
}
_APPLICATION_LINKS = {"contact_id": link, "cohort_id": link, "team_to_join_id": link}


def normalize_participation(record: StoreRecord | None) -> Participation | None:
    if record is None:
        return None
    raw = read_fields(record.fields, ParticipationFields)
    return Participation(
        id=record.id,
        contact_id=first_id(raw.get("Contacts")),
        cohort_id=first_id(raw.get("Cohorts") or raw.get("Cohort")),
        initiative_id=first_id(raw.get("Initiative")),
        team_id=first_id(raw.get("Team")),
        status=raw.get("Status") or "Active",
        capacity=raw.get("Capacity") or "Participant",
    )


def normalize_application(record: StoreRecord | None) -> Application | None:
    if record is None:
        return None
    raw = read_fields(record.fields, ApplicationFields)
    return Application(
        id=record.id,
        contact_id=first_id(raw.get("Contact")),
        cohort_id=first_id(raw.get("Cohort")),
        status=raw.get("Status") or ApplicationStatus.SUBMITTED.value,
        type=raw.get("Type", ""),
        team_to_join_id=first_id(raw.get("Team to Join")),
        join_team_message=raw.get("Join Team Message", ""),
        reason=raw.get("Xtrapreneurs/Reason", ""),
        commitment=raw.get("Xtrapreneurs/Commitment", ""),
        created_time=text_or_none(raw.get("Created")) or record.created_time,
    )


def participation_to_fields(updates: dict[str, Any]) -> dict[str, Any]:
    return build_patch(
        updates, PARTICIPATION_FIELD_MAP, entity="participation", converters=_PARTICIPATION_LINKS
    )


def application_to_fields(updates: dict[str, Any]) -> dict[str, Any]:
    return build_patch(
        updates, APPLICATION_FIELD_MAP, entity="application", converters=_APPLICATION_LINKS
    )
