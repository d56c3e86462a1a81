"""Event normalizer."""

from typing import Any, TypedDict

from app.application.dtos.event import Event
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import (
    build_patch,
    read_fields,
    text_or_none,
)
from app.infrastructure.airtable.normalizers.resource import scope_of

EventFields = TypedDict(
    "EventFields",
    {
        "Name": str,
        "Description": str,
        "Start Date/Time": str,
        "End Date/Time": str,
        "Location": str,
        "URL": str,
        "Type": str,
        "Status": str,
        "Initiative Record ID": str,
        "Initiative Name": str,
        "Cohort Record ID": str,
        "Cohort Name": str,
    },
    total=False,
)

FIELD_MAP: dict[str, str] = {
    "name": "Name",
    "description": "Description",
    "start_datetime": "Start Date/Time",
    "end_datetime": "End Date/Time",
    "location": "Location",
    "url": "URL",
    "type": "Type",
    "status": "Status",
    "program_id": "Initiative Record ID",
    "program_name": "Initiative Name",
    "cohort_id": "Cohort Record ID",
    "cohort_name": "Cohort Name",
}


def normalize_event(record: StoreRecord | None) -> Event | None:
    if record is None:
        return None
    raw = read_fields(record.fields, EventFields)
    start = text_or_none(raw.get("Start Date/Time"))
    program_id = text_or_none(raw.get("Initiative Record ID"))
    cohort_id = text_or_none(raw.get("Cohort Record ID"))
    return Event(
        id=record.id,
        name=raw.get("Name") or "Untitled Event",
        description=raw.get("Description", ""),
        start_datetime=start,
        end_datetime=text_or_none(raw.get("End Date/Time")) or start,
        location=raw.get("Location", ""),
        url=raw.get("URL", ""),
        type=raw.get("Type") or "General",
        status=raw.get("Status") or "Scheduled",
        program_id=program_id,
        program_name=raw.get("Initiative Name", ""),
        cohort_id=cohort_id,
        cohort_name=raw.get("Cohort Name", ""),
        scope=scope_of(False, program_id, cohort_id),
    )


def event_to_fields(updates: dict[str, Any]) -> dict[str, Any]:
    return build_patch(updates, FIELD_MAP, entity="event")
