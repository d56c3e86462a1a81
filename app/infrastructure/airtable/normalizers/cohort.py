"""Cohort and milestone normalizers (read-only entities)."""

from datetime import date, datetime
from typing import TypedDict

from app.application.dtos.cohort import Cohort, Milestone
from app.domain.enums import MilestoneStatus
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import (
    first_id,
    read_fields,
    text_or_none,
)
from app.shared.utils.datetime import parse_iso_date, parse_iso_datetime, utc_now

CohortFields = TypedDict(
    "CohortFields",
    {
        "Name": str,
        "Short Name": str,
        "Status": str,
        "Description": str,
        "Start Date": str,
        "End Date": str,
        "Public": bool,
        "Current Cohort": bool,
        "Is Current": bool,
        "Current": bool,
        "Accepting Applications": bool,
        "Application Deadline": str,
        "Application URL": str,
        "Initiative": list[str],
        "Institution": list[str],
        "Milestones": list[str],
    },
    total=False,
)

MilestoneFields = TypedDict(
    "MilestoneFields",
    {
        "Name": str,
        "Number": int,
        "Due Datetime": str,
        "Description": str,
        "Cohort": list[str],
    },
    total=False,
)


def _in_date_range(start: str | None, end: str | None, today: date) -> bool:
    start_date, end_date = parse_iso_date(start), parse_iso_date(end)
    if start_date is None or end_date is None:
        return False
    return start_date <= today <= end_date


def normalize_cohort(record: StoreRecord | None, today: date | None = None) -> Cohort | None:
    """Map a cohort record; is_current uses today (UTC) unless given."""
    if record is None:
        return None
    raw = read_fields(record.fields, CohortFields)
    today = today or utc_now().date()
    start, end = text_or_none(raw.get("Start Date")), text_or_none(raw.get("End Date"))
    flagged = any(raw.get(flag, False) for flag in ("Current Cohort", "Is Current", "Current"))
    return Cohort(
        id=record.id,
        name=raw.get("Name") or "Unnamed Cohort",
        short_name=raw.get("Short Name", ""),
        status=raw.get("Status") or "Unknown",
        description=raw.get("Description", ""),
        start_date=start,
        end_date=end,
        is_current=flagged or _in_date_range(start, end, today),
        is_public=raw.get("Public", False),
        accepting_applications=raw.get("Accepting Applications", False),
        application_deadline=text_or_none(raw.get("Application Deadline")),
        application_url=raw.get("Application URL", ""),
        initiative_id=first_id(raw.get("Initiative")),
        institution_ids=raw.get("Institution", []),
        milestone_ids=raw.get("Milestones", []),
    )


def normalize_milestone(
    record: StoreRecord | None, now: datetime | None = None
) -> Milestone | None:
    """Map a milestone record; status is late once the due datetime is before now."""
    if record is None:
        return None
    raw = read_fields(record.fields, MilestoneFields)
    due = text_or_none(raw.get("Due Datetime"))
    due_at = parse_iso_datetime(due)
    now = now or utc_now()
    late = due_at is not None and due_at < now
    return Milestone(
        id=record.id,
        name=raw.get("Name", ""),
        number=raw.get("Number", 0),
        due_datetime=due,
        description=raw.get("Description", ""),
        cohort_ids=raw.get("Cohort", []),
        status=(MilestoneStatus.LATE if late else MilestoneStatus.UPCOMING).value,
    )
