"""Milestone submission normalizer.

Team and milestone are stored as plain record-id text columns, not links.
"""

from typing import Any, TypedDict

from app.application.dtos.submission import Submission
from app.domain.enums import SubmissionStatus
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import (
    attachments_from,
    attachments_to,
    build_patch,
    read_fields,
    text_or_none,
)

SubmissionFields = TypedDict(
    "SubmissionFields",
    {
        "Team Record ID": str,
        "Milestone Record ID": str,
        "Team Name": str,
        "Milestone Name": str,
        "Submission Text": str,
        "Submission Link": str,
        "Files": list[dict],
        "Status": str,
        "Feedback": str,
        "Created Time": str,
        "Last Modified Time": str,
    },
    total=False,
)

FIELD_MAP: dict[str, str] = {
    "team_id": "Team Record ID",
    "milestone_id": "Milestone Record ID",
    "text": "Submission Text",
    "link": "Submission Link",
    "files": "Files",
    "status": "Status",
    "feedback": "Feedback",
}

_CONVERTERS = {"files": attachments_to}


def normalize_submission(record: StoreRecord | None) -> Submission | None:
    if record is None:
        return None
    raw = read_fields(record.fields, SubmissionFields)
    return Submission(
        id=record.id,
        team_id=text_or_none(raw.get("Team Record ID")),
        milestone_id=text_or_none(raw.get("Milestone Record ID")),
        team_name=raw.get("Team Name", ""),
        milestone_name=raw.get("Milestone Name", ""),
        text=raw.get("Submission Text", ""),
        link=raw.get("Submission Link", ""),
        files=attachments_from(raw.get("Files")),
        status=raw.get("Status") or SubmissionStatus.PENDING.value,
        feedback=raw.get("Feedback", ""),
        created_time=text_or_none(raw.get("Created Time")) or record.created_time,
        last_modified_time=text_or_none(raw.get("Last Modified Time")),
    )


def submission_to_fields(updates: dict[str, Any]) -> dict[str, Any]:
    return build_patch(updates, FIELD_MAP, entity="submission", converters=_CONVERTERS)
