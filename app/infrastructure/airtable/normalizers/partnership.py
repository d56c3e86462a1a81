"""Partnership normalizer (read-only entity)."""

from typing import TypedDict

from app.application.dtos.partnership import Partnership
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import (
    first_id,
    read_fields,
    text_or_none,
)

PartnershipFields = TypedDict(
    "PartnershipFields",
    {
        "Institution": list[str],
        "Cohorts": list[str],
        "Created Time": str,
    },
    total=False,
)


def normalize_partnership(record: StoreRecord | None) -> Partnership | None:
    if record is None:
        return None
    raw = read_fields(record.fields, PartnershipFields)
    return Partnership(
        id=record.id,
        institution_id=first_id(raw.get("Institution")),
        cohort_ids=raw.get("Cohorts", []),
        created_time=text_or_none(raw.get("Created Time")) or record.created_time,
    )
