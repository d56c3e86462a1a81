"""Program (initiative) and major normalizers (read-only entities)."""

from typing import TypedDict

from app.application.dtos.program import Major, Program
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import read_fields

InitiativeFields = TypedDict(
    "InitiativeFields",
    {
        "Name": str,
        "Description": str,
        "Participation Type": str,
        "Status": str,
    },
    total=False,
)

MajorFields = TypedDict("MajorFields", {"Major": str, "Name": str}, total=False)


def normalize_program(record: StoreRecord | None) -> Program | None:
    if record is None:
        return None
    raw = read_fields(record.fields, InitiativeFields)
    return Program(
        id=record.id,
        name=raw.get("Name") or "Unnamed Initiative",
        description=raw.get("Description", ""),
        participation_type=raw.get("Participation Type") or "Individual",
        status=raw.get("Status", ""),
    )


def normalize_major(record: StoreRecord | None) -> Major | None:
    if record is None:
        return None
    raw = read_fields(record.fields, MajorFields)
    return Major(id=record.id, name=raw.get("Major") or raw.get("Name", ""))
