"""Education normalizer."""

from typing import Any, TypedDict

from app.application.dtos.education import Education
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import (
    build_patch,
    first_id,
    link,
    read_fields,
)

EducationFields = TypedDict(
    "EducationFields",
    {
        "Contact": list[str],
        "Institution": list[str],
        "Name (from Institution)": str,
        "Degree Type": str,
        "Major": list[str],
        "Major (from Major)": str,
        "Graduation Year": str,
        "Graduation Semester": str,
    },
    total=False,
)

FIELD_MAP: dict[str, str] = {
    "contact_id": "Contact",
    "institution_id": "Institution",
    "degree_type": "Degree Type",
    "major_id": "Major",
    "graduation_year": "Graduation Year",
    "graduation_semester": "Graduation Semester",
}

_CONVERTERS = {"contact_id": link, "institution_id": link, "major_id": link}


def normalize_education(record: StoreRecord | None) -> Education | None:
    if record is None:
        return None
    raw = read_fields(record.fields, EducationFields)
    return Education(
        id=record.id,
        contact_id=first_id(raw.get("Contact")),
        institution_id=first_id(raw.get("Institution")),
        institution_name=raw.get("Name (from Institution)", ""),
        degree_type=raw.get("Degree Type", ""),
        major_id=first_id(raw.get("Major")),
        major_name=raw.get("Major (from Major)", ""),
        graduation_year=raw.get("Graduation Year", ""),
        graduation_semester=raw.get("Graduation Semester", ""),
    )


def education_to_fields(updates: dict[str, Any]) -> dict[str, Any]:
    return build_patch(updates, FIELD_MAP, entity="education", converters=_CONVERTERS)
