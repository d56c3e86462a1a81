"""Resource normalizer."""

from typing import Any, TypedDict

from app.application.dtos.resource import Resource
from app.domain.enums import ResourceScope
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import (
    attachments_from,
    attachments_to,
    build_patch,
    read_fields,
    text_or_none,
)

ResourceFields = TypedDict(
    "ResourceFields",
    {
        "Name": str,
        "Description": str,
        "URL": str,
        "Type": str,
        "Category": str,
        "Is Global": bool,
        "Initiative Record ID": str,
        "Initiative Name": str,
        "Cohort Record ID": str,
        "Cohort Name": str,
        "File Attachments": list[dict],
        "Created Time": str,
        "Last Modified Time": str,
    },
    total=False,
)

FIELD_MAP: dict[str, str] = {
    "name": "Name",
    "description": "Description",
    "url": "URL",
    "type": "Type",
    "category": "Category",
    "is_global": "Is Global",
    "program_id": "Initiative Record ID",
    "program_name": "Initiative Name",
    "cohort_id": "Cohort Record ID",
    "cohort_name": "Cohort Name",
    "files": "File Attachments",
}

_CONVERTERS = {"files": attachments_to}


def scope_of(is_global: bool, program_id: str | None, cohort_id: str | None) -> str:
    """Narrowest visibility: global flag wins, then cohort, then program."""
    if is_global:
        return ResourceScope.GLOBAL.value
    if cohort_id:
        return ResourceScope.COHORT.value
    if program_id:
        return ResourceScope.PROGRAM.value
    return ResourceScope.GLOBAL.value


def normalize_resource(record: StoreRecord | None) -> Resource | None:
    if record is None:
        return None
    raw = read_fields(record.fields, ResourceFields)
    is_global = raw.get("Is Global", False)
    program_id = text_or_none(raw.get("Initiative Record ID"))
    cohort_id = text_or_none(raw.get("Cohort Record ID"))
    return Resource(
        id=record.id,
        name=raw.get("Name") or "Untitled Resource",
        description=raw.get("Description", ""),
        url=raw.get("URL", ""),
        type=raw.get("Type") or "Link",
        category=raw.get("Category") or "General",
        is_global=is_global,
        program_id=program_id,
        program_name=raw.get("Initiative Name", ""),
        cohort_id=cohort_id,
        cohort_name=raw.get("Cohort Name", ""),
        files=attachments_from(raw.get("File Attachments")),
        scope=scope_of(is_global, program_id, cohort_id),
        created_time=text_or_none(raw.get("Created Time")) or record.created_time,
        last_modified_time=text_or_none(raw.get("Last Modified Time")),
    )


def resource_to_fields(updates: dict[str, Any]) -> dict[str, Any]:
    return build_patch(updates, FIELD_MAP, entity="resource", converters=_CONVERTERS)
