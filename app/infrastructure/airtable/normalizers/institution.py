"""Institution normalizer (read-only entity)."""

from typing import TypedDict

from app.application.dtos.institution import Institution
from app.infrastructure.airtable._rest_client import StoreRecord
from app.infrastructure.airtable.normalizers._fields import read_fields

InstitutionFields = TypedDict(
    "InstitutionFields",
    {
        "Name": str,
        "Short Name": str,
        "Domain": str,
        "Domains": str,
        "Aliases": str,
        "State": str,
        "Type": str,
    },
    total=False,
)


def _split(value: str) -> list[str]:
    return [part.strip() for part in value.replace("\n", ",").split(",") if part.strip()]


def normalize_institution(record: StoreRecord | None) -> Institution | None:
    if record is None:
        return None
    raw = read_fields(record.fields, InstitutionFields)
    domains: list[str] = []
    for value in (raw.get("Domains", ""), raw.get("Domain", "")):
        for domain in _split(value):
            domain = domain.lower().lstrip("@")
            if domain not in domains:
                domains.append(domain)
    return Institution(
        id=record.id,
        name=raw.get("Name", ""),
        short_name=raw.get("Short Name", ""),
        domains=domains,
        aliases=_split(raw.get("Aliases", "")),
        state=raw.get("State", ""),
        type=raw.get("Type", ""),
    )
