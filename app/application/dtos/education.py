"""DTOs for education records."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Education:
    """Education read-model (one degree at one institution for one contact)."""

    id: str
    contact_id: str | None
    institution_id: str | None
    institution_name: str
    degree_type: str
    major_id: str | None
    major_name: str
    graduation_year: str
    graduation_semester: str
