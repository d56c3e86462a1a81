"""DTOs for learning resources."""

from dataclasses import dataclass

from app.application.dtos.attachment import Attachment


@dataclass(frozen=True)
class Resource:
    """Resource read-model; scope is 'global', 'program' or 'cohort'."""

    id: str
    name: str
    description: str
    url: str
    type: str
    category: str
    is_global: bool
    program_id: str | None
    program_name: str
    cohort_id: str | None
    cohort_name: str
    files: list[Attachment]
    scope: str
    created_time: str | None
    last_modified_time: str | None
