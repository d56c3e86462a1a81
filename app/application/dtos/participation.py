"""DTOs for participation records and cohort applications."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Participation:
    """Link between a contact and a cohort (optionally through a team)."""

    id: str
    contact_id: str | None
    cohort_id: str | None
    initiative_id: str | None
    team_id: str | None
    status: str
    capacity: str


@dataclass(frozen=True)
class Application:
    """Application of a contact to a cohort."""

    id: str
    contact_id: str | None
    cohort_id: str | None
    status: str
    type: str
    team_to_join_id: str | None
    join_team_message: str
    reason: str
    commitment: str
    created_time: str | None
