"""DTOs for teams and team members."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TeamMember:
    """Contact on a team with the capacity from its participation record."""

    contact_id: str
    first_name: str
    last_name: str
    email: str
    headshot_url: str
    role: str
    participation_id: str | None


@dataclass(frozen=True)
class Team:
    """Team read-model. members is filled only by member-resolving reads."""

    id: str
    name: str
    description: str
    member_ids: list[str]
    cohort_ids: list[str]
    initiative_ids: list[str]
    created_time: str | None
    members: list[TeamMember]
