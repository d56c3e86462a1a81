"""DTOs for calendar events."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Event:
    """Event read-model; end_datetime falls back to start_datetime."""

    id: str
    name: str
    description: str
    start_datetime: str | None
    end_datetime: str | None
    location: str
    url: str
    type: str
    status: str
    program_id: str | None
    program_name: str
    cohort_id: str | None
    cohort_name: str
    scope: str
