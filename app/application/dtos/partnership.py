"""DTOs for institution partnerships."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Partnership:
    """Institution taking part in one or more cohorts."""

    id: str
    institution_id: str | None
    cohort_ids: list[str]
    created_time: str | None
