"""DTOs for cohorts and their milestones."""

from dataclasses import dataclass

from app.application.dtos.program import Program


@dataclass(frozen=True)
class Cohort:
    """Cohort read-model. program is embedded by the repository when resolved."""

    id: str
    name: str
    short_name: str
    status: str
    description: str
    start_date: str | None
    end_date: str | None
    is_current: bool
    is_public: bool
    accepting_applications: bool
    application_deadline: str | None
    application_url: str
    initiative_id: str | None
    institution_ids: list[str]
    milestone_ids: list[str]
    program: Program | None = None


@dataclass(frozen=True)
class Milestone:
    """Cohort milestone; status is 'late' once the due datetime has passed."""

    id: str
    name: str
    number: int
    due_datetime: str | None
    description: str
    cohort_ids: list[str]
    status: str
