"""DTOs for milestone submissions."""

from dataclasses import dataclass

from app.application.dtos.attachment import Attachment


@dataclass(frozen=True)
class Submission:
    """Team deliverable for one milestone."""

    id: str
    team_id: str | None
    milestone_id: str | None
    team_name: str
    milestone_name: str
    text: str
    link: str
    files: list[Attachment]
    status: str
    feedback: str
    created_time: str | None
    last_modified_time: str | None
