"""Team API schemas."""

from pydantic import BaseModel, Field, field_validator

from app.application.dtos import Submission, Team
from app.shared.utils.sanitization import sanitize_text


class TeamCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    cohort_id: str | None = Field(default=None, max_length=64)
    program_id: str | None = Field(default=None, max_length=64)

    @field_validator("name", "description")
    @classmethod
    def _clean_text(cls, v: str) -> str:
        return sanitize_text(v) or ""


class TeamUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)

    @field_validator("name", "description")
    @classmethod
    def _clean_text(cls, v: str | None) -> str | None:
        return sanitize_text(v)


class TeamMemberAddRequest(BaseModel):
    contact_id: str = Field(..., min_length=1, max_length=64)


class TeamResponse(BaseModel):
    team: Team


class TeamSubmissionsResponse(BaseModel):
    submissions: list[Submission]
