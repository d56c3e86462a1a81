"""User profile API schemas."""

from pydantic import BaseModel, Field, field_validator

from app.application.dtos import Application, Event, Participation, Team, UserProfile
from app.shared.utils.sanitization import sanitize_text


class ProfileResponse(BaseModel):
    profile: UserProfile


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; contact and education fields may be mixed."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    referral_source: str | None = Field(default=None, max_length=200)
    education_id: str | None = Field(default=None, max_length=64)
    institution_id: str | None = Field(default=None, max_length=64)
    degree_type: str | None = Field(default=None, max_length=100)
    major_id: str | None = Field(default=None, max_length=64)
    graduation_year: str | None = Field(default=None, pattern=r"^\d{4}$")
    graduation_semester: str | None = Field(default=None, max_length=20)

    @field_validator("first_name", "last_name", "referral_source")
    @classmethod
    def _clean_text(cls, v: str | None) -> str | None:
        return sanitize_text(v)


class ProfileUpdateResponse(BaseModel):
    profile: UserProfile
    updated: list[str] = Field(description="Workflow steps that ran")


class OnboardingResponse(BaseModel):
    completed: bool


class CheckEmailResponse(BaseModel):
    email: str
    exists: bool


class ParticipationListResponse(BaseModel):
    participation: list[Participation]


class CheckApplicationResponse(BaseModel):
    has_applied: bool
    application: Application | None = None


class UserTeamsResponse(BaseModel):
    teams: list[Team]


class UserEventsResponse(BaseModel):
    events: list[Event]
