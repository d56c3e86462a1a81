"""Cohort application API schemas."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.application.dtos import Application
from app.domain.enums import ApplicationStatus, ApplicationType
from app.shared.utils.sanitization import sanitize_text

ApplicationTypeLiteral = Literal["individual", "team", "joinTeam", "xtrapreneurs"]


class ApplicationCreateRequest(BaseModel):
    """Body for POST /applications; per-type fields are checked by the workflow."""

    cohort_id: str = Field(..., min_length=1, max_length=64)
    type: ApplicationTypeLiteral = ApplicationType.INDIVIDUAL.value
    team_id: str | None = Field(default=None, max_length=64)
    team_to_join_id: str | None = Field(default=None, max_length=64)
    join_team_message: str | None = Field(default=None, max_length=2000)
    reason: str | None = Field(default=None, max_length=4000)
    commitment: str | None = Field(default=None, max_length=200)

    @field_validator("join_team_message", "reason", "commitment")
    @classmethod
    def _clean_text(cls, v: str | None) -> str | None:
        return sanitize_text(v)


class ApplicationStatusRequest(BaseModel):
    status: Literal["Submitted", "Accepted", "Rejected", "Withdrawn"] = (
        ApplicationStatus.SUBMITTED.value
    )


class ApplicationResponse(BaseModel):
    application: Application


class ApplicationListResponse(BaseModel):
    applications: list[Application]
