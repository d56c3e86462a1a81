"""Submission API schemas."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.application.dtos import Submission
from app.shared.utils.sanitization import sanitize_text


class SubmissionFile(BaseModel):
    """A file previously returned by POST /upload."""

    url: str = Field(..., min_length=1, max_length=2000)
    filename: str | None = Field(default=None, max_length=255)


class SubmissionCreateRequest(BaseModel):
    team_id: str = Field(..., min_length=1, max_length=64)
    milestone_id: str = Field(..., min_length=1, max_length=64)
    text: str | None = Field(default=None, max_length=10000)
    link: str | None = Field(default=None, max_length=2000)
    files: list[SubmissionFile] | None = None

    @field_validator("text")
    @classmethod
    def _clean_text(cls, v: str | None) -> str | None:
        return sanitize_text(v)


class SubmissionUpdateRequest(BaseModel):
    text: str | None = Field(default=None, max_length=10000)
    link: str | None = Field(default=None, max_length=2000)
    files: list[SubmissionFile] | None = None
    status: Literal["Pending", "Submitted", "Approved", "Needs Revision"] | None = None
    feedback: str | None = Field(default=None, max_length=10000)

    @field_validator("text", "feedback")
    @classmethod
    def _clean_text(cls, v: str | None) -> str | None:
        return sanitize_text(v)


class SubmissionResponse(BaseModel):
    submission: Submission


class SubmissionListResponse(BaseModel):
    submissions: list[Submission]
