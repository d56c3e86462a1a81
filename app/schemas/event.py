"""Event API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from app.application.dtos import Event


class EventCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    start_datetime: datetime
    end_datetime: datetime | None = None
    description: str | None = Field(default=None, max_length=4000)
    location: str | None = Field(default=None, max_length=500)
    url: str | None = Field(default=None, max_length=2000)
    type: str | None = Field(default=None, max_length=50)
    status: str | None = Field(default=None, max_length=50)
    program_id: str | None = Field(default=None, max_length=64)
    cohort_id: str | None = Field(default=None, max_length=64)

    @model_validator(mode="after")
    def _end_after_start(self) -> "EventCreateRequest":
        if self.end_datetime is not None and self.end_datetime < self.start_datetime:
            raise ValueError("end_datetime must not be before start_datetime")
        return self


class EventUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    start_datetime: datetime | None = None
    end_datetime: datetime | None = None
    description: str | None = Field(default=None, max_length=4000)
    location: str | None = Field(default=None, max_length=500)
    url: str | None = Field(default=None, max_length=2000)
    type: str | None = Field(default=None, max_length=50)
    status: str | None = Field(default=None, max_length=50)
    program_id: str | None = Field(default=None, max_length=64)
    cohort_id: str | None = Field(default=None, max_length=64)


class EventResponse(BaseModel):
    event: Event


class EventListResponse(BaseModel):
    events: list[Event]


class EventDeleteResponse(BaseModel):
    deleted: str
