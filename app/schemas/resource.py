"""Resource API schemas."""

from pydantic import BaseModel, Field

from app.application.dtos import Resource


class ResourceCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=4000)
    url: str | None = Field(default=None, max_length=2000)
    type: str | None = Field(default=None, max_length=50)
    category: str | None = Field(default=None, max_length=100)
    is_global: bool | None = None
    program_id: str | None = Field(default=None, max_length=64)
    cohort_id: str | None = Field(default=None, max_length=64)


class ResourceUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=4000)
    url: str | None = Field(default=None, max_length=2000)
    type: str | None = Field(default=None, max_length=50)
    category: str | None = Field(default=None, max_length=100)
    is_global: bool | None = None
    program_id: str | None = Field(default=None, max_length=64)
    cohort_id: str | None = Field(default=None, max_length=64)


class ResourceResponse(BaseModel):
    resource: Resource


class ResourceListResponse(BaseModel):
    resources: list[Resource]


class ResourceDeleteResponse(BaseModel):
    deleted: str
