"""Education API schemas."""

from pydantic import BaseModel, Field

from app.application.dtos import Education


class EducationCreateRequest(BaseModel):
    institution_id: str = Field(..., min_length=1, max_length=64)
    degree_type: str | None = Field(default=None, max_length=100)
    major_id: str | None = Field(default=None, max_length=64)
    graduation_year: str | None = Field(default=None, pattern=r"^\d{4}$")
    graduation_semester: str | None = Field(default=None, max_length=20)


class EducationUpdateRequest(BaseModel):
    institution_id: str | None = Field(default=None, min_length=1, max_length=64)
    degree_type: str | None = Field(default=None, max_length=100)
    major_id: str | None = Field(default=None, max_length=64)
    graduation_year: str | None = Field(default=None, pattern=r"^\d{4}$")
    graduation_semester: str | None = Field(default=None, max_length=20)


class EducationResponse(BaseModel):
    education: Education | None


class EducationListResponse(BaseModel):
    education: list[Education]
