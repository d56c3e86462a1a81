"""Institution API schemas."""

from pydantic import BaseModel

from app.application.dtos import Institution


class InstitutionResponse(BaseModel):
    institution: Institution | None


class InstitutionListResponse(BaseModel):
    institutions: list[Institution]
