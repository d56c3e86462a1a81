"""Pydantic request/response schemas for the API.

Responses wrap application DTOs in a single-key envelope ({entity: ...}).
"""

from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.upload import UploadResponse
from app.schemas.user import ProfileResponse, ProfileUpdateRequest

__all__ = [
    "HealthResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "ReadinessResponse",
    "UploadResponse",
]
