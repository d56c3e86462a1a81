"""Application ports (Protocols implemented by infrastructure)."""

from app.application.interfaces.repositories import (
    IApplicationRepository,
    IEducationRepository,
    IParticipationRepository,
    IPointsRepository,
    ITeamRepository,
    IUserRepository,
)
from app.application.interfaces.storage import IStorageService

__all__ = [
    "IApplicationRepository",
    "IEducationRepository",
    "IParticipationRepository",
    "IPointsRepository",
    "IStorageService",
    "ITeamRepository",
    "IUserRepository",
]
