"""Application DTOs (no record-store dependency)."""

from app.application.dtos.attachment import Attachment
from app.application.dtos.cohort import Cohort, Milestone
from app.application.dtos.education import Education
from app.application.dtos.event import Event
from app.application.dtos.institution import Institution
from app.application.dtos.participation import Application, Participation
from app.application.dtos.partnership import Partnership
from app.application.dtos.points import (
    ClaimResult,
    PointsSummary,
    PointsTransaction,
    Reward,
    RewardClaim,
)
from app.application.dtos.program import Major, Program
from app.application.dtos.resource import Resource
from app.application.dtos.submission import Submission
from app.application.dtos.team import Team, TeamMember
from app.application.dtos.upload import UploadedFile
from app.application.dtos.user import UserProfile

__all__ = [
    "Application",
    "Attachment",
    "ClaimResult",
    "Cohort",
    "Education",
    "Event",
    "Institution",
    "Major",
    "Milestone",
    "Participation",
    "Partnership",
    "PointsSummary",
    "PointsTransaction",
    "Program",
    "Resource",
    "Reward",
    "RewardClaim",
    "Submission",
    "Team",
    "TeamMember",
    "UploadedFile",
    "UserProfile",
]
