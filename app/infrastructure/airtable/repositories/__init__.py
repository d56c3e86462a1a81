"""Airtable repositories, one per entity."""

from app.infrastructure.airtable.repositories.application_repo import ApplicationRepository
from app.infrastructure.airtable.repositories.base import AirtableRepository
from app.infrastructure.airtable.repositories.cohort_repo import CohortRepository
from app.infrastructure.airtable.repositories.education_repo import EducationRepository
from app.infrastructure.airtable.repositories.event_repo import EventRepository
from app.infrastructure.airtable.repositories.institution_repo import InstitutionRepository
from app.infrastructure.airtable.repositories.participation_repo import ParticipationRepository
from app.infrastructure.airtable.repositories.partnership_repo import PartnershipRepository
from app.infrastructure.airtable.repositories.points_repo import PointsRepository
from app.infrastructure.airtable.repositories.program_repo import ProgramRepository
from app.infrastructure.airtable.repositories.resource_repo import ResourceRepository
from app.infrastructure.airtable.repositories.submission_repo import SubmissionRepository
from app.infrastructure.airtable.repositories.team_repo import TeamRepository
from app.infrastructure.airtable.repositories.user_repo import UserRepository

__all__ = [
    "AirtableRepository",
    "ApplicationRepository",
    "CohortRepository",
    "EducationRepository",
    "EventRepository",
    "InstitutionRepository",
    "ParticipationRepository",
    "PartnershipRepository",
    "PointsRepository",
    "ProgramRepository",
    "ResourceRepository",
    "SubmissionRepository",
    "TeamRepository",
    "UserRepository",
]
