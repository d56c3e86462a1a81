"""Application use cases: one workflow per multi-step write."""

from app.application.use_cases.applications import (
    ApplyToCohortWorkflow,
    ReviewApplicationWorkflow,
)
from app.application.use_cases.profile import CreateEducationWorkflow, UpdateProfileWorkflow
from app.application.use_cases.rewards import ClaimRewardWorkflow
from app.application.use_cases.saga import Saga, SagaStep
from app.application.use_cases.teams import CreateTeamWorkflow
from app.application.use_cases.uploads import UploadFileUseCase

__all__ = [
    "ApplyToCohortWorkflow",
    "ClaimRewardWorkflow",
    "CreateEducationWorkflow",
    "CreateTeamWorkflow",
    "ReviewApplicationWorkflow",
    "Saga",
    "SagaStep",
    "UpdateProfileWorkflow",
    "UploadFileUseCase",
]
