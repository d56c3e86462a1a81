"""Cohort and milestone API schemas."""

from pydantic import BaseModel

from app.application.dtos import Cohort, Milestone, Team


class CohortResponse(BaseModel):
    cohort: Cohort


class CohortListResponse(BaseModel):
    cohorts: list[Cohort]


class MilestoneListResponse(BaseModel):
    milestones: list[Milestone]


class CohortTeamsResponse(BaseModel):
    teams: list[Team]
