"""Cohort routes: current/public listings, detail, milestones and teams."""

from fastapi import APIRouter

from app.api.v1.dependencies import CohortRepoDep, CurrentUser, TeamRepoDep
from app.domain.exceptions import ResourceNotFoundException
from app.schemas.cohort import (
    CohortListResponse,
    CohortResponse,
    CohortTeamsResponse,
    MilestoneListResponse,
)

router = APIRouter()


@router.get("/current", response_model=CohortListResponse)
async def list_current_cohorts(cohort_repo: CohortRepoDep, _: CurrentUser) -> CohortListResponse:
    return CohortListResponse(cohorts=await cohort_repo.get_current_cohorts())


@router.get("/public", response_model=CohortListResponse)
async def list_public_cohorts(cohort_repo: CohortRepoDep) -> CohortListResponse:
    """Public cohorts accepting applications (no auth)."""
    return CohortListResponse(cohorts=await cohort_repo.get_public_cohorts())


@router.get("/by-institution/{institution_id}", response_model=CohortListResponse)
async def list_cohorts_by_institution(
    institution_id: str, cohort_repo: CohortRepoDep, _: CurrentUser
) -> CohortListResponse:
    """Cohorts linked to the institution directly or through a partnership."""
    return CohortListResponse(cohorts=await cohort_repo.get_cohorts_by_institution(institution_id))


@router.get("/{cohort_id}", response_model=CohortResponse)
async def get_cohort(cohort_id: str, cohort_repo: CohortRepoDep, _: CurrentUser) -> CohortResponse:
    cohort = await cohort_repo.get_cohort(cohort_id)
    if cohort is None:
        raise ResourceNotFoundException("cohort", cohort_id)
    return CohortResponse(cohort=cohort)


@router.get("/{cohort_id}/milestones", response_model=MilestoneListResponse)
async def list_cohort_milestones(
    cohort_id: str, cohort_repo: CohortRepoDep, _: CurrentUser
) -> MilestoneListResponse:
    return MilestoneListResponse(milestones=await cohort_repo.get_milestones_by_cohort(cohort_id))


@router.get("/{cohort_id}/teams", response_model=CohortTeamsResponse)
async def list_cohort_teams(
    cohort_id: str, team_repo: TeamRepoDep, _: CurrentUser
) -> CohortTeamsResponse:
    return CohortTeamsResponse(teams=await team_repo.get_teams_by_cohort(cohort_id))
