"""Team routes: create (with creator participation), detail, members, submissions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    CurrentProfile,
    CurrentUser,
    SettingsDep,
    SubmissionRepoDep,
    TeamRepoDep,
    ensure_team_member,
    get_create_team_workflow,
)
from app.application.dtos import Team
from app.application.use_cases import CreateTeamWorkflow
from app.core.limiter import limit_writes
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.airtable.repositories import TeamRepository
from app.schemas.team import (
    TeamCreateRequest,
    TeamMemberAddRequest,
    TeamResponse,
    TeamSubmissionsResponse,
    TeamUpdateRequest,
)

router = APIRouter()


async def _load_team(team_repo: TeamRepository, team_id: str) -> Team:
    team = await team_repo.get_team(team_id)
    if team is None:
        raise ResourceNotFoundException("team", team_id)
    return team


@router.post("/create", response_model=TeamResponse, status_code=201)
@limit_writes
async def create_team(
    request: Request,
    body: TeamCreateRequest,
    profile: CurrentProfile,
    workflow: Annotated[CreateTeamWorkflow, Depends(get_create_team_workflow)],
) -> TeamResponse:
    """Create a team with the caller as its first member (Team Lead in the cohort)."""
    team = await workflow.execute(
        profile.contact_id,
        body.name,
        description=body.description,
        cohort_id=body.cohort_id,
        program_id=body.program_id,
    )
    return TeamResponse(team=team)


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(team_id: str, team_repo: TeamRepoDep, _: CurrentUser) -> TeamResponse:
    return TeamResponse(team=await _load_team(team_repo, team_id))


@router.patch("/{team_id}", response_model=TeamResponse)
@limit_writes
async def update_team(
    request: Request,
    team_id: str,
    body: TeamUpdateRequest,
    profile: CurrentProfile,
    user: CurrentUser,
    settings: SettingsDep,
    team_repo: TeamRepoDep,
) -> TeamResponse:
    ensure_team_member(await _load_team(team_repo, team_id), profile, user, settings)
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationException("No team fields to update")
    return TeamResponse(team=await team_repo.update_team(team_id, updates))


@router.post("/{team_id}/members", response_model=TeamResponse)
@limit_writes
async def add_team_member(
    request: Request,
    team_id: str,
    body: TeamMemberAddRequest,
    profile: CurrentProfile,
    user: CurrentUser,
    settings: SettingsDep,
    team_repo: TeamRepoDep,
) -> TeamResponse:
    ensure_team_member(await _load_team(team_repo, team_id), profile, user, settings)
    await team_repo.add_team_member(team_id, body.contact_id)
    return TeamResponse(team=await _load_team(team_repo, team_id))


@router.delete("/{team_id}/members/{contact_id}", response_model=TeamResponse)
@limit_writes
async def remove_team_member(
    request: Request,
    team_id: str,
    contact_id: str,
    profile: CurrentProfile,
    user: CurrentUser,
    settings: SettingsDep,
    team_repo: TeamRepoDep,
) -> TeamResponse:
    """Remove a member; members may also remove themselves."""
    ensure_team_member(await _load_team(team_repo, team_id), profile, user, settings)
    await team_repo.remove_team_member(team_id, contact_id)
    return TeamResponse(team=await _load_team(team_repo, team_id))


@router.get("/{team_id}/submissions", response_model=TeamSubmissionsResponse)
async def list_team_submissions(
    team_id: str,
    profile: CurrentProfile,
    user: CurrentUser,
    settings: SettingsDep,
    team_repo: TeamRepoDep,
    submission_repo: SubmissionRepoDep,
) -> TeamSubmissionsResponse:
    ensure_team_member(await _load_team(team_repo, team_id), profile, user, settings)
    return TeamSubmissionsResponse(
        submissions=await submission_repo.get_submissions_by_team(team_id)
    )
