"""Milestone submission routes (team members only)."""

from typing import Annotated

from fastapi import APIRouter, Query, Request

from app.api.v1.dependencies import (
    CurrentProfile,
    CurrentUser,
    SettingsDep,
    SubmissionRepoDep,
    TeamRepoDep,
    ensure_team_member,
    is_admin,
)
from app.application.dtos import UserProfile
from app.core.config import Settings
from app.core.limiter import limit_writes
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.airtable.repositories import TeamRepository
from app.infrastructure.security import AuthUser
from app.schemas.submission import (
    SubmissionCreateRequest,
    SubmissionListResponse,
    SubmissionResponse,
    SubmissionUpdateRequest,
)

router = APIRouter()

# Fields only reviewers may set.
_REVIEW_FIELDS = frozenset({"status", "feedback"})


async def _ensure_member(
    team_repo: TeamRepository,
    team_id: str,
    profile: UserProfile,
    user: AuthUser,
    settings: Settings,
) -> None:
    team = await team_repo.get_team(team_id)
    if team is None:
        raise ResourceNotFoundException("team", team_id)
    ensure_team_member(team, profile, user, settings)


@router.post("", response_model=SubmissionResponse, status_code=201)
@limit_writes
async def create_submission(
    request: Request,
    body: SubmissionCreateRequest,
    profile: CurrentProfile,
    user: CurrentUser,
    settings: SettingsDep,
    team_repo: TeamRepoDep,
    submission_repo: SubmissionRepoDep,
) -> SubmissionResponse:
    """Submit a deliverable for a milestone on behalf of the caller's team."""
    await _ensure_member(team_repo, body.team_id, profile, user, settings)
    data = body.model_dump(mode="json", exclude_none=True)
    if not (data.get("text") or data.get("link") or data.get("files")):
        raise ValidationException("A submission needs text, a link or files", field="text")
    return SubmissionResponse(submission=await submission_repo.create_submission(data))


@router.get("", response_model=SubmissionListResponse)
async def list_submissions(
    profile: CurrentProfile,
    user: CurrentUser,
    settings: SettingsDep,
    team_repo: TeamRepoDep,
    submission_repo: SubmissionRepoDep,
    team_id: Annotated[str | None, Query(max_length=64)] = None,
    milestone_id: Annotated[str | None, Query(max_length=64)] = None,
) -> SubmissionListResponse:
    """Submissions of a team, of a milestone, or of a team for one milestone.

    Listing a milestone across teams is limited to admins.
    """
    if not team_id and not milestone_id:
        raise ValidationException("team_id or milestone_id is required", field="team_id")
    if team_id:
        await _ensure_member(team_repo, team_id, profile, user, settings)
    elif not is_admin(user, settings):
        raise AuthorizationException("submission", "list")
    if milestone_id:
        submissions = await submission_repo.fetch_submissions_by_milestone(
            milestone_id, team_id=team_id
        )
    else:
        submissions = await submission_repo.get_submissions_by_team(team_id)
    return SubmissionListResponse(submissions=submissions)


@router.patch("/{submission_id}", response_model=SubmissionResponse)
@limit_writes
async def update_submission(
    request: Request,
    submission_id: str,
    body: SubmissionUpdateRequest,
    profile: CurrentProfile,
    user: CurrentUser,
    settings: SettingsDep,
    team_repo: TeamRepoDep,
    submission_repo: SubmissionRepoDep,
) -> SubmissionResponse:
    """Team members edit content; status and feedback are for admins."""
    current = await submission_repo.fetch_submission(submission_id)
    if current is None:
        raise ResourceNotFoundException("submission", submission_id)
    updates = body.model_dump(mode="json", exclude_unset=True)
    if _REVIEW_FIELDS & set(updates) and not is_admin(user, settings):
        raise AuthorizationException("submission", "review")
    if current.team_id:
        await _ensure_member(team_repo, current.team_id, profile, user, settings)
    elif not is_admin(user, settings):
        raise AuthorizationException("submission", "update")
    return SubmissionResponse(
        submission=await submission_repo.update_submission(submission_id, updates)
    )
