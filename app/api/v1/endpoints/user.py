"""Signed-in user routes: profile, onboarding, participation, teams, events."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    ApplicationRepoDep,
    CurrentProfile,
    CurrentUser,
    EventRepoDep,
    ParticipationRepoDep,
    TeamRepoDep,
    UserRepoDep,
    get_update_profile_workflow,
)
from app.application.dtos import UserProfile
from app.application.use_cases import UpdateProfileWorkflow
from app.core.limiter import limit_writes
from app.domain.enums import OnboardingStatus
from app.domain.exceptions import ValidationException
from app.schemas.user import (
    CheckApplicationResponse,
    CheckEmailResponse,
    OnboardingResponse,
    ParticipationListResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    UserEventsResponse,
    UserTeamsResponse,
)

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(profile: CurrentProfile) -> ProfileResponse:
    """Contact fields plus the first education record."""
    return ProfileResponse(profile=profile)


@router.patch("/profile", response_model=ProfileUpdateResponse)
@limit_writes
async def update_profile(
    request: Request,
    body: ProfileUpdateRequest,
    profile: CurrentProfile,
    user: CurrentUser,
    user_repo: UserRepoDep,
    workflow: Annotated[UpdateProfileWorkflow, Depends(get_update_profile_workflow)],
) -> ProfileUpdateResponse:
    """Update contact and education fields together (undone together on failure)."""
    results = await workflow.execute(profile, body.model_dump(exclude_unset=True))
    refreshed: UserProfile | None = await user_repo.get_user_profile(user.sub, user.email)
    return ProfileUpdateResponse(profile=refreshed or profile, updated=list(results))


@router.get("/onboarding-completed", response_model=OnboardingResponse)
async def get_onboarding_completed(user: CurrentUser, user_repo: UserRepoDep) -> OnboardingResponse:
    return OnboardingResponse(completed=await user_repo.is_onboarding_completed(user.sub, user.email))


@router.post("/onboarding-completed", response_model=OnboardingResponse)
@limit_writes
async def complete_onboarding(
    request: Request, profile: CurrentProfile, user_repo: UserRepoDep
) -> OnboardingResponse:
    """Mark the caller's onboarding as done (status Applied)."""
    if profile.onboarding_status != OnboardingStatus.APPLIED.value:
        await user_repo.update_onboarding_status(profile.contact_id, OnboardingStatus.APPLIED.value)
    return OnboardingResponse(completed=True)


@router.get("/check-email", response_model=CheckEmailResponse)
async def check_email(
    user_repo: UserRepoDep,
    email: Annotated[str, Query(min_length=3, max_length=320)],
) -> CheckEmailResponse:
    """Whether a contact exists for email (used before sign-up; no auth)."""
    normalized = email.strip().lower()
    if "@" not in normalized:
        raise ValidationException("A valid email is required", field="email")
    return CheckEmailResponse(email=normalized, exists=await user_repo.check_user_exists(normalized))


@router.get("/participation", response_model=ParticipationListResponse)
async def list_participation(
    profile: CurrentProfile, participation_repo: ParticipationRepoDep
) -> ParticipationListResponse:
    participation = await participation_repo.get_participation_by_user(profile.contact_id)
    return ParticipationListResponse(participation=participation)


@router.get("/check-application", response_model=CheckApplicationResponse)
async def check_application(
    profile: CurrentProfile,
    application_repo: ApplicationRepoDep,
    cohort_id: Annotated[str, Query(min_length=1, max_length=64)],
) -> CheckApplicationResponse:
    application = await application_repo.check_application(profile.contact_id, cohort_id)
    return CheckApplicationResponse(has_applied=application is not None, application=application)


@router.get("/teams", response_model=UserTeamsResponse)
async def list_user_teams(profile: CurrentProfile, team_repo: TeamRepoDep) -> UserTeamsResponse:
    return UserTeamsResponse(teams=await team_repo.get_teams_by_user(profile.contact_id))


@router.get("/events", response_model=UserEventsResponse)
async def list_user_events(profile: CurrentProfile, event_repo: EventRepoDep) -> UserEventsResponse:
    """Events of the cohorts and programs the caller participates in."""
    return UserEventsResponse(events=await event_repo.get_events_by_user(profile.contact_id))
