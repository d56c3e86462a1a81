"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the record store, cache, repositories,
workflows and the signed-in caller. The store client, cache, token
verifier and storage backend are created once in the lifespan and kept on
app.state; repositories and workflows are cheap and built per request.
Routes depend only on these dependencies, never on app.state directly.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.dtos.team import Team
from app.application.dtos.user import UserProfile
from app.application.use_cases import (
    ApplyToCohortWorkflow,
    ClaimRewardWorkflow,
    CreateEducationWorkflow,
    CreateTeamWorkflow,
    ReviewApplicationWorkflow,
    UpdateProfileWorkflow,
    UploadFileUseCase,
)
from app.core.config import Settings, get_settings
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
)
from app.infrastructure.airtable import AirtableRESTClient
from app.infrastructure.airtable.repositories import (
    ApplicationRepository,
    CohortRepository,
    EducationRepository,
    EventRepository,
    InstitutionRepository,
    ParticipationRepository,
    PointsRepository,
    ProgramRepository,
    ResourceRepository,
    SubmissionRepository,
    TeamRepository,
    UserRepository,
)
from app.infrastructure.cache import CacheProtocol
from app.infrastructure.external.storage import StorageProtocol
from app.infrastructure.security import Auth0TokenVerifier, AuthUser
from app.shared.context import set_current_user

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_settings)]


# ---- Process-wide infrastructure (from lifespan) ----


def get_record_store(request: Request) -> AirtableRESTClient:
    """Airtable client created in the lifespan; 503 when not configured."""
    store = getattr(request.app.state, "record_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Record store is not configured")
    return store


def get_cache(request: Request) -> CacheProtocol:
    """Read-through cache created in the lifespan."""
    return request.app.state.cache


def get_token_verifier(request: Request) -> Auth0TokenVerifier:
    verifier = getattr(request.app.state, "token_verifier", None)
    if verifier is None:
        raise HTTPException(status_code=503, detail="Authentication is not configured")
    return verifier


def get_storage(request: Request) -> StorageProtocol:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(status_code=503, detail="File storage is not configured")
    return storage


StoreDep = Annotated[AirtableRESTClient, Depends(get_record_store)]
CacheDep = Annotated[CacheProtocol, Depends(get_cache)]


# ---- Repositories ----


def get_user_repo(store: StoreDep, cache: CacheDep, settings: SettingsDep) -> UserRepository:
    return UserRepository(store, cache, settings.cache_ttl_profile)


def get_education_repo(
    store: StoreDep, cache: CacheDep, settings: SettingsDep
) -> EducationRepository:
    return EducationRepository(store, cache, settings.cache_ttl_education)


def get_institution_repo(
    store: StoreDep, cache: CacheDep, settings: SettingsDep
) -> InstitutionRepository:
    return InstitutionRepository(store, cache, settings.cache_ttl_institutions)


def get_program_repo(store: StoreDep, cache: CacheDep, settings: SettingsDep) -> ProgramRepository:
    return ProgramRepository(store, cache, settings.cache_ttl_cohorts)


def get_cohort_repo(store: StoreDep, cache: CacheDep, settings: SettingsDep) -> CohortRepository:
    return CohortRepository(store, cache, settings.cache_ttl_cohorts)


def get_team_repo(store: StoreDep, cache: CacheDep, settings: SettingsDep) -> TeamRepository:
    return TeamRepository(store, cache, settings.cache_ttl_default)


def get_participation_repo(
    store: StoreDep, cache: CacheDep, settings: SettingsDep
) -> ParticipationRepository:
    return ParticipationRepository(store, cache, settings.cache_ttl_participation)


def get_application_repo(
    store: StoreDep, cache: CacheDep, settings: SettingsDep
) -> ApplicationRepository:
    return ApplicationRepository(store, cache, settings.cache_ttl_default)


def get_submission_repo(
    store: StoreDep, cache: CacheDep, settings: SettingsDep
) -> SubmissionRepository:
    return SubmissionRepository(store, cache, settings.cache_ttl_default)


def get_resource_repo(
    store: StoreDep, cache: CacheDep, settings: SettingsDep
) -> ResourceRepository:
    return ResourceRepository(store, cache, settings.cache_ttl_default)


def get_event_repo(store: StoreDep, cache: CacheDep, settings: SettingsDep) -> EventRepository:
    return EventRepository(store, cache, settings.cache_ttl_default)


def get_points_repo(store: StoreDep, cache: CacheDep, settings: SettingsDep) -> PointsRepository:
    return PointsRepository(store, cache, settings.cache_ttl_default)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repo)]
EducationRepoDep = Annotated[EducationRepository, Depends(get_education_repo)]
InstitutionRepoDep = Annotated[InstitutionRepository, Depends(get_institution_repo)]
ProgramRepoDep = Annotated[ProgramRepository, Depends(get_program_repo)]
CohortRepoDep = Annotated[CohortRepository, Depends(get_cohort_repo)]
TeamRepoDep = Annotated[TeamRepository, Depends(get_team_repo)]
ParticipationRepoDep = Annotated[ParticipationRepository, Depends(get_participation_repo)]
ApplicationRepoDep = Annotated[ApplicationRepository, Depends(get_application_repo)]
SubmissionRepoDep = Annotated[SubmissionRepository, Depends(get_submission_repo)]
ResourceRepoDep = Annotated[ResourceRepository, Depends(get_resource_repo)]
EventRepoDep = Annotated[EventRepository, Depends(get_event_repo)]
PointsRepoDep = Annotated[PointsRepository, Depends(get_points_repo)]


# ---- Workflows ----


def get_update_profile_workflow(
    user_repo: UserRepoDep, education_repo: EducationRepoDep
) -> UpdateProfileWorkflow:
    return UpdateProfileWorkflow(user_repo, education_repo)


def get_create_education_workflow(
    user_repo: UserRepoDep, education_repo: EducationRepoDep
) -> CreateEducationWorkflow:
    return CreateEducationWorkflow(user_repo, education_repo)


def get_create_team_workflow(
    team_repo: TeamRepoDep, participation_repo: ParticipationRepoDep
) -> CreateTeamWorkflow:
    return CreateTeamWorkflow(team_repo, participation_repo)


def get_apply_to_cohort_workflow(
    application_repo: ApplicationRepoDep,
    participation_repo: ParticipationRepoDep,
    team_repo: TeamRepoDep,
    user_repo: UserRepoDep,
) -> ApplyToCohortWorkflow:
    return ApplyToCohortWorkflow(application_repo, participation_repo, team_repo, user_repo)


def get_review_application_workflow(
    application_repo: ApplicationRepoDep, participation_repo: ParticipationRepoDep
) -> ReviewApplicationWorkflow:
    return ReviewApplicationWorkflow(application_repo, participation_repo)


def get_claim_reward_workflow(points_repo: PointsRepoDep) -> ClaimRewardWorkflow:
    return ClaimRewardWorkflow(points_repo)


def get_upload_use_case(
    storage: Annotated[StorageProtocol, Depends(get_storage)], settings: SettingsDep
) -> UploadFileUseCase:
    allowed = frozenset(
        t.strip().lower() for t in settings.allowed_mime_types.split(",") if t.strip()
    )
    return UploadFileUseCase(storage, allowed, settings.max_upload_size)


# ---- Caller identity ----


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    verifier: Annotated[Auth0TokenVerifier, Depends(get_token_verifier)],
) -> AuthUser:
    """Verify the Auth0 bearer token.

    Raises:
        AuthenticationException: No bearer token, or the token is invalid.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Missing bearer token")
    user = await verifier.verify(credentials.credentials)
    set_current_user(user.sub)
    return user


CurrentUser = Annotated[AuthUser, Depends(get_current_user)]


async def get_current_profile(user: CurrentUser, user_repo: UserRepoDep) -> UserProfile:
    """Contact record of the caller (email first, then Auth0 subject).

    A contact found by email that has no Auth0 id yet is linked to the caller.

    Raises:
        ResourceNotFoundException: No contact for this caller.
    """
    profile = await user_repo.get_user_profile(user.sub, user.email)
    if profile is None:
        raise ResourceNotFoundException("user", user.email or user.sub)
    if not profile.auth0_id:
        logger.info("Linking contact %s to Auth0 subject", profile.contact_id)
        await user_repo.link_auth0_id(profile.contact_id, user.sub)
    return profile


CurrentProfile = Annotated[UserProfile, Depends(get_current_profile)]


def is_admin(user: AuthUser, settings: Settings) -> bool:
    admin_roles = {r.strip() for r in settings.admin_roles.split(",") if r.strip()}
    return user.has_any_role(admin_roles)


def require_admin(user: CurrentUser, settings: SettingsDep) -> AuthUser:
    """Caller must carry one of ADMIN_ROLES in the roles claim.

    Raises:
        AuthorizationException: Caller is not an admin.
    """
    if not is_admin(user, settings):
        raise AuthorizationException(message="Admin role required")
    return user


AdminUser = Annotated[AuthUser, Depends(require_admin)]


def ensure_team_member(team: Team, profile: UserProfile, user: AuthUser, settings: Settings) -> None:
    """Only members of a team (or admins) may act on it.

    Raises:
        AuthorizationException: Caller is neither a member nor an admin.
    """
    if profile.contact_id in team.member_ids or is_admin(user, settings):
        return
    raise AuthorizationException("team", "update")
