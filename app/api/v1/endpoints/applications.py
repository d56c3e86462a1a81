"""Cohort application routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    ApplicationRepoDep,
    CurrentProfile,
    CurrentUser,
    SettingsDep,
    get_apply_to_cohort_workflow,
    get_review_application_workflow,
    is_admin,
)
from app.application.use_cases import ApplyToCohortWorkflow, ReviewApplicationWorkflow
from app.core.limiter import limit_writes
from app.domain.enums import ApplicationStatus
from app.domain.exceptions import AuthorizationException, ResourceNotFoundException
from app.schemas.application import (
    ApplicationCreateRequest,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusRequest,
)

router = APIRouter()


@router.get("", response_model=ApplicationListResponse)
async def list_applications(
    profile: CurrentProfile,
    application_repo: ApplicationRepoDep,
    cohort_id: Annotated[str | None, Query(max_length=64)] = None,
) -> ApplicationListResponse:
    """The caller's applications, optionally for one cohort."""
    return ApplicationListResponse(
        applications=await application_repo.fetch_applications_by_user(
            profile.contact_id, cohort_id=cohort_id
        )
    )


@router.post("", response_model=ApplicationResponse, status_code=201)
@limit_writes
async def apply_to_cohort(
    request: Request,
    body: ApplicationCreateRequest,
    profile: CurrentProfile,
    workflow: Annotated[ApplyToCohortWorkflow, Depends(get_apply_to_cohort_workflow)],
) -> ApplicationResponse:
    """Apply to a cohort; team and xtrapreneurs applications run extra steps."""
    results = await workflow.execute(profile, body.model_dump(exclude_none=True))
    return ApplicationResponse(application=results["create_application"])


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
@limit_writes
async def update_application_status(
    request: Request,
    application_id: str,
    body: ApplicationStatusRequest,
    profile: CurrentProfile,
    user: CurrentUser,
    settings: SettingsDep,
    application_repo: ApplicationRepoDep,
    workflow: Annotated[ReviewApplicationWorkflow, Depends(get_review_application_workflow)],
) -> ApplicationResponse:
    """Admins set any status; applicants may only withdraw their own application."""
    application = await application_repo.fetch_application(application_id)
    if application is None:
        raise ResourceNotFoundException("application", application_id)
    withdrawing_own = (
        body.status == ApplicationStatus.WITHDRAWN.value
        and application.contact_id == profile.contact_id
    )
    if not withdrawing_own and not is_admin(user, settings):
        raise AuthorizationException("application", "review")
    results = await workflow.execute(application, body.status)
    return ApplicationResponse(application=results["update_status"])
