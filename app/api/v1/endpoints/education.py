"""Education routes for the signed-in user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    CurrentProfile,
    EducationRepoDep,
    get_create_education_workflow,
)
from app.application.use_cases import CreateEducationWorkflow
from app.core.limiter import limit_writes
from app.domain.exceptions import AuthorizationException, ResourceNotFoundException
from app.schemas.education import (
    EducationCreateRequest,
    EducationListResponse,
    EducationResponse,
    EducationUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=EducationListResponse)
async def list_education(
    profile: CurrentProfile, education_repo: EducationRepoDep
) -> EducationListResponse:
    return EducationListResponse(
        education=await education_repo.fetch_education_by_contact(profile.contact_id)
    )


@router.post("", response_model=EducationResponse, status_code=201)
@limit_writes
async def create_education(
    request: Request,
    body: EducationCreateRequest,
    profile: CurrentProfile,
    workflow: Annotated[CreateEducationWorkflow, Depends(get_create_education_workflow)],
) -> EducationResponse:
    """Create an education record and link it to the caller's contact."""
    created = await workflow.execute(
        profile.contact_id,
        body.model_dump(exclude_none=True),
        previous_education_ids=list(profile.education_ids),
    )
    return EducationResponse(education=created)


@router.patch("/{education_id}", response_model=EducationResponse)
@limit_writes
async def update_education(
    request: Request,
    education_id: str,
    body: EducationUpdateRequest,
    profile: CurrentProfile,
    education_repo: EducationRepoDep,
) -> EducationResponse:
    current = await education_repo.fetch_education(education_id)
    if current is None:
        raise ResourceNotFoundException("education", education_id)
    if current.contact_id != profile.contact_id:
        raise AuthorizationException("education", "update")
    updated = await education_repo.update_education(
        education_id, body.model_dump(exclude_unset=True)
    )
    return EducationResponse(education=updated)
