"""Institution lookup routes."""

from typing import Annotated

from fastapi import APIRouter, Query

from app.api.v1.dependencies import CurrentUser, InstitutionRepoDep
from app.domain.exceptions import ResourceNotFoundException
from app.schemas.institution import InstitutionListResponse, InstitutionResponse

router = APIRouter()


@router.get("", response_model=InstitutionListResponse)
async def search_institutions(
    institution_repo: InstitutionRepoDep,
    _: CurrentUser,
    q: Annotated[str, Query(max_length=100)] = "",
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> InstitutionListResponse:
    """Name or alias search; fewer than two characters returns no results."""
    return InstitutionListResponse(
        institutions=await institution_repo.search_institutions(q, limit=limit)
    )


@router.get("/by-email", response_model=InstitutionResponse)
async def institution_by_email(
    institution_repo: InstitutionRepoDep,
    email: Annotated[str, Query(min_length=3, max_length=320)],
) -> InstitutionResponse:
    """Institution matching the email's domain ({institution: null} when none)."""
    return InstitutionResponse(institution=await institution_repo.get_institution_by_domain(email))


@router.get("/{institution_id}", response_model=InstitutionResponse)
async def get_institution(
    institution_id: str, institution_repo: InstitutionRepoDep, _: CurrentUser
) -> InstitutionResponse:
    institution = await institution_repo.get_institution(institution_id)
    if institution is None:
        raise ResourceNotFoundException("institution", institution_id)
    return InstitutionResponse(institution=institution)
