"""Program (initiative) and major routes."""

from typing import Annotated

from fastapi import APIRouter, Query

from app.api.v1.dependencies import CurrentUser, ProgramRepoDep
from app.domain.exceptions import ResourceNotFoundException
from app.schemas.program import MajorListResponse, ProgramListResponse, ProgramResponse

router = APIRouter()


@router.get("", response_model=ProgramListResponse)
async def list_programs(program_repo: ProgramRepoDep, _: CurrentUser) -> ProgramListResponse:
    """Active programs."""
    return ProgramListResponse(programs=await program_repo.get_active_programs())


@router.get("/majors", response_model=MajorListResponse)
async def list_majors(
    program_repo: ProgramRepoDep,
    q: Annotated[str | None, Query(max_length=100)] = None,
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
) -> MajorListResponse:
    """All majors (cached), or a filtered list when q or limit is given."""
    if q or limit:
        majors = await program_repo.fetch_majors(query=q, limit=limit)
    else:
        majors = await program_repo.get_majors()
    return MajorListResponse(majors=majors)


@router.get("/{program_id}", response_model=ProgramResponse)
async def get_program(program_id: str, program_repo: ProgramRepoDep, _: CurrentUser) -> ProgramResponse:
    program = await program_repo.get_program(program_id)
    if program is None:
        raise ResourceNotFoundException("program", program_id)
    return ProgramResponse(program=program)
