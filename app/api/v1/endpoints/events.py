"""Event routes; writes are admin-only."""

from typing import Annotated

from fastapi import APIRouter, Query, Request

from app.api.v1.dependencies import AdminUser, CurrentUser, EventRepoDep
from app.core.limiter import limit_writes
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.schemas.event import (
    EventCreateRequest,
    EventDeleteResponse,
    EventListResponse,
    EventResponse,
    EventUpdateRequest,
)

router = APIRouter()


@router.get("/upcoming", response_model=EventListResponse)
async def list_upcoming_events(
    event_repo: EventRepoDep,
    _: CurrentUser,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> EventListResponse:
    return EventListResponse(events=await event_repo.get_upcoming_events(limit))


@router.get("", response_model=EventListResponse)
async def list_events(
    event_repo: EventRepoDep,
    _: CurrentUser,
    program_id: Annotated[str | None, Query(max_length=64)] = None,
    cohort_id: Annotated[str | None, Query(max_length=64)] = None,
) -> EventListResponse:
    """Events of a cohort (takes precedence) or of a program."""
    if cohort_id:
        events = await event_repo.get_events_by_cohort(cohort_id)
    elif program_id:
        events = await event_repo.get_events_by_program(program_id)
    else:
        raise ValidationException("program_id or cohort_id is required", field="program_id")
    return EventListResponse(events=events)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, event_repo: EventRepoDep, _: CurrentUser) -> EventResponse:
    event = await event_repo.get_event(event_id)
    if event is None:
        raise ResourceNotFoundException("event", event_id)
    return EventResponse(event=event)


@router.post("", response_model=EventResponse, status_code=201)
@limit_writes
async def create_event(
    request: Request, body: EventCreateRequest, event_repo: EventRepoDep, _: AdminUser
) -> EventResponse:
    created = await event_repo.create_event(body.model_dump(mode="json", exclude_none=True))
    return EventResponse(event=created)


@router.patch("/{event_id}", response_model=EventResponse)
@limit_writes
async def update_event(
    request: Request,
    event_id: str,
    body: EventUpdateRequest,
    event_repo: EventRepoDep,
    _: AdminUser,
) -> EventResponse:
    updates = body.model_dump(mode="json", exclude_unset=True)
    if not updates:
        raise ValidationException("No event fields to update")
    return EventResponse(event=await event_repo.update_event(event_id, updates))


@router.delete("/{event_id}", response_model=EventDeleteResponse)
@limit_writes
async def delete_event(
    request: Request, event_id: str, event_repo: EventRepoDep, _: AdminUser
) -> EventDeleteResponse:
    return EventDeleteResponse(deleted=await event_repo.delete_event(event_id))
