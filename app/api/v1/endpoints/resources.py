"""Learning resource routes; writes are admin-only."""

from typing import Annotated

from fastapi import APIRouter, Query, Request

from app.api.v1.dependencies import AdminUser, CurrentUser, ResourceRepoDep
from app.core.limiter import limit_writes
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.schemas.resource import (
    ResourceCreateRequest,
    ResourceDeleteResponse,
    ResourceListResponse,
    ResourceResponse,
    ResourceUpdateRequest,
)

router = APIRouter()


@router.get("/available", response_model=ResourceListResponse)
async def list_available_resources(
    resource_repo: ResourceRepoDep,
    _: CurrentUser,
    program_id: Annotated[str | None, Query(max_length=64)] = None,
    cohort_id: Annotated[str | None, Query(max_length=64)] = None,
) -> ResourceListResponse:
    """Global resources plus those of the program and cohort, without duplicates."""
    return ResourceListResponse(
        resources=await resource_repo.fetch_available_resources(program_id, cohort_id)
    )


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: str, resource_repo: ResourceRepoDep, _: CurrentUser
) -> ResourceResponse:
    resource = await resource_repo.get_resource(resource_id)
    if resource is None:
        raise ResourceNotFoundException("resource", resource_id)
    return ResourceResponse(resource=resource)


@router.post("", response_model=ResourceResponse, status_code=201)
@limit_writes
async def create_resource(
    request: Request,
    body: ResourceCreateRequest,
    resource_repo: ResourceRepoDep,
    _: AdminUser,
) -> ResourceResponse:
    created = await resource_repo.create_resource(body.model_dump(exclude_none=True))
    return ResourceResponse(resource=created)


@router.patch("/{resource_id}", response_model=ResourceResponse)
@limit_writes
async def update_resource(
    request: Request,
    resource_id: str,
    body: ResourceUpdateRequest,
    resource_repo: ResourceRepoDep,
    _: AdminUser,
) -> ResourceResponse:
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationException("No resource fields to update")
    return ResourceResponse(resource=await resource_repo.update_resource(resource_id, updates))


@router.delete("/{resource_id}", response_model=ResourceDeleteResponse)
@limit_writes
async def delete_resource(
    request: Request, resource_id: str, resource_repo: ResourceRepoDep, _: AdminUser
) -> ResourceDeleteResponse:
    return ResourceDeleteResponse(deleted=await resource_repo.delete_resource(resource_id))
