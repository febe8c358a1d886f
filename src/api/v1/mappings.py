# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Mapping API endpoints.

Mappings link a framework version to a course template or class instance.
The router is mounted at both /mappings and /kct/mappings.

- GET / - List mappings (filters, paginated)
- POST / - Create a mapping
- GET /{mapping_id} - Get a mapping
- PATCH /{mapping_id} - Update rollout status
- DELETE /{mapping_id} - Remove a mapping that is not applied
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import (
    AuthenticatedUser,
    DBSession,
    Deleter,
    PageParams,
    Tenant,
    Writer,
)
from src.domains.mapping import MappingService
from src.models.common import PaginatedResponse
from src.models.mapping import (
    MappingCreateRequest,
    MappingFilters,
    MappingResponse,
    MappingUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_mapping_service(db: DBSession, tenant: Tenant) -> MappingService:
    return MappingService(db, tenant.tenant_id)


MappingSvc = Annotated[MappingService, Depends(_get_mapping_service)]


@router.get(
    "",
    response_model=PaginatedResponse[MappingResponse],
    summary="List mappings",
)
async def list_mappings(
    current_user: AuthenticatedUser,
    service: MappingSvc,
    pagination: PageParams,
    filters: Annotated[MappingFilters, Query()],
) -> PaginatedResponse[MappingResponse]:
    return await service.list_mappings(filters, pagination.page, pagination.page_size)


@router.post(
    "",
    response_model=MappingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create mapping",
)
async def create_mapping(
    data: MappingCreateRequest,
    current_user: Writer,
    service: MappingSvc,
) -> MappingResponse:
    return await service.create_mapping(data, current_user.id)


@router.get(
    "/{mapping_id}",
    response_model=MappingResponse,
    summary="Get mapping",
)
async def get_mapping(
    mapping_id: str,
    current_user: AuthenticatedUser,
    service: MappingSvc,
) -> MappingResponse:
    return await service.get_mapping(mapping_id)


@router.patch(
    "/{mapping_id}",
    response_model=MappingResponse,
    summary="Update mapping",
)
async def update_mapping(
    mapping_id: str,
    data: MappingUpdateRequest,
    current_user: Writer,
    service: MappingSvc,
) -> MappingResponse:
    return await service.update_mapping(mapping_id, data, current_user.id)


@router.delete(
    "/{mapping_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete mapping",
)
async def delete_mapping(
    mapping_id: str,
    current_user: Deleter,
    service: MappingSvc,
) -> Response:
    await service.delete_mapping(mapping_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
