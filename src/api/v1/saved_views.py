# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Saved view API endpoints.

- GET / - List the caller's saved views (entity_type filter, paginated)
- POST / - Save a view
- GET /public - List the tenant's public views
- GET /{view_id} - Get an own or public view
- PATCH /{view_id} - Update a view (owner or admin)
- DELETE /{view_id} - Soft delete a view (owner or admin)
- POST /{view_id}/use - Record one use of an own or public view
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import AuthenticatedUser, DBSession, PageParams, Tenant
from src.domains.saved_view import SavedViewService
from src.models.common import PaginatedResponse
from src.models.saved_view import (
    SavedViewCreateRequest,
    SavedViewResponse,
    SavedViewUpdateRequest,
    ViewEntityType,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_saved_view_service(db: DBSession, tenant: Tenant) -> SavedViewService:
    return SavedViewService(db, tenant.tenant_id)


SavedViewSvc = Annotated[SavedViewService, Depends(_get_saved_view_service)]


@router.get(
    "",
    response_model=PaginatedResponse[SavedViewResponse],
    summary="List my saved views",
)
async def list_saved_views(
    current_user: AuthenticatedUser,
    service: SavedViewSvc,
    pagination: PageParams,
    entity_type: ViewEntityType | None = Query(default=None),
) -> PaginatedResponse[SavedViewResponse]:
    return await service.list_own_views(
        current_user.id, entity_type, pagination.page, pagination.page_size
    )


@router.post(
    "",
    response_model=SavedViewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save view",
)
async def create_saved_view(
    data: SavedViewCreateRequest,
    current_user: AuthenticatedUser,
    service: SavedViewSvc,
) -> SavedViewResponse:
    return await service.create_view(data, current_user.id)


@router.get(
    "/public",
    response_model=PaginatedResponse[SavedViewResponse],
    summary="List public saved views",
)
async def list_public_views(
    current_user: AuthenticatedUser,
    service: SavedViewSvc,
    pagination: PageParams,
    entity_type: ViewEntityType | None = Query(default=None),
) -> PaginatedResponse[SavedViewResponse]:
    return await service.list_public_views(entity_type, pagination.page, pagination.page_size)


@router.get(
    "/{view_id}",
    response_model=SavedViewResponse,
    summary="Get saved view",
)
async def get_saved_view(
    view_id: str,
    current_user: AuthenticatedUser,
    service: SavedViewSvc,
) -> SavedViewResponse:
    return await service.get_view(view_id, current_user.id)


@router.patch(
    "/{view_id}",
    response_model=SavedViewResponse,
    summary="Update saved view",
)
async def update_saved_view(
    view_id: str,
    data: SavedViewUpdateRequest,
    current_user: AuthenticatedUser,
    service: SavedViewSvc,
) -> SavedViewResponse:
    return await service.update_view(view_id, data, current_user.id, current_user.role)


@router.delete(
    "/{view_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete saved view",
)
async def delete_saved_view(
    view_id: str,
    current_user: AuthenticatedUser,
    service: SavedViewSvc,
) -> Response:
    await service.delete_view(view_id, current_user.id, current_user.role)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{view_id}/use",
    response_model=SavedViewResponse,
    summary="Record saved view use",
)
async def use_saved_view(
    view_id: str,
    current_user: AuthenticatedUser,
    service: SavedViewSvc,
) -> SavedViewResponse:
    return await service.record_use(view_id, current_user.id)
