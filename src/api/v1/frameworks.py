# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum framework (KCT) API endpoints.

This module provides endpoints for frameworks and their version lists:
- GET / - List frameworks (filters, paginated)
- POST / - Create a framework with its initial version
- GET /{framework_id} - Get a framework
- PATCH /{framework_id} - Update a framework
- DELETE /{framework_id} - Soft delete a framework
- GET /{framework_id}/versions - List versions
- POST /{framework_id}/versions - Create a version
- GET /{framework_id}/versions/history - Paginated version history
- GET /{framework_id}/versions/stats - Version counts per state

Mapping routes under /kct/mappings are included before this router so
that "mappings" is never matched as a framework ID.
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
from src.domains.framework import FrameworkService
from src.domains.version import VersionService
from src.models.common import PaginatedResponse
from src.models.framework import (
    FrameworkCreateRequest,
    FrameworkFilters,
    FrameworkResponse,
    FrameworkUpdateRequest,
)
from src.models.version import (
    VersionCreateRequest,
    VersionHistoryItem,
    VersionListResponse,
    VersionResponse,
    VersionStatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_framework_service(db: DBSession, tenant: Tenant) -> FrameworkService:
    return FrameworkService(db, tenant.tenant_id)


def _get_version_service(db: DBSession, tenant: Tenant) -> VersionService:
    return VersionService(db, tenant.tenant_id)


FrameworkSvc = Annotated[FrameworkService, Depends(_get_framework_service)]
VersionSvc = Annotated[VersionService, Depends(_get_version_service)]


@router.get(
    "",
    response_model=PaginatedResponse[FrameworkResponse],
    summary="List frameworks",
)
async def list_frameworks(
    current_user: AuthenticatedUser,
    service: FrameworkSvc,
    pagination: PageParams,
    filters: Annotated[FrameworkFilters, Query()],
) -> PaginatedResponse[FrameworkResponse]:
    return await service.list_frameworks(filters, pagination.page, pagination.page_size)


@router.post(
    "",
    response_model=FrameworkResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create framework",
    description="Create a framework together with its initial draft version v1.0.",
)
async def create_framework(
    data: FrameworkCreateRequest,
    current_user: Writer,
    service: FrameworkSvc,
) -> FrameworkResponse:
    return await service.create_framework(data, current_user.id)


@router.get(
    "/{framework_id}",
    response_model=FrameworkResponse,
    summary="Get framework",
)
async def get_framework(
    framework_id: str,
    current_user: AuthenticatedUser,
    service: FrameworkSvc,
) -> FrameworkResponse:
    return await service.get_framework(framework_id)


@router.patch(
    "/{framework_id}",
    response_model=FrameworkResponse,
    summary="Update framework",
)
async def update_framework(
    framework_id: str,
    data: FrameworkUpdateRequest,
    current_user: Writer,
    service: FrameworkSvc,
) -> FrameworkResponse:
    return await service.update_framework(framework_id, data, current_user.id)


@router.delete(
    "/{framework_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete framework",
    description="Soft delete a framework; its versions, courses and units become unreachable.",
)
async def delete_framework(
    framework_id: str,
    current_user: Deleter,
    service: FrameworkSvc,
) -> Response:
    await service.delete_framework(framework_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{framework_id}/versions/history",
    response_model=PaginatedResponse[VersionHistoryItem],
    summary="Version history",
)
async def get_version_history(
    framework_id: str,
    current_user: AuthenticatedUser,
    service: VersionSvc,
    pagination: PageParams,
) -> PaginatedResponse[VersionHistoryItem]:
    return await service.get_history(framework_id, pagination.page, pagination.page_size)


@router.get(
    "/{framework_id}/versions/stats",
    response_model=VersionStatsResponse,
    summary="Version statistics",
)
async def get_version_stats(
    framework_id: str,
    current_user: AuthenticatedUser,
    service: VersionSvc,
) -> VersionStatsResponse:
    return await service.get_stats(framework_id)


@router.get(
    "/{framework_id}/versions",
    response_model=VersionListResponse,
    summary="List versions",
)
async def list_versions(
    framework_id: str,
    current_user: AuthenticatedUser,
    service: VersionSvc,
) -> VersionListResponse:
    return await service.list_versions(framework_id)


@router.post(
    "/{framework_id}/versions",
    response_model=VersionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create version",
)
async def create_version(
    framework_id: str,
    data: VersionCreateRequest,
    current_user: Writer,
    service: VersionSvc,
) -> VersionResponse:
    return await service.create_version(framework_id, data, current_user.id)
