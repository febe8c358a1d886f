# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment catalog API endpoints.

- GET / - List assignments (search and field filters, paginated; accepts pageSize)
- POST / - Create an assignment (teacher, curriculum_designer, program_owner or admin)
- GET /{assignment_id} - Get an assignment
- PATCH /{assignment_id} - Update an assignment
- DELETE /{assignment_id} - Soft delete an assignment (owner, program_owner or admin)

Example:
    GET /api/v1/assignments?page=1&pageSize=10&content_type=quiz
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import (
    AuthenticatedUser,
    CatalogPageParams,
    CatalogWriter,
    DBSession,
    Tenant,
)
from src.domains.catalog import AssignmentService
from src.models.catalog import (
    CatalogFilters,
    AssignmentCreateRequest,
    AssignmentResponse,
    AssignmentUpdateRequest,
)
from src.models.common import PaginatedResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_assignment_service(db: DBSession, tenant: Tenant) -> AssignmentService:
    return AssignmentService(db, tenant.tenant_id)


AssignmentSvc = Annotated[AssignmentService, Depends(_get_assignment_service)]


@router.get(
    "",
    response_model=PaginatedResponse[AssignmentResponse],
    summary="List assignments",
)
async def list_assignments(
    current_user: AuthenticatedUser,
    service: AssignmentSvc,
    pagination: CatalogPageParams,
    search: str | None = Query(default=None),
    level: str | None = Query(default=None),
    skill: str | None = Query(default=None),
    type: str | None = Query(default=None),
    difficulty: str | None = Query(default=None),
    visibility: str | None = Query(default=None),
    content_type: str | None = Query(default=None),
) -> PaginatedResponse[AssignmentResponse]:
    filters = CatalogFilters(
        search=search,
        level=level,
        skill=skill,
        type=type,
        difficulty=difficulty,
        visibility=visibility,
        kind=content_type,
    )
    return await service.list_items(
        filters, current_user.id, pagination.page, pagination.page_size
    )


@router.post(
    "",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create assignment",
)
async def create_assignment(
    data: AssignmentCreateRequest,
    current_user: CatalogWriter,
    service: AssignmentSvc,
) -> AssignmentResponse:
    return await service.create_item(data, current_user.id)


@router.get(
    "/{assignment_id}",
    response_model=AssignmentResponse,
    summary="Get assignment",
)
async def get_assignment(
    assignment_id: str,
    current_user: AuthenticatedUser,
    service: AssignmentSvc,
) -> AssignmentResponse:
    return await service.get_item(assignment_id, current_user.id)


@router.patch(
    "/{assignment_id}",
    response_model=AssignmentResponse,
    summary="Update assignment",
)
async def update_assignment(
    assignment_id: str,
    data: AssignmentUpdateRequest,
    current_user: CatalogWriter,
    service: AssignmentSvc,
) -> AssignmentResponse:
    return await service.update_item(assignment_id, data, current_user.id)


@router.delete(
    "/{assignment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete assignment",
)
async def delete_assignment(
    assignment_id: str,
    current_user: CatalogWriter,
    service: AssignmentSvc,
) -> Response:
    await service.delete_item(assignment_id, current_user.id, current_user.role)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
