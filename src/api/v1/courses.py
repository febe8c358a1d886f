# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course API endpoints.

This module provides endpoints for courses and their unit lists:
- POST /reorder - Atomically reorder the courses of a version (MUST be before /{course_id})
- GET /{course_id} - Get a course
- PATCH /{course_id} - Update a course
- DELETE /{course_id} - Soft delete a course, renumbering its siblings
- GET /{course_id}/units - List units
- POST /{course_id}/units - Create a unit
- POST /{course_id}/units/from-template - Create a unit from a built-in template
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import (
    AuthenticatedUser,
    DBSession,
    Deleter,
    Tenant,
    Writer,
    get_suggestion_provider,
)
from src.domains.course import CourseService
from src.domains.unit import UnitService
from src.domains.unit.suggestions import SuggestionProvider
from src.models.common import ReorderResponse
from src.models.course import (
    CourseReorderRequest,
    CourseResponse,
    CourseUpdateRequest,
)
from src.models.unit import (
    FromTemplateRequest,
    UnitCreateRequest,
    UnitListResponse,
    UnitResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_course_service(db: DBSession, tenant: Tenant) -> CourseService:
    return CourseService(db, tenant.tenant_id)


def _get_unit_service(
    db: DBSession,
    tenant: Tenant,
    provider: SuggestionProvider = Depends(get_suggestion_provider),
) -> UnitService:
    return UnitService(db, tenant.tenant_id, suggestion_provider=provider)


CourseSvc = Annotated[CourseService, Depends(_get_course_service)]
UnitSvc = Annotated[UnitService, Depends(_get_unit_service)]


@router.post(
    "/reorder",
    response_model=ReorderResponse,
    summary="Reorder courses",
    description=(
        "Assign new positions to every live course of one version. "
        "The payload is validated as a whole; nothing changes when it is invalid."
    ),
)
async def reorder_courses(
    data: CourseReorderRequest,
    current_user: Writer,
    service: CourseSvc,
) -> ReorderResponse:
    return await service.reorder_courses(data, current_user.id)


@router.get(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Get course",
)
async def get_course(
    course_id: str,
    current_user: AuthenticatedUser,
    service: CourseSvc,
) -> CourseResponse:
    return await service.get_course(course_id)


@router.patch(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Update course",
)
async def update_course(
    course_id: str,
    data: CourseUpdateRequest,
    current_user: Writer,
    service: CourseSvc,
) -> CourseResponse:
    return await service.update_course(course_id, data, current_user.id)


@router.delete(
    "/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete course",
)
async def delete_course(
    course_id: str,
    current_user: Deleter,
    service: CourseSvc,
) -> Response:
    await service.delete_course(course_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{course_id}/units",
    response_model=UnitListResponse,
    summary="List units",
)
async def list_units(
    course_id: str,
    current_user: AuthenticatedUser,
    service: UnitSvc,
) -> UnitListResponse:
    return await service.list_units(course_id)


@router.post(
    "/{course_id}/units",
    response_model=UnitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create unit",
)
async def create_unit(
    course_id: str,
    data: UnitCreateRequest,
    current_user: Writer,
    service: UnitSvc,
) -> UnitResponse:
    return await service.create_unit(course_id, data, current_user.id)


@router.post(
    "/{course_id}/units/from-template",
    response_model=UnitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create unit from template",
)
async def create_unit_from_template(
    course_id: str,
    data: FromTemplateRequest,
    current_user: Writer,
    service: UnitSvc,
) -> UnitResponse:
    return await service.create_from_template(course_id, data, current_user.id)
