# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Framework version API endpoints.

This module provides endpoints for a single version and its workflow:
- GET /compare - Structural diff of two versions (MUST be before /{version_id})
- GET /{version_id} - Get a version
- PATCH /{version_id} - Update a draft version
- DELETE /{version_id} - Archive a version
- POST /{version_id}/submit - draft -> submitted
- POST /{version_id}/approve - submitted -> approved, or back to draft on reject
- POST /{version_id}/publish - approved -> published
- POST /{version_id}/archive - any live state -> archived
- GET /{version_id}/courses - List courses
- POST /{version_id}/courses - Create a course

Example:
    POST /api/v1/versions/{version_id}/approve
    {
        "decision": "approve",
        "comments": "Looks good"
    }
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import AuthenticatedUser, DBSession, Deleter, Tenant, Writer
from src.domains.course import CourseService
from src.domains.version import VersionService
from src.models.course import CourseCreateRequest, CourseListResponse, CourseResponse
from src.models.version import (
    ApproveRequest,
    PublishRequest,
    SubmitRequest,
    VersionCompareResponse,
    VersionResponse,
    VersionUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_version_service(db: DBSession, tenant: Tenant) -> VersionService:
    return VersionService(db, tenant.tenant_id)


def _get_course_service(db: DBSession, tenant: Tenant) -> CourseService:
    return CourseService(db, tenant.tenant_id)


VersionSvc = Annotated[VersionService, Depends(_get_version_service)]
CourseSvc = Annotated[CourseService, Depends(_get_course_service)]


@router.get(
    "/compare",
    response_model=VersionCompareResponse,
    summary="Compare versions",
    description="Structural diff of courses and units between two versions of one framework.",
)
async def compare_versions(
    current_user: AuthenticatedUser,
    service: VersionSvc,
    base: str = Query(..., min_length=1),
    compare: str = Query(..., min_length=1),
) -> VersionCompareResponse:
    return await service.compare(base, compare)


@router.get(
    "/{version_id}",
    response_model=VersionResponse,
    summary="Get version",
)
async def get_version(
    version_id: str,
    current_user: AuthenticatedUser,
    service: VersionSvc,
) -> VersionResponse:
    return await service.get_version(version_id)


@router.patch(
    "/{version_id}",
    response_model=VersionResponse,
    summary="Update version",
    description="Update the changelog or metadata of a draft version.",
)
async def update_version(
    version_id: str,
    data: VersionUpdateRequest,
    current_user: Writer,
    service: VersionSvc,
) -> VersionResponse:
    return await service.update_version(version_id, data, current_user.id)


@router.delete(
    "/{version_id}",
    response_model=VersionResponse,
    summary="Archive version",
    description="Versions are never removed; deleting one archives it.",
)
async def delete_version(
    version_id: str,
    current_user: Deleter,
    service: VersionSvc,
) -> VersionResponse:
    return await service.archive(version_id, current_user.id)


@router.post(
    "/{version_id}/submit",
    response_model=VersionResponse,
    summary="Submit version for review",
)
async def submit_version(
    version_id: str,
    current_user: Writer,
    service: VersionSvc,
    data: SubmitRequest | None = None,
) -> VersionResponse:
    return await service.submit(version_id, data or SubmitRequest(), current_user.id)


@router.post(
    "/{version_id}/approve",
    response_model=VersionResponse,
    summary="Approve or reject version",
)
async def approve_version(
    version_id: str,
    current_user: Writer,
    service: VersionSvc,
    data: ApproveRequest | None = None,
) -> VersionResponse:
    return await service.approve(version_id, data or ApproveRequest(), current_user.id)


@router.post(
    "/{version_id}/publish",
    response_model=VersionResponse,
    summary="Publish version",
    description="Publish an approved version; any previously published version is archived.",
)
async def publish_version(
    version_id: str,
    current_user: Writer,
    service: VersionSvc,
    data: PublishRequest | None = None,
) -> VersionResponse:
    return await service.publish(version_id, data or PublishRequest(), current_user.id)


@router.post(
    "/{version_id}/archive",
    response_model=VersionResponse,
    summary="Archive version",
)
async def archive_version(
    version_id: str,
    current_user: Deleter,
    service: VersionSvc,
) -> VersionResponse:
    return await service.archive(version_id, current_user.id)


@router.get(
    "/{version_id}/courses",
    response_model=CourseListResponse,
    summary="List courses",
)
async def list_courses(
    version_id: str,
    current_user: AuthenticatedUser,
    service: CourseSvc,
) -> CourseListResponse:
    return await service.list_courses(version_id)


@router.post(
    "/{version_id}/courses",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
)
async def create_course(
    version_id: str,
    data: CourseCreateRequest,
    current_user: Writer,
    service: CourseSvc,
) -> CourseResponse:
    return await service.create_course(version_id, data, current_user.id)
