# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course blueprint service.

This module provides the CourseService class for:
- Course CRUD within a draft version
- Keeping sibling order_index values contiguous
- Atomic reordering of all courses of a version
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.domains.common.lookups import get_live_course, get_live_version
from src.domains.common.ordering import ReorderError, renumber, validate_reorder
from src.domains.common.updates import apply_updates, collect_updates
from src.domains.version.service import ensure_editable
from src.infrastructure.database.models import Course, FrameworkVersion, Unit
from src.models.common import ReorderResponse
from src.models.course import (
    CourseCreateRequest,
    CourseListResponse,
    CourseReorderRequest,
    CourseResponse,
    CourseUpdateRequest,
)

logger = logging.getLogger(__name__)


class CourseServiceError(Exception):
    """Base exception for course service errors."""

    pass


class CourseNotFoundError(CourseServiceError, NotFoundError):
    """Raised when a course or one of its ancestors is not visible."""

    pass


class CourseCodeExistsError(CourseServiceError, ConflictError):
    """Raised when the version already has a live course with that code."""

    default_code = "DUPLICATE_CODE"


class InvalidCourseOrderError(CourseServiceError, ValidationError):
    """Raised when a reorder payload is rejected."""

    default_code = "INVALID_REORDER"


class CourseService:
    """Service for managing course blueprints.

    Attributes:
        db: Async database session.
        tenant_id: Tenant every query is scoped to.
    """

    def __init__(self, db: AsyncSession, tenant_id: str) -> None:
        self.db = db
        self.tenant_id = tenant_id

    async def list_courses(self, version_id: str) -> CourseListResponse:
        """List live courses of a version in order."""
        version = await self._get_version(version_id)
        courses = await self._siblings(version.id)
        counts = await self._unit_counts([c.id for c in courses])

        return CourseListResponse(
            courses=[self._to_response(c, counts.get(c.id, 0)) for c in courses]
        )

    async def create_course(
        self,
        version_id: str,
        request: CourseCreateRequest,
        user_id: str,
    ) -> CourseResponse:
        """Append a course to a draft version.

        Raises:
            CourseNotFoundError: If the version is not visible.
            VersionFrozenError: If the version is not a draft.
            CourseCodeExistsError: If the code is taken within the version.
        """
        version = await self._get_version(version_id)
        ensure_editable(version)

        if request.code:
            await self._ensure_code_available(version.id, request.code)

        siblings = await self._siblings(version.id)
        course = Course(
            tenant_id=self.tenant_id,
            version_id=version.id,
            **request.model_dump(),
            order_index=len(siblings),
            created_by=user_id,
            updated_by=user_id,
        )
        self.db.add(course)
        await self.db.commit()
        await self.db.refresh(course)

        logger.info("Created course: %s in version %s", course.id, version.id)

        return self._to_response(course, 0)

    async def get_course(self, course_id: str) -> CourseResponse:
        """Get a course with its unit count.

        Raises:
            CourseNotFoundError: If the course is not visible.
        """
        course = await self._get_by_id(course_id)
        counts = await self._unit_counts([course.id])
        return self._to_response(course, counts.get(course.id, 0))

    async def update_course(
        self,
        course_id: str,
        request: CourseUpdateRequest,
        user_id: str,
    ) -> CourseResponse:
        """Apply a partial update to a course of a draft version."""
        updates = collect_updates(request)
        course = await self._get_by_id(course_id)
        ensure_editable(await self._get_version(course.version_id))

        new_code = updates.get("code")
        if new_code and new_code != course.code:
            await self._ensure_code_available(course.version_id, new_code, exclude_id=course.id)

        apply_updates(course, updates)
        course.updated_by = user_id

        await self.db.commit()
        await self.db.refresh(course)

        logger.info("Updated course: %s", course.id)

        return await self.get_course(course.id)

    async def delete_course(self, course_id: str, user_id: str) -> None:
        """Soft-delete a course and close the gap in its siblings."""
        course = await self._get_by_id(course_id)
        ensure_editable(await self._get_version(course.version_id))

        course.soft_delete()
        course.updated_by = user_id

        remaining = [c for c in await self._siblings(course.version_id) if c.id != course.id]
        renumber(remaining)

        await self.db.commit()

        logger.info("Deleted course: %s", course_id)

    async def reorder_courses(
        self,
        request: CourseReorderRequest,
        user_id: str,
    ) -> ReorderResponse:
        """Reassign positions of every live course of one version.

        The payload is validated in full before any row changes.

        Raises:
            InvalidCourseOrderError: If the payload is not a permutation of
                the version's live courses.
        """
        version_id = request.version_id
        if version_id is None:
            first = await get_live_course(self.db, self.tenant_id, request.orders[0].id)
            if first is None:
                raise InvalidCourseOrderError(
                    "Reorder payload contains unknown ids",
                    details={"unknown_ids": [request.orders[0].id]},
                )
            version_id = first.version_id

        version = await self._get_version(version_id)
        ensure_editable(version)

        courses = await self._siblings(version.id)
        try:
            positions = validate_reorder(
                [c.id for c in courses],
                [(item.id, item.order_index) for item in request.orders],
            )
        except ReorderError as e:
            raise InvalidCourseOrderError(e.message, details=e.details)

        updated = 0
        for course in courses:
            if course.order_index != positions[course.id]:
                course.order_index = positions[course.id]
                course.updated_by = user_id
                updated += 1

        await self.db.commit()

        logger.info("Reordered %d courses in version %s", updated, version.id)

        return ReorderResponse(message="Courses reordered successfully", updated=updated)

    async def _get_by_id(self, course_id: str) -> Course:
        course = await get_live_course(self.db, self.tenant_id, course_id)
        if not course:
            raise CourseNotFoundError(f"Course not found: {course_id}")
        return course

    async def _get_version(self, version_id: str) -> FrameworkVersion:
        version = await get_live_version(self.db, self.tenant_id, version_id)
        if not version:
            raise CourseNotFoundError(f"Version not found: {version_id}")
        return version

    async def _siblings(self, version_id: str) -> list[Course]:
        result = await self.db.execute(
            select(Course)
            .where(
                Course.version_id == version_id,
                Course.tenant_id == self.tenant_id,
                Course.deleted_at.is_(None),
            )
            .order_by(Course.order_index, Course.created_at)
        )
        return list(result.scalars().all())

    async def _ensure_code_available(
        self, version_id: str, code: str, exclude_id: str | None = None
    ) -> None:
        query = select(Course.id).where(
            Course.version_id == version_id,
            Course.code == code,
            Course.deleted_at.is_(None),
        )
        if exclude_id:
            query = query.where(Course.id != exclude_id)

        result = await self.db.execute(query)
        if result.first() is not None:
            raise CourseCodeExistsError(f"Course code already exists in this version: {code}")

    async def _unit_counts(self, course_ids: list[str]) -> dict[str, int]:
        if not course_ids:
            return {}
        result = await self.db.execute(
            select(Unit.course_id, func.count())
            .where(Unit.course_id.in_(course_ids), Unit.deleted_at.is_(None))
            .group_by(Unit.course_id)
        )
        return {course_id: count for course_id, count in result.all()}

    def _to_response(self, course: Course, units_count: int) -> CourseResponse:
        response = CourseResponse.model_validate(course)
        response.units_count = units_count
        return response
