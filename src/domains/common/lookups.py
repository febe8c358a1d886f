# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tenant-scoped lookups of live curriculum rows.

A row is live when it and every ancestor up to its framework are not
soft-deleted. Soft-deleting a framework therefore hides its whole
subtree without touching the children.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import (
    Course,
    CurriculumFramework,
    FrameworkVersion,
    Unit,
)


async def get_live_framework(
    db: AsyncSession, tenant_id: str, framework_id: str
) -> CurriculumFramework | None:
    query = select(CurriculumFramework).where(
        CurriculumFramework.id == framework_id,
        CurriculumFramework.tenant_id == tenant_id,
        CurriculumFramework.deleted_at.is_(None),
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_live_version(
    db: AsyncSession, tenant_id: str, version_id: str
) -> FrameworkVersion | None:
    query = (
        select(FrameworkVersion)
        .join(CurriculumFramework, FrameworkVersion.framework_id == CurriculumFramework.id)
        .where(
            FrameworkVersion.id == version_id,
            FrameworkVersion.tenant_id == tenant_id,
            FrameworkVersion.deleted_at.is_(None),
            CurriculumFramework.deleted_at.is_(None),
        )
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_live_course(db: AsyncSession, tenant_id: str, course_id: str) -> Course | None:
    query = (
        select(Course)
        .join(FrameworkVersion, Course.version_id == FrameworkVersion.id)
        .join(CurriculumFramework, FrameworkVersion.framework_id == CurriculumFramework.id)
        .where(
            Course.id == course_id,
            Course.tenant_id == tenant_id,
            Course.deleted_at.is_(None),
            FrameworkVersion.deleted_at.is_(None),
            CurriculumFramework.deleted_at.is_(None),
        )
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_live_unit(db: AsyncSession, tenant_id: str, unit_id: str) -> Unit | None:
    query = (
        select(Unit)
        .join(Course, Unit.course_id == Course.id)
        .join(FrameworkVersion, Course.version_id == FrameworkVersion.id)
        .join(CurriculumFramework, FrameworkVersion.framework_id == CurriculumFramework.id)
        .where(
            Unit.id == unit_id,
            Unit.tenant_id == tenant_id,
            Unit.deleted_at.is_(None),
            Course.deleted_at.is_(None),
            FrameworkVersion.deleted_at.is_(None),
            CurriculumFramework.deleted_at.is_(None),
        )
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_version_for_course(db: AsyncSession, course: Course) -> FrameworkVersion:
    """Load the version that owns a course."""
    result = await db.execute(
        select(FrameworkVersion).where(FrameworkVersion.id == course.version_id)
    )
    return result.scalar_one()


async def get_version_for_unit(db: AsyncSession, unit: Unit) -> FrameworkVersion:
    """Load the version that owns a unit."""
    result = await db.execute(
        select(FrameworkVersion)
        .join(Course, Course.version_id == FrameworkVersion.id)
        .where(Course.id == unit.course_id)
    )
    return result.scalar_one()
