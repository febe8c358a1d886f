# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum framework service.

This module provides the FrameworkService class for:
- Framework CRUD operations within one tenant
- Code uniqueness among live frameworks
- Creating the initial v1.0 draft together with the framework
"""

from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import ConflictError, NotFoundError
from src.domains.common.pagination import paginate
from src.domains.common.updates import apply_updates, collect_updates
from src.infrastructure.database.models import (
    CurriculumFramework,
    FrameworkVersion,
    generate_uuid,
)
from src.models.common import PaginatedResponse
from src.models.framework import (
    FrameworkCreateRequest,
    FrameworkFilters,
    FrameworkResponse,
    FrameworkUpdateRequest,
    VersionSummary,
)

logger = logging.getLogger(__name__)

INITIAL_VERSION_NO = "v1.0"


class FrameworkServiceError(Exception):
    """Base exception for framework service errors."""

    pass


class FrameworkNotFoundError(FrameworkServiceError, NotFoundError):
    """Raised when a framework is absent, deleted or owned by another tenant."""

    pass


class FrameworkCodeExistsError(FrameworkServiceError, ConflictError):
    """Raised when a live framework with the same code exists in the tenant."""

    default_code = "DUPLICATE_CODE"


class FrameworkService:
    """Service for managing curriculum frameworks.

    Attributes:
        db: Async database session.
        tenant_id: Tenant every query is scoped to.
    """

    def __init__(self, db: AsyncSession, tenant_id: str) -> None:
        self.db = db
        self.tenant_id = tenant_id

    async def create_framework(
        self,
        request: FrameworkCreateRequest,
        user_id: str,
    ) -> FrameworkResponse:
        """Create a framework and its initial draft version.

        Args:
            request: Framework creation data.
            user_id: Creating user; becomes the owner.

        Returns:
            Created framework with its latest version.

        Raises:
            FrameworkCodeExistsError: If the code is taken in this tenant.
        """
        await self._ensure_code_available(request.code)

        framework = CurriculumFramework(
            id=generate_uuid(),
            tenant_id=self.tenant_id,
            **request.model_dump(),
            status="draft",
            owner_user_id=user_id,
            created_by=user_id,
            updated_by=user_id,
        )
        version = FrameworkVersion(
            id=generate_uuid(),
            tenant_id=self.tenant_id,
            framework_id=framework.id,
            version_no=INITIAL_VERSION_NO,
            state="draft",
            changelog="Initial version",
            created_by=user_id,
            updated_by=user_id,
        )
        framework.latest_version_id = version.id

        self.db.add(framework)
        await self.db.flush()
        self.db.add(version)
        await self.db.commit()
        await self.db.refresh(framework)

        logger.info("Created framework: %s (%s)", framework.code, framework.id)

        return self._to_response(framework, version)

    async def list_frameworks(
        self,
        filters: FrameworkFilters,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResponse[FrameworkResponse]:
        """List live frameworks, most recently updated first."""
        query = select(CurriculumFramework).where(
            CurriculumFramework.tenant_id == self.tenant_id,
            CurriculumFramework.deleted_at.is_(None),
        )

        for field in ("status", "language", "age_group", "target_level", "owner_user_id", "campus_id"):
            value = getattr(filters, field)
            if value is not None:
                query = query.where(getattr(CurriculumFramework, field) == value)

        if filters.q:
            pattern = f"%{filters.q}%"
            query = query.where(
                or_(
                    CurriculumFramework.name.ilike(pattern),
                    CurriculumFramework.code.ilike(pattern),
                    CurriculumFramework.description.ilike(pattern),
                )
            )

        query = query.order_by(
            CurriculumFramework.updated_at.desc(),
            CurriculumFramework.id,
        )
        frameworks, total = await paginate(self.db, query, page, page_size)

        items = [self._to_response(f) for f in frameworks]
        return PaginatedResponse[FrameworkResponse].build(items, page, page_size, total)

    async def get_framework(self, framework_id: str) -> FrameworkResponse:
        """Get a framework with a summary of its latest version.

        Raises:
            FrameworkNotFoundError: If the framework is not visible.
        """
        framework = await self._get_by_id(framework_id)
        return self._to_response(framework, await self._get_latest_version(framework))

    async def update_framework(
        self,
        framework_id: str,
        request: FrameworkUpdateRequest,
        user_id: str,
    ) -> FrameworkResponse:
        """Apply a partial update.

        Raises:
            FrameworkNotFoundError: If the framework is not visible.
            FrameworkCodeExistsError: If the new code is taken.
            ValidationError: If no fields were supplied.
        """
        updates = collect_updates(request)
        framework = await self._get_by_id(framework_id)

        new_code = updates.get("code")
        if new_code and new_code != framework.code:
            await self._ensure_code_available(new_code, exclude_id=framework.id)

        apply_updates(framework, updates)
        framework.updated_by = user_id

        await self.db.commit()
        await self.db.refresh(framework)

        logger.info("Updated framework: %s (%s)", framework.id, ", ".join(sorted(updates)))

        return self._to_response(framework, await self._get_latest_version(framework))

    async def delete_framework(self, framework_id: str, user_id: str) -> None:
        """Soft-delete a framework; its subtree becomes unreachable.

        Raises:
            FrameworkNotFoundError: If the framework is not visible.
        """
        framework = await self._get_by_id(framework_id)
        framework.soft_delete()
        framework.updated_by = user_id

        await self.db.commit()

        logger.info("Deleted framework: %s", framework_id)

    async def _get_by_id(self, framework_id: str) -> CurriculumFramework:
        query = select(CurriculumFramework).where(
            CurriculumFramework.id == framework_id,
            CurriculumFramework.tenant_id == self.tenant_id,
            CurriculumFramework.deleted_at.is_(None),
        )
        result = await self.db.execute(query)
        framework = result.scalar_one_or_none()

        if not framework:
            raise FrameworkNotFoundError(f"Framework not found: {framework_id}")

        return framework

    async def _ensure_code_available(self, code: str, exclude_id: str | None = None) -> None:
        query = select(CurriculumFramework.id).where(
            CurriculumFramework.tenant_id == self.tenant_id,
            CurriculumFramework.code == code,
            CurriculumFramework.deleted_at.is_(None),
        )
        if exclude_id:
            query = query.where(CurriculumFramework.id != exclude_id)

        result = await self.db.execute(query)
        if result.first() is not None:
            raise FrameworkCodeExistsError(f"Framework code already exists: {code}")

    async def _get_latest_version(
        self, framework: CurriculumFramework
    ) -> FrameworkVersion | None:
        if not framework.latest_version_id:
            return None
        result = await self.db.execute(
            select(FrameworkVersion).where(FrameworkVersion.id == framework.latest_version_id)
        )
        return result.scalar_one_or_none()

    def _to_response(
        self,
        framework: CurriculumFramework,
        latest_version: FrameworkVersion | None = None,
    ) -> FrameworkResponse:
        response = FrameworkResponse.model_validate(framework)
        if latest_version is not None:
            response.latest_version = VersionSummary.model_validate(latest_version)
        return response
