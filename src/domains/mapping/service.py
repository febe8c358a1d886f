# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Framework mapping service.

A mapping records the rollout of one framework version onto a target
(course template or class instance), optionally per campus.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.domains.common.lookups import get_live_framework, get_live_version
from src.domains.common.pagination import count_rows
from src.domains.common.updates import apply_updates, collect_updates
from src.infrastructure.database.models import CurriculumFramework, FrameworkVersion, Mapping
from src.models.common import PaginatedResponse
from src.models.mapping import (
    MappingCreateRequest,
    MappingFilters,
    MappingResponse,
    MappingUpdateRequest,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

APPLIED = "applied"
ROLLED_BACK = "rolled_back"


class MappingServiceError(Exception):
    """Base exception for mapping service errors."""

    pass


class MappingNotFoundError(MappingServiceError, NotFoundError):
    pass


class MappingExistsError(MappingServiceError, ConflictError):
    """Raised when the same version is already mapped onto the target."""

    default_code = "DUPLICATE_MAPPING"


class MappingVersionMismatchError(MappingServiceError, ValidationError):
    """Raised when the version does not belong to the framework."""

    default_code = "VERSION_MISMATCH"


class MappingAppliedError(MappingServiceError, ConflictError):
    """Raised when deleting a mapping that has been applied."""

    default_code = "MAPPING_APPLIED"


class MappingService:
    """Service for framework rollout mappings.

    Attributes:
        db: Async database session.
        tenant_id: Tenant every query is scoped to.
    """

    def __init__(self, db: AsyncSession, tenant_id: str) -> None:
        self.db = db
        self.tenant_id = tenant_id

    async def list_mappings(
        self,
        filters: MappingFilters,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResponse[MappingResponse]:
        """List mappings with their framework name and version number."""
        query = (
            select(Mapping, CurriculumFramework.name, FrameworkVersion.version_no)
            .join(CurriculumFramework, Mapping.framework_id == CurriculumFramework.id)
            .join(FrameworkVersion, Mapping.version_id == FrameworkVersion.id)
            .where(
                Mapping.tenant_id == self.tenant_id,
                CurriculumFramework.deleted_at.is_(None),
            )
        )
        for field in ("framework_id", "version_id", "status", "target_type", "campus_id"):
            value = getattr(filters, field)
            if value is not None:
                query = query.where(getattr(Mapping, field) == value)

        total = await count_rows(self.db, query)
        result = await self.db.execute(
            query.order_by(Mapping.created_at.desc(), Mapping.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )

        items = [
            self._to_response(mapping, framework_name, version_no)
            for mapping, framework_name, version_no in result.all()
        ]
        return PaginatedResponse[MappingResponse].build(items, page, page_size, total)

    async def create_mapping(
        self,
        request: MappingCreateRequest,
        user_id: str,
    ) -> MappingResponse:
        """Create a mapping.

        Raises:
            MappingNotFoundError: If the framework or version is not visible.
            MappingVersionMismatchError: If the version belongs elsewhere.
            MappingExistsError: If the same mapping already exists.
        """
        framework = await get_live_framework(self.db, self.tenant_id, request.framework_id)
        if framework is None:
            raise MappingNotFoundError(f"Framework not found: {request.framework_id}")

        version = await get_live_version(self.db, self.tenant_id, request.version_id)
        if version is None:
            raise MappingNotFoundError(f"Version not found: {request.version_id}")

        if version.framework_id != framework.id:
            raise MappingVersionMismatchError(
                "Version does not belong to the framework",
                details={"framework_id": framework.id, "version_id": version.id},
            )

        existing = await self.db.execute(
            select(Mapping.id).where(
                Mapping.tenant_id == self.tenant_id,
                Mapping.framework_id == framework.id,
                Mapping.version_id == version.id,
                Mapping.target_type == request.target_type,
                Mapping.target_id == request.target_id,
            )
        )
        if existing.first() is not None:
            raise MappingExistsError(
                f"Mapping already exists for {request.target_type} {request.target_id}"
            )

        mapping = Mapping(
            tenant_id=self.tenant_id,
            **request.model_dump(),
            status="planned",
            created_by=user_id,
            updated_by=user_id,
        )
        self.db.add(mapping)
        await self.db.commit()
        await self.db.refresh(mapping)

        logger.info("Created mapping: %s", mapping.id)

        return self._to_response(mapping, framework.name, version.version_no)

    async def get_mapping(self, mapping_id: str) -> MappingResponse:
        mapping = await self._get_by_id(mapping_id)
        return await self._with_names(mapping)

    async def update_mapping(
        self,
        mapping_id: str,
        request: MappingUpdateRequest,
        user_id: str,
    ) -> MappingResponse:
        updates = collect_updates(request)
        mapping = await self._get_by_id(mapping_id)

        previous_status = mapping.status
        apply_updates(mapping, updates)
        mapping.updated_by = user_id

        if mapping.status != previous_status:
            if mapping.status == APPLIED:
                mapping.applied_at = utc_now()
            elif mapping.status == ROLLED_BACK:
                mapping.rolled_back_at = utc_now()

        await self.db.commit()
        await self.db.refresh(mapping)

        logger.info("Updated mapping: %s (%s)", mapping.id, mapping.status)

        return await self._with_names(mapping)

    async def delete_mapping(self, mapping_id: str, user_id: str) -> None:
        """Delete a mapping that has not been applied.

        Raises:
            MappingAppliedError: If the mapping is applied.
        """
        mapping = await self._get_by_id(mapping_id)
        if mapping.status == APPLIED:
            raise MappingAppliedError("Cannot delete an applied mapping")

        await self.db.delete(mapping)
        await self.db.commit()

        logger.info("Deleted mapping: %s by %s", mapping_id, user_id)

    async def _get_by_id(self, mapping_id: str) -> Mapping:
        result = await self.db.execute(
            select(Mapping).where(
                Mapping.id == mapping_id,
                Mapping.tenant_id == self.tenant_id,
            )
        )
        mapping = result.scalar_one_or_none()
        if not mapping:
            raise MappingNotFoundError(f"Mapping not found: {mapping_id}")
        return mapping

    async def _with_names(self, mapping: Mapping) -> MappingResponse:
        result = await self.db.execute(
            select(CurriculumFramework.name, FrameworkVersion.version_no)
            .select_from(FrameworkVersion)
            .join(CurriculumFramework, FrameworkVersion.framework_id == CurriculumFramework.id)
            .where(FrameworkVersion.id == mapping.version_id)
        )
        row = result.first()
        return self._to_response(mapping, *(row if row else (None, None)))

    def _to_response(
        self,
        mapping: Mapping,
        framework_name: str | None,
        version_no: str | None,
    ) -> MappingResponse:
        response = MappingResponse.model_validate(mapping)
        response.framework_name = framework_name
        response.version_no = version_no
        return response
