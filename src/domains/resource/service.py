# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Resource service.

Resources are files or links attached to any attachable entity (see
src.domains.common.attachments). Unit resources count towards the unit's
completeness score, so every change to them rescores the unit.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError
from src.domains.common.attachments import EntityKind, EntityRef, resolve
from src.domains.common.lookups import get_version_for_course, get_version_for_unit
from src.domains.common.ordering import renumber
from src.domains.common.updates import apply_updates, collect_updates
from src.domains.unit.service import refresh_completeness
from src.domains.version.service import ensure_editable
from src.infrastructure.database.models import Resource
from src.models.resource import (
    ResourceCreateRequest,
    ResourceListResponse,
    ResourceResponse,
    ResourceUpdateRequest,
)

logger = logging.getLogger(__name__)


class ResourceServiceError(Exception):
    """Base exception for resource service errors."""

    pass


class ResourceNotFoundError(ResourceServiceError, NotFoundError):
    """Raised when a resource or its owner is not visible."""

    pass


class ResourceService:
    """Service for managing attached resources.

    Attributes:
        db: Async database session.
        tenant_id: Tenant every query is scoped to.
    """

    def __init__(self, db: AsyncSession, tenant_id: str) -> None:
        self.db = db
        self.tenant_id = tenant_id

    async def list_resources(self, ref: EntityRef) -> ResourceListResponse:
        """List the resources of an entity in order.

        Raises:
            EntityNotFoundError: If the entity is not visible.
        """
        await resolve(self.db, self.tenant_id, ref)
        resources = await self._siblings(ref)
        return ResourceListResponse(
            resources=[ResourceResponse.model_validate(r) for r in resources]
        )

    async def create_resource(
        self,
        ref: EntityRef,
        request: ResourceCreateRequest,
        user_id: str,
    ) -> ResourceResponse:
        """Append a resource to an entity."""
        owner = await resolve(self.db, self.tenant_id, ref)
        await self._ensure_owner_editable(ref, owner)

        siblings = await self._siblings(ref)
        resource = Resource(
            tenant_id=self.tenant_id,
            entity_type=ref.entity_type,
            entity_id=ref.id,
            **request.model_dump(),
            order_index=len(siblings),
            created_by=user_id,
        )
        self.db.add(resource)
        await self.db.flush()

        await self._rescore_owner(ref, owner)

        await self.db.commit()
        await self.db.refresh(resource)

        logger.info("Created resource: %s on %s %s", resource.id, ref.entity_type, ref.id)

        return ResourceResponse.model_validate(resource)

    async def update_resource(
        self,
        resource_id: str,
        request: ResourceUpdateRequest,
        user_id: str,
    ) -> ResourceResponse:
        updates = collect_updates(request)
        resource = await self._get_by_id(resource_id)
        ref = EntityRef.parse(resource.entity_type, resource.entity_id)
        owner = await resolve(self.db, self.tenant_id, ref)
        await self._ensure_owner_editable(ref, owner)

        apply_updates(resource, updates)

        await self.db.commit()
        await self.db.refresh(resource)

        logger.info("Updated resource: %s by %s", resource.id, user_id)

        return ResourceResponse.model_validate(resource)

    async def delete_resource(self, resource_id: str, user_id: str) -> None:
        """Hard-delete a resource and rescore its owner."""
        resource = await self._get_by_id(resource_id)
        ref = EntityRef.parse(resource.entity_type, resource.entity_id)
        owner = await resolve(self.db, self.tenant_id, ref)
        await self._ensure_owner_editable(ref, owner)

        await self.db.delete(resource)
        await self.db.flush()

        renumber(await self._siblings(ref))
        await self._rescore_owner(ref, owner)

        await self.db.commit()

        logger.info("Deleted resource: %s by %s", resource_id, user_id)

    async def _get_by_id(self, resource_id: str) -> Resource:
        try:
            return await resolve(
                self.db, self.tenant_id, EntityRef(EntityKind.RESOURCE, resource_id)
            )
        except NotFoundError:
            raise ResourceNotFoundError(f"Resource not found: {resource_id}")

    async def _siblings(self, ref: EntityRef) -> list[Resource]:
        result = await self.db.execute(
            select(Resource)
            .where(
                Resource.tenant_id == self.tenant_id,
                Resource.entity_type == ref.entity_type,
                Resource.entity_id == ref.id,
            )
            .order_by(Resource.order_index, Resource.created_at)
        )
        return list(result.scalars().all())

    async def _ensure_owner_editable(self, ref: EntityRef, owner: Any) -> None:
        if ref.kind is EntityKind.UNIT:
            ensure_editable(await get_version_for_unit(self.db, owner))
        elif ref.kind is EntityKind.COURSE:
            ensure_editable(await get_version_for_course(self.db, owner))
        elif ref.kind is EntityKind.VERSION:
            ensure_editable(owner)

    async def _rescore_owner(self, ref: EntityRef, owner: Any) -> None:
        if ref.kind is EntityKind.UNIT:
            await refresh_completeness(self.db, owner)
