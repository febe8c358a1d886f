# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tag service.

Tags are tenant-wide labels attached to frameworks, courses, units and
resources. A tag created with an entity_type only attaches to that kind.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.domains.common.attachments import EntityRef, resolve
from src.domains.common.pagination import paginate
from src.infrastructure.database.models import EntityTag, Tag
from src.models.common import MessageResponse, PaginatedResponse
from src.models.tag import EntityTagsResponse, TagCreateRequest, TagResponse

logger = logging.getLogger(__name__)


class TagServiceError(Exception):
    """Base exception for tag service errors."""

    pass


class TagNotFoundError(TagServiceError, NotFoundError):
    pass


class DuplicateTagError(TagServiceError, ConflictError):
    """Raised when the tenant already has a tag with the same name."""

    default_code = "DUPLICATE_TAG"


class TagAlreadyAttachedError(TagServiceError, ConflictError):
    default_code = "ALREADY_ATTACHED"


class TagNotAttachedError(TagServiceError, NotFoundError):
    default_code = "NOT_ATTACHED"


class TagEntityMismatchError(TagServiceError, ValidationError):
    """Raised when a tag restricted to one entity type is used on another."""

    default_code = "TAG_ENTITY_MISMATCH"


class TagService:
    """Service for managing tags and their attachments.

    Attributes:
        db: Async database session.
        tenant_id: Tenant every query is scoped to.
    """

    def __init__(self, db: AsyncSession, tenant_id: str) -> None:
        self.db = db
        self.tenant_id = tenant_id

    async def list_tags(
        self,
        search: str | None = None,
        entity_type: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResponse[TagResponse]:
        """List tags by name with the number of entities each is attached to."""
        query = select(Tag).where(Tag.tenant_id == self.tenant_id)
        if search:
            query = query.where(Tag.name.ilike(f"%{search}%"))
        if entity_type:
            query = query.where(Tag.entity_type == entity_type)

        tags, total = await paginate(self.db, query.order_by(Tag.name), page, page_size)
        usage = await self._usage_counts([t.id for t in tags])

        return PaginatedResponse.build(
            [self._to_response(t, usage.get(t.id, 0)) for t in tags],
            page,
            page_size,
            total,
        )

    async def create_tag(self, request: TagCreateRequest, user_id: str) -> TagResponse:
        """Create a tag.

        Raises:
            DuplicateTagError: If the name is taken in this tenant.
        """
        result = await self.db.execute(
            select(Tag.id).where(Tag.tenant_id == self.tenant_id, Tag.name == request.name)
        )
        if result.scalar_one_or_none() is not None:
            raise DuplicateTagError(
                "Tag name already exists", details={"name": request.name}
            )

        tag = Tag(
            tenant_id=self.tenant_id,
            **request.model_dump(),
            created_by=user_id,
            updated_by=user_id,
        )
        self.db.add(tag)
        await self.db.commit()
        await self.db.refresh(tag)

        logger.info("Created tag: %s (%s)", tag.name, tag.id)

        return self._to_response(tag, 0)

    async def list_entity_tags(self, ref: EntityRef) -> EntityTagsResponse:
        """List the tags attached to an entity.

        Raises:
            EntityNotFoundError: If the entity is not visible.
        """
        await resolve(self.db, self.tenant_id, ref)

        result = await self.db.execute(
            select(Tag)
            .join(EntityTag, EntityTag.tag_id == Tag.id)
            .where(
                EntityTag.tenant_id == self.tenant_id,
                EntityTag.entity_type == ref.entity_type,
                EntityTag.entity_id == ref.id,
            )
            .order_by(Tag.name)
        )
        tags = list(result.scalars().all())
        usage = await self._usage_counts([t.id for t in tags])

        return EntityTagsResponse(tags=[self._to_response(t, usage.get(t.id, 0)) for t in tags])

    async def attach(self, tag_id: str, ref: EntityRef, user_id: str) -> MessageResponse:
        """Attach a tag to an entity.

        Raises:
            TagNotFoundError: If the tag is not in this tenant.
            EntityNotFoundError: If the entity is not visible.
            TagEntityMismatchError: If the tag is restricted to another kind.
            TagAlreadyAttachedError: If the tag is already on the entity.
        """
        tag = await self._get_by_id(tag_id)
        if tag.entity_type and tag.entity_type != ref.entity_type:
            raise TagEntityMismatchError(
                f"Tag {tag.name} only applies to {tag.entity_type}",
                details={"tag_entity_type": tag.entity_type, "entity_type": ref.entity_type},
            )
        await resolve(self.db, self.tenant_id, ref)

        if await self._find_link(tag.id, ref) is not None:
            raise TagAlreadyAttachedError("Tag already attached to this entity")

        self.db.add(
            EntityTag(
                tenant_id=self.tenant_id,
                tag_id=tag.id,
                entity_type=ref.entity_type,
                entity_id=ref.id,
                created_by=user_id,
            )
        )
        await self.db.commit()

        logger.info("Attached tag %s to %s %s", tag.id, ref.entity_type, ref.id)

        return MessageResponse(message="Tag attached successfully")

    async def detach(self, tag_id: str, ref: EntityRef, user_id: str) -> MessageResponse:
        """Remove a tag from an entity.

        Raises:
            TagNotFoundError: If the tag is not in this tenant.
            TagNotAttachedError: If the tag is not on the entity.
        """
        tag = await self._get_by_id(tag_id)
        link = await self._find_link(tag.id, ref)
        if link is None:
            raise TagNotAttachedError("Tag not attached to this entity")

        await self.db.delete(link)
        await self.db.commit()

        logger.info("Detached tag %s from %s %s by %s", tag.id, ref.entity_type, ref.id, user_id)

        return MessageResponse(message="Tag detached successfully")

    async def _get_by_id(self, tag_id: str) -> Tag:
        result = await self.db.execute(
            select(Tag).where(Tag.id == tag_id, Tag.tenant_id == self.tenant_id)
        )
        tag = result.scalar_one_or_none()
        if tag is None:
            raise TagNotFoundError(f"Tag not found: {tag_id}")
        return tag

    async def _find_link(self, tag_id: str, ref: EntityRef) -> EntityTag | None:
        result = await self.db.execute(
            select(EntityTag).where(
                EntityTag.tenant_id == self.tenant_id,
                EntityTag.tag_id == tag_id,
                EntityTag.entity_type == ref.entity_type,
                EntityTag.entity_id == ref.id,
            )
        )
        return result.scalar_one_or_none()

    async def _usage_counts(self, tag_ids: list[str]) -> dict[str, int]:
        if not tag_ids:
            return {}
        result = await self.db.execute(
            select(EntityTag.tag_id, func.count())
            .where(EntityTag.tag_id.in_(tag_ids))
            .group_by(EntityTag.tag_id)
        )
        return {tag_id: count for tag_id, count in result.all()}

    def _to_response(self, tag: Tag, usage_count: int) -> TagResponse:
        response = TagResponse.model_validate(tag)
        response.usage_count = usage_count
        return response
