# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Threaded comment service.

Comments attach to any attachable entity. Replies point at a parent in
the same entity; listing paginates top-level comments and nests their
replies.
"""

import logging
import math
from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import ForbiddenError, NotFoundError, ValidationError
from src.domains.common.attachments import EntityRef, resolve
from src.domains.common.pagination import paginate
from src.domains.common.updates import collect_updates
from src.infrastructure.database.models import Comment, User
from src.models.comment import (
    CommentCreateRequest,
    CommentResponse,
    CommentThreadResponse,
    CommentUpdateRequest,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class CommentServiceError(Exception):
    """Base exception for comment service errors."""

    pass


class CommentNotFoundError(CommentServiceError, NotFoundError):
    """Raised when a comment or its entity is not visible."""

    pass


class InvalidParentCommentError(CommentServiceError, ValidationError):
    """Raised when a reply's parent is on another entity or missing."""

    default_code = "INVALID_PARENT"


class CommentPermissionError(CommentServiceError, ForbiddenError):
    """Raised when the caller may not change a comment."""

    pass


class CommentService:
    """Service for threaded comments.

    Attributes:
        db: Async database session.
        tenant_id: Tenant every query is scoped to.
    """

    def __init__(self, db: AsyncSession, tenant_id: str) -> None:
        self.db = db
        self.tenant_id = tenant_id

    async def list_comments(
        self,
        ref: EntityRef,
        page: int = 1,
        page_size: int = 20,
    ) -> CommentThreadResponse:
        """List comment threads of an entity, oldest first.

        Raises:
            EntityNotFoundError: If the entity is not visible.
        """
        await resolve(self.db, self.tenant_id, ref)

        top_level = self._entity_query(ref).where(Comment.parent_id.is_(None)).order_by(
            Comment.created_at, Comment.id
        )
        threads, total = await paginate(self.db, top_level, page, page_size)

        replies = await self._replies_to(ref, [t.id for t in threads])

        names = await self._author_names({c.author_id for c in [*threads, *replies]})

        children: dict[str, list[Comment]] = defaultdict(list)
        for reply in replies:
            children[reply.parent_id].append(reply)

        return CommentThreadResponse(
            comments=[self._build_thread(c, children, names) for c in threads],
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size) if page_size else 0,
        )

    async def create_comment(
        self,
        ref: EntityRef,
        request: CommentCreateRequest,
        user_id: str,
    ) -> CommentResponse:
        """Add a comment or reply to an entity.

        Raises:
            InvalidParentCommentError: If parent_id is not a live comment
                on the same entity.
        """
        await resolve(self.db, self.tenant_id, ref)

        if request.parent_id:
            result = await self.db.execute(
                self._entity_query(ref).where(Comment.id == request.parent_id)
            )
            if result.scalar_one_or_none() is None:
                raise InvalidParentCommentError(
                    "Parent comment must belong to the same entity",
                    details={"parent_id": request.parent_id},
                )

        comment = Comment(
            tenant_id=self.tenant_id,
            entity_type=ref.entity_type,
            entity_id=ref.id,
            author_id=user_id,
            **request.model_dump(),
        )
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)

        logger.info("Created comment: %s on %s %s", comment.id, ref.entity_type, ref.id)

        return await self._to_response(comment)

    async def update_comment(
        self,
        comment_id: str,
        request: CommentUpdateRequest,
        user_id: str,
    ) -> CommentResponse:
        """Edit or resolve a comment. Only the author may edit the body.

        Raises:
            CommentPermissionError: If a non-author edits the body.
        """
        updates = collect_updates(request)
        comment = await self._get_by_id(comment_id)

        if "body" in updates and updates["body"] is not None:
            if comment.author_id != user_id:
                raise CommentPermissionError("Only the author can edit a comment")
            comment.body = updates["body"]

        resolved = updates.get("is_resolved")
        if resolved is True and not comment.is_resolved:
            comment.is_resolved = True
            comment.resolved_by = user_id
            comment.resolved_at = utc_now()
        elif resolved is False and comment.is_resolved:
            comment.is_resolved = False
            comment.resolved_by = None
            comment.resolved_at = None

        await self.db.commit()
        await self.db.refresh(comment)

        logger.info("Updated comment: %s", comment.id)

        return await self._to_response(comment)

    async def delete_comment(self, comment_id: str, user_id: str, role: str | None) -> None:
        """Soft-delete a comment. Allowed for the author and admins.

        Raises:
            CommentPermissionError: If the caller is neither.
        """
        comment = await self._get_by_id(comment_id)
        if comment.author_id != user_id and role != ADMIN_ROLE:
            raise CommentPermissionError("Only the author or an admin can delete a comment")

        comment.soft_delete()
        await self.db.commit()

        logger.info("Deleted comment: %s", comment_id)

    def _entity_query(self, ref: EntityRef):
        return select(Comment).where(
            Comment.tenant_id == self.tenant_id,
            Comment.entity_type == ref.entity_type,
            Comment.entity_id == ref.id,
            Comment.deleted_at.is_(None),
        )

    async def _get_by_id(self, comment_id: str) -> Comment:
        result = await self.db.execute(
            select(Comment).where(
                Comment.id == comment_id,
                Comment.tenant_id == self.tenant_id,
                Comment.deleted_at.is_(None),
            )
        )
        comment = result.scalar_one_or_none()
        if not comment:
            raise CommentNotFoundError(f"Comment not found: {comment_id}")

        try:
            await resolve(
                self.db,
                self.tenant_id,
                EntityRef.parse(comment.entity_type, comment.entity_id),
            )
        except NotFoundError:
            raise CommentNotFoundError(f"Comment not found: {comment_id}")

        return comment

    async def _author_names(self, author_ids: set[str]) -> dict[str, str]:
        if not author_ids:
            return {}
        result = await self.db.execute(
            select(User.id, User.full_name).where(User.id.in_(author_ids))
        )
        return {user_id: name for user_id, name in result.all()}

    async def _replies_to(self, ref: EntityRef, parent_ids: list[str]) -> list[Comment]:
        """Load every reply below the given comments, one depth level per query."""
        replies: list[Comment] = []
        while parent_ids:
            result = await self.db.execute(
                self._entity_query(ref)
                .where(Comment.parent_id.in_(parent_ids))
                .order_by(Comment.created_at, Comment.id)
            )
            level = list(result.scalars().all())
            replies.extend(level)
            parent_ids = [c.id for c in level]
        return replies

    def _build_thread(
        self,
        comment: Comment,
        children: dict[str, list[Comment]],
        names: dict[str, str],
    ) -> CommentResponse:
        response = CommentResponse.model_validate(comment)
        response.author_name = names.get(comment.author_id)
        response.replies = [self._build_thread(c, children, names) for c in children.get(comment.id, [])]
        return response

    async def _to_response(self, comment: Comment) -> CommentResponse:
        names = await self._author_names({comment.author_id})
        return self._build_thread(comment, {}, names)
