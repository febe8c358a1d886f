# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Saved view service.

A saved view is a named set of list filters. Views belong to the user who
saved them; a public view can also be listed and used by everyone in the
tenant. Only the owner or an admin may change or delete a view.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import ConflictError, ForbiddenError, NotFoundError
from src.domains.common.pagination import paginate
from src.domains.common.updates import apply_updates, collect_updates
from src.infrastructure.database.models import SavedView, User
from src.models.common import PaginatedResponse
from src.models.saved_view import (
    SavedViewCreateRequest,
    SavedViewResponse,
    SavedViewUpdateRequest,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class SavedViewServiceError(Exception):
    """Base exception for saved view service errors."""

    pass


class SavedViewNotFoundError(SavedViewServiceError, NotFoundError):
    pass


class SavedViewNameExistsError(SavedViewServiceError, ConflictError):
    """Raised when the user already saved a view with this name and entity type."""

    default_code = "DUPLICATE_NAME"


class SavedViewPermissionError(SavedViewServiceError, ForbiddenError):
    pass


class SavedViewService:
    """Service for managing saved views.

    Attributes:
        db: Async database session.
        tenant_id: Tenant every query is scoped to.
    """

    def __init__(self, db: AsyncSession, tenant_id: str) -> None:
        self.db = db
        self.tenant_id = tenant_id

    async def list_own_views(
        self,
        user_id: str,
        entity_type: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResponse[SavedViewResponse]:
        """List the caller's views, most recently used first."""
        query = self._live_query().where(SavedView.user_id == user_id)
        return await self._list(query, entity_type, page, page_size)

    async def list_public_views(
        self,
        entity_type: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResponse[SavedViewResponse]:
        """List the tenant's public views with their creator names."""
        query = self._live_query().where(SavedView.is_public.is_(True))
        return await self._list(query, entity_type, page, page_size)

    async def create_view(
        self,
        request: SavedViewCreateRequest,
        user_id: str,
    ) -> SavedViewResponse:
        """Save a view for the caller.

        Raises:
            SavedViewNameExistsError: If the caller already has a view with
                this name for the same entity type.
        """
        await self._ensure_name_available(user_id, request.entity_type, request.name)

        view = SavedView(
            tenant_id=self.tenant_id,
            user_id=user_id,
            **request.model_dump(),
        )
        self.db.add(view)
        await self.db.commit()
        await self.db.refresh(view)

        logger.info("Saved view %s (%s) for %s", view.name, view.id, user_id)

        return await self._to_response(view)

    async def get_view(self, view_id: str, user_id: str) -> SavedViewResponse:
        """Get a view the caller owns or that is public.

        Raises:
            SavedViewNotFoundError: If the view does not exist.
            SavedViewPermissionError: If it is another user's private view.
        """
        view = await self._get_by_id(view_id)
        self._ensure_readable(view, user_id)
        return await self._to_response(view)

    async def update_view(
        self,
        view_id: str,
        request: SavedViewUpdateRequest,
        user_id: str,
        role: str,
    ) -> SavedViewResponse:
        """Update a view.

        Raises:
            SavedViewPermissionError: If the caller is neither owner nor admin.
            SavedViewNameExistsError: If a rename collides with another view.
        """
        updates = collect_updates(request)
        view = await self._get_by_id(view_id)
        self._ensure_owner_or_admin(view, user_id, role, "modify")

        new_name = updates.get("name")
        if new_name and new_name != view.name:
            await self._ensure_name_available(view.user_id, view.entity_type, new_name)

        apply_updates(view, updates)

        await self.db.commit()
        await self.db.refresh(view)

        logger.info("Updated saved view: %s by %s", view.id, user_id)

        return await self._to_response(view)

    async def delete_view(self, view_id: str, user_id: str, role: str) -> None:
        """Soft delete a view.

        Raises:
            SavedViewPermissionError: If the caller is neither owner nor admin.
        """
        view = await self._get_by_id(view_id)
        self._ensure_owner_or_admin(view, user_id, role, "delete")

        view.soft_delete()
        await self.db.commit()

        logger.info("Deleted saved view: %s by %s", view_id, user_id)

    async def record_use(self, view_id: str, user_id: str) -> SavedViewResponse:
        """Count one use of a view and stamp last_used_at.

        Raises:
            SavedViewPermissionError: If it is another user's private view.
        """
        view = await self._get_by_id(view_id)
        self._ensure_readable(view, user_id)

        view.usage_count = (view.usage_count or 0) + 1
        view.last_used_at = utc_now()

        await self.db.commit()
        await self.db.refresh(view)

        return await self._to_response(view)

    def _live_query(self):
        return select(SavedView).where(
            SavedView.tenant_id == self.tenant_id,
            SavedView.deleted_at.is_(None),
        )

    async def _list(
        self,
        query,
        entity_type: str | None,
        page: int,
        page_size: int,
    ) -> PaginatedResponse[SavedViewResponse]:
        if entity_type:
            query = query.where(SavedView.entity_type == entity_type)
        query = query.order_by(
            SavedView.last_used_at.is_(None),
            SavedView.last_used_at.desc(),
            SavedView.created_at.desc(),
        )

        views, total = await paginate(self.db, query, page, page_size)
        names = await self._user_names({v.user_id for v in views})

        return PaginatedResponse.build(
            [self._build_response(v, names) for v in views], page, page_size, total
        )

    async def _get_by_id(self, view_id: str) -> SavedView:
        result = await self.db.execute(self._live_query().where(SavedView.id == view_id))
        view = result.scalar_one_or_none()
        if view is None:
            raise SavedViewNotFoundError(f"Saved view not found: {view_id}")
        return view

    async def _ensure_name_available(self, owner_id: str, entity_type: str, name: str) -> None:
        result = await self.db.execute(
            self._live_query().where(
                SavedView.user_id == owner_id,
                SavedView.entity_type == entity_type,
                SavedView.name == name,
            )
        )
        if result.scalar_one_or_none() is not None:
            raise SavedViewNameExistsError(
                "Saved view name already exists for this entity type",
                details={"name": name, "entity_type": entity_type},
            )

    def _ensure_readable(self, view: SavedView, user_id: str) -> None:
        if view.user_id != user_id and not view.is_public:
            raise SavedViewPermissionError("Access denied to this saved view")

    def _ensure_owner_or_admin(self, view: SavedView, user_id: str, role: str, action: str) -> None:
        if view.user_id != user_id and role != "admin":
            raise SavedViewPermissionError(
                f"Cannot {action} saved view created by another user"
            )

    async def _user_names(self, user_ids: set[str]) -> dict[str, str]:
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(User.id, User.full_name).where(User.id.in_(user_ids))
        )
        return {user_id: name for user_id, name in result.all()}

    async def _to_response(self, view: SavedView) -> SavedViewResponse:
        return self._build_response(view, await self._user_names({view.user_id}))

    def _build_response(self, view: SavedView, names: dict[str, str]) -> SavedViewResponse:
        response = SavedViewResponse.model_validate(view)
        response.creator_name = names.get(view.user_id)
        return response
