# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Games and assignments catalog services.

Both catalogs share listing, filtering and ownership rules; the concrete
services only bind the ORM model, response model and the column that
holds the item's kind (game_type or content_type).
"""

import logging
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import ForbiddenError, NotFoundError
from src.domains.common.pagination import paginate
from src.domains.common.updates import apply_updates, collect_updates
from src.infrastructure.database.models import Assignment, Game
from src.models.catalog import AssignmentResponse, CatalogFilters, GameResponse
from src.models.common import PaginatedResponse

logger = logging.getLogger(__name__)

CATALOG_MANAGER_ROLES = frozenset({"admin", "program_owner"})

ModelT = TypeVar("ModelT", Game, Assignment)
ResponseT = TypeVar("ResponseT", GameResponse, AssignmentResponse)


class CatalogServiceError(Exception):
    """Base exception for catalog service errors."""

    pass


class CatalogItemNotFoundError(CatalogServiceError, NotFoundError):
    pass


class CatalogPermissionError(CatalogServiceError, ForbiddenError):
    """Raised when a non-owner without a manager role deletes an item."""

    pass


class CatalogService(Generic[ModelT, ResponseT]):
    """Shared catalog behaviour.

    Private items are visible only to their owner: other users get a
    not-found error for them, as if they did not exist.
    """

    model: ClassVar[type]
    response_model: ClassVar[type[BaseModel]]
    kind_column: ClassVar[str]
    label: ClassVar[str]

    def __init__(self, db: AsyncSession, tenant_id: str) -> None:
        self.db = db
        self.tenant_id = tenant_id

    async def list_items(
        self,
        filters: CatalogFilters,
        user_id: str,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResponse[ResponseT]:
        model = self.model
        query = select(model).where(
            model.tenant_id == self.tenant_id,
            model.deleted_at.is_(None),
            self._visible_to(user_id),
        )

        for field in ("level", "skill", "type", "difficulty", "visibility"):
            value = getattr(filters, field)
            if value:
                query = query.where(getattr(model, field) == value)

        if filters.kind:
            query = query.where(getattr(model, self.kind_column) == filters.kind)

        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.where(
                or_(model.title.ilike(pattern), model.description.ilike(pattern))
            )

        query = query.order_by(model.created_at.desc(), model.id)
        items, total = await paginate(self.db, query, page, page_size)

        data = [self.response_model.model_validate(item) for item in items]
        return PaginatedResponse[self.response_model].build(data, page, page_size, total)

    async def get_item(self, item_id: str, user_id: str) -> ResponseT:
        return self.response_model.model_validate(await self._get_by_id(item_id, user_id))

    async def create_item(self, request: BaseModel, user_id: str) -> ResponseT:
        item = self.model(
            tenant_id=self.tenant_id,
            **request.model_dump(),
            owner_user_id=user_id,
            created_by=user_id,
            updated_by=user_id,
        )
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)

        logger.info("Created %s: %s", self.label, item.id)

        return self.response_model.model_validate(item)

    async def update_item(self, item_id: str, request: BaseModel, user_id: str) -> ResponseT:
        updates = collect_updates(request)
        item = await self._get_by_id(item_id, user_id)

        apply_updates(item, updates)
        item.updated_by = user_id

        await self.db.commit()
        await self.db.refresh(item)

        logger.info("Updated %s: %s", self.label, item.id)

        return self.response_model.model_validate(item)

    async def delete_item(self, item_id: str, user_id: str, role: str | None) -> None:
        """Soft-delete an item.

        Raises:
            CatalogPermissionError: If the caller is not the owner and
                lacks a manager role.
        """
        item = await self._get_by_id(item_id, user_id)
        if role not in CATALOG_MANAGER_ROLES and item.owner_user_id != user_id:
            raise CatalogPermissionError(
                f"Only the owner or a program owner can delete this {self.label}"
            )

        item.soft_delete()
        item.updated_by = user_id
        await self.db.commit()

        logger.info("Deleted %s: %s", self.label, item_id)

    def _visible_to(self, user_id: str) -> Any:
        model = self.model
        return or_(model.visibility != "private", model.owner_user_id == user_id)

    async def _get_by_id(self, item_id: str, user_id: str) -> Any:
        model = self.model
        result = await self.db.execute(
            select(model).where(
                model.id == item_id,
                model.tenant_id == self.tenant_id,
                model.deleted_at.is_(None),
                self._visible_to(user_id),
            )
        )
        item = result.scalar_one_or_none()
        if not item:
            raise CatalogItemNotFoundError(f"{self.label.capitalize()} not found: {item_id}")
        return item


class GameService(CatalogService[Game, GameResponse]):
    model = Game
    response_model = GameResponse
    kind_column = "game_type"
    label = "game"


class AssignmentService(CatalogService[Assignment, AssignmentResponse]):
    model = Assignment
    response_model = AssignmentResponse
    kind_column = "content_type"
    label = "assignment"
