# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Polymorphic attachment targets for resources and comments.

An attachment target is an EntityRef: a kind from the closed EntityKind
set plus an id. Every kind has a resolver that loads the live row within
a tenant. The registry is checked when this module is imported, so adding
a kind without a resolver fails at startup rather than at request time.

Example:
    >>> ref = EntityRef.parse("unit", unit_id)
    >>> target = await resolve(db, tenant_id, ref)
"""

import enum
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError, ValidationError
from src.domains.common.lookups import (
    get_live_course,
    get_live_framework,
    get_live_unit,
    get_live_version,
)
from src.infrastructure.database.models import Mapping, Resource

Resolver = Callable[[AsyncSession, str, str], Awaitable[Any | None]]


class EntityKind(str, enum.Enum):
    """Kinds of curriculum entity that can carry attachments."""

    FRAMEWORK = "framework"
    VERSION = "version"
    COURSE = "course"
    UNIT = "unit"
    RESOURCE = "resource"
    MAPPING = "mapping"


class InvalidEntityTypeError(ValidationError):
    """Raised for an entity_type outside EntityKind."""

    default_code = "INVALID_ENTITY_TYPE"


class EntityNotFoundError(NotFoundError):
    """Raised when an attachment target does not exist in the tenant."""


@dataclass(frozen=True)
class EntityRef:
    """Reference to an attachable entity."""

    kind: EntityKind
    id: str

    @classmethod
    def parse(cls, entity_type: str, entity_id: str) -> "EntityRef":
        """Build a reference from raw path or column values.

        Raises:
            InvalidEntityTypeError: If entity_type is not a known kind.
        """
        try:
            kind = EntityKind(entity_type)
        except ValueError:
            allowed = [k.value for k in EntityKind]
            raise InvalidEntityTypeError(
                f"Invalid entity type: {entity_type}",
                details={"allowed": allowed},
            ) from None
        return cls(kind=kind, id=entity_id)

    @property
    def entity_type(self) -> str:
        return self.kind.value


_RESOLVERS: dict[EntityKind, Resolver] = {}


def register_resolver(kind: EntityKind) -> Callable[[Resolver], Resolver]:
    """Register the loader for one entity kind."""

    def decorator(func: Resolver) -> Resolver:
        _RESOLVERS[kind] = func
        return func

    return decorator


@register_resolver(EntityKind.FRAMEWORK)
async def _resolve_framework(db: AsyncSession, tenant_id: str, entity_id: str):
    return await get_live_framework(db, tenant_id, entity_id)


@register_resolver(EntityKind.VERSION)
async def _resolve_version(db: AsyncSession, tenant_id: str, entity_id: str):
    return await get_live_version(db, tenant_id, entity_id)


@register_resolver(EntityKind.COURSE)
async def _resolve_course(db: AsyncSession, tenant_id: str, entity_id: str):
    return await get_live_course(db, tenant_id, entity_id)


@register_resolver(EntityKind.UNIT)
async def _resolve_unit(db: AsyncSession, tenant_id: str, entity_id: str):
    return await get_live_unit(db, tenant_id, entity_id)


@register_resolver(EntityKind.RESOURCE)
async def _resolve_resource(db: AsyncSession, tenant_id: str, entity_id: str):
    result = await db.execute(
        select(Resource).where(Resource.id == entity_id, Resource.tenant_id == tenant_id)
    )
    resource = result.scalar_one_or_none()
    if resource is None:
        return None
    # A resource is only reachable while its own target is
    owner = EntityRef.parse(resource.entity_type, resource.entity_id)
    if await _RESOLVERS[owner.kind](db, tenant_id, owner.id) is None:
        return None
    return resource


@register_resolver(EntityKind.MAPPING)
async def _resolve_mapping(db: AsyncSession, tenant_id: str, entity_id: str):
    result = await db.execute(
        select(Mapping).where(Mapping.id == entity_id, Mapping.tenant_id == tenant_id)
    )
    return result.scalar_one_or_none()


def check_registry() -> None:
    """Verify that every EntityKind has a resolver.

    Raises:
        RuntimeError: If a kind is missing.
    """
    missing = [kind.value for kind in EntityKind if kind not in _RESOLVERS]
    if missing:
        raise RuntimeError(f"No attachment resolver registered for: {', '.join(missing)}")


async def resolve(db: AsyncSession, tenant_id: str, ref: EntityRef) -> Any:
    """Load the live target of a reference.

    Raises:
        EntityNotFoundError: If the target is absent, deleted or in another tenant.
    """
    target = await _RESOLVERS[ref.kind](db, tenant_id, ref.id)
    if target is None:
        raise EntityNotFoundError(f"{ref.kind.value.capitalize()} not found: {ref.id}")
    return target


check_registry()
