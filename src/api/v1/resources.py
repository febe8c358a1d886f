# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Resource API endpoints.

Resources are files and links attached to a unit, course, version or
framework. Unit routes are shorthands for entity type "unit".

- GET /units/{unit_id}/resources - List unit resources
- POST /units/{unit_id}/resources - Attach a resource to a unit
- GET /entities/{entity_type}/{entity_id}/resources - List resources of any entity
- POST /entities/{entity_type}/{entity_id}/resources - Attach a resource to any entity
- PATCH /{resource_id} - Update a resource
- DELETE /{resource_id} - Remove a resource
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import (
    AuthenticatedUser,
    DBSession,
    Deleter,
    Tenant,
    Writer,
)
from src.domains.common.attachments import EntityKind, EntityRef
from src.domains.resource import ResourceService
from src.models.resource import (
    ResourceCreateRequest,
    ResourceListResponse,
    ResourceResponse,
    ResourceUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_resource_service(db: DBSession, tenant: Tenant) -> ResourceService:
    return ResourceService(db, tenant.tenant_id)


ResourceSvc = Annotated[ResourceService, Depends(_get_resource_service)]


@router.get(
    "/units/{unit_id}/resources",
    response_model=ResourceListResponse,
    summary="List unit resources",
)
async def list_unit_resources(
    unit_id: str,
    current_user: AuthenticatedUser,
    service: ResourceSvc,
) -> ResourceListResponse:
    return await service.list_resources(EntityRef(kind=EntityKind.UNIT, id=unit_id))


@router.post(
    "/units/{unit_id}/resources",
    response_model=ResourceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Attach resource to unit",
)
async def create_unit_resource(
    unit_id: str,
    data: ResourceCreateRequest,
    current_user: Writer,
    service: ResourceSvc,
) -> ResourceResponse:
    ref = EntityRef(kind=EntityKind.UNIT, id=unit_id)
    return await service.create_resource(ref, data, current_user.id)


@router.get(
    "/entities/{entity_type}/{entity_id}/resources",
    response_model=ResourceListResponse,
    summary="List entity resources",
)
async def list_entity_resources(
    entity_type: str,
    entity_id: str,
    current_user: AuthenticatedUser,
    service: ResourceSvc,
) -> ResourceListResponse:
    return await service.list_resources(EntityRef.parse(entity_type, entity_id))


@router.post(
    "/entities/{entity_type}/{entity_id}/resources",
    response_model=ResourceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Attach resource to entity",
)
async def create_entity_resource(
    entity_type: str,
    entity_id: str,
    data: ResourceCreateRequest,
    current_user: Writer,
    service: ResourceSvc,
) -> ResourceResponse:
    ref = EntityRef.parse(entity_type, entity_id)
    return await service.create_resource(ref, data, current_user.id)


@router.patch(
    "/{resource_id}",
    response_model=ResourceResponse,
    summary="Update resource",
)
async def update_resource(
    resource_id: str,
    data: ResourceUpdateRequest,
    current_user: Writer,
    service: ResourceSvc,
) -> ResourceResponse:
    return await service.update_resource(resource_id, data, current_user.id)


@router.delete(
    "/{resource_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete resource",
)
async def delete_resource(
    resource_id: str,
    current_user: Deleter,
    service: ResourceSvc,
) -> Response:
    await service.delete_resource(resource_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
