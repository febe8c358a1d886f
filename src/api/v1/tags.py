# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tag API endpoints.

- GET / - List tags with usage counts (q and entity_type filters, paginated)
- POST / - Create a tag
- GET /entities/{entity_type}/{entity_id} - Tags attached to an entity
- POST /{tag_id}/attach - Attach a tag to an entity
- DELETE /{tag_id}/detach - Detach a tag from an entity (entity in the body)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import AuthenticatedUser, DBSession, PageParams, Tenant, Writer
from src.domains.common.attachments import EntityRef
from src.domains.tag import TagService
from src.models.common import MessageResponse, PaginatedResponse
from src.models.tag import (
    EntityTagsResponse,
    TaggableType,
    TagCreateRequest,
    TagResponse,
    TagTargetRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_tag_service(db: DBSession, tenant: Tenant) -> TagService:
    return TagService(db, tenant.tenant_id)


TagSvc = Annotated[TagService, Depends(_get_tag_service)]


@router.get(
    "",
    response_model=PaginatedResponse[TagResponse],
    summary="List tags",
)
async def list_tags(
    current_user: AuthenticatedUser,
    service: TagSvc,
    pagination: PageParams,
    q: str | None = Query(default=None),
    entity_type: TaggableType | None = Query(default=None),
) -> PaginatedResponse[TagResponse]:
    return await service.list_tags(q, entity_type, pagination.page, pagination.page_size)


@router.post(
    "",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create tag",
)
async def create_tag(
    data: TagCreateRequest,
    current_user: Writer,
    service: TagSvc,
) -> TagResponse:
    return await service.create_tag(data, current_user.id)


@router.get(
    "/entities/{entity_type}/{entity_id}",
    response_model=EntityTagsResponse,
    summary="List entity tags",
)
async def list_entity_tags(
    entity_type: str,
    entity_id: str,
    current_user: AuthenticatedUser,
    service: TagSvc,
) -> EntityTagsResponse:
    return await service.list_entity_tags(EntityRef.parse(entity_type, entity_id))


@router.post(
    "/{tag_id}/attach",
    response_model=MessageResponse,
    summary="Attach tag",
)
async def attach_tag(
    tag_id: str,
    data: TagTargetRequest,
    current_user: Writer,
    service: TagSvc,
) -> MessageResponse:
    ref = EntityRef.parse(data.entity_type, data.entity_id)
    return await service.attach(tag_id, ref, current_user.id)


@router.delete(
    "/{tag_id}/detach",
    response_model=MessageResponse,
    summary="Detach tag",
)
async def detach_tag(
    tag_id: str,
    data: TagTargetRequest,
    current_user: Writer,
    service: TagSvc,
) -> MessageResponse:
    ref = EntityRef.parse(data.entity_type, data.entity_id)
    return await service.detach(tag_id, ref, current_user.id)
