# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Comment API endpoints.

Threaded discussion attached to any entity kind:
- GET /entities/{entity_type}/{entity_id}/comments - Top-level threads with replies
- POST /entities/{entity_type}/{entity_id}/comments - Add a comment or reply
- PATCH /{comment_id} - Edit the body (author only) or resolve/unresolve
- DELETE /{comment_id} - Soft delete (author or admin)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import AuthenticatedUser, DBSession, PageParams, Tenant, Writer
from src.domains.comment import CommentService
from src.domains.common.attachments import EntityRef
from src.models.comment import (
    CommentCreateRequest,
    CommentResponse,
    CommentThreadResponse,
    CommentUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_comment_service(db: DBSession, tenant: Tenant) -> CommentService:
    return CommentService(db, tenant.tenant_id)


CommentSvc = Annotated[CommentService, Depends(_get_comment_service)]


@router.get(
    "/entities/{entity_type}/{entity_id}/comments",
    response_model=CommentThreadResponse,
    summary="List comments",
)
async def list_comments(
    entity_type: str,
    entity_id: str,
    current_user: AuthenticatedUser,
    service: CommentSvc,
    pagination: PageParams,
) -> CommentThreadResponse:
    ref = EntityRef.parse(entity_type, entity_id)
    return await service.list_comments(ref, pagination.page, pagination.page_size)


@router.post(
    "/entities/{entity_type}/{entity_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add comment",
)
async def create_comment(
    entity_type: str,
    entity_id: str,
    data: CommentCreateRequest,
    current_user: Writer,
    service: CommentSvc,
) -> CommentResponse:
    ref = EntityRef.parse(entity_type, entity_id)
    return await service.create_comment(ref, data, current_user.id)


@router.patch(
    "/{comment_id}",
    response_model=CommentResponse,
    summary="Update comment",
)
async def update_comment(
    comment_id: str,
    data: CommentUpdateRequest,
    current_user: Writer,
    service: CommentSvc,
) -> CommentResponse:
    return await service.update_comment(comment_id, data, current_user.id)


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete comment",
)
async def delete_comment(
    comment_id: str,
    current_user: Writer,
    service: CommentSvc,
) -> Response:
    await service.delete_comment(comment_id, current_user.id, current_user.role)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
