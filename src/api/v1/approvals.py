# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Approval API endpoints.

- GET /versions/{version_id}/approvals - List approval records, newest first
- POST /versions/{version_id}/approvals - Open an approval request
- PATCH /{approval_id} - Update status, reviewer, priority or comments

Rejecting an approval of a submitted version sends the version back to
draft through the workflow.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import AuthenticatedUser, DBSession, Tenant, Writer
from src.domains.approval import ApprovalService
from src.models.approval import (
    ApprovalCreateRequest,
    ApprovalListResponse,
    ApprovalResponse,
    ApprovalUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_approval_service(db: DBSession, tenant: Tenant) -> ApprovalService:
    return ApprovalService(db, tenant.tenant_id)


ApprovalSvc = Annotated[ApprovalService, Depends(_get_approval_service)]


@router.get(
    "/versions/{version_id}/approvals",
    response_model=ApprovalListResponse,
    summary="List approvals",
)
async def list_approvals(
    version_id: str,
    current_user: AuthenticatedUser,
    service: ApprovalSvc,
) -> ApprovalListResponse:
    return await service.list_approvals(version_id)


@router.post(
    "/versions/{version_id}/approvals",
    response_model=ApprovalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request approval",
)
async def create_approval(
    version_id: str,
    current_user: Writer,
    service: ApprovalSvc,
    data: ApprovalCreateRequest | None = None,
) -> ApprovalResponse:
    return await service.create_approval(
        version_id, data or ApprovalCreateRequest(), current_user.id
    )


@router.patch(
    "/{approval_id}",
    response_model=ApprovalResponse,
    summary="Update approval",
)
async def update_approval(
    approval_id: str,
    data: ApprovalUpdateRequest,
    current_user: Writer,
    service: ApprovalSvc,
) -> ApprovalResponse:
    return await service.update_approval(approval_id, data, current_user.id)
