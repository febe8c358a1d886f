# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Approval request service.

Approvals are review requests on a framework version. Submitting a version
opens one automatically; reviewers may also be requested explicitly.
Rejecting an approval of a submitted version sends the version back to
draft through the version workflow.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import NotFoundError
from src.domains.common.lookups import get_live_version
from src.domains.common.updates import apply_updates, collect_updates
from src.domains.version.service import apply_transition
from src.domains.version.workflow import VersionAction, VersionState
from src.infrastructure.database.models import Approval, FrameworkVersion
from src.models.approval import (
    ApprovalCreateRequest,
    ApprovalListResponse,
    ApprovalResponse,
    ApprovalUpdateRequest,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

DECIDED_STATUSES = ("approved", "rejected")


class ApprovalServiceError(Exception):
    """Base exception for approval service errors."""

    pass


class ApprovalNotFoundError(ApprovalServiceError, NotFoundError):
    """Raised when an approval or its version is not visible."""

    pass


class ApprovalService:
    """Service for version approval requests.

    Attributes:
        db: Async database session.
        tenant_id: Tenant every query is scoped to.
    """

    def __init__(self, db: AsyncSession, tenant_id: str) -> None:
        self.db = db
        self.tenant_id = tenant_id

    async def list_approvals(self, version_id: str) -> ApprovalListResponse:
        """List approvals of a version, newest first."""
        version = await self._get_version(version_id)

        result = await self.db.execute(
            select(Approval)
            .where(
                Approval.version_id == version.id,
                Approval.tenant_id == self.tenant_id,
            )
            .order_by(Approval.created_at.desc())
        )
        return ApprovalListResponse(
            approvals=[ApprovalResponse.model_validate(a) for a in result.scalars().all()]
        )

    async def create_approval(
        self,
        version_id: str,
        request: ApprovalCreateRequest,
        user_id: str,
    ) -> ApprovalResponse:
        version = await self._get_version(version_id)

        approval = Approval(
            tenant_id=self.tenant_id,
            version_id=version.id,
            requested_by=user_id,
            status="requested",
            **request.model_dump(),
        )
        self.db.add(approval)
        await self.db.commit()
        await self.db.refresh(approval)

        logger.info("Created approval: %s for version %s", approval.id, version.id)

        return ApprovalResponse.model_validate(approval)

    async def update_approval(
        self,
        approval_id: str,
        request: ApprovalUpdateRequest,
        user_id: str,
    ) -> ApprovalResponse:
        """Update an approval and apply the decision it carries.

        Rejections of versions that are not submitted only record the
        decision.

        Raises:
            ApprovalNotFoundError: If the approval is not visible.
        """
        updates = collect_updates(request)
        approval = await self._get_by_id(approval_id)
        version = await self._get_version(approval.version_id)

        apply_updates(approval, updates)

        status = updates.get("status")
        if status in DECIDED_STATUSES:
            approval.decided_at = utc_now()
            approval.reviewer_id = approval.reviewer_id or user_id

        if status == "rejected" and version.state == VersionState.SUBMITTED.value:
            apply_transition(version, VersionAction.REJECT)
            version.approval_comments = approval.comments
            version.updated_by = user_id
            logger.info("Version %s returned to draft by approval %s", version.id, approval.id)

        await self.db.commit()
        await self.db.refresh(approval)

        logger.info("Updated approval: %s", approval.id)

        return ApprovalResponse.model_validate(approval)

    async def _get_by_id(self, approval_id: str) -> Approval:
        result = await self.db.execute(
            select(Approval).where(
                Approval.id == approval_id,
                Approval.tenant_id == self.tenant_id,
            )
        )
        approval = result.scalar_one_or_none()
        if not approval:
            raise ApprovalNotFoundError(f"Approval not found: {approval_id}")
        return approval

    async def _get_version(self, version_id: str) -> FrameworkVersion:
        version = await get_live_version(self.db, self.tenant_id, version_id)
        if not version:
            raise ApprovalNotFoundError(f"Version not found: {version_id}")
        return version
