# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Framework version service.

This module provides the VersionService class for:
- Version CRUD under a framework
- Workflow actions (submit, approve/reject, publish, archive)
- Version history, statistics and structural comparison

Every state change goes through workflow.transition(); this service only
applies the side effects of an allowed transition.
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.domains.common.lookups import get_live_framework, get_live_version
from src.domains.common.pagination import paginate
from src.domains.common.updates import collect_updates
from src.domains.version.diff import COURSE_FIELDS, UNIT_FIELDS, diff_versions
from src.domains.version.workflow import (
    VersionAction,
    VersionState,
    is_editable,
    transition,
)
from src.infrastructure.database.models import (
    Approval,
    Course,
    CurriculumFramework,
    FrameworkVersion,
    Unit,
    User,
)
from src.models.common import PaginatedResponse
from src.models.version import (
    ApproveRequest,
    PublishRequest,
    SubmitRequest,
    VersionCompareResponse,
    VersionCreateRequest,
    VersionHistoryItem,
    VersionListResponse,
    VersionRef,
    VersionResponse,
    VersionStatsResponse,
    VersionUpdateRequest,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

OPEN_APPROVAL_STATUSES = ("requested", "in_review", "escalated")


class VersionServiceError(Exception):
    """Base exception for version service errors."""

    pass


class VersionNotFoundError(VersionServiceError, NotFoundError):
    """Raised when a version or its framework is not visible."""

    pass


class VersionExistsError(VersionServiceError, ConflictError):
    """Raised when the framework already has a version with that number."""

    default_code = "DUPLICATE_VERSION"


class VersionFrozenError(VersionServiceError, ConflictError):
    """Raised when content of a non-draft version is modified."""

    default_code = "VERSION_FROZEN"


class InvalidTransitionError(VersionServiceError, ConflictError):
    """Raised when a workflow action is not allowed from the current state."""

    default_code = "INVALID_TRANSITION"


class VersionMismatchError(VersionServiceError, ValidationError):
    """Raised when compared versions belong to different frameworks."""

    default_code = "VERSION_MISMATCH"


def ensure_editable(version: FrameworkVersion) -> None:
    """Refuse changes to a version outside the draft state.

    Raises:
        VersionFrozenError: If the version is frozen.
    """
    if not is_editable(version.state):
        raise VersionFrozenError(
            f"Version {version.version_no} is {version.state} and cannot be modified",
            details={"version_id": version.id, "state": version.state},
        )


def apply_transition(version: FrameworkVersion, action: VersionAction) -> VersionState:
    """Move a version to the state the workflow allows for an action.

    Raises:
        InvalidTransitionError: If the action is not allowed.
    """
    result = transition(version.state, action)
    if not result.ok:
        raise InvalidTransitionError(
            result.error or "Invalid transition",
            details={
                "state": version.state,
                "action": action.value,
                "allowed_actions": result.allowed_actions,
            },
        )

    version.state = result.to_state.value
    return result.to_state


class VersionService:
    """Service for managing framework versions and their workflow.

    Attributes:
        db: Async database session.
        tenant_id: Tenant every query is scoped to.
    """

    def __init__(self, db: AsyncSession, tenant_id: str) -> None:
        self.db = db
        self.tenant_id = tenant_id

    async def list_versions(self, framework_id: str) -> VersionListResponse:
        """List the versions of a framework, newest first."""
        await self._get_framework(framework_id)

        result = await self.db.execute(
            self._versions_query(framework_id).order_by(
                FrameworkVersion.created_at.desc(),
                FrameworkVersion.version_no.desc(),
            )
        )
        versions = list(result.scalars().all())
        counts = await self._course_counts([v.id for v in versions])

        return VersionListResponse(
            versions=[self._to_response(v, counts.get(v.id, 0)) for v in versions]
        )

    async def create_version(
        self,
        framework_id: str,
        request: VersionCreateRequest,
        user_id: str,
    ) -> VersionResponse:
        """Create a draft version and make it the framework's latest.

        Raises:
            VersionNotFoundError: If the framework is not visible.
            VersionExistsError: If version_no is already used.
        """
        framework = await self._get_framework(framework_id)

        existing = await self.db.execute(
            select(FrameworkVersion.id).where(
                FrameworkVersion.framework_id == framework.id,
                FrameworkVersion.version_no == request.version_no,
            )
        )
        if existing.first() is not None:
            raise VersionExistsError(
                f"Version {request.version_no} already exists for framework {framework.code}"
            )

        version = FrameworkVersion(
            tenant_id=self.tenant_id,
            framework_id=framework.id,
            version_no=request.version_no,
            state=VersionState.DRAFT.value,
            changelog=request.changelog,
            extra_metadata=request.metadata,
            created_by=user_id,
            updated_by=user_id,
        )
        self.db.add(version)
        await self.db.flush()

        framework.latest_version_id = version.id
        framework.updated_by = user_id

        await self.db.commit()
        await self.db.refresh(version)

        logger.info("Created version: %s of framework %s", version.version_no, framework.id)

        return self._to_response(version, 0)

    async def get_history(
        self,
        framework_id: str,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResponse[VersionHistoryItem]:
        """Paginated version history with actor display names."""
        await self._get_framework(framework_id)

        query = self._versions_query(framework_id).order_by(
            FrameworkVersion.created_at.desc(),
            FrameworkVersion.version_no.desc(),
        )
        versions, total = await paginate(self.db, query, page, page_size)

        user_ids = {
            user_id
            for v in versions
            for user_id in (v.created_by, v.submitted_by, v.approved_by, v.published_by)
            if user_id
        }
        names = await self._user_names(user_ids)
        counts = await self._course_counts([v.id for v in versions])

        items = []
        for version in versions:
            item = VersionHistoryItem.model_validate(version)
            item.courses_count = counts.get(version.id, 0)
            item.created_by_name = names.get(version.created_by)
            item.submitted_by_name = names.get(version.submitted_by)
            item.approved_by_name = names.get(version.approved_by)
            item.published_by_name = names.get(version.published_by)
            items.append(item)

        return PaginatedResponse[VersionHistoryItem].build(items, page, page_size, total)

    async def get_stats(self, framework_id: str) -> VersionStatsResponse:
        """Count versions per state."""
        await self._get_framework(framework_id)

        result = await self.db.execute(
            select(FrameworkVersion.state, func.count())
            .where(
                FrameworkVersion.framework_id == framework_id,
                FrameworkVersion.tenant_id == self.tenant_id,
                FrameworkVersion.deleted_at.is_(None),
            )
            .group_by(FrameworkVersion.state)
        )
        by_state = {state: count for state, count in result.all()}

        last_published = await self.db.execute(
            select(func.max(FrameworkVersion.published_at)).where(
                FrameworkVersion.framework_id == framework_id,
                FrameworkVersion.tenant_id == self.tenant_id,
                FrameworkVersion.deleted_at.is_(None),
            )
        )

        return VersionStatsResponse(
            total_versions=sum(by_state.values()),
            draft_versions=by_state.get(VersionState.DRAFT.value, 0),
            submitted_versions=by_state.get(VersionState.SUBMITTED.value, 0),
            approved_versions=by_state.get(VersionState.APPROVED.value, 0),
            published_versions=by_state.get(VersionState.PUBLISHED.value, 0),
            archived_versions=by_state.get(VersionState.ARCHIVED.value, 0),
            last_published_at=last_published.scalar(),
        )

    async def get_version(self, version_id: str) -> VersionResponse:
        """Get a version with its course count.

        Raises:
            VersionNotFoundError: If the version is not visible.
        """
        version = await self._get_by_id(version_id)
        counts = await self._course_counts([version.id])
        return self._to_response(version, counts.get(version.id, 0))

    async def update_version(
        self,
        version_id: str,
        request: VersionUpdateRequest,
        user_id: str,
    ) -> VersionResponse:
        """Update changelog or metadata of a draft version.

        Raises:
            VersionFrozenError: If the version is not a draft.
        """
        updates = collect_updates(request)
        version = await self._get_by_id(version_id)
        ensure_editable(version)

        if "changelog" in updates:
            version.changelog = updates["changelog"]
        if "metadata" in updates:
            version.extra_metadata = updates["metadata"]
        version.updated_by = user_id

        await self.db.commit()
        await self.db.refresh(version)

        logger.info("Updated version: %s", version.id)

        return await self.get_version(version.id)

    async def submit(
        self,
        version_id: str,
        request: SubmitRequest,
        user_id: str,
    ) -> VersionResponse:
        """Submit a draft for review and open an approval request."""
        version = await self._get_by_id(version_id)
        apply_transition(version, VersionAction.SUBMIT)

        now = utc_now()
        version.submitted_at = now
        version.submitted_by = user_id
        version.updated_by = user_id

        self.db.add(
            Approval(
                tenant_id=self.tenant_id,
                version_id=version.id,
                requested_by=user_id,
                status="requested",
                comments=request.comments,
            )
        )

        await self.db.commit()
        await self.db.refresh(version)

        logger.info("Submitted version: %s", version.id)

        return await self.get_version(version.id)

    async def approve(
        self,
        version_id: str,
        request: ApproveRequest,
        user_id: str,
    ) -> VersionResponse:
        """Approve a submitted version, or reject it back to draft."""
        version = await self._get_by_id(version_id)
        approved = request.decision == "approve"
        apply_transition(version, VersionAction.APPROVE if approved else VersionAction.REJECT)

        now = utc_now()
        version.approval_comments = request.comments
        version.updated_by = user_id
        if approved:
            version.approved_at = now
            version.approved_by = user_id

        await self.close_open_approvals(
            version.id,
            status="approved" if approved else "rejected",
            reviewer_id=user_id,
            comments=request.comments,
        )

        await self.db.commit()
        await self.db.refresh(version)

        logger.info("Version %s: %s", "approved" if approved else "rejected", version.id)

        return await self.get_version(version.id)

    async def publish(
        self,
        version_id: str,
        request: PublishRequest,
        user_id: str,
    ) -> VersionResponse:
        """Publish an approved version.

        A previously published version of the same framework is archived so
        that at most one version is published at a time.
        """
        version = await self._get_by_id(version_id)
        apply_transition(version, VersionAction.PUBLISH)

        now = utc_now()
        version.published_at = now
        version.published_by = user_id
        version.rollout_notes = request.rollout_notes
        version.updated_by = user_id

        result = await self.db.execute(
            select(FrameworkVersion).where(
                FrameworkVersion.framework_id == version.framework_id,
                FrameworkVersion.tenant_id == self.tenant_id,
                FrameworkVersion.state == VersionState.PUBLISHED.value,
                FrameworkVersion.id != version.id,
            )
        )
        for previous in result.scalars().all():
            apply_transition(previous, VersionAction.ARCHIVE)
            previous.archived_at = now
            previous.updated_by = user_id
            logger.info("Archived previously published version: %s", previous.id)

        framework = await self._get_framework(version.framework_id)
        framework.status = "published"
        framework.updated_by = user_id

        await self.db.commit()
        await self.db.refresh(version)

        logger.info("Published version: %s", version.id)

        return await self.get_version(version.id)

    async def archive(self, version_id: str, user_id: str) -> VersionResponse:
        """Archive a version. Versions are never deleted.

        Archiving the published version leaves the framework with no live
        version, so its status falls back to approved.
        """
        version = await self._get_by_id(version_id)
        was_published = version.state == VersionState.PUBLISHED.value
        apply_transition(version, VersionAction.ARCHIVE)

        version.archived_at = utc_now()
        version.updated_by = user_id

        if was_published:
            framework = await self._get_framework(version.framework_id)
            if framework.status == "published":
                framework.status = "approved"
                framework.updated_by = user_id

        await self.db.commit()
        await self.db.refresh(version)

        logger.info("Archived version: %s", version.id)

        return await self.get_version(version.id)

    async def compare(self, base_id: str, compare_id: str) -> VersionCompareResponse:
        """Diff the course and unit structure of two versions.

        Raises:
            VersionNotFoundError: If either version is not visible.
            VersionMismatchError: If they belong to different frameworks.
        """
        base = await self._get_by_id(base_id)
        other = await self._get_by_id(compare_id)

        if base.framework_id != other.framework_id:
            raise VersionMismatchError(
                "Versions must belong to the same framework",
                details={"base_framework_id": base.framework_id, "compare_framework_id": other.framework_id},
            )

        diff = diff_versions(await self._snapshot(base.id), await self._snapshot(other.id))

        return VersionCompareResponse(
            base=VersionRef.model_validate(base),
            compare=VersionRef.model_validate(other),
            summary=diff["summary"],
            courses=diff["courses"],
        )

    async def close_open_approvals(
        self,
        version_id: str,
        status: str,
        reviewer_id: str,
        comments: str | None = None,
        exclude_id: str | None = None,
    ) -> int:
        """Decide every open approval of a version.

        Returns:
            Number of approvals closed.
        """
        query = select(Approval).where(
            Approval.version_id == version_id,
            Approval.tenant_id == self.tenant_id,
            Approval.status.in_(OPEN_APPROVAL_STATUSES),
        )
        if exclude_id:
            query = query.where(Approval.id != exclude_id)

        result = await self.db.execute(query)
        approvals = list(result.scalars().all())

        now = utc_now()
        for approval in approvals:
            approval.status = status
            approval.decided_at = now
            approval.reviewer_id = approval.reviewer_id or reviewer_id
            if comments:
                approval.comments = comments

        return len(approvals)

    async def _get_by_id(self, version_id: str) -> FrameworkVersion:
        version = await get_live_version(self.db, self.tenant_id, version_id)
        if not version:
            raise VersionNotFoundError(f"Version not found: {version_id}")
        return version

    async def _get_framework(self, framework_id: str) -> CurriculumFramework:
        framework = await get_live_framework(self.db, self.tenant_id, framework_id)
        if not framework:
            raise VersionNotFoundError(f"Framework not found: {framework_id}")
        return framework

    def _versions_query(self, framework_id: str):
        return select(FrameworkVersion).where(
            FrameworkVersion.framework_id == framework_id,
            FrameworkVersion.tenant_id == self.tenant_id,
            FrameworkVersion.deleted_at.is_(None),
        )

    async def _course_counts(self, version_ids: list[str]) -> dict[str, int]:
        if not version_ids:
            return {}
        result = await self.db.execute(
            select(Course.version_id, func.count())
            .where(
                Course.version_id.in_(version_ids),
                Course.deleted_at.is_(None),
            )
            .group_by(Course.version_id)
        )
        return {version_id: count for version_id, count in result.all()}

    async def _user_names(self, user_ids: set[str]) -> dict[str, str]:
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(User.id, User.full_name).where(User.id.in_(user_ids))
        )
        return {user_id: name for user_id, name in result.all()}

    async def _snapshot(self, version_id: str) -> list[dict[str, Any]]:
        """Load live courses and units of a version as plain dicts."""
        courses_result = await self.db.execute(
            select(Course)
            .where(Course.version_id == version_id, Course.deleted_at.is_(None))
            .order_by(Course.order_index)
        )
        courses = list(courses_result.scalars().all())

        units_by_course: dict[str, list[dict[str, Any]]] = {c.id: [] for c in courses}
        if courses:
            units_result = await self.db.execute(
                select(Unit)
                .where(Unit.course_id.in_(list(units_by_course)), Unit.deleted_at.is_(None))
                .order_by(Unit.order_index)
            )
            for unit in units_result.scalars().all():
                units_by_course[unit.course_id].append(
                    {"id": unit.id, "title": unit.title}
                    | {name: getattr(unit, name) for name in UNIT_FIELDS}
                )

        return [
            {"id": course.id, "code": course.code}
            | {name: getattr(course, name) for name in COURSE_FIELDS}
            | {"units": units_by_course[course.id]}
            for course in courses
        ]

    def _to_response(self, version: FrameworkVersion, courses_count: int) -> VersionResponse:
        response = VersionResponse.model_validate(version)
        response.courses_count = courses_count
        return response
