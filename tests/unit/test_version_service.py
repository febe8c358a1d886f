# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Version service workflow actions."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.domains.version.service import (
    InvalidTransitionError,
    VersionFrozenError,
    VersionMismatchError,
    VersionNotFoundError,
    VersionService,
    apply_transition,
    ensure_editable,
)
from src.domains.version.workflow import VersionAction, VersionState
from src.models.version import ApproveRequest, PublishRequest, SubmitRequest, VersionUpdateRequest


def create_mock_result(value=None, scalars=None):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalars.return_value.all.return_value = scalars or []
    return result


def make_version(state: str, **kwargs) -> SimpleNamespace:
    defaults = {
        "id": "ver-1",
        "framework_id": "fw-1",
        "version_no": "v1.0",
        "state": state,
    }
    return SimpleNamespace(**(defaults | kwargs))


@pytest.fixture
def version_service(mock_db, sample_tenant_id):
    service = VersionService(db=mock_db, tenant_id=sample_tenant_id)
    service.get_version = AsyncMock(return_value="response")
    return service


class TestEnsureEditable:
    def test_draft_is_editable(self) -> None:
        ensure_editable(make_version("draft"))

    @pytest.mark.parametrize("state", ["submitted", "approved", "published", "archived"])
    def test_frozen_states(self, state: str) -> None:
        with pytest.raises(VersionFrozenError) as exc_info:
            ensure_editable(make_version(state))

        assert exc_info.value.status_code == 409
        assert exc_info.value.details["state"] == state


class TestApplyTransition:
    def test_moves_state(self) -> None:
        version = make_version("draft")

        new_state = apply_transition(version, VersionAction.SUBMIT)

        assert new_state is VersionState.SUBMITTED
        assert version.state == "submitted"

    def test_refused_transition_keeps_state(self) -> None:
        version = make_version("draft")

        with pytest.raises(InvalidTransitionError) as exc_info:
            apply_transition(version, VersionAction.PUBLISH)

        assert version.state == "draft"
        assert exc_info.value.code == "INVALID_TRANSITION"
        assert exc_info.value.details["allowed_actions"] == ["submit", "archive"]


class TestVersionServiceActions:
    @pytest.mark.asyncio
    async def test_missing_version(self, version_service, mock_db, sample_user_id):
        mock_db.execute.return_value = create_mock_result(None)

        with pytest.raises(VersionNotFoundError):
            await version_service.submit("missing", SubmitRequest(), sample_user_id)

    @pytest.mark.asyncio
    async def test_submit_opens_approval(self, version_service, mock_db, sample_user_id):
        version = make_version("draft")
        mock_db.execute.return_value = create_mock_result(version)

        result = await version_service.submit(
            "ver-1", SubmitRequest(comments="Ready"), sample_user_id
        )

        assert result == "response"
        assert version.state == "submitted"
        assert version.submitted_by == sample_user_id
        approval = mock_db.add.call_args.args[0]
        assert approval.status == "requested"
        assert approval.requested_by == sample_user_id
        assert approval.comments == "Ready"
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_submit_twice_refused(self, version_service, mock_db, sample_user_id):
        mock_db.execute.return_value = create_mock_result(make_version("submitted"))

        with pytest.raises(InvalidTransitionError):
            await version_service.submit("ver-1", SubmitRequest(), sample_user_id)

        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reject_returns_to_draft(self, version_service, mock_db, sample_user_id):
        version = make_version("submitted")
        approval = SimpleNamespace(status="requested", reviewer_id=None, comments=None)
        mock_db.execute.side_effect = [
            create_mock_result(version),
            create_mock_result(scalars=[approval]),
        ]

        await version_service.approve(
            "ver-1",
            ApproveRequest(decision="reject", comments="Needs work"),
            sample_user_id,
        )

        assert version.state == "draft"
        assert version.approval_comments == "Needs work"
        assert not hasattr(version, "approved_by")
        assert approval.status == "rejected"
        assert approval.reviewer_id == sample_user_id
        assert approval.comments == "Needs work"

    @pytest.mark.asyncio
    async def test_approve(self, version_service, mock_db, sample_user_id):
        version = make_version("submitted")
        mock_db.execute.side_effect = [
            create_mock_result(version),
            create_mock_result(scalars=[]),
        ]

        await version_service.approve("ver-1", ApproveRequest(), sample_user_id)

        assert version.state == "approved"
        assert version.approved_by == sample_user_id
        assert version.approved_at is not None

    @pytest.mark.asyncio
    async def test_publish_requires_approval(self, version_service, mock_db, sample_user_id):
        mock_db.execute.return_value = create_mock_result(make_version("draft"))

        with pytest.raises(InvalidTransitionError):
            await version_service.publish("ver-1", PublishRequest(), sample_user_id)

    @pytest.mark.asyncio
    async def test_publish_archives_previous(self, version_service, mock_db, sample_user_id):
        version = make_version("approved")
        previous = make_version("published", id="ver-0")
        framework = SimpleNamespace(id="fw-1", status="draft")
        mock_db.execute.side_effect = [
            create_mock_result(version),
            create_mock_result(scalars=[previous]),
            create_mock_result(framework),
        ]

        await version_service.publish(
            "ver-1", PublishRequest(rollout_notes="Term 2"), sample_user_id
        )

        assert version.state == "published"
        assert version.rollout_notes == "Term 2"
        assert previous.state == "archived"
        assert previous.archived_at is not None
        assert framework.status == "published"

    @pytest.mark.asyncio
    async def test_archive_published_resets_framework_status(
        self, version_service, mock_db, sample_user_id
    ):
        version = make_version("published")
        framework = SimpleNamespace(id="fw-1", status="published")
        mock_db.execute.side_effect = [create_mock_result(version), create_mock_result(framework)]

        await version_service.archive("ver-1", sample_user_id)

        assert version.state == "archived"
        assert framework.status == "approved"
        assert framework.updated_by == sample_user_id

    @pytest.mark.asyncio
    async def test_archive_draft_keeps_framework_status(
        self, version_service, mock_db, sample_user_id
    ):
        mock_db.execute.return_value = create_mock_result(make_version("draft"))

        await version_service.archive("ver-1", sample_user_id)

        assert mock_db.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_archive_archived_refused(self, version_service, mock_db, sample_user_id):
        mock_db.execute.return_value = create_mock_result(make_version("archived"))

        with pytest.raises(InvalidTransitionError):
            await version_service.archive("ver-1", sample_user_id)

    @pytest.mark.asyncio
    async def test_update_frozen_version(self, version_service, mock_db, sample_user_id):
        mock_db.execute.return_value = create_mock_result(make_version("published"))

        with pytest.raises(VersionFrozenError):
            await version_service.update_version(
                "ver-1", VersionUpdateRequest(changelog="late edit"), sample_user_id
            )

        mock_db.commit.assert_not_awaited()


class TestVersionServiceCompare:
    @pytest.mark.asyncio
    async def test_versions_of_different_frameworks(self, version_service, mock_db):
        mock_db.execute.side_effect = [
            create_mock_result(make_version("draft", id="a", framework_id="fw-1")),
            create_mock_result(make_version("draft", id="b", framework_id="fw-2")),
        ]

        with pytest.raises(VersionMismatchError) as exc_info:
            await version_service.compare("a", "b")

        assert exc_info.value.status_code == 400
