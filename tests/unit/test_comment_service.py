# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Comment service permissions and threading."""

from unittest.mock import MagicMock

import pytest

from src.domains.comment.service import (
    CommentNotFoundError,
    CommentPermissionError,
    CommentService,
)
from src.domains.common.attachments import EntityRef
from src.models.comment import CommentUpdateRequest


def create_mock_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def comment_service(mock_db, sample_tenant_id):
    return CommentService(db=mock_db, tenant_id=sample_tenant_id)


@pytest.fixture
def sample_comment():
    comment = MagicMock()
    comment.id = "c-1"
    comment.entity_type = "unit"
    comment.entity_id = "unit-1"
    comment.author_id = "author-1"
    comment.is_resolved = False
    return comment


def stub_lookups(mock_db, comment, entity=None):
    """Comment row first, then the live entity it is attached to."""
    mock_db.execute.side_effect = [
        create_mock_result(comment),
        create_mock_result(entity if entity is not None else MagicMock()),
    ]


class TestCommentServiceDelete:
    @pytest.mark.asyncio
    async def test_author_can_delete(self, comment_service, mock_db, sample_comment):
        stub_lookups(mock_db, sample_comment)

        await comment_service.delete_comment("c-1", "author-1", "curriculum_designer")

        sample_comment.soft_delete.assert_called_once()
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_admin_can_delete(self, comment_service, mock_db, sample_comment):
        stub_lookups(mock_db, sample_comment)

        await comment_service.delete_comment("c-1", "someone-else", "admin")

        sample_comment.soft_delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(self, comment_service, mock_db, sample_comment):
        stub_lookups(mock_db, sample_comment)

        with pytest.raises(CommentPermissionError) as exc_info:
            await comment_service.delete_comment("c-1", "someone-else", "program_owner")

        assert exc_info.value.status_code == 403
        sample_comment.soft_delete.assert_not_called()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_comment(self, comment_service, mock_db):
        mock_db.execute.return_value = create_mock_result(None)

        with pytest.raises(CommentNotFoundError):
            await comment_service.delete_comment("missing", "author-1", "admin")

    @pytest.mark.asyncio
    async def test_comment_on_deleted_entity_is_hidden(
        self, comment_service, mock_db, sample_comment
    ):
        mock_db.execute.side_effect = [
            create_mock_result(sample_comment),
            create_mock_result(None),
        ]

        with pytest.raises(CommentNotFoundError):
            await comment_service.delete_comment("c-1", "author-1", "admin")


class TestCommentServiceUpdate:
    @pytest.mark.asyncio
    async def test_only_author_edits_body(self, comment_service, mock_db, sample_comment):
        stub_lookups(mock_db, sample_comment)

        with pytest.raises(CommentPermissionError):
            await comment_service.update_comment(
                "c-1", CommentUpdateRequest(body="rewritten"), "someone-else"
            )

        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_anyone_can_resolve(self, comment_service, mock_db, sample_comment):
        stub_lookups(mock_db, sample_comment)
        async def to_response(comment):
            return comment

        comment_service._to_response = to_response

        result = await comment_service.update_comment(
            "c-1", CommentUpdateRequest(is_resolved=True), "reviewer-1"
        )

        assert result.is_resolved is True
        assert result.resolved_by == "reviewer-1"
        assert result.resolved_at is not None


class TestCommentServiceReplies:
    @pytest.mark.asyncio
    async def test_walks_reply_levels(self, comment_service, mock_db):
        def level(*ids):
            result = MagicMock()
            result.scalars.return_value.all.return_value = [MagicMock(id=i) for i in ids]
            return result

        mock_db.execute.side_effect = [level("r-1", "r-2"), level("r-3"), level()]
        ref = EntityRef.parse("unit", "unit-1")

        replies = await comment_service._replies_to(ref, ["c-1"])

        assert [r.id for r in replies] == ["r-1", "r-2", "r-3"]
        assert mock_db.execute.await_count == 3

    @pytest.mark.asyncio
    async def test_no_threads_no_query(self, comment_service, mock_db):
        ref = EntityRef.parse("unit", "unit-1")

        assert await comment_service._replies_to(ref, []) == []
        mock_db.execute.assert_not_awaited()
