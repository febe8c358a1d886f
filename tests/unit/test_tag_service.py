# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Tag service attach rules."""

from unittest.mock import MagicMock

import pytest

from src.domains.common.attachments import EntityNotFoundError, EntityRef
from src.domains.tag.service import (
    DuplicateTagError,
    TagAlreadyAttachedError,
    TagEntityMismatchError,
    TagNotAttachedError,
    TagNotFoundError,
    TagService,
)
from src.models.tag import TagCreateRequest


def create_mock_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def tag_service(mock_db, sample_tenant_id):
    return TagService(db=mock_db, tenant_id=sample_tenant_id)


@pytest.fixture
def sample_tag():
    tag = MagicMock()
    tag.id = "tag-1"
    tag.name = "exam-prep"
    tag.entity_type = None
    return tag


@pytest.fixture
def unit_ref():
    return EntityRef.parse("unit", "unit-1")


class TestTagServiceCreate:
    @pytest.mark.asyncio
    async def test_duplicate_name(self, tag_service, mock_db):
        mock_db.execute.return_value = create_mock_result("tag-1")

        with pytest.raises(DuplicateTagError) as exc_info:
            await tag_service.create_tag(TagCreateRequest(name="exam-prep"), "user-1")

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "DUPLICATE_TAG"
        mock_db.add.assert_not_called()


class TestTagServiceAttach:
    @pytest.mark.asyncio
    async def test_attach(self, tag_service, mock_db, sample_tag, unit_ref):
        mock_db.execute.side_effect = [
            create_mock_result(sample_tag),
            create_mock_result(MagicMock()),
            create_mock_result(None),
        ]

        response = await tag_service.attach("tag-1", unit_ref, "user-1")

        assert response.message == "Tag attached successfully"
        link = mock_db.add.call_args[0][0]
        assert link.tag_id == "tag-1"
        assert link.entity_type == "unit"
        assert link.entity_id == "unit-1"
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_tag(self, tag_service, mock_db, unit_ref):
        mock_db.execute.return_value = create_mock_result(None)

        with pytest.raises(TagNotFoundError):
            await tag_service.attach("missing", unit_ref, "user-1")

    @pytest.mark.asyncio
    async def test_restricted_tag_checked_before_entity(self, tag_service, mock_db, sample_tag, unit_ref):
        sample_tag.entity_type = "framework"
        mock_db.execute.return_value = create_mock_result(sample_tag)

        with pytest.raises(TagEntityMismatchError) as exc_info:
            await tag_service.attach("tag-1", unit_ref, "user-1")

        assert exc_info.value.status_code == 400
        assert mock_db.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_missing_entity(self, tag_service, mock_db, sample_tag, unit_ref):
        mock_db.execute.side_effect = [
            create_mock_result(sample_tag),
            create_mock_result(None),
        ]

        with pytest.raises(EntityNotFoundError):
            await tag_service.attach("tag-1", unit_ref, "user-1")

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_already_attached(self, tag_service, mock_db, sample_tag, unit_ref):
        mock_db.execute.side_effect = [
            create_mock_result(sample_tag),
            create_mock_result(MagicMock()),
            create_mock_result(MagicMock()),
        ]

        with pytest.raises(TagAlreadyAttachedError):
            await tag_service.attach("tag-1", unit_ref, "user-1")

        mock_db.commit.assert_not_awaited()


class TestTagServiceDetach:
    @pytest.mark.asyncio
    async def test_detach(self, tag_service, mock_db, sample_tag, unit_ref):
        link = MagicMock()
        mock_db.execute.side_effect = [
            create_mock_result(sample_tag),
            create_mock_result(link),
        ]

        response = await tag_service.detach("tag-1", unit_ref, "user-1")

        assert response.message == "Tag detached successfully"
        mock_db.delete.assert_awaited_once_with(link)

    @pytest.mark.asyncio
    async def test_not_attached(self, tag_service, mock_db, sample_tag, unit_ref):
        mock_db.execute.side_effect = [
            create_mock_result(sample_tag),
            create_mock_result(None),
        ]

        with pytest.raises(TagNotAttachedError) as exc_info:
            await tag_service.detach("tag-1", unit_ref, "user-1")

        assert exc_info.value.code == "NOT_ATTACHED"
        mock_db.delete.assert_not_awaited()
