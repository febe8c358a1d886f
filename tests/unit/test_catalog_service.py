# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the games and assignments catalog services."""

from unittest.mock import MagicMock

import pytest

from src.domains.catalog.service import (
    AssignmentService,
    CatalogItemNotFoundError,
    CatalogPermissionError,
    GameService,
)


def create_mock_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def game_service(mock_db, sample_tenant_id):
    return GameService(db=mock_db, tenant_id=sample_tenant_id)


@pytest.fixture
def sample_game():
    game = MagicMock()
    game.id = "game-1"
    game.owner_user_id = "owner-1"
    return game


class TestCatalogDelete:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["admin", "program_owner"])
    async def test_managers_can_delete(self, game_service, mock_db, sample_game, role):
        mock_db.execute.return_value = create_mock_result(sample_game)

        await game_service.delete_item("game-1", "someone-else", role)

        sample_game.soft_delete.assert_called_once()
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_owner_can_delete(self, game_service, mock_db, sample_game):
        mock_db.execute.return_value = create_mock_result(sample_game)

        await game_service.delete_item("game-1", "owner-1", "curriculum_designer")

        sample_game.soft_delete.assert_called_once()
        assert sample_game.updated_by == "owner-1"

    @pytest.mark.asyncio
    async def test_designer_cannot_delete_others(self, game_service, mock_db, sample_game):
        mock_db.execute.return_value = create_mock_result(sample_game)

        with pytest.raises(CatalogPermissionError) as exc_info:
            await game_service.delete_item("game-1", "someone-else", "curriculum_designer")

        assert exc_info.value.status_code == 403
        sample_game.soft_delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_item(self, mock_db, sample_tenant_id):
        service = AssignmentService(db=mock_db, tenant_id=sample_tenant_id)
        mock_db.execute.return_value = create_mock_result(None)

        with pytest.raises(CatalogItemNotFoundError) as exc_info:
            await service.get_item("missing", "user-1")

        assert exc_info.value.message == "Assignment not found: missing"


class TestCatalogBindings:
    def test_kind_columns(self) -> None:
        assert GameService.kind_column == "game_type"
        assert AssignmentService.kind_column == "content_type"
