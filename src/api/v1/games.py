# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Game catalog API endpoints.

- GET / - List games (search and field filters, paginated; accepts pageSize)
- POST / - Create a game (teacher, curriculum_designer, program_owner or admin)
- GET /{game_id} - Get a game
- PATCH /{game_id} - Update a game
- DELETE /{game_id} - Soft delete a game (owner, program_owner or admin)

Example:
    GET /api/v1/games?page=1&pageSize=10&skill=Grammar
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import (
    AuthenticatedUser,
    CatalogPageParams,
    CatalogWriter,
    DBSession,
    Tenant,
)
from src.domains.catalog import GameService
from src.models.catalog import (
    CatalogFilters,
    GameCreateRequest,
    GameResponse,
    GameUpdateRequest,
)
from src.models.common import PaginatedResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_game_service(db: DBSession, tenant: Tenant) -> GameService:
    return GameService(db, tenant.tenant_id)


GameSvc = Annotated[GameService, Depends(_get_game_service)]


@router.get(
    "",
    response_model=PaginatedResponse[GameResponse],
    summary="List games",
)
async def list_games(
    current_user: AuthenticatedUser,
    service: GameSvc,
    pagination: CatalogPageParams,
    search: str | None = Query(default=None),
    level: str | None = Query(default=None),
    skill: str | None = Query(default=None),
    type: str | None = Query(default=None),
    difficulty: str | None = Query(default=None),
    visibility: str | None = Query(default=None),
    game_type: str | None = Query(default=None),
) -> PaginatedResponse[GameResponse]:
    filters = CatalogFilters(
        search=search,
        level=level,
        skill=skill,
        type=type,
        difficulty=difficulty,
        visibility=visibility,
        kind=game_type,
    )
    return await service.list_items(
        filters, current_user.id, pagination.page, pagination.page_size
    )


@router.post(
    "",
    response_model=GameResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create game",
)
async def create_game(
    data: GameCreateRequest,
    current_user: CatalogWriter,
    service: GameSvc,
) -> GameResponse:
    return await service.create_item(data, current_user.id)


@router.get(
    "/{game_id}",
    response_model=GameResponse,
    summary="Get game",
)
async def get_game(
    game_id: str,
    current_user: AuthenticatedUser,
    service: GameSvc,
) -> GameResponse:
    return await service.get_item(game_id, current_user.id)


@router.patch(
    "/{game_id}",
    response_model=GameResponse,
    summary="Update game",
)
async def update_game(
    game_id: str,
    data: GameUpdateRequest,
    current_user: CatalogWriter,
    service: GameSvc,
) -> GameResponse:
    return await service.update_item(game_id, data, current_user.id)


@router.delete(
    "/{game_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete game",
)
async def delete_game(
    game_id: str,
    current_user: CatalogWriter,
    service: GameSvc,
) -> Response:
    await service.delete_item(game_id, current_user.id, current_user.role)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
