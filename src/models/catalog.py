# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Game and assignment catalog models."""

from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field

from src.models.common import ORMModel

Visibility = Literal["public", "tenant", "private"]


class CatalogFilters(BaseModel):
    """Common list filters of the games and assignments catalogs."""

    search: str | None = None
    level: str | None = None
    skill: str | None = None
    type: str | None = None
    difficulty: str | None = None
    visibility: str | None = None
    kind: str | None = None


class GameCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    type: str | None = Field(default=None, max_length=64)
    game_type: str | None = Field(default=None, max_length=32)
    level: str | None = Field(default=None, max_length=32)
    skill: str | None = Field(default=None, max_length=64)
    duration_minutes: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("duration_minutes", "durationMinutes"),
    )
    players: str | None = Field(default=None, max_length=64)
    description: str | None = None
    tags: list[str] = []
    difficulty: str | None = Field(default=None, max_length=16)
    visibility: Visibility = "public"
    api_integration: str | None = Field(
        default=None,
        max_length=64,
        validation_alias=AliasChoices("api_integration", "apiIntegration"),
    )


class GameUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    type: str | None = Field(default=None, max_length=64)
    game_type: str | None = Field(default=None, max_length=32)
    level: str | None = Field(default=None, max_length=32)
    skill: str | None = Field(default=None, max_length=64)
    duration_minutes: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("duration_minutes", "durationMinutes"),
    )
    players: str | None = Field(default=None, max_length=64)
    description: str | None = None
    tags: list[str] | None = None
    difficulty: str | None = Field(default=None, max_length=16)
    visibility: Visibility | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    api_integration: str | None = Field(
        default=None,
        max_length=64,
        validation_alias=AliasChoices("api_integration", "apiIntegration"),
    )


class GameResponse(ORMModel):
    id: str
    tenant_id: str
    title: str
    type: str | None = None
    game_type: str | None = None
    level: str | None = None
    skill: str | None = None
    duration_minutes: int
    players: str | None = None
    description: str | None = None
    tags: list[Any] = []
    difficulty: str | None = None
    visibility: str
    plays_count: int
    rating: float | None = None
    api_integration: str | None = None
    owner_user_id: str | None = None
    created_at: datetime
    updated_at: datetime


class AssignmentCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    type: str | None = Field(default=None, max_length=64)
    content_type: str | None = Field(default=None, max_length=32)
    level: str | None = Field(default=None, max_length=32)
    skill: str | None = Field(default=None, max_length=64)
    duration_minutes: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("duration_minutes", "durationMinutes"),
    )
    description: str | None = None
    tags: list[str] = []
    difficulty: str | None = Field(default=None, max_length=16)
    visibility: Visibility = "tenant"
    objectives: Any | None = None
    rubric: Any | None = None
    content: Any | None = None
    language: str | None = Field(default=None, max_length=32)


class AssignmentUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    type: str | None = Field(default=None, max_length=64)
    content_type: str | None = Field(default=None, max_length=32)
    level: str | None = Field(default=None, max_length=32)
    skill: str | None = Field(default=None, max_length=64)
    duration_minutes: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("duration_minutes", "durationMinutes"),
    )
    description: str | None = None
    tags: list[str] | None = None
    difficulty: str | None = Field(default=None, max_length=16)
    visibility: Visibility | None = None
    objectives: Any | None = None
    rubric: Any | None = None
    content: Any | None = None
    language: str | None = Field(default=None, max_length=32)


class AssignmentResponse(ORMModel):
    id: str
    tenant_id: str
    title: str
    type: str | None = None
    content_type: str | None = None
    level: str | None = None
    skill: str | None = None
    duration_minutes: int
    description: str | None = None
    tags: list[Any] = []
    difficulty: str | None = None
    visibility: str
    objectives: Any | None = None
    rubric: Any | None = None
    content: Any | None = None
    language: str | None = None
    owner_user_id: str | None = None
    created_at: datetime
    updated_at: datetime
