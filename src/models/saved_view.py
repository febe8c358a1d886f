# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Saved view request and response models."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from src.models.common import ORMModel

ViewEntityType = Literal[
    "curriculum_overview",
    "course_management",
    "unit_management",
    "resource_library",
    "reports",
]


class SavedViewCreateRequest(BaseModel):
    """Payload for saving a set of list filters."""

    name: str = Field(min_length=1, max_length=100)
    entity_type: ViewEntityType
    filters: dict[str, Any]
    description: str | None = Field(default=None, max_length=500)
    is_public: bool = False


class SavedViewUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    filters: dict[str, Any] | None = None
    description: str | None = Field(default=None, max_length=500)
    is_public: bool | None = None


class SavedViewResponse(ORMModel):
    id: str
    tenant_id: str
    user_id: str
    name: str
    entity_type: str
    filters: dict[str, Any]
    description: str | None = None
    is_public: bool
    usage_count: int
    last_used_at: datetime | None = None
    creator_name: str | None = None
    created_at: datetime
    updated_at: datetime
