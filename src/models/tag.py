# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tag request and response models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from src.models.common import ORMModel

TaggableType = Literal["framework", "course", "unit", "resource"]

DEFAULT_TAG_COLOR = "#3B82F6"


class TagCreateRequest(BaseModel):
    """Payload for creating a tag."""

    name: str = Field(min_length=1, max_length=50, pattern=r"^[A-Za-z0-9_\- ]+$")
    description: str | None = Field(default=None, max_length=200)
    entity_type: TaggableType | None = None
    color: str = Field(default=DEFAULT_TAG_COLOR, pattern=r"^#[0-9A-Fa-f]{6}$")


class TagTargetRequest(BaseModel):
    """Entity a tag is attached to or detached from."""

    entity_type: TaggableType
    entity_id: str = Field(min_length=1, max_length=36)


class TagResponse(ORMModel):
    id: str
    tenant_id: str
    name: str
    description: str | None = None
    entity_type: str | None = None
    color: str
    usage_count: int = 0
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class EntityTagsResponse(BaseModel):
    tags: list[TagResponse]
