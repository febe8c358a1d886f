# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Comment request and response models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.models.common import ORMModel


class CommentCreateRequest(BaseModel):
    body: str = Field(min_length=1, max_length=2000)
    parent_id: str | None = None
    mentions: list[str] = []
    attachments: list[Any] = []


class CommentUpdateRequest(BaseModel):
    body: str | None = Field(default=None, min_length=1, max_length=2000)
    is_resolved: bool | None = None


class CommentResponse(ORMModel):
    id: str
    tenant_id: str
    entity_type: str
    entity_id: str
    parent_id: str | None = None
    author_id: str
    author_name: str | None = None
    body: str
    mentions: list[Any] = []
    attachments: list[Any] = []
    is_resolved: bool
    resolved_by: str | None = None
    resolved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    replies: list["CommentResponse"] = []


class CommentThreadResponse(BaseModel):
    """Top-level comments with nested replies, paginated by thread."""

    comments: list[CommentResponse]
    page: int
    page_size: int
    total: int
    total_pages: int
