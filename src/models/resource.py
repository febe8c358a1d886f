# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Resource request and response models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from src.models.common import ORMModel

ResourceKind = Literal[
    "pdf", "slide", "video", "audio", "link", "doc", "image", "worksheet", "interactive"
]


class ResourceCreateRequest(BaseModel):
    """Payload for attaching a resource."""

    title: str = Field(min_length=1, max_length=255)
    kind: ResourceKind = "link"
    description: str | None = None
    url: str | None = Field(default=None, max_length=1024)
    file_path: str | None = Field(default=None, max_length=1024)
    mime_type: str | None = Field(default=None, max_length=100)
    license_type: str | None = Field(default=None, max_length=100)
    is_required: bool = False


class ResourceUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    kind: ResourceKind | None = None
    description: str | None = None
    url: str | None = Field(default=None, max_length=1024)
    file_path: str | None = Field(default=None, max_length=1024)
    mime_type: str | None = Field(default=None, max_length=100)
    license_type: str | None = Field(default=None, max_length=100)
    order_index: int | None = Field(default=None, ge=0)
    is_required: bool | None = None


class ResourceResponse(ORMModel):
    id: str
    tenant_id: str
    entity_type: str
    entity_id: str
    title: str
    kind: str
    description: str | None = None
    url: str | None = None
    file_path: str | None = None
    mime_type: str | None = None
    license_type: str | None = None
    order_index: int
    is_required: bool
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class ResourceListResponse(BaseModel):
    resources: list[ResourceResponse]
