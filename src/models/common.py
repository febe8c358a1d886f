# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared API models: pagination envelope, ordering payloads, messages."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class ORMModel(BaseModel):
    """Base for responses built from ORM rows."""

    model_config = ConfigDict(from_attributes=True)


class PaginatedResponse(BaseModel, Generic[T]):
    """Offset pagination envelope used by list endpoints."""

    data: list[T]
    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, data: list[T], page: int, page_size: int, total: int) -> "PaginatedResponse[T]":
        """Build an envelope, deriving total_pages."""
        return cls(
            data=data,
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size) if page_size else 0,
        )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class OrderItem(BaseModel):
    """Target position of one item in a reorder request."""

    id: str
    order_index: int = Field(ge=0)


class ReorderResponse(BaseModel):
    """Result of an atomic reorder."""

    message: str
    updated: int
