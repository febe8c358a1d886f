# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course blueprint request and response models."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.models.common import ORMModel, OrderItem


class CourseCreateRequest(BaseModel):
    """Payload for creating a course within a version."""

    code: str | None = Field(default=None, max_length=64)
    title: str = Field(min_length=1, max_length=255)
    level: str | None = Field(default=None, max_length=50)
    hours: float = Field(default=0, ge=0)
    summary: str | None = None
    learning_outcomes: list[str] = []
    assessment_types: list[str] = []


class CourseUpdateRequest(BaseModel):
    """Partial update; ordering changes go through reorder."""

    code: str | None = Field(default=None, max_length=64)
    title: str | None = Field(default=None, min_length=1, max_length=255)
    level: str | None = Field(default=None, max_length=50)
    hours: float | None = Field(default=None, ge=0)
    summary: str | None = None
    learning_outcomes: list[str] | None = None
    assessment_types: list[str] | None = None


class CourseResponse(ORMModel):
    """Course as returned by the API."""

    id: str
    tenant_id: str
    version_id: str
    code: str | None = None
    title: str
    level: str | None = None
    hours: float
    order_index: int
    summary: str | None = None
    learning_outcomes: list[str] = []
    assessment_types: list[str] = []
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
    units_count: int | None = None


class CourseListResponse(BaseModel):
    courses: list[CourseResponse]


class CourseReorderRequest(BaseModel):
    """New positions for every live course of one version."""

    version_id: str | None = None
    orders: list[OrderItem] = Field(min_length=1)
