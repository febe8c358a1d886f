# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit blueprint request and response models."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from src.models.common import ORMModel, OrderItem

DifficultyLevel = Literal["beginner", "intermediate", "advanced"]


class UnitCreateRequest(BaseModel):
    """Payload for creating a unit within a course."""

    title: str = Field(min_length=1, max_length=255)
    objectives: list[str] = []
    skills: list[str] = []
    activities: list[Any] = []
    rubric: Any | None = None
    homework: str | None = None
    hours: float = Field(default=0, ge=0)
    difficulty_level: DifficultyLevel = "intermediate"
    estimated_time: int | None = Field(default=None, ge=0)
    notes: str | None = None


class UnitUpdateRequest(BaseModel):
    """Partial update of a unit."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    objectives: list[str] | None = None
    skills: list[str] | None = None
    activities: list[Any] | None = None
    rubric: Any | None = None
    homework: str | None = None
    hours: float | None = Field(default=None, ge=0)
    difficulty_level: DifficultyLevel | None = None
    estimated_time: int | None = Field(default=None, ge=0)
    notes: str | None = None


class UnitResponse(ORMModel):
    """Unit as returned by the API."""

    id: str
    tenant_id: str
    course_id: str
    title: str
    objectives: list[Any] = []
    skills: list[Any] = []
    activities: list[Any] = []
    rubric: Any | None = None
    homework: str | None = None
    hours: float
    order_index: int
    difficulty_level: str
    estimated_time: int | None = None
    completeness_score: int
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class UnitListResponse(BaseModel):
    units: list[UnitResponse]


class UnitReorderRequest(BaseModel):
    """New positions for every live unit of one course."""

    course_id: str | None = None
    orders: list[OrderItem] = Field(min_length=1)


class BulkUpdateItem(BaseModel):
    id: str
    data: UnitUpdateRequest


class BulkUpdateRequest(BaseModel):
    """Several unit updates applied in one transaction."""

    updates: list[BulkUpdateItem] = Field(min_length=1)


class BulkUpdateResponse(BaseModel):
    updated: int
    units: list[UnitResponse]


class DuplicateRequest(BaseModel):
    """Target course for a copy; defaults to the source course."""

    target_course_id: str | None = None


class SplitRequest(BaseModel):
    """Split a unit's activities after the given position."""

    split_after_order_index: int
    new_unit_title: str = Field(min_length=1, max_length=255)


class SplitResponse(BaseModel):
    original: UnitResponse
    new_unit: UnitResponse


class FromTemplateRequest(BaseModel):
    """Instantiate a built-in template, overriding fields via customizations."""

    template_id: str
    customizations: dict[str, Any] = {}


class UnitTemplate(BaseModel):
    """Built-in unit template."""

    id: str
    name: str
    description: str
    level: DifficultyLevel
    skills: list[str]
    duration_minutes: int
    objectives: list[str]
    activities: list[dict[str, Any]]
    rubric: dict[str, Any] | None = None


class TemplateListResponse(BaseModel):
    templates: list[UnitTemplate]


class CompletenessBreakdown(BaseModel):
    objectives: int
    skills: int
    activities: int
    rubric: int
    resources: int


class CompletenessResponse(BaseModel):
    unit_id: str
    score: int
    max_score: int = 100
    breakdown: CompletenessBreakdown
    missing: list[str]


class LearningOutcomesResponse(BaseModel):
    unit_id: str
    objectives: list[Any]
    skills: list[Any]
    course_outcomes: list[Any]


class UnitValidationResponse(BaseModel):
    unit_id: str
    valid: bool
    errors: list[str]
    warnings: list[str]


class Suggestions(BaseModel):
    objectives: list[str] = []
    activities: list[str] = []
    assessment: list[str] = []


class SuggestionsResponse(BaseModel):
    unit_id: str
    suggestions: Suggestions
    source: str
