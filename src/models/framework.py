# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum framework (KCT) request and response models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, computed_field

from src.models.common import ORMModel

AgeGroup = Literal["kids", "teens", "adults", "all"]
FrameworkStatus = Literal["draft", "approved", "published", "archived"]

FRAMEWORK_CODE_PATTERN = r"^[A-Z0-9_-]+$"

LANGUAGE_NAMES = {
    "en": "English",
    "jp": "Japanese",
    "vi": "Vietnamese",
    "zh": "Chinese",
    "ko": "Korean",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
}


class FrameworkCreateRequest(BaseModel):
    """Payload for creating a framework."""

    code: str = Field(min_length=1, max_length=64, pattern=FRAMEWORK_CODE_PATTERN)
    name: str = Field(min_length=1, max_length=255)
    language: str = Field(default="en", min_length=2, max_length=10)
    target_level: str | None = Field(default=None, max_length=50)
    age_group: AgeGroup | None = None
    total_hours: int = Field(default=0, ge=0)
    total_sessions: int | None = Field(default=None, ge=0)
    session_duration_hours: float | None = Field(default=None, ge=0)
    learning_method: str | None = Field(default=None, max_length=255)
    learning_format: str | None = Field(default=None, max_length=255)
    description: str | None = None
    campus_id: str | None = None


class FrameworkUpdateRequest(BaseModel):
    """Partial update; only supplied fields change."""

    code: str | None = Field(default=None, min_length=1, max_length=64, pattern=FRAMEWORK_CODE_PATTERN)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    language: str | None = Field(default=None, min_length=2, max_length=10)
    target_level: str | None = Field(default=None, max_length=50)
    age_group: AgeGroup | None = None
    total_hours: int | None = Field(default=None, ge=0)
    total_sessions: int | None = Field(default=None, ge=0)
    session_duration_hours: float | None = Field(default=None, ge=0)
    learning_method: str | None = Field(default=None, max_length=255)
    learning_format: str | None = Field(default=None, max_length=255)
    description: str | None = None
    status: FrameworkStatus | None = None
    campus_id: str | None = None


class VersionSummary(ORMModel):
    """Compact reference to a version."""

    id: str
    version_no: str
    state: str


class FrameworkResponse(ORMModel):
    """Framework as returned by the API."""

    id: str
    tenant_id: str
    code: str
    name: str
    language: str
    target_level: str | None = None
    age_group: str | None = None
    total_hours: int
    total_sessions: int | None = None
    session_duration_hours: float | None = None
    learning_method: str | None = None
    learning_format: str | None = None
    description: str | None = None
    status: str
    owner_user_id: str | None = None
    campus_id: str | None = None
    latest_version_id: str | None = None
    latest_version: VersionSummary | None = None
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def display_language(self) -> str:
        """Human readable language name."""
        return LANGUAGE_NAMES.get(self.language, self.language)


class FrameworkFilters(BaseModel):
    """List filters for frameworks."""

    status: FrameworkStatus | None = None
    language: str | None = None
    age_group: AgeGroup | None = None
    target_level: str | None = None
    owner_user_id: str | None = None
    campus_id: str | None = None
    q: str | None = None
