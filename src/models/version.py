# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Framework version request and response models."""

from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field

from src.models.common import ORMModel

VERSION_NO_PATTERN = r"^v\d+\.\d+$"


class VersionCreateRequest(BaseModel):
    """Payload for creating a version under a framework."""

    version_no: str = Field(max_length=20, pattern=VERSION_NO_PATTERN)
    changelog: str | None = None
    metadata: dict[str, Any] | None = None


class VersionUpdateRequest(BaseModel):
    """Partial update of a draft version."""

    changelog: str | None = None
    metadata: dict[str, Any] | None = None


class SubmitRequest(BaseModel):
    """Submit a draft for review."""

    comments: str | None = Field(default=None, max_length=2000)


class ApproveRequest(BaseModel):
    """Decision on a submitted version."""

    decision: Literal["approve", "reject"] = "approve"
    comments: str | None = Field(default=None, max_length=2000)


class PublishRequest(BaseModel):
    """Publish an approved version."""

    rollout_notes: str | None = Field(default=None, max_length=2000)


class VersionResponse(ORMModel):
    """Version as returned by the API."""

    id: str
    tenant_id: str
    framework_id: str
    version_no: str
    state: str
    changelog: str | None = None
    metadata: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("extra_metadata", "metadata"),
    )
    submitted_at: datetime | None = None
    submitted_by: str | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None
    approval_comments: str | None = None
    published_at: datetime | None = None
    published_by: str | None = None
    rollout_notes: str | None = None
    archived_at: datetime | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
    courses_count: int | None = None


class VersionListResponse(BaseModel):
    """Versions of a framework, newest first."""

    versions: list[VersionResponse]


class VersionHistoryItem(VersionResponse):
    """Version with the display names of the users who acted on it."""

    created_by_name: str | None = None
    submitted_by_name: str | None = None
    approved_by_name: str | None = None
    published_by_name: str | None = None


class VersionStatsResponse(BaseModel):
    """Per-state version counts for one framework."""

    total_versions: int
    draft_versions: int
    submitted_versions: int
    approved_versions: int
    published_versions: int
    archived_versions: int
    last_published_at: datetime | None = None


class VersionRef(ORMModel):
    id: str
    version_no: str
    state: str


class UnitDiff(BaseModel):
    added: list[dict[str, Any]] = []
    removed: list[dict[str, Any]] = []
    changed: list[dict[str, Any]] = []


class CourseChange(BaseModel):
    code: str | None = None
    title: str
    fields: dict[str, dict[str, Any]] = {}
    units: UnitDiff = Field(default_factory=UnitDiff)


class CourseDiff(BaseModel):
    added: list[dict[str, Any]] = []
    removed: list[dict[str, Any]] = []
    changed: list[CourseChange] = []


class DiffSummary(BaseModel):
    courses_added: int = 0
    courses_removed: int = 0
    courses_changed: int = 0
    units_added: int = 0
    units_removed: int = 0
    units_changed: int = 0


class VersionCompareResponse(BaseModel):
    """Structural diff between two versions of one framework."""

    base: VersionRef
    compare: VersionRef
    summary: DiffSummary
    courses: CourseDiff
