# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum models: frameworks, versions, courses and units.

Ownership is strictly hierarchical: a framework owns its versions, a
version owns its courses, a course owns its units. Every row also carries
tenant_id so tenant scoping never needs a join.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import (
    Base,
    SoftDeleteMixin,
    TenantScopedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class CurriculumFramework(
    UUIDPrimaryKeyMixin, TenantScopedMixin, TimestampMixin, SoftDeleteMixin, Base
):
    """Top-level curriculum catalog entry (KCT)."""

    __tablename__ = "curriculum_frameworks"
    __table_args__ = (
        Index("ix_curriculum_frameworks_tenant_code", "tenant_id", "code"),
    )

    code: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="en")
    target_level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    age_group: Mapped[str | None] = mapped_column(String(20), nullable=True)
    total_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_sessions: Mapped[int | None] = mapped_column(Integer, nullable=True)
    session_duration_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    learning_method: Mapped[str | None] = mapped_column(String(255), nullable=True)
    learning_format: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")
    owner_user_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    campus_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    latest_version_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(36), nullable=True)


class FrameworkVersion(
    UUIDPrimaryKeyMixin, TenantScopedMixin, TimestampMixin, SoftDeleteMixin, Base
):
    """A revisable snapshot of a framework with an approval lifecycle."""

    __tablename__ = "curriculum_framework_versions"
    __table_args__ = (
        UniqueConstraint("framework_id", "version_no", name="uq_framework_version_no"),
    )

    framework_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("curriculum_frameworks.id"), nullable=False, index=True
    )
    version_no: Mapped[str] = mapped_column(String(20), nullable=False)
    state: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")
    changelog: Mapped[str | None] = mapped_column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    extra_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    submitted_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    approval_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    published_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    rollout_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(36), nullable=True)


class Course(UUIDPrimaryKeyMixin, TenantScopedMixin, TimestampMixin, SoftDeleteMixin, Base):
    """A course blueprint inside a version."""

    __tablename__ = "course_blueprints"

    version_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("curriculum_framework_versions.id"), nullable=False, index=True
    )
    code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    hours: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    learning_outcomes: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    assessment_types: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(36), nullable=True)


class Unit(UUIDPrimaryKeyMixin, TenantScopedMixin, TimestampMixin, SoftDeleteMixin, Base):
    """The smallest planned teaching block within a course."""

    __tablename__ = "unit_blueprints"

    course_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("course_blueprints.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    objectives: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    skills: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    activities: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    rubric: Mapped[Any | None] = mapped_column(JSON, nullable=True)
    homework: Mapped[str | None] = mapped_column(Text, nullable=True)
    hours: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    difficulty_level: Mapped[str] = mapped_column(
        String(20), nullable=False, default="intermediate"
    )
    estimated_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    completeness_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
