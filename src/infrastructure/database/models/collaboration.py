# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attachment and review models: resources, approvals, comments, mappings.

Resources and comments hang off any curriculum entity through the
(entity_type, entity_id) pair; the allowed kinds are defined by
src.domains.common.attachments.EntityKind.
"""

from datetime import date, datetime
from typing import Any

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import (
    Base,
    SoftDeleteMixin,
    TenantScopedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class Resource(UUIDPrimaryKeyMixin, TenantScopedMixin, TimestampMixin, Base):
    """A teaching resource attached to a curriculum entity."""

    __tablename__ = "resources"
    __table_args__ = (
        Index("ix_resources_entity", "entity_type", "entity_id"),
    )

    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(36), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False, default="link")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    file_path: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    mime_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    license_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)


class Approval(UUIDPrimaryKeyMixin, TenantScopedMixin, TimestampMixin, Base):
    """A review request on a framework version."""

    __tablename__ = "approvals"

    version_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("curriculum_framework_versions.id"), nullable=False, index=True
    )
    requested_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    reviewer_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="requested")
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="normal")
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Comment(UUIDPrimaryKeyMixin, TenantScopedMixin, TimestampMixin, SoftDeleteMixin, Base):
    """A threaded discussion entry on a curriculum entity."""

    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_entity", "entity_type", "entity_id"),
    )

    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(36), nullable=False)
    parent_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("comments.id"), nullable=True
    )
    author_id: Mapped[str] = mapped_column(String(36), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    mentions: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    attachments: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    is_resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    resolved_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Mapping(UUIDPrimaryKeyMixin, TenantScopedMixin, TimestampMixin, Base):
    """Cross-reference from a framework version to a course template or class."""

    __tablename__ = "kct_mappings"
    __table_args__ = (
        Index("ix_kct_mappings_target", "framework_id", "version_id", "target_type", "target_id"),
    )

    framework_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("curriculum_frameworks.id"), nullable=False
    )
    version_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("curriculum_framework_versions.id"), nullable=False
    )
    target_type: Mapped[str] = mapped_column(String(30), nullable=False)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False)
    campus_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    rollout_batch: Mapped[str | None] = mapped_column(String(64), nullable=True)
    rollout_phase: Mapped[str] = mapped_column(String(20), nullable=False, default="planned")
    risk_assessment: Mapped[str] = mapped_column(String(20), nullable=False, default="low")
    mismatch_report: Mapped[Any | None] = mapped_column(JSON, nullable=True)
    override_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="planned")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    applied_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rolled_back_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
