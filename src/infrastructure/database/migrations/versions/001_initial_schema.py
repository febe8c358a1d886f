# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial schema.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-01-15

Creates the tenancy, curriculum, collaboration and catalog tables. Column
types are dialect neutral so the same revision runs on MySQL and SQLite.
Every table is created only when it does not already exist.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _tenant_id() -> sa.Column:
    return sa.Column("tenant_id", sa.String(36), nullable=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _deleted_at() -> sa.Column:
    return sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True)


def _audit() -> list[sa.Column]:
    return [
        sa.Column("created_by", sa.String(36), nullable=True),
        sa.Column("updated_by", sa.String(36), nullable=True),
    ]


def _create_table(name: str, *columns, indexes: Sequence[tuple[str, list[str]]] = ()) -> None:
    """Create a table and its indexes unless the table already exists."""
    if _has_table(name):
        return
    op.create_table(name, *columns)
    for index_name, index_columns in indexes:
        op.create_index(index_name, name, index_columns)


def upgrade() -> None:
    """Create all tables."""
    # ==========================================================================
    # Tenancy
    # ==========================================================================
    _create_table(
        "tenants",
        _id(),
        sa.Column("code", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        *_timestamps(),
    )

    _create_table(
        "campuses",
        _id(),
        _tenant_id(),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
        indexes=[("ix_campuses_tenant_id", ["tenant_id"])],
    )

    _create_table(
        "users",
        _id(),
        _tenant_id(),
        sa.Column("campus_id", sa.String(36), sa.ForeignKey("campuses.id"), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(50), nullable=False, server_default="teacher"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        _deleted_at(),
        sa.UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
        indexes=[("ix_users_tenant_id", ["tenant_id"])],
    )

    _create_table(
        "refresh_tokens",
        _id(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        indexes=[("ix_refresh_tokens_user_id", ["user_id"])],
    )

    # ==========================================================================
    # Curriculum
    # ==========================================================================
    _create_table(
        "curriculum_frameworks",
        _id(),
        _tenant_id(),
        sa.Column("code", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("language", sa.String(10), nullable=False, server_default="en"),
        sa.Column("target_level", sa.String(50), nullable=True),
        sa.Column("age_group", sa.String(20), nullable=True),
        sa.Column("total_hours", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_sessions", sa.Integer, nullable=True),
        sa.Column("session_duration_hours", sa.Float, nullable=True),
        sa.Column("learning_method", sa.String(255), nullable=True),
        sa.Column("learning_format", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("owner_user_id", sa.String(36), nullable=True),
        sa.Column("campus_id", sa.String(36), nullable=True),
        sa.Column("latest_version_id", sa.String(36), nullable=True),
        *_audit(),
        *_timestamps(),
        _deleted_at(),
        indexes=[
            ("ix_curriculum_frameworks_tenant_id", ["tenant_id"]),
            ("ix_curriculum_frameworks_tenant_code", ["tenant_id", "code"]),
        ],
    )

    _create_table(
        "curriculum_framework_versions",
        _id(),
        _tenant_id(),
        sa.Column(
            "framework_id",
            sa.String(36),
            sa.ForeignKey("curriculum_frameworks.id"),
            nullable=False,
        ),
        sa.Column("version_no", sa.String(20), nullable=False),
        sa.Column("state", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("changelog", sa.Text, nullable=True),
        sa.Column("metadata", sa.JSON, nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("submitted_by", sa.String(36), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by", sa.String(36), nullable=True),
        sa.Column("approval_comments", sa.Text, nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("published_by", sa.String(36), nullable=True),
        sa.Column("rollout_notes", sa.Text, nullable=True),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        *_audit(),
        *_timestamps(),
        _deleted_at(),
        sa.UniqueConstraint("framework_id", "version_no", name="uq_framework_version_no"),
        indexes=[
            ("ix_curriculum_framework_versions_tenant_id", ["tenant_id"]),
            ("ix_curriculum_framework_versions_framework_id", ["framework_id"]),
        ],
    )

    _create_table(
        "course_blueprints",
        _id(),
        _tenant_id(),
        sa.Column(
            "version_id",
            sa.String(36),
            sa.ForeignKey("curriculum_framework_versions.id"),
            nullable=False,
        ),
        sa.Column("code", sa.String(64), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("level", sa.String(50), nullable=True),
        sa.Column("hours", sa.Float, nullable=False, server_default="0"),
        sa.Column("order_index", sa.Integer, nullable=False, server_default="0"),
        sa.Column("summary", sa.Text, nullable=True),
        sa.Column("learning_outcomes", sa.JSON, nullable=False),
        sa.Column("assessment_types", sa.JSON, nullable=False),
        *_audit(),
        *_timestamps(),
        _deleted_at(),
        indexes=[
            ("ix_course_blueprints_tenant_id", ["tenant_id"]),
            ("ix_course_blueprints_version_id", ["version_id"]),
        ],
    )

    _create_table(
        "unit_blueprints",
        _id(),
        _tenant_id(),
        sa.Column(
            "course_id",
            sa.String(36),
            sa.ForeignKey("course_blueprints.id"),
            nullable=False,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("objectives", sa.JSON, nullable=False),
        sa.Column("skills", sa.JSON, nullable=False),
        sa.Column("activities", sa.JSON, nullable=False),
        sa.Column("rubric", sa.JSON, nullable=True),
        sa.Column("homework", sa.Text, nullable=True),
        sa.Column("hours", sa.Float, nullable=False, server_default="0"),
        sa.Column("order_index", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "difficulty_level", sa.String(20), nullable=False, server_default="intermediate"
        ),
        sa.Column("estimated_time", sa.Integer, nullable=True),
        sa.Column("completeness_score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("notes", sa.Text, nullable=True),
        *_audit(),
        *_timestamps(),
        _deleted_at(),
        indexes=[
            ("ix_unit_blueprints_tenant_id", ["tenant_id"]),
            ("ix_unit_blueprints_course_id", ["course_id"]),
        ],
    )

    # ==========================================================================
    # Collaboration
    # ==========================================================================
    _create_table(
        "resources",
        _id(),
        _tenant_id(),
        sa.Column("entity_type", sa.String(20), nullable=False),
        sa.Column("entity_id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("kind", sa.String(20), nullable=False, server_default="link"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("url", sa.String(1024), nullable=True),
        sa.Column("file_path", sa.String(1024), nullable=True),
        sa.Column("mime_type", sa.String(100), nullable=True),
        sa.Column("license_type", sa.String(100), nullable=True),
        sa.Column("order_index", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_required", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.String(36), nullable=True),
        *_timestamps(),
        indexes=[
            ("ix_resources_tenant_id", ["tenant_id"]),
            ("ix_resources_entity", ["entity_type", "entity_id"]),
        ],
    )

    _create_table(
        "approvals",
        _id(),
        _tenant_id(),
        sa.Column(
            "version_id",
            sa.String(36),
            sa.ForeignKey("curriculum_framework_versions.id"),
            nullable=False,
        ),
        sa.Column("requested_by", sa.String(36), nullable=True),
        sa.Column("reviewer_id", sa.String(36), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="requested"),
        sa.Column("priority", sa.String(10), nullable=False, server_default="normal"),
        sa.Column("comments", sa.Text, nullable=True),
        sa.Column("due_date", sa.Date, nullable=True),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        indexes=[
            ("ix_approvals_tenant_id", ["tenant_id"]),
            ("ix_approvals_version_id", ["version_id"]),
        ],
    )

    _create_table(
        "comments",
        _id(),
        _tenant_id(),
        sa.Column("entity_type", sa.String(20), nullable=False),
        sa.Column("entity_id", sa.String(36), nullable=False),
        sa.Column("parent_id", sa.String(36), sa.ForeignKey("comments.id"), nullable=True),
        sa.Column("author_id", sa.String(36), nullable=False),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("mentions", sa.JSON, nullable=False),
        sa.Column("attachments", sa.JSON, nullable=False),
        sa.Column("is_resolved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("resolved_by", sa.String(36), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        _deleted_at(),
        indexes=[
            ("ix_comments_tenant_id", ["tenant_id"]),
            ("ix_comments_entity", ["entity_type", "entity_id"]),
        ],
    )

    _create_table(
        "kct_mappings",
        _id(),
        _tenant_id(),
        sa.Column(
            "framework_id",
            sa.String(36),
            sa.ForeignKey("curriculum_frameworks.id"),
            nullable=False,
        ),
        sa.Column(
            "version_id",
            sa.String(36),
            sa.ForeignKey("curriculum_framework_versions.id"),
            nullable=False,
        ),
        sa.Column("target_type", sa.String(30), nullable=False),
        sa.Column("target_id", sa.String(64), nullable=False),
        sa.Column("campus_id", sa.String(36), nullable=True),
        sa.Column("rollout_batch", sa.String(64), nullable=True),
        sa.Column("rollout_phase", sa.String(20), nullable=False, server_default="planned"),
        sa.Column("risk_assessment", sa.String(20), nullable=False, server_default="low"),
        sa.Column("mismatch_report", sa.JSON, nullable=True),
        sa.Column("override_reason", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="planned"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("applied_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rolled_back_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(36), nullable=True),
        sa.Column("updated_by", sa.String(36), nullable=True),
        *_timestamps(),
        indexes=[
            ("ix_kct_mappings_tenant_id", ["tenant_id"]),
            (
                "ix_kct_mappings_target",
                ["framework_id", "version_id", "target_type", "target_id"],
            ),
        ],
    )

    # ==========================================================================
    # Catalog
    # ==========================================================================
    _create_table(
        "games",
        _id(),
        _tenant_id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("type", sa.String(64), nullable=True),
        sa.Column("game_type", sa.String(32), nullable=True),
        sa.Column("level", sa.String(32), nullable=True),
        sa.Column("skill", sa.String(64), nullable=True),
        sa.Column("duration_minutes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("players", sa.String(64), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("difficulty", sa.String(16), nullable=True),
        sa.Column("visibility", sa.String(16), nullable=False, server_default="public"),
        sa.Column("plays_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("rating", sa.Float, nullable=True),
        sa.Column("api_integration", sa.String(64), nullable=True),
        sa.Column("owner_user_id", sa.String(36), nullable=True),
        *_audit(),
        *_timestamps(),
        _deleted_at(),
        indexes=[("ix_games_tenant_id", ["tenant_id"])],
    )

    _create_table(
        "assignments",
        _id(),
        _tenant_id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("type", sa.String(64), nullable=True),
        sa.Column("content_type", sa.String(32), nullable=True),
        sa.Column("level", sa.String(32), nullable=True),
        sa.Column("skill", sa.String(64), nullable=True),
        sa.Column("duration_minutes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("difficulty", sa.String(16), nullable=True),
        sa.Column("visibility", sa.String(16), nullable=False, server_default="tenant"),
        sa.Column("objectives", sa.JSON, nullable=True),
        sa.Column("rubric", sa.JSON, nullable=True),
        sa.Column("content", sa.JSON, nullable=True),
        sa.Column("language", sa.String(32), nullable=True),
        sa.Column("owner_user_id", sa.String(36), nullable=True),
        *_audit(),
        *_timestamps(),
        _deleted_at(),
        indexes=[("ix_assignments_tenant_id", ["tenant_id"])],
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    for table in (
        "assignments",
        "games",
        "kct_mappings",
        "comments",
        "approvals",
        "resources",
        "unit_blueprints",
        "course_blueprints",
        "curriculum_framework_versions",
        "curriculum_frameworks",
        "refresh_tokens",
        "users",
        "campuses",
        "tenants",
    ):
        if _has_table(table):
            op.drop_table(table)
