# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tags and saved views.

Revision ID: 002_tags_and_saved_views
Revises: 001_initial_schema
Create Date: 2025-03-04

Adds the tags, entity_tags and saved_views tables.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002_tags_and_saved_views"
down_revision: Union[str, None] = "001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create the tagging and saved view tables."""
    if not _has_table("tags"):
        op.create_table(
            "tags",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("tenant_id", sa.String(36), nullable=False),
            sa.Column("name", sa.String(50), nullable=False),
            sa.Column("description", sa.String(200), nullable=True),
            sa.Column("entity_type", sa.String(20), nullable=True),
            sa.Column("color", sa.String(7), nullable=False, server_default="#3B82F6"),
            sa.Column("created_by", sa.String(36), nullable=True),
            sa.Column("updated_by", sa.String(36), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint("tenant_id", "name", name="uq_tags_tenant_name"),
        )
        op.create_index("ix_tags_tenant_id", "tags", ["tenant_id"])

    if not _has_table("entity_tags"):
        op.create_table(
            "entity_tags",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("tenant_id", sa.String(36), nullable=False),
            sa.Column("tag_id", sa.String(36), sa.ForeignKey("tags.id"), nullable=False),
            sa.Column("entity_type", sa.String(20), nullable=False),
            sa.Column("entity_id", sa.String(36), nullable=False),
            sa.Column("created_by", sa.String(36), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.UniqueConstraint(
                "tag_id", "entity_type", "entity_id", name="uq_entity_tags_target"
            ),
        )
        op.create_index("ix_entity_tags_tenant_id", "entity_tags", ["tenant_id"])
        op.create_index("ix_entity_tags_tag_id", "entity_tags", ["tag_id"])
        op.create_index("ix_entity_tags_entity", "entity_tags", ["entity_type", "entity_id"])

    if not _has_table("saved_views"):
        op.create_table(
            "saved_views",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("tenant_id", sa.String(36), nullable=False),
            sa.Column("user_id", sa.String(36), nullable=False),
            sa.Column("name", sa.String(100), nullable=False),
            sa.Column("entity_type", sa.String(30), nullable=False),
            sa.Column("filters", sa.JSON, nullable=False),
            sa.Column("description", sa.String(500), nullable=True),
            sa.Column("is_public", sa.Boolean, nullable=False, server_default=sa.false()),
            sa.Column("usage_count", sa.Integer, nullable=False, server_default="0"),
            sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
            *_timestamps(),
            sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        )
        op.create_index("ix_saved_views_tenant_id", "saved_views", ["tenant_id"])
        op.create_index(
            "ix_saved_views_owner", "saved_views", ["tenant_id", "user_id", "entity_type"]
        )


def downgrade() -> None:
    """Drop the tagging and saved view tables."""
    for table in ("saved_views", "entity_tags", "tags"):
        if _has_table(table):
            op.drop_table(table)
