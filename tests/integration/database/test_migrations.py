# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for database migrations.

Runs the migration runner against a temporary SQLite database.
"""

import pytest
from sqlalchemy import inspect, text

from src.infrastructure.database.migrations import runner
from src.infrastructure.database.migrations.runner import (
    MIGRATIONS,
    MigrationChecksumError,
    check_migrations_pending,
    get_migration_status,
    migration_checksum,
    run_migrations,
)
from src.infrastructure.database.models import Base

EXPECTED_TABLES = {
    "tenants",
    "campuses",
    "users",
    "refresh_tokens",
    "curriculum_frameworks",
    "curriculum_framework_versions",
    "course_blueprints",
    "unit_blueprints",
    "resources",
    "approvals",
    "comments",
    "kct_mappings",
    "games",
    "assignments",
    "tags",
    "entity_tags",
    "saved_views",
}


async def _table_names(engine) -> set[str]:
    async with engine.connect() as conn:
        return set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))


class TestRunMigrations:
    """Test applying migrations to an empty database."""

    @pytest.mark.asyncio
    async def test_fresh_database_applies_all(self, db_url):
        applied = await run_migrations(db_url)

        assert applied == MIGRATIONS

    @pytest.mark.asyncio
    async def test_creates_all_tables(self, db_engine):
        tables = await _table_names(db_engine)

        assert EXPECTED_TABLES <= tables
        assert {"alembic_version", "schema_migrations"} <= tables

    @pytest.mark.asyncio
    async def test_schema_covers_every_model(self, db_engine):
        """Every mapped table exists after migrating."""
        tables = await _table_names(db_engine)

        assert set(Base.metadata.tables) <= tables

    @pytest.mark.asyncio
    async def test_unit_blueprints_has_expected_columns(self, db_engine):
        async with db_engine.connect() as conn:
            columns = await conn.run_sync(
                lambda sync_conn: {
                    col["name"] for col in inspect(sync_conn).get_columns("unit_blueprints")
                }
            )

        for col in (
            "id",
            "tenant_id",
            "course_id",
            "title",
            "order_index",
            "objectives",
            "skills",
            "activities",
            "rubric",
            "hours",
            "deleted_at",
        ):
            assert col in columns, f"Column {col} not found in unit_blueprints table"

    @pytest.mark.asyncio
    async def test_second_run_is_noop(self, migrated_db_url):
        assert await run_migrations(migrated_db_url) == []

    @pytest.mark.asyncio
    async def test_upgrade_from_initial_schema(self, db_url):
        assert await run_migrations(db_url, target_revision="001_initial_schema") == [
            "001_initial_schema"
        ]

        assert await run_migrations(db_url) == ["002_tags_and_saved_views"]

    @pytest.mark.asyncio
    async def test_unknown_target_revision_applies_nothing(self, db_url):
        assert await run_migrations(db_url, target_revision="999_missing") == []


class TestMigrationStatus:
    """Test migration status reporting."""

    @pytest.mark.asyncio
    async def test_pending_on_empty_database(self, db_url):
        assert await check_migrations_pending(db_url) is True

        status = await get_migration_status(db_url)

        assert status["current_version"] is None
        assert status["pending_count"] == len(MIGRATIONS)
        assert status["is_up_to_date"] is False

    @pytest.mark.asyncio
    async def test_up_to_date_after_run(self, migrated_db_url):
        assert await check_migrations_pending(migrated_db_url) is False

        status = await get_migration_status(migrated_db_url)

        assert status["current_version"] == MIGRATIONS[-1]
        assert status["latest_version"] == MIGRATIONS[-1]
        assert status["pending_migrations"] == []
        assert status["applied_migrations"] == sorted(MIGRATIONS)
        assert status["is_up_to_date"] is True


class TestChecksums:
    """Test checksum bookkeeping."""

    @pytest.mark.asyncio
    async def test_checksum_recorded(self, db_engine):
        async with db_engine.connect() as conn:
            result = await conn.execute(text("SELECT version, checksum FROM schema_migrations"))
            recorded = dict(result.fetchall())

        assert recorded == {revision: migration_checksum(revision) for revision in MIGRATIONS}

    def test_checksum_is_sha256_hex(self):
        checksum = migration_checksum(MIGRATIONS[0])

        assert len(checksum) == 64
        int(checksum, 16)

    @pytest.mark.asyncio
    async def test_modified_migration_aborts_run(self, migrated_db_url, monkeypatch):
        monkeypatch.setattr(runner, "migration_checksum", lambda revision: "0" * 64)

        with pytest.raises(MigrationChecksumError) as exc_info:
            await run_migrations(migrated_db_url)

        assert exc_info.value.revision == MIGRATIONS[0]
        assert exc_info.value.current == "0" * 64
