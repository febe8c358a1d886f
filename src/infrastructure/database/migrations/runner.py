# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migration runner.

Applies the alembic-style migration modules under ``versions/`` in order,
without the alembic CLI. Two bookkeeping tables are maintained:

- ``alembic_version`` holds the current revision.
- ``schema_migrations`` records every applied revision with the sha256
  checksum of its module source. A migration whose source changed after
  it was applied aborts the run with MigrationChecksumError.

Example:
    from src.infrastructure.database.migrations.runner import run_migrations

    applied = await run_migrations("sqlite+aiosqlite:///./kct.db")
"""

import hashlib
import importlib
import inspect
import logging
from typing import Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.utils.datetime import format_iso, utc_now

logger = logging.getLogger(__name__)

MIGRATIONS_PACKAGE = "src.infrastructure.database.migrations.versions"

# Migration files in order (must be maintained manually)
MIGRATIONS = [
    "001_initial_schema",
    "002_tags_and_saved_views",
]


class MigrationError(Exception):
    """Raised when a migration cannot be loaded or applied."""


class MigrationChecksumError(MigrationError):
    """Raised when an applied migration was modified afterwards."""

    def __init__(self, revision: str, recorded: str, current: str) -> None:
        super().__init__(
            f"Migration {revision} was modified after it was applied "
            f"(recorded {recorded[:12]}, current {current[:12]})"
        )
        self.revision = revision
        self.recorded = recorded
        self.current = current


async def run_migrations(
    db_url: str,
    target_revision: str | None = None,
) -> list[str]:
    """Run pending migrations.

    Args:
        db_url: Async SQLAlchemy database URL.
        target_revision: Optional specific revision to migrate to.
            If None, runs all pending migrations.

    Returns:
        List of applied migration revision IDs.

    Raises:
        MigrationChecksumError: If an applied migration was edited.
        MigrationError: If a migration module is missing or malformed.
    """
    engine = create_async_engine(db_url, echo=False)

    try:
        await _ensure_version_tables(engine)
        await verify_checksums(engine)

        current_version = await _get_current_version(engine)
        logger.info("Current migration version: %s", current_version or "None")

        migrations_to_apply = _get_pending_migrations(current_version, target_revision)

        if not migrations_to_apply:
            logger.info("No pending migrations")
            return []

        logger.info(
            "Applying %d migrations: %s",
            len(migrations_to_apply),
            ", ".join(migrations_to_apply),
        )

        applied = []
        for revision in migrations_to_apply:
            await _apply_migration(engine, revision)
            applied.append(revision)
            logger.info("Applied migration: %s", revision)

        return applied

    finally:
        await engine.dispose()


async def _ensure_version_tables(engine: AsyncEngine) -> None:
    """Create the bookkeeping tables if they do not exist."""
    async with engine.begin() as conn:
        await conn.execute(
            text("""
                CREATE TABLE IF NOT EXISTS alembic_version (
                    version_num VARCHAR(128) NOT NULL,
                    CONSTRAINT alembic_version_pkc PRIMARY KEY (version_num)
                )
            """)
        )
        await conn.execute(
            text("""
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version VARCHAR(128) NOT NULL,
                    checksum VARCHAR(64) NOT NULL,
                    applied_at VARCHAR(40) NOT NULL,
                    CONSTRAINT schema_migrations_pkc PRIMARY KEY (version)
                )
            """)
        )


async def _get_current_version(engine: AsyncEngine) -> str | None:
    """Get current migration version from database."""
    async with engine.connect() as conn:
        result = await conn.execute(
            text("SELECT version_num FROM alembic_version LIMIT 1")
        )
        row = result.fetchone()
        return row[0] if row else None


async def _get_recorded_checksums(engine: AsyncEngine) -> dict[str, str]:
    async with engine.connect() as conn:
        result = await conn.execute(text("SELECT version, checksum FROM schema_migrations"))
        return {row[0]: row[1] for row in result.fetchall()}


def _get_pending_migrations(
    current_version: str | None,
    target_revision: str | None = None,
) -> list[str]:
    """Get list of migrations to apply.

    Args:
        current_version: Current database version.
        target_revision: Target revision to migrate to.

    Returns:
        List of revision IDs to apply in order.
    """
    if current_version is None:
        start_idx = 0
    else:
        try:
            start_idx = MIGRATIONS.index(current_version) + 1
        except ValueError:
            logger.warning(
                "Current version %s not in known migrations list", current_version
            )
            return []

    if target_revision:
        try:
            end_idx = MIGRATIONS.index(target_revision) + 1
        except ValueError:
            logger.warning("Target revision %s not found", target_revision)
            return []
    else:
        end_idx = len(MIGRATIONS)

    return MIGRATIONS[start_idx:end_idx]


def _load_migration(revision: str):
    """Import a migration module by revision ID."""
    module_name = f"{MIGRATIONS_PACKAGE}.{revision}"
    try:
        return importlib.import_module(module_name)
    except ImportError as e:
        raise MigrationError(f"Cannot import migration {revision}: {e}") from e


def migration_checksum(revision: str) -> str:
    """Compute the sha256 checksum of a migration module's source."""
    source = inspect.getsource(_load_migration(revision))
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


async def verify_checksums(engine: AsyncEngine) -> None:
    """Compare recorded checksums against the current migration sources.

    Raises:
        MigrationChecksumError: On the first mismatch.
    """
    recorded = await _get_recorded_checksums(engine)
    for revision, checksum in recorded.items():
        if revision not in MIGRATIONS:
            logger.warning("Recorded migration %s is not in the known list", revision)
            continue
        current = migration_checksum(revision)
        if current != checksum:
            raise MigrationChecksumError(revision, checksum, current)


async def _apply_migration(engine: AsyncEngine, revision: str) -> None:
    """Apply a single migration and record it.

    Args:
        engine: Database engine.
        revision: Migration revision ID.
    """
    module = _load_migration(revision)

    upgrade_fn: Callable | None = getattr(module, "upgrade", None)
    if upgrade_fn is None:
        raise MigrationError(f"Migration {revision} has no upgrade() function")

    checksum = migration_checksum(revision)

    async with engine.begin() as conn:
        await conn.run_sync(_run_upgrade_sync, upgrade_fn)

        await conn.execute(text("DELETE FROM alembic_version"))
        await conn.execute(
            text("INSERT INTO alembic_version (version_num) VALUES (:version)"),
            {"version": revision},
        )
        await conn.execute(
            text(
                "INSERT INTO schema_migrations (version, checksum, applied_at) "
                "VALUES (:version, :checksum, :applied_at)"
            ),
            {"version": revision, "checksum": checksum, "applied_at": format_iso(utc_now())},
        )


def _run_upgrade_sync(connection, upgrade_fn: Callable) -> None:
    """Run upgrade function in sync context with alembic operations.

    Alembic operations are sync and use a thread-local context.
    """
    from alembic.operations import Operations
    from alembic.runtime.migration import MigrationContext

    context = MigrationContext.configure(connection)

    with context.begin_transaction():
        with Operations.context(context):
            upgrade_fn()


async def check_migrations_pending(db_url: str) -> bool:
    """Check if there are pending migrations."""
    engine = create_async_engine(db_url, echo=False)

    try:
        await _ensure_version_tables(engine)
        current_version = await _get_current_version(engine)
        return len(_get_pending_migrations(current_version)) > 0
    finally:
        await engine.dispose()


async def get_migration_status(db_url: str) -> dict:
    """Get detailed migration status.

    Returns:
        Dict with current version, pending migrations, and all migrations.
    """
    engine = create_async_engine(db_url, echo=False)

    try:
        await _ensure_version_tables(engine)
        current_version = await _get_current_version(engine)
        pending = _get_pending_migrations(current_version)
        recorded = await _get_recorded_checksums(engine)

        return {
            "current_version": current_version,
            "latest_version": MIGRATIONS[-1] if MIGRATIONS else None,
            "pending_count": len(pending),
            "pending_migrations": pending,
            "applied_migrations": sorted(recorded),
            "all_migrations": MIGRATIONS,
            "is_up_to_date": len(pending) == 0,
        }
    finally:
        await engine.dispose()
