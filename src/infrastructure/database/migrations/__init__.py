# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migrations package.

Migration modules live in ``versions/`` and are applied in order by
``runner.run_migrations``.
"""

from src.infrastructure.database.migrations.runner import (
    MIGRATIONS,
    MigrationChecksumError,
    MigrationError,
    check_migrations_pending,
    get_migration_status,
    run_migrations,
)

__all__ = [
    "MIGRATIONS",
    "MigrationChecksumError",
    "MigrationError",
    "check_migrations_pending",
    "get_migration_status",
    "run_migrations",
]
