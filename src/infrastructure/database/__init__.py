# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure.

This package provides the SQLAlchemy async engine and sessions, the ORM
models, schema migrations and startup seeds. All tenants share a single
database and are isolated by the tenant_id column.

Example:
    from src.infrastructure.database import get_session

    async with get_session() as session:
        result = await session.execute(select(CurriculumFramework))
"""

from src.infrastructure.database.connection import (
    DatabaseError,
    close_database,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)

__all__ = [
    "DatabaseError",
    "close_database",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
]
