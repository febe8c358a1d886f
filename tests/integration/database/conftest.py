# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database integration tests.

Each test gets its own SQLite file, migrated through the runner.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.infrastructure.database.migrations.runner import run_migrations


@pytest.fixture
def db_url(tmp_path) -> str:
    """SQLite URL in the test's temporary directory."""
    return f"sqlite+aiosqlite:///{tmp_path / 'kct_test.db'}"


@pytest_asyncio.fixture(scope="function")
async def migrated_db_url(db_url: str) -> str:
    """Database URL with all migrations applied."""
    await run_migrations(db_url)
    return db_url


@pytest_asyncio.fixture(scope="function")
async def db_engine(migrated_db_url: str):
    """Create async engine for the migrated database."""
    engine = create_async_engine(migrated_db_url, echo=False)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()
