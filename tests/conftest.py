# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (mock database sessions, sample IDs)
- Integration tests (application on a temporary SQLite database)
"""

from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from src.core.config.settings import (
    DatabaseSettings,
    JWTSettings,
    LLMSettings,
    RateLimitSettings,
    Settings,
)
from src.domains.auth.password import PasswordHasher

TEST_EMAIL = "test@example.com"
TEST_PASSWORD = "password123"


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (SQLite app)"
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_tenant_id() -> str:
    """Provide a sample tenant ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440000"


@pytest.fixture
def sample_user_id() -> str:
    """Provide a sample user ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    return db


# =============================================================================
# Application Fixtures
# =============================================================================


def build_test_settings(db_path: Path, **rate_limit: str) -> Settings:
    """Settings for an application backed by a SQLite file."""
    return Settings(
        environment="test",
        debug=True,
        log_level="WARNING",
        database=DatabaseSettings(
            url=f"sqlite+aiosqlite:///{db_path}",
            auto_migrate=True,
            seed_on_startup=True,
            seed_admin_email=TEST_EMAIL,
            seed_admin_password=SecretStr(TEST_PASSWORD),
        ),
        jwt=JWTSettings(secret_key=SecretStr("test-secret-key-for-testing-only")),
        rate_limit=RateLimitSettings(
            enabled=True,
            burst=rate_limit.get("burst", "1000/second"),
            auth=rate_limit.get("auth", "1000/minute"),
        ),
        llm=LLMSettings(model=""),
    )


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings with a fresh SQLite database per test."""
    return build_test_settings(tmp_path / "kct_test.db")


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    """Create the application under test."""
    from src.api.app import create_app

    app = create_app(test_settings)
    # Minimum bcrypt cost keeps seeding and login fast
    app.state.password_hasher = PasswordHasher(rounds=4)
    return app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def tokens(client: TestClient) -> dict[str, Any]:
    """Log in as the seeded administrator."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": TEST_EMAIL, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def auth_headers(tokens: dict[str, Any]) -> dict[str, str]:
    """Authorization header for the seeded administrator."""
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def unique_code() -> str:
    """Framework code that is unique per test."""
    return f"KCT-{uuid4().hex[:8].upper()}"
