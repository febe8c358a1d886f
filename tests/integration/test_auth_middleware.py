# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for authentication and tenant middleware.

Tests the middleware components in isolation from database.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from pydantic import SecretStr

from src.api.middleware.auth import AuthMiddleware, CurrentUser, get_current_user
from src.api.middleware.tenant import TenantContext, get_tenant_from_request
from src.domains.auth.jwt import JWTManager


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    settings.refresh_token_expire_days = 7
    return settings


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


@pytest.fixture
def probe_client(jwt_manager: JWTManager) -> TestClient:
    """App that echoes what the middleware put on request.state."""
    app = FastAPI()
    app.add_middleware(AuthMiddleware, jwt_manager=jwt_manager)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/probe")
    async def probe(request: Request) -> dict:
        user = get_current_user(request)
        tenant = get_tenant_from_request(request)
        return {
            "user_id": user.id if user else None,
            "role": user.role if user else None,
            "tenant_id": tenant.tenant_id if tenant else None,
            "campus_id": tenant.campus_id if tenant else None,
        }

    return TestClient(app)


class TestAuthMiddleware:
    """Tests for AuthMiddleware."""

    def test_public_path_bypasses_auth(self, probe_client: TestClient) -> None:
        response = probe_client.get("/health", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 200

    def test_valid_token_sets_user_and_tenant(
        self, probe_client: TestClient, jwt_manager: JWTManager
    ) -> None:
        token = jwt_manager.create_access_token(
            user_id="user-1",
            tenant_id="tenant-1",
            role="program_owner",
            campus_id="campus-1",
        )

        response = probe_client.get("/probe", headers={"Authorization": f"Bearer {token}"})

        assert response.json() == {
            "user_id": "user-1",
            "role": "program_owner",
            "tenant_id": "tenant-1",
            "campus_id": "campus-1",
        }

    def test_missing_token_leaves_state_empty(self, probe_client: TestClient) -> None:
        response = probe_client.get("/probe")

        assert response.status_code == 200
        assert response.json()["user_id"] is None
        assert response.json()["tenant_id"] is None

    def test_refresh_token_is_not_accepted(
        self, probe_client: TestClient, jwt_manager: JWTManager
    ) -> None:
        token = jwt_manager.create_refresh_token(user_id="user-1", tenant_id="tenant-1")

        response = probe_client.get("/probe", headers={"Authorization": f"Bearer {token}"})

        assert response.json()["user_id"] is None

    def test_expired_token_is_ignored(
        self, probe_client: TestClient, jwt_settings: MagicMock
    ) -> None:
        jwt_settings.access_token_expire_minutes = -5
        token = JWTManager(jwt_settings).create_access_token(user_id="u", tenant_id="t")

        response = probe_client.get("/probe", headers={"Authorization": f"Bearer {token}"})

        assert response.json()["user_id"] is None

    @pytest.mark.parametrize("header", ["Token abc", "Bearer", "Bearer a b"])
    def test_malformed_header(self, probe_client: TestClient, header: str) -> None:
        response = probe_client.get("/probe", headers={"Authorization": header})

        assert response.json()["user_id"] is None


class TestCurrentUser:
    def test_roles(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token(user_id="u", tenant_id="t", role="admin")
        user = CurrentUser(jwt_manager.decode_token(token))

        assert user.is_admin is True
        assert user.has_any_role("admin", "program_owner") is True
        assert user.has_any_role("curriculum_designer") is False

    def test_tenant_context_from_user(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token(user_id="u", tenant_id="t", campus_id="c")
        user = CurrentUser(jwt_manager.decode_token(token))

        assert TenantContext.from_user(user) == TenantContext(tenant_id="t", campus_id="c")
