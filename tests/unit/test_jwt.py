# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for JWT token utilities.

Tests the JWTManager class and token operations.
"""

from datetime import timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from jose import jwt
from pydantic import SecretStr

from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
    TokenPair,
)


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


class TestJWTManager:
    """Tests for JWTManager class."""

    def test_create_token_pair_returns_valid_tokens(self, jwt_manager: JWTManager) -> None:
        result = jwt_manager.create_token_pair(
            user_id=str(uuid4()),
            tenant_id=str(uuid4()),
            role="curriculum_designer",
        )

        assert isinstance(result, TokenPair)
        assert result.token_type == "Bearer"
        assert result.expires_in == 30 * 60
        assert result.refresh_expires_in == 7 * 24 * 60 * 60
        assert result.access_token != result.refresh_token

    def test_access_token_carries_identity(self, jwt_manager: JWTManager) -> None:
        user_id = str(uuid4())
        tenant_id = str(uuid4())

        token = jwt_manager.create_access_token(
            user_id=user_id,
            tenant_id=tenant_id,
            role="admin",
            campus_id="campus-1",
            email="test@example.com",
        )
        payload = jwt_manager.decode_token(token, expected_type="access")

        assert payload.sub == user_id
        assert payload.tenant_id == tenant_id
        assert payload.role == "admin"
        assert payload.campus_id == "campus-1"
        assert payload.email == "test@example.com"
        assert payload.type == "access"

    def test_refresh_token_has_no_role(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_refresh_token(user_id="u-1", tenant_id="t-1")

        payload = jwt_manager.decode_token(token, expected_type="refresh")

        assert payload.type == "refresh"
        assert payload.role is None

    def test_tokens_are_unique(self, jwt_manager: JWTManager) -> None:
        first = jwt_manager.create_refresh_token(user_id="u-1", tenant_id="t-1")
        second = jwt_manager.create_refresh_token(user_id="u-1", tenant_id="t-1")

        assert first != second

    def test_wrong_token_type_raises(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_refresh_token(user_id="u-1", tenant_id="t-1")

        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(token, expected_type="access")

    def test_invalid_signature_raises(self, jwt_manager: JWTManager) -> None:
        token = jwt.encode(
            {"sub": "u-1", "type": "access", "tenant_id": "t-1", "exp": 9999999999, "iat": 0, "jti": "x"},
            "another-secret",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(token)

    def test_garbage_token_raises(self, jwt_manager: JWTManager) -> None:
        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token("not-a-jwt")

    def test_expired_token_raises(self, jwt_settings: MagicMock) -> None:
        jwt_settings.access_token_expire_minutes = -1
        manager = JWTManager(jwt_settings)
        token = manager.create_access_token(user_id="u-1", tenant_id="t-1")

        with pytest.raises(TokenExpiredError):
            manager.decode_token(token)

    def test_missing_claims_raise(self, jwt_manager: JWTManager) -> None:
        token = jwt.encode(
            {"sub": "u-1", "type": "access", "exp": 9999999999},
            "test-secret-key-for-jwt-testing",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(token)

    def test_verify_token(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token(user_id="u-1", tenant_id="t-1")

        assert jwt_manager.verify_token(token, expected_type="access") is True
        assert jwt_manager.verify_token(token, expected_type="refresh") is False

    def test_refresh_token_lifetime(self, jwt_manager: JWTManager) -> None:
        assert jwt_manager.refresh_token_lifetime == timedelta(days=7)

    def test_hash_token_is_stable_sha256(self) -> None:
        hashed = JWTManager.hash_token("abc")

        assert hashed == JWTManager.hash_token("abc")
        assert len(hashed) == 64
        assert hashed != JWTManager.hash_token("abd")
