# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT token management utilities.

This module provides JWT token creation and validation using python-jose.
Access tokens carry the caller's identity and tenant (sub, tenant_id, role,
campus_id, email); refresh tokens carry only sub and tenant_id and are
tracked by hash in the refresh_tokens table.

Example:
    >>> from src.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> tokens = jwt_manager.create_token_pair(user_id="u-1", tenant_id="t-1", role="admin")
    >>> claims = jwt_manager.decode_token(tokens.access_token, expected_type="access")
"""

import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Literal

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel

from src.core.config.settings import JWTSettings
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Attributes:
        sub: Subject (user ID).
        type: Token type (access or refresh).
        tenant_id: Tenant the user belongs to.
        role: User role code.
        campus_id: Home campus, if any.
        email: User email.
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID, unique per token.
    """

    sub: str
    type: Literal["access", "refresh"]
    tenant_id: str
    role: str | None = None
    campus_id: str | None = None
    email: str | None = None
    exp: int
    iat: int
    jti: str


class TokenPair(BaseModel):
    """Access and refresh token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_expires_in: int


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT token creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings

    @property
    def refresh_token_lifetime(self) -> timedelta:
        """Lifetime of a refresh token."""
        return timedelta(days=self._settings.refresh_token_expire_days)

    def _encode(self, payload: dict) -> str:
        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def create_access_token(
        self,
        user_id: str,
        tenant_id: str,
        role: str | None = None,
        campus_id: str | None = None,
        email: str | None = None,
    ) -> str:
        """Create an access token.

        Args:
            user_id: User identifier.
            tenant_id: Tenant identifier.
            role: User role code.
            campus_id: Home campus identifier.
            email: User email.

        Returns:
            JWT access token string.
        """
        now = utc_now()
        exp = now + timedelta(minutes=self._settings.access_token_expire_minutes)

        return self._encode(
            {
                "sub": str(user_id),
                "type": "access",
                "tenant_id": str(tenant_id),
                "role": role,
                "campus_id": campus_id,
                "email": email,
                "exp": int(exp.timestamp()),
                "iat": int(now.timestamp()),
                "jti": secrets.token_urlsafe(16),
            }
        )

    def create_refresh_token(self, user_id: str, tenant_id: str) -> str:
        """Create a refresh token."""
        now = utc_now()
        exp = now + self.refresh_token_lifetime

        return self._encode(
            {
                "sub": str(user_id),
                "type": "refresh",
                "tenant_id": str(tenant_id),
                "exp": int(exp.timestamp()),
                "iat": int(now.timestamp()),
                "jti": secrets.token_urlsafe(16),
            }
        )

    def create_token_pair(
        self,
        user_id: str,
        tenant_id: str,
        role: str | None = None,
        campus_id: str | None = None,
        email: str | None = None,
    ) -> TokenPair:
        """Create an access and refresh token pair."""
        return TokenPair(
            access_token=self.create_access_token(
                user_id=user_id,
                tenant_id=tenant_id,
                role=role,
                campus_id=campus_id,
                email=email,
            ),
            refresh_token=self.create_refresh_token(user_id=user_id, tenant_id=tenant_id),
            token_type="Bearer",
            expires_in=self._settings.access_token_expire_minutes * 60,
            refresh_expires_in=self._settings.refresh_token_expire_days * 24 * 60 * 60,
        )

    def decode_token(
        self,
        token: str,
        expected_type: Literal["access", "refresh"] | None = None,
    ) -> TokenPayload:
        """Decode and validate a JWT token.

        Args:
            token: JWT token string.
            expected_type: Expected token type (access or refresh).

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or of the wrong type.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JoseJWTError as e:
            logger.warning("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}")

        if expected_type and payload.get("type") != expected_type:
            raise InvalidTokenError(
                f"Expected {expected_type} token, got {payload.get('type')}"
            )

        try:
            return TokenPayload(**payload)
        except ValueError as e:
            raise InvalidTokenError(f"Invalid token claims: {str(e)}")

    def verify_token(
        self,
        token: str,
        expected_type: Literal["access", "refresh"] | None = None,
    ) -> bool:
        """Verify if a token is valid."""
        try:
            self.decode_token(token, expected_type)
            return True
        except (TokenExpiredError, InvalidTokenError):
            return False

    @staticmethod
    def hash_token(token: str) -> str:
        """Create a SHA-256 hash of a token for storage."""
        return hashlib.sha256(token.encode()).hexdigest()
