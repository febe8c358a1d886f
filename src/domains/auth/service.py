# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication service for login and session management.

This module provides the main AuthService that orchestrates:
- Email/password login against bcrypt hashes
- Token refresh with rotation
- User logout (single session or all sessions)

Refresh tokens are never stored in clear; only their SHA-256 hash is kept
in the refresh_tokens table.

Example:
    >>> auth_service = AuthService(db_session, jwt_manager, PasswordHasher())
    >>> result = await auth_service.login("test@example.com", "password123")
    >>> rotated = await auth_service.refresh_tokens(result.refresh_token)
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import AuthenticationError, ValidationError
from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
)
from src.domains.auth.password import PasswordHasher
from src.infrastructure.database.models import RefreshToken, Tenant, User
from src.models.auth import LoginResponse, UserProfile
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AuthServiceError(Exception):
    """Base exception for authentication service errors."""

    pass


class InvalidCredentialsError(AuthServiceError, AuthenticationError):
    """Raised when email/password do not match an active user."""

    default_code = "INVALID_CREDENTIALS"


class TenantRequiredError(AuthServiceError, ValidationError):
    """Raised when login credentials match accounts in several tenants."""

    default_code = "TENANT_REQUIRED"


class TokenRefreshError(AuthServiceError, AuthenticationError):
    """Raised when a refresh token is invalid, expired or revoked."""

    default_code = "INVALID_REFRESH_TOKEN"


class UserNotFoundError(AuthServiceError, AuthenticationError):
    """Raised when the token subject no longer exists."""

    pass


class AuthService:
    """Authentication service for session management.

    Attributes:
        _db: Database session for queries.
        _jwt_manager: JWT token manager.
        _password_hasher: bcrypt password hasher.
    """

    def __init__(
        self,
        db: AsyncSession,
        jwt_manager: JWTManager,
        password_hasher: PasswordHasher | None = None,
    ) -> None:
        """Initialize the authentication service.

        Args:
            db: Async database session.
            jwt_manager: JWT token manager.
            password_hasher: Password hasher; a default one is created if omitted.
        """
        self._db = db
        self._jwt_manager = jwt_manager
        self._password_hasher = password_hasher or PasswordHasher()

    async def login(
        self,
        email: str,
        password: str,
        tenant_code: str | None = None,
    ) -> LoginResponse:
        """Authenticate a user and open a new session.

        Unknown emails, wrong passwords and inactive accounts produce the
        same error so that callers cannot discover valid accounts. An email
        is unique per tenant only; without tenant_code the password picks
        the account, and a password valid in several tenants is refused.

        Args:
            email: Login email.
            password: Plain text password.
            tenant_code: Code of the tenant to sign in to.

        Returns:
            LoginResponse with a fresh token pair and the user profile.

        Raises:
            InvalidCredentialsError: If authentication fails.
            TenantRequiredError: If the credentials match several tenants.
        """
        query = select(User).where(
            User.email == email.lower(),
            User.deleted_at.is_(None),
        )
        if tenant_code:
            query = query.join(Tenant, Tenant.id == User.tenant_id).where(
                Tenant.code == tenant_code
            )
        result = await self._db.execute(query)
        matches = [
            user
            for user in result.scalars().all()
            if self._password_hasher.verify(password, user.password_hash)
        ]

        if not matches:
            logger.warning("Failed login attempt for %s", email)
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        if len(matches) > 1:
            raise TenantRequiredError(
                "Account exists in several tenants; tenant_code is required",
                details={"tenants": len(matches)},
            )

        user = matches[0]

        if user.status != "active":
            logger.warning("Login attempt for inactive user %s", user.id)
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        user.last_login_at = utc_now()
        response = await self._issue_tokens(user)
        await self._db.commit()

        logger.info("User logged in: %s", user.id)
        return response

    async def refresh_tokens(self, refresh_token: str) -> LoginResponse:
        """Exchange a refresh token for a new pair.

        Implements refresh token rotation: the presented token is revoked
        and a new one is issued.

        Raises:
            TokenRefreshError: If the token is invalid, expired or revoked.
        """
        try:
            payload = self._jwt_manager.decode_token(refresh_token, expected_type="refresh")
        except (TokenExpiredError, InvalidTokenError) as e:
            raise TokenRefreshError(f"Invalid refresh token: {e}")

        token_hash = self._jwt_manager.hash_token(refresh_token)
        result = await self._db.execute(
            select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        )
        stored = result.scalar_one_or_none()

        if stored is None or stored.user_id != payload.sub:
            raise TokenRefreshError("Refresh token not recognised")

        if stored.revoked_at is not None:
            logger.warning("Reuse of revoked refresh token for user %s", payload.sub)
            raise TokenRefreshError("Refresh token has been revoked")

        if ensure_utc(stored.expires_at) <= utc_now():
            raise TokenRefreshError("Refresh token has expired")

        user = await self._get_active_user(payload.sub)
        if user is None:
            raise TokenRefreshError("User is no longer active")

        stored.revoked_at = utc_now()
        response = await self._issue_tokens(user)
        await self._db.commit()

        logger.info("Refreshed tokens for user: %s", user.id)
        return response

    async def logout(self, user_id: str, refresh_token: str | None = None) -> int:
        """Revoke refresh tokens.

        Args:
            user_id: Authenticated user.
            refresh_token: Token to revoke. When omitted every active token
                of the user is revoked.

        Returns:
            Number of revoked tokens.
        """
        now = utc_now()
        stmt = update(RefreshToken).where(
            RefreshToken.user_id == user_id,
            RefreshToken.revoked_at.is_(None),
        )
        if refresh_token:
            stmt = stmt.where(
                RefreshToken.token_hash == self._jwt_manager.hash_token(refresh_token)
            )

        result = await self._db.execute(stmt.values(revoked_at=now))
        await self._db.commit()

        revoked = result.rowcount or 0
        logger.info("User logged out: %s (%d tokens revoked)", user_id, revoked)
        return revoked

    async def get_current_user(self, user_id: str) -> UserProfile:
        """Load the profile of the authenticated user.

        Raises:
            UserNotFoundError: If the user was deleted or deactivated.
        """
        user = await self._get_active_user(user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        return UserProfile.model_validate(user)

    async def _get_active_user(self, user_id: str) -> User | None:
        result = await self._db.execute(
            select(User).where(
                User.id == user_id,
                User.deleted_at.is_(None),
                User.status == "active",
            )
        )
        return result.scalar_one_or_none()

    async def _issue_tokens(self, user: User) -> LoginResponse:
        tokens = self._jwt_manager.create_token_pair(
            user_id=user.id,
            tenant_id=user.tenant_id,
            role=user.role,
            campus_id=user.campus_id,
            email=user.email,
        )

        self._db.add(
            RefreshToken(
                user_id=user.id,
                token_hash=self._jwt_manager.hash_token(tokens.refresh_token),
                expires_at=utc_now() + self._jwt_manager.refresh_token_lifetime,
            )
        )
        await self._db.flush()

        return LoginResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_type=tokens.token_type,
            expires_in=tokens.expires_in,
            user=UserProfile.model_validate(user),
        )
