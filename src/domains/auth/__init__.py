# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain.

Provides bcrypt password hashing, JWT issuing and the login/refresh/logout
service.
"""

from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTError,
    JWTManager,
    TokenExpiredError,
    TokenPair,
    TokenPayload,
)
from src.domains.auth.password import PasswordHasher, hash_password, verify_password
from src.domains.auth.service import (
    AuthService,
    AuthServiceError,
    InvalidCredentialsError,
    TokenRefreshError,
    UserNotFoundError,
)

__all__ = [
    "AuthService",
    "AuthServiceError",
    "InvalidCredentialsError",
    "TokenRefreshError",
    "UserNotFoundError",
    "JWTManager",
    "JWTError",
    "TokenExpiredError",
    "InvalidTokenError",
    "TokenPair",
    "TokenPayload",
    "PasswordHasher",
    "hash_password",
    "verify_password",
]
