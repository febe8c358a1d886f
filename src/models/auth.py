# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication request and response models."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from src.models.common import ORMModel


class LoginRequest(BaseModel):
    """Credentials for email/password login."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=256)
    tenant_code: str | None = Field(default=None, max_length=50)


class RefreshRequest(BaseModel):
    """Refresh token exchange."""

    refresh_token: str = Field(min_length=1)


class LogoutRequest(BaseModel):
    """Logout payload. Without a token every session of the user is closed."""

    refresh_token: str | None = None


class UserProfile(ORMModel):
    """Public profile of a user."""

    id: str
    email: str
    full_name: str
    role: str
    tenant_id: str
    campus_id: str | None = None
    status: str | None = None
    last_login_at: datetime | None = None


class LoginResponse(BaseModel):
    """Issued token pair plus the authenticated user's profile."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserProfile


class MeResponse(BaseModel):
    """Current user wrapper."""

    user: UserProfile
