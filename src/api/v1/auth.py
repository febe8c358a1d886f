# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides endpoints for user authentication:
- POST /login - Email/password login (rate limited per client)
- POST /refresh - Refresh access token (token rotation)
- POST /logout - Revoke one or all refresh tokens
- GET /me - Get current user info

The login route is registered by build_router() because its rate limit
comes from the settings of the application being built.

Example:
    POST /api/v1/auth/login
    {
        "email": "test@example.com",
        "password": "password123"
    }
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from slowapi import Limiter

from src.api.dependencies import AuthenticatedUser, get_auth_service
from src.core.config.settings import Settings
from src.domains.auth.service import AuthService
from src.models.auth import (
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    MeResponse,
    RefreshRequest,
)
from src.models.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def login(
    request: Request,
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Authenticate with email and password.

    Args:
        request: HTTP request, used by the rate limiter.
        data: Login credentials.
        auth_service: Authentication service.

    Returns:
        LoginResponse with the token pair and the user profile.
    """
    return await auth_service.login(data.email, data.password, data.tenant_code)


@router.post(
    "/refresh",
    response_model=LoginResponse,
    summary="Refresh access token",
    description="Exchange a refresh token for a new token pair. The old refresh token is revoked.",
)
async def refresh_token(
    data: RefreshRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    return await auth_service.refresh_tokens(data.refresh_token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="User logout",
    description="Revoke the given refresh token, or every refresh token of the user.",
)
async def logout(
    current_user: AuthenticatedUser,
    data: LogoutRequest | None = None,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    refresh = data.refresh_token if data else None
    revoked = await auth_service.logout(current_user.id, refresh)
    logger.debug("Logout revoked %d refresh tokens", revoked)
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get current user",
)
async def get_me(
    current_user: AuthenticatedUser,
    auth_service: AuthService = Depends(get_auth_service),
) -> MeResponse:
    user = await auth_service.get_current_user(current_user.id)
    return MeResponse(user=user)


def build_router(limiter: Limiter, settings: Settings) -> APIRouter:
    """Build the auth router for one application.

    Args:
        limiter: The application's rate limiter.
        settings: Application settings supplying the login limit.

    Returns:
        Router with login plus the module-level auth routes.
    """
    auth_router = APIRouter()
    auth_router.add_api_route(
        "/login",
        limiter.limit(settings.rate_limit.auth)(login),
        methods=["POST"],
        response_model=LoginResponse,
        summary="Login",
        description="Authenticate with email and password and receive a JWT token pair.",
    )
    auth_router.include_router(router)
    return auth_router
