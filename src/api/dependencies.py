# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get authenticated users and enforce roles
- Get application-wide singletons (settings, JWT manager, hasher)

Example:
    @router.get("/kct")
    async def list_frameworks(
        db: AsyncSession = Depends(get_db),
        current_user: CurrentUser = Depends(require_auth),
    ):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.middleware.auth import CurrentUser, get_current_user
from src.api.middleware.tenant import TenantContext, get_tenant_from_request
from src.core.config.settings import Settings
from src.domains.auth.jwt import JWTManager
from src.domains.auth.password import PasswordHasher
from src.domains.auth.service import AuthService
from src.domains.unit.suggestions import SuggestionProvider
from src.infrastructure.database.connection import get_session
from src.models.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

logger = logging.getLogger(__name__)

WRITE_ROLES = ("curriculum_designer", "program_owner", "admin")
DELETE_ROLES = ("program_owner", "admin")
CATALOG_WRITE_ROLES = ("teacher", "curriculum_designer", "program_owner", "admin")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the request."""
    async with get_session() as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


def get_jwt_manager(request: Request) -> JWTManager:
    return request.app.state.jwt_manager


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_suggestion_provider(request: Request) -> SuggestionProvider:
    return request.app.state.suggestion_provider


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    return AuthService(db, jwt_manager, password_hasher)


def require_auth(request: Request) -> CurrentUser:
    """Get authenticated user, raising if not authenticated.

    Raises:
        HTTPException: If not authenticated.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_tenant(request: Request) -> TenantContext:
    """Get the tenant scope of an authenticated request.

    Raises:
        HTTPException: If there is no tenant context.
    """
    require_auth(request)
    tenant = get_tenant_from_request(request)
    if tenant is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Tenant context required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return tenant


class RequireRole:
    """Dependency for requiring specific roles.

    Example:
        @router.delete("/{framework_id}")
        async def delete_framework(
            user: CurrentUser = Depends(RequireRole("program_owner", "admin")),
        ):
            ...
    """

    def __init__(self, *roles: str) -> None:
        """Initialize role requirement.

        Args:
            roles: Accepted role codes (any of these).
        """
        self.roles = roles

    def __call__(self, request: Request) -> CurrentUser:
        """Check roles and return user.

        Raises:
            HTTPException: 401 if not authenticated, 403 if the role is not accepted.
        """
        user = require_auth(request)

        if not user.has_any_role(*self.roles):
            logger.info("Role %s refused for %s %s", user.role, request.method, request.url.path)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires one of: {', '.join(self.roles)}",
            )

        return user


require_writer = RequireRole(*WRITE_ROLES)
require_deleter = RequireRole(*DELETE_ROLES)
require_catalog_writer = RequireRole(*CATALOG_WRITE_ROLES)


class Pagination:
    """Offset pagination query parameters."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1),
        page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    ) -> None:
        self.page = page
        self.page_size = page_size


class CatalogPagination(Pagination):
    """Pagination that also accepts the camelCase pageSize parameter."""

    def __init__(
        self,
        page: int = Query(default=1, ge=1),
        page_size: int | None = Query(default=None, ge=1, le=MAX_PAGE_SIZE),
        page_size_camel: int | None = Query(
            default=None, alias="pageSize", ge=1, le=MAX_PAGE_SIZE
        ),
    ) -> None:
        size = page_size_camel if page_size_camel is not None else page_size
        super().__init__(page=page, page_size=size if size is not None else DEFAULT_PAGE_SIZE)


# Type aliases for common dependencies
DBSession = Annotated[AsyncSession, Depends(get_db)]
AuthenticatedUser = Annotated[CurrentUser, Depends(require_auth)]
Tenant = Annotated[TenantContext, Depends(require_tenant)]
Writer = Annotated[CurrentUser, Depends(require_writer)]
Deleter = Annotated[CurrentUser, Depends(require_deleter)]
CatalogWriter = Annotated[CurrentUser, Depends(require_catalog_writer)]
PageParams = Annotated[Pagination, Depends()]
CatalogPageParams = Annotated[CatalogPagination, Depends()]
