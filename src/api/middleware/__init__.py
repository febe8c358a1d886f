# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

This package provides middleware for request processing:
- AuthMiddleware: JWT authentication, sets request.state.user and tenant.
- RequestContextMiddleware: Binds request-scoped logging context.
- build_limiter, enforce_rate_limit: slowapi limiter and the burst limit dependency.
"""

from src.api.middleware.auth import AuthMiddleware, CurrentUser, get_current_user
from src.api.middleware.rate_limit import (
    build_limiter,
    enforce_rate_limit,
    get_client_identifier,
)
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.middleware.tenant import TenantContext, get_tenant_from_request

__all__ = [
    "AuthMiddleware",
    "CurrentUser",
    "get_current_user",
    "RequestContextMiddleware",
    "TenantContext",
    "get_tenant_from_request",
    "build_limiter",
    "get_client_identifier",
    "enforce_rate_limit",
]
