# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tenant context.

The tenant of a request is always taken from the authenticated user's
access token, never from headers or the request body.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from src.api.middleware.auth import CurrentUser


@dataclass(frozen=True)
class TenantContext:
    """Tenant scope of the current request.

    Attributes:
        tenant_id: Tenant UUID every query is filtered by.
        campus_id: Caller's home campus, if any.
    """

    tenant_id: str
    campus_id: str | None = None

    @classmethod
    def from_user(cls, user: "CurrentUser") -> "TenantContext":
        return cls(tenant_id=user.tenant_id, campus_id=user.campus_id)


def get_tenant_from_request(request: Request) -> TenantContext | None:
    """Get tenant context from request state."""
    return getattr(request.state, "tenant", None)
