# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Each application builds its own Limiter from settings. The burst limit is
applied by enforce_rate_limit, a dependency of the /api/v1 router: it runs
after routing, so each endpoint gets its own counter per client. The login
endpoint is additionally decorated with the auth limit.

Example:
    >>> limiter = build_limiter(settings)
    >>> app.state.limiter = limiter
    >>> router = APIRouter(prefix="/api/v1", dependencies=[Depends(enforce_rate_limit)])
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from src.core.config.settings import Settings

logger = logging.getLogger(__name__)

MEMORY_STORAGE_URI = "memory://"


def get_client_identifier(request: Request) -> str:
    """Get a unique identifier for the client.

    Uses tenant and user ID if authenticated, otherwise the IP address.
    """
    user = getattr(request.state, "user", None)
    tenant = getattr(request.state, "tenant", None)

    parts = []

    if tenant:
        parts.append(f"tenant:{tenant.tenant_id}")

    if user:
        parts.append(f"user:{user.id}")
    else:
        parts.append(f"ip:{get_remote_address(request)}")

    return ":".join(parts)


def build_limiter(settings: Settings) -> Limiter:
    """Create the limiter for one application instance."""
    storage_uri = settings.redis.url if settings.rate_limit.use_redis else MEMORY_STORAGE_URI

    logger.info(
        "Rate limiting %s: burst=%s, auth=%s, storage=%s",
        "enabled" if settings.rate_limit.enabled else "disabled",
        settings.rate_limit.burst,
        settings.rate_limit.auth,
        "redis" if settings.rate_limit.use_redis else "memory",
    )

    return Limiter(
        key_func=get_client_identifier,
        default_limits=[settings.rate_limit.burst],
        storage_uri=storage_uri,
        enabled=settings.rate_limit.enabled,
    )


def enforce_rate_limit(request: Request) -> None:
    """Check the burst limit for the endpoint that matched the request.

    Raises:
        RateLimitExceeded: If the client exceeded the limit.
    """
    limiter: Limiter = request.app.state.limiter
    endpoint = request.scope.get("endpoint") or getattr(request.scope.get("route"), "endpoint", None)
    if endpoint is None:
        return

    # Endpoints decorated with limiter.limit are checked by their decorator
    limiter._check_request_limit(request, endpoint, in_middleware=True)
