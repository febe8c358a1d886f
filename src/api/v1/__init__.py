# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    auth: Authentication endpoints (login, refresh, logout, me).
    frameworks: Curriculum framework (KCT) endpoints and version lists.
    versions: Version endpoints and workflow transitions.
    courses: Course endpoints and unit lists.
    units: Unit endpoints, templates and derived operations.
    resources: Attached resource endpoints.
    approvals: Approval record endpoints.
    comments: Threaded comment endpoints.
    mappings: Framework rollout mapping endpoints.
    games: Game catalog endpoints.
    assignments: Assignment catalog endpoints.
    tags: Tag endpoints.
    reports: Curriculum report endpoints.
    saved_views: Saved list view endpoints.
"""

from fastapi import APIRouter, Depends
from slowapi import Limiter

from src.api.middleware.rate_limit import enforce_rate_limit
from src.api.v1 import (
    approvals,
    assignments,
    auth,
    comments,
    courses,
    frameworks,
    games,
    mappings,
    reports,
    resources,
    saved_views,
    tags,
    units,
    versions,
)
from src.core.config.settings import Settings


def build_router(limiter: Limiter, settings: Settings) -> APIRouter:
    """Build the v1 router for one application.

    Args:
        limiter: The application's rate limiter, used for the login limit.
        settings: Application settings.

    Returns:
        Router mounted at /api/v1.
    """
    router = APIRouter(prefix="/api/v1", dependencies=[Depends(enforce_rate_limit)])

    router.include_router(auth.build_router(limiter, settings), prefix="/auth", tags=["Authentication"])

    # Mappings before frameworks so /kct/mappings is not read as a framework ID
    router.include_router(mappings.router, prefix="/kct/mappings", tags=["Mappings"])
    router.include_router(mappings.router, prefix="/mappings", tags=["Mappings"])

    router.include_router(frameworks.router, prefix="/kct", tags=["Frameworks"])
    router.include_router(versions.router, prefix="/versions", tags=["Versions"])
    router.include_router(courses.router, prefix="/courses", tags=["Courses"])
    router.include_router(units.router, prefix="/units", tags=["Units"])
    router.include_router(resources.router, prefix="/resources", tags=["Resources"])
    router.include_router(approvals.router, prefix="/approvals", tags=["Approvals"])
    router.include_router(comments.router, prefix="/comments", tags=["Comments"])
    router.include_router(games.router, prefix="/games", tags=["Games"])
    router.include_router(assignments.router, prefix="/assignments", tags=["Assignments"])
    router.include_router(tags.router, prefix="/tags", tags=["Tags"])
    router.include_router(reports.router, prefix="/reports", tags=["Reports"])
    router.include_router(saved_views.router, prefix="/saved-views", tags=["Saved Views"])

    return router


__all__ = ["build_router"]
