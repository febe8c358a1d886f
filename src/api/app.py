# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the KCT curriculum API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src import __version__
from src.api.errors import register_exception_handlers
from src.api.middleware.auth import AuthMiddleware
from src.api.middleware.rate_limit import build_limiter
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.routes import health
from src.api.v1 import build_router
from src.core.config.settings import Settings, get_settings
from src.core.intelligence.llm import LLMClient
from src.domains.auth.jwt import JWTManager
from src.domains.auth.password import PasswordHasher
from src.domains.unit.suggestions import build_suggestion_provider
from src.infrastructure.database.connection import (
    close_database,
    get_session,
    init_database,
)
from src.infrastructure.database.migrations import run_migrations
from src.infrastructure.database.seeds import seed_database
from src.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application:
    - Database connection pool
    - Pending migrations (when auto_migrate is set)
    - Default tenant, login and catalog (when seed_on_startup is set)

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    logger.info(
        "Starting KCT curriculum API (environment=%s, debug=%s)",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    await init_database(settings)
    logger.info("Database connection initialized")

    if settings.database.auto_migrate:
        applied = await run_migrations(settings.database.url)
        if applied:
            logger.info("Applied migrations: %s", ", ".join(applied))

    if settings.database.seed_on_startup:
        async with get_session() as session:
            summary = await seed_database(session, settings, app.state.password_hasher)
        logger.info("Seed data ready for tenant %s", summary["tenant_id"])

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    await close_database()
    logger.info("Shutting down KCT curriculum API")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Args:
        settings: Settings to use; defaults to the cached environment settings.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="KCT Curriculum API",
        description="Multi-tenant curriculum framework management",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        # Disable automatic redirects from /path to /path/
        # This prevents 307 redirects that lose Authorization headers
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    limiter = build_limiter(settings)
    jwt_manager = JWTManager(settings.jwt)

    app.state.settings = settings
    app.state.limiter = limiter
    app.state.jwt_manager = jwt_manager
    app.state.password_hasher = PasswordHasher()

    llm_client = LLMClient(llm_settings=settings.llm) if settings.llm.enabled else None
    app.state.suggestion_provider = build_suggestion_provider(llm_client)

    # =========================================================================
    # Exception handlers
    # =========================================================================
    register_exception_handlers(app)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================

    # Auth middleware - validates JWT tokens
    app.add_middleware(AuthMiddleware, jwt_manager=jwt_manager)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    app.add_middleware(RequestContextMiddleware)

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(build_router(limiter, settings))

    return app
