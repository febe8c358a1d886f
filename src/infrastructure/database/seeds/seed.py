# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Startup seed data.

This module provides the default records a fresh database needs:
- Default tenant and campus
- Administrator login (credentials come from DatabaseSettings)
- Sample games and assignments for the default tenant
"""

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.auth.password import PasswordHasher
from src.infrastructure.database.models import Assignment, Campus, Game, Tenant, User

if TYPE_CHECKING:
    from src.core.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_TENANT_CODE = "TEST_TENANT"
DEFAULT_CAMPUS_CODE = "TEST_CAMPUS"
TEST_USER_EMAIL = "test@example.com"

GAME_SAMPLES: list[dict[str, Any]] = [
    {
        "title": "Vocabulary Flashcards",
        "type": "Flashcard",
        "game_type": "flashcard",
        "level": "A1",
        "skill": "Vocabulary",
        "duration_minutes": 15,
        "players": "Individual",
        "description": "Interactive flashcards with audio pronunciation for foundational vocabulary.",
        "plays_count": 1200,
        "rating": 4.5,
        "api_integration": None,
        "tags": ["Vocabulary", "Audio", "Interactive"],
    },
    {
        "title": "Grammar Quiz Battle",
        "type": "Quiz",
        "game_type": "quiz",
        "level": "B1",
        "skill": "Grammar",
        "duration_minutes": 20,
        "players": "1-4 players",
        "description": "Competitive live quiz with instant leaderboard for grammar review.",
        "plays_count": 860,
        "rating": 4.7,
        "api_integration": "Kahoot",
        "tags": ["Grammar", "Competition"],
    },
    {
        "title": "Listening Challenge",
        "type": "Audio Game",
        "game_type": "audio",
        "level": "A2",
        "skill": "Listening",
        "duration_minutes": 10,
        "players": "Individual",
        "description": "Listen to short clips and fill in missing words to test listening accuracy.",
        "plays_count": 2050,
        "rating": 4.3,
        "api_integration": None,
        "tags": ["Listening", "Audio"],
    },
    {
        "title": "Speaking Role-play",
        "type": "Role-play",
        "game_type": "roleplay",
        "level": "C1",
        "skill": "Speaking",
        "duration_minutes": 25,
        "players": "2 players",
        "description": "AI-powered conversation practice with context-based prompts and scoring.",
        "plays_count": 480,
        "rating": 4.8,
        "api_integration": "Custom AI",
        "tags": ["Speaking", "AI", "Conversation"],
    },
]

ASSIGNMENT_SAMPLES: list[dict[str, Any]] = [
    {
        "title": "Reading Comprehension: The Digital Age",
        "level": "B2",
        "skill": "Reading",
        "type": "Worksheet",
        "content_type": "worksheet",
        "duration_minutes": 30,
        "description": "Analyze an article about technology habits and answer comprehension questions.",
        "tags": ["Reading", "Technology", "Critical Thinking"],
    },
    {
        "title": "IELTS Speaking Practice: Memorable Trip",
        "level": "B2-C1",
        "skill": "Speaking",
        "type": "Presentation",
        "content_type": "presentation",
        "duration_minutes": 15,
        "description": "Prepare a 2-minute talk describing a memorable journey and answer follow-up questions.",
        "tags": ["IELTS", "Speaking", "Fluency"],
    },
    {
        "title": "Grammar Diagnostic: Verb Tenses",
        "level": "A2-B1",
        "skill": "Grammar",
        "type": "Quiz",
        "content_type": "quiz",
        "duration_minutes": 20,
        "description": "Mixed-tense diagnostic quiz to identify gaps in students' tense usage.",
        "tags": ["Grammar", "Assessment"],
    },
    {
        "title": "Essay Writing: Social Media Impact",
        "level": "C1",
        "skill": "Writing",
        "type": "Essay",
        "content_type": "essay",
        "duration_minutes": 60,
        "description": "Write a 250-word opinion essay discussing the influence of social media on society.",
        "tags": ["Writing", "Opinion Essay"],
    },
]


async def seed_tenant(session: AsyncSession) -> Tenant:
    """Get or create the default tenant."""
    result = await session.execute(select(Tenant).where(Tenant.code == DEFAULT_TENANT_CODE))
    tenant = result.scalar_one_or_none()
    if tenant is not None:
        return tenant

    tenant = Tenant(code=DEFAULT_TENANT_CODE, name="Test Tenant", status="active")
    session.add(tenant)
    await session.flush()
    logger.info("Seeded tenant: %s", tenant.code)
    return tenant


async def seed_campus(session: AsyncSession, tenant: Tenant) -> Campus:
    """Get or create the default campus of a tenant."""
    result = await session.execute(
        select(Campus).where(
            Campus.tenant_id == tenant.id,
            Campus.code == DEFAULT_CAMPUS_CODE,
        )
    )
    campus = result.scalar_one_or_none()
    if campus is not None:
        return campus

    campus = Campus(tenant_id=tenant.id, code=DEFAULT_CAMPUS_CODE, name="Test Campus")
    session.add(campus)
    await session.flush()
    logger.info("Seeded campus: %s", campus.code)
    return campus


async def seed_admin_user(
    session: AsyncSession,
    tenant: Tenant,
    campus: Campus,
    email: str,
    password: str,
    password_hasher: PasswordHasher,
) -> User:
    """Get or create the administrator login."""
    email = email.lower()
    result = await session.execute(
        select(User).where(User.tenant_id == tenant.id, User.email == email)
    )
    user = result.scalar_one_or_none()
    if user is not None:
        return user

    user = User(
        tenant_id=tenant.id,
        campus_id=campus.id,
        email=email,
        password_hash=password_hasher.hash(password),
        full_name="Test User",
        role="admin",
        status="active",
    )
    session.add(user)
    await session.flush()
    logger.info("Seeded admin user: %s", email)
    return user


async def seed_catalog(session: AsyncSession, tenant: Tenant, owner: User) -> int:
    """Insert sample games and assignments that are not present yet.

    Returns:
        Number of inserted rows.
    """
    created = 0

    for sample in GAME_SAMPLES:
        exists = await session.execute(
            select(Game.id).where(Game.tenant_id == tenant.id, Game.title == sample["title"])
        )
        if exists.first() is None:
            session.add(Game(tenant_id=tenant.id, owner_user_id=owner.id, **sample))
            created += 1

    for sample in ASSIGNMENT_SAMPLES:
        exists = await session.execute(
            select(Assignment.id).where(
                Assignment.tenant_id == tenant.id,
                Assignment.title == sample["title"],
            )
        )
        if exists.first() is None:
            session.add(
                Assignment(
                    tenant_id=tenant.id,
                    owner_user_id=owner.id,
                    language="en",
                    **sample,
                )
            )
            created += 1

    await session.flush()
    if created:
        logger.info("Seeded %d catalog items", created)
    return created


async def seed_database(
    session: AsyncSession,
    settings: "Settings",
    password_hasher: PasswordHasher | None = None,
) -> dict[str, Any]:
    """Seed all default data.

    Args:
        session: Database session. The caller commits.
        settings: Application settings; supplies the admin credentials.
        password_hasher: Hasher for the admin password.

    Returns:
        Summary with the tenant, campus and user IDs.
    """
    hasher = password_hasher or PasswordHasher()

    tenant = await seed_tenant(session)
    campus = await seed_campus(session, tenant)
    user = await seed_admin_user(
        session,
        tenant,
        campus,
        email=settings.database.seed_admin_email,
        password=settings.database.seed_admin_password.get_secret_value(),
        password_hasher=hasher,
    )
    catalog_items = await seed_catalog(session, tenant, user)

    return {
        "tenant_id": tenant.id,
        "campus_id": campus.id,
        "user_id": user.id,
        "catalog_items_created": catalog_items,
    }
