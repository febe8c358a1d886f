# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Exports:
    Base: Declarative base for all models.
    Tenant, Campus, User, RefreshToken: Identity and tenancy.
    CurriculumFramework, FrameworkVersion, Course, Unit: Curriculum tree.
    Resource, Approval, Comment, Mapping: Attachments and review.
    Game, Assignment: Content catalog.
    Tag, EntityTag, SavedView: Tagging and saved list views.
"""

from src.infrastructure.database.models.base import Base, generate_uuid
from src.infrastructure.database.models.catalog import Assignment, Game
from src.infrastructure.database.models.collaboration import (
    Approval,
    Comment,
    Mapping,
    Resource,
)
from src.infrastructure.database.models.curriculum import (
    Course,
    CurriculumFramework,
    FrameworkVersion,
    Unit,
)
from src.infrastructure.database.models.organization import EntityTag, SavedView, Tag
from src.infrastructure.database.models.tenant import (
    USER_ROLES,
    Campus,
    RefreshToken,
    Tenant,
    User,
)

__all__ = [
    "Base",
    "generate_uuid",
    # Tenancy
    "Tenant",
    "Campus",
    "User",
    "USER_ROLES",
    "RefreshToken",
    # Curriculum
    "CurriculumFramework",
    "FrameworkVersion",
    "Course",
    "Unit",
    # Collaboration
    "Resource",
    "Approval",
    "Comment",
    "Mapping",
    # Catalog
    "Game",
    "Assignment",
    # Organization
    "Tag",
    "EntityTag",
    "SavedView",
]
