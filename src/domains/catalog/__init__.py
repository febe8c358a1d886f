# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Games and assignments catalog domain."""

from src.domains.catalog.service import (
    AssignmentService,
    CatalogItemNotFoundError,
    CatalogPermissionError,
    CatalogService,
    CatalogServiceError,
    GameService,
)

__all__ = [
    "CatalogService",
    "GameService",
    "AssignmentService",
    "CatalogServiceError",
    "CatalogItemNotFoundError",
    "CatalogPermissionError",
]
