# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tagging domain."""

from src.domains.tag.service import (
    DuplicateTagError,
    TagAlreadyAttachedError,
    TagEntityMismatchError,
    TagNotAttachedError,
    TagNotFoundError,
    TagService,
    TagServiceError,
)

__all__ = [
    "TagService",
    "TagServiceError",
    "TagNotFoundError",
    "DuplicateTagError",
    "TagAlreadyAttachedError",
    "TagNotAttachedError",
    "TagEntityMismatchError",
]
