# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum framework (KCT) domain."""

from src.domains.framework.service import (
    FrameworkCodeExistsError,
    FrameworkNotFoundError,
    FrameworkService,
    FrameworkServiceError,
)

__all__ = [
    "FrameworkService",
    "FrameworkServiceError",
    "FrameworkNotFoundError",
    "FrameworkCodeExistsError",
]
