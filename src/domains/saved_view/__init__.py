# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Saved list views domain."""

from src.domains.saved_view.service import (
    SavedViewNameExistsError,
    SavedViewNotFoundError,
    SavedViewPermissionError,
    SavedViewService,
    SavedViewServiceError,
)

__all__ = [
    "SavedViewService",
    "SavedViewServiceError",
    "SavedViewNotFoundError",
    "SavedViewNameExistsError",
    "SavedViewPermissionError",
]
