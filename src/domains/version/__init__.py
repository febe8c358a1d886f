# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Framework version domain: workflow, diff and service."""

from src.domains.version.service import (
    InvalidTransitionError,
    VersionExistsError,
    VersionFrozenError,
    VersionMismatchError,
    VersionNotFoundError,
    VersionService,
    VersionServiceError,
    apply_transition,
    ensure_editable,
)
from src.domains.version.workflow import (
    TransitionResult,
    VersionAction,
    VersionState,
    allowed_actions,
    is_editable,
    transition,
)

__all__ = [
    "VersionService",
    "VersionServiceError",
    "VersionNotFoundError",
    "VersionExistsError",
    "VersionFrozenError",
    "InvalidTransitionError",
    "VersionMismatchError",
    "apply_transition",
    "ensure_editable",
    "VersionState",
    "VersionAction",
    "TransitionResult",
    "allowed_actions",
    "is_editable",
    "transition",
]
