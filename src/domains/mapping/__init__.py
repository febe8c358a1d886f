# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Framework rollout mapping domain."""

from src.domains.mapping.service import (
    MappingAppliedError,
    MappingExistsError,
    MappingNotFoundError,
    MappingService,
    MappingServiceError,
    MappingVersionMismatchError,
)

__all__ = [
    "MappingService",
    "MappingServiceError",
    "MappingNotFoundError",
    "MappingExistsError",
    "MappingVersionMismatchError",
    "MappingAppliedError",
]
