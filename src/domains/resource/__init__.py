# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attached resources domain."""

from src.domains.resource.service import (
    ResourceNotFoundError,
    ResourceService,
    ResourceServiceError,
)

__all__ = ["ResourceService", "ResourceServiceError", "ResourceNotFoundError"]
