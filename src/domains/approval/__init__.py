# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Version approval domain."""

from src.domains.approval.service import (
    ApprovalNotFoundError,
    ApprovalService,
    ApprovalServiceError,
)

__all__ = ["ApprovalService", "ApprovalServiceError", "ApprovalNotFoundError"]
