# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum reports domain."""

from src.domains.report.service import (
    ReportScopeNotFoundError,
    ReportService,
    ReportServiceError,
)

__all__ = ["ReportService", "ReportServiceError", "ReportScopeNotFoundError"]
