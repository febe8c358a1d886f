# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database seed package.

Seeds are idempotent: each record is inserted only when it is missing,
so they can run on every startup.
"""

from src.infrastructure.database.seeds.seed import (
    DEFAULT_CAMPUS_CODE,
    DEFAULT_TENANT_CODE,
    TEST_USER_EMAIL,
    seed_database,
)

__all__ = [
    "DEFAULT_CAMPUS_CODE",
    "DEFAULT_TENANT_CODE",
    "TEST_USER_EMAIL",
    "seed_database",
]
