# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Building blocks shared by the curriculum domains.

Exports:
    EntityKind, EntityRef, resolve: Polymorphic attachment targets.
    validate_reorder, renumber, shift_after: Sibling ordering rules.
    paginate, count_rows: Offset pagination.
    collect_updates, apply_updates: PATCH semantics.
"""

from src.domains.common.attachments import EntityKind, EntityRef, resolve
from src.domains.common.ordering import ReorderError, renumber, shift_after, validate_reorder
from src.domains.common.pagination import count_rows, paginate
from src.domains.common.updates import apply_updates, collect_updates

__all__ = [
    "EntityKind",
    "EntityRef",
    "resolve",
    "ReorderError",
    "renumber",
    "shift_after",
    "validate_reorder",
    "count_rows",
    "paginate",
    "apply_updates",
    "collect_updates",
]
