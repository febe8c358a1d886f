# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Sibling ordering rules shared by courses, units and resources.

Within one container the live items always carry order_index values
0..n-1 with no gaps or duplicates.
"""

from collections import Counter
from typing import Iterable, Protocol, Sequence


class Ordered(Protocol):
    id: str
    order_index: int


class ReorderError(ValueError):
    """Raised when a reorder payload is not a permutation of the container."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


def validate_reorder(live_ids: Iterable[str], orders: Sequence[tuple[str, int]]) -> dict[str, int]:
    """Check a reorder payload against the live items of a container.

    The payload must name every live item exactly once and its indices must
    form a permutation of 0..n-1.

    Args:
        live_ids: IDs of every live item in the container.
        orders: (id, order_index) pairs from the request.

    Returns:
        Mapping of item ID to its new order_index.

    Raises:
        ReorderError: If the payload is incomplete, has duplicates, names
            unknown items, or does not use indices 0..n-1.
    """
    live = set(live_ids)
    ids = [item_id for item_id, _ in orders]

    duplicates = sorted(item_id for item_id, count in Counter(ids).items() if count > 1)
    if duplicates:
        raise ReorderError("Duplicate ids in reorder payload", {"duplicate_ids": duplicates})

    unknown = sorted(set(ids) - live)
    if unknown:
        raise ReorderError("Reorder payload contains unknown ids", {"unknown_ids": unknown})

    missing = sorted(live - set(ids))
    if missing:
        raise ReorderError(
            "Reorder payload must include every item in the container",
            {"missing_ids": missing},
        )

    indices = sorted(index for _, index in orders)
    if indices != list(range(len(live))):
        raise ReorderError(
            "order_index values must be unique and contiguous from 0",
            {"expected": list(range(len(live))), "received": indices},
        )

    return dict(orders)


def renumber(items: Iterable[Ordered]) -> int:
    """Close gaps so items are numbered 0..n-1 in their current order.

    Returns:
        Number of items whose order_index changed.
    """
    changed = 0
    for index, item in enumerate(sorted(items, key=lambda i: i.order_index)):
        if item.order_index != index:
            item.order_index = index
            changed += 1
    return changed


def shift_after(items: Iterable[Ordered], position: int, delta: int = 1) -> None:
    """Shift every item at or after position by delta."""
    for item in items:
        if item.order_index >= position:
            item.order_index += delta
