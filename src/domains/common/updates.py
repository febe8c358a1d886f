# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Partial update helpers for PATCH endpoints."""

from typing import Any

from pydantic import BaseModel

from src.core.errors import ValidationError

NO_FIELDS_MESSAGE = "No valid fields to update"


def collect_updates(request: BaseModel, exclude: set[str] | None = None) -> dict[str, Any]:
    """Return only the fields the client actually sent.

    Raises:
        ValidationError: If nothing was supplied.
    """
    updates = request.model_dump(exclude_unset=True, exclude=exclude)
    if not updates:
        raise ValidationError(NO_FIELDS_MESSAGE, code="NO_UPDATES")
    return updates


def apply_updates(entity: Any, updates: dict[str, Any]) -> list[str]:
    """Assign updates onto an ORM row.

    Explicit nulls are skipped for columns that are not nullable.

    Returns:
        Names of the attributes that were assigned.
    """
    columns = entity.__table__.columns
    applied = []
    for key, value in updates.items():
        if value is None and key in columns and not columns[key].nullable:
            continue
        setattr(entity, key, value)
        applied.append(key)
    return applied
