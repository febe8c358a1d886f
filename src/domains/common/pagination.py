# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Offset pagination over SQLAlchemy selects."""

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


async def count_rows(db: AsyncSession, query: Select) -> int:
    """Count the rows a select would return."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    result = await db.execute(count_query)
    return result.scalar() or 0


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int,
    page_size: int,
) -> tuple[list[Any], int]:
    """Fetch one page of ORM rows.

    Args:
        db: Database session.
        query: Ordered select of a single entity.
        page: 1-based page number.
        page_size: Rows per page.

    Returns:
        Tuple of (rows on the page, total row count).
    """
    total = await count_rows(db, query)
    result = await db.execute(query.offset((page - 1) * page_size).limit(page_size))
    return list(result.scalars().all()), total
