# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structural diff between two version snapshots.

Courses are matched by code, or by title when a course has no code.
Units are matched by title within a matched pair of courses. Items with
the same key are paired in order; surplus items count as added or removed.
"""

from collections import defaultdict
from typing import Any, Iterable

COURSE_FIELDS = (
    "title",
    "level",
    "hours",
    "summary",
    "learning_outcomes",
    "assessment_types",
    "order_index",
)
UNIT_FIELDS = (
    "objectives",
    "skills",
    "activities",
    "rubric",
    "homework",
    "hours",
    "difficulty_level",
    "estimated_time",
    "order_index",
)


def course_key(course: dict[str, Any]) -> str:
    code = course.get("code")
    return f"code:{code}" if code else f"title:{course.get('title')}"


def unit_key(unit: dict[str, Any]) -> str:
    return str(unit.get("title"))


def _pair(
    base: Iterable[dict[str, Any]],
    compare: Iterable[dict[str, Any]],
    key,
) -> tuple[list[tuple[dict, dict]], list[dict], list[dict]]:
    """Match items by key, preserving their order.

    Returns:
        Tuple of (matched pairs, removed items, added items).
    """
    pending: dict[str, list[dict]] = defaultdict(list)
    for item in base:
        pending[key(item)].append(item)

    matched: list[tuple[dict, dict]] = []
    added: list[dict] = []
    for item in compare:
        candidates = pending.get(key(item))
        if candidates:
            matched.append((candidates.pop(0), item))
        else:
            added.append(item)

    removed = [item for items in pending.values() for item in items]
    return matched, removed, added


def _changed_fields(
    old: dict[str, Any], new: dict[str, Any], fields: Iterable[str]
) -> dict[str, dict[str, Any]]:
    return {
        name: {"from": old.get(name), "to": new.get(name)}
        for name in fields
        if old.get(name) != new.get(name)
    }


def _brief(item: dict[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    return {name: item.get(name) for name in fields if name in item}


def diff_units(
    base_units: list[dict[str, Any]], compare_units: list[dict[str, Any]]
) -> dict[str, list[dict[str, Any]]]:
    """Diff the units of one matched course pair."""
    matched, removed, added = _pair(base_units, compare_units, unit_key)

    changed = []
    for old, new in matched:
        fields = _changed_fields(old, new, UNIT_FIELDS)
        if fields:
            changed.append({"title": new.get("title"), "fields": fields})

    return {
        "added": [_brief(u, ("id", "title", "order_index")) for u in added],
        "removed": [_brief(u, ("id", "title", "order_index")) for u in removed],
        "changed": changed,
    }


def diff_versions(
    base_courses: list[dict[str, Any]], compare_courses: list[dict[str, Any]]
) -> dict[str, Any]:
    """Compute the course and unit level diff between two snapshots.

    Each course snapshot is a dict of course fields plus a ``units`` list
    of unit dicts.

    Returns:
        Dict with ``summary`` counters and a ``courses`` section holding
        added, removed and changed courses.
    """
    matched, removed, added = _pair(base_courses, compare_courses, course_key)

    summary = {
        "courses_added": len(added),
        "courses_removed": len(removed),
        "courses_changed": 0,
        "units_added": sum(len(c.get("units", [])) for c in added),
        "units_removed": sum(len(c.get("units", [])) for c in removed),
        "units_changed": 0,
    }

    changed = []
    for old, new in matched:
        fields = _changed_fields(old, new, COURSE_FIELDS)
        units = diff_units(old.get("units", []), new.get("units", []))
        if fields or units["added"] or units["removed"] or units["changed"]:
            changed.append(
                {
                    "code": new.get("code"),
                    "title": new.get("title"),
                    "fields": fields,
                    "units": units,
                }
            )
            summary["courses_changed"] += 1
            summary["units_added"] += len(units["added"])
            summary["units_removed"] += len(units["removed"])
            summary["units_changed"] += len(units["changed"])

    brief_fields = ("id", "code", "title", "order_index")
    return {
        "summary": summary,
        "courses": {
            "added": [_brief(c, brief_fields) for c in added],
            "removed": [_brief(c, brief_fields) for c in removed],
            "changed": changed,
        },
    }
