# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit completeness scoring.

A unit earns points for each planning element it carries:

    objectives  20
    skills      15
    activities  20
    rubric      25
    resources   20

The score is stored on the unit and refreshed whenever one of these
inputs changes.
"""

from dataclasses import dataclass, field
from typing import Any

WEIGHTS: dict[str, int] = {
    "objectives": 20,
    "skills": 15,
    "activities": 20,
    "rubric": 25,
    "resources": 20,
}

MAX_SCORE = sum(WEIGHTS.values())


@dataclass
class CompletenessResult:
    score: int
    breakdown: dict[str, int]
    missing: list[str] = field(default_factory=list)


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, dict, str)):
        return len(value) > 0
    return True


def score_unit(
    objectives: Any,
    skills: Any,
    activities: Any,
    rubric: Any,
    resource_count: int,
) -> CompletenessResult:
    """Score a unit's planning elements.

    Args:
        objectives: Learning objectives list.
        skills: Skills list.
        activities: Activities list.
        rubric: Rubric object, if any.
        resource_count: Number of resources attached to the unit.

    Returns:
        CompletenessResult with the total, per-criterion points and the
        names of criteria that earned nothing.
    """
    present = {
        "objectives": isinstance(objectives, list) and len(objectives) > 0,
        "skills": isinstance(skills, list) and len(skills) > 0,
        "activities": isinstance(activities, list) and len(activities) > 0,
        "rubric": _present(rubric),
        "resources": resource_count > 0,
    }

    breakdown = {name: WEIGHTS[name] if ok else 0 for name, ok in present.items()}
    missing = [name for name, ok in present.items() if not ok]

    return CompletenessResult(
        score=sum(breakdown.values()),
        breakdown=breakdown,
        missing=missing,
    )
