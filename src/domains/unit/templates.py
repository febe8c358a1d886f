# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Built-in unit templates."""

from typing import Any

from src.models.unit import UnitTemplate

TEMPLATES: tuple[UnitTemplate, ...] = (
    UnitTemplate(
        id="template-1",
        name="Basic Conversation Unit",
        description="Everyday dialogues with guided listening and speaking practice.",
        level="beginner",
        skills=["listening", "speaking"],
        duration_minutes=120,
        objectives=[
            "Greet and introduce oneself",
            "Ask and answer simple personal questions",
        ],
        activities=[
            {"type": "warm_up", "title": "Greeting circle", "duration_minutes": 15},
            {"type": "listening", "title": "Model dialogue", "duration_minutes": 30},
            {"type": "pair_work", "title": "Role-play introductions", "duration_minutes": 45},
            {"type": "wrap_up", "title": "Class share", "duration_minutes": 30},
        ],
        rubric={
            "criteria": [
                {"name": "Fluency", "weight": 40},
                {"name": "Pronunciation", "weight": 30},
                {"name": "Interaction", "weight": 30},
            ]
        },
    ),
    UnitTemplate(
        id="template-2",
        name="Grammar Focus Unit",
        description="Presentation, controlled practice and written production of one structure.",
        level="intermediate",
        skills=["grammar", "writing"],
        duration_minutes=90,
        objectives=[
            "Identify the target structure in context",
            "Use the target structure accurately in writing",
        ],
        activities=[
            {"type": "presentation", "title": "Structure in context", "duration_minutes": 20},
            {"type": "controlled_practice", "title": "Gap fill", "duration_minutes": 30},
            {"type": "writing", "title": "Short paragraph", "duration_minutes": 40},
        ],
        rubric={
            "criteria": [
                {"name": "Accuracy", "weight": 60},
                {"name": "Range", "weight": 40},
            ]
        },
    ),
    UnitTemplate(
        id="template-3",
        name="Reading Comprehension Unit",
        description="Extended reading with vocabulary building and comprehension checks.",
        level="advanced",
        skills=["reading", "vocabulary"],
        duration_minutes=150,
        objectives=[
            "Skim and scan an authentic text",
            "Infer meaning of unknown vocabulary from context",
        ],
        activities=[
            {"type": "pre_reading", "title": "Prediction", "duration_minutes": 20},
            {"type": "reading", "title": "Skim and scan", "duration_minutes": 50},
            {"type": "vocabulary", "title": "Context clues", "duration_minutes": 40},
            {"type": "discussion", "title": "Critical response", "duration_minutes": 40},
        ],
        rubric={
            "criteria": [
                {"name": "Comprehension", "weight": 50},
                {"name": "Vocabulary", "weight": 30},
                {"name": "Critical thinking", "weight": 20},
            ]
        },
    ),
)

# Fields a caller may override when instantiating a template
CUSTOMIZABLE_FIELDS = frozenset(
    {
        "title",
        "objectives",
        "skills",
        "activities",
        "rubric",
        "homework",
        "hours",
        "difficulty_level",
        "estimated_time",
        "notes",
    }
)


def list_templates(level: str | None = None, skill: str | None = None) -> list[UnitTemplate]:
    """Return templates matching an optional level and skill."""
    templates = list(TEMPLATES)
    if level:
        templates = [t for t in templates if t.level == level]
    if skill:
        templates = [t for t in templates if skill in t.skills]
    return templates


def get_template(template_id: str) -> UnitTemplate | None:
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    return None


def unit_fields_from_template(
    template: UnitTemplate, customizations: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Build unit column values from a template.

    Unknown customization keys are ignored.
    """
    fields: dict[str, Any] = {
        "title": template.name,
        "objectives": list(template.objectives),
        "skills": list(template.skills),
        "activities": [dict(a) for a in template.activities],
        "rubric": template.rubric,
        "hours": round(template.duration_minutes / 60, 2),
        "difficulty_level": template.level,
        "estimated_time": template.duration_minutes,
    }
    for key, value in (customizations or {}).items():
        if key in CUSTOMIZABLE_FIELDS and value is not None:
            fields[key] = value
    return fields
