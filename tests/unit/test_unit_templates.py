# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for built-in unit templates."""

from src.domains.unit.templates import (
    get_template,
    list_templates,
    unit_fields_from_template,
)


class TestListTemplates:
    def test_all_templates(self) -> None:
        templates = list_templates()

        assert [t.id for t in templates] == ["template-1", "template-2", "template-3"]
        assert [t.duration_minutes for t in templates] == [120, 90, 150]

    def test_filter_by_level(self) -> None:
        templates = list_templates(level="advanced")

        assert [t.name for t in templates] == ["Reading Comprehension Unit"]

    def test_filter_by_skill(self) -> None:
        templates = list_templates(skill="speaking")

        assert [t.id for t in templates] == ["template-1"]

    def test_no_match(self) -> None:
        assert list_templates(level="beginner", skill="grammar") == []


class TestUnitFieldsFromTemplate:
    def test_defaults(self) -> None:
        template = get_template("template-2")

        fields = unit_fields_from_template(template)

        assert fields["title"] == "Grammar Focus Unit"
        assert fields["difficulty_level"] == "intermediate"
        assert fields["skills"] == ["grammar", "writing"]
        assert fields["hours"] == 1.5
        assert fields["estimated_time"] == 90
        assert len(fields["activities"]) == 3

    def test_customizations_override(self) -> None:
        template = get_template("template-1")

        fields = unit_fields_from_template(
            template,
            {"title": "Meeting New Friends", "hours": 3, "unknown": "ignored", "notes": None},
        )

        assert fields["title"] == "Meeting New Friends"
        assert fields["hours"] == 3
        assert "unknown" not in fields
        assert "notes" not in fields

    def test_activities_are_copied(self) -> None:
        template = get_template("template-1")

        fields = unit_fields_from_template(template)
        fields["activities"][0]["title"] = "Changed"

        assert template.activities[0]["title"] == "Greeting circle"

    def test_unknown_template(self) -> None:
        assert get_template("template-99") is None
