# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content suggestions for units.

Two providers share the SuggestionProvider interface:

- LLMSuggestionProvider asks the configured model for JSON suggestions
  and falls back to rules when the call fails.
- RuleBasedSuggestionProvider derives suggestions from the unit's own
  skills and difficulty without any network access.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from src.core.intelligence.llm.client import LLMClient, LLMError
from src.models.unit import Suggestions

logger = logging.getLogger(__name__)

SKILL_ACTIVITIES: dict[str, list[str]] = {
    "listening": ["Gap-fill while listening to a short dialogue", "Listen and order events"],
    "speaking": ["Pair role-play with prompt cards", "Two-minute timed talk"],
    "reading": ["Skim for gist, then scan for details", "Jigsaw reading in groups"],
    "writing": ["Guided paragraph with a model text", "Peer review with a checklist"],
    "grammar": ["Discover the rule from example sentences", "Sentence transformation drill"],
    "vocabulary": ["Word map with collocations", "Context-clue guessing game"],
}

DEFAULT_ACTIVITIES = ["Warm-up discussion", "Exit ticket reflection"]

SYSTEM_PROMPT = (
    "You are an experienced language curriculum designer. "
    "Reply with a single JSON object with the keys "
    '"objectives", "activities" and "assessment", each a list of short strings.'
)


class SuggestionProvider(ABC):
    """Produces content suggestions for a unit."""

    name: str = "base"

    @abstractmethod
    async def suggest(self, unit: dict[str, Any]) -> tuple[Suggestions, str]:
        """Return suggestions and the name of the source that produced them."""


class RuleBasedSuggestionProvider(SuggestionProvider):
    name = "rules"

    async def suggest(self, unit: dict[str, Any]) -> tuple[Suggestions, str]:
        skills = [str(s).lower() for s in unit.get("skills") or []]
        level = unit.get("difficulty_level") or "intermediate"
        title = unit.get("title") or "this unit"

        objectives = [f"Students can use the key language of {title} at {level} level"]
        objectives += [f"Develop {skill} skills through guided practice" for skill in skills]
        if not unit.get("objectives"):
            objectives.append("Write measurable objectives starting with an action verb")

        activities: list[str] = []
        for skill in skills:
            activities.extend(SKILL_ACTIVITIES.get(skill, []))
        if not activities:
            activities = list(DEFAULT_ACTIVITIES)

        assessment = ["Short formative quiz at the end of the unit"]
        if not unit.get("rubric"):
            assessment.append("Add a rubric with weighted criteria")
        if "speaking" in skills:
            assessment.append("Recorded speaking task scored on fluency and accuracy")
        if "writing" in skills:
            assessment.append("Written task scored with an analytic rubric")

        return Suggestions(objectives=objectives, activities=activities, assessment=assessment), self.name


class LLMSuggestionProvider(SuggestionProvider):
    """Suggestions from an LLM, with rule-based fallback."""

    name = "llm"

    def __init__(
        self,
        client: LLMClient,
        fallback: SuggestionProvider | None = None,
    ) -> None:
        self._client = client
        self._fallback = fallback or RuleBasedSuggestionProvider()

    async def suggest(self, unit: dict[str, Any]) -> tuple[Suggestions, str]:
        prompt = (
            f"Unit title: {unit.get('title')}\n"
            f"Difficulty: {unit.get('difficulty_level')}\n"
            f"Skills: {', '.join(map(str, unit.get('skills') or [])) or 'none'}\n"
            f"Current objectives: {unit.get('objectives') or []}\n"
            f"Current activities: {unit.get('activities') or []}\n"
            "Suggest improved objectives, activities and assessment ideas."
        )

        try:
            data = await self._client.complete_json(prompt=prompt, system_prompt=SYSTEM_PROMPT)
            suggestions = Suggestions(
                objectives=_strings(data.get("objectives")),
                activities=_strings(data.get("activities")),
                assessment=_strings(data.get("assessment")),
            )
        except LLMError as e:
            logger.warning("LLM suggestions failed, using rules: %s", str(e))
            return await self._fallback.suggest(unit)

        return suggestions, self.name


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v]


def build_suggestion_provider(llm_client: LLMClient | None) -> SuggestionProvider:
    """Pick the provider for the current configuration."""
    if llm_client is None or not llm_client.model:
        return RuleBasedSuggestionProvider()
    return LLMSuggestionProvider(llm_client)
