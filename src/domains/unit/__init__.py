# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit blueprint domain."""

from src.domains.unit.completeness import MAX_SCORE, WEIGHTS, CompletenessResult, score_unit
from src.domains.unit.service import (
    InvalidSplitError,
    InvalidUnitOrderError,
    TemplateNotFoundError,
    UnitNotFoundError,
    UnitService,
    UnitServiceError,
    refresh_completeness,
)
from src.domains.unit.suggestions import (
    LLMSuggestionProvider,
    RuleBasedSuggestionProvider,
    SuggestionProvider,
    build_suggestion_provider,
)

__all__ = [
    "UnitService",
    "UnitServiceError",
    "UnitNotFoundError",
    "TemplateNotFoundError",
    "InvalidUnitOrderError",
    "InvalidSplitError",
    "refresh_completeness",
    "score_unit",
    "CompletenessResult",
    "MAX_SCORE",
    "WEIGHTS",
    "SuggestionProvider",
    "LLMSuggestionProvider",
    "RuleBasedSuggestionProvider",
    "build_suggestion_provider",
]
