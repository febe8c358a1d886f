# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LLM client module using LiteLLM.

Example:
    >>> from src.core.intelligence.llm import LLMClient
    >>> client = LLMClient(llm_settings=settings.llm)
    >>> response = await client.complete_json("Suggest unit objectives as JSON")
"""

from src.core.intelligence.llm.client import (
    LLMClient,
    LLMError,
    LLMResponse,
)

__all__ = [
    "LLMClient",
    "LLMError",
    "LLMResponse",
]
