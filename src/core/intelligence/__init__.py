# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intelligence module for AI-powered operations.

LiteLLM is the single interface for generative calls, so any provider
it supports (Ollama, OpenAI, Anthropic, Google) can back unit suggestions.
"""
