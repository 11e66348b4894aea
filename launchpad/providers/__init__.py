"""Launchpad conversational backends.

Key classes:
    Provider             - Contract: send(session, message, instructions) -> reply
    ConversationSession  - Caller-owned conversation cursor
    OpenAIProvider       - OpenAI Responses API (previous_response_id threading)
    OllamaProvider       - Local Ollama chat API (history threading)
"""

from __future__ import annotations

from launchpad.config import Config
from launchpad.providers.base import ConversationSession, HTTPProvider, Provider
from launchpad.providers.ollama import OllamaProvider
from launchpad.providers.openai import OpenAIProvider


def build_provider(config: Config) -> Provider:
    """Instantiate the provider selected by *config*."""
    retry = config.retry
    if config.provider == "ollama":
        return OllamaProvider(
            base_url=config.ollama.url,
            model=config.ollama.model,
            timeout=retry.timeout,
            max_attempts=retry.max_attempts,
            backoff_seconds=retry.backoff_seconds,
        )
    return OpenAIProvider(
        api_key=config.openai.api_key,
        model=config.openai.model,
        base_url=config.openai.base_url,
        timeout=retry.timeout,
        max_attempts=retry.max_attempts,
        backoff_seconds=retry.backoff_seconds,
    )


__all__ = [
    "ConversationSession",
    "HTTPProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "Provider",
    "build_provider",
]
