"""Provider backed by a local Ollama server.

Ollama's ``/api/chat`` endpoint is stateless, so the conversation cursor is
the message history kept on the :class:`ConversationSession`. System
instructions are prepended for the current call only and are never stored in
the history.

Typical usage::

    provider = OllamaProvider()
    if await provider.is_available():
        session = provider.new_session()
        reply = await provider.send(session, "I want a chat app")
"""

from __future__ import annotations

from typing import Any

import httpx

from launchpad.errors import BackendError
from launchpad.logging import get_logger
from launchpad.providers.base import ConversationSession, HTTPProvider

logger = get_logger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "qwen2.5-coder:32b"


class OllamaProvider(HTTPProvider):
    """Async provider for the Ollama REST API at localhost:11434."""

    name = "Ollama"

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_URL,
        model: str = DEFAULT_OLLAMA_MODEL,
        timeout: int = 120,
        max_attempts: int = 3,
        backoff_seconds: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            max_attempts=max_attempts,
            backoff_seconds=backoff_seconds,
            transport=transport,
        )
        self.model = model or DEFAULT_OLLAMA_MODEL

    @staticmethod
    def _extract_text(data: dict) -> str:
        """Pull the assistant text out of a non-streaming ``/api/chat`` response."""
        message = data.get("message") or {}
        if not isinstance(message, dict):
            return ""
        return str(message.get("content") or "").strip()

    # ------------------------------------------------------------------
    # Provider contract
    # ------------------------------------------------------------------

    async def send(
        self,
        session: ConversationSession,
        message: str,
        instructions: str = "",
    ) -> str:
        messages: list[dict[str, str]] = []
        if instructions:
            messages.append({"role": "system", "content": instructions})
        messages.extend(session.history)
        user_message = {"role": "user", "content": message}
        messages.append(user_message)

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "stream": False,
        }
        data = await self._post_json("/api/chat", payload)

        text = self._extract_text(data)
        if not text:
            raise BackendError(f"empty response from Ollama model {self.model!r}")

        session.history.append(user_message)
        session.history.append({"role": "assistant", "content": text})
        session.turns += 1
        logger.debug("Ollama turn %d complete (%d messages)", session.turns, len(session.history))
        return text

    # ------------------------------------------------------------------
    # Server probes
    # ------------------------------------------------------------------

    async def is_available(self) -> bool:
        """Return ``True`` if the Ollama server responds to ``/api/tags``."""
        try:
            async with self._client() as client:
                response = await client.get("/api/tags")
                return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def list_models(self) -> list[str]:
        """Return the sorted names of all locally-available models.

        Returns an empty list if the server is unreachable.
        """
        try:
            async with self._client() as client:
                response = await client.get("/api/tags")
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError):
            return []
        models = data.get("models", []) if isinstance(data, dict) else []
        return sorted(m.get("name", "") for m in models if m.get("name"))

    async def has_model(self, model: str | None = None) -> bool:
        """Check whether *model* (default: the configured model) is pulled locally."""
        available = await self.list_models()
        return (model or self.model) in available
