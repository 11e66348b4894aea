"""Provider backed by the OpenAI Responses API.

Conversation threading uses ``previous_response_id``: each successful call
stores the response ``id`` on the session and the next call sends it back.
The API does not carry ``instructions`` across that chain, so they are sent
per call.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, Field

from launchpad.errors import BackendError, ConfigError
from launchpad.logging import get_logger
from launchpad.providers.base import ConversationSession, HTTPProvider

logger = get_logger(__name__)

DEFAULT_OPENAI_URL = "https://api.openai.com/v1"
DEFAULT_OPENAI_MODEL = "gpt-4.1"


class _ContentPart(BaseModel):
    type: str = ""
    text: str = ""


class _OutputItem(BaseModel):
    content: list[_ContentPart] = Field(default_factory=list)


class ResponsesAPIResponse(BaseModel):
    """The subset of a ``/responses`` reply Launchpad reads."""

    id: str = ""
    output: list[_OutputItem] = Field(default_factory=list)
    output_text: str = ""

    def text(self) -> str:
        """Return ``output_text`` or, failing that, every text part joined by newlines."""
        if self.output_text.strip():
            return self.output_text.strip()
        parts = [
            part.text.strip()
            for item in self.output
            for part in item.content
            if part.text and part.text.strip()
        ]
        return "\n".join(parts).strip()


class OpenAIProvider(HTTPProvider):
    """Async provider for ``POST /v1/responses``."""

    name = "OpenAI"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_OPENAI_MODEL,
        base_url: str = DEFAULT_OPENAI_URL,
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
        self.api_key = api_key.strip()
        if not self.api_key:
            raise ConfigError(
                "an OpenAI API key is required -- set OPENAI_API_KEY or add it to .env"
            )
        self.model = model or DEFAULT_OPENAI_MODEL

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def send(
        self,
        session: ConversationSession,
        message: str,
        instructions: str = "",
    ) -> str:
        payload: dict[str, Any] = {"model": self.model, "input": message}
        if instructions:
            payload["instructions"] = instructions
        if session.previous_response_id:
            payload["previous_response_id"] = session.previous_response_id

        data = await self._post_json("/responses", payload)
        try:
            parsed = ResponsesAPIResponse.model_validate(data)
        except ValueError as exc:
            raise BackendError(f"decode OpenAI response: {exc}") from exc

        text = parsed.text()
        if not text:
            raise BackendError("empty response from API -- try again or check your input")

        session.previous_response_id = parsed.id or session.previous_response_id
        session.turns += 1
        logger.debug("OpenAI turn %d complete (response id %s)", session.turns, parsed.id)
        return text
