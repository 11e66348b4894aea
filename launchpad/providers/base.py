"""Provider contract and the shared HTTP retry loop.

A provider sends one user message (plus optional system instructions) to a
conversational backend and returns the assistant's reply. Conversation state
lives in a caller-owned :class:`ConversationSession` that is passed into every
call, so one provider instance can serve several conversations side by side
as long as each conversation keeps its own session.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx

from launchpad.errors import BackendError, RateLimitError
from launchpad.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ConversationSession:
    """Cursor correlating a call with the calls before it.

    Providers only mutate the session after a successful call. A session must
    not be shared between concurrent conversations.
    """

    previous_response_id: str | None = None
    history: list[dict[str, str]] = field(default_factory=list)
    turns: int = 0


class Provider(ABC):
    """A stateful conversational backend."""

    def new_session(self) -> ConversationSession:
        """Return a fresh, empty conversation cursor."""
        return ConversationSession()

    @abstractmethod
    async def send(
        self,
        session: ConversationSession,
        message: str,
        instructions: str = "",
    ) -> str:
        """Send *message* and return the assistant reply.

        *instructions* are used for this call only; callers that need framing
        must resend it on every call.

        Raises:
            BackendError: On transport failure, a non-success status, an
                undecodable body, or a reply without usable text.
        """


class HTTPProvider(Provider):
    """Base for JSON-over-HTTP backends with bounded rate-limit retries.

    HTTP 429 is retried up to ``max_attempts`` times with linear backoff
    (``attempt * backoff_seconds``). Every other non-2xx status and every
    transport error is terminal for the call.
    """

    name = "backend"

    def __init__(
        self,
        base_url: str,
        timeout: int = 120,
        max_attempts: int = 3,
        backoff_seconds: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds
        self._transport = transport

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers=self._headers(),
            transport=self._transport,
        )

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    async def _post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST *payload* and return the decoded JSON body.

        Retries on HTTP 429 only. Cancellation propagates from both the
        request and the backoff sleep.
        """
        async with self._client() as client:
            for attempt in range(1, self.max_attempts + 1):
                try:
                    response = await client.post(path, json=payload)
                except httpx.TimeoutException as exc:
                    raise BackendError(
                        f"Request to {self.name} timed out after {self.timeout}s."
                    ) from exc
                except httpx.ConnectError as exc:
                    raise BackendError(
                        f"Cannot connect to {self.name} at {self.base_url}. Is it reachable?"
                    ) from exc
                except httpx.HTTPError as exc:
                    raise BackendError(f"HTTP error talking to {self.name}: {exc}") from exc

                if response.status_code == 429:
                    logger.warning(
                        "%s rate limited the request (attempt %d/%d)",
                        self.name, attempt, self.max_attempts,
                    )
                    if attempt < self.max_attempts:
                        await asyncio.sleep(attempt * self.backoff_seconds)
                    continue

                if not response.is_success:
                    raise BackendError(
                        f"{self.name} API error (HTTP {response.status_code}): "
                        f"{response.text[:500]}",
                        status_code=response.status_code,
                    )

                try:
                    data = response.json()
                except ValueError as exc:
                    raise BackendError(
                        f"Could not decode {self.name} response: {exc}",
                        status_code=response.status_code,
                    ) from exc
                if not isinstance(data, dict):
                    raise BackendError(
                        f"Unexpected {self.name} response shape: {type(data).__name__}",
                        status_code=response.status_code,
                    )
                return data

        raise RateLimitError(
            f"{self.name} rate limited after {self.max_attempts} attempts -- "
            "wait a moment and try again",
            status_code=429,
        )
