"""Unit tests for OpenAIProvider and the shared retry loop (launchpad.providers).

Tests cover:
- Construction (API key required, defaults)
- Request payload: model, input, per-call instructions, previous_response_id
- Response parsing: output_text and output[].content[] fallback
- Session advances only on success
- Retry on 429 with linear backoff, exhaustion -> RateLimitError
- Cancellation propagates from the backoff sleep and from the request
- Terminal errors: non-2xx, transport failures, undecodable bodies, empty replies
- build_provider
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from launchpad.config import Config, OllamaConfig, OpenAIConfig
from launchpad.errors import BackendError, ConfigError, RateLimitError
from launchpad.providers import OllamaProvider, OpenAIProvider, build_provider


def _ok(response_id: str = "resp_1", text: str = "Hello there") -> httpx.Response:
    return httpx.Response(200, json={"id": response_id, "output_text": text})


def _provider(transport, **kwargs) -> OpenAIProvider:
    kwargs.setdefault("backoff_seconds", 0)
    return OpenAIProvider(api_key="sk-test", transport=transport, **kwargs)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestOpenAIProviderInit:
    @pytest.mark.unit
    def test_defaults(self):
        provider = OpenAIProvider(api_key="sk-test")
        assert provider.model == "gpt-4.1"
        assert provider.base_url == "https://api.openai.com/v1"
        assert provider.max_attempts == 3
        assert provider.backoff_seconds == 2.0

    @pytest.mark.unit
    @pytest.mark.parametrize("key", ["", "   "])
    def test_api_key_required(self, key):
        with pytest.raises(ConfigError):
            OpenAIProvider(api_key=key)

    @pytest.mark.unit
    def test_new_session_is_empty(self):
        session = OpenAIProvider(api_key="sk-test").new_session()
        assert session.previous_response_id is None
        assert session.turns == 0


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestOpenAIProviderSend:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_first_call_payload(self, mock_transport):
        transport, handler = mock_transport(_ok())
        provider = _provider(transport)
        session = provider.new_session()

        reply = await provider.send(session, "I want a chat app", "Be brief.")

        assert reply == "Hello there"
        request = handler.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/responses"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert handler.bodies[0] == {
            "model": "gpt-4.1",
            "input": "I want a chat app",
            "instructions": "Be brief.",
        }

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_threads_previous_response_id(self, mock_transport):
        transport, handler = mock_transport(_ok("resp_1"), _ok("resp_2"))
        provider = _provider(transport)
        session = provider.new_session()

        await provider.send(session, "first")
        await provider.send(session, "second")

        assert "previous_response_id" not in handler.bodies[0]
        assert handler.bodies[1]["previous_response_id"] == "resp_1"
        assert session.previous_response_id == "resp_2"
        assert session.turns == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_instructions_omitted_when_blank(self, mock_transport):
        transport, handler = mock_transport(_ok())
        provider = _provider(transport)
        await provider.send(provider.new_session(), "extract now")
        assert "instructions" not in handler.bodies[0]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_output_parts_fallback(self, mock_transport):
        body = {
            "id": "resp_9",
            "output": [
                {"type": "message", "content": [
                    {"type": "output_text", "text": "Part one."},
                    {"type": "output_text", "text": "  "},
                ]},
                {"type": "message", "content": [{"type": "output_text", "text": "Part two."}]},
            ],
        }
        transport, _ = mock_transport(httpx.Response(200, json=body))
        provider = _provider(transport)
        assert await provider.send(provider.new_session(), "hi") == "Part one.\nPart two."

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sessions_are_independent(self, mock_transport):
        transport, handler = mock_transport(_ok("resp_a"), _ok("resp_b"), _ok("resp_c"))
        provider = _provider(transport)
        session_a = provider.new_session()
        session_b = provider.new_session()

        await provider.send(session_a, "a1")
        await provider.send(session_b, "b1")
        await provider.send(session_a, "a2")

        assert "previous_response_id" not in handler.bodies[1]
        assert handler.bodies[2]["previous_response_id"] == "resp_a"


# ---------------------------------------------------------------------------
# Retry behaviour
# ---------------------------------------------------------------------------


class TestRetry:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_retries_after_rate_limit(self, mock_transport):
        transport, handler = mock_transport(
            httpx.Response(429, json={"error": "slow down"}),
            httpx.Response(429, json={"error": "slow down"}),
            _ok("resp_ok", "finally"),
        )
        provider = _provider(transport, backoff_seconds=2.0)
        session = provider.new_session()

        with patch("launchpad.providers.base.asyncio.sleep", new_callable=AsyncMock) as sleep:
            reply = await provider.send(session, "hi")

        assert reply == "finally"
        assert len(handler.requests) == 3
        assert [c.args[0] for c in sleep.await_args_list] == [2.0, 4.0]
        assert session.previous_response_id == "resp_ok"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_rate_limit_exhausted(self, mock_transport):
        transport, handler = mock_transport(*(httpx.Response(429) for _ in range(3)))
        provider = _provider(transport)
        session = provider.new_session()

        with pytest.raises(RateLimitError) as exc_info:
            await provider.send(session, "hi")

        assert exc_info.value.status_code == 429
        assert len(handler.requests) == 3
        assert session.turns == 0
        assert session.previous_response_id is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_max_attempts_respected(self, mock_transport):
        transport, handler = mock_transport(httpx.Response(429))
        provider = _provider(transport, max_attempts=1)
        with pytest.raises(RateLimitError):
            await provider.send(provider.new_session(), "hi")
        assert len(handler.requests) == 1


class TestCancellation:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancel_during_backoff(self, mock_transport):
        transport, handler = mock_transport(httpx.Response(429), _ok())
        provider = _provider(transport, backoff_seconds=60.0)
        session = provider.new_session()

        task = asyncio.create_task(provider.send(session, "hi"))
        while not handler.requests:
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(handler.requests) == 1
        assert session.previous_response_id is None
        assert session.turns == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancel_during_request(self):
        entered = asyncio.Event()

        async def hang(request: httpx.Request) -> httpx.Response:
            entered.set()
            await asyncio.Event().wait()
            return _ok()

        provider = _provider(httpx.MockTransport(hang))
        session = provider.new_session()

        task = asyncio.create_task(provider.send(session, "hi"))
        await entered.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert session.previous_response_id is None
        assert session.turns == 0


# ---------------------------------------------------------------------------
# Terminal errors
# ---------------------------------------------------------------------------


class TestTerminalErrors:
    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 500, 503])
    async def test_non_success_not_retried(self, mock_transport, status):
        transport, handler = mock_transport(httpx.Response(status, text="boom"))
        provider = _provider(transport)
        session = provider.new_session()

        with pytest.raises(BackendError) as exc_info:
            await provider.send(session, "hi")

        assert exc_info.value.status_code == status
        assert not isinstance(exc_info.value, RateLimitError)
        assert len(handler.requests) == 1
        assert session.turns == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connect_error(self, mock_transport):
        transport, _ = mock_transport(httpx.ConnectError("refused"))
        provider = _provider(transport)
        with pytest.raises(BackendError, match="Cannot connect"):
            await provider.send(provider.new_session(), "hi")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self, mock_transport):
        transport, _ = mock_transport(httpx.ReadTimeout("slow"))
        provider = _provider(transport)
        with pytest.raises(BackendError, match="timed out"):
            await provider.send(provider.new_session(), "hi")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_undecodable_body(self, mock_transport):
        transport, _ = mock_transport(httpx.Response(200, text="<html>oops</html>"))
        provider = _provider(transport)
        with pytest.raises(BackendError, match="decode"):
            await provider.send(provider.new_session(), "hi")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_reply(self, mock_transport):
        transport, _ = mock_transport(httpx.Response(200, json={"id": "resp_1", "output": []}))
        provider = _provider(transport)
        session = provider.new_session()
        with pytest.raises(BackendError, match="empty response"):
            await provider.send(session, "hi")
        assert session.previous_response_id is None
        assert session.turns == 0


# ---------------------------------------------------------------------------
# build_provider
# ---------------------------------------------------------------------------


class TestBuildProvider:
    @pytest.mark.unit
    def test_openai(self):
        config = Config(openai=OpenAIConfig(api_key="sk-test", model="gpt-4o"))
        provider = build_provider(config)
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o"
        assert provider.timeout == 120

    @pytest.mark.unit
    def test_ollama(self):
        config = Config(provider="ollama", ollama=OllamaConfig(model="llama3.1:8b"))
        provider = build_provider(config)
        assert isinstance(provider, OllamaProvider)
        assert provider.model == "llama3.1:8b"

    @pytest.mark.unit
    def test_openai_without_key(self):
        with pytest.raises(ConfigError):
            build_provider(Config())
