"""Shared pytest fixtures for the Launchpad test suite.

Provides reusable fixtures for:
- A scripted in-memory provider that replays canned replies
- Sample conversation, extraction and generation replies
- Sample selections
- Engines wired to the scripted provider
- httpx mock transports for provider tests
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from launchpad.catalog import ContentStore, get_catalog
from launchpad.engine import ConversationEngine
from launchpad.providers.base import ConversationSession, Provider
from launchpad.selection.models import Selection


# ---------------------------------------------------------------------------
# Scripted provider
# ---------------------------------------------------------------------------

class ScriptedProvider(Provider):
    """Provider that replays a fixed list of replies.

    A reply that is an ``Exception`` instance is raised instead of returned.
    Every call is recorded as ``(message, instructions)`` in :attr:`calls`.
    """

    def __init__(self, replies: list[str | Exception]) -> None:
        self.replies = list(replies)
        self.calls: list[tuple[str, str]] = []

    async def send(
        self,
        session: ConversationSession,
        message: str,
        instructions: str = "",
    ) -> str:
        self.calls.append((message, instructions))
        if not self.replies:
            raise AssertionError(f"unexpected provider call: {message[:80]!r}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        session.turns += 1
        session.previous_response_id = f"resp_{session.turns}"
        return reply


# ---------------------------------------------------------------------------
# Sample replies
# ---------------------------------------------------------------------------

SCOPE_REPLY = (
    "Nice idea! A few questions:\n"
    "1. Do voters need accounts?\n"
    "2. Should results update live?\n"
    "3. Any limit on room size?"
)

OPTIONS_REPLY = (
    "* elixir-phoenix: LiveView and Presence make live voting trivial. `mix phx.new voting`\n"
    "typescript-sveltekit: great SSR with websockets. Which stack do you want?"
)

READY_REPLY = "Great choice, going with elixir-phoenix.\nREADY_TO_GENERATE"

SELECTION_JSON = json.dumps({
    "profile_id": "elixir-phoenix",
    "addon_ids": ["frontend-craft"],
    "asset_ids": ["asset.testing.pragmatic"],
    "confidence": 0.91,
    "rationale": "Real-time voting fits LiveView and Presence.",
})

GENERATION_REPLY = (
    "===FILE: .github/copilot-instructions.md===\n"
    "# Copilot instructions\nUse Phoenix contexts.\n"
    "===END_FILE===\n"
    "===FILE: .github/instructions/elixir-phoenix.instructions.md===\n"
    "---\napplyTo: '**/*.{ex,exs,heex,leex}'\n---\nLiveView conventions.\n"
    "===END_FILE===\n"
    "===FILE: AGENTS.md===\n"
    "# Agents\n"
    "===END_FILE===\n"
)


@pytest.fixture
def selection_json() -> str:
    """Well-formed extraction reply for an elixir-phoenix selection."""
    return SELECTION_JSON


@pytest.fixture
def generation_reply() -> str:
    """Generation reply with three file blocks."""
    return GENERATION_REPLY


@pytest.fixture
def phoenix_selection() -> Selection:
    """A valid, confident selection for a UI profile."""
    return Selection(
        profile_id="elixir-phoenix",
        addon_ids=("frontend-craft",),
        asset_ids=("asset.testing.pragmatic",),
        confidence=0.91,
        rationale="Real-time voting fits LiveView and Presence.",
    )


@pytest.fixture
def go_selection() -> Selection:
    """A valid, confident selection for a non-UI profile."""
    return Selection(
        profile_id="go-service",
        addon_ids=("data-intensive",),
        asset_ids=("asset.lint.strict",),
        confidence=0.85,
        rationale="High-throughput ingestion service.",
    )


# ---------------------------------------------------------------------------
# Catalog & engine
# ---------------------------------------------------------------------------

@pytest.fixture
def catalog():
    """The bundled catalog."""
    return get_catalog()


@pytest.fixture
def content_store() -> ContentStore:
    """Content store over the bundled templates."""
    return ContentStore()


@pytest.fixture
def scripted_provider() -> Callable[..., ScriptedProvider]:
    """Factory building a :class:`ScriptedProvider` from replies."""
    def _factory(*replies: str | Exception) -> ScriptedProvider:
        return ScriptedProvider(list(replies))
    return _factory


@pytest.fixture
def make_engine(catalog, content_store) -> Callable[..., tuple[ConversationEngine, ScriptedProvider]]:
    """Factory returning ``(engine, provider)`` for the given replies."""
    def _factory(*replies: str | Exception, project_name: str = "voting-app"):
        provider = ScriptedProvider(list(replies))
        engine = ConversationEngine(
            provider,
            project_name=project_name,
            catalog=catalog,
            content_store=content_store,
        )
        return engine, provider
    return _factory


# ---------------------------------------------------------------------------
# HTTP mocking
# ---------------------------------------------------------------------------

class RecordingHandler:
    """Callable for ``httpx.MockTransport`` replaying queued responses.

    Each queued item is either an ``httpx.Response`` or an exception to raise.
    Requests are recorded with their decoded JSON bodies.
    """

    def __init__(self, responses: list[httpx.Response | Exception]) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []
        self.bodies: list[dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.content:
            self.bodies.append(json.loads(request.content))
        if not self.responses:
            raise AssertionError(f"unexpected request to {request.url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def mock_transport() -> Callable[..., tuple[httpx.MockTransport, RecordingHandler]]:
    """Factory returning ``(transport, handler)`` for queued responses."""
    def _factory(*responses: httpx.Response | Exception):
        handler = RecordingHandler(list(responses))
        return httpx.MockTransport(handler), handler
    return _factory


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary directory for generated projects (auto-cleanup)."""
    project_dir = tmp_path / "voting-app"
    project_dir.mkdir()
    yield project_dir
