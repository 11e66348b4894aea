"""Launchpad conversation engine.

Drives one run of the selection and generation pipeline:

AWAITING_FIRST_INPUT -- the user has not said anything yet.
IN_CONVERSATION      -- scope/options turns; loops until the readiness marker.
READY_FOR_EXTRACTION -- the backend emitted the readiness marker.
EXTRACTING           -- a silent round-trip turned the thread into a Selection.
GENERATING           -- the gated selection is being synthesized into files.
DONE                 -- files were produced.
FAILED               -- any unrecoverable error; terminal.

Usage::

    engine = ConversationEngine(provider, project_name="my-app")
    reply = await engine.chat("A real-time voting app")
    while not engine.is_ready:
        reply = await engine.chat(input())
    selection = await engine.extract_decision()
    files = await engine.generate_files()
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TypeVar

from launchpad.catalog.content import ContentStore
from launchpad.catalog.registry import Catalog, get_catalog
from launchpad.errors import (
    ConfidenceError,
    EmptyOutputError,
    EngineStateError,
    InputError,
    LaunchpadError,
    ValidationError,
)
from launchpad.generation.file_blocks import FileOutput, parse_file_blocks
from launchpad.generation.prompts import (
    READY_TOKEN,
    build_generation_prompt,
    conversation_system_prompt,
    extraction_prompt,
)
from launchpad.logging import get_logger
from launchpad.providers.base import ConversationSession, Provider
from launchpad.selection.extractor import extract_selection
from launchpad.selection.models import Selection
from launchpad.selection.resolver import resolve_assets
from launchpad.selection.validator import validate_selection

logger = get_logger(__name__)

T = TypeVar("T")

# Minimum self-reported confidence required before generation. Model
# confidence is uncalibrated; this only catches conversations that were too
# vague to produce a useful selection.
CONFIDENCE_THRESHOLD = 0.72

_READY_VARIANTS = (READY_TOKEN, READY_TOKEN.replace("_", " "))


class EngineState(str, Enum):
    """Lifecycle of a single conversation run."""
    AWAITING_FIRST_INPUT = "awaiting_first_input"
    IN_CONVERSATION = "in_conversation"
    READY_FOR_EXTRACTION = "ready_for_extraction"
    EXTRACTING = "extracting"
    GENERATING = "generating"
    DONE = "done"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Readiness marker
# ---------------------------------------------------------------------------


def is_ready(reply: str) -> bool:
    """Return ``True`` if *reply* contains the readiness marker (any case)."""
    normalized = reply.strip().upper()
    return any(marker in normalized for marker in _READY_VARIANTS)


def strip_ready_marker(reply: str) -> str:
    """Remove the readiness marker from *reply* for display."""
    display = reply
    for marker in _READY_VARIANTS:
        idx = display.upper().find(marker)
        while idx != -1:
            display = display[:idx] + display[idx + len(marker):]
            idx = display.upper().find(marker)
    return display.strip()


def check_selection(selection: Selection, catalog: Catalog | None = None) -> None:
    """Apply the compatibility and confidence gates to *selection*.

    Raises:
        ValidationError: With every compatibility issue found.
        ConfidenceError: If the selection's confidence is below the gate.
    """
    issues = validate_selection(selection, catalog)
    if issues:
        raise ValidationError(issues)
    if selection.confidence < CONFIDENCE_THRESHOLD:
        raise ConfidenceError(selection.confidence, CONFIDENCE_THRESHOLD)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ConversationEngine:
    """Orchestrates the multi-turn conversation and generation workflow.

    All backend communication goes through the :class:`Provider`; the engine
    owns the :class:`ConversationSession` for its conversation, so several
    engines may share one provider instance.

    Attributes:
        project_name: Name substituted into scaffold commands and prompts.
        state: Current :class:`EngineState`.
        selection: The extracted selection, once available.
        error: The error that moved the engine to ``FAILED``, if any.
    """

    def __init__(
        self,
        provider: Provider,
        project_name: str,
        catalog: Catalog | None = None,
        content_store: ContentStore | None = None,
        session: ConversationSession | None = None,
    ) -> None:
        self.provider = provider
        self.project_name = project_name
        self.catalog = catalog or get_catalog()
        self.content_store = content_store or ContentStore()
        self.session = session or provider.new_session()
        self.state = EngineState.AWAITING_FIRST_INPUT
        self.selection: Selection | None = None
        self.error: LaunchpadError | None = None
        self._system_prompt = conversation_system_prompt(self.catalog)

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        """``True`` once the conversation may move on to extraction."""
        return self.state is EngineState.READY_FOR_EXTRACTION

    def _require(self, *states: EngineState) -> None:
        if self.state not in states:
            expected = ", ".join(s.value for s in states)
            raise EngineStateError(
                f"cannot do that while {self.state.value} (expected: {expected})"
            )

    def _transition(self, new_state: EngineState) -> None:
        logger.debug("Engine state %s -> %s", self.state.value, new_state.value)
        self.state = new_state

    async def _guarded(self, step: Callable[[], Awaitable[T]]) -> T:
        """Run *step*, moving to ``FAILED`` on any Launchpad error or cancellation."""
        try:
            return await step()
        except LaunchpadError as exc:
            self.error = exc
            self._transition(EngineState.FAILED)
            logger.info("Run failed: %s", exc)
            raise
        except asyncio.CancelledError:
            self._transition(EngineState.FAILED)
            logger.info("Run cancelled while %s", self.state.value)
            raise

    # ------------------------------------------------------------------
    # Conversation
    # ------------------------------------------------------------------

    async def chat(self, message: str) -> str:
        """Send a user message and return the assistant's reply.

        The conversation instructions are sent with every call because the
        backend does not retain them between turns.

        Raises:
            InputError: If *message* is blank.
            BackendError: If the backend call fails.
        """
        self._require(EngineState.AWAITING_FIRST_INPUT, EngineState.IN_CONVERSATION)

        async def _step() -> str:
            text = message.strip()
            if not text:
                raise InputError("empty message -- please describe what you're building")
            if self.state is EngineState.AWAITING_FIRST_INPUT:
                text = f'Project name: "{self.project_name}". What I\'m building: {text}'

            reply = await self.provider.send(self.session, text, self._system_prompt)
            self._transition(EngineState.IN_CONVERSATION)
            if is_ready(reply):
                self._transition(EngineState.READY_FOR_EXTRACTION)
            return reply

        return await self._guarded(_step)

    def request_extraction(self) -> None:
        """Move on to extraction without waiting for the readiness marker."""
        self._require(EngineState.IN_CONVERSATION, EngineState.READY_FOR_EXTRACTION)
        self._transition(EngineState.READY_FOR_EXTRACTION)

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    async def extract_decision(self) -> Selection:
        """Silently ask the backend for the decision and parse it.

        The reply is never shown to the user. Failure is terminal for the run.

        Raises:
            ExtractionError: If the reply cannot be parsed into a Selection.
            BackendError: If the backend call fails.
        """
        self._require(EngineState.READY_FOR_EXTRACTION)

        async def _step() -> Selection:
            self._transition(EngineState.EXTRACTING)
            raw = await self.provider.send(self.session, extraction_prompt(self.catalog))
            self.selection = extract_selection(raw)
            logger.info(
                "Extracted selection: profile=%s confidence=%.2f",
                self.selection.profile_id, self.selection.confidence,
            )
            return self.selection

        return await self._guarded(_step)

    def preview_issues(self, selection: Selection | None = None) -> list[str]:
        """Compatibility issues for *selection* (default: the extracted one)."""
        target = selection or self.selection
        if target is None:
            return ["no selection has been extracted"]
        return validate_selection(target, self.catalog)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate_files(self) -> list[FileOutput]:
        """Gate the extracted selection and synthesize it into files.

        Raises:
            ValidationError: If the selection breaks compatibility rules.
            ConfidenceError: If the selection's confidence is below the gate.
            ResolutionError: If a selected ID is missing from the catalog.
            MalformedOutputError: If a file block is unterminated.
            EmptyOutputError: If the reply contained no file blocks.
            BackendError: If the backend call fails.
        """
        self._require(EngineState.EXTRACTING)

        async def _step() -> list[FileOutput]:
            if self.selection is None:
                raise EngineStateError("no selection has been extracted")
            check_selection(self.selection, self.catalog)
            self._transition(EngineState.GENERATING)

            assets = resolve_assets(self.selection, self.catalog)
            prompt = build_generation_prompt(
                self.project_name, self.selection, assets, self.content_store, self.catalog
            )
            raw = await self.provider.send(self.session, prompt)
            files = parse_file_blocks(raw, strict=True)
            if not files:
                raise EmptyOutputError(
                    "model returned no file blocks -- try running again with more detail "
                    "about your project"
                )

            self._transition(EngineState.DONE)
            logger.info("Generated %d file(s) from %d assets", len(files), len(assets))
            return files

        return await self._guarded(_step)
