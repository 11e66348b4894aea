"""Typed extraction of the stack decision from raw backend output.

The backend is asked for bare JSON but routinely wraps it in code fences or
surrounds it with prose, and is not reliable about ID prefixes. This module
is the single point that turns such a reply into a canonical
:class:`~launchpad.selection.models.Selection`.
"""

from __future__ import annotations

import pydantic

from launchpad.catalog.models import ADDON_PREFIX, PROFILE_PREFIX
from launchpad.errors import ExtractionError
from launchpad.logging import get_logger
from launchpad.selection.models import Selection

logger = get_logger(__name__)

_FENCE_OPENERS = ("```json", "```JSON", "```")
_FENCE_CLOSER = "```"


def _strip_fences(text: str) -> str:
    clean = text.strip()
    for opener in _FENCE_OPENERS:
        if clean.startswith(opener):
            clean = clean[len(opener):]
            break
    if clean.endswith(_FENCE_CLOSER):
        clean = clean[: -len(_FENCE_CLOSER)]
    return clean.strip()


def _json_slice(raw: str) -> str:
    """Return the candidate JSON object from *raw*.

    Fences are stripped first; then, if an object is embedded in prose, the
    text from the first ``{`` to the last ``}`` is kept.
    """
    clean = _strip_fences(raw)
    start = clean.find("{")
    end = clean.rfind("}")
    if start != -1 and end > start:
        clean = clean[start : end + 1]
    return clean


def _dedupe(ids: list[str]) -> tuple[str, ...]:
    """Drop blanks and repeats, keeping the first occurrence's position."""
    seen: set[str] = set()
    result: list[str] = []
    for item in ids:
        if not item or item in seen:
            continue
        seen.add(item)
        result.append(item)
    return tuple(result)


def _strip_prefix(value: str, prefix: str) -> str:
    value = value.strip()
    if value.startswith(prefix):
        return value[len(prefix):].strip()
    return value


def normalize_selection(selection: Selection) -> Selection:
    """Return *selection* with canonical, de-duplicated IDs.

    * ``profile.`` is stripped from the profile ID.
    * ``addon.`` is stripped from each add-on ID; blanks and repeats dropped.
    * Asset IDs that are blank or look like profile/add-on IDs are dropped
      (they are extraction mistakes, not asset references), as are repeats.
    """
    profile_id = _strip_prefix(selection.profile_id, PROFILE_PREFIX)
    addon_ids = _dedupe([_strip_prefix(a, ADDON_PREFIX) for a in selection.addon_ids])
    asset_ids = _dedupe([
        a.strip()
        for a in selection.asset_ids
        if not a.strip().startswith((PROFILE_PREFIX, ADDON_PREFIX))
    ])
    return selection.model_copy(
        update={"profile_id": profile_id, "addon_ids": addon_ids, "asset_ids": asset_ids}
    )


def extract_selection(raw: str) -> Selection:
    """Parse a backend reply into a normalized ``Selection``.

    Args:
        raw: The backend's reply to the extraction prompt.

    Returns:
        A canonical ``Selection``.

    Raises:
        ExtractionError: If the reply holds no JSON object or the object does
            not match the selection shape. The message includes *raw*.
    """
    candidate = _json_slice(raw or "")
    if not candidate:
        raise ExtractionError("parse selection: empty decision output", raw=raw or "")

    try:
        selection = Selection.model_validate_json(candidate)
    except pydantic.ValidationError as exc:
        raise ExtractionError(f"parse selection: {exc}", raw=raw) from exc

    normalized = normalize_selection(selection)
    logger.debug(
        "Extracted selection profile=%s addons=%s assets=%s confidence=%.2f",
        normalized.profile_id,
        list(normalized.addon_ids),
        list(normalized.asset_ids),
        normalized.confidence,
    )
    return normalized
