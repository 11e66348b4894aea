"""Launchpad selection handling.

Turns the backend's decision reply into a canonical ``Selection``, checks it
against the catalog's compatibility rules, and resolves it into the ordered
context assets that feed generation.

Usage::

    from launchpad.selection import extract_selection, validate_selection, resolve_assets

    selection = extract_selection(reply)
    issues = validate_selection(selection)
    if not issues:
        assets = resolve_assets(selection)
"""

from launchpad.selection.extractor import extract_selection, normalize_selection
from launchpad.selection.models import Selection
from launchpad.selection.resolver import resolve_assets
from launchpad.selection.validator import validate_selection

__all__ = [
    "Selection",
    "extract_selection",
    "normalize_selection",
    "resolve_assets",
    "validate_selection",
]
