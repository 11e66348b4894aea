"""Expansion of a validated selection into the context assets to generate from."""

from __future__ import annotations

from launchpad.catalog.models import ADDON_PREFIX, PROFILE_PREFIX, ContextAsset
from launchpad.catalog.registry import (
    DEFAULT_UI_ASSETS,
    FRONTEND_CRAFT,
    Catalog,
    get_catalog,
)
from launchpad.errors import ResolutionError
from launchpad.logging import get_logger
from launchpad.selection.models import Selection

logger = get_logger(__name__)


def _with_prefix(value: str, prefix: str) -> str:
    return value if value.startswith(prefix) else prefix + value


def candidate_ids(selection: Selection, catalog: Catalog | None = None) -> list[str]:
    """Ordered, un-deduplicated list of IDs a selection expands to.

    Order: core base set, profile, add-ons, explicit assets, then the visual
    defaults for UI profiles (frontend-craft, and a palette / font pairing
    only where the selection has none in that category).
    """
    catalog = catalog or get_catalog()
    ids: list[str] = list(catalog.core_ids)

    if selection.profile_id:
        ids.append(_with_prefix(selection.profile_id, PROFILE_PREFIX))
    ids.extend(_with_prefix(a, ADDON_PREFIX) for a in selection.addon_ids if a)
    ids.extend(selection.asset_ids)

    profile = catalog.profile(selection.profile_id)
    if profile is not None and profile.has_ui:
        ids.append(ADDON_PREFIX + FRONTEND_CRAFT)
        selected_categories = {
            asset.category
            for asset in (catalog.get(a) for a in selection.asset_ids)
            if asset is not None
        }
        for category, default_id in DEFAULT_UI_ASSETS.items():
            if category not in selected_categories:
                ids.append(default_id)

    return ids


def resolve_assets(selection: Selection, catalog: Catalog | None = None) -> list[ContextAsset]:
    """Resolve *selection* to an ordered, de-duplicated list of assets.

    The walk is single-pass and order-preserving so identical selections
    always produce identical generation prompts.

    Raises:
        ResolutionError: Naming the first ID that is not in the catalog.
    """
    catalog = catalog or get_catalog()
    seen: set[str] = set()
    resolved: list[ContextAsset] = []

    for asset_id in candidate_ids(selection, catalog):
        if not asset_id or asset_id in seen:
            continue
        asset = catalog.get(asset_id)
        if asset is None:
            raise ResolutionError(asset_id)
        seen.add(asset_id)
        resolved.append(asset)

    logger.debug("Resolved %d context assets: %s", len(resolved), [a.id for a in resolved])
    return resolved
