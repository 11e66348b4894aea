"""Compatibility rules for a stack selection.

:func:`validate_selection` is a pure function: it collects every violated
rule instead of stopping at the first, and it has no side effects, so it is
safe to call speculatively (for a preview) without committing to a run.
"""

from __future__ import annotations

from collections import Counter

from launchpad.catalog.registry import Catalog, exclusive_category, get_catalog
from launchpad.selection.models import Selection

# Human names for the exclusive categories, in reporting order.
_CATEGORY_NAMES: dict[str, str] = {
    "palette": "palette",
    "fonts": "font",
    "linting": "linting",
    "testing": "testing",
}


def _duplicates(ids: tuple[str, ...]) -> list[str]:
    counts = Counter(i for i in ids if i)
    return [i for i in dict.fromkeys(ids) if counts.get(i, 0) > 1]


def validate_selection(selection: Selection, catalog: Catalog | None = None) -> list[str]:
    """Check *selection* against the catalog's compatibility rules.

    Rules:
        * ``profile_id`` is required and must name a known profile.
        * Every add-on must be allowed for the profile.
        * Duplicate add-ons produce one issue; duplicate assets produce one issue.
        * At most one asset per exclusive category (palette, fonts, linting,
          testing); one issue per overfull category.

    Returns:
        A list of human-readable issues; empty when the selection is valid.
    """
    catalog = catalog or get_catalog()
    issues: list[str] = []

    profile_id = selection.profile_id
    if not profile_id:
        issues.append("profile_id is required")
    elif catalog.profile(profile_id) is None:
        issues.append(f"profile_id {profile_id!r} is not a known profile")

    allowed = catalog.allowed_addons(profile_id)
    for addon_id in dict.fromkeys(selection.addon_ids):
        if not addon_id:
            continue
        if addon_id not in allowed:
            issues.append(f"addon_id not compatible with selected profile: {addon_id}")

    duplicate_addons = _duplicates(selection.addon_ids)
    if duplicate_addons:
        issues.append("duplicate addon_id: " + ", ".join(duplicate_addons))

    duplicate_assets = _duplicates(selection.asset_ids)
    if duplicate_assets:
        issues.append("duplicate asset_id: " + ", ".join(duplicate_assets))

    per_category: Counter[str] = Counter()
    for asset_id in dict.fromkeys(selection.asset_ids):
        category = exclusive_category(asset_id) if asset_id else None
        if category is not None:
            per_category[category] += 1

    for category, name in _CATEGORY_NAMES.items():
        if per_category[category] > 1:
            issues.append(f"only one {name} asset may be selected")

    return issues
