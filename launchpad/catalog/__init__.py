"""Launchpad catalog.

Static registry of the profiles, add-ons and context assets a selection may
name, plus the content store that holds each asset's body.

Usage::

    from launchpad.catalog import get_catalog, ContentStore

    catalog = get_catalog()
    asset = catalog.get("asset.palette.heroui-blue")
    body = ContentStore().read(asset)
"""

from launchpad.catalog.content import ContentStore, render_scaffold_command
from launchpad.catalog.models import Addon, ContextAsset, Layer, Profile, ProfileId
from launchpad.catalog.registry import (
    CORE_ASSET_IDS,
    Catalog,
    exclusive_category,
    get_catalog,
)

__all__ = [
    "Addon",
    "CORE_ASSET_IDS",
    "Catalog",
    "ContentStore",
    "ContextAsset",
    "Layer",
    "Profile",
    "ProfileId",
    "exclusive_category",
    "get_catalog",
    "render_scaffold_command",
]
