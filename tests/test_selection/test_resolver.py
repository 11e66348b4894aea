"""Unit tests for asset resolution (launchpad.selection.resolver).

Tests cover:
- Core assets always first
- Ordering: core, profile, add-ons, explicit assets, UI defaults
- UI auto-inclusion of frontend-craft, palette and fonts
- De-duplication and determinism
- Unknown IDs raise ResolutionError
"""

from __future__ import annotations

import pytest

from launchpad.errors import ResolutionError
from launchpad.selection import Selection, resolve_assets
from launchpad.selection.resolver import candidate_ids

CORE = ["core.copilot", "core.architecture", "core.agents", "core.design-system"]


def _ids(selection: Selection) -> list[str]:
    return [a.id for a in resolve_assets(selection)]


class TestResolveOrder:
    @pytest.mark.unit
    def test_non_ui_profile(self, go_selection):
        assert _ids(go_selection) == CORE + [
            "profile.go-service",
            "addon.data-intensive",
            "asset.lint.strict",
        ]

    @pytest.mark.unit
    def test_ui_profile_gets_defaults(self):
        selection = Selection(profile_id="ruby-rails", confidence=0.9)
        assert _ids(selection) == CORE + [
            "profile.ruby-rails",
            "addon.frontend-craft",
            "asset.palette.obsidian-indigo",
            "asset.fonts.inter-jetbrains",
        ]

    @pytest.mark.unit
    def test_explicit_palette_suppresses_default(self):
        selection = Selection(
            profile_id="typescript-sveltekit",
            asset_ids=("asset.palette.heroui-blue",),
            confidence=0.9,
        )
        ids = _ids(selection)
        assert "asset.palette.heroui-blue" in ids
        assert "asset.palette.obsidian-indigo" not in ids
        assert "asset.fonts.inter-jetbrains" in ids

    @pytest.mark.unit
    def test_core_always_present(self, catalog):
        for profile in catalog.profiles:
            ids = _ids(Selection(profile_id=profile.id.value, confidence=0.9))
            assert ids[:4] == CORE

    @pytest.mark.unit
    def test_core_present_without_profile(self):
        assert _ids(Selection()) == CORE


class TestResolveDedup:
    @pytest.mark.unit
    def test_phoenix_with_both_addons(self):
        selection = Selection(
            profile_id="elixir-phoenix",
            addon_ids=("data-intensive", "frontend-craft"),
            confidence=0.95,
        )
        ids = _ids(selection)
        assert len(ids) == len(set(ids))
        for expected in CORE + [
            "profile.elixir-phoenix",
            "addon.data-intensive",
            "addon.frontend-craft",
        ]:
            assert expected in ids

    @pytest.mark.unit
    def test_candidates_may_repeat_but_output_does_not(self, phoenix_selection):
        candidates = candidate_ids(phoenix_selection)
        assert candidates.count("addon.frontend-craft") == 2
        assert _ids(phoenix_selection).count("addon.frontend-craft") == 1

    @pytest.mark.unit
    def test_explicit_core_id_not_duplicated(self):
        selection = Selection(
            profile_id="go-service", asset_ids=("core.agents",), confidence=0.9
        )
        assert _ids(selection).count("core.agents") == 1

    @pytest.mark.unit
    def test_deterministic(self, phoenix_selection):
        first = resolve_assets(phoenix_selection)
        second = resolve_assets(phoenix_selection)
        assert [a.model_dump() for a in first] == [a.model_dump() for a in second]


class TestResolveErrors:
    @pytest.mark.unit
    def test_unknown_asset(self):
        selection = Selection(
            profile_id="go-service",
            asset_ids=("asset.mystery.box", "asset.other.ghost"),
            confidence=0.9,
        )
        with pytest.raises(ResolutionError) as exc_info:
            resolve_assets(selection)
        assert exc_info.value.asset_id == "asset.mystery.box"
        assert "unknown context asset 'asset.mystery.box'" in str(exc_info.value)

    @pytest.mark.unit
    def test_unknown_profile(self):
        with pytest.raises(ResolutionError, match="profile.cobol-cics"):
            resolve_assets(Selection(profile_id="cobol-cics", confidence=0.9))
