"""Static registry of profiles, add-ons and context assets.

Everything a selection can refer to is declared here once, at import time.
Profile-keyed lookups (allowed add-ons, file globs) are tables keyed by
:class:`ProfileId`; :meth:`Catalog.validate` checks them exhaustively when the
default catalog is built, so a profile missing from any table is an import
error rather than a silent default.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from launchpad.catalog.models import (
    ADDON_PREFIX,
    ASSET_PREFIX,
    CORE_PREFIX,
    PROFILE_PREFIX,
    Addon,
    ContextAsset,
    Layer,
    Profile,
    ProfileId,
)
from launchpad.errors import RegistryError
from launchpad.logging import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Core assets (always included)
# ---------------------------------------------------------------------------

CORE_ASSETS: tuple[ContextAsset, ...] = (
    ContextAsset(
        id="core.copilot",
        category="core",
        label="Core Copilot Standards",
        summary="Always-on engineering standards for architecture, naming, and implementation quality",
        locator="core/copilot-instructions.md",
    ),
    ContextAsset(
        id="core.architecture",
        category="practices",
        label="Architecture Practices",
        summary="Functional-first decomposition, pure core / imperative edge boundaries, and layered composition",
        locator="core/architecture.md",
    ),
    ContextAsset(
        id="core.agents",
        category="collaboration",
        label="Agent Collaboration Rules",
        summary="Ground rules for multi-agent workflow, ownership boundaries, and quality checks",
        locator="core/agents.md",
    ),
    ContextAsset(
        id="core.design-system",
        category="design",
        label="Design System Baseline",
        summary="Dark-first visual identity, typography, spacing, and component DNA shared by generated apps",
        locator="core/design-system.md",
    ),
)

CORE_ASSET_IDS: tuple[str, ...] = tuple(a.id for a in CORE_ASSETS)


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

# Ordered by recommendation strength. Tier 1 is the canonical coherence set;
# tier 2 covers specific domains or ecosystem needs.
PROFILES: tuple[Profile, ...] = (
    Profile(
        id=ProfileId.ELIXIR_PHOENIX,
        title="Elixir + Phoenix",
        summary="Full-stack real-time web: LiveView, Ecto, OTP, no frontend/backend split",
        scaffold_command="mix phx.new {{name}}",
        use_case="Real-time web apps, collaborative tools, dashboards, chat, IoT",
        layer=Layer.COORDINATION,
        has_ui=True,
        tier=1,
    ),
    Profile(
        id=ProfileId.TYPESCRIPT_SVELTEKIT,
        title="TypeScript + SvelteKit",
        summary="Full-stack JS web: intuitive reactivity, SSR, minimal boilerplate",
        scaffold_command="npm create svelte@latest",
        use_case="JS-ecosystem full-stack web apps, content sites, SSR apps needing rich interactivity",
        layer=Layer.WEB_UI,
        has_ui=True,
        tier=1,
    ),
    Profile(
        id=ProfileId.RUBY_RAILS,
        title="Ruby on Rails",
        summary="Rapid full-stack web: convention over configuration, generators",
        scaffold_command="rails new {{name}}",
        use_case="CRUD apps, MVPs, admin panels, content platforms, SaaS",
        layer=Layer.RAPID_PRODUCT,
        has_ui=True,
        tier=1,
    ),
    Profile(
        id=ProfileId.GO_SERVICE,
        title="Go Service",
        summary="Idiomatic Go: stdlib-first, small binaries, excellent concurrency",
        scaffold_command="go mod init {{module}}",
        use_case="High-performance APIs, CLI tools, infrastructure services, platform tooling",
        layer=Layer.WORKER,
        has_ui=False,
        tier=1,
    ),
    Profile(
        id=ProfileId.RUST_AXUM,
        title="Rust + Axum",
        summary="Performance-critical services: type-safe, zero-cost abstractions, Tokio-based",
        scaffold_command="cargo new {{name}}",
        use_case="Performance-critical APIs, systems programming, infrastructure where correctness matters",
        layer=Layer.WORKER,
        has_ui=False,
        tier=1,
    ),
    Profile(
        id=ProfileId.DOTNET_API,
        title=".NET API",
        summary="C# minimal APIs: Entity Framework, clean architecture, enterprise-grade",
        scaffold_command="dotnet new webapi -n {{name}}",
        use_case="Enterprise APIs, C# ecosystem services, Azure-native workloads",
        layer=Layer.ENTERPRISE,
        has_ui=False,
        tier=1,
    ),
    Profile(
        id=ProfileId.JAVA_SPRING,
        title="Java + Spring Boot",
        summary="Enterprise Java: DI, auto-configuration, large ecosystem",
        scaffold_command="spring init --dependencies=web,data-jpa,validation {{name}}",
        use_case="Large-scale enterprise systems, integration-heavy services, JVM workloads",
        layer=Layer.ENTERPRISE,
        has_ui=False,
        tier=1,
    ),
    Profile(
        id=ProfileId.PYTHON_FASTAPI,
        title="Python + FastAPI",
        summary="Python APIs: async, typed, Pydantic-centric, ML/data-native",
        scaffold_command="mkdir {{name}} && cd {{name}} && python -m venv .venv",
        use_case="Python API services, ML model serving, data pipelines, AI agent backends",
        layer=Layer.AI_BOUNDARY,
        has_ui=False,
        tier=1,
    ),
    Profile(
        id=ProfileId.DART_FLUTTER,
        title="Dart + Flutter",
        summary="Cross-platform native apps: single codebase for iOS, Android, web, desktop",
        scaffold_command="flutter create {{name}}",
        use_case="Mobile apps, cross-platform native experiences",
        layer=Layer.MOBILE_UI,
        has_ui=True,
        tier=1,
    ),
    Profile(
        id=ProfileId.TYPESCRIPT_NEXTJS,
        title="TypeScript + Next.js",
        summary="React ecosystem full-stack: App Router, RSC, Vercel-optimized",
        scaffold_command="npx create-next-app@latest {{name}}",
        use_case="Apps requiring React ecosystem libraries, Vercel deployment, marketing sites",
        layer=Layer.WEB_UI,
        has_ui=True,
        tier=2,
    ),
    Profile(
        id=ProfileId.TYPESCRIPT_FASTIFY,
        title="TypeScript + Fastify",
        summary="Node.js API: schema-driven, typed routes, plugin architecture",
        scaffold_command="mkdir {{name}} && cd {{name}} && npm init -y",
        use_case="Node.js API services, microservices, typed backends",
        layer=Layer.WORKER,
        has_ui=False,
        tier=2,
    ),
    Profile(
        id=ProfileId.PYTHON_DJANGO,
        title="Python + Django",
        summary="Python full-stack web: admin, ORM, batteries-included",
        scaffold_command="django-admin startproject {{name}}",
        use_case="Admin-heavy apps, content management, Python full-stack web",
        layer=Layer.RAPID_PRODUCT,
        has_ui=True,
        tier=2,
    ),
    Profile(
        id=ProfileId.LARAVEL,
        title="Laravel",
        summary="PHP full-stack: Eloquent ORM, queues, Inertia, Blade templates",
        scaffold_command="composer create-project laravel/laravel {{name}}",
        use_case="PHP teams, rapid SaaS prototyping, content-driven web apps",
        layer=Layer.RAPID_PRODUCT,
        has_ui=True,
        tier=2,
    ),
)


# ---------------------------------------------------------------------------
# Add-ons
# ---------------------------------------------------------------------------

DATA_INTENSIVE = "data-intensive"
FRONTEND_CRAFT = "frontend-craft"

ADDONS: tuple[Addon, ...] = (
    Addon(
        id=DATA_INTENSIVE,
        title="Data-Intensive",
        summary="Patterns for event streams, durable storage, and resilient data processing",
    ),
    Addon(
        id=FRONTEND_CRAFT,
        title="Frontend Craft",
        summary="Framework-agnostic visual discipline, component composition, accessibility, and motion",
    ),
)

_ADDON_CATEGORIES: dict[str, str] = {
    DATA_INTENSIVE: "architecture",
    FRONTEND_CRAFT: "ui",
}

_BOTH = frozenset({DATA_INTENSIVE, FRONTEND_CRAFT})
_DATA_ONLY = frozenset({DATA_INTENSIVE})

# frontend-craft only makes sense where there is a UI surface.
ALLOWED_ADDONS: dict[ProfileId, frozenset[str]] = {
    ProfileId.ELIXIR_PHOENIX: _BOTH,
    ProfileId.TYPESCRIPT_SVELTEKIT: _BOTH,
    ProfileId.RUBY_RAILS: _BOTH,
    ProfileId.GO_SERVICE: _DATA_ONLY,
    ProfileId.RUST_AXUM: _DATA_ONLY,
    ProfileId.DOTNET_API: _DATA_ONLY,
    ProfileId.JAVA_SPRING: _DATA_ONLY,
    ProfileId.PYTHON_FASTAPI: _DATA_ONLY,
    ProfileId.DART_FLUTTER: _BOTH,
    ProfileId.TYPESCRIPT_NEXTJS: _BOTH,
    ProfileId.TYPESCRIPT_FASTIFY: _DATA_ONLY,
    ProfileId.PYTHON_DJANGO: _BOTH,
    ProfileId.LARAVEL: _BOTH,
}

# Source files the generated framework instructions are scoped to.
FILE_GLOBS: dict[ProfileId, str] = {
    ProfileId.ELIXIR_PHOENIX: "**/*.{ex,exs,heex,leex}",
    ProfileId.TYPESCRIPT_SVELTEKIT: "**/*.{ts,tsx,svelte,js,jsx}",
    ProfileId.RUBY_RAILS: "**/*.{rb,erb,haml}",
    ProfileId.GO_SERVICE: "**/*.go",
    ProfileId.RUST_AXUM: "**/*.rs",
    ProfileId.DOTNET_API: "**/*.{cs,csproj}",
    ProfileId.JAVA_SPRING: "**/*.{java,kt}",
    ProfileId.PYTHON_FASTAPI: "**/*.py",
    ProfileId.DART_FLUTTER: "**/*.dart",
    ProfileId.TYPESCRIPT_NEXTJS: "**/*.{ts,tsx,js,jsx}",
    ProfileId.TYPESCRIPT_FASTIFY: "**/*.{ts,js}",
    ProfileId.PYTHON_DJANGO: "**/*.{py,html}",
    ProfileId.LARAVEL: "**/*.{php,blade.php}",
}


# ---------------------------------------------------------------------------
# Selectable assets
# ---------------------------------------------------------------------------

DESIGN_ASSETS: tuple[ContextAsset, ...] = (
    ContextAsset(
        id="asset.palette.heroui-blue",
        category="palette",
        label="HeroUI Blue Scale Palette",
        summary="Blue-centered semantic color scale with 50-900 steps",
        locator="assets/palette-heroui-blue.md",
    ),
    ContextAsset(
        id="asset.palette.obsidian-indigo",
        category="palette",
        label="Obsidian + Indigo Palette",
        summary="Dark UI palette with indigo accents for dense dashboards",
        locator="assets/palette-obsidian-indigo.md",
    ),
    ContextAsset(
        id="asset.fonts.inter-jetbrains",
        category="fonts",
        label="Inter + JetBrains Mono",
        summary="Sans + monospace pairing for product UI and dev-facing surfaces",
        locator="assets/fonts-inter-jetbrains.md",
    ),
)

QUALITY_ASSETS: tuple[ContextAsset, ...] = (
    ContextAsset(
        id="asset.lint.strict",
        category="linting",
        label="Strict Linting",
        summary="Fail-on-warning lint posture and formatting consistency expectations",
        locator="assets/lint-strict.md",
    ),
    ContextAsset(
        id="asset.testing.pragmatic",
        category="testing",
        label="Pragmatic Testing",
        summary="Fast feedback testing pyramid with contract and integration confidence",
        locator="assets/testing-pragmatic.md",
    ),
    ContextAsset(
        id="asset.server.patterns",
        category="server",
        label="Server Patterns",
        summary="Validation, error handling, data access, and form/action conventions",
        locator="assets/server-patterns.md",
    ),
)

# Auto-included for UI profiles when the selection has nothing in the category.
DEFAULT_UI_ASSETS: dict[str, str] = {
    "palette": "asset.palette.obsidian-indigo",
    "fonts": "asset.fonts.inter-jetbrains",
}

# Categories capped at one active selection, keyed by the ID prefix that
# identifies them.
EXCLUSIVE_CATEGORY_PREFIXES: dict[str, str] = {
    "asset.palette.": "palette",
    "asset.fonts.": "fonts",
    "asset.lint": "linting",
    "asset.testing.": "testing",
}


def exclusive_category(asset_id: str) -> str | None:
    """Return the exclusive category an asset ID belongs to, if any."""
    for prefix, category in EXCLUSIVE_CATEGORY_PREFIXES.items():
        if asset_id.startswith(prefix):
            return category
    return None


def _profile_asset(profile: Profile) -> ContextAsset:
    return ContextAsset(
        id=profile.asset_id,
        category="framework",
        label=profile.title,
        summary=profile.summary,
        locator=f"profiles/{profile.id.value}.md",
    )


def _addon_asset(addon: Addon) -> ContextAsset:
    return ContextAsset(
        id=addon.asset_id,
        category=_ADDON_CATEGORIES.get(addon.id, "addon"),
        label=f"{addon.title} Add-on",
        summary=addon.summary,
        locator=f"addons/{addon.id}.md",
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class Catalog:
    """Read-only lookup over every registered asset, profile and add-on.

    Built once per process. Lookups accept plain strings so callers holding
    unvalidated model output never need to construct a ``ProfileId`` first.
    """

    def __init__(
        self,
        assets: Iterable[ContextAsset],
        profiles: Iterable[Profile],
        addons: Iterable[Addon],
        allowed_addons: Mapping[ProfileId, frozenset[str]],
        file_globs: Mapping[ProfileId, str],
        core_ids: Iterable[str] = CORE_ASSET_IDS,
    ) -> None:
        self._assets: dict[str, ContextAsset] = {}
        for asset in assets:
            if asset.id in self._assets:
                raise RegistryError(f"duplicate catalog ID {asset.id!r}")
            self._assets[asset.id] = asset
        self._profiles: dict[str, Profile] = {p.id.value: p for p in profiles}
        self._addons: dict[str, Addon] = {a.id: a for a in addons}
        self._allowed_addons = dict(allowed_addons)
        self._file_globs = dict(file_globs)
        self.core_ids: tuple[str, ...] = tuple(core_ids)

    # -- Lookups -----------------------------------------------------------

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._assets

    def __len__(self) -> int:
        return len(self._assets)

    def get(self, asset_id: str) -> ContextAsset | None:
        return self._assets.get(asset_id)

    @property
    def assets(self) -> list[ContextAsset]:
        return list(self._assets.values())

    @property
    def profiles(self) -> list[Profile]:
        return list(self._profiles.values())

    @property
    def addons(self) -> list[Addon]:
        return list(self._addons.values())

    def profile(self, profile_id: str) -> Profile | None:
        return self._profiles.get(profile_id)

    def addon(self, addon_id: str) -> Addon | None:
        return self._addons.get(addon_id)

    def profile_ids(self) -> list[str]:
        return list(self._profiles)

    def allowed_addons(self, profile_id: str) -> frozenset[str]:
        """Add-on IDs compatible with *profile_id* (empty for unknown profiles)."""
        profile = self.profile(profile_id)
        if profile is None:
            return frozenset()
        return self._allowed_addons[profile.id]

    def file_glob(self, profile_id: str) -> str:
        profile = self.profile(profile_id)
        if profile is None:
            return "**"
        return self._file_globs[profile.id]

    def summary_lines(self) -> list[str]:
        """One ``- id | category | summary`` line per asset, sorted by ID."""
        return [
            f"- {a.id} | {a.category} | {a.summary}"
            for a in sorted(self._assets.values(), key=lambda a: a.id)
        ]

    # -- Consistency -------------------------------------------------------

    def validate(self) -> None:
        """Check the registry tables against each other.

        Raises:
            RegistryError: Listing every inconsistency found.
        """
        problems: list[str] = []

        for profile_id in ProfileId:
            if profile_id.value not in self._profiles:
                problems.append(f"profile {profile_id.value!r} is not registered")
            if profile_id not in self._allowed_addons:
                problems.append(f"profile {profile_id.value!r} has no allowed-addon entry")
            if profile_id not in self._file_globs:
                problems.append(f"profile {profile_id.value!r} has no file glob")

        for profile in self._profiles.values():
            if profile.asset_id not in self._assets:
                problems.append(f"profile asset {profile.asset_id!r} is missing")

        for addon in self._addons.values():
            if addon.asset_id not in self._assets:
                problems.append(f"addon asset {addon.asset_id!r} is missing")

        for profile_id, allowed in self._allowed_addons.items():
            for addon_id in sorted(allowed):
                if addon_id not in self._addons:
                    problems.append(
                        f"allowed-addon table for {profile_id.value!r} names unknown addon {addon_id!r}"
                    )
            profile = self._profiles.get(profile_id.value)
            if profile is not None and not profile.has_ui and FRONTEND_CRAFT in allowed:
                problems.append(f"{FRONTEND_CRAFT!r} allowed for non-UI profile {profile_id.value!r}")

        for core_id in self.core_ids:
            if not core_id.startswith(CORE_PREFIX) or core_id not in self._assets:
                problems.append(f"core asset {core_id!r} is missing")

        for category, asset_id in DEFAULT_UI_ASSETS.items():
            asset = self._assets.get(asset_id)
            if asset is None or asset.category != category:
                problems.append(f"default {category} asset {asset_id!r} is missing")

        known_prefixes = (CORE_PREFIX, PROFILE_PREFIX, ADDON_PREFIX, ASSET_PREFIX)
        for asset_id in self._assets:
            if not asset_id.startswith(known_prefixes):
                problems.append(f"catalog ID {asset_id!r} has no known prefix")

        if problems:
            raise RegistryError("catalog registry is inconsistent: " + "; ".join(problems))
        logger.debug(
            "Catalog validated: %d assets, %d profiles, %d addons",
            len(self._assets), len(self._profiles), len(self._addons),
        )


def build_default_catalog() -> Catalog:
    """Assemble and validate the bundled catalog."""
    assets: list[ContextAsset] = list(CORE_ASSETS)
    assets.extend(_profile_asset(p) for p in PROFILES)
    assets.extend(_addon_asset(a) for a in ADDONS)
    assets.extend(DESIGN_ASSETS)
    assets.extend(QUALITY_ASSETS)

    catalog = Catalog(
        assets=assets,
        profiles=PROFILES,
        addons=ADDONS,
        allowed_addons=ALLOWED_ADDONS,
        file_globs=FILE_GLOBS,
    )
    catalog.validate()
    return catalog


DEFAULT_CATALOG = build_default_catalog()


def get_catalog() -> Catalog:
    """Return the process-wide bundled catalog."""
    return DEFAULT_CATALOG
