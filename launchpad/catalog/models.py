"""Pydantic v2 models for the Launchpad catalog.

Defines the closed set of profile identities and the immutable records the
registry is built from: context assets, profiles and add-ons.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# ID namespace
# ---------------------------------------------------------------------------

CORE_PREFIX = "core."
PROFILE_PREFIX = "profile."
ADDON_PREFIX = "addon."
ASSET_PREFIX = "asset."


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ProfileId(str, Enum):
    """Every language/framework profile Launchpad knows about."""
    ELIXIR_PHOENIX = "elixir-phoenix"
    TYPESCRIPT_SVELTEKIT = "typescript-sveltekit"
    RUBY_RAILS = "ruby-rails"
    GO_SERVICE = "go-service"
    RUST_AXUM = "rust-axum"
    DOTNET_API = "dotnet-api"
    JAVA_SPRING = "java-spring"
    PYTHON_FASTAPI = "python-fastapi"
    DART_FLUTTER = "dart-flutter"
    TYPESCRIPT_NEXTJS = "typescript-nextjs"
    TYPESCRIPT_FASTIFY = "typescript-fastify"
    PYTHON_DJANGO = "python-django"
    LARAVEL = "laravel"


class Layer(str, Enum):
    """Architectural role a profile occupies."""
    COORDINATION = "coordination"
    WORKER = "worker"
    ENTERPRISE = "enterprise"
    AI_BOUNDARY = "ai-boundary"
    WEB_UI = "web-ui"
    MOBILE_UI = "mobile-ui"
    RAPID_PRODUCT = "rapid-product"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class ContextAsset(BaseModel):
    """A selectable instruction source bundled with Launchpad."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Globally unique, prefixed ID, e.g. 'asset.palette.heroui-blue'")
    category: str = Field(..., description="Grouping used for exclusivity rules")
    label: str = Field(..., description="Human-readable label")
    summary: str = Field(default="", description="One-line description")
    locator: str = Field(..., description="Path of the asset body inside the content store")


class Profile(BaseModel):
    """A language/framework choice."""
    model_config = ConfigDict(frozen=True)

    id: ProfileId
    title: str
    summary: str = ""
    scaffold_command: str = Field(
        default="", description="CLI bootstrap command with {{name}}/{{module}} placeholders"
    )
    use_case: str = ""
    layer: Layer
    has_ui: bool = Field(default=False, description="Gates auto-inclusion of visual assets")
    tier: int = Field(default=2, ge=1, le=2, description="Ranking hint: 1 = canonical set")

    @property
    def asset_id(self) -> str:
        """Catalog ID of this profile's context asset."""
        return PROFILE_PREFIX + self.id.value


class Addon(BaseModel):
    """An optional concern bundle."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    summary: str = ""

    @property
    def asset_id(self) -> str:
        """Catalog ID of this add-on's context asset."""
        return ADDON_PREFIX + self.id
