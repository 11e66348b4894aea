"""Pydantic v2 model for the stack decision.

The ``Selection`` mirrors the JSON object the backend is asked to emit during
extraction. It deliberately accepts duplicate IDs so that the compatibility
validator can report them; the extractor is the single place that produces
normalized, canonical selections.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Selection(BaseModel):
    """The resolved setup: one profile, optional add-ons and assets."""
    model_config = ConfigDict(frozen=True)

    profile_id: str = Field(default="", description="Profile ID without the 'profile.' prefix")
    addon_ids: tuple[str, ...] = Field(
        default=(), description="Add-on IDs without the 'addon.' prefix, in selection order"
    )
    asset_ids: tuple[str, ...] = Field(
        default=(), description="Fully-qualified asset IDs, e.g. 'asset.lint.strict'"
    )
    confidence: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Backend's self-reported confidence"
    )
    rationale: str = Field(default="", description="One-sentence justification (informational)")

    @field_validator("addon_ids", "asset_ids", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, (list, tuple)):
            return tuple("" if item is None else item for item in value)
        return value

    @field_validator("profile_id", "rationale", mode="before")
    @classmethod
    def _null_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value
