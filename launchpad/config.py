"""Launchpad configuration.

Centralised, typed configuration for a single ``launchpad`` run. All settings
use Pydantic v2 models so they are validated at construction time and can be
built from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError

from launchpad.errors import ConfigError

ProviderName = Literal["openai", "ollama"]


class OpenAIConfig(BaseModel):
    """Settings for the OpenAI Responses API backend."""

    api_key: str = Field(default="", repr=False)
    base_url: str = Field(default="https://api.openai.com/v1")
    model: str = Field(default="gpt-4.1")


class OllamaConfig(BaseModel):
    """Settings for a local Ollama server."""

    url: str = Field(default="http://localhost:11434")
    model: str = Field(default="qwen2.5-coder:32b")


class RetryConfig(BaseModel):
    """Timeout and rate-limit retry policy shared by every provider."""

    timeout: int = Field(default=120, ge=10, description="Per-request timeout in seconds")
    max_attempts: int = Field(
        default=3, ge=1, description="Attempts per call when the backend rate-limits"
    )
    backoff_seconds: float = Field(
        default=2.0, ge=0, description="Linear backoff step; attempt N sleeps N * step"
    )


class Config(BaseModel):
    """Global Launchpad configuration.

    Instances are created once by the CLI entry point and then handed to
    :func:`launchpad.providers.build_provider` and the conversation engine.
    """

    project_name: str = Field(default="")
    output_dir: Path = Field(default=Path("./my-app"))
    force: bool = Field(default=False, description="Overwrite files in a non-empty target")
    provider: ProviderName = Field(default="openai")
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @property
    def model(self) -> str:
        """Model identifier of the active provider."""
        if self.provider == "ollama":
            return self.ollama.model
        return self.openai.model

    @classmethod
    def from_env(cls, dotenv_path: Path | None = Path(".env")) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            OPENAI_API_KEY, LAUNCHPAD_PROVIDER, LAUNCHPAD_MODEL,
            LAUNCHPAD_OLLAMA_URL, LAUNCHPAD_TIMEOUT, LAUNCHPAD_MAX_ATTEMPTS.

        ``LAUNCHPAD_MODEL`` applies to whichever provider is active. When
        ``OPENAI_API_KEY`` is unset the key is looked up in *dotenv_path*.
        """
        provider = os.environ.get("LAUNCHPAD_PROVIDER", "openai").strip().lower() or "openai"
        model = os.environ.get("LAUNCHPAD_MODEL", "").strip()

        openai_kwargs: dict[str, Any] = {}
        api_key = os.environ.get("OPENAI_API_KEY", "").strip()
        if not api_key and dotenv_path is not None:
            api_key = read_dotenv_key(dotenv_path)
        if api_key:
            openai_kwargs["api_key"] = api_key
        if model and provider == "openai":
            openai_kwargs["model"] = model

        ollama_kwargs: dict[str, Any] = {}
        if os.environ.get("LAUNCHPAD_OLLAMA_URL"):
            ollama_kwargs["url"] = os.environ["LAUNCHPAD_OLLAMA_URL"]
        if model and provider == "ollama":
            ollama_kwargs["model"] = model

        retry_kwargs: dict[str, Any] = {}
        if os.environ.get("LAUNCHPAD_TIMEOUT"):
            retry_kwargs["timeout"] = os.environ["LAUNCHPAD_TIMEOUT"]
        if os.environ.get("LAUNCHPAD_MAX_ATTEMPTS"):
            retry_kwargs["max_attempts"] = os.environ["LAUNCHPAD_MAX_ATTEMPTS"]

        try:
            return cls(
                provider=provider,
                openai=OpenAIConfig(**openai_kwargs),
                ollama=OllamaConfig(**ollama_kwargs),
                retry=RetryConfig(**retry_kwargs),
            )
        except ValidationError as exc:
            raise ConfigError(f"invalid configuration from environment: {exc}") from exc


def read_dotenv_key(path: str | Path) -> str:
    """Read ``OPENAI_API_KEY`` (or ``KEY``) from a ``.env`` file.

    Returns ``""`` when the file does not exist or holds neither key.
    """
    file_path = Path(path)
    if not file_path.is_file():
        return ""

    values = dotenv_values(file_path, encoding="utf-8")
    key = values.get("OPENAI_API_KEY") or values.get("KEY") or ""
    return key.strip()
