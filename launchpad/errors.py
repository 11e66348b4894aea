"""Exception hierarchy for Launchpad.

Every failure in the selection and generation pipeline is terminal for the
current run and is raised as a subclass of :class:`LaunchpadError` so the CLI
can report it with a single ``except`` clause.  The only local recovery is the
provider's bounded retry on rate limiting.
"""

from __future__ import annotations


class LaunchpadError(Exception):
    """Base class for all Launchpad errors."""


class ConfigError(LaunchpadError):
    """Raised when configuration is missing or inconsistent."""


class RegistryError(LaunchpadError):
    """Raised at import time when the static catalog is inconsistent."""


class InputError(LaunchpadError):
    """Raised when the user sends an empty message."""


class ExtractionError(LaunchpadError):
    """Raised when the backend's decision reply cannot be parsed."""

    def __init__(self, message: str, raw: str = "") -> None:
        self.raw = raw
        super().__init__(f"{message}\nraw output: {raw}")


class ValidationError(LaunchpadError):
    """Raised when a selection breaks one or more compatibility rules.

    All issues are reported together, never just the first.
    """

    def __init__(self, issues: list[str]) -> None:
        self.issues = list(issues)
        super().__init__(
            "incompatible selection: "
            + "; ".join(self.issues)
            + " -- adjust your choice or describe your project in more detail"
        )


class ConfidenceError(LaunchpadError):
    """Raised when the self-reported confidence is below the gate."""

    def __init__(self, confidence: float, threshold: float) -> None:
        self.confidence = confidence
        self.threshold = threshold
        super().__init__(
            f"confidence {confidence:.2f} is below minimum {threshold:.2f} -- "
            "try describing your project in more detail"
        )


class ResolutionError(LaunchpadError):
    """Raised when a selected ID does not exist in the catalog.

    This points at a registry mismatch, not at user error.
    """

    def __init__(self, asset_id: str, detail: str = "") -> None:
        self.asset_id = asset_id
        message = f"unknown context asset {asset_id!r}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class BackendError(LaunchpadError):
    """Raised on transport failures, non-success statuses and empty replies."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(BackendError):
    """Raised once rate-limit retries are exhausted."""


class EmptyOutputError(LaunchpadError):
    """Raised when generation produced zero parsed files."""


class MalformedOutputError(LaunchpadError):
    """Raised when a file block in the generation reply is unterminated."""


class EngineStateError(LaunchpadError):
    """Raised when an engine operation is called from the wrong state."""
