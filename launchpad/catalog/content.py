"""Asset body store and placeholder rendering.

Provides the :class:`ContentStore` which reads asset bodies from the
``launchpad/catalog/templates/`` directory through a Jinja2 loader, and renders
small inline templates such as profile scaffold commands
(``"mix phx.new {{name}}"``).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)

from launchpad.catalog.models import ContextAsset
from launchpad.errors import ResolutionError
from launchpad.logging import get_logger

if TYPE_CHECKING:
    from launchpad.catalog.registry import Catalog

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# ContentStore
# ---------------------------------------------------------------------------


class ContentStore:
    """Resolves asset locators to their markdown bodies.

    Asset bodies are returned verbatim: they routinely contain framework
    template syntax (``{{ }}`` in Phoenix, Svelte, Blade) that must reach the
    backend untouched, so only :meth:`render_string` evaluates Jinja2.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
        )

    # -- Asset bodies -------------------------------------------------------

    def read(self, asset: ContextAsset) -> str:
        """Return the body of *asset*.

        Raises:
            ResolutionError: If the locator does not exist in the store.
        """
        try:
            source, _, _ = self.env.loader.get_source(self.env, asset.locator)
        except TemplateNotFound as exc:
            raise ResolutionError(
                asset.id, f"no content at {asset.locator!r} in {self.template_dir}"
            ) from exc
        return source

    def exists(self, locator: str) -> bool:
        """Return ``True`` if *locator* resolves to a file in the store."""
        try:
            self.env.loader.get_source(self.env, locator)
        except TemplateNotFound:
            return False
        return True

    def missing(self, catalog: Catalog) -> list[str]:
        """IDs of catalog assets whose body is absent or blank."""
        missing: list[str] = []
        for asset in catalog.assets:
            if not self.exists(asset.locator) or not self.read(asset).strip():
                missing.append(asset.id)
        return missing

    # -- Placeholder rendering ---------------------------------------------

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context.

        Unknown placeholders raise instead of rendering as empty strings so a
        scaffold command can never silently lose its project name.
        """
        try:
            return self.env.from_string(template_string).render(**context)
        except TemplateError as exc:
            logger.debug("Template render failed for %r: %s", template_string, exc)
            raise


def render_scaffold_command(store: ContentStore, command: str, project_name: str) -> str:
    """Substitute ``{{name}}`` and ``{{module}}`` with the literal project name."""
    if not command:
        return "(no scaffold command defined)"
    return store.render_string(command, {"name": project_name, "module": project_name})
