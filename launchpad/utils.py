"""Shared console and file-system helpers for Launchpad.

Provides the shared Rich console, coloured status messages, safe writing of
generated files under a project root, and the tree / summary renderers the
CLI prints after generation.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from launchpad.errors import LaunchpadError
from launchpad.generation.file_blocks import FileOutput
from launchpad.logging import get_logger
from launchpad.selection.models import Selection

logger = get_logger(__name__)

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def sanitize_name(name: str) -> str:
    """Convert an arbitrary directory name to a safe project name.

    Examples::

        sanitize_name("My Voting App") -> "my-voting-app"
        sanitize_name("  api (v2)  ") -> "api-v2"
    """
    result = re.sub(r"[^a-zA-Z0-9_-]", "-", name.strip().lower())
    result = re.sub(r"-+", "-", result)
    return result.strip("-")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The resolved ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


def is_non_empty_dir(path: str | Path) -> bool:
    """Return ``True`` if *path* is an existing directory with any entries."""
    dir_path = Path(path)
    return dir_path.is_dir() and any(dir_path.iterdir())


def safe_relative_path(path: str) -> PurePosixPath:
    """Validate a generated file path and return it as a relative path.

    Raises:
        LaunchpadError: If the path is absolute, empty, names the project
            root itself, or escapes it through ``..`` segments.
    """
    cleaned = path.strip().replace("\\", "/")
    relative = PurePosixPath(cleaned)
    if not cleaned or relative.is_absolute() or re.match(r"^[A-Za-z]:", cleaned):
        raise LaunchpadError(f"refusing to write outside the project: {path!r}")
    if ".." in relative.parts:
        raise LaunchpadError(f"refusing to write outside the project: {path!r}")
    if not relative.parts:
        raise LaunchpadError(f"not a file path: {path!r}")
    return relative


def _plan_writes(files: Iterable[FileOutput], root: Path) -> list[tuple[Path, str]]:
    """Validate every generated path against each other and against *root*."""
    planned: list[tuple[PurePosixPath, str]] = [
        (safe_relative_path(f.path), f.content) for f in files
    ]

    seen: set[PurePosixPath] = set()
    for relative, _ in planned:
        if relative in seen:
            raise LaunchpadError(f"duplicate generated file: {str(relative)!r}")
        seen.add(relative)
    for relative, _ in planned:
        for parent in relative.parents:
            if parent in seen:
                raise LaunchpadError(
                    f"generated file {str(relative)!r} would be written inside "
                    f"generated file {str(parent)!r}"
                )

    result: list[tuple[Path, str]] = []
    for relative, content in planned:
        target = root / relative
        if target.is_dir():
            raise LaunchpadError(f"cannot overwrite directory with a file: {str(relative)!r}")
        for parent in relative.parents:
            existing = root / parent
            if parent.parts and existing.exists() and not existing.is_dir():
                raise LaunchpadError(
                    f"cannot create {str(relative)!r}: {str(parent)!r} is an existing file"
                )
        result.append((target, content))
    return result


def write_files(files: Iterable[FileOutput], root: str | Path) -> list[Path]:
    """Write generated files under *root*, creating parent directories.

    Every path is validated before anything is written, so a bad path or a
    clash between generated files leaves the target directory untouched.

    Returns:
        The written paths, in input order.

    Raises:
        LaunchpadError: On an invalid path or a file-system error.
    """
    root_path = ensure_dir(root)
    planned = _plan_writes(files, root_path)

    written: list[Path] = []
    for target, content in planned:
        if content and not content.endswith("\n"):
            content += "\n"
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise LaunchpadError(f"could not write {display_path(target)}: {exc}") from exc
        written.append(target)

    logger.info("Wrote %d file(s) under %s", len(written), root_path)
    return written


def display_path(path: str | Path) -> str:
    """Render *path* relative to the working directory when possible."""
    resolved = Path(path).resolve()
    try:
        return str(resolved.relative_to(Path.cwd()))
    except ValueError:
        return str(resolved)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def build_file_tree(paths: Iterable[str], root_label: str) -> Tree:
    """Build a Rich tree from relative POSIX paths."""
    tree = Tree(f"[bold]{root_label}[/bold]")
    nodes: dict[tuple[str, ...], Tree] = {}

    for raw in sorted(paths):
        parts = PurePosixPath(raw).parts
        parent = tree
        for depth, part in enumerate(parts):
            key = parts[: depth + 1]
            if key not in nodes:
                is_leaf = depth == len(parts) - 1
                label = part if is_leaf else f"[cyan]{part}/[/cyan]"
                nodes[key] = parent.add(label)
            parent = nodes[key]

    return tree


def print_file_tree(files: Iterable[FileOutput], root_label: str) -> None:
    """Print the generated files as a tree."""
    console.print(build_file_tree((f.path for f in files), root_label))
    console.print()


def print_selection_summary(selection: Selection) -> None:
    """Print a two-column summary of the extracted selection."""
    table = Table(title="Selection", show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    table.add_row("Profile", selection.profile_id or "-")
    table.add_row("Add-ons", ", ".join(selection.addon_ids) or "-")
    table.add_row("Assets", ", ".join(selection.asset_ids) or "-")
    table.add_row("Confidence", f"{selection.confidence:.2f}")
    if selection.rationale:
        table.add_row("Rationale", selection.rationale)

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
