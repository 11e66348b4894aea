"""Launchpad command-line interface.

Usage::

    launchpad init [directory] [--force] [--provider openai|ollama] [--model M] [-v]
    launchpad list
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule

from launchpad import __version__
from launchpad.catalog import ContentStore, get_catalog, render_scaffold_command
from launchpad.config import Config
from launchpad.engine import ConversationEngine, strip_ready_marker
from launchpad.errors import ConfigError, LaunchpadError
from launchpad.generation.file_blocks import FileOutput
from launchpad.logging import configure_logging, get_logger
from launchpad.providers import OllamaProvider, Provider, build_provider
from launchpad.utils import (
    console,
    display_path,
    is_non_empty_dir,
    print_error,
    print_file_tree,
    print_selection_summary,
    print_success,
    print_warning,
    write_files,
)

logger = get_logger(__name__)

DONE_COMMAND = "/done"
DEFAULT_TARGET = "./my-app"


def _banner() -> None:
    console.print(
        Panel(
            f"[bold]Launchpad[/bold] [dim]v{__version__}[/dim]\n"
            "[dim]Tailored AI coding instructions for your next project[/dim]",
            style="cyan",
        )
    )


def _print_reply(reply: str) -> None:
    console.print(Rule("[bold cyan]Launchpad[/bold cyan]", style="cyan", align="left"))
    console.print(Markdown(strip_ready_marker(reply)))
    console.print()


def _read_user_input() -> str:
    return console.input("[bold magenta]You:[/bold magenta] ").strip()


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


def _resolve_api_key(config: Config) -> None:
    if config.provider != "openai" or config.openai.api_key:
        return
    print_warning("No OPENAI_API_KEY found in environment.")
    key = console.input("Paste your OpenAI API key: ", password=True).strip()
    if not key:
        raise ConfigError(
            "an OpenAI API key is required -- get one at https://platform.openai.com/api-keys"
        )
    config.openai.api_key = key


def _resolve_target(config: Config, directory: str | None) -> None:
    if not directory:
        directory = console.input(f"Where should we set up the project? [dim]({DEFAULT_TARGET})[/dim] ")
        directory = directory.strip() or DEFAULT_TARGET
    config.output_dir = Path(directory).resolve()
    config.project_name = config.output_dir.name

    if config.force or not is_non_empty_dir(config.output_dir):
        return
    answer = console.input("Directory isn't empty. Overwrite existing files? [dim](y/N)[/dim] ")
    if answer.strip().lower() not in ("y", "yes"):
        raise ConfigError("aborted -- directory is not empty")
    config.force = True


async def _check_provider(provider: Provider) -> None:
    if isinstance(provider, OllamaProvider):
        if not await provider.is_available():
            raise ConfigError(f"Ollama is not reachable at {provider.base_url}")
        if not await provider.has_model():
            print_warning(f"Model {provider.model!r} is not pulled locally; Ollama may fail.")


async def _converse(engine: ConversationEngine) -> None:
    console.print()
    console.print("[bold]What are you building?[/bold]")
    console.print(
        "[dim]Describe your project and I'll help you pick the right stack and standards. "
        f"Type {DONE_COMMAND} or press enter on an empty line when you're ready.[/dim]"
    )
    console.print()

    first = _read_user_input()
    with console.status("Thinking..."):
        reply = await engine.chat(first)
    _print_reply(reply)

    while not engine.is_ready:
        message = _read_user_input()
        if not message or message.lower() == DONE_COMMAND:
            engine.request_extraction()
            break
        with console.status("Thinking..."):
            reply = await engine.chat(message)
        _print_reply(reply)


def _print_next_steps(config: Config, files: list[FileOutput], profile_id: str) -> None:
    target = display_path(config.output_dir)
    print_success(f"Generated {len(files)} instruction files in {target}")
    console.print()
    console.print("[bold]Next steps:[/bold]")
    console.print(f"  [dim]1.[/dim] cd {target}")
    console.print("  [dim]2.[/dim] Review the generated files and tweak anything that doesn't feel right")

    profile = get_catalog().profile(profile_id)
    if profile is not None and profile.scaffold_command:
        command = render_scaffold_command(ContentStore(), profile.scaffold_command, config.project_name)
        console.print(f"  [dim]3.[/dim] Scaffold your project: [cyan]{command}[/cyan]")
        console.print("  [dim]4.[/dim] Open Copilot Chat and type [cyan]/start[/cyan] to start building")
    else:
        console.print("  [dim]3.[/dim] Open Copilot Chat and type [cyan]/start[/cyan] to bootstrap the project")
    console.print()


async def run_init(config: Config, directory: str | None) -> int:
    """Run the interactive ``init`` flow. Returns the process exit code."""
    _banner()
    _resolve_api_key(config)
    _resolve_target(config, directory)

    provider = build_provider(config)
    await _check_provider(provider)
    logger.info("Using %s model %s", config.provider, config.model)

    engine = ConversationEngine(provider, project_name=config.project_name)
    await _converse(engine)

    with console.status("Resolving selection..."):
        selection = await engine.extract_decision()
    console.print()
    print_selection_summary(selection)

    with console.status("Generating instruction files..."):
        files = await engine.generate_files()

    write_files(files, config.output_dir)
    print_file_tree(files, display_path(config.output_dir))
    _print_next_steps(config, files, selection.profile_id)
    console.print("[dim]Your AI copilot is briefed. Go build something great.[/dim]")
    return 0


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


def run_list() -> int:
    """Print the bundled profiles and add-ons."""
    catalog = get_catalog()
    _banner()
    console.print("[bold]Template knowledge base:[/bold]")
    console.print(
        "[dim]  Launchpad narrows to these assets during conversation, then generates "
        "instructions from the selected subset.[/dim]"
    )
    console.print()

    for tier, heading in ((1, "Canonical stacks"), (2, "Additional supported stacks")):
        console.print(f"[bold]  {heading}:[/bold]")
        for profile in catalog.profiles:
            if profile.tier != tier:
                continue
            console.print(
                f"    [cyan]{profile.id.value}[/cyan]  [dim]\\[{profile.layer.value}][/dim]  {profile.summary}"
            )
            if profile.scaffold_command:
                console.print(f"    [dim]  scaffold: {profile.scaffold_command}[/dim]")
        console.print()

    console.print("[bold]  Specialized add-ons:[/bold]")
    for addon in catalog.addons:
        console.print(f"    [cyan]{addon.id}[/cyan]  {addon.summary}")
    console.print()
    console.print("[dim]  UI stacks automatically include frontend-craft, a default palette,")
    console.print("  and font pairing. No opt-in needed.[/dim]")
    console.print()
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="launchpad",
        description="Launchpad -- conversational AI instruction generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  launchpad init ./voting-app\n"
            "  launchpad init --provider ollama --model llama3.1\n"
            "  launchpad list\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init = subparsers.add_parser(
        "init", help="Start a conversation to generate tailored AI instructions"
    )
    init.add_argument("directory", nargs="?", default=None, help="Target directory")
    init.add_argument(
        "--force", "-f", action="store_true", help="Overwrite files in a non-empty target"
    )
    init.add_argument(
        "--provider", choices=["openai", "ollama"], default=None,
        help="Conversational backend (default: $LAUNCHPAD_PROVIDER or openai)",
    )
    init.add_argument("--model", default=None, help="Model override for the chosen provider")
    init.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    init.add_argument("--log-file", type=Path, default=None, help="Also write debug logs here")

    subparsers.add_parser("list", help="Show the template knowledge base used for generation")
    return parser


def _config_from_args(args: argparse.Namespace) -> Config:
    config = Config.from_env()
    if args.provider:
        config.provider = args.provider
    if args.model:
        if config.provider == "ollama":
            config.ollama.model = args.model
        else:
            config.openai.model = args.model
    config.force = args.force
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``launchpad`` and ``python -m launchpad``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "list":
        configure_logging()
        sys.exit(run_list())

    configure_logging(verbose=args.verbose, log_file=args.log_file)
    try:
        config = _config_from_args(args)
        code = asyncio.run(run_init(config, args.directory))
    except LaunchpadError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        print_warning("\nAborted.")
        sys.exit(130)
    sys.exit(code)


if __name__ == "__main__":
    main()
