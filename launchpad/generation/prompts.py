"""Prompt construction for the conversation, extraction and generation calls.

All prompts are built deterministically from the catalog and the resolved
selection, so identical input always produces an identical prompt. The
conditional guidance blocks in :func:`build_generation_prompt` keep the
generated files scoped to exactly the selected concerns.
"""

from __future__ import annotations

import textwrap

from launchpad.catalog.content import ContentStore, render_scaffold_command
from launchpad.catalog.models import ContextAsset, ProfileId
from launchpad.catalog.registry import FRONTEND_CRAFT, Catalog, get_catalog
from launchpad.generation.file_blocks import FILE_END, FILE_START
from launchpad.selection.models import Selection

READY_TOKEN = "READY_TO_GENERATE"

ASSET_START = "===ASSET: "
ASSET_END = "===END_ASSET==="

# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------

_CONSTRAINTS = textwrap.dedent("""\
    CONSTRAINTS -- violating any of these is a failure:
    1. NEVER write code, code blocks, folder structures, data models, or architecture.
    2. NEVER use markdown headers (###) in replies.
    3. ONLY recommend stacks from the catalog below. Stacks outside the catalog do not exist.
    4. NEVER skip Phase 1. Your first reply MUST be scope questions, not a recommendation.
    5. ONE phase per reply. Never combine phases.
    6. Maximum 6 sentences per reply.
    """)

_WRONG_OUTPUT = textwrap.dedent("""\
    WRONG OUTPUT (this is what failure looks like -- never do this):
    User: 'I want a real-time voting app'
    BAD: '### Core Features 1. Room creation... ### Suggested Tech Stack React + Express + Socket.IO...'
    This is wrong because it skips Phase 1, uses headers, and recommends stacks not in the catalog.
    """)

_PHASES = textwrap.dedent(f"""\
    You are Launchpad, a stack advisor. You follow three phases in strict order.

    PHASE 1 -- SCOPE (1-3 rounds, start here ALWAYS):
    Ask 2-4 questions about features and behavior the user hasn't mentioned yet. Be specific to their project.
    Do NOT mention any technology. Do NOT recommend a stack. Just explore the idea.
    After enough rounds, summarize the captured features as a short numbered list and ask if anything is missing.
    Only move to Phase 2 after confirmation.

    PHASE 2 -- OPTIONS (exactly 1 turn):
    Present 2-3 stack options from the catalog. For each: name, one sentence why it fits, and the scaffold command.
    Mark your top pick with a star.
    After presenting stacks, briefly mention relevant add-ons and design assets.
    For any stack with a UI surface, frontend-craft guidance and default palette/font assets are included automatically.
    For data-heavy projects, suggest the data-intensive add-on.
    Ask which stack (and optionally which add-ons/assets) they want.

    PHASE 3 -- COMMIT (exactly 1 turn):
    Confirm their choice in one sentence. Emit {READY_TOKEN} on its own line.
    """)

_DECISION_MAP = textwrap.dedent("""\
    DECISION MAP (* = your top pick for that use case):
    real-time/live/presence/chat/voting/collaborative -> *elixir-phoenix | typescript-sveltekit
    full-stack JS web/SSR/content -> *typescript-sveltekit | typescript-nextjs
    CRUD/MVP/admin/content platform -> *ruby-rails | python-django
    React required/Vercel -> typescript-nextjs
    Node.js API/microservice -> typescript-fastify
    high-perf API/CLI/infra -> *go-service | rust-axum
    enterprise API/C# -> dotnet-api
    enterprise API/Java/JVM -> java-spring
    Python API/ML/data -> python-fastapi
    Python full-stack/admin/CMS -> python-django
    native mobile -> dart-flutter
    perf-critical systems -> *rust-axum | go-service
    PHP -> laravel
    """)


def conversation_system_prompt(catalog: Catalog | None = None) -> str:
    """Instructions sent with every conversational turn."""
    catalog = catalog or get_catalog()
    lines = [_CONSTRAINTS, _WRONG_OUTPUT, _PHASES, _DECISION_MAP]

    lines.append("LAYER TAXONOMY (how stacks map to architectural roles):")
    for profile in catalog.profiles:
        entry = f"- {profile.id.value}: layer={profile.layer.value}"
        if profile.has_ui:
            entry += " (has UI)"
        lines.append(entry)
    lines.append("")

    lines.append("Catalog IDs (for extraction step):")
    lines.extend(catalog.summary_lines())
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extraction_prompt(catalog: Catalog | None = None) -> str:
    """Fixed instruction asking the backend for the final decision as JSON."""
    catalog = catalog or get_catalog()
    profile_choices = "|".join(p.value for p in ProfileId)
    return (
        "Based on our conversation, extract the final stack decision.\n\n"
        "Return ONLY valid JSON -- no markdown, no prose:\n"
        "{\n"
        f'  "profile_id": "<{profile_choices}>",\n'
        '  "addon_ids": [],\n'
        '  "asset_ids": [],\n'
        '  "confidence": 0.0,\n'
        '  "rationale": "one sentence"\n'
        "}\n\n"
        "Asset IDs available:\n" + "\n".join(catalog.summary_lines())
    )


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

_SCAFFOLD_RULE = textwrap.dedent("""\
    The AI agent should NEVER generate framework boilerplate files (package.json,
    mix.exs, Gemfile, etc.). The scaffold command handles all of that. The agent's
    job is to write application code AFTER the scaffold is complete.
    """)

_ADAPTATION_RULE = textwrap.dedent("""\
    ADAPTATION RULE:
    All generated instruction files MUST use the selected framework's idioms.
    Code examples, component patterns, styling approaches, and file globs must
    match the framework. Do NOT emit patterns from a different ecosystem.
    """)

_UI_NOTE = textwrap.dedent("""\
    UI STACK NOTE:
    This is a UI framework. The copilot-instructions.md MUST mention the
    styling system (e.g. Tailwind CSS) as part of the always-on standards.
    A brief reference is sufficient -- detailed tokens belong in design-system.instructions.md.
    """)

_FRONTEND_CRAFT_GUIDANCE = textwrap.dedent("""\
    - The frontend-craft addon is included. Its principles are framework-agnostic.
      When generating instruction files, adapt ALL examples, component patterns,
      animation techniques, and styling approaches to the selected framework's
      idioms (e.g. LiveView function components for Phoenix, Svelte components
      for SvelteKit, ViewComponent for Rails, Blade for Laravel, widgets for
      Flutter). Do NOT emit React/JSX examples for non-React stacks.
    - IMPORTANT: The frontend-craft file MUST preserve guidance on ALL of these:
      loading/empty/error state patterns, state management, motion/animation,
      accessibility, and performance. These are the most actionable parts;
      do NOT compress them away.
    """)

_SERVER_PATTERNS = textwrap.dedent("""\
    SERVER PATTERNS:
    A server-patterns asset is included. Generate a dedicated
    server-patterns.instructions.md file with validation, error handling,
    data access, and form/action conventions adapted to the selected framework.
    The applyTo glob MUST target server-side source files for the framework.
    """)

_TESTING = textwrap.dedent("""\
    TESTING:
    A testing asset is included. Generate a dedicated testing.instructions.md
    with ONLY the framework-specific testing guidance (runner, file conventions,
    setup/teardown, assertion style). Drop guidance for other frameworks.
    """)


def _design_guidance(has_palette: bool, has_fonts: bool, has_frontend_craft: bool) -> str:
    """DESIGN SYSTEM SYNTHESIS block, or ``""`` when no visual asset is selected."""
    if not (has_palette or has_fonts or has_frontend_craft):
        return ""

    lines = [
        "DESIGN SYSTEM SYNTHESIS:",
        "The assets below include visual identity guidance. When generating output files:",
        "- Merge the design-system baseline with any selected palette/font assets into",
        "  a single cohesive visual language. Don't repeat conflicting defaults.",
    ]
    if has_palette:
        lines.extend([
            "- A palette asset is included. Use its specific color tokens as the concrete",
            "  values for the design-system's color guidance. The palette overrides generic",
            "  color suggestions in the baseline.",
        ])
    if has_fonts:
        lines.extend([
            "- A font pairing asset is included. Use its specific fonts as the concrete",
            "  values for the design-system's typography guidance.",
        ])
    block = "\n".join(lines) + "\n"
    if has_frontend_craft:
        block += _FRONTEND_CRAFT_GUIDANCE
    block += (
        "- Generate a dedicated design-system.instructions.md that synthesizes the\n"
        "  baseline + palette + fonts into framework-appropriate tokens and setup.\n"
        "  The applyTo glob MUST match the selected framework's template/style files.\n"
    )
    return block


def _asset_summary(assets: list[ContextAsset]) -> str:
    return ", ".join(sorted(f"{a.id} ({a.category})" for a in assets))


def _context_blocks(assets: list[ContextAsset], store: ContentStore) -> str:
    blocks = []
    for asset in assets:
        body = store.read(asset)
        blocks.append(f"{ASSET_START}{asset.id}===\n{body}\n{ASSET_END}\n")
    return "\n".join(blocks)


def build_generation_prompt(
    project_name: str,
    selection: Selection,
    assets: list[ContextAsset],
    store: ContentStore,
    catalog: Catalog | None = None,
) -> str:
    """Assemble the generation prompt for a resolved selection.

    Args:
        project_name: Literal project name substituted into scaffold commands.
        selection: The validated selection.
        assets: Output of :func:`launchpad.selection.resolve_assets`.
        store: Source of each asset's body.
        catalog: Registry used for profile metadata.

    Returns:
        The complete prompt text.
    """
    catalog = catalog or get_catalog()
    asset_ids = [a.id for a in assets]

    has_palette = any(i.startswith("asset.palette.") for i in asset_ids)
    has_fonts = any(i.startswith("asset.fonts.") for i in asset_ids)
    has_frontend_craft = f"addon.{FRONTEND_CRAFT}" in asset_ids
    has_server_patterns = "asset.server.patterns" in asset_ids
    has_testing = any(i.startswith("asset.testing.") for i in asset_ids)

    profile = catalog.profile(selection.profile_id)
    scaffold = render_scaffold_command(
        store, profile.scaffold_command if profile else "", project_name
    )
    file_glob = catalog.file_glob(selection.profile_id)

    sections: list[str] = [
        f"Generate AI instruction files for the project {project_name!r}.\n",
        f"Selected: profile={selection.profile_id} | "
        f"addons={', '.join(selection.addon_ids)} | "
        f"assets={_asset_summary(assets)}\n",
        "IMPORTANT -- SCAFFOLD COMMAND:\n"
        "The framework provides its own CLI scaffold command. The start.prompt.md MUST\n"
        "use this command as step 1 instead of manually creating project boilerplate:\n"
        f"{scaffold}\n",
        _SCAFFOLD_RULE,
        "PROJECT NAME SUBSTITUTION:\n"
        f"The project name is {project_name!r}. In all generated files, use the actual project name;\n"
        "NEVER output template variables like {{name}} or {{module}}. For example,\n"
        f"write {project_name!r} not {{{{name}}}} in scaffold commands and file references.\n",
    ]

    if profile is not None and profile.has_ui:
        sections.append(_UI_NOTE)
    design = _design_guidance(has_palette, has_fonts, has_frontend_craft)
    if design:
        sections.append(design)
    if has_server_patterns:
        sections.append(_SERVER_PATTERNS)
    if has_testing:
        sections.append(_TESTING)

    sections.append(_ADAPTATION_RULE)
    sections.append("Use ONLY the asset content below as your source. Do not invent conventions.\n")
    sections.append(_context_blocks(assets, store))
    sections.append(
        "Output ONLY file blocks -- no prose before or after:\n"
        f"{FILE_START}relative/path===\n(content)\n{FILE_END}\n"
    )
    sections.append(
        "Required:\n"
        "1. .github/copilot-instructions.md -- always-on standards from core + profile assets\n"
        f"2. .github/instructions/{selection.profile_id}.instructions.md -- framework-specific conventions\n"
        f"   from the profile asset. YAML frontmatter with applyTo: {file_glob!r} to scope to framework\n"
        "   source files. This MUST be a SEPARATE file from copilot-instructions.md.\n"
        "3. .github/instructions/*.instructions.md -- one per additional selected concern\n"
        "   with a YAML frontmatter applyTo glob\n"
        "4. AGENTS.md -- multi-agent ground rules\n"
        "5. .github/prompts/start.prompt.md -- YAML frontmatter MUST be exactly:\n"
        "   ---\n"
        '   description: "<one-sentence description>"\n'
        "   mode: agent\n"
        '   tools: ["terminal", "editFiles", "codebase"]\n'
        "   ---\n"
        "   Do NOT invent tool names. The only valid tools are: terminal, editFiles,\n"
        "   codebase, fetch. Use exactly these identifiers.\n"
        "   Body MUST:\n"
        f"   a) Run the framework scaffold command first: {scaffold}\n"
        "   b) Then proceed with application-specific implementation\n"
        "   c) Never manually create files the scaffold already provides\n"
    )
    return "\n".join(sections)
