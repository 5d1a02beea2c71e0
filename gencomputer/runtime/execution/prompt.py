"""Agent prompt rendering with Jinja2.

The external agent gets one opaque text prompt: guardrails describing the
files it may touch, the current window manifest, snapshots of the shared
workspace and of the agent component folder, and finally the user request.

Template variables:

- ``workspace_dir``   : str       -- absolute "My Computer" path
- ``components_dir``  : str       -- absolute agent-components path
- ``manifest_path``   : str       -- absolute agent-manifest.ts path
- ``manifest``        : str|None  -- manifest contents (None if missing)
- ``workspace_lines`` : list[str] -- workspace snapshot, truncated
- ``component_lines`` : list[str] -- component snapshot, truncated
- ``command``         : str       -- the user request
- ``date``            : str       -- current date (YYYY-MM-DD)
"""

from __future__ import annotations

import os
from datetime import UTC, datetime
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

import jinja2
from anyio import to_thread
from loguru import logger

if TYPE_CHECKING:
    from gencomputer.runtime.settings import GenComputerSettings

SNAPSHOT_MAX_DEPTH = 2
SNAPSHOT_MAX_LINES = 40

AGENT_PROMPT_TEMPLATE = """\
You are an AI coding agent helping power the "Generative Computer" desktop experience.

You collaborate with a human by editing shared files. Respect these guardrails:

ALLOWED LOCATIONS
- {{ workspace_dir }}   ("My Computer" workspace for notes, data, and assets)
- {{ components_dir }}   (React components that render custom desktop windows)
- {{ manifest_path }}    (window registry; keep the exported array intact)

PROTECTED FILES
- runtime/frontend/src/components/CommandInput.*
- runtime/frontend/src/components/Desktop.*
- runtime/frontend/src/components/Window.*
- Frontend entrypoints, bundler config, and any other infrastructure files

WORKFLOW BASICS
1. Markdown & data -> create files in the workspace (e.g. plans, tables, csv exports).
2. Interactive UI -> place components in agent-components/, export them, then register windows in agent-manifest.ts with kind 'component'.
3. Auto-open notes -> add an entry with kind 'markdown' and the relative filename (e.g. 'retro-roadmap.md').
4. Use descriptive filenames and stable ids so the desktop can reconcile updates.

MANIFEST REMINDERS
- Keep `export const agentWindows: AgentWindowDescriptor[] = [...]`.
- Import components relatively from `./agent-components/...`.
- Each descriptor needs a unique `id`, a `title`, and either `kind: 'markdown'` + `file`, or `kind: 'component'` + `component`.
- Optional `position: { x, y }` lets you choose an initial window placement.

GENERAL STYLE
- Prefer accessible HTML, clear headings, and concise copy.
- When embedding ASCII art or long code, wrap it in triple backticks inside markdown.
- Explain how the human can interact with whatever you create.
- Never disable or hide the command input.

When you finish applying the request, respond with the single word DONE.

Today is {{ date }}.

Current agent-manifest.ts:
```ts
{{ manifest if manifest is not none else "// (file does not exist yet)" }}
```

Workspace snapshot:
{% for line in workspace_lines %}
  {{ line }}
{% else %}
  (empty)
{% endfor %}

Agent components:
{% for line in component_lines %}
  {{ line }}
{% else %}
  (empty)
{% endfor %}

User request:
{{ command }}

Please implement the request and reply with DONE when complete."""

_env = jinja2.Environment(autoescape=False, trim_blocks=True)  # noqa: S701
_template = _env.from_string(AGENT_PROMPT_TEMPLATE)


def snapshot_directory(root: Path, depth: int = 0, prefix: str = "") -> list[str]:
    """List ``root`` recursively (``depth`` <= 2) as ``📁 dir/`` / ``📄 file`` lines."""
    if depth > SNAPSHOT_MAX_DEPTH:
        return []
    try:
        entries = sorted(os.scandir(root), key=lambda e: e.name)
    except FileNotFoundError:
        return []
    except OSError as exc:
        logger.warning("Unable to list {}: {}", root, exc)
        return []

    lines: list[str] = []
    for entry in entries:
        relative = f"{prefix}/{entry.name}" if prefix else entry.name
        if entry.is_dir():
            lines.append(f"📁 {relative}/")
            lines.extend(snapshot_directory(Path(entry.path), depth + 1, relative))
        else:
            lines.append(f"📄 {relative}")
    return lines


def truncate_snapshot(lines: list[str], limit: int = SNAPSHOT_MAX_LINES) -> list[str]:
    if len(lines) <= limit:
        return lines
    return [*lines[:limit], "…"]


def _read_optional(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        logger.warning("Unable to read {}: {}", path, exc)
        return None


def render_agent_prompt(
    command: str,
    *,
    workspace_dir: Path,
    components_dir: Path,
    manifest_path: Path,
    manifest: str | None,
    workspace_lines: list[str],
    component_lines: list[str],
) -> str:
    """Render the agent prompt from already-collected context."""
    return _template.render(
        command=command,
        workspace_dir=str(workspace_dir),
        components_dir=str(components_dir),
        manifest_path=str(manifest_path),
        manifest=manifest,
        workspace_lines=truncate_snapshot(workspace_lines),
        component_lines=truncate_snapshot(component_lines),
        date=datetime.now(tz=UTC).strftime("%Y-%m-%d"),
    )


async def build_agent_prompt(command: str, settings: GenComputerSettings) -> str:
    """Collect manifest and snapshots from disk, then render the prompt."""
    manifest_path = settings.agent_manifest_path
    components_dir = settings.agent_components_path
    workspace_dir = settings.workspace_path

    manifest = await to_thread.run_sync(partial(_read_optional, manifest_path))
    workspace_lines = await to_thread.run_sync(partial(snapshot_directory, workspace_dir))
    component_lines = await to_thread.run_sync(partial(snapshot_directory, components_dir))

    return render_agent_prompt(
        command,
        workspace_dir=workspace_dir,
        components_dir=components_dir,
        manifest_path=manifest_path,
        manifest=manifest,
        workspace_lines=workspace_lines,
        component_lines=component_lines,
    )
