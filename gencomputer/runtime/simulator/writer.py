"""Experience writer -- turns a ContentProfile into desktop output.

Two output modes (``GENCOMP_SIMULATOR_OUTPUT``):

- **note** (default): a Markdown note written to the workspace through the
  store, so it shows up in "My Computer" and opens in the note editor.
- **component**: TSX source for the ``GeneratedContent`` window, returned
  in-memory for the caller to place.

Templates are Jinja2 (same engine as the agent prompt).  User-visible text
is escaped for the target format before it reaches the template.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import jinja2
from loguru import logger

from gencomputer.runtime.models.enums import SimulatorOutput
from gencomputer.runtime.models.profile import ContentProfile, SimulationResult
from gencomputer.runtime.rendering.markdown import escape_html
from gencomputer.runtime.simulator.classifier import classify

if TYPE_CHECKING:
    from gencomputer.runtime.store.base import WorkspaceStore

SLUG_LIMIT = 40

_NOTE_TEMPLATE = """\
# {{ profile.title }}

**Requested:** {{ command }}

## Suggested Plan

{% if profile.custom_content is not none %}
```
{{ profile.custom_content }}
```
{% else %}
{% for item in profile.items %}
- {{ item }}
{% endfor %}
{% endif %}
{% if profile.tip %}

**💡 Pro Tip:** {{ profile.tip }}
{% endif %}
"""

_COMPONENT_TEMPLATE = """\
// THIS FILE IS MODIFIED BY THE GEMINI AGENT
// The agent will write dynamic content here based on user commands

export default function GeneratedContent() {
  return (
    <div className="generated-content">
      <h2>{{ title }}</h2>
{% if custom_content is not none %}
      <div style={{ '{{' }}
        background: '#1b1c2c',
        color: '#f3f4ff',
        padding: '20px',
        borderRadius: '12px',
        fontFamily: '"Fira Code", "Cascadia Code", monospace',
        whiteSpace: 'pre',
        marginBottom: '16px',
      {{ '}}' }}>
        {String.raw`{{ custom_content }}`}
      </div>
{% else %}
      <div style={{ '{{' }}
        background: 'linear-gradient(135deg, #667eea 0%, #764ba2 100%)',
        padding: '20px',
        borderRadius: '12px',
        color: 'white',
        marginBottom: '16px',
      {{ '}}' }}>
        <h3 style={{ '{{' }} margin: '0 0 16px 0', fontSize: '18px' {{ '}}' }}>✨ Suggested Plan</h3>
        <ul style={{ '{{' }} margin: 0, paddingLeft: '20px' {{ '}}' }}>
{% for item in items %}          <li style={{ '{{' }} marginBottom: '12px', fontSize: '15px' {{ '}}' }}>{{ item }}</li>
{% endfor %}        </ul>
      </div>
{% endif %}
{% if tip %}
      <div style={{ '{{' }}
        padding: '16px',
        background: '#f0f7ff',
        borderRadius: '8px',
        borderLeft: '4px solid #667eea',
      {{ '}}' }}>
        <p style={{ '{{' }} margin: 0, color: '#333' {{ '}}' }}>
          <strong>💡 Pro Tip:</strong> {{ tip }}
        </p>
      </div>
{% endif %}
    </div>
  );
}
"""

_env = jinja2.Environment(autoescape=False, trim_blocks=True, keep_trailing_newline=True)  # noqa: S701
_note_template = _env.from_string(_NOTE_TEMPLATE)
_component_template = _env.from_string(_COMPONENT_TEMPLATE)


def _jsx_text(text: str) -> str:
    """Escape text placed between JSX tags (braces would start an expression)."""
    return escape_html(text).replace("{", "&#123;").replace("}", "&#125;")


def _raw_template_literal(text: str) -> str:
    """Escape text for a ``String.raw`` template literal."""
    return text.replace("`", "\\`").replace("${", "$\\{")


def note_filename(profile: ContentProfile, command: str) -> str:
    """``<category>-<slug>.md``, slug derived from the lowercased command."""
    slug = re.sub(r"[^a-z0-9]+", "-", command.lower()).strip("-")[:SLUG_LIMIT].rstrip("-")
    return f"{profile.category}-{slug or 'request'}.md"


class ExperienceWriter:
    """Compose classifier output into a workspace note or component source."""

    def __init__(self, store: WorkspaceStore, output: SimulatorOutput = SimulatorOutput.NOTE) -> None:
        self._store = store
        self._output = output

    @property
    def output(self) -> SimulatorOutput:
        return self._output

    @staticmethod
    def render_note(profile: ContentProfile, command: str) -> str:
        # Keep the request echo on one line so it cannot open a new block.
        echo = " ".join(command.split())
        return _note_template.render(profile=profile, command=echo)

    @staticmethod
    def render_component(profile: ContentProfile) -> str:
        return _component_template.render(
            title=_jsx_text(profile.title),
            items=[_jsx_text(item) for item in profile.items],
            custom_content=(
                _raw_template_literal(profile.custom_content) if profile.custom_content is not None else None
            ),
            tip=_jsx_text(profile.tip) if profile.tip else None,
        )

    async def generate(self, command: str) -> SimulationResult:
        """Classify ``command`` and produce output in the configured mode."""
        profile = classify(command)
        logger.info("Simulator: '{}' -> {} ({})", command, profile.category, self._output)

        if self._output == SimulatorOutput.COMPONENT:
            return SimulationResult(profile=profile, component_source=self.render_component(profile))

        path = note_filename(profile, command)
        await self._store.write(path, self.render_note(profile, command))
        logger.info("Simulator: created workspace note {}", path)
        return SimulationResult(profile=profile, note_path=path)
