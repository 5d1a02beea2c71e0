"""Minimal Markdown -> HTML renderer for workspace notes.

Line-oriented, three block states: fenced code, bullet list, and
heading / paragraph.  Supported inline syntax is bold, italic, inline code
and links.  Anything else (ordered lists, tables, blockquotes, nested
emphasis, backslash escapes) falls through as escaped paragraph text.
"""

from __future__ import annotations

import re

_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)

# Order matters: ``**`` / ``__`` must be consumed before the single-char rules.
_INLINE_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\*\*([^*]+)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"__([^_]+)__"), r"<strong>\1</strong>"),
    (re.compile(r"\*([^*]+)\*"), r"<em>\1</em>"),
    (re.compile(r"_([^_]+)_"), r"<em>\1</em>"),
    (re.compile(r"`([^`]+)`"), r"<code>\1</code>"),
    (
        re.compile(r"\[([^\]]+)\]\(([^)]+)\)"),
        r'<a href="\2" target="_blank" rel="noreferrer noopener">\1</a>',
    ),
)

_LINE_BREAK = re.compile(r"\r?\n")
_HEADING = re.compile(r"^(#{1,6})\s+")
_BULLET = re.compile(r"^[-*]\s+")

CODE_BLOCK_CLASS = "markdown-block__code"


def escape_html(text: str) -> str:
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


def render_inline(text: str) -> str:
    """Escape ``text`` and apply the inline substitutions."""
    html = escape_html(text)
    for pattern, replacement in _INLINE_RULES:
        html = pattern.sub(replacement, html)
    return html


def render_markdown(markdown: str) -> str:
    """Render Markdown to an HTML fragment.  Never raises.

    Output segments are joined with ``\\n``; a blank source line becomes an
    empty segment, and runs of empty segments collapse to one.  Empty input
    yields ``<p></p>``.
    """
    html: list[str] = []
    in_list = False
    in_code = False

    def close_list() -> None:
        nonlocal in_list
        if in_list:
            html.append("</ul>")
            in_list = False

    for raw_line in _LINE_BREAK.split(markdown or ""):
        line = raw_line.rstrip()

        if line.startswith("```"):
            if in_code:
                html.append("</pre>")
                in_code = False
            else:
                close_list()
                in_code = True
                html.append(f'<pre class="{CODE_BLOCK_CLASS}">')
            continue

        if in_code:
            html.append(escape_html(raw_line))
            continue

        if not line:
            close_list()
            html.append("")
            continue

        heading = _HEADING.match(line)
        if heading:
            close_list()
            level = min(len(heading.group(1)), 6)
            text = line[heading.end() :]
            html.append(f"<h{level}>{render_inline(text)}</h{level}>")
            continue

        bullet = _BULLET.match(line)
        if bullet:
            if not in_list:
                in_list = True
                html.append("<ul>")
            html.append(f"<li>{render_inline(line[bullet.end() :])}</li>")
            continue

        close_list()
        html.append(f"<p>{render_inline(line)}</p>")

    close_list()
    if in_code:
        html.append("</pre>")

    collapsed = [segment for i, segment in enumerate(html) if not (segment == "" and i > 0 and html[i - 1] == "")]
    return "\n".join(collapsed) or "<p></p>"
