"""Markdown rendering and HTML -> Markdown serialization for workspace notes."""

from gencomputer.runtime.rendering.markdown import escape_html, render_inline, render_markdown
from gencomputer.runtime.rendering.serializer import HtmlNode, html_to_markdown, parse_html, serialize_node

__all__ = [
    "HtmlNode",
    "escape_html",
    "html_to_markdown",
    "parse_html",
    "render_inline",
    "render_markdown",
    "serialize_node",
]
