"""HTML -> Markdown serializer for the rich-text note editor.

The editor renders notes with ``render_markdown`` and posts the edited HTML
back; this module turns that HTML into Markdown again.  It is *not* an exact
inverse of the renderer: ordered lists and tables have no Markdown form here
and degrade to their text content.

The HTML fragment is first parsed into a small ``HtmlNode`` tree with the
standard-library ``HTMLParser``; ``serialize_node`` then walks that tree.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from html.parser import HTMLParser

VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "param", "source", "track", "wbr"}
)
_SKIPPED = frozenset({"head", "script", "style", "template", "title"})
_HEADINGS = {f"h{level}": level for level in range(1, 7)}

_WHITESPACE = re.compile(r"\s+")
_EDGE_NEWLINES = re.compile(r"^\n+|\n+$")
_NEWLINES = re.compile(r"\n+")


@dataclass
class HtmlNode:
    """Element (``tag`` set) or text node (``tag`` is None)."""

    tag: str | None = None
    attrs: dict[str, str] = field(default_factory=dict)
    children: list[HtmlNode] = field(default_factory=list)
    text: str = ""
    parent: HtmlNode | None = field(default=None, repr=False)

    @property
    def is_text(self) -> bool:
        return self.tag is None

    @property
    def elements(self) -> list[HtmlNode]:
        return [child for child in self.children if not child.is_text]

    def text_content(self) -> str:
        if self.is_text:
            return self.text
        return "".join(child.text_content() for child in self.children)

    def find(self, tag: str) -> HtmlNode | None:
        """Depth-first search for the first descendant element named ``tag``."""
        for child in self.elements:
            if child.tag == tag:
                return child
            found = child.find(tag)
            if found is not None:
                return found
        return None


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = HtmlNode(tag="#fragment")
        self._stack: list[HtmlNode] = [self.root]

    @property
    def _current(self) -> HtmlNode:
        return self._stack[-1]

    def _append(self, node: HtmlNode) -> None:
        node.parent = self._current
        self._current.children.append(node)

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        node = HtmlNode(tag=tag, attrs={name: value or "" for name, value in attrs})
        self._append(node)
        if tag not in VOID_ELEMENTS:
            self._stack.append(node)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._append(HtmlNode(tag=tag, attrs={name: value or "" for name, value in attrs}))

    def handle_endtag(self, tag: str) -> None:
        # Close up to the nearest open element with this name; stray end tags are ignored.
        for index in range(len(self._stack) - 1, 0, -1):
            if self._stack[index].tag == tag:
                del self._stack[index:]
                return

    def handle_data(self, data: str) -> None:
        self._append(HtmlNode(text=data))


def parse_html(html: str) -> HtmlNode:
    """Parse an HTML fragment (or document) into an ``HtmlNode`` tree."""
    builder = _TreeBuilder()
    builder.feed(html or "")
    builder.close()
    return builder.root


def _inside_list_item(node: HtmlNode) -> bool:
    parent = node.parent
    while parent is not None:
        if parent.tag == "li":
            return True
        parent = parent.parent
    return False


def serialize_node(node: HtmlNode, list_depth: int = 1) -> str:
    """Serialize one node (and its subtree) to Markdown."""
    if node.is_text:
        return _WHITESPACE.sub(" ", node.text).replace("\u00a0", " ")

    tag = node.tag
    if tag in _SKIPPED:
        return ""

    if tag == "pre":
        content = _EDGE_NEWLINES.sub("", node.text_content())
        return f"\n\n```\n{content}\n```\n\n" if content else ""

    if tag == "ul":
        # Only a list nested inside an item is indented one level deeper.
        depth = list_depth + 1 if _inside_list_item(node) else list_depth
        items = (serialize_node(item, depth) for item in node.elements)
        return "\n".join(item for item in items if item)

    if tag == "li":
        indent = "  " * (list_depth - 1)
        content = "".join(serialize_node(child, list_depth) for child in node.children if child.tag != "ul").strip()
        # Nested lists carry their own (deeper) indentation.
        nested = [serialize_node(child, list_depth) for child in node.children if child.tag == "ul"]
        lines = [f"{indent}- " + _NEWLINES.sub(f"\n{indent}  ", content)] if content else []
        lines.extend(block for block in nested if block)
        return "\n".join(lines)

    children = "".join(serialize_node(child, list_depth) for child in node.children)

    if tag in ("strong", "b"):
        return f"**{children.strip()}**" if children.strip() else ""
    if tag in ("em", "i"):
        return f"*{children.strip()}*" if children.strip() else ""
    if tag == "code":
        if node.parent is not None and node.parent.tag == "pre":
            return children
        return f"`{children.strip()}`" if children.strip() else ""
    if tag == "a":
        href = node.attrs.get("href")
        label = children.strip()
        if not href:
            return label
        return f"[{label or href}]({href})"
    if tag == "br":
        return "\n"
    if tag in ("p", "div"):
        return children.strip()
    if tag in _HEADINGS:
        heading = children.strip()
        return f"{'#' * _HEADINGS[tag]} {heading}" if heading else ""
    return children


def html_to_markdown(html: str) -> str:
    """Convert an HTML fragment to Markdown.

    Top-level blocks are serialized independently, empty ones dropped, and the
    rest joined with a blank line.  A full document is reduced to its body.
    """
    root = parse_html(html)
    body = root.find("body") or root
    blocks = (serialize_node(child).strip() for child in body.children)
    return "\n\n".join(block for block in blocks if block).strip()
