"""HTML serialization for sanitizer node trees.

Output follows the HTML fragment serialization algorithm closely enough that
parsing it again produces the same tree, which is what makes sanitizing
idempotent.
"""

from __future__ import annotations

from collections.abc import Iterable

from .constants import PREFORMATTED_ELEMENTS, RAWTEXT_ELEMENTS, VOID_ELEMENTS
from .node import COMMENT, DOCTYPE, TEXT, Attribute, Node


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: str | None) -> str:
    if not value:
        return ""
    return str(value).replace("&", "&amp;").replace('"', "&quot;")


def serialize_start_tag(name: str, attrs: Iterable[Attribute] | None = None) -> str:
    parts: list[str] = ["<", name]
    for attr in attrs or ():
        # Empty values keep the explicit form: href=""
        parts.extend([" ", attr.qualified_name, '="', _escape_attr_value(attr.value), '"'])
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def to_html(node: Node) -> str:
    """Convert a single node (and its subtree) to HTML."""
    parts: list[str] = []
    _node_to_html(node, parts, in_raw_text=False)
    return "".join(parts)


def render(nodes: Iterable[Node]) -> str:
    """Convert a sequence of sibling nodes to HTML."""
    parts: list[str] = []
    for node in nodes:
        _node_to_html(node, parts, in_raw_text=False)
    return "".join(parts)


def _node_to_html(node: Node, parts: list[str], *, in_raw_text: bool) -> None:
    name = node.name

    if name == TEXT:
        parts.append(node.data if in_raw_text else _escape_text(node.data))
        return

    if name == COMMENT:
        parts.append(f"<!--{node.data}-->")
        return

    if name == DOCTYPE:
        parts.append(f"<!DOCTYPE {node.data}>" if node.data else "<!DOCTYPE>")
        return

    if node.is_container:
        for child in node.children:
            _node_to_html(child, parts, in_raw_text=in_raw_text)
        return

    parts.append(serialize_start_tag(name, node.attrs))

    is_html = not node.namespace
    if is_html and name in VOID_ELEMENTS:
        return

    children = node.children
    if is_html and name in PREFORMATTED_ELEMENTS and children:
        first = children[0]
        # The parser drops one newline right after <pre>; write an extra one so it survives.
        if first.name == TEXT and first.data.startswith("\n"):
            parts.append("\n")

    child_raw = is_html and name in RAWTEXT_ELEMENTS
    for child in children:
        _node_to_html(child, parts, in_raw_text=child_raw)
    parts.append(serialize_end_tag(name))
