"""Policy enforcement over a parsed node tree.

`filter_node` never changes its input. Kept elements are rebuilt with
filtered children and attributes; everything the policy rejects is demoted
to a text node so the rejected markup shows up as visible text instead of
disappearing or being interpreted.
"""

from __future__ import annotations

import html
import logging
from urllib.parse import urlsplit, urlunsplit

from .constants import SAFE_URL_SCHEMES, URL_ATTRIBUTES
from .node import Attribute, Node, text_node
from .policy import Policy
from .serialize import to_html

logger = logging.getLogger(__name__)

# Browsers strip these from both ends of a URL attribute ...
_URL_STRIP_CHARS = "".join(chr(code) for code in range(0x21))
# ... and ignore these anywhere inside it ("java\tscript:").
_URL_IGNORED_CHARS = str.maketrans("", "", "\t\n\r")


def _has_control_chars(value: str) -> bool:
    return any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in value)


def clean_url(policy: Policy, value: str) -> str | None:
    """Return the canonical form of an acceptable URL, or None to drop it."""
    value = value.strip(_URL_STRIP_CHARS).translate(_URL_IGNORED_CHARS)
    if _has_control_chars(value):
        return None
    try:
        url = urlsplit(value)
    except ValueError:
        return None

    if url.scheme not in SAFE_URL_SCHEMES:
        return None
    if policy.validate_url is not None and not policy.validate_url(url):
        return None
    return urlunsplit(url)


def filter_attributes(policy: Policy, node: Node) -> list[Attribute]:
    kept = []
    tag = node.name
    for attr in node.attrs:
        if attr.namespace:
            continue
        name = attr.name
        if not policy.allows_attribute(tag, name):
            logger.debug("Dropping attribute %s on <%s>", name, tag)
            continue

        value = attr.value
        if name in URL_ATTRIBUTES and not policy.allow_javascript_url:
            cleaned = clean_url(policy, value)
            if cleaned is None:
                logger.debug("Dropping %s=%r on <%s>: rejected URL", name, value, tag)
                continue
            if cleaned != value:
                attr = Attribute(name, cleaned)
                value = cleaned

        pattern = policy.attribute_pattern(tag, name)
        if pattern is not None and pattern.search(value) is None:
            logger.debug("Dropping %s=%r on <%s>: no match for %s", name, value, tag, pattern.pattern)
            continue

        kept.append(attr)
    return kept


def filter_children(policy: Policy, node: Node) -> list[Node]:
    return [filter_node(policy, child) for child in node.children]


def _markup_as_text(node: Node) -> Node:
    # The renderer escapes text once, so store the markup entity-decoded.
    return text_node(html.unescape(to_html(node)))


def filter_node(policy: Policy, node: Node) -> Node:
    """Return a new node holding only what `policy` allows from `node`."""
    if node.is_text:
        return text_node(node.data)

    if node.is_comment:
        if policy.escape_comments:
            return text_node(to_html(node))
        return node.copy(children=[])

    if node.is_doctype:
        return text_node(to_html(node))

    if node.is_container:
        return node.copy(children=filter_children(policy, node))

    if node.namespace:
        logger.debug("Demoting foreign element <%s %s> to text", node.namespace, node.name)
        return _markup_as_text(node)

    if not policy.allows_element(node.name):
        logger.debug("Demoting disallowed element <%s> to text", node.name)
        return _markup_as_text(node)

    children = filter_children(policy, node)
    attrs = filter_attributes(policy, node)

    # An image without a source is useless and can break layout
    if node.name == "img" and not any(attr.name == "src" for attr in attrs):
        return text_node("")

    return node.copy(attrs=attrs, children=children)
