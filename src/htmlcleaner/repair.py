"""Structural repair passes run after filtering.

Both passes work on an already-legal top-level node sequence and only add
wrappers the policy allows, so their output still satisfies the allow-list.
"""

from __future__ import annotations

import logging
from collections import deque

from .constants import INLINE_ELEMENTS, LIST_CONTAINER_ELEMENT, LIST_ITEM_ELEMENT, PARAGRAPH_ELEMENT
from .depth import limit_depth
from .node import Node, element
from .parser import parse
from .policy import Policy
from .serialize import render
from .treefilter import filter_node

logger = logging.getLogger(__name__)


def is_block(policy: Policy, node: Node) -> bool:
    """True for elements that end a paragraph.

    Every HTML element outside the phrasing set is a block, so unknown and
    custom elements are too. Wrap roots always are.
    """
    if not node.is_element or node.namespace:
        return False
    return node.name not in INLINE_ELEMENTS or node.name in policy.wrap_text_inside


def wrap_list_items(policy: Policy, nodes: list[Node]) -> list[Node]:
    """Wrap every top-level <li> in its own <ul>.

    Does nothing when the policy does not allow the list container.
    """
    if not policy.allows_element(LIST_CONTAINER_ELEMENT):
        return nodes

    wrapped = []
    for node in nodes:
        if node.is_element and not node.namespace and node.name == LIST_ITEM_ELEMENT:
            node = element(LIST_CONTAINER_ELEMENT, children=[node])
        wrapped.append(node)
    return wrapped


def _is_whitespace_text(node: Node) -> bool:
    return node.is_text and not node.data.strip()


def _flush_paragraph(policy: Policy, paragraph: Node) -> list[Node]:
    """Re-parse a finished paragraph so block content that ended up inside
    inline content is split out of it."""
    nodes = limit_depth(parse(render([paragraph])), policy.max_depth)
    # The parser can synthesize elements while splitting; filter them again.
    return [filter_node(policy, node) for node in nodes]


def wrap_text(policy: Policy, nodes: list[Node]) -> list[Node]:
    """Wrap runs of inline content between block elements in <p> elements.

    Whitespace-only text between blocks is kept as-is. Children of wrap-root
    elements (`policy.wrap_text_inside`) are wrapped as if they were top-level.
    Does nothing when the policy does not allow <p>.

    A flushed paragraph is re-parsed, and the parser may move inline content
    that followed a nested block out of it. Those nodes go back into the
    queue, so every inline run in the result sits inside a paragraph.
    """
    if not policy.allows_element(PARAGRAPH_ELEMENT):
        logger.debug("Skipping paragraph wrapping: <%s> is not allowed", PARAGRAPH_ELEMENT)
        return nodes

    wrapped: list[Node] = []
    paragraph: Node | None = None
    queue = deque(nodes)

    while queue or paragraph is not None:
        node = queue.popleft() if queue else None
        if paragraph is not None and (node is None or is_block(policy, node)):
            if node is not None:
                queue.appendleft(node)
            queue.extendleft(reversed(_flush_paragraph(policy, paragraph)))
            paragraph = None
            continue
        if node is None:
            break

        if is_block(policy, node):
            if node.name in policy.wrap_text_inside:
                node = node.copy(children=wrap_text(policy, node.children))
            wrapped.append(node)
        elif paragraph is None and _is_whitespace_text(node):
            wrapped.append(node)
        else:
            if paragraph is None:
                paragraph = element(PARAGRAPH_ELEMENT)
            paragraph.append_child(node)

    return wrapped
