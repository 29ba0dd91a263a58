"""Nesting-depth guard.

Bounds how deep every later pass (and the renderer) has to recurse. This is
stack safety, not policy: truncated content is replaced by a visible marker.
"""

from __future__ import annotations

import logging

from .constants import DEFAULT_MAX_DEPTH, DEPTH_PLACEHOLDER
from .node import TEXT, Node

logger = logging.getLogger(__name__)


def _truncate(node: Node) -> None:
    node.name = TEXT
    node.namespace = ""
    node.attrs = []
    node.children = []
    node.data = DEPTH_PLACEHOLDER


def limit_depth(nodes: list[Node], max_depth: int = DEFAULT_MAX_DEPTH) -> list[Node]:
    """Truncate `nodes` in place so no node sits deeper than `max_depth`.

    Top-level nodes are at depth 1. The first node that reaches `max_depth`
    in a sibling list becomes a placeholder text node and the siblings after
    it are removed. `max_depth <= 0` disables the guard. Returns `nodes`.
    """
    if max_depth <= 0:
        return nodes

    stack: list[tuple[list[Node], int]] = [(nodes, 1)]
    while stack:
        siblings, depth = stack.pop()
        if depth >= max_depth:
            if siblings:
                logger.debug("Truncating %d node(s) at depth %d", len(siblings), depth)
                _truncate(siblings[0])
                del siblings[1:]
            continue
        for node in siblings:
            if node.children:
                stack.append((node.children, depth + 1))
    return nodes


def tree_depth(nodes: list[Node]) -> int:
    """Return the nesting depth of a node sequence (0 when empty)."""
    deepest = 0
    stack = [(node, 1) for node in nodes]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in node.children)
    return deepest
