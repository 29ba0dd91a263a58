"""Public sanitization entry points.

Pipeline for `sanitize()`:

    parse -> limit_depth -> filter -> wrap list items -> wrap text
          -> wrap list items again -> limit_depth -> render

The text wrapping step and the second list pass only run with `wrap_text`.

Every entry point accepts None as the policy and then uses DEFAULT_POLICY.
Sanitizing is total: no input content makes these functions raise.
"""

from __future__ import annotations

from .depth import limit_depth
from .node import Node
from .parser import parse
from .policy import DEFAULT_POLICY, Policy
from .repair import wrap_list_items, wrap_text
from .serialize import render
from .treefilter import filter_node


def sanitize_node(policy: Policy | None, node: Node) -> Node:
    """Filter a single node against the policy, without structural repair.

    The node should already be depth-limited (see `limit_depth`); filtering
    recurses once per nesting level.
    """
    return filter_node(policy or DEFAULT_POLICY, node)


def sanitize_nodes(policy: Policy | None, nodes: list[Node]) -> list[Node]:
    """Filter a top-level node sequence and repair its structure.

    The input nodes are not modified. The result is depth-limited again
    because the repair wrappers add nesting levels.
    """
    policy = policy or DEFAULT_POLICY
    cleaned = [filter_node(policy, node) for node in nodes]
    cleaned = wrap_list_items(policy, cleaned)
    if policy.wrap_text:
        # Re-parsed paragraphs can leave a list item at the top level
        cleaned = wrap_list_items(policy, wrap_text(policy, cleaned))
    return limit_depth(cleaned, policy.max_depth)


def sanitize(policy: Policy | None, text: str) -> str:
    """Sanitize an HTML fragment and return the safe markup."""
    policy = policy or DEFAULT_POLICY
    nodes = limit_depth(parse(text), policy.max_depth)
    return render(sanitize_nodes(policy, nodes))


def clean(text: str, policy: Policy | None = None) -> str:
    """`sanitize()` with the arguments in text-first order."""
    return sanitize(policy, text)
