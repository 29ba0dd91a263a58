from .depth import limit_depth, tree_depth
from .node import Attribute, Node
from .parser import parse
from .policy import DEFAULT_POLICY, Policy, safe_url
from .preprocess import preprocess
from .sanitize import clean, sanitize, sanitize_node, sanitize_nodes
from .serialize import render, to_html

__all__ = [
    "DEFAULT_POLICY",
    "Attribute",
    "Node",
    "Policy",
    "clean",
    "limit_depth",
    "parse",
    "preprocess",
    "render",
    "safe_url",
    "sanitize",
    "sanitize_node",
    "sanitize_nodes",
    "to_html",
    "tree_depth",
]
