"""HTML fragment parsing on top of html5lib.

html5lib performs tokenization and tree construction (including all error
recovery); this module only converts its ElementTree output into `Node`
trees. The conversion uses an explicit stack because parsed input can nest
arbitrarily deep before the depth guard has run.
"""

from __future__ import annotations

import html5lib

from .constants import NAMESPACE_PREFIXES
from .node import COMMENT, DOCTYPE, TEXT, Attribute, Node

_TREE_BUILDER = html5lib.getTreeBuilder("etree")

# Tags html5lib's etree builder uses for non-element nodes
_ETREE_DOCTYPE = "<!DOCTYPE>"


def _split_qualified(tag):
    """Split an ElementTree '{uri}local' name into (short namespace, local name)."""
    if tag[:1] != "{":
        return "", tag
    uri, _, local = tag[1:].partition("}")
    return NAMESPACE_PREFIXES.get(uri, uri), local


def _convert_attributes(attrib):
    attrs = []
    for key, value in attrib.items():
        namespace, name = _split_qualified(key)
        attrs.append(Attribute(name, value or "", namespace))
    return attrs


def _shell(element):
    """Create the Node for an etree element without its children."""
    tag = element.tag
    if callable(tag):
        # ElementTree.Comment is a factory function used as the tag
        return Node(COMMENT, data=element.text or "")
    if tag == _ETREE_DOCTYPE:
        return Node(DOCTYPE, data=element.text or "")
    namespace, name = _split_qualified(tag)
    return Node(name, attrs=_convert_attributes(element.attrib), namespace=namespace)


def _convert_fragment(root):
    nodes = []
    stack = [(root, nodes)]
    while stack:
        element, children = stack.pop()
        if element.text:
            children.append(Node(TEXT, data=element.text))
        for child in element:
            node = _shell(child)
            children.append(node)
            if node.is_element:
                stack.append((child, node.children))
            if child.tail:
                children.append(Node(TEXT, data=child.tail))
    return nodes


def parse(text, container="div"):
    """Parse an HTML fragment as if it were the contents of `container`.

    Returns the list of top-level nodes. Parsing never fails on content;
    malformed markup is repaired by the HTML5 tree construction rules.
    """
    parser = html5lib.HTMLParser(tree=_TREE_BUILDER, namespaceHTMLElements=False)
    root = parser.parseFragment(text or "", container=container)
    return _convert_fragment(root)
