"""Owned node trees consumed and produced by the sanitizer passes."""

from __future__ import annotations

from dataclasses import dataclass

DOCUMENT = "#document"
DOCUMENT_FRAGMENT = "#document-fragment"
TEXT = "#text"
COMMENT = "#comment"
DOCTYPE = "!doctype"

_CONTAINER_NAMES = frozenset({DOCUMENT, DOCUMENT_FRAGMENT})
_NON_ELEMENT_NAMES = frozenset({DOCUMENT, DOCUMENT_FRAGMENT, TEXT, COMMENT, DOCTYPE})


@dataclass(frozen=True, slots=True)
class Attribute:
    """A single attribute. `namespace` is empty for plain HTML attributes and
    holds the prefix ("xlink", "xml", "xmlns") for namespaced ones."""

    name: str
    value: str = ""
    namespace: str = ""

    @property
    def qualified_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}:{self.name}"
        return self.name


class Node:
    """Represents one node of a parsed fragment.
    - name: tag name for elements; '#text', '#comment', '!doctype',
      '#document' or '#document-fragment' otherwise
    - attrs: ordered list of Attribute (names are not required to be unique)
    - children: list of owned child Nodes
    - data: text for text and comment nodes, doctype name for doctypes
    - namespace: '' for HTML, 'svg' or 'math' for foreign elements

    There are no parent or sibling links: a parent owns its children list and
    passes that rewrite the tree build new lists instead of splicing.
    """

    __slots__ = ("attrs", "children", "data", "name", "namespace")

    def __init__(self, name, attrs=None, children=None, data=None, namespace=""):
        if not name:
            msg = "Empty name passed to Node constructor (bug: parser or pass produced a blank node)"
            raise ValueError(msg)

        self.name = name
        self.attrs = list(attrs) if attrs else []
        self.children = list(children) if children else []
        self.data = data if data is not None else ""
        self.namespace = namespace or ""

    @property
    def is_element(self):
        return self.name not in _NON_ELEMENT_NAMES

    @property
    def is_text(self):
        return self.name == TEXT

    @property
    def is_comment(self):
        return self.name == COMMENT

    @property
    def is_doctype(self):
        return self.name == DOCTYPE

    @property
    def is_container(self):
        """True for document and document-fragment nodes."""
        return self.name in _CONTAINER_NAMES

    @property
    def is_foreign(self):
        return bool(self.namespace)

    def get_attr(self, name, default=None):
        """Return the value of the first non-namespaced attribute called `name`."""
        for attr in self.attrs:
            if attr.name == name and not attr.namespace:
                return attr.value
        return default

    def has_attr(self, name):
        return any(attr.name == name and not attr.namespace for attr in self.attrs)

    def append_child(self, child):
        if child is self:
            msg = f"Adding {child.name} as child of itself would create a cycle"
            raise ValueError(msg)
        self.children.append(child)

    def copy(self, attrs=None, children=None):
        """Shallow copy. Children are not cloned, but the list holding them is new."""
        return Node(
            self.name,
            attrs=self.attrs if attrs is None else attrs,
            children=self.children if children is None else children,
            data=self.data,
            namespace=self.namespace,
        )

    def __repr__(self):
        if self.name == TEXT:
            return f"Node(#text={self.data[:30]!r})"
        if self.name == COMMENT:
            return f"Node(#comment={self.data[:30]!r})"
        if self.namespace:
            return f"Node(<{self.namespace} {self.name}>, children={len(self.children)})"
        return f"Node(<{self.name}>, children={len(self.children)})"

    def to_test_format(self, indent=0):
        """Dump the subtree in html5lib-tests tree format ('| ' prefixed lines)."""
        if self.name in _CONTAINER_NAMES:
            return "\n".join(child.to_test_format(0) for child in self.children)
        if self.name == TEXT:
            return f'| {" " * indent}"{self.data}"'
        if self.name == COMMENT:
            return f"| {' ' * indent}<!-- {self.data} -->"
        if self.name == DOCTYPE:
            if self.data.strip():
                return f"| <!DOCTYPE {self.data}>"
            return "| <!DOCTYPE >"

        display_tag = f"{self.namespace} {self.name}" if self.namespace else self.name
        lines = [f"| {' ' * indent}<{display_tag}>"]

        # Sorted for deterministic output; namespaced names use "prefix local"
        for display_key, value in sorted(
            (f"{attr.namespace} {attr.name}" if attr.namespace else attr.name, attr.value) for attr in self.attrs
        ):
            lines.append(f'| {" " * (indent + 2)}{display_key}="{value}"')

        lines.extend(child.to_test_format(indent + 2) for child in self.children)
        return "\n".join(lines)


def text_node(data):
    return Node(TEXT, data=data)


def comment_node(data):
    return Node(COMMENT, data=data)


def element(name, attrs=None, children=None, namespace=""):
    """Build an element node. `attrs` may be a list of Attribute or a plain dict."""
    if isinstance(attrs, dict):
        attrs = [Attribute(key, "" if value is None else value) for key, value in attrs.items()]
    return Node(name, attrs=attrs, children=children, namespace=namespace)


def fragment(children=None):
    return Node(DOCUMENT_FRAGMENT, children=children)
