"""Allow-list policy for the sanitizer.

A `Policy` is built once and then only read. Every container it holds is
normalized to an immutable type in `__post_init__`, so one policy can be shared
by concurrent `sanitize()` calls. The builder methods never change the
receiver; they return a new policy.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any
from urllib.parse import SplitResult

from .constants import DEFAULT_MAX_DEPTH, SAFE_URL_SCHEMES

UrlValidator = Callable[[SplitResult], bool]
AttributePatterns = Mapping[str, "re.Pattern[str] | None"]

_ASCII_LOWER_TABLE = str.maketrans({chr(code): chr(code + 32) for code in range(65, 91)})
_EMPTY_ATTRIBUTES: AttributePatterns = MappingProxyType({})


def _lower(name: str) -> str:
    return str(name).translate(_ASCII_LOWER_TABLE)


def _compile(pattern: Any) -> re.Pattern[str] | None:
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    if isinstance(pattern, str):
        return re.compile(pattern)
    raise TypeError(f"attribute pattern must be a str or re.Pattern, got {type(pattern).__name__}")


def _normalize_attributes(attrs: Any) -> AttributePatterns:
    # None and empty collections mean "allowed, no element-specific attributes"
    if not attrs:
        return _EMPTY_ATTRIBUTES
    if isinstance(attrs, str):
        return MappingProxyType({_lower(attrs): None})
    if isinstance(attrs, Mapping):
        return MappingProxyType({_lower(name): _compile(pattern) for name, pattern in attrs.items()})
    return MappingProxyType({_lower(name): None for name in attrs})


def safe_url(url: SplitResult) -> bool:
    """Default URL validator: relative, http, https, mailto and data URLs."""
    return url.scheme in SAFE_URL_SCHEMES


@dataclass(frozen=True, slots=True)
class Policy:
    """An allow-list driven policy for sanitizing a parsed fragment.

    - Elements missing from `elements` are disallowed.
    - `elements[tag]` maps each element-specific attribute to an optional
      pattern its value must match (`re.search` semantics). On input it may
      also be None or a plain collection of attribute names.
    - `global_attributes` are allowed on every allowed element.
    - URL-valued attributes (href, src, poster) must parse and use a safe
      scheme; `validate_url` can reject more. `allow_javascript_url` skips
      the URL check entirely.

    All tag and attribute names are ASCII-lowercased on construction.
    """

    elements: Mapping[str, Any] = field(default_factory=dict)
    global_attributes: Collection[str] = field(default_factory=frozenset)

    validate_url: UrlValidator | None = None
    allow_javascript_url: bool = False

    # If True, comments become visible text instead of passing through.
    escape_comments: bool = False

    # Inline content at the top level (and inside `wrap_text_inside`
    # elements) is wrapped in <p> elements.
    wrap_text: bool = False
    wrap_text_inside: Collection[str] = field(default_factory=frozenset)

    # Nesting limit applied before filtering; 0 disables it.
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if not isinstance(self.elements, Mapping):
            # A bare collection of names allows those elements without attributes
            object.__setattr__(self, "elements", {name: None for name in self.elements})
        normalized = {_lower(name): _normalize_attributes(attrs) for name, attrs in self.elements.items()}
        object.__setattr__(self, "elements", MappingProxyType(normalized))

        if isinstance(self.global_attributes, str):
            object.__setattr__(self, "global_attributes", (self.global_attributes,))
        object.__setattr__(self, "global_attributes", frozenset(_lower(name) for name in self.global_attributes))

        if isinstance(self.wrap_text_inside, str):
            object.__setattr__(self, "wrap_text_inside", (self.wrap_text_inside,))
        object.__setattr__(self, "wrap_text_inside", frozenset(_lower(name) for name in self.wrap_text_inside))

        if self.validate_url is not None and not callable(self.validate_url):
            raise TypeError("validate_url must be callable or None")
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise TypeError("max_depth must be an int")
        if self.max_depth < 0:
            raise ValueError("max_depth must be >= 0 (0 disables the depth limit)")

    # -------
    # Queries
    # -------

    @property
    def element_names(self) -> frozenset[str]:
        return frozenset(self.elements)

    def allows_element(self, name: str | None) -> bool:
        return name is not None and name in self.elements

    def allows_attribute(self, element: str, name: str) -> bool:
        attrs = self.elements.get(element)
        if attrs is None:
            return False
        return name in attrs or name in self.global_attributes

    def attribute_pattern(self, element: str, name: str) -> re.Pattern[str] | None:
        attrs = self.elements.get(element)
        if attrs is None:
            return None
        return attrs.get(name)

    # -------
    # Builder
    # -------

    def allow_elements(self, *names: str) -> Policy:
        elements = dict(self.elements)
        for name in names:
            elements.setdefault(_lower(name), _EMPTY_ATTRIBUTES)
        return replace(self, elements=elements)

    def allow_attributes(self, element: str, *names: str) -> Policy:
        """Allow `names` on `element`, allowing the element itself if needed."""
        element = _lower(element)
        elements = dict(self.elements)
        attrs = dict(elements.get(element, _EMPTY_ATTRIBUTES))
        for name in names:
            attrs.setdefault(_lower(name), None)
        elements[element] = attrs
        return replace(self, elements=elements)

    def match_attribute(self, element: str, name: str, pattern: str | re.Pattern[str]) -> Policy:
        """Allow `name` on `element` only when its value matches `pattern`."""
        element = _lower(element)
        elements = dict(self.elements)
        attrs = dict(elements.get(element, _EMPTY_ATTRIBUTES))
        attrs[_lower(name)] = _compile(pattern)
        elements[element] = attrs
        return replace(self, elements=elements)

    def allow_global_attributes(self, *names: str) -> Policy:
        return replace(self, global_attributes=self.global_attributes | {_lower(name) for name in names})

    def deny_elements(self, *names: str) -> Policy:
        denied = {_lower(name) for name in names}
        return replace(self, elements={key: attrs for key, attrs in self.elements.items() if key not in denied})

    def deny_attributes(self, element: str, *names: str) -> Policy:
        element = _lower(element)
        if element not in self.elements:
            return self
        denied = {_lower(name) for name in names}
        elements = dict(self.elements)
        elements[element] = {key: pattern for key, pattern in elements[element].items() if key not in denied}
        return replace(self, elements=elements)

    def deny_global_attributes(self, *names: str) -> Policy:
        return replace(self, global_attributes=self.global_attributes - {_lower(name) for name in names})

    def wrap_inside(self, *names: str) -> Policy:
        """Treat `names` as wrap roots: their children are paragraph-wrapped too."""
        return replace(self, wrap_text_inside=self.wrap_text_inside | {_lower(name) for name in names})

    def with_url_validator(self, validate_url: UrlValidator | None) -> Policy:
        return replace(self, validate_url=validate_url)


DEFAULT_POLICY: Policy = Policy(
    elements={
        # Links and media
        "a": ["href"],
        "img": ["src", "alt"],
        "video": ["src", "poster", "controls"],
        "audio": ["src", "controls"],
        # Text formatting
        "b": None,
        "i": None,
        "u": None,
        "s": None,
        "em": None,
        "strong": None,
        "strike": None,
        "big": None,
        "small": None,
        "sup": None,
        "sub": None,
        # Edits
        "ins": None,
        "del": None,
        # Quotes and citations
        "abbr": None,
        "address": None,
        "cite": None,
        "q": None,
        "p": None,
        "blockquote": None,
        # Code
        "pre": None,
        "code": None,
        "kbd": None,
        "tt": None,
        # Disclosure
        "details": None,
        "summary": None,
    },
    global_attributes=["title"],
    validate_url=safe_url,
)
