"""HTML element and attribute constants used by the sanitizer passes.

Elements are kept in frozensets: every pass only does membership checks.

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://html.spec.whatwg.org/multipage/parsing.html#serialising-html-fragments
"""

# HTML5 void elements (no closing tag)
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "basefont",
        "bgsound",
        "br",
        "col",
        "embed",
        "frame",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Text children of these elements are serialized without escaping.
RAWTEXT_ELEMENTS = frozenset(
    {
        "iframe",
        "noembed",
        "noframes",
        "plaintext",
        "script",
        "style",
        "xmp",
    }
)

# After a start tag with one of these names the tokenizer stops recognizing
# markup until the matching end tag (RAWTEXT, RCDATA and script data states).
RAW_TOKENIZER_ELEMENTS = RAWTEXT_ELEMENTS | {"textarea", "title"}

# A newline directly after the start tag is dropped by the parser.
PREFORMATTED_ELEMENTS = frozenset({"listing", "pre", "textarea"})

# Phrasing content. Any other HTML element, including unknown and custom
# ones, is a paragraph boundary for inline-content wrapping. None of these
# start tags closes an open <p> in the tree builder.
INLINE_ELEMENTS = frozenset(
    {
        "a",
        "abbr",
        "acronym",
        "area",
        "audio",
        "b",
        "bdi",
        "bdo",
        "big",
        "br",
        "button",
        "canvas",
        "cite",
        "code",
        "data",
        "datalist",
        "del",
        "dfn",
        "em",
        "embed",
        "font",
        "i",
        "iframe",
        "img",
        "input",
        "ins",
        "kbd",
        "label",
        "map",
        "mark",
        "meter",
        "nobr",
        "noscript",
        "object",
        "output",
        "picture",
        "progress",
        "q",
        "rp",
        "rt",
        "ruby",
        "s",
        "samp",
        "script",
        "select",
        "slot",
        "small",
        "span",
        "strike",
        "strong",
        "sub",
        "sup",
        "template",
        "textarea",
        "time",
        "tt",
        "u",
        "var",
        "video",
        "wbr",
    }
)

# Attributes whose values are URLs and go through scheme validation.
URL_ATTRIBUTES = frozenset({"href", "poster", "src"})

# "" is a relative URL.
SAFE_URL_SCHEMES = frozenset({"", "data", "http", "https", "mailto"})

LIST_ITEM_ELEMENT = "li"
LIST_CONTAINER_ELEMENT = "ul"
PARAGRAPH_ELEMENT = "p"

DEFAULT_MAX_DEPTH = 100
DEPTH_PLACEHOLDER = "[...]"

HTML_NAMESPACE = "http://www.w3.org/1999/xhtml"

# html5lib namespace URIs -> short names stored on nodes and attributes
NAMESPACE_PREFIXES = {
    HTML_NAMESPACE: "",
    "http://www.w3.org/2000/svg": "svg",
    "http://www.w3.org/1998/Math/MathML": "math",
    "http://www.w3.org/1999/xlink": "xlink",
    "http://www.w3.org/XML/1998/namespace": "xml",
    "http://www.w3.org/2000/xmlns/": "xmlns",
}
