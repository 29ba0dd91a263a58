class Token:
    """A lexical token of raw markup.

    `raw` is the exact source slice the token was read from, so the tokens of
    an input always concatenate back to that input. `name` is the
    ASCII-lowercased tag name for tag tokens and None otherwise.
    """

    __slots__ = ("kind", "name", "raw")

    TEXT = 0
    START_TAG = 1
    END_TAG = 2
    SELF_CLOSING_TAG = 3
    COMMENT = 4
    DOCTYPE = 5
    # End of input inside a tag; carries the unterminated remainder.
    ERROR = 6

    TAG_KINDS = frozenset({START_TAG, END_TAG, SELF_CLOSING_TAG})

    def __init__(self, kind, raw, name=None):
        self.kind = kind
        self.raw = raw
        self.name = name

    @property
    def is_tag(self):
        return self.kind in Token.TAG_KINDS

    def __repr__(self):
        if self.name is not None:
            return f"Token({_KIND_NAMES[self.kind]}, {self.name!r}, {self.raw!r})"
        return f"Token({_KIND_NAMES[self.kind]}, {self.raw!r})"

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return self.kind == other.kind and self.raw == other.raw and self.name == other.name

    __hash__ = None  # Unhashable since we define __eq__


_KIND_NAMES = {
    Token.TEXT: "TEXT",
    Token.START_TAG: "START_TAG",
    Token.END_TAG: "END_TAG",
    Token.SELF_CLOSING_TAG: "SELF_CLOSING_TAG",
    Token.COMMENT: "COMMENT",
    Token.DOCTYPE: "DOCTYPE",
    Token.ERROR: "ERROR",
}
