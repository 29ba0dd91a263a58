"""Boundary-only HTML tokenizer used by the preprocessor.

The tokenizer does not build attribute dictionaries or decode character
references. It only finds where each token starts and ends, following the
HTML5 tokenizer's tag, attribute and comment states closely enough that the
tree builder will later see the same tag boundaries. Every token keeps its
exact source slice.
"""

import re

from .tokens import Token

_WHITESPACE = "\t\n\f\r "
_ASCII_LOWER_TABLE = str.maketrans({chr(code): chr(code + 32) for code in range(65, 91)})

_TAG_NAME_TERMINATOR_PATTERN = re.compile(r"[\t\n\f\r />]")
_ATTR_NAME_TERMINATOR_PATTERN = re.compile(r"[\t\n\f\r />=]")
_ATTR_VALUE_UNQUOTED_TERMINATOR_PATTERN = re.compile(r"[\t\n\f\r >]")

_RAW_TEXT_END_PATTERNS = {}


def _is_ascii_alpha(ch):
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _raw_text_end_pattern(name):
    pattern = _RAW_TEXT_END_PATTERNS.get(name)
    if pattern is None:
        pattern = re.compile(rf"</{re.escape(name)}(?=[\t\n\f\r />])", re.IGNORECASE)
        _RAW_TEXT_END_PATTERNS[name] = pattern
    return pattern


class Tokenizer:
    # Tag interior states, named after their HTML5 counterparts
    BEFORE_ATTRIBUTE_NAME = 0
    ATTRIBUTE_NAME = 1
    AFTER_ATTRIBUTE_NAME = 2
    BEFORE_ATTRIBUTE_VALUE = 3
    ATTRIBUTE_VALUE_DOUBLE = 4
    ATTRIBUTE_VALUE_SINGLE = 5
    ATTRIBUTE_VALUE_UNQUOTED = 6
    AFTER_ATTRIBUTE_VALUE_QUOTED = 7
    SELF_CLOSING_START_TAG = 8

    __slots__ = ("buffer", "length", "pos", "raw_text_elements")

    def __init__(self, text, raw_text_elements=()):
        self.buffer = text or ""
        self.length = len(self.buffer)
        self.pos = 0
        # Start tags with these names switch to raw text scanning until the
        # matching end tag ("plaintext" never ends).
        self.raw_text_elements = frozenset(name.translate(_ASCII_LOWER_TABLE) for name in raw_text_elements)

    def __iter__(self):
        return self.run()

    def run(self):
        buffer = self.buffer
        text_start = self.pos
        while self.pos < self.length:
            lt = buffer.find("<", self.pos)
            if lt == -1:
                break
            token = self._consume_markup(lt)
            if token is None:
                # A "<" that cannot open markup is ordinary text
                self.pos = lt + 1
                continue

            if lt > text_start:
                yield Token(Token.TEXT, buffer[text_start:lt])
            yield token

            if token.kind != Token.END_TAG and token.name in self.raw_text_elements:
                raw = self._consume_raw_text(token.name)
                if raw:
                    yield Token(Token.TEXT, raw)
            text_start = self.pos

        if text_start < self.length:
            yield Token(Token.TEXT, buffer[text_start:])
        self.pos = self.length

    def _consume_markup(self, start):
        buffer = self.buffer
        following = start + 1
        if following >= self.length:
            return None
        ch = buffer[following]

        if ch == "!":
            if buffer.startswith("<!--", start):
                return self._consume_comment(start)
            if buffer[start : start + 9].translate(_ASCII_LOWER_TABLE) == "<!doctype":
                return self._consume_until_gt(start, Token.DOCTYPE)
            # <!foo>, <![CDATA[...]]> outside foreign content
            return self._consume_until_gt(start, Token.COMMENT)

        if ch == "?":
            return self._consume_until_gt(start, Token.COMMENT)

        if ch == "/":
            name_start = following + 1
            if name_start >= self.length:
                return None
            if buffer[name_start] == ">":
                self.pos = name_start + 1
                return Token(Token.ERROR, buffer[start : self.pos])
            if _is_ascii_alpha(buffer[name_start]):
                return self._consume_tag(start, name_start, Token.END_TAG)
            return self._consume_until_gt(start, Token.COMMENT)

        if _is_ascii_alpha(ch):
            return self._consume_tag(start, following, Token.START_TAG)
        return None

    def _consume_until_gt(self, start, kind):
        end = self.buffer.find(">", start + 2)
        self.pos = self.length if end == -1 else end + 1
        return Token(kind, self.buffer[start : self.pos])

    def _consume_comment(self, start):
        buffer = self.buffer
        if buffer.startswith("<!-->", start):
            self.pos = start + 5
        elif buffer.startswith("<!--->", start):
            self.pos = start + 6
        else:
            ends = []
            close = buffer.find("-->", start + 4)
            if close != -1:
                ends.append(close + 3)
            bang_close = buffer.find("--!>", start + 4)
            if bang_close != -1:
                ends.append(bang_close + 4)
            # An unterminated comment runs to the end of input
            self.pos = min(ends) if ends else self.length
        return Token(Token.COMMENT, buffer[start : self.pos])

    def _consume_tag(self, start, name_start, kind):
        buffer = self.buffer
        length = self.length

        match = _TAG_NAME_TERMINATOR_PATTERN.search(buffer, name_start)
        if match is None:
            return self._error(start)
        name = buffer[name_start : match.start()].translate(_ASCII_LOWER_TABLE)
        pos = match.start()

        state = self.BEFORE_ATTRIBUTE_NAME
        self_closing = False
        while True:
            if pos >= length:
                return self._error(start)
            ch = buffer[pos]

            if state == self.BEFORE_ATTRIBUTE_NAME:
                if ch in _WHITESPACE:
                    pos += 1
                elif ch == "/":
                    state = self.SELF_CLOSING_START_TAG
                    pos += 1
                elif ch == ">":
                    break
                else:
                    # Includes a leading "=", which starts an attribute name
                    state = self.ATTRIBUTE_NAME
                    pos += 1

            elif state == self.ATTRIBUTE_NAME:
                match = _ATTR_NAME_TERMINATOR_PATTERN.search(buffer, pos)
                if match is None:
                    return self._error(start)
                pos = match.start()
                if buffer[pos] == "=":
                    state = self.BEFORE_ATTRIBUTE_VALUE
                    pos += 1
                else:
                    state = self.AFTER_ATTRIBUTE_NAME

            elif state == self.AFTER_ATTRIBUTE_NAME:
                if ch in _WHITESPACE:
                    pos += 1
                elif ch == "/":
                    state = self.SELF_CLOSING_START_TAG
                    pos += 1
                elif ch == "=":
                    state = self.BEFORE_ATTRIBUTE_VALUE
                    pos += 1
                elif ch == ">":
                    break
                else:
                    state = self.ATTRIBUTE_NAME
                    pos += 1

            elif state == self.BEFORE_ATTRIBUTE_VALUE:
                if ch in _WHITESPACE:
                    pos += 1
                elif ch == '"':
                    state = self.ATTRIBUTE_VALUE_DOUBLE
                    pos += 1
                elif ch == "'":
                    state = self.ATTRIBUTE_VALUE_SINGLE
                    pos += 1
                elif ch == ">":
                    break
                else:
                    state = self.ATTRIBUTE_VALUE_UNQUOTED

            elif state == self.ATTRIBUTE_VALUE_DOUBLE or state == self.ATTRIBUTE_VALUE_SINGLE:
                quote = '"' if state == self.ATTRIBUTE_VALUE_DOUBLE else "'"
                end = buffer.find(quote, pos)
                if end == -1:
                    return self._error(start)
                pos = end + 1
                state = self.AFTER_ATTRIBUTE_VALUE_QUOTED

            elif state == self.ATTRIBUTE_VALUE_UNQUOTED:
                match = _ATTR_VALUE_UNQUOTED_TERMINATOR_PATTERN.search(buffer, pos)
                if match is None:
                    return self._error(start)
                pos = match.start()
                if buffer[pos] == ">":
                    break
                state = self.BEFORE_ATTRIBUTE_NAME
                pos += 1

            elif state == self.AFTER_ATTRIBUTE_VALUE_QUOTED:
                if ch in _WHITESPACE:
                    state = self.BEFORE_ATTRIBUTE_NAME
                    pos += 1
                elif ch == "/":
                    state = self.SELF_CLOSING_START_TAG
                    pos += 1
                elif ch == ">":
                    break
                else:
                    state = self.BEFORE_ATTRIBUTE_NAME

            else:  # SELF_CLOSING_START_TAG
                if ch == ">":
                    self_closing = True
                    break
                state = self.BEFORE_ATTRIBUTE_NAME

        self.pos = pos + 1
        if self_closing and kind == Token.START_TAG:
            kind = Token.SELF_CLOSING_TAG
        return Token(kind, buffer[start : self.pos], name)

    def _consume_raw_text(self, name):
        start = self.pos
        if name == "plaintext":
            self.pos = self.length
        else:
            match = _raw_text_end_pattern(name).search(self.buffer, start)
            self.pos = self.length if match is None else match.start()
        return self.buffer[start : self.pos]

    def _error(self, start):
        self.pos = self.length
        return Token(Token.ERROR, self.buffer[start:])


def tokenize(text, raw_text_elements=()):
    """Return the list of tokens for `text`."""
    return list(Tokenizer(text, raw_text_elements))
