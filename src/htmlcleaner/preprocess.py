"""Escape disallowed markup before it reaches the parser.

Tags the policy would reject anyway are turned into inert text up front, so
the tree builder never creates those elements and its error recovery around
them cannot be used to smuggle markup through.
"""

from __future__ import annotations

import html
import logging

from .constants import RAW_TOKENIZER_ELEMENTS
from .policy import DEFAULT_POLICY, Policy
from .tokenizer import Tokenizer
from .tokens import Token

logger = logging.getLogger(__name__)


def _is_well_formed_comment(raw: str) -> bool:
    # Rejects bogus comments (<!x>, <?x>, </3>), abrupt <!--> and <!--->,
    # comments closed with --!> and comments cut off by end of input.
    return raw.startswith("<!--") and raw.endswith("-->") and len(raw) >= 7


def preprocess(policy: Policy | None, text: str) -> str:
    """Return `text` with every tag the policy does not allow HTML-escaped.

    Text and allowed tags are copied unchanged. Doctypes and tags cut off by
    the end of input are always escaped; comments are escaped when the policy
    escapes comments or when they are malformed. Nesting is not balanced.
    """
    if policy is None:
        policy = DEFAULT_POLICY

    # Raw text scanning only applies where the parser will see a live element
    raw_text_elements = RAW_TOKENIZER_ELEMENTS & policy.element_names

    parts: list[str] = []
    for token in Tokenizer(text, raw_text_elements):
        kind = token.kind
        if kind == Token.TEXT:
            parts.append(token.raw)
        elif token.is_tag:
            if policy.allows_element(token.name):
                parts.append(token.raw)
            else:
                logger.debug("Escaping disallowed tag %r", token.raw)
                parts.append(html.escape(token.raw))
        elif kind == Token.COMMENT:
            if policy.escape_comments or not _is_well_formed_comment(token.raw):
                parts.append(html.escape(token.raw))
            else:
                parts.append(token.raw)
        else:
            # DOCTYPE and ERROR
            parts.append(html.escape(token.raw))
    return "".join(parts)
