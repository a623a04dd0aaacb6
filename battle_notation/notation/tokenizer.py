"""
Whitespace tokenizer that keeps double-quoted spans together.

A quoted span stays a single token whether it stands alone
(``"Flash Fire"``) or is glued to other characters
(``Ability:"Flash Fire"``); its quotes are kept for the flag classifier
to strip. A quote with no closing partner is an ordinary character.
"""

from __future__ import annotations

from typing import List

QUOTE = '"'


def tokenize(text: str) -> List[str]:
    """
    Splits ``text`` on runs of whitespace, honoring double quotes.

    Args:
        text: Raw (already URL-decoded) input.

    Returns:
        List[str]: Tokens in order; empty input yields an empty list.
    """
    tokens: List[str] = []
    buf: List[str] = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            if buf:
                tokens.append("".join(buf))
                buf = []
            i += 1
        elif ch == QUOTE:
            end = text.find(QUOTE, i + 1)
            if end == -1:
                buf.append(ch)
                i += 1
            else:
                buf.append(text[i:end + 1])
                i = end + 1
        else:
            buf.append(ch)
            i += 1
    if buf:
        tokens.append("".join(buf))
    return tokens


def is_quoted(token: str) -> bool:
    return len(token) >= 2 and token[0] == QUOTE and token[-1] == QUOTE


def unquote(token: str) -> str:
    """Strips the quotes of a fully double-quoted token (``'"a b"'`` -> ``'a b'``)."""
    return token[1:-1] if is_quoted(token) else token
