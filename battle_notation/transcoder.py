"""
URL-safe transcoding of canonical notation.

``to_safe`` swaps the characters that need escaping in a URL for a disjoint
set of URL-safe replacements; ``from_safe`` undoes it, first removing any
percent-encoding an intermediate URL layer may have added.

Usage:
    from battle_notation.transcoder import to_safe, from_safe

    to_safe("Garchomp [Earthquake] vs. Skarmory")
    # 'Garchomp_(Earthquake)_vs._Skarmory'
"""

from __future__ import annotations

import logging
import re
from urllib.parse import unquote

logger = logging.getLogger(__name__)

FORWARD = {
    '/': '$', '{': '(', '}': ')', '[': '(', ']': ')', '@': '*', ':': '=', ' ': '_', '%': '~',
}
BACKWARD = {
    '$': '/', '{': '[', '}': ']', '(': '[', ')': ']', '*': '@', '=': ':', '_': ' ', '~': '%',
}

_ENCODE = re.compile(r"[/{}\[\]@: %]")
_DECODE = re.compile(r"[${}()*=_~]")


def to_safe(text: str) -> str:
    """Replaces ``/ { } [ ] @ : space %`` with ``$ ( ) ( ) * = _ ~``."""
    return _ENCODE.sub(lambda m: FORWARD[m.group(0)], text)


def from_safe(text: str) -> str:
    """
    Inverse of ``to_safe``, tolerant of an extra layer of percent-encoding.

    Text that is not valid percent-encoding is left as-is before the
    character substitution is reversed.
    """
    try:
        text = unquote(text, errors="strict")
    except UnicodeDecodeError:
        logger.debug(f"Leaving '{text}' percent-encoded: not valid UTF-8")
    return _DECODE.sub(lambda m: BACKWARD[m.group(0)], text)
