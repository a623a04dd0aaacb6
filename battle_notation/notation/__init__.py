"""
Notation Package.

Parsing and encoding of battle-scenario shorthand:
- Tokenizer, flag classifier and flag router
- Phrase grammar
- State builder
- Canonical encoder
"""

from .parser import parse, try_parse, ParseContext, ParseResult
from .encoder import encode, get_stats

__all__ = [
    "parse",
    "try_parse",
    "ParseContext",
    "ParseResult",
    "encode",
    "get_stats",
]
