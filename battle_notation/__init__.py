"""
Battle Notation.

Converts between a compact, human-writable shorthand for a single damage
calculation scenario and a fully resolved battle state:

    +1 252+ Atk Garchomp @ Life Orb [Earthquake] vs. 252 HP / 0 Def Skarmory

Parsing is lenient by default (conflicts keep the first value, unknown
flags are ignored) and strict on request. Encoding is deterministic and
emits only what differs from the defaults.

Usage:
    from battle_notation import parse, encode

    state = parse("+1 252+ Atk Garchomp [Earthquake] vs. Skarmory")
    print(state.p1.pokemon.boosts)  # {'atk': 1}
    print(encode(state))
"""

from __future__ import annotations

from .config import config, NotationConfig
from .transcoder import to_safe, from_safe
from .core import (
    State,
    Pokemon,
    Side,
    Move,
    Field,
    Generation,
    KnowledgeBase,
    get_kb,
    NotationError,
    ParseError,
)
from .notation import parse, try_parse, encode, ParseContext, ParseResult

__version__ = "0.1.0"

__all__ = [
    "config",
    "NotationConfig",
    "to_safe",
    "from_safe",
    "State",
    "Pokemon",
    "Side",
    "Move",
    "Field",
    "Generation",
    "KnowledgeBase",
    "get_kb",
    "NotationError",
    "ParseError",
    "parse",
    "try_parse",
    "encode",
    "ParseContext",
    "ParseResult",
]
