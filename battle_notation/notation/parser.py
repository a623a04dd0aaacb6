"""
Parser entry points.

Runs the whole pipeline over a notation string:

    from_safe -> tokenize -> classify -> generation -> route flags
        -> phrase grammar -> build

Every failure is reported as a single ``ParseError`` carrying the partial
``ParseContext`` collected up to that point.

Usage:
    from battle_notation.notation.parser import parse, try_parse

    state = parse("+1 252+ Atk Garchomp [Earthquake] vs. 252 HP / 0 Def Skarmory")

    result = try_parse("Garchomp vs. Skarmory", strict=True)
    if not result.ok:
        print(result.error.context.to_dict())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..config import config
from ..core.dataclasses import State
from ..core.exceptions import NotationError, ParseError, PhraseMismatchError
from ..core.knowledge import Generation, KnowledgeBase, get_kb
from ..transcoder import from_safe
from .builder import build
from .flags import classify
from .generation import pin_generation, resolve_generation
from .phrase import Phrase, parse_phrase
from .router import FlagTable, route_flags
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

Gens = Union[KnowledgeBase, Generation]


@dataclass
class ParseContext:
    """
    Diagnostics collected while parsing.

    Attributes:
        input (str): The text passed to ``parse``.
        decoded (Optional[str]): The text after URL-safe decoding.
        gen (Optional[int]): The resolved generation.
        phrase_input (Optional[str]): Phrase text handed to the grammar.
        phrase_output (Optional[Phrase]): What the grammar produced.
        raw_flags (List[str]): Flag tokens as they appeared.
        flags (Optional[FlagTable]): The routed flags.
    """
    input: str
    decoded: Optional[str] = None
    gen: Optional[int] = None
    phrase_input: Optional[str] = None
    phrase_output: Optional[Phrase] = None
    raw_flags: List[str] = field(default_factory=list)
    flags: Optional[FlagTable] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input": self.input,
            "decoded": self.decoded,
            "gen": self.gen,
            "phrase_input": self.phrase_input,
            "phrase_output": self.phrase_output.__dict__ if self.phrase_output else None,
            "raw_flags": list(self.raw_flags),
            "flags": self.flags.to_dict() if self.flags else None,
        }


@dataclass
class ParseResult:
    """Outcome of ``try_parse``: exactly one of ``state`` and ``error`` is set."""
    state: Optional[State] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse(text: str, gens: Optional[Gens] = None, strict: Optional[bool] = None) -> State:
    """
    Parses notation into a ``State``.

    Args:
        text: The notation, optionally in URL-safe form.
        gens: The knowledge base to resolve the generation from, or a bound
            ``Generation`` that pins it. Defaults to the shared knowledge base.
        strict: Whether conflicts, unknown flags, invalid values and
            unmatched phrase text are fatal. Defaults to ``config.strict``.

    Returns:
        State: The parsed state.

    Raises:
        ParseError: Wrapping the underlying ``NotationError``.
    """
    strict = config.strict if strict is None else strict
    gens = get_kb() if gens is None else gens
    context = ParseContext(input=text)

    try:
        context.decoded = from_safe(text)
        classification = classify(tokenize(context.decoded))
        context.raw_flags = [flag.text for flag in classification.flags]

        pinned = pin_generation(gens, classification.gens, strict)
        gen, game_type, residual = resolve_generation(gens, pinned, classification.phrase, strict)
        context.gen = gen.num

        context.flags = route_flags(gen, classification.flags, classification.vs, strict)

        phrase = None
        if residual:
            context.phrase_input = residual
            phrase = parse_phrase(gen, residual)
            context.phrase_output = phrase
            if phrase is None and strict:
                raise PhraseMismatchError(residual)

        state = build(gen, game_type, phrase, context.flags, strict)
    except NotationError as e:
        logger.debug(f"Failed to parse '{text}': {e}")
        raise ParseError(e, context) from e

    logger.debug(f"Parsed '{text}' as generation {state.gen.num} {state.game_type.value}")
    return state


def try_parse(text: str, gens: Optional[Gens] = None, strict: Optional[bool] = None) -> ParseResult:
    """Like ``parse`` but returns the error instead of raising it."""
    try:
        return ParseResult(state=parse(text, gens, strict))
    except ParseError as e:
        return ParseResult(error=e)
