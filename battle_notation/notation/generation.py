"""
Generation and game type resolution.

The generation can be pinned three ways: a bound ``Generation`` passed to
``parse``, ``gen:N`` flags, and ``[Gen N]``-style markers inside the phrase.
Markers are cut out of the phrase text before the phrase grammar runs.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional, Tuple, Union

from ..config import config
from ..core.enums import GameType
from ..core.exceptions import InvalidGenerationError
from ..core.knowledge import Generation, KnowledgeBase

logger = logging.getLogger(__name__)

# [Gen 4], [4], [gen4 doubles], [8 Singles]
GEN = re.compile(r"\[\s*(?:gen)?\s*(\d)\s*(doubles|singles)?\]", re.IGNORECASE)
WHITESPACE = re.compile(r"\s+")


def validate_generation(
    value: str,
    pinned: Optional[int],
    strict: bool,
) -> Optional[int]:
    """
    Validates a generation given as text against any already pinned value.

    Args:
        value: The raw value (``"4"``).
        pinned: Generation already fixed by an earlier flag, marker or bound
            ``Generation``.
        strict: Whether invalid or conflicting values are fatal.

    Returns:
        Optional[int]: The generation to use from now on, or None if the
        value is invalid and was ignored.

    Raises:
        InvalidGenerationError: In strict mode for an out-of-range value or a
            value that disagrees with ``pinned``.
    """
    try:
        num = int(value)
    except ValueError:
        num = None
    if num is None or not config.generations.is_valid(num):
        if strict:
            raise InvalidGenerationError(value)
        logger.debug(f"Ignoring invalid generation '{value}'")
        return None

    if pinned is not None and pinned != num:
        if strict:
            raise InvalidGenerationError(value, pinned)
        logger.warning(f"Conflicting generations {pinned} and {num}, keeping {pinned}")
        return pinned
    return num


def resolve_generation(
    gens: Union[KnowledgeBase, Generation],
    pinned: Optional[int],
    text: str,
    strict: bool,
) -> Tuple[Generation, Optional[GameType], str]:
    """
    Removes generation markers from ``text`` and resolves the generation.

    Args:
        gens: The knowledge base, or a single bound ``Generation``.
        pinned: Generation fixed by ``gen:N`` flags, if any.
        text: Space-joined phrase fragments.
        strict: Whether invalid or conflicting markers are fatal.

    Returns:
        Tuple[Generation, Optional[GameType], str]: The generation data, the
        game type named by a marker (if any) and the remaining phrase text.
    """
    bound = gens if isinstance(gens, Generation) else None
    if bound is not None and pinned is None:
        pinned = bound.num

    game_type: Optional[GameType] = None
    for match in GEN.finditer(text):
        num = validate_generation(match.group(1), pinned, strict)
        if num is not None:
            pinned = num
        if match.group(2):
            game_type = GameType(match.group(2).lower())

    residual = WHITESPACE.sub(" ", GEN.sub(" ", text)).strip()

    if bound is not None:
        gen = bound
    else:
        gen = gens.get(pinned if pinned is not None else config.default_gen)
    logger.debug(f"Resolved generation {gen.num} ({game_type.value if game_type else 'no marker'})")
    return gen, game_type, residual


def pin_generation(
    gens: Union[KnowledgeBase, Generation],
    values: Iterable[str],
    strict: bool,
) -> Optional[int]:
    """Folds the values of ``gen:N`` flags, in order, into a single pinned generation."""
    pinned = gens.num if isinstance(gens, Generation) else None
    for value in values:
        num = validate_generation(value, pinned, strict)
        if num is not None:
            pinned = num
    return pinned
