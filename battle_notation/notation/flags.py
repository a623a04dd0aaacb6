"""
Flag classifier.

Decides for each token whether it is a flag (``key:value``, ``key=value``,
``+Implicit``, ``--implicit``) or a fragment of the phrase, and normalizes
flags into ``(id, value)`` pairs:

- ``no``/``is``/``has`` key prefixes are stripped and the value becomes
  ``"1"``/``"0"`` (inverted for ``no``): ``+NoMoveLastTurn`` ->
  ``("movelastturn", "0")``.
- Known boolean flags are normalized to ``"1"``/``"0"``; in condition mode
  every id except the leveled/counter conditions is.
- Ids ending in ``ev``/``iv``/``dv``/``boost`` are pluralized.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..constants import ALLY_ABILITIES
from ..core.exceptions import MalformedValueError
from ..utils import to_id
from .tokenizer import is_quoted, unquote

logger = logging.getLogger(__name__)

# Either key:value (key=value) or an implicit boolean introduced by -, -- or +
FLAG = re.compile(
    r"^(?:(?:(?:--?)?(\w+)(?:=|:)([-+0-9a-zA-Z_'’\".,/%:= ]+))"
    r"|((?:--?|\+)[a-zA-Z'’\"][-+0-9a-zA-Z_'’\".,/%:= ]*))$",
    re.ASCII,
)
QUOTED = re.compile(r"^['\"].*['\"]$")
VS = re.compile(r"^vs\.?$", re.IGNORECASE)

# Conditions that carry a level or counter instead of a boolean
CONDITION_NON_BOOLS = frozenset({
    "echoedvoice", "spikes", "toxicspikes", "slowstart", "autotomize", "stockpile",
    "badlypoisoned", "badpoisoned", "toxic", "tox",
})
# Boolean flags that are not conditions
NON_CONDITION_BOOLS = frozenset({
    "usez", "z", "crit", "spread", "movelastturn", "hurtthisturn", *ALLY_ABILITIES,
})
# Flags which canonically take an 's' suffix
PLURALS = ("ev", "iv", "dv", "boost")

TRUE_VALUES = frozenset({"true", "1", "yes", "y"})
FALSE_VALUES = frozenset({"false", "0", "no", "n"})


def as_boolean(value: str, key: str = "flag") -> bool:
    """
    Coerces a flag value to a boolean.

    Raises:
        MalformedValueError: If the value is not one of true/1/yes/y/false/0/no/n.
    """
    id = to_id(value)
    if id in TRUE_VALUES:
        return True
    if id in FALSE_VALUES:
        return False
    raise MalformedValueError(key, value, expected="boolean")


def _bit(value: bool) -> str:
    return "1" if value else "0"


def parse_flag(arg: str, condition: bool = False) -> Optional[Tuple[str, str]]:
    """
    Parses one token as a flag.

    Args:
        arg: The raw token.
        condition: True when parsing a sub-flag of a condition list, where
            every non-counter value is a boolean.

    Returns:
        Optional[Tuple[str, str]]: ``(id, value)``, or None if the token is
        not a flag.
    """
    lower = arg.lower()
    # 'Type: Null' written without a space would otherwise be a flag
    if lower == "type:null":
        return None
    # Metronome:N is item sugar for consecutive uses
    if lower.startswith("metronome:"):
        return None

    m = FLAG.match(arg)
    if not m:
        return None

    if m.group(3):
        id = to_id(m.group(3))
        if id.startswith("no"):
            return id[2:], "0"
        if id.startswith("is"):
            return id[2:], "1"
        if id.startswith("has"):
            return id[3:], "1"
        return id, "1"

    id = to_id(m.group(1))
    value = m.group(2)
    if QUOTED.match(value):
        value = value[1:-1]
    if id.startswith("no"):
        return id[2:], _bit(not as_boolean(value, id))
    if id.startswith("is"):
        return id[2:], _bit(as_boolean(value, id))
    if id.startswith("has"):
        return id[3:], _bit(as_boolean(value, id))
    if not condition and id in NON_CONDITION_BOOLS:
        return id, _bit(as_boolean(value, id))
    if condition and id not in CONDITION_NON_BOOLS:
        return id, _bit(as_boolean(value, id))
    if id.endswith(PLURALS):
        return f"{id}s", value
    return id, value


@dataclass(frozen=True)
class RawFlag:
    """
    A flag as it appeared in the input.

    Attributes:
        id (str): Namespace-free id after normalization.
        value (str): Normalized value.
        text (str): The original token, needed to tell ``Toxic:1`` from ``+Toxic``.
        after_vs (bool): Whether the flag came after the ``vs.`` separator.
    """
    id: str
    value: str
    text: str
    after_vs: bool


@dataclass
class Classification:
    """Tokens split into flags and phrase fragments."""
    flags: List[RawFlag] = field(default_factory=list)
    fragments: List[str] = field(default_factory=list)
    vs: bool = False
    gens: List[str] = field(default_factory=list)  # values of gen:N flags, in order

    @property
    def phrase(self) -> str:
        return " ".join(self.fragments)


def classify(tokens: List[str]) -> Classification:
    """
    Separates flags from phrase fragments.

    The ``vs``/``vs.`` token is kept as a fragment (the phrase needs it) and
    marks every later flag as belonging to the defender's side by default.
    ``gen:N`` flags are collected separately since the generation must be
    known before the other flags can be routed.
    """
    result = Classification()
    for token in tokens:
        if is_quoted(token):
            token = unquote(token)
            if not token:
                continue
        if VS.match(token):
            result.vs = True
            result.fragments.append(token)
            continue

        parsed = parse_flag(token)
        if parsed is None:
            result.fragments.append(token)
            continue

        id, value = parsed
        if id == "gen":
            result.gens.append(value)
            continue
        result.flags.append(RawFlag(id, value, token, result.vs))

    logger.debug(f"Classified {len(result.flags)} flags and {len(result.fragments)} fragments")
    return result
