"""
Phrase grammar.

The phrase is what is left of the input once flags are removed:

    [+1] [Lvl 50] [252+ Atk / 4 SpD] [50%] [Ability] Species [@ Item]
        [Move] vs. <same for the defender>

Every part of a side is optional except the species, and the move clause
followed by ``vs.`` is mandatory between the two sides. The text is lexed
into tokens and parsed by recursive descent; any deviation means the
phrase does not match and ``parse_phrase`` returns None.

Usage:
    from battle_notation.notation.phrase import parse_phrase

    phrase = parse_phrase(gen, "+1 252+ Atk Garchomp [Earthquake] vs. Skarmory")
    phrase.p1.boosts   # 1
    phrase.move.id     # 'earthquake'
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..core.protocols import GameData
from ..utils import parse_float, parse_int, to_id

logger = logging.getLogger(__name__)


# =============================================================================
# Lexer
# =============================================================================

class TokenType(str, Enum):
    MOVE = "MOVE"
    VS = "VS"
    AT = "AT"
    SLASH = "SLASH"
    WORD = "WORD"


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str


LEXEME = re.compile(r"\[([^\]]*)\]|(@)|(/)|([^\s\[\]@/]+)")
VS = re.compile(r"^vs\.?$", re.IGNORECASE)


def lex(text: str) -> List[Token]:
    """Splits phrase text into MOVE, VS, AT, SLASH and WORD tokens."""
    tokens = []
    for match in LEXEME.finditer(text):
        move, at, slash, word = match.groups()
        if move is not None:
            tokens.append(Token(TokenType.MOVE, move))
        elif at is not None:
            tokens.append(Token(TokenType.AT, at))
        elif slash is not None:
            tokens.append(Token(TokenType.SLASH, slash))
        elif VS.match(word):
            tokens.append(Token(TokenType.VS, word))
        else:
            tokens.append(Token(TokenType.WORD, word))
    return tokens


# =============================================================================
# Phrase records
# =============================================================================

@dataclass
class PhraseSide:
    """
    Everything the phrase says about one side.

    Attributes:
        species (str): Species id (or the whole name id if no species matched).
        ability (Optional[str]): Ability id from the words before the species.
        nature (Optional[str]): Nature name given as a leading word (``Adamant Garchomp``).
        plus (Optional[str]): Stat marked ``+`` in the EVs.
        minus (Optional[str]): Stat marked ``-`` in the EVs.
        boosts (Optional[int]): Signed boost for the stat the move uses.
        level (Optional[int]): ``Lvl N``.
        evs (Dict[str, int]): EVs by stat.
        hp (Optional[float]): HP percentage.
        item (Optional[str]): Item id.
    """
    species: str
    ability: Optional[str] = None
    nature: Optional[str] = None
    plus: Optional[str] = None
    minus: Optional[str] = None
    boosts: Optional[int] = None
    level: Optional[int] = None
    evs: Dict[str, int] = field(default_factory=dict)
    hp: Optional[float] = None
    item: Optional[str] = None


@dataclass
class PhraseMove:
    id: str
    consecutive: Optional[int] = None


@dataclass
class Phrase:
    p1: PhraseSide
    move: PhraseMove
    p2: PhraseSide


# =============================================================================
# Grammar
# =============================================================================

BOOST = re.compile(r"^([+-][1-6])$")
LEVEL = re.compile(r"^lvl?(\d{1,2})?$", re.IGNORECASE)
LEVEL_VALUE = re.compile(r"^\d{1,2}$")
STAT_NAMES = r"HP|Atk|Def|SpA|SpD|Spe|Spc"
EV_TERM = re.compile(rf"^(\d{{1,3}})([+-]?)({STAT_NAMES})$", re.IGNORECASE)
EV_VALUE = re.compile(r"^(\d{1,3})([+-]?)$")
EV_STAT = re.compile(rf"^({STAT_NAMES})$", re.IGNORECASE)
HP = re.compile(r"^(100|\d{1,2}(?:\.\d+)?)%$")
NAME = re.compile(r"^[A-Za-z][-0-9A-Za-zé%'’:. ]+$")
ITEM = re.compile(r"^[A-Za-z][-0-9A-Za-z:' ]+$")
MOVE_NAME = re.compile(r"^\s*([-0-9A-Za-z', ]+?)\s*$")
METRONOME_SUGAR = re.compile(r"^\s*Metronome\s*:?\s*(\d+)?\s*$", re.IGNORECASE)

MAX_EV_TERMS = 6


class _NoMatch(Exception):
    """The phrase does not match the grammar."""


class _Parser:
    """Recursive-descent parser over lexed phrase tokens."""

    def __init__(self, gen: GameData, tokens: List[Token]):
        self.gen = gen
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Optional[Token]:
        i = self.pos + offset
        return self.tokens[i] if i < len(self.tokens) else None

    def peek_word(self, offset: int = 0) -> Optional[str]:
        token = self.peek(offset)
        return token.text if token is not None and token.type == TokenType.WORD else None

    def expect(self, type_: TokenType) -> Token:
        token = self.peek()
        if token is None or token.type != type_:
            raise _NoMatch(f"expected {type_.value}")
        self.pos += 1
        return token

    # phrase := side MOVE VS side END
    def phrase(self) -> Phrase:
        p1, item_text = self.side(attacker=True)
        move = self.move()
        self.expect(TokenType.VS)
        p2, _ = self.side(attacker=False)
        if self.peek() is not None:
            raise _NoMatch("trailing input")

        if item_text is not None:
            sugar = METRONOME_SUGAR.match(item_text)
            if sugar:
                p1.item = "metronome"
                move.consecutive = parse_int(sugar.group(1)) or None
        return Phrase(p1=p1, move=move, p2=p2)

    # side := [boost] [level] [evs] [hp] name [AT item]
    def side(self, attacker: bool) -> Tuple[PhraseSide, Optional[str]]:
        boosts = self.boost()
        level = self.level()
        evs, plus, minus = self.evs()
        hp = self.hp()
        species, ability, nature = self.name()

        item_text = None
        if self.peek() is not None and self.peek().type == TokenType.AT:
            self.pos += 1
            item_text = self.words()
            if not ITEM.match(item_text):
                raise _NoMatch(f"invalid item '{item_text}'")

        side = PhraseSide(
            species=species,
            ability=ability,
            nature=nature,
            plus=plus,
            minus=minus,
            boosts=boosts,
            level=level,
            evs=evs,
            hp=hp,
            item=to_id(item_text) or None,
        )
        # Metronome sugar is resolved once the move clause is known
        return side, item_text if attacker else None

    def boost(self) -> Optional[int]:
        word = self.peek_word()
        if word is not None and BOOST.match(word):
            self.pos += 1
            return parse_int(word)
        return None

    def level(self) -> Optional[int]:
        word = self.peek_word()
        match = LEVEL.match(word) if word is not None else None
        if not match:
            return None
        if match.group(1):
            if self.peek_word(1) is None:
                return None
            self.pos += 1
            return int(match.group(1))
        value = self.peek_word(1)
        if value is None or not LEVEL_VALUE.match(value) or self.peek_word(2) is None:
            return None
        self.pos += 2
        return int(value)

    def ev_term(self) -> Optional[Tuple[int, str, str]]:
        word = self.peek_word()
        if word is None:
            return None
        match = EV_TERM.match(word)
        if match:
            self.pos += 1
            return int(match.group(1)), match.group(2), match.group(3)
        match = EV_VALUE.match(word)
        stat = self.peek_word(1)
        if match and stat is not None and EV_STAT.match(stat):
            self.pos += 2
            return int(match.group(1)), match.group(2), stat
        return None

    def evs(self) -> Tuple[Dict[str, int], Optional[str], Optional[str]]:
        evs: Dict[str, int] = {}
        plus = minus = None
        start = self.pos
        term = self.ev_term()
        while term is not None:
            value, sign, name = term
            stat = self.gen.stats.get(name)
            evs[stat] = value
            if sign == "+":
                plus = stat
            elif sign == "-":
                minus = stat
            token = self.peek()
            if len(evs) >= MAX_EV_TERMS or token is None or token.type != TokenType.SLASH:
                break
            self.pos += 1
            term = self.ev_term()
            if term is None:
                # A dangling slash cannot start a name
                self.pos = start
                raise _NoMatch("incomplete EVs")
        return evs, plus, minus

    def hp(self) -> Optional[float]:
        word = self.peek_word()
        if word is not None and HP.match(word):
            self.pos += 1
            return parse_float(word)
        return None

    def words(self) -> str:
        words = []
        while self.peek_word() is not None:
            words.append(self.peek_word())
            self.pos += 1
        return " ".join(words)

    def name(self) -> Tuple[str, Optional[str], Optional[str]]:
        text = self.words()
        if not NAME.match(text):
            raise _NoMatch(f"invalid name '{text}'")
        return split_name(self.gen, text)

    # move := MOVE
    def move(self) -> PhraseMove:
        token = self.expect(TokenType.MOVE)
        match = MOVE_NAME.match(token.text)
        if not match:
            raise _NoMatch(f"invalid move '{token.text}'")
        return PhraseMove(id=to_id(match.group(1)))


def split_name(gen: GameData, text: str) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Splits ``[Nature] [Ability] Species`` into its parts.

    Leading words are stripped until the rest names a species of ``gen``.
    The stripped words form the ability, except that a leading nature name
    is taken as the nature. If no suffix is a species the whole text is the
    species and there is no ability.

    Returns:
        Tuple[str, Optional[str], Optional[str]]: Species id, ability id and
        nature name.
    """
    words = text.split()
    for i in range(len(words)):
        species = to_id("".join(words[i:]))
        if not species or gen.get_species(species) is None:
            continue
        stripped = words[:i]
        nature = None
        if stripped:
            n = gen.get_nature(stripped[0])
            if n is not None:
                nature = n.name
                stripped = stripped[1:]
        return species, to_id("".join(stripped)) or None, nature
    return to_id(text), None, None


def parse_phrase(gen: GameData, text: str) -> Optional[Phrase]:
    """
    Parses phrase text.

    Args:
        gen: Game data for the resolved generation (species lookups decide
            where the ability ends).
        text: Space-joined phrase fragments with generation markers removed.

    Returns:
        Optional[Phrase]: The parsed phrase, or None if the text does not match.
    """
    parser = _Parser(gen, lex(text))
    try:
        return parser.phrase()
    except _NoMatch as e:
        logger.debug(f"Phrase '{text}' does not match: {e}")
        return None
