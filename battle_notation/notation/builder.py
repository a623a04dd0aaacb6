"""
State builder.

Merges the phrase and the routed flags into a finished ``State``. Every
field that both sources can provide goes through the same conflict rule:
two different values are fatal in strict mode, otherwise the phrase value
wins. Required values (species, move) and numeric coercion are enforced in
every mode.

Usage:
    from battle_notation.notation.builder import build

    state = build(gen, game_type, phrase, flags, strict=False)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union

from ..config import config
from ..constants import ALLY_ABILITIES, RBY_STAT_ORDER, STAT_ORDER
from ..core.conditions import LEVELED
from ..core.dataclasses import ConditionTable, Field, Move, Side, State
from ..core.enums import ConditionKind, GameType, Gender, Scope, Switching
from ..core.exceptions import (
    ConflictError,
    EntityNotFoundError,
    InvalidValueError,
    MalformedValueError,
    MissingValueError,
    NotationError,
)
from ..core.factory import create_field, create_move, create_pokemon, create_side
from ..core.protocols import GameData
from ..utils import parse_int, to_id
from .flags import as_boolean
from .natures import infer_nature
from .phrase import Phrase, PhraseSide
from .router import FlagTable, Namespace

logger = logging.getLogger(__name__)

Number = Union[int, float]

SPECIAL = ("spa", "spd")


# =============================================================================
# Checks
# =============================================================================

class Checks:
    """
    The merge rules shared by every field.

    Args:
        strict: Whether conflicts and invalid enumerated values are fatal.
    """

    def __init__(self, strict: bool):
        self.strict = strict

    def conflict(self, key: str, a: Any, b: Any, required: bool = False) -> Any:
        """
        Merges two optional values, preferring ``a``.

        Raises:
            ConflictError: In strict mode, if both are given and differ as ids.
            MissingValueError: If ``required`` and neither is given.
        """
        if a is not None and b is not None and to_id(a) != to_id(b):
            if self.strict:
                raise ConflictError(key, a, b)
            logger.debug(f"Conflicting values for {key}: keeping '{a}' over '{b}'")
        value = a if a is not None else b
        if required and not value:
            raise MissingValueError(key)
        return value

    def number(self, key: str, a: Any, b: Any = None, required: bool = False) -> Optional[Number]:
        """
        Merges two optional values and coerces the result to a number.

        Raises:
            ConflictError: In strict mode, if both are given and differ numerically.
            MalformedValueError: If the merged value is not a number.
            MissingValueError: If ``required`` and neither is given.
        """
        return self._merge_numbers(key, a, b, required, integer=False)

    def integer(self, key: str, a: Any, b: Any = None, required: bool = False) -> Optional[int]:
        """Like ``number``, but the merged value must be integral."""
        return self._merge_numbers(key, a, b, required, integer=True)

    def _merge_numbers(self, key: str, a: Any, b: Any, required: bool, integer: bool) -> Optional[Number]:
        if a is not None and b is not None:
            if self.strict and _coerce(key, a, integer) != _coerce(key, b, integer):
                raise ConflictError(key, a, b)
        value = a if a is not None else b
        if value is None:
            if required:
                raise MissingValueError(key)
            return None
        return _coerce(key, value, integer)

    def error(self, condition: bool, error: NotationError) -> bool:
        """Raises ``error`` in strict mode; otherwise logs it. Returns ``condition``."""
        if condition:
            if self.strict:
                raise error
            logger.debug(f"Ignoring invalid value: {error}")
        return condition


def _coerce(key: str, value: Any, integer: bool) -> Number:
    if isinstance(value, (int, float)):
        n = value
    else:
        text = str(value).strip()
        try:
            n = int(text)
        except ValueError:
            try:
                n = float(text)
            except ValueError:
                raise MalformedValueError(key, value) from None
    if not math.isfinite(n):
        raise MalformedValueError(key, value)
    if integer:
        if n != int(n):
            raise MalformedValueError(key, value, expected="integer")
        n = int(n)
    return n


# =============================================================================
# Spreads
# =============================================================================

@dataclass
class Spread:
    """A compact ``EVs:``/``IVs:``/``DVs:`` flag value, with EV nature signs."""
    values: Dict[str, int] = field(default_factory=dict)
    plus: Optional[str] = None
    minus: Optional[str] = None


def parse_spread(gen: GameData, kind: str, text: Optional[str], checks: Checks) -> Spread:
    """
    Parses a compact spread: 5 (gen 1 order) or 6 values separated by ``/``.

    Each value may name its stat (``252 Atk``); EV values may carry a ``+``
    or ``-`` nature sign.
    """
    spread = Spread()
    if not text:
        return spread

    label = f"{kind.upper()}s"
    parts = text.split("/")
    if checks.error(
        not 5 <= len(parts) <= 6,
        InvalidValueError(f"Invalid number of {label}: {len(parts)}"),
    ):
        return spread

    order = RBY_STAT_ORDER if len(parts) == 5 else STAT_ORDER
    for i, part in enumerate(parts):
        words = part.split()
        value = words[0] if words else ""
        stat = (gen.stats.get(words[1]) if len(words) > 1 else None) or order[i]
        if kind == "ev":
            if value.endswith("+"):
                value, spread.plus = value[:-1], stat
            elif value.endswith("-"):
                value, spread.minus = value[:-1], stat
        spread.values[stat] = checks.integer(label, value)
    return spread


def _pair_special(gen: GameData, values: Dict[str, Optional[int]], label: str) -> None:
    # Before generation 3 SpA and SpD share one value; only gen 1 also reads Spc
    stats = (*SPECIAL, "spc") if gen.num == 1 else SPECIAL
    given = {values[s] for s in stats if values.get(s) is not None}
    if len(given) > 1:
        raise InvalidValueError(f"SpA and SpD {label} must match before generation 3")
    if given:
        value = given.pop()
        values["spa"] = values["spd"] = value


def _present(values: Dict[str, Optional[int]]) -> Dict[str, int]:
    return {k: v for k, v in values.items() if v is not None and k in STAT_ORDER}


# =============================================================================
# Builder
# =============================================================================

@dataclass
class MoveOptions:
    name: str
    hits: Optional[int] = None
    consecutive: Optional[int] = None
    crit: Optional[bool] = None
    spread: Optional[bool] = None
    use_z: Optional[bool] = None


def _boolean(value: Optional[str], key: str) -> Optional[bool]:
    return None if value is None else as_boolean(value, key)


def build(
    gen: GameData,
    game_type: Optional[GameType],
    phrase: Optional[Phrase],
    flags: FlagTable,
    strict: bool,
) -> State:
    """
    Builds a ``State`` from the phrase and the flag table.

    Args:
        gen: Game data for the resolved generation.
        game_type: Game type named by a generation marker, if any.
        phrase: The parsed phrase, or None if there was none (or it did not match).
        flags: Routed flags.
        strict: Whether conflicts, unknown identifiers and invalid
            enumerated values are fatal.

    Raises:
        NotationError: A subclass describing the first fatal problem.
    """
    checks = Checks(strict)

    resolved_game_type = _build_game_type(gen, game_type, flags, checks)
    field_ = _build_field(gen, flags, checks)
    options = _build_move_options(phrase, flags, checks)

    # The move decides which stat a phrase boost applies to; the final move is
    # created after the attacker since untyped Hidden Power depends on its IVs
    preview = create_move(gen, options.name, use_z=options.use_z)

    p1 = _build_side(gen, Scope.P1, preview, options.name, phrase, flags, checks)
    p2 = _build_side(gen, Scope.P2, preview, options.name, phrase, flags, checks)

    # Gender only matters for the attacker's Rivalry
    if p1.pokemon.ability != "rivalry":
        p1, p2 = _default_gender(p1), _default_gender(p2)

    move = create_move(
        gen,
        options.name,
        p1.pokemon,
        use_z=options.use_z,
        crit=options.crit,
        spread=options.spread,
        hits=options.hits,
        consecutive=options.consecutive,
    )
    return State(gen=gen, game_type=resolved_game_type, p1=p1, p2=p2, move=move, field=field_)


def _default_gender(side: Side) -> Side:
    pokemon = side.pokemon
    if pokemon.gender == pokemon.species.gender:
        return side
    logger.debug(f"Dropping gender of {pokemon.name} without Rivalry")
    return replace(side, pokemon=replace(pokemon, gender=pokemon.species.gender))


def _build_game_type(
    gen: GameData,
    game_type: Optional[GameType],
    flags: FlagTable,
    checks: Checks,
) -> GameType:
    marker = game_type.value if game_type else None
    flag = flags.general.get("gametype")
    if flag is not None:
        value = checks.conflict("game type", to_id(flag), marker)
    else:
        value = marker or config.generations.default_game_type

    try:
        result = GameType(to_id(value))
    except ValueError:
        result = None
    if checks.error(
        result is None or (gen.num <= 2 and result == GameType.DOUBLES),
        InvalidValueError(f"Invalid game type '{value}' for generation {gen.num}"),
    ):
        result = GameType.SINGLES
    return result


def _fill_conditions(checks: Checks, label: str, table: Optional[Dict[str, str]]) -> ConditionTable:
    result: ConditionTable = {}
    for id, value in (table or {}).items():
        if id in LEVELED:
            level = checks.integer(f"{label} {id}", value, required=True)
            if level:
                result[id] = level if level > 1 else None
        elif value == "1":
            result[id] = None
    return result


def _build_field(gen: GameData, flags: FlagTable, checks: Checks) -> Field:
    ns = flags.field
    pseudo_weather = _fill_conditions(
        checks, "Pseudo Weather", ns.conditions.get(ConditionKind.PSEUDO_WEATHER)
    )
    return create_field(
        gen,
        weather=ns.get("weather"),
        terrain=ns.get("terrain"),
        pseudo_weather=pseudo_weather,
    )


def _build_move_options(phrase: Optional[Phrase], flags: FlagTable, checks: Checks) -> MoveOptions:
    ns = flags.move
    use_z = checks.conflict("move useZ", ns.get("usez"), ns.get("z"))
    return MoveOptions(
        name=checks.conflict("move", phrase.move.id if phrase else None, ns.get("name"), required=True),
        hits=checks.integer("move hits", ns.get("hits")),
        consecutive=checks.integer(
            "move consecutive", phrase.move.consecutive if phrase else None, ns.get("consecutive")
        ),
        crit=_boolean(ns.get("crit"), "crit"),
        spread=_boolean(ns.get("spread"), "spread"),
        use_z=_boolean(use_z, "usez"),
    )


def _build_nature(
    gen: GameData,
    side: str,
    p: Optional[PhraseSide],
    ns: Namespace,
    spread: Spread,
    specified: List[str],
    checks: Checks,
) -> Optional[str]:
    plus = checks.conflict("nature buff", p.plus if p else None, spread.plus)
    minus = checks.conflict("nature nerf", p.minus if p else None, spread.minus)
    name = checks.conflict(f"{side} nature", p.nature if p else None, ns.get("nature"))

    if name is not None and gen.num <= 2:
        checks.error(True, InvalidValueError(f"Natures do not exist in generation {gen.num}"))
        name = None

    if name is not None:
        nature = gen.get_nature(name)
        if checks.error(nature is None, EntityNotFoundError("Nature", name, gen.num)):
            return None
        expected = ", ".join(
            f"{sign}{gen.stats.display(stat)}" for sign, stat in (("+", plus), ("-", minus)) if stat
        )
        checks.error(
            bool((plus and plus != nature.plus) or (minus and minus != nature.minus)),
            ConflictError(
                f"{side} nature", nature.name, expected,
                message=f"Conflicting values for {side} nature: {nature.name} is not ({expected})",
            ),
        )
        return nature.name

    inferred = infer_nature(plus, minus, specified)
    if inferred is not None and gen.num <= 2:
        checks.error(True, InvalidValueError(f"Natures do not exist in generation {gen.num}"))
        return None
    return inferred


def _build_side(
    gen: GameData,
    scope: Scope,
    preview: Move,
    move_name: str,
    phrase: Optional[Phrase],
    flags: FlagTable,
    checks: Checks,
) -> Side:
    side = scope.value
    ns = flags[scope]
    p: Optional[PhraseSide] = getattr(phrase, side) if phrase else None

    side_conditions = _fill_conditions(
        checks, f"{side} Side Condition", ns.conditions.get(ConditionKind.SIDE_CONDITION)
    )
    volatiles = _fill_conditions(
        checks, f"{side} Volatile Status", ns.conditions.get(ConditionKind.VOLATILE_STATUS)
    )

    name = checks.conflict(f"{side} species", p.species if p else None, ns.get("species"), required=True)

    gender = None
    if ns.get("gender") is not None:
        value = ns.get("gender").upper()
        if not checks.error(
            value not in {g.value for g in Gender},
            InvalidValueError(f"Invalid gender: '{ns.get('gender')}'"),
        ):
            gender = value

    stat = preview.offensive_stat if scope == Scope.P1 else preview.defensive_stat
    checks.error(
        stat is None and p is not None and p.boosts is not None,
        InvalidValueError(f"Ambiguous boosts {p.boosts if p else None} for {side}"),
    )

    spread = parse_spread(gen, "ev", ns.get("evs"), checks)
    dvs = parse_spread(gen, "dv", ns.get("dvs"), checks).values
    ivs = parse_spread(gen, "iv", ns.get("ivs"), checks).values
    evs = dict(spread.values)
    boosts: Dict[str, Optional[int]] = {
        "accuracy": checks.integer(f"{side} accuracy boosts", ns.get("accuracyboosts")),
        "evasion": checks.integer(f"{side} evasion boosts", ns.get("evasionboosts")),
    }

    phrase_evs = p.evs if p else {}
    for s in (*STAT_ORDER, "spc"):
        d = gen.stats.display(s)
        # Phrase, then the compact flag, then the per-stat flag
        ev = checks.integer(f"{side} {d} EVs", phrase_evs.get(s), evs.get(s))
        evs[s] = checks.integer(f"{side} {d} EVs", ev, ns.get(f"{s}evs"))
        dvs[s] = checks.integer(f"{side} {d} DVs", dvs.get(s), ns.get(f"{s}dvs"))
        ivs[s] = checks.integer(f"{side} {d} IVs", ivs.get(s), ns.get(f"{s}ivs"))
        if s == "hp":
            continue
        boost = p.boosts if p is not None and stat == s else None
        boosts[s] = checks.integer(f"{side} {d} boosts", boost, ns.get(f"{s}boosts"))

    boosts["spa"] = checks.integer(f"{side} SpA boosts", boosts["spa"], boosts.pop("spc"))

    if gen.num <= 2:
        for values, label in ((evs, "EVs"), (dvs, "DVs"), (ivs, "IVs")):
            _pair_special(gen, values, label)

    evs, dvs, ivs = _present(evs), _present(dvs), _present(ivs)
    nature = _build_nature(gen, side, p, ns, spread, list(evs), checks)

    added_type = None
    if ns.get("addedtype") is not None:
        type_ = gen.get_type(ns.get("addedtype"))
        if not checks.error(
            type_ is None,
            InvalidValueError(f"'{ns.get('addedtype')}' is not a valid addedType"),
        ):
            added_type = type_.name

    switching = None
    if ns.get("switching") is not None:
        value = to_id(ns.get("switching"))
        if value in {s.value for s in Switching}:
            switching = value
        elif as_boolean(ns.get("switching"), "switching"):
            switching = Switching.OUT.value

    hp_flag, hp_percent_flag = ns.get("hp"), ns.get("hppercent")
    if hp_flag is not None and hp_flag.endswith("%"):
        hp_percent_flag = checks.conflict(f"{side} HP percent", hp_percent_flag, hp_flag[:-1])
        hp_flag = None

    ability = checks.conflict(f"{side} ability", p.ability if p else None, ns.get("ability"))
    if ability is not None and checks.error(
        gen.get_ability(ability) is None, EntityNotFoundError("Ability", ability, gen.num)
    ):
        ability = None

    item = checks.conflict(f"{side} item", p.item if p else None, ns.get("item"))
    if item is not None and checks.error(
        gen.get_item(item) is None, EntityNotFoundError("Item", item, gen.num)
    ):
        item = None

    toxic_turns = checks.integer(f"{side} toxic counter", ns.get("toxiccounter"))

    pokemon = create_pokemon(
        gen,
        name,
        level=checks.integer(f"{side} level", p.level if p else None, ns.get("level")),
        gender=gender,
        ability=ability,
        item=item,
        nature=nature,
        evs=evs,
        ivs=ivs,
        dvs=dvs,
        boosts=boosts,
        hp=checks.integer(f"{side} HP", hp_flag),
        hp_percent=checks.number(f"{side} HP percent", p.hp if p else None, hp_percent_flag),
        maxhp=checks.integer(f"{side} max HP", ns.get("maxhp")),
        status=ns.get("status"),
        toxic_turns=toxic_turns,
        volatiles=volatiles,
        added_type=added_type,
        weightkg=checks.number(f"{side} weight", ns.get("weightkg"), ns.get("weight")),
        happiness=checks.integer(f"{side} happiness", ns.get("happiness")),
        move_last_turn_result=_boolean(ns.get("movelastturn"), "movelastturn"),
        hurt_this_turn=_boolean(ns.get("hurtthisturn"), "hurtthisturn"),
        switching=switching,
        move=move_name if scope == Scope.P1 else None,
    )

    abilities, atks = _build_allies(gen, side, ns, checks)
    return create_side(gen, pokemon, side_conditions=side_conditions, abilities=abilities, atks=atks)


def _build_allies(gen: GameData, side: str, ns: Namespace, checks: Checks):
    abilities: List[str] = []
    negated: List[str] = []
    for id in ALLY_ABILITIES:
        value = ns.get(id)
        if value is not None:
            (abilities if as_boolean(value, id) else negated).append(id)

    atks: List[int] = []
    for entry in (ns.get("allies") or "").split(","):
        if not entry.strip():
            continue
        n = parse_int(entry)
        if n is not None:
            atks.append(n)
            continue
        id = to_id(entry)
        if id in negated:
            checks.conflict(f"{side} ally ability", "false", "true")
        elif id not in abilities:
            if not checks.error(
                gen.get_ability(id) is None, EntityNotFoundError("Ability", entry, gen.num)
            ):
                abilities.append(id)
    return abilities, atks
