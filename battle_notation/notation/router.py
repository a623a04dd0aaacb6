"""
Flag router and condition sub-parser.

Assigns every classified flag to one of five namespaces (general, field,
p1, p2, move). Flags that name conditions (``+StealthRock``,
``p2:Spikes:3,Reflect``, ``Weather:Rain``) are split into sub-flags,
looked up in the condition registry and stored either as a top-level value
(weather, terrain, status) or in the namespace's per-kind condition map.

Routing precedence, per flag:
    1. ids that can only mean one thing (``gametype``, ``weather``, ``crit``...)
    2. markers with a default side (``movelastturn``, ``switching``)
    3. ally abilities (``+Battery``)
    4. explicit ``p1``/``attacker``/``p2``/``defender``/``field`` prefixes
    5. known keys of the side implied by the position relative to ``vs.``
    6. anything else is a compound condition expression

Usage:
    from battle_notation.notation.router import route_flags

    table = route_flags(gen, classification.flags, vs=True, strict=False)
    table.p2.conditions[ConditionKind.SIDE_CONDITION]  # {'stealthrock': '1'}
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

from ..constants import ALLY_ABILITIES
from ..core.conditions import CONDITIONS
from ..core.enums import ConditionKind, Scope
from ..core.exceptions import (
    AmbiguousConditionError,
    ConditionKindError,
    ConditionScopeError,
    ConflictError,
    MalformedValueError,
    UnknownConditionError,
    UnknownFlagError,
    UnsupportedConditionError,
)
from ..core.protocols import ConditionRegistry, GameData
from ..utils import to_id
from .flags import CONDITION_NON_BOOLS, FLAG, TRUE_VALUES, RawFlag, as_boolean, parse_flag

logger = logging.getLogger(__name__)

# Delimiters between the sub-flags of a compound condition value
SPLIT_SUBFLAG = re.compile(r"[^+0-9a-zA-Z_'’\"/%:= ]")

# =============================================================================
# Routing tables
# =============================================================================

UNAMBIGUOUS: Dict[str, Scope] = {
    "gametype": Scope.GENERAL, "doubles": Scope.GENERAL, "singles": Scope.GENERAL,
    "weather": Scope.FIELD, "terrain": Scope.FIELD, "pseudoweather": Scope.FIELD,
    "move": Scope.MOVE, "usez": Scope.MOVE, "z": Scope.MOVE, "crit": Scope.MOVE,
    "hits": Scope.MOVE, "spread": Scope.MOVE, "consecutive": Scope.MOVE,
}

DEFAULTS: Dict[str, Scope] = {
    "movelastturn": Scope.P2, "hurtthisturn": Scope.P2, "switching": Scope.P2,
}

# Condition kind aliases usable as flag keys (Weather:Rain, p2SideConditions:Spikes)
CONDITION_KINDS: Dict[str, ConditionKind] = {
    "weather": ConditionKind.WEATHER,
    "terrain": ConditionKind.TERRAIN,
    "pseudoweather": ConditionKind.PSEUDO_WEATHER,
    "pseudoweathers": ConditionKind.PSEUDO_WEATHER,
    "sidecondition": ConditionKind.SIDE_CONDITION,
    "sideconditions": ConditionKind.SIDE_CONDITION,
    "volatile": ConditionKind.VOLATILE_STATUS,
    "volatiles": ConditionKind.VOLATILE_STATUS,
    "volatilestatus": ConditionKind.VOLATILE_STATUS,
    "volatilestatuses": ConditionKind.VOLATILE_STATUS,
    "status": ConditionKind.STATUS,
}

_STATS = ("hp", "atk", "def", "spa", "spd", "spc", "spe")
_BOOSTS = (*_STATS[1:], "accuracy", "evasion")

PLAYER_KNOWN: FrozenSet[str] = frozenset({
    "species", "level", "ability", "item", "gender", "nature", "status",
    "ivs", *(f"{s}ivs" for s in _STATS),
    "dvs", *(f"{s}dvs" for s in _STATS),
    "evs", *(f"{s}evs" for s in _STATS),
    *(f"{s}boosts" for s in _BOOSTS),
    "happiness", "hp", "hppercent", "maxhp", "toxiccounter", "addedtype", "weight", "weightkg",
    "allies", *DEFAULTS, *ALLY_ABILITIES,
})

KNOWN: Dict[Scope, FrozenSet[str]] = {
    Scope.GENERAL: frozenset({"gametype"}),
    Scope.FIELD: frozenset({"weather", "terrain", "pseudoweather"}),
    Scope.P1: PLAYER_KNOWN,
    Scope.P2: PLAYER_KNOWN,
    Scope.MOVE: frozenset({"name", "hits", "usez", "z", "crit", "spread", "consecutive"}),
}

# Top-level key a single-valued condition kind is stored under
SCALAR_KEYS: Dict[ConditionKind, str] = {
    ConditionKind.WEATHER: "weather",
    ConditionKind.TERRAIN: "terrain",
    ConditionKind.STATUS: "status",
}

TOXIC = "tox"


# =============================================================================
# Flag table
# =============================================================================

@dataclass
class Namespace:
    """
    Flags routed to one scope.

    Attributes:
        scope (Scope): Which namespace this is.
        known (FrozenSet[str]): The closed set of keys accepted in ``values``.
        values (Dict[str, str]): Known key -> normalized value.
        conditions (Dict[ConditionKind, Dict[str, str]]): Per-kind condition
            id -> value, for the field and the two sides.
        unrecognized (Dict[str, str]): Keys dropped in non-strict mode.
    """
    scope: Scope
    known: FrozenSet[str]
    values: Dict[str, str] = field(default_factory=dict)
    conditions: Dict[ConditionKind, Dict[str, str]] = field(default_factory=dict)
    unrecognized: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self.values

    def set(self, key: str, value: str, source: str, strict: bool) -> None:
        """
        Records a value, enforcing one value per key.

        A second, different value is a conflict: fatal in strict mode,
        otherwise the first value is kept. A value equal after
        normalization replaces the stored spelling.

        Raises:
            ConflictError: In strict mode, for a differing second value.
            UnknownFlagError: In strict mode, for a key outside ``known``.
        """
        if self.scope == Scope.MOVE and key == "move":
            key = "name"
        if key not in self.known:
            if strict:
                raise UnknownFlagError(source, self.scope.value)
            logger.debug(f"Dropping unknown {self.scope.value} flag '{source}'")
            self.unrecognized[key] = value
            return

        existing = self.values.get(key)
        if existing is not None and to_id(existing) != to_id(value):
            if strict:
                raise ConflictError(
                    key, existing, value,
                    message=f"Conflicting values for flag '{key}': '{existing}' vs. '{value}'",
                )
            logger.debug(f"Keeping '{existing}' over '{value}' for {self.scope.value} flag '{key}'")
            return
        self.values[key] = value

    def add_condition(self, kind: ConditionKind, id: str, value: str, strict: bool) -> None:
        conditions = self.conditions.setdefault(kind, {})
        existing = conditions.get(id)
        if existing is not None and existing != value:
            if strict:
                raise ConflictError(
                    id, existing, value,
                    message=f"Conflicting values for condition '{id}': '{existing}' vs. '{value}'",
                )
            logger.debug(f"Keeping '{existing}' over '{value}' for condition '{id}'")
            return
        conditions[id] = value

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = dict(self.values)
        if self.conditions:
            result["conditions"] = {k.value: dict(v) for k, v in self.conditions.items()}
        if self.unrecognized:
            result["unrecognized"] = dict(self.unrecognized)
        return result


def _namespace(scope: Scope) -> Namespace:
    return Namespace(scope, KNOWN[scope])


@dataclass
class FlagTable:
    """All routed flags, one ``Namespace`` per scope."""
    general: Namespace = field(default_factory=lambda: _namespace(Scope.GENERAL))
    p1: Namespace = field(default_factory=lambda: _namespace(Scope.P1))
    p2: Namespace = field(default_factory=lambda: _namespace(Scope.P2))
    move: Namespace = field(default_factory=lambda: _namespace(Scope.MOVE))
    # Declared last: the attribute name shadows dataclasses.field in the class body
    field: Namespace = field(default_factory=lambda: _namespace(Scope.FIELD))

    def __getitem__(self, scope: Scope) -> Namespace:
        return getattr(self, scope.value)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {scope.value: self[scope].to_dict() for scope in Scope}


# =============================================================================
# Routing
# =============================================================================

def route_flags(
    gen: GameData,
    flags: List[RawFlag],
    vs: bool,
    strict: bool,
    registry: ConditionRegistry = CONDITIONS,
) -> FlagTable:
    """
    Routes classified flags into a ``FlagTable``.

    Args:
        gen: Game data for the resolved generation (conditions are
            generation-dependent).
        flags: Flags in input order.
        vs: Whether the input had a ``vs.`` separator; if so, flags before it
            default to the attacker and flags after it to the defender.
        strict: Whether unknown flags and conflicts are fatal.
        registry: Condition registry to resolve condition names against.

    Returns:
        FlagTable: The routed flags.
    """
    table = FlagTable()
    parser = _ConditionParser(gen, table, strict, registry)

    for flag in flags:
        id, value, source = flag.id, flag.value, flag.text
        scope = (Scope.P2 if flag.after_vs else Scope.P1) if vs else None

        if id in UNAMBIGUOUS:
            if id in ("singles", "doubles"):
                id, value = "gametype", id
            target = UNAMBIGUOUS[id]
            if target == Scope.FIELD:
                parser.parse(value, source, Scope.FIELD, explicit=True, kind=CONDITION_KINDS[id])
            else:
                table[target].set(id, value, source, strict)
        elif id in DEFAULTS:
            table[scope or DEFAULTS[id]].set(id, value, source, strict)
        elif id in ALLY_ABILITIES:
            table[scope or Scope(ALLY_ABILITIES[id])].set(id, value, source, strict)
        elif id in ("attacker", "p1"):
            parser.parse(value, source, Scope.P1, explicit=True)
        elif id in ("defender", "p2"):
            parser.parse(value, source, Scope.P2, explicit=True)
        elif id == "field":
            parser.parse(value, source, Scope.FIELD, explicit=True)
        elif id.startswith(("attacker", "p1", "defender", "p2")):
            side = Scope.P1 if id.startswith(("attacker", "p1")) else Scope.P2
            key = id[2:] if id.startswith("p") else id[8:]
            if key in CONDITION_KINDS:
                parser.parse(value, source, side, explicit=True, kind=CONDITION_KINDS[key])
            else:
                table[side].set(key, value, source, strict)
        elif scope is not None and id in KNOWN[scope]:
            table[scope].set(id, value, source, strict)
        else:
            parser.parse(f"{id}={value}", source, scope, explicit=False, direct=True)

    return table


class _ConditionParser:
    """Splits compound condition values and stores each condition in the table."""

    def __init__(self, gen: GameData, table: FlagTable, strict: bool, registry: ConditionRegistry):
        self.gen = gen
        self.table = table
        self.strict = strict
        self.registry = registry

    def parse(
        self,
        value: str,
        source: str,
        scope: Optional[Scope],
        explicit: bool,
        kind: Optional[ConditionKind] = None,
        direct: bool = False,
    ) -> None:
        """
        Parses ``value`` as one or more conditions.

        Args:
            value: The compound value (``"Spikes:3,Reflect"``).
            source: The original token, for messages and toxic counters.
            scope: Scope given by a prefix or implied by the ``vs.`` position.
            explicit: Whether ``scope`` came from an explicit prefix.
            kind: Kind restriction from a ``Weather:``/``p2SideConditions:`` key.
            direct: Whether ``value`` was rebuilt from the flag itself
                (``Toxic:2``) rather than being a prefixed list (``p2:Toxic:2``).
        """
        parts = [part for part in SPLIT_SUBFLAG.split(value) if part]
        if not parts:
            if self.strict:
                label = f"{kind.value} " if kind else ""
                raise UnknownConditionError(
                    value, source,
                    message=f"Expected '{value}' to contain at least one {label}condition but found none",
                )
            return

        for part in parts:
            self._parse_one(part, value, source, scope, explicit, kind, direct)

    def _parse_one(
        self,
        part: str,
        value: str,
        source: str,
        scope: Optional[Scope],
        explicit: bool,
        kind: Optional[ConditionKind],
        direct: bool,
    ) -> None:
        condition_mode = kind is not None
        parsed = parse_flag(part, condition_mode)
        implicit = parsed is None or FLAG.match(part).group(3) is not None
        if parsed is None:
            parsed = parse_flag(f"+{part}", condition_mode)
            if parsed is None:
                raise MalformedValueError(
                    source, part, expected="condition",
                    message=f"Unable to parse '{part}' as a flag for a condition from '{value}'",
                )
        id, val = parsed

        condition = self.registry.get(self.gen, id)
        if condition is None:
            ally = ALLY_ABILITIES.get(id)
            if kind is None and scope != Scope.FIELD and ally:
                target = scope or Scope(ally)
                self.table[target].set(id, "1" if as_boolean(val, id) else "0", source, self.strict)
                return
            if self.strict:
                raise UnknownConditionError(id, value)
            logger.debug(f"Dropping unrecognized condition '{id}' from '{source}'")
            self.table[scope or Scope.GENERAL].unrecognized[id] = val
            return

        if id not in CONDITION_NON_BOOLS:
            val = "1" if as_boolean(val, id) else "0"

        if kind is not None and kind != condition.kind:
            raise ConditionKindError(condition.name, kind.value, condition.kind.value)

        target = scope or condition.scope
        if target is None:
            raise AmbiguousConditionError(id)

        is_field = condition.kind.is_field
        if is_field != (target == Scope.FIELD):
            if explicit:
                raise ConditionScopeError(condition.name, target.value)
            target = Scope.FIELD
        namespace = self.table[target]

        if condition.kind.is_scalar:
            if condition.id == TOXIC:
                self._toxic_counter(namespace, val, source, direct, implicit)
            namespace.set(SCALAR_KEYS[condition.kind], condition.id, source, self.strict)
            return

        namespace.add_condition(condition.kind, condition.id, val, self.strict)

    def _toxic_counter(self, namespace: Namespace, val: str, source: str, direct: bool, implicit: bool) -> None:
        if not val.isdigit():
            if to_id(val) in TRUE_VALUES:
                return
            if self.strict:
                raise MalformedValueError(
                    "toxic counter", val,
                    message=f"Expected a number of toxic turns in '{source}', received '{val}'",
                )
            logger.warning(f"Ignoring malformed toxic counter in '{source}', only the status is kept")
            return
        # +Toxic and Toxic:1 normalize to the same value, so the original token decides
        if direct:
            match = FLAG.match(source)
            if match and not match.group(3):
                namespace.set("toxiccounter", val, source, self.strict)
            return
        if implicit:
            return
        if self.strict:
            raise UnsupportedConditionError("toxic", source)
        logger.warning(f"Ignoring toxic counter inside '{source}', only the status is kept")
