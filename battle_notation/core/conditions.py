"""
Condition registry: weathers, terrains, pseudo weathers, side conditions,
volatile statuses and major statuses.

Each condition has a display name, a kind and a default scope: the side
(or the field) it is assumed to affect when a flag does not say. A scope
of ``None`` means the condition is equally meaningful on either side and
must be placed explicitly.

Usage:
    from battle_notation.core.conditions import CONDITIONS

    cond = CONDITIONS.get(gen, "Stealth Rock")
    cond.kind   # ConditionKind.SIDE_CONDITION
    cond.scope  # Scope.P2
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional, Tuple

from ..utils import to_id
from .enums import ConditionKind, Scope
from .protocols import ConditionRegistry, GameData

# Conditions whose value is a level or counter rather than a boolean
LEVELED = frozenset({
    "echoedvoice", "spikes", "toxicspikes", "slowstart", "autotomize", "stockpile",
})


@dataclass(frozen=True)
class Condition:
    """
    A registered battle condition.

    Attributes:
        id (str): Canonical id; for statuses the short status code (``"tox"``).
        name (str): Display name (``"Stealth Rock"``, ``"Toxic"``).
        kind (ConditionKind): Which table the condition belongs to.
        scope (Optional[Scope]): Default side, ``Scope.FIELD``, or None if ambiguous.
        gen (int): First generation the condition exists in.
        aliases (Tuple[str, ...]): Extra ids that resolve to this condition.
    """
    id: str
    name: str
    kind: ConditionKind
    scope: Optional[Scope]
    gen: int = 1
    aliases: Tuple[str, ...] = field(default_factory=tuple)


def _field(kind: ConditionKind, name: str, gen: int, *aliases: str) -> Condition:
    return Condition(to_id(name), name, kind, Scope.FIELD, gen, aliases)


WEATHERS = (
    _field(ConditionKind.WEATHER, "Sun", 2, "sunnyday", "sunny", "sunlight"),
    _field(ConditionKind.WEATHER, "Rain", 2, "raindance", "rainy"),
    _field(ConditionKind.WEATHER, "Sand", 2, "sandstorm"),
    _field(ConditionKind.WEATHER, "Hail", 3, "hailstorm"),
    _field(ConditionKind.WEATHER, "Harsh Sunshine", 6, "desolateland", "extremelyharshsunshine"),
    _field(ConditionKind.WEATHER, "Heavy Rain", 6, "primordialsea"),
    _field(ConditionKind.WEATHER, "Strong Winds", 6, "deltastream"),
)

TERRAINS = (
    _field(ConditionKind.TERRAIN, "Electric", 6, "electricterrain"),
    _field(ConditionKind.TERRAIN, "Grassy", 6, "grassyterrain"),
    _field(ConditionKind.TERRAIN, "Misty", 6, "mistyterrain"),
    _field(ConditionKind.TERRAIN, "Psychic", 7, "psychicterrain"),
)

PSEUDO_WEATHERS = (
    _field(ConditionKind.PSEUDO_WEATHER, "Echoed Voice", 5),
    _field(ConditionKind.PSEUDO_WEATHER, "Gravity", 4),
    _field(ConditionKind.PSEUDO_WEATHER, "Magic Room", 5),
    _field(ConditionKind.PSEUDO_WEATHER, "Trick Room", 4),
    _field(ConditionKind.PSEUDO_WEATHER, "Wonder Room", 5),
    _field(ConditionKind.PSEUDO_WEATHER, "Fairy Lock", 6),
    _field(ConditionKind.PSEUDO_WEATHER, "Ion Deluge", 6),
    _field(ConditionKind.PSEUDO_WEATHER, "Mud Sport", 3),
    _field(ConditionKind.PSEUDO_WEATHER, "Water Sport", 3),
)


def _side(name: str, scope: Scope, gen: int, *aliases: str) -> Condition:
    return Condition(to_id(name), name, ConditionKind.SIDE_CONDITION, scope, gen, aliases)


SIDE_CONDITIONS = (
    _side("Reflect", Scope.P2, 1),
    _side("Light Screen", Scope.P2, 1),
    _side("Aurora Veil", Scope.P2, 7),
    _side("Spikes", Scope.P2, 2),
    _side("Stealth Rock", Scope.P2, 4, "stealthrocks"),
    _side("Toxic Spikes", Scope.P2, 4),
    _side("Sticky Web", Scope.P2, 6),
    _side("Safeguard", Scope.P2, 2),
    _side("Mist", Scope.P2, 1),
    _side("Lucky Chant", Scope.P2, 4),
    _side("Tailwind", Scope.P1, 4),
)


def _volatile(name: str, scope: Optional[Scope], gen: int, *aliases: str) -> Condition:
    return Condition(to_id(name), name, ConditionKind.VOLATILE_STATUS, scope, gen, aliases)


VOLATILES = (
    _volatile("Dynamax", None, 8, "dynamaxed"),
    _volatile("Charge", Scope.P1, 3, "charged"),
    _volatile("Helping Hand", Scope.P1, 3),
    _volatile("Flash Fire", Scope.P1, 3),
    _volatile("Slow Start", Scope.P1, 4),
    _volatile("Focus Energy", Scope.P1, 1),
    _volatile("Laser Focus", Scope.P1, 7),
    _volatile("Electrify", Scope.P1, 6),
    _volatile("Power Trick", Scope.P1, 4),
    _volatile("Defense Curl", Scope.P1, 2),
    _volatile("Autotomize", None, 5),
    _volatile("Stockpile", None, 3),
    _volatile("Leech Seed", Scope.P2, 1, "seeded"),
    _volatile("Substitute", Scope.P2, 1, "sub"),
    _volatile("Foresight", Scope.P2, 2, "odorsleuth"),
    _volatile("Magnet Rise", Scope.P2, 4),
    _volatile("Minimize", Scope.P2, 1),
    _volatile("Roost", Scope.P2, 4),
    _volatile("Smack Down", Scope.P2, 5),
    _volatile("Tar Shot", Scope.P2, 8),
)


def _status(id: str, name: str, *aliases: str) -> Condition:
    return Condition(id, name, ConditionKind.STATUS, None, 1, aliases)


STATUSES = (
    _status("brn", "Burn", "burn", "burned", "burnt"),
    _status("frz", "Freeze", "freeze", "frozen"),
    _status("par", "Paralysis", "paralysis", "paralyzed", "paralyze"),
    _status("psn", "Poison", "poison", "poisoned"),
    _status("slp", "Sleep", "sleep", "asleep"),
    _status("tox", "Toxic", "toxic", "badlypoisoned", "badpoisoned"),
)


class Conditions(ConditionRegistry):
    """
    Registry of every known condition, indexed by id, name and aliases.

    The registry is built once and never mutated; ``get`` filters by the
    generation the condition was introduced in.
    """

    def __init__(self, conditions: Iterable[Condition]):
        self._by_id: Dict[str, Condition] = {}
        self._index: Dict[str, Condition] = {}
        for condition in conditions:
            self._by_id[condition.id] = condition
            for key in (condition.id, to_id(condition.name), *condition.aliases):
                self._index.setdefault(key, condition)

    def get(self, gen: GameData, name: Optional[str]) -> Optional[Condition]:
        condition = self._index.get(to_id(name))
        if condition is None or condition.gen > gen.num:
            return None
        return condition

    def by_id(self, id: str) -> Optional[Condition]:
        """Exact canonical-id lookup, regardless of generation."""
        return self._by_id.get(id)

    def __iter__(self) -> Iterator[Condition]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)


CONDITIONS = Conditions(
    WEATHERS + TERRAINS + PSEUDO_WEATHERS + SIDE_CONDITIONS + VOLATILES + STATUSES
)
