from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from .enums import GameType, MoveCategory
from .models import Species

if TYPE_CHECKING:
    from .knowledge import Generation

# Condition id -> level (None for plain on/off conditions)
ConditionTable = Dict[str, Optional[int]]


@dataclass(frozen=True)
class Pokemon:
    species: Species
    level: int = 100
    gender: Optional[str] = None
    ability: Optional[str] = None  # ability id
    item: Optional[str] = None  # item id
    nature: Optional[str] = None  # nature name

    evs: Dict[str, int] = field(default_factory=dict)
    ivs: Dict[str, int] = field(default_factory=dict)
    boosts: Dict[str, int] = field(default_factory=dict)  # non-zero stages only

    hp: int = 0
    maxhp: int = 0
    status: Optional[str] = None  # brn, frz, par, psn, slp, tox
    toxic_turns: Optional[int] = None
    volatiles: ConditionTable = field(default_factory=dict)

    added_type: Optional[str] = None
    weighthg: int = 0
    happiness: Optional[int] = None
    move_last_turn_result: Optional[bool] = None
    hurt_this_turn: Optional[bool] = None
    switching: Optional[str] = None  # "in" / "out"

    @property
    def name(self) -> str:
        return self.species.name


@dataclass(frozen=True)
class Side:
    pokemon: Pokemon
    side_conditions: ConditionTable = field(default_factory=dict)
    # Allies for multi-target, team-sensitive moves
    abilities: Tuple[str, ...] = ()  # ally ability ids
    atks: Tuple[int, ...] = ()  # raw ally attack stats


@dataclass(frozen=True)
class Move:
    id: str
    name: str
    type: str
    category: MoveCategory
    base_power: int
    target: str = "normal"
    multihit: Optional[Tuple[int, int]] = None
    override_offensive_stat: Optional[str] = None
    override_defensive_stat: Optional[str] = None

    crit: bool = False
    spread: bool = False
    use_z: bool = False
    hits: Optional[int] = None
    consecutive: Optional[int] = None
    magnitude: Optional[int] = None

    @property
    def offensive_stat(self) -> Optional[str]:
        """Attacker stat the move reads; None for status moves."""
        if self.category == MoveCategory.STATUS:
            return None
        return self.override_offensive_stat or ("spa" if self.category == MoveCategory.SPECIAL else "atk")

    @property
    def defensive_stat(self) -> Optional[str]:
        """Defender stat the move reads; None for status moves."""
        if self.category == MoveCategory.STATUS:
            return None
        return self.override_defensive_stat or ("spd" if self.category == MoveCategory.SPECIAL else "def")


@dataclass(frozen=True)
class Field:
    weather: Optional[str] = None  # display name, e.g. "Sun"
    terrain: Optional[str] = None  # display name, e.g. "Electric"
    pseudo_weather: ConditionTable = field(default_factory=dict)


@dataclass(frozen=True)
class State:
    """A complete single-turn scenario: who attacks whom, with what, where."""
    gen: Generation
    game_type: GameType
    p1: Side
    p2: Side
    move: Move
    field: Field
