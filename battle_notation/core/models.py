from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .enums import MoveCategory


@dataclass(frozen=True)
class Species:
    """Static data for a Pokémon species, resolved for one generation.

    Attributes:
        id (str): The lookup id (e.g., "garchomp").
        name (str): The species name (e.g., "Garchomp").
        gen (int): The generation the species was introduced in.
        types (Tuple[str, ...]): One or two type names.
        base_stats (Dict[str, int]): Base stats keyed hp, atk, def, spa, spd, spe.
        abilities (Tuple[str, ...]): Possible ability names (empty before generation 3).
        gender (Optional[str]): Fixed gender letter ("M", "F", "N") or None if it varies.
        weighthg (int): Weight in hectograms.
    """
    id: str
    name: str
    gen: int
    types: Tuple[str, ...]
    base_stats: Dict[str, int]
    abilities: Tuple[str, ...] = ()
    gender: Optional[str] = None
    weighthg: int = 0

    def __str__(self) -> str:
        return f"{self.name} ({'/'.join(self.types)})"


@dataclass(frozen=True)
class MoveData:
    """Static data for a move, resolved for one generation.

    Attributes:
        id (str): The lookup id (e.g., "earthquake").
        name (str): The display name of the move.
        gen (int): The generation the move was introduced in.
        type (str): The elemental type of the move (e.g., "Ground").
        category (MoveCategory): Physical, Special or Status (type-based before generation 4).
        base_power (int): The base power of the move.
        target (str): The targeting scope (e.g., "normal", "allAdjacent").
        multihit (Optional[Tuple[int, int]]): Minimum and maximum number of hits, if multi-hit.
        override_offensive_stat (Optional[str]): Stat used instead of the category default for the attacker.
        override_defensive_stat (Optional[str]): Stat used instead of the category default for the defender.
    """
    id: str
    name: str
    gen: int
    type: str
    category: MoveCategory
    base_power: int
    target: str = "normal"
    multihit: Optional[Tuple[int, int]] = None
    override_offensive_stat: Optional[str] = None
    override_defensive_stat: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.name} ({self.type}/{self.category.value}) Pwr:{self.base_power}"


@dataclass(frozen=True)
class Ability:
    """A Pokémon ability.

    Attributes:
        id (str): The lookup id.
        name (str): The display name.
        gen (int): The generation the ability was introduced in.
    """
    id: str
    name: str
    gen: int


@dataclass(frozen=True)
class Item:
    """Represents a held item.

    Attributes:
        id (str): The lookup id.
        name (str): The display name of the item.
        gen (int): The generation the item was introduced in.
    """
    id: str
    name: str
    gen: int


@dataclass(frozen=True)
class TypeData:
    """An elemental type with its Hidden Power spreads.

    Attributes:
        id (str): The lookup id.
        name (str): The type name (e.g., "Fire").
        gen (int): The generation the type was introduced in.
        hp_ivs (Optional[Dict[str, int]]): IVs that differ from 31 for this Hidden Power type
            (generation 3+), None for types without a Hidden Power.
        hp_dvs (Optional[Dict[str, int]]): DVs that differ from 15 for this Hidden Power type (generation 2).
    """
    id: str
    name: str
    gen: int
    hp_ivs: Optional[Dict[str, int]] = None
    hp_dvs: Optional[Dict[str, int]] = None


@dataclass(frozen=True)
class Nature:
    """A nature boosting one stat and reducing another.

    Attributes:
        id (str): The lookup id.
        name (str): The display name (e.g., "Adamant").
        plus (Optional[str]): The boosted stat, None for neutral natures.
        minus (Optional[str]): The reduced stat, None for neutral natures.
    """
    id: str
    name: str
    plus: Optional[str] = None
    minus: Optional[str] = None
