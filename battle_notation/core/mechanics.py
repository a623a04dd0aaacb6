"""
Stat mechanics for each ruleset generation.

Provides the per-generation ``Stats`` helper (ordering, display names, stat
computation, DV/IV conversion) and Hidden Power type derivation.

Formulas:
- Gen 1-2: DVs (0-15) stand in for IVs; ``iv = dv * 2 + 1`` and stat
  experience is treated as 252 "EVs" by default. No natures.
- Gen 3+: ``floor((2*base + iv + floor(ev/4)) * level / 100) + 5`` scaled
  by 1.1/0.9 for natures; HP adds ``level + 10`` instead of 5.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Tuple

from ..constants import (
    LEGACY_EV,
    MAX_IV,
    RBY_STAT_ORDER,
    STAT_ALIASES,
    STAT_DISPLAY,
    STAT_ORDER,
)
from ..utils import to_id

if TYPE_CHECKING:
    from .dataclasses import Pokemon
    from .knowledge import Generation
    from .models import Nature

# Hidden Power types in index order (Normal and Fairy have no Hidden Power)
HIDDEN_POWER_TYPES: Tuple[str, ...] = (
    "Fighting", "Flying", "Poison", "Ground", "Rock", "Bug", "Ghost", "Steel",
    "Fire", "Water", "Grass", "Electric", "Psychic", "Ice", "Dragon", "Dark",
)


def to_dv(iv: int) -> int:
    return iv // 2


def to_iv(dv: int) -> int:
    return dv * 2 + 1


def get_hp_dv(ivs: Mapping[str, int]) -> int:
    """Derives the generation 1-2 HP DV from the low bits of the other DVs."""
    return (
        (to_dv(ivs.get("atk", MAX_IV)) % 2) * 8
        + (to_dv(ivs.get("def", MAX_IV)) % 2) * 4
        + (to_dv(ivs.get("spe", MAX_IV)) % 2) * 2
        + (to_dv(ivs.get("spa", MAX_IV)) % 2)
    )


def hidden_power_type(gen: int, ivs: Mapping[str, int]) -> str:
    """
    Returns the Hidden Power type implied by a set of IVs.

    Args:
        gen: Generation number (2+).
        ivs: IVs by stat; missing stats count as 31.

    Returns:
        str: The type name (e.g., "Fire").
    """
    iv = {stat: ivs.get(stat, MAX_IV) for stat in STAT_ORDER}
    if gen <= 2:
        atk, df = to_dv(iv["atk"]), to_dv(iv["def"])
        return HIDDEN_POWER_TYPES[4 * (atk % 4) + (df % 4)]

    index = 0
    for i, stat in enumerate(("hp", "atk", "def", "spe", "spa", "spd")):
        index += (iv[stat] % 2) << i
    return HIDDEN_POWER_TYPES[(index * 15) // 63]


class Stats:
    """
    Stat helper bound to one generation.

    ``order`` is the canonical order used when rendering spreads (five
    stats in generation 1).
    """

    def __init__(self, gen: int):
        self.gen = gen
        self.order: Tuple[str, ...] = RBY_STAT_ORDER if gen == 1 else STAT_ORDER

    def get(self, name: Optional[str]) -> Optional[str]:
        """Resolves a stat name or abbreviation (``"SpA"``, ``"Special"``) to its id."""
        return STAT_ALIASES.get(to_id(name)) if name else None

    def display(self, stat: str) -> str:
        if self.gen == 1 and stat in ("spa", "spd"):
            return STAT_DISPLAY["spc"]
        return STAT_DISPLAY.get(stat, stat)

    def fill(self, values: Optional[Mapping[str, int]], default: int) -> Dict[str, int]:
        filled = dict(values or {})
        for stat in STAT_ORDER:
            filled.setdefault(stat, default)
        return filled

    def calc(
        self,
        stat: str,
        base: int,
        iv: int = MAX_IV,
        ev: Optional[int] = None,
        level: int = 100,
        nature: Optional[Nature] = None,
    ) -> int:
        """
        Computes a single stat value.

        Args:
            stat: Stat id.
            base: Species base stat.
            iv: Individual value (0-31); truncated to an even DV value before gen 3.
            ev: Effort value; defaults to 252 before gen 3 and 0 after.
            level: Pokémon level.
            nature: Optional nature record (ignored before gen 3).

        Returns:
            int: The computed stat.
        """
        if ev is None:
            ev = LEGACY_EV if self.gen <= 2 else 0
        if self.gen <= 2:
            iv = to_dv(iv) * 2
            nature = None

        if stat == "hp":
            # Shedinja-style single HP species
            if base == 1:
                return 1
            return math.floor((2 * base + iv + math.floor(ev / 4)) * level / 100) + level + 10

        value = math.floor((2 * base + iv + math.floor(ev / 4)) * level / 100) + 5
        if nature is not None:
            if nature.plus == stat and nature.minus != stat:
                return math.floor(value * 110 / 100)
            if nature.minus == stat and nature.plus != stat:
                return math.floor(value * 90 / 100)
        return value


def compute_stats(gen: Generation, pokemon: Pokemon) -> Dict[str, int]:
    """Computes all six stats of a Pokémon from its species, IVs, EVs, level and nature."""
    nature = gen.natures.get(pokemon.nature) if pokemon.nature else None
    default_ev = LEGACY_EV if gen.num <= 2 else 0
    return {
        stat: gen.stats.calc(
            stat,
            pokemon.species.base_stats[stat],
            pokemon.ivs.get(stat, MAX_IV),
            pokemon.evs.get(stat, default_ev),
            pokemon.level,
            nature,
        )
        for stat in STAT_ORDER
    }
