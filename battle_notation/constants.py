"""
Shared game constants for the battle notation system.

Stat orderings, stat display names, the nature table and the ally
abilities that the parser and the encoder must agree on.

Stats:
- Generation 1 has a single Special stat, stored as ``spa`` (and mirrored
  to ``spd``), so its canonical order has five stats.
- Generation 2 splits Special into SpA/SpD but both still share one DV.
- Generation 3+ uses the full six stat order with 0-31 IVs.
"""

from __future__ import annotations

from typing import Dict, Tuple

# ==============================================================================
# STATS
# ==============================================================================

STAT_ORDER: Tuple[str, ...] = ("hp", "atk", "def", "spa", "spd", "spe")
RBY_STAT_ORDER: Tuple[str, ...] = ("hp", "atk", "def", "spa", "spe")

# Non-HP stats in nature-table rank order
NATURE_STATS: Tuple[str, ...] = ("atk", "def", "spa", "spd", "spe")

BOOST_IDS: Tuple[str, ...] = ("atk", "def", "spa", "spd", "spe", "accuracy", "evasion")

STAT_DISPLAY: Dict[str, str] = {
    "hp": "HP",
    "atk": "Atk",
    "def": "Def",
    "spa": "SpA",
    "spd": "SpD",
    "spe": "Spe",
    "spc": "Spc",
    "accuracy": "Accuracy",
    "evasion": "Evasion",
}

# Accepted spellings (as ids) for each stat
STAT_ALIASES: Dict[str, str] = {
    "hp": "hp", "hitpoints": "hp",
    "atk": "atk", "attack": "atk",
    "def": "def", "defense": "def",
    "spa": "spa", "spatk": "spa", "specialattack": "spa", "satk": "spa",
    "spd": "spd", "spdef": "spd", "specialdefense": "spd", "sdef": "spd",
    "spe": "spe", "speed": "spe",
    "spc": "spa", "special": "spa",
}

MAX_IV = 31
MAX_DV = 15
LEGACY_EV = 252
MAX_BOOST = 6

# ==============================================================================
# NATURES
# ==============================================================================
# Indexed by (rank(plus) - 1) * 5 + (rank(minus) - 1) over NATURE_STATS.
# The diagonal entries are the neutral natures.

NATURE_ORDER: Tuple[str, ...] = (
    "Hardy", "Lonely", "Adamant", "Naughty", "Brave",
    "Bold", "Docile", "Impish", "Lax", "Relaxed",
    "Modest", "Mild", "Bashful", "Rash", "Quiet",
    "Calm", "Gentle", "Careful", "Quirky", "Sassy",
    "Timid", "Hasty", "Jolly", "Naive", "Serious",
)

# When only one half of a nature is known, the other half is taken from the
# first stat in this list that has no explicit EVs.
COMPLEMENT_PRIORITY: Dict[str, Tuple[str, ...]] = {
    "atk": ("spa", "spd", "def", "spe"),
    "spa": ("atk", "def", "spd", "spe"),
    "def": ("spa", "atk", "spd", "spe"),
    "spd": ("atk", "spa", "def", "spe"),
    "spe": ("spd", "def", "spa", "atk"),
}

# ==============================================================================
# ALLIES
# ==============================================================================
# Damage-relevant abilities an ally can contribute, with the side they
# default to when given as a bare flag (+Battery helps the attacker).

ALLY_ABILITIES: Dict[str, str] = {
    "aurabreak": "p2",
    "battery": "p1",
    "darkaura": "p2",
    "fairyaura": "p2",
    "flowergift": "p2",
    "friendguard": "p2",
    "powerspot": "p1",
    "steelyspirit": "p1",
    "stormdrain": "p2",
}
