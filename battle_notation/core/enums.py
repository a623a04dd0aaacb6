"""
Enumerations for the battle notation system.

This module provides the enum types shared by the parser, the builder and
the encoder, ensuring a consistent vocabulary for condition kinds, scopes
and game types.
"""

from __future__ import annotations

from enum import Enum


# =============================================================================
# Condition Enums
# =============================================================================

class ConditionKind(str, Enum):
    """Kind of a battle condition as registered in the condition registry."""
    WEATHER = "Weather"
    TERRAIN = "Terrain"
    PSEUDO_WEATHER = "Pseudo Weather"
    SIDE_CONDITION = "Side Condition"
    VOLATILE_STATUS = "Volatile Status"
    STATUS = "Status"

    @property
    def is_field(self) -> bool:
        """Weather, terrain and pseudo weather always live on the field."""
        return self in (ConditionKind.WEATHER, ConditionKind.TERRAIN, ConditionKind.PSEUDO_WEATHER)

    @property
    def is_scalar(self) -> bool:
        """Single-valued kinds are stored as a top-level key, not a set."""
        return self in (ConditionKind.WEATHER, ConditionKind.TERRAIN, ConditionKind.STATUS)


class Scope(str, Enum):
    """Flag namespaces. ``p1`` is the attacker, ``p2`` the defender."""
    GENERAL = "general"
    FIELD = "field"
    P1 = "p1"
    P2 = "p2"
    MOVE = "move"


# =============================================================================
# Battle Enums
# =============================================================================

class GameType(str, Enum):
    """Battle format."""
    SINGLES = "singles"
    DOUBLES = "doubles"


class MoveCategory(str, Enum):
    """Pokemon move damage category."""
    PHYSICAL = "Physical"
    SPECIAL = "Special"
    STATUS = "Status"


class Gender(str, Enum):
    """Gender letters accepted by the ``Gender:`` flag."""
    MALE = "M"
    FEMALE = "F"
    GENDERLESS = "N"


class Switching(str, Enum):
    """Switching direction for Pursuit-style mechanics."""
    IN = "in"
    OUT = "out"
