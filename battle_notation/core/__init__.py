"""
Core Module - Records, game data and the factories that build states.

This module provides the fundamental types used by the notation parser
and encoder.
"""

from __future__ import annotations

from .enums import (
    ConditionKind,
    Scope,
    GameType,
    MoveCategory,
    Gender,
    Switching,
)

from .models import Species, MoveData, Ability, Item, TypeData, Nature

from .dataclasses import Pokemon, Side, Move, Field, State

from .protocols import GameData, ConditionRegistry

from .conditions import Condition, CONDITIONS

from .knowledge import Generation, KnowledgeBase, get_kb

from .exceptions import (
    NotationError,
    GrammarError,
    PhraseMismatchError,
    UnknownIdentifierError,
    UnknownFlagError,
    UnknownConditionError,
    ConflictError,
    MissingValueError,
    MalformedValueError,
    InvalidValueError,
    InvalidGenerationError,
    ConditionError,
    AmbiguousConditionError,
    ConditionKindError,
    ConditionScopeError,
    UnsupportedConditionError,
    DataError,
    KnowledgeBaseError,
    EntityNotFoundError,
    ParseError,
)

__all__ = [
    # Enums
    "ConditionKind",
    "Scope",
    "GameType",
    "MoveCategory",
    "Gender",
    "Switching",
    # Game data
    "Species",
    "MoveData",
    "Ability",
    "Item",
    "TypeData",
    "Nature",
    "GameData",
    "ConditionRegistry",
    "Condition",
    "CONDITIONS",
    "Generation",
    "KnowledgeBase",
    "get_kb",
    # State
    "Pokemon",
    "Side",
    "Move",
    "Field",
    "State",
    # Exceptions
    "NotationError",
    "GrammarError",
    "PhraseMismatchError",
    "UnknownIdentifierError",
    "UnknownFlagError",
    "UnknownConditionError",
    "ConflictError",
    "MissingValueError",
    "MalformedValueError",
    "InvalidValueError",
    "InvalidGenerationError",
    "ConditionError",
    "AmbiguousConditionError",
    "ConditionKindError",
    "ConditionScopeError",
    "UnsupportedConditionError",
    "DataError",
    "KnowledgeBaseError",
    "EntityNotFoundError",
    "ParseError",
]
