"""
Custom Exception Hierarchy for the battle notation system.

Provides structured error handling with specific exception types for the
different failure modes of parsing (grammar mismatch, unknown identifiers,
conflicts, missing or malformed values) and for the game-data layer.

Usage:
    from battle_notation.core.exceptions import ParseError

    try:
        state = parse("Garchomp [Earthquake] vs. Skarmory", strict=True)
    except ParseError as e:
        logger.error(f"Failed to parse: {e}")
        logger.debug(e.context.to_dict())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ..notation.parser import ParseContext


class NotationError(Exception):
    """
    Base exception for all battle notation errors.

    All custom exceptions inherit from this, allowing code to catch
    all notation-related errors with a single except clause.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Grammar Errors
# =============================================================================

class GrammarError(NotationError):
    """Base class for text that matches neither a flag nor the phrase."""
    pass


class PhraseMismatchError(GrammarError):
    """Raised in strict mode when non-empty phrase text fails to match."""

    def __init__(self, phrase: str, message: Optional[str] = None):
        msg = message or f"Unable to parse phrase: '{phrase}'"
        super().__init__(msg)
        self.phrase = phrase


# =============================================================================
# Identifier Errors
# =============================================================================

class UnknownIdentifierError(NotationError):
    """Base class for flag or condition ids not found in any registry."""
    pass


class UnknownFlagError(UnknownIdentifierError):
    """Raised in strict mode when a flag has no known home."""

    def __init__(self, flag: str, scope: Optional[str] = None, message: Optional[str] = None):
        msg = message or f"Unknown flag '{flag}'"
        super().__init__(msg, {"scope": scope} if scope else None)
        self.flag = flag
        self.scope = scope


class UnknownConditionError(UnknownIdentifierError):
    """Raised in strict mode when a condition id is not registered."""

    def __init__(self, condition: str, source: str, message: Optional[str] = None):
        msg = message or f"Unrecognized or invalid condition '{condition}' from '{source}'"
        super().__init__(msg)
        self.condition = condition
        self.source = source


# =============================================================================
# Value Errors
# =============================================================================

class ConflictError(NotationError):
    """
    Raised when two sources disagree on the value of one field.

    The message always names both values so the user can tell which
    part of the input to fix.
    """

    def __init__(self, key: str, first: Any, second: Any, message: Optional[str] = None):
        msg = message or f"Conflicting values for {key}: '{first}' vs. '{second}'"
        super().__init__(msg)
        self.key = key
        self.first = first
        self.second = second


class MissingValueError(NotationError):
    """Raised when a required value (species, move) is absent after merging."""

    def __init__(self, key: str, message: Optional[str] = None):
        msg = message or f"'{key}' must have a value"
        super().__init__(msg)
        self.key = key


class MalformedValueError(NotationError):
    """Raised when a value cannot be coerced to a number or boolean."""

    def __init__(self, key: str, value: Any, expected: str = "number", message: Optional[str] = None):
        msg = message or f"Expected {expected} for {key}, received '{value}'"
        super().__init__(msg)
        self.key = key
        self.value = value
        self.expected = expected


class InvalidValueError(NotationError):
    """Raised when a value is well-formed but not a valid choice."""
    pass


class InvalidGenerationError(InvalidValueError):
    """Raised for out-of-range or conflicting generation markers."""

    def __init__(self, value: Any, pinned: Optional[int] = None, message: Optional[str] = None):
        if message is None:
            if pinned is not None:
                message = f"Conflicting values for flag generation: '{pinned}' vs. '{value}'"
            else:
                message = f"Invalid generation flag '{value}'"
        super().__init__(message)
        self.value = value
        self.pinned = pinned


# =============================================================================
# Condition Errors
# =============================================================================

class ConditionError(NotationError):
    """Base class for condition routing failures."""
    pass


class AmbiguousConditionError(ConditionError):
    """Raised when a condition has no scope and none can be inferred."""

    def __init__(self, condition: str):
        super().__init__(f"Ambiguous implicit condition '{condition}'")
        self.condition = condition


class ConditionKindError(ConditionError):
    """Raised when a condition is requested under the wrong kind."""

    def __init__(self, condition: str, expected: str, actual: str):
        super().__init__(f"Mismatched kind for condition '{condition}': '{expected}' vs. '{actual}'")
        self.condition = condition
        self.expected = expected
        self.actual = actual


class ConditionScopeError(ConditionError):
    """Raised when an explicitly scoped condition belongs elsewhere."""

    def __init__(self, condition: str, scope: str):
        super().__init__(f"Mismatched scope for condition '{condition}'", {"scope": scope})
        self.condition = condition
        self.scope = scope


class UnsupportedConditionError(ConditionError):
    """
    Raised for condition forms that cannot be interpreted reliably.

    A numeric toxic counter given inside a compound flag (``p2:toxic:1``)
    cannot be told apart from the boolean form once normalized.
    """

    def __init__(self, condition: str, source: str, message: Optional[str] = None):
        msg = message or f"Unsupported counter for condition '{condition}' inside '{source}'"
        super().__init__(msg)
        self.condition = condition
        self.source = source


# =============================================================================
# Data Errors
# =============================================================================

class DataError(NotationError):
    """Base class for game data errors."""
    pass


class KnowledgeBaseError(DataError):
    """Raised when the knowledge base cannot be loaded."""

    def __init__(self, source: str, message: Optional[str] = None):
        msg = message or "Knowledge base could not be loaded"
        super().__init__(msg, {"source": source})
        self.source = source


class EntityNotFoundError(DataError):
    """Raised when a game entity (species, move, etc.) is not found."""

    def __init__(self, entity_type: str, entity_id: str, gen: Optional[int] = None, message: Optional[str] = None):
        msg = message or f"{entity_type} '{entity_id}' not found"
        details = {"gen": gen} if gen is not None else None
        super().__init__(msg, details)
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.gen = gen


# =============================================================================
# Parse Errors
# =============================================================================

class ParseError(NotationError):
    """
    Single error type raised by ``parse``.

    Wraps the underlying failure (available as ``__cause__`` and ``cause``)
    together with the partial diagnostic context collected so far, so
    failures are debuggable without re-running the parse.
    """

    def __init__(self, cause: Exception, context: "ParseContext"):
        super().__init__(str(cause))
        self.cause = cause
        self.context = context
