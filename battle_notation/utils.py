"""
Utility functions shared across the notation pipeline.

Provides id normalization (the canonical lowercase alphanumeric form used
for every lookup), display-name squashing and number formatting helpers.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

_NON_ID = re.compile(r"[^a-z0-9]+")
_NON_WORD = re.compile(r"\W+", re.ASCII)


def to_id(value: Any) -> str:
    """
    Normalizes a name into its lookup id.

    Args:
        value: Any object; ``None`` maps to the empty id.

    Returns:
        str: Lowercase ASCII letters and digits only (``"Life Orb"`` -> ``"lifeorb"``).
    """
    if value is None:
        return ""
    if hasattr(value, "id") and isinstance(getattr(value, "id"), str):
        return value.id
    return _NON_ID.sub("", str(value).lower())


def display(name: str) -> str:
    """Squashes a display name into a single flag-safe word (``"Light Screen"`` -> ``"LightScreen"``)."""
    return _NON_WORD.sub("", name)


def round_half_up(value: float) -> int:
    """Rounds .5 away from zero for positive values, matching the calculator's rounding."""
    return int(math.floor(value + 0.5))


def format_number(value: float) -> str:
    """Formats a number without a trailing ``.0`` (``50.0`` -> ``"50"``, ``33.3`` -> ``"33.3"``)."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parses a leading integer, returning None when there is none."""
    if value is None:
        return None
    match = re.match(r"\s*([-+]?\d+)", value)
    return int(match.group(1)) if match else None


def parse_float(value: Optional[str]) -> Optional[float]:
    """Parses a leading decimal number, returning None when there is none."""
    if value is None:
        return None
    match = re.match(r"\s*([-+]?(?:\d+\.?\d*|\.\d+))", value)
    return float(match.group(1)) if match else None
