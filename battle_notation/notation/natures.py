"""
Nature inference from EV sign annotations.

``252+ Atk`` says the nature boosts Attack but not which stat it lowers.
The missing half is picked among the stats without explicit EVs, since an
explicitly specified stat is assumed to be deliberate.

Usage:
    from battle_notation.notation.natures import infer_nature

    infer_nature("atk", None, {"atk"})          # 'Adamant'
    infer_nature("def", None, {"hp", "def"})    # 'Impish'
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..constants import COMPLEMENT_PRIORITY, NATURE_ORDER, NATURE_STATS
from ..core.exceptions import InvalidValueError


def _rank(stat: str) -> int:
    if stat == "hp":
        raise InvalidValueError("Natures cannot modify HP")
    if stat not in NATURE_STATS:
        raise InvalidValueError(f"Unknown nature stat '{stat}'")
    return NATURE_STATS.index(stat) + 1


def nature_from_plus_minus(plus: str, minus: str) -> str:
    """
    Looks up the nature that raises ``plus`` and lowers ``minus``.

    Raises:
        InvalidValueError: If either stat is HP or not a stat at all.
    """
    return NATURE_ORDER[(_rank(plus) - 1) * 5 + (_rank(minus) - 1)]


def _complement(stat: str, options: List[str]) -> str:
    if len(options) == 1:
        return options[0]
    return next(s for s in COMPLEMENT_PRIORITY[stat] if s in options)


def infer_nature(
    plus: Optional[str],
    minus: Optional[str],
    specified: Optional[Iterable[str]] = None,
) -> Optional[str]:
    """
    Infers a nature from an optional raised and an optional lowered stat.

    Args:
        plus: Stat the nature raises, if known.
        minus: Stat the nature lowers, if known.
        specified: Stats that already carry an explicit EV value.

    Returns:
        Optional[str]: The nature name, or None if nothing can be inferred.

    Raises:
        InvalidValueError: If HP is requested as either half.
    """
    if plus == "hp" or minus == "hp":
        raise InvalidValueError("Natures cannot modify HP")
    if plus and minus:
        return nature_from_plus_minus(plus, minus)
    if not (plus or minus):
        return None

    specified = set(specified or ())
    unspecified = [stat for stat in NATURE_STATS if stat not in specified]
    if not unspecified:
        return None

    if plus:
        return nature_from_plus_minus(plus, _complement(plus, unspecified))
    return nature_from_plus_minus(_complement(minus, unspecified), minus)
