import sys
import os

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from battle_notation.constants import NATURE_ORDER, NATURE_STATS
from battle_notation.core.exceptions import InvalidValueError
from battle_notation.core.knowledge import get_kb
from battle_notation.notation.natures import infer_nature, nature_from_plus_minus

GEN = get_kb().get(8)


def test_nature_table():
    assert nature_from_plus_minus("atk", "spa") == "Adamant"
    assert nature_from_plus_minus("def", "atk") == "Bold"
    assert nature_from_plus_minus("spe", "atk") == "Timid"
    assert nature_from_plus_minus("spa", "spa") == "Bashful"


def test_nature_table_is_total():
    names = {nature_from_plus_minus(plus, minus) for plus in NATURE_STATS for minus in NATURE_STATS}
    assert names == set(NATURE_ORDER)
    for plus in NATURE_STATS:
        for minus in NATURE_STATS:
            nature = GEN.get_nature(nature_from_plus_minus(plus, minus))
            if plus != minus:
                assert (nature.plus, nature.minus) == (plus, minus)
            else:
                assert nature.plus is None


def test_infer_from_one_half():
    assert infer_nature("atk", None, {"atk"}) == "Adamant"
    assert infer_nature("spa", None, {"spa"}) == "Modest"
    assert infer_nature(None, "atk", {"atk"}) == "Modest"
    assert infer_nature("spe", None, {"spe"}) == "Naive"
    # SpD is specified, so Defense is lowered instead
    assert infer_nature("spe", None, {"spe", "spd", "spa"}) == "Hasty"
    assert infer_nature("def", None, {"hp", "def"}) == "Impish"
    assert infer_nature("atk", None, {"atk", "spa"}) == "Naughty"


def test_infer_always_changes_the_given_stat():
    for stat in NATURE_STATS:
        plus = GEN.get_nature(infer_nature(stat, None))
        minus = GEN.get_nature(infer_nature(None, stat))
        assert plus.plus == stat
        assert minus.minus == stat


def test_infer_nothing():
    assert infer_nature(None, None) is None
    assert infer_nature("atk", None, NATURE_STATS) is None


def test_infer_both_halves():
    assert infer_nature("spe", "spa", {"spe", "spa"}) == "Jolly"


def test_hp_is_invalid():
    with pytest.raises(InvalidValueError):
        infer_nature("hp", None)
    with pytest.raises(InvalidValueError):
        nature_from_plus_minus("atk", "hp")
