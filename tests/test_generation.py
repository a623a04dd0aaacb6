import sys
import os

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from battle_notation.core.enums import GameType
from battle_notation.core.exceptions import InvalidGenerationError
from battle_notation.core.knowledge import get_kb
from battle_notation.notation.generation import pin_generation, resolve_generation, validate_generation

KB = get_kb()


def test_markers_are_removed():
    gen, game_type, residual = resolve_generation(KB, None, "[Gen 4] Garchomp [Earthquake] vs. Skarmory", False)
    assert gen.num == 4
    assert game_type is None
    assert residual == "Garchomp [Earthquake] vs. Skarmory"


def test_marker_forms():
    for text, num, game_type in [
        ("[4] Garchomp", 4, None),
        ("[gen7 doubles] Garchomp", 7, GameType.DOUBLES),
        ("[3 Singles] Garchomp", 3, GameType.SINGLES),
        ("Garchomp [GEN 2]", 2, None),
    ]:
        gen, resolved, residual = resolve_generation(KB, None, text, False)
        assert (gen.num, resolved, residual) == (num, game_type, "Garchomp")


def test_defaults_to_newest_generation():
    gen, game_type, residual = resolve_generation(KB, None, "Garchomp [Earthquake] vs. Skarmory", False)
    assert gen.num == 8
    assert residual == "Garchomp [Earthquake] vs. Skarmory"


def test_bound_generation():
    gen4 = KB.get(4)
    gen, _, _ = resolve_generation(gen4, None, "Garchomp", False)
    assert gen is gen4

    gen, _, _ = resolve_generation(gen4, None, "[Gen 5] Garchomp", False)
    assert gen is gen4
    with pytest.raises(InvalidGenerationError):
        resolve_generation(gen4, None, "[Gen 5] Garchomp", True)


def test_conflicting_markers_keep_first():
    gen, _, _ = resolve_generation(KB, 4, "[Gen 5] Garchomp", False)
    assert gen.num == 4
    with pytest.raises(InvalidGenerationError):
        resolve_generation(KB, 4, "[Gen 5] Garchomp", True)


def test_validate_generation():
    assert validate_generation("3", None, True) == 3
    assert validate_generation("3", 3, True) == 3
    assert validate_generation("9", None, False) is None
    assert validate_generation("x", None, False) is None
    with pytest.raises(InvalidGenerationError):
        validate_generation("9", None, True)


def test_pin_generation():
    assert pin_generation(KB, [], False) is None
    assert pin_generation(KB, ["4", "4"], True) == 4
    assert pin_generation(KB, ["4", "5"], False) == 4
    assert pin_generation(KB.get(6), [], False) == 6
