import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from battle_notation.transcoder import to_safe, from_safe


def test_to_safe_replaces_url_characters():
    assert to_safe("Garchomp [Earthquake] vs. Skarmory") == "Garchomp_(Earthquake)_vs._Skarmory"
    assert to_safe("252 HP / 4 Def") == "252_HP_$_4_Def"
    assert to_safe("@ Life Orb 50% HP:100") == "*_Life_Orb_50~_HP=100"


def test_from_safe_reverses_to_safe():
    samples = [
        "+1 252+ Atk Adamant Garchomp @ Life Orb [Earthquake] vs. 252 HP / 252+ Def Bold Skarmory",
        "[Gen 4] 50% Heatran [Hidden Power Fire] vs. Blissey Toxic:3 +StealthRock",
        "Garchomp @ Metronome:3 [Earthquake] vs. Skarmory",
    ]
    for text in samples:
        assert from_safe(to_safe(text)) == text


def test_from_safe_accepts_brackets_and_percent_encoding():
    assert from_safe("Garchomp_{Earthquake}_vs._Skarmory") == "Garchomp [Earthquake] vs. Skarmory"
    assert from_safe("Garchomp%20(Earthquake)") == "Garchomp [Earthquake]"


def test_from_safe_leaves_invalid_percent_encoding():
    # %FF is not valid UTF-8 on its own
    assert from_safe("50%FF") == "50%FF"
