import sys
import os

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from battle_notation import encode, parse
from battle_notation.core.enums import Scope
from battle_notation.core.factory import create_move, create_pokemon
from battle_notation.core.knowledge import get_kb
from battle_notation.notation.encoder import get_stats

GEN = get_kb().get(8)


def test_canonical_example():
    state = parse("+1 252+ Atk Adamant Garchomp @ Life Orb [Earthquake] vs. 252 HP / 252+ Def Bold Skarmory")
    # Bold cannot be inferred from +Def alone (Impish would be), so it is written out
    assert encode(state) == (
        "+1 252+ Atk Sand Veil Garchomp @ Life Orb [Earthquake] "
        "vs. 252 HP / 252 Def Nature:Bold Keen Eye Skarmory"
    )


def test_gen1_marker_and_defaults():
    state = parse("[Gen 1] 100% Alakazam [Psychic] vs. Chansey")
    assert encode(state) == "[Gen 1] Alakazam [Psychic] vs. Chansey"


def test_single_iv_shorthand():
    state = parse("Garchomp [Earthquake] vs. Skarmory SpeIV:0")
    text = encode(state)
    assert text == "0 Atk Sand Veil Garchomp [Earthquake] vs. 0 HP / 0 Def Keen Eye Skarmory SpeIV:0"
    assert "IVs:" not in text


def test_hidden_power_ivs_are_implied():
    text = encode(parse("[Gen 4] Heatran [Hidden Power Fire] vs. Blissey"))
    assert text.startswith("[Gen 4] ")
    assert "[Hidden Power Fire]" in text
    assert "IV" not in text

    text = encode(parse("[Gen 4] Heatran [Hidden Power Fire] vs. Blissey p1AtkIV:31"))
    assert "IVs:31/31/31/30/31/30" in text


def test_gen2_dvs():
    state = parse("[Gen 2] Snorlax [Body Slam] vs. Skarmory p1AtkDV:14")
    assert state.p1.pokemon.ivs["atk"] == 29
    assert state.p1.pokemon.ivs["hp"] == 15
    assert encode(state) == "[Gen 2] Snorlax DVs:7/14/15/15/15/15 [Body Slam] vs. Skarmory"


def test_hp_percent_and_absolute():
    assert "50.2%" in encode(parse("Garchomp [Earthquake] vs. 50% Skarmory"))
    assert "36.9%" in encode(parse("Garchomp [Earthquake] vs. Skarmory HP:100"))


def test_metronome_folds_consecutive():
    text = encode(parse("Garchomp @ Metronome:3 [Earthquake] vs. Skarmory"))
    assert "@ Metronome:3" in text
    assert "Consecutive:" not in text


def test_status_move_defender_hp():
    text = encode(parse("Garchomp [Swords Dance] vs. Skarmory"))
    assert text == "Sand Veil Garchomp [Swords Dance] vs. 0 HP Keen Eye Skarmory"


def test_z_move_sugar():
    state = parse("[Gen 7] Garchomp [Z-Earthquake] vs. Skarmory")
    assert state.move.use_z
    assert state.move.name == "Earthquake"
    text = encode(state)
    assert "[Z-Earthquake]" in text
    assert parse(text) == state


def test_url_form():
    state = parse("Garchomp [Earthquake] vs. Skarmory")
    assert encode(state, url=True) == "0_Atk_Sand_Veil_Garchomp_(Earthquake)_vs._0_HP_$_0_Def_Keen_Eye_Skarmory"


def test_get_stats():
    garchomp = create_pokemon(GEN, "Garchomp")
    skarmory = create_pokemon(GEN, "Skarmory")

    assert get_stats(GEN, garchomp, skarmory, create_move(GEN, "Swords Dance")) == (None, True)
    assert get_stats(GEN, garchomp, skarmory, create_move(GEN, "Body Press")) == (
        {Scope.P1: "def", Scope.P2: "def"}, False,
    )

    necrozma = create_pokemon(GEN, "Necrozma")
    assert get_stats(GEN, necrozma, skarmory, create_move(GEN, "Photon Geyser")) == (
        {Scope.P1: "spa", Scope.P2: "spd"}, False,
    )
    assert get_stats(GEN, garchomp, skarmory, create_move(GEN, "Psyshock")) == (
        {Scope.P1: "spa", Scope.P2: "def"}, True,
    )


@pytest.mark.parametrize("text", [
    "+1 252+ Atk Adamant Garchomp @ Life Orb [Earthquake] vs. 252 HP / 252+ Def Bold Skarmory",
    "[Gen 1] Alakazam [Psychic] vs. Chansey",
    "Garchomp [Earthquake] vs. 50% Skarmory Toxic:3 +Reflect Spikes:2 +Sun",
    "[Gen 4] Heatran [Hidden Power Fire] vs. Blissey",
    "Garchomp @ Metronome:3 [Earthquake] vs. Skarmory",
    "[Gen 7 Doubles] Lvl 50 Garchomp [Earthquake] +Spread vs. Skarmory +Crit",
    "Rivalry Nidoking [Earthquake] vs. Skarmory Gender:F",
    "Garchomp [Earthquake] +Battery Allies:150 vs. Skarmory",
    "+2 Corviknight [Body Press] vs. Skarmory",
    "Garchomp [Earthquake] vs. -1 Skarmory +Dynamax",
    "Garchomp [Magnitude 7] vs. Skarmory",
    "Garchomp [Earthquake] vs. Skarmory HP:100 +NoMoveLastTurn",
    "[Gen 2] Snorlax [Body Slam] vs. Skarmory p1AtkDV:14",
])
def test_round_trip(text):
    state = parse(text)
    encoded = encode(state)
    assert parse(encoded) == state
    assert encode(parse(encoded)) == encoded
