import sys
import os

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from battle_notation import parse, try_parse
from battle_notation.core.enums import GameType, MoveCategory, Scope
from battle_notation.core.exceptions import (
    ConditionKindError,
    ConflictError,
    InvalidValueError,
    MissingValueError,
    ParseError,
    PhraseMismatchError,
)
from battle_notation.core.knowledge import get_kb
from battle_notation.notation.encoder import get_stats

EXAMPLE = "+1 252+ Atk Adamant Garchomp @ Life Orb [Earthquake] vs. 252 HP / 252+ Def Bold Skarmory"


def test_full_example():
    state = parse(EXAMPLE)
    assert state.gen.num == 8
    assert state.game_type == GameType.SINGLES

    p1, p2 = state.p1.pokemon, state.p2.pokemon
    assert p1.name == "Garchomp"
    assert p1.boosts == {"atk": 1}
    assert p1.evs["atk"] == 252
    assert p1.nature == "Adamant"
    assert p1.item == "lifeorb"

    assert p2.name == "Skarmory"
    assert p2.evs["hp"] == 252 and p2.evs["def"] == 252
    assert p2.nature == "Bold"
    assert p2.boosts == {}

    assert state.move.name == "Earthquake"
    assert state.move.category == MoveCategory.PHYSICAL
    stats, normal = get_stats(state.gen, p1, p2, state.move)
    assert stats == {Scope.P1: "atk", Scope.P2: "def"}
    assert normal


def test_gen1_defaults():
    state = parse("[Gen 1] 100% Alakazam [Psychic] vs. Chansey")
    assert state.gen.num == 1
    p1, p2 = state.p1.pokemon, state.p2.pokemon
    for stat in ("hp", "atk", "def", "spa", "spd", "spe"):
        assert p1.evs[stat] == 252
        assert p2.evs[stat] == 252
    assert p1.hp == p1.maxhp
    assert p1.ability is None and p2.ability is None
    assert p1.nature is None
    assert state.move.category == MoveCategory.SPECIAL
    stats, _ = get_stats(state.gen, p1, p2, state.move)
    assert stats == {Scope.P1: "spa", Scope.P2: "spd"}


def test_flags_only():
    state = parse("p1Species:Garchomp Move:Earthquake p2Species:Skarmory p2Level:50")
    assert state.p1.pokemon.name == "Garchomp"
    assert state.p2.pokemon.level == 50
    assert state.move.id == "earthquake"


def test_url_safe_input():
    state = parse("Garchomp_(Earthquake)_vs._Skarmory")
    assert state.p1.pokemon.name == "Garchomp"
    assert state.move.name == "Earthquake"


def test_conditions_and_status():
    state = parse("Garchomp [Earthquake] vs. 50% Skarmory Toxic:3 +Reflect Spikes:2 +Sun")
    p2 = state.p2.pokemon
    assert p2.maxhp == 271
    assert p2.hp == 136
    assert p2.status == "tox"
    assert p2.toxic_turns == 3
    assert state.p2.side_conditions == {"reflect": None, "spikes": 2}
    assert state.field.weather == "Sun"


def test_conflicting_level():
    text = "Lvl 50 Garchomp [Earthquake] vs. Skarmory p1Level:60"
    assert parse(text).p1.pokemon.level == 50
    with pytest.raises(ParseError) as info:
        parse(text, strict=True)
    assert isinstance(info.value.cause, ConflictError)


def test_conflicting_evs():
    text = "252 Atk Garchomp [Earthquake] AtkEVs=100 vs. Skarmory"
    assert parse(text).p1.pokemon.evs["atk"] == 252
    with pytest.raises(ParseError) as info:
        parse(text, strict=True)
    assert isinstance(info.value.cause, ConflictError)
    assert "252" in str(info.value) and "100" in str(info.value)


def test_phrase_mismatch():
    result = try_parse("Garchomp Earthquake vs. Skarmory", strict=True)
    assert not result.ok
    assert isinstance(result.error.cause, PhraseMismatchError)
    assert result.error.context.phrase_input == "Garchomp Earthquake vs. Skarmory"
    assert result.error.context.phrase_output is None

    result = try_parse("Garchomp Earthquake vs. Skarmory")
    assert isinstance(result.error.cause, MissingValueError)


def test_try_parse_context():
    result = try_parse("[Gen 4] [Earthquake] vs. Skarmory Level:50")
    assert not result.ok
    assert result.state is None
    context = result.error.context.to_dict()
    assert context["gen"] == 4
    assert context["raw_flags"] == ["Level:50"]
    assert context["flags"]["p2"]["level"] == "50"


def test_condition_kind_is_fatal():
    for strict in (False, True):
        result = try_parse("Garchomp [Earthquake] vs. Skarmory Weather:Reflect", strict=strict)
        assert isinstance(result.error.cause, ConditionKindError)


def test_metronome_sugar():
    state = parse("Garchomp @ Metronome:3 [Earthquake] vs. Skarmory")
    assert state.p1.pokemon.item == "metronome"
    assert state.move.consecutive == 3


def test_game_type():
    assert parse("[Gen 7 Doubles] Garchomp [Earthquake] vs. Skarmory").game_type == GameType.DOUBLES
    assert parse("Garchomp [Earthquake] vs. Skarmory GameType:Doubles").game_type == GameType.DOUBLES

    text = "[Gen 2] Snorlax [Body Slam] vs. Skarmory GameType:Doubles"
    assert parse(text).game_type == GameType.SINGLES
    with pytest.raises(ParseError) as info:
        parse(text, strict=True)
    assert isinstance(info.value.cause, InvalidValueError)


def test_special_must_match_before_gen3():
    state = parse("[Gen 1] Alakazam [Psychic] vs. Chansey p2SpcEVs:100")
    assert state.p2.pokemon.evs["spa"] == 100
    assert state.p2.pokemon.evs["spd"] == 100

    result = try_parse("[Gen 1] Alakazam [Psychic] vs. Chansey p2SpAEVs:100 p2SpDEVs:200")
    assert isinstance(result.error.cause, InvalidValueError)


def test_gen2_has_no_single_special():
    state = parse("[Gen 2] Snorlax [Body Slam] vs. Skarmory p2SpAEVs:100 p2SpcEVs:200")
    assert state.p2.pokemon.evs["spa"] == 100
    assert state.p2.pokemon.evs["spd"] == 100

    state = parse("[Gen 2] Snorlax [Body Slam] vs. Skarmory p2SpcEVs:100")
    assert state.p2.pokemon.evs["spa"] == 252
    assert state.p2.pokemon.evs["spd"] == 252


def test_typed_hidden_power_ivs():
    state = parse("[Gen 4] Heatran [Hidden Power Fire] vs. Blissey")
    ivs = state.p1.pokemon.ivs
    assert (ivs["atk"], ivs["spa"], ivs["spe"]) == (30, 30, 30)
    assert (ivs["hp"], ivs["def"], ivs["spd"]) == (31, 31, 31)
    assert state.move.type == "Fire"
    assert state.move.name == "Hidden Power Fire"


def test_gender_requires_rivalry():
    state = parse("Garchomp [Earthquake] vs. Skarmory Gender:F")
    assert state.p2.pokemon.gender is None

    state = parse("Rivalry Nidoking [Earthquake] vs. Skarmory Gender:F")
    assert state.p2.pokemon.gender == "F"


def test_status_move_boosts_are_ambiguous():
    text = "+1 Garchomp [Swords Dance] vs. Skarmory"
    assert parse(text).p1.pokemon.boosts == {}
    with pytest.raises(ParseError) as info:
        parse(text, strict=True)
    assert isinstance(info.value.cause, InvalidValueError)


def test_allies():
    state = parse("Garchomp [Earthquake] +Battery Allies:150 vs. Skarmory")
    assert state.p1.abilities == ("battery",)
    assert state.p1.atks == (150,)


def test_bound_generation():
    gen = get_kb().get(4)
    assert parse("Garchomp [Earthquake] vs. Skarmory", gen).gen.num == 4
