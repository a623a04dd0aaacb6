import sys
import os
import logging

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from battle_notation.core.enums import ConditionKind
from battle_notation.core.exceptions import (
    AmbiguousConditionError,
    ConditionKindError,
    ConditionScopeError,
    ConflictError,
    MalformedValueError,
    UnknownConditionError,
    UnknownFlagError,
    UnsupportedConditionError,
)
from battle_notation.core.knowledge import get_kb
from battle_notation.notation.flags import classify
from battle_notation.notation.router import route_flags
from battle_notation.notation.tokenizer import tokenize

GEN = get_kb().get(8)


def route(text, strict=False, gen=GEN):
    result = classify(tokenize(text))
    return route_flags(gen, result.flags, result.vs, strict)


def test_position_decides_side():
    table = route("Garchomp Level:50 [Earthquake] vs. Skarmory Level:60")
    assert table.p1.get("level") == "50"
    assert table.p2.get("level") == "60"


def test_explicit_prefixes():
    table = route("p2Level:50 attackerItem:LifeOrb DefenderNature:Bold")
    assert table.p2.get("level") == "50"
    assert table.p1.get("item") == "LifeOrb"
    assert table.p2.get("nature") == "Bold"


def test_unambiguous_flags():
    table = route("Garchomp [Earthquake] vs. Skarmory +Crit Hits:2 +Doubles")
    assert table.move.get("crit") == "1"
    assert table.move.get("hits") == "2"
    assert table.general.get("gametype") == "doubles"


def test_move_flag_is_renamed():
    table = route("Move:Earthquake")
    assert table.move.get("name") == "Earthquake"


def test_defaults_without_vs():
    table = route("+StealthRock +MoveLastTurn +Battery")
    assert table.p2.conditions[ConditionKind.SIDE_CONDITION] == {"stealthrock": "1"}
    assert table.p2.get("movelastturn") == "1"
    assert table.p1.get("battery") == "1"


def test_field_conditions():
    table = route("Garchomp [Earthquake] vs. Skarmory +Sun Terrain:Grassy +TrickRoom")
    assert table.field.get("weather") == "sun"
    assert table.field.get("terrain") == "grassy"
    assert table.field.conditions[ConditionKind.PSEUDO_WEATHER] == {"trickroom": "1"}


def test_compound_condition_values():
    table = route("p2:Spikes:3,Reflect,Burned p1:HelpingHand field:Gravity")
    assert table.p2.conditions[ConditionKind.SIDE_CONDITION] == {"spikes": "3", "reflect": "1"}
    assert table.p2.get("status") == "brn"
    assert table.p1.conditions[ConditionKind.VOLATILE_STATUS] == {"helpinghand": "1"}
    assert table.field.conditions[ConditionKind.PSEUDO_WEATHER] == {"gravity": "1"}


def test_toxic_counter():
    table = route("Garchomp [Earthquake] vs. Skarmory Toxic:3")
    assert table.p2.get("status") == "tox"
    assert table.p2.get("toxiccounter") == "3"

    table = route("Garchomp [Earthquake] vs. Skarmory +Toxic")
    assert table.p2.get("status") == "tox"
    assert table.p2.get("toxiccounter") is None


def test_toxic_counter_inside_list():
    table = route("p2:Toxic:3,Reflect")
    assert table.p2.get("status") == "tox"
    assert table.p2.get("toxiccounter") is None
    with pytest.raises(UnsupportedConditionError):
        route("p2:Toxic:3,Reflect", strict=True)


def test_malformed_toxic_counter(caplog):
    with caplog.at_level(logging.WARNING, logger="battle_notation.notation.router"):
        table = route("Garchomp [Earthquake] vs. Skarmory Toxic:abc")
    assert table.p2.get("status") == "tox"
    assert table.p2.get("toxiccounter") is None
    assert "malformed toxic counter" in caplog.text

    with pytest.raises(MalformedValueError):
        route("Garchomp [Earthquake] vs. Skarmory Toxic:abc", strict=True)


def test_conflicts_keep_first_value():
    table = route("Garchomp [Earthquake] vs. Skarmory Level:50 Level:60")
    assert table.p2.get("level") == "50"
    with pytest.raises(ConflictError):
        route("Garchomp [Earthquake] vs. Skarmory Level:50 Level:60", strict=True)


def test_repeated_equal_values_are_not_conflicts():
    table = route("Garchomp [Earthquake] vs. Skarmory Item:LifeOrb item:life-orb", strict=True)
    # Equal after normalization, so the later spelling is stored
    assert table.p2.get("item") == "life-orb"


def test_unknown_flags():
    table = route("Garchomp [Earthquake] vs. Skarmory Foo:Bar")
    assert table.p2.unrecognized == {"foo": "Bar"}
    with pytest.raises(UnknownConditionError):
        route("Garchomp [Earthquake] vs. Skarmory Foo:Bar", strict=True)
    with pytest.raises(UnknownFlagError):
        route("p1Foo:Bar", strict=True)


def test_condition_errors():
    with pytest.raises(ConditionKindError):
        route("Weather:Reflect")
    with pytest.raises(ConditionScopeError):
        route("p1:Sun")
    with pytest.raises(AmbiguousConditionError):
        route("+Dynamax")


def test_conditions_respect_generation():
    gen3 = get_kb().get(3)
    table = route("+StealthRock", gen=gen3)
    assert ConditionKind.SIDE_CONDITION not in table.p2.conditions
    assert table.general.unrecognized == {"stealthrock": "1"}
