import sys
import os

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from battle_notation.core.exceptions import MalformedValueError
from battle_notation.notation.tokenizer import tokenize, is_quoted, unquote
from battle_notation.notation.flags import classify, parse_flag, as_boolean


# =============================================================================
# Tokenizer
# =============================================================================

def test_tokenize_splits_on_whitespace():
    assert tokenize("  Garchomp   [Earthquake]\tvs. Skarmory ") == [
        "Garchomp", "[Earthquake]", "vs.", "Skarmory",
    ]
    assert tokenize("") == []
    # Move brackets are left to the phrase lexer
    assert tokenize("[Hidden Power Fire]") == ["[Hidden", "Power", "Fire]"]


def test_tokenize_keeps_quoted_spans():
    assert tokenize('Ability:"Flash Fire" Heatran') == ['Ability:"Flash Fire"', "Heatran"]
    assert tokenize('"Flash Fire" Heatran') == ['"Flash Fire"', "Heatran"]


def test_tokenize_unclosed_quote_is_literal():
    assert tokenize('a"b c') == ['a"b', "c"]


def test_unquote():
    assert is_quoted('"a b"')
    assert not is_quoted('"')
    assert unquote('"a b"') == "a b"
    assert unquote("ab") == "ab"


# =============================================================================
# Flags
# =============================================================================

def test_parse_flag_key_value():
    assert parse_flag("Level:50") == ("level", "50")
    assert parse_flag("--level=50") == ("level", "50")
    assert parse_flag('Ability:"Flash Fire"') == ("ability", "Flash Fire")


def test_parse_flag_implicit_booleans():
    assert parse_flag("+Crit") == ("crit", "1")
    assert parse_flag("--crit") == ("crit", "1")
    assert parse_flag("+NoMoveLastTurn") == ("movelastturn", "0")
    assert parse_flag("+IsCrit") == ("crit", "1")
    assert parse_flag("crit:yes") == ("crit", "1")
    assert parse_flag("nocrit:true") == ("crit", "0")


def test_parse_flag_pluralizes():
    assert parse_flag("SpeIV:0") == ("speivs", "0")
    assert parse_flag("AtkBoost:2") == ("atkboosts", "2")
    assert parse_flag("EVs:252/0/0/0/4/252") == ("evs", "252/0/0/0/4/252")


def test_parse_flag_rejects_phrase_vocabulary():
    assert parse_flag("Garchomp") is None
    assert parse_flag("+1") is None
    assert parse_flag("252+") is None
    assert parse_flag("Type:Null") is None
    assert parse_flag("Metronome:3") is None


def test_as_boolean():
    assert as_boolean("Yes") is True
    assert as_boolean("0") is False
    with pytest.raises(MalformedValueError):
        as_boolean("maybe")
    with pytest.raises(MalformedValueError):
        parse_flag("crit:maybe")


def test_classify():
    result = classify(tokenize('Garchomp [Earthquake] vs. Skarmory +Reflect gen:4 "Heavy Rain"'))
    assert result.vs
    assert result.gens == ["4"]
    assert result.fragments == ["Garchomp", "[Earthquake]", "vs.", "Skarmory", "Heavy Rain"]
    assert len(result.flags) == 1
    flag = result.flags[0]
    assert (flag.id, flag.value, flag.text, flag.after_vs) == ("reflect", "1", "+Reflect", True)
    assert result.phrase == "Garchomp [Earthquake] vs. Skarmory Heavy Rain"
