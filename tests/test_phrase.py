import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from battle_notation.core.knowledge import get_kb
from battle_notation.notation.phrase import TokenType, lex, parse_phrase, split_name

GEN = get_kb().get(8)


def test_lex():
    tokens = lex("252 HP / 4 Def Skarmory @ Leftovers [Brave Bird] vs. Garchomp")
    assert [t.type for t in tokens] == [
        TokenType.WORD, TokenType.WORD, TokenType.SLASH, TokenType.WORD, TokenType.WORD,
        TokenType.WORD, TokenType.AT, TokenType.WORD, TokenType.MOVE, TokenType.VS, TokenType.WORD,
    ]
    assert tokens[8].text == "Brave Bird"


def test_full_phrase():
    phrase = parse_phrase(
        GEN, "+1 252+ Atk Adamant Garchomp @ Life Orb [Earthquake] vs. 252 HP / 252+ Def Bold Skarmory"
    )
    assert phrase is not None
    p1, p2 = phrase.p1, phrase.p2
    assert (p1.boosts, p1.evs, p1.plus, p1.nature) == (1, {"atk": 252}, "atk", "Adamant")
    assert (p1.species, p1.ability, p1.item) == ("garchomp", None, "lifeorb")
    assert phrase.move.id == "earthquake"
    assert (p2.evs, p2.plus, p2.nature, p2.species) == ({"hp": 252, "def": 252}, "def", "Bold", "skarmory")


def test_minimal_phrase():
    phrase = parse_phrase(GEN, "Garchomp [Earthquake] vs. Skarmory")
    assert phrase.p1.species == "garchomp"
    assert phrase.p1.boosts is None
    assert phrase.p1.evs == {}
    assert phrase.p2.item is None


def test_level_and_hp():
    phrase = parse_phrase(GEN, "-2 Lvl 50 4 SpD 33.5% Skarmory [Earthquake] vs. Lvl50 Garchomp")
    assert phrase.p1.boosts == -2
    assert phrase.p1.level == 50
    assert phrase.p1.evs == {"spd": 4}
    assert phrase.p1.hp == 33.5
    assert phrase.p2.level == 50


def test_ev_terms_in_one_word():
    phrase = parse_phrase(GEN, "252+SpA/4Spe Heatran [Flamethrower] vs. 0- SpD Blissey")
    assert phrase.p1.evs == {"spa": 252, "spe": 4}
    assert phrase.p1.plus == "spa"
    assert phrase.p2.minus == "spd"


def test_ability_and_species():
    phrase = parse_phrase(GEN, "Jolly Rough Skin Garchomp [Earthquake] vs. Mr. Mime")
    assert phrase.p1.nature == "Jolly"
    assert phrase.p1.ability == "roughskin"
    assert phrase.p2.species == "mrmime"


def test_metronome_sugar():
    phrase = parse_phrase(GEN, "Garchomp @ Metronome:3 [Earthquake] vs. Skarmory")
    assert phrase.p1.item == "metronome"
    assert phrase.move.consecutive == 3


def test_move_sugar_is_kept_in_id():
    phrase = parse_phrase(GEN, "Garchomp [Hidden Power Fire] vs. Skarmory")
    assert phrase.move.id == "hiddenpowerfire"


def test_mismatches():
    assert parse_phrase(GEN, "Garchomp Earthquake vs. Skarmory") is None
    assert parse_phrase(GEN, "Garchomp [Earthquake] Skarmory") is None
    assert parse_phrase(GEN, "252 Atk / Garchomp [Earthquake] vs. Skarmory") is None
    assert parse_phrase(GEN, "Garchomp [Earthquake] vs. Skarmory [Tackle]") is None


def test_split_name():
    assert split_name(GEN, "Sand Veil Garchomp") == ("garchomp", "sandveil", None)
    assert split_name(GEN, "Adamant Garchomp") == ("garchomp", None, "Adamant")
    assert split_name(GEN, "Type: Null") == ("typenull", None, None)
    assert split_name(GEN, "Missingno") == ("missingno", None, None)
