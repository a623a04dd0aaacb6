import sys
import os
import json

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from battle_notation.config import config
from battle_notation.core.db import create_db_engine, init_db, make_session_factory, seed_from_dex
from battle_notation.core.enums import MoveCategory
from battle_notation.core.exceptions import (
    EntityNotFoundError,
    InvalidGenerationError,
    InvalidValueError,
    KnowledgeBaseError,
)
from battle_notation.core.factory import create_move, create_pokemon, expected_ivs
from battle_notation.core.knowledge import KnowledgeBase, get_kb

KB = get_kb()


def test_generations_are_shared():
    assert KB.get(8) is KB.get(8)
    assert 1 in KB and 8 in KB
    with pytest.raises(InvalidGenerationError):
        KB.get(9)


def test_base_stat_overrides():
    assert KB.get(1).get_species("Alakazam").base_stats["spd"] == 135
    for num in (2, 5):
        assert KB.get(num).get_species("Alakazam").base_stats["spd"] == 85
    assert KB.get(6).get_species("Alakazam").base_stats["spd"] == 95


def test_type_overrides():
    assert KB.get(5).get_species("Mr. Mime").types == ("Psychic",)
    assert KB.get(6).get_species("Mr. Mime").types == ("Psychic", "Fairy")


def test_move_overrides():
    assert KB.get(4).get_move("Tackle").base_power == 35
    assert KB.get(5).get_move("Tackle").base_power == 50
    assert KB.get(7).get_move("Tackle").base_power == 40


def test_entities_by_generation():
    assert KB.get(2).get_ability("Sand Veil") is None
    assert KB.get(1).get_item("Leftovers") is None
    assert KB.get(2).get_item("Leftovers") is not None
    assert KB.get(3).get_species("Garchomp") is None
    assert KB.get(4).get_species("Blissey").abilities == ("Natural Cure", "Serene Grace")


def test_type_based_category():
    assert KB.get(3).get_move("Hyper Beam").category == MoveCategory.PHYSICAL
    assert KB.get(3).get_move("Knock Off").category == MoveCategory.SPECIAL
    assert KB.get(4).get_move("Knock Off").category == MoveCategory.PHYSICAL


def test_create_pokemon_defaults():
    gen = KB.get(8)
    garchomp = create_pokemon(gen, "Garchomp")
    assert garchomp.maxhp == 357
    assert garchomp.hp == garchomp.maxhp
    assert garchomp.evs["atk"] == 0
    assert garchomp.ivs["spe"] == 31

    skarmory = create_pokemon(gen, "Skarmory", hp_percent=50)
    assert skarmory.maxhp == 271
    assert skarmory.hp == 136

    with pytest.raises(EntityNotFoundError):
        create_pokemon(gen, "Missingno")
    with pytest.raises(InvalidValueError):
        create_pokemon(gen, "Garchomp", evs={"atk": 300})


def test_expected_ivs():
    fire = "Hidden Power Fire"
    ivs = expected_ivs(KB.get(4), 100, fire)
    assert (ivs["atk"], ivs["spa"], ivs["spe"]) == (30, 30, 30)
    # Hyper training makes the spread unnecessary at level 100
    assert set(expected_ivs(KB.get(7), 100, fire).values()) == {31}
    assert expected_ivs(KB.get(7), 50, fire)["atk"] == 30

    ivs = expected_ivs(KB.get(2), 100, fire)
    assert (ivs["atk"], ivs["def"], ivs["hp"]) == (29, 25, 7)
    assert KB.get(2).hidden_power(ivs).name == "Fire"


def test_move_sugar():
    gen = KB.get(8)
    magnitude = create_move(gen, "Magnitude 7")
    assert magnitude.base_power == 70
    assert magnitude.magnitude == 7
    with pytest.raises(InvalidValueError):
        create_move(gen, "Magnitude 11")

    assert create_move(gen, "Tackle 60").base_power == 60
    assert create_move(gen, "Z-Earthquake").use_z
    assert create_move(gen, "Hidden Power Fire").type == "Fire"
    with pytest.raises(EntityNotFoundError):
        create_move(gen, "Splash")


def test_prebuilt_database(tmp_path):
    url = f"sqlite:///{tmp_path / 'kb.db'}"
    engine = create_db_engine(url)
    init_db(engine)
    with open(config.data.dex_path, encoding="utf-8") as f:
        dex = json.load(f)
    with make_session_factory(engine)() as session:
        counts = seed_from_dex(session, dex)
    engine.dispose()
    assert counts["species"] == len(dex["species"])

    kb = KnowledgeBase(url)
    assert kb.get(8).get_species("Garchomp").name == "Garchomp"
    assert kb.get(8).get_move("Earthquake").base_power == 100


def test_missing_dex(tmp_path):
    with pytest.raises(KnowledgeBaseError):
        KnowledgeBase(dex_path=str(tmp_path / "missing.json"))
