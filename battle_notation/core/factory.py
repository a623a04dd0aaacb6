"""
State constructor layer.

Assembles immutable ``Pokemon``/``Side``/``Move``/``Field`` records from
already-validated primitive fields, applying the game-rule defaults:

- EVs default to 252 before generation 3 (stat experience) and 0 after.
- IVs default to 31, or to the typed Hidden Power spread for the attacker
  when hyper training is unavailable (gen <= 6 or level < 100).
- Before generation 3 IVs are stored as ``dv * 2 + 1`` and the HP DV is
  always derived from the other DVs.
- Max HP comes from base stats, HP from an absolute value or percentage.
- Move names accept sugar: ``Hidden Power Fire``, ``Magnitude 7``,
  ``Tackle 60`` (base power override) and ``Z-Earthquake``.

Usage:
    from battle_notation.core.factory import create_pokemon, create_move

    attacker = create_pokemon(gen, "Garchomp", evs={"atk": 252}, nature="Adamant")
    move = create_move(gen, "Earthquake", attacker)
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from ..config import config
from ..constants import BOOST_IDS, LEGACY_EV, MAX_BOOST, MAX_DV, MAX_IV, STAT_ORDER
from ..utils import round_half_up, to_id
from .conditions import CONDITIONS
from .dataclasses import ConditionTable, Field, Move, Pokemon, Side
from .enums import ConditionKind, MoveCategory, Switching
from .exceptions import EntityNotFoundError, InvalidValueError
from .knowledge import PHYSICAL_TYPES
from .mechanics import get_hp_dv, to_dv, to_iv
from .models import MoveData
from .protocols import GameData

logger = logging.getLogger(__name__)

MAGNITUDE_POWER = {4: 10, 5: 30, 6: 50, 7: 70, 8: 90, 9: 110, 10: 150}

# Trailing number on a move id: magnitude or base power override
MOVE_SUGAR = re.compile(r"^(.*?[a-z])(\d+)$")

HIDDEN_POWER = "hiddenpower"


# =============================================================================
# Moves
# =============================================================================

def _resolve_move(gen: GameData, id: str) -> Optional[Tuple[MoveData, Dict[str, Any]]]:
    move = gen.get_move(id)
    if move is not None:
        return move, {}

    if id.startswith(HIDDEN_POWER) and len(id) > len(HIDDEN_POWER):
        move = gen.get_move(HIDDEN_POWER)
        type_ = gen.get_type(id[len(HIDDEN_POWER):])
        if move is not None and type_ is not None and type_.hp_ivs is not None:
            return move, {"type": type_.name, "name": f"Hidden Power {type_.name}"}

    match = MOVE_SUGAR.match(id)
    if match:
        move = gen.get_move(match.group(1))
        if move is not None:
            n = int(match.group(2))
            if move.id == "magnitude":
                if n not in MAGNITUDE_POWER:
                    raise InvalidValueError(f"Invalid Magnitude '{n}'")
                return move, {"magnitude": n, "base_power": MAGNITUDE_POWER[n]}
            return move, {"base_power": n}

    if id.startswith("z") and len(id) > 1:
        resolved = _resolve_move(gen, id[1:])
        if resolved is not None:
            move, sugar = resolved
            return move, {**sugar, "use_z": True}

    return None


def resolve_move(gen: GameData, name: str) -> Tuple[MoveData, Dict[str, Any]]:
    """
    Resolves a move name, including sugar forms, to its data.

    Args:
        gen: Game data for the active generation.
        name: Move name or id (``"Hidden Power Fire"``, ``"Magnitude 7"``).

    Returns:
        Tuple[MoveData, Dict[str, Any]]: The move and any sugar-derived
        overrides (``type``, ``name``, ``magnitude``, ``base_power``, ``use_z``).

    Raises:
        EntityNotFoundError: If no form of the name resolves.
    """
    resolved = _resolve_move(gen, to_id(name))
    if resolved is None:
        raise EntityNotFoundError("Move", name, gen.num)
    return resolved


def is_typed_hidden_power(gen: GameData, name: Optional[str]) -> bool:
    id = to_id(name)
    if not id.startswith(HIDDEN_POWER) or len(id) == len(HIDDEN_POWER):
        return False
    type_ = gen.get_type(id[len(HIDDEN_POWER):])
    return type_ is not None and type_.hp_ivs is not None


def create_move(
    gen: GameData,
    name: str,
    attacker: Optional[Pokemon] = None,
    *,
    use_z: Optional[bool] = None,
    crit: Optional[bool] = None,
    spread: Optional[bool] = None,
    hits: Optional[int] = None,
    consecutive: Optional[int] = None,
) -> Move:
    data, sugar = resolve_move(gen, name)

    type_ = sugar.get("type")
    if data.id == HIDDEN_POWER and type_ is None and attacker is not None:
        implied = gen.hidden_power(attacker.ivs)
        if implied is not None:
            type_ = implied.name
    type_ = type_ or data.type

    category = data.category
    if gen.num <= 3 and category != MoveCategory.STATUS:
        category = MoveCategory.PHYSICAL if type_ in PHYSICAL_TYPES else MoveCategory.SPECIAL

    if hits is not None:
        if hits < 1:
            raise InvalidValueError(f"Invalid number of hits '{hits}'")
        if hits == 1 and data.multihit is None:
            hits = None

    return Move(
        id=data.id,
        name=sugar.get("name", data.name),
        type=type_,
        category=category,
        base_power=sugar.get("base_power", data.base_power),
        target=data.target,
        multihit=data.multihit,
        override_offensive_stat=data.override_offensive_stat,
        override_defensive_stat=data.override_defensive_stat,
        crit=bool(crit),
        spread=bool(spread),
        use_z=bool(use_z or sugar.get("use_z")),
        hits=hits,
        consecutive=consecutive or None,
        magnitude=sugar.get("magnitude"),
    )


# =============================================================================
# Pokemon
# =============================================================================

def expected_ivs(gen: GameData, level: int, move: Optional[str] = None) -> Dict[str, int]:
    """
    Default IVs for a Pokémon using ``move``.

    A typed Hidden Power fixes the IVs unless hyper training is possible
    (generation 7+ at level 100).
    """
    ivs = gen.stats.fill({}, MAX_IV)
    if not is_typed_hidden_power(gen, move) or (gen.num > 6 and level == 100):
        return ivs

    type_ = gen.get_type(to_id(move)[len(HIDDEN_POWER):])
    if gen.num <= 2:
        hp_dvs = type_.hp_dvs or {}
        for stat in STAT_ORDER:
            ivs[stat] = to_iv(hp_dvs[stat]) if stat in hp_dvs else MAX_IV
        ivs["hp"] = to_iv(get_hp_dv(ivs))
    else:
        ivs.update(type_.hp_ivs)
    return ivs


def _check_range(kind: str, values: Mapping[str, int], low: int, high: int) -> None:
    for stat, value in values.items():
        if not low <= value <= high:
            raise InvalidValueError(f"{kind} for {stat} must be between {low} and {high}, received '{value}'")


def _resolve_ivs(
    gen: GameData,
    level: int,
    ivs: Optional[Mapping[str, int]],
    dvs: Optional[Mapping[str, int]],
    move: Optional[str],
) -> Dict[str, int]:
    given = {k: v for k, v in (ivs or {}).items() if k in STAT_ORDER}
    _check_range("IVs", given, 0, MAX_IV)

    if dvs:
        if gen.num >= 3:
            raise InvalidValueError("DVs are only valid before generation 3")
        dvs = {k: v for k, v in dvs.items() if k in STAT_ORDER}
        _check_range("DVs", dvs, 0, MAX_DV)
        for stat, dv in dvs.items():
            if stat in given and to_dv(given[stat]) != dv:
                raise InvalidValueError(f"IV {given[stat]} and DV {dv} disagree for {stat}")
            given[stat] = to_iv(dv)

    result = {**expected_ivs(gen, level, move), **given}
    if gen.num <= 2:
        result = {stat: to_iv(to_dv(iv)) for stat, iv in result.items()}
        result["spd"] = result["spa"]
        derived = to_iv(get_hp_dv(result))
        if "hp" in given and result["hp"] != derived:
            logger.warning(f"HP DV {to_dv(given['hp'])} replaced by derived value {to_dv(derived)}")
        result["hp"] = derived
    return result


def _resolve_boosts(boosts: Optional[Mapping[str, Optional[int]]]) -> Dict[str, int]:
    result = {}
    for boost, value in (boosts or {}).items():
        if not value:
            continue
        if boost not in BOOST_IDS:
            raise InvalidValueError(f"Unknown boost '{boost}'")
        if not -MAX_BOOST <= value <= MAX_BOOST:
            raise InvalidValueError(f"Boosts for {boost} must be between -6 and 6, received '{value}'")
        result[boost] = value
    return result


def _resolve_status(gen: GameData, status: Optional[str]) -> Optional[str]:
    if not status:
        return None
    condition = CONDITIONS.get(gen, status)
    if condition is None or condition.kind != ConditionKind.STATUS:
        raise EntityNotFoundError("Status", status, gen.num)
    return condition.id


def create_pokemon(
    gen: GameData,
    name: str,
    *,
    level: Optional[int] = None,
    gender: Optional[str] = None,
    ability: Optional[str] = None,
    item: Optional[str] = None,
    nature: Optional[str] = None,
    evs: Optional[Mapping[str, int]] = None,
    ivs: Optional[Mapping[str, int]] = None,
    dvs: Optional[Mapping[str, int]] = None,
    boosts: Optional[Mapping[str, Optional[int]]] = None,
    hp: Optional[int] = None,
    hp_percent: Optional[float] = None,
    maxhp: Optional[int] = None,
    status: Optional[str] = None,
    toxic_turns: Optional[int] = None,
    volatiles: Optional[ConditionTable] = None,
    added_type: Optional[str] = None,
    weightkg: Optional[float] = None,
    happiness: Optional[int] = None,
    move_last_turn_result: Optional[bool] = None,
    hurt_this_turn: Optional[bool] = None,
    switching: Optional[str] = None,
    move: Optional[str] = None,
) -> Pokemon:
    """
    Builds a Pokémon record, filling every unspecified field with its default.

    Args:
        gen: Game data for the active generation.
        name: Species name or id.
        move: The move this Pokémon is using (attacker only); a typed
            Hidden Power changes the default IVs.

    Raises:
        EntityNotFoundError: For unknown species, ability, item, nature, type or status.
        InvalidValueError: For out-of-range values or fields invalid in ``gen``.
    """
    species = gen.get_species(name)
    if species is None:
        raise EntityNotFoundError("Species", name, gen.num)

    level = config.default_level if level is None else level
    if not 1 <= level <= 100:
        raise InvalidValueError(f"Level must be between 1 and 100, received '{level}'")

    default_ev = LEGACY_EV if gen.num <= 2 else 0
    given_evs = {k: v for k, v in (evs or {}).items() if k in STAT_ORDER and v is not None}
    _check_range("EVs", given_evs, 0, 255)
    resolved_evs = gen.stats.fill(given_evs, default_ev)
    if gen.num == 1:
        resolved_evs["spd"] = resolved_evs["spa"]

    resolved_ivs = _resolve_ivs(gen, level, ivs, dvs, move)

    nature_name = None
    if nature:
        if gen.num <= 2:
            raise InvalidValueError(f"Natures do not exist in generation {gen.num}")
        n = gen.get_nature(nature)
        if n is None:
            raise EntityNotFoundError("Nature", nature, gen.num)
        nature_name = n.name

    ability_id = None
    if ability:
        a = gen.get_ability(ability)
        if a is None:
            raise EntityNotFoundError("Ability", ability, gen.num)
        ability_id = a.id
    elif species.abilities:
        ability_id = to_id(species.abilities[0])

    item_id = None
    if item:
        i = gen.get_item(item)
        if i is None:
            raise EntityNotFoundError("Item", item, gen.num)
        item_id = i.id

    type_name = None
    if added_type:
        t = gen.get_type(added_type)
        if t is None:
            raise EntityNotFoundError("Type", added_type, gen.num)
        type_name = t.name

    if gender is not None and gender not in ("M", "F", "N"):
        raise InvalidValueError(f"Invalid gender: '{gender}'")
    if switching is not None:
        switching = Switching(switching).value
    if happiness is not None and not 0 <= happiness <= 255:
        raise InvalidValueError(f"Happiness must be between 0 and 255, received '{happiness}'")

    computed_maxhp = gen.stats.calc(
        "hp", species.base_stats["hp"], resolved_ivs["hp"], resolved_evs["hp"], level
    )
    if maxhp is not None and maxhp < 1:
        raise InvalidValueError(f"Max HP must be positive, received '{maxhp}'")
    maxhp = computed_maxhp if maxhp is None else maxhp

    if hp is not None and hp_percent is not None:
        from_percent = round_half_up(hp_percent * maxhp / 100)
        if from_percent != hp:
            raise InvalidValueError(f"HP {hp} does not match {hp_percent}% of {maxhp}")
    if hp is None:
        if hp_percent is not None:
            if not 0 <= hp_percent <= 100:
                raise InvalidValueError(f"HP percent must be between 0 and 100, received '{hp_percent}'")
            hp = round_half_up(hp_percent * maxhp / 100)
        else:
            hp = maxhp
    if not 0 <= hp <= maxhp:
        raise InvalidValueError(f"HP must be between 0 and {maxhp}, received '{hp}'")

    status_id = _resolve_status(gen, status)
    if toxic_turns is not None and status_id != "tox":
        logger.debug(f"Ignoring toxic counter {toxic_turns} without the toxic status")
        toxic_turns = None

    weighthg = species.weighthg
    if weightkg is not None:
        if weightkg <= 0:
            raise InvalidValueError(f"Weight must be positive, received '{weightkg}'")
        weighthg = round_half_up(weightkg * 10)

    return Pokemon(
        species=species,
        level=level,
        gender=gender if gender is not None else species.gender,
        ability=ability_id,
        item=item_id,
        nature=nature_name,
        evs=resolved_evs,
        ivs=resolved_ivs,
        boosts=_resolve_boosts(boosts),
        hp=hp,
        maxhp=maxhp,
        status=status_id,
        toxic_turns=toxic_turns or None,
        volatiles=dict(volatiles or {}),
        added_type=type_name,
        weighthg=weighthg,
        happiness=happiness,
        move_last_turn_result=move_last_turn_result,
        hurt_this_turn=hurt_this_turn,
        switching=switching,
    )


# =============================================================================
# Sides & Field
# =============================================================================

def create_side(
    gen: GameData,
    pokemon: Pokemon,
    *,
    side_conditions: Optional[ConditionTable] = None,
    abilities: Optional[Iterable[str]] = None,
    atks: Optional[Iterable[int]] = None,
) -> Side:
    ally_abilities = []
    for ability in abilities or ():
        a = gen.get_ability(ability)
        if a is None:
            raise EntityNotFoundError("Ability", ability, gen.num)
        ally_abilities.append(a.id)
    return Side(
        pokemon=pokemon,
        side_conditions=dict(side_conditions or {}),
        abilities=tuple(ally_abilities),
        atks=tuple(atks or ()),
    )


def _condition_name(gen: GameData, id: Optional[str], kind: ConditionKind) -> Optional[str]:
    if not id:
        return None
    condition = CONDITIONS.get(gen, id)
    if condition is None or condition.kind != kind:
        raise EntityNotFoundError(kind.value, id, gen.num)
    return condition.name


def create_field(
    gen: GameData,
    *,
    weather: Optional[str] = None,
    terrain: Optional[str] = None,
    pseudo_weather: Optional[ConditionTable] = None,
) -> Field:
    return Field(
        weather=_condition_name(gen, weather, ConditionKind.WEATHER),
        terrain=_condition_name(gen, terrain, ConditionKind.TERRAIN),
        pseudo_weather=dict(pseudo_weather or {}),
    )
