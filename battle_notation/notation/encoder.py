"""
Canonical encoder.

Renders a ``State`` back into notation that parses to an equivalent state.
The output is deterministic: anything implied by defaults (level 100,
default EVs and IVs, full HP, an unambiguous ability) is left out.

Usage:
    from battle_notation.notation.encoder import encode

    encode(state)            # '+1 252+ Atk Garchomp @ Life Orb [Earthquake] vs. ...'
    encode(state, url=True)  # URL-safe form
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from ..constants import ALLY_ABILITIES, BOOST_IDS, LEGACY_EV, MAX_IV
from ..core.conditions import CONDITIONS
from ..core.dataclasses import ConditionTable, Move, Pokemon, State
from ..core.enums import GameType, MoveCategory, Scope
from ..core.factory import HIDDEN_POWER, expected_ivs, is_typed_hidden_power
from ..core.mechanics import compute_stats, to_dv, to_iv
from ..core.protocols import GameData
from ..transcoder import to_safe
from ..utils import display, format_number, round_half_up, to_id
from .natures import infer_nature

logger = logging.getLogger(__name__)

StatPair = Optional[Dict[Scope, str]]


def get_stats(gen: GameData, p1: Pokemon, p2: Pokemon, move: Move) -> Tuple[StatPair, bool]:
    """
    Derives the attacking and defending stat of ``move``.

    Returns:
        Tuple[StatPair, bool]: The stat each side uses (None for status
        moves) and whether the pair is the "normal" one, i.e. a single boost
        on it can be written in compact form.
    """
    if move.category == MoveCategory.STATUS:
        return None, True

    physical = {Scope.P1: "atk", Scope.P2: "def"}
    special = {Scope.P1: "spa", Scope.P2: "spd"}
    if move.name in ("Photon Geyser", "Light That Burns the Sky"):
        stats = compute_stats(gen, p1)
        return (physical if stats["atk"] > stats["spa"] else special), False
    if move.name == "Shell Side Arm":
        attacker, defender = compute_stats(gen, p1), compute_stats(gen, p2)
        ratio = attacker["atk"] / defender["def"] > attacker["spa"] / defender["spd"]
        return (physical if ratio else special), False
    return {Scope.P1: move.offensive_stat, Scope.P2: move.defensive_stat}, move.name != "Body Press"


def encode(state: State, url: bool = False) -> str:
    """
    Encodes a state as canonical notation.

    Args:
        state: Any state the builder can produce.
        url: Whether to apply the URL-safe character substitution.

    Returns:
        str: The notation.
    """
    gen, move = state.gen, state.move
    stats, normal = get_stats(gen, state.p1.pokemon, state.p2.pokemon, move)
    buf: List[str] = []

    if gen.num != 8 or state.game_type != GameType.SINGLES:
        doubles = " Doubles" if state.game_type == GameType.DOUBLES else ""
        buf.append(f"[Gen {gen.num}{doubles}]")

    consecutive = _encode_side(gen, Scope.P1, stats, normal, state, buf)

    buf.append(f"[{_move_name(gen, move, buf)}]")
    if move.crit:
        buf.append("+Crit")
    if move.spread:
        buf.append("+Spread")
    if move.hits and (move.hits > 1 or move.multihit):
        buf.append(f"Hits:{move.hits}")
    if consecutive:
        buf.append(f"Consecutive:{consecutive}")

    buf.append("vs.")

    _encode_side(gen, Scope.P2, stats, normal, state, buf)

    field = state.field
    if field.weather:
        buf.append(f"+{display(field.weather)}")
    if field.terrain:
        buf.append(f"+{display(field.terrain)}Terrain")
    _encode_conditions(field.pseudo_weather, buf)

    text = " ".join(buf)
    logger.debug(f"Encoded state as '{text}'")
    return to_safe(text) if url else text


def _move_name(gen: GameData, move: Move, buf: List[str]) -> str:
    name = move.name
    if move.use_z:
        # Some Z-Moves are named like the sugar itself
        if gen.get_move(f"Z-{name}") is not None:
            buf.append("+Z")
        else:
            name = f"Z-{name}"
    data = gen.get_move(move.id)
    if move.magnitude and move.id == "magnitude":
        name = f"{name} {move.magnitude}"
    elif move.id != HIDDEN_POWER and data is not None and move.base_power != data.base_power:
        name = f"{name} {move.base_power}"
    return name


def _encode_conditions(conditions: ConditionTable, buf: List[str]) -> None:
    for id, level in conditions.items():
        condition = CONDITIONS.by_id(id)
        name = display(condition.name if condition else id)
        buf.append(f"{name}:{level}" if level and level > 1 else f"+{name}")


def _mandatory_evs(gen: GameData, scope: Scope, stats: StatPair, move: Move) -> List[str]:
    if gen.num < 3:
        return []
    stat = stats[scope] if stats else None
    if scope == Scope.P1:
        return [stat] if stat and move.name != "Foul Play" else []
    mandatory = ["hp", stat] if stat else ["hp"]
    if move.name == "Foul Play":
        mandatory.append("atk")
    return mandatory


def _encode_evs_and_nature(gen: GameData, evs: Dict[str, int], nature: Optional[str], buf: List[str]) -> None:
    n = gen.get_nature(nature) if nature else None
    if n is not None and n.plus:
        plus = n.plus if n.plus in evs else None
        minus = n.minus if n.minus in evs else None
        if infer_nature(plus, minus, evs) == n.name:
            terms = []
            for stat, value in evs.items():
                sign = "+" if stat == n.plus else "-" if stat == n.minus else ""
                terms.append(f"{value}{sign} {gen.stats.display(stat)}")
            buf.append(" / ".join(terms))
            return

    if evs:
        buf.append(" / ".join(f"{value} {gen.stats.display(stat)}" for stat, value in evs.items()))
    if n is not None:
        buf.append(f"Nature:{n.name}")


def _should_add_ability(pokemon: Pokemon) -> bool:
    abilities = [to_id(a) for a in pokemon.species.abilities]
    return bool(pokemon.ability) and (len(abilities) > 1 or pokemon.ability not in abilities)


def _encode_ivs(gen: GameData, scope: Scope, pokemon: Pokemon, move: Move, buf: List[str]) -> None:
    if scope == Scope.P1 and move.id == HIDDEN_POWER:
        name = move.name if is_typed_hidden_power(gen, move.name) else None
        expected = expected_ivs(gen, pokemon.level, name)
    else:
        expected = gen.stats.fill({}, MAX_IV)

    values, unexpected, non_max = [], [], []
    for stat in gen.stats.order:
        value = pokemon.ivs.get(stat, MAX_IV)
        values.append(value)
        if gen.num <= 2:
            value = to_iv(to_dv(value))
        if value != expected[stat]:
            unexpected.append(stat)
        if value != MAX_IV:
            non_max.append(stat)

    # Untyped Hidden Power takes its type from the IVs, so any deviation matters
    typed = is_typed_hidden_power(gen, move.name)
    if move.id == HIDDEN_POWER and not typed:
        unexpected = non_max

    if not unexpected:
        return
    if len(unexpected) == 1 and not typed:
        stat = unexpected[0]
        if gen.num >= 3:
            buf.append(f"{gen.stats.display(stat)}IV:{pokemon.ivs[stat]}")
        else:
            buf.append(f"{gen.stats.display(stat)}DV:{to_dv(pokemon.ivs[stat])}")
    elif gen.num >= 3:
        buf.append(f"IVs:{'/'.join(str(v) for v in values)}")
    else:
        buf.append(f"DVs:{'/'.join(str(to_dv(v)) for v in values)}")


def _encode_side(
    gen: GameData,
    scope: Scope,
    stats: StatPair,
    normal: bool,
    state: State,
    buf: List[str],
) -> Optional[int]:
    side = state.p1 if scope == Scope.P1 else state.p2
    pokemon = side.pokemon
    order = gen.stats.order

    # Boosts
    boosts = {b: v for b, v in pokemon.boosts.items() if v}
    stat = stats[scope] if stats else None
    if normal and stat and boosts.get(stat) and len(boosts) == 1:
        boost = boosts[stat]
        buf.append(f"+{boost}" if boost > 0 else f"{boost}")
    else:
        for boost in BOOST_IDS:
            if boost in boosts and (boost in order or boost in ("accuracy", "evasion")):
                buf.append(f"{gen.stats.display(boost)}Boosts:{boosts[boost]}")

    if pokemon.level != 100:
        buf.append(f"Lvl {pokemon.level}")

    # EVs and nature
    default_ev = LEGACY_EV if gen.num <= 2 else 0
    mandatory = _mandatory_evs(gen, scope, stats, state.move)
    evs = {}
    for s in order:
        value = pokemon.evs.get(s, default_ev)
        if s in mandatory or (value < LEGACY_EV if gen.num <= 2 else value > 0):
            evs[s] = value
    _encode_evs_and_nature(gen, evs, pokemon.nature, buf)

    # HP
    if pokemon.hp != pokemon.maxhp:
        percent = round_half_up(pokemon.hp * 1000 / pokemon.maxhp) / 10
        if round_half_up(percent * pokemon.maxhp / 100) == pokemon.hp:
            buf.append(f"{format_number(percent)}%")
        else:
            buf.append(f"HP:{pokemon.hp}")

    # Status
    if pokemon.status == "tox":
        buf.append(f"Toxic:{pokemon.toxic_turns}" if pokemon.toxic_turns else "+Toxic")
    elif pokemon.status:
        buf.append(f"+{CONDITIONS.by_id(pokemon.status).name}")

    if "dynamax" in pokemon.volatiles:
        buf.append("+Dynamax")

    if _should_add_ability(pokemon):
        buf.append(gen.get_ability(pokemon.ability).name)

    buf.append(pokemon.species.name)

    # Item
    consecutive = state.move.consecutive
    if pokemon.item:
        item = gen.get_item(pokemon.item)
        if scope == Scope.P1 and item.id == "metronome" and consecutive:
            buf.append(f"@ {item.name}:{consecutive}")
            consecutive = None
        else:
            buf.append(f"@ {item.name}")

    if pokemon.gender and pokemon.gender != pokemon.species.gender and state.p1.pokemon.ability == "rivalry":
        buf.append(f"Gender:{pokemon.gender}")
    if pokemon.weighthg and pokemon.weighthg != pokemon.species.weighthg:
        buf.append(f"Weight:{format_number(pokemon.weighthg / 10)}")
    if pokemon.added_type:
        buf.append(f"AddedType:{pokemon.added_type}")
    if pokemon.happiness is not None:
        buf.append(f"Happiness:{pokemon.happiness}")

    _encode_ivs(gen, scope, pokemon, state.move, buf)

    # Miscellaneous
    if pokemon.move_last_turn_result is not None:
        buf.append("+MoveLastTurn" if pokemon.move_last_turn_result else "+NoMoveLastTurn")
    if pokemon.hurt_this_turn is not None:
        buf.append("+HurtThisTurn" if pokemon.hurt_this_turn else "+NoHurtThisTurn")
    if pokemon.switching:
        buf.append(f"Switching:{pokemon.switching.capitalize()}")

    maxhp = gen.stats.calc(
        "hp",
        pokemon.species.base_stats["hp"],
        pokemon.ivs.get("hp", MAX_IV),
        pokemon.evs.get("hp", default_ev),
        pokemon.level,
    )
    if pokemon.maxhp != maxhp:
        buf.append(f"MaxHP:{pokemon.maxhp}")

    # Allies
    allies = [display(gen.get_ability(a).name) for a in side.abilities]
    if allies:
        eligible = not side.atks and all(a in ALLY_ABILITIES for a in side.abilities)
        if eligible:
            buf.extend(f"+{a}" for a in allies)
    else:
        eligible = False
    if side.atks or (allies and not eligible):
        buf.append(f"Allies:{','.join([*allies, *(str(atk) for atk in side.atks)])}")

    _encode_conditions(side.side_conditions, buf)
    _encode_conditions({k: v for k, v in pokemon.volatiles.items() if k != "dynamax"}, buf)

    return consecutive
