#!/usr/bin/env python3
"""
State Inspector - Parse notation and show the resolved state.

Prints both sides, the move and the field as tables, followed by the
canonical encoding and its URL-safe form. When parsing fails the
diagnostic context (decoded input, routed flags, phrase text) is printed
instead.

Usage:
    python scripts/inspect_state.py "+1 252+ Atk Garchomp [Earthquake] vs. Skarmory"

    # Fail on conflicts, unknown flags and unmatched phrase text
    python scripts/inspect_state.py --strict "Garchomp [Earthquake] vs. Skarmory level:50"

    # URL-safe input is accepted too
    python scripts/inspect_state.py "(Gen_4)_Heatran_(Hidden_Power_Fire)_vs._Blissey"
"""

from __future__ import annotations

import sys
import argparse
import json
from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from battle_notation import config, encode, try_parse
from battle_notation.core.dataclasses import Side, State
from battle_notation.core.mechanics import compute_stats

console = Console()


def side_table(state: State, side: Side, title: str) -> Panel:
    pokemon = side.pokemon
    stats = compute_stats(state.gen, pokemon)
    order = state.gen.stats.order

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold", padding=(0, 1), expand=True)
    table.add_column("Stat", no_wrap=True)
    table.add_column("EV", no_wrap=True)
    table.add_column("IV", no_wrap=True)
    table.add_column("Boost", no_wrap=True)
    table.add_column("Value", no_wrap=True)
    for stat in order:
        boost = pokemon.boosts.get(stat, 0)
        table.add_row(
            state.gen.stats.display(stat),
            str(pokemon.evs.get(stat, "")),
            str(pokemon.ivs.get(stat, "")),
            f"{boost:+d}" if boost else "",
            str(stats[stat]),
        )

    details = [
        f"Lv {pokemon.level}",
        f"HP {pokemon.hp}/{pokemon.maxhp}",
        f"Nature {pokemon.nature}" if pokemon.nature else None,
        f"Ability {pokemon.ability}" if pokemon.ability else None,
        f"Item {pokemon.item}" if pokemon.item else None,
        f"Status {pokemon.status}" if pokemon.status else None,
    ]
    conditions = {**side.side_conditions, **pokemon.volatiles}
    if conditions:
        details.append("Conditions " + ", ".join(conditions))
    if side.abilities or side.atks:
        details.append("Allies " + ", ".join([*side.abilities, *map(str, side.atks)]))

    table.caption = " | ".join(d for d in details if d)
    return Panel(table, title=f"{title}: {pokemon.name}", box=box.ROUNDED)


def move_table(state: State) -> Panel:
    move, field = state.move, state.field
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 1))
    table.add_column("Key", style="bold", no_wrap=True)
    table.add_column("Value")
    table.add_row("Move", f"{move.name} ({move.type}, {move.category.value}, {move.base_power} BP)")
    flags = [name for name, on in (("crit", move.crit), ("spread", move.spread), ("Z", move.use_z)) if on]
    if flags:
        table.add_row("Flags", ", ".join(flags))
    if move.hits:
        table.add_row("Hits", str(move.hits))
    if move.consecutive:
        table.add_row("Consecutive", str(move.consecutive))
    table.add_row("Weather", field.weather or "-")
    table.add_row("Terrain", field.terrain or "-")
    if field.pseudo_weather:
        table.add_row("Field", ", ".join(field.pseudo_weather))
    title = f"Gen {state.gen.num} {state.game_type.value}"
    return Panel(table, title=title, box=box.ROUNDED)


def main():
    parser = argparse.ArgumentParser(
        description="Parse battle notation and show the resolved state",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("notation", help="Notation to parse (quote it)")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on conflicts, unknown flags and unmatched phrase text",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    config.configure_logging("DEBUG" if args.verbose else "WARNING")

    result = try_parse(args.notation, strict=args.strict)
    if not result.ok:
        error = result.error
        console.print(Panel(f"[red]{escape(str(error))}[/]", title=type(error.cause).__name__))
        console.print_json(json.dumps(error.context.to_dict(), default=str))
        sys.exit(1)

    state = result.state
    console.print(move_table(state))
    console.print(side_table(state, state.p1, "Attacker"))
    console.print(side_table(state, state.p2, "Defender"))
    console.print(Panel(escape(encode(state)), title="Encoded", box=box.ROUNDED))
    console.print(Panel(escape(encode(state, url=True)), title="URL-safe", box=box.ROUNDED))


if __name__ == "__main__":
    main()
