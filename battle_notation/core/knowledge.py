"""
Knowledge Base queries for per-generation game data.

The knowledge base reads species, moves, abilities, items, types and
natures from the SQLAlchemy schema in ``db.py`` and resolves them into
one immutable ``Generation`` view per supported ruleset. By default the
bundled ``data/dex.json`` is loaded into an in-memory SQLite database.

Usage:
    from battle_notation.core.knowledge import get_kb

    gen = get_kb().get(4)
    gen.get_species("Garchomp").base_stats["atk"]  # 130
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Generic, Iterator, List, Mapping, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from ..config import config
from ..constants import STAT_ORDER
from ..utils import to_id
from .db import (
    AbilityRecord,
    ItemRecord,
    MoveRecord,
    NatureRecord,
    SpeciesRecord,
    TypeRecord,
    create_db_engine,
    init_db,
    make_session_factory,
    seed_from_dex,
)
from .enums import MoveCategory
from .exceptions import InvalidGenerationError, KnowledgeBaseError
from .mechanics import Stats, hidden_power_type
from .models import Ability, Item, MoveData, Nature, Species, TypeData
from .protocols import GameData

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Before the physical/special split the category follows the move's type
PHYSICAL_TYPES = frozenset({
    "Normal", "Fighting", "Flying", "Poison", "Ground", "Rock", "Bug", "Ghost", "Steel", "???",
})


class DataTable(Generic[T]):
    """An id-keyed, read-only lookup table of records."""

    def __init__(self, records: Dict[str, T]):
        self._records = records

    def get(self, name: Optional[str]) -> Optional[T]:
        if not name:
            return None
        return self._records.get(to_id(name))

    def __contains__(self, name: object) -> bool:
        return to_id(name) in self._records

    def __iter__(self) -> Iterator[T]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


def apply_overrides(gen: int, data: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Resolves a record's values for ``gen``.

    Each override key is the newest generation it applies to; keys are
    applied newest first so older overrides win. ``baseStats`` is merged,
    every other field is replaced.
    """
    resolved = copy.deepcopy(data)
    for key in sorted(overrides, key=int, reverse=True):
        if gen > int(key):
            continue
        for field_name, value in overrides[key].items():
            if field_name == "baseStats":
                resolved["baseStats"] = {**resolved["baseStats"], **value}
            else:
                resolved[field_name] = value
    return resolved


class Generation(GameData):
    """
    Game data resolved for one generation.

    Attributes:
        num (int): The generation number.
        stats (Stats): Stat helper for this generation.
        species, moves, abilities, items, types, natures (DataTable): Lookup tables.
    """

    def __init__(
        self,
        num: int,
        species: DataTable[Species],
        moves: DataTable[MoveData],
        abilities: DataTable[Ability],
        items: DataTable[Item],
        types: DataTable[TypeData],
        natures: DataTable[Nature],
    ):
        self.num = num
        self.stats = Stats(num)
        self.species = species
        self.moves = moves
        self.abilities = abilities
        self.items = items
        self.types = types
        self.natures = natures

    def get_species(self, name: Optional[str]) -> Optional[Species]:
        return self.species.get(name)

    def get_move(self, name: Optional[str]) -> Optional[MoveData]:
        return self.moves.get(name)

    def get_ability(self, name: Optional[str]) -> Optional[Ability]:
        return self.abilities.get(name)

    def get_item(self, name: Optional[str]) -> Optional[Item]:
        return self.items.get(name)

    def get_type(self, name: Optional[str]) -> Optional[TypeData]:
        return self.types.get(name)

    def get_nature(self, name: Optional[str]) -> Optional[Nature]:
        return self.natures.get(name)

    def hidden_power(self, ivs: Mapping[str, int]) -> Optional[TypeData]:
        if self.num < 2:
            return None
        return self.types.get(hidden_power_type(self.num, ivs))

    def __repr__(self) -> str:
        return f"Generation({self.num})"


class KnowledgeBase:
    """
    Loads game data once and exposes a ``Generation`` per supported ruleset.

    Generations are built eagerly and never mutated, so the same object is
    returned for every lookup and states built from it compare equal.

    Args:
        database_url: SQLAlchemy URL of a prebuilt database. When omitted the
            dex at ``dex_path`` is seeded into an in-memory SQLite database.
        dex_path: Path to a ``dex.json`` document.
    """

    def __init__(self, database_url: Optional[str] = None, dex_path: Optional[str] = None):
        self.database_url = database_url
        self.dex_path = dex_path or config.data.dex_path
        self._generations: Dict[int, Generation] = {}
        self._load()

    def _load(self) -> None:
        engine = create_db_engine(self.database_url)
        Session = make_session_factory(engine)
        try:
            if self.database_url is None:
                init_db(engine)
                with Session() as session:
                    seed_from_dex(session, self._read_dex())
            with Session() as session:
                species = session.query(SpeciesRecord).all()
                moves = session.query(MoveRecord).all()
                abilities = session.query(AbilityRecord).all()
                items = session.query(ItemRecord).all()
                types = session.query(TypeRecord).all()
                natures = session.query(NatureRecord).all()

                for num in range(config.generations.min_gen, config.generations.max_gen + 1):
                    self._generations[num] = self._build_generation(
                        num, species, moves, abilities, items, types, natures
                    )
        except SQLAlchemyError as e:
            raise KnowledgeBaseError(self.database_url or self.dex_path, f"Database error: {e}") from e
        finally:
            engine.dispose()

        logger.debug(f"Loaded knowledge base for generations {sorted(self._generations)}")

    def _read_dex(self) -> Dict[str, Any]:
        path = Path(self.dex_path)
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise KnowledgeBaseError(str(path), f"Unable to read dex: {e}") from e

    @staticmethod
    def _build_generation(
        num: int,
        species_rows: List[SpeciesRecord],
        move_rows: List[MoveRecord],
        ability_rows: List[AbilityRecord],
        item_rows: List[ItemRecord],
        type_rows: List[TypeRecord],
        nature_rows: List[NatureRecord],
    ) -> Generation:
        abilities = {
            row.identifier: Ability(id=row.identifier, name=row.name, gen=row.gen)
            for row in ability_rows
            if num >= 3 and row.gen <= num
        }
        items = {
            row.identifier: Item(id=row.identifier, name=row.name, gen=row.gen)
            for row in item_rows
            if num >= 2 and row.gen <= num
        }
        types = {
            row.identifier: TypeData(
                id=row.identifier,
                name=row.name,
                gen=row.gen,
                hp_ivs=dict(row.hp_ivs) if row.hp_ivs is not None else None,
                hp_dvs=dict(row.hp_dvs) if row.hp_dvs is not None else None,
            )
            for row in type_rows
            if row.gen <= num
        }
        natures = {
            row.identifier: Nature(id=row.identifier, name=row.name, plus=row.plus, minus=row.minus)
            for row in nature_rows
            if num >= 3
        }

        species = {}
        for row in species_rows:
            if row.gen > num:
                continue
            data = apply_overrides(num, {
                "types": row.types,
                "baseStats": row.base_stats,
                "abilities": row.abilities,
            }, row.overrides or {})
            base_stats = {stat: data["baseStats"][stat] for stat in STAT_ORDER}
            if num == 1:
                # A single Special stat
                base_stats["spd"] = base_stats["spa"]
            species[row.identifier] = Species(
                id=row.identifier,
                name=row.name,
                gen=row.gen,
                types=tuple(t for t in data["types"] if to_id(t) in types),
                base_stats=base_stats,
                abilities=tuple(a for a in data["abilities"] if to_id(a) in abilities),
                gender=row.gender,
                weighthg=int(round(row.weightkg * 10)),
            )

        moves = {}
        for row in move_rows:
            if row.gen > num:
                continue
            data = apply_overrides(num, {
                "type": row.type,
                "category": row.category,
                "basePower": row.base_power,
                "target": row.target,
            }, row.overrides or {})
            category = MoveCategory(data["category"])
            if num <= 3 and category != MoveCategory.STATUS:
                category = MoveCategory.PHYSICAL if data["type"] in PHYSICAL_TYPES else MoveCategory.SPECIAL
            moves[row.identifier] = MoveData(
                id=row.identifier,
                name=row.name,
                gen=row.gen,
                type=data["type"],
                category=category,
                base_power=data["basePower"],
                target=data["target"],
                multihit=tuple(row.multihit) if row.multihit else None,
                override_offensive_stat=row.override_offensive_stat,
                override_defensive_stat=row.override_defensive_stat,
            )

        return Generation(
            num,
            species=DataTable(species),
            moves=DataTable(moves),
            abilities=DataTable(abilities),
            items=DataTable(items),
            types=DataTable(types),
            natures=DataTable(natures),
        )

    def get(self, num: int) -> Generation:
        """
        Get the game data for a generation.

        Raises:
            InvalidGenerationError: If ``num`` is not a supported generation.
        """
        gen = self._generations.get(num)
        if gen is None:
            raise InvalidGenerationError(num)
        return gen

    def __iter__(self) -> Iterator[Generation]:
        return iter(self._generations.values())

    def __contains__(self, num: object) -> bool:
        return num in self._generations


_default_kb: Optional[KnowledgeBase] = None


def get_kb() -> KnowledgeBase:
    """Get the shared default knowledge base, loading it on first use."""
    global _default_kb
    if _default_kb is None:
        _default_kb = KnowledgeBase(config.data.database_url)
    return _default_kb
