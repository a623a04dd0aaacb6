"""
SQLAlchemy schema for the game-data knowledge base.

Every record stores its current-generation values plus an ``overrides``
JSON column keyed by the newest generation an override applies to
(``{"1": {"baseStats": {"spd": 135}}}`` applies to generation 1 only).

Usage:
    from battle_notation.core.db import create_db_engine, init_db, seed_from_dex

    engine = create_db_engine("sqlite:///data/battle_notation.db")
    init_db(engine)
    with Session(bind=engine) as session:
        seed_from_dex(session, dex)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, Float, Integer, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..utils import to_id

logger = logging.getLogger(__name__)

Base = declarative_base()


class SpeciesRecord(Base):
    __tablename__ = 'species'

    id = Column(Integer, primary_key=True)
    identifier = Column(String, unique=True, nullable=False)  # e.g. "garchomp"
    name = Column(String, nullable=False)  # Display name
    gen = Column(Integer, nullable=False)  # Generation introduced

    types = Column(JSON, nullable=False)  # ["Dragon", "Ground"]
    base_stats = Column(JSON, nullable=False)  # {"hp": 108, ...}
    abilities = Column(JSON, nullable=False, default=list)

    gender = Column(String, nullable=True)  # Fixed gender letter, null if it varies
    weightkg = Column(Float, nullable=False, default=0.0)
    overrides = Column(JSON, nullable=False, default=dict)


class MoveRecord(Base):
    __tablename__ = 'moves'

    id = Column(Integer, primary_key=True)
    identifier = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    gen = Column(Integer, nullable=False)

    type = Column(String, nullable=False)
    category = Column(String, nullable=False)  # Physical / Special / Status (post-split)
    base_power = Column(Integer, nullable=False, default=0)
    target = Column(String, nullable=False, default="normal")
    multihit = Column(JSON, nullable=True)  # [min, max]

    override_offensive_stat = Column(String, nullable=True)
    override_defensive_stat = Column(String, nullable=True)
    overrides = Column(JSON, nullable=False, default=dict)


class AbilityRecord(Base):
    __tablename__ = 'abilities'

    id = Column(Integer, primary_key=True)
    identifier = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    gen = Column(Integer, nullable=False)


class ItemRecord(Base):
    __tablename__ = 'items'

    id = Column(Integer, primary_key=True)
    identifier = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    gen = Column(Integer, nullable=False)


class TypeRecord(Base):
    __tablename__ = 'types'

    id = Column(Integer, primary_key=True)
    identifier = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    gen = Column(Integer, nullable=False)
    hp_ivs = Column(JSON, nullable=True)  # Null if the type has no Hidden Power
    hp_dvs = Column(JSON, nullable=True)


class NatureRecord(Base):
    __tablename__ = 'natures'

    id = Column(Integer, primary_key=True)
    identifier = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    plus = Column(String, nullable=True)
    minus = Column(String, nullable=True)


# =============================================================================
# Database Setup
# =============================================================================

def create_db_engine(url: Optional[str] = None) -> Engine:
    """
    Creates an engine for ``url``, or a shared in-memory SQLite database.

    The in-memory database uses a single static connection so every
    session sees the same tables.
    """
    if url is None:
        return create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(engine)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine)


def seed_from_dex(session: Session, dex: Dict[str, Any]) -> Dict[str, int]:
    """
    Inserts every record of a parsed ``dex.json`` document.

    Args:
        session: An open session; committed on success.
        dex: The decoded JSON document.

    Returns:
        Dict[str, int]: Number of rows inserted per table.
    """
    counts = {}

    species = [
        SpeciesRecord(
            identifier=to_id(s["name"]),
            name=s["name"],
            gen=s["gen"],
            types=s["types"],
            base_stats=s["baseStats"],
            abilities=s.get("abilities", []),
            gender=s.get("gender"),
            weightkg=s.get("weightkg", 0.0),
            overrides=s.get("overrides", {}),
        )
        for s in dex.get("species", [])
    ]
    moves = [
        MoveRecord(
            identifier=to_id(m["name"]),
            name=m["name"],
            gen=m["gen"],
            type=m["type"],
            category=m["category"],
            base_power=m.get("basePower", 0),
            target=m.get("target", "normal"),
            multihit=m.get("multihit"),
            override_offensive_stat=m.get("overrideOffensiveStat"),
            override_defensive_stat=m.get("overrideDefensiveStat"),
            overrides=m.get("overrides", {}),
        )
        for m in dex.get("moves", [])
    ]
    abilities = [
        AbilityRecord(identifier=to_id(a["name"]), name=a["name"], gen=a["gen"])
        for a in dex.get("abilities", [])
    ]
    items = [
        ItemRecord(identifier=to_id(i["name"]), name=i["name"], gen=i["gen"])
        for i in dex.get("items", [])
    ]
    types = [
        TypeRecord(
            identifier=to_id(t["name"]),
            name=t["name"],
            gen=t["gen"],
            hp_ivs=t.get("HPivs"),
            hp_dvs=t.get("HPdvs"),
        )
        for t in dex.get("types", [])
    ]
    natures = [
        NatureRecord(identifier=to_id(n["name"]), name=n["name"], plus=n.get("plus"), minus=n.get("minus"))
        for n in dex.get("natures", [])
    ]

    for table, rows in (
        ("species", species), ("moves", moves), ("abilities", abilities),
        ("items", items), ("types", types), ("natures", natures),
    ):
        session.add_all(rows)
        counts[table] = len(rows)

    session.commit()
    logger.debug(f"Seeded knowledge base: {counts}")
    return counts
