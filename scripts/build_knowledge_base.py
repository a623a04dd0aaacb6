#!/usr/bin/env python3
"""
Knowledge Base Builder - Seed the game-data database from the bundled dex.

By default the parser seeds an in-memory database from ``dex.json`` on
first use. This script writes the same tables to an on-disk SQLite file so
``config.data.database_url`` can point at it and skip the seeding step.

Usage:
    # Build data/battle_notation.db from the bundled dex
    python scripts/build_knowledge_base.py

    # Custom dex and output
    python scripts/build_knowledge_base.py --dex my_dex.json --output /tmp/kb.db

    # Rebuild an existing database
    python scripts/build_knowledge_base.py --force
"""

from __future__ import annotations

import sys
import argparse
import json
import logging
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from battle_notation.config import config
from battle_notation.core.db import create_db_engine, init_db, make_session_factory, seed_from_dex
from battle_notation.core.knowledge import KnowledgeBase
from battle_notation.core.exceptions import KnowledgeBaseError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = project_root / "data" / "battle_notation.db"


def build(dex_path: Path, output: Path, force: bool = False) -> int:
    """
    Seeds ``output`` from ``dex_path`` and checks the result loads.

    Returns:
        int: Process exit code.
    """
    if output.exists():
        if not force:
            logger.error(f"{output} already exists (use --force to rebuild)")
            return 1
        output.unlink()
    output.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(dex_path, encoding="utf-8") as f:
            dex = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Unable to read dex {dex_path}: {e}")
        return 1

    url = f"sqlite:///{output}"
    engine = create_db_engine(url)
    Session = make_session_factory(engine)
    try:
        init_db(engine)
        with Session() as session:
            counts = seed_from_dex(session, dex)
    except SQLAlchemyError as e:
        logger.error(f"Database error: {e}")
        return 1
    finally:
        engine.dispose()

    for table, count in counts.items():
        logger.info(f"  {table}: {count} rows")

    # Loading every generation validates the overrides
    try:
        kb = KnowledgeBase(database_url=url)
    except KnowledgeBaseError as e:
        logger.error(f"Built database does not load: {e}")
        return 1

    logger.info(f"Wrote {output} ({len(list(kb))} generations)")
    print(f"Set config.data.database_url = '{url}' to use it.")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Seed the battle notation knowledge base into a SQLite file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--dex",
        type=Path,
        default=Path(config.data.dex_path),
        help=f"Dex JSON document (default: {config.data.dex_path})",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=DEFAULT_OUTPUT,
        help=f"SQLite file to write (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Overwrite an existing database",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    config.configure_logging("DEBUG" if args.verbose else None)
    sys.exit(build(args.dex, args.output, args.force))


if __name__ == "__main__":
    main()
