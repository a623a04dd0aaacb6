"""
Centralized Configuration for the battle notation system.

This module provides a single source of truth for the configuration
values used throughout the codebase: generation bounds and defaults,
where the game data lives, logging and the default parsing mode.

Usage:
    from battle_notation.config import config, NotationConfig

    # Use default config
    newest = config.generations.default_gen

    # Create custom config
    custom = NotationConfig(strict=True)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

DATA_DIR = Path(__file__).parent / "data"


@dataclass
class GenerationConfig:
    """Ruleset generation bounds and per-format defaults."""

    min_gen: int = 1
    max_gen: int = 8
    default_gen: int = 8
    default_game_type: str = "singles"
    default_level: int = 100

    def is_valid(self, num: int) -> bool:
        """True if ``num`` is a supported generation number."""
        return self.min_gen <= num <= self.max_gen


@dataclass
class DataConfig:
    """Where the game-data provider loads its records from."""

    # Bundled JSON dex used to seed the in-memory knowledge base
    dex_path: str = str(DATA_DIR / "dex.json")
    # Optional SQLAlchemy URL of a prebuilt database (scripts/build_knowledge_base.py)
    database_url: Optional[str] = None


@dataclass
class LoggingConfig:
    """Logging configuration for scripts."""

    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class NotationConfig:
    """
    Master configuration class for the battle notation system.

    Example:
        config = NotationConfig()
        print(config.generations.default_gen)  # 8
        print(config.strict)  # False
    """

    generations: GenerationConfig = field(default_factory=GenerationConfig)
    data: DataConfig = field(default_factory=DataConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Default parsing mode when callers do not pass one
    strict: bool = False

    @property
    def default_gen(self) -> int:
        return self.generations.default_gen

    @property
    def default_level(self) -> int:
        return self.generations.default_level

    def configure_logging(self, level: Optional[str] = None) -> None:
        """Configure the root logger from the logging section."""
        logging.basicConfig(
            level=getattr(logging, (level or self.logging.level).upper(), logging.INFO),
            format=self.logging.format,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            "generations": self.generations.__dict__,
            "data": self.data.__dict__,
            "logging": self.logging.__dict__,
            "strict": self.strict,
        }

    def save(self, path: str | Path) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str | Path) -> NotationConfig:
        """Load configuration from JSON file."""
        path = Path(path)
        with open(path) as f:
            data = json.load(f)

        return cls(
            generations=GenerationConfig(**data.get("generations", {})),
            data=DataConfig(**data.get("data", {})),
            logging=LoggingConfig(**data.get("logging", {})),
            strict=bool(data.get("strict", False)),
        )


# Global default configuration instance
config = NotationConfig()
