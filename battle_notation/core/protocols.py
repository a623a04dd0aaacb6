from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Mapping, Optional

from .models import Ability, Item, MoveData, Nature, Species, TypeData

if TYPE_CHECKING:
    from .conditions import Condition
    from .mechanics import Stats


class GameData(ABC):
    """Read-only game data for a single ruleset generation."""

    num: int
    stats: Stats

    @abstractmethod
    def get_species(self, name: Optional[str]) -> Optional[Species]:
        """Look up a species by name or id."""
        pass

    @abstractmethod
    def get_move(self, name: Optional[str]) -> Optional[MoveData]:
        """Look up a move by name or id."""
        pass

    @abstractmethod
    def get_ability(self, name: Optional[str]) -> Optional[Ability]:
        """Look up an ability; always None before generation 3."""
        pass

    @abstractmethod
    def get_item(self, name: Optional[str]) -> Optional[Item]:
        """Look up an item; always None in generation 1."""
        pass

    @abstractmethod
    def get_type(self, name: Optional[str]) -> Optional[TypeData]:
        """Look up a type that exists in this generation."""
        pass

    @abstractmethod
    def get_nature(self, name: Optional[str]) -> Optional[Nature]:
        """Look up a nature; always None before generation 3."""
        pass

    @abstractmethod
    def hidden_power(self, ivs: Mapping[str, int]) -> Optional[TypeData]:
        """Return the Hidden Power type implied by ``ivs``."""
        pass


class ConditionRegistry(ABC):
    """Maps condition ids and aliases to registered conditions."""

    @abstractmethod
    def get(self, gen: GameData, name: Optional[str]) -> Optional[Condition]:
        """Look up a condition available in ``gen`` by id, alias or name."""
        pass
