from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Dict, Type

if TYPE_CHECKING:  # pragma: no cover
    from ..rng import RandomSource
    from .player import Player


class EntityKind(Enum):
    ENTRY = "entry"
    GOLD = "gold"
    HEALTH_POTION = "health_potion"
    TRAP = "trap"
    MELEE_MUTANT = "melee_mutant"
    RANGED_MUTANT = "ranged_mutant"
    LADDER = "ladder"


class Entity:
    """Base tile occupant. Subclasses implement interact().

    - symbol: single character used on the map and in snapshots.
    - passable: whether the player may enter the tile.
    - persists: whether the entity stays on the map after an interaction.
    """

    kind: ClassVar[EntityKind]
    symbol: ClassVar[str]
    passable: ClassVar[bool] = True
    persists: ClassVar[bool] = False

    def interact(self, player: "Player") -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Entry(Entity):
    kind = EntityKind.ENTRY
    symbol = "E"

    def interact(self, player: "Player") -> str:
        return "You are at the dungeon entry."


class Gold(Entity):
    kind = EntityKind.GOLD
    symbol = "G"
    value = 2

    def interact(self, player: "Player") -> str:
        player.adjust_score(self.value)
        return f"You picked up gold! +{self.value} score."


class HealthPotion(Entity):
    kind = EntityKind.HEALTH_POTION
    symbol = "H"
    heal = 4

    def interact(self, player: "Player") -> str:
        # Player clamps at max_hp
        player.adjust_hp(self.heal)
        return f"You drank a health potion! +{self.heal} HP."


class Trap(Entity):
    """Deals damage every time the player steps on it; never consumed."""

    kind = EntityKind.TRAP
    symbol = "T"
    persists = True
    damage = 2

    def interact(self, player: "Player") -> str:
        player.adjust_hp(-self.damage)
        return f"You fell into a trap! -{self.damage} HP."


class MeleeMutant(Entity):
    kind = EntityKind.MELEE_MUTANT
    symbol = "M"
    damage = 2
    reward = 2

    def interact(self, player: "Player") -> str:
        player.adjust_hp(-self.damage)
        player.adjust_score(self.reward)
        return f"You fought a melee mutant! -{self.damage} HP, +{self.reward} score."


class RangedMutant(Entity):
    """Stationary shooter.

    Stepping onto it defeats it without taking damage. While it stands, it
    shoots at a player sharing its row or column within ``reach`` tiles.
    """

    kind = EntityKind.RANGED_MUTANT
    symbol = "R"
    reward = 2

    def interact(self, player: "Player") -> str:
        player.adjust_score(self.reward)
        return f"You attacked a ranged mutant and won. +{self.reward} score."

    @staticmethod
    def can_attack(player_row: int, player_col: int, mutant_row: int, mutant_col: int, reach: int = 2) -> bool:
        d_row = abs(player_row - mutant_row)
        d_col = abs(player_col - mutant_col)
        if player_row == mutant_row and 0 < d_col <= reach:
            return True
        return player_col == mutant_col and 0 < d_row <= reach

    @staticmethod
    def try_attack(rng: "RandomSource", hit_chance: float = 0.5) -> bool:
        return rng.chance(hit_chance)


class Ladder(Entity):
    """Level exit. Stays on the map until the engine moves on."""

    kind = EntityKind.LADDER
    symbol = "L"
    persists = True

    def interact(self, player: "Player") -> str:
        return "You climbed the ladder!"


ENTITY_TYPES: Dict[EntityKind, Type[Entity]] = {
    cls.kind: cls for cls in (Entry, Gold, HealthPotion, Trap, MeleeMutant, RangedMutant, Ladder)
}

_BY_SYMBOL: Dict[str, Type[Entity]] = {cls.symbol: cls for cls in ENTITY_TYPES.values()}


def create_entity(kind: EntityKind) -> Entity:
    return ENTITY_TYPES[kind]()


def entity_from_symbol(symbol: str) -> Entity:
    if symbol not in _BY_SYMBOL:
        raise KeyError(f"Unknown entity symbol: {symbol!r}")
    return _BY_SYMBOL[symbol]()


__all__ = [
    "EntityKind",
    "Entity",
    "Entry",
    "Gold",
    "HealthPotion",
    "Trap",
    "MeleeMutant",
    "RangedMutant",
    "Ladder",
    "ENTITY_TYPES",
    "create_entity",
    "entity_from_symbol",
]
