from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..exceptions import InvalidConfigurationError, SnapshotError
from ..rng import RandomSource
from .directions import Direction
from .entities import Entity, EntityKind, RangedMutant, entity_from_symbol
from .player import Player

logger = logging.getLogger(__name__)

EMPTY_SYMBOL = "."

Grid = List[List[Optional[Entity]]]


class GameState:
    """Turn context for a single level: the grid, the player and the step count.

    - The player is tracked beside the grid, never stored in it.
    - move() resolves one command: reposition, tile interaction, ranged fire.
    - Messages describing the last move are kept until drained.
    """

    def __init__(
        self,
        size: int,
        difficulty: int,
        *,
        level: int = 1,
        rng: Optional[RandomSource] = None,
        ranged_hit_chance: float = 0.5,
        ranged_damage: int = 2,
        ranged_range: int = 2,
    ) -> None:
        if size <= 0:
            raise InvalidConfigurationError("Map size must be positive.")
        self.size = size
        self.grid: Grid = [[None for _ in range(size)] for _ in range(size)]
        self.player: Optional[Player] = None
        self.row = 0
        self.col = 0
        self.steps = 0
        self.level = max(1, level)
        self.difficulty = difficulty
        self.exit_reached = False
        self.messages: List[str] = []
        self.rng = rng or RandomSource()
        self.ranged_hit_chance = ranged_hit_chance
        self.ranged_damage = ranged_damage
        self.ranged_range = ranged_range

    # Grid access
    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def get(self, row: int, col: int) -> Optional[Entity]:
        return self.grid[row][col]

    def place(self, row: int, col: int, entity: Optional[Entity]) -> None:
        if not self.in_bounds(row, col):
            raise IndexError("Position out of bounds")
        self.grid[row][col] = entity

    def clear_grid(self) -> None:
        for row in self.grid:
            for c in range(self.size):
                row[c] = None

    def entities(self) -> Iterator[Tuple[int, int, Entity]]:
        """Yield (row, col, entity) for every occupied cell in row-major order."""
        for r, row in enumerate(self.grid):
            for c, entity in enumerate(row):
                if entity is not None:
                    yield r, c, entity

    def count(self, kind: EntityKind) -> int:
        return sum(1 for _, _, e in self.entities() if e.kind is kind)

    # Player
    @property
    def player_pos(self) -> Tuple[int, int]:
        return self.row, self.col

    def set_player(self, player: Player) -> None:
        if player is None:
            raise ValueError("Player cannot be None in GameState.")
        self.player = player
        self.set_player_position(player.row, player.col)

    def set_player_position(self, row: int, col: int) -> None:
        self.row = row
        self.col = col
        if self.player is not None:
            self.player.move_to(row, col)

    # Messages
    def add_message(self, message: Optional[str]) -> None:
        if message and message.strip():
            self.messages.append(message)

    def drain_messages(self) -> List[str]:
        out = list(self.messages)
        self.messages.clear()
        return out

    # Movement
    def move(self, direction: Direction) -> List[str]:
        """Resolve one movement command and return the messages it produced."""
        player = self.player
        if player is None or not player.alive:
            self.messages = ["Cannot move, the player is not alive."]
            return list(self.messages)

        self.exit_reached = False
        self.messages.clear()

        nr, nc = direction.apply(self.row, self.col)
        if not self.in_bounds(nr, nc):
            logger.debug("Blocked move %s from %s", direction.label, self.player_pos)
            self.add_message("Invalid move: you tried to move out of bounds.")
            return list(self.messages)

        self.set_player_position(nr, nc)
        self.steps += 1
        self.add_message(f"You moved {direction.label}.")
        logger.debug("Player moved %s to (%d, %d); steps=%d", direction.label, nr, nc, self.steps)

        entity = self.grid[nr][nc]
        if entity is not None:
            self._interact(player, nr, nc, entity)

        if player.alive:
            self._resolve_ranged_attacks(player)
        return list(self.messages)

    def _interact(self, player: Player, row: int, col: int, entity: Entity) -> None:
        self.add_message(entity.interact(player))
        if not entity.persists:
            self.grid[row][col] = None
        if entity.kind is EntityKind.LADDER:
            self.exit_reached = True
            logger.info("Ladder reached at (%d, %d) on level %d", row, col, self.level)
        elif not player.alive:
            self.add_message(f"The {entity.kind.value.replace('_', ' ')} was fatal!")

    def _resolve_ranged_attacks(self, player: Player) -> None:
        for r, c, entity in list(self.entities()):
            if entity.kind is not EntityKind.RANGED_MUTANT:
                continue
            if not RangedMutant.can_attack(self.row, self.col, r, c, self.ranged_range):
                continue
            if RangedMutant.try_attack(self.rng, self.ranged_hit_chance):
                player.adjust_hp(-self.ranged_damage)
                self.add_message(f"A ranged mutant at ({r},{c}) hit you! -{self.ranged_damage} HP.")
                if not player.alive:
                    self.add_message("The ranged attack was fatal!")
                    return
            else:
                self.add_message(f"A ranged mutant at ({r},{c}) attacked but missed.")

    # Snapshot
    def symbol_rows(self) -> List[str]:
        return ["".join(e.symbol if e is not None else EMPTY_SYMBOL for e in row) for row in self.grid]

    def to_snapshot(self) -> Dict[str, Any]:
        """Self-contained dict of primitives describing this level."""
        if self.player is None:
            raise SnapshotError("Cannot snapshot a level without a player")
        return {
            "size": self.size,
            "level": self.level,
            "difficulty": self.difficulty,
            "steps": self.steps,
            "exit_reached": self.exit_reached,
            "player": self.player.to_dict(),
            "grid": self.symbol_rows(),
        }

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any], rng: Optional[RandomSource] = None, **kwargs: Any) -> "GameState":
        try:
            size = int(data["size"])
            rows = list(data["grid"])
            state = cls(size, int(data["difficulty"]), level=int(data["level"]), rng=rng, **kwargs)
            if len(rows) != size or any(len(row) != size for row in rows):
                raise SnapshotError(f"Grid does not match size {size}")
            for r, row in enumerate(rows):
                for c, symbol in enumerate(row):
                    if symbol != EMPTY_SYMBOL:
                        state.grid[r][c] = entity_from_symbol(symbol)
            state.set_player(Player.from_dict(data["player"]))
            state.steps = max(0, int(data["steps"]))
            state.exit_reached = bool(data.get("exit_reached", False))
        except SnapshotError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"Malformed level snapshot: {e}") from e
        if not state.in_bounds(state.row, state.col):
            raise SnapshotError("Player position is outside the grid")
        return state
