from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..config import EntityCounts
from ..rng import RandomSource
from .entities import EntityKind, Entry, create_entity
from .game_state import GameState

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


@dataclass
class GenerationReport:
    """What the generator managed to place on a level."""

    level: int
    start: Point
    placed: Dict[EntityKind, int] = field(default_factory=dict)
    shortfalls: Dict[EntityKind, int] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.shortfalls


class LevelGenerator:
    """Populates a GameState grid for one level.

    Entities go to uniformly random empty cells by rejection sampling. Each kind
    gets at most ``2 * size * size`` draws; if those run out the missing count is
    logged and reported instead of retrying forever.
    """

    def __init__(self, rng: Optional[RandomSource] = None, counts: Optional[EntityCounts] = None) -> None:
        self.rng = rng or RandomSource()
        self.counts = counts or EntityCounts()

    def plan(self, difficulty: int) -> List[Tuple[EntityKind, int]]:
        """Placement order and counts; the ranged mutant count is the difficulty."""
        return [
            (EntityKind.GOLD, self.counts.gold),
            (EntityKind.TRAP, self.counts.trap),
            (EntityKind.MELEE_MUTANT, self.counts.melee_mutant),
            (EntityKind.RANGED_MUTANT, max(0, difficulty)),
            (EntityKind.HEALTH_POTION, self.counts.health_potion),
            (EntityKind.LADDER, self.counts.ladder),
        ]

    def populate(self, state: GameState, start: Point) -> GenerationReport:
        """Clear *state*, put the player on *start* and scatter the level's entities.

        Level 1 marks the start cell with an Entry; on every level the start cell
        is otherwise kept free.
        """
        sr, sc = start
        if not state.in_bounds(sr, sc):
            raise ValueError(f"Start cell {start} is outside the grid")
        state.steps = 0
        state.exit_reached = False
        state.clear_grid()
        state.set_player_position(sr, sc)

        report = GenerationReport(level=state.level, start=start)
        if state.level == 1:
            state.place(sr, sc, Entry())

        for kind, count in self.plan(state.difficulty):
            placed = self._place(state, kind, count, start)
            report.placed[kind] = placed
            if placed < count:
                report.shortfalls[kind] = count - placed
                logger.warning(
                    "Could not place all %d instances of %s on level %d (placed %d)",
                    count, kind.value, state.level, placed,
                )
        logger.debug("Generated level %d (difficulty %d) from start %s", state.level, state.difficulty, start)
        return report

    def _place(self, state: GameState, kind: EntityKind, count: int, start: Point) -> int:
        size = state.size
        max_attempts = size * size * 2
        placed = 0
        attempts = 0
        while placed < count and attempts < max_attempts:
            attempts += 1
            r = self.rng.randrange(size)
            c = self.rng.randrange(size)
            if (r, c) == start:
                # Covers the Entry cell on level 1, so the ladder never lands there
                continue
            if state.get(r, c) is not None:
                continue
            state.place(r, c, create_entity(kind))
            placed += 1
        return placed


__all__ = ["GenerationReport", "LevelGenerator"]
