from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import DungeonConfig
from ..exceptions import SnapshotError
from ..rng import RandomSource
from .directions import Direction
from .events import GameEvent
from .game_state import GameState
from .generator import GenerationReport, LevelGenerator
from .player import LOSS_SCORE, Player

logger = logging.getLogger(__name__)

FINAL_LEVEL = 2


class GamePhase(Enum):
    NOT_STARTED = "not_started"
    LEVEL_1 = "level_1"
    LEVEL_2 = "level_2"
    WON = "won"
    LOST = "lost"


# Level each in-progress or won phase must be on; a loss can happen on either
_PHASE_LEVELS = {
    GamePhase.LEVEL_1: 1,
    GamePhase.LEVEL_2: FINAL_LEVEL,
    GamePhase.WON: FINAL_LEVEL,
}


class GameEngine:
    """Runs a two-level game: level setup, moves, descent, win and loss.

    Owns the GameState of the active level and replaces it on descent,
    carrying the player's HP and score across explicitly.
    """

    def __init__(
        self,
        difficulty: Optional[int] = None,
        *,
        config: Optional[DungeonConfig] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.config = config or DungeonConfig()
        self.rng = rng or RandomSource()
        self.generator = LevelGenerator(self.rng, self.config.entity_counts)
        base = self.config.default_difficulty if difficulty is None else difficulty
        self.initial_difficulty = self.config.clamp_difficulty(base)
        self.state: Optional[GameState] = None
        self.phase = GamePhase.NOT_STARTED
        self.last_report: Optional[GenerationReport] = None
        self._listeners: List[Callable[[GameEvent, "GameEngine"], None]] = []

    # Listeners
    def add_listener(self, listener: Callable[[GameEvent, "GameEngine"], None]) -> None:
        """Subscribe to game events (movement, descent, win, loss)."""
        self._listeners.append(listener)

    def _emit(self, event: GameEvent) -> None:
        for l in list(self._listeners):
            try:
                l(event, self)
            except Exception as ex:
                logger.exception("Listener errored on %s: %s", event, ex)

    # Accessors
    @property
    def player(self) -> Optional[Player]:
        return self.state.player if self.state else None

    @property
    def level(self) -> int:
        return self.state.level if self.state else 0

    @property
    def steps(self) -> int:
        return self.state.steps if self.state else 0

    @property
    def max_steps(self) -> int:
        return self.config.max_steps

    @property
    def level_one_start(self) -> Tuple[int, int]:
        # Bottom-left corner
        return self.config.map_size - 1, 0

    # Lifecycle
    def _new_state(self, level: int, difficulty: int) -> GameState:
        return GameState(
            self.config.map_size,
            difficulty,
            level=level,
            rng=self.rng,
            ranged_hit_chance=self.config.ranged_hit_chance,
            ranged_damage=self.config.ranged_damage,
            ranged_range=self.config.ranged_range,
        )

    def _build_level(self, level: int, difficulty: int, start: Tuple[int, int], hp: Optional[int], score: int) -> GameState:
        state = self._new_state(level, difficulty)
        state.set_player(Player(start[0], start[1], max_hp=self.config.max_hp, hp=hp, score=score))
        self.last_report = self.generator.populate(state, start)
        return state

    def start_new_game(self, difficulty: Optional[int] = None) -> None:
        if difficulty is not None:
            self.initial_difficulty = self.config.clamp_difficulty(difficulty)
        self.state = self._build_level(1, self.initial_difficulty, self.level_one_start, None, 0)
        self.phase = GamePhase.LEVEL_1
        logger.info("Game started. Level 1. Difficulty: %d", self.state.difficulty)

    def advance_level(self) -> bool:
        """Descend from level 1 once its ladder has been reached.

        The new level starts on the ladder's cell with difficulty raised by
        ``difficulty_step`` (capped), and the player's HP and score carried over.
        """
        state = self.state
        if state is None or state.player is None or state.level != 1 or not state.exit_reached:
            return False
        if self.phase is not GamePhase.LEVEL_1:
            return False
        start = state.player_pos
        hp = state.player.hp
        score = state.player.score
        next_difficulty = min(state.difficulty + self.config.difficulty_step, self.config.max_difficulty)
        self.state = self._build_level(2, next_difficulty, start, hp, score)
        self.phase = GamePhase.LEVEL_2
        message = f"Advanced to Level 2! New Difficulty: {next_difficulty}"
        self.state.add_message(message)
        logger.info(message)
        self._emit(GameEvent.LEVEL_ADVANCED)
        return True

    def move(self, direction: Direction) -> List[str]:
        """Play one move and return its messages, in order."""
        if self.phase is GamePhase.NOT_STARTED or self.state is None:
            return ["Game has not started."]
        if self.is_game_over():
            return ["Game is over, cannot move."]

        state = self.state
        steps_before = state.steps
        messages = state.move(direction)
        state.messages.clear()
        if state.steps != steps_before:
            self._emit(GameEvent.PLAYER_MOVED)

        player = state.player
        if player is None:
            return messages
        if not player.alive or state.steps >= self.max_steps:
            messages.append(self._lose(state, player, died=not player.alive))
        elif state.exit_reached and state.level == FINAL_LEVEL:
            self.phase = GamePhase.WON
            messages.append("You escaped the dungeon!")
            logger.info("Game won with score %d", player.score)
            self._emit(GameEvent.GAME_WON)
        elif state.exit_reached and self.advance_level():
            messages.extend(self.state.drain_messages())
        return messages

    def _lose(self, state: GameState, player: Player, died: bool) -> str:
        player.score = LOSS_SCORE
        self.phase = GamePhase.LOST
        reason = "You died." if died else "You ran out of steps."
        logger.info("Game lost on level %d: %s", state.level, reason)
        self._emit(GameEvent.GAME_LOST)
        return f"Game over - {reason}"

    def is_game_over(self) -> bool:
        if self.phase is GamePhase.NOT_STARTED:
            return True
        return self.phase in (GamePhase.WON, GamePhase.LOST)

    def has_won(self) -> bool:
        return self.phase is GamePhase.WON

    # Snapshot
    def snapshot(self) -> Dict[str, Any]:
        if self.state is None:
            raise SnapshotError("No game in progress to snapshot")
        return {
            "phase": self.phase.value,
            "initial_difficulty": self.initial_difficulty,
            "state": self.state.to_snapshot(),
        }

    def restore(self, data: Dict[str, Any]) -> None:
        try:
            phase = GamePhase(data["phase"])
            initial = int(data.get("initial_difficulty", self.initial_difficulty))
            state_data = data["state"]
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"Malformed game snapshot: {e}") from e
        if phase is GamePhase.NOT_STARTED:
            raise SnapshotError("Snapshot holds no game in progress")
        state = GameState.from_snapshot(
            state_data,
            rng=self.rng,
            ranged_hit_chance=self.config.ranged_hit_chance,
            ranged_damage=self.config.ranged_damage,
            ranged_range=self.config.ranged_range,
        )
        expected = _PHASE_LEVELS.get(phase)
        if expected is not None and state.level != expected:
            raise SnapshotError(f"Phase {phase.value} does not match level {state.level}")
        self.state = state
        self.phase = phase
        self.initial_difficulty = initial
        logger.info("Restored game: level %d, phase %s, steps %d", state.level, phase.value, state.steps)
