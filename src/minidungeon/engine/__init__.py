"""Turn-resolution engine: entities, the player, level generation and game flow."""

from .directions import Direction
from .entities import (
    Entity,
    EntityKind,
    Entry,
    Gold,
    HealthPotion,
    Ladder,
    MeleeMutant,
    RangedMutant,
    Trap,
)
from .events import GameEvent
from .game_engine import GameEngine, GamePhase
from .game_state import GameState
from .generator import GenerationReport, LevelGenerator
from .player import LOSS_SCORE, Player

__all__ = [
    "Direction",
    "Entity",
    "EntityKind",
    "Entry",
    "Gold",
    "HealthPotion",
    "Ladder",
    "MeleeMutant",
    "RangedMutant",
    "Trap",
    "GameEvent",
    "GameEngine",
    "GamePhase",
    "GameState",
    "GenerationReport",
    "LevelGenerator",
    "LOSS_SCORE",
    "Player",
]
