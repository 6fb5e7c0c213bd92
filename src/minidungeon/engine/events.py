from enum import Enum, auto


class GameEvent(Enum):
    """Events emitted by GameEngine to notify UI or systems."""

    PLAYER_MOVED = auto()
    LEVEL_ADVANCED = auto()
    GAME_WON = auto()
    GAME_LOST = auto()
