from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

DEFAULT_MAX_HP = 10

# Score recorded for a lost game.
LOSS_SCORE = -1


@dataclass
class Player:
    """The adventurer: position, health and score.

    Health is always kept within [0, max_hp]; score is unclamped.
    """

    row: int
    col: int
    max_hp: int = DEFAULT_MAX_HP
    hp: Optional[int] = None
    score: int = 0

    def __post_init__(self) -> None:
        if self.max_hp <= 0:
            raise ValueError("max_hp must be positive")
        if self.hp is None:
            self.hp = self.max_hp
        else:
            self.set_hp(self.hp)

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.row, self.col)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def move_to(self, row: int, col: int) -> None:
        self.row = row
        self.col = col

    def adjust_hp(self, delta: int) -> None:
        self.set_hp(self.hp + delta)

    def set_hp(self, value: int) -> None:
        self.hp = max(0, min(int(value), self.max_hp))

    def adjust_score(self, delta: int) -> None:
        self.score += delta

    def to_dict(self) -> Dict[str, Any]:
        return {"row": self.row, "col": self.col, "hp": self.hp, "max_hp": self.max_hp, "score": self.score}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Player":
        return Player(
            row=int(data["row"]),
            col=int(data["col"]),
            max_hp=int(data.get("max_hp", DEFAULT_MAX_HP)),
            hp=int(data["hp"]),
            score=int(data["score"]),
        )

    def __repr__(self) -> str:
        return f"Player(@{self.row},{self.col} hp={self.hp}/{self.max_hp} score={self.score})"
