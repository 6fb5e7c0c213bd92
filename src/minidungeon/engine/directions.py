from __future__ import annotations

from enum import Enum
from typing import Tuple


class Direction(Enum):
    """Cardinal moves as (row, col) deltas. Row 0 is the top of the map."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def dr(self) -> int:
        return self.value[0]

    @property
    def dc(self) -> int:
        return self.value[1]

    @property
    def label(self) -> str:
        return self.name.lower()

    def apply(self, row: int, col: int) -> Tuple[int, int]:
        return row + self.dr, col + self.dc

    @classmethod
    def from_delta(cls, dr: int, dc: int) -> "Direction":
        for d in cls:
            if d.value == (dr, dc):
                return d
        raise ValueError(f"Invalid direction delta: ({dr}, {dc})")
