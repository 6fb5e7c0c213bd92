from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Tuple

from .engine.player import LOSS_SCORE

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 5


@dataclass(frozen=True)
class ScoreEntry:
    """A finished game on the leaderboard."""

    name: str
    score: int
    achieved: date

    def sort_key(self) -> Tuple[int, int]:
        # Highest score first; newer date first on ties
        return (-self.score, -self.achieved.toordinal())

    @property
    def formatted_date(self) -> str:
        return self.achieved.strftime("%d/%m/%Y")

    def __str__(self) -> str:
        return f"{self.name}: {self.score} ({self.formatted_date})"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "score": self.score, "date": self.achieved.isoformat()}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ScoreEntry":
        return ScoreEntry(
            name=str(data["name"]),
            score=int(data["score"]),
            achieved=date.fromisoformat(str(data["date"])),
        )


@dataclass
class ScoreLedger:
    """Top-N scores, kept sorted and truncated to ``capacity``."""

    capacity: int = DEFAULT_CAPACITY
    entries: List[ScoreEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError("capacity must be positive")
        self._normalize()

    def _normalize(self) -> None:
        self.entries.sort(key=ScoreEntry.sort_key)
        del self.entries[self.capacity:]

    def is_top_score(self, score: int) -> bool:
        if score == LOSS_SCORE:
            return False
        if len(self.entries) < self.capacity:
            return True
        return score > self.entries[self.capacity - 1].score

    def add_score(self, name: str, score: int, achieved: date) -> None:
        if score == LOSS_SCORE:
            logger.debug("Ignoring loss score for %s", name)
            return
        self.entries.append(ScoreEntry(name=name, score=score, achieved=achieved))
        self._normalize()

    def top_scores(self) -> List[ScoreEntry]:
        return list(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {"capacity": self.capacity, "entries": [e.to_dict() for e in self.entries]}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ScoreLedger":
        entries = [ScoreEntry.from_dict(e) for e in data.get("entries", []) if e]
        return ScoreLedger(capacity=int(data.get("capacity", DEFAULT_CAPACITY)), entries=entries)


__all__ = ["ScoreEntry", "ScoreLedger"]
