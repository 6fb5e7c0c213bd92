from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import PlatformDirs

from ..config import DungeonConfig
from ..exceptions import SaveNotFoundError, SnapshotError
from ..scores import ScoreLedger
from .codec import decode_scores, decode_snapshot, encode_scores, encode_snapshot

logger = logging.getLogger(__name__)

APP_NAME = "MiniDungeon"
SAVE_FILENAME = "minidungeon.save.json"
SCORES_FILENAME = "topscores.json"


def default_data_dir() -> Path:
    return Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_data_dir)


def atomic_write_text(path: Path, text: str) -> None:
    """Atomically write text to a path using a temporary file and replace.

    Ensures that either the old file remains or the new file fully replaces it.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=path.name, dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


class SaveStore:
    """Single save slot plus the leaderboard file, both JSON."""

    def __init__(self, base_dir: Optional[Path] = None, config: Optional[DungeonConfig] = None) -> None:
        self.config = config or DungeonConfig()
        self.base_dir = Path(base_dir) if base_dir is not None else default_data_dir()
        self.save_path = self.base_dir / SAVE_FILENAME
        self.scores_path = self.base_dir / SCORES_FILENAME

    def has_save(self) -> bool:
        return self.save_path.exists()

    def save_game(self, snapshot: Dict[str, Any]) -> Path:
        try:
            atomic_write_text(self.save_path, encode_snapshot(snapshot))
        except OSError as e:
            raise SnapshotError(f"Could not write save to {self.save_path}: {e}") from e
        logger.info("Game saved to %s", self.save_path)
        return self.save_path

    def load_game(self) -> Dict[str, Any]:
        if not self.has_save():
            raise SaveNotFoundError(f"Save file not found: {self.save_path}")
        try:
            text = self.save_path.read_text(encoding="utf-8")
        except OSError as e:
            raise SnapshotError(f"Could not read save from {self.save_path}: {e}") from e
        snapshot = decode_snapshot(text)
        logger.info("Game loaded from %s", self.save_path)
        return snapshot

    def delete_save(self) -> None:
        if self.save_path.exists():
            self.save_path.unlink()

    def save_scores(self, ledger: ScoreLedger) -> Path:
        try:
            atomic_write_text(self.scores_path, encode_scores(ledger))
        except OSError as e:
            raise SnapshotError(f"Could not write scores to {self.scores_path}: {e}") from e
        logger.info("Top scores saved to %s", self.scores_path)
        return self.scores_path

    def load_scores(self, capacity: Optional[int] = None) -> ScoreLedger:
        """Load the leaderboard; a missing or unreadable file yields an empty one.

        The ledger keeps ``config.max_top_scores`` entries unless *capacity* is given.
        """
        if capacity is None:
            capacity = self.config.max_top_scores
        if not self.scores_path.exists():
            logger.info("No top scores file found (%s); starting empty", self.scores_path)
            return ScoreLedger(capacity=capacity)
        try:
            ledger = decode_scores(self.scores_path.read_text(encoding="utf-8"))
        except (OSError, SnapshotError):
            logger.exception("Failed to load top scores; starting empty")
            return ScoreLedger(capacity=capacity)
        if ledger.capacity != capacity:
            ledger = ScoreLedger(capacity=capacity, entries=ledger.top_scores())
        return ledger
