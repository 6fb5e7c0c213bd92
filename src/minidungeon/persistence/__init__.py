"""Persistence for MiniDungeon.

This package provides:
- A JSON codec for engine snapshots and the score ledger, with schema versioning
- A SaveStore that keeps a single save slot and the leaderboard on disk
"""

from .codec import SCHEMA_VERSION, decode_scores, decode_snapshot, encode_scores, encode_snapshot
from .store import SaveStore

__all__ = [
    "SCHEMA_VERSION",
    "decode_scores",
    "decode_snapshot",
    "encode_scores",
    "encode_snapshot",
    "SaveStore",
]
