from __future__ import annotations

import json
from typing import Any, Dict

from ..exceptions import SnapshotError
from ..scores import ScoreLedger

# Increment when making breaking schema changes
SCHEMA_VERSION = 1


def encode_snapshot(snapshot: Dict[str, Any]) -> str:
    """Encode a GameEngine.snapshot() dict as JSON text."""
    data = {"schema_version": SCHEMA_VERSION, "game": snapshot}
    return json.dumps(data, ensure_ascii=False, sort_keys=True, indent=2)


def decode_snapshot(text: str) -> Dict[str, Any]:
    """Decode JSON text produced by encode_snapshot, checking the schema version."""
    data = _loads(text)
    _check_version(data)
    game = data.get("game")
    if not isinstance(game, dict):
        raise SnapshotError("Save data has no game section")
    return game


def encode_scores(ledger: ScoreLedger) -> str:
    data = {"schema_version": SCHEMA_VERSION, "scores": ledger.to_dict()}
    return json.dumps(data, ensure_ascii=False, sort_keys=True, indent=2)


def decode_scores(text: str) -> ScoreLedger:
    data = _loads(text)
    _check_version(data)
    scores = data.get("scores", {})
    if not isinstance(scores, dict):
        raise SnapshotError("Score data must be a JSON object")
    try:
        return ScoreLedger.from_dict(scores)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid score data: {e}") from e


def _loads(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError("Save data must be a JSON object")
    return data


def _check_version(data: Dict[str, Any]) -> None:
    try:
        version = int(data.get("schema_version", SCHEMA_VERSION))
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid schema version: {e}") from e
    if version > SCHEMA_VERSION:
        raise SnapshotError(
            f"Save schema version {version} is newer than supported {SCHEMA_VERSION}."
        )
