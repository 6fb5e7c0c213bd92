import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from minidungeon.engine.game_state import GameState  # noqa: E402
from minidungeon.engine.player import Player  # noqa: E402
from minidungeon.rng import RandomSource  # noqa: E402


class ScriptedRandom(RandomSource):
    """RandomSource whose attack rolls follow a fixed script (False once exhausted)."""

    def __init__(self, outcomes=()):
        super().__init__(seed=0)
        self.outcomes = list(outcomes)
        self.rolls = 0

    def chance(self, probability: float) -> bool:
        self.rolls += 1
        return self.outcomes.pop(0) if self.outcomes else False


@pytest.fixture
def scripted_rng():
    return ScriptedRandom


@pytest.fixture
def empty_level():
    """Empty 10x10 level 1 with the player at (5, 5)."""
    state = GameState(10, 3, rng=ScriptedRandom())
    state.set_player(Player(5, 5))
    return state
