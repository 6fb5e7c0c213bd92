import logging

import pytest

from minidungeon.engine.directions import Direction
from minidungeon.engine.entities import Gold, Ladder, Trap
from minidungeon.engine.events import GameEvent
from minidungeon.engine.game_engine import GameEngine, GamePhase
from minidungeon.engine.player import LOSS_SCORE
from minidungeon.exceptions import SnapshotError
from minidungeon.rng import RandomSource


def _started(difficulty: int = 3, seed: int = 11) -> GameEngine:
    engine = GameEngine(difficulty, rng=RandomSource(seed=seed))
    engine.start_new_game()
    return engine


def _clear(engine: GameEngine) -> None:
    engine.state.clear_grid()


def test_new_game_starts_level_one_in_corner():
    engine = _started()
    assert engine.phase is GamePhase.LEVEL_1
    assert engine.level == 1
    assert engine.state.player_pos == (9, 0)
    assert engine.player.hp == 10
    assert engine.player.score == 0
    assert engine.steps == 0
    assert engine.state.difficulty == 3
    assert not engine.is_game_over()
    assert not engine.has_won()


def test_difficulty_is_clamped():
    engine = GameEngine(rng=RandomSource(seed=1))
    engine.start_new_game(42)
    assert engine.state.difficulty == 10
    engine.start_new_game(-3)
    assert engine.state.difficulty == 0


def test_move_before_start_is_rejected():
    engine = GameEngine(3)
    assert engine.move(Direction.UP) == ["Game has not started."]
    assert engine.is_game_over()


def test_advance_requires_exit_on_level_one():
    engine = _started()
    assert engine.advance_level() is False
    assert engine.level == 1


@pytest.mark.parametrize("difficulty, expected", [(3, 5), (9, 10), (10, 10)])
def test_ladder_on_level_one_advances(difficulty, expected):
    engine = _started(difficulty)
    _clear(engine)
    engine.state.place(8, 0, Gold())
    engine.state.place(7, 0, Trap())
    engine.state.place(6, 0, Ladder())

    engine.move(Direction.UP)
    engine.move(Direction.UP)
    messages = engine.move(Direction.UP)

    assert engine.phase is GamePhase.LEVEL_2
    assert engine.level == 2
    assert engine.state.difficulty == expected
    assert engine.state.player_pos == (6, 0)
    assert engine.player.hp == 8
    assert engine.player.score == 2
    assert engine.steps == 0
    assert engine.state.get(6, 0) is None
    assert any("climbed the ladder" in m for m in messages)
    assert any("Advanced to Level 2" in m for m in messages)
    # No second descent from level 2
    assert engine.advance_level() is False


def test_ladder_on_level_two_wins_and_locks_game():
    engine = _started()
    _clear(engine)
    engine.state.place(8, 0, Ladder())
    engine.move(Direction.UP)
    assert engine.level == 2

    _clear(engine)
    engine.state.place(6, 0, Ladder())
    engine.move(Direction.UP)
    engine.move(Direction.UP)
    assert engine.has_won()
    assert engine.is_game_over()
    assert engine.player.score >= 0

    before = engine.snapshot()
    assert engine.move(Direction.UP) == ["Game is over, cannot move."]
    assert engine.snapshot() == before


def test_death_loses_and_sets_sentinel_score():
    engine = _started()
    _clear(engine)
    engine.player.set_hp(2)
    engine.player.adjust_score(6)
    engine.state.place(8, 0, Trap())
    messages = engine.move(Direction.UP)

    assert engine.phase is GamePhase.LOST
    assert engine.is_game_over()
    assert not engine.has_won()
    assert engine.player.score == LOSS_SCORE
    assert "Game over - You died." in messages
    assert engine.move(Direction.UP) == ["Game is over, cannot move."]


def test_step_budget_loses():
    engine = _started()
    _clear(engine)
    engine.state.steps = engine.max_steps - 1
    engine.move(Direction.UP)
    assert engine.steps == 100
    assert engine.phase is GamePhase.LOST
    assert engine.player.score == LOSS_SCORE


def test_loss_takes_priority_over_ladder():
    engine = _started()
    _clear(engine)
    engine.state.steps = engine.max_steps - 1
    engine.state.place(8, 0, Ladder())
    engine.move(Direction.UP)
    assert engine.phase is GamePhase.LOST
    assert engine.level == 1


def test_out_of_bounds_move_does_not_spend_budget():
    engine = _started()
    messages = engine.move(Direction.DOWN)
    assert engine.steps == 0
    assert any("out of bounds" in m for m in messages)


def test_listeners_receive_events():
    engine = _started()
    events = []
    engine.add_listener(lambda e, eng: events.append(e))
    _clear(engine)
    engine.state.place(8, 0, Ladder())

    engine.move(Direction.DOWN)  # blocked: no event
    engine.move(Direction.UP)
    assert events == [GameEvent.PLAYER_MOVED, GameEvent.LEVEL_ADVANCED]


def test_snapshot_restore_round_trip():
    engine = _started(seed=5)
    engine.move(Direction.RIGHT)
    engine.move(Direction.UP)
    snap = engine.snapshot()

    other = GameEngine(0, rng=RandomSource(seed=6))
    other.restore(snap)

    assert other.phase is engine.phase
    assert other.level == engine.level
    assert other.state.difficulty == engine.state.difficulty
    assert other.steps == engine.steps
    assert other.state.player_pos == engine.state.player_pos
    assert other.player.to_dict() == engine.player.to_dict()
    assert other.state.symbol_rows() == engine.state.symbol_rows()
    assert other.snapshot() == snap


@pytest.mark.parametrize("phase", ["level_2", "won"])
def test_restore_rejects_phase_that_disagrees_with_level(phase):
    snap = _started().snapshot()
    assert snap["state"]["level"] == 1
    snap["phase"] = phase
    other = GameEngine(rng=RandomSource(seed=1))
    with pytest.raises(SnapshotError):
        other.restore(snap)
    assert other.phase is GamePhase.NOT_STARTED
    assert other.state is None


def test_restore_accepts_loss_on_either_level():
    engine = _started()
    snap = engine.snapshot()
    snap["phase"] = "lost"
    other = GameEngine(rng=RandomSource(seed=1))
    other.restore(snap)
    assert other.phase is GamePhase.LOST
    assert other.is_game_over() and not other.has_won()


def test_failing_listener_does_not_break_move(caplog):
    engine = _started()
    events = []

    def broken(event, eng):
        raise RuntimeError("boom")

    engine.add_listener(broken)
    engine.add_listener(lambda e, eng: events.append(e))
    _clear(engine)

    with caplog.at_level(logging.ERROR, logger="minidungeon.engine.game_engine"):
        messages = engine.move(Direction.UP)

    assert messages == ["You moved up."]
    assert engine.steps == 1
    assert events == [GameEvent.PLAYER_MOVED]
    assert "Listener errored" in caplog.text
