from datetime import date, timedelta

from minidungeon.scores import ScoreEntry, ScoreLedger

TODAY = date(2025, 5, 30)


def test_entries_sorted_descending_with_newer_first_on_ties():
    ledger = ScoreLedger()
    ledger.add_score("Alice", 100, TODAY)
    ledger.add_score("Bob", 200, TODAY)
    ledger.add_score("Charlie", 100, TODAY - timedelta(days=1))
    assert [e.name for e in ledger.top_scores()] == ["Bob", "Alice", "Charlie"]


def test_ledger_truncates_to_capacity():
    ledger = ScoreLedger()
    for i in range(8):
        ledger.add_score(f"p{i}", i * 10, TODAY)
    scores = [e.score for e in ledger.top_scores()]
    assert scores == [70, 60, 50, 40, 30]


def test_ledger_keeps_fewer_when_not_full():
    ledger = ScoreLedger()
    ledger.add_score("a", 4, TODAY)
    ledger.add_score("b", 9, TODAY)
    assert len(ledger.top_scores()) == 2


def test_loss_score_never_inserted_or_top():
    ledger = ScoreLedger()
    assert ledger.is_top_score(-1) is False
    ledger.add_score("loser", -1, TODAY)
    assert ledger.top_scores() == []


def test_is_top_score_rules():
    ledger = ScoreLedger()
    assert ledger.is_top_score(0) is True
    for s in (10, 20, 30, 40, 50):
        ledger.add_score("x", s, TODAY)
    assert ledger.is_top_score(10) is False  # must beat the lowest retained
    assert ledger.is_top_score(11) is True


def test_top_scores_is_a_copy():
    ledger = ScoreLedger()
    ledger.add_score("a", 5, TODAY)
    ledger.top_scores().clear()
    assert len(ledger.top_scores()) == 1


def test_entry_formatting():
    entry = ScoreEntry("TestPlayer", 10, date(2025, 5, 30))
    assert entry.formatted_date == "30/05/2025"
    assert str(entry) == "TestPlayer: 10 (30/05/2025)"


def test_ledger_dict_round_trip():
    ledger = ScoreLedger(capacity=3)
    ledger.add_score("a", 5, TODAY)
    ledger.add_score("b", 7, TODAY - timedelta(days=3))
    restored = ScoreLedger.from_dict(ledger.to_dict())
    assert restored.capacity == 3
    assert restored.top_scores() == ledger.top_scores()
