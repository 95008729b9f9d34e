from __future__ import annotations

import pytest

from golfbets.config import reset_settings_cache
from golfbets.errors import ConfigurationError
from golfbets.handicap import StrokeMode
from golfbets.scores import HoleScore, Scored, ThreePuttEvent, Unscored


def test_record_score_is_last_write_wins(make_ledger):
    ledger = make_ledger()
    ledger.record_score("alice", 1, 5)
    ledger.record_score("alice", 1, 4)

    entry = ledger.score("alice", 1)
    assert isinstance(entry, Scored)
    assert entry.gross == 4
    assert ledger.totals("alice").thru == 1


def test_missing_score_is_unscored_not_zero(make_ledger):
    ledger = make_ledger()
    entry = ledger.score("bob", 7)
    assert isinstance(entry, Unscored)
    assert entry.par == 4
    assert ledger.net("bob", 7) is None


def test_thru_counts_holes_independent_of_order(make_ledger):
    ledger = make_ledger()
    for hole in (10, 11, 1):
        ledger.record_score("carol", hole, 4)

    assert ledger.totals("carol").thru == 3
    assert [entry.hole for entry in ledger.scores_through("carol")] == [1, 10, 11]


def test_to_par_only_counts_scored_holes(make_ledger):
    ledger = make_ledger()
    ledger.record_score("alice", 1, 5)  # par 4
    ledger.record_score("alice", 3, 3)  # par 3

    totals = ledger.totals("alice")
    assert totals.gross == 8
    assert totals.par == 7
    assert totals.to_par == 1


def test_net_applies_allocated_strokes(make_ledger):
    ledger = make_ledger(["alice", "bob"], handicaps={"alice": 20})
    scored = ledger.record_score("alice", 1, 6)

    assert scored.strokes == 2
    assert scored.net == 4
    assert ledger.totals("alice").net_to_par == 0
    assert ledger.totals("alice").stableford == 2


@pytest.mark.parametrize(
    "player_id, hole, gross",
    [("zed", 1, 4), ("alice", 19, 4), ("alice", 1, 0)],
)
def test_invalid_writes_raise_configuration_error(make_ledger, player_id, hole, gross):
    ledger = make_ledger()
    with pytest.raises(ConfigurationError):
        ledger.record_score(player_id, hole, gross)


def test_putts_cannot_exceed_strokes(make_ledger):
    ledger = make_ledger()
    with pytest.raises(ConfigurationError):
        ledger.record_score("alice", 1, 3, putts=4)


def test_duplicate_players_are_rejected(make_ledger):
    with pytest.raises(ConfigurationError):
        make_ledger(["alice", "alice"])


def test_snapshot_is_isolated_from_later_writes(make_ledger):
    ledger = make_ledger()
    ledger.record_score("alice", 1, 4)
    view = ledger.snapshot()
    ledger.record_score("alice", 1, 7)
    ledger.record_score("alice", 2, 4)

    assert view.score("alice", 1).gross == 4
    assert isinstance(view.score("alice", 2), Unscored)


def test_initial_scores_are_loaded_through_the_upsert(make_ledger):
    ledger = make_ledger()
    again = type(ledger)(
        ledger.setup,
        [
            HoleScore(player_id="bob", hole=2, gross=6),
            HoleScore.model_validate({"playerId": "bob", "holeNumber": 2, "strokes": 5}),
        ],
    )
    assert again.score("bob", 2).gross == 5
    assert [score.gross for score in again.raw_scores()] == [5]


def test_three_putt_events_replay_in_hole_order(make_ledger):
    ledger = make_ledger()
    ledger.record_score("bob", 3, 6, putts=4)
    ledger.record_score("alice", 3, 5, putts=3)
    ledger.record_score("carol", 2, 5, putts=3)
    ledger.record_score("dave", 2, 4, putts=2)

    assert ledger.three_putt_events() == [
        ThreePuttEvent(player_id="carol", hole=2),
        ThreePuttEvent(player_id="alice", hole=3),
        ThreePuttEvent(player_id="bob", hole=3),
    ]


def test_off_the_low_uses_match_play_allowance(make_ledger):
    ledger = make_ledger(
        ["low", "high"],
        handicaps={"low": 4, "high": 12},
        stroke_mode=StrokeMode.OFF_THE_LOW,
    )
    assert sum(ledger.strokes("low").values()) == 0
    assert sum(ledger.strokes("high").values()) == 6
    assert ledger.course_handicap("high").value == 12


def test_off_the_low_allowance_reads_settings(make_ledger, monkeypatch):
    monkeypatch.setenv("GOLFBETS_MATCH_PLAY_ALLOWANCE", "100")
    reset_settings_cache()
    ledger = make_ledger(
        ["low", "high"],
        handicaps={"low": 4, "high": 12},
        stroke_mode=StrokeMode.OFF_THE_LOW,
    )
    assert sum(ledger.strokes("high").values()) == 8
