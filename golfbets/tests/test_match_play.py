from __future__ import annotations

from decimal import Decimal

import pytest

from golfbets.games.configs import MatchPlayConfig, Side
from golfbets.games.match_play import (
    MatchStatus,
    evaluate_match,
    evaluate_match_play,
)
from golfbets.games.results import BetStatus
from golfbets.tests.conftest import fill

ALICE = Side(id="alice", player_ids=["alice"])
BOB = Side(id="bob", player_ids=["bob"])


def _singles(ledger, alice, bob, start=1):
    return fill(ledger, {"alice": alice, "bob": bob}, start=start)


def test_match_is_dormie_then_decided(make_ledger):
    ledger = make_ledger(["alice", "bob"])
    _singles(ledger, [3] * 5 + [4] * 8, [4] * 13)

    state = evaluate_match(ledger, ALICE, BOB)
    assert state.status == MatchStatus.IN_PROGRESS
    assert state.margin == 5
    assert state.holes_remaining == 5
    assert state.dormie
    assert state.display == "5 UP (dormie)"

    _singles(ledger, [4], [4], start=14)
    state = evaluate_match(ledger, ALICE, BOB)
    assert state.status == MatchStatus.DECIDED
    assert state.winner == "alice"
    assert state.loser == "bob"
    assert state.display == "5 & 4"


def test_holes_after_the_decision_are_ignored(make_ledger):
    ledger = make_ledger(["alice", "bob"])
    _singles(ledger, [3] * 10, [4] * 10)
    _singles(ledger, [6] * 8, [3] * 8, start=11)

    state = evaluate_match(ledger, ALICE, BOB)
    assert state.status == MatchStatus.DECIDED
    assert state.holes_played == 10
    assert state.margin == 10
    assert [outcome.hole for outcome in state.holes] == list(range(1, 11))


@pytest.mark.parametrize("wins", range(0, 10))
def test_decided_exactly_when_margin_exceeds_remaining(make_ledger, wins):
    ledger = make_ledger(["alice", "bob"])
    for hole in range(1, 19):
        alice = 3 if hole <= wins else 4
        _singles(ledger, [alice], [4], start=hole)
        state = evaluate_match(ledger, ALICE, BOB)
        margin = min(hole, wins)
        if margin > 18 - hole:
            assert state.status == MatchStatus.DECIDED
            break
        assert state.status == MatchStatus.IN_PROGRESS or (
            hole == 18 and state.status == MatchStatus.HALVED
        )


def test_missing_score_leaves_match_pending_at_that_hole(make_ledger):
    ledger = make_ledger(["alice", "bob"])
    _singles(ledger, [4, 3], [4, 4])
    ledger.record_score("alice", 3, 3)
    _singles(ledger, [3], [5], start=4)

    state = evaluate_match(ledger, ALICE, BOB)
    assert state.status == MatchStatus.IN_PROGRESS
    assert state.pending_hole == 3
    assert state.holes_played == 2
    assert state.margin == 1
    assert state.label == "LEAD"


def test_level_after_eighteen_is_halved(make_ledger):
    ledger = make_ledger(["alice", "bob"])
    _singles(ledger, [4] * 18, [4] * 18)

    config = MatchPlayConfig(side_a=ALICE, side_b=BOB, stake=Decimal("10"))
    state, result = evaluate_match_play(config, ledger)
    assert state.status == MatchStatus.HALVED
    assert state.display == "Match Halved"
    assert result.status == BetStatus.PUSHED
    assert result.deltas == {}


def test_best_ball_uses_lowest_net_of_members_with_scores(make_ledger):
    ledger = make_ledger()
    ledger.record_score("alice", 1, 5)
    ledger.record_score("bob", 1, 3)
    ledger.record_score("carol", 1, 4)
    ledger.record_score("dave", 1, 4)
    # Only one member of each side has scored hole 2.
    ledger.record_score("alice", 2, 4)
    ledger.record_score("dave", 2, 5)

    side_a = Side(id="A", player_ids=["alice", "bob"])
    side_b = Side(id="B", player_ids=["carol", "dave"])
    state = evaluate_match(ledger, side_a, side_b)
    assert [outcome.winner for outcome in state.holes] == ["A", "A"]
    assert state.margin == 2
    assert state.leader == "A"


def test_decided_team_match_pays_every_member(make_ledger):
    ledger = make_ledger()
    fill(ledger, {"alice": [3] * 10, "bob": [5] * 10, "carol": [4] * 10, "dave": [4] * 10})
    config = MatchPlayConfig.model_validate(
        {
            "betId": "fourball",
            "sideA": {"id": "A", "playerIds": ["alice", "bob"]},
            "sideB": {"id": "B", "playerIds": ["carol", "dave"]},
            "betAmount": "10",
        }
    )
    state, result = evaluate_match_play(config, ledger)
    assert state.status == MatchStatus.DECIDED
    assert result.status == BetStatus.COMPLETED
    assert result.deltas == {
        "alice": Decimal("10.00"),
        "bob": Decimal("10.00"),
        "carol": Decimal("-10.00"),
        "dave": Decimal("-10.00"),
    }
    assert result.winner_ids == ["alice", "bob"]
    assert result.note == "10 & 8"


def test_match_scoped_to_explicit_holes(make_ledger):
    ledger = make_ledger(["alice", "bob"])
    _singles(ledger, [3, 3, 3], [4, 4, 4], start=10)

    state = evaluate_match(ledger, ALICE, BOB, holes=[10, 11, 12])
    assert state.status == MatchStatus.DECIDED
    assert state.display == "2 & 1"


def test_cancelled_match_and_untouched_match(make_ledger):
    ledger = make_ledger(["alice", "bob"])
    config = MatchPlayConfig(side_a=ALICE, side_b=BOB, cancelled=True)
    state, result = evaluate_match_play(config, ledger)
    assert state.display == "Cancelled"
    assert result.status == BetStatus.CANCELLED

    state, result = evaluate_match_play(config.model_copy(update={"cancelled": False}), ledger)
    assert state.display == "All Square"
    assert result.status == BetStatus.PENDING
