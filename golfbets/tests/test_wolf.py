from __future__ import annotations

from decimal import Decimal

import pytest

from golfbets.errors import ConfigurationError
from golfbets.games.configs import WolfConfig
from golfbets.games.results import BetStatus
from golfbets.games.wolf import WolfDecision, WolfOutcome, WolfRule, evaluate_wolf, wolf_for_hole

PLAYERS = ["alice", "bob", "carol", "dave"]


def _score_hole(ledger, hole, nets):
    for pid, gross in zip(PLAYERS, nets):
        ledger.record_score(pid, hole, gross)


def test_wolf_rotates_through_tee_order():
    config = WolfConfig(players=PLAYERS)
    assert [wolf_for_hole(config, index) for index in range(5)] == [
        "alice",
        "bob",
        "carol",
        "dave",
        "alice",
    ]
    custom = WolfConfig(players=PLAYERS, tee_order="custom", wolf_order=["dave", "carol"])
    assert wolf_for_hole(custom, 0) == "dave"
    assert wolf_for_hole(custom, 3) == "carol"


def test_lone_wolf_win_splits_loss_by_largest_remainder(make_ledger):
    ledger = make_ledger(PLAYERS)
    _score_hole(ledger, 1, [4, 5, 5, 6])

    result = evaluate_wolf(WolfConfig(players=PLAYERS), ledger, [WolfDecision(hole=1)])
    hole = result.holes[0]
    assert hole.rule == WolfRule.LONE
    assert hole.lone_wolf
    assert hole.outcome == WolfOutcome.WOLF_WIN
    assert hole.points == {
        "alice": Decimal("4.00"),
        "bob": Decimal("-1.34"),
        "carol": Decimal("-1.33"),
        "dave": Decimal("-1.33"),
    }
    assert sum(hole.points.values()) == 0


def test_partnered_hole_pays_each_side_member(make_ledger):
    ledger = make_ledger(PLAYERS)
    _score_hole(ledger, 2, [5, 4, 5, 5])

    decision = WolfDecision.model_validate({"hole": 2, "wolfId": "bob", "partnerId": "dave"})
    result = evaluate_wolf(WolfConfig(players=PLAYERS), ledger, [decision])
    hole = result.holes[1]
    assert hole.wolf_id == "bob"
    assert hole.rule == WolfRule.PARTNERED
    assert hole.points == {
        "alice": Decimal("-2.00"),
        "bob": Decimal("2.00"),
        "carol": Decimal("-2.00"),
        "dave": Decimal("2.00"),
    }


def test_blind_wolf_scores_stolen_points(make_ledger):
    ledger = make_ledger(PLAYERS)
    _score_hole(ledger, 3, [4, 4, 5, 4])

    result = evaluate_wolf(
        WolfConfig(players=PLAYERS), ledger, [WolfDecision(hole=3, blind=True)]
    )
    hole = result.holes[2]
    assert hole.rule == WolfRule.BLIND
    assert hole.outcome == WolfOutcome.OPPONENTS_WIN
    assert hole.points["carol"] == Decimal("-3.00")
    assert hole.points["alice"] == Decimal("1.00")


def test_hole_without_decision_stays_pending(make_ledger):
    ledger = make_ledger(PLAYERS)
    _score_hole(ledger, 1, [4, 4, 4, 4])

    result = evaluate_wolf(WolfConfig(players=PLAYERS), ledger)
    assert result.holes[0].outcome == WolfOutcome.PENDING
    assert result.settlement.status == BetStatus.PENDING
    assert result.settlement.deltas == {}


def test_payout_multiplier_converts_points_to_money(make_ledger):
    ledger = make_ledger(PLAYERS)
    _score_hole(ledger, 1, [4, 5, 5, 6])

    config = WolfConfig(players=PLAYERS, payout_multiplier=Decimal("0.5"))
    result = evaluate_wolf(config, ledger, [WolfDecision(hole=1)])
    assert result.points["alice"] == Decimal("4.00")
    assert result.settlement.status == BetStatus.IN_PROGRESS
    assert result.settlement.deltas == {
        "alice": Decimal("2.00"),
        "bob": Decimal("-0.67"),
        "carol": Decimal("-0.66"),
        "dave": Decimal("-0.67"),
    }


def test_money_follows_each_players_points(make_ledger):
    ledger = make_ledger(PLAYERS)
    _score_hole(ledger, 1, [4, 5, 5, 6])

    config = WolfConfig(players=PLAYERS, payout_multiplier=Decimal("3"))
    result = evaluate_wolf(config, ledger, [WolfDecision(hole=1)])
    hole = result.holes[0]
    assert hole.points["bob"] == Decimal("-1.34")
    assert hole.money == {
        "alice": Decimal("12.00"),
        "bob": Decimal("-4.02"),
        "carol": Decimal("-3.99"),
        "dave": Decimal("-3.99"),
    }
    assert result.settlement.deltas == hole.money


def test_turd_variant_forces_worst_tee_shot_as_partner(make_ledger):
    ledger = make_ledger(PLAYERS)
    _score_hole(ledger, 1, [4, 5, 4, 5])

    config = WolfConfig(players=PLAYERS, variant="turd")
    result = evaluate_wolf(config, ledger, [WolfDecision(hole=1, worst_tee_shot_id="carol")])
    hole = result.holes[0]
    assert hole.rule == WolfRule.TURD_PARTNER
    assert hole.partner_id == "carol"
    assert hole.outcome == WolfOutcome.WOLF_WIN


def test_turd_worst_score_penalty_is_paid_to_the_rest(make_ledger):
    ledger = make_ledger(PLAYERS)
    _score_hole(ledger, 1, [4, 4, 4, 6])

    config = WolfConfig(players=PLAYERS, variant="turd", turd_mode="worst_score")
    result = evaluate_wolf(config, ledger, [WolfDecision(hole=1, partner_id="bob")])
    hole = result.holes[0]
    assert hole.outcome == WolfOutcome.TIE
    assert hole.turd_player_id == "dave"
    assert hole.points == {
        "alice": Decimal("0.67"),
        "bob": Decimal("0.67"),
        "carol": Decimal("0.66"),
        "dave": Decimal("-2.00"),
    }


def test_tie_points_make_the_hole_non_zero_sum(make_ledger):
    ledger = make_ledger(PLAYERS)
    _score_hole(ledger, 1, [4, 4, 4, 4])

    config = WolfConfig(players=PLAYERS, tie_points=Decimal("1"))
    result = evaluate_wolf(config, ledger, [WolfDecision(hole=1, partner_id="bob")])
    assert sum(result.holes[0].points.values()) == Decimal("4.00")


@pytest.mark.parametrize(
    "decision",
    [
        WolfDecision(hole=1, wolf_id="bob"),
        WolfDecision(hole=1, partner_id="alice"),
        WolfDecision(hole=1, partner_id="zed"),
        WolfDecision(hole=1, partner_id="bob", blind=True),
    ],
)
def test_conflicting_decisions_are_rejected(make_ledger, decision):
    ledger = make_ledger(PLAYERS)
    with pytest.raises(ConfigurationError):
        evaluate_wolf(WolfConfig(players=PLAYERS), ledger, [decision])


def test_full_round_is_zero_sum_and_completed(make_ledger):
    ledger = make_ledger(PLAYERS)
    decisions = []
    for hole in range(1, 19):
        nets = [4, 4, 4, 4]
        nets[hole % 4] = 3
        _score_hole(ledger, hole, nets)
        partner = None if hole % 3 == 0 else PLAYERS[(hole + 1) % 4]
        decisions.append(WolfDecision(hole=hole, partner_id=partner))

    result = evaluate_wolf(WolfConfig(players=PLAYERS), ledger, decisions)
    assert result.settlement.status == BetStatus.COMPLETED
    for hole in result.holes:
        assert sum(hole.points.values()) == 0
    assert sum(result.settlement.deltas.values()) == 0


def test_wolf_requires_four_distinct_players():
    with pytest.raises(ValueError):
        WolfConfig(players=["alice", "bob", "carol"])
    with pytest.raises(ValueError):
        WolfConfig(players=["alice", "bob", "carol", "carol"])
