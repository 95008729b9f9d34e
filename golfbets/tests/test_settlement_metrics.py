from __future__ import annotations

from golfbets.games.configs import parse_bet_configs
from golfbets.leaderboard import build_leaderboard
from golfbets.metrics import REGISTRY
from golfbets.metrics.settlement import observe_build


def _sample(name: str, labels: dict | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


def test_flagged_bets_are_counted(make_ledger, telemetry_sink):
    labels = {"game": "skins", "reason": "configuration"}
    before = _sample("golfbets_bets_flagged_total", labels)

    bets = parse_bet_configs([{"game": "skins", "eligiblePlayers": ["alice", "zed"]}])
    board = build_leaderboard(make_ledger(), bets)

    assert board.flags
    assert _sample("golfbets_bets_flagged_total", labels) == before + 1
    flagged = [payload for name, payload in telemetry_sink if name == "bets.flagged"]
    assert flagged[0]["betId"] == "skins"
    assert flagged[0]["reason"] == "configuration"


def test_every_build_is_timed(make_ledger, telemetry_sink):
    before = _sample("golfbets_leaderboard_build_seconds_count")
    build_leaderboard(make_ledger(), [])
    assert _sample("golfbets_leaderboard_build_seconds_count") == before + 1

    builds = [payload for name, payload in telemetry_sink if name == "leaderboard.build_ms"]
    assert builds[0]["rows"] == 4
    assert builds[0]["flagged"] == 0


def test_observe_build_clamps_negative_durations():
    before = _sample("golfbets_leaderboard_build_seconds_sum")
    observe_build(-1.0)
    assert _sample("golfbets_leaderboard_build_seconds_sum") == before
