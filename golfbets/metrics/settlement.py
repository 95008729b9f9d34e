from __future__ import annotations

from prometheus_client import Counter, Histogram

from . import REGISTRY

SETTLEMENTS_TOTAL = Counter(
    "golfbets_settlements_total",
    "Bets that reached a terminal status, by game and status",
    ["game", "status"],
    registry=REGISTRY,
)

BETS_FLAGGED_TOTAL = Counter(
    "golfbets_bets_flagged_total",
    "Bets excluded from net positions because evaluation failed",
    ["game", "reason"],
    registry=REGISTRY,
)

LEADERBOARD_BUILD_SECONDS = Histogram(
    "golfbets_leaderboard_build_seconds",
    "Time spent rebuilding a multi-game leaderboard (seconds)",
    buckets=(0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
    registry=REGISTRY,
)


def observe_settlement(game: str, status: str) -> None:
    SETTLEMENTS_TOTAL.labels(game=game, status=status).inc()


def observe_flagged(game: str, reason: str) -> None:
    BETS_FLAGGED_TOTAL.labels(game=game, reason=reason).inc()


def observe_build(seconds: float) -> None:
    LEADERBOARD_BUILD_SECONDS.observe(max(0.0, seconds))


__all__ = [
    "BETS_FLAGGED_TOTAL",
    "LEADERBOARD_BUILD_SECONDS",
    "SETTLEMENTS_TOTAL",
    "observe_build",
    "observe_flagged",
    "observe_settlement",
]
