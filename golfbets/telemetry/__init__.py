"""Telemetry hooks for settlement events."""

from .events import (  # noqa: F401
    record_bet_flagged,
    record_leaderboard_build,
    record_settlement,
    set_settlement_telemetry_emitter,
)
