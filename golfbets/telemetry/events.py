"""Telemetry helpers for settlement lifecycle instrumentation."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, MutableMapping, Optional

from golfbets.games.results import SettlementEvent

SettlementTelemetryEmitter = Callable[[str, Mapping[str, object]], None]

_emitter: Optional[SettlementTelemetryEmitter] = None
_logger = logging.getLogger("golfbets.telemetry.events")


def set_settlement_telemetry_emitter(candidate: SettlementTelemetryEmitter | None) -> None:
    """Register the sink that receives settlement notifications."""

    global _emitter
    _emitter = candidate if callable(candidate) else None


def _safe_emit(event: str, payload: MutableMapping[str, object]) -> None:
    if not _emitter:
        _logger.debug("telemetry emitter not configured for event %s", event)
        return
    try:
        _emitter(event, dict(payload))
    except Exception:  # pragma: no cover
        _logger.exception("failed to emit telemetry event %s", event)


def record_settlement(round_id: str, event: SettlementEvent) -> None:
    payload: Dict[str, object] = {
        "roundId": round_id,
        "ts": _now_ms(),
        **event.model_dump(mode="json", by_alias=True),
    }
    _safe_emit("bets.settled", payload)


def record_bet_flagged(
    round_id: str, bet_id: str, game: str, *, reason: str, message: str | None = None
) -> None:
    payload: Dict[str, object] = {
        "roundId": round_id,
        "betId": bet_id,
        "game": game,
        "reason": reason,
        "ts": _now_ms(),
    }
    if message:
        payload["message"] = message
    _safe_emit("bets.flagged", payload)


def record_leaderboard_build(
    round_id: str, duration_ms: float, *, rows: int | None = None, flagged: int = 0
) -> None:
    payload: Dict[str, object] = {
        "roundId": round_id,
        "durationMs": int(max(0, round(duration_ms))),
        "flagged": int(flagged),
        "ts": _now_ms(),
    }
    if rows is not None:
        payload["rows"] = int(rows)
    _safe_emit("leaderboard.build_ms", payload)


def _now_ms() -> int:
    from time import time

    return int(time() * 1000)


__all__ = [
    "set_settlement_telemetry_emitter",
    "record_bet_flagged",
    "record_leaderboard_build",
    "record_settlement",
]
