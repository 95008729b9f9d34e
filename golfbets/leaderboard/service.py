"""Recompute-on-mutation service.

Callers record a score (or change a bet) and then call :meth:`recompute`.
The service rebuilds the leaderboard from scratch and announces each bet the
first time it reaches a terminal status.

Announcements are remembered per round. Once a round is complete and every
bet in it is terminal, the round is finished; only the most recently touched
``finished_rounds_retained`` finished rounds are remembered, older ones are
dropped. Rounds still in play are never dropped.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from functools import lru_cache
from threading import Lock
from typing import Dict, List, Optional, Set, Tuple

from golfbets.config import get_settings
from golfbets.games.results import SettlementEvent
from golfbets.metrics.settlement import observe_settlement
from golfbets.telemetry.events import record_settlement

from .aggregator import build_from_snapshot
from .models import Leaderboard, RoundSnapshot

logger = logging.getLogger(__name__)

_Fingerprint = Tuple[str, Tuple[Tuple[str, str], ...]]


def _round_finished(board: Leaderboard) -> bool:
    return board.completed and not board.flags and all(result.terminal for result in board.results)


class LeaderboardService:
    def __init__(self, finished_rounds_retained: Optional[int] = None) -> None:
        if finished_rounds_retained is None:
            finished_rounds_retained = get_settings().finished_rounds_retained
        self._retained = finished_rounds_retained
        self._announced: "OrderedDict[str, Dict[str, _Fingerprint]]" = OrderedDict()
        self._finished: Set[str] = set()
        self._lock = Lock()

    def recompute(self, snapshot: RoundSnapshot) -> Tuple[Leaderboard, List[SettlementEvent]]:
        board = build_from_snapshot(snapshot)
        fresh: List[SettlementEvent] = []
        with self._lock:
            announced = self._announced.setdefault(board.round_id, {})
            self._announced.move_to_end(board.round_id)
            for event in board.settlement_events():
                fingerprint = (
                    event.status.value,
                    tuple((pid, str(value)) for pid, value in event.deltas.items()),
                )
                if announced.get(event.bet_id) == fingerprint:
                    continue
                if event.bet_id in announced:
                    logger.info("settlement for %s changed after a correction", event.bet_id)
                announced[event.bet_id] = fingerprint
                fresh.append(event)
            if _round_finished(board):
                self._finished.add(board.round_id)
            else:
                self._finished.discard(board.round_id)
            self._evict_finished()
        for event in fresh:
            observe_settlement(event.game.value, event.status.value)
            record_settlement(board.round_id, event)
        return board, fresh

    def _evict_finished(self) -> None:
        excess = len(self._finished) - self._retained
        for round_id in list(self._announced):
            if excess <= 0:
                break
            if round_id in self._finished:
                del self._announced[round_id]
                self._finished.discard(round_id)
                excess -= 1
                logger.debug("forgot announcements for finished round %s", round_id)

    def tracked_rounds(self) -> List[str]:
        with self._lock:
            return list(self._announced)

    def reset(self, round_id: str | None = None) -> None:
        with self._lock:
            if round_id is None:
                self._announced.clear()
                self._finished.clear()
                return
            self._announced.pop(round_id, None)
            self._finished.discard(round_id)


@lru_cache(maxsize=1)
def get_leaderboard_service() -> LeaderboardService:
    return LeaderboardService()


__all__ = ["LeaderboardService", "get_leaderboard_service"]
