"""Per-round score ledger.

Normalizes raw hole-by-hole gross scores into an ordered, queryable view with
net scores applied from the handicap allocator. Writes are last-write-wins
upserts keyed by (player, hole); every read goes through the explicit
``Scored | Unscored`` sum type so callers cannot mistake a missing score for
a zero.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from golfbets.config import get_settings
from golfbets.errors import ConfigurationError
from golfbets.handicap.allocator import (
    CourseHandicap,
    StrokeMode,
    allocate_strokes,
    course_handicap_for_tee,
    net_score,
    relative_handicaps,
)

from .models import (
    HoleEntry,
    HoleScore,
    Player,
    RoundSetup,
    Scored,
    ThreePuttEvent,
    Totals,
    Unscored,
    stableford_points,
)

logger = logging.getLogger(__name__)


class ScoreLedger:
    def __init__(self, setup: RoundSetup, scores: Iterable[HoleScore] = ()):
        self._setup = setup
        self._players: Dict[str, Player] = {}
        for player in setup.players:
            if player.id in self._players:
                raise ConfigurationError(f"duplicate player id {player.id!r}")
            self._players[player.id] = player
        if not self._players:
            raise ConfigurationError("round has no players")

        self._pars = {hole.number: hole.par for hole in setup.course.holes}
        self._handicaps = self._course_handicaps()
        self._strokes = self._allocate()
        self._scores: Dict[Tuple[str, int], HoleScore] = {}
        for score in scores:
            self.record(score)

    def _allowance(self) -> int:
        if self._setup.allowance_percent is not None:
            return self._setup.allowance_percent
        settings = get_settings()
        if self._setup.stroke_mode == StrokeMode.OFF_THE_LOW:
            return settings.match_play_allowance_percent
        return settings.default_allowance_percent

    def _course_handicaps(self) -> Dict[str, CourseHandicap]:
        setup = self._setup
        allowance = self._allowance()
        if setup.stroke_mode == StrokeMode.OFF_THE_LOW:
            # Allowance is applied to the difference, not the raw handicap.
            allowance = 100
        return {
            player_id: course_handicap_for_tee(
                player.handicap_index, setup.course, allowance_percent=allowance
            )
            for player_id, player in self._players.items()
        }

    def _allocate(self) -> Dict[str, Dict[int, int]]:
        values = {pid: hcp.value for pid, hcp in self._handicaps.items()}
        if self._setup.stroke_mode == StrokeMode.OFF_THE_LOW:
            values = relative_handicaps(values, allowance_percent=self._allowance())
        return {pid: allocate_strokes(value, self._setup.course) for pid, value in values.items()}

    # Setup accessors
    @property
    def setup(self) -> RoundSetup:
        return self._setup

    @property
    def players(self) -> List[Player]:
        return list(self._players.values())

    @property
    def player_ids(self) -> List[str]:
        return list(self._players)

    @property
    def hole_numbers(self) -> List[int]:
        return sorted(self._pars)

    @property
    def completed(self) -> bool:
        return self._setup.completed

    def player(self, player_id: str) -> Player:
        try:
            return self._players[player_id]
        except KeyError:
            raise ConfigurationError(f"unknown player {player_id!r}") from None

    def par(self, hole: int) -> int:
        try:
            return self._pars[hole]
        except KeyError:
            raise ConfigurationError(f"hole {hole} is not part of this course") from None

    def course_handicap(self, player_id: str) -> CourseHandicap:
        self.player(player_id)
        return self._handicaps[player_id]

    def strokes(self, player_id: str) -> Dict[int, int]:
        self.player(player_id)
        return dict(self._strokes[player_id])

    # Writes
    def record_score(
        self,
        player_id: str,
        hole: int,
        gross: int,
        *,
        putts: Optional[int] = None,
        penalties: Optional[int] = None,
    ) -> Scored:
        return self.record(
            HoleScore(
                player_id=player_id,
                hole=hole,
                gross=gross,
                putts=putts,
                penalties=penalties,
            )
        )

    def record(self, score: HoleScore) -> Scored:
        self.player(score.player_id)
        self.par(score.hole)
        if score.gross < 1:
            raise ConfigurationError(
                f"invalid gross {score.gross} for hole={score.hole} player={score.player_id}"
            )
        if score.putts is not None and not 0 <= score.putts <= score.gross:
            raise ConfigurationError(
                f"invalid putts {score.putts} for hole={score.hole} player={score.player_id}"
            )
        key = (score.player_id, score.hole)
        if key in self._scores:
            logger.debug("overwriting score for player=%s hole=%s", *key)
        self._scores[key] = score
        return self._scored(score)

    # Reads
    def score(self, player_id: str, hole: int) -> HoleEntry:
        par = self.par(hole)
        self.player(player_id)
        raw = self._scores.get((player_id, hole))
        if raw is None:
            return Unscored(hole=hole, par=par)
        return self._scored(raw)

    def _scored(self, raw: HoleScore) -> Scored:
        strokes = self._strokes[raw.player_id][raw.hole]
        return Scored(
            hole=raw.hole,
            par=self._pars[raw.hole],
            gross=raw.gross,
            strokes=strokes,
            net=net_score(raw.gross, strokes),
            putts=raw.putts,
            penalties=raw.penalties,
        )

    def net(self, player_id: str, hole: int) -> Optional[int]:
        entry = self.score(player_id, hole)
        return entry.net if isinstance(entry, Scored) else None

    def scores_through(self, player_id: str) -> List[Scored]:
        entries = (self.score(player_id, hole) for hole in self.hole_numbers)
        return [entry for entry in entries if isinstance(entry, Scored)]

    def has_scores(self, player_ids: Iterable[str], hole: int) -> bool:
        return all(isinstance(self.score(pid, hole), Scored) for pid in player_ids)

    def totals(self, player_id: str) -> Totals:
        scored = self.scores_through(player_id)
        gross = sum(entry.gross for entry in scored)
        net = sum(entry.net for entry in scored)
        par = sum(entry.par for entry in scored)
        return Totals(
            player_id=player_id,
            gross=gross,
            net=net,
            par=par,
            to_par=gross - par,
            net_to_par=net - par,
            thru=len(scored),
            stableford=sum(stableford_points(entry.par, entry.net) for entry in scored),
        )

    def three_putt_events(self) -> List[ThreePuttEvent]:
        """Snake events derived from recorded putts, in replay order.

        Within a hole the worse putter comes last so they end up holding.
        """

        order = {pid: index for index, pid in enumerate(self._players)}
        candidates = [
            (hole, raw.putts or 0, order[pid], pid)
            for (pid, hole), raw in self._scores.items()
            if raw.putts is not None and raw.putts >= 3
        ]
        candidates.sort()
        return [ThreePuttEvent(player_id=pid, hole=hole) for hole, _, _, pid in candidates]

    def snapshot(self) -> "ScoreLedger":
        """Independent copy for a single recompute tick."""

        clone = ScoreLedger.__new__(ScoreLedger)
        clone._setup = self._setup
        clone._players = dict(self._players)
        clone._pars = dict(self._pars)
        clone._handicaps = dict(self._handicaps)
        clone._strokes = {pid: dict(strokes) for pid, strokes in self._strokes.items()}
        clone._scores = dict(self._scores)
        return clone

    def raw_scores(self) -> List[HoleScore]:
        return [self._scores[key] for key in sorted(self._scores, key=lambda k: (k[1], k[0]))]


__all__ = ["ScoreLedger"]
