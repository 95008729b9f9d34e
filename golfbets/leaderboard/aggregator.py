"""Multi-game aggregation: one net financial position per player.

The aggregator is a pure projection over a ledger snapshot and the round's
bet configurations. Each bet is evaluated by its engine; a bet whose
evaluation fails is left out of every net position and flagged instead, so a
single bad bet never corrupts the whole board.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from golfbets.config import get_settings
from golfbets.errors import ConfigurationError, InvariantViolation
from golfbets.games.configs import (
    BetConfig,
    ManualBetConfig,
    MatchPlayConfig,
    NassauConfig,
    SkinsConfig,
    SnakeConfig,
    WolfConfig,
)
from golfbets.games.manual import ManualResolution, find_resolution, settle_manual
from golfbets.games.match_play import evaluate_match_play
from golfbets.games.nassau import ManualPress, evaluate_nassau
from golfbets.games.results import BetResult, GameKind
from golfbets.games.skins import evaluate_skins
from golfbets.games.snake import evaluate_snake
from golfbets.games.wolf import WolfDecision, evaluate_wolf
from golfbets.metrics.settlement import observe_build, observe_flagged
from golfbets.money import ZERO, quantize, total
from golfbets.scores.ledger import ScoreLedger
from golfbets.scores.models import ThreePuttEvent
from golfbets.telemetry.events import record_bet_flagged, record_leaderboard_build

from .models import BetFlag, Leaderboard, MultiGameScore, PrimaryFormat, RoundSnapshot

logger = logging.getLogger(__name__)

_WINNINGS_FIELD = {
    GameKind.MATCH_PLAY: "match_winnings",
    GameKind.NASSAU: "nassau_winnings",
    GameKind.PRESS: "press_winnings",
    GameKind.SKINS: "skins_winnings",
    GameKind.WOLF: "wolf_winnings",
    GameKind.SNAKE: "snake_winnings",
    GameKind.MANUAL: "manual_winnings",
}

_FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)


def evaluate_bet(
    config: BetConfig,
    ledger: ScoreLedger,
    *,
    wolf_decisions: Sequence[WolfDecision] = (),
    manual_presses: Sequence[ManualPress] = (),
    cancelled_presses: Iterable[str] = (),
    snake_events: Optional[Sequence[ThreePuttEvent]] = None,
    manual_resolutions: Sequence[ManualResolution] = (),
) -> List[BetResult]:
    """Evaluate one bet; Nassau yields one result per segment and press."""

    if isinstance(config, MatchPlayConfig):
        _state, result = evaluate_match_play(config, ledger)
        return [result]
    if isinstance(config, SkinsConfig):
        return [evaluate_skins(config, ledger).settlement]
    if isinstance(config, WolfConfig):
        return [evaluate_wolf(config, ledger, wolf_decisions).settlement]
    if isinstance(config, NassauConfig):
        nassau = evaluate_nassau(config, ledger, manual_presses, cancelled_presses)
        if config.cancelled:
            return [nassau.settlement]
        return [*nassau.segment_settlements, *nassau.press_settlements]
    if isinstance(config, SnakeConfig):
        return [evaluate_snake(config, ledger, snake_events).settlement]
    if isinstance(config, ManualBetConfig):
        resolution = find_resolution(config.bet_id, manual_resolutions)
        return [settle_manual(config, resolution, ledger=ledger)]
    raise ConfigurationError(f"unsupported bet configuration {type(config).__name__}")


def bet_participants(config: BetConfig, ledger: ScoreLedger) -> List[str]:
    if isinstance(config, (MatchPlayConfig, NassauConfig)):
        return config.player_ids
    if isinstance(config, (SkinsConfig, SnakeConfig)):
        return list(config.eligible_players or ledger.player_ids)
    if isinstance(config, WolfConfig):
        return list(config.players)
    return list(config.participants)


def _primary_key(
    ledger: ScoreLedger, player_id: str, primary: PrimaryFormat
) -> Tuple[object, ...]:
    totals = ledger.totals(player_id)
    player = ledger.player(player_id)
    if primary == PrimaryFormat.STABLEFORD:
        score = -totals.stableford
    elif primary == PrimaryFormat.STROKE_GROSS:
        score = totals.to_par
    else:
        score = totals.net_to_par
    tee_time = player.tee_time or _FAR_FUTURE
    if tee_time.tzinfo is None:
        tee_time = tee_time.replace(tzinfo=timezone.utc)
    return (
        totals.thru == 0,
        score,
        ledger.course_handicap(player_id).exact,
        tee_time,
        player_id,
    )


def primary_score(ledger: ScoreLedger, player_id: str, primary: PrimaryFormat) -> int:
    totals = ledger.totals(player_id)
    if primary == PrimaryFormat.STABLEFORD:
        return totals.stableford
    if primary == PrimaryFormat.STROKE_GROSS:
        return totals.to_par
    return totals.net_to_par


def rank_players(ledger: ScoreLedger, primary: PrimaryFormat) -> List[str]:
    """Unique order: score, then lower handicap, earlier tee time, player id."""

    return sorted(ledger.player_ids, key=lambda pid: _primary_key(ledger, pid, primary))


def build_leaderboard(
    ledger: ScoreLedger,
    bets: Sequence[BetConfig],
    *,
    primary_format: PrimaryFormat = PrimaryFormat.STROKE_NET,
    wolf_decisions: Optional[Mapping[str, Sequence[WolfDecision]]] = None,
    manual_presses: Optional[Mapping[str, Sequence[ManualPress]]] = None,
    cancelled_presses: Iterable[str] = (),
    snake_events: Optional[Mapping[str, Sequence[ThreePuttEvent]]] = None,
    manual_resolutions: Sequence[ManualResolution] = (),
) -> Leaderboard:
    started = time.perf_counter()
    view = ledger.snapshot()
    round_id = view.setup.round_id
    cancelled = list(cancelled_presses)
    wolf_decisions = wolf_decisions or {}
    manual_presses = manual_presses or {}
    snake_events = snake_events or {}

    seen: set[str] = set()
    results: List[BetResult] = []
    flags: List[BetFlag] = []
    attention: Dict[str, List[str]] = {}
    participants: Dict[str, List[str]] = {}

    for config in bets:
        if config.bet_id in seen:
            raise ConfigurationError(f"duplicate bet id {config.bet_id!r}")
        seen.add(config.bet_id)
        try:
            produced = evaluate_bet(
                config,
                view,
                wolf_decisions=wolf_decisions.get(config.bet_id, ()),
                manual_presses=manual_presses.get(config.bet_id, ()),
                cancelled_presses=cancelled,
                snake_events=snake_events.get(config.bet_id),
                manual_resolutions=manual_resolutions,
            )
        except (ConfigurationError, InvariantViolation) as exc:
            reason = getattr(exc, "invariant", "configuration")
            logger.warning("bet %s (%s) needs attention: %s", config.bet_id, config.game, exc)
            observe_flagged(config.game, reason)
            record_bet_flagged(round_id, config.bet_id, config.game, reason=reason, message=str(exc))
            flags.append(
                BetFlag(bet_id=config.bet_id, game=config.game, reason=reason, message=str(exc))
            )
            for pid in _safe_participants(config, view):
                attention.setdefault(pid, []).append(config.bet_id)
            continue
        for result in produced:
            participants[result.bet_id] = bet_participants(config, view)
        results.extend(produced)

    rows = _rows(view, results, participants, attention, primary_format)
    if sum((row.net_position for row in rows), ZERO) != total(
        total(result.deltas.values()) for result in results
    ):
        raise InvariantViolation("net-position", "row totals differ from bet deltas")

    board = Leaderboard(
        round_id=round_id,
        primary_format=primary_format,
        completed=view.completed,
        currency=get_settings().currency,
        rows=rows,
        results=results,
        flags=flags,
    )
    elapsed = time.perf_counter() - started
    observe_build(elapsed)
    record_leaderboard_build(round_id, elapsed * 1000.0, rows=len(rows), flagged=len(flags))
    logger.debug(
        "rebuilt leaderboard %s: %d bets, %d flagged", round_id, len(results), len(flags)
    )
    return board


def _safe_participants(config: BetConfig, ledger: ScoreLedger) -> List[str]:
    known = set(ledger.player_ids)
    return [pid for pid in bet_participants(config, ledger) if pid in known]


def _rows(
    ledger: ScoreLedger,
    results: Sequence[BetResult],
    participants: Mapping[str, List[str]],
    attention: Mapping[str, List[str]],
    primary: PrimaryFormat,
) -> List[MultiGameScore]:
    rows: List[MultiGameScore] = []
    for position, pid in enumerate(rank_players(ledger, primary), start=1):
        totals = ledger.totals(pid)
        buckets: Dict[str, Decimal] = {field: ZERO for field in _WINNINGS_FIELD.values()}
        per_bet: Dict[str, Decimal] = {}
        in_progress: List[str] = []
        for result in results:
            if not result.terminal and pid in participants.get(result.bet_id, ()):
                in_progress.append(result.bet_id)
            if pid not in result.deltas:
                continue
            amount = result.amount_for(pid)
            buckets[_WINNINGS_FIELD[result.game]] += amount
            per_bet[result.bet_id] = amount
        won = total(value for value in per_bet.values() if value > ZERO)
        owed = total(-value for value in per_bet.values() if value < ZERO)
        rows.append(
            MultiGameScore(
                player_id=pid,
                player_name=ledger.player(pid).name,
                primary_game_position=position,
                primary_game_score=primary_score(ledger, pid, primary),
                thru=totals.thru,
                gross=totals.gross,
                net=totals.net,
                total_winnings=quantize(won),
                total_owed=quantize(owed),
                net_position=quantize(won - owed),
                bets=dict(sorted(per_bet.items())),
                in_progress_bets=sorted(in_progress),
                needs_attention=sorted(attention.get(pid, [])),
                **{field: quantize(value) for field, value in buckets.items()},
            )
        )
    return rows


def build_from_snapshot(snapshot: RoundSnapshot) -> Leaderboard:
    ledger = ScoreLedger(snapshot.setup, snapshot.scores)
    return build_leaderboard(
        ledger,
        snapshot.bets,
        primary_format=snapshot.primary_format,
        wolf_decisions=snapshot.wolf_decisions,
        manual_presses=snapshot.manual_presses,
        cancelled_presses=snapshot.cancelled_presses,
        snake_events=snapshot.snake_events,
        manual_resolutions=snapshot.manual_resolutions,
    )


__all__ = [
    "bet_participants",
    "build_from_snapshot",
    "build_leaderboard",
    "evaluate_bet",
    "primary_score",
    "rank_players",
]
