"""Hole-by-hole match play evaluation.

Two sides (single players or best-ball teams) are compared on net score over
an ordered set of holes. The match is decided the moment the leader's margin
exceeds the holes remaining; holes after that are never evaluated for
settlement. A hole where either side has no score yet stops evaluation there
and leaves the match in progress.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from golfbets.config import ENFORCE_INVARIANTS
from golfbets.errors import ConfigurationError, InvariantViolation
from golfbets.scores.ledger import ScoreLedger
from golfbets.scores.models import Scored

from .configs import MatchPlayConfig, Side
from .results import BetResult, BetStatus, GameKind, bet_result, side_deltas


class MatchStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    DECIDED = "decided"
    HALVED = "halved"
    CANCELLED = "cancelled"


class HoleOutcome(BaseModel):
    hole: int
    side_a_net: int = Field(serialization_alias="sideANet")
    side_b_net: int = Field(serialization_alias="sideBNet")
    winner: Optional[str] = None
    margin_after: int = Field(serialization_alias="marginAfter")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class MatchState(BaseModel):
    side_a: str = Field(serialization_alias="sideA")
    side_b: str = Field(serialization_alias="sideB")
    status: MatchStatus = MatchStatus.IN_PROGRESS
    leader: Optional[str] = None
    margin: int = 0
    holes_played: int = Field(default=0, serialization_alias="holesPlayed")
    holes_remaining: int = Field(default=0, serialization_alias="holesRemaining")
    total_holes: int = Field(default=0, serialization_alias="totalHoles")
    pending_hole: Optional[int] = Field(default=None, serialization_alias="pendingHole")
    holes: List[HoleOutcome] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def winner(self) -> Optional[str]:
        return self.leader if self.status == MatchStatus.DECIDED else None

    @property
    def loser(self) -> Optional[str]:
        if self.status != MatchStatus.DECIDED:
            return None
        return self.side_b if self.leader == self.side_a else self.side_a

    @property
    def label(self) -> str:
        if self.status == MatchStatus.DECIDED:
            return "DECIDED"
        if self.status == MatchStatus.HALVED:
            return "HALVED"
        if self.status == MatchStatus.CANCELLED:
            return "CANCELLED"
        return "LEAD" if self.margin else "ALL_SQUARE"

    @property
    def dormie(self) -> bool:
        return (
            self.status == MatchStatus.IN_PROGRESS
            and self.margin > 0
            and self.margin == self.holes_remaining
        )

    @property
    def display(self) -> str:
        return format_match_state(self)


def side_net(ledger: ScoreLedger, side: Side, hole: int) -> Optional[int]:
    """Best-ball net for ``side`` on ``hole``; ``None`` if nobody has scored."""

    nets = [
        entry.net
        for entry in (ledger.score(pid, hole) for pid in side.player_ids)
        if isinstance(entry, Scored)
    ]
    return min(nets) if nets else None


def _validate(ledger: ScoreLedger, sides: Sequence[Side], holes: Sequence[int]) -> None:
    for side in sides:
        for pid in side.player_ids:
            ledger.player(pid)
    if not holes:
        raise ConfigurationError("match has no holes to play")
    if len(set(holes)) != len(holes):
        raise ConfigurationError("match holes must be unique")
    for hole in holes:
        ledger.par(hole)


def evaluate_match(
    ledger: ScoreLedger,
    side_a: Side,
    side_b: Side,
    holes: Sequence[int] | None = None,
    *,
    cancelled: bool = False,
) -> MatchState:
    scope = sorted(holes) if holes is not None else ledger.hole_numbers
    _validate(ledger, (side_a, side_b), scope)
    total = len(scope)

    if cancelled:
        return MatchState(
            side_a=side_a.id,
            side_b=side_b.id,
            status=MatchStatus.CANCELLED,
            holes_remaining=total,
            total_holes=total,
        )

    margin = 0  # positive: side A up
    played = 0
    outcomes: List[HoleOutcome] = []
    pending: Optional[int] = None
    status = MatchStatus.IN_PROGRESS

    for hole in scope:
        a_net = side_net(ledger, side_a, hole)
        b_net = side_net(ledger, side_b, hole)
        if a_net is None or b_net is None:
            pending = hole
            break

        winner: Optional[str] = None
        if a_net < b_net:
            margin += 1
            winner = side_a.id
        elif b_net < a_net:
            margin -= 1
            winner = side_b.id
        played += 1
        outcomes.append(
            HoleOutcome(
                hole=hole,
                side_a_net=a_net,
                side_b_net=b_net,
                winner=winner,
                margin_after=margin,
            )
        )

        if ENFORCE_INVARIANTS and abs(margin) > total:
            raise InvariantViolation(
                "match-margin", f"margin {abs(margin)} exceeds {total} holes"
            )
        if abs(margin) > total - played:
            status = MatchStatus.DECIDED
            break

    if status == MatchStatus.IN_PROGRESS and pending is None and played == total:
        status = MatchStatus.HALVED

    leader: Optional[str] = None
    if margin > 0:
        leader = side_a.id
    elif margin < 0:
        leader = side_b.id

    return MatchState(
        side_a=side_a.id,
        side_b=side_b.id,
        status=status,
        leader=leader,
        margin=abs(margin),
        holes_played=played,
        holes_remaining=total - played,
        total_holes=total,
        pending_hole=pending,
        holes=outcomes,
    )


def format_match_state(state: MatchState) -> str:
    if state.status == MatchStatus.CANCELLED:
        return "Cancelled"
    if state.status == MatchStatus.HALVED:
        return "Match Halved"
    if state.status == MatchStatus.DECIDED:
        if state.holes_remaining == 0:
            return f"{state.margin} UP"
        return f"{state.margin} & {state.holes_remaining}"
    if state.margin == 0:
        return "All Square"
    text = f"{state.margin} UP"
    return f"{text} (dormie)" if state.dormie else text


def match_status_to_bet_status(state: MatchState) -> BetStatus:
    if state.status == MatchStatus.DECIDED:
        return BetStatus.COMPLETED
    if state.status == MatchStatus.HALVED:
        return BetStatus.PUSHED
    if state.status == MatchStatus.CANCELLED:
        return BetStatus.CANCELLED
    return BetStatus.IN_PROGRESS if state.holes_played else BetStatus.PENDING


def settle_match(
    bet_id: str,
    game: GameKind,
    state: MatchState,
    side_a: Side,
    side_b: Side,
    stake: Decimal,
) -> BetResult:
    status = match_status_to_bet_status(state)
    if status != BetStatus.COMPLETED:
        return bet_result(bet_id, game, status)
    sides = {side_a.id: side_a, side_b.id: side_b}
    winner = sides[state.winner]  # type: ignore[index]
    loser = sides[state.loser]  # type: ignore[index]
    return bet_result(
        bet_id,
        game,
        status,
        side_deltas(winner.player_ids, loser.player_ids, stake),
        winner_ids=list(winner.player_ids),
        note=state.display,
    )


def evaluate_match_play(
    config: MatchPlayConfig, ledger: ScoreLedger
) -> tuple[MatchState, BetResult]:
    state = evaluate_match(
        ledger, config.side_a, config.side_b, config.holes, cancelled=config.cancelled
    )
    result = settle_match(
        config.bet_id, GameKind.MATCH_PLAY, state, config.side_a, config.side_b, config.stake
    )
    return state, result


__all__ = [
    "HoleOutcome",
    "MatchState",
    "MatchStatus",
    "evaluate_match",
    "evaluate_match_play",
    "format_match_state",
    "match_status_to_bet_status",
    "settle_match",
    "side_net",
]
