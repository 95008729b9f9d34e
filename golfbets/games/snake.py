"""Snake: whoever three-putted last holds the snake and pays the group.

The tracker is a reducer over three-putt events replayed in hole order. A
corrected putt count on an earlier hole simply changes the event stream, and
the holder is rebuilt from the first event.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from golfbets.errors import ConfigurationError
from golfbets.money import ZERO, split_evenly
from golfbets.scores.ledger import ScoreLedger
from golfbets.scores.models import ThreePuttEvent

from .configs import SnakeConfig
from .results import BetResult, BetStatus, GameKind, bet_result


class SnakeStatus(str, Enum):
    PENDING = "pending"
    HOLDING = "holding"
    SETTLED = "settled"
    VOID = "void"
    CANCELLED = "cancelled"


class SnakeState(BaseModel):
    holder_id: Optional[str] = Field(default=None, serialization_alias="currentHolderId")
    last_hole: Optional[int] = Field(default=None, serialization_alias="holeNumber")
    transfers: int = 0
    pot_amount: Decimal = Field(default=ZERO, serialization_alias="potAmount")
    status: SnakeStatus = SnakeStatus.PENDING
    history: List[ThreePuttEvent] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SnakeResult(BaseModel):
    bet_id: str = Field(serialization_alias="betId")
    state: SnakeState
    settlement: BetResult

    model_config = ConfigDict(populate_by_name=True, frozen=True)


def apply_event(state: SnakeState, event: ThreePuttEvent, config: SnakeConfig) -> SnakeState:
    transfers = state.transfers + 1
    pot = config.pot_amount * transfers if config.escalating else config.pot_amount
    return state.model_copy(
        update={
            "holder_id": event.player_id,
            "last_hole": event.hole,
            "transfers": transfers,
            "pot_amount": pot,
            "status": SnakeStatus.HOLDING,
            "history": [*state.history, event],
        }
    )


def reduce_snake(config: SnakeConfig, events: Iterable[ThreePuttEvent]) -> SnakeState:
    """Replay ``events`` from the start; ties within a hole keep their given order."""

    state = SnakeState(pot_amount=config.pot_amount)
    for event in sorted(events, key=lambda item: item.hole):
        state = apply_event(state, event, config)
    return state


def snake_holes(ledger: ScoreLedger, segment: str) -> List[int]:
    if segment == "front":
        return [hole for hole in ledger.hole_numbers if hole <= 9]
    if segment == "back":
        return [hole for hole in ledger.hole_numbers if hole >= 10]
    return list(ledger.hole_numbers)


def _eligible(config: SnakeConfig, ledger: ScoreLedger) -> List[str]:
    players = config.eligible_players or ledger.player_ids
    for pid in players:
        ledger.player(pid)
    if len(set(players)) != len(players):
        raise ConfigurationError("snake players must be unique")
    if len(players) < 2:
        raise ConfigurationError("snake needs at least two players")
    return list(players)


def _segment_finished(ledger: ScoreLedger, players: Sequence[str], holes: Sequence[int]) -> bool:
    if ledger.completed:
        return True
    return all(ledger.has_scores(players, hole) for hole in holes)


def snake_deltas(state: SnakeState, players: Sequence[str]) -> Dict[str, Decimal]:
    if state.holder_id is None:
        return {}
    receivers = [pid for pid in players if pid != state.holder_id]
    deltas = split_evenly(state.pot_amount, receivers)
    deltas[state.holder_id] = -state.pot_amount
    return deltas


def evaluate_snake(
    config: SnakeConfig,
    ledger: ScoreLedger,
    events: Optional[Iterable[ThreePuttEvent]] = None,
) -> SnakeResult:
    """Evaluate the snake from explicit events, or from recorded putts.

    Explicit events naming a player outside the snake are rejected; derived
    events from non-entrants are ignored.
    """

    players = _eligible(config, ledger)
    holes = set(snake_holes(ledger, config.segment))
    if events is None:
        stream = [event for event in ledger.three_putt_events() if event.player_id in players]
    else:
        stream = list(events)
        for event in stream:
            if event.player_id not in players:
                raise ConfigurationError(f"{event.player_id!r} is not playing the snake")
            ledger.par(event.hole)
    stream = [event for event in stream if event.hole in holes]

    if config.cancelled:
        state = SnakeState(pot_amount=config.pot_amount, status=SnakeStatus.CANCELLED)
        return SnakeResult(
            bet_id=config.bet_id,
            state=state,
            settlement=bet_result(config.bet_id, GameKind.SNAKE, BetStatus.CANCELLED),
        )

    state = reduce_snake(config, stream)
    finished = _segment_finished(ledger, players, sorted(holes))

    if state.holder_id is None:
        status = BetStatus.VOID if finished else BetStatus.PENDING
        if finished:
            state = state.model_copy(update={"status": SnakeStatus.VOID})
        return SnakeResult(
            bet_id=config.bet_id,
            state=state,
            settlement=bet_result(
                config.bet_id, GameKind.SNAKE, status, note="no three-putts" if finished else None
            ),
        )

    deltas = snake_deltas(state, players)
    receivers = sorted(pid for pid, value in deltas.items() if value > ZERO)
    if finished:
        state = state.model_copy(update={"status": SnakeStatus.SETTLED})
        settlement = bet_result(
            config.bet_id, GameKind.SNAKE, BetStatus.COMPLETED, deltas, winner_ids=receivers
        )
    elif config.settlement == "running":
        settlement = bet_result(config.bet_id, GameKind.SNAKE, BetStatus.IN_PROGRESS, deltas)
    else:
        settlement = bet_result(config.bet_id, GameKind.SNAKE, BetStatus.IN_PROGRESS)
    return SnakeResult(bet_id=config.bet_id, state=state, settlement=settlement)


__all__ = [
    "SnakeResult",
    "SnakeState",
    "SnakeStatus",
    "apply_event",
    "evaluate_snake",
    "reduce_snake",
    "snake_deltas",
    "snake_holes",
]
