"""Output records shared by every game engine."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from golfbets.money import ZERO, quantize


class BetStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PUSHED = "pushed"
    CANCELLED = "cancelled"
    VOID = "void"


TERMINAL_STATUSES = frozenset(
    {BetStatus.COMPLETED, BetStatus.PUSHED, BetStatus.CANCELLED, BetStatus.VOID}
)


class GameKind(str, Enum):
    MATCH_PLAY = "match_play"
    SKINS = "skins"
    WOLF = "wolf"
    NASSAU = "nassau"
    PRESS = "press"
    SNAKE = "snake"
    MANUAL = "manual"


class BetResult(BaseModel):
    """Money view of one bet, as consumed by the aggregator.

    ``deltas`` holds the signed amount per player that counts towards the
    current net position: final amounts for terminal bets, provisional ones
    for bets still being played, nothing for bets that are only pending.
    """

    bet_id: str = Field(serialization_alias="betId")
    game: GameKind
    status: BetStatus
    winner_ids: List[str] = Field(default_factory=list, serialization_alias="winnerIds")
    deltas: Dict[str, Decimal] = Field(default_factory=dict)
    note: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def provisional(self) -> bool:
        return not self.terminal and any(value != ZERO for value in self.deltas.values())

    def amount_for(self, player_id: str) -> Decimal:
        return self.deltas.get(player_id, ZERO)


class SettlementEvent(BaseModel):
    bet_id: str = Field(serialization_alias="betId")
    game: GameKind
    status: BetStatus
    winner_ids: List[str] = Field(default_factory=list, serialization_alias="winnerIds")
    amount: Decimal = ZERO
    deltas: Dict[str, Decimal] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


def bet_result(
    bet_id: str,
    game: GameKind,
    status: BetStatus,
    deltas: Mapping[str, Decimal] | None = None,
    *,
    winner_ids: List[str] | None = None,
    note: str | None = None,
) -> BetResult:
    cleaned = {pid: quantize(value) for pid, value in sorted((deltas or {}).items())}
    return BetResult(
        bet_id=bet_id,
        game=game,
        status=status,
        winner_ids=list(winner_ids or []),
        deltas=cleaned,
        note=note,
    )


def settlement_event(result: BetResult) -> SettlementEvent:
    won = [value for value in result.deltas.values() if value > ZERO]
    return SettlementEvent(
        bet_id=result.bet_id,
        game=result.game,
        status=result.status,
        winner_ids=result.winner_ids,
        amount=sum(won, ZERO),
        deltas=result.deltas,
    )


def side_deltas(
    winners: List[str], losers: List[str], stake: Decimal
) -> Dict[str, Decimal]:
    """Every winner collects ``stake``, every loser pays it."""

    deltas: Dict[str, Decimal] = {}
    for pid in winners:
        deltas[pid] = deltas.get(pid, ZERO) + stake
    for pid in losers:
        deltas[pid] = deltas.get(pid, ZERO) - stake
    return deltas


__all__ = [
    "BetResult",
    "BetStatus",
    "GameKind",
    "SettlementEvent",
    "TERMINAL_STATUSES",
    "bet_result",
    "settlement_event",
    "side_deltas",
]
