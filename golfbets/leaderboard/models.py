from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from golfbets.games.configs import BetConfig
from golfbets.games.manual import ManualResolution
from golfbets.games.nassau import ManualPress
from golfbets.games.results import BetResult, SettlementEvent, settlement_event
from golfbets.games.wolf import WolfDecision
from golfbets.money import ZERO
from golfbets.scores.models import HoleScore, RoundSetup, ThreePuttEvent


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class PrimaryFormat(str, Enum):
    STROKE_NET = "stroke_net"
    STROKE_GROSS = "stroke_gross"
    STABLEFORD = "stableford"


class RoundSnapshot(BaseModel):
    """Everything the aggregator needs for one recompute tick."""

    setup: RoundSetup
    scores: List[HoleScore] = Field(default_factory=list)
    bets: List[BetConfig] = Field(default_factory=list)
    # Per-bet inputs keyed by bet id.
    wolf_decisions: Dict[str, List[WolfDecision]] = Field(
        default_factory=dict, validation_alias=_alias("wolf_decisions", "wolfDecisions")
    )
    manual_presses: Dict[str, List[ManualPress]] = Field(
        default_factory=dict, validation_alias=_alias("manual_presses", "manualPresses")
    )
    cancelled_presses: List[str] = Field(
        default_factory=list, validation_alias=_alias("cancelled_presses", "cancelledPresses")
    )
    # When omitted for a snake bet, events are derived from recorded putts.
    snake_events: Dict[str, List[ThreePuttEvent]] = Field(
        default_factory=dict, validation_alias=_alias("snake_events", "snakeEvents")
    )
    manual_resolutions: List[ManualResolution] = Field(
        default_factory=list, validation_alias=_alias("manual_resolutions", "manualResolutions")
    )
    primary_format: PrimaryFormat = Field(
        default=PrimaryFormat.STROKE_NET,
        validation_alias=_alias("primary_format", "primaryFormat"),
    )

    model_config = ConfigDict(populate_by_name=True)


class BetFlag(BaseModel):
    bet_id: str = Field(serialization_alias="betId")
    game: str
    reason: str
    message: str

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class MultiGameScore(BaseModel):
    player_id: str = Field(serialization_alias="playerId")
    player_name: str = Field(serialization_alias="playerName")
    primary_game_position: int = Field(serialization_alias="primaryGamePosition")
    primary_game_score: int = Field(serialization_alias="primaryGameScore")
    thru: int = 0
    gross: int = 0
    net: int = 0
    match_winnings: Decimal = Field(default=ZERO, serialization_alias="matchWinnings")
    nassau_winnings: Decimal = Field(default=ZERO, serialization_alias="nassauWinnings")
    press_winnings: Decimal = Field(default=ZERO, serialization_alias="pressWinnings")
    skins_winnings: Decimal = Field(default=ZERO, serialization_alias="skinsWinnings")
    wolf_winnings: Decimal = Field(default=ZERO, serialization_alias="wolfWinnings")
    snake_winnings: Decimal = Field(default=ZERO, serialization_alias="snakeWinnings")
    manual_winnings: Decimal = Field(default=ZERO, serialization_alias="manualWinnings")
    total_winnings: Decimal = Field(default=ZERO, serialization_alias="totalWinnings")
    total_owed: Decimal = Field(default=ZERO, serialization_alias="totalOwed")
    net_position: Decimal = Field(default=ZERO, serialization_alias="netPosition")
    bets: Dict[str, Decimal] = Field(default_factory=dict)
    in_progress_bets: List[str] = Field(
        default_factory=list, serialization_alias="inProgressBets"
    )
    needs_attention: List[str] = Field(
        default_factory=list, serialization_alias="needsAttention"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Leaderboard(BaseModel):
    round_id: str = Field(serialization_alias="roundId")
    primary_format: PrimaryFormat = Field(serialization_alias="primaryFormat")
    completed: bool = False
    currency: str = "USD"
    rows: List[MultiGameScore] = Field(default_factory=list)
    results: List[BetResult] = Field(default_factory=list)
    flags: List[BetFlag] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def row(self, player_id: str) -> Optional[MultiGameScore]:
        for row in self.rows:
            if row.player_id == player_id:
                return row
        return None

    def result(self, bet_id: str) -> Optional[BetResult]:
        for result in self.results:
            if result.bet_id == bet_id:
                return result
        return None

    def settlement_events(self) -> List[SettlementEvent]:
        return [settlement_event(result) for result in self.results if result.terminal]

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


__all__ = [
    "BetFlag",
    "Leaderboard",
    "MultiGameScore",
    "PrimaryFormat",
    "RoundSnapshot",
]
