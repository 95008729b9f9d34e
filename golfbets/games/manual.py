"""Bets settled by an explicit ruling (closest to the pin, longest drive ...)."""

from __future__ import annotations

from typing import Iterable, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from golfbets.errors import ConfigurationError
from golfbets.scores.ledger import ScoreLedger

from .configs import ManualBetConfig
from .results import BetResult, BetStatus, GameKind, bet_result


class ManualResolution(BaseModel):
    bet_id: str = Field(validation_alias=AliasChoices("bet_id", "betId"))
    winner_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("winner_id", "winnerId")
    )
    tie: bool = False

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @model_validator(mode="after")
    def _winner_or_tie(self):
        if self.tie == (self.winner_id is not None):
            raise ValueError("a resolution names a winner or a tie, not both")
        return self


def find_resolution(
    bet_id: str, resolutions: Iterable[ManualResolution]
) -> Optional[ManualResolution]:
    matches = [item for item in resolutions if item.bet_id == bet_id]
    if len(matches) > 1:
        raise ConfigurationError(f"bet {bet_id!r} has {len(matches)} resolutions")
    return matches[0] if matches else None


def settle_manual(
    config: ManualBetConfig,
    resolution: Optional[ManualResolution],
    *,
    ledger: Optional[ScoreLedger] = None,
) -> BetResult:
    if len(set(config.participants)) != len(config.participants):
        raise ConfigurationError(f"bet {config.bet_id!r} lists a participant twice")
    if ledger is not None:
        for pid in config.participants:
            ledger.player(pid)
    if config.cancelled:
        return bet_result(config.bet_id, GameKind.MANUAL, BetStatus.CANCELLED)
    if resolution is None:
        return bet_result(config.bet_id, GameKind.MANUAL, BetStatus.PENDING)
    if resolution.tie:
        return bet_result(config.bet_id, GameKind.MANUAL, BetStatus.PUSHED, note=config.kind)

    winner = resolution.winner_id
    if winner not in config.participants:
        raise ConfigurationError(f"{winner!r} is not a participant in {config.bet_id!r}")
    losers = [pid for pid in config.participants if pid != winner]
    deltas = {pid: -config.amount for pid in losers}
    deltas[winner] = config.amount * len(losers)  # type: ignore[index]
    return bet_result(
        config.bet_id,
        GameKind.MANUAL,
        BetStatus.COMPLETED,
        deltas,
        winner_ids=[winner],  # type: ignore[list-item]
        note=config.kind,
    )


__all__ = ["ManualResolution", "find_resolution", "settle_manual"]
