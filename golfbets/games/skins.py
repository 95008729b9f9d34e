"""Skins with carryovers.

Every entrant who posts a score on a hole antes ``hole_value`` into that
hole's pot. A single low net wins the whole pot; a tie carries every
contribution forward (scaled by the carryover multiplier) into the next hole.
The winner collects the pot and each contributor pays exactly what they put
in, so the game is zero-sum and no value is created or lost outside the
configured multiplier.

Carryover state is sequential: holes are always replayed from the first hole
forward, and evaluation halts at the first hole that cannot be settled yet.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from golfbets.config import ENFORCE_INVARIANTS
from golfbets.errors import ConfigurationError, InvariantViolation
from golfbets.money import ZERO, add_into, quantize, total
from golfbets.scores.ledger import ScoreLedger

from .configs import SkinsConfig
from .results import BetResult, BetStatus, GameKind, bet_result

logger = logging.getLogger(__name__)


class PotStatus(str, Enum):
    WON = "won"
    CARRIED = "carried"
    PUSHED = "pushed"
    NO_SCORES = "no_scores"
    PENDING = "pending"


class SkinsPot(BaseModel):
    hole: int
    status: PotStatus
    value_at_stake: Decimal = Field(default=ZERO, serialization_alias="valueAtStake")
    base_value: Decimal = Field(default=ZERO, serialization_alias="baseValue")
    carried_in: Decimal = Field(default=ZERO, serialization_alias="carriedIn")
    winner_id: Optional[str] = Field(default=None, serialization_alias="winnerId")
    winning_net: Optional[int] = Field(default=None, serialization_alias="winningNet")
    tied_players: List[str] = Field(default_factory=list, serialization_alias="tiedPlayers")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def carried_over(self) -> bool:
        return self.status == PotStatus.CARRIED


class SkinsResult(BaseModel):
    bet_id: str = Field(serialization_alias="betId")
    entrants: List[str]
    pots: List[SkinsPot] = Field(default_factory=list)
    winnings: Dict[str, Decimal] = Field(default_factory=dict)
    skins_won: Dict[str, int] = Field(default_factory=dict, serialization_alias="skinsWon")
    carryover_unresolved: Decimal = Field(
        default=ZERO, serialization_alias="carryoverUnresolved"
    )
    settlement: BetResult

    model_config = ConfigDict(populate_by_name=True, frozen=True)


def _entrants(config: SkinsConfig, ledger: ScoreLedger) -> List[str]:
    entrants = list(config.eligible_players) or ledger.player_ids
    for pid in entrants:
        ledger.player(pid)
    if len(set(entrants)) != len(entrants):
        raise ConfigurationError("skins entrants must be unique")
    if len(entrants) < 2:
        raise ConfigurationError("skins needs at least two entrants")
    return entrants


def evaluate_skins(config: SkinsConfig, ledger: ScoreLedger) -> SkinsResult:
    entrants = _entrants(config, ledger)
    if config.cancelled:
        return SkinsResult(
            bet_id=config.bet_id,
            entrants=entrants,
            settlement=bet_result(config.bet_id, GameKind.SKINS, BetStatus.CANCELLED),
        )

    hole_value = quantize(config.hole_value)
    carry: Dict[str, Decimal] = {}
    deltas: Dict[str, Decimal] = {}
    winnings: Dict[str, Decimal] = {}
    skins_won: Dict[str, int] = {}
    pots: List[SkinsPot] = []
    injected = ZERO
    paid_out = ZERO
    pending = False

    for hole in ledger.hole_numbers:
        if pending:
            pots.append(SkinsPot(hole=hole, status=PotStatus.PENDING))
            continue

        nets = {pid: ledger.net(pid, hole) for pid in entrants}
        scored = {pid: net for pid, net in nets.items() if net is not None}
        complete = len(scored) == len(entrants) or (ledger.completed and scored)
        if not complete:
            if ledger.completed:
                pots.append(SkinsPot(hole=hole, status=PotStatus.NO_SCORES))
                continue
            pending = True
            pots.append(SkinsPot(hole=hole, status=PotStatus.PENDING))
            continue

        carried_in = total(carry.values())
        contributions = dict(carry)
        add_into(contributions, {pid: hole_value for pid in scored})
        base_value = hole_value * len(scored)
        injected += base_value
        stake = total(contributions.values())

        low = min(scored.values())
        leaders = sorted(pid for pid, net in scored.items() if net == low)
        par = ledger.par(hole)
        birdie_ok = not config.birdies_only or low <= par - 1

        if len(leaders) == 1 and birdie_ok:
            winner = leaders[0]
            add_into(deltas, {winner: stake})
            add_into(deltas, {pid: -amount for pid, amount in contributions.items()})
            add_into(winnings, {winner: stake})
            skins_won[winner] = skins_won.get(winner, 0) + 1
            paid_out += stake
            carry = {}
            pots.append(
                SkinsPot(
                    hole=hole,
                    status=PotStatus.WON,
                    value_at_stake=stake,
                    base_value=base_value,
                    carried_in=carried_in,
                    winner_id=winner,
                    winning_net=low,
                )
            )
        elif config.carryovers:
            multiplier = config.carryover_multiplier
            carry = {pid: quantize(amount * multiplier) for pid, amount in contributions.items()}
            carried_out = total(carry.values())
            injected += carried_out - stake
            if ENFORCE_INVARIANTS and carried_out < stake:
                raise InvariantViolation(
                    "skins-carryover",
                    f"pot fell from {stake} to {carried_out} carrying past hole {hole}",
                )
            pots.append(
                SkinsPot(
                    hole=hole,
                    status=PotStatus.CARRIED,
                    value_at_stake=stake,
                    base_value=base_value,
                    carried_in=carried_in,
                    winning_net=low,
                    tied_players=leaders if len(leaders) > 1 else [],
                )
            )
        else:
            # No carryovers: the tied pot is refunded to its contributors.
            injected -= stake
            carry = {}
            pots.append(
                SkinsPot(
                    hole=hole,
                    status=PotStatus.PUSHED,
                    value_at_stake=stake,
                    base_value=base_value,
                    carried_in=carried_in,
                    winning_net=low,
                    tied_players=leaders,
                )
            )

    unresolved = total(carry.values())
    if ENFORCE_INVARIANTS and paid_out + unresolved != injected:
        raise InvariantViolation(
            "skins-conservation",
            f"won {paid_out} + carried {unresolved} != staked {injected}",
        )
    if ENFORCE_INVARIANTS and total(deltas.values()) != ZERO:
        raise InvariantViolation("skins-zero-sum", "skins deltas do not net to zero")

    if pending:
        status = BetStatus.IN_PROGRESS if any(
            pot.status != PotStatus.PENDING for pot in pots
        ) else BetStatus.PENDING
    elif paid_out == ZERO:
        status = BetStatus.PUSHED
    else:
        status = BetStatus.COMPLETED

    logger.debug(
        "skins %s: status=%s paid=%s unresolved=%s", config.bet_id, status.value, paid_out, unresolved
    )
    winners = sorted(skins_won, key=lambda pid: (-winnings[pid], pid))
    return SkinsResult(
        bet_id=config.bet_id,
        entrants=entrants,
        pots=pots,
        winnings=winnings,
        skins_won=skins_won,
        carryover_unresolved=unresolved,
        settlement=bet_result(
            config.bet_id,
            GameKind.SKINS,
            status,
            deltas,
            winner_ids=winners if status == BetStatus.COMPLETED else [],
        ),
    )


__all__ = ["PotStatus", "SkinsPot", "SkinsResult", "evaluate_skins"]
