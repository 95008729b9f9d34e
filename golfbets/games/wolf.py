"""Wolf and Wolf-Turd.

The wolf rotates through the four players hole by hole (or follows an
explicit order). Each hole the wolf either takes one partner for a 2v2 best
ball, or plays alone against the other three's best ball. Points are
accumulated per player; a hole's money is its points times the payout
multiplier, rounded to cents without losing or inventing a cent.
Every hole records which rule fired so the scorecard can explain itself.

Uneven splits (a lone wolf's points over three opponents) use largest
remainder allocation at 0.01 resolution in tee order, so a hole never loses
or invents a fraction of a point.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from golfbets.config import ENFORCE_INVARIANTS
from golfbets.errors import ConfigurationError, InvariantViolation
from golfbets.money import ZERO, add_into, quantize, scale_amounts, split_evenly, total
from golfbets.scores.ledger import ScoreLedger

from .configs import WolfConfig
from .results import BetResult, BetStatus, GameKind, bet_result


class WolfRule(str, Enum):
    PARTNERED = "partnered"
    LONE = "lone"
    BLIND = "blind"
    TURD_PARTNER = "turd_partner"


class WolfOutcome(str, Enum):
    WOLF_WIN = "wolf_win"
    OPPONENTS_WIN = "opponents_win"
    TIE = "tie"
    PENDING = "pending"


class WolfDecision(BaseModel):
    hole: int
    wolf_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("wolf_id", "wolfId")
    )
    partner_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("partner_id", "partnerId")
    )
    blind: bool = False
    worst_tee_shot_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("worst_tee_shot_id", "worstTeeShotId")
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class WolfHoleResult(BaseModel):
    hole: int
    wolf_id: str = Field(serialization_alias="wolfPlayerId")
    partner_id: Optional[str] = Field(default=None, serialization_alias="partnerPlayerId")
    rule: Optional[WolfRule] = None
    outcome: WolfOutcome = WolfOutcome.PENDING
    wolf_team_net: Optional[int] = Field(default=None, serialization_alias="wolfTeamNet")
    opponents_net: Optional[int] = Field(default=None, serialization_alias="opponentsNet")
    turd_player_id: Optional[str] = Field(default=None, serialization_alias="turdPlayerId")
    points: Dict[str, Decimal] = Field(default_factory=dict, serialization_alias="pointsAwarded")
    money: Dict[str, Decimal] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def lone_wolf(self) -> bool:
        return self.rule in (WolfRule.LONE, WolfRule.BLIND)


class WolfResult(BaseModel):
    bet_id: str = Field(serialization_alias="betId")
    holes: List[WolfHoleResult] = Field(default_factory=list)
    points: Dict[str, Decimal] = Field(default_factory=dict)
    settlement: BetResult

    model_config = ConfigDict(populate_by_name=True, frozen=True)


def wolf_for_hole(config: WolfConfig, index: int) -> str:
    """Wolf for the ``index``-th hole played (0-based)."""

    if config.tee_order == "custom":
        return config.wolf_order[index % len(config.wolf_order)]
    return config.players[index % len(config.players)]


def _transfer(
    winners: List[str], losers: List[str], value: Decimal
) -> Dict[str, Decimal]:
    """Zero-sum transfer of ``value`` per member of the smaller side.

    Two-on-two: every winner gains ``value`` and every loser pays it. One
    against many: the single player's ``value`` is split across the group.
    """

    deltas: Dict[str, Decimal] = {}
    if len(winners) == len(losers):
        add_into(deltas, {pid: value for pid in winners})
        add_into(deltas, {pid: -value for pid in losers})
    elif len(winners) == 1:
        add_into(deltas, {winners[0]: value})
        add_into(deltas, split_evenly(-value, losers))
    else:
        add_into(deltas, {losers[0]: -value})
        add_into(deltas, split_evenly(value, winners))
    return deltas


def _validate_decision(
    config: WolfConfig, decision: WolfDecision, wolf_id: str
) -> None:
    if decision.wolf_id is not None and decision.wolf_id != wolf_id:
        raise ConfigurationError(
            f"hole {decision.hole}: wolf is {wolf_id}, not {decision.wolf_id}"
        )
    for pid in (decision.partner_id, decision.worst_tee_shot_id):
        if pid is not None and pid not in config.players:
            raise ConfigurationError(f"hole {decision.hole}: {pid!r} is not in the wolf game")
    if decision.partner_id == wolf_id:
        raise ConfigurationError(f"hole {decision.hole}: wolf cannot partner themselves")
    if decision.blind and decision.partner_id is not None:
        raise ConfigurationError(f"hole {decision.hole}: a blind wolf plays alone")


def _resolve_partner(
    config: WolfConfig, decision: Optional[WolfDecision], wolf_id: str
) -> tuple[bool, Optional[str], Optional[WolfRule]]:
    """Return (ready, partner, rule) for the hole."""

    if config.variant == "turd" and config.turd_mode == "forced_partner":
        if decision is None or decision.worst_tee_shot_id is None:
            return False, None, None
        if decision.worst_tee_shot_id == wolf_id:
            # Wolf hit the worst tee shot and has to go it alone.
            return True, None, WolfRule.LONE
        return True, decision.worst_tee_shot_id, WolfRule.TURD_PARTNER

    if decision is None:
        return False, None, None
    if decision.partner_id is None:
        return True, None, WolfRule.BLIND if decision.blind else WolfRule.LONE
    return True, decision.partner_id, WolfRule.PARTNERED


def evaluate_wolf(
    config: WolfConfig,
    ledger: ScoreLedger,
    decisions: Iterable[WolfDecision] = (),
) -> WolfResult:
    for pid in config.players:
        ledger.player(pid)
    by_hole: Dict[int, WolfDecision] = {}
    for decision in decisions:
        if decision.hole in by_hole:
            raise ConfigurationError(f"more than one wolf decision for hole {decision.hole}")
        ledger.par(decision.hole)
        by_hole[decision.hole] = decision

    if config.cancelled:
        return WolfResult(
            bet_id=config.bet_id,
            settlement=bet_result(config.bet_id, GameKind.WOLF, BetStatus.CANCELLED),
        )

    multiplier = config.payout_multiplier
    holes: List[WolfHoleResult] = []
    points: Dict[str, Decimal] = {pid: ZERO for pid in config.players}
    money: Dict[str, Decimal] = {}

    for index, hole in enumerate(ledger.hole_numbers):
        wolf_id = wolf_for_hole(config, index)
        decision = by_hole.get(hole)
        if decision is not None:
            _validate_decision(config, decision, wolf_id)
        ready, partner_id, rule = _resolve_partner(config, decision, wolf_id)
        nets = {pid: ledger.net(pid, hole) for pid in config.players}
        if not ready or any(net is None for net in nets.values()):
            holes.append(WolfHoleResult(hole=hole, wolf_id=wolf_id, partner_id=partner_id))
            continue

        wolf_side = [wolf_id] + ([partner_id] if partner_id else [])
        opponents = [pid for pid in config.players if pid not in wolf_side]
        wolf_net = min(nets[pid] for pid in wolf_side)  # type: ignore[type-var]
        opp_net = min(nets[pid] for pid in opponents)  # type: ignore[type-var]

        if rule == WolfRule.BLIND:
            value = config.stolen_points
        elif rule == WolfRule.LONE:
            value = config.lone_wolf_points
        else:
            value = config.partner_points

        hole_points: Dict[str, Decimal] = {}
        if wolf_net < opp_net:
            outcome = WolfOutcome.WOLF_WIN
            add_into(hole_points, _transfer(wolf_side, opponents, quantize(value)))
        elif opp_net < wolf_net:
            outcome = WolfOutcome.OPPONENTS_WIN
            add_into(hole_points, _transfer(opponents, wolf_side, quantize(value)))
        else:
            outcome = WolfOutcome.TIE
            if config.tie_points:
                add_into(hole_points, {pid: quantize(config.tie_points) for pid in config.players})

        turd_id: Optional[str] = None
        if config.variant == "turd" and config.turd_mode == "worst_score":
            worst = max(nets.values())  # type: ignore[type-var]
            worst_players = [pid for pid, net in nets.items() if net == worst]
            if len(worst_players) == 1:
                turd_id = worst_players[0]
                others = [pid for pid in config.players if pid != turd_id]
                add_into(hole_points, _transfer(others, [turd_id], quantize(config.turd_penalty)))

        if ENFORCE_INVARIANTS and not config.tie_points and total(hole_points.values()) != ZERO:
            raise InvariantViolation(
                "wolf-zero-sum", f"hole {hole} points sum to {total(hole_points.values())}"
            )

        ordered = {pid: hole_points[pid] for pid in config.players if pid in hole_points}
        hole_money = scale_amounts(ordered, multiplier)
        add_into(points, hole_points)
        add_into(money, hole_money)
        holes.append(
            WolfHoleResult(
                hole=hole,
                wolf_id=wolf_id,
                partner_id=partner_id,
                rule=rule,
                outcome=outcome,
                wolf_team_net=wolf_net,
                opponents_net=opp_net,
                turd_player_id=turd_id,
                points=dict(sorted(hole_points.items())),
                money=dict(sorted(hole_money.items())),
            )
        )

    resolved = [h for h in holes if h.outcome != WolfOutcome.PENDING]
    if len(resolved) == len(holes) or (ledger.completed and resolved):
        status = BetStatus.COMPLETED
    elif ledger.completed:
        status = BetStatus.VOID
    elif resolved:
        status = BetStatus.IN_PROGRESS
    else:
        status = BetStatus.PENDING

    winners: List[str] = []
    if status == BetStatus.COMPLETED:
        best = max(points.values())
        if best > ZERO:
            winners = sorted(pid for pid, value in points.items() if value == best)

    return WolfResult(
        bet_id=config.bet_id,
        holes=holes,
        points=dict(sorted(points.items())),
        settlement=bet_result(
            config.bet_id, GameKind.WOLF, status, money, winner_ids=winners
        ),
    )


__all__ = [
    "WolfDecision",
    "WolfHoleResult",
    "WolfOutcome",
    "WolfResult",
    "WolfRule",
    "evaluate_wolf",
    "wolf_for_hole",
]
