"""Nassau segments and presses.

A Nassau is three independent matches over the front nine, the back nine and
the full eighteen. Presses are further matches that start at a later hole of a
segment with their own stake and a fresh margin. The parent segment never
settles a press; each press is evaluated and settled on its own.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from golfbets.errors import ConfigurationError
from golfbets.money import ZERO, add_into
from golfbets.scores.ledger import ScoreLedger

from .configs import NassauConfig, Side
from .match_play import MatchState, MatchStatus, evaluate_match, settle_match
from .results import BetResult, BetStatus, GameKind, bet_result

logger = logging.getLogger(__name__)

Segment = Literal["front", "back", "overall"]
SEGMENTS: Tuple[Segment, ...] = ("front", "back", "overall")


class PressStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    PUSHED = "pushed"
    CANCELLED = "cancelled"


class ManualPress(BaseModel):
    segment: Segment
    start_hole: int = Field(validation_alias=AliasChoices("start_hole", "startHole"))
    initiator_side_id: str = Field(
        validation_alias=AliasChoices("initiator_side_id", "initiatorSideId", "initiatorId")
    )
    end_hole: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("end_hole", "endHole")
    )
    amount: Optional[Decimal] = Field(default=None, ge=0)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PressBet(BaseModel):
    id: str
    parent_bet_id: str = Field(serialization_alias="parentBetId")
    segment: Segment
    initiator_side_id: str = Field(serialization_alias="initiatorId")
    target_side_id: str = Field(serialization_alias="targetId")
    amount: Decimal
    start_hole: int = Field(serialization_alias="startHole")
    end_hole: int = Field(serialization_alias="endHole")
    automatic: bool = False
    status: PressStatus = PressStatus.PENDING
    winner_side_id: Optional[str] = Field(default=None, serialization_alias="winnerId")
    state: MatchState

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class NassauSegment(BaseModel):
    segment: Segment
    stake: Decimal
    holes: List[int]
    state: MatchState
    settlement: BetResult

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class NassauResult(BaseModel):
    bet_id: str = Field(serialization_alias="betId")
    segments: List[NassauSegment] = Field(default_factory=list)
    presses: List[PressBet] = Field(default_factory=list)
    press_settlements: List[BetResult] = Field(
        default_factory=list, serialization_alias="pressSettlements"
    )
    settlement: BetResult

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def segment_settlements(self) -> List[BetResult]:
        return [segment.settlement for segment in self.segments]


def segment_holes(ledger: ScoreLedger, segment: Segment) -> List[int]:
    holes = ledger.hole_numbers
    if segment == "front":
        return [hole for hole in holes if hole <= 9]
    if segment == "back":
        return [hole for hole in holes if hole >= 10]
    return list(holes)


def _segment_stake(config: NassauConfig, segment: Segment) -> Decimal:
    return {
        "front": config.front_bet,
        "back": config.back_bet,
        "overall": config.overall_bet,
    }[segment]


def _press_status(state: MatchState) -> PressStatus:
    if state.status == MatchStatus.CANCELLED:
        return PressStatus.CANCELLED
    if state.status == MatchStatus.DECIDED:
        return PressStatus.COMPLETED
    if state.status == MatchStatus.HALVED:
        return PressStatus.PUSHED
    return PressStatus.ACTIVE if state.holes_played else PressStatus.PENDING


def _open_at(press: PressBet, hole: int) -> bool:
    """Whether ``press`` is still being played after ``hole`` is finished."""

    if press.status == PressStatus.CANCELLED:
        return False
    if press.state.status in (MatchStatus.DECIDED, MatchStatus.HALVED):
        return press.state.holes[-1].hole > hole
    return press.end_hole > hole


def press_id(
    bet_id: str, segment: Segment, start_hole: int, initiator: str, *, automatic: bool = True
) -> str:
    """Id derived from what the press is, so a replay gives it the same id."""

    suffix = "" if automatic else "-manual"
    return f"{bet_id}:{segment}-press-h{start_hole}-{initiator}{suffix}"


def _press_id_pattern(bet_id: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(bet_id)}:(front|back|overall)-press-h\d+-.+")


def auto_press_triggers(
    state: MatchState, side_a: Side, side_b: Side, press_down_by: int
) -> List[Tuple[int, str]]:
    """Holes where the trailing side first falls ``press_down_by`` down.

    Returns ``(hole, trailing_side_id)`` pairs in hole order. A side must
    recover above the threshold before the same segment can trigger again.
    """

    triggers: List[Tuple[int, str]] = []
    previous = 0
    for outcome in state.holes:
        deficit = abs(outcome.margin_after)
        if deficit >= press_down_by > previous:
            trailing = side_b.id if outcome.margin_after > 0 else side_a.id
            triggers.append((outcome.hole, trailing))
        previous = deficit
    return triggers


def _make_press(
    config: NassauConfig,
    ledger: ScoreLedger,
    *,
    press_id: str,
    segment: Segment,
    holes: Sequence[int],
    initiator: str,
    amount: Decimal,
    automatic: bool,
    cancelled: bool,
) -> PressBet:
    side_a, side_b = config.sides
    state = evaluate_match(ledger, side_a, side_b, holes, cancelled=cancelled)
    target = side_b.id if initiator == side_a.id else side_a.id
    return PressBet(
        id=press_id,
        parent_bet_id=f"{config.bet_id}:{segment}",
        segment=segment,
        initiator_side_id=initiator,
        target_side_id=target,
        amount=amount,
        start_hole=holes[0],
        end_hole=holes[-1],
        automatic=automatic,
        status=_press_status(state),
        winner_side_id=state.winner,
        state=state,
    )


def _segment_presses(
    config: NassauConfig,
    ledger: ScoreLedger,
    segment: Segment,
    holes: List[int],
    state: MatchState,
    manual: List[ManualPress],
    cancelled_ids: frozenset[str],
) -> List[PressBet]:
    side_a, side_b = config.sides
    stake = _segment_stake(config, segment)

    # (start hole, end hole, decided-after hole, initiator, amount, automatic)
    candidates: List[Tuple[int, int, int, str, Decimal, bool]] = []
    if config.press_mode == "auto":
        for hole, trailing in auto_press_triggers(state, side_a, side_b, config.press_down_by):
            remaining = [h for h in holes if h > hole]
            if not remaining:
                continue
            candidates.append((remaining[0], holes[-1], hole, trailing, stake, True))
    for request in manual:
        if request.start_hole not in holes:
            raise ConfigurationError(
                f"press start hole {request.start_hole} is not in the {segment} segment"
            )
        end = holes[-1] if request.end_hole is None else request.end_hole
        if end not in holes or end < request.start_hole:
            raise ConfigurationError(
                f"press end hole {end} must be a {segment} hole from {request.start_hole} on"
            )
        if request.initiator_side_id not in (side_a.id, side_b.id):
            raise ConfigurationError(f"unknown press initiator {request.initiator_side_id!r}")
        amount = stake if request.amount is None else request.amount
        previous = [h for h in holes if h < request.start_hole]
        asked_after = previous[-1] if previous else 0
        candidates.append(
            (request.start_hole, end, asked_after, request.initiator_side_id, amount, False)
        )

    candidates.sort(key=lambda item: (item[0], not item[5], item[3]))
    presses: List[PressBet] = []
    for start, end, asked_after, initiator, amount, automatic in candidates:
        identifier = press_id(config.bet_id, segment, start, initiator, automatic=automatic)
        if any(press.id == identifier for press in presses):
            raise ConfigurationError(f"press {identifier} was requested twice")
        open_count = sum(1 for press in presses if _open_at(press, asked_after))
        if open_count >= config.press_cap:
            if not automatic:
                raise ConfigurationError(
                    f"{segment} already has {open_count} open presses (cap {config.press_cap})"
                )
            logger.debug("press cap reached on %s at hole %s", segment, asked_after)
            continue
        presses.append(
            _make_press(
                config,
                ledger,
                press_id=identifier,
                segment=segment,
                holes=[h for h in holes if start <= h <= end],
                initiator=initiator,
                amount=amount,
                automatic=automatic,
                cancelled=identifier in cancelled_ids,
            )
        )
    return presses


def settle_press(press: PressBet, config: NassauConfig) -> BetResult:
    side_a, side_b = config.sides
    return settle_match(press.id, GameKind.PRESS, press.state, side_a, side_b, press.amount)


def evaluate_nassau(
    config: NassauConfig,
    ledger: ScoreLedger,
    manual_presses: Iterable[ManualPress] = (),
    cancelled_presses: Iterable[str] = (),
) -> NassauResult:
    side_a, side_b = config.sides
    requests = list(manual_presses)
    prefix = f"{config.bet_id}:"
    cancelled_ids = frozenset(item for item in cancelled_presses if item.startswith(prefix))
    if config.cancelled:
        return NassauResult(
            bet_id=config.bet_id,
            settlement=bet_result(config.bet_id, GameKind.NASSAU, BetStatus.CANCELLED),
        )

    segments: List[NassauSegment] = []
    presses: List[PressBet] = []
    for segment in SEGMENTS:
        holes = segment_holes(ledger, segment)
        manual = [request for request in requests if request.segment == segment]
        if not holes:
            if manual:
                raise ConfigurationError(f"no holes in the {segment} segment")
            continue
        stake = _segment_stake(config, segment)
        state = evaluate_match(ledger, side_a, side_b, holes)
        settlement = settle_match(
            f"{config.bet_id}:{segment}", GameKind.NASSAU, state, side_a, side_b, stake
        )
        segments.append(
            NassauSegment(
                segment=segment, stake=stake, holes=holes, state=state, settlement=settlement
            )
        )
        presses.extend(
            _segment_presses(config, ledger, segment, holes, state, manual, cancelled_ids)
        )

    pattern = _press_id_pattern(config.bet_id)
    malformed = sorted(item for item in cancelled_ids if not pattern.fullmatch(item))
    if malformed:
        raise ConfigurationError(f"cannot cancel unknown presses: {malformed}")
    for item in sorted(cancelled_ids - {press.id for press in presses}):
        # A corrected score can remove the trigger behind a cancelled press.
        logger.info("cancelled press %s is not open on the current scores", item)

    press_settlements = [settle_press(press, config) for press in presses]
    parts = [segment.settlement for segment in segments] + press_settlements
    deltas: Dict[str, Decimal] = {}
    for part in parts:
        add_into(deltas, part.deltas)

    if all(part.terminal for part in parts):
        status = BetStatus.COMPLETED
        if all(part.status == BetStatus.PUSHED for part in parts):
            status = BetStatus.PUSHED
    elif any(part.status != BetStatus.PENDING for part in parts):
        status = BetStatus.IN_PROGRESS
    else:
        status = BetStatus.PENDING

    winners = sorted(pid for pid, value in deltas.items() if value > ZERO)
    return NassauResult(
        bet_id=config.bet_id,
        segments=segments,
        presses=presses,
        press_settlements=press_settlements,
        settlement=bet_result(
            config.bet_id, GameKind.NASSAU, status, deltas, winner_ids=winners
        ),
    )


__all__ = [
    "ManualPress",
    "NassauResult",
    "NassauSegment",
    "PressBet",
    "PressStatus",
    "SEGMENTS",
    "auto_press_triggers",
    "press_id",
    "evaluate_nassau",
    "segment_holes",
    "settle_press",
]
