"""Handicap stroke allocation.

Turns a handicap index into a course handicap for a specific tee and spreads
that course handicap over the holes by their stroke-allocation rank. The
allocation conserves strokes exactly (the per-hole values always sum to the
course handicap) and is monotonic in the handicap for a fixed course.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, Mapping

from pydantic import BaseModel, ConfigDict

from golfbets.config import STANDARD_SLOPE
from golfbets.courses.models import CourseTee
from golfbets.errors import ConfigurationError

MIN_HANDICAP_INDEX = Decimal("-5")
MAX_HANDICAP_INDEX = Decimal("54")
MIN_SLOPE = 55
MAX_SLOPE = 155


class StrokeMode(str, Enum):
    FULL = "full"
    OFF_THE_LOW = "off_the_low"


class CourseHandicap(BaseModel):
    value: int
    # Unrounded figure; breaks ties between players sharing the same value.
    exact: Decimal

    model_config = ConfigDict(frozen=True)


def _round_half_away(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def course_handicap(
    handicap_index: float | Decimal,
    *,
    slope: int = STANDARD_SLOPE,
    rating: float | None = None,
    par: int | None = None,
    allowance_percent: int = 100,
) -> CourseHandicap:
    index = Decimal(str(handicap_index))
    if not MIN_HANDICAP_INDEX <= index <= MAX_HANDICAP_INDEX:
        raise ConfigurationError(
            f"handicap index {index} outside {MIN_HANDICAP_INDEX}..{MAX_HANDICAP_INDEX}"
        )
    if not MIN_SLOPE <= slope <= MAX_SLOPE:
        raise ConfigurationError(f"slope {slope} outside {MIN_SLOPE}..{MAX_SLOPE}")
    if allowance_percent < 0:
        raise ConfigurationError("allowance percent cannot be negative")

    exact = index * Decimal(slope) / Decimal(STANDARD_SLOPE)
    if rating is not None and par is not None:
        exact += Decimal(str(rating)) - Decimal(par)
    exact = exact * Decimal(allowance_percent) / Decimal(100)
    return CourseHandicap(value=_round_half_away(exact), exact=exact)


def course_handicap_for_tee(
    handicap_index: float | Decimal, tee: CourseTee, *, allowance_percent: int = 100
) -> CourseHandicap:
    return course_handicap(
        handicap_index,
        slope=tee.slope,
        rating=tee.rating,
        par=tee.par if tee.holes else None,
        allowance_percent=allowance_percent,
    )


def strokes_received(course_hcp: int, stroke_index: int, hole_count: int = 18) -> int:
    """Strokes a player with ``course_hcp`` gets on the hole ranked ``stroke_index``.

    Negative values mean the (plus) player gives strokes back; those are
    given on the easiest holes first.
    """

    if hole_count <= 0:
        raise ConfigurationError("hole count must be positive")
    if not 1 <= stroke_index <= hole_count:
        raise ConfigurationError(
            f"stroke index {stroke_index} outside 1..{hole_count}"
        )

    if course_hcp >= 0:
        base, extra = divmod(course_hcp, hole_count)
        return base + 1 if stroke_index <= extra else base

    base, extra = divmod(-course_hcp, hole_count)
    if stroke_index > hole_count - extra:
        return -(base + 1)
    return -base


def allocate_strokes(course_hcp: int, tee: CourseTee) -> Dict[int, int]:
    """Return ``{hole_number: strokes}`` for every hole on the tee."""

    ranks = tee.stroke_ranks()
    hole_count = len(ranks)
    return {
        number: strokes_received(course_hcp, rank, hole_count)
        for number, rank in sorted(ranks.items())
    }


def strokes_for_hole(
    handicap_index: float | Decimal,
    hole_number: int,
    tee: CourseTee,
    *,
    allowance_percent: int = 100,
) -> int:
    hcp = course_handicap_for_tee(
        handicap_index, tee, allowance_percent=allowance_percent
    )
    ranks = tee.stroke_ranks()
    if hole_number not in ranks:
        raise ConfigurationError(f"hole {hole_number} is not part of this course")
    return strokes_received(hcp.value, ranks[hole_number], len(ranks))


def net_score(gross: int, strokes: int) -> int:
    return max(gross - strokes, 0)


def relative_handicaps(
    handicaps: Mapping[str, int], *, allowance_percent: int = 100
) -> Dict[str, int]:
    """Play off the low man: everyone's strokes relative to the best player."""

    if not handicaps:
        return {}
    low = min(handicaps.values())
    factor = Decimal(allowance_percent) / Decimal(100)
    return {
        player_id: _round_half_away(Decimal(value - low) * factor)
        for player_id, value in handicaps.items()
    }


__all__ = [
    "CourseHandicap",
    "StrokeMode",
    "allocate_strokes",
    "course_handicap",
    "course_handicap_for_tee",
    "net_score",
    "relative_handicaps",
    "strokes_for_hole",
    "strokes_received",
]
