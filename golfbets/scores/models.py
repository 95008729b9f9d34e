from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from golfbets.courses.models import CourseTee
from golfbets.handicap.allocator import StrokeMode


class Player(BaseModel):
    id: str
    name: str = "Player"
    handicap_index: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("handicap_index", "handicapIndex", "hcpIndex"),
        serialization_alias="handicapIndex",
    )
    tee_time: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("tee_time", "teeTime"),
        serialization_alias="teeTime",
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class RoundSetup(BaseModel):
    round_id: str = Field(
        default="round",
        validation_alias=AliasChoices("round_id", "roundId"),
        serialization_alias="roundId",
    )
    course: CourseTee
    players: List[Player]
    stroke_mode: StrokeMode = Field(
        default=StrokeMode.FULL,
        validation_alias=AliasChoices("stroke_mode", "strokeMode"),
        serialization_alias="strokeMode",
    )
    allowance_percent: Optional[int] = Field(
        default=None,
        ge=0,
        le=100,
        validation_alias=AliasChoices("allowance_percent", "allowancePercent"),
        serialization_alias="allowancePercent",
    )
    completed: bool = False

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class HoleScore(BaseModel):
    player_id: str = Field(
        validation_alias=AliasChoices("player_id", "playerId"),
        serialization_alias="playerId",
    )
    hole: int = Field(validation_alias=AliasChoices("hole", "holeNumber", "hole_number"))
    gross: int = Field(validation_alias=AliasChoices("gross", "strokes", "grossStrokes"))
    putts: Optional[int] = None
    penalties: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)


@dataclass(frozen=True)
class Scored:
    hole: int
    par: int
    gross: int
    strokes: int
    net: int
    putts: Optional[int] = None
    penalties: Optional[int] = None


@dataclass(frozen=True)
class Unscored:
    hole: int
    par: int


HoleEntry = Union[Scored, Unscored]


class Totals(BaseModel):
    player_id: str = Field(serialization_alias="playerId")
    gross: int = 0
    net: int = 0
    par: int = 0
    to_par: int = Field(default=0, serialization_alias="toPar")
    net_to_par: int = Field(default=0, serialization_alias="netToPar")
    thru: int = 0
    stableford: int = 0

    model_config = ConfigDict(populate_by_name=True)


class ThreePuttEvent(BaseModel):
    player_id: str = Field(
        validation_alias=AliasChoices("player_id", "playerId"),
        serialization_alias="playerId",
    )
    hole: int = Field(validation_alias=AliasChoices("hole", "holeNumber"))

    model_config = ConfigDict(populate_by_name=True, frozen=True)


def stableford_points(par: int, net: int) -> int:
    return max(0, 2 + par - net)


__all__ = [
    "HoleEntry",
    "HoleScore",
    "Player",
    "RoundSetup",
    "Scored",
    "ThreePuttEvent",
    "Totals",
    "Unscored",
    "stableford_points",
]
