"""Typed bet configuration.

Each game type has its own model with explicit fields; ``BetConfig`` is the
closed tagged union over them, discriminated by ``game``. Input accepts the
camelCase option keys the product UI already uses (``holeValue``,
``pressDownBy`` ...). Validation happens here, at configuration time, and any
problem surfaces as :class:`~golfbets.errors.ConfigurationError`.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Iterable, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from golfbets.errors import ConfigurationError


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class Side(BaseModel):
    id: str
    player_ids: List[str] = Field(
        min_length=1, validation_alias=_alias("player_ids", "playerIds", "players")
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class _TwoSided(BaseModel):
    side_a: Side = Field(validation_alias=_alias("side_a", "sideA"))
    side_b: Side = Field(validation_alias=_alias("side_b", "sideB"))

    @model_validator(mode="after")
    def _check_sides(self):
        if self.side_a.id == self.side_b.id:
            raise ValueError("sides must have distinct ids")
        overlap = set(self.side_a.player_ids) & set(self.side_b.player_ids)
        if overlap:
            raise ValueError(f"players on both sides: {sorted(overlap)}")
        if len(self.side_a.player_ids) != len(self.side_b.player_ids):
            raise ValueError("sides must have the same number of players")
        return self

    @property
    def sides(self) -> tuple[Side, Side]:
        return self.side_a, self.side_b

    @property
    def player_ids(self) -> List[str]:
        return [*self.side_a.player_ids, *self.side_b.player_ids]


class MatchPlayConfig(_TwoSided):
    game: Literal["match_play"] = "match_play"
    bet_id: str = Field(default="match", validation_alias=_alias("bet_id", "betId"))
    stake: Decimal = Field(
        default=Decimal("0"), ge=0, validation_alias=_alias("stake", "betAmount")
    )
    holes: Optional[List[int]] = None
    cancelled: bool = False

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SkinsConfig(BaseModel):
    game: Literal["skins"] = "skins"
    bet_id: str = Field(default="skins", validation_alias=_alias("bet_id", "betId"))
    eligible_players: List[str] = Field(
        default_factory=list, validation_alias=_alias("eligible_players", "eligiblePlayers")
    )
    hole_value: Decimal = Field(
        default=Decimal("5"), gt=0, validation_alias=_alias("hole_value", "holeValue")
    )
    carryovers: bool = True
    carryover_multiplier: Decimal = Field(
        default=Decimal("1"),
        ge=1,
        validation_alias=_alias("carryover_multiplier", "carryoverMultiplier"),
    )
    birdies_only: bool = Field(
        default=False, validation_alias=_alias("birdies_only", "birdiesOnly")
    )
    cancelled: bool = False

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class WolfConfig(BaseModel):
    game: Literal["wolf"] = "wolf"
    bet_id: str = Field(default="wolf", validation_alias=_alias("bet_id", "betId"))
    variant: Literal["standard", "turd"] = "standard"
    players: List[str] = Field(min_length=4, max_length=4)
    tee_order: Literal["rotate", "custom"] = Field(
        default="rotate", validation_alias=_alias("tee_order", "teeOrder")
    )
    # Explicit wolf per hole (index 0 = first hole played) for custom tee order.
    wolf_order: List[str] = Field(
        default_factory=list, validation_alias=_alias("wolf_order", "wolfOrder")
    )
    lone_wolf_points: Decimal = Field(
        default=Decimal("4"), ge=0, validation_alias=_alias("lone_wolf_points", "loneWolfPoints")
    )
    partner_points: Decimal = Field(
        default=Decimal("2"), ge=0, validation_alias=_alias("partner_points", "partnerPoints")
    )
    stolen_points: Decimal = Field(
        default=Decimal("3"), ge=0, validation_alias=_alias("stolen_points", "stolenPoints")
    )
    turd_penalty: Decimal = Field(
        default=Decimal("2"), ge=0, validation_alias=_alias("turd_penalty", "turdPenalty")
    )
    turd_mode: Literal["forced_partner", "worst_score"] = Field(
        default="forced_partner", validation_alias=_alias("turd_mode", "turdMode")
    )
    tie_points: Decimal = Field(
        default=Decimal("0"), ge=0, validation_alias=_alias("tie_points", "tiePoints")
    )
    payout_multiplier: Decimal = Field(
        default=Decimal("1"), gt=0, validation_alias=_alias("payout_multiplier", "payoutMultiplier")
    )
    cancelled: bool = False

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("players")
    @classmethod
    def _unique_players(cls, players: List[str]) -> List[str]:
        if len(set(players)) != len(players):
            raise ValueError("wolf players must be unique")
        return players

    @model_validator(mode="after")
    def _check_order(self):
        if self.tee_order == "custom":
            if not self.wolf_order:
                raise ValueError("custom tee order requires wolfOrder")
            unknown = set(self.wolf_order) - set(self.players)
            if unknown:
                raise ValueError(f"wolfOrder names non-players: {sorted(unknown)}")
        return self


class NassauConfig(_TwoSided):
    game: Literal["nassau"] = "nassau"
    bet_id: str = Field(default="nassau", validation_alias=_alias("bet_id", "betId"))
    front_bet: Decimal = Field(
        default=Decimal("10"), ge=0, validation_alias=_alias("front_bet", "frontBet")
    )
    back_bet: Decimal = Field(
        default=Decimal("10"), ge=0, validation_alias=_alias("back_bet", "backBet")
    )
    overall_bet: Decimal = Field(
        default=Decimal("10"), ge=0, validation_alias=_alias("overall_bet", "overallBet")
    )
    press_mode: Literal["auto", "manual"] = Field(
        default="auto", validation_alias=_alias("press_mode", "pressMode")
    )
    press_down_by: int = Field(
        default=2, ge=1, validation_alias=_alias("press_down_by", "pressDownBy")
    )
    press_cap: int = Field(default=3, ge=0, validation_alias=_alias("press_cap", "pressCap"))
    cancelled: bool = False

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SnakeConfig(BaseModel):
    game: Literal["snake"] = "snake"
    bet_id: str = Field(default="snake", validation_alias=_alias("bet_id", "betId"))
    eligible_players: List[str] = Field(
        default_factory=list, validation_alias=_alias("eligible_players", "eligiblePlayers")
    )
    pot_amount: Decimal = Field(
        default=Decimal("20"), ge=0, validation_alias=_alias("pot_amount", "potAmount")
    )
    escalating: bool = False
    settlement: Literal["end", "running"] = "end"
    segment: Literal["overall", "front", "back"] = "overall"
    cancelled: bool = False

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ManualBetConfig(BaseModel):
    game: Literal["manual"] = "manual"
    bet_id: str = Field(validation_alias=_alias("bet_id", "betId"))
    kind: str = "closest_to_pin"
    participants: List[str] = Field(min_length=2)
    amount: Decimal = Field(ge=0)
    hole: Optional[int] = None
    cancelled: bool = False

    model_config = ConfigDict(populate_by_name=True, frozen=True)


BetConfig = Annotated[
    Union[
        MatchPlayConfig,
        SkinsConfig,
        WolfConfig,
        NassauConfig,
        SnakeConfig,
        ManualBetConfig,
    ],
    Field(discriminator="game"),
]

_BET_CONFIG_ADAPTER: TypeAdapter[Any] = TypeAdapter(BetConfig)


def parse_bet_config(data: Any) -> BetConfig:
    try:
        return _BET_CONFIG_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid bet configuration: {exc}") from exc


def parse_bet_configs(items: Iterable[Any]) -> List[BetConfig]:
    configs = [parse_bet_config(item) for item in items]
    seen: set[str] = set()
    for config in configs:
        if config.bet_id in seen:
            raise ConfigurationError(f"duplicate bet id {config.bet_id!r}")
        seen.add(config.bet_id)
    return configs


__all__ = [
    "BetConfig",
    "ManualBetConfig",
    "MatchPlayConfig",
    "NassauConfig",
    "Side",
    "SkinsConfig",
    "SnakeConfig",
    "WolfConfig",
    "parse_bet_config",
    "parse_bet_configs",
]
