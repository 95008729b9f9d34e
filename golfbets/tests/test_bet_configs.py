from __future__ import annotations

from decimal import Decimal

import pytest

from golfbets.errors import ConfigurationError
from golfbets.games.configs import (
    NassauConfig,
    SkinsConfig,
    WolfConfig,
    parse_bet_config,
    parse_bet_configs,
)


def test_parses_camel_case_option_keys():
    config = parse_bet_config(
        {
            "game": "skins",
            "betId": "skins-main",
            "holeValue": 2,
            "carryoverMultiplier": "1.5",
            "birdiesOnly": True,
        }
    )
    assert isinstance(config, SkinsConfig)
    assert config.bet_id == "skins-main"
    assert config.hole_value == Decimal("2")
    assert config.carryover_multiplier == Decimal("1.5")
    assert config.birdies_only is True


def test_discriminates_on_game():
    wolf = parse_bet_config(
        {
            "game": "wolf",
            "players": ["a", "b", "c", "d"],
            "loneWolfPoints": 6,
            "payoutMultiplier": 2,
        }
    )
    nassau = parse_bet_config(
        {
            "game": "nassau",
            "sideA": {"id": "A", "players": ["a"]},
            "sideB": {"id": "B", "players": ["b"]},
            "pressMode": "manual",
            "pressDownBy": 3,
        }
    )
    assert isinstance(wolf, WolfConfig)
    assert wolf.lone_wolf_points == Decimal("6")
    assert isinstance(nassau, NassauConfig)
    assert nassau.press_down_by == 3
    assert nassau.player_ids == ["a", "b"]


@pytest.mark.parametrize(
    "payload",
    [
        {"game": "poker"},
        {"game": "skins", "holeValue": -5},
        {"game": "skins", "holeValue": 5, "colour": "red", "carryoverMultiplier": 0.5},
        {"game": "nassau", "sideA": {"id": "A", "players": ["a"]}, "sideB": {"id": "A", "players": ["b"]}},
        {"game": "nassau", "sideA": {"id": "A", "players": ["a"]}, "sideB": {"id": "B", "players": ["a"]}},
        {"game": "match_play", "sideA": {"id": "A", "players": ["a", "c"]}, "sideB": {"id": "B", "players": ["b"]}},
        {"game": "wolf", "players": ["a", "b", "c", "d"], "teeOrder": "custom"},
        {"game": "manual", "betId": "ctp", "participants": ["a"], "amount": 5},
        {"game": "snake", "settlement": "weekly"},
    ],
)
def test_invalid_configs_raise_configuration_error(payload):
    with pytest.raises(ConfigurationError):
        parse_bet_config(payload)


def test_duplicate_bet_ids_are_rejected():
    with pytest.raises(ConfigurationError, match="duplicate"):
        parse_bet_configs([{"game": "skins"}, {"game": "skins"}])
