"""Stateless HTTP projection of the settlement engine."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from golfbets.games.configs import parse_bet_configs
from golfbets.leaderboard.models import RoundSnapshot
from golfbets.leaderboard.service import LeaderboardService, get_leaderboard_service
from golfbets.security import require_api_key

router = APIRouter(prefix="/api", dependencies=[Depends(require_api_key)])


@router.post("/leaderboard")
def post_leaderboard(
    snapshot: RoundSnapshot,
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> Dict[str, Any]:
    board, fresh = service.recompute(snapshot)
    return {
        "leaderboard": board.model_dump(mode="json", by_alias=True),
        "settlements": [event.model_dump(mode="json", by_alias=True) for event in fresh],
    }


@router.post("/bets/validate")
def validate_bets(bets: List[Dict[str, Any]] = Body(...)) -> Dict[str, Any]:
    configs = parse_bet_configs(bets)
    return {
        "ok": True,
        "bets": [config.model_dump(mode="json") for config in configs],
    }


__all__ = ["router"]
