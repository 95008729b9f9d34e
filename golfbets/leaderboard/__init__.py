"""Multi-game leaderboard aggregation."""

from .aggregator import (  # noqa: F401
    bet_participants,
    build_from_snapshot,
    build_leaderboard,
    evaluate_bet,
    rank_players,
)
from .models import (  # noqa: F401
    BetFlag,
    Leaderboard,
    MultiGameScore,
    PrimaryFormat,
    RoundSnapshot,
)
from .service import LeaderboardService, get_leaderboard_service  # noqa: F401
