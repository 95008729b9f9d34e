from .configs import (  # noqa: F401
    BetConfig,
    ManualBetConfig,
    MatchPlayConfig,
    NassauConfig,
    Side,
    SkinsConfig,
    SnakeConfig,
    WolfConfig,
    parse_bet_config,
    parse_bet_configs,
)
from .manual import ManualResolution, settle_manual  # noqa: F401
from .match_play import MatchState, MatchStatus, evaluate_match, evaluate_match_play  # noqa: F401
from .nassau import (  # noqa: F401
    ManualPress,
    NassauResult,
    PressBet,
    PressStatus,
    evaluate_nassau,
    press_id,
)
from .results import (  # noqa: F401
    BetResult,
    BetStatus,
    GameKind,
    SettlementEvent,
    TERMINAL_STATUSES,
    settlement_event,
)
from .skins import PotStatus, SkinsPot, SkinsResult, evaluate_skins  # noqa: F401
from .snake import SnakeResult, SnakeState, SnakeStatus, evaluate_snake  # noqa: F401
from .wolf import WolfDecision, WolfHoleResult, WolfResult, WolfRule, evaluate_wolf  # noqa: F401

__all__ = [
    "BetConfig",
    "BetResult",
    "BetStatus",
    "GameKind",
    "ManualBetConfig",
    "ManualPress",
    "ManualResolution",
    "MatchPlayConfig",
    "MatchState",
    "MatchStatus",
    "NassauConfig",
    "NassauResult",
    "PotStatus",
    "PressBet",
    "PressStatus",
    "SettlementEvent",
    "Side",
    "SkinsConfig",
    "SkinsPot",
    "SkinsResult",
    "SnakeConfig",
    "SnakeResult",
    "SnakeState",
    "SnakeStatus",
    "TERMINAL_STATUSES",
    "WolfConfig",
    "WolfDecision",
    "WolfHoleResult",
    "WolfResult",
    "WolfRule",
    "evaluate_match",
    "evaluate_match_play",
    "evaluate_nassau",
    "evaluate_skins",
    "evaluate_snake",
    "evaluate_wolf",
    "parse_bet_config",
    "parse_bet_configs",
    "press_id",
    "settle_manual",
    "settlement_event",
]
