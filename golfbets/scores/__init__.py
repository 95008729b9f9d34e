from .ledger import ScoreLedger
from .models import (
    HoleEntry,
    HoleScore,
    Player,
    RoundSetup,
    Scored,
    ThreePuttEvent,
    Totals,
    Unscored,
    stableford_points,
)

__all__ = [
    "HoleEntry",
    "HoleScore",
    "Player",
    "RoundSetup",
    "ScoreLedger",
    "Scored",
    "ThreePuttEvent",
    "Totals",
    "Unscored",
    "stableford_points",
]
