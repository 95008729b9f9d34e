"""Shared pytest fixtures for engine tests."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Mapping, Sequence

import pytest

from golfbets.config import reset_settings_cache
from golfbets.courses.models import CourseHole, CourseTee
from golfbets.scores.ledger import ScoreLedger
from golfbets.scores.models import Player, RoundSetup
from golfbets.telemetry import events as telemetry_events

PARS = [4, 4, 3, 4, 5, 4, 4, 3, 5, 4, 4, 3, 4, 5, 4, 4, 3, 5]


def make_course(hole_count: int = 18) -> CourseTee:
    # Stroke index equals the hole number so allocations are easy to read.
    return CourseTee(
        course_id="test-links",
        tee_name="white",
        holes=[
            CourseHole(number=n, par=PARS[n - 1], stroke_index=n)
            for n in range(1, hole_count + 1)
        ],
    )


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterable[None]:
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def course() -> CourseTee:
    return make_course()


@pytest.fixture
def make_ledger(course: CourseTee) -> Callable[..., ScoreLedger]:
    """Build a ledger for scratch players unless handicaps are given."""

    def _build(
        player_ids: Sequence[str] = ("alice", "bob", "carol", "dave"),
        *,
        handicaps: Mapping[str, float] | None = None,
        completed: bool = False,
        holes: int = 18,
        **setup_kwargs,
    ) -> ScoreLedger:
        handicaps = handicaps or {}
        tee = course if holes == 18 else make_course(holes)
        setup = RoundSetup(
            round_id="r1",
            course=tee,
            players=[
                Player(id=pid, name=pid.title(), handicap_index=handicaps.get(pid, 0))
                for pid in player_ids
            ],
            completed=completed,
            **setup_kwargs,
        )
        return ScoreLedger(setup)

    return _build


def fill(ledger: ScoreLedger, cards: Dict[str, List[int]], *, start: int = 1) -> ScoreLedger:
    """Record consecutive gross scores per player beginning at ``start``."""

    for pid, grosses in cards.items():
        for offset, gross in enumerate(grosses):
            ledger.record_score(pid, start + offset, gross)
    return ledger


@pytest.fixture
def telemetry_sink():
    captured: List[tuple[str, dict]] = []

    def _emit(name: str, payload):
        captured.append((name, dict(payload)))

    telemetry_events.set_settlement_telemetry_emitter(_emit)
    yield captured
    telemetry_events.set_settlement_telemetry_emitter(None)
