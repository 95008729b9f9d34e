"""Handicap allocation package."""

from .allocator import (  # noqa: F401
    CourseHandicap,
    StrokeMode,
    allocate_strokes,
    course_handicap,
    course_handicap_for_tee,
    net_score,
    relative_handicaps,
    strokes_for_hole,
    strokes_received,
)
