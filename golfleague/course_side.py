"""Course side resolution for 9-hole play modes.

A league plays either the full course or one nine per week:
- full_18: every hole is in play (side None)
- nine_hole_front / nine_hole_back: the same nine every week
- nine_hole_alternating: odd weeks play the configured first-week side,
  even weeks play the other one
"""

import logging
from typing import Iterable, Optional, TypeVar, Union

from .constants import (
    BACK,
    FRONT,
    FULL_18,
    HOLES_PER_SIDE,
    NINE_HOLE_ALTERNATING,
    NINE_HOLE_BACK,
    NINE_HOLE_FRONT,
    SIDE_HOLES,
)

logger = logging.getLogger('golfleague.course_side')

H = TypeVar('H')


def resolve_side(week_number: int, play_mode: str, first_week_side: str) -> Optional[str]:
    """
    Determine which side of the course is in play for a week.

    Unknown play modes fall back to the full course rather than failing,
    since they come from stored configuration.

    Args:
        week_number: 1-based week number
        play_mode: League play mode
        first_week_side: Side played in week 1 under nine_hole_alternating

    Returns:
        'front', 'back', or None when all holes are in play
    """
    if play_mode == FULL_18:
        return None
    if play_mode == NINE_HOLE_FRONT:
        return FRONT
    if play_mode == NINE_HOLE_BACK:
        return BACK
    if play_mode == NINE_HOLE_ALTERNATING:
        is_odd_week = week_number % 2 == 1
        if first_week_side == FRONT:
            return FRONT if is_odd_week else BACK
        return BACK if is_odd_week else FRONT

    logger.warning(f'Unknown play mode {play_mode!r}, using full course')
    return None


def _hole_number(hole: Union[int, object]) -> int:
    if isinstance(hole, int):
        return hole
    return hole.hole_number  # type: ignore[attr-defined]


def is_hole_in_play(hole_number: int, side: Optional[str]) -> bool:
    """Check whether a hole counts for the given side (None = full course)."""
    if side not in SIDE_HOLES:
        return True
    first, last = SIDE_HOLES[side]  # type: ignore[index]
    return first <= hole_number <= last


def filter_holes(holes: Iterable[H], side: Optional[str]) -> list[H]:
    """
    Keep only the holes in play for a side.

    Args:
        holes: Hole numbers, or objects with a `hole_number` attribute
        side: 'front', 'back', or None

    Returns:
        Holes 1-9 for front, 10-18 for back, every hole otherwise
        (including an unrecognized side string)
    """
    return [h for h in holes if is_hole_in_play(_hole_number(h), side)]


def expected_hole_count(course_hole_count: int, side: Optional[str]) -> int:
    """Number of holes a complete scorecard needs for the side."""
    if side in (FRONT, BACK):
        return HOLES_PER_SIDE
    return course_hole_count


def is_known_side(side: Optional[str]) -> bool:
    """True for 'front', 'back' and None."""
    return side is None or side in SIDE_HOLES
