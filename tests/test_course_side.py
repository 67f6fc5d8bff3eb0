"""Unit tests for course side resolution."""

import logging

import pytest

from golfleague.course_side import (
    expected_hole_count,
    filter_holes,
    is_hole_in_play,
    resolve_side,
)
from golfleague.models import HoleScore


class TestResolveSide:
    """Tests for picking the side in play each week."""

    def test_full_18(self):
        """Test full course play has no side."""
        assert resolve_side(1, 'full_18', 'front') is None
        assert resolve_side(2, 'full_18', 'back') is None

    def test_fixed_sides(self):
        """Test fixed nine-hole modes ignore the week number."""
        for week in range(1, 6):
            assert resolve_side(week, 'nine_hole_front', 'back') == 'front'
            assert resolve_side(week, 'nine_hole_back', 'front') == 'back'

    def test_alternating_from_front(self):
        """Test odd weeks play the first-week side, even weeks the other."""
        assert resolve_side(1, 'nine_hole_alternating', 'front') == 'front'
        assert resolve_side(2, 'nine_hole_alternating', 'front') == 'back'
        assert resolve_side(3, 'nine_hole_alternating', 'front') == 'front'

    def test_alternating_from_back(self):
        """Test alternating play starting on the back nine."""
        assert resolve_side(1, 'nine_hole_alternating', 'back') == 'back'
        assert resolve_side(2, 'nine_hole_alternating', 'back') == 'front'

    @pytest.mark.parametrize('first_week_side', ['front', 'back'])
    def test_alternating_has_period_two(self, first_week_side):
        """Test week n and week n + 2 always play the same side."""
        for week in range(1, 20):
            assert resolve_side(week, 'nine_hole_alternating', first_week_side) == resolve_side(
                week + 2, 'nine_hole_alternating', first_week_side
            )
            assert resolve_side(week, 'nine_hole_alternating', first_week_side) != resolve_side(
                week + 1, 'nine_hole_alternating', first_week_side
            )

    def test_unknown_mode_plays_full_course(self, caplog):
        """Test an unknown play mode falls back to all holes with a warning."""
        with caplog.at_level(logging.WARNING):
            assert resolve_side(3, 'scramble', 'front') is None
        assert 'Unknown play mode' in caplog.text


class TestFilterHoles:
    """Tests for keeping only the holes in play."""

    def test_front_and_back(self):
        """Test front keeps 1-9 and back keeps 10-18."""
        holes = list(range(1, 19))
        assert filter_holes(holes, 'front') == list(range(1, 10))
        assert filter_holes(holes, 'back') == list(range(10, 19))

    def test_full_course(self):
        """Test no side keeps every hole."""
        holes = list(range(1, 19))
        assert filter_holes(holes, None) == holes

    def test_unrecognized_side_keeps_everything(self):
        """Test an unknown side string doesn't drop holes."""
        holes = list(range(1, 19))
        assert filter_holes(holes, 'middle') == holes

    def test_hole_objects(self):
        """Test filtering HoleScore objects by hole number."""
        holes = [HoleScore(hole_number=n, strokes=4) for n in (1, 9, 10, 18)]
        assert [h.hole_number for h in filter_holes(holes, 'back')] == [10, 18]

    def test_idempotent(self):
        """Test filtering twice gives the same result as once."""
        holes = [3, 12, 7, 15, 9, 10]
        for side in ('front', 'back', None):
            once = filter_holes(holes, side)
            assert filter_holes(once, side) == once

    def test_is_hole_in_play(self):
        """Test single hole checks at the side boundaries."""
        assert is_hole_in_play(9, 'front')
        assert not is_hole_in_play(10, 'front')
        assert is_hole_in_play(10, 'back')
        assert is_hole_in_play(18, None)


class TestExpectedHoleCount:
    """Tests for scorecard completeness."""

    def test_nine_hole_sides(self):
        """Test a side always needs nine holes."""
        assert expected_hole_count(18, 'front') == 9
        assert expected_hole_count(18, 'back') == 9

    def test_full_course(self):
        """Test full play needs the whole course."""
        assert expected_hole_count(18, None) == 18
        assert expected_hole_count(9, None) == 9
