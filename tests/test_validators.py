"""Unit tests for validation functions."""

from golfleague.models import HoleScore, Matchup
from golfleague.schemas import LeagueHandicapRecord
from golfleague.validators import (
    ConfigurationError,
    validate_handicap_settings,
    validate_matchup,
    validate_scorecard,
)


def fields(errors):
    return {e.field for e in errors}


class TestHandicapSettingsValidation:
    """Tests for stored handicap settings."""

    def test_defaults_valid(self):
        """Test default settings pass all checks."""
        assert validate_handicap_settings(LeagueHandicapRecord()) == []

    def test_valid_best_of_last(self):
        """Test a complete best-of-last configuration passes."""
        record = LeagueHandicapRecord(score_selection='best_of_last', best_of=4, last_of=8)
        assert validate_handicap_settings(record) == []

    def test_min_above_max(self):
        """Test min_handicap > max_handicap."""
        errors = validate_handicap_settings(LeagueHandicapRecord(min_handicap=10, max_handicap=9))
        assert len(errors) == 1
        assert errors[0].field == 'min_handicap'
        assert str(errors[0]).startswith('min_handicap: min_handicap (10) cannot exceed')

    def test_best_of_last_missing_fields(self):
        """Test best_of_last without its counts."""
        errors = validate_handicap_settings(LeagueHandicapRecord(score_selection='best_of_last'))
        assert fields(errors) == {'best_of', 'last_of'}

    def test_best_of_above_last_of(self):
        """Test best_of > last_of."""
        record = LeagueHandicapRecord(score_selection='best_of_last', best_of=6, last_of=4)
        errors = validate_handicap_settings(record)
        assert len(errors) == 1
        assert 'cannot exceed last_of' in errors[0].message

    def test_last_n_missing_count(self):
        """Test last_n without score_count."""
        errors = validate_handicap_settings(LeagueHandicapRecord(score_selection='last_n'))
        assert fields(errors) == {'score_count'}

    def test_too_many_drops(self):
        """Test more than 20 drops in total."""
        errors = validate_handicap_settings(LeagueHandicapRecord(drop_highest=15, drop_lowest=6))
        assert fields(errors) == {'drop_highest'}

    def test_capping_without_cap(self):
        """Test capping enabled with no cap value."""
        errors = validate_handicap_settings(LeagueHandicapRecord(cap_exceptional=True))
        assert fields(errors) == {'exceptional_cap'}

    def test_unknown_enums(self):
        """Test unknown rounding and selection modes."""
        record = LeagueHandicapRecord(rounding='bankers', score_selection='median')
        errors = validate_handicap_settings(record)
        assert fields(errors) == {'rounding', 'score_selection'}

    def test_weighting_range(self):
        """Test weighting values checked only when enabled."""
        assert validate_handicap_settings(LeagueHandicapRecord(weight_decay=2)) == []
        errors = validate_handicap_settings(
            LeagueHandicapRecord(use_weighting=True, weight_recent=0, weight_decay=2)
        )
        assert fields(errors) == {'weight_recent', 'weight_decay'}

    def test_multiple_errors_reported(self):
        """Test every problem is reported at once."""
        record = LeagueHandicapRecord(
            min_handicap=12, cap_exceptional=True, freeze_week=0, prov_weeks=-1
        )
        errors = validate_handicap_settings(record)
        assert fields(errors) == {'min_handicap', 'exceptional_cap', 'freeze_week', 'prov_weeks'}
        assert all(isinstance(e, ConfigurationError) for e in errors)


class TestMatchupValidation:
    """Tests for matchup point invariants."""

    def test_valid_matchup(self):
        """Test a normal 15/5 matchup."""
        matchup = Matchup(week_number=1, team_a_id=1, team_b_id=2, team_a_points=15, team_b_points=5)
        assert validate_matchup(matchup) == []

    def test_fractional_points(self):
        """Test fractional overrides are fine as long as they sum to 20."""
        matchup = Matchup(week_number=1, team_a_id=1, team_b_id=2, team_a_points=12.5,
                          team_b_points=7.5)
        assert validate_matchup(matchup) == []

    def test_wrong_sum(self):
        """Test points not summing to 20."""
        matchup = Matchup(week_number=1, team_a_id=1, team_b_id=2, team_a_points=15, team_b_points=6)
        errors = validate_matchup(matchup)
        assert len(errors) == 1
        assert 'must sum to 20' in errors[0].message

    def test_negative_points(self):
        """Test negative points even when the sum is right."""
        matchup = Matchup(week_number=1, team_a_id=1, team_b_id=2, team_a_points=-1,
                          team_b_points=21)
        errors = validate_matchup(matchup)
        assert fields(errors) == {'team_a_points'}
        assert 'negative' in errors[0].message

    def test_team_plays_itself(self):
        """Test a team can't be on both sides."""
        matchup = Matchup(week_number=1, team_a_id=3, team_b_id=3, team_a_points=10,
                          team_b_points=10)
        assert fields(validate_matchup(matchup)) == {'team_b_id'}

    def test_valid_forfeit(self):
        """Test a forfeit awarded 0/20."""
        matchup = Matchup(week_number=1, team_a_id=1, team_b_id=2, team_a_points=0,
                          team_b_points=20, is_forfeit=True, forfeit_team_id=1)
        assert validate_matchup(matchup) == []

    def test_forfeit_wrong_award(self):
        """Test a forfeit split any other way."""
        matchup = Matchup(week_number=1, team_a_id=1, team_b_id=2, team_a_points=5,
                          team_b_points=15, is_forfeit=True, forfeit_team_id=1)
        errors = validate_matchup(matchup)
        assert fields(errors) == {'is_forfeit'}

    def test_forfeit_team_not_in_matchup(self):
        """Test a forfeit naming an outside team."""
        matchup = Matchup(week_number=1, team_a_id=1, team_b_id=2, team_a_points=0,
                          team_b_points=20, is_forfeit=True, forfeit_team_id=7)
        assert fields(validate_matchup(matchup)) == {'forfeit_team_id'}

    def test_other_total(self):
        """Test a league playing for 10 points."""
        matchup = Matchup(week_number=1, team_a_id=1, team_b_id=2, team_a_points=6, team_b_points=4)
        assert validate_matchup(matchup, total=10) == []
        assert validate_matchup(matchup) != []


class TestScorecardValidation:
    """Tests for scorecard intake."""

    def card(self, holes, strokes=4):
        return [HoleScore(hole_number=n, strokes=strokes) for n in holes]

    def test_complete_front(self):
        """Test a full front-nine card."""
        assert validate_scorecard(self.card(range(1, 10)), 'front') == []

    def test_complete_full_course(self):
        """Test a full 18-hole card."""
        assert validate_scorecard(self.card(range(1, 19)), None) == []

    def test_nine_hole_course(self):
        """Test a 9-hole course played in full."""
        assert validate_scorecard(self.card(range(1, 10)), None, course_hole_count=9) == []

    def test_wrong_side(self):
        """Test a front-nine card submitted for a back-nine week."""
        errors = validate_scorecard(self.card(range(1, 10)), 'back')
        assert any('not in play for the back side' in e for e in errors)
        assert any('0 of 9 holes' in e for e in errors)

    def test_missing_holes(self):
        """Test an incomplete card."""
        errors = validate_scorecard(self.card(range(10, 17)), 'back')
        assert errors == ['Scorecard has 7 of 9 holes']

    def test_duplicates_and_bad_strokes(self):
        """Test duplicate holes and zero strokes."""
        holes = self.card(range(1, 10)) + [HoleScore(hole_number=3, strokes=0)]
        errors = validate_scorecard(holes, 'front')
        assert 'Duplicate holes: 3' in errors
        assert 'Hole 3 has 0 strokes (min 1)' in errors

    def test_hole_off_course(self):
        """Test a hole number beyond the course."""
        errors = validate_scorecard(self.card([19]), None)
        assert 'Hole 19 is not on a 18-hole course' in errors

    def test_unknown_side(self):
        """Test an unknown side string is reported."""
        assert validate_scorecard(self.card(range(1, 10)), 'middle') == ["Unknown course side 'middle'"]
