"""Unit tests for the leaderboard aggregator."""

import pytest

from golfleague.leaderboard import (
    build_leaderboard,
    leaderboard_with_movement,
    standings_at_week,
    take_snapshot,
)
from golfleague.models import LeaderboardSnapshot, Matchup, SnapshotEntry


@pytest.fixture
def season_matchups():
    """Two weeks of matchups for four teams.

    Totals: team 2 = 25 (1-1), team 1 = 23 (1-1), team 3 = 22 (1-0-1), team 4 = 10 (0-1-1)
    """
    return [
        Matchup(week_number=1, team_a_id=1, team_b_id=2, team_a_handicap=4, team_b_handicap=6,
                team_a_points=15, team_b_points=5),
        Matchup(week_number=1, team_a_id=3, team_b_id=4, team_a_handicap=5, team_b_handicap=3,
                team_a_points=10, team_b_points=10),
        Matchup(week_number=2, team_a_id=1, team_b_id=3, team_a_handicap=5, team_b_handicap=9,
                team_b_is_sub=True, team_a_points=8, team_b_points=12),
        Matchup(week_number=2, team_a_id=2, team_b_id=4, is_forfeit=True, forfeit_team_id=4),
    ]


def by_team(rows):
    return {row.team_id: row for row in rows}


class TestBuildLeaderboard:
    """Tests for ranking and season totals."""

    def test_order(self, season_matchups):
        """Test teams are ranked by total points."""
        rows = build_leaderboard(season_matchups)
        assert [r.team_id for r in rows] == [2, 1, 3, 4]
        assert [r.rank for r in rows] == [1, 2, 3, 4]

    def test_totals_and_records(self, season_matchups):
        """Test points, wins, losses and ties per team, forfeits included."""
        rows = by_team(build_leaderboard(season_matchups))
        assert rows[2].total_points == 25
        assert (rows[2].wins, rows[2].losses, rows[2].ties) == (1, 1, 0)
        assert (rows[3].wins, rows[3].losses, rows[3].ties) == (1, 0, 1)
        assert rows[4].total_points == 10
        assert rows[4].rounds_played == 2

    def test_handicap_from_matchups(self, season_matchups):
        """Test floor of the mean non-sub, non-forfeit matchup handicaps."""
        rows = by_team(build_leaderboard(season_matchups))
        assert rows[1].handicap == 4  # floor(4.5)
        assert rows[2].handicap == 6
        assert rows[3].handicap == 5  # sub round ignored
        assert rows[4].handicap == 3

    def test_handicaps_override(self, season_matchups):
        """Test supplied current handicaps take precedence."""
        rows = by_team(build_leaderboard(season_matchups, handicaps={1: 7}))
        assert rows[1].handicap == 7
        assert rows[2].handicap == 6

    def test_excluded_matchups(self, season_matchups):
        """Test matchups that don't affect standings are skipped."""
        exhibition = Matchup(week_number=3, team_a_id=4, team_b_id=1, team_a_points=20,
                             team_b_points=0, affects_standings=False)
        rows = by_team(build_leaderboard(season_matchups + [exhibition]))
        assert rows[4].total_points == 10
        assert rows[1].rounds_played == 2

    def test_wins_break_point_ties(self):
        """Test equal points are ordered by wins."""
        matchups = [
            Matchup(week_number=1, team_a_id=1, team_b_id=3, team_a_points=15, team_b_points=5),
            Matchup(week_number=1, team_a_id=2, team_b_id=4, team_a_points=10, team_b_points=10),
            Matchup(week_number=2, team_a_id=1, team_b_id=4, team_a_points=5, team_b_points=15),
            Matchup(week_number=2, team_a_id=2, team_b_id=3, team_a_points=10, team_b_points=10),
        ]
        rows = build_leaderboard(matchups)
        assert [r.team_id for r in rows] == [4, 1, 2, 3]

    def test_team_id_breaks_full_ties(self):
        """Test identical records are ordered by team id."""
        matchups = [
            Matchup(week_number=1, team_a_id=7, team_b_id=3, team_a_points=10, team_b_points=10),
        ]
        rows = build_leaderboard(matchups)
        assert [(r.team_id, r.rank) for r in rows] == [(3, 1), (7, 2)]

    def test_teams_without_matchups(self, season_matchups):
        """Test listed teams with no rounds still appear."""
        rows = build_leaderboard(season_matchups, team_ids=[1, 2, 3, 4, 5])
        assert rows[-1].team_id == 5
        assert rows[-1].total_points == 0
        assert rows[-1].handicap == 0
        assert rows[-1].rounds_played == 0

    def test_forfeit_without_forfeiting_team(self):
        """Test a forfeit missing forfeit_team_id counts its stored points."""
        matchup = Matchup(week_number=1, team_a_id=1, team_b_id=2, team_a_points=20,
                          team_b_points=0, is_forfeit=True)
        rows = by_team(build_leaderboard([matchup]))
        assert rows[1].total_points == 20
        assert (rows[1].wins, rows[2].losses) == (1, 1)
        assert rows[1].handicap == 0

    def test_empty(self):
        """Test no matchups means an empty leaderboard."""
        assert build_leaderboard([]) == []


class TestMovement:
    """Tests for week-over-week movement."""

    def test_no_snapshot(self, season_matchups):
        """Test first week has no movement."""
        for row in build_leaderboard(season_matchups):
            assert row.rank_change is None
            assert row.handicap_change is None
            assert row.previous_rank is None

    def test_against_snapshot(self, season_matchups):
        """Test positive rank change means moving up; handicap change is previous - current."""
        snapshot = LeaderboardSnapshot(
            week_number=1,
            entries={
                2: SnapshotEntry(team_id=2, rank=3, handicap=8),
                1: SnapshotEntry(team_id=1, rank=1, handicap=4),
            },
        )
        rows = by_team(build_leaderboard(season_matchups, snapshot))
        assert rows[2].rank_change == 2
        assert rows[2].handicap_change == 2
        assert rows[1].rank_change == -1
        assert rows[1].handicap_change == 0
        assert rows[3].rank_change is None
        assert rows[3].handicap_change is None

    def test_snapshot_round_trip(self, season_matchups):
        """Test rebuilding against its own snapshot changes nothing but movement."""
        rows = build_leaderboard(season_matchups)
        snapshot = take_snapshot(rows, week_number=2)
        again = build_leaderboard(season_matchups, snapshot)
        assert [r.total_points for r in again] == [r.total_points for r in rows]
        assert [r.team_id for r in again] == [r.team_id for r in rows]
        assert all(r.rank_change == 0 and r.handicap_change == 0 for r in again)

    def test_take_snapshot(self, season_matchups):
        """Test a snapshot records rank and handicap per team."""
        snapshot = take_snapshot(build_leaderboard(season_matchups), week_number=2)
        assert snapshot.week_number == 2
        assert snapshot.get(2) == SnapshotEntry(team_id=2, rank=1, handicap=6)
        assert snapshot.get(9) is None


class TestStandingsHistory:
    """Tests for standings at earlier weeks."""

    def test_standings_at_week(self, season_matchups):
        """Test only matchups through the week count."""
        rows = standings_at_week(season_matchups, 1)
        assert [r.team_id for r in rows] == [1, 3, 4, 2]

    def test_movement_from_prior_week(self, season_matchups):
        """Test movement derived from the previous played week."""
        rows = by_team(leaderboard_with_movement(season_matchups))
        assert rows[2].rank_change == 3
        assert rows[1].rank_change == -1
        assert rows[3].rank_change == -1
        assert rows[4].rank_change == -1
        assert rows[1].handicap_change == 0

    def test_single_week_has_no_movement(self, season_matchups):
        """Test one played week has nothing to compare against."""
        rows = leaderboard_with_movement(season_matchups[:2])
        assert all(r.rank_change is None for r in rows)

    def test_standings_at_week_points_total(self, season_matchups):
        """Test forfeits award the league's own points total."""
        rows = by_team(standings_at_week(season_matchups, 2, total=10))
        assert rows[2].total_points == 15
        assert rows[4].total_points == 10
        assert by_team(standings_at_week(season_matchups, 2))[2].total_points == 25

    def test_movement_points_total(self, season_matchups):
        """Test the points total reaches both weeks of a movement rebuild."""
        rows = by_team(leaderboard_with_movement(season_matchups, total=10))
        assert rows[2].total_points == 15
        assert rows[2].previous_rank == 4

    def test_movement_with_current_handicaps(self):
        """Test supplied handicaps are shown but change is measured from matchups."""
        matchups = [
            Matchup(week_number=1, team_a_id=1, team_b_id=2, team_a_handicap=4,
                    team_b_handicap=6, team_a_points=15, team_b_points=5),
            Matchup(week_number=2, team_a_id=1, team_b_id=2, team_a_handicap=6,
                    team_b_handicap=4, team_a_points=10, team_b_points=10),
        ]
        plain = by_team(leaderboard_with_movement(matchups))
        supplied = by_team(leaderboard_with_movement(matchups, handicaps={1: 6, 2: 4}))
        assert plain[1].handicap_change == -1
        assert supplied[1].handicap_change == plain[1].handicap_change
        assert supplied[2].handicap_change == plain[2].handicap_change == 1
        assert supplied[1].handicap == 6
        assert supplied[2].handicap == 4
        assert supplied[1].previous_handicap == 4
