"""Weekly scoring workflow: handicaps, match points and week finalization."""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .course_side import resolve_side
from .handicap import clamp_handicap, compute_handicap
from .leaderboard import build_leaderboard, take_snapshot
from .models import (
    HoleScore,
    LeaderboardRow,
    LeaderboardSnapshot,
    Matchup,
    StrokePlayEntry,
    StrokePlayResult,
    WeeklyScoreEntry,
)
from .schemas import HandicapSettings, LeagueConfig
from .scoring import (
    calculate_stroke_play_points,
    generate_point_scale,
    gross_from_holes,
    net_score,
    suggest_matchup_points,
)
from .validators import MatchupInvariantError, validate_matchup, validate_scorecard

logger = logging.getLogger('golfleague.weekly')


@dataclass
class WeekResult:
    """Outcome of finalizing a week.

    When `errors` is non-empty nothing was finalized: the leaderboard is
    empty and there is no snapshot.
    """
    week_number: int
    matchups: list[Matchup] = field(default_factory=list)
    weekly_scores: list[WeeklyScoreEntry] = field(default_factory=list)
    leaderboard: list[LeaderboardRow] = field(default_factory=list)
    snapshot: Optional[LeaderboardSnapshot] = None
    errors: list[MatchupInvariantError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class WeekScorer:
    """
    Scores one league week.

    Handicaps come from each team's weekly history before this week; the
    side of the course in play comes from the league's play mode.
    """

    def __init__(
        self,
        week: int,
        config: LeagueConfig,
        history: Iterable[WeeklyScoreEntry] = (),
        settings: Optional[HandicapSettings] = None,
    ):
        """
        Initialize scorer.

        Args:
            week: Week number (1-based)
            config: League configuration
            history: Weekly score entries from earlier weeks (all teams);
                rounds played by a substitute don't count toward handicaps
            settings: Handicap settings (default: converted from config)
        """
        self.week = week
        self.config = config
        self.settings = settings if settings is not None else config.handicap.to_settings()
        self.side = resolve_side(week, config.play_mode, config.first_week_side)
        self.history: dict[int, list[WeeklyScoreEntry]] = {}
        for entry in history:
            if entry.is_sub:
                continue
            self.history.setdefault(entry.team_id, []).append(entry)

    def team_handicap(self, team_id: int) -> float:
        """Handicap a team plays at this week, from its earlier rounds."""
        return compute_handicap(self.history.get(team_id, []), self.settings, self.week)

    def playing_handicap(
        self, team_id: int, is_sub: bool = False, manual: Optional[float] = None
    ) -> float:
        """
        Handicap used for one side of a matchup.

        A manual handicap is only honored in week 1 and for substitutes, and
        is clamped to the league bounds. A substitute without a manual value
        plays at the default handicap.
        """
        if (is_sub or self.week == 1) and manual is not None:
            return clamp_handicap(manual, self.settings.min_handicap, self.settings.max_handicap)
        if is_sub:
            return clamp_handicap(
                self.settings.default_handicap,
                self.settings.min_handicap,
                self.settings.max_handicap,
            )
        return self.team_handicap(team_id)

    def gross_score(self, holes: Iterable[HoleScore]) -> int:
        """
        Gross score from a scorecard, counting only the holes in play.

        Problems with the card are logged, not raised.
        """
        holes = list(holes)
        for problem in validate_scorecard(holes, self.side, self.config.course_hole_count):
            logger.warning(f'Week {self.week} scorecard: {problem}')
        return gross_from_holes(holes, self.side)

    def score_matchup(
        self, matchup: Matchup, manual_handicaps: Optional[dict[int, float]] = None
    ) -> Matchup:
        """
        Fill in handicaps, net scores and suggested points for a matchup.

        Args:
            matchup: Matchup with gross scores and sub flags entered
            manual_handicaps: Manual handicap per team id (week 1 / subs)

        Returns:
            Copy of the matchup with handicaps, nets and points set
        """
        manual_handicaps = manual_handicaps or {}
        rule = self.config.points_rule
        total = self.config.total_points

        if matchup.is_forfeit:
            if not matchup.involves(matchup.forfeit_team_id):
                logger.warning(
                    f'Forfeit {matchup.team_a_id} vs {matchup.team_b_id} names no '
                    f'forfeiting team; left unscored'
                )
                return matchup
            points = suggest_matchup_points(matchup, total, rule)
            return dataclasses.replace(
                matchup, team_a_points=points.points_a, team_b_points=points.points_b
            )

        handicap_a = self.playing_handicap(
            matchup.team_a_id, matchup.team_a_is_sub, manual_handicaps.get(matchup.team_a_id)
        )
        handicap_b = self.playing_handicap(
            matchup.team_b_id, matchup.team_b_is_sub, manual_handicaps.get(matchup.team_b_id)
        )
        scored = dataclasses.replace(
            matchup,
            team_a_handicap=handicap_a,
            team_b_handicap=handicap_b,
            team_a_net=net_score(matchup.team_a_gross, handicap_a),
            team_b_net=net_score(matchup.team_b_gross, handicap_b),
        )
        points = suggest_matchup_points(scored, total, rule)
        return dataclasses.replace(
            scored, team_a_points=points.points_a, team_b_points=points.points_b
        )

    def score_week(
        self,
        matchups: Iterable[Matchup],
        manual_handicaps: Optional[dict[int, float]] = None,
    ) -> list[Matchup]:
        """Score every matchup of this week (other weeks are ignored)."""
        scored = []
        for matchup in matchups:
            if matchup.week_number != self.week:
                continue
            scored.append(self.score_matchup(matchup, manual_handicaps))
        logger.info(f'Scored {len(scored)} matchups for week {self.week}')
        return scored

    def score_stroke_play(self, entries: list[StrokePlayEntry]) -> list[StrokePlayResult]:
        """Position points for a stroke-play week."""
        stroke_play = self.config.stroke_play
        if stroke_play.point_preset == 'custom' and stroke_play.point_scale:
            scale = list(stroke_play.point_scale)
        else:
            scale = generate_point_scale(stroke_play.point_preset, len(entries))
        return calculate_stroke_play_points(entries, scale, stroke_play, self.settings.base_score)

    def weekly_entries(self, matchups: Iterable[Matchup]) -> list[WeeklyScoreEntry]:
        """
        One WeeklyScoreEntry per team per matchup; forfeited rounds are DNP.

        Both sides of a forfeit are DNP, the team that showed up included:
        neither round was played against an opponent, so neither belongs in
        handicap history.
        """
        entries = []
        for m in matchups:
            for team_id, gross, handicap, net, points, is_sub in (
                (m.team_a_id, m.team_a_gross, m.team_a_handicap, m.team_a_net,
                 m.team_a_points, m.team_a_is_sub),
                (m.team_b_id, m.team_b_gross, m.team_b_handicap, m.team_b_net,
                 m.team_b_points, m.team_b_is_sub),
            ):
                entries.append(
                    WeeklyScoreEntry(
                        team_id=team_id,
                        week_number=m.week_number,
                        gross_score=gross,
                        handicap=handicap,
                        net_score=net,
                        points=points,
                        is_sub=is_sub,
                        is_dnp=m.is_forfeit,
                    )
                )
        return entries

    def finalize_week(
        self,
        matchups: Iterable[Matchup],
        prior_matchups: Iterable[Matchup] = (),
        previous_snapshot: Optional[LeaderboardSnapshot] = None,
        team_ids: Optional[Iterable[int]] = None,
    ) -> WeekResult:
        """
        Validate this week's matchups and produce the week's standings.

        Args:
            matchups: This week's matchups, points already set (suggested or overridden)
            prior_matchups: Matchups from earlier weeks
            previous_snapshot: Snapshot stored when the previous week was finalized
            team_ids: Teams to include even without matchups

        Returns:
            WeekResult with leaderboard, snapshot and weekly entries, or with
            errors and nothing finalized
        """
        matchups = [m for m in matchups if m.week_number == self.week]
        errors = []
        for matchup in matchups:
            errors.extend(validate_matchup(matchup, self.config.total_points))
        if errors:
            for error in errors:
                logger.error(f'Week {self.week}: {error}')
            return WeekResult(week_number=self.week, matchups=matchups, errors=errors)

        weekly_scores = self.weekly_entries(matchups)

        # Handicaps going into next week, including this week's rounds
        next_history: dict[int, list[WeeklyScoreEntry]] = {
            team_id: list(entries) for team_id, entries in self.history.items()
        }
        for entry in weekly_scores:
            if not entry.is_sub:
                next_history.setdefault(entry.team_id, []).append(entry)
        handicaps = {
            team_id: compute_handicap(entries, self.settings, self.week + 1)
            for team_id, entries in next_history.items()
        }

        season = [m for m in prior_matchups if m.week_number < self.week] + matchups
        leaderboard = build_leaderboard(
            season,
            previous_snapshot,
            handicaps,
            team_ids,
            self.config.total_points,
        )
        logger.info(f'Finalized week {self.week}: {len(leaderboard)} teams on the leaderboard')
        return WeekResult(
            week_number=self.week,
            matchups=matchups,
            weekly_scores=weekly_scores,
            leaderboard=leaderboard,
            snapshot=take_snapshot(leaderboard, self.week),
        )
