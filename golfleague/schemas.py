"""Pydantic schemas for league configuration, handicap settings and season data."""

import logging
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import (
    DEFAULT_BASE_SCORE,
    DEFAULT_MAX_HANDICAP,
    DEFAULT_MULTIPLIER,
    DEFAULT_WIN_BASE,
    DEFAULT_WIN_MAX,
    DEFAULT_WIN_PER_STROKE,
    MAX_TOTAL_DROPS,
    TOTAL_POINTS,
)
from .models import LeaderboardSnapshot, Matchup, SnapshotEntry, Team, WeeklyScoreEntry

logger = logging.getLogger('golfleague.schemas')


# ---------------------------------------------------------------------------
# Handicap settings (engine form)
# ---------------------------------------------------------------------------


class AllScores(BaseModel):
    """Every score in the history window counts."""

    mode: Literal['all'] = 'all'

    class Config:
        extra = 'forbid'
        frozen = True


class LastN(BaseModel):
    """Only the most recent `score_count` scores count."""

    mode: Literal['last_n'] = 'last_n'
    score_count: int = Field(..., ge=0)

    class Config:
        extra = 'forbid'
        frozen = True


class BestOfLast(BaseModel):
    """The `best_of` lowest net scores among the most recent `last_of`."""

    mode: Literal['best_of_last'] = 'best_of_last'
    best_of: int = Field(..., ge=0)
    last_of: int = Field(..., ge=0)

    @model_validator(mode='after')
    def check_window(self):
        """A selection can't keep more scores than its window holds."""
        if self.best_of > self.last_of:
            raise ValueError(f'best_of ({self.best_of}) > last_of ({self.last_of})')
        return self

    class Config:
        extra = 'forbid'
        frozen = True


ScoreSelection = Annotated[Union[AllScores, LastN, BestOfLast], Field(discriminator='mode')]


class Weighting(BaseModel):
    """Exponential recency weighting of the selected scores."""

    recent: float = Field(1.5, gt=0)
    decay: float = Field(0.1, ge=0, le=1)

    class Config:
        extra = 'forbid'
        frozen = True


class ExceptionalCap(BaseModel):
    """Gross scores above `cap` are clamped before averaging."""

    cap: float = Field(..., gt=0)

    class Config:
        extra = 'forbid'
        frozen = True


class Provisional(BaseModel):
    """Placeholder handicap for teams with fewer than `weeks` rounds."""

    weeks: int = Field(..., ge=0)
    multiplier: float = Field(1.0, ge=0)

    class Config:
        extra = 'forbid'
        frozen = True


class Trend(BaseModel):
    """Nudge toward the recent scoring trajectory."""

    weight: float = Field(0.1, ge=0)

    class Config:
        extra = 'forbid'
        frozen = True


class HandicapSettings(BaseModel):
    """Per-league handicap policy.

    Optional features are separate blocks (None = disabled), and the score
    selection is a tagged union on `mode`, so a setting can't be enabled
    without the values it depends on.
    """

    base_score: float = DEFAULT_BASE_SCORE
    multiplier: float = DEFAULT_MULTIPLIER
    rounding: Literal['floor', 'round', 'ceil'] = 'floor'
    default_handicap: float = 0.0
    min_handicap: Optional[float] = None
    max_handicap: float = DEFAULT_MAX_HANDICAP
    selection: ScoreSelection = AllScores()
    drop_highest: int = Field(0, ge=0)
    drop_lowest: int = Field(0, ge=0)
    weighting: Optional[Weighting] = None
    exceptional_cap: Optional[ExceptionalCap] = None
    provisional: Optional[Provisional] = None
    freeze_week: Optional[int] = Field(None, ge=1)
    trend: Optional[Trend] = None
    require_approval: bool = False

    @model_validator(mode='after')
    def check_bounds(self):
        """Ensure min/max and drop counts are consistent."""
        if self.min_handicap is not None and self.min_handicap > self.max_handicap:
            raise ValueError(
                f'min_handicap ({self.min_handicap}) > max_handicap ({self.max_handicap})'
            )
        if self.drop_highest + self.drop_lowest > MAX_TOTAL_DROPS:
            raise ValueError(
                f'drop_highest + drop_lowest ({self.drop_highest + self.drop_lowest}) '
                f'exceeds {MAX_TOTAL_DROPS}'
            )
        return self

    class Config:
        extra = 'forbid'
        frozen = True


# ---------------------------------------------------------------------------
# Handicap settings (persisted form)
# ---------------------------------------------------------------------------


class LeagueHandicapRecord(BaseModel):
    """Flat handicap columns as stored on the league row.

    Enum-like fields stay plain strings here so that bad stored values reach
    `validate_handicap_settings` instead of failing to load.
    """

    base_score: float = DEFAULT_BASE_SCORE
    multiplier: float = DEFAULT_MULTIPLIER
    rounding: str = 'floor'
    default_handicap: float = 0.0
    max_handicap: Optional[float] = DEFAULT_MAX_HANDICAP
    min_handicap: Optional[float] = None
    score_selection: str = 'all'
    score_count: Optional[int] = None
    best_of: Optional[int] = None
    last_of: Optional[int] = None
    drop_highest: int = 0
    drop_lowest: int = 0
    use_weighting: bool = False
    weight_recent: float = 1.5
    weight_decay: float = 0.1
    cap_exceptional: bool = False
    exceptional_cap: Optional[float] = None
    prov_weeks: int = 0
    prov_multiplier: float = 1.0
    freeze_week: Optional[int] = None
    use_trend: bool = False
    trend_weight: float = 0.1
    require_approval: bool = False

    class Config:
        extra = 'ignore'

    def to_settings(self) -> HandicapSettings:
        """
        Convert the flat record into engine settings.

        The record is expected to have passed validate_handicap_settings();
        anything it would have rejected raises pydantic's ValidationError here.

        Returns:
            HandicapSettings with feature blocks built from the toggles
        """
        if self.score_selection == 'last_n':
            selection: dict = {'mode': 'last_n', 'score_count': self.score_count}
        elif self.score_selection == 'best_of_last':
            selection = {'mode': 'best_of_last', 'best_of': self.best_of, 'last_of': self.last_of}
        else:
            selection = {'mode': self.score_selection}

        max_handicap = self.max_handicap
        if max_handicap is None:
            logger.warning(f'No max handicap stored, using {DEFAULT_MAX_HANDICAP}')
            max_handicap = DEFAULT_MAX_HANDICAP

        return HandicapSettings(
            base_score=self.base_score,
            multiplier=self.multiplier,
            rounding=self.rounding,
            default_handicap=self.default_handicap,
            min_handicap=self.min_handicap,
            max_handicap=max_handicap,
            selection=selection,
            drop_highest=self.drop_highest,
            drop_lowest=self.drop_lowest,
            weighting=(
                {'recent': self.weight_recent, 'decay': self.weight_decay}
                if self.use_weighting
                else None
            ),
            exceptional_cap={'cap': self.exceptional_cap} if self.cap_exceptional else None,
            provisional=(
                {'weeks': self.prov_weeks, 'multiplier': self.prov_multiplier}
                if self.prov_weeks > 0
                else None
            ),
            freeze_week=self.freeze_week,
            trend={'weight': self.trend_weight} if self.use_trend else None,
            require_approval=self.require_approval,
        )


# ---------------------------------------------------------------------------
# Points and league configuration
# ---------------------------------------------------------------------------


class PointsRule(BaseModel):
    """How a winning margin converts into match points.

    The winner gets `win_base + win_per_stroke * margin` (margin rounded
    half-up to whole strokes), capped at `win_max`. A `margin_table` maps
    whole-stroke margins to winner points and takes precedence when set.
    """

    total: int = Field(TOTAL_POINTS, gt=0)
    win_base: float = DEFAULT_WIN_BASE
    win_per_stroke: float = Field(DEFAULT_WIN_PER_STROKE, ge=0)
    win_max: float = DEFAULT_WIN_MAX
    margin_table: Optional[dict[int, float]] = None

    @model_validator(mode='after')
    def check_spread(self):
        """Winner must always get more than half and never more than the total."""
        half = self.total / 2
        if not (half < self.win_base <= self.win_max <= self.total):
            raise ValueError(
                f'Need {half} < win_base ({self.win_base}) <= win_max ({self.win_max}) '
                f'<= total ({self.total})'
            )
        for margin, points in (self.margin_table or {}).items():
            if margin < 0:
                raise ValueError(f'Negative margin in margin_table: {margin}')
            if not (half < points <= self.total):
                raise ValueError(f'margin_table[{margin}] = {points} must be in ({half}, {self.total}]')
        return self

    class Config:
        extra = 'forbid'


class StrokePlayConfig(BaseModel):
    """Position-based weekly points for stroke-play leagues."""

    point_preset: Literal['linear', 'weighted', 'pga_style', 'custom'] = 'linear'
    point_scale: Optional[list[float]] = None
    tie_mode: Literal['split', 'same'] = 'split'
    show_up_bonus: float = Field(0.0, ge=0)
    beat_handicap_bonus: float = Field(0.0, ge=0)
    dnp_points: float = Field(0.0, ge=0)
    dnp_penalty: float = Field(0.0, le=0)

    @field_validator('point_scale')
    @classmethod
    def validate_descending(cls, v):
        """Ensure a custom point scale never rewards a worse finish more."""
        if v is None:
            return v
        if any(p < 0 for p in v):
            raise ValueError('Point scale values must be non-negative')
        if any(a < b for a, b in zip(v, v[1:])):
            raise ValueError('Point scale must be in descending order')
        return v

    class Config:
        extra = 'forbid'


class LeagueConfig(BaseModel):
    """League configuration settings."""

    name: str = Field(..., min_length=1)
    play_mode: Literal['full_18', 'nine_hole_front', 'nine_hole_back', 'nine_hole_alternating'] = (
        'full_18'
    )
    first_week_side: Literal['front', 'back'] = 'front'
    course_hole_count: int = Field(18, ge=9, le=18)
    number_of_weeks: int = Field(..., ge=1, le=52)
    total_points: int = Field(TOTAL_POINTS, gt=0)
    points_rule: PointsRule = Field(default_factory=PointsRule)
    handicap: LeagueHandicapRecord = Field(default_factory=LeagueHandicapRecord)
    stroke_play: StrokePlayConfig = Field(default_factory=StrokePlayConfig)

    @model_validator(mode='after')
    def check_points_total(self):
        """The points rule must split the same total the league plays for."""
        if self.points_rule.total != self.total_points:
            raise ValueError(
                f'points_rule.total ({self.points_rule.total}) != total_points ({self.total_points})'
            )
        return self

    class Config:
        extra = 'forbid'


# ---------------------------------------------------------------------------
# Season data file
# ---------------------------------------------------------------------------


class TeamRecord(BaseModel):
    """Team row."""

    team_id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1)
    handicap: float = 0.0
    wins: int = Field(0, ge=0)
    losses: int = Field(0, ge=0)
    ties: int = Field(0, ge=0)
    total_points: float = 0.0

    class Config:
        extra = 'forbid'

    def to_model(self) -> Team:
        return Team(**self.model_dump())


class MatchupRecord(BaseModel):
    """Matchup row."""

    week_number: int = Field(..., ge=1)
    team_a_id: int = Field(..., ge=1)
    team_b_id: int = Field(..., ge=1)
    team_a_gross: float = Field(0.0, ge=0)
    team_b_gross: float = Field(0.0, ge=0)
    team_a_handicap: float = 0.0
    team_b_handicap: float = 0.0
    team_a_net: float = 0.0
    team_b_net: float = 0.0
    team_a_points: float = 0.0
    team_b_points: float = 0.0
    team_a_is_sub: bool = False
    team_b_is_sub: bool = False
    is_forfeit: bool = False
    forfeit_team_id: Optional[int] = None
    affects_standings: bool = True

    class Config:
        extra = 'forbid'

    def to_model(self) -> Matchup:
        return Matchup(**self.model_dump())


class WeeklyScoreRecord(BaseModel):
    """Weekly score row."""

    team_id: int = Field(..., ge=1)
    week_number: int = Field(..., ge=1)
    gross_score: float = 0.0
    handicap: float = 0.0
    net_score: float = 0.0
    position: int = Field(0, ge=0)
    points: float = 0.0
    is_sub: bool = False
    is_dnp: bool = False

    class Config:
        extra = 'forbid'

    def to_model(self) -> WeeklyScoreEntry:
        return WeeklyScoreEntry(**self.model_dump())


class SnapshotEntryRecord(BaseModel):
    """One team's rank and handicap in a stored snapshot."""

    team_id: int = Field(..., ge=1)
    rank: int = Field(..., ge=1)
    handicap: float

    class Config:
        extra = 'forbid'


class SnapshotRecord(BaseModel):
    """Stored leaderboard snapshot for a finalized week."""

    week_number: int = Field(..., ge=1)
    entries: list[SnapshotEntryRecord]

    class Config:
        extra = 'forbid'

    def to_model(self) -> LeaderboardSnapshot:
        return LeaderboardSnapshot(
            week_number=self.week_number,
            entries={
                e.team_id: SnapshotEntry(team_id=e.team_id, rank=e.rank, handicap=e.handicap)
                for e in self.entries
            },
        )


class SeasonFile(BaseModel):
    """Complete season.json file structure."""

    teams: list[TeamRecord]
    matchups: list[MatchupRecord] = Field(default_factory=list)
    weekly_scores: list[WeeklyScoreRecord] = Field(default_factory=list)
    snapshots: list[SnapshotRecord] = Field(default_factory=list)

    class Config:
        extra = 'forbid'

    def latest_snapshot_before(self, week_number: int) -> Optional[LeaderboardSnapshot]:
        """Most recent stored snapshot for a week earlier than `week_number`."""
        earlier = [s for s in self.snapshots if s.week_number < week_number]
        if not earlier:
            return None
        return max(earlier, key=lambda s: s.week_number).to_model()
