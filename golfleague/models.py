"""Data models for the golf league scoring engine."""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class Team:
    """A league team with its cached season totals."""
    team_id: int
    name: str
    handicap: float = 0.0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    total_points: float = 0.0


@dataclass(frozen=True)
class HoleScore:
    """Strokes taken on one hole of a scorecard."""
    hole_number: int
    strokes: int


@dataclass(frozen=True)
class WeeklyScoreEntry:
    """One team's finalized result for one week."""
    team_id: int
    week_number: int
    gross_score: float
    handicap: float = 0.0
    net_score: float = 0.0
    position: int = 0
    points: float = 0.0
    is_sub: bool = False
    is_dnp: bool = False


@dataclass(frozen=True)
class Matchup:
    """A head-to-head pairing of two teams for one week."""
    week_number: int
    team_a_id: int
    team_b_id: int
    team_a_gross: float = 0.0
    team_b_gross: float = 0.0
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
    affects_standings: bool = True  # False for exhibition rounds kept out of the leaderboard

    def involves(self, team_id: int) -> bool:
        return team_id in (self.team_a_id, self.team_b_id)


@dataclass(frozen=True)
class PointsSuggestion:
    """Match points for each side of a matchup."""
    points_a: float
    points_b: float

    @property
    def total(self) -> float:
        return self.points_a + self.points_b


@dataclass(frozen=True)
class SnapshotEntry:
    """A team's rank and handicap at the end of a week."""
    team_id: int
    rank: int
    handicap: float


@dataclass(frozen=True)
class LeaderboardSnapshot:
    """Leaderboard state retained to compute next week's movement."""
    week_number: int
    entries: Dict[int, SnapshotEntry] = field(default_factory=dict)

    def get(self, team_id: int) -> Optional[SnapshotEntry]:
        return self.entries.get(team_id)


@dataclass(frozen=True)
class LeaderboardRow:
    """One ranked team on the leaderboard."""
    team_id: int
    rank: int
    total_points: float
    wins: int
    losses: int
    ties: int
    handicap: float
    previous_rank: Optional[int] = None
    previous_handicap: Optional[float] = None
    rank_change: Optional[int] = None  # positive = moved up
    handicap_change: Optional[float] = None  # positive = handicap dropped

    @property
    def rounds_played(self) -> int:
        return self.wins + self.losses + self.ties


@dataclass(frozen=True)
class StrokePlayEntry:
    """A team's net score in a stroke-play week."""
    team_id: int
    net_score: float
    gross_score: float
    is_dnp: bool = False


@dataclass(frozen=True)
class StrokePlayResult:
    """Finishing position and points for a stroke-play week."""
    team_id: int
    position: int
    points: float
    bonus_points: float = 0.0

    @property
    def total_points(self) -> float:
        return self.points + self.bonus_points
