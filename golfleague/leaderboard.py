"""Season leaderboard built from matchups, with week-over-week movement."""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from .constants import TOTAL_POINTS
from .models import LeaderboardRow, LeaderboardSnapshot, Matchup, SnapshotEntry
from .scoring import matchup_points

logger = logging.getLogger('golfleague.leaderboard')


@dataclass
class _TeamTotals:
    points: float = 0.0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    handicaps: list[float] = field(default_factory=list)


def _matchup_handicap(totals: _TeamTotals) -> float:
    if not totals.handicaps:
        return 0.0
    return float(math.floor(sum(totals.handicaps) / len(totals.handicaps)))


def build_leaderboard(
    matchups: Iterable[Matchup],
    previous_snapshot: Optional[LeaderboardSnapshot] = None,
    handicaps: Optional[dict[int, float]] = None,
    team_ids: Optional[Iterable[int]] = None,
    total: int = TOTAL_POINTS,
) -> list[LeaderboardRow]:
    """
    Rank teams by match points over the given matchups.

    Matchups with affects_standings=False are skipped. Ordering is total
    points, then wins (both descending), then team id, so every team gets a
    distinct rank.

    Args:
        matchups: Season matchups
        previous_snapshot: Last finalized week's snapshot, for movement
        handicaps: Current handicap per team; otherwise the floor of the
            mean of the team's non-sub matchup handicaps
        team_ids: Teams to include even without matchups
        total: Points available per matchup

    Returns:
        LeaderboardRow list in rank order
    """
    totals: dict[int, _TeamTotals] = {}
    for team_id in team_ids or ():
        totals.setdefault(team_id, _TeamTotals())

    for matchup in matchups:
        if not matchup.affects_standings:
            continue

        team_a = totals.setdefault(matchup.team_a_id, _TeamTotals())
        team_b = totals.setdefault(matchup.team_b_id, _TeamTotals())
        points_a, points_b = matchup_points(matchup, total)
        team_a.points += points_a
        team_b.points += points_b

        if points_a > points_b:
            team_a.wins += 1
            team_b.losses += 1
        elif points_b > points_a:
            team_b.wins += 1
            team_a.losses += 1
        else:
            team_a.ties += 1
            team_b.ties += 1

        if not matchup.is_forfeit:
            if not matchup.team_a_is_sub:
                team_a.handicaps.append(matchup.team_a_handicap)
            if not matchup.team_b_is_sub:
                team_b.handicaps.append(matchup.team_b_handicap)

    ordered = sorted(totals.items(), key=lambda kv: (-kv[1].points, -kv[1].wins, kv[0]))

    rows = []
    for rank, (team_id, team) in enumerate(ordered, start=1):
        if handicaps is not None and team_id in handicaps:
            handicap = handicaps[team_id]
        else:
            handicap = _matchup_handicap(team)

        previous = previous_snapshot.get(team_id) if previous_snapshot else None
        rows.append(
            LeaderboardRow(
                team_id=team_id,
                rank=rank,
                total_points=team.points,
                wins=team.wins,
                losses=team.losses,
                ties=team.ties,
                handicap=handicap,
                previous_rank=previous.rank if previous else None,
                previous_handicap=previous.handicap if previous else None,
                rank_change=previous.rank - rank if previous else None,
                handicap_change=previous.handicap - handicap if previous else None,
            )
        )

    logger.debug(f'Built leaderboard with {len(rows)} teams')
    return rows


def take_snapshot(rows: Iterable[LeaderboardRow], week_number: int) -> LeaderboardSnapshot:
    """Capture ranks and handicaps of a finalized week for next week's movement."""
    return LeaderboardSnapshot(
        week_number=week_number,
        entries={
            row.team_id: SnapshotEntry(team_id=row.team_id, rank=row.rank, handicap=row.handicap)
            for row in rows
        },
    )


def standings_at_week(
    matchups: Iterable[Matchup],
    week_number: int,
    previous_snapshot: Optional[LeaderboardSnapshot] = None,
    handicaps: Optional[dict[int, float]] = None,
    team_ids: Optional[Iterable[int]] = None,
    total: int = TOTAL_POINTS,
) -> list[LeaderboardRow]:
    """Leaderboard counting only matchups played through `week_number`."""
    played = [m for m in matchups if m.week_number <= week_number]
    return build_leaderboard(played, previous_snapshot, handicaps, team_ids, total)


def leaderboard_with_movement(
    matchups: Iterable[Matchup],
    handicaps: Optional[dict[int, float]] = None,
    team_ids: Optional[Iterable[int]] = None,
    total: int = TOTAL_POINTS,
) -> list[LeaderboardRow]:
    """
    Current leaderboard with movement measured against the prior played week.

    Used when no snapshot was stored: the previous standings are rebuilt from
    the matchups played before the latest week. Both weeks take their
    handicaps from the matchups, so handicap_change compares like with like.
    Supplied `handicaps` only replace the displayed current handicap.

    Args:
        matchups: Season matchups
        handicaps: Current handicap per team, shown on the rows
        team_ids: Teams to include even without matchups
        total: Points available per matchup

    Returns:
        LeaderboardRow list in rank order
    """
    matchups = list(matchups)
    team_ids = list(team_ids) if team_ids is not None else None
    weeks = sorted({m.week_number for m in matchups if m.affects_standings})
    if len(weeks) < 2:
        return build_leaderboard(matchups, handicaps=handicaps, team_ids=team_ids, total=total)

    prior_week = weeks[-2]
    previous_rows = standings_at_week(matchups, prior_week, team_ids=team_ids, total=total)
    snapshot = take_snapshot(previous_rows, prior_week)
    rows = build_leaderboard(matchups, snapshot, team_ids=team_ids, total=total)
    if not handicaps:
        return rows
    return [
        replace(row, handicap=handicaps[row.team_id])
        if row.team_id in handicaps else row
        for row in rows
    ]
