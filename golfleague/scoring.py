"""Net scores and match points."""

import logging
import math
from typing import Iterable, Optional

from .constants import (
    DEFAULT_WIN_BASE,
    DEFAULT_WIN_MAX,
    DEFAULT_WIN_PER_STROKE,
    POINT_SCALE_PRESETS,
    TIE_EPSILON,
    TOTAL_POINTS,
)
from .course_side import filter_holes
from .models import HoleScore, Matchup, PointsSuggestion, StrokePlayEntry, StrokePlayResult
from .schemas import PointsRule, StrokePlayConfig

logger = logging.getLogger('golfleague.scoring')


def round_half_up(value: float) -> int:
    """Round to the nearest whole number, .5 always upward (4.5 -> 5, -4.5 -> -4)."""
    return math.floor(value + 0.5)


def net_score(gross: float, handicap: float) -> float:
    """
    Convert a gross score into a net score.

    No rounding is applied: fractional handicaps give fractional nets, which
    keeps tie detection and points suggestions precise.

    Args:
        gross: Strokes taken
        handicap: Handicap the round was played at

    Returns:
        gross - handicap, or 0.0 if either input is NaN/infinite
    """
    if not (math.isfinite(gross) and math.isfinite(handicap)):
        logger.warning(f'Non-finite input to net_score: gross={gross}, handicap={handicap}')
        return 0.0
    return gross - handicap


def are_scores_tied(score_a: float, score_b: float) -> bool:
    """Two net scores within TIE_EPSILON of each other are a tie."""
    return abs(score_a - score_b) < TIE_EPSILON


def gross_from_holes(holes: Iterable[HoleScore], side: Optional[str]) -> int:
    """Total strokes over the holes in play for a side."""
    return sum(h.strokes for h in filter_holes(holes, side))


def winner_points(margin: float, rule: PointsRule) -> float:
    """
    Points for the winning side given the stroke margin.

    Args:
        margin: Positive difference between the two net scores
        rule: Margin-to-points rule

    Returns:
        Winner's points; the loser gets rule.total minus this
    """
    strokes = round_half_up(margin)
    if rule.margin_table:
        eligible = [m for m in rule.margin_table if m <= strokes]
        if eligible:
            return rule.margin_table[max(eligible)]
        return rule.win_base
    return min(rule.win_max, rule.win_base + rule.win_per_stroke * strokes)


def default_points_rule(total: int = TOTAL_POINTS) -> PointsRule:
    """The standard 11-16 of 20 spread, scaled to another total if needed."""
    if total == TOTAL_POINTS:
        return PointsRule()
    scale = total / TOTAL_POINTS
    return PointsRule(
        total=total,
        win_base=DEFAULT_WIN_BASE * scale,
        win_per_stroke=DEFAULT_WIN_PER_STROKE * scale,
        win_max=DEFAULT_WIN_MAX * scale,
    )


def allocate_points(
    net_a: float,
    net_b: float,
    total: int = TOTAL_POINTS,
    rule: Optional[PointsRule] = None,
) -> PointsSuggestion:
    """
    Suggest match points from two net scores.

    Lower net wins. A tie splits the total evenly. Points always sum to `total`.

    Args:
        net_a: Team A net score
        net_b: Team B net score
        total: Points available in the matchup
        rule: Margin-to-points rule (defaults to PointsRule(total=total))

    Returns:
        PointsSuggestion for both sides
    """
    if rule is None:
        rule = default_points_rule(total)
    elif rule.total != total:
        raise ValueError(f'Points rule total ({rule.total}) != matchup total ({total})')

    half = total / 2
    if not (math.isfinite(net_a) and math.isfinite(net_b)):
        logger.warning(f'Non-finite net score ({net_a} vs {net_b}), splitting points')
        return PointsSuggestion(points_a=half, points_b=half)

    if are_scores_tied(net_a, net_b):
        return PointsSuggestion(points_a=half, points_b=half)

    win = winner_points(abs(net_a - net_b), rule)
    if net_a < net_b:
        return PointsSuggestion(points_a=win, points_b=total - win)
    return PointsSuggestion(points_a=total - win, points_b=win)


def forfeit_points(matchup: Matchup, total: int = TOTAL_POINTS) -> PointsSuggestion:
    """
    Award a forfeited matchup in full to the side that showed up.

    Args:
        matchup: Matchup with is_forfeit set and forfeit_team_id naming the forfeiting team
        total: Points available in the matchup

    Returns:
        PointsSuggestion with 0 for the forfeiting side and `total` for the other
    """
    if matchup.forfeit_team_id == matchup.team_a_id:
        return PointsSuggestion(points_a=0, points_b=total)
    if matchup.forfeit_team_id == matchup.team_b_id:
        return PointsSuggestion(points_a=total, points_b=0)
    raise ValueError(
        f'Forfeit team {matchup.forfeit_team_id} is not in matchup '
        f'{matchup.team_a_id} vs {matchup.team_b_id}'
    )


def suggest_matchup_points(
    matchup: Matchup,
    total: int = TOTAL_POINTS,
    rule: Optional[PointsRule] = None,
) -> PointsSuggestion:
    """Suggest points for a matchup, handling forfeits."""
    if matchup.is_forfeit:
        return forfeit_points(matchup, total)
    return allocate_points(matchup.team_a_net, matchup.team_b_net, total, rule)


def matchup_points(matchup: Matchup, total: int = TOTAL_POINTS) -> tuple[float, float]:
    """
    Points each side actually earned.

    A forfeit naming one of its two teams always resolves 0/total. A forfeit
    without a usable forfeit_team_id keeps its stored points; validate_matchup
    rejects it when the week is finalized.
    """
    if matchup.is_forfeit:
        if matchup.involves(matchup.forfeit_team_id):
            awarded = forfeit_points(matchup, total)
            return awarded.points_a, awarded.points_b
        logger.warning(
            f'Forfeit {matchup.team_a_id} vs {matchup.team_b_id} in week '
            f'{matchup.week_number} has no forfeiting team; using stored points'
        )
    return matchup.team_a_points, matchup.team_b_points


# ---------------------------------------------------------------------------
# Stroke play
# ---------------------------------------------------------------------------


def generate_point_scale(preset: str, team_count: int) -> list[float]:
    """
    Build a finishing-position point scale.

    Args:
        preset: 'linear', 'weighted' or 'pga_style' (anything else is linear)
        team_count: Number of teams playing

    Returns:
        Points for 1st, 2nd, ... place (one entry per team)
    """
    if team_count <= 0:
        return []
    base = POINT_SCALE_PRESETS.get(preset)
    if base is None:
        return [float(team_count - i) for i in range(team_count)]
    scale = [float(p) for p in base[:team_count]]
    scale.extend(1.0 for _ in range(team_count - len(scale)))
    return scale


def calculate_stroke_play_points(
    entries: list[StrokePlayEntry],
    scale: list[float],
    config: StrokePlayConfig,
    base_score: float,
) -> list[StrokePlayResult]:
    """
    Rank a stroke-play week by net score and assign position points.

    Tied nets share a position. With tie_mode 'split' they share the points of
    the positions they occupy; with 'same' each gets the best position's points.
    Everyone who played gets the show-up bonus; beating the base score earns the
    beat-handicap bonus. DNP entries get position 0 and dnp_points + dnp_penalty.

    Args:
        entries: One entry per team
        scale: Points per finishing position (padded with zeros if short)
        config: League stroke-play settings
        base_score: Handicap base score (the number to beat)

    Returns:
        One StrokePlayResult per entry, playing teams first in finishing order
    """
    playing = sorted(
        (e for e in entries if not e.is_dnp), key=lambda e: (e.net_score, e.team_id)
    )
    if len(scale) < len(playing):
        logger.warning(
            f'Point scale has {len(scale)} entries but {len(playing)} teams are playing. '
            'Padding with zeros.'
        )
        scale = list(scale) + [0.0] * (len(playing) - len(scale))

    results = []
    i = 0
    while i < len(playing):
        group = [playing[i]]
        while i + len(group) < len(playing) and are_scores_tied(
            playing[i + len(group)].net_score, playing[i].net_score
        ):
            group.append(playing[i + len(group)])

        position = i + 1
        tied_points = scale[i:i + len(group)]
        if config.tie_mode == 'split':
            points = sum(tied_points) / len(group)
        else:
            points = tied_points[0]

        for entry in group:
            bonus = config.show_up_bonus
            if entry.net_score < base_score:
                bonus += config.beat_handicap_bonus
            results.append(
                StrokePlayResult(
                    team_id=entry.team_id, position=position, points=points, bonus_points=bonus
                )
            )
        i += len(group)

    for entry in entries:
        if entry.is_dnp:
            results.append(
                StrokePlayResult(
                    team_id=entry.team_id,
                    position=0,
                    points=config.dnp_points + config.dnp_penalty,
                )
            )

    return results
