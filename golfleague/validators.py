"""Validation of handicap settings, matchups and scorecards.

Validators return lists of problems (empty if valid) instead of raising, so a
caller can report every problem at once.
"""

import math
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

from .constants import MAX_TOTAL_DROPS, ROUNDING_MODES, SCORE_SELECTION_MODES, TOTAL_POINTS
from .course_side import expected_hole_count, filter_holes, is_known_side
from .models import HoleScore, Matchup
from .schemas import LeagueHandicapRecord


@dataclass(frozen=True)
class ConfigurationError:
    """A handicap setting that is invalid on its own or against another setting."""
    field: str
    message: str

    def __str__(self) -> str:
        return f'{self.field}: {self.message}'


@dataclass(frozen=True)
class MatchupInvariantError:
    """A matchup whose points or teams break the league rules."""
    field: str
    message: str

    def __str__(self) -> str:
        return f'{self.field}: {self.message}'


def validate_handicap_settings(record: LeagueHandicapRecord) -> list[ConfigurationError]:
    """
    Validate a league's stored handicap settings before they are saved.

    Checks:
    - Rounding and score selection are known modes
    - Mode-specific counts present (score_count, best_of/last_of)
    - best_of <= last_of and min_handicap <= max_handicap
    - Drop counts non-negative and at most 20 combined
    - Exceptional capping enabled only with a positive cap
    - Weighting, provisional and freeze values in range

    Args:
        record: Flat handicap settings as stored on the league

    Returns:
        List of ConfigurationError (empty if valid)
    """
    errors = []

    for name in ('base_score', 'multiplier', 'default_handicap'):
        if not math.isfinite(getattr(record, name)):
            errors.append(ConfigurationError(name, 'must be a finite number'))

    if record.rounding not in ROUNDING_MODES:
        errors.append(
            ConfigurationError(
                'rounding',
                f'unknown rounding mode {record.rounding!r} (expected {", ".join(ROUNDING_MODES)})',
            )
        )

    if record.score_selection not in SCORE_SELECTION_MODES:
        errors.append(
            ConfigurationError(
                'score_selection',
                f'unknown score selection {record.score_selection!r} '
                f'(expected {", ".join(SCORE_SELECTION_MODES)})',
            )
        )
    elif record.score_selection == 'last_n':
        if record.score_count is None:
            errors.append(ConfigurationError('score_count', 'required for last_n selection'))
        elif record.score_count < 1:
            errors.append(ConfigurationError('score_count', 'must be at least 1'))
    elif record.score_selection == 'best_of_last':
        if record.best_of is None:
            errors.append(ConfigurationError('best_of', 'required for best_of_last selection'))
        elif record.best_of < 0:
            errors.append(ConfigurationError('best_of', 'must not be negative'))
        if record.last_of is None:
            errors.append(ConfigurationError('last_of', 'required for best_of_last selection'))
        elif record.last_of < 1:
            errors.append(ConfigurationError('last_of', 'must be at least 1'))
        if (
            record.best_of is not None
            and record.last_of is not None
            and record.best_of > record.last_of
        ):
            errors.append(
                ConfigurationError(
                    'best_of',
                    f'best_of ({record.best_of}) cannot exceed last_of ({record.last_of})',
                )
            )

    if (
        record.min_handicap is not None
        and record.max_handicap is not None
        and record.min_handicap > record.max_handicap
    ):
        errors.append(
            ConfigurationError(
                'min_handicap',
                f'min_handicap ({record.min_handicap:g}) cannot exceed '
                f'max_handicap ({record.max_handicap:g})',
            )
        )

    if record.drop_highest < 0:
        errors.append(ConfigurationError('drop_highest', 'must not be negative'))
    if record.drop_lowest < 0:
        errors.append(ConfigurationError('drop_lowest', 'must not be negative'))
    if record.drop_highest + record.drop_lowest > MAX_TOTAL_DROPS:
        errors.append(
            ConfigurationError(
                'drop_highest',
                f'cannot drop more than {MAX_TOTAL_DROPS} scores in total '
                f'({record.drop_highest} highest + {record.drop_lowest} lowest)',
            )
        )

    if record.cap_exceptional:
        if record.exceptional_cap is None:
            errors.append(
                ConfigurationError('exceptional_cap', 'required when capping is enabled')
            )
        elif record.exceptional_cap <= 0:
            errors.append(ConfigurationError('exceptional_cap', 'must be positive'))

    if record.use_weighting:
        if record.weight_recent <= 0:
            errors.append(ConfigurationError('weight_recent', 'must be positive'))
        if not 0 <= record.weight_decay <= 1:
            errors.append(ConfigurationError('weight_decay', 'must be between 0 and 1'))

    if record.prov_weeks < 0:
        errors.append(ConfigurationError('prov_weeks', 'must not be negative'))
    if record.prov_multiplier < 0:
        errors.append(ConfigurationError('prov_multiplier', 'must not be negative'))

    if record.freeze_week is not None and record.freeze_week < 1:
        errors.append(ConfigurationError('freeze_week', 'must be at least 1'))

    if record.use_trend and record.trend_weight < 0:
        errors.append(ConfigurationError('trend_weight', 'must not be negative'))

    return errors


def validate_matchup(matchup: Matchup, total: int = TOTAL_POINTS) -> list[MatchupInvariantError]:
    """
    Check a matchup's points against the league invariants.

    Run on every write path, including admin overrides of suggested points.

    Checks:
    - The two teams differ
    - No negative points
    - Non-forfeit: points sum to `total`
    - Forfeit: forfeit_team_id is one of the two teams, who gets 0 while the
      other side gets `total`

    Args:
        matchup: Matchup to check
        total: Points available in the matchup

    Returns:
        List of MatchupInvariantError (empty if valid)
    """
    errors = []

    if matchup.team_a_id == matchup.team_b_id:
        errors.append(
            MatchupInvariantError('team_b_id', f'team {matchup.team_a_id} cannot play itself')
        )

    for side in ('team_a', 'team_b'):
        points = getattr(matchup, f'{side}_points')
        if not math.isfinite(points):
            errors.append(MatchupInvariantError(f'{side}_points', 'must be a finite number'))
        elif points < 0:
            errors.append(
                MatchupInvariantError(f'{side}_points', f'cannot be negative ({points:g})')
            )

    if matchup.is_forfeit:
        if not matchup.involves(matchup.forfeit_team_id):
            errors.append(
                MatchupInvariantError(
                    'forfeit_team_id',
                    f'forfeit team {matchup.forfeit_team_id} is not in matchup '
                    f'{matchup.team_a_id} vs {matchup.team_b_id}',
                )
            )
        else:
            if matchup.forfeit_team_id == matchup.team_a_id:
                expected = (0, total)
            else:
                expected = (total, 0)
            if (matchup.team_a_points, matchup.team_b_points) != expected:
                errors.append(
                    MatchupInvariantError(
                        'is_forfeit',
                        f'forfeit must be awarded {expected[0]}/{expected[1]}, got '
                        f'{matchup.team_a_points:g}/{matchup.team_b_points:g}',
                    )
                )
        return errors

    point_sum = matchup.team_a_points + matchup.team_b_points
    if math.isfinite(point_sum) and abs(point_sum - total) > 1e-9:
        errors.append(
            MatchupInvariantError(
                'team_a_points', f'points must sum to {total}, got {point_sum:g}'
            )
        )

    return errors


def validate_scorecard(
    holes: Iterable[HoleScore], side: Optional[str], course_hole_count: int = 18
) -> list[str]:
    """
    Check a submitted scorecard against the side in play.

    Holes outside the side are reported, not silently dropped, since they
    usually mean the card was entered for the wrong week.

    Args:
        holes: Hole-by-hole strokes
        side: 'front', 'back', or None for the full course
        course_hole_count: Holes on the course (9 or 18)

    Returns:
        List of validation error messages (empty if valid)
    """
    holes = list(holes)
    errors = []

    if not is_known_side(side):
        errors.append(f'Unknown course side {side!r}')
        return errors

    for hole in holes:
        if not 1 <= hole.hole_number <= course_hole_count:
            errors.append(
                f'Hole {hole.hole_number} is not on a {course_hole_count}-hole course'
            )
        if hole.strokes < 1:
            errors.append(f'Hole {hole.hole_number} has {hole.strokes} strokes (min 1)')

    counts = Counter(h.hole_number for h in holes)
    duplicates = sorted(n for n, c in counts.items() if c > 1)
    if duplicates:
        errors.append(f'Duplicate holes: {", ".join(str(n) for n in duplicates)}')

    in_play = filter_holes(holes, side)
    out_of_play = sorted(h.hole_number for h in holes if h not in in_play)
    if out_of_play:
        errors.append(
            f'Holes not in play for the {side} side: {", ".join(str(n) for n in out_of_play)}'
        )

    expected = expected_hole_count(course_hole_count, side)
    played = len({h.hole_number for h in in_play})
    if played != expected:
        errors.append(f'Scorecard has {played} of {expected} holes')

    return errors
