"""Handicap computation from a team's scoring history.

The handicap for a week is derived from the team's earlier rounds:

    1. history window (rounds before the week, frozen after freeze_week)
    2. provisional handicap while the team has too few rounds
    3. score selection (all / last N / best X of last Y)
    4. exceptional gross scores capped
    5. highest/lowest nets dropped
    6. (weighted) average net
    7. (base_score - average) * multiplier
    8. trend adjustment
    9. rounding
   10. clamp to [min_handicap, max_handicap]

Rounding happens before clamping, and capping before dropping; swapping
either pair changes results at the boundaries.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .models import Matchup, WeeklyScoreEntry
from .schemas import (
    BestOfLast,
    ExceptionalCap,
    HandicapSettings,
    LastN,
    ScoreSelection,
    Trend,
    Weighting,
)
from .scoring import net_score, round_half_up

logger = logging.getLogger('golfleague.handicap')


def _is_valid_round(entry: WeeklyScoreEntry) -> bool:
    return (
        math.isfinite(entry.gross_score)
        and math.isfinite(entry.net_score)
        and entry.gross_score >= 0
    )


def _truncate(
    history: Iterable[WeeklyScoreEntry], as_of_week: Optional[int], freeze_week: Optional[int]
) -> list[WeeklyScoreEntry]:
    if freeze_week is not None and as_of_week is not None and as_of_week > freeze_week:
        window = [e for e in history if e.week_number <= freeze_week]
    elif as_of_week is not None:
        window = [e for e in history if e.week_number < as_of_week]
    else:
        window = list(history)
    return sorted((e for e in window if not e.is_dnp), key=lambda e: e.week_number)


def history_window(
    history: Iterable[WeeklyScoreEntry],
    as_of_week: Optional[int] = None,
    freeze_week: Optional[int] = None,
) -> list[WeeklyScoreEntry]:
    """
    Rounds that count toward a week's handicap, oldest first.

    Args:
        history: All of the team's weekly entries
        as_of_week: Week the handicap is for (None = all history)
        freeze_week: Week after which the handicap stops updating

    Returns:
        Played (non-DNP), valid entries before as_of_week, or through
        freeze_week once as_of_week is past it
    """
    return [e for e in _truncate(history, as_of_week, freeze_week) if _is_valid_round(e)]


def select_scores(
    entries: list[WeeklyScoreEntry], selection: ScoreSelection
) -> list[WeeklyScoreEntry]:
    """
    Narrow the history window to the rounds that count.

    Chronological order is preserved. Counts larger than the available
    history simply use everything available.

    Args:
        entries: History window, oldest first
        selection: AllScores, LastN or BestOfLast

    Returns:
        Selected entries, oldest first
    """
    if isinstance(selection, LastN):
        if selection.score_count >= len(entries):
            return list(entries)
        return list(entries[len(entries) - selection.score_count:])

    if isinstance(selection, BestOfLast):
        window = list(entries[max(0, len(entries) - selection.last_of):])
        best = sorted(range(len(window)), key=lambda i: (window[i].net_score, i))
        keep = sorted(best[:selection.best_of])
        return [window[i] for i in keep]

    return list(entries)


def cap_exceptional_scores(
    entries: list[WeeklyScoreEntry], exceptional_cap: Optional[ExceptionalCap]
) -> list[float]:
    """
    Net scores for averaging, with exceptional gross scores clamped.

    A gross above the cap is replaced by the cap and re-netted against the
    handicap that round was played at.
    """
    if exceptional_cap is None:
        return [e.net_score for e in entries]

    scores = []
    for entry in entries:
        if entry.gross_score > exceptional_cap.cap:
            scores.append(net_score(exceptional_cap.cap, entry.handicap))
        else:
            scores.append(entry.net_score)
    return scores


def drop_scores(scores: list[float], drop_highest: int = 0, drop_lowest: int = 0) -> list[float]:
    """
    Remove the highest and lowest scores, keeping the rest in order.

    Returns an empty list when the drops would remove every score.
    """
    total_drops = drop_highest + drop_lowest
    if total_drops == 0:
        return list(scores)
    if total_drops >= len(scores):
        return []

    ranked = sorted(range(len(scores)), key=lambda i: (scores[i], i))
    dropped = set(ranked[:drop_lowest])
    dropped.update(ranked[len(ranked) - drop_highest:])
    return [s for i, s in enumerate(scores) if i not in dropped]


def weighted_average(scores: list[float], weighting: Optional[Weighting] = None) -> float:
    """
    Average of the scores, optionally weighted toward recent rounds.

    The most recent score weighs `weighting.recent`; each step back
    multiplies the weight by (1 - weighting.decay).

    Args:
        scores: Net scores, oldest first
        weighting: Weighting block, or None for a simple mean

    Returns:
        The (weighted) mean, 0.0 for no scores
    """
    if not scores:
        return 0.0
    if weighting is None or len(scores) == 1:
        return sum(scores) / len(scores)

    retain = 1 - weighting.decay
    weights = [weighting.recent * retain ** (len(scores) - 1 - i) for i in range(len(scores))]
    total_weight = sum(weights)
    if total_weight <= 0:
        return sum(scores) / len(scores)
    return sum(s * w for s, w in zip(scores, weights)) / total_weight


def trend_adjustment(scores: list[float], trend: Optional[Trend] = None) -> float:
    """
    Adjustment toward the team's recent trajectory.

    Compares the older half of the scores with the newer half (the middle
    score of an odd-length list belongs to neither). Improving teams get a
    positive adjustment.
    """
    if trend is None or len(scores) < 3:
        return 0.0
    half = len(scores) // 2
    older = scores[:half]
    newer = scores[len(scores) - half:]
    return (sum(older) / len(older) - sum(newer) / len(newer)) * trend.weight


def round_handicap(value: float, rounding: str) -> float:
    """Apply the league rounding mode ('round' is half-up)."""
    if rounding == 'ceil':
        return float(math.ceil(value))
    if rounding == 'round':
        return float(round_half_up(value))
    return float(math.floor(value))


def clamp_handicap(
    value: float, min_handicap: Optional[float], max_handicap: float
) -> float:
    """Clamp into [min_handicap, max_handicap]; min is optional."""
    if min_handicap is not None and value < min_handicap:
        value = min_handicap
    return min(value, max_handicap)


@dataclass
class _Calculation:
    handicap: float = 0.0
    steps: list[str] = field(default_factory=list)


def _finish(calc: _Calculation, value: float, settings: HandicapSettings) -> _Calculation:
    rounded = round_handicap(value, settings.rounding)
    calc.steps.append(f'Rounded ({settings.rounding}): {rounded:g}')
    final = clamp_handicap(rounded, settings.min_handicap, settings.max_handicap)
    if rounded > settings.max_handicap:
        calc.steps.append(f'Capped at maximum {settings.max_handicap:g}')
    elif settings.min_handicap is not None and rounded < settings.min_handicap:
        calc.steps.append(f'Raised to minimum {settings.min_handicap:g}')
    calc.handicap = final
    calc.steps.append(f'Handicap: {final:g}')
    return calc


def _default(calc: _Calculation, settings: HandicapSettings, reason: str) -> _Calculation:
    value = clamp_handicap(
        round_handicap(settings.default_handicap, settings.rounding),
        settings.min_handicap,
        settings.max_handicap,
    )
    calc.handicap = value
    calc.steps.append(f'{reason}: using default handicap {value:g}')
    return calc


def _selection_step(selection: ScoreSelection, selected: int) -> str:
    if isinstance(selection, LastN):
        return f'Using last {selection.score_count} scores ({selected} available)'
    if isinstance(selection, BestOfLast):
        return f'Using best {selection.best_of} of last {selection.last_of} scores ({selected} selected)'
    return f'Using all {selected} scores'


def _calculate(
    history: Iterable[WeeklyScoreEntry],
    settings: HandicapSettings,
    as_of_week: Optional[int],
) -> _Calculation:
    calc = _Calculation()

    truncated = _truncate(history, as_of_week, settings.freeze_week)
    if (
        settings.freeze_week is not None
        and as_of_week is not None
        and as_of_week > settings.freeze_week
    ):
        calc.steps.append(
            f'Freeze week {settings.freeze_week}: using rounds through week {settings.freeze_week}'
        )
    window = [e for e in truncated if _is_valid_round(e)]
    if len(window) < len(truncated):
        calc.steps.append(f'Filtered {len(truncated) - len(window)} invalid score(s)')

    provisional = settings.provisional
    if provisional is not None and len(window) < provisional.weeks:
        value = settings.default_handicap * provisional.multiplier
        calc.steps.append(
            f'Provisional: {len(window)} of {provisional.weeks} rounds played, '
            f'{settings.default_handicap:g} x {provisional.multiplier:g} = {value:g}'
        )
        return _finish(calc, value, settings)

    if not window:
        return _default(calc, settings, 'No scores available')

    selected = select_scores(window, settings.selection)
    calc.steps.append(_selection_step(settings.selection, len(selected)))

    scores = cap_exceptional_scores(selected, settings.exceptional_cap)
    if settings.exceptional_cap is not None:
        capped = sum(1 for e in selected if e.gross_score > settings.exceptional_cap.cap)
        if capped:
            calc.steps.append(
                f'Capped exceptional scores at {settings.exceptional_cap.cap:g} ({capped} adjusted)'
            )

    if settings.drop_highest or settings.drop_lowest:
        scores = drop_scores(scores, settings.drop_highest, settings.drop_lowest)
        calc.steps.append(
            f'Dropped {settings.drop_highest} highest and {settings.drop_lowest} lowest, '
            f'{len(scores)} remaining'
        )

    if not scores:
        return _default(calc, settings, 'No scores available after selection')

    average = weighted_average(scores, settings.weighting)
    if settings.weighting is not None and len(scores) > 1:
        calc.steps.append(
            f'Weighted average (recent {settings.weighting.recent:g}, '
            f'decay {settings.weighting.decay:g}) of {len(scores)} scores: {average:.2f}'
        )
    else:
        calc.steps.append(f'Simple average of {len(scores)} scores: {average:.2f}')

    raw = (settings.base_score - average) * settings.multiplier
    calc.steps.append(
        f'Formula: ({settings.base_score:g} - {average:.2f}) x {settings.multiplier:g} = {raw:.2f}'
    )

    adjustment = trend_adjustment(scores, settings.trend)
    if settings.trend is not None and len(scores) >= 3:
        raw += adjustment
        calc.steps.append(f'Trend adjustment {adjustment:+.2f}: {raw:.2f}')

    return _finish(calc, raw, settings)


def compute_handicap(
    history: Iterable[WeeklyScoreEntry],
    settings: HandicapSettings,
    as_of_week: Optional[int] = None,
) -> float:
    """
    Compute a team's handicap for a week.

    Args:
        history: The team's weekly entries (any order)
        settings: League handicap policy
        as_of_week: Week being played; only earlier rounds count (None = all)

    Returns:
        Handicap, rounded and bounded by the settings
    """
    calc = _calculate(history, settings, as_of_week)
    logger.debug(f'Handicap as of week {as_of_week}: {calc.handicap:g}')
    return calc.handicap


def describe_calculation(
    history: Iterable[WeeklyScoreEntry],
    settings: HandicapSettings,
    as_of_week: Optional[int] = None,
) -> list[str]:
    """
    Explain how a handicap was derived, one line per step.

    Args:
        history: The team's weekly entries
        settings: League handicap policy
        as_of_week: Week being played

    Returns:
        Human-readable calculation steps, ending with the handicap
    """
    return _calculate(history, settings, as_of_week).steps


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HandicapPreset:
    """A named starting point for league handicap settings."""
    name: str
    label: str
    description: str
    settings: dict = field(default_factory=dict)


HANDICAP_PRESETS = [
    HandicapPreset(
        name='simple',
        label='Simple',
        description='Average of every round with the default formula.',
    ),
    HandicapPreset(
        name='usga_style',
        label='Best of Recent',
        description='Best 4 of the last 8 rounds with a 0.96 multiplier.',
        settings={
            'selection': BestOfLast(best_of=4, last_of=8),
            'multiplier': 0.96,
        },
    ),
    HandicapPreset(
        name='forgiving',
        label='Forgiving',
        description='Last 5 rounds with the worst one dropped.',
        settings={
            'selection': LastN(score_count=5),
            'drop_highest': 1,
        },
    ),
    HandicapPreset(
        name='competitive',
        label='Competitive',
        description='Recent rounds count more than older ones.',
        settings={
            'weighting': Weighting(recent=1.3, decay=0.05),
        },
    ),
    HandicapPreset(
        name='strict',
        label='Strict',
        description='Higher ceiling, blow-up rounds capped, recent trend applied.',
        settings={
            'max_handicap': 18,
            'exceptional_cap': ExceptionalCap(cap=50),
            'trend': Trend(weight=0.15),
        },
    ),
    HandicapPreset(
        name='custom',
        label='Custom',
        description='Configure every setting by hand.',
    ),
]

_PRESETS_BY_NAME = {p.name: p for p in HANDICAP_PRESETS}


def apply_preset(name: str, current: Optional[HandicapSettings] = None) -> HandicapSettings:
    """
    Build settings from a preset.

    Presets are layered onto the defaults, not onto `current`. The 'custom'
    preset and unknown names return `current` unchanged (defaults if None).
    """
    fallback = current if current is not None else HandicapSettings()
    preset = _PRESETS_BY_NAME.get(name)
    if preset is None:
        logger.warning(f'Unknown preset name: "{name}"')
        return fallback
    if name == 'custom':
        return fallback
    return HandicapSettings(**preset.settings)


def team_handicap_history(matchups: Iterable[Matchup]) -> dict[int, list[tuple[int, float]]]:
    """
    Weekly handicap progression per team, taken from played matchups.

    Rounds played by a substitute are skipped, so the last entry of each
    list is the team's current handicap.

    Args:
        matchups: Matchups in any order

    Returns:
        Dict of team_id -> [(week_number, handicap), ...] in week order
    """
    history: dict[int, list[tuple[int, float]]] = {}
    for matchup in sorted(matchups, key=lambda m: m.week_number):
        if matchup.is_forfeit:
            continue
        for team_id, handicap, is_sub in (
            (matchup.team_a_id, matchup.team_a_handicap, matchup.team_a_is_sub),
            (matchup.team_b_id, matchup.team_b_handicap, matchup.team_b_is_sub),
        ):
            history.setdefault(team_id, [])
            if not is_sub:
                history[team_id].append((matchup.week_number, handicap))
    return history
