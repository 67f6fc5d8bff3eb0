#!/usr/bin/env python3
"""
Golf League Scorer CLI

Scores one league week from JSON data: computes each team's handicap,
suggests match points for the week's matchups, and writes the standings.
League settings come from data/league_config.json
Teams, matchups, weekly scores and snapshots come from data/season.json

Usage:
    python league_scorer.py --week 4
    python league_scorer.py --week 4 --output output/standings_week_4.json
"""

import argparse
import logging
import sys
from pathlib import Path

from golfleague import (
    SeasonFile,
    WeekScorer,
    load_config,
    load_json,
    save_json,
    setup_logging,
    validate_handicap_settings,
    validate_json_file,
)


def format_change(value) -> str:
    """Render a movement value as +n / -n / '-' (no previous week)."""
    if value is None:
        return '-'
    if value == 0:
        return '='
    return f'{value:+g}'


def main():
    parser = argparse.ArgumentParser(description="Golf League Handicap & Scoring Engine")
    parser.add_argument(
        "--week", "-w",
        type=int,
        required=True,
        help="Week number to score",
    )
    parser.add_argument(
        "--data-dir", "-d",
        default="data",
        help="Directory holding league_config.json and season.json",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output path for standings JSON (defaults to output/standings_week_{N}.json)",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress detailed output",
    )

    args = parser.parse_args()

    setup_logging(level=logging.WARNING if args.quiet else logging.INFO, log_to_file=False)

    data_dir = Path(args.data_dir)
    config_path = data_dir / "league_config.json"
    season_path = data_dir / "season.json"
    output_path = Path(args.output) if args.output else Path("output") / f"standings_week_{args.week}.json"

    if not config_path.exists():
        print(f"League config not found: {config_path}")
        sys.exit(1)
    if not season_path.exists():
        print(f"Season file not found: {season_path}")
        sys.exit(1)

    config = load_config(config_path)
    settings_errors = validate_handicap_settings(config.handicap)
    if settings_errors:
        print("Invalid handicap settings:")
        for error in settings_errors:
            print(f"  - {error}")
        sys.exit(1)

    ok, error = validate_json_file(season_path, SeasonFile)
    if not ok:
        print(f"Invalid season file {season_path}:")
        print(f"  {error}")
        sys.exit(1)

    season = load_json(season_path, schema=SeasonFile)
    team_names = {t.team_id: t.name for t in season.teams}
    history = [s.to_model() for s in season.weekly_scores if s.week_number < args.week]
    matchups = [m.to_model() for m in season.matchups]

    scorer = WeekScorer(args.week, config, history)

    print(f"Scoring Week {args.week} of {config.name}...")
    if not args.quiet:
        print(f"  Course side: {scorer.side or 'full 18'}")
        print("\nHandicaps")
        for team_id in sorted(team_names):
            print(f"  {team_names[team_id]}: {scorer.team_handicap(team_id):g}")

    scored = scorer.score_week(matchups)
    if not scored:
        print(f"No matchups scheduled for week {args.week}")
        sys.exit(0)

    if not args.quiet:
        print("\nMatchups")
        for m in scored:
            name_a = team_names.get(m.team_a_id, str(m.team_a_id))
            name_b = team_names.get(m.team_b_id, str(m.team_b_id))
            if m.is_forfeit:
                print(f"  {name_a} vs {name_b}: forfeit ({m.team_a_points:g}-{m.team_b_points:g})")
            else:
                print(
                    f"  {name_a} {m.team_a_net:g} vs {name_b} {m.team_b_net:g}: "
                    f"{m.team_a_points:g}-{m.team_b_points:g}"
                )

    result = scorer.finalize_week(
        scored,
        prior_matchups=[m for m in matchups if m.week_number < args.week],
        previous_snapshot=season.latest_snapshot_before(args.week),
        team_ids=team_names.keys(),
    )
    if not result.ok:
        print("Matchups failed validation:")
        for error in result.errors:
            print(f"  - {error}")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("STANDINGS")
    print("=" * 60)
    for row in result.leaderboard:
        print(
            f"  {row.rank}. {team_names.get(row.team_id, row.team_id)}: "
            f"{row.total_points:g} pts ({row.wins}-{row.losses}-{row.ties}) "
            f"hcp {row.handicap:g}  move {format_change(row.rank_change)}"
        )

    save_json(
        output_path,
        {
            'week': args.week,
            'side': scorer.side,
            'matchups': result.matchups,
            'weekly_scores': result.weekly_scores,
            'standings': result.leaderboard,
            'snapshot': {
                'week_number': result.snapshot.week_number,
                'entries': list(result.snapshot.entries.values()),
            },
        },
    )
    print(f"\nStandings saved: {output_path}")


if __name__ == "__main__":
    main()
