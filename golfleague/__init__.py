from .models import (
    HoleScore,
    LeaderboardRow,
    LeaderboardSnapshot,
    Matchup,
    PointsSuggestion,
    SnapshotEntry,
    StrokePlayEntry,
    StrokePlayResult,
    Team,
    WeeklyScoreEntry,
)
from .schemas import (
    AllScores,
    BestOfLast,
    ExceptionalCap,
    HandicapSettings,
    LastN,
    LeagueConfig,
    LeagueHandicapRecord,
    PointsRule,
    Provisional,
    SeasonFile,
    StrokePlayConfig,
    Trend,
    Weighting,
)
from .course_side import resolve_side, filter_holes, is_hole_in_play, expected_hole_count
from .scoring import (
    net_score,
    are_scores_tied,
    allocate_points,
    forfeit_points,
    suggest_matchup_points,
    gross_from_holes,
    generate_point_scale,
    calculate_stroke_play_points,
)
from .handicap import (
    compute_handicap,
    describe_calculation,
    HANDICAP_PRESETS,
    apply_preset,
    team_handicap_history,
)
from .leaderboard import (
    build_leaderboard,
    take_snapshot,
    standings_at_week,
    leaderboard_with_movement,
)
from .validators import (
    ConfigurationError,
    MatchupInvariantError,
    validate_handicap_settings,
    validate_matchup,
    validate_scorecard,
)
from .weekly import WeekScorer, WeekResult
from .config import get_config, load_config, clear_config_cache
from .logging_config import setup_logging, get_logger
from .utils import load_json, save_json, validate_json_file

__all__ = [
    # Models
    'HoleScore',
    'LeaderboardRow',
    'LeaderboardSnapshot',
    'Matchup',
    'PointsSuggestion',
    'SnapshotEntry',
    'StrokePlayEntry',
    'StrokePlayResult',
    'Team',
    'WeeklyScoreEntry',
    # Settings and file schemas
    'AllScores',
    'BestOfLast',
    'ExceptionalCap',
    'HandicapSettings',
    'LastN',
    'LeagueConfig',
    'LeagueHandicapRecord',
    'PointsRule',
    'Provisional',
    'SeasonFile',
    'StrokePlayConfig',
    'Trend',
    'Weighting',
    # Course side
    'resolve_side',
    'filter_holes',
    'is_hole_in_play',
    'expected_hole_count',
    # Net scores and points
    'net_score',
    'are_scores_tied',
    'allocate_points',
    'forfeit_points',
    'suggest_matchup_points',
    'gross_from_holes',
    'generate_point_scale',
    'calculate_stroke_play_points',
    # Handicaps
    'compute_handicap',
    'describe_calculation',
    'HANDICAP_PRESETS',
    'apply_preset',
    'team_handicap_history',
    # Leaderboard
    'build_leaderboard',
    'take_snapshot',
    'standings_at_week',
    'leaderboard_with_movement',
    # Validation
    'ConfigurationError',
    'MatchupInvariantError',
    'validate_handicap_settings',
    'validate_matchup',
    'validate_scorecard',
    # Weekly workflow
    'WeekScorer',
    'WeekResult',
    # Config, logging, I/O
    'get_config',
    'load_config',
    'clear_config_cache',
    'setup_logging',
    'get_logger',
    'load_json',
    'save_json',
    'validate_json_file',
]
