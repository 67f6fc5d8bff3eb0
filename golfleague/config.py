"""League configuration management."""

from functools import lru_cache
from pathlib import Path

from .schemas import HandicapSettings, LeagueConfig, PointsRule, StrokePlayConfig
from .utils import load_json

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'league_config.json'


def load_config(path: Path | str) -> LeagueConfig:
    """
    Load a league configuration file without caching.

    Args:
        path: Path to a league_config.json file

    Returns:
        LeagueConfig object with validated settings

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file has an invalid structure
    """
    return load_json(path, schema=LeagueConfig)


@lru_cache(maxsize=1)
def get_config() -> LeagueConfig:
    """
    Load league configuration from data/league_config.json.

    Configuration is cached after first load.

    Returns:
        LeagueConfig object with validated settings

    Raises:
        FileNotFoundError: If league_config.json doesn't exist
        ValueError: If config file has invalid structure

    Example:
        from golfleague.config import get_config
        config = get_config()
        print(f"Play mode: {config.play_mode}")
    """
    return load_config(DEFAULT_CONFIG_PATH)


def get_play_mode() -> str:
    """Get the league play mode from config."""
    return get_config().play_mode


def get_first_week_side() -> str:
    """Get the side played in week 1 under alternating nine-hole play."""
    return get_config().first_week_side


def get_course_hole_count() -> int:
    """Get the number of holes on the league course."""
    return get_config().course_hole_count


def get_total_points() -> int:
    """Get the match points available per matchup."""
    return get_config().total_points


def get_points_rule() -> PointsRule:
    """Get the margin-to-points rule from config."""
    return get_config().points_rule


def get_handicap_settings() -> HandicapSettings:
    """
    Get the league handicap settings in engine form.

    The stored record is converted on every call; run
    validate_handicap_settings() on the record first to get readable errors.
    """
    return get_config().handicap.to_settings()


def get_stroke_play_config() -> StrokePlayConfig:
    """Get stroke-play point settings from config."""
    return get_config().stroke_play


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.

    Example:
        from golfleague.config import clear_config_cache, get_config
        clear_config_cache()
        config = get_config()  # Reloads from file
    """
    get_config.cache_clear()
