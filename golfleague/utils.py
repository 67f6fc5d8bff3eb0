"""File I/O helpers for league configuration and season data."""

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('golfleague.utils')


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Read a JSON file, optionally validating it against a pydantic model.

    Args:
        path: Path to the JSON file
        schema: Optional pydantic model the top-level object must satisfy

    Returns:
        Parsed JSON, or a schema instance when a schema is given

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the JSON is malformed
        ValueError: If schema validation fails

    Example:
        from golfleague.schemas import SeasonFile
        season = load_json('data/season.json', schema=SeasonFile)
    """
    path = Path(path)
    logger.debug(f'Reading {path}')

    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} (line {e.lineno}, column {e.colno})')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    if schema is None:
        return data

    try:
        validated = schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'{path} does not match {schema.__name__}: {e.error_count()} error(s)')
        raise ValueError(f'{path} does not match {schema.__name__}:\n{e}') from e

    logger.debug(f'{path} validated as {schema.__name__}')
    return validated


def to_jsonable(data: Any) -> Any:
    """Convert pydantic models and dataclasses (recursively) into JSON-ready values."""
    if isinstance(data, BaseModel):
        return data.model_dump()
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    if isinstance(data, dict):
        return {k: to_jsonable(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_jsonable(v) for v in data]
    return data


def save_json(
    path: Path | str,
    data: Any,
    indent: int = 2,
    create_dirs: bool = True,
) -> None:
    """
    Write data to a JSON file.

    Pydantic models and dataclasses (such as LeaderboardRow) are converted
    before writing.

    Args:
        path: Destination path
        data: JSON-serializable data, pydantic models or dataclasses
        indent: Indentation level (default: 2 spaces)
        create_dirs: Create missing parent directories (default: True)

    Raises:
        TypeError: If data is not JSON-serializable
        OSError: If the file cannot be written

    Example:
        save_json('output/standings.json', {'week': 3, 'standings': rows})
    """
    path = Path(path)
    logger.debug(f'Writing {path}')

    if create_dirs:
        path.parent.mkdir(parents=True, exist_ok=True)

    json_data = to_jsonable(data)

    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(json_data, f, indent=indent, ensure_ascii=False)
    except TypeError as e:
        logger.error(f'Cannot serialize data for {path}: {e}')
        raise TypeError(f'Data is not JSON-serializable: {e}') from e
    except OSError as e:
        logger.error(f'Failed to write {path}: {e}')
        raise


def validate_json_file(
    path: Path | str,
    schema: type[T],
) -> tuple[bool, str | None]:
    """
    Check a JSON file against a schema.

    Args:
        path: Path to the JSON file
        schema: Pydantic model to validate against

    Returns:
        Tuple of (is_valid, error_message); error_message is None when valid

    Example:
        ok, error = validate_json_file('data/league_config.json', LeagueConfig)
        if not ok:
            print(error)
    """
    try:
        load_json(path, schema=schema)
    except FileNotFoundError:
        return False, f'File not found: {path}'
    except json.JSONDecodeError as e:
        return False, f'Invalid JSON: {e.msg} at position {e.pos}'
    except ValueError as e:
        return False, str(e)
    return True, None
