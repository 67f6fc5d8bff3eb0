"""Logging setup for the golf league scorer."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOGGER_NAME = 'golfleague'


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Configure the 'golfleague' logger.

    Module loggers ('golfleague.handicap', 'golfleague.scoring', ...) propagate
    to it. Calling this again replaces the previous handlers.

    Args:
        log_dir: Directory for log files (default: ./logs)
        level: Logging level (default: INFO)
        log_to_file: Write a timestamped log file (default: True)
        log_to_console: Log to stdout (default: True)

    Returns:
        The configured logger

    Example:
        from golfleague.logging_config import setup_logging
        logger = setup_logging(log_to_file=False)
        logger.info("Scoring week 4")
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_to_file:
        log_dir = Path(log_dir) if log_dir is not None else Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f'golfleague_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S',
            )
        )
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger under the golfleague hierarchy (works before setup_logging)."""
    return logging.getLogger(name)
