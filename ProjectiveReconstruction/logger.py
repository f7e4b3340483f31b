"""
Logging utility for ProjectiveReconstruction

Every module logs through a child of the 'ProjectiveReconstruction' logger.
Stage results are logged at INFO. Individual decisions (seed scores, selected
views, pruned neighbors) are logged at DEBUG and can be turned on per component
with set_verbose().
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

ROOT_LOGGER_NAME = "ProjectiveReconstruction"

# Format: [2025-10-31 10:15:30] [INFO] [ProjectiveReconstruction.pipeline] Message
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown logging level '{level}'")
    return value


def configure_root_logger(level: str = "INFO",
                          log_file: Optional[str] = None,
                          quiet: bool = False) -> logging.Logger:
    """
    Configure the root ProjectiveReconstruction logger

    Replaces any handlers installed by an earlier call. Call once at the start
    of a run.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path to log file, parent directories are created
        quiet: If True nothing is written to the console

    Returns:
        The root package logger

    Example:
        >>> configure_root_logger(level='DEBUG', log_file='./output/projective.log')
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(_parse_level(level))
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if not quiet:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get logger for a specific module

    Args:
        name: Component name (e.g., 'pipeline', 'selection.seeds', 'selection.neighbors')

    Returns:
        Logger instance
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_verbose(components: Iterable[str], enabled: bool = True) -> None:
    """
    Turn DEBUG output on or off for individual components

    A verbose component logs at DEBUG even when the root logger is set to INFO.

    Args:
        components: Component names as passed to get_logger()
        enabled: False restores the level inherited from the root logger
    """
    for name in components:
        get_logger(name).setLevel(logging.DEBUG if enabled else logging.NOTSET)
