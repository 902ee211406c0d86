"""
Logging Configuration.

All modules obtain their logger through `get_logger` so that output shares
one format. Conversions only log at DEBUG level; the default threshold is
read from the ``GRIDCONVERT_LOG_LEVEL`` environment variable and falls
back to WARNING, which keeps library use silent.
"""

import logging
import os
import sys
from typing import Optional


LOG_LEVEL_ENV_VAR = "GRIDCONVERT_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING


def configured_level() -> int:
    """Resolve the logging level from the environment.

    Returns
    -------
    int
        Logging level. Unknown names fall back to WARNING.
    """
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "")
    if not name:
        return DEFAULT_LOG_LEVEL
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a logger configured for the grid conversion system.

    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int, optional
        Logging level. Defaults to the environment-configured level.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(configured_level() if level is None else level)
    return logger
