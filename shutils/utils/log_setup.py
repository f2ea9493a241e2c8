"""
Logging setup for action scripts.

Library modules only create loggers via logging.getLogger(__name__) and never
attach handlers. Entry points (actions/, main.py) call configure_logging()
once at startup.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | int = "WARNING") -> None:
    """
    Configure the root logger with a single stream handler.

    Calling this more than once replaces the previous configuration, so
    repeated calls from tests do not stack handlers.

    Args:
        level: Level name ("INFO", "debug", ...) or numeric logging level.

    Raises:
        ValueError: If a level name is not recognized by logging.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
