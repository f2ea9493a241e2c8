"""
Configuration settings for shutils.

**Conceptual**: This module provides a strongly-typed settings object that
loads from environment variables (via .env files). Values are validated when
loaded, so a typo in SHUTILS_SIGDIGITS fails at startup instead of halfway
through a long labelling run.

**Environment variables**:
  - SHUTILS_RESULTS_DIR: Directory where action scripts write result tables.
  - SHUTILS_SIGDIGITS: Significant digits used for legend labels.
  - SHUTILS_COMMENT_PREFIX: Prefix marking metadata lines in W3C-annotated CSVs.
  - SHUTILS_LOG_LEVEL: Logging level name for action scripts.
  - SHUTILS_VERBOSE_CLEANING: Log dropped-row counts at INFO instead of DEBUG.

Library functions never read settings implicitly; they take explicit
arguments. Settings are read by the orchestration layer (actions/) and passed
down.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (no-op if the file does not exist)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(
        f"{name} must be a boolean (true/false, 1/0, yes/no), got: {raw}"
    )


@dataclass(frozen=True)
class Settings:
    """
    Global settings for shutils action scripts.

    Attributes:
        results_dir: Directory for result CSVs written by actions.
        sigdigits: Significant digits for formatted labels (must be >= 1).
        comment_prefix: Line prefix marking metadata in W3C-annotated CSVs.
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        verbose_cleaning: If True, dropped-row counts are logged at INFO.
    """
    results_dir: Path = Path("results")
    sigdigits: int = 2
    comment_prefix: str = "#"
    log_level: str = "WARNING"
    verbose_cleaning: bool = False

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.sigdigits < 1:
            raise ValueError(
                f"SHUTILS_SIGDIGITS must be >= 1, got: {self.sigdigits}"
            )
        if not self.comment_prefix:
            raise ValueError(
                "SHUTILS_COMMENT_PREFIX must not be empty. "
                "Use '#' for standard W3C-annotated CSVs."
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(
                f"SHUTILS_LOG_LEVEL must be a logging level name "
                f"(DEBUG, INFO, WARNING, ERROR, CRITICAL), got: {self.log_level}"
            )

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load settings from environment variables.

        Unset variables fall back to the dataclass defaults.

        Returns:
            Settings object with values loaded from environment.

        Raises:
            ValueError: If any variable is set to an unparseable value.

        Usage example:
            >>> # In .env file:
            >>> # SHUTILS_SIGDIGITS=3
            >>> settings = Settings.from_env()
            >>> settings.sigdigits
            3
        """
        sigdigits_str = os.getenv("SHUTILS_SIGDIGITS", "2")
        try:
            sigdigits = int(sigdigits_str)
        except ValueError:
            raise ValueError(
                f"SHUTILS_SIGDIGITS must be an integer, got: {sigdigits_str}"
            )

        return cls(
            results_dir=Path(os.getenv("SHUTILS_RESULTS_DIR", "results")),
            sigdigits=sigdigits,
            comment_prefix=os.getenv("SHUTILS_COMMENT_PREFIX", "#"),
            log_level=os.getenv("SHUTILS_LOG_LEVEL", "WARNING").upper(),
            verbose_cleaning=_parse_bool(
                "SHUTILS_VERBOSE_CLEANING",
                os.getenv("SHUTILS_VERBOSE_CLEANING", "false"),
            ),
        )


# Lazily loaded singleton; tests call reset_settings() to force a reload.
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.
    Tests can bypass this by constructing Settings(...) directly.

    Returns:
        Global Settings singleton.

    Raises:
        ValueError: If the environment holds invalid values.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    Returns:
        None (side effect: clears global settings cache).
    """
    global _default_settings
    _default_settings = None
