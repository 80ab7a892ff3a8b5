"""
Configuration settings for toolbelt.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). All settings are validated
at construction, so a bad value fails at startup with a clear message instead
of surfacing later as odd loop timing or missing log output.

Each subsystem gets its own frozen dataclass with a from_env() factory; the
top-level Settings object aggregates them and get_settings() caches one
instance for the process. Tests construct settings objects directly or call
reset_settings() after changing the environment.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from toolbelt.utils.errors import InvalidArgumentError

# Load .env from project root (no-op when the file is absent)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_COMPENSATION_MS = 2
DEFAULT_HISTORY_SIZE = 1000
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

LOG_LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def _int_from_env(name: str, default: int) -> int:
    """Read an integer environment variable, raising InvalidArgumentError on junk."""
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgumentError(f"{name} must be an integer, got: {raw}")


@dataclass(frozen=True)
class RateLimiterSettings:
    """
    Configuration for the loop rate limiter.

    **Conceptual**: The limiter sleeps for the remainder of the target period
    minus a small wake-up compensation, because a sleeping thread is usually
    woken a little late. compensation_ms is that allowance. history_size caps
    how many per-tick elapsed times a LoopRateLimiter keeps for summaries.

    Attributes:
        compensation_ms: Milliseconds shaved off every sleep (default 2).
                         Must be non-negative.
        history_size: Maximum number of elapsed times kept by LoopRateLimiter
                      (default 1000). Must be at least 1.
    """
    compensation_ms: int = DEFAULT_COMPENSATION_MS
    history_size: int = DEFAULT_HISTORY_SIZE

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.compensation_ms < 0:
            raise InvalidArgumentError(
                f"compensation_ms must be non-negative, got: {self.compensation_ms}"
            )
        if self.history_size < 1:
            raise InvalidArgumentError(
                f"history_size must be at least 1, got: {self.history_size}"
            )

    @classmethod
    def from_env(cls) -> "RateLimiterSettings":
        """
        Load rate limiter settings from environment variables.

        **Environment variables**:
          - TOOLBELT_RATE_COMPENSATION_MS (optional): default 2.
          - TOOLBELT_RATE_HISTORY_SIZE (optional): default 1000.

        Returns:
            RateLimiterSettings object with values loaded from environment.

        Raises:
            InvalidArgumentError: If a variable is not an integer or is out of range.
        """
        return cls(
            compensation_ms=_int_from_env(
                "TOOLBELT_RATE_COMPENSATION_MS", DEFAULT_COMPENSATION_MS
            ),
            history_size=_int_from_env(
                "TOOLBELT_RATE_HISTORY_SIZE", DEFAULT_HISTORY_SIZE
            ),
        )


@dataclass(frozen=True)
class LoggingSettings:
    """
    Configuration for the "toolbelt" logger.

    Attributes:
        level: Level name (case-insensitive), e.g. "DEBUG". Default "WARNING".
        format: logging format string used by setup_logging().
    """
    level: str = DEFAULT_LOG_LEVEL
    format: str = DEFAULT_LOG_FORMAT

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.level.upper() not in LOG_LEVEL_NAMES:
            raise InvalidArgumentError(
                f"log level must be one of {', '.join(LOG_LEVEL_NAMES)}, "
                f"got: {self.level}"
            )
        if not self.format:
            raise InvalidArgumentError("log format must not be empty")

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        """
        Load logging settings from environment variables.

        **Environment variables**:
          - TOOLBELT_LOG_LEVEL (optional): default "WARNING".
          - TOOLBELT_LOG_FORMAT (optional): default
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s".
        """
        return cls(
            level=os.getenv("TOOLBELT_LOG_LEVEL", DEFAULT_LOG_LEVEL),
            format=os.getenv("TOOLBELT_LOG_FORMAT", DEFAULT_LOG_FORMAT),
        )


@dataclass(frozen=True)
class Settings:
    """
    Global settings for toolbelt.

    **Usage pattern**:
      ```python
      from toolbelt.config.settings import get_settings

      settings = get_settings()
      settings.rate_limiter.compensation_ms
      ```

    Attributes:
        rate_limiter: Rate limiter settings.
        logging: Logging settings.
    """
    rate_limiter: RateLimiterSettings = field(default_factory=RateLimiterSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load global settings from environment variables.

        Raises:
            InvalidArgumentError: If any subsystem setting is invalid.
        """
        return cls(
            rate_limiter=RateLimiterSettings.from_env(),
            logging=LoggingSettings.from_env(),
        )


# Lazily loaded on first get_settings() call; tests clear it with reset_settings()
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached for
    reuse. Code that needs different values should accept explicit arguments
    (every operation in toolbelt does) rather than mutate the singleton.

    Returns:
        Global Settings singleton.

    Raises:
        InvalidArgumentError: If the environment holds an invalid value.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          monkeypatch.setenv("TOOLBELT_RATE_COMPENSATION_MS", "5")
          reset_settings()
          assert get_settings().rate_limiter.compensation_ms == 5
      ```
    """
    global _default_settings
    _default_settings = None
