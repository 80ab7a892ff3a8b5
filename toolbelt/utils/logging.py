"""
Logging setup for toolbelt.

Modules obtain their logger with logging.getLogger(__name__), so every record
lands under the "toolbelt" logger hierarchy. The library itself never
configures the root logger; applications (and the scripts in actions/) call
setup_logging() once to attach a handler.

The default format reproduces the "[YYYY-MM-DD HH:MM:SS] message" layout of
the old timestamped log helper, with level and logger name added.
"""

import logging
from typing import Optional

from toolbelt.config.settings import get_settings

LOGGER_NAME = "toolbelt"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks the handler installed by setup_logging so repeated calls replace it
_HANDLER_ATTR = "_toolbelt_handler"


def setup_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the "toolbelt" logger with a single stream handler.

    **Functionally**:
    - level/fmt default to the values in LoggingSettings (TOOLBELT_LOG_LEVEL,
      TOOLBELT_LOG_FORMAT).
    - Idempotent: calling it again replaces the previously installed handler
      instead of stacking a second one.
    - Propagation to the root logger is left enabled so test harnesses
      (pytest's caplog) still see records.

    Args:
        level: Level name such as "DEBUG" or "WARNING".
        fmt: logging format string.

    Returns:
        The configured "toolbelt" logger.
    """
    settings = get_settings().logging
    level = (level or settings.level).upper()
    fmt = fmt or settings.format

    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FORMAT))
    setattr(handler, _HANDLER_ATTR, True)

    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the toolbelt hierarchy (e.g. "actions.loop")."""
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
