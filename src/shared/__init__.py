"""
Shared module - Cross-cutting concerns / Shared Layer

Constants, enums and logging helpers used by every layer. It must not
depend on Infrastructure or Frameworks.
"""

from .consts import (
    HOURS_PER_DAY,
    PARIS_TIMEZONE,
    WEEKDAY_NAMES,
    EnumEnvironment,
    EnumLogLevel,
)
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "HOURS_PER_DAY",
    "PARIS_TIMEZONE",
    "WEEKDAY_NAMES",
    "EnumEnvironment",
    "EnumLogLevel",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
