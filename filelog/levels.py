"""Log levels and level validation."""

from enum import Enum


class InvalidLevel(ValueError):
    """Raised when a log level is not one of the eight known levels."""


class LogLevel(str, Enum):
    EMERGENCY = "emergency"
    ALERT = "alert"
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"
    INFO = "info"
    DEBUG = "debug"


VALID_LEVELS = tuple(level.value for level in LogLevel)


def normalize_level(level) -> str:
    """Return the canonical lowercase level name or raise InvalidLevel."""
    if isinstance(level, LogLevel):
        return level.value
    if not isinstance(level, str):
        raise InvalidLevel("Log level must be a string.")

    normalized = level.strip().lower()
    if normalized not in VALID_LEVELS:
        raise InvalidLevel(f"Invalid log level: {normalized}")
    return normalized
