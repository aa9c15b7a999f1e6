"""Process-wide default logger and module-level leveled calls.

Convenience only: ``Logger`` never reaches for this module, and callers that
prefer explicit wiring can ignore it and build their own instances.
"""

import threading

from filelog.config import load_config
from filelog.logger import Logger

_lock = threading.Lock()
_default: Logger | None = None


def build(path: str | None = None) -> Logger:
    """Return a new independent logger, configured from the environment."""
    config = load_config()
    if path:
        return Logger(path, max_file_size_bytes=config.max_file_size_bytes, tz_name=config.timezone)
    return Logger.from_config(config)


def init(path: str | None = None) -> Logger:
    """Replace the default logger with one bound to *path*."""
    global _default
    logger = build(path)
    with _lock:
        _default = logger
    return logger


def get_logger() -> Logger:
    """Return the default logger, creating it on first use."""
    global _default
    with _lock:
        if _default is None:
            _default = build()
        return _default


def reset() -> None:
    """Forget the default logger so the next call rebuilds it."""
    global _default
    with _lock:
        _default = None


def emergency(message, context=None) -> None:
    get_logger().emergency(message, context)


def alert(message, context=None) -> None:
    get_logger().alert(message, context)


def critical(message, context=None) -> None:
    get_logger().critical(message, context)


def error(message, context=None) -> None:
    get_logger().error(message, context)


def warning(message, context=None) -> None:
    get_logger().warning(message, context)


def notice(message, context=None) -> None:
    get_logger().notice(message, context)


def info(message, context=None) -> None:
    get_logger().info(message, context)


def debug(message, context=None) -> None:
    get_logger().debug(message, context)


def log(level, message, context=None) -> None:
    get_logger().log(level, message, context)
