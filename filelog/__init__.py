"""filelog — leveled, sanitized logging to a single locked, size-bounded file."""

from filelog.config import Config, default_path, load_config
from filelog.levels import InvalidLevel, LogLevel
from filelog.logger import Logger
from filelog.registry import (
    alert,
    build,
    critical,
    debug,
    emergency,
    error,
    get_logger,
    info,
    init,
    log,
    notice,
    warning,
)
from filelog.writer import LogWriter, WriteResult

__all__ = [
    "Config",
    "InvalidLevel",
    "LogLevel",
    "LogWriter",
    "Logger",
    "WriteResult",
    "alert",
    "build",
    "critical",
    "debug",
    "default_path",
    "emergency",
    "error",
    "get_logger",
    "info",
    "init",
    "load_config",
    "log",
    "notice",
    "warning",
]
