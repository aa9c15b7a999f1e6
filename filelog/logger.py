"""Leveled logger that renders sanitized entries and appends them to one file."""

from collections.abc import Mapping

from filelog import clock
from filelog.config import Config, default_path
from filelog.formatter import format_entry, interpolate, normalize_message
from filelog.levels import LogLevel, normalize_level
from filelog.sanitizer import sanitize_context
from filelog.source import UNKNOWN_SOURCE, detect_source
from filelog.writer import DEFAULT_MAX_FILE_SIZE_BYTES, LogWriter


class Logger:
    """Builds one entry per call and hands it to a ``LogWriter``.

    Only an invalid level raises (``InvalidLevel``). Message and context
    content of any shape is accepted, and write failures are dropped.

    ``tz`` may be a ``tzinfo`` or a zero-argument callable returning one;
    ``tz_name`` is consulted when it is absent or unusable.
    """

    def __init__(
        self,
        path: str | None = None,
        max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES,
        tz=None,
        tz_name: str | None = None,
        time_func=None,
        writer: LogWriter | None = None,
    ):
        self._writer = writer or LogWriter(path or default_path(), max_file_size_bytes)
        self._tz = tz
        self._tz_name = tz_name
        self._time_func = time_func

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "Logger":
        return cls(
            config.log_file,
            max_file_size_bytes=config.max_file_size_bytes,
            tz_name=config.timezone,
            **kwargs,
        )

    @property
    def path(self) -> str:
        return self._writer.path

    def emergency(self, message, context: Mapping | None = None) -> None:
        self.log(LogLevel.EMERGENCY, message, context)

    def alert(self, message, context: Mapping | None = None) -> None:
        self.log(LogLevel.ALERT, message, context)

    def critical(self, message, context: Mapping | None = None) -> None:
        self.log(LogLevel.CRITICAL, message, context)

    def error(self, message, context: Mapping | None = None) -> None:
        self.log(LogLevel.ERROR, message, context)

    def warning(self, message, context: Mapping | None = None) -> None:
        self.log(LogLevel.WARNING, message, context)

    def notice(self, message, context: Mapping | None = None) -> None:
        self.log(LogLevel.NOTICE, message, context)

    def info(self, message, context: Mapping | None = None) -> None:
        self.log(LogLevel.INFO, message, context)

    def debug(self, message, context: Mapping | None = None) -> None:
        self.log(LogLevel.DEBUG, message, context)

    def log(self, level, message, context: Mapping | None = None) -> None:
        self._writer.append(self.build_entry(level, message, context))

    def build_entry(self, level, message, context: Mapping | None = None) -> str:
        """Render the full entry line for a call without writing it."""
        level = normalize_level(level)
        context = dict(context) if context else {}

        source = UNKNOWN_SOURCE
        explicit = context.get("source")
        if isinstance(explicit, str) and explicit != "":
            source = explicit
            del context["source"]
        if source == UNKNOWN_SOURCE:
            source = detect_source()

        sanitized = sanitize_context(context)
        text = interpolate(normalize_message(message), sanitized)

        ts = clock.timestamp(self._tz, self._tz_name, self._time_func)
        return format_entry(ts, level, text, sanitized, source)
