"""Timezone resolution and timestamp rendering."""

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_timezone(tz=None, tz_name: str | None = None) -> tzinfo:
    """Pick the first usable timezone from the fallback cascade.

    Order: an explicit ``tzinfo`` (or a zero-argument callable returning
    one), a timezone name such as ``Europe/Paris``, the process's local
    timezone, and finally UTC.
    """
    if callable(tz) and not isinstance(tz, tzinfo):
        try:
            tz = tz()
        except Exception:
            tz = None
    if isinstance(tz, tzinfo):
        return tz

    if isinstance(tz_name, str) and tz_name:
        try:
            return ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError, TypeError, OSError):
            pass

    try:
        local = datetime.now().astimezone().tzinfo
    except (OSError, OverflowError, ValueError):
        local = None
    if local is not None:
        return local

    return timezone.utc


def timestamp(tz=None, tz_name: str | None = None, time_func=None) -> str:
    """Current time as ``YYYY-MM-DD HH:MM:SS`` in the resolved timezone."""
    resolved = resolve_timezone(tz, tz_name)
    if time_func is not None:
        now = time_func()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        now = now.astimezone(resolved)
    else:
        now = datetime.now(resolved)
    return now.strftime(TIMESTAMP_FORMAT)
