"""Message normalization, placeholder interpolation, and entry rendering."""

import json
import os
import re

from filelog.sanitizer import has_own_str

EMPTY_MESSAGE = "-"
EMPTY_JSON = "{}"

_LINE_BREAKS = re.compile(r"[\r\n]")


def encode_json(value) -> str:
    """Compact JSON without escaped slashes or unicode; ``{}`` on failure.

    Values json cannot encode natively are written as ``null`` instead of
    failing the whole document.
    """
    try:
        return json.dumps(
            value,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
            default=lambda _unencodable: None,
        )
    except (TypeError, ValueError, RecursionError):
        return EMPTY_JSON


def normalize_message(message) -> str:
    """Collapse a message to one trimmed line, never empty."""
    normalized = None
    if isinstance(message, str):
        normalized = message
    elif isinstance(message, bytes):
        normalized = message.decode("utf-8", errors="replace")
    elif message is not None and has_own_str(message) and not _is_plain_data(message):
        try:
            normalized = str(message)
        except Exception:
            pass
    if normalized is None:
        normalized = encode_json(message)

    normalized = _LINE_BREAKS.sub(" ", normalized).strip()
    return normalized or EMPTY_MESSAGE


def stringify(value) -> str:
    """Render a context value for substitution into the message."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return encode_json(value)


def interpolate(message: str, context: dict) -> str:
    """Replace ``{key}`` placeholders with context values in a single pass."""
    if "{" not in message:
        return message

    replacements = {
        "{" + key + "}": stringify(value)
        for key, value in context.items()
        if isinstance(key, str)
    }
    if not replacements:
        return message

    # Longest placeholder wins; substituted text is not scanned again.
    pattern = re.compile(
        "|".join(re.escape(p) for p in sorted(replacements, key=len, reverse=True))
    )
    return pattern.sub(lambda match: replacements[match.group(0)], message)


def format_entry(timestamp: str, level: str, message: str, context: dict, source: str) -> str:
    return (
        f"{timestamp} [{level}] {message} | source={source} | "
        f"context={encode_json(context)}{os.linesep}"
    )


def _is_plain_data(value) -> bool:
    # Numbers, containers and booleans are JSON-encoded rather than str()'d.
    return isinstance(value, (int, float, list, tuple, dict, set, frozenset))
