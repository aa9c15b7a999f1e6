"""Context sanitization — redaction, depth limiting, and value flattening.

Every value placed in a log context is reduced to something ``json.dumps``
can render: scalars pass through, containers are walked recursively, and
everything else collapses to a short marker string.
"""

import dataclasses
import io
import re
import socket
from collections.abc import Mapping

MAX_DEPTH = 6

REDACTED = "[REDACTED]"
DEPTH_LIMIT = "[DEPTH-LIMIT]"
RESOURCE = "[RESOURCE]"

SENSITIVE_KEY_PATTERN = re.compile(
    r"pass(word)?|pwd|secret|token|api[_-]?key|auth|authorization|cookie|session"
    r"|bearer|private|signature|credit|card|cvv|cvc|ssn",
    re.IGNORECASE,
)

_SCALARS = (str, int, float, bool)
_SEQUENCES = (list, tuple, set, frozenset)
_RESOURCES = (io.IOBase, socket.socket)


def is_sensitive_key(key: str) -> bool:
    return SENSITIVE_KEY_PATTERN.search(key) is not None


def sanitize_context(context: Mapping) -> dict:
    """Return a sanitized copy of *context*. The input is never mutated."""
    return {
        _json_key(key): sanitize_value(value, 0, key if isinstance(key, str) else None)
        for key, value in context.items()
    }


def sanitize_value(value, depth: int = 0, key: str | None = None):
    """Sanitize a single value found at *depth* under *key*."""
    if key is not None and is_sensitive_key(key):
        return REDACTED

    if depth > MAX_DEPTH:
        return DEPTH_LIMIT

    if value is None or isinstance(value, _SCALARS):
        return value

    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")

    if isinstance(value, Mapping):
        return {
            _json_key(child_key): sanitize_value(
                child_value,
                depth + 1,
                child_key if isinstance(child_key, str) else None,
            )
            for child_key, child_value in value.items()
        }

    if isinstance(value, BaseException):
        return describe_exception(value)

    try:
        serialized = _serialize(value)
    except Exception:
        return _object_marker(value)
    if serialized is not _NOT_SERIALIZABLE:
        return sanitize_value(serialized, depth + 1)

    if isinstance(value, _SEQUENCES):
        return [sanitize_value(item, depth + 1) for item in value]

    if isinstance(value, _RESOURCES):
        return RESOURCE

    if has_own_str(value):
        try:
            return str(value)
        except Exception:
            pass

    return _object_marker(value)


def describe_exception(exc: BaseException) -> dict:
    """Reduce an exception to type, message, code, and raise location."""
    file = None
    line = None
    tb = exc.__traceback__
    if tb is not None:
        while tb.tb_next is not None:
            tb = tb.tb_next
        file = tb.tb_frame.f_code.co_filename
        line = tb.tb_lineno

    return {
        "type": _type_name(exc),
        "message": _exception_message(exc),
        "code": _exception_code(exc),
        "file": file,
        "line": line,
    }


def has_own_str(value) -> bool:
    """True when the value's type defines __str__ beyond object's default."""
    return type(value).__str__ is not object.__str__


_NOT_SERIALIZABLE = object()


def _serialize(value):
    """Convert values that know how to serialize themselves to plain data."""
    to_json = getattr(type(value), "__json__", None)
    if callable(to_json):
        return to_json(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return dict(value._asdict())
    return _NOT_SERIALIZABLE


def _exception_code(exc: BaseException) -> int:
    for attr in ("errno", "code"):
        code = getattr(exc, attr, None)
        if isinstance(code, int) and not isinstance(code, bool):
            return code
    return 0


def _type_name(value) -> str:
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def _json_key(key):
    if key is None or isinstance(key, _SCALARS):
        return key
    return str(key)


def _exception_message(exc: BaseException) -> str:
    try:
        return str(exc)
    except Exception:
        return ""


def _object_marker(value) -> str:
    return f"[OBJECT {type(value).__name__}]"
