"""Call-site detection by walking the interpreter's frame stack."""

import sys

UNKNOWN_SOURCE = "unknown"
MAX_FRAMES = 12

# Modules whose frames are never reported as the source of an entry.
FACADE_MODULES = frozenset({"filelog.logger", "filelog.registry"})

# Generic dispatch helpers that sit between the real caller and the logger.
TRAMPOLINE_MODULES = frozenset({"functools", "operator"})


def detect_source(skip_modules=FACADE_MODULES, max_frames: int = MAX_FRAMES) -> str:
    """Return ``Owner::function`` or ``function`` for the first external caller."""
    try:
        frame = sys._getframe(1)
    except ValueError:
        return UNKNOWN_SOURCE

    inspected = 0
    while frame is not None and inspected < max_frames:
        inspected += 1
        module = frame.f_globals.get("__name__", "")
        code = frame.f_code
        if module in skip_modules or module in TRAMPOLINE_MODULES:
            frame = frame.f_back
            continue
        # Module-level code ends the walk.
        if code.co_name == "<module>":
            return UNKNOWN_SOURCE

        return describe_code(code)

    return UNKNOWN_SOURCE


def describe_code(code) -> str:
    """Render a code object as ``Owner::function`` or a bare function name."""
    qualname = getattr(code, "co_qualname", code.co_name)
    # Only the innermost scope names the call site.
    scope = qualname.rsplit("<locals>.", 1)[-1]
    owner, _, function = scope.rpartition(".")
    if owner:
        return f"{owner}::{function}"
    return function
