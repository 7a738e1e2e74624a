"""
Severity levels -- TRACE and FATAL on top of the standard library levels.

Hierarchy:
    trace  (5)  -> Fine-grained tracing, below DEBUG
    debug  (10)
    info   (20) -> Default threshold
    warn   (30)
    error  (40)
    fatal  (50) -> Same value as logging.CRITICAL; the facade exits after it

The threshold lives in a LevelVar shared by the facade and the handler,
so set_level() takes effect on the next emission decision.
"""

import logging
import threading

TRACE = 5
DEBUG = logging.DEBUG
INFO = logging.INFO
WARN = logging.WARNING
ERROR = logging.ERROR
FATAL = logging.FATAL

DEFAULT_LEVEL = "info"

# Level names accepted in configuration (case-sensitive)
LEVELS: dict[str, int] = {
    "trace": TRACE,
    "debug": DEBUG,
    "info": INFO,
    "warn": WARN,
    "error": ERROR,
    "fatal": FATAL,
}

logging.addLevelName(TRACE, "TRACE")

# Register the level in structlog so BoundLogger.log(TRACE, ...) resolves a method name
import structlog
if hasattr(structlog, "stdlib"):
    try:
        structlog.stdlib.LEVEL_TO_NAME[TRACE] = "trace"
        structlog.stdlib.NAME_TO_LEVEL["trace"] = TRACE
    except (AttributeError, KeyError):
        pass


def resolve_level(name: str | None) -> int:
    """Map a configured level name to its numeric level.

    Unknown names, including the empty string, resolve to the default
    level instead of failing.
    """
    level = LEVELS.get(name) if isinstance(name, str) else None
    if level is None:
        return LEVELS[DEFAULT_LEVEL]
    return level


def is_enabled(threshold: int, level: int) -> bool:
    """True if a record at ``level`` passes a gate set at ``threshold``."""
    return level >= threshold


class LevelVar:
    """Mutable level threshold, safe to read and set from any thread.

    Shared between the Logger facade and the PrettyHandler: both read it
    on every emission decision, set_level() replaces it.
    """

    def __init__(self, level: int = INFO) -> None:
        self._lock = threading.Lock()
        self._level = level

    def level(self) -> int:
        with self._lock:
            return self._level

    def set(self, level: int) -> None:
        with self._lock:
            self._level = level

    def __repr__(self) -> str:
        return f"LevelVar({logging.getLevelName(self.level())})"
