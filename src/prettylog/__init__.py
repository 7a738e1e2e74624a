"""
prettylog - Leveled logging on top of the standard library.

Adds TRACE (below DEBUG) and FATAL (above ERROR, exits the process),
a shared settable threshold, and a handler that renders each record as
one colorized line or one JSON object.
"""

from .config import LoggingConfig, load_config
from .levels import DEBUG, ERROR, FATAL, INFO, LEVELS, TRACE, WARN, LevelVar, is_enabled, resolve_level
from .logger import Logger
from .pretty import LEVEL_STYLES, HandlerOptions, LevelStyle, PrettyHandler, Source
from .record import Attr
from .setup import configure_structlog, get_logger, new_logger

__all__ = [
    "Attr",
    "configure_structlog",
    "DEBUG",
    "ERROR",
    "FATAL",
    "get_logger",
    "HandlerOptions",
    "INFO",
    "is_enabled",
    "LEVEL_STYLES",
    "LEVELS",
    "LevelStyle",
    "LevelVar",
    "load_config",
    "Logger",
    "LoggingConfig",
    "new_logger",
    "PrettyHandler",
    "resolve_level",
    "Source",
    "TRACE",
    "WARN",
]
