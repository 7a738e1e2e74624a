"""
Logger facade -- trace/debug/info/warn/error/fatal plus print helpers.

Wraps a private stdlib logger (never registered with logging.getLogger)
whose handler does the rendering. Every emission method forwards to
_log() with a fixed level; fatal() and fatalf() exit the process with
status 1 afterwards, even if FATAL was below the threshold.

Usage:
    lvl = LevelVar(INFO)
    log = Logger(PrettyHandler(sys.stdout, HandlerOptions(level=lvl)), lvl)
    log.info("server started", port=8080)
    log.set_level(DEBUG)
"""

import logging
import os
import sys
import traceback

import structlog

from .levels import DEBUG, ERROR, FATAL, INFO, TRACE, WARN, LevelVar
from .record import ATTRS_FIELD, args_to_attrs

EXIT_FATAL = 1

# Frames from these directories, and from this module, are never reported as the call site
_INTERNAL_DIRS = tuple(
    os.path.normcase(os.path.dirname(os.path.abspath(path))) + os.sep
    for path in (logging.__file__, structlog.__file__)
)
_THIS_FILE = os.path.normcase(os.path.abspath(__file__))


def _is_internal_frame(filename: str) -> bool:
    path = os.path.normcase(os.path.abspath(filename))
    return path == _THIS_FILE or path.startswith(_INTERNAL_DIRS)


class FacilityLogger(logging.Logger):
    """stdlib Logger wired to the facade.

    - isEnabledFor() asks the handlers, so the shared LevelVar is the only gate
    - findCaller() skips logging, structlog and facade frames
    - trace() exists so structlog's BoundLogger.log(TRACE, ...) can proxy to it
    """

    def isEnabledFor(self, level: int) -> bool:
        if self.disabled:
            return False
        for handler in self.handlers:
            enabled = getattr(handler, "enabled", None)
            if enabled is not None:
                if enabled(level):
                    return True
            elif level >= handler.level:
                return True
        return False

    def findCaller(self, stack_info: bool = False, stacklevel: int = 1):
        frame = sys._getframe(1)
        while frame is not None and _is_internal_frame(frame.f_code.co_filename):
            frame = frame.f_back
        while frame is not None and stacklevel > 1:
            frame = frame.f_back
            stacklevel -= 1
        if frame is None:
            return "(unknown file)", 0, "(unknown function)", None

        sinfo = None
        if stack_info:
            sinfo = "Stack (most recent call last):\n" + "".join(traceback.format_stack(frame)).rstrip("\n")
        code = frame.f_code
        return code.co_filename, frame.f_lineno, code.co_name, sinfo

    def trace(self, msg, *args, **kwargs) -> None:
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)


class Logger:
    """Leveled logger with a settable threshold.

    Attributes are passed as alternating key/value positional arguments,
    Attr tuples, or keyword arguments:
        log.info("login", "user", "a", attempts=3)
    """

    def __init__(self, handler: logging.Handler, level: LevelVar, name: str = "prettylog") -> None:
        self._level = level
        self._logger = FacilityLogger(name)
        self._logger.propagate = False
        self._logger.addHandler(handler)

    @property
    def stdlib_logger(self) -> logging.Logger:
        """The wrapped stdlib logger, for code that logs through logging or structlog."""
        return self._logger

    def set_level(self, level: int) -> None:
        """Set the minimum level. Applies to the next call."""
        self._level.set(level)

    def level(self) -> int:
        return self._level.level()

    def enabled(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def _log(self, level: int, msg: str, args: tuple, kwargs: dict) -> None:
        if not self._logger.isEnabledFor(level):
            return

        fn, lno, func, sinfo = self._logger.findCaller()
        record = self._logger.makeRecord(
            self._logger.name, level, fn, lno, msg, (), None,
            func=func, extra={ATTRS_FIELD: args_to_attrs(args, kwargs)}, sinfo=sinfo,
        )
        self._logger.handle(record)

    def trace(self, msg: str, /, *args, **kwargs) -> None:
        self._log(TRACE, msg, args, kwargs)

    def debug(self, msg: str, /, *args, **kwargs) -> None:
        self._log(DEBUG, msg, args, kwargs)

    def info(self, msg: str, /, *args, **kwargs) -> None:
        self._log(INFO, msg, args, kwargs)

    def warn(self, msg: str, /, *args, **kwargs) -> None:
        self._log(WARN, msg, args, kwargs)

    warning = warn

    def error(self, msg: str, /, *args, **kwargs) -> None:
        self._log(ERROR, msg, args, kwargs)

    def fatal(self, msg: str, /, *args, **kwargs) -> None:
        """Log at FATAL, then exit with status 1."""
        self._log(FATAL, msg, args, kwargs)
        self._exit()

    def sprintf(self, msg: str, *args) -> str:
        """%-format ``msg`` with ``args``, the way logging formats messages."""
        if not args:
            return msg
        return msg % args

    def fatalf(self, msg: str, *args) -> None:
        """Format, log at FATAL, then exit with status 1."""
        self._log(FATAL, self.sprintf(_remove_line_break(msg), *args), (), {})
        self._exit()

    def _exit(self) -> None:
        """Flush the handlers and end the process with status 1.

        os._exit rather than sys.exit: SystemExit only ends the calling thread
        and can be caught.
        """
        for handler in self._logger.handlers:
            handler.flush()
        os._exit(EXIT_FATAL)

    def print(self, msg: str, /, *args, **kwargs) -> None:
        """Log ``msg`` on a single line at the current threshold level."""
        self._log(self._level.level(), _remove_line_break(msg), args, kwargs)

    def printf(self, msg: str, *args) -> None:
        """Format and log on a single line at the current threshold level."""
        self._log(self._level.level(), self.sprintf(_remove_line_break(msg), *args), (), {})


def _remove_line_break(msg: str) -> str:
    return msg.replace("\n", " ")
