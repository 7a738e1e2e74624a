"""
Pretty handler -- renders one LogRecord per line, colorized text or JSON.

Plain format:
    2024-05-01 12:00:00 INFO main.py:12 server started {
      "port": 8080
    }

JSON format:
    {"time":"2024-05-01T12:00:00.123456+02:00","level":"INFO","source":"main.py:12","msg":"server started","attrs":{"port":8080}}

Each field is rendered on its own. A failing rewrite hook or a source path
that cannot be made relative degrades that field only, the record is
still written.
"""

import datetime
import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple

from structlog.dev import BLUE, BRIGHT, DIM, GREEN, MAGENTA, RED, RESET_ALL, YELLOW

from .levels import DEBUG, ERROR, FATAL, INFO, TRACE, WARN, LevelVar, is_enabled
from .record import collect_attrs

TIME_KEY = "time"
LEVEL_KEY = "level"
SOURCE_KEY = "source"

DATE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# groups, key, value -> key, value. An empty key keeps the original value.
ReplaceAttr = Callable[[list[str], str, Any], tuple[str, Any]]


class LevelStyle(NamedTuple):
    """Display name and ANSI color of a level."""

    name: str
    color: str


LEVEL_STYLES: dict[int, LevelStyle] = {
    TRACE: LevelStyle("TRACE", DIM),
    DEBUG: LevelStyle("DEBUG", BRIGHT + BLUE),
    INFO: LevelStyle("INFO", BRIGHT + GREEN),
    WARN: LevelStyle("WARN", BRIGHT + YELLOW),
    ERROR: LevelStyle("ERROR", BRIGHT + MAGENTA),
    FATAL: LevelStyle("FATAL", BRIGHT + RED),
}

TIME_COLOR = DIM
MESSAGE_COLOR = BRIGHT


@dataclass(frozen=True)
class Source:
    """Call site of a record, as handed to the rewrite hook."""

    function: str
    file: str
    line: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


@dataclass
class HandlerOptions:
    """Options for PrettyHandler.

    Attributes:
        level: Minimum level, a fixed int or a LevelVar shared with the facade
        add_source: Render the call site as ``file.py:line``
        replace_attr: Optional hook to rewrite the time, level and source fields
        json: One JSON object per line instead of colorized text
        colors: ANSI colors in plain mode. None enables them only on a TTY
            without NO_COLOR set.
    """

    level: int | LevelVar = INFO
    add_source: bool = False
    replace_attr: ReplaceAttr | None = None
    json: bool = False
    colors: bool | None = None


class PrettyHandler(logging.StreamHandler):
    """Handler that writes human-readable or JSON lines.

    The level gate runs in handle(), before any formatting. emit() writes
    the whole line in a single call to the stream.
    """

    def __init__(self, stream=None, options: HandlerOptions | None = None) -> None:
        super().__init__(stream or sys.stdout)
        self.options = options or HandlerOptions()
        colors = self.options.colors
        if colors is None:
            colors = _is_tty(self.stream) and "NO_COLOR" not in os.environ
        self.colors = colors

    def enabled(self, level: int) -> bool:
        threshold = self.options.level
        if isinstance(threshold, LevelVar):
            threshold = threshold.level()
        return is_enabled(threshold, level)

    def handle(self, record: logging.LogRecord) -> bool:
        if not self.enabled(record.levelno):
            return False
        return bool(super().handle(record))

    def format(self, record: logging.LogRecord) -> str:
        replace = self.options.replace_attr

        time = self._date_time(record, replace)
        level = self._level(record, replace)
        source = self._source(record, replace)
        message = self._message(record)
        attrs = collect_attrs(record)

        if self.options.json:
            fields = {
                "time": time,
                "level": level,
                "source": source,
                "msg": message,
                "attrs": attrs,
            }
            return json.dumps(
                {key: value for key, value in fields.items() if value},
                ensure_ascii=False,
                separators=(",", ":"),
            )

        parts = [time, level]
        if source:
            parts.append(source)
        parts.append(message)
        result = " ".join(parts)

        # Skip the attrs segment when there is nothing but "{}"
        json_attrs = json.dumps(attrs, ensure_ascii=False, indent=2)
        if len(json_attrs) > 2:
            result = f"{result} {json_attrs}"
        return result

    def _paint(self, color: str, text: str) -> str:
        if not self.colors or not color:
            return text
        return f"{color}{text}{RESET_ALL}"

    def _format_time(self, value: Any) -> str:
        if not isinstance(value, datetime.datetime):
            return str(value)
        if self.options.json:
            return value.isoformat(timespec="microseconds")
        return value.strftime(DATE_TIME_FORMAT)

    def _date_time(self, record: logging.LogRecord, replace: ReplaceAttr | None) -> str:
        moment = datetime.datetime.fromtimestamp(record.created).astimezone()
        time_str = self._format_time(moment)

        rewritten = _rewrite(replace, TIME_KEY, moment, self._format_time)
        if rewritten is not None:
            time_str = rewritten

        if self.options.json:
            return time_str
        return self._paint(TIME_COLOR, time_str)

    def _level(self, record: logging.LogRecord, replace: ReplaceAttr | None) -> str:
        style = LEVEL_STYLES.get(record.levelno)
        if style is None:
            style = LevelStyle(logging.getLevelName(record.levelno), "")

        name = style.name
        rewritten = _rewrite(replace, LEVEL_KEY, record.levelno, _level_name)
        if rewritten is not None:
            name = rewritten

        if self.options.json:
            return name
        # Color follows the record's level even when the hook renamed it
        return self._paint(style.color, name)

    def _source(self, record: logging.LogRecord, replace: ReplaceAttr | None) -> str:
        if not self.options.add_source:
            return ""

        if not record.pathname or record.pathname == "(unknown file)":
            return ""

        try:
            rel_path = os.path.relpath(record.pathname, os.getcwd())
        except (OSError, ValueError):
            return ""

        path_source = f"{os.path.basename(rel_path)}:{record.lineno}"

        src = Source(function=record.funcName or "", file=record.pathname, line=record.lineno)
        rewritten = _rewrite(replace, SOURCE_KEY, src, _source_name)
        if rewritten is not None:
            path_source = rewritten
        return path_source

    def _message(self, record: logging.LogRecord) -> str:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            message = str(record.msg)

        if self.options.json:
            return message
        return self._paint(MESSAGE_COLOR, message)


def _rewrite(
    replace: ReplaceAttr | None,
    key: str,
    value: Any,
    render: Callable[[Any], str] = str,
) -> str | None:
    """Run the rewrite hook on a field.

    Returns the replacement rendered with ``render``, or None when the original
    should stay: no hook, an empty key in the result, or a hook that raised.
    """
    if replace is None:
        return None
    try:
        new_key, new_value = replace([], key, value)
    except Exception:
        return None
    if not new_key:
        return None
    return render(new_value)


def _level_name(value: Any) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        style = LEVEL_STYLES.get(value)
        return style.name if style else logging.getLevelName(value)
    return str(value)


def _source_name(value: Any) -> str:
    if isinstance(value, Source):
        return f"{os.path.basename(value.file)}:{value.line}"
    return str(value)


def _is_tty(stream) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # Closed stream
        return False
