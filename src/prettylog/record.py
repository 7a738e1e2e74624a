"""
Record attributes -- key/value pairs carried by a LogRecord.

The facade stores the ordered attribute sequence on the record under
ATTRS_FIELD. Callers going through the stdlib API (or structlog) pass
``extra=`` instead; both sources end up in the same rendered mapping.
"""

import datetime
import logging
import math
from typing import Any, NamedTuple

ATTRS_FIELD = "prettylog_attrs"

BADKEY = "!BADKEY"

# Attributes every LogRecord has; anything else on the record came from extra=
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", ATTRS_FIELD}


class Attr(NamedTuple):
    """A single key/value attribute."""

    key: str
    value: Any


def args_to_attrs(args: tuple, kwargs: dict[str, Any] | None = None) -> list[Attr]:
    """Convert call arguments into an ordered attribute sequence.

    Positional arguments are read as alternating key/value pairs. An Attr
    (or a 2-tuple with a string key) counts as one complete pair. A key that
    is not a string, or a trailing key with no value, is kept under BADKEY.
    Keyword arguments follow in call order. Duplicate keys are preserved.

    Example:
        >>> args_to_attrs(("user", "a", Attr("id", 1)), {"ok": True})
        [Attr(key='user', value='a'), Attr(key='id', value=1), Attr(key='ok', value=True)]
    """
    attrs: list[Attr] = []
    i = 0
    while i < len(args):
        arg = args[i]
        if isinstance(arg, tuple) and len(arg) == 2 and isinstance(arg[0], str):
            attrs.append(Attr(*arg))
            i += 1
        elif isinstance(arg, str) and i + 1 < len(args):
            attrs.append(Attr(arg, args[i + 1]))
            i += 2
        else:
            attrs.append(Attr(BADKEY, arg))
            i += 1

    if kwargs:
        attrs.extend(Attr(key, value) for key, value in kwargs.items())
    return attrs


def resolve_value(value: Any) -> Any:
    """Resolve an attribute value to a JSON-safe value.

    Strings, ints, finite floats, bools and None pass through. Mappings and
    sequences are resolved recursively. Everything else is rendered as str.
    """
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    if isinstance(value, dict):
        return {str(k): resolve_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [resolve_value(v) for v in value]
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


def collect_attrs(record: logging.LogRecord) -> dict[str, Any]:
    """Fold the record's attributes into a key -> value mapping.

    extra= keys come first, then the facade's attribute sequence. A repeated
    key keeps the value of its last occurrence.
    """
    attrs: dict[str, Any] = {}
    for key, value in vars(record).items():
        if key in _RESERVED or key.startswith("_"):
            continue
        attrs[key] = resolve_value(value)

    for key, value in getattr(record, ATTRS_FIELD, None) or ():
        attrs[key] = resolve_value(value)
    return attrs
