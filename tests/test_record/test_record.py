"""
Tests para atributos de los records.

Cubre:
- args_to_attrs (pares, Attr, BADKEY, kwargs, duplicados)
- resolve_value (tipos JSON, anidados, no finitos, objetos)
- collect_attrs (extra=, secuencia de la fachada, último gana)
"""

import datetime
import logging

from prettylog.record import ATTRS_FIELD, BADKEY, Attr, args_to_attrs, collect_attrs, resolve_value


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("test", logging.INFO, "/tmp/app.py", 1, "msg", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# -- Tests: args_to_attrs ----------------------------------------------------


class TestArgsToAttrs:
    """Tests para args_to_attrs."""

    def test_alternating_pairs(self):
        assert args_to_attrs(("user", "a", "id", 7)) == [Attr("user", "a"), Attr("id", 7)]

    def test_attr_tuples(self):
        assert args_to_attrs((Attr("user", "a"), ("id", 7))) == [Attr("user", "a"), Attr("id", 7)]

    def test_kwargs_follow_positional(self):
        attrs = args_to_attrs(("user", "a"), {"ok": True, "n": 2})
        assert attrs == [Attr("user", "a"), Attr("ok", True), Attr("n", 2)]

    def test_dangling_key_is_badkey(self):
        assert args_to_attrs(("user", "a", "orphan")) == [Attr("user", "a"), Attr(BADKEY, "orphan")]

    def test_non_string_key_is_badkey(self):
        assert args_to_attrs((42, "user", "a")) == [Attr(BADKEY, 42), Attr("user", "a")]

    def test_duplicates_preserved_in_sequence(self):
        attrs = args_to_attrs(("user", "a", "user", "b"))
        assert [a.key for a in attrs] == ["user", "user"]

    def test_empty(self):
        assert args_to_attrs(()) == []


# -- Tests: resolve_value ----------------------------------------------------


class TestResolveValue:
    """Tests para resolve_value."""

    def test_scalars_pass_through(self):
        for value in ("s", 1, 1.5, True, None):
            assert resolve_value(value) == value

    def test_non_finite_float_becomes_string(self):
        assert resolve_value(float("nan")) == "nan"
        assert resolve_value(float("inf")) == "inf"

    def test_nested_mapping(self):
        assert resolve_value({"a": {1: (1, 2)}}) == {"a": {"1": [1, 2]}}

    def test_datetime(self):
        moment = datetime.datetime(2024, 5, 1, 12, 0, 0)
        assert resolve_value(moment) == "2024-05-01T12:00:00"

    def test_exception_and_objects_become_strings(self):
        assert resolve_value(ValueError("boom")) == "boom"
        assert resolve_value(object).startswith("<class")


# -- Tests: collect_attrs ----------------------------------------------------


class TestCollectAttrs:
    """Tests para collect_attrs."""

    def test_no_attrs(self):
        assert collect_attrs(_record()) == {}

    def test_last_duplicate_wins(self):
        record = _record(**{ATTRS_FIELD: [Attr("user", "a"), Attr("id", 1), Attr("user", "b")]})
        assert collect_attrs(record) == {"user": "b", "id": 1}

    def test_extra_keys_are_collected(self):
        record = _record(request_id="r-1", _private="hidden")
        assert collect_attrs(record) == {"request_id": "r-1"}

    def test_sequence_overrides_extra(self):
        record = _record(user="extra", **{ATTRS_FIELD: [Attr("user", "facade")]})
        assert collect_attrs(record) == {"user": "facade"}

    def test_stdlib_fields_are_not_attrs(self):
        record = _record()
        record.message = record.getMessage()
        assert collect_attrs(record) == {}
