"""Tests for safe JSON object decoding."""

import pytest

from sheetdb.commons.safe_json import is_valid_object_json, parse_object_or_null


def test_decodes_plain_objects():
    assert parse_object_or_null('{"type": "string", "required": true}') == {"type": "string", "required": True}
    assert parse_object_or_null("  {}  ") == {}


@pytest.mark.parametrize(
    "text",
    ["", "   ", "[1, 2]", "42", "null", '"string"', "true", "{bad json", '{"a": 1', '{"a": NaN}', "string"],
)
def test_returns_none_for_non_objects(text):
    assert parse_object_or_null(text) is None
    assert is_valid_object_json(text) is False


def test_returns_none_for_non_strings():
    assert parse_object_or_null(None) is None
    assert parse_object_or_null({"a": 1}) is None
    assert is_valid_object_json(123) is False


def test_proto_key_is_an_ordinary_key():
    parsed = parse_object_or_null('{"__proto__": {"x": 1}, "constructor": {"prototype": {"y": 2}}}')

    assert parsed["__proto__"] == {"x": 1}
    assert parsed["constructor"] == {"prototype": {"y": 2}}
    assert set(parsed.keys()) == {"__proto__", "constructor"}

    fresh = {}
    assert "x" not in fresh
    assert getattr(fresh, "x", None) is None
    assert getattr(parsed, "x", None) is None


def test_long_repeated_input_is_handled():
    long_value = "a" * 200_000
    assert parse_object_or_null('{"a": "' + long_value + '"}') == {"a": long_value}
    assert parse_object_or_null('{"a": "' + long_value) is None


def test_deeply_nested_arrays_are_rejected_without_raising():
    assert parse_object_or_null("[" * 100_000) is None
    assert parse_object_or_null('{"a": ' + "[" * 100_000 + "]" * 100_000 + "}") is None
