"""Tests for WHERE parsing and evaluation."""

import copy
import json
import time

import pytest

from sheetdb.query import (
    BooleanClause,
    FieldCondition,
    InvalidOperandType,
    InvalidRegex,
    InvalidWhereFormat,
    Operator,
    UnsupportedOperator,
    evaluate,
    parse_expression,
    parse_filter,
)


class RecordingRow(dict):
    """Row that remembers which fields were read."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reads = []

    def __getitem__(self, key):
        self.reads.append(key)
        return super().__getitem__(key)


def matches(where, row) -> bool:
    return evaluate(parse_expression(json.dumps(where)), row)


def test_range_operators():
    assert matches({"score": {"$gte": 100, "$lte": 1000}}, {"score": 150})
    assert not matches({"score": {"$gte": 100, "$lte": 1000}}, {"score": 1500})
    assert matches({"score": {"$gt": 1.5}}, {"score": 2})
    assert matches({"score": {"$lt": 0}}, {"score": -0.5})


def test_unsatisfiable_range_matches_nothing():
    expression = parse_expression('{"score": {"$gt": 100, "$lt": 100}}')
    for score in (-1, 0, 99, 100, 101, 1000):
        assert not evaluate(expression, {"score": score})


def test_range_on_non_numeric_values_is_false():
    expression = parse_expression('{"score": {"$gt": 100}}')
    assert not evaluate(expression, {"score": "150"})
    assert not evaluate(expression, {"score": True})
    assert not evaluate(expression, {"score": None})
    assert not evaluate(expression, {})


def test_bare_equality_uses_deep_equality():
    assert matches({"name": "alice"}, {"name": "alice"})
    assert not matches({"name": "alice"}, {"name": "Alice"})
    assert matches({"tags": ["a", "b"]}, {"tags": ["a", "b"]})
    assert not matches({"tags": ["a", "b"]}, {"tags": ["b", "a"]})
    assert matches({"meta": {"x": 1, "y": 2}}, {"meta": {"y": 2, "x": 1}})
    assert matches({"score": 100}, {"score": 100.0})


def test_null_equality_requires_the_field():
    assert matches({"deleted_at": None}, {"deleted_at": None})
    assert not matches({"deleted_at": None}, {})


def test_not_equal():
    assert matches({"status": {"$ne": "archived"}}, {"status": "active"})
    assert not matches({"status": {"$ne": "archived"}}, {"status": "archived"})
    assert matches({"status": {"$ne": "archived"}}, {})


def test_membership():
    where = {"category": {"$in": ["books", "music"]}}
    assert matches(where, {"category": "books"})
    assert not matches(where, {"category": "games"})
    assert not matches(where, {})
    assert matches({"category": {"$nin": ["books", "music"]}}, {"category": "games"})
    assert matches({"category": {"$nin": ["books"]}}, {})
    assert matches({"pair": {"$in": [[1, 2], [3, 4]]}}, {"pair": [3, 4]})


def test_exists_checks_key_presence():
    assert matches({"nickname": {"$exists": True}}, {"nickname": ""})
    assert matches({"nickname": {"$exists": True}}, {"nickname": None})
    assert not matches({"nickname": {"$exists": True}}, {})
    assert matches({"nickname": {"$exists": False}}, {})
    assert not matches({"nickname": {"$exists": False}}, {"nickname": 0})


def test_regex():
    assert matches({"name": {"$regex": "^al"}}, {"name": "alice"})
    assert matches({"name": {"$regex": "ic"}}, {"name": "alice"})
    assert not matches({"name": {"$regex": "^bo"}}, {"name": "alice"})
    assert not matches({"name": {"$regex": "1"}}, {"name": 123})
    assert not matches({"name": {"$regex": "a"}}, {"name": "a" * 20_000})


def test_text_is_case_insensitive_substring():
    assert matches({"title": {"$text": "HELLO wor"}}, {"title": "Say hello world"})
    assert not matches({"title": {"$text": "hello there"}}, {"title": "Say hello world"})
    assert matches({"score": {"$text": "15"}}, {"score": 150.0})
    assert matches({"active": {"$text": "tru"}}, {"active": True})
    assert not matches({"title": {"$text": "none"}}, {"title": None})
    assert not matches({"title": {"$text": "x"}}, {})


def test_root_fields_combine_with_and():
    where = {"status": "active", "score": {"$gte": 10}}
    assert matches(where, {"status": "active", "score": 10})
    assert not matches(where, {"status": "active", "score": 9})
    assert not matches(where, {"status": "inactive", "score": 10})
    assert matches({}, {"anything": 1})


def test_and_or_combinators():
    where = {"$or": [{"role": "admin"}, {"score": {"$gt": 90}}], "active": True}
    assert matches(where, {"role": "admin", "score": 0, "active": True})
    assert matches(where, {"role": "user", "score": 95, "active": True})
    assert not matches(where, {"role": "user", "score": 50, "active": True})
    assert not matches(where, {"role": "admin", "active": False})
    assert matches({"$and": [{"a": 1}, {"b": {"$in": [2, 3]}}]}, {"a": 1, "b": 3})


def test_combinators_short_circuit():
    or_expression = parse_expression('{"$or": [{"a": 1}, {"b": 2}]}')
    row = RecordingRow(a=1, b=2)
    assert evaluate(or_expression, row)
    assert row.reads == ["a"]

    and_expression = parse_expression('{"$and": [{"a": 0}, {"b": 2}]}')
    row = RecordingRow(a=1, b=2)
    assert not evaluate(and_expression, row)
    assert row.reads == ["a"]


def test_evaluation_does_not_mutate_rows():
    row = {"score": 150, "tags": ["a"], "meta": {"k": [1, 2]}}
    snapshot = copy.deepcopy(row)
    expression = parse_expression(
        '{"score": {"$gte": 100}, "tags": {"$in": [["a"]]}, "meta": {"$exists": true}, "missing": {"$ne": 1}}'
    )
    assert evaluate(expression, row)
    assert row == snapshot


def test_parsed_tree_uses_operator_enum():
    expression = parse_filter({"score": {"$gte": 1}, "name": "x"})
    assert isinstance(expression, BooleanClause)
    assert expression.clauses == (
        FieldCondition("score", Operator.GTE, 1),
        FieldCondition("name", Operator.EQ, "x"),
    )


def test_unknown_operator_is_named():
    with pytest.raises(UnsupportedOperator) as exc_info:
        parse_expression('{"score": {"$invalid": 100}}')
    assert "$invalid" in str(exc_info.value)
    assert "invalid operator" in str(exc_info.value)
    assert exc_info.value.operator == "$invalid"


@pytest.mark.parametrize(
    "where",
    [
        '{"$nor": [{"a": 1}]}',
        '{"score": {"$eq": 1}}',
        '{"score": {"$or": [{"a": 1}]}}',
        '{"$or": [{"a": 1}, {"b": {"$where": "1"}}]}',
        '{"a": 1, "b": {"$gte": 1, "$like": "x%"}}',
    ],
)
def test_unknown_operators_anywhere_in_the_tree(where):
    with pytest.raises(UnsupportedOperator):
        parse_expression(where)


@pytest.mark.parametrize(
    "where, expected",
    [
        ('{"category": {"$in": "not-an-array"}}', "expected array"),
        ('{"category": {"$nin": {"a": 1}}}', "expected array"),
        ('{"score": {"$gt": "100"}}', "expected number"),
        ('{"score": {"$lte": true}}', "expected number"),
        ('{"name": {"$exists": 1}}', "expected boolean"),
        ('{"name": {"$regex": 5}}', "expected string"),
        ('{"name": {"$text": ["a"]}}', "expected string"),
        ('{"$and": {"a": 1}}', "expected array"),
        ('{"$or": []}', "expected array"),
        ('{"$or": [1, 2]}', "expected array"),
    ],
)
def test_operand_types(where, expected):
    with pytest.raises(InvalidOperandType) as exc_info:
        parse_expression(where)
    assert expected in str(exc_info.value)


def test_text_operand_length_is_bounded():
    with pytest.raises(InvalidOperandType):
        parse_filter({"title": {"$text": "x" * 5000}})


@pytest.mark.parametrize("pattern", ["(", "[a-", "a{2,1}", "(a+)+$", "(\\w*)*", "x" * 500])
def test_invalid_regex(pattern):
    with pytest.raises(InvalidRegex) as exc_info:
        parse_filter({"name": {"$regex": pattern}})
    assert "invalid regex" in str(exc_info.value)


@pytest.mark.parametrize("pattern", ["((a+))+$", "(a|a)*$"])
def test_backtracking_regex_is_bounded(pattern):
    expression = parse_filter({"name": {"$regex": pattern}})

    started = time.monotonic()
    evaluate(expression, {"name": "a" * 32 + "!"})
    assert time.monotonic() - started < 2

    assert evaluate(expression, {"name": "aaa"})


@pytest.mark.parametrize("text", ["not json", "", "[1, 2]", "42", "null", '{"a": NaN}', '{"a": 1'])
def test_invalid_where_format(text):
    with pytest.raises(InvalidWhereFormat) as exc_info:
        parse_expression(text)
    assert "Invalid WHERE" in str(exc_info.value)


def test_mixed_operator_and_plain_keys():
    with pytest.raises(InvalidWhereFormat):
        parse_expression('{"meta": {"$gt": 1, "plain": 2}}')


def test_deeply_nested_where_is_rejected():
    where = '{"$and": [' * 5000 + "{}" + "]}" * 5000
    with pytest.raises(InvalidWhereFormat):
        parse_expression(where)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse_expression('{"score": {"$invalid": 1}}')


def test_backtracking_regex_without_match():
    expression = parse_filter({"name": {"$regex": "((a+))+$"}})
    assert not evaluate(expression, {"name": "a" * 32 + "!"})
