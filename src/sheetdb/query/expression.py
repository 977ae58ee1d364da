"""Parsing and evaluation of WHERE filter documents.

A WHERE document is a JSON object in the usual Mongo-like form::

    {"score": {"$gte": 100, "$lte": 1000}, "status": "active",
     "$or": [{"role": "admin"}, {"tags": {"$in": ["staff"]}}]}

Top-level keys combine with an implicit ``$and``. The whole tree is
validated by :func:`parse_filter` before any row is looked at, and the
result is an immutable tree that :func:`evaluate` walks per row.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Tuple, Union

from sheetdb.commons.deep_equals import MISSING
from sheetdb.query.errors import InvalidOperandType, InvalidWhereFormat, UnsupportedOperator
from sheetdb.query.operators import OPERATOR_EVALUATORS, Operator, prepare_operand


class BooleanOperator(str, Enum):
    """Combinators accepted as document keys."""

    AND = "$and"
    OR = "$or"


@dataclass(frozen=True)
class FieldCondition:
    """``operator(row[field], operand)``; ``operand`` is already prepared."""

    field: str
    operator: Operator
    operand: Any


@dataclass(frozen=True)
class BooleanClause:
    """Conjunction or disjunction of sub-expressions."""

    operator: BooleanOperator
    clauses: Tuple["Expression", ...]


Expression = Union[FieldCondition, BooleanClause]

_BOOLEAN_KEYS = {op.value: op for op in BooleanOperator}


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unsupported JSON constant: {name}")


def parse_expression(text: str) -> Expression:
    """Decode a WHERE string and parse it into an expression tree.

    Raises
    ------
    InvalidWhereFormat
        If ``text`` is not JSON or not a JSON object.
    UnsupportedOperator, InvalidOperandType, InvalidRegex
        If any node of the tree is invalid.
    """
    if not isinstance(text, str):
        raise InvalidWhereFormat("Invalid WHERE condition format: expected a JSON string.")
    try:
        document = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise InvalidWhereFormat(f"Invalid WHERE condition format: {exc}") from exc
    return parse_filter(document)


def parse_filter(document: Any) -> Expression:
    """Parse an already decoded WHERE document."""
    if not isinstance(document, Mapping):
        raise InvalidWhereFormat("Invalid WHERE condition format: expected a JSON object.")
    try:
        return _parse_document(document)
    except RecursionError as exc:
        raise InvalidWhereFormat("Invalid WHERE condition format: nested too deeply.") from exc


def _parse_document(document: Mapping) -> BooleanClause:
    clauses = []
    for key, value in document.items():
        if not isinstance(key, str):
            raise InvalidWhereFormat("Invalid WHERE condition format: field names must be strings.")
        if key.startswith("$"):
            boolean_op = _BOOLEAN_KEYS.get(key)
            if boolean_op is None:
                raise UnsupportedOperator(key)
            clauses.append(_parse_boolean(boolean_op, value))
        else:
            clauses.extend(_parse_field(key, value))
    return BooleanClause(BooleanOperator.AND, tuple(clauses))


def _parse_boolean(operator: BooleanOperator, value: Any) -> BooleanClause:
    if not isinstance(value, list) or not value:
        raise InvalidOperandType(
            f"Invalid WHERE condition: '{operator.value}' expected array of conditions"
        )
    clauses = []
    for item in value:
        if not isinstance(item, Mapping):
            raise InvalidOperandType(
                f"Invalid WHERE condition: '{operator.value}' expected array of objects"
            )
        clauses.append(_parse_document(item))
    return BooleanClause(operator, tuple(clauses))


def _is_operator_dict(value: Any, field: str) -> bool:
    if not isinstance(value, Mapping) or not value:
        return False
    dollar_keys = [key for key in value if isinstance(key, str) and key.startswith("$")]
    if not dollar_keys:
        return False
    if len(dollar_keys) != len(value):
        raise InvalidWhereFormat(
            f"Invalid WHERE condition format: field '{field}' mixes operators and plain keys."
        )
    return True


def _parse_field(field: str, value: Any) -> Tuple[FieldCondition, ...]:
    if not _is_operator_dict(value, field):
        return (FieldCondition(field, Operator.EQ, value),)
    conditions = []
    for key, operand in value.items():
        if key in _BOOLEAN_KEYS:
            raise UnsupportedOperator(key, field)
        operator = Operator.from_key(key, field)
        conditions.append(FieldCondition(field, operator, prepare_operand(operator, operand, field)))
    return tuple(conditions)


def evaluate(expression: Expression, row: Mapping[str, Any]) -> bool:
    """Return True if ``row`` satisfies ``expression``.

    ``$and`` stops at the first false clause and ``$or`` at the first true
    one. The row is only read.
    """
    if isinstance(expression, FieldCondition):
        value = row[expression.field] if expression.field in row else MISSING
        return OPERATOR_EVALUATORS[expression.operator](value, expression.operand)
    if expression.operator is BooleanOperator.AND:
        return all(evaluate(clause, row) for clause in expression.clauses)
    return any(evaluate(clause, row) for clause in expression.clauses)
