"""WHERE operators: operand validation and per-row evaluation.

The operator set is closed. Each :class:`Operator` member maps to one pure
evaluation function in :data:`OPERATOR_EVALUATORS`; operands are validated
and prepared once, when the expression is parsed, so evaluation never
raises.
"""

from __future__ import annotations

import json
import math
import re
from enum import Enum
from typing import Any, Callable, Dict

import regex

from sheetdb.commons.deep_equals import MISSING, deep_equals, json_kind
from sheetdb.commons.sheetdb_logger import SheetDBLogger
from sheetdb.configs import (
    REGEX_MATCH_TIMEOUT,
    REGEX_MAX_INPUT_LENGTH,
    REGEX_MAX_PATTERN_LENGTH,
    TEXT_MAX_LENGTH,
)
from sheetdb.query.errors import InvalidOperandType, InvalidRegex, UnsupportedOperator

logger = SheetDBLogger()


class Operator(str, Enum):
    """Field operators. ``EQ`` is implied by a bare value and has no key."""

    EQ = "$eq"
    NE = "$ne"
    GT = "$gt"
    GTE = "$gte"
    LT = "$lt"
    LTE = "$lte"
    IN = "$in"
    NIN = "$nin"
    EXISTS = "$exists"
    REGEX = "$regex"
    TEXT = "$text"

    @classmethod
    def from_key(cls, key: str, field: str | None = None) -> "Operator":
        """Resolve a ``$``-prefixed key, rejecting anything outside the set."""
        operator = _OPERATORS_BY_KEY.get(key)
        if operator is None:
            raise UnsupportedOperator(key, field)
        return operator


_OPERATORS_BY_KEY = {op.value: op for op in Operator if op is not Operator.EQ}

SUPPORTED_OPERATOR_KEYS = frozenset(_OPERATORS_BY_KEY)
RANGE_OPERATORS = frozenset({Operator.GT, Operator.GTE, Operator.LT, Operator.LTE})
SET_OPERATORS = frozenset({Operator.IN, Operator.NIN})

# A group that contains a quantifier and is itself quantified, e.g. (a+)+ or (\w*){2,}.
_NESTED_QUANTIFIER = re.compile(
    r"\((?:[^()\\]|\\.)*(?:[+*]|\{\d+,?\d*\})(?:[^()\\]|\\.)*\)\s*(?:[+*]|\{\d+,?\d*\})"
)


def _operand_error(operator: Operator, field: str, expected: str, operand: Any) -> InvalidOperandType:
    return InvalidOperandType(
        f"Invalid WHERE condition: '{operator.value}' on field '{field}' expected {expected}, "
        f"got {json_kind(operand)}"
    )


def compile_regex(pattern: Any, field: str) -> regex.Pattern:
    """Compile a ``$regex`` operand, rejecting obviously catastrophic patterns.

    Patterns that slip past the shape check are still bounded at match time
    by ``REGEX_MATCH_TIMEOUT``.
    """
    if not isinstance(pattern, str):
        raise _operand_error(Operator.REGEX, field, "string", pattern)
    if len(pattern) > REGEX_MAX_PATTERN_LENGTH:
        raise InvalidRegex(
            f"Invalid WHERE condition: invalid regex on field '{field}': "
            f"pattern longer than {REGEX_MAX_PATTERN_LENGTH} characters"
        )
    if _NESTED_QUANTIFIER.search(pattern):
        raise InvalidRegex(
            f"Invalid WHERE condition: invalid regex on field '{field}': nested quantifiers are not allowed"
        )
    try:
        return regex.compile(pattern)
    except regex.error as exc:
        raise InvalidRegex(f"Invalid WHERE condition: invalid regex on field '{field}': {exc}") from exc


def prepare_operand(operator: Operator, operand: Any, field: str) -> Any:
    """Validate ``operand`` for ``operator`` and return its evaluation form."""
    if operator in RANGE_OPERATORS:
        if json_kind(operand) != "number":
            raise _operand_error(operator, field, "number", operand)
        return operand
    if operator in SET_OPERATORS:
        if json_kind(operand) != "array":
            raise _operand_error(operator, field, "array", operand)
        return tuple(operand)
    if operator is Operator.EXISTS:
        if not isinstance(operand, bool):
            raise _operand_error(operator, field, "boolean", operand)
        return operand
    if operator is Operator.REGEX:
        return compile_regex(operand, field)
    if operator is Operator.TEXT:
        if not isinstance(operand, str):
            raise _operand_error(operator, field, "string", operand)
        if len(operand) > TEXT_MAX_LENGTH:
            raise InvalidOperandType(
                f"Invalid WHERE condition: '$text' on field '{field}' expected string of at most "
                f"{TEXT_MAX_LENGTH} characters"
            )
        return operand.casefold()
    return operand


def string_form(value: Any) -> str | None:
    """Text a value is searched as, or None when it has no text form."""
    kind = json_kind(value)
    if kind == "string":
        return value
    if kind in ("missing", "null"):
        return None
    if kind == "boolean":
        return "true" if value else "false"
    if kind == "number":
        if isinstance(value, float) and math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    return json.dumps(value, ensure_ascii=False, default=str)


def _is_number(value: Any) -> bool:
    return json_kind(value) == "number"


def _eq(value: Any, operand: Any) -> bool:
    return deep_equals(value, operand)


def _ne(value: Any, operand: Any) -> bool:
    return not deep_equals(value, operand)


def _gt(value: Any, operand: Any) -> bool:
    return _is_number(value) and value > operand


def _gte(value: Any, operand: Any) -> bool:
    return _is_number(value) and value >= operand


def _lt(value: Any, operand: Any) -> bool:
    return _is_number(value) and value < operand


def _lte(value: Any, operand: Any) -> bool:
    return _is_number(value) and value <= operand


def _in(value: Any, operand: Any) -> bool:
    return any(deep_equals(value, item) for item in operand)


def _nin(value: Any, operand: Any) -> bool:
    return not _in(value, operand)


def _exists(value: Any, operand: Any) -> bool:
    return (value is not MISSING) == operand


def _regex(value: Any, operand: Any) -> bool:
    if not isinstance(value, str):
        return False
    if len(value) > REGEX_MAX_INPUT_LENGTH:
        logger.warning(f"Skipping regex match on a {len(value)}-character value.")
        return False
    try:
        return operand.search(value, timeout=REGEX_MATCH_TIMEOUT) is not None
    except TimeoutError:
        logger.warning(f"Regex /{operand.pattern}/ timed out after {REGEX_MATCH_TIMEOUT}s; treating as no match.")
        return False


def _text(value: Any, operand: Any) -> bool:
    text = string_form(value)
    if text is None:
        return False
    return operand in text.casefold()


OPERATOR_EVALUATORS: Dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.EQ: _eq,
    Operator.NE: _ne,
    Operator.GT: _gt,
    Operator.GTE: _gte,
    Operator.LT: _lt,
    Operator.LTE: _lte,
    Operator.IN: _in,
    Operator.NIN: _nin,
    Operator.EXISTS: _exists,
    Operator.REGEX: _regex,
    Operator.TEXT: _text,
}
