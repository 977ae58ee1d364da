"""WHERE parsing, evaluation and in-memory query execution."""

from sheetdb.query.errors import (
    InvalidOperandType,
    InvalidOrderFormat,
    InvalidPaginationParameter,
    InvalidRegex,
    InvalidTextQuery,
    InvalidWhereFormat,
    QueryError,
    UnsupportedOperator,
)
from sheetdb.query.executor import CompiledQuery, QueryOptions, QueryResult, compile_query, execute
from sheetdb.query.expression import BooleanClause, FieldCondition, evaluate, parse_expression, parse_filter
from sheetdb.query.operators import Operator

__all__ = [
    "BooleanClause",
    "CompiledQuery",
    "FieldCondition",
    "InvalidOperandType",
    "InvalidOrderFormat",
    "InvalidPaginationParameter",
    "InvalidRegex",
    "InvalidTextQuery",
    "InvalidWhereFormat",
    "Operator",
    "QueryError",
    "QueryOptions",
    "QueryResult",
    "UnsupportedOperator",
    "compile_query",
    "evaluate",
    "execute",
    "parse_expression",
    "parse_filter",
]
