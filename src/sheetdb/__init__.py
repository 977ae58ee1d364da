"""SheetDB: query API over spreadsheet-backed tables."""

from sheetdb.commons.deep_equals import deep_equals
from sheetdb.commons.safe_json import is_valid_object_json, parse_object_or_null
from sheetdb.query import QueryOptions, QueryResult, execute, evaluate, parse_expression
from sheetdb.schema import schema_rows_equal

__version__ = "0.1.0"

__all__ = [
    "QueryOptions",
    "QueryResult",
    "deep_equals",
    "evaluate",
    "execute",
    "is_valid_object_json",
    "parse_expression",
    "parse_object_or_null",
    "schema_rows_equal",
]
