"""Sheet column schemas and schema row comparison."""

from sheetdb.schema.comparison import normalize_descriptor, schema_rows_equal
from sheetdb.schema.sheet_schema import (
    BASE_SCHEMAS,
    SheetColumn,
    SheetSchema,
    format_column_schema,
    get_base_schema,
    header_rows_match,
)

__all__ = [
    "BASE_SCHEMAS",
    "SheetColumn",
    "SheetSchema",
    "format_column_schema",
    "get_base_schema",
    "header_rows_match",
    "normalize_descriptor",
    "schema_rows_equal",
]
