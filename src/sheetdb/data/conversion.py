"""Conversion of a sheet value grid into typed rows.

The grid is laid out like a spreadsheet values response: row 1 holds the
column names, row 2 the column descriptors and every following row a
record.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from sheetdb.commons.safe_json import parse_object_or_null

HEADER_ROW_COUNT = 2

_EMPTY_DEFAULTS = {
    "number": 0,
    "boolean": False,
    "array": list,
    "object": dict,
}


class InvalidSheetStructure(ValueError):
    """The sheet lacks the header and descriptor rows."""


def column_type(descriptor: Any) -> str:
    """Return the type name of a descriptor cell."""
    parsed = parse_object_or_null(descriptor)
    if parsed is not None:
        return str(parsed.get("type", "string"))
    if descriptor is None:
        return "string"
    return str(descriptor).strip()


def _empty_value(col_type: str) -> Any:
    default = _EMPTY_DEFAULTS.get(col_type, "")
    return default() if callable(default) else default


def _to_number(value: Any) -> int | float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0
    if number != number or number in (float("inf"), float("-inf")):
        return 0
    return int(number) if number.is_integer() else number


def convert_cell(value: Any, col_type: str) -> Any:
    """Convert one non-empty cell according to its column type."""
    if col_type == "number":
        return _to_number(value)
    if col_type == "boolean":
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == "true"
    if col_type == "array":
        if isinstance(value, list):
            return value
        try:
            parsed = json.loads(value)
        except (TypeError, ValueError):
            return []
        return parsed if isinstance(parsed, list) else []
    if col_type == "object":
        if isinstance(value, dict):
            return value
        parsed = parse_object_or_null(value)
        return parsed if parsed is not None else {}
    return value if isinstance(value, str) else str(value)


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def rows_from_values(values: Sequence[Sequence[Any]]) -> List[Dict[str, Any]]:
    """Build rows from a value grid.

    Rows whose cells are all empty are skipped. Rows hold only the sheet's
    own columns.

    Raises
    ------
    InvalidSheetStructure
        If the grid has fewer than two header rows.
    """
    if len(values) < HEADER_ROW_COUNT:
        raise InvalidSheetStructure("Invalid sheet structure: header and type rows are required.")

    headers = list(values[0])
    types = [column_type(cell) for cell in values[1]]
    types.extend(["string"] * (len(headers) - len(types)))

    rows = []
    for raw in values[HEADER_ROW_COUNT:]:
        row: Dict[str, Any] = {}
        has_data = False
        for index, header in enumerate(headers):
            if not header:
                continue
            cell = raw[index] if index < len(raw) else None
            if _is_empty(cell):
                row[header] = _empty_value(types[index])
            else:
                has_data = True
                row[header] = convert_cell(cell, types[index])
        if has_data:
            rows.append(row)
    return rows
