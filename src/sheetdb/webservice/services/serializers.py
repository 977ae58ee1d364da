"""Serialization helpers for API responses."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List


def _to_jsonable(value: Any) -> Any:
    """Recursively normalize values for JSON responses."""
    if value is None:
        return None
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    return str(value)


def normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Return a JSON-ready copy of ``row``."""
    return {str(k): _to_jsonable(v) for k, v in row.items()}


def normalize_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Normalize result rows for JSON API response."""
    return [normalize_row(row) for row in rows]
