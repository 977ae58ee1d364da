"""Parsing of the ``order`` parameter and multi-key row sorting."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from sheetdb.commons.deep_equals import json_kind
from sheetdb.query.errors import InvalidOrderFormat

_DIRECTIONS = {"asc": False, "desc": True}
_TYPE_RANK = {"number": 0, "string": 1, "boolean": 2}


@dataclass(frozen=True)
class SortKey:
    """Sort field and direction."""

    field: str
    descending: bool = False


def parse_order(order: str) -> List[SortKey]:
    """Parse ``"field[:asc|:desc], ..."`` into sort keys, primary key first."""
    keys = []
    for part in order.split(","):
        part = part.strip()
        if not part:
            raise InvalidOrderFormat(f"Invalid order format: empty sort key in '{order}'")
        field, _, direction = part.partition(":")
        field = field.strip()
        direction = direction.strip().lower() or "asc"
        if not field or direction not in _DIRECTIONS:
            raise InvalidOrderFormat(f"Invalid order format: '{part}'")
        keys.append(SortKey(field=field, descending=_DIRECTIONS[direction]))
    return keys


def _has_value(row: Dict[str, Any], field: str) -> bool:
    return row.get(field) is not None


def _sortable(value: Any) -> Tuple[int, Any]:
    """Key that orders values of one JSON type naturally and types by rank."""
    rank = _TYPE_RANK.get(json_kind(value))
    if rank is not None:
        return rank, value
    return len(_TYPE_RANK), json.dumps(value, sort_keys=True, default=str)


def sort_rows(rows: Sequence[Dict[str, Any]], keys: Sequence[SortKey]) -> List[Dict[str, Any]]:
    """Stable multi-key sort.

    Rows without a value for a key (missing or null) go after the rows that
    have one, whatever the direction.
    """
    ordered = list(rows)
    for key in reversed(keys):
        present = [row for row in ordered if _has_value(row, key.field)]
        absent = [row for row in ordered if not _has_value(row, key.field)]
        present = sorted(present, key=lambda row: _sortable(row[key.field]), reverse=key.descending)
        ordered = present + absent
    return ordered
