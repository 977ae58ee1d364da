"""Comparison of column descriptor rows."""

from __future__ import annotations

from typing import Any, Dict, Sequence

from sheetdb.commons.deep_equals import deep_equals
from sheetdb.commons.safe_json import parse_object_or_null


def normalize_descriptor(raw: Any) -> Dict[str, Any] | None:
    """Return the mapping form of a column descriptor.

    JSON object descriptors decode to their mapping and bare type names
    become ``{"type": name}``. Text that looks like JSON but is not a valid
    object yields ``None``.
    """
    text = "" if raw is None else str(raw)
    parsed = parse_object_or_null(text)
    if parsed is not None:
        return parsed
    if text.lstrip().startswith(("{", "[")):
        return None
    return {"type": text}


def _descriptors_equal(a: Any, b: Any) -> bool:
    a_text = "" if a is None else str(a)
    b_text = "" if b is None else str(b)
    a_norm = normalize_descriptor(a_text)
    b_norm = normalize_descriptor(b_text)
    if a_norm is None or b_norm is None:
        # Malformed entries degrade to an exact text comparison.
        return a_text == b_text
    return deep_equals(a_norm, b_norm)


def schema_rows_equal(a: Sequence[Any], b: Sequence[Any]) -> bool:
    """Return True if two rows of column descriptors describe the same schema.

    Examples
    --------
    >>> schema_rows_equal(["string"], ['{"type": "string"}'])
    True
    >>> schema_rows_equal(["string"], ["number"])
    False
    """
    if len(a) != len(b):
        return False
    return all(_descriptors_equal(a_val, b_val) for a_val, b_val in zip(a, b))
