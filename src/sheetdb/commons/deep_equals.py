"""Structural equality for decoded JSON values."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, List, Tuple


class _Missing(object):
    """Marker for a field that is absent from a row."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(_Missing, cls).__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def json_kind(value: Any) -> str:
    """Return the JSON type name of ``value``.

    ``bool`` is checked before numbers because it subclasses ``int``.
    """
    if value is MISSING:
        return "missing"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return "other"


def _numbers_equal(a, b) -> bool:
    if a == b:
        return True
    return isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b)


def deep_equals(a: Any, b: Any) -> bool:
    """Compare two JSON values structurally.

    Object key order is irrelevant, array order is significant, and ``null``
    is distinct from a missing value. The walk uses an explicit stack, so
    deeply nested values do not hit the interpreter recursion limit, and each
    object's keys are enumerated once.
    """
    stack: List[Tuple[Any, Any]] = [(a, b)]
    while stack:
        left, right = stack.pop()
        if left is right:
            continue
        kind = json_kind(left)
        if kind != json_kind(right):
            return False
        if kind == "number":
            if not _numbers_equal(left, right):
                return False
        elif kind == "array":
            if len(left) != len(right):
                return False
            stack.extend(zip(left, right))
        elif kind == "object":
            if len(left) != len(right):
                return False
            for key, value in left.items():
                if key not in right:
                    return False
                stack.append((value, right[key]))
        elif left != right:
            return False
    return True
