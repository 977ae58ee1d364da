"""Safe decoding of JSON object strings.

Decoding always goes through the standard library decoder, which runs in
time linear in the input and builds plain ``dict`` containers. Keys such as
``__proto__`` or ``constructor`` are ordinary data keys there: nothing is
looked up or assigned through a shared prototype.
"""

from __future__ import annotations

import json
from typing import Any, Dict


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON.
    raise ValueError(f"Unsupported JSON constant: {name}")


def parse_object_or_null(text: Any) -> Dict[str, Any] | None:
    """Decode ``text`` if, and only if, it is a JSON object.

    Returns ``None`` for non-strings, blank strings, malformed JSON and JSON
    that decodes to anything other than an object (arrays, primitives and the
    ``null`` literal).
    """
    if not isinstance(text, str) or not text.strip():
        return None
    try:
        parsed = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


def is_valid_object_json(text: Any) -> bool:
    """Return True if ``text`` decodes to a JSON object."""
    return parse_object_or_null(text) is not None
