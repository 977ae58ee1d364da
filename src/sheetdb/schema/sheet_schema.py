"""Column schemas of the system sheets."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Sequence, Tuple

from sheetdb.schema.comparison import schema_rows_equal

_UNSET = object()

PERMISSION_COLUMNS = (
    ("public_read", "boolean"),
    ("public_write", "boolean"),
    ("role_read", "array"),
    ("role_write", "array"),
    ("user_read", "array"),
    ("user_write", "array"),
)


@dataclass(frozen=True)
class SheetColumn:
    """A column of a sheet: header name plus type and constraints."""

    name: str
    type: str
    required: bool = False
    unique: bool = False
    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    min: float | None = None
    max: float | None = None
    default: Any = _UNSET

    def has_modifiers(self) -> bool:
        return (
            self.required
            or self.unique
            or bool(self.pattern)
            or self.min_length is not None
            or self.max_length is not None
            or self.min is not None
            or self.max is not None
            or self.default is not _UNSET
        )


@dataclass(frozen=True)
class SheetSchema:
    """Ordered columns of a named sheet."""

    name: str
    columns: Tuple[SheetColumn, ...] = field(default_factory=tuple)

    @property
    def headers(self) -> List[str]:
        return [col.name for col in self.columns]

    @property
    def type_row(self) -> List[str]:
        return [format_column_schema(col) for col in self.columns]


def format_column_schema(column: SheetColumn) -> str:
    """Render the descriptor cell written to the type row of a sheet.

    Columns without modifiers are written as the bare type name, others as a
    compact JSON object.
    """
    if not column.has_modifiers():
        return column.type

    descriptor = {"type": column.type}
    if column.required:
        descriptor["required"] = True
    if column.unique:
        descriptor["unique"] = True
    if column.pattern:
        descriptor["pattern"] = column.pattern
    if column.min_length is not None:
        descriptor["minLength"] = column.min_length
    if column.max_length is not None:
        descriptor["maxLength"] = column.max_length
    if column.min is not None:
        descriptor["min"] = column.min
    if column.max is not None:
        descriptor["max"] = column.max
    if column.default is not _UNSET:
        descriptor["default"] = column.default
    return json.dumps(descriptor, separators=(",", ":"))


def _permission_columns() -> Tuple[SheetColumn, ...]:
    return tuple(SheetColumn(name, col_type) for name, col_type in PERMISSION_COLUMNS)


def _timestamps() -> Tuple[SheetColumn, ...]:
    return (
        SheetColumn("created_at", "datetime", required=True),
        SheetColumn("updated_at", "datetime", required=True),
    )


BASE_SCHEMAS: Tuple[SheetSchema, ...] = (
    SheetSchema(
        "_User",
        (
            SheetColumn("id", "string", required=True, unique=True),
            SheetColumn("name", "string", required=True),
            SheetColumn(
                "email", "string", required=True, unique=True, pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
            ),
            SheetColumn("given_name", "string"),
            SheetColumn("family_name", "string"),
            SheetColumn("nickname", "string"),
            SheetColumn("picture", "string"),
            SheetColumn("email_verified", "boolean"),
            SheetColumn("locale", "string"),
            *_timestamps(),
            *_permission_columns(),
        ),
    ),
    SheetSchema(
        "_Session",
        (
            SheetColumn("id", "string", required=True, unique=True),
            SheetColumn("user_id", "string", required=True),
            SheetColumn("token", "string", required=True),
            SheetColumn("expires_at", "datetime", required=True),
            *_timestamps(),
        ),
    ),
    SheetSchema(
        "_Config",
        (
            SheetColumn("id", "string", required=True, unique=True),
            SheetColumn("name", "string", required=True, unique=True),
            SheetColumn("value", "string", required=True),
            *_timestamps(),
            *_permission_columns(),
        ),
    ),
    SheetSchema(
        "_Role",
        (
            SheetColumn("name", "string", required=True, unique=True),
            SheetColumn("users", "array"),
            SheetColumn("roles", "array"),
            *_timestamps(),
            *_permission_columns(),
        ),
    ),
)


def get_base_schema(name: str) -> SheetSchema | None:
    """Return the system schema called ``name``, if any."""
    for schema in BASE_SCHEMAS:
        if schema.name == name:
            return schema
    return None


def header_rows_match(schema: SheetSchema, headers: Sequence[Any], types: Sequence[Any]) -> Tuple[bool, bool]:
    """Check the two header rows of a sheet against ``schema``.

    Returns ``(headers_ok, types_ok)``. Header names must match exactly;
    descriptors are compared with :func:`schema_rows_equal`, so ``"string"``
    and ``{"type": "string"}`` are interchangeable.
    """
    headers_ok = list(headers) == schema.headers
    types_ok = schema_rows_equal(list(types), schema.type_row)
    return headers_ok, types_ok
