"""Errors raised while compiling a query.

Every error subclasses :class:`ValueError` and is reported to clients as a
400 response.
"""


class QueryError(ValueError):
    """Base class for malformed query parameters."""


class InvalidWhereFormat(QueryError):
    """The WHERE parameter is not JSON or not an object-shaped filter tree."""


class UnsupportedOperator(QueryError):
    """An operator key outside the supported set was used."""

    def __init__(self, operator: str, field: str | None = None):
        self.operator = operator
        self.field = field
        location = f" on field '{field}'" if field is not None else ""
        super().__init__(f"Invalid WHERE condition: invalid operator '{operator}'{location}")


class InvalidOperandType(QueryError):
    """An operand does not have the shape its operator requires."""


class InvalidRegex(QueryError):
    """A ``$regex`` operand could not be compiled or was rejected."""


class InvalidPaginationParameter(QueryError):
    """``limit`` or ``page`` is not a positive integer in range."""


class InvalidOrderFormat(QueryError):
    """The ``order`` parameter is not a list of ``field[:asc|:desc]``."""


class InvalidTextQuery(QueryError):
    """The free-text ``query`` parameter is not acceptable."""
