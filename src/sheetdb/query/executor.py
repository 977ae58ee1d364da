"""In-memory query execution over a materialized row set."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from sheetdb.commons.sheetdb_logger import SheetDBLogger
from sheetdb.configs import MAX_PAGE_LIMIT, TEXT_MAX_LENGTH
from sheetdb.query.errors import InvalidPaginationParameter, InvalidTextQuery
from sheetdb.query.expression import Expression, evaluate, parse_expression
from sheetdb.query.ordering import SortKey, parse_order, sort_rows

Row = Dict[str, Any]

logger = SheetDBLogger()


@dataclass
class QueryOptions:
    """Client query parameters, as received."""

    where: str | None = None
    order: str | None = None
    limit: int | None = None
    page: int | None = None
    count: bool = False
    text_query: str | None = None


@dataclass(frozen=True)
class Pagination:
    """Page selection and the number of rows it was taken from."""

    page: int
    limit: int
    total: int

    def to_dict(self) -> Dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total}


@dataclass
class QueryResult:
    """Rows of the requested page plus optional totals."""

    results: List[Row] = field(default_factory=list)
    count: int | None = None
    pagination: Pagination | None = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the success envelope sent to clients."""
        body: Dict[str, Any] = {"success": True, "results": self.results}
        if self.count is not None:
            body["count"] = self.count
        if self.pagination is not None:
            body["pagination"] = self.pagination.to_dict()
        return body


def _validate_positive(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidPaginationParameter(f"Invalid pagination parameter: '{name}' must be a positive integer")
    return value


def _resolve_pagination(limit: Any, page: Any) -> Tuple[int, int] | None:
    """Return ``(page, limit)``, or None when no ``limit`` is given.

    ``page`` is validated even when it has no effect.
    """
    page = 1 if page is None else _validate_positive("page", page)
    if limit is None:
        return None
    limit = _validate_positive("limit", limit)
    if limit > MAX_PAGE_LIMIT:
        raise InvalidPaginationParameter(
            f"Invalid pagination parameter: 'limit' must not exceed {MAX_PAGE_LIMIT}"
        )
    return page, limit


def matches_text_query(row: Row, needle: str) -> bool:
    """True if any string value of ``row`` contains the case-folded ``needle``."""
    return any(isinstance(value, str) and needle in value.casefold() for value in row.values())


@dataclass(frozen=True)
class CompiledQuery:
    """Validated query, ready to run against any number of row sets."""

    expression: Expression | None = None
    sort_keys: Tuple[SortKey, ...] = ()
    page_selection: Tuple[int, int] | None = None
    include_count: bool = False
    text_query: str | None = None

    def run(self, rows: Sequence[Row]) -> QueryResult:
        """Filter, order, count and paginate ``rows``."""
        matched = list(rows)
        if self.text_query is not None:
            matched = [row for row in matched if matches_text_query(row, self.text_query)]
        if self.expression is not None:
            matched = [row for row in matched if evaluate(self.expression, row)]
        total = len(matched)
        logger.debug(f"Query matched {total} of {len(rows)} rows.")

        if self.sort_keys:
            matched = sort_rows(matched, self.sort_keys)

        pagination = None
        if self.page_selection is not None:
            page, limit = self.page_selection
            start = (page - 1) * limit
            matched = matched[start : start + limit]
            pagination = Pagination(page=page, limit=limit, total=total)

        return QueryResult(
            results=matched,
            count=total if self.include_count else None,
            pagination=pagination,
        )


def compile_query(options: QueryOptions) -> CompiledQuery:
    """Validate every query parameter without touching any row.

    Raises
    ------
    QueryError
        The first invalid parameter found. Pagination is checked first, then
        the WHERE tree, the order list and the free-text query.
    """
    page_selection = _resolve_pagination(options.limit, options.page)

    expression = None
    if options.where:
        try:
            expression = parse_expression(options.where)
        except ValueError as exc:
            logger.debug(f"Rejected WHERE parameter: {exc}")
            raise

    sort_keys: Tuple[SortKey, ...] = ()
    if options.order:
        sort_keys = tuple(parse_order(options.order))

    text_query = None
    if options.text_query:
        if len(options.text_query) > TEXT_MAX_LENGTH:
            raise InvalidTextQuery(f"Invalid query: search text longer than {TEXT_MAX_LENGTH} characters")
        text_query = options.text_query.casefold()

    return CompiledQuery(
        expression=expression,
        sort_keys=sort_keys,
        page_selection=page_selection,
        include_count=bool(options.count),
        text_query=text_query,
    )


def execute(rows: Sequence[Row], options: QueryOptions) -> QueryResult:
    """Run a query described by ``options`` over ``rows``."""
    return compile_query(options).run(rows)
