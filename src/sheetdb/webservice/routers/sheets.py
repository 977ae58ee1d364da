"""Sheet data endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from sheetdb.commons.sheetdb_logger import SheetDBLogger
from sheetdb.data.conversion import InvalidSheetStructure, column_type
from sheetdb.data.permissions import AUTHENTICATION_REQUIRED, Principal, check_sheet_read_permission
from sheetdb.data.row_source import RowSource, Sheet, SheetNotFound
from sheetdb.query.executor import QueryOptions, compile_query
from sheetdb.schema.sheet_schema import get_base_schema, header_rows_match
from sheetdb.webservice.deps import get_principal, get_row_source
from sheetdb.webservice.schemas.common import (
    ColumnInfo,
    ErrorResponse,
    RecordResponse,
    SheetDataResponse,
    SheetSchemaResponse,
)
from sheetdb.webservice.services.serializers import normalize_row, normalize_rows

router = APIRouter(prefix="/sheets", tags=["sheets"])

logger = SheetDBLogger()


def _readable_sheet(sheet_id: str, source: RowSource, principal: Principal) -> Sheet:
    sheet = source.get_sheet(sheet_id)
    if sheet is None:
        raise HTTPException(status_code=404, detail=f"Sheet not found: {sheet_id}")
    decision = check_sheet_read_permission(principal, sheet.metadata)
    if not decision.allowed:
        logger.info(f"Read of sheet '{sheet.name}' denied for user {principal.user_id}: {decision.error}")
        status_code = 401 if decision.error == AUTHENTICATION_REQUIRED else 403
        raise HTTPException(status_code=status_code, detail=decision.error)
    return sheet


def _fetch_rows(source: RowSource, sheet: Sheet) -> List[dict]:
    try:
        return source.fetch_rows(sheet.name)
    except SheetNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidSheetStructure as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get(
    "/{sheet_id}/data",
    response_model=None,
    responses={200: {"model": SheetDataResponse}, 400: {"model": ErrorResponse}},
)
def get_sheet_data(
    sheet_id: str,
    query: str | None = None,
    where: str | None = None,
    limit: int | None = None,
    page: int | None = None,
    order: str | None = None,
    count: bool = False,
    source: RowSource = Depends(get_row_source),
    principal: Principal = Depends(get_principal),
) -> JSONResponse:
    """Query the rows of a sheet.

    ``where`` is a JSON filter document, ``order`` a comma-separated list of
    ``field[:desc]``, ``query`` a free-text search over string fields.
    Malformed parameters are rejected before any row is read. ``count`` and
    ``pagination`` only appear in the body when requested.
    """
    compiled = compile_query(
        QueryOptions(where=where, order=order, limit=limit, page=page, count=count, text_query=query)
    )
    sheet = _readable_sheet(sheet_id, source, principal)
    rows = _fetch_rows(source, sheet)
    result = compiled.run(rows)
    logger.info(f"Sheet data retrieved: {sheet.name}, rows: {len(result.results)}")

    result.results = normalize_rows(result.results)
    return JSONResponse(content=result.to_dict())


@router.get("/{sheet_id}/data/{record_id}", response_model=RecordResponse)
def get_sheet_record(
    sheet_id: str,
    record_id: str,
    source: RowSource = Depends(get_row_source),
    principal: Principal = Depends(get_principal),
) -> RecordResponse:
    """Get one row of a sheet by its ``id`` column."""
    sheet = _readable_sheet(sheet_id, source, principal)
    for row in _fetch_rows(source, sheet):
        if "id" in row and str(row["id"]) == record_id:
            return RecordResponse(result=normalize_row(row))
    raise HTTPException(status_code=404, detail=f"Record not found: {record_id}")


@router.get("/{sheet_id}/schema", response_model=SheetSchemaResponse, response_model_exclude_none=True)
def get_sheet_schema(
    sheet_id: str,
    source: RowSource = Depends(get_row_source),
    principal: Principal = Depends(get_principal),
) -> SheetSchemaResponse:
    """Describe the columns of a sheet.

    For system sheets (``_User``, ``_Session``, ...) the response also says
    whether the header rows still match the built-in schema.
    """
    sheet = _readable_sheet(sheet_id, source, principal)
    headers, types = source.fetch_header_rows(sheet.name)
    columns = []
    for index, name in enumerate(headers):
        if not name:
            continue
        descriptor = types[index] if index < len(types) and types[index] is not None else ""
        columns.append(ColumnInfo(name=str(name), type=column_type(descriptor), descriptor=str(descriptor)))

    matches = None
    base_schema = get_base_schema(sheet.name)
    if base_schema is not None:
        headers_ok, types_ok = header_rows_match(base_schema, headers, types)
        matches = headers_ok and types_ok
    return SheetSchemaResponse(sheet=sheet.name, columns=columns, matches_base_schema=matches)
