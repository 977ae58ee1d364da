"""Shared response schemas for webservice endpoints."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class PaginationInfo(BaseModel):
    """Selected page and the number of matching rows."""

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)


class SheetDataResponse(BaseModel):
    """Query result envelope."""

    success: bool = True
    results: List[Dict[str, Any]]
    count: int | None = None
    pagination: PaginationInfo | None = None


class RecordResponse(BaseModel):
    """Single record envelope."""

    success: bool = True
    result: Dict[str, Any]


class ColumnInfo(BaseModel):
    """A column of a sheet with its raw descriptor cell."""

    name: str
    type: str
    descriptor: str


class SheetSchemaResponse(BaseModel):
    """Columns of a sheet."""

    success: bool = True
    sheet: str
    columns: List[ColumnInfo]
    matches_base_schema: bool | None = None


class ErrorResponse(BaseModel):
    """Error response envelope."""

    success: bool = False
    error: str
