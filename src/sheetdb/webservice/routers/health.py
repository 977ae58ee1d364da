"""Health endpoints."""

from fastapi import APIRouter, Depends

from sheetdb.data.row_source import RowSource
from sheetdb.webservice.deps import get_row_source

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
def live() -> dict:
    """Liveness check."""
    return {"status": "ok"}


@router.get("/ready")
def ready(source: RowSource = Depends(get_row_source)) -> dict:
    """Readiness check: the row source answers and reports its sheets."""
    return {"status": "ready", "sheets": len(source.list_sheets())}
