"""FastAPI entrypoint for the SheetDB webservice."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sheetdb.configs import WEBSERVER_HOST, WEBSERVER_PORT
from sheetdb.query.errors import QueryError
from sheetdb.webservice.routers.health import router as health_router
from sheetdb.webservice.routers.sheets import router as sheets_router


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    app = FastAPI(
        title="SheetDB API",
        version="1.0.0",
        description=(
            "Read API over spreadsheet-backed tables. "
            "Provides sheet data endpoints with WHERE filters, ordering, pagination and counts."
        ),
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    @app.exception_handler(QueryError)
    async def query_error_handler(_: Request, exc: QueryError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid value')}"
            for err in exc.errors()
        )
        return _error(400, f"Invalid request parameters: {details}")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.get("/", tags=["health"])
    def root() -> dict:
        return {
            "status": "up",
            "service": "sheetdb-webservice",
            "host": WEBSERVER_HOST,
            "port": WEBSERVER_PORT,
        }

    app.include_router(health_router, prefix="/api/v1")
    app.include_router(sheets_router, prefix="/api/v1")

    return app


app = create_app()
