"""FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from backend.paper_search.api.routes.health import router as health_router
from backend.paper_search.api.routes.metrics import router as metrics_router
from backend.paper_search.api.routes.papers import router as papers_router
from backend.paper_search.config import get_settings
from backend.paper_search.errors import QueryError, SearchIndexError, ValidationError
from backend.paper_search.search.engine import close_search_engine
from backend.paper_search.utils.logging import configure_logging


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    configure_logging(get_settings().log_level)
    yield
    await close_search_engine()


app = FastAPI(title="Paper Search API", version="0.1.0", lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(papers_router, tags=["papers"])


@app.exception_handler(ValidationError)
async def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "field": exc.field, "rule": exc.rule},
    )


@app.exception_handler(QueryError)
async def query_error_handler(_request: Request, exc: QueryError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Search query failed", "error": exc.message},
    )


@app.exception_handler(SearchIndexError)
async def index_error_handler(_request: Request, exc: SearchIndexError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Search index write failed", "error": exc.message},
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Paper Search API", "version": "0.1.0"}
