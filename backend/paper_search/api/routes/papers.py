"""Paper endpoints - GET /papers/search, POST /papers/import, POST /papers/index/reset."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from backend.paper_search.config import Settings, get_settings
from backend.paper_search.db.engine import get_session
from backend.paper_search.db.repositories import PaperRepository
from backend.paper_search.db.sql_repositories import SqlPaperRepository
from backend.paper_search.ingest.importer import import_records
from backend.paper_search.models.imports import ImportReport
from backend.paper_search.models.search import SearchFilters, SearchResult
from backend.paper_search.search.engine import SearchEngine, get_search_engine
from backend.paper_search.search.indexing import reset_index
from backend.paper_search.search.retriever import search_papers

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/papers", tags=["papers"])

# query parameters that are not facet filters
_RESERVED_PARAMS = {"q", "page", "per_page"}


def get_paper_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> PaperRepository:
    """FastAPI dependency for the SQL paper repository."""
    return SqlPaperRepository(session)


class ResetIndexResponse(BaseModel):
    """Response for POST /papers/index/reset."""

    index: str
    indexed: int


@router.get("/search", response_model=SearchResult)
async def search_endpoint(
    request: Request,
    engine: Annotated[SearchEngine, Depends(get_search_engine)],
    settings: Annotated[Settings, Depends(get_settings)],
    q: Annotated[str, Query(max_length=500)] = "",
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> SearchResult:
    """Full-text search with paper_type / originator facets.

    Facet selections come from the remaining query parameters. Unknown
    parameters are ignored unless strict filters are configured.

    Args:
        request: Incoming request (facet parameters)
        engine: Search engine
        settings: Application settings
        q: Free-text query; empty matches everything
        page: 1-based page
        per_page: Hits per page (defaults to settings.search_per_page)

    Returns:
        Hits plus paper_type_counts and originator_counts
    """
    params = {
        key: value for key, value in request.query_params.items() if key not in _RESERVED_PARAMS
    }
    filters = SearchFilters.from_params(params, strict=settings.strict_filters)

    return await search_papers(
        q,
        filters,
        engine=engine,
        page=page,
        per_page=per_page or settings.search_per_page,
        facet_size=settings.facet_size,
    )


@router.post("/import", response_model=ImportReport)
async def import_endpoint(
    records: Annotated[list[dict[str, Any]], Body()],
    repository: Annotated[PaperRepository, Depends(get_paper_repository)],
    engine: Annotated[SearchEngine, Depends(get_search_engine)],
) -> ImportReport:
    """Upsert a JSON array of paper records by url.

    Returns:
        ImportReport; rejected records are listed, not raised
    """
    logger.info(f"[POST /papers/import] records={len(records)}")
    return await import_records(records, repository=repository, engine=engine)


@router.post("/index/reset", response_model=ResetIndexResponse)
async def reset_index_endpoint(
    repository: Annotated[PaperRepository, Depends(get_paper_repository)],
    engine: Annotated[SearchEngine, Depends(get_search_engine)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ResetIndexResponse:
    """Drop, recreate and bulk-load the paper index."""
    indexed = await reset_index(
        repository=repository,
        engine=engine,
        analyzer=settings.text_analyzer,
        batch_size=settings.bulk_batch_size,
    )
    return ResetIndexResponse(index=engine.index_name, indexed=indexed)
