"""Paper retriever - faceted full-text search."""

import time

from backend.paper_search.errors import QueryError
from backend.paper_search.models.paper import IndexedDocument
from backend.paper_search.models.search import SearchFilters, SearchHit, SearchResult
from backend.paper_search.search.engine import SearchEngine
from backend.paper_search.search.query import (
    DEFAULT_FACET_SIZE,
    ORIGINATORS_FACET,
    PAPER_TYPES_FACET,
    build_search_request,
)
from backend.paper_search.utils.logging import structured_logger
from backend.paper_search.utils.metrics import metrics


async def search_papers(
    q: str | None,
    filters: SearchFilters,
    *,
    engine: SearchEngine,
    page: int = 1,
    per_page: int = 20,
    facet_size: int = DEFAULT_FACET_SIZE,
) -> SearchResult:
    """Search papers and compute both facet breakdowns.

    Args:
        q: Free-text query; blank matches everything
        filters: paper_type / originator selections
        engine: Search engine
        page: 1-based result page
        per_page: Hits per page
        facet_size: Maximum buckets per facet

    Returns:
        SearchResult with hits, paper_type_counts and originator_counts

    Raises:
        QueryError: If the engine fails; an outage is never an empty result
    """
    request = build_search_request(
        q, filters, page=page, per_page=per_page, facet_size=facet_size
    )

    start = time.perf_counter()
    try:
        response = await engine.query(request)
    except QueryError as e:
        latency_ms = (time.perf_counter() - start) * 1000
        metrics.record_search("error", latency_ms)
        structured_logger.log_search(q or "", filters, "error", latency_ms, error_reason=e.message)
        raise

    latency_ms = (time.perf_counter() - start) * 1000
    metrics.record_search("success", latency_ms)
    structured_logger.log_search(q or "", filters, "success", latency_ms, total=response.total)

    return SearchResult(
        query=q or "",
        filters=filters,
        total=response.total,
        hits=[
            SearchHit(document=IndexedDocument.model_validate(hit.source), score=hit.score)
            for hit in response.hits
        ],
        paper_type_counts=response.facets.get(PAPER_TYPES_FACET, []),
        originator_counts=response.facets.get(ORIGINATORS_FACET, []),
    )
