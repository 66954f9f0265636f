"""Search engine protocol and shared response types."""

from typing import Any, Protocol

from pydantic import BaseModel, Field

from backend.paper_search.config import Settings, get_settings
from backend.paper_search.models.search import FacetBucket
from backend.paper_search.search.query import SearchRequest


class EngineHit(BaseModel):
    """Raw hit as returned by the engine."""

    id: str
    score: float | None = None
    source: dict[str, Any]


class EngineResponse(BaseModel):
    """Hits after post-filtering plus facet buckets keyed by aggregation name."""

    total: int
    hits: list[EngineHit] = Field(default_factory=list)
    facets: dict[str, list[FacetBucket]] = Field(default_factory=dict)


class SearchEngine(Protocol):
    """Search engine collaborator."""

    @property
    def index_name(self) -> str:
        """Name of the paper index."""
        ...

    async def create_index(self, mapping: dict[str, Any], *, force: bool = False) -> None:
        """Create the index; with force, drop an existing one first.

        Raises:
            SearchIndexError: On engine failure
        """
        ...

    async def index_document(self, doc_id: str, document: dict[str, Any]) -> None:
        """Write one document.

        Raises:
            SearchIndexError: On engine failure
        """
        ...

    async def bulk_index(self, documents: list[tuple[str, dict[str, Any]]]) -> int:
        """Write (doc_id, document) pairs; returns the number written.

        Raises:
            SearchIndexError: If any document fails
        """
        ...

    async def query(self, request: SearchRequest) -> EngineResponse:
        """Execute a search request.

        Raises:
            QueryError: On engine failure, never an empty response
        """
        ...

    async def ping(self) -> bool:
        """Return True when the engine is reachable."""
        ...

    async def close(self) -> None:
        """Release client resources."""
        ...


_search_engine: SearchEngine | None = None


def create_search_engine_from_settings(settings: Settings) -> SearchEngine:
    """Create the Elasticsearch-backed engine from settings."""
    from backend.paper_search.search.elasticsearch_engine import ElasticsearchEngine

    return ElasticsearchEngine(
        url=settings.elasticsearch_url,
        index_name=settings.elasticsearch_index,
        request_timeout=settings.elasticsearch_request_timeout,
        max_retries=settings.elasticsearch_max_retries,
        refresh=settings.elasticsearch_refresh,
    )


def get_search_engine() -> SearchEngine:
    """Get global search engine instance (FastAPI dependency)."""
    global _search_engine
    if _search_engine is None:
        _search_engine = create_search_engine_from_settings(get_settings())
    return _search_engine


async def close_search_engine() -> None:
    """Close the global search engine if one was created."""
    global _search_engine
    if _search_engine is not None:
        await _search_engine.close()
        _search_engine = None
