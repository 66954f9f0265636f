"""Elasticsearch engine adapter.

Wraps AsyncElasticsearch behind the SearchEngine protocol. Client and
transport failures are translated to QueryError / SearchIndexError so that
an outage is never mistaken for an empty result.
"""

import json
import logging
from typing import Any

from elasticsearch import ApiError, AsyncElasticsearch, TransportError
from elasticsearch.helpers import BulkIndexError, async_bulk

from backend.paper_search.errors import QueryError, SearchIndexError
from backend.paper_search.models.search import FacetBucket
from backend.paper_search.search.engine import EngineHit, EngineResponse
from backend.paper_search.search.query import SearchRequest, to_wire

logger = logging.getLogger(__name__)


def _describe(e: Exception) -> str:
    """Render an engine exception with its diagnostic message.

    Transport errors such as ConnectionError stringify to a generic label and
    keep the underlying text in `message` only.
    """
    text = str(e)
    message = getattr(e, "message", None)
    if message and str(message) not in text:
        return f"{text}: {message}"
    return text


class ElasticsearchEngine:
    """Elasticsearch implementation of SearchEngine."""

    def __init__(
        self,
        url: str = "http://localhost:9200",
        index_name: str = "papers",
        *,
        request_timeout: float = 10.0,
        max_retries: int = 3,
        refresh: str = "false",
        client: AsyncElasticsearch | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            url: Elasticsearch base URL
            index_name: Index holding paper documents
            request_timeout: Per-request timeout in seconds
            max_retries: Client-level retries on connection errors
            refresh: Refresh policy for single-document writes
            client: Optional preconfigured client (for testing with mocks)
        """
        self._url = url
        self._index_name = index_name
        self._refresh = refresh
        self._client = client or AsyncElasticsearch(
            url,
            request_timeout=request_timeout,
            max_retries=max_retries,
            retry_on_timeout=True,
        )

    @property
    def index_name(self) -> str:
        return self._index_name

    async def create_index(self, mapping: dict[str, Any], *, force: bool = False) -> None:
        """Create the index, dropping an existing one first when force is set."""
        try:
            if force:
                await self._client.indices.delete(
                    index=self._index_name, ignore_unavailable=True
                )
                logger.info("Deleted index: %s", self._index_name)
            await self._client.indices.create(
                index=self._index_name,
                settings=mapping.get("settings"),
                mappings=mapping.get("mappings"),
            )
        except (ApiError, TransportError) as e:
            raise SearchIndexError(
                f"Failed to create index {self._index_name}: {_describe(e)}"
            ) from e

        logger.info("Created index: %s", self._index_name)

    async def index_document(self, doc_id: str, document: dict[str, Any]) -> None:
        """Index a single document under doc_id."""
        try:
            await self._client.index(
                index=self._index_name, id=doc_id, document=document, refresh=self._refresh
            )
        except (ApiError, TransportError) as e:
            raise SearchIndexError(f"Failed to index document {doc_id}: {_describe(e)}") from e

    async def bulk_index(self, documents: list[tuple[str, dict[str, Any]]]) -> int:
        """Bulk index (doc_id, document) pairs and wait for them to be searchable."""
        if not documents:
            return 0

        actions = [
            {"_index": self._index_name, "_id": doc_id, "_source": document}
            for doc_id, document in documents
        ]

        try:
            success, _ = await async_bulk(self._client, actions, refresh="wait_for")
        except BulkIndexError as e:
            raise SearchIndexError(f"{len(e.errors)} document(s) failed to index") from e
        except (ApiError, TransportError) as e:
            raise SearchIndexError(f"Bulk indexing failed: {_describe(e)}") from e

        logger.info("Bulk indexed %d documents into %s", success, self._index_name)
        return success

    async def query(self, request: SearchRequest) -> EngineResponse:
        """Execute a search request and parse hits and facet buckets."""
        body = to_wire(request)
        logger.debug("Query: %s", json.dumps(body))

        try:
            response = await self._client.search(
                index=self._index_name,
                query=body["query"],
                post_filter=body["post_filter"],
                aggregations=body["aggs"],
                size=body["size"],
                from_=body["from"],
            )
        except (ApiError, TransportError) as e:
            raise QueryError(_describe(e)) from e

        return parse_search_response(response.body, request)

    async def ping(self) -> bool:
        """Return True when the cluster answers."""
        try:
            return bool(await self._client.ping())
        except TransportError:
            return False

    async def close(self) -> None:
        """Close the Elasticsearch client."""
        await self._client.close()
        logger.info("Elasticsearch client closed")


def parse_search_response(data: dict[str, Any], request: SearchRequest) -> EngineResponse:
    """Convert a raw search response body into an EngineResponse."""
    hits_section = data.get("hits", {})

    total = hits_section.get("total", 0)
    total_count = total.get("value", 0) if isinstance(total, dict) else int(total)

    hits = [
        EngineHit(id=str(hit["_id"]), score=hit.get("_score"), source=hit.get("_source", {}))
        for hit in hits_section.get("hits", [])
    ]

    aggregations = data.get("aggregations", {})
    facets: dict[str, list[FacetBucket]] = {}
    for agg in request.aggregations:
        # filter aggregation wraps a terms aggregation of the same name
        buckets = aggregations.get(agg.name, {}).get(agg.name, {}).get("buckets", [])
        facets[agg.name] = [
            FacetBucket(value=str(bucket["key"]), count=bucket["doc_count"]) for bucket in buckets
        ]

    return EngineResponse(total=total_count, hits=hits, facets=facets)
