"""In-memory implementation of the SearchEngine protocol.

Evaluates the query IR directly against stored documents. Scoring is
simple token matching (count of query tokens found per field, best field
wins), which is enough to exercise ranking order and the facet wiring
without a live cluster.
"""

import re
from collections import Counter
from typing import Any

from backend.paper_search.errors import QueryError
from backend.paper_search.models.search import FacetBucket
from backend.paper_search.search.engine import EngineHit, EngineResponse
from backend.paper_search.search.query import (
    BoolMust,
    Clause,
    MatchAll,
    MultiMatch,
    SearchRequest,
    Term,
    TermsAggregation,
)

_TOKEN = re.compile(r"\w+")


def _tokens(value: Any) -> set[str]:
    if value is None:
        return set()
    return set(_TOKEN.findall(str(value).lower()))


def matches(clause: Clause, document: dict[str, Any]) -> bool:
    """Return True when the document satisfies the clause."""
    if isinstance(clause, MatchAll):
        return True
    if isinstance(clause, MultiMatch):
        return score(clause, document) > 0
    if isinstance(clause, Term):
        value = document.get(clause.field)
        if isinstance(value, list):
            return clause.value in value
        return value == clause.value
    if isinstance(clause, BoolMust):
        return all(matches(c, document) for c in clause.must)
    raise TypeError(f"Unknown clause: {type(clause).__name__}")


def score(clause: Clause, document: dict[str, Any]) -> float:
    """Relevance score; match_all scores every document 1.0."""
    if isinstance(clause, MultiMatch):
        query_tokens = _tokens(clause.query)
        if not query_tokens:
            return 0.0
        return float(
            max(len(query_tokens & _tokens(document.get(field))) for field in clause.fields)
        )
    return 1.0


def terms_buckets(documents: list[dict[str, Any]], terms: TermsAggregation) -> list[FacetBucket]:
    """Count documents per distinct term, ordered by count desc then term asc."""
    counts: Counter[str] = Counter()
    for document in documents:
        value = document.get(terms.field)
        values = value if isinstance(value, list) else [value]
        for term in {str(v) for v in values if v is not None}:
            counts[term] += 1

    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [FacetBucket(value=term, count=count) for term, count in ordered[: terms.size]]


class InMemorySearchEngine:
    """In-memory implementation of SearchEngine."""

    def __init__(self, index_name: str = "papers") -> None:
        self._index_name = index_name
        self._documents: dict[str, dict[str, Any]] = {}
        self._mapping: dict[str, Any] | None = None

    @property
    def index_name(self) -> str:
        return self._index_name

    @property
    def mapping(self) -> dict[str, Any] | None:
        return self._mapping

    def get_document(self, doc_id: str) -> dict[str, Any] | None:
        """Return a stored document or None."""
        return self._documents.get(doc_id)

    def count(self) -> int:
        return len(self._documents)

    async def create_index(self, mapping: dict[str, Any], *, force: bool = False) -> None:
        """Create the index; force drops every stored document."""
        if force or self._mapping is None:
            self._documents = {}
        self._mapping = mapping

    async def index_document(self, doc_id: str, document: dict[str, Any]) -> None:
        """Store or replace a document."""
        self._documents[doc_id] = dict(document)

    async def bulk_index(self, documents: list[tuple[str, dict[str, Any]]]) -> int:
        """Store or replace several documents."""
        for doc_id, document in documents:
            self._documents[doc_id] = dict(document)
        return len(documents)

    async def query(self, request: SearchRequest) -> EngineResponse:
        """Run query, facet aggregations and post-filter in engine order."""
        if self._mapping is None and not self._documents:
            raise QueryError("index_not_found_exception: no such index")

        matched = [
            (doc_id, document, score(request.query, document))
            for doc_id, document in self._documents.items()
            if matches(request.query, document)
        ]

        # aggregations see every query match; the post-filter applies to hits only
        facets = {
            agg.name: terms_buckets(
                [document for _, document, _ in matched if matches(agg.filter, document)],
                agg.terms,
            )
            for agg in request.aggregations
        }

        filtered = [m for m in matched if matches(request.post_filter, m[1])]
        filtered.sort(key=lambda m: -m[2])
        page = filtered[request.offset : request.offset + request.size]

        return EngineResponse(
            total=len(filtered),
            hits=[EngineHit(id=doc_id, score=s, source=dict(doc)) for doc_id, doc, s in page],
            facets=facets,
        )

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None
