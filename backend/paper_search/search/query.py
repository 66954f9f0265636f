"""Faceted query builder.

Builds an engine-agnostic request from the free-text query and the facet
selections, in three parts:

- query: multi_match over name and content, or match_all for a blank query
- post_filter: both facet selections, applied after scoring so the result
  list narrows without changing relevance
- aggregations: one per facet, each filtered by the *other* facet's
  selection only, so a selected value never collapses its own facet

The request is a small tagged IR (``kind`` discriminates clause types);
``to_wire`` turns it into an Elasticsearch request body.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from backend.paper_search.models.search import SearchFilters

SEARCH_FIELDS = ["name", "content"]

PAPER_TYPES_FACET = "paper_types"
ORIGINATORS_FACET = "originators"

# maximum buckets per facet
DEFAULT_FACET_SIZE = 50


class MatchAll(BaseModel):
    """Matches every document, unscored."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["match_all"] = "match_all"


class MultiMatch(BaseModel):
    """Relevance match of a query string against several fields."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["multi_match"] = "multi_match"
    query: str
    fields: list[str]


class Term(BaseModel):
    """Exact term equality on an unanalyzed field."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["term"] = "term"
    field: str
    value: str


class BoolMust(BaseModel):
    """Conjunction of clauses."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bool_must"] = "bool_must"
    must: list["Clause"]


Clause = Annotated[Union[MatchAll, MultiMatch, Term, BoolMust], Field(discriminator="kind")]

BoolMust.model_rebuild()


class TermsAggregation(BaseModel):
    """Group by exact term, count per value (count desc, term asc)."""

    model_config = ConfigDict(frozen=True)

    field: str
    size: int = DEFAULT_FACET_SIZE


class FilterAggregation(BaseModel):
    """Terms aggregation computed over a filtered subset of the query hits."""

    model_config = ConfigDict(frozen=True)

    name: str
    filter: Clause
    terms: TermsAggregation


class SearchRequest(BaseModel):
    """Complete search request."""

    model_config = ConfigDict(frozen=True)

    query: Clause
    post_filter: Clause
    aggregations: list[FilterAggregation]
    size: int = 20
    offset: int = 0


def build_query_clause(q: str | None) -> Clause:
    """multi_match over name and content, or match_all for a blank query."""
    if q is None or not q.strip():
        return MatchAll()
    return MultiMatch(query=q, fields=list(SEARCH_FIELDS))


def _term_filters(*, paper_type: str | None = None, originator: str | None = None) -> list[Clause]:
    clauses: list[Clause] = []
    if paper_type:
        clauses.append(Term(field="paper_type", value=paper_type))
    if originator:
        clauses.append(Term(field="originator", value=originator))
    return clauses


def _conjunction(clauses: list[Clause]) -> BoolMust:
    # match_all keeps an empty selection a pass-through
    return BoolMust(must=clauses or [MatchAll()])


def build_post_filter(filters: SearchFilters) -> BoolMust:
    """AND of every facet selection; match_all when nothing is selected."""
    return _conjunction(
        _term_filters(paper_type=filters.paper_type, originator=filters.originator)
    )


def build_facet_aggregations(
    filters: SearchFilters, size: int = DEFAULT_FACET_SIZE
) -> list[FilterAggregation]:
    """Build the two cross-filtered facet aggregations.

    paper_types is filtered by the originator selection only; originators by
    the paper_type selection only.
    """
    return [
        FilterAggregation(
            name=PAPER_TYPES_FACET,
            filter=_conjunction(_term_filters(originator=filters.originator)),
            terms=TermsAggregation(field="paper_type", size=size),
        ),
        FilterAggregation(
            name=ORIGINATORS_FACET,
            filter=_conjunction(_term_filters(paper_type=filters.paper_type)),
            terms=TermsAggregation(field="originator", size=size),
        ),
    ]


def build_search_request(
    q: str | None,
    filters: SearchFilters,
    *,
    page: int = 1,
    per_page: int = 20,
    facet_size: int = DEFAULT_FACET_SIZE,
) -> SearchRequest:
    """Assemble query, post-filter and facet aggregations.

    Args:
        q: Free-text query, possibly empty
        filters: Facet selections
        page: 1-based result page
        per_page: Hits per page
        facet_size: Maximum buckets per facet

    Returns:
        SearchRequest ready for an engine
    """
    return SearchRequest(
        query=build_query_clause(q),
        post_filter=build_post_filter(filters),
        aggregations=build_facet_aggregations(filters, size=facet_size),
        size=per_page,
        offset=(max(page, 1) - 1) * per_page,
    )


def clause_to_wire(clause: Clause) -> dict[str, Any]:
    """Serialize one clause to Elasticsearch query DSL."""
    if isinstance(clause, MatchAll):
        return {"match_all": {}}
    if isinstance(clause, MultiMatch):
        return {"multi_match": {"query": clause.query, "fields": list(clause.fields)}}
    if isinstance(clause, Term):
        return {"term": {clause.field: clause.value}}
    if isinstance(clause, BoolMust):
        return {"bool": {"must": [clause_to_wire(c) for c in clause.must]}}
    raise TypeError(f"Unknown clause: {type(clause).__name__}")


def to_wire(request: SearchRequest) -> dict[str, Any]:
    """Serialize a request to an Elasticsearch search body.

    Each facet is a filter aggregation wrapping a terms aggregation of the
    same name, so buckets live at aggregations.<name>.<name>.buckets.
    """
    aggs: dict[str, Any] = {}
    for agg in request.aggregations:
        aggs[agg.name] = {
            "filter": clause_to_wire(agg.filter),
            "aggs": {
                agg.name: {
                    "terms": {"field": agg.terms.field, "size": agg.terms.size},
                }
            },
        }

    return {
        "query": clause_to_wire(request.query),
        "post_filter": clause_to_wire(request.post_filter),
        "aggs": aggs,
        "size": request.size,
        "from": request.offset,
    }
