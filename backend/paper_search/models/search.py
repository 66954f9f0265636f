"""Search request filters and result models."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from backend.paper_search.errors import ValidationError
from backend.paper_search.models.paper import IndexedDocument

FILTER_KEYS = ("paper_type", "originator")


class SearchFilters(BaseModel):
    """User-selected facet values; None means no selection."""

    paper_type: str | None = None
    originator: str | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any], *, strict: bool = False) -> "SearchFilters":
        """Build filters from request parameters.

        Blank values count as no selection. Unknown keys are ignored unless
        strict is set.

        Raises:
            ValidationError: In strict mode, for the first unknown key
        """
        if strict:
            for key in params:
                if key not in FILTER_KEYS:
                    raise ValidationError(key, "unknown_filter", f"Unknown filter: {key}")

        values: dict[str, str] = {}
        for key in FILTER_KEYS:
            value = params.get(key)
            if value is not None and str(value).strip():
                values[key] = str(value)
        return cls(**values)


class FacetBucket(BaseModel):
    """Count of documents for one facet value."""

    value: str
    count: int


class SearchHit(BaseModel):
    """Single search result."""

    document: IndexedDocument
    score: float | None = None


class SearchResult(BaseModel):
    """Result list plus the two independent facet breakdowns."""

    query: str
    filters: SearchFilters
    total: int
    hits: list[SearchHit]
    paper_type_counts: list[FacetBucket]
    originator_counts: list[FacetBucket]
