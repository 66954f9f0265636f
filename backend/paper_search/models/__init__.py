"""Models package - re-exports for convenience."""

from backend.paper_search.models.imports import ImportFailure, ImportReport, ImportSuccess
from backend.paper_search.models.paper import (
    PAPER_FIELDS,
    IndexedDocument,
    Paper,
    PaperFields,
    RawRecord,
    validate_paper,
)
from backend.paper_search.models.search import (
    FacetBucket,
    SearchFilters,
    SearchHit,
    SearchResult,
)

__all__ = [
    # Paper
    "PAPER_FIELDS",
    "Paper",
    "PaperFields",
    "IndexedDocument",
    "RawRecord",
    "validate_paper",
    # Search
    "SearchFilters",
    "FacetBucket",
    "SearchHit",
    "SearchResult",
    # Import
    "ImportReport",
    "ImportSuccess",
    "ImportFailure",
]
