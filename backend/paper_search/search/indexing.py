"""Index lifecycle - single-document writes and full rebuilds."""

import time

from backend.paper_search.db.repositories import PaperRepository
from backend.paper_search.models.paper import Paper
from backend.paper_search.search.engine import SearchEngine
from backend.paper_search.search.mapping import paper_index_mapping
from backend.paper_search.search.transform import to_indexed_document
from backend.paper_search.utils.logging import structured_logger
from backend.paper_search.utils.metrics import metrics


async def index_paper(paper: Paper, *, engine: SearchEngine) -> None:
    """Derive and write the indexed document for one stored paper.

    Raises:
        SearchIndexError: On engine failure; the store stays authoritative
    """
    document = to_indexed_document(paper)
    await engine.index_document(str(paper.id), document.model_dump(mode="json"))
    metrics.inc_indexed("single")


async def reset_index(
    *,
    repository: PaperRepository,
    engine: SearchEngine,
    analyzer: str = "german",
    batch_size: int = 500,
) -> int:
    """Drop and recreate the index, then bulk-load every stored paper.

    Blocking full rebuild. Callers must not run two resets against the same
    index at once; writes that land during the rebuild may be missing from it.

    Args:
        repository: Store of record
        engine: Search engine
        analyzer: Language analyzer for full-text fields
        batch_size: Documents per bulk request

    Returns:
        Number of papers indexed

    Raises:
        SearchIndexError: On engine failure
    """
    start = time.perf_counter()

    await engine.create_index(paper_index_mapping(analyzer), force=True)

    papers = await repository.list_all()
    indexed = 0
    for offset in range(0, len(papers), batch_size):
        batch = [
            (str(paper.id), to_indexed_document(paper).model_dump(mode="json"))
            for paper in papers[offset : offset + batch_size]
        ]
        indexed += await engine.bulk_index(batch)

    metrics.inc_indexed("bulk", indexed)
    structured_logger.log_reset(
        engine.index_name, indexed, (time.perf_counter() - start) * 1000
    )
    return indexed
