"""Paper writes - persist to the store, then index."""

from collections.abc import Mapping
from typing import Any, Literal

from backend.paper_search.db.repositories import PaperRepository
from backend.paper_search.errors import ValidationError
from backend.paper_search.models.paper import Paper
from backend.paper_search.search.engine import SearchEngine
from backend.paper_search.search.indexing import index_paper

WriteAction = Literal["created", "updated"]


async def save_paper(
    attrs: Mapping[str, Any],
    *,
    repository: PaperRepository,
    engine: SearchEngine,
) -> tuple[Paper, WriteAction]:
    """Upsert a paper by url and index the stored result.

    The index write follows a successful store write. If it fails the store
    keeps the new values and the index stays stale until the next reset.

    Args:
        attrs: Fields to write; on update, missing keys keep stored values
        repository: Store of record
        engine: Search engine

    Returns:
        Stored paper and whether it was created or updated

    Raises:
        ValidationError: If the paper violates a rule (nothing is written)
        SearchIndexError: If the index write fails
    """
    url = attrs.get("url")
    if url is None or (isinstance(url, str) and not url.strip()):
        raise ValidationError("url", "presence", "url can't be blank")

    existing = await repository.find_by_url(url) if isinstance(url, str) else None

    action: WriteAction
    if existing is None:
        paper = await repository.create(attrs)
        action = "created"
    else:
        paper = await repository.update(existing, attrs)
        action = "updated"

    await index_paper(paper, engine=engine)
    return paper, action
