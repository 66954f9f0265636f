"""In-memory implementations of repository interfaces."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from backend.paper_search.errors import NotFoundError, ValidationError
from backend.paper_search.models.paper import Paper, validate_paper


class InMemoryPaperRepository:
    """In-memory implementation of PaperRepository."""

    def __init__(self) -> None:
        self._papers: dict[int, Paper] = {}
        self._next_id = 1

    async def find_by_url(self, url: str) -> Paper | None:
        """Get paper by url."""
        for paper in self._papers.values():
            if paper.url == url:
                return paper
        return None

    async def create(self, attrs: Mapping[str, Any]) -> Paper:
        """Validate and insert a new paper."""
        fields = validate_paper(attrs)
        self._ensure_unique_url(fields.url)

        now = datetime.now()
        paper = Paper(id=self._next_id, created_at=now, updated_at=now, **fields.model_dump())
        self._papers[paper.id] = paper
        self._next_id += 1
        return paper

    async def update(self, paper: Paper, attrs: Mapping[str, Any]) -> Paper:
        """Validate merged fields and replace the stored paper."""
        fields = validate_paper({**paper.fields(), **attrs})
        self._ensure_unique_url(fields.url, exclude_id=paper.id)

        stored = self._papers.get(paper.id)
        if stored is None:
            raise NotFoundError(str(paper.id))

        updated = Paper(
            id=stored.id,
            created_at=stored.created_at,
            updated_at=datetime.now(),
            **fields.model_dump(),
        )
        self._papers[updated.id] = updated
        return updated

    async def count(self) -> int:
        """Return the number of stored papers."""
        return len(self._papers)

    async def list_all(self) -> list[Paper]:
        """Return every stored paper ordered by id."""
        return [self._papers[paper_id] for paper_id in sorted(self._papers)]

    def _ensure_unique_url(self, url: str, exclude_id: int | None = None) -> None:
        for paper in self._papers.values():
            if paper.url == url and paper.id != exclude_id:
                raise ValidationError("url", "uniqueness", f"url has already been taken: {url}")
