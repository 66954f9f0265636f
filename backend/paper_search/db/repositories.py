"""Repository protocol interfaces for data access."""

from collections.abc import Mapping
from typing import Any, Protocol

from backend.paper_search.models.paper import Paper


class PaperRepository(Protocol):
    """Store of record for papers.

    Implementations validate before persisting and never write partially.
    """

    async def find_by_url(self, url: str) -> Paper | None:
        """Get paper by its unique url.

        Args:
            url: Natural key

        Returns:
            Paper or None if not found
        """
        ...

    async def create(self, attrs: Mapping[str, Any]) -> Paper:
        """Validate and insert a new paper.

        Args:
            attrs: Field values for every required field

        Returns:
            Stored paper with id and timestamps

        Raises:
            ValidationError: On the first violated rule
        """
        ...

    async def update(self, paper: Paper, attrs: Mapping[str, Any]) -> Paper:
        """Validate and overwrite the given fields of an existing paper.

        Fields missing from attrs keep their stored values.

        Args:
            paper: Stored paper to update
            attrs: Fields to overwrite

        Returns:
            Updated paper

        Raises:
            ValidationError: On the first violated rule
            NotFoundError: If the paper no longer exists
        """
        ...

    async def count(self) -> int:
        """Return the number of stored papers."""
        ...

    async def list_all(self) -> list[Paper]:
        """Return every stored paper ordered by id."""
        ...
