"""SQL implementations of repository interfaces."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.paper_search.db.models import Paper as PaperDB
from backend.paper_search.errors import NotFoundError, ValidationError
from backend.paper_search.models.paper import Paper, validate_paper


def _to_domain(row: PaperDB) -> Paper:
    return Paper.model_validate(row, from_attributes=True)


class SqlPaperRepository:
    """SQL implementation of PaperRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_url(self, url: str) -> Paper | None:
        """Get paper by url."""
        result = await self._session.execute(select(PaperDB).where(PaperDB.url == url))
        row = result.scalar_one_or_none()
        return _to_domain(row) if row is not None else None

    async def create(self, attrs: Mapping[str, Any]) -> Paper:
        """Validate and insert a new paper."""
        fields = validate_paper(attrs)
        await self._ensure_unique_url(fields.url)

        row = PaperDB(**fields.model_dump())
        self._session.add(row)
        await self._commit(fields.url)

        await self._session.refresh(row)
        return _to_domain(row)

    async def update(self, paper: Paper, attrs: Mapping[str, Any]) -> Paper:
        """Validate merged fields and overwrite the stored row."""
        fields = validate_paper({**paper.fields(), **attrs})
        await self._ensure_unique_url(fields.url, exclude_id=paper.id)

        row = await self._session.get(PaperDB, paper.id)
        if row is None:
            raise NotFoundError(str(paper.id))

        for name, value in fields.model_dump().items():
            setattr(row, name, value)
        await self._commit(fields.url)

        await self._session.refresh(row)
        return _to_domain(row)

    async def count(self) -> int:
        """Return the number of stored papers."""
        result = await self._session.execute(select(func.count()).select_from(PaperDB))
        return int(result.scalar_one())

    async def list_all(self) -> list[Paper]:
        """Return every stored paper ordered by id."""
        result = await self._session.execute(select(PaperDB).order_by(PaperDB.id))
        return [_to_domain(row) for row in result.scalars().all()]

    async def _ensure_unique_url(self, url: str, exclude_id: int | None = None) -> None:
        stmt = select(PaperDB.id).where(PaperDB.url == url)
        if exclude_id is not None:
            stmt = stmt.where(PaperDB.id != exclude_id)
        result = await self._session.execute(stmt)
        if result.first() is not None:
            raise ValidationError("url", "uniqueness", f"url has already been taken: {url}")

    async def _commit(self, url: str) -> None:
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise ValidationError("url", "uniqueness", f"url has already been taken: {url}") from e
