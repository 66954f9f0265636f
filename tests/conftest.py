"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator, Callable
import os
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from backend.paper_search.db.engine import create_tables
from backend.paper_search.db.models import Base
from backend.paper_search.db.inmemory import InMemoryPaperRepository
from backend.paper_search.db.sql_repositories import SqlPaperRepository
from backend.paper_search.search.inmemory import InMemorySearchEngine
from backend.paper_search.search.mapping import paper_index_mapping

RecordFactory = Callable[..., dict[str, Any]]


@pytest.fixture
def make_record() -> RecordFactory:
    """Factory for complete raw paper records; keyword overrides replace fields."""

    def _make(**overrides: Any) -> dict[str, Any]:
        record: dict[str, Any] = {
            "name": "Antrag zur Verkehrsberuhigung",
            "url": "https://ratsinfo.example.org/paper/1",
            "reference": "2024/0815",
            "body": "Antrag",
            "content": "Der Stadtrat möge beschließen, die Innenstadt verkehrsberuhigt zu gestalten.",
            "originator": "1. Ausschuss für Umwelt 2. Bezirksbeirat Mitte",
            "paper_type": "Antrag",
            "published_at": "2024-03-12",
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def repository() -> InMemoryPaperRepository:
    """Empty in-memory paper store."""
    return InMemoryPaperRepository()


@pytest_asyncio.fixture
async def search_engine() -> InMemorySearchEngine:
    """In-memory search engine with the paper index created."""
    engine = InMemorySearchEngine()
    await engine.create_index(paper_index_mapping())
    return engine


@pytest_asyncio.fixture
async def sql_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Async SQLite engine backed by a temporary file."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'papers.db'}",
        poolclass=NullPool,
        echo=False,
    )
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def sql_session(sql_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Async session on the temporary SQLite database."""
    async with AsyncSession(sql_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def sql_repository(sql_session: AsyncSession) -> SqlPaperRepository:
    """SQL paper store on the temporary SQLite database."""
    return SqlPaperRepository(sql_session)


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Async engine on a real PostgreSQL database.

    Skips unless DATABASE_URL points at PostgreSQL:

        DATABASE_URL='postgresql://...' pytest -m postgres
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set - skipping postgres test")

    if not database_url.startswith(("postgresql://", "postgresql+asyncpg://")):
        pytest.skip(f"DATABASE_URL is not PostgreSQL: {database_url}")

    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)
    await create_tables(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def postgres_session(postgres_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Async session for PostgreSQL integration tests."""
    async with AsyncSession(postgres_engine, expire_on_commit=False) as session:
        yield session
