"""Paper maintenance tasks: import a JSON file, rebuild the search index.

Usage:
    python -m scripts.papers import papers.json
    python -m scripts.papers reset-index
    python -m scripts.papers create-tables
"""

import argparse
import asyncio
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from backend.paper_search.config import get_settings
from backend.paper_search.db.engine import create_tables, get_async_engine
from backend.paper_search.db.sql_repositories import SqlPaperRepository
from backend.paper_search.ingest.importer import import_from_json
from backend.paper_search.search.engine import create_search_engine_from_settings
from backend.paper_search.search.indexing import reset_index
from backend.paper_search.utils.logging import configure_logging


async def run_import(path: Path) -> int:
    """Import papers from a JSON file; returns the number of rejected records."""
    settings = get_settings()
    engine = create_search_engine_from_settings(settings)
    try:
        async with AsyncSession(get_async_engine(), expire_on_commit=False) as session:
            report = await import_from_json(
                path.read_text(encoding="utf-8"),
                repository=SqlPaperRepository(session),
                engine=engine,
            )
    finally:
        await engine.close()

    print(f"Imported {report.created_count} Papers!")
    for failure in report.errors:
        print(f"  record {failure.index}: {failure.field} {failure.rule} - {failure.message}")
    return len(report.errors)


async def run_reset_index() -> int:
    """Rebuild the search index from the store."""
    settings = get_settings()
    engine = create_search_engine_from_settings(settings)
    try:
        async with AsyncSession(get_async_engine(), expire_on_commit=False) as session:
            indexed = await reset_index(
                repository=SqlPaperRepository(session),
                engine=engine,
                analyzer=settings.text_analyzer,
                batch_size=settings.bulk_batch_size,
            )
    finally:
        await engine.close()

    print(f"Indexed {indexed} papers into {settings.elasticsearch_index}")
    return 0


async def run_create_tables() -> int:
    """Create database tables without alembic (dev only)."""
    await create_tables(get_async_engine())
    print("Tables created")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run one maintenance command.

    Returns:
        Process exit code
    """
    parser = argparse.ArgumentParser(description="Paper search maintenance tasks")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Import papers from a JSON file")
    import_parser.add_argument("path", type=Path)
    subparsers.add_parser("reset-index", help="Drop, recreate and reload the search index")
    subparsers.add_parser("create-tables", help="Create database tables")

    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level)

    if args.command == "import":
        return 1 if asyncio.run(run_import(args.path)) else 0
    if args.command == "reset-index":
        return asyncio.run(run_reset_index())
    return asyncio.run(run_create_tables())


if __name__ == "__main__":
    raise SystemExit(main())
