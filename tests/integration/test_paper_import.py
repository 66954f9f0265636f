"""Integration tests for the bulk import pipeline (SQLite store + in-memory engine)."""

import json
from collections.abc import Callable
from typing import Any

import pytest

from backend.paper_search.db.sql_repositories import SqlPaperRepository
from backend.paper_search.errors import ImportFormatError
from backend.paper_search.ingest.importer import import_from_json, import_records
from backend.paper_search.search.inmemory import InMemorySearchEngine

RecordFactory = Callable[..., dict[str, Any]]


def _batch(make_record: RecordFactory) -> list[dict[str, Any]]:
    return [
        make_record(url="https://ratsinfo.example.org/paper/1"),
        make_record(
            url="https://ratsinfo.example.org/paper/2",
            name="Anfrage Schulsanierung",
            paper_type="Anfrage",
            originator="Fraktion Grün",
        ),
        make_record(
            url="https://ratsinfo.example.org/paper/3",
            name="Haushalt 2025",
            paper_type="Beschlussvorlage",
            resolution="Einstimmig beschlossen",
        ),
    ]


@pytest.mark.asyncio
async def test_import_is_idempotent(
    sql_repository: SqlPaperRepository,
    search_engine: InMemorySearchEngine,
    make_record: RecordFactory,
) -> None:
    """Test that re-importing the same batch creates nothing new and changes nothing."""
    batch = _batch(make_record)

    first = await import_records(batch, repository=sql_repository, engine=search_engine)
    stored_after_first = [p.fields() for p in await sql_repository.list_all()]

    second = await import_records(batch, repository=sql_repository, engine=search_engine)
    stored_after_second = [p.fields() for p in await sql_repository.list_all()]

    assert first.created_count == 3
    assert second.created_count == 0
    assert await sql_repository.count() == 3
    assert stored_after_second == stored_after_first
    assert [s.action for s in first.succeeded] == ["created"] * 3
    assert [s.action for s in second.succeeded] == ["updated"] * 3
    assert first.errors == [] and second.errors == []


@pytest.mark.asyncio
async def test_absent_field_keeps_existing_value(
    sql_repository: SqlPaperRepository,
    search_engine: InMemorySearchEngine,
    make_record: RecordFactory,
) -> None:
    """Test that a partial record updates only the fields it carries."""
    original = make_record(url="u1", content="Ursprünglicher Inhalt")
    await import_records([original], repository=sql_repository, engine=search_engine)

    report = await import_records(
        [{"url": "u1", "name": "New Name"}], repository=sql_repository, engine=search_engine
    )

    paper = await sql_repository.find_by_url("u1")
    assert report.errors == []
    assert paper is not None
    assert paper.name == "New Name"
    assert paper.content == "Ursprünglicher Inhalt"


@pytest.mark.asyncio
async def test_present_empty_value_overwrites(
    sql_repository: SqlPaperRepository,
    search_engine: InMemorySearchEngine,
    make_record: RecordFactory,
) -> None:
    """Test that a present empty optional value clears the stored one."""
    await import_records(
        [make_record(url="u1", resolution="Angenommen")],
        repository=sql_repository,
        engine=search_engine,
    )

    await import_records(
        [{"url": "u1", "resolution": ""}], repository=sql_repository, engine=search_engine
    )

    paper = await sql_repository.find_by_url("u1")
    assert paper is not None
    assert paper.resolution == ""


@pytest.mark.asyncio
async def test_present_empty_required_value_is_rejected(
    sql_repository: SqlPaperRepository,
    search_engine: InMemorySearchEngine,
    make_record: RecordFactory,
) -> None:
    """Test that blanking a required field fails and leaves the paper unchanged."""
    await import_records(
        [make_record(url="u1", content="Inhalt")], repository=sql_repository, engine=search_engine
    )

    report = await import_records(
        [{"url": "u1", "content": ""}], repository=sql_repository, engine=search_engine
    )

    paper = await sql_repository.find_by_url("u1")
    assert [(e.field, e.rule) for e in report.errors] == [("content", "presence")]
    assert paper is not None
    assert paper.content == "Inhalt"


@pytest.mark.asyncio
async def test_invalid_date_rejects_record_and_continues(
    sql_repository: SqlPaperRepository,
    search_engine: InMemorySearchEngine,
    make_record: RecordFactory,
) -> None:
    """Test that a bad date is reported and later records are still imported."""
    batch = [
        make_record(url="u1"),
        make_record(url="u2", published_at="13/45/2020"),
        make_record(url="u3"),
    ]

    report = await import_records(batch, repository=sql_repository, engine=search_engine)

    assert report.created_count == 2
    assert [s.url for s in report.succeeded] == ["u1", "u3"]
    assert len(report.errors) == 1
    failure = report.errors[0]
    assert (failure.index, failure.field, failure.rule) == (1, "published_at", "date")
    assert failure.record["url"] == "u2"
    assert await sql_repository.find_by_url("u2") is None
    assert search_engine.count() == 2


@pytest.mark.asyncio
async def test_missing_url_is_rejected(
    sql_repository: SqlPaperRepository,
    search_engine: InMemorySearchEngine,
    make_record: RecordFactory,
) -> None:
    """Test that a record without url cannot be keyed."""
    record = make_record()
    del record["url"]

    report = await import_records([record], repository=sql_repository, engine=search_engine)

    assert [(e.field, e.rule) for e in report.errors] == [("url", "presence")]
    assert report.created_count == 0


@pytest.mark.asyncio
async def test_duplicate_url_in_batch_last_wins(
    sql_repository: SqlPaperRepository,
    search_engine: InMemorySearchEngine,
    make_record: RecordFactory,
) -> None:
    """Test input-order application for records sharing a url."""
    batch = [make_record(url="u1", name="Erste Fassung"), make_record(url="u1", name="Zweite Fassung")]

    report = await import_records(batch, repository=sql_repository, engine=search_engine)

    paper = await sql_repository.find_by_url("u1")
    assert report.created_count == 1
    assert paper is not None
    assert paper.name == "Zweite Fassung"
    indexed = search_engine.get_document(str(paper.id))
    assert indexed is not None
    assert indexed["name"] == "Zweite Fassung"


@pytest.mark.asyncio
async def test_import_indexes_split_originator(
    sql_repository: SqlPaperRepository,
    search_engine: InMemorySearchEngine,
    make_record: RecordFactory,
) -> None:
    """Test that each stored paper is indexed with its originator list."""
    report = await import_records(
        [make_record(originator="1. Ausschuss für Umwelt 2. Bezirksbeirat Mitte")],
        repository=sql_repository,
        engine=search_engine,
    )

    indexed = search_engine.get_document(str(report.succeeded[0].paper_id))
    assert indexed is not None
    assert indexed["originator"] == ["Ausschuss für Umwelt", "Bezirksbeirat Mitte"]
    assert indexed["published_at"] == "2024-03-12"


@pytest.mark.asyncio
async def test_import_from_json(
    sql_repository: SqlPaperRepository,
    search_engine: InMemorySearchEngine,
    make_record: RecordFactory,
) -> None:
    """Test the JSON entry point."""
    payload = json.dumps(_batch(make_record))

    report = await import_from_json(payload, repository=sql_repository, engine=search_engine)

    assert report.created_count == 3


@pytest.mark.asyncio
async def test_import_from_json_rejects_non_array(
    sql_repository: SqlPaperRepository, search_engine: InMemorySearchEngine
) -> None:
    """Test that a malformed payload fails before touching the store."""
    with pytest.raises(ImportFormatError):
        await import_from_json('{"url": "u1"}', repository=sql_repository, engine=search_engine)

    assert await sql_repository.count() == 0
