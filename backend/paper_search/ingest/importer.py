"""Bulk import - upsert raw records by url and report the delta."""

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from backend.paper_search.db.repositories import PaperRepository
from backend.paper_search.errors import ImportFormatError, ValidationError
from backend.paper_search.ingest.writer import save_paper
from backend.paper_search.models.imports import ImportFailure, ImportReport, ImportSuccess
from backend.paper_search.models.paper import RawRecord
from backend.paper_search.search.engine import SearchEngine
from backend.paper_search.utils.logging import structured_logger
from backend.paper_search.utils.metrics import metrics

logger = logging.getLogger(__name__)


def parse_records(json_text: str) -> list[RawRecord]:
    """Parse a JSON array of record objects.

    Raises:
        ImportFormatError: If the payload is not valid JSON or not an array of objects
    """
    try:
        payload = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Invalid JSON: {e}") from e

    if not isinstance(payload, list):
        raise ImportFormatError("Expected a JSON array of records")

    records: list[RawRecord] = []
    for position, item in enumerate(payload):
        if not isinstance(item, dict):
            raise ImportFormatError(f"Record {position} is not an object")
        records.append(RawRecord.model_validate(item))
    return records


async def import_records(
    records: Sequence[RawRecord | Mapping[str, Any]],
    *,
    repository: PaperRepository,
    engine: SearchEngine,
) -> ImportReport:
    """Upsert each record by url, in input order.

    Not transactional across records: a rejected record does not undo the
    ones before it. Re-running the same batch changes nothing and creates
    nothing. When two records share a url the later one wins.

    Args:
        records: Raw records; mappings are wrapped in RawRecord
        repository: Store of record
        engine: Search engine

    Returns:
        ImportReport with created_count (count after minus count before),
        successes and per-record validation failures

    Raises:
        SearchIndexError: If an index write fails (earlier records stay committed)
    """
    count_before = await repository.count()
    succeeded: list[ImportSuccess] = []
    failures: list[ImportFailure] = []

    for index, record in enumerate(records):
        raw = record if isinstance(record, RawRecord) else RawRecord.model_validate(dict(record))
        attrs = raw.present_fields()

        try:
            paper, action = await save_paper(attrs, repository=repository, engine=engine)
        except ValidationError as e:
            logger.debug(f"Rejected record {index}: {e.field} {e.rule}")
            failures.append(
                ImportFailure(
                    index=index, record=attrs, field=e.field, rule=e.rule, message=e.message
                )
            )
            metrics.inc_import("rejected")
            continue

        succeeded.append(ImportSuccess(index=index, url=paper.url, paper_id=paper.id, action=action))
        metrics.inc_import(action)

    report = ImportReport(
        created_count=await repository.count() - count_before,
        succeeded=succeeded,
        errors=failures,
    )
    structured_logger.log_import(report, len(records))
    return report


async def import_from_json(
    json_text: str,
    *,
    repository: PaperRepository,
    engine: SearchEngine,
) -> ImportReport:
    """Parse a JSON array of records and import it."""
    return await import_records(parse_records(json_text), repository=repository, engine=engine)
