"""Structured logging for search, import and reindex operations."""

import logging
from typing import Any

from backend.paper_search.models.imports import ImportReport
from backend.paper_search.models.search import SearchFilters

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the API process and scripts."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class StructuredSearchLogger:
    """Structured logger for paper search operations."""

    def log_search(
        self,
        q: str,
        filters: SearchFilters,
        outcome: str,
        latency_ms: float,
        total: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log a search request with structured data."""
        log_data: dict[str, Any] = {
            "q": q,
            "filters": filters.model_dump(exclude_none=True),
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if total is not None:
            log_data["total"] = total
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Search: {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_import(self, report: ImportReport, total_records: int) -> None:
        """Log an import batch summary."""
        log_data: dict[str, Any] = {
            "records": total_records,
            "created_count": report.created_count,
            "succeeded": len(report.succeeded),
            "rejected": len(report.errors),
        }

        log_msg = f"Imported {report.created_count} Papers!"

        if report.errors:
            logger.warning(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})

    def log_reset(self, index_name: str, indexed: int, latency_ms: float) -> None:
        """Log a completed index rebuild."""
        log_data: dict[str, Any] = {
            "index": index_name,
            "indexed": indexed,
            "latency_ms": round(latency_ms, 2),
        }
        logger.info(f"Index reset: {indexed} papers indexed", extra={"structured": log_data})


structured_logger = StructuredSearchLogger()
