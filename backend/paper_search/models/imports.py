"""Import report models."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ImportSuccess(BaseModel):
    """A record that was stored and indexed."""

    index: int  # 0-based position in the batch
    url: str
    paper_id: int
    action: Literal["created", "updated"]


class ImportFailure(BaseModel):
    """A record rejected by validation."""

    index: int
    record: dict[str, Any]
    field: str
    rule: str
    message: str


class ImportReport(BaseModel):
    """Outcome of one import batch.

    created_count is count-after minus count-before, not a per-record tally.
    """

    created_count: int
    succeeded: list[ImportSuccess] = Field(default_factory=list)
    errors: list[ImportFailure] = Field(default_factory=list)
