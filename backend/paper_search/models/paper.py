"""Paper models - write contract, stored paper, indexed document, raw import record."""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from backend.paper_search.errors import ValidationError

# Length bounds
SHORT_MAX = 255
URL_MAX = 2048
ORIGINATOR_MAX = 2000
LONG_MAX = 1_000_000

REQUIRED_FIELDS = (
    "name",
    "url",
    "reference",
    "body",
    "content",
    "originator",
    "paper_type",
    "published_at",
)
OPTIONAL_FIELDS = ("resolution",)
PAPER_FIELDS = REQUIRED_FIELDS + OPTIONAL_FIELDS

# pydantic error type -> rule reported to callers
_RULES = {
    "missing": "presence",
    "presence": "presence",
    "string_too_long": "length",
    "date": "date",
    "string_type": "type",
}


class PaperFields(BaseModel):
    """Writable attributes of a paper, validated before every store write."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., max_length=SHORT_MAX)
    url: str = Field(..., max_length=URL_MAX)
    reference: str = Field(..., max_length=SHORT_MAX)
    body: str = Field(..., max_length=SHORT_MAX)
    content: str = Field(..., max_length=LONG_MAX)
    originator: str = Field(..., max_length=ORIGINATOR_MAX)
    paper_type: str = Field(..., max_length=SHORT_MAX)
    published_at: date
    resolution: str | None = Field(None, max_length=LONG_MAX)

    @field_validator(*REQUIRED_FIELDS[:-1], mode="before")
    @classmethod
    def validate_present(cls, v: Any, info: ValidationInfo) -> Any:
        """Reject null and blank values; the stored value is not trimmed."""
        if v is None or (isinstance(v, str) and not v.strip()):
            raise PydanticCustomError(
                "presence", "{field} can't be blank", {"field": info.field_name}
            )
        return v

    @field_validator("published_at", mode="before")
    @classmethod
    def validate_published_at(cls, v: Any) -> date:
        """Accept dates and ISO-8601 date strings only."""
        if v is None or (isinstance(v, str) and not v.strip()):
            raise PydanticCustomError("presence", "published_at can't be blank")
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, date):
            return v
        if isinstance(v, str):
            try:
                return date.fromisoformat(v.strip())
            except ValueError:
                pass
        raise PydanticCustomError(
            "date", "published_at is not a valid date: {value}", {"value": str(v)}
        )


def validate_paper(attrs: Mapping[str, Any]) -> PaperFields:
    """Validate candidate attributes, raising on the first violated rule.

    Args:
        attrs: Candidate field values keyed by field name

    Returns:
        Validated PaperFields

    Raises:
        ValidationError: With the failing field and rule
    """
    try:
        return PaperFields.model_validate(dict(attrs))
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "base"
        rule = _RULES.get(error["type"], error["type"])
        raise ValidationError(field, rule, error["msg"]) from e


class Paper(PaperFields):
    """A paper as held by the store of record."""

    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def fields(self) -> dict[str, Any]:
        """Return the writable attributes only."""
        return self.model_dump(include=set(PAPER_FIELDS))


class IndexedDocument(BaseModel):
    """Search-engine representation of a paper.

    Identical to Paper except that originator holds the atomic originator
    names extracted from the composite field. Never the source of truth.
    """

    id: int
    name: str
    url: str
    reference: str
    body: str
    content: str
    originator: list[str]
    paper_type: str
    published_at: date
    resolution: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RawRecord(BaseModel):
    """Loosely typed import record.

    A key missing from the input is absent (existing values persist on
    update); a key present with an empty or null value overwrites.
    model_fields_set tells the two apart.
    """

    model_config = ConfigDict(extra="ignore")

    name: Any = None
    url: Any = None
    reference: Any = None
    body: Any = None
    content: Any = None
    originator: Any = None
    paper_type: Any = None
    published_at: Any = None
    resolution: Any = None

    def present_fields(self) -> dict[str, Any]:
        """Return only the fields that were present in the input."""
        return {
            name: getattr(self, name) for name in PAPER_FIELDS if name in self.model_fields_set
        }
