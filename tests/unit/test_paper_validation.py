"""Unit tests for paper validation and raw import records."""

from collections.abc import Callable
from datetime import date
from typing import Any

import pytest

from backend.paper_search.errors import ImportFormatError, ValidationError
from backend.paper_search.ingest.importer import parse_records
from backend.paper_search.models.paper import SHORT_MAX, RawRecord, validate_paper

RecordFactory = Callable[..., dict[str, Any]]


def test_valid_record_passes(make_record: RecordFactory) -> None:
    """Test that a complete record validates and parses the date."""
    fields = validate_paper(make_record())

    assert fields.published_at == date(2024, 3, 12)
    assert fields.resolution is None


def test_stored_value_is_not_trimmed(make_record: RecordFactory) -> None:
    """Test that presence checks trim but the value is kept as given."""
    fields = validate_paper(make_record(name="  Antrag  "))

    assert fields.name == "  Antrag  "


@pytest.mark.parametrize(
    "field", ["name", "url", "reference", "body", "content", "originator", "paper_type"]
)
def test_missing_required_field_fails_presence(make_record: RecordFactory, field: str) -> None:
    """Test that each required field reports presence when missing."""
    record = make_record()
    del record[field]

    with pytest.raises(ValidationError) as exc_info:
        validate_paper(record)

    assert exc_info.value.field == field
    assert exc_info.value.rule == "presence"


@pytest.mark.parametrize("value", ["", "   ", None])
def test_blank_required_field_fails_presence(make_record: RecordFactory, value: Any) -> None:
    """Test that blank and null values fail presence."""
    with pytest.raises(ValidationError) as exc_info:
        validate_paper(make_record(content=value))

    assert exc_info.value.field == "content"
    assert exc_info.value.rule == "presence"


def test_overlong_field_fails_length(make_record: RecordFactory) -> None:
    """Test the length bound."""
    with pytest.raises(ValidationError) as exc_info:
        validate_paper(make_record(reference="x" * (SHORT_MAX + 1)))

    assert exc_info.value.field == "reference"
    assert exc_info.value.rule == "length"


@pytest.mark.parametrize("value", ["13/45/2020", "2020-02-30", "yesterday", 20200101])
def test_invalid_date_fails_date_rule(make_record: RecordFactory, value: Any) -> None:
    """Test that a present but invalid date is rejected, not dropped."""
    with pytest.raises(ValidationError) as exc_info:
        validate_paper(make_record(published_at=value))

    assert exc_info.value.field == "published_at"
    assert exc_info.value.rule == "date"


def test_missing_date_fails_presence(make_record: RecordFactory) -> None:
    """Test that published_at is required."""
    record = make_record()
    del record["published_at"]

    with pytest.raises(ValidationError) as exc_info:
        validate_paper(record)

    assert exc_info.value.field == "published_at"
    assert exc_info.value.rule == "presence"


def test_non_string_field_fails_type(make_record: RecordFactory) -> None:
    """Test that values are taken as-is, not coerced."""
    with pytest.raises(ValidationError) as exc_info:
        validate_paper(make_record(reference=815))

    assert exc_info.value.field == "reference"
    assert exc_info.value.rule == "type"


def test_raw_record_distinguishes_absent_from_empty() -> None:
    """Test that only keys present in the input are returned."""
    record = RawRecord.model_validate(
        {"url": "u1", "name": "New Name", "resolution": "", "body": None}
    )

    assert record.present_fields() == {
        "url": "u1",
        "name": "New Name",
        "resolution": "",
        "body": None,
    }


def test_raw_record_ignores_unknown_keys() -> None:
    """Test that unknown keys are dropped."""
    record = RawRecord.model_validate({"url": "u1", "id": 99, "votes": 12})

    assert record.present_fields() == {"url": "u1"}


def test_parse_records_reads_array() -> None:
    """Test parsing a JSON array of records."""
    records = parse_records('[{"url": "u1", "name": "A"}, {"url": "u2"}]')

    assert [r.present_fields() for r in records] == [{"url": "u1", "name": "A"}, {"url": "u2"}]


@pytest.mark.parametrize("payload", ["not json", '{"url": "u1"}', "[1, 2]"])
def test_parse_records_rejects_bad_payload(payload: str) -> None:
    """Test that malformed payloads raise ImportFormatError."""
    with pytest.raises(ImportFormatError):
        parse_records(payload)
