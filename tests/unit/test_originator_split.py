"""Unit tests for the originator split and indexed document transform."""

from datetime import date, datetime

import pytest

from backend.paper_search.models.paper import Paper
from backend.paper_search.search.transform import split_originator, to_indexed_document


@pytest.mark.parametrize(
    "composite",
    [
        "Ausschuss für Umwelt",
        "Stadtrat",
        "Bericht zu Abschnitt 2.5 der Satzung",
        "Oberbürgermeister",
    ],
)
def test_unnumbered_originator_is_single_element(composite: str) -> None:
    """Test that input without numbering comes back as one element."""
    assert split_originator(composite) == [composite]


def test_unnumbered_originator_is_trimmed() -> None:
    """Test that the single-element result equals the trimmed input."""
    assert split_originator("  Stadtrat \n") == ["Stadtrat"]


def test_numbered_list_splits_in_order() -> None:
    """Test that '1. A 2. B 3. C' yields ['A', 'B', 'C']."""
    assert split_originator("1. A 2. B 3. C") == ["A", "B", "C"]


def test_numbered_committees_split_without_empty_fragments() -> None:
    """Test that real committee lists split cleanly."""
    composite = "1. Ausschuss für Bildung 2. Bezirksbeirat Mitte"

    assert split_originator(composite) == ["Ausschuss für Bildung", "Bezirksbeirat Mitte"]


def test_prefix_text_before_numbering_is_kept() -> None:
    """Test that text before the first number is its own fragment."""
    assert split_originator("Fraktion X 1. Ausschuss A") == ["Fraktion X", "Ausschuss A"]


def test_extra_whitespace_after_number_is_stripped() -> None:
    """Test that fragments are stripped."""
    assert split_originator("1.  Ausschuss A  2.\tAusschuss B ") == ["Ausschuss A", "Ausschuss B"]


def test_only_numbering_never_returns_empty() -> None:
    """Test that a composite with no names still yields one element."""
    result = split_originator("1. ")

    assert result == ["1."]


def test_empty_composite_never_returns_empty() -> None:
    """Test the degenerate empty input."""
    assert split_originator("") == [""]


@pytest.fixture
def paper() -> Paper:
    """Create a stored paper."""
    return Paper(
        id=7,
        name="Haushaltssatzung 2025",
        url="https://ratsinfo.example.org/paper/7",
        reference="2025/0001",
        body="Vorlage",
        content="Der Stadtrat beschließt die Haushaltssatzung.",
        originator="1. Kämmerei 2. Finanzausschuss",
        paper_type="Beschlussvorlage",
        published_at=date(2025, 1, 15),
        resolution=None,
        created_at=datetime(2025, 1, 15, 9, 30),
        updated_at=datetime(2025, 1, 16, 10, 0),
    )


def test_indexed_document_splits_originator(paper: Paper) -> None:
    """Test that the indexed originator is the split list."""
    document = to_indexed_document(paper)

    assert document.originator == ["Kämmerei", "Finanzausschuss"]


def test_indexed_document_changes_only_originator(paper: Paper) -> None:
    """Test that every other field is copied unchanged."""
    document = to_indexed_document(paper)

    source = paper.model_dump()
    indexed = document.model_dump()
    source.pop("originator")
    indexed.pop("originator")

    assert indexed == source


def test_indexed_document_is_pure(paper: Paper) -> None:
    """Test that the source paper is untouched and results are repeatable."""
    first = to_indexed_document(paper)
    second = to_indexed_document(paper)

    assert first == second
    assert paper.originator == "1. Kämmerei 2. Finanzausschuss"


def test_indexed_document_json_dump_serializes_dates(paper: Paper) -> None:
    """Test the JSON form sent to the engine."""
    data = to_indexed_document(paper).model_dump(mode="json")

    assert data["published_at"] == "2025-01-15"
    assert data["id"] == 7
