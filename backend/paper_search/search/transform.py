"""Index transform - derive the indexed document from a stored paper."""

import re

from backend.paper_search.models.paper import IndexedDocument, Paper

# "1. ", "2. " ... one digit, a period, whitespace
ORIGINATOR_SEPARATOR = re.compile(r"\d\.\s")


def split_originator(composite: str) -> list[str]:
    """Split a composite originator into atomic originator names.

    "1. Committee A 2. Committee B" -> ["Committee A", "Committee B"].
    Fragments are stripped and blank ones dropped. Input without numbering
    comes back as a single stripped element; the result is never empty.

    Args:
        composite: Stored originator value

    Returns:
        Originator names in original order
    """
    fragments = [
        fragment.strip() for fragment in ORIGINATOR_SEPARATOR.split(composite) if fragment.strip()
    ]
    if not fragments:
        return [composite.strip()]
    return fragments


def to_indexed_document(paper: Paper) -> IndexedDocument:
    """Copy every paper field and replace originator with its split form."""
    data = paper.model_dump()
    data["originator"] = split_originator(paper.originator)
    return IndexedDocument(**data)
