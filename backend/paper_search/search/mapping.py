"""Fixed index mapping for papers."""

from typing import Any


def paper_index_mapping(analyzer: str = "german") -> dict[str, Any]:
    """Return index settings and mappings.

    Single shard; name, content and resolution are analyzed full text,
    paper_type and originator are exact keyword terms. Other fields stay
    in _source without their own mapping.

    Args:
        analyzer: Language analyzer for the full-text fields
    """
    return {
        "settings": {"number_of_shards": 1},
        "mappings": {
            "dynamic": False,
            "properties": {
                "name": {"type": "text", "analyzer": analyzer},
                "content": {"type": "text", "analyzer": analyzer},
                "resolution": {"type": "text", "analyzer": analyzer},
                "paper_type": {"type": "keyword"},
                "originator": {"type": "keyword"},
            },
        },
    }
