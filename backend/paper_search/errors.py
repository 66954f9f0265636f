"""Error taxonomy shared by the store, the engine adapters and the importer."""


class PaperSearchError(Exception):
    """Base class for all paper search errors."""


class ValidationError(PaperSearchError):
    """A paper violates a presence, length, uniqueness, date or type rule.

    Carries the offending field and the violated rule so callers can report
    exactly which field failed.
    """

    def __init__(self, field: str, rule: str, message: str | None = None) -> None:
        self.field = field
        self.rule = rule
        self.message = message or f"{field} violates {rule}"
        super().__init__(self.message)


class NotFoundError(PaperSearchError):
    """Lookup by key found nothing."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"No paper found for {key!r}")


class QueryError(PaperSearchError):
    """The search engine failed to execute a query."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SearchIndexError(PaperSearchError):
    """The search engine failed to create the index or write documents."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ImportFormatError(PaperSearchError):
    """An import payload is not a JSON array of objects."""
