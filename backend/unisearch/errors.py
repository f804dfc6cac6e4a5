class SearchError(Exception):
    """Base class for errors the search engine reports to its callers."""


class SearchValidationError(SearchError, ValueError):
    """Rejected input; raised before any provider runs."""


class NotFoundError(SearchError):
    """The record does not exist or does not belong to the caller."""


class ConflictError(SearchError):
    """A uniqueness rule was violated, e.g. a duplicate saved-search name."""
