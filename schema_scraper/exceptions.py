"""Exception hierarchy for the schema_scraper library.

All exceptions inherit from ScraperError, which inherits from Exception.
This allows callers to catch all scraper-related errors with a single
``except ScraperError`` clause, or to catch specific categories.

Hierarchy::

    ScraperError
    +-- FetchError          -- page fetch failures (HTTP errors, timeouts, navigation)
    +-- ConfigError         -- invalid configuration (bad backend name, unknown fields)
    +-- SchemaError         -- a schema value that cannot be compiled into nodes
    +-- QueryError          -- a query the scope adapter cannot evaluate (bad selector)
    +-- FilterError         -- a filter that failed while running a pipeline
        +-- UnknownFilterError -- no filter registered under the requested name

Only ``FetchError`` ever reaches the caller of a scrape. Query and filter
errors are contained by the resolver and reported as warnings.
"""

from __future__ import annotations

__all__ = [
    "ScraperError",
    "FetchError",
    "ConfigError",
    "SchemaError",
    "QueryError",
    "FilterError",
    "UnknownFilterError",
]


class ScraperError(Exception):
    """Base exception for all schema_scraper errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (URL, query, etc.).
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class FetchError(ScraperError):
    """Raised when a page cannot be acquired.

    Covers HTTP errors, connection timeouts, browser navigation failures and
    any other issue that prevents the page content from being retrieved.
    The resolver never sees this error; the page result is marked failed.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ) -> None:
        combined = dict(details or {})
        if url is not None:
            combined["url"] = url
        if status_code is not None:
            combined["status_code"] = status_code
        super().__init__(message, combined)
        self.url = url
        self.status_code = status_code


class ConfigError(ScraperError):
    """Raised when the scraper configuration is invalid.

    Examples:
        - Backend set to "unknown" instead of "http" or "browser"
        - ``load_config()`` called with a field that does not exist
    """

    pass


class SchemaError(ScraperError):
    """Raised when a schema value cannot be turned into schema nodes."""

    pass


class QueryError(ScraperError):
    """Raised by a scope adapter when a query cannot be evaluated.

    A query that simply matches nothing is NOT an error; this is for
    malformed queries such as an invalid CSS selector.
    """

    def __init__(
        self,
        message: str,
        query: str | None = None,
        details: dict | None = None,
    ) -> None:
        combined = dict(details or {})
        if query is not None:
            combined["query"] = query
        super().__init__(message, combined)
        self.query = query


class FilterError(ScraperError):
    """Raised when a filter cannot be applied to the running value."""

    def __init__(
        self,
        message: str,
        filter_name: str | None = None,
        details: dict | None = None,
    ) -> None:
        combined = dict(details or {})
        if filter_name is not None:
            combined["filter"] = filter_name
        super().__init__(message, combined)
        self.filter_name = filter_name


class UnknownFilterError(FilterError):
    """Raised when a pipeline names a filter that is not registered."""

    def __init__(self, filter_name: str) -> None:
        super().__init__(f"Unknown filter {filter_name!r}", filter_name=filter_name)
