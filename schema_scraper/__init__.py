"""schema_scraper -- scrape structured data by declaring the shape you want.

Quick start::

    from schema_scraper import Scraper

    schema = {
        "title": "{{h1 | text}}",
        "tags": [{"_scope": "li.tag", "name": "{{this | text | trim}}"}],
    }

    # Async usage (recommended)
    async with Scraper() as s:
        result = await s.scrape("https://example.com", schema)
        print(result.data)

    # Sync usage (simple scripts)
    from schema_scraper import scrape_sync
    result = scrape_sync("https://example.com", schema)

Schemas are plain values. String leaves embed ``{{query | filter(arg)}}``
expressions; ``[{"_scope": selector, ...}]`` builds one element per matched
node; functions receive the current scope; everything else is copied.

Two data sources:

- **Documents**: HTML fetched over HTTP (default) or rendered in a
  Playwright browser, queried with CSS selectors.
- **Records**: plain nested values mapped with ``Mapper`` and
  ``__path__`` expressions.
"""

from schema_scraper.api import Scraper, paginate, scrape_html, scrape_sync
from schema_scraper.config import load_config
from schema_scraper.exceptions import (
    ConfigError,
    FetchError,
    FilterError,
    QueryError,
    SchemaError,
    ScraperError,
    UnknownFilterError,
)
from schema_scraper.expressions import DUNDER, MUSTACHE, parse_expressions
from schema_scraper.filters import FilterRegistry, default_filters
from schema_scraper.mapper import Mapper
from schema_scraper.models import (
    Resolution,
    ResolutionWarning,
    ScraperConfig,
    ScrapeResult,
)
from schema_scraper.resolver import SchemaResolver, resolve
from schema_scraper.schema import compile_schema
from schema_scraper.scopes import NodeScope, RecordScope, Scope, parse_document

__all__ = [
    # Primary API
    "Scraper",
    "scrape_html",
    "scrape_sync",
    "paginate",
    "Mapper",
    # Engine
    "SchemaResolver",
    "resolve",
    "compile_schema",
    "parse_expressions",
    "MUSTACHE",
    "DUNDER",
    "FilterRegistry",
    "default_filters",
    # Scopes
    "Scope",
    "NodeScope",
    "RecordScope",
    "parse_document",
    # Models
    "Resolution",
    "ResolutionWarning",
    "ScrapeResult",
    "ScraperConfig",
    # Config
    "load_config",
    # Exceptions
    "ScraperError",
    "FetchError",
    "ConfigError",
    "SchemaError",
    "QueryError",
    "FilterError",
    "UnknownFilterError",
]

__version__ = "0.1.0"
