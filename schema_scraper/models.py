"""Pydantic data models for the schema_scraper library.

This module defines the core data structures used throughout the library:

- **ResolutionWarning**: One recoverable problem met while resolving a schema.
- **Resolution**: A resolved value plus the warnings collected on the way.
- **ScrapeResult**: The result of scraping a single URL against a schema.
- **ScraperConfig**: Full configuration for the scraper (backend, concurrency, browser).

All models use Pydantic v2.
"""

from __future__ import annotations

import os
import shlex
from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "ResolutionWarning",
    "Resolution",
    "ScrapeResult",
    "ScraperConfig",
    "DEFAULT_BROWSER_ARGS",
    "BROWSER_ARGS_ENV",
]

DEFAULT_BROWSER_ARGS: tuple[str, ...] = ("--disable-dev-shm-usage", "--no-sandbox")
"""Chromium flags that let the browser run inside minimal containers."""

BROWSER_ARGS_ENV: str = "SCHEMA_SCRAPER_BROWSER_ARGS"
"""Environment variable overriding the default browser flags (space separated)."""


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class ResolutionWarning(BaseModel):
    """A recoverable failure met while resolving a schema.

    Attributes:
        path: Location in the output, e.g. ``"tags[1].name"``. Empty for the root.
        expression: The expression source that was being resolved, if any.
        filter: Name of the filter that failed, if the failure was a filter.
        message: Human-readable description.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(default="", description="Output location of the failing field")
    expression: Optional[str] = Field(default=None, description="Expression being resolved")
    filter: Optional[str] = Field(default=None, description="Filter that failed")
    message: str = Field(..., description="What went wrong")


class Resolution(BaseModel):
    """The outcome of resolving a schema against a scope.

    Resolution never aborts on query or filter failures. The value holds
    whatever could be resolved and ``warnings`` lists what degraded.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any = Field(default=None, description="Resolved value, shaped like the schema")
    warnings: List[ResolutionWarning] = Field(
        default_factory=list,
        description="Recoverable failures, in resolution order",
    )

    @property
    def ok(self) -> bool:
        """Return True if nothing degraded."""
        return not self.warnings


# ---------------------------------------------------------------------------
# ScrapeResult
# ---------------------------------------------------------------------------


class ScrapeResult(BaseModel):
    """Result of scraping a single URL against a schema.

    Returned by ``scrape()`` and, one per URL, by ``scrape_many()``.

    Attributes:
        url: The URL that was scraped.
        success: Whether the page was acquired and resolved.
        data: The resolved value, shaped like the schema. None on failure.
        error: Error message if acquisition failed, None otherwise.
        warnings: Recoverable resolution failures (unknown filters, bad selectors).
        timestamp: ISO 8601 timestamp of when the result was produced.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="The URL that was scraped")
    success: bool = Field(..., description="Whether scraping succeeded")
    data: Any = Field(default=None, description="Resolved data, or None on failure")
    error: Optional[str] = Field(default=None, description="Error message if scraping failed")
    warnings: List[ResolutionWarning] = Field(
        default_factory=list,
        description="Recoverable resolution failures",
    )
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="ISO 8601 timestamp of result creation",
    )


# ---------------------------------------------------------------------------
# ScraperConfig
# ---------------------------------------------------------------------------


class ScraperConfig(BaseModel):
    """Configuration for the scraper.

    Controls backend selection, concurrency limits, timeouts and browser
    behaviour. Sensible defaults are provided for all fields.

    Attributes:
        backend: Which acquisition backend to use. ``"http"`` for fast
                 static page fetching, ``"browser"`` for JS-rendered pages.
        max_concurrent: Maximum concurrent page fetches in ``scrape_many``.
                        Only used by backends that allow concurrency.
        timeout: Page load timeout in milliseconds.
        headless: Whether to run the browser in headless mode.
        stealth: Whether to enable anti-bot stealth mode (browser only).
        wait_until: Navigation event the browser waits for before reading
                    the page.
        browser_args: Extra command-line flags for the browser process.
                      Defaults to ``SCHEMA_SCRAPER_BROWSER_ARGS`` or
                      ``--disable-dev-shm-usage --no-sandbox``.
        parser: BeautifulSoup tree builder used to parse documents.
        verbose: Whether to enable verbose logging from crawl4ai.
    """

    model_config = ConfigDict(validate_default=True)

    backend: Literal["http", "browser"] = Field(
        default="http",
        description="Acquisition backend: 'http' for static pages, 'browser' for JS-rendered",
    )
    max_concurrent: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum concurrent fetches (HTTP backend only)",
    )
    timeout: int = Field(
        default=30000,
        ge=1000,
        description="Page load timeout in milliseconds",
    )
    headless: bool = Field(
        default=True,
        description="Run browser in headless mode (browser backend only)",
    )
    stealth: bool = Field(
        default=False,
        description="Enable anti-bot stealth mode (browser backend only)",
    )
    wait_until: Literal["domcontentloaded", "load", "networkidle", "commit"] = Field(
        default="networkidle",
        description="Navigation event to wait for (browser backend only)",
    )
    browser_args: List[str] = Field(
        default_factory=list,
        description="Extra browser flags (browser backend only)",
    )
    parser: str = Field(
        default="html.parser",
        min_length=1,
        description="BeautifulSoup tree builder for parsing pages",
    )
    verbose: bool = Field(
        default=False,
        description="Enable verbose logging from crawl4ai internals",
    )

    @field_validator("browser_args", mode="before")
    @classmethod
    def load_browser_args_from_env(cls, v: List[str]) -> List[str]:
        """If no browser flags are provided, read them from the environment."""
        if v:
            return v

        raw = os.environ.get(BROWSER_ARGS_ENV)
        if raw is not None:
            return shlex.split(raw)
        return list(DEFAULT_BROWSER_ARGS)
