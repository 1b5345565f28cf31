"""Public API for the schema_scraper library.

This module provides the primary interface that users interact with:

- **Scraper**: The main class, used as an async context manager.
- **scrape_html()**: Resolve a schema against HTML you already have.
- **paginate()**: Expand a ``{page}`` URL template into page URLs.
- **scrape_sync()**: Synchronous wrapper for simple scripts.

Usage::

    from schema_scraper import Scraper

    schema = {
        "title": "{{h1 | text}}",
        "tags": [{"_scope": "li.tag", "name": "{{this | text | trim}}"}],
    }

    async with Scraper(backend="http") as s:
        # Single URL
        result = await s.scrape("https://example.com", schema)
        print(result.data)

        # Multiple URLs, results in input order
        for result in await s.scrape_many(["https://a.com", "https://b.com"], schema):
            print(result.data)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, List, Optional, Union

from schema_scraper.browser_backend import BrowserBackend
from schema_scraper.config import load_config
from schema_scraper.exceptions import ConfigError, FetchError
from schema_scraper.filters import FilterRegistry
from schema_scraper.http_backend import HTTPBackend
from schema_scraper.models import ScraperConfig, ScrapeResult
from schema_scraper.resolver import SchemaResolver
from schema_scraper.schema import SchemaNode, compile_schema
from schema_scraper.scopes.document import parse_document

__all__ = [
    "Scraper",
    "scrape_html",
    "paginate",
    "scrape_sync",
]

logger = logging.getLogger(__name__)

PAGE_PLACEHOLDER = "{page}"


# ---------------------------------------------------------------------------
# Result helpers
# ---------------------------------------------------------------------------


def _make_error_result(url: str, error: str) -> ScrapeResult:
    return ScrapeResult(url=url, success=False, data=None, error=error)


async def _resolve_page(
    resolver: SchemaResolver,
    html: str,
    schema: SchemaNode,
    url: str,
    parser: str = "html.parser",
) -> ScrapeResult:
    root = parse_document(html, parser)
    resolution = await resolver.resolve(root, schema)
    if resolution.warnings:
        logger.info("%s resolved with %d warning(s)", url or "<html>", len(resolution.warnings))
    return ScrapeResult(
        url=url,
        success=True,
        data=resolution.value,
        error=None,
        warnings=resolution.warnings,
    )


async def scrape_html(
    html: str,
    schema: Any,
    url: str = "",
    filters: Optional[FilterRegistry] = None,
    parser: str = "html.parser",
) -> ScrapeResult:
    """Resolve ``schema`` against a document you already hold.

    Args:
        html: Raw HTML.
        schema: JSON-like schema or compiled schema node.
        url: Source address, copied into the result.
        filters: Filter registry; defaults to the built-ins.
        parser: BeautifulSoup tree builder.

    Returns:
        A successful ScrapeResult carrying the resolved data and warnings.
    """
    resolver = SchemaResolver(filters=filters)
    return await _resolve_page(resolver, html, compile_schema(schema), url, parser)


def paginate(url_template: str, total: Union[int, Iterable[Any]]) -> List[str]:
    """Expand ``{page}`` in ``url_template`` once per page.

    Args:
        url_template: URL containing a ``{page}`` placeholder.
        total: Number of pages (pages ``1..total``) or an explicit iterable
               of page values.

    Returns:
        The list of page URLs, in order.

    Examples:
        >>> paginate("https://x.com/list/page/{page}/", 3)
        ['https://x.com/list/page/1/', 'https://x.com/list/page/2/', 'https://x.com/list/page/3/']
        >>> paginate("https://x.com/?p={page}", ["a", "b"])
        ['https://x.com/?p=a', 'https://x.com/?p=b']
    """
    if isinstance(total, int):
        pages: Iterable[Any] = range(1, total + 1)
    else:
        pages = total
    return [url_template.replace(PAGE_PLACEHOLDER, str(page)) for page in pages]


# ---------------------------------------------------------------------------
# Scraper class
# ---------------------------------------------------------------------------


class Scraper:
    """Main scraper class: fetch pages and resolve schemas against them.

    Must be used as an async context manager to ensure proper resource
    cleanup (HTTP sessions, browser processes).

    Args:
        backend: Acquisition backend -- ``"http"`` (default) for static pages,
                 ``"browser"`` for JS-rendered pages.
        filters: Filter registry used by every resolution; defaults to the
                 built-in filters.
        **config_kwargs: Additional configuration passed to ``ScraperConfig``.

    Examples:
        >>> async with Scraper(backend="browser", timeout=60000) as s:
        ...     result = await s.scrape("https://example.com", schema)
        ...     print(result.data)
    """

    def __init__(
        self,
        backend: str = "http",
        filters: Optional[FilterRegistry] = None,
        **config_kwargs: Any,
    ) -> None:
        if backend not in ("http", "browser"):
            raise ConfigError(
                f"Invalid backend '{backend}'. Must be 'http' or 'browser'."
            )

        config_kwargs["backend"] = backend
        self._config = load_config(**config_kwargs)
        self._resolver = SchemaResolver(filters=filters)
        self._backend: Optional[Union[HTTPBackend, BrowserBackend]] = None
        self._entered = False

    @property
    def config(self) -> ScraperConfig:
        """Return the current scraper configuration (read-only)."""
        return self._config

    async def __aenter__(self) -> Scraper:
        """Start the acquisition backend."""
        if self._config.backend == "browser":
            self._backend = BrowserBackend(self._config)
        else:
            self._backend = HTTPBackend(self._config)

        await self._backend.__aenter__()
        self._entered = True
        logger.info("Scraper started with %s backend", self._config.backend)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Shut down the backend, even if an error occurred."""
        if self._backend is not None:
            await self._backend.__aexit__(exc_type, exc_val, exc_tb)
            self._backend = None
        self._entered = False
        logger.info("Scraper shut down")

    def _ensure_entered(self) -> Union[HTTPBackend, BrowserBackend]:
        if not self._entered or self._backend is None:
            raise RuntimeError(
                "Scraper must be used as an async context manager: "
                "'async with Scraper() as s: ...'"
            )
        return self._backend

    # -------------------------------------------------------------------
    # Single-URL mode
    # -------------------------------------------------------------------

    async def scrape(self, url: str, schema: Any) -> ScrapeResult:
        """Fetch one URL and resolve ``schema`` against it.

        Acquisition failures do not raise; they produce a ScrapeResult with
        ``success=False``.

        Raises:
            RuntimeError: If the scraper is not in a context manager.
        """
        backend = self._ensure_entered()
        return await self._scrape_compiled(backend, url, compile_schema(schema))

    async def _scrape_compiled(
        self,
        backend: Union[HTTPBackend, BrowserBackend],
        url: str,
        schema: SchemaNode,
    ) -> ScrapeResult:
        try:
            html = await backend.fetch(url)
        except FetchError as exc:
            logger.warning("Fetch failed for %s: %s", url, exc)
            return _make_error_result(url, str(exc))

        try:
            return await _resolve_page(self._resolver, html, schema, url, self._config.parser)
        except Exception as exc:
            logger.error("Unexpected error resolving %s: %s", url, exc, exc_info=True)
            return _make_error_result(url, str(exc))

    # -------------------------------------------------------------------
    # Multi-URL mode
    # -------------------------------------------------------------------

    async def scrape_many(self, urls: List[str], schema: Any) -> List[ScrapeResult]:
        """Scrape several URLs against one schema.

        Results come back in the order of ``urls``. On the HTTP backend pages
        are fetched concurrently, at most ``max_concurrent`` at a time; on the
        browser backend they are fetched one after another. A failed page
        yields a failed result without affecting its siblings.

        Raises:
            RuntimeError: If the scraper is not in a context manager.
        """
        backend = self._ensure_entered()
        compiled = compile_schema(schema)
        if not urls:
            return []

        logger.info(
            "scrape_many: %d URL(s), %s",
            len(urls),
            "concurrent" if backend.concurrent else "sequential",
        )

        if not backend.concurrent:
            results: List[ScrapeResult] = []
            for url in urls:
                results.append(await self._scrape_compiled(backend, url, compiled))
            return results

        semaphore = asyncio.Semaphore(self._config.max_concurrent)

        async def _bounded(url: str) -> ScrapeResult:
            async with semaphore:
                return await self._scrape_compiled(backend, url, compiled)

        return list(await asyncio.gather(*(_bounded(url) for url in urls)))


# ---------------------------------------------------------------------------
# Module-level sync helper
# ---------------------------------------------------------------------------


def scrape_sync(
    urls: Union[str, List[str]],
    schema: Any,
    backend: str = "http",
    **config_kwargs: Any,
) -> Union[ScrapeResult, List[ScrapeResult]]:
    """Synchronous convenience function.

    A single URL returns one ScrapeResult; a list returns a list in the same
    order. For repeated use, prefer the async ``Scraper`` class.

    Examples:
        >>> from schema_scraper import scrape_sync
        >>> result = scrape_sync("https://example.com", {"title": "{{title | text}}"})  # doctest: +SKIP
        >>> print(result.data)  # doctest: +SKIP
    """

    async def _run() -> Union[ScrapeResult, List[ScrapeResult]]:
        async with Scraper(backend=backend, **config_kwargs) as s:
            if isinstance(urls, str):
                return await s.scrape(urls, schema)
            return await s.scrape_many(list(urls), schema)

    return asyncio.run(_run())
