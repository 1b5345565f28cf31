"""HTTP backend using crawl4ai's AsyncHTTPCrawlerStrategy.

This backend uses HTTP requests (no browser) for fast, lightweight fetching
of static/server-rendered pages. It is suitable for pages that do not require
JavaScript execution.

Resource lifecycle:
    - On ``__aenter__``: Creates an ``AsyncWebCrawler`` with
      ``AsyncHTTPCrawlerStrategy`` and calls ``start()`` to initialize
      the HTTP session.
    - During scraping: Reuses the same session for all requests. Fetches
      may run concurrently.
    - On ``__aexit__``: Calls ``close()`` to cleanly shut down the session.

Key crawl4ai classes used:
    - ``AsyncHTTPCrawlerStrategy`` (from ``crawl4ai.async_crawler_strategy``)
    - ``HTTPCrawlerConfig`` (from ``crawl4ai``)
    - ``AsyncWebCrawler`` (from ``crawl4ai``)
    - ``CrawlerRunConfig``, ``CacheMode`` (from ``crawl4ai``, via ``acquisition``)
"""

from __future__ import annotations

import logging
from typing import Any

from schema_scraper.acquisition import create_run_config, page_html
from schema_scraper.exceptions import FetchError
from schema_scraper.models import ScraperConfig

__all__ = ["HTTPBackend"]

logger = logging.getLogger(__name__)


class HTTPBackend:
    """HTTP-only backend for static pages.

    Usage::

        async with HTTPBackend(config) as backend:
            html = await backend.fetch(url)

    Attributes:
        config: The ScraperConfig controlling behavior.
        concurrent: Always True; fetches can overlap.
        _crawler: The crawl4ai AsyncWebCrawler instance (created on enter).
    """

    concurrent = True

    def __init__(self, config: ScraperConfig) -> None:
        self.config = config
        self._crawler: Any = None  # AsyncWebCrawler, set in __aenter__

    async def __aenter__(self) -> HTTPBackend:
        """Start the HTTP session."""
        from crawl4ai import AsyncWebCrawler, HTTPCrawlerConfig
        from crawl4ai.async_crawler_strategy import AsyncHTTPCrawlerStrategy

        http_config = HTTPCrawlerConfig()
        http_strategy = AsyncHTTPCrawlerStrategy(browser_config=http_config)
        self._crawler = AsyncWebCrawler(crawler_strategy=http_strategy)
        await self._crawler.start()

        logger.info("HTTPBackend started (session open)")
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Close the HTTP session, even if errors occurred during scraping."""
        if self._crawler:
            try:
                await self._crawler.close()
            except Exception:
                logger.warning("Error closing crawler session", exc_info=True)
            finally:
                self._crawler = None
        logger.info("HTTPBackend shut down")

    async def fetch(self, url: str) -> str:
        """Fetch ``url`` and return its HTML.

        Raises:
            FetchError: On HTTP errors, timeouts and connection failures.
            RuntimeError: If the backend has not been entered.
        """
        if self._crawler is None:
            raise RuntimeError("HTTPBackend must be used as an async context manager")

        logger.info("[RAW-HTML] Scraping page: %s", url)
        run_config = create_run_config(self.config)
        try:
            result = await self._crawler.arun(url=url, config=run_config)
        except Exception as exc:
            raise FetchError(f"Request failed: {exc}", url=url) from exc
        return page_html(result, url)
