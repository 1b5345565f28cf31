"""Browser backend using crawl4ai's AsyncWebCrawler with Playwright.

This backend launches a real Chromium browser via Playwright for fetching
JavaScript-rendered pages. It is heavier than the HTTP backend but necessary
for single-page applications and dynamically loaded content.

Resource lifecycle:
    - On ``__aenter__``: Creates an ``AsyncWebCrawler`` with ``BrowserConfig``
      and calls ``start()`` to launch the Playwright browser process.
    - During scraping: Reuses the SAME browser instance for all pages.
      Only one navigation runs at a time; concurrent ``fetch()`` calls
      queue on a lock.
    - On ``__aexit__``: Calls ``close()`` to shut down the browser process.
      This is CRITICAL -- failing to close leaks browser processes.

Key crawl4ai classes used:
    - ``AsyncWebCrawler`` (from ``crawl4ai``)
    - ``BrowserConfig`` (from ``crawl4ai``)
    - ``CrawlerRunConfig``, ``CacheMode`` (from ``crawl4ai``, via ``acquisition``)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from schema_scraper.acquisition import create_run_config, page_html
from schema_scraper.exceptions import FetchError
from schema_scraper.models import ScraperConfig

__all__ = ["BrowserBackend"]

logger = logging.getLogger(__name__)


class BrowserBackend:
    """Browser-based backend using Playwright for JS-rendered pages.

    Usage::

        async with BrowserBackend(config) as backend:
            html = await backend.fetch(url)

    Attributes:
        config: The ScraperConfig controlling behavior.
        concurrent: Always False; the browser serves one navigation at a time.
        _crawler: The crawl4ai AsyncWebCrawler instance (created on enter).
    """

    concurrent = False

    def __init__(self, config: ScraperConfig) -> None:
        self.config = config
        self._crawler: Any = None  # AsyncWebCrawler, set in __aenter__
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> BrowserBackend:
        """Launch the browser. It stays alive until ``__aexit__``."""
        from crawl4ai import AsyncWebCrawler, BrowserConfig

        browser_config = BrowserConfig(
            headless=self.config.headless,
            verbose=self.config.verbose,
            enable_stealth=self.config.stealth,
            extra_args=list(self.config.browser_args),
        )
        self._crawler = AsyncWebCrawler(config=browser_config)
        await self._crawler.start()

        logger.info(
            "BrowserBackend started (headless=%s, %d extra arg(s))",
            self.config.headless,
            len(self.config.browser_args),
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Shut down the browser process, even if errors occurred."""
        if self._crawler:
            try:
                await self._crawler.close()
            except Exception:
                logger.warning("Error closing browser", exc_info=True)
            finally:
                self._crawler = None
        logger.info("BrowserBackend shut down")

    async def fetch(self, url: str) -> str:
        """Navigate to ``url``, wait for ``config.wait_until`` and return the HTML.

        Raises:
            FetchError: On navigation errors and timeouts.
            RuntimeError: If the backend has not been entered.
        """
        if self._crawler is None:
            raise RuntimeError("BrowserBackend must be used as an async context manager")

        run_config = create_run_config(self.config, wait_until=self.config.wait_until)
        async with self._lock:
            logger.info("[BROWSER] Scraping page: %s", url)
            try:
                result = await self._crawler.arun(url=url, config=run_config)
            except Exception as exc:
                raise FetchError(f"Navigation failed: {exc}", url=url) from exc
        return page_html(result, url)
