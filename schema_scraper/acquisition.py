"""Helpers shared by the acquisition backends.

Both ``http_backend`` and ``browser_backend`` import from this module for:

- **Run configuration**: building the crawl4ai ``CrawlerRunConfig`` for a fetch
- **Result checking**: turning a crawl4ai ``CrawlResult`` into page HTML or a
  ``FetchError``

crawl4ai is imported lazily so the resolution engine and its tests never
need it.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from schema_scraper.exceptions import FetchError
from schema_scraper.models import ScraperConfig

__all__ = [
    "create_run_config",
    "page_html",
]

logger = logging.getLogger(__name__)


def create_run_config(
    config: ScraperConfig,
    *,
    wait_until: Optional[str] = None,
) -> Any:
    """Create a crawl4ai CrawlerRunConfig for a plain page fetch.

    Args:
        config: ScraperConfig with timeout and verbosity.
        wait_until: Navigation event to wait for (browser fetches only).

    Returns:
        A ``CrawlerRunConfig`` instance ready for use with ``arun()``.
    """
    from crawl4ai import CacheMode, CrawlerRunConfig

    kwargs: dict[str, Any] = {
        "cache_mode": CacheMode.BYPASS,
        "page_timeout": config.timeout,
        "verbose": config.verbose,
    }
    if wait_until is not None:
        kwargs["wait_until"] = wait_until
    return CrawlerRunConfig(**kwargs)


def page_html(result: Any, url: str) -> str:
    """Return the HTML of a successful crawl result.

    Raises:
        FetchError: If the crawl failed or returned no HTML.
    """
    status_code = getattr(result, "status_code", None)
    if not getattr(result, "success", False):
        error_msg = getattr(result, "error_message", None) or "Unknown fetch error"
        raise FetchError(error_msg, url=url, status_code=status_code)

    html = getattr(result, "html", None)
    if not html:
        raise FetchError("Page returned no HTML", url=url, status_code=status_code)

    logger.debug("Fetched %s (%d chars, status=%s)", url, len(html), status_code)
    return html
