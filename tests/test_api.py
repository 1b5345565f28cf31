"""Tests for the public API, using an in-memory backend."""

from __future__ import annotations

import asyncio

import pytest

import schema_scraper.api as api
from schema_scraper.api import Scraper, paginate, scrape_html, scrape_sync
from schema_scraper.exceptions import ConfigError, FetchError

PAGES = {
    "https://x.com/1": "<h1>One</h1><li class='tag'>a</li>",
    "https://x.com/2": "<h1>Two</h1>",
    "https://x.com/3": "<h1>Three</h1><li class='tag'>b</li><li class='tag'>c</li>",
}

SCHEMA = {
    "title": "{{h1 | text}}",
    "tags": [{"_scope": "li.tag", "name": "{{this | text}}"}],
}


class FakeBackend:
    """Serves pages from a dict; unknown URLs fail like a 404."""

    concurrent = True
    instances: list = []

    def __init__(self, config) -> None:
        self.config = config
        self.fetched: list = []
        self.entered = False
        self.exited = False
        FakeBackend.instances.append(self)

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, *exc) -> None:
        self.exited = True

    async def fetch(self, url: str) -> str:
        await asyncio.sleep(0)
        self.fetched.append(url)
        if url not in PAGES:
            raise FetchError("HTTP 404", url=url, status_code=404)
        return PAGES[url]


class SequentialBackend(FakeBackend):
    concurrent = False


@pytest.fixture(autouse=True)
def fake_backends(monkeypatch):
    FakeBackend.instances = []
    monkeypatch.setattr(api, "HTTPBackend", FakeBackend)
    monkeypatch.setattr(api, "BrowserBackend", SequentialBackend)
    return FakeBackend.instances


class TestScrapeHtml:
    """Tests for scrape_html."""

    async def test_resolves_document(self, report_html) -> None:
        result = await scrape_html(report_html, SCHEMA, url="https://x.com")
        assert result.success
        assert result.url == "https://x.com"
        assert result.data == {
            "title": "Report",
            "tags": [{"name": "a"}, {"name": "b"}, {"name": "c"}],
        }
        assert result.error is None

    async def test_carries_warnings(self, report_html) -> None:
        result = await scrape_html(report_html, {"x": "{{h1 | bogus}}"})
        assert result.success
        assert result.data == {"x": "Report"}
        assert result.warnings[0].filter == "bogus"


class TestPaginate:
    """Tests for paginate."""

    def test_page_count(self) -> None:
        assert paginate("https://x.com/p/{page}/", 2) == ["https://x.com/p/1/", "https://x.com/p/2/"]

    def test_explicit_pages(self) -> None:
        assert paginate("https://x.com/?p={page}", ["a", 7]) == ["https://x.com/?p=a", "https://x.com/?p=7"]

    def test_zero_pages(self) -> None:
        assert paginate("https://x.com/{page}", 0) == []


class TestScraper:
    """Tests for the Scraper context manager."""

    def test_invalid_backend(self) -> None:
        with pytest.raises(ConfigError):
            Scraper(backend="ftp")

    def test_unknown_config_key(self) -> None:
        with pytest.raises(ConfigError):
            Scraper(max_concurent=3)

    async def test_requires_context_manager(self) -> None:
        with pytest.raises(RuntimeError):
            await Scraper().scrape("https://x.com/1", SCHEMA)

    async def test_scrape_single(self, fake_backends) -> None:
        async with Scraper() as s:
            result = await s.scrape("https://x.com/1", SCHEMA)
        assert result.success
        assert result.data == {"title": "One", "tags": [{"name": "a"}]}
        [backend] = fake_backends
        assert backend.entered and backend.exited

    async def test_fetch_failure_is_a_failed_result(self) -> None:
        async with Scraper() as s:
            result = await s.scrape("https://x.com/missing", SCHEMA)
        assert not result.success
        assert result.data is None
        assert "404" in result.error

    async def test_scrape_many_keeps_input_order(self) -> None:
        urls = ["https://x.com/1", "https://x.com/missing", "https://x.com/3"]
        async with Scraper(max_concurrent=3) as s:
            results = await s.scrape_many(urls, SCHEMA)
        assert [r.url for r in results] == urls
        assert [r.success for r in results] == [True, False, True]
        assert results[2].data == {"title": "Three", "tags": [{"name": "b"}, {"name": "c"}]}

    async def test_scrape_many_empty(self) -> None:
        async with Scraper() as s:
            assert await s.scrape_many([], SCHEMA) == []

    async def test_browser_backend_fetches_in_order(self, fake_backends) -> None:
        urls = ["https://x.com/3", "https://x.com/1", "https://x.com/2"]
        async with Scraper(backend="browser") as s:
            results = await s.scrape_many(urls, SCHEMA)
        [backend] = fake_backends
        assert isinstance(backend, SequentialBackend)
        assert backend.fetched == urls
        assert [r.data["title"] for r in results] == ["Three", "One", "Two"]

    async def test_deriver_error_is_a_failed_result(self) -> None:
        def broken(scope):
            raise ValueError("boom")

        async with Scraper() as s:
            result = await s.scrape("https://x.com/1", {"x": broken})
        assert not result.success
        assert result.error == "boom"


def test_scrape_sync_single_and_many() -> None:
    result = scrape_sync("https://x.com/2", {"title": "{{h1 | text}}"})
    assert result.data == {"title": "Two"}

    results = scrape_sync(["https://x.com/1", "https://x.com/2"], {"title": "{{h1}}"})
    assert [r.data["title"] for r in results] == ["One", "Two"]
