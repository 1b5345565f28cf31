"""Tests for configuration loading."""

from __future__ import annotations

import pytest

from schema_scraper.config import load_config
from schema_scraper.exceptions import ConfigError
from schema_scraper.models import BROWSER_ARGS_ENV, DEFAULT_BROWSER_ARGS


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv(BROWSER_ARGS_ENV, raising=False)
        config = load_config()
        assert config.backend == "http"
        assert config.max_concurrent == 5
        assert config.wait_until == "networkidle"
        assert config.browser_args == list(DEFAULT_BROWSER_ARGS)

    def test_overrides(self) -> None:
        config = load_config(backend="browser", timeout=60000, browser_args=["--foo"])
        assert config.backend == "browser"
        assert config.timeout == 60000
        assert config.browser_args == ["--foo"]

    def test_browser_args_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv(BROWSER_ARGS_ENV, "--no-sandbox --lang=en")
        assert load_config().browser_args == ["--no-sandbox", "--lang=en"]

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="max_concurent"):
            load_config(max_concurent=3)

    def test_invalid_value(self) -> None:
        with pytest.raises(ConfigError):
            load_config(max_concurrent=0)
        with pytest.raises(ConfigError):
            load_config(backend="ftp")
