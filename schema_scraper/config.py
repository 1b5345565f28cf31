"""Configuration management for the schema_scraper library.

``load_config()`` creates a ScraperConfig with environment-based defaults
and user overrides. Unknown override keys are rejected up front so a typo
such as ``max_concurent=3`` fails loudly instead of being ignored.

Browser flags are resolved in this order:
1. Explicitly passed ``browser_args`` list
2. ``SCHEMA_SCRAPER_BROWSER_ARGS`` environment variable (space separated)
3. ``--disable-dev-shm-usage --no-sandbox``
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from schema_scraper.exceptions import ConfigError
from schema_scraper.models import ScraperConfig

__all__ = ["load_config"]

logger = logging.getLogger(__name__)


def load_config(**overrides: Any) -> ScraperConfig:
    """Create a ScraperConfig with sensible defaults and optional overrides.

    Args:
        **overrides: Keyword arguments matching ScraperConfig field names.
                     For example: ``load_config(backend="browser", timeout=60000)``.

    Returns:
        A fully initialized ScraperConfig.

    Raises:
        ConfigError: If an override key does not match any config field, or
                     a value fails validation.

    Examples:
        >>> config = load_config(backend="browser", max_concurrent=3)
        >>> config.backend
        'browser'
    """
    valid_fields = set(ScraperConfig.model_fields.keys())
    invalid = set(overrides.keys()) - valid_fields
    if invalid:
        raise ConfigError(
            f"Unknown config fields: {sorted(invalid)}. "
            f"Valid fields: {sorted(valid_fields)}"
        )

    try:
        config = ScraperConfig(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    logger.debug("Loaded config: %s", config.model_dump())
    return config
