"""Filter registry and the built-in filters.

A filter is a plain function ``(value, *args) -> value``. ``value`` is
whatever the previous pipeline step produced: a ``NodeScope`` straight out
of a document query, a plain value out of a record lookup, or the output
of an earlier filter. Arguments are always strings.

Registries are explicit objects passed to the resolver. Populate one at
start-up and treat it as read-only while resolutions are running::

    filters = default_filters()

    @filters.register("slug")
    def slug(value):
        return as_text(value).lower().replace(" ", "-")

Built-ins tolerate ``None`` and empty node sets, returning neutral values
instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, List, Optional

from schema_scraper.exceptions import FilterError, UnknownFilterError
from schema_scraper.scopes.base import Scope, as_text
from schema_scraper.scopes.document import NodeScope
from schema_scraper.scopes.record import get_path

__all__ = [
    "FilterFunc",
    "FilterRegistry",
    "default_filters",
    "BUILTIN_FILTERS",
]

logger = logging.getLogger(__name__)

FilterFunc = Callable[..., Any]


class FilterRegistry:
    """Mapping of filter name to filter function, looked up by exact name."""

    def __init__(self, filters: Optional[Dict[str, FilterFunc]] = None) -> None:
        self._filters: Dict[str, FilterFunc] = dict(filters or {})

    def __contains__(self, name: object) -> bool:
        return name in self._filters

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[str]:
        return iter(self._filters)

    def register(self, name: str, fn: Optional[FilterFunc] = None) -> Any:
        """Register ``fn`` under ``name``, replacing any existing filter.

        Called without ``fn`` it returns a decorator.
        """
        if fn is None:

            def decorator(func: FilterFunc) -> FilterFunc:
                self.register(name, func)
                return func

            return decorator

        if not callable(fn):
            raise TypeError(f"Filter {name!r} must be callable, got {type(fn).__name__}")
        self._filters[name] = fn
        return fn

    def unregister(self, name: str) -> None:
        self._filters.pop(name, None)

    def get(self, name: str) -> Optional[FilterFunc]:
        return self._filters.get(name)

    def names(self) -> List[str]:
        return sorted(self._filters)

    def copy(self) -> "FilterRegistry":
        return FilterRegistry(self._filters)

    def apply(self, name: str, value: Any, *args: str) -> Any:
        """Run filter ``name`` on ``value``.

        Raises:
            UnknownFilterError: If no filter is registered under ``name``.
        """
        fn = self._filters.get(name)
        if fn is None:
            raise UnknownFilterError(name)
        return fn(value, *args)


# ---------------------------------------------------------------------------
# Built-in filters
# ---------------------------------------------------------------------------


def _each(value: Any, fn: Callable[[Any], Any]) -> Any:
    if isinstance(value, (list, tuple)):
        return [fn(item) for item in value]
    return fn(value)


def _string(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return as_text(value)


def _nodes(value: Any, filter_name: str) -> NodeScope:
    if isinstance(value, NodeScope):
        return value
    if value is None:
        return NodeScope()
    raise FilterError(
        f"Filter {filter_name!r} needs document nodes, got {type(value).__name__}",
        filter_name=filter_name,
    )


def text(value: Any) -> str:
    if isinstance(value, Scope):
        return value.as_text()
    return as_text(value)


def html(value: Any) -> Optional[str]:
    if isinstance(value, Scope):
        return value.as_html()
    return _string(value)


def outer_html(value: Any) -> str:
    return _nodes(value, "outerHtml").outer_html()


def attr(value: Any, name: str = "", *_: str) -> Any:
    if isinstance(value, Scope):
        return value.as_attr(name)
    if value is None:
        return None
    return get_path(value, name)


def prop(value: Any, name: str = "", *_: str) -> Any:
    if isinstance(value, NodeScope):
        return value.prop(name)
    return attr(value, name)


def _map_text(value: Any, fn: Callable[[str], Any]) -> Any:
    def apply(item: Any) -> Any:
        if isinstance(item, Scope):
            item = item.as_text()
        return fn(item) if isinstance(item, str) else item

    return _each(value, apply)


def trim(value: Any) -> Any:
    return _map_text(value, str.strip)


def uppercase(value: Any) -> Any:
    return _map_text(value, str.upper)


def lowercase(value: Any) -> Any:
    return _map_text(value, str.lower)


def split(value: Any, sep: Optional[str] = None, limit: Optional[str] = None) -> Any:
    """Split text on ``sep``; with no separator split on whitespace."""
    value = _string(value)
    if value is None:
        return []
    if sep is None:
        parts = value.split()
    elif sep == "":
        parts = list(value)
    else:
        parts = value.split(sep)
    if limit is not None and limit.strip():
        parts = parts[: int(limit)]
    return parts


def join(value: Any, sep: str = ",", *_: str) -> Any:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return sep.join(as_text(item) for item in value)
    return as_text(value)


def replace(value: Any, old: str = "", new: str = "", *_: str) -> Any:
    """Replace the first occurrence of ``old`` with ``new``."""
    return _map_text(value, lambda v: v.replace(old, new, 1))


def _to_number(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    raw = _string(value).strip()
    if raw == "":
        return 0
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        number = float(raw)
    except ValueError:
        return None
    return int(number) if number.is_integer() else number


def number(value: Any) -> Any:
    """Cast to int or float. Text that is not numeric becomes None."""
    if isinstance(value, (list, tuple)):
        return [_to_number(item) for item in value]
    return _to_number(value)


def remove_empty(value: Any, *selectors: str) -> NodeScope:
    return _nodes(value, "removeEmpty").remove_empty(*selectors)


def remove_deep(value: Any, *selectors: str) -> NodeScope:
    return _nodes(value, "removeDeep").remove_deep(*selectors)


def has_class(value: Any, *classes: str) -> bool:
    return _nodes(value, "hasClass").has_class(*classes)


def has_any_class(value: Any, *classes: str) -> bool:
    return _nodes(value, "hasAnyClass").has_any_class(*classes)


def css(value: Any, prop_name: str = "", *_: str) -> Optional[str]:
    return _nodes(value, "css").css(prop_name)


BUILTIN_FILTERS: Mapping[str, FilterFunc] = {
    "text": text,
    "html": html,
    "outerHtml": outer_html,
    "attr": attr,
    "prop": prop,
    "trim": trim,
    "split": split,
    "join": join,
    "replace": replace,
    "number": number,
    "uppercase": uppercase,
    "lowercase": lowercase,
    "removeEmpty": remove_empty,
    "removeDeep": remove_deep,
    "hasClass": has_class,
    "hasAnyClass": has_any_class,
    "css": css,
}


def default_filters() -> FilterRegistry:
    """Return a new registry holding the built-in filters."""
    return FilterRegistry(dict(BUILTIN_FILTERS))
