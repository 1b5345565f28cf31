"""Object-graph scope adapter: path lookup over plain nested values.

Paths use dotted and bracketed notation::

    name
    items[0].price
    meta["content-type"]
    items.length

Lookups never raise. A missing key, an out-of-range index or a ``None``
along the way resolves to ``None``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence, Sized
from typing import Any, List, Optional, Union

from schema_scraper.expressions import is_self_query
from schema_scraper.scopes.base import Scope, ValueKind, as_text, kind_of

__all__ = ["RecordScope", "get_path", "split_path"]

_MISSING = object()

_TOKEN = re.compile(
    r"""
    \[\s*(?P<index>-?\d+)\s*\]        # [0]
    | \[\s*'(?P<single>[^']*)'\s*\]   # ['key']
    | \[\s*"(?P<double>[^"]*)"\s*\]   # ["key"]
    | (?P<name>[^.\[\]]+)             # key
    """,
    re.VERBOSE,
)


def split_path(path: str) -> List[Union[str, int]]:
    """Split a path into keys and integer indexes.

    Examples:
        >>> split_path("items[0].price")
        ['items', 0, 'price']
        >>> split_path('meta["content-type"]')
        ['meta', 'content-type']
    """
    tokens: List[Union[str, int]] = []
    for match in _TOKEN.finditer(path):
        if match.group("index") is not None:
            tokens.append(int(match.group("index")))
        elif match.group("single") is not None:
            tokens.append(match.group("single"))
        elif match.group("double") is not None:
            tokens.append(match.group("double"))
        else:
            name = match.group("name").strip()
            if name:
                tokens.append(name)
    return tokens


def _step(value: Any, token: Union[str, int]) -> Any:
    if value is None:
        return _MISSING

    if isinstance(value, Mapping):
        if token in value:
            return value[token]
        alternate = str(token) if isinstance(token, int) else _as_int(token)
        if alternate is not None and alternate in value:
            return value[alternate]
        if token == "length":
            return len(value)
        return _MISSING

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        index = token if isinstance(token, int) else _as_int(token)
        if index is not None:
            try:
                return value[index]
            except IndexError:
                return _MISSING
        if token == "length":
            return len(value)
        return _MISSING

    if token == "length" and isinstance(value, Sized):
        return len(value)

    if isinstance(token, str) and not token.startswith("_"):
        return getattr(value, token, _MISSING)
    return _MISSING


def _as_int(token: Union[str, int]) -> Optional[int]:
    if isinstance(token, int):
        return token
    try:
        return int(token)
    except ValueError:
        return None


def get_path(value: Any, path: str, default: Any = None) -> Any:
    """Read ``path`` from ``value``, returning ``default`` when it is missing.

    Examples:
        >>> get_path({"items": [{"price": 4}]}, "items[0].price")
        4
        >>> get_path({"items": []}, "items[3].price") is None
        True
        >>> get_path({"items": [1, 2]}, "items.length")
        2
    """
    current = value
    for token in split_path(path):
        current = _step(current, token)
        if current is _MISSING:
            return default
    return current


class RecordScope(Scope):
    """Scope over a plain value (mapping, sequence, scalar or object)."""

    def __init__(self, value: Any) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"RecordScope({self._value!r})"

    @property
    def value(self) -> Any:
        return self._value

    @property
    def kind(self) -> ValueKind:
        return kind_of(self._value)

    def query(self, query: str) -> Any:
        if is_self_query(query):
            return self._value
        return get_path(self._value, query)

    def enumerate(self, query: str) -> List[Scope]:
        items = self.query(query)
        if isinstance(items, Sequence) and not isinstance(items, (str, bytes)):
            return [RecordScope(item) for item in items]
        return []

    def as_text(self) -> str:
        return as_text(self._value)

    def as_attr(self, name: str) -> Optional[Any]:
        return get_path(self._value, name)

    def as_html(self) -> Optional[str]:
        return None

    def unwrap(self) -> Any:
        return self._value

    def native(self) -> Any:
        return self._value
