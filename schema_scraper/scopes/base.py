"""The scope contract every data source adapter implements.

A scope is a read-only handle into a data source. The resolver only ever
talks to a source through this contract:

- ``query(query)`` narrows the scope (or reads a value) for one expression.
- ``enumerate(query)`` lists the sub-scopes that drive ``_scope`` array
  expansion, in source order.
- ``as_text()``, ``as_attr(name)`` and ``as_html()`` read the scope.
- ``kind`` reports the shape of the underlying value.
- ``unwrap()`` is what a deriving function receives.
- ``native()`` is the value a pipeline produces when it ends on the scope.

Adapters must never return ``None`` from ``query`` for "no match" when the
result is itself a scope; an empty scope keeps every filter safe to call.
"""

from __future__ import annotations

import enum
import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, List, Optional

__all__ = [
    "Scope",
    "ValueKind",
    "kind_of",
    "as_text",
]


class ValueKind(enum.Enum):
    """Shape of a resolved value."""

    NULL = "null"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    NODES = "nodes"


class Scope(ABC):
    """Abstract scope over a data source."""

    @property
    @abstractmethod
    def kind(self) -> ValueKind:
        """Shape of the value this scope wraps."""

    @abstractmethod
    def query(self, query: str) -> Any:
        """Evaluate ``query`` against this scope.

        ``""`` and ``"this"`` return the scope's own value unchanged.
        """

    @abstractmethod
    def enumerate(self, query: str) -> List["Scope"]:
        """Return one sub-scope per match of ``query``, in source order."""

    @abstractmethod
    def as_text(self) -> str:
        """Text content of the scope."""

    @abstractmethod
    def as_attr(self, name: str) -> Optional[Any]:
        """Named attribute of the scope, or None when absent."""

    @abstractmethod
    def as_html(self) -> Optional[str]:
        """Markup of the scope, or None when the source has no markup."""

    def empty(self) -> Any:
        """Value standing in for a query the adapter rejected."""
        return None

    def unwrap(self) -> Any:
        return self

    def native(self) -> Any:
        return self.as_text()


def kind_of(value: Any) -> ValueKind:
    """Classify ``value``.

    Examples:
        >>> kind_of(3)
        <ValueKind.NUMBER: 'number'>
        >>> kind_of(["a"])
        <ValueKind.ARRAY: 'array'>
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, Scope):
        return value.kind
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.OBJECT


def as_text(value: Any) -> str:
    """Render any resolved value as text for substitution into a template.

    Examples:
        >>> as_text(None)
        ''
        >>> as_text(3.0)
        '3'
        >>> as_text(["a", 1, True])
        'a,1,true'
    """
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return ""
    if isinstance(value, Scope):
        return value.as_text()
    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.ARRAY:
        return ",".join(as_text(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, default=str)
    return str(value)
