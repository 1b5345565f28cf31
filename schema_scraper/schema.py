"""Schema nodes and the compiler from JSON-like schemas.

A caller writes a schema as a plain value::

    {
        "title": "{{h1 | text}}",
        "tags": [{"_scope": "li.tag", "name": "{{this | text}}"}],
        "source": "example.com",
        "length": lambda scope: len(scope.text()),
    }

``compile_schema`` turns it, once, into explicit node variants:

- ``LiteralNode``: any non-string, non-callable value; resolves to itself.
- ``TemplateNode``: a string scanned for expressions.
- ``DeriverNode``: a function called with the current scope.
- ``ObjectNode``: ordered mapping of output key to node.
- ``ArrayNode``: either fixed-arity ``items`` resolved against the same
  scope, or a ``scope`` query plus a ``template`` object resolved once per
  enumerated sub-scope.

The reserved ``_scope`` key never appears in ``ObjectNode.fields``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schema_scraper.exceptions import SchemaError

__all__ = [
    "SCOPE_KEY",
    "SchemaNode",
    "LiteralNode",
    "TemplateNode",
    "DeriverNode",
    "ObjectNode",
    "ArrayNode",
    "compile_schema",
]

SCOPE_KEY = "_scope"


class SchemaNode(BaseModel):
    """Base class of every schema node variant."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class LiteralNode(SchemaNode):
    value: Any = None


class TemplateNode(SchemaNode):
    text: str


class DeriverNode(SchemaNode):
    func: Callable[..., Any]


class ObjectNode(SchemaNode):
    fields: Dict[str, SchemaNode] = Field(default_factory=dict)


class ArrayNode(SchemaNode):
    """Array schema.

    With ``scope`` set the array is selector-driven: ``template`` is resolved
    against each sub-scope the query enumerates and ``items`` is unused.
    """

    items: List[SchemaNode] = Field(default_factory=list)
    scope: Optional[str] = None
    template: Optional[ObjectNode] = None

    @property
    def selector_driven(self) -> bool:
        return self.scope is not None


def _compile_object(raw: Mapping) -> ObjectNode:
    fields: Dict[str, SchemaNode] = {}
    for key, value in raw.items():
        if key == SCOPE_KEY:
            continue
        if not isinstance(key, str):
            raise SchemaError(f"Schema keys must be strings, got {key!r}")
        fields[key] = compile_schema(value)
    return ObjectNode(fields=fields)


def compile_schema(raw: Any) -> SchemaNode:
    """Compile a JSON-like schema into nodes.

    Already-compiled nodes are returned unchanged.

    Raises:
        SchemaError: If a mapping has non-string keys.

    Examples:
        >>> compile_schema("{{h1 | text}}")
        TemplateNode(text='{{h1 | text}}')
        >>> compile_schema([{"_scope": "li", "name": "{{this}}"}]).scope
        'li'
    """
    if isinstance(raw, SchemaNode):
        return raw
    if isinstance(raw, str):
        return TemplateNode(text=raw)
    if isinstance(raw, Mapping):
        return _compile_object(raw)
    if isinstance(raw, (list, tuple)):
        head = raw[0] if raw else None
        if isinstance(head, Mapping) and head.get(SCOPE_KEY):
            return ArrayNode(scope=str(head[SCOPE_KEY]), template=_compile_object(head))
        return ArrayNode(items=[compile_schema(item) for item in raw])
    if callable(raw):
        return DeriverNode(func=raw)
    return LiteralNode(value=raw)
