"""Mapper: bind one schema to many plain records.

A schema is a template of the output. Values may be:

- **Strings**: kept as-is unless they hold expressions. ``"__name__"``
  reads ``name`` from the record and keeps its type; ``"Mr. __name__"`` and
  ``"__~count__"`` always produce text.
- **Functions**: called with the record; the return value is used as-is.
  Coroutine functions are awaited.
- **Objects and arrays**: structure the output and are mapped recursively.

Example::

    mapper = Mapper({
        "origin": "Manufacturer",
        "id": "__id__",
        "code": "#__code__",
        "count": "__items.length__",
        "total": lambda record: sum(item["price"] for item in record["items"]),
        "price": {"incGst": "__price__", "label": "$__price__"},
    })
    rows = await mapper.map_list(records)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from schema_scraper.expressions import DUNDER, TemplateSyntax
from schema_scraper.filters import FilterRegistry
from schema_scraper.models import Resolution
from schema_scraper.resolver import SchemaResolver
from schema_scraper.schema import SchemaNode, compile_schema
from schema_scraper.scopes.record import RecordScope

__all__ = ["Mapper"]

logger = logging.getLogger(__name__)


class Mapper:
    """Maps records to the shape of a schema.

    The schema is compiled once, when the mapper is created.

    Args:
        schema: JSON-like schema (or compiled schema node).
        filters: Filter registry for ``| filter`` pipelines.
        syntax: Expression syntax; ``DUNDER`` (``__path__``) by default.
    """

    def __init__(
        self,
        schema: Any,
        filters: Optional[FilterRegistry] = None,
        syntax: TemplateSyntax = DUNDER,
    ) -> None:
        self._schema: SchemaNode = compile_schema(schema)
        self._resolver = SchemaResolver(filters=filters, syntax=syntax)

    @property
    def schema(self) -> SchemaNode:
        return self._schema

    async def resolve(self, record: Any) -> Resolution:
        """Map one record, returning the value together with its warnings."""
        return await self._resolver.resolve(RecordScope(record), self._schema)

    async def map(self, record: Any) -> Any:
        """Map a single record."""
        resolution = await self.resolve(record)
        return resolution.value

    async def map_list(self, records: Iterable[Any]) -> List[Any]:
        """Map records one after another, preserving their order."""
        result: List[Any] = []
        for record in records:
            result.append(await self.map(record))
        logger.debug("Mapped %d record(s)", len(result))
        return result
