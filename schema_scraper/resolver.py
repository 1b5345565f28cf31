"""Schema resolution engine -- the heart of the schema_scraper library.

``SchemaResolver.resolve(scope, schema)`` walks a schema depth-first and
produces a value of the same shape:

1. A selector-driven array (``[{"_scope": query, ...}]``) enumerates the
   sub-scopes matched by ``query`` and resolves the template object once
   per sub-scope, in source order.
2. A fixed-arity array resolves each item against the same scope.
3. An object resolves each field against the same scope, keeping key order.
4. A leaf is resolved directly:

   - deriving functions are called with the scope (and awaited when they
     return an awaitable); their result is used verbatim;
   - strings are scanned for expressions. No expression means the string
     is returned unchanged. A single expression spanning the whole string
     keeps the native type of its result unless it carries the ``~``
     marker. Anything else is rendered to text and substituted in place;
   - any other value is returned unchanged.

Resolution is strictly sequential. Deriving functions may rely on the
order in which earlier fields were resolved.

Failures never abort a resolution. Unknown filters, filters that raise and
queries the adapter rejects are logged, recorded as ``ResolutionWarning``
entries and resolution carries on: a failed filter leaves the running
value as it was, a rejected query yields an empty value.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Dict, List, Optional, Union

from schema_scraper.exceptions import QueryError
from schema_scraper.expressions import (
    MUSTACHE,
    ExpressionSpan,
    TemplateSyntax,
    parse_expressions,
)
from schema_scraper.filters import FilterRegistry, default_filters
from schema_scraper.models import Resolution, ResolutionWarning
from schema_scraper.scopes.base import Scope, as_text
from schema_scraper.schema import (
    ArrayNode,
    DeriverNode,
    LiteralNode,
    ObjectNode,
    SchemaNode,
    TemplateNode,
    compile_schema,
)

__all__ = ["SchemaResolver", "resolve"]

logger = logging.getLogger(__name__)


def _join_path(path: str, key: Union[str, int]) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else key


class _Run:
    """Per-call state: the warnings collected so far."""

    def __init__(self) -> None:
        self.warnings: List[ResolutionWarning] = []

    def warn(
        self,
        path: str,
        message: str,
        *,
        expression: Optional[str] = None,
        filter: Optional[str] = None,
    ) -> None:
        self.warnings.append(
            ResolutionWarning(path=path, expression=expression, filter=filter, message=message)
        )


class SchemaResolver:
    """Resolves schemas against scopes.

    A resolver holds no per-call state and can serve concurrent
    ``resolve`` calls, provided its filter registry is not modified while
    they run.

    Args:
        filters: Filter registry used by expression pipelines. Defaults to a
                 fresh registry of the built-in filters.
        syntax: Expression span grammar (``MUSTACHE`` or ``DUNDER``).

    Examples:
        >>> from schema_scraper.scopes import parse_document
        >>> resolver = SchemaResolver()
        >>> doc = parse_document("<h1>Report</h1>")
        >>> resolution = await resolver.resolve(doc, {"title": "{{h1 | text}}"})  # doctest: +SKIP
        >>> resolution.value  # doctest: +SKIP
        {'title': 'Report'}
    """

    def __init__(
        self,
        filters: Optional[FilterRegistry] = None,
        syntax: TemplateSyntax = MUSTACHE,
    ) -> None:
        self.filters = filters if filters is not None else default_filters()
        self.syntax = syntax

    async def resolve(self, scope: Scope, schema: Any) -> Resolution:
        """Resolve ``schema`` (raw or compiled) against ``scope``.

        Returns:
            A Resolution carrying the value and any recoverable warnings.
        """
        run = _Run()
        value = await self._resolve_node(scope, compile_schema(schema), "", run)
        return Resolution(value=value, warnings=run.warnings)

    # ------------------------------------------------------------------
    # Recursion
    # ------------------------------------------------------------------

    async def _resolve_node(self, scope: Scope, node: SchemaNode, path: str, run: _Run) -> Any:
        if isinstance(node, ArrayNode):
            if node.selector_driven:
                return await self._resolve_expansion(scope, node, path, run)
            return [
                await self._resolve_node(scope, item, _join_path(path, i), run)
                for i, item in enumerate(node.items)
            ]
        if isinstance(node, ObjectNode):
            return await self._resolve_object(scope, node, path, run)
        if isinstance(node, TemplateNode):
            return self._resolve_template(scope, node.text, path, run)
        if isinstance(node, DeriverNode):
            result = node.func(scope.unwrap())
            if inspect.isawaitable(result):
                result = await result
            return result
        if isinstance(node, LiteralNode):
            return node.value
        raise TypeError(f"Unsupported schema node: {type(node).__name__}")

    async def _resolve_object(self, scope: Scope, node: ObjectNode, path: str, run: _Run) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, child in node.fields.items():
            result[key] = await self._resolve_node(scope, child, _join_path(path, key), run)
        return result

    async def _resolve_expansion(self, scope: Scope, node: ArrayNode, path: str, run: _Run) -> List[Any]:
        try:
            sub_scopes = scope.enumerate(node.scope)
        except QueryError as exc:
            logger.warning("Cannot expand %r at %s: %s", node.scope, path or "<root>", exc)
            run.warn(path, str(exc), expression=node.scope)
            return []

        logger.debug("Expanding %r at %s into %d item(s)", node.scope, path or "<root>", len(sub_scopes))
        template = node.template or ObjectNode()
        result: List[Any] = []
        for i, sub_scope in enumerate(sub_scopes):
            result.append(await self._resolve_object(sub_scope, template, _join_path(path, i), run))
        return result

    # ------------------------------------------------------------------
    # Templates and expressions
    # ------------------------------------------------------------------

    def _resolve_template(self, scope: Scope, text: str, path: str, run: _Run) -> Any:
        spans = parse_expressions(text, self.syntax)
        if not spans:
            return text

        if len(spans) == 1 and spans[0].source == text and not spans[0].as_text:
            return self._evaluate(scope, spans[0], path, run)

        parts: List[str] = []
        cursor = 0
        for span in spans:
            parts.append(text[cursor:span.start])
            parts.append(as_text(self._evaluate(scope, span, path, run)))
            cursor = span.end
        parts.append(text[cursor:])
        return "".join(parts)

    def _evaluate(self, scope: Scope, span: ExpressionSpan, path: str, run: _Run) -> Any:
        """Run one expression: query the scope, then thread the pipeline."""
        try:
            value = scope.query(span.query)
        except QueryError as exc:
            logger.warning("Query %r failed at %s: %s", span.query, path or "<root>", exc)
            run.warn(path, str(exc), expression=span.source)
            value = scope.empty()

        for call in span.filters:
            try:
                value = self.filters.apply(call.name, value, *call.args)
            except Exception as exc:
                logger.warning(
                    "Filter %r failed in %s at %s: %s",
                    call.name,
                    span.source,
                    path or "<root>",
                    exc,
                )
                run.warn(path, str(exc), expression=span.source, filter=call.name)

        if isinstance(value, Scope):
            value = value.native()
        return value


async def resolve(
    scope: Scope,
    schema: Any,
    *,
    filters: Optional[FilterRegistry] = None,
    syntax: TemplateSyntax = MUSTACHE,
) -> Resolution:
    """Resolve ``schema`` against ``scope`` with a one-off resolver."""
    return await SchemaResolver(filters=filters, syntax=syntax).resolve(scope, schema)
