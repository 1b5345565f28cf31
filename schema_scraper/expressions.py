"""Template expression parsing.

A template string may embed expressions of the form::

    {{ query | filter(arg,arg) | filter2 }}      (MUSTACHE syntax)
    __items[0].price__  /  __~count__             (DUNDER syntax)

Each expression is parsed into a query and a left-to-right pipeline of
filter calls. A leading ``~`` inside the span forces the resolved value to
be rendered as text, even when the expression is the whole template.

Filter arguments are always strings and are passed through untrimmed, so
``split( )`` splits on a single space. Text that does not match the span
grammar (for example an unclosed ``{{``) is left alone.
"""

from __future__ import annotations

import re
from typing import List, NamedTuple, Tuple

__all__ = [
    "TemplateSyntax",
    "MUSTACHE",
    "DUNDER",
    "FilterCall",
    "ExpressionSpan",
    "parse_expressions",
    "parse_expression",
    "parse_filter_call",
    "is_self_query",
]

SELF_QUERY = "this"

_PIPE_SPLIT = re.compile(r"(?<!\\)\|")

# Dotted/bracketed object path: name, [0], ['key'], ["key"] joined by dots
_PATH_SEGMENT = r"""(?:[_$a-z][_$a-z0-9]*?|\[(?:[0-9]+|'.+?'|".+?")\])"""
_PATH_TAIL = r"""(?:\.[_$a-z][_$a-z0-9]*?|\[(?:[0-9]+|'.+?'|".+?")\])*?"""


class TemplateSyntax(NamedTuple):
    """A named span grammar. Group ``body`` holds the text between delimiters."""

    name: str
    pattern: "re.Pattern[str]"


MUSTACHE = TemplateSyntax("mustache", re.compile(r"\{\{(?P<body>.*?)\}\}"))

DUNDER = TemplateSyntax(
    "dunder",
    re.compile(
        r"__(?P<body>\s*~?" + _PATH_SEGMENT + _PATH_TAIL + r"(?:\s*\|[^|]+?)*?)__",
        re.IGNORECASE,
    ),
)

SYNTAXES = {MUSTACHE.name: MUSTACHE, DUNDER.name: DUNDER}


class FilterCall(NamedTuple):
    """One step of a filter pipeline."""

    name: str
    args: Tuple[str, ...] = ()


class ExpressionSpan(NamedTuple):
    """A parsed expression together with where it sits in its template.

    Attributes:
        source: The exact substring matched, delimiters included.
        start: Offset of ``source`` in the template.
        end: Offset just past ``source``.
        query: The query, trimmed. ``""`` or ``"this"`` mean the current scope.
        filters: Filter calls, applied left to right.
        as_text: True when the span carried the ``~`` marker.
    """

    source: str
    start: int
    end: int
    query: str
    filters: Tuple[FilterCall, ...]
    as_text: bool


def is_self_query(query: str) -> bool:
    """Return True if ``query`` addresses the current scope itself."""
    return query == "" or query == SELF_QUERY


def parse_filter_call(text: str) -> FilterCall:
    """Parse ``name(a,b)`` or ``name`` into a FilterCall.

    Examples:
        >>> parse_filter_call("attr(href)")
        FilterCall(name='attr', args=('href',))
        >>> parse_filter_call("replace(a,b)")
        FilterCall(name='replace', args=('a', 'b'))
        >>> parse_filter_call("text")
        FilterCall(name='text', args=())
    """
    text = text.strip()
    if "(" not in text:
        return FilterCall(text)

    name, _, inner = text.partition("(")
    if inner.endswith(")"):
        inner = inner[:-1]
    args = tuple(inner.split(",")) if inner != "" else ()
    return FilterCall(name.strip(), args)


def parse_expression(body: str) -> Tuple[str, Tuple[FilterCall, ...], bool]:
    """Split the body of a span into ``(query, filters, as_text)``.

    Segments are separated by ``|``; a backslash-escaped ``\\|`` is kept as
    a literal pipe inside its segment.

    Examples:
        >>> parse_expression(" h1 | text | trim ")
        ('h1', (FilterCall(name='text', args=()), FilterCall(name='trim', args=())), False)
        >>> parse_expression("~count")
        ('count', (), True)
    """
    body = body.strip()
    as_text = body.startswith("~")
    if as_text:
        body = body[1:]

    segments = [seg.replace("\\|", "|") for seg in _PIPE_SPLIT.split(body)]
    query = segments[0].strip()
    filters = tuple(
        parse_filter_call(seg) for seg in segments[1:] if seg.strip()
    )
    return query, filters, as_text


def parse_expressions(text: str, syntax: TemplateSyntax = MUSTACHE) -> List[ExpressionSpan]:
    """Find and parse every expression span in ``text``.

    Args:
        text: The template string.
        syntax: Span grammar to scan for (``MUSTACHE`` or ``DUNDER``).

    Returns:
        Spans in order of appearance; empty when the text holds no expression.
    """
    spans: List[ExpressionSpan] = []
    for match in syntax.pattern.finditer(text):
        query, filters, as_text = parse_expression(match.group("body"))
        spans.append(
            ExpressionSpan(
                source=match.group(0),
                start=match.start(),
                end=match.end(),
                query=query,
                filters=filters,
                as_text=as_text,
            )
        )
    return spans
