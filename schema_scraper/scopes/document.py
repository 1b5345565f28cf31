"""Document scope adapter: CSS-selector scoping over parsed HTML.

Queries are CSS selectors evaluated with BeautifulSoup (soupsieve) against
the descendants of every node in the current scope. A query that matches
nothing yields an empty ``NodeScope``, never ``None``, so filters can
always be applied to the result.

Nodes are never mutated. Operations that remove content
(``remove_empty``, ``remove_deep``) work on copies and return a new scope.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterator, List, Optional, Sequence

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from schema_scraper.exceptions import QueryError
from schema_scraper.expressions import is_self_query
from schema_scraper.scopes.base import Scope, ValueKind

__all__ = ["NodeScope", "parse_document"]

logger = logging.getLogger(__name__)

# Elements that are legitimately empty and must survive remove_empty()
_VOID_KEEP = frozenset({"br"})


def parse_document(markup: str, parser: str = "html.parser") -> "NodeScope":
    """Parse HTML into the root scope.

    The root is the ``<html>`` element when present, otherwise the whole
    parsed fragment.

    Args:
        markup: Raw HTML.
        parser: BeautifulSoup tree builder (``"html.parser"``, ``"lxml"``, ...).

    Returns:
        A single-node NodeScope.
    """
    soup = BeautifulSoup(markup or "", parser)
    root = soup.find("html")
    return NodeScope([root if isinstance(root, Tag) else soup])


class NodeScope(Scope):
    """An ordered, possibly empty, set of document elements."""

    def __init__(self, nodes: Sequence[Tag] = ()) -> None:
        self._nodes: List[Tag] = list(nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._nodes)

    def __repr__(self) -> str:
        names = ", ".join(node.name or "?" for node in self._nodes[:5])
        more = ", ..." if len(self._nodes) > 5 else ""
        return f"NodeScope([{names}{more}])"

    @property
    def nodes(self) -> List[Tag]:
        return list(self._nodes)

    @property
    def kind(self) -> ValueKind:
        return ValueKind.NODES

    @property
    def first(self) -> Optional[Tag]:
        return self._nodes[0] if self._nodes else None

    # ------------------------------------------------------------------
    # Scope contract
    # ------------------------------------------------------------------

    def query(self, query: str) -> "NodeScope":
        if is_self_query(query):
            return self
        return NodeScope(self._select(query))

    def enumerate(self, query: str) -> List[Scope]:
        return [NodeScope([node]) for node in self._select(query)]

    def as_text(self) -> str:
        return self.text()

    def as_attr(self, name: str) -> Optional[str]:
        return self.attr(name)

    def as_html(self) -> Optional[str]:
        return self.html()

    def empty(self) -> "NodeScope":
        return NodeScope()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def text(self) -> str:
        """Combined text of every node, in order."""
        return "".join(node.get_text() for node in self._nodes)

    def html(self) -> Optional[str]:
        """Inner markup of the first node, or None when empty."""
        node = self.first
        if node is None:
            return None
        return node.decode_contents()

    def outer_html(self) -> str:
        """Outer markup of every node, concatenated."""
        return "".join(str(node) for node in self._nodes)

    def attr(self, name: str) -> Optional[str]:
        """Attribute of the first node. Multi-valued attributes are space-joined."""
        node = self.first
        if node is None:
            return None
        value = node.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def prop(self, name: str) -> Any:
        """DOM-style property of the first node.

        Supports ``tagName``/``nodeName``, ``textContent``/``innerText``,
        ``innerHTML``, ``outerHTML``, ``className``, boolean properties such
        as ``checked`` and ``disabled``; anything else falls back to the
        attribute of the same name.
        """
        node = self.first
        if node is None:
            return None
        if name in ("tagName", "nodeName"):
            return (node.name or "").upper()
        if name in ("textContent", "innerText"):
            return node.get_text()
        if name == "innerHTML":
            return node.decode_contents()
        if name == "outerHTML":
            return str(node)
        if name == "className":
            return self.attr("class") or ""
        if name in ("checked", "selected", "disabled", "hidden", "required", "readonly"):
            return node.has_attr(name)
        return self.attr(name)

    def classes(self) -> List[str]:
        node = self.first
        if node is None:
            return []
        value = node.get("class") or []
        if isinstance(value, str):
            value = value.split()
        return list(value)

    def has_class(self, *classes: str) -> bool:
        """True if the first node carries ALL of ``classes``."""
        present = set(self.classes())
        return bool(self._nodes) and all(cls.strip() in present for cls in classes)

    def has_any_class(self, *classes: str) -> bool:
        """True if the first node carries at least one of ``classes``."""
        present = set(self.classes())
        return any(cls.strip() in present for cls in classes)

    def css(self, prop: str) -> Optional[str]:
        """Inline style property of the first node, or None when empty."""
        style = self.attr("style")
        if style is None:
            return None
        wanted = prop.strip().lower()
        for declaration in style.split(";"):
            key, sep, value = declaration.partition(":")
            if sep and key.strip().lower() == wanted:
                return value.strip()
        return None

    # ------------------------------------------------------------------
    # Copy-on-write removal
    # ------------------------------------------------------------------

    def remove_deep(self, *selectors: str) -> "NodeScope":
        """Return a copy of the scope with descendants matching ``selectors`` removed.

        An empty selector (or none at all) means ``*``: every descendant.
        """
        clones = [copy.copy(node) for node in self._nodes]
        for selector in selectors or ("",):
            for clone in clones:
                for match in _select(clone, selector.strip() or "*"):
                    if not match.decomposed:
                        match.decompose()
        return NodeScope(clones)

    def remove_empty(self, *selectors: str) -> "NodeScope":
        """Return a copy of the scope without descendants that have no text.

        ``<br>`` elements are kept.
        """
        clones = [copy.copy(node) for node in self._nodes]
        for selector in selectors or ("",):
            for clone in clones:
                for match in _select(clone, selector.strip() or "*"):
                    if match.decomposed:
                        continue
                    if match.name not in _VOID_KEEP and not match.get_text().strip():
                        match.decompose()
        return NodeScope(clones)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _select(self, selector: str) -> List[Tag]:
        seen: set[int] = set()
        matches: List[Tag] = []
        for node in self._nodes:
            for match in _select(node, selector):
                if id(match) not in seen:
                    seen.add(id(match))
                    matches.append(match)
        logger.debug("Selector %r matched %d node(s)", selector, len(matches))
        return matches


def _select(node: Tag, selector: str) -> List[Tag]:
    try:
        return node.select(selector)
    except (SelectorSyntaxError, ValueError) as exc:
        raise QueryError(f"Invalid selector: {exc}", query=selector) from exc
