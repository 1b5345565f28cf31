"""Scope adapters: the capability contract and its two implementations."""

from schema_scraper.scopes.base import Scope, ValueKind, as_text, kind_of
from schema_scraper.scopes.document import NodeScope, parse_document
from schema_scraper.scopes.record import RecordScope, get_path

__all__ = [
    "Scope",
    "ValueKind",
    "as_text",
    "kind_of",
    "NodeScope",
    "parse_document",
    "RecordScope",
    "get_path",
]
