"""Tests for the document and record scope adapters."""

from __future__ import annotations

import pytest

from schema_scraper.exceptions import QueryError
from schema_scraper.scopes import (
    NodeScope,
    RecordScope,
    ValueKind,
    as_text,
    get_path,
    kind_of,
    parse_document,
)
from schema_scraper.scopes.record import split_path


class TestNodeScope:
    """Tests for CSS-selector scoping."""

    def test_root_is_html_element(self, report_doc) -> None:
        assert [node.name for node in report_doc] == ["html"]

    def test_fragment_without_html_tag(self) -> None:
        scope = parse_document("<p>one</p><p>two</p>")
        assert scope.query("p").text() == "onetwo"

    def test_this_returns_same_scope(self, report_doc) -> None:
        assert report_doc.query("this") is report_doc
        assert report_doc.query("") is report_doc

    def test_no_match_is_empty_scope(self, report_doc) -> None:
        result = report_doc.query("section.missing")
        assert isinstance(result, NodeScope)
        assert len(result) == 0
        assert result.text() == ""

    def test_enumerate_in_document_order(self, report_doc) -> None:
        scopes = report_doc.enumerate("li.tag")
        assert [s.as_text() for s in scopes] == ["a", "b", "c"]
        assert all(len(s) == 1 for s in scopes)

    def test_query_is_relative_to_scope(self, listing_doc) -> None:
        rows = listing_doc.enumerate('tr[data-object-name="entry"]')
        assert [row.query("td.year").text() for row in rows] == ["1979", "1995"]

    def test_query_over_several_nodes_deduplicates(self) -> None:
        scope = parse_document("<div><div><span>x</span></div></div>")
        divs = scope.query("div")
        assert len(divs) == 2
        assert len(divs.query("span")) == 1

    def test_invalid_selector_raises_query_error(self, report_doc) -> None:
        with pytest.raises(QueryError) as excinfo:
            report_doc.query("li[")
        assert excinfo.value.query == "li["

    def test_kind_and_native(self, report_doc) -> None:
        h1 = report_doc.query("h1")
        assert h1.kind is ValueKind.NODES
        assert h1.native() == "Report"
        assert h1.unwrap() is h1


class TestRecordScope:
    """Tests for path lookup over plain values."""

    def test_split_path(self) -> None:
        assert split_path("items[0].price") == ["items", 0, "price"]
        assert split_path("a['b c'].d") == ["a", "b c", "d"]

    def test_nested_lookup(self) -> None:
        record = {"items": [{"price": 4}, {"price": 6}]}
        assert get_path(record, "items[1].price") == 6

    def test_missing_path_is_none(self) -> None:
        record = {"items": []}
        assert get_path(record, "items[0].price") is None
        assert get_path(record, "nope.deeper") is None
        assert get_path(None, "anything") is None

    def test_length_of_sized_values(self) -> None:
        assert get_path({"items": [1, 2, 3]}, "items.length") == 3
        assert get_path({"name": "bob"}, "name.length") == 3

    def test_dotted_index_on_list(self) -> None:
        assert get_path({"items": ["a", "b"]}, "items.1") == "b"

    def test_attribute_lookup_on_objects(self) -> None:
        class Item:
            price = 9

        assert get_path({"item": Item()}, "item.price") == 9

    def test_query_and_self(self) -> None:
        scope = RecordScope({"count": 3})
        assert scope.query("count") == 3
        assert scope.query("this") == {"count": 3}
        assert scope.unwrap() == {"count": 3}

    def test_enumerate_lists(self) -> None:
        scope = RecordScope({"rows": [{"n": 1}, {"n": 2}], "name": "x"})
        assert [s.query("n") for s in scope.enumerate("rows")] == [1, 2]
        assert scope.enumerate("name") == []
        assert scope.enumerate("missing") == []

    def test_kind(self) -> None:
        assert RecordScope({"a": 1}).kind is ValueKind.OBJECT
        assert RecordScope([1]).kind is ValueKind.ARRAY
        assert RecordScope(None).as_html() is None


class TestTextCoercion:
    """Tests for kind_of and as_text."""

    def test_kind_of(self) -> None:
        assert kind_of(None) is ValueKind.NULL
        assert kind_of(True) is ValueKind.BOOLEAN
        assert kind_of(3) is ValueKind.NUMBER
        assert kind_of("x") is ValueKind.STRING
        assert kind_of({}) is ValueKind.OBJECT
        assert kind_of([]) is ValueKind.ARRAY

    def test_as_text(self, report_doc) -> None:
        assert as_text(None) == ""
        assert as_text(True) == "true"
        assert as_text(3.0) == "3"
        assert as_text(2.5) == "2.5"
        assert as_text(["a", 1]) == "a,1"
        assert as_text({"a": 1}) == '{"a": 1}'
        assert as_text(report_doc.query("h1")) == "Report"
