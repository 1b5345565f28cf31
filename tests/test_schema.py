"""Tests for compile_schema."""

from __future__ import annotations

import pytest

from schema_scraper.exceptions import SchemaError
from schema_scraper.schema import (
    ArrayNode,
    DeriverNode,
    LiteralNode,
    ObjectNode,
    TemplateNode,
    compile_schema,
)


class TestCompileSchema:
    """Tests for each node variant."""

    def test_string_is_template(self) -> None:
        assert compile_schema("{{h1}}") == TemplateNode(text="{{h1}}")

    def test_scalars_are_literals(self) -> None:
        assert compile_schema(3) == LiteralNode(value=3)
        assert compile_schema(None) == LiteralNode(value=None)
        assert compile_schema(True) == LiteralNode(value=True)

    def test_callable_is_deriver(self) -> None:
        def fn(scope):
            return 1

        node = compile_schema(fn)
        assert isinstance(node, DeriverNode)
        assert node.func is fn

    def test_object_keeps_key_order(self) -> None:
        node = compile_schema({"b": "x", "a": 1})
        assert isinstance(node, ObjectNode)
        assert list(node.fields) == ["b", "a"]

    def test_selector_driven_array(self) -> None:
        node = compile_schema([{"_scope": "li", "name": "{{this}}"}])
        assert isinstance(node, ArrayNode)
        assert node.selector_driven
        assert node.scope == "li"
        assert list(node.template.fields) == ["name"]

    def test_only_first_template_is_used(self) -> None:
        node = compile_schema([{"_scope": "li", "a": "x"}, {"b": "y"}])
        assert list(node.template.fields) == ["a"]
        assert node.items == []

    def test_fixed_arity_array(self) -> None:
        node = compile_schema(["{{a}}", 2])
        assert not node.selector_driven
        assert node.items == [TemplateNode(text="{{a}}"), LiteralNode(value=2)]

    def test_empty_scope_is_not_selector_driven(self) -> None:
        node = compile_schema([{"_scope": "", "a": "x"}])
        assert not node.selector_driven
        assert len(node.items) == 1

    def test_scope_key_dropped_from_plain_objects(self) -> None:
        node = compile_schema({"_scope": "div", "a": "x"})
        assert list(node.fields) == ["a"]

    def test_empty_list(self) -> None:
        assert compile_schema([]) == ArrayNode()

    def test_compiled_nodes_pass_through(self) -> None:
        node = compile_schema({"a": "x"})
        assert compile_schema(node) is node

    def test_non_string_keys_rejected(self) -> None:
        with pytest.raises(SchemaError):
            compile_schema({1: "x"})
