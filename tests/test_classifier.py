"""
Tests for the argument shape classifier.

Each case parses ``let _ = <expr>;`` with the Rust grammar and classifies the
bound expression.
"""
from __future__ import annotations

import pytest

from fmtargs_survey.models import ShapeCategory
from fmtargs_survey.parser.classifier import (
    classify,
    is_simple_method_call,
    strip_field_accesses,
)
from fmtargs_survey.parser.rust_source import RustSourceParser, node_text


@pytest.fixture(scope="module")
def source_parser():
    return RustSourceParser()


@pytest.fixture
def expr(source_parser):
    """Factory: Rust expression text → its tree-sitter node."""
    trees = []

    def _parse(text: str):
        tree = source_parser.parse(f"fn f() {{ let _ = {text}; }}")
        assert not tree.root_node.has_error, text
        trees.append(tree)
        function = tree.root_node.named_children[0]
        let = function.child_by_field_name("body").named_children[0]
        return let.child_by_field_name("value")

    return _parse


# ─────────────────────────────────────────────────────────────────────────────
# Category per shape
# ─────────────────────────────────────────────────────────────────────────────


class TestClassify:
    @pytest.mark.parametrize("text", ["x", "value_2", "self"])
    def test_identifier(self, expr, text):
        assert classify(expr(text)) is ShapeCategory.IDENTIFIER

    @pytest.mark.parametrize("text", ["a.b", "self.name", "pair.0"])
    def test_direct_field_access(self, expr, text):
        assert classify(expr(text)) is ShapeCategory.DIRECT_FIELD_ACCESS

    @pytest.mark.parametrize("text", ["a.b.c", "a.b.c.d", "self.inner.0"])
    def test_nested_field_access(self, expr, text):
        assert classify(expr(text)) is ShapeCategory.NESTED_FIELD_ACCESS

    @pytest.mark.parametrize(
        "text",
        ["a.len()", "a.b.get(0)", "a.parse::<u8>()", "f(x).to_string()"],
    )
    def test_method_call(self, expr, text):
        assert classify(expr(text)) is ShapeCategory.METHOD_CALL

    @pytest.mark.parametrize(
        "text",
        [
            '"literal"',
            "42",
            "1 + 2",
            "f(x)",
            "&x",
            "x[0]",
            "a::b",
            "x?",
            "(x)",
            "f().x",
            "f().x.y",
            "x[0].y",
            "Point { x: 1, y: 2 }",
        ],
    )
    def test_other(self, expr, text):
        assert classify(expr(text)) is ShapeCategory.OTHER

    def test_path_call_is_not_a_method_call(self, expr):
        # Calling a field holding a closure needs parentheses and is a plain call
        assert classify(expr("(a.callback)()")) is ShapeCategory.OTHER


class TestSimpleMethodCall:
    def test_no_arguments(self, expr):
        assert is_simple_method_call(expr("name.len()"))

    def test_nested_receiver(self, expr):
        assert is_simple_method_call(expr("self.items.is_empty()"))

    def test_with_arguments(self, expr):
        assert not is_simple_method_call(expr("name.get(0)"))

    def test_with_turbofish(self, expr):
        assert not is_simple_method_call(expr("name.parse::<u8>()"))

    def test_not_a_method_call(self, expr):
        assert not is_simple_method_call(expr("len(name)"))
        assert not is_simple_method_call(expr("name"))


class TestStripFieldAccesses:
    def test_strips_to_innermost_base(self, expr):
        assert node_text(strip_field_accesses(expr("a.b.c.d"))) == "a"

    def test_leaves_non_field_expression_alone(self, expr):
        node = expr("f(x)")
        assert strip_field_accesses(node) == node

    def test_stops_at_call(self, expr):
        assert node_text(strip_field_accesses(expr("f().x.y"))) == "f()"
