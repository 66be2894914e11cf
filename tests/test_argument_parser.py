"""
Tests for MacroArgumentParser.

Covers named argument stripping, top-level commas inside generics and
closures, named arguments, trailing commas, comments inside
macro bodies, and rejection of bodies that are not argument lists.
"""
from __future__ import annotations

import pytest

from fmtargs_survey.parser.argument_parser import MacroArgumentParser
from fmtargs_survey.parser.rust_source import RustSourceParser, node_text
from fmtargs_survey.pipeline.invocation_visitor import iter_macro_invocations


@pytest.fixture(scope="module")
def source_parser():
    return RustSourceParser()


@pytest.fixture
def parser(source_parser):
    return MacroArgumentParser(source_parser)


@pytest.fixture
def body(source_parser):
    """Factory: macro invocation text → the token tree of its body."""
    trees = []

    def _body(invocation: str):
        tree = source_parser.parse(f"fn f() {{ {invocation}; }}")
        trees.append(tree)
        node = next(iter_macro_invocations(tree.root_node))
        return next(c for c in node.children if c.type == "token_tree")

    return _body


def _texts(nodes):
    return [node_text(n) for n in nodes]


# ─────────────────────────────────────────────────────────────────────────────
# Named argument stripping
# ─────────────────────────────────────────────────────────────────────────────


class TestStripArgumentNames:
    def test_positional_body_kept(self, body):
        text = MacroArgumentParser.strip_argument_names(body('format!("{}", x as u8)'))
        assert text == b'"{}", x as u8\n,'

    def test_named_argument_keeps_only_value(self, body):
        text = MacroArgumentParser.strip_argument_names(
            body('format!("{a} {}", a = self.value, b)')
        )
        assert text == b'"{a} {}",  self.value, b\n,'

    def test_equality_is_not_a_named_argument(self, body):
        text = MacroArgumentParser.strip_argument_names(body('assert!(a == b, "{}", c)'))
        assert text == b'a == b, "{}", c\n,'

    def test_first_argument_never_stripped(self, body):
        text = MacroArgumentParser.strip_argument_names(body("m!(x = 1)"))
        assert text == b"x = 1\n,"

    def test_trailing_comma_not_doubled(self, body):
        text = MacroArgumentParser.strip_argument_names(body('format!("{}", x,)'))
        assert text == b'"{}", x,'

    def test_empty_body_rejected(self, body):
        assert MacroArgumentParser.strip_argument_names(body("format!()")) is None

    def test_named_argument_without_value_rejected(self, body):
        assert MacroArgumentParser.strip_argument_names(body('format!("{a}", a =)')) is None
        assert (
            MacroArgumentParser.strip_argument_names(body('format!("{a}", a =, b)')) is None
        )


# ─────────────────────────────────────────────────────────────────────────────
# Full parse
# ─────────────────────────────────────────────────────────────────────────────


class TestParse:
    def test_returns_expressions_in_order(self, parser, body):
        exprs = parser.parse(body('println!("{} {} {}", a, b.c, d.len())'))
        assert _texts(exprs) == ['"{} {} {}"', "a", "b.c", "d.len()"]
        assert [e.type for e in exprs] == [
            "string_literal",
            "identifier",
            "field_expression",
            "call_expression",
        ]

    def test_named_argument_position_kept(self, parser, body):
        exprs = parser.parse(body('println!("{} {n} {}", a, n = b.c, d)'))
        assert _texts(exprs) == ['"{} {n} {}"', "a", "b.c", "d"]

    def test_trailing_comma_same_as_without(self, parser, body):
        with_comma = parser.parse(body('format!("{}", x,)'))
        without = parser.parse(body('format!("{}", x)'))
        assert _texts(with_comma) == _texts(without)

    def test_first_argument_is_never_named(self, parser, body):
        exprs = parser.parse(body("dbg_like!(x = 1)"))
        assert len(exprs) == 1
        assert exprs[0].type == "assignment_expression"

    def test_single_argument(self, parser, body):
        exprs = parser.parse(body('format!("no args")'))
        assert _texts(exprs) == ['"no args"']

    def test_block_and_closure_arguments(self, parser, body):
        exprs = parser.parse(body('format!("{}", { let y = 1; y }, |v| v + 1)'))
        assert [e.type for e in exprs] == ["string_literal", "block", "closure_expression"]

    def test_invalid_expression_rejected(self, parser, body):
        assert parser.parse(body('format!("{}", a b)')) is None

    def test_statement_separator_rejected(self, parser, body):
        assert parser.parse(body('format!("{}", a; b)')) is None

    def test_empty_argument_rejected(self, parser, body):
        assert parser.parse(body('format!("{}", a,, b)')) is None

    def test_macro_argument_is_an_expression(self, parser, body):
        exprs = parser.parse(body('println!("{}", format!("{}", x))'))
        assert exprs[1].type == "macro_invocation"

    def test_lone_comma_rejected(self, parser, body):
        assert parser.parse(body("format!(,)")) is None

    def test_comments_ignored(self, parser, body):
        exprs = parser.parse(body('format!("{}", /* the name */ name, // done\n)'))
        assert _texts(exprs) == ['"{}"', "name"]

    def test_commas_inside_string_and_groups(self, parser, body):
        exprs = parser.parse(body('format!("({}, {})", f(a, b), [1, 2])'))
        assert _texts(exprs) == ['"({}, {})"', "f(a, b)", "[1, 2]"]

    def test_turbofish_with_several_type_arguments(self, parser, body):
        exprs = parser.parse(body('println!("{:?}", x.collect::<HashMap<_, _>>())'))
        assert _texts(exprs) == ['"{:?}"', "x.collect::<HashMap<_, _>>()"]
        assert exprs[1].type == "call_expression"

    def test_generic_function_call(self, parser, body):
        exprs = parser.parse(body('println!("{}", foo::<A, B>(x), y)'))
        assert _texts(exprs) == ['"{}"', "foo::<A, B>(x)", "y"]

    def test_closure_with_two_parameters(self, parser, body):
        exprs = parser.parse(body('println!("{:?}", v.iter().fold(0, |a, b| a + b), |a, b| a + b)'))
        assert len(exprs) == 3
        assert exprs[2].type == "closure_expression"
        assert node_text(exprs[2]) == "|a, b| a + b"

    def test_comparisons_across_commas(self, parser, body):
        exprs = parser.parse(body('assert!(a < b, "{}", c > d)'))
        assert _texts(exprs) == ["a < b", '"{}"', "c > d"]
