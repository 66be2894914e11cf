"""
RustSourceParser
================

Thin wrapper around the tree-sitter Rust grammar.

tree-sitter ``Parser`` objects are not safe to share between threads, so each
thread lazily builds its own; the compiled :data:`RUST_LANGUAGE` is shared.

Syntax errors never raise: tree-sitter always returns a tree and marks broken
regions with ``ERROR`` / missing nodes.  Callers decide what ``has_error``
means for them (see :meth:`RustSourceParser.parse_clean`).
"""
from __future__ import annotations

import threading
from typing import Optional, Union

import tree_sitter_rust
from tree_sitter import Language, Node, Parser, Tree

RUST_LANGUAGE = Language(tree_sitter_rust.language())

# Extras the grammar may place anywhere, including inside token trees.
COMMENT_TYPES = frozenset({"line_comment", "block_comment"})


def _as_bytes(source: Union[str, bytes]) -> bytes:
    if isinstance(source, str):
        return source.encode("utf-8")
    return source


class RustSourceParser:
    """Parses Rust source text into tree-sitter syntax trees."""

    def __init__(self) -> None:
        self._local = threading.local()

    @property
    def _parser(self) -> Parser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = Parser(RUST_LANGUAGE)
            self._local.parser = parser
        return parser

    def parse(self, source: Union[str, bytes]) -> Tree:
        """Parse *source* and return the tree, syntax errors included."""
        return self._parser.parse(_as_bytes(source))

    def parse_clean(self, source: Union[str, bytes]) -> Optional[Tree]:
        """Parse *source*; return ``None`` if the tree contains any syntax error."""
        tree = self.parse(source)
        if tree.root_node.has_error:
            return None
        return tree


def is_comment(node: Node) -> bool:
    return node.type in COMMENT_TYPES


def node_text(node: Node) -> str:
    """Decoded source text of *node* (invalid UTF-8 is replaced)."""
    return (node.text or b"").decode("utf-8", errors="replace")


def node_line(node: Node) -> int:
    """1-based line number where *node* starts."""
    return node.start_point[0] + 1
