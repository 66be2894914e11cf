"""
MacroArgumentParser
===================

Turns the token tree of a macro invocation into a list of argument
expressions.

tree-sitter does not parse macro bodies: ``format!("{}", a.b)`` is a
``macro_invocation`` whose body is a flat ``token_tree``.  The body is
handled in two steps:

1. **Strip names.**  A top-level ``,`` followed by ``IDENT =`` starts a named
   argument (``name = expr``); the ``IDENT =`` tokens are cut out of the body
   text.  Nothing else is touched: a token tree only nests ``(..)`` /
   ``[..]`` / ``{..}``, so commas inside a turbofish
   (``x.collect::<HashMap<_, _>>()``) or a closure parameter list
   (``|a, b| a + b``) sit at the top level too and must be left for the
   expression grammar.
2. **Parse** the remaining body as a tuple with the Rust grammar::

       fn __macro_args() {
       let _ = (
       <body>
       ,);
       }

   A trailing comma is only appended when the body does not already end with
   one.  The wrapper must parse without errors and yield a tuple; its elements
   are the arguments.

Grammar accepted::

    arglist := expr (',' (named | expr))* ','?
    named   := IDENT '=' expr

Anything else (``a,,b``, an empty body, ``name =`` without a value, token
soup that is not an expression) makes :meth:`MacroArgumentParser.parse`
return ``None``.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from tree_sitter import Node

from .rust_source import RustSourceParser, is_comment

logger = logging.getLogger(__name__)

_WRAPPER_PREFIX = b"fn __macro_args() {\nlet _ = (\n"
_WRAPPER_SUFFIX = b");\n}\n"


class MacroArgumentParser:
    """
    Parses macro invocation bodies into argument expression nodes.

    Parameters
    ----------
    source_parser:
        Host grammar used to parse the argument expressions.  A private
        :class:`RustSourceParser` is created when omitted.
    """

    def __init__(self, source_parser: Optional[RustSourceParser] = None) -> None:
        self._source_parser = source_parser or RustSourceParser()

    def parse(self, token_tree: Node) -> Optional[List[Node]]:
        """
        Parse the body of one macro invocation.

        Parameters
        ----------
        token_tree:
            The ``token_tree`` child of a ``macro_invocation`` node, delimiters
            included.

        Returns
        -------
        Optional[List[Node]]
            Argument expressions in source order, or ``None`` when the body
            does not follow the argument-list grammar.
        """
        body = self.strip_argument_names(token_tree)
        if body is None:
            return None
        return self._parse_expressions(body)

    # ------------------------------------------------------------------
    # Step 1: named argument prefixes
    # ------------------------------------------------------------------

    @staticmethod
    def strip_argument_names(token_tree: Node) -> Optional[bytes]:
        """
        Return the body of *token_tree* (delimiters excluded) with every
        ``IDENT =`` prefix of a named argument removed.

        Returns ``None`` for an empty body and for a named argument without a
        value.
        """
        children = token_tree.children
        tokens = [t for t in children[1:-1] if not is_comment(t)]
        if not tokens:
            return None

        raw = token_tree.text or b""
        base = token_tree.start_byte
        start = children[0].end_byte - base
        end = children[-1].start_byte - base

        pieces: List[bytes] = []
        cursor = start
        for index in range(1, len(tokens) - 1):
            if not (
                tokens[index - 1].type == ","
                and tokens[index].type == "identifier"
                and tokens[index + 1].type == "="
            ):
                continue
            value = tokens[index + 2] if index + 2 < len(tokens) else None
            if value is None or value.type == ",":
                return None
            pieces.append(raw[cursor : tokens[index].start_byte - base])
            cursor = tokens[index + 1].end_byte - base
        pieces.append(raw[cursor:end])

        text = b"".join(pieces)
        # newline first: the body may end in a line comment
        if tokens[-1].type != ",":
            text += b"\n,"
        return text

    # ------------------------------------------------------------------
    # Step 2: expression parsing
    # ------------------------------------------------------------------

    def _parse_expressions(self, body: bytes) -> Optional[List[Node]]:
        snippet = _WRAPPER_PREFIX + body + b"\n" + _WRAPPER_SUFFIX
        tree = self._source_parser.parse_clean(snippet)
        if tree is None:
            logger.debug("Macro arguments are not valid expressions: %r", body)
            return None

        tuple_node = _wrapped_tuple(tree.root_node)
        if tuple_node is None:
            return None

        elements = [
            child
            for child in tuple_node.named_children
            if not is_comment(child) and child.type != "attribute_item"
        ]
        return elements or None


def _only_named_child(node: Node) -> Optional[Node]:
    children = [c for c in node.named_children if not is_comment(c)]
    return children[0] if len(children) == 1 else None


def _wrapped_tuple(root: Node) -> Optional[Node]:
    """Locate the ``(..,)`` tuple inside the wrapper function, if intact."""
    function = _only_named_child(root)
    if function is None or function.type != "function_item":
        return None
    body = function.child_by_field_name("body")
    if body is None:
        return None
    statement = _only_named_child(body)
    if statement is None or statement.type != "let_declaration":
        return None
    value = statement.child_by_field_name("value")
    if value is None or value.type != "tuple_expression":
        return None
    return value
