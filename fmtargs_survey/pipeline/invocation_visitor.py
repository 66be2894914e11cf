"""
InvocationVisitor
=================

Walks a parsed Rust file and yields one
:class:`~fmtargs_survey.models.MacroCall` per formatting macro invocation
whose arguments can be classified.

For every ``macro_invocation`` node, in source order:

1. The macro path must be a single identifier present in
   :data:`~fmtargs_survey.pipeline.signatures.MACRO_SKIP_COUNTS`
   (``println!`` yes, ``std::println!`` no).  Others are ignored silently.
2. The body is parsed by
   :class:`~fmtargs_survey.parser.argument_parser.MacroArgumentParser`.
   Unparseable bodies are dropped.
3. If there are arguments beyond the skip count, each of them is classified
   and the counts become one record.

Invocations written inside another macro's body (``vec![format!(..)]``,
``macro_rules!`` arms) are plain tokens to tree-sitter and are not visited.
"""
from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from tree_sitter import Node

from ..models import MacroCall, ShapeTally
from ..parser.argument_parser import MacroArgumentParser
from ..parser.classifier import classify, is_simple_method_call
from ..parser.rust_source import node_line, node_text
from .signatures import skip_count

logger = logging.getLogger(__name__)


def iter_macro_invocations(root: Node) -> Iterator[Node]:
    """Depth-first, source-order walk yielding every ``macro_invocation`` node."""
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        if node.type == "macro_invocation":
            yield node
        stack.extend(reversed(node.children))


def _body(invocation: Node) -> Optional[Node]:
    for child in invocation.children:
        if child.type == "token_tree":
            return child
    return None


class InvocationVisitor:
    """
    Produces macro call records for one syntax tree.

    The counters are updated while :meth:`visit` is consumed, so read them
    after exhausting the iterator.

    Attributes
    ----------
    known_invocations:
        Invocations whose name is in the signature table.
    unparseable_invocations:
        Known invocations whose body was rejected by the argument parser.
    argumentless_invocations:
        Known, parsed invocations with nothing beyond the skipped arguments.
    """

    def __init__(
        self,
        argument_parser: Optional[MacroArgumentParser] = None,
        source_file: str = "<inline>",
    ) -> None:
        self._arguments = argument_parser or MacroArgumentParser()
        self.source_file = source_file
        self.known_invocations = 0
        self.unparseable_invocations = 0
        self.argumentless_invocations = 0

    def visit(self, root: Node) -> Iterator[MacroCall]:
        for invocation in iter_macro_invocations(root):
            call = self._visit_invocation(invocation)
            if call is not None:
                yield call

    def _visit_invocation(self, invocation: Node) -> Optional[MacroCall]:
        path = invocation.child_by_field_name("macro")
        if path is None or path.type != "identifier":
            return None
        name = node_text(path)
        skip = skip_count(name)
        if skip is None:
            return None
        self.known_invocations += 1

        body = _body(invocation)
        arguments = self._arguments.parse(body) if body is not None else None
        if arguments is None:
            self.unparseable_invocations += 1
            logger.debug(
                "%s:%d: could not parse %s! arguments",
                self.source_file, node_line(invocation), name,
            )
            return None

        if len(arguments) <= skip:
            self.argumentless_invocations += 1
            return None

        classified = arguments[skip:]
        tally = ShapeTally.from_categories(
            (classify(expr) for expr in classified),
            simple_method_calls=sum(1 for expr in classified if is_simple_method_call(expr)),
        )
        return MacroCall(
            name=name,
            tally=tally,
            source_file=self.source_file,
            line=node_line(invocation),
        )
