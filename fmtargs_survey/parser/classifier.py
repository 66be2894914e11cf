"""
Argument shape classifier.

Purely syntactic: nothing here knows whether a name is in scope or what type a
field has.  Decision order (first match wins):

+-----------------------+------------------------------------------------+
| Category              | Rust syntax                                    |
+=======================+================================================+
| IDENTIFIER            | ``x``, ``self``                                |
+-----------------------+------------------------------------------------+
| DIRECT_FIELD_ACCESS   | ``x.y``, ``self.0``                            |
+-----------------------+------------------------------------------------+
| NESTED_FIELD_ACCESS   | ``x.y.z``, ``x.y.z.w``                         |
+-----------------------+------------------------------------------------+
| METHOD_CALL           | ``x.len()``, ``x.y.get(0)``, ``x.f::<T>()``    |
+-----------------------+------------------------------------------------+
| OTHER                 | literals, paths, ``f(x)``, ``&x``, ``x[0]``,   |
|                       | ``f().y``, ``(x).y`` ...                       |
+-----------------------+------------------------------------------------+
"""
from __future__ import annotations

from typing import Optional

from tree_sitter import Node

from ..models import ShapeCategory
from .rust_source import is_comment

# Single-segment path expressions.  ``crate`` / ``super`` are not valid on
# their own as values, so only ``self`` joins plain identifiers.
IDENTIFIER_TYPES = frozenset({"identifier", "self"})


def is_identifier(node: Node) -> bool:
    return node.type in IDENTIFIER_TYPES


def strip_field_accesses(node: Node) -> Node:
    """Follow ``.value`` through consecutive field projections: ``a.b.c`` → ``a``."""
    while node.type == "field_expression":
        node = node.child_by_field_name("value")
    return node


def _method_receiver_call(node: Node) -> Optional[Node]:
    """Return the ``field_expression`` callee if *node* is ``recv.name(..)``."""
    if node.type != "call_expression":
        return None
    function = node.child_by_field_name("function")
    if function is None:
        return None
    if function.type == "generic_function":
        function = function.child_by_field_name("function")
        if function is None:
            return None
    return function if function.type == "field_expression" else None


def is_method_call(node: Node) -> bool:
    return _method_receiver_call(node) is not None


def is_simple_method_call(node: Node) -> bool:
    """``recv.name()`` with no arguments and no turbofish."""
    if not is_method_call(node):
        return False
    if node.child_by_field_name("function").type == "generic_function":
        return False
    arguments = node.child_by_field_name("arguments")
    return not any(not is_comment(a) for a in arguments.named_children)


def classify(node: Node) -> ShapeCategory:
    """Return the single :class:`ShapeCategory` of expression *node*."""
    if is_identifier(node):
        return ShapeCategory.IDENTIFIER

    if node.type == "field_expression":
        base = node.child_by_field_name("value")
        if is_identifier(base):
            return ShapeCategory.DIRECT_FIELD_ACCESS
        if is_identifier(strip_field_accesses(base)):
            return ShapeCategory.NESTED_FIELD_ACCESS
        return ShapeCategory.OTHER

    if is_method_call(node):
        return ShapeCategory.METHOD_CALL

    return ShapeCategory.OTHER
