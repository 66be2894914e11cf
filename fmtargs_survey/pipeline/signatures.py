"""
Known formatting / diagnostic macros and their leading argument counts.

The skip count is the number of arguments the macro's own calling convention
puts in front of the format arguments (the format string, the writer, the
asserted condition or operands).  Those are never classified.

Used by :class:`~fmtargs_survey.pipeline.invocation_visitor.InvocationVisitor`
to decide which ``name!(...)`` invocations are worth parsing at all.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

_FORMAT_STRING_FIRST = (
    "format_args", "format",
    "panic", "unreachable", "unimplemented", "todo",
    # log crate
    "info", "debug", "warn", "error", "trace",
    "print", "println", "eprint", "eprintln",
)

# writer / condition, then the format string
_TWO_LEADING = ("write", "writeln", "assert")

# left, right, then the format string
_THREE_LEADING = ("assert_eq", "assert_ne")


MACRO_SKIP_COUNTS: Mapping[str, int] = MappingProxyType(
    {
        **{name: 1 for name in _FORMAT_STRING_FIRST},
        **{name: 2 for name in _TWO_LEADING},
        **{name: 3 for name in _THREE_LEADING},
    }
)


def skip_count(name: str) -> Optional[int]:
    """Return the number of leading arguments for *name*, or ``None`` if unknown."""
    return MACRO_SKIP_COUNTS.get(name)
