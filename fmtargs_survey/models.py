"""
Core data models for the macro argument survey.

Everything produced by the pipeline is a small immutable value that can be
summed: :class:`ShapeTally` and :class:`SurveyReport` both form a monoid under
``+`` so per-file results can be folded in any order.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple


# ---------------------------------------------------------------------------
# Shape categories
# ---------------------------------------------------------------------------


class ShapeCategory(enum.Enum):
    """Syntactic shape of one macro argument expression."""

    IDENTIFIER = "identifier"                    # x
    DIRECT_FIELD_ACCESS = "direct_field_access"  # x.y
    NESTED_FIELD_ACCESS = "nested_field_access"  # x.y.z, x.y.z.w
    METHOD_CALL = "method_call"                  # x.len(), x.y.f(1)
    OTHER = "other"                              # literals, calls, &x, ...


# ---------------------------------------------------------------------------
# Per-category tally
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShapeTally:
    """
    Counts of classified arguments, one field per :class:`ShapeCategory`.

    ``simple_method_call`` is not a category of its own: it counts the subset
    of ``method_call`` arguments that take no arguments and no turbofish
    (``x.len()`` but not ``x.get(0)`` or ``x.parse::<u8>()``).
    """

    identifier: int = 0
    direct_field_access: int = 0
    nested_field_access: int = 0
    method_call: int = 0
    other: int = 0
    simple_method_call: int = 0

    @classmethod
    def from_categories(
        cls,
        categories: Iterable[ShapeCategory],
        simple_method_calls: int = 0,
    ) -> ShapeTally:
        counts = {c.value: 0 for c in ShapeCategory}
        for category in categories:
            counts[category.value] += 1
        return cls(simple_method_call=simple_method_calls, **counts)

    def __add__(self, other: ShapeTally) -> ShapeTally:
        if not isinstance(other, ShapeTally):
            return NotImplemented
        return ShapeTally(
            **{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)}
        )

    def count(self, category: ShapeCategory) -> int:
        return getattr(self, category.value)

    @property
    def total(self) -> int:
        """Number of classified arguments (``simple_method_call`` excluded)."""
        return sum(self.count(c) for c in ShapeCategory)

    # ------------------------------------------------------------------
    # Inlineability predicates
    # ------------------------------------------------------------------

    @property
    def strict_inlineable(self) -> bool:
        """Every argument is a bare identifier."""
        return (
            self.other == 0
            and self.method_call == 0
            and self.direct_field_access == 0
            and self.nested_field_access == 0
        )

    @property
    def relaxed_inlineable(self) -> bool:
        """Identifiers and field accesses of any depth only."""
        return self.other == 0 and self.method_call == 0

    @property
    def simple_method_inlineable(self) -> bool:
        """Like :attr:`relaxed_inlineable` but also allowing ``x.f()``."""
        return self.other == 0 and self.method_call == self.simple_method_call

    def to_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# ---------------------------------------------------------------------------
# Macro invocation record
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MacroCall:
    """One known, successfully parsed macro invocation with arguments to classify."""

    name: str
    tally: ShapeTally
    source_file: str = "<inline>"
    line: int = 0

    def __repr__(self) -> str:
        return f"MacroCall(name={self.name!r}, line={self.line}, tally={self.tally})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "source_file": self.source_file,
            "line": self.line,
            "tally": self.tally.to_dict(),
        }


# ---------------------------------------------------------------------------
# Per-file outcome
# ---------------------------------------------------------------------------


@dataclass
class FileResult:
    """
    Outcome of surveying a single source file.

    ``error`` is ``None`` when the file was read and parsed; otherwise it holds
    a short reason and ``calls`` is empty.
    """

    path: str
    calls: List[MacroCall] = field(default_factory=list)
    known_invocations: int = 0         # name found in the signature table
    unparseable_invocations: int = 0   # body rejected by the argument parser
    argumentless_invocations: int = 0  # nothing beyond the skipped arguments
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self) -> str:
        status = "ok" if self.ok else f"error={self.error!r}"
        return f"FileResult(path={self.path!r}, calls={len(self.calls)}, {status})"


# ---------------------------------------------------------------------------
# Aggregated report
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MacroSummary:
    """Records and tally for a single macro name."""

    count: int = 0
    tally: ShapeTally = ShapeTally()

    def __add__(self, other: MacroSummary) -> MacroSummary:
        return MacroSummary(self.count + other.count, self.tally + other.tally)


def _merge_per_macro(
    left: Mapping[str, MacroSummary],
    right: Mapping[str, MacroSummary],
) -> Tuple[Tuple[str, MacroSummary], ...]:
    merged: Dict[str, MacroSummary] = dict(left)
    for name, summary in right.items():
        merged[name] = merged.get(name, MacroSummary()) + summary
    return tuple(sorted(merged.items()))


@dataclass(frozen=True)
class SurveyReport:
    """
    Corpus-wide totals.

    Reports are combined with ``+``.  Every field is either a plain sum or a
    sorted tuple, so the result of folding a set of reports does not depend on
    the order or grouping of the additions.
    """

    files_found: int = 0
    files_parsed: int = 0
    failed_files: Tuple[str, ...] = ()
    known_invocations: int = 0
    unparseable_invocations: int = 0
    argumentless_invocations: int = 0
    record_count: int = 0
    tally: ShapeTally = ShapeTally()
    strict_inlineable: int = 0
    relaxed_inlineable: int = 0
    simple_method_inlineable: int = 0
    per_macro_items: Tuple[Tuple[str, MacroSummary], ...] = ()

    @classmethod
    def from_file_result(cls, result: FileResult) -> SurveyReport:
        per_macro: Dict[str, MacroSummary] = {}
        tally = ShapeTally()
        for call in result.calls:
            tally = tally + call.tally
            per_macro[call.name] = per_macro.get(call.name, MacroSummary()) + MacroSummary(
                1, call.tally
            )
        return cls(
            files_parsed=1 if result.ok else 0,
            failed_files=() if result.ok else (result.path,),
            known_invocations=result.known_invocations,
            unparseable_invocations=result.unparseable_invocations,
            argumentless_invocations=result.argumentless_invocations,
            record_count=len(result.calls),
            tally=tally,
            strict_inlineable=sum(1 for c in result.calls if c.tally.strict_inlineable),
            relaxed_inlineable=sum(1 for c in result.calls if c.tally.relaxed_inlineable),
            simple_method_inlineable=sum(
                1 for c in result.calls if c.tally.simple_method_inlineable
            ),
            per_macro_items=tuple(sorted(per_macro.items())),
        )

    def __add__(self, other: SurveyReport) -> SurveyReport:
        if not isinstance(other, SurveyReport):
            return NotImplemented
        return SurveyReport(
            files_found=self.files_found + other.files_found,
            files_parsed=self.files_parsed + other.files_parsed,
            failed_files=tuple(sorted(self.failed_files + other.failed_files)),
            known_invocations=self.known_invocations + other.known_invocations,
            unparseable_invocations=self.unparseable_invocations + other.unparseable_invocations,
            argumentless_invocations=(
                self.argumentless_invocations + other.argumentless_invocations
            ),
            record_count=self.record_count + other.record_count,
            tally=self.tally + other.tally,
            strict_inlineable=self.strict_inlineable + other.strict_inlineable,
            relaxed_inlineable=self.relaxed_inlineable + other.relaxed_inlineable,
            simple_method_inlineable=(
                self.simple_method_inlineable + other.simple_method_inlineable
            ),
            per_macro_items=_merge_per_macro(self.per_macro, other.per_macro),
        )

    @property
    def per_macro(self) -> Dict[str, MacroSummary]:
        return dict(self.per_macro_items)

    @property
    def files_skipped(self) -> int:
        return len(self.failed_files)

    def __repr__(self) -> str:
        return (
            f"SurveyReport(files={self.files_parsed}/{self.files_found}, "
            f"records={self.record_count}, tally={self.tally})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files_found": self.files_found,
            "files_parsed": self.files_parsed,
            "failed_files": list(self.failed_files),
            "known_invocations": self.known_invocations,
            "unparseable_invocations": self.unparseable_invocations,
            "argumentless_invocations": self.argumentless_invocations,
            "record_count": self.record_count,
            "tally": self.tally.to_dict(),
            "strict_inlineable": self.strict_inlineable,
            "relaxed_inlineable": self.relaxed_inlineable,
            "simple_method_inlineable": self.simple_method_inlineable,
            "per_macro": {
                name: {"count": s.count, "tally": s.tally.to_dict()}
                for name, s in self.per_macro_items
            },
        }
