"""
Report rendering.

``format_text`` produces the plain line-oriented summary printed by the CLI;
``to_json_str`` dumps :meth:`SurveyReport.to_dict
<fmtargs_survey.models.SurveyReport.to_dict>`.
"""
from __future__ import annotations

import json
from typing import List

from ..models import SurveyReport


def _ratio(count: int, total: int) -> str:
    return f"{count}/{total}"


def format_text(report: SurveyReport, per_macro: bool = False) -> str:
    t = report.tally
    total = report.record_count
    lines: List[str] = [
        f"Found {report.files_found} files",
        f"Parsed {report.files_parsed} files ({report.files_skipped} skipped)",
        f"Found {total} macro calls",
        f"  ({report.known_invocations} known invocations, "
        f"{report.unparseable_invocations} unparseable, "
        f"{report.argumentless_invocations} without format arguments)",
        f"Ident: {t.identifier}",
        f"Field access: {t.direct_field_access}",
        f"Nested field access: {t.nested_field_access}",
        f"Method call: {t.method_call} ({t.simple_method_call} without arguments)",
        f"Other: {t.other}",
        f"Inlineable today: {_ratio(report.strict_inlineable, total)}",
        "Inlineable if we support field accesses: "
        f"{_ratio(report.relaxed_inlineable, total)}",
        "Inlineable if we also support simple method calls: "
        f"{_ratio(report.simple_method_inlineable, total)}",
    ]

    if per_macro and report.per_macro_items:
        lines.append("")
        lines.append(f"  {'MACRO':<12}  {'CALLS':>7}  {'IDENT':>7}  {'FIELD':>7}  "
                     f"{'NESTED':>7}  {'METHOD':>7}  {'OTHER':>7}")
        for name, summary in report.per_macro_items:
            s = summary.tally
            lines.append(
                f"  {name:<12}  {summary.count:>7}  {s.identifier:>7}  "
                f"{s.direct_field_access:>7}  {s.nested_field_access:>7}  "
                f"{s.method_call:>7}  {s.other:>7}"
            )

    return "\n".join(lines)


def to_json_str(report: SurveyReport) -> str:
    return json.dumps(report.to_dict(), indent=2)
