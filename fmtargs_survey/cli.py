"""
fmtargs-survey – command-line interface
=======================================

Usage
-----
::

    python -m fmtargs_survey.cli ROOT [OPTIONS]

Options
-------
--jobs, -j            Worker threads (default: 8).
--format, -f          Output format: ``text`` (default) or ``json``.
--output, -o          Output file path (default: stdout).
--per-macro           Add a per-macro breakdown to the text report.
--keep-partial-files  Visit files that contain syntax errors instead of
                      skipping them.
--verbose, -v         Enable DEBUG logging.

Examples
--------
::

    python -m fmtargs_survey.cli crates
    python -m fmtargs_survey.cli crates -j 16 --per-macro
    python -m fmtargs_survey.cli crates -f json -o survey.json
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .output.report import format_text, to_json_str
from .pipeline.corpus import FileSystemCorpus
from .pipeline.survey import DEFAULT_JOBS, MacroSurvey


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="fmtargs-survey",
        description=(
            "Count how many Rust formatting macro calls only pass bare "
            "identifiers or field accesses as format arguments"
        ),
    )
    p.add_argument("root", help="Directory searched recursively for *.rs files")
    p.add_argument(
        "--jobs", "-j",
        type=_positive_int,
        default=DEFAULT_JOBS,
        metavar="N",
        help=f"Number of worker threads (default: {DEFAULT_JOBS})",
    )
    p.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    p.add_argument(
        "--output", "-o",
        default="-",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    p.add_argument(
        "--per-macro",
        action="store_true",
        help="Include a per-macro breakdown in the text report",
    )
    p.add_argument(
        "--keep-partial-files",
        action="store_true",
        help=(
            "Survey the parseable parts of files that contain syntax errors "
            "instead of skipping those files"
        ),
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    survey = MacroSurvey(
        jobs=args.jobs,
        skip_files_with_errors=not args.keep_partial_files,
    )

    try:
        report = survey.analyze_corpus(FileSystemCorpus(args.root))
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.format == "json":
        output_text = to_json_str(report)
    else:
        output_text = format_text(report, per_macro=args.per_macro)

    if args.output == "-":
        print(output_text)
    else:
        Path(args.output).write_text(output_text + "\n", encoding="utf-8")
        print(f"Report written to {args.output}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
