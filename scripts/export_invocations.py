"""
export_invocations.py
=====================
Survey one or more Rust source trees and write every classified macro call as
one JSON object per line, for ad-hoc digging (which crates use ``x.y`` the
most, which macros are never inlineable, ...).

Each line looks like::

    {"name": "println", "source_file": "crates/foo/src/lib.rs", "line": 12,
     "tally": {"identifier": 1, "direct_field_access": 0, ...}}

Usage
-----
    python scripts/export_invocations.py \\
        --roots crates/serde-1.0.200 crates/tokio-1.37.0 \\
        --output outputs/invocations.jsonl
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Allow running from the repo root without installing the package
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fmtargs_survey.pipeline.corpus import FileSystemCorpus
from fmtargs_survey.pipeline.survey import DEFAULT_JOBS, MacroSurvey


def export(root: str, survey: MacroSurvey, out) -> int:
    corpus = FileSystemCorpus(root)
    results = survey.analyze_files(corpus, corpus.list_files())
    written = 0
    for result in sorted(results, key=lambda r: r.path):
        for call in result.calls:
            out.write(json.dumps(call.to_dict()) + "\n")
            written += 1
    return written


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Export classified Rust macro calls as JSON lines"
    )
    parser.add_argument("--roots", nargs="+", required=True, metavar="DIR")
    parser.add_argument("--jobs", "-j", type=int, default=DEFAULT_JOBS, metavar="N")
    parser.add_argument(
        "--output", "-o", default="outputs/invocations.jsonl", metavar="FILE"
    )
    args = parser.parse_args()

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    survey = MacroSurvey(jobs=args.jobs)

    with out_path.open("w", encoding="utf-8") as out:
        for root in args.roots:
            print(f"\n=== {root} ===")
            count = export(root, survey, out)
            print(f"  wrote {count} calls")


if __name__ == "__main__":
    main()
