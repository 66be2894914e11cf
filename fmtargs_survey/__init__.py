"""
fmtargs-survey
==============

Measures how many Rust formatting / diagnostic macro calls (``format!``,
``println!``, ``write!``, ``assert_eq!``, the ``log`` macros, ...) pass only
bare identifiers or field accesses as format arguments, i.e. how many call
sites could drop their explicit argument list if such expressions were
captured implicitly by the format string.

Rust sources are parsed with tree-sitter.

Quick start
-----------
>>> from fmtargs_survey import MacroSurvey, FileSystemCorpus
>>> survey = MacroSurvey(jobs=8)
>>> report = survey.analyze_corpus(FileSystemCorpus("crates"))
>>> print(report.strict_inlineable, report.relaxed_inlineable, report.record_count)
"""

from .models import FileResult, MacroCall, ShapeCategory, ShapeTally, SurveyReport
from .parser.argument_parser import MacroArgumentParser
from .parser.classifier import classify
from .pipeline.corpus import FileSystemCorpus, InMemoryCorpus
from .pipeline.invocation_visitor import InvocationVisitor
from .pipeline.signatures import MACRO_SKIP_COUNTS, skip_count
from .pipeline.survey import MacroSurvey, reduce_results

__version__ = "0.1.0"
__all__ = [
    "FileResult",
    "MacroCall",
    "ShapeCategory",
    "ShapeTally",
    "SurveyReport",
    "MacroArgumentParser",
    "classify",
    "FileSystemCorpus",
    "InMemoryCorpus",
    "InvocationVisitor",
    "MACRO_SKIP_COUNTS",
    "skip_count",
    "MacroSurvey",
    "reduce_results",
]
