"""
MacroSurvey
===========

Corpus-wide macro argument survey.

Combines :class:`~fmtargs_survey.parser.rust_source.RustSourceParser`
(file parsing) with
:class:`~fmtargs_survey.pipeline.invocation_visitor.InvocationVisitor`
(record production) and folds every file's records into one
:class:`~fmtargs_survey.models.SurveyReport`.

Files are independent units of work.  With ``jobs > 1`` they are spread over a
thread pool; each worker thread has its own tree-sitter parser and nothing
else is shared until the results are summed.  Because the fold is plain
addition, the report does not depend on which worker finished first.

Failure policy:

* a macro body that does not parse is dropped (counted);
* a file that cannot be read or contains syntax errors contributes no records
  and is listed in ``SurveyReport.failed_files``;
* a corpus whose file list cannot be produced raises ``OSError``.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from functools import reduce
from typing import Iterable, List, Union

from ..models import FileResult, SurveyReport
from ..parser.argument_parser import MacroArgumentParser
from ..parser.rust_source import RustSourceParser
from .corpus import CorpusSource
from .invocation_visitor import InvocationVisitor

logger = logging.getLogger(__name__)

DEFAULT_JOBS = 8


def reduce_results(results: Iterable[FileResult], files_found: int = 0) -> SurveyReport:
    """
    Fold per-file results into a single report.

    Parameters
    ----------
    results:
        File results in any order.
    files_found:
        Size of the file list the results came from.
    """
    base = SurveyReport(files_found=files_found)
    return reduce(
        lambda acc, result: acc + SurveyReport.from_file_result(result),
        results,
        base,
    )


class MacroSurvey:
    """
    High-level facade for the survey.

    Parameters
    ----------
    jobs:
        Worker threads for :meth:`analyze_corpus`.  ``1`` processes files in
        the calling thread.
    skip_files_with_errors:
        When true (default) any file whose tree contains a syntax error is
        skipped entirely.  When false, the error-free parts of such files are
        still visited.
    progress_every:
        Log an INFO progress line every this many files (0 disables).
    """

    def __init__(
        self,
        jobs: int = DEFAULT_JOBS,
        skip_files_with_errors: bool = True,
        progress_every: int = 500,
    ) -> None:
        if jobs < 1:
            raise ValueError(f"jobs must be at least 1, got {jobs}")
        self.jobs = jobs
        self.skip_files_with_errors = skip_files_with_errors
        self.progress_every = progress_every
        self._source_parser = RustSourceParser()
        self._argument_parser = MacroArgumentParser(self._source_parser)

    # ------------------------------------------------------------------
    # Primary API
    # ------------------------------------------------------------------

    def analyze_text(
        self,
        source: Union[str, bytes],
        source_name: str = "<inline>",
    ) -> FileResult:
        """
        Survey Rust source supplied as a string.

        Parameters
        ----------
        source:
            Rust source code.
        source_name:
            Used as ``source_file`` in the produced records.

        Returns
        -------
        FileResult
        """
        tree = self._source_parser.parse(source)
        if tree.root_node.has_error and self.skip_files_with_errors:
            logger.debug("Skipping %s: syntax error", source_name)
            return FileResult(path=source_name, error="syntax error")

        visitor = InvocationVisitor(self._argument_parser, source_file=source_name)
        calls = list(visitor.visit(tree.root_node))
        return FileResult(
            path=source_name,
            calls=calls,
            known_invocations=visitor.known_invocations,
            unparseable_invocations=visitor.unparseable_invocations,
            argumentless_invocations=visitor.argumentless_invocations,
        )

    def analyze_file(self, source: CorpusSource, path: str) -> FileResult:
        """Read *path* from *source* and survey it; read errors become a failed result."""
        try:
            data = source.read(path)
        except OSError as exc:
            logger.debug("Skipping %s: %s", path, exc)
            return FileResult(path=path, error=f"read error: {exc}")
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Skipping %s: invalid utf-8", path)
            return FileResult(path=path, error="invalid utf-8")
        return self.analyze_text(text, source_name=path)

    def analyze_files(self, source: CorpusSource, paths: List[str]) -> List[FileResult]:
        """
        Survey *paths*, in parallel when ``jobs > 1``.

        Results are returned in completion order.
        """
        total = len(paths)
        if self.jobs == 1 or total <= 1:
            results = []
            for done, path in enumerate(paths, start=1):
                results.append(self.analyze_file(source, path))
                self._log_progress(done, total)
            return results

        results = []
        with ThreadPoolExecutor(max_workers=self.jobs) as executor:
            futures = [executor.submit(self.analyze_file, source, p) for p in paths]
            for done, future in enumerate(as_completed(futures), start=1):
                results.append(future.result())
                self._log_progress(done, total)
        return results

    def analyze_corpus(self, source: CorpusSource) -> SurveyReport:
        """
        Survey every file of *source* and return the aggregated report.

        Raises
        ------
        OSError
            The corpus cannot list its files (e.g. missing root directory).
        """
        paths = source.list_files()
        logger.info("Surveying %d files with %d worker(s)", len(paths), self.jobs)

        results = self.analyze_files(source, paths)
        report = reduce_results(results, files_found=len(paths))

        if report.failed_files:
            logger.warning(
                "%d of %d file%s skipped (unreadable or syntax errors)",
                report.files_skipped,
                report.files_found,
                "" if report.files_found == 1 else "s",
            )
        return report

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _log_progress(self, done: int, total: int) -> None:
        if self.progress_every and (done % self.progress_every == 0 or done == total):
            logger.info("Processed %d/%d files", done, total)
