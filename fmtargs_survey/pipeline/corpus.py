"""
Corpus sources.

The survey only needs two things from a corpus: the list of files to look at
and their bytes.  :class:`FileSystemCorpus` globs a directory tree;
:class:`InMemoryCorpus` serves a fixed mapping (tests, embedding).  Fetching
crates or repositories onto disk happens elsewhere.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Protocol, Union

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "**/*.rs"


class CorpusSource(Protocol):
    """Anything that can enumerate and read source files."""

    def list_files(self) -> List[str]:
        ...

    def read(self, path: str) -> bytes:
        ...


class FileSystemCorpus:
    """
    Rust files under a root directory.

    Parameters
    ----------
    root:
        Directory to search.
    pattern:
        Glob pattern relative to *root* (default ``**/*.rs``).
    """

    def __init__(self, root: Union[str, Path], pattern: str = DEFAULT_PATTERN) -> None:
        self.root = Path(root)
        self.pattern = pattern

    def list_files(self) -> List[str]:
        """
        Return matching file paths, sorted.

        Raises
        ------
        FileNotFoundError
            *root* does not exist.
        NotADirectoryError
            *root* is not a directory.
        """
        if not self.root.exists():
            raise FileNotFoundError(f"Corpus root not found: {self.root}")
        if not self.root.is_dir():
            raise NotADirectoryError(f"Corpus root is not a directory: {self.root}")
        files = sorted(str(p) for p in self.root.glob(self.pattern) if p.is_file())
        logger.info("Found %d files under %s", len(files), self.root)
        return files

    def read(self, path: str) -> bytes:
        return Path(path).read_bytes()


class InMemoryCorpus:
    """A fixed ``{name: source}`` mapping."""

    def __init__(self, files: Mapping[str, Union[str, bytes]]) -> None:
        self._files: Dict[str, bytes] = {
            name: src.encode("utf-8") if isinstance(src, str) else src
            for name, src in files.items()
        }

    def list_files(self) -> List[str]:
        return sorted(self._files)

    def read(self, path: str) -> bytes:
        try:
            return self._files[path]
        except KeyError:
            raise FileNotFoundError(path) from None
