"""
File Classifier - decides which discovered files get aggregated.

A file qualifies when its basename matches the code extension allow-list or
the include-filename list, and it is not binary.

Binary detection is a fixed heuristic rather than a platform content-type
probe: the first BINARY_SAMPLE_SIZE bytes are read and the file is binary
if they contain a NUL byte or are not valid UTF-8. Empty files are text.
"""

import codecs
import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Union

from ..config import CODE_EXTENSIONS, INCLUDE_FILES

logger = logging.getLogger(__name__)

BINARY_SAMPLE_SIZE = 8192

PathLike = Union[str, os.PathLike]


def is_code_file(path: PathLike, patterns: Iterable[str] = CODE_EXTENSIONS) -> bool:
    """
    Check the basename against the extension/basename allow-list.

    Args:
        path: File path; only its basename is inspected.
        patterns: Glob patterns (``*.py``) or exact names (``Makefile``).

    Returns:
        bool: True on an exact or glob match.
    """
    filename = os.path.basename(path)
    return any(filename == pattern or fnmatchcase(filename, pattern) for pattern in patterns)


def is_include_file(path: PathLike, include_files: Iterable[str] = INCLUDE_FILES) -> bool:
    """
    Check the basename against the include-filename list.

    Directory components of the list entries are ignored, so
    ``config/database.yml`` matches any ``database.yml``.
    """
    filename = os.path.basename(path)
    return any(filename == os.path.basename(entry) for entry in include_files)


def is_binary_file(path: PathLike) -> bool:
    """
    Heuristic binary detection.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with open(path, "rb") as f:
        # One extra byte tells a full sample window apart from end of file
        sample = f.read(BINARY_SAMPLE_SIZE + 1)
    at_eof = len(sample) <= BINARY_SAMPLE_SIZE
    sample = sample[:BINARY_SAMPLE_SIZE]

    if not sample:
        return False
    if b"\0" in sample:
        return True

    # Incremental decode tolerates a multi-byte sequence cut at the boundary
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(sample, final=at_eof)
    except UnicodeDecodeError:
        return True
    return False


def should_aggregate(
    path: PathLike,
    patterns: Iterable[str] = CODE_EXTENSIONS,
    include_files: Iterable[str] = INCLUDE_FILES,
) -> bool:
    """True iff the file matches an allow-list and is not binary."""
    if not (is_code_file(path, patterns) or is_include_file(path, include_files)):
        return False
    return not is_binary_file(path)


class FileClassifier:
    """Classifier bound to a specific pair of allow-lists."""

    def __init__(
        self,
        patterns: Iterable[str] = CODE_EXTENSIONS,
        include_files: Iterable[str] = INCLUDE_FILES,
    ):
        self.patterns = tuple(patterns)
        self.include_files = tuple(include_files)

    def matches(self, path: Path) -> bool:
        """Name-based check only; does not touch file contents."""
        return is_code_file(path, self.patterns) or is_include_file(path, self.include_files)

    def is_binary(self, path: Path) -> bool:
        return is_binary_file(path)
