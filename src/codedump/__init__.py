"""
codedump - concatenate a project's source files into a single text file.

Walks a set of folders, keeps files whose names match the code extension or
include-filename allow-lists, skips binaries, and writes each survivor to
one output file under a path header.

Key Components:
- config: built-in defaults and YAML config loading
- core.classifier: allow-list matching and binary detection
- core.aggregator: folder walking and output writing
- cli: the ``codedump`` command

Usage:
    from codedump import Aggregator

    stats = Aggregator(Path("dump.txt")).run(["src", "docs"])
"""

__version__ = "0.1.0"

from .core.aggregator import Aggregator, DumpStats
from .core.classifier import FileClassifier, is_binary_file, is_code_file, is_include_file

__all__ = [
    "__version__",
    "Aggregator",
    "DumpStats",
    "FileClassifier",
    "is_binary_file",
    "is_code_file",
    "is_include_file",
]
