"""
Core aggregation logic: file classification and output writing.
"""

from .aggregator import Aggregator, DumpStats, EventKind, check_folder, iter_files, relative_path
from .classifier import FileClassifier, should_aggregate

__all__ = [
    "Aggregator",
    "DumpStats",
    "EventKind",
    "FileClassifier",
    "check_folder",
    "iter_files",
    "relative_path",
    "should_aggregate",
]
