"""
Aggregator - walks folders and concatenates qualifying files.

Each aggregated file becomes one entry in the output:

    <relative/path/to/file>
    <raw contents>
    <blank>
    <blank>

Folder problems are advisory: the folder is reported and skipped, and the
run continues with the next one.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence

from .classifier import FileClassifier
from .result import Err, Ok, Result

logger = logging.getLogger(__name__)

SEPARATOR = b"\n\n"


class EventKind(str, Enum):
    """Progress notifications emitted during a run."""

    SCAN = "scan"
    WARNING = "warning"
    SKIP = "skip"
    PROCESS = "process"


EventCallback = Callable[[EventKind, str], None]


@dataclass
class FolderError:
    """Why a requested folder was skipped."""
    folder: str
    reason: str

    @property
    def message(self) -> str:
        return f"Folder '{self.folder}' {self.reason}, skipping..."


@dataclass
class DumpStats:
    files_written: int = 0
    files_skipped_binary: int = 0
    files_unreadable: int = 0
    folders_scanned: int = 0
    folders_skipped: List[str] = field(default_factory=list)
    output_path: str = ""


def check_folder(folder: str) -> Result[Path, FolderError]:
    """Ok(path) if the folder exists, is a directory and is readable."""
    path = Path(folder)
    if not path.exists():
        return Err(FolderError(folder, "does not exist"))
    if not path.is_dir():
        return Err(FolderError(folder, "is not a directory"))
    if not os.access(path, os.R_OK):
        return Err(FolderError(folder, "is not readable"))
    return Ok(path)


def relative_path(path: Path, start: Optional[Path] = None) -> str:
    """
    Path relative to ``start`` (the working directory by default).

    Falls back to the raw path when no relative form exists, e.g. a
    different drive on Windows.
    """
    start = start if start is not None else Path.cwd()
    try:
        return os.path.relpath(os.path.abspath(path), os.path.abspath(start))
    except ValueError:
        return str(path)


def iter_files(folder: Path) -> Iterator[Path]:
    """
    Yield regular files under ``folder`` recursively, in sorted order.

    Symlinks are neither followed nor yielded. Unreadable subdirectories
    are logged and skipped.
    """

    def on_walk_error(err: OSError) -> None:
        logger.warning(f"Cannot read directory {err.filename}: {err.strerror}")

    for dirpath, dirnames, filenames in os.walk(folder, onerror=on_walk_error):
        dirnames.sort()
        for filename in sorted(filenames):
            file_path = Path(dirpath) / filename
            if file_path.is_symlink() or not file_path.is_file():
                continue
            yield file_path


class Aggregator:
    """
    Concatenates qualifying files from a list of folders into one output file.
    """

    def __init__(
        self,
        output_path: Path,
        classifier: Optional[FileClassifier] = None,
        cwd: Optional[Path] = None,
        on_event: Optional[EventCallback] = None,
    ):
        self.output_path = Path(output_path)
        self.classifier = classifier or FileClassifier()
        self.cwd = cwd if cwd is not None else Path.cwd()
        self._on_event = on_event
        self._logger = logging.getLogger(f"{__name__}.Aggregator")

    def _emit(self, kind: EventKind, message: str) -> None:
        if self._on_event:
            self._on_event(kind, message)

    def _warn(self, message: str) -> None:
        """Warnings reach the log when no progress callback is listening."""
        if self._on_event:
            self._emit(EventKind.WARNING, message)
        else:
            self._logger.warning(message)

    def run(self, folders: Sequence[str]) -> DumpStats:
        """
        Truncate the output file and aggregate every qualifying file.

        Raises:
            OSError: If the output file cannot be opened for writing.
        """
        stats = DumpStats(output_path=str(self.output_path.resolve()))

        with open(self.output_path, "wb") as out:
            output_real = self.output_path.resolve()

            for folder in folders:
                self._emit(EventKind.SCAN, f"Scanning folder: {folder}")

                checked = check_folder(folder)
                if checked.is_err():
                    error = checked.unwrap_err()
                    self._warn(error.message)
                    stats.folders_skipped.append(folder)
                    continue

                stats.folders_scanned += 1
                for file_path in iter_files(checked.unwrap()):
                    if file_path.resolve() == output_real:
                        self._logger.debug(f"Not aggregating the output file {file_path}")
                        continue
                    self._aggregate_file(out, file_path, stats)

        return stats

    def _aggregate_file(self, out, file_path: Path, stats: DumpStats) -> None:
        if not self.classifier.matches(file_path):
            self._logger.debug(f"No allow-list match: {file_path}")
            return

        try:
            if self.classifier.is_binary(file_path):
                self._emit(EventKind.SKIP, f"Skipping binary file: {file_path}")
                stats.files_skipped_binary += 1
                return
            content = file_path.read_bytes()
        except OSError as e:
            self._warn(f"Skipping unreadable file: {file_path} ({e.strerror})")
            stats.files_unreadable += 1
            return

        rel_path = relative_path(file_path, self.cwd)
        self._emit(EventKind.PROCESS, f"Processing: {rel_path}")

        out.write(rel_path.encode("utf-8") + b"\n")
        out.write(content)
        out.write(SEPARATOR)
        stats.files_written += 1
