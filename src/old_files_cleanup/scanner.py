"""Discovery of regular files under a root directory."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from .errors import RootNotFound, ScanPermissionDenied


@dataclass(frozen=True)
class FileCandidate:
    """A regular file discovered during a scan."""

    path: Path
    size_bytes: int
    modified_at: datetime

    @classmethod
    def from_stat(cls, path: Path, stat_result: os.stat_result) -> FileCandidate:
        """Build a candidate from ``lstat`` output."""
        return cls(
            path=path,
            size_bytes=stat_result.st_size,
            modified_at=datetime.fromtimestamp(stat_result.st_mtime, tz=UTC),
        )

    def __str__(self) -> str:
        return f"FileCandidate({self.path})"


class Scanner:
    """Walks a directory tree and yields the regular files in it."""

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def scan(self, root: Path) -> Iterator[FileCandidate]:
        """Scan a root directory for regular files.

        The root is checked immediately; the tree itself is walked lazily.

        Args:
            root: Directory to scan.

        Returns:
            Iterator over the regular files found, in traversal order.

        Raises:
            RootNotFound: If the root does not exist or is not a directory.

        """
        if not root.is_dir():
            raise RootNotFound(f"Folder does not exist: {root}", root)
        return self._walk(root)

    def _walk(self, root: Path) -> Iterator[FileCandidate]:
        # Explicit stack, so tree depth is not limited by the recursion limit
        pending: list[Path] = [root]
        while pending:
            directory = pending.pop()
            try:
                entries = self._list_directory(directory)
            except ScanPermissionDenied as e:
                self.logger.warning("%s", e)
                continue
            except OSError as e:
                self.logger.warning("Error scanning %s: %s", directory, e)
                continue

            subdirectories: list[Path] = []
            for entry in entries:
                path = Path(entry.path)
                try:
                    if entry.is_dir(follow_symlinks=False):
                        subdirectories.append(path)
                        continue
                    if not entry.is_file(follow_symlinks=False):
                        # Symlinks, sockets, FIFOs and devices are never candidates
                        continue
                    stat_result = entry.stat(follow_symlinks=False)
                except OSError as e:
                    self.logger.debug("Skipping unreadable entry %s: %s", path, e)
                    continue

                yield FileCandidate.from_stat(path, stat_result)

            # Reversed so siblings come off the stack in listing order
            pending.extend(reversed(subdirectories))

    @staticmethod
    def _list_directory(directory: Path) -> list[os.DirEntry[str]]:
        """List a directory, translating permission problems.

        Raises:
            ScanPermissionDenied: If the directory cannot be read.

        """
        try:
            with os.scandir(directory) as it:
                return list(it)
        except PermissionError as e:
            raise ScanPermissionDenied(f"Permission denied scanning: {directory}", directory) from e
