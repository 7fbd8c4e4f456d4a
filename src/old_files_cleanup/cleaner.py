"""Delete-or-report actions for eligible files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from .errors import DeleteFailed, SizeReadFailed
from .reporter import format_size

if TYPE_CHECKING:
    from .config import CleanupConfig
    from .scanner import FileCandidate


@dataclass
class CleanupResult:
    """Result of acting on a single candidate."""

    path: Path
    success: bool
    action: str  # "deleted", "reported", "error"
    size_bytes: int = 0
    error: str | None = None


@dataclass
class FolderResult:
    """Accumulated outcome for one root directory."""

    root: Path
    files_deleted: int = 0
    bytes_deleted: int = 0
    files_reported: int = 0
    bytes_reported: int = 0
    files_excluded: int = 0
    failures: int = 0
    missing: bool = False

    def record(self, result: CleanupResult) -> None:
        """Add a single action result to the totals."""
        if result.action == "deleted":
            self.files_deleted += 1
            self.bytes_deleted += result.size_bytes
        elif result.action == "reported":
            self.files_reported += 1
            self.bytes_reported += result.size_bytes
        elif result.action == "error":
            self.failures += 1


class Cleaner:
    """Deletes eligible files, or reports them in dry-run mode."""

    def __init__(self, config: CleanupConfig, logger: logging.Logger, console: Console) -> None:
        """Initialize the cleaner.

        Args:
            config: Cleanup configuration.
            logger: Logger instance.
            console: Console that receives dry-run report lines.

        """
        self.config = config
        self.logger = logger
        self.console = console

    def process(self, candidate: FileCandidate) -> CleanupResult:
        """Delete or report a single eligible file.

        Failures are logged and returned, never raised.

        Args:
            candidate: Eligible, non-excluded file.

        Returns:
            CleanupResult with operation details.

        """
        if self.config.dry_run:
            return self.report(candidate)
        return self.delete(candidate)

    def report(self, candidate: FileCandidate) -> CleanupResult:
        """Print a dry-run line for a candidate without touching it."""
        self.console.print(
            f"Deletion target: {escape(str(candidate.path))} ({format_size(candidate.size_bytes)})",
            highlight=False,
        )
        return CleanupResult(
            path=candidate.path,
            success=True,
            action="reported",
            size_bytes=candidate.size_bytes,
        )

    def delete(self, candidate: FileCandidate) -> CleanupResult:
        """Delete a single file, capturing its size first.

        Args:
            candidate: File to delete.

        Returns:
            CleanupResult with operation details.

        """
        path = candidate.path

        try:
            size = self._read_size(path)
        except SizeReadFailed as e:
            self.logger.warning("%s", e)
            size = 0

        self.logger.info("Deleting: %s (%s)", path, format_size(size))

        try:
            self._unlink(path)
        except DeleteFailed as e:
            self.logger.error("%s", e)
            return CleanupResult(
                path=path,
                success=False,
                action="error",
                error=str(e.__cause__ or e),
            )

        self.logger.info("Deletion completed: %s", path)
        return CleanupResult(
            path=path,
            success=True,
            action="deleted",
            size_bytes=size,
        )

    @staticmethod
    def _read_size(path: Path) -> int:
        """Read the file's own size.

        Raises:
            SizeReadFailed: If the metadata is unavailable.

        """
        try:
            return path.lstat().st_size
        except OSError as e:
            raise SizeReadFailed(f"Could not read size of {path}: {e}", path) from e

    @staticmethod
    def _unlink(path: Path) -> None:
        """Remove exactly one file, never a directory tree.

        Raises:
            DeleteFailed: If the file could not be removed.

        """
        try:
            path.unlink()
        except PermissionError as e:
            raise DeleteFailed(f"Permission denied deleting {path}: {e}", path) from e
        except OSError as e:
            raise DeleteFailed(f"Failed to delete {path}: {e}", path) from e
