"""Removal of directories left empty after cleanup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from .errors import DeleteFailed, ScanPermissionDenied

if TYPE_CHECKING:
    from .config import CleanupConfig


@dataclass
class PruneResult:
    """Empty-directory outcome for one root."""

    root: Path
    deleted: list[Path] = field(default_factory=list)
    reported: list[Path] = field(default_factory=list)
    failures: list[Path] = field(default_factory=list)


class EmptyDirPruner:
    """Finds and removes empty directories below a root.

    In live mode the tree is walked depth first and each directory is
    re-checked after its children have been handled, so a parent emptied by
    the removal of its children is removed in the same pass. The root itself
    is never removed.
    """

    def __init__(self, config: CleanupConfig, logger: logging.Logger, console: Console) -> None:
        self.config = config
        self.logger = logger
        self.console = console

    def prune(self, root: Path) -> PruneResult:
        """Remove (or report, in dry-run mode) empty directories under a root.

        Args:
            root: Root directory. Must exist.

        Returns:
            PruneResult listing the affected directories.

        """
        result = PruneResult(root=root)
        if self.config.dry_run:
            self._report_empty(root, result)
        else:
            self._remove_empty(root, result)

        if result.deleted:
            self.logger.info("%s: Deleted %d empty directories", root, len(result.deleted))
        return result

    def _report_empty(self, root: Path, result: PruneResult) -> None:
        """Report directories that are empty now; nothing cascades in a dry run."""
        pending: list[Path] = [root]
        while pending:
            directory = pending.pop()
            try:
                subdirectories, has_entries = self._inspect(directory)
            except (ScanPermissionDenied, OSError) as e:
                self.logger.warning("%s", e)
                continue

            if not has_entries and directory != root:
                self.console.print(f"Deletion target (empty directory): {escape(str(directory))}", highlight=False)
                result.reported.append(directory)

            pending.extend(reversed(subdirectories))

    def _remove_empty(self, root: Path, result: PruneResult) -> None:
        # Post-order on an explicit stack: a directory is pushed back marked as
        # expanded and only considered for removal once its children are done
        pending: list[tuple[Path, bool]] = [(root, False)]
        while pending:
            directory, expanded = pending.pop()
            if not expanded:
                try:
                    subdirectories, _ = self._inspect(directory)
                except (ScanPermissionDenied, OSError) as e:
                    self.logger.warning("%s", e)
                    continue
                pending.append((directory, True))
                pending.extend((subdirectory, False) for subdirectory in reversed(subdirectories))
                continue

            if directory == root:
                continue

            # Re-list after the children were handled
            try:
                _, has_entries = self._inspect(directory)
            except (ScanPermissionDenied, OSError) as e:
                self.logger.warning("%s", e)
                continue
            if has_entries:
                continue

            try:
                self._rmdir(directory)
            except DeleteFailed as e:
                self.logger.error("%s", e)
                result.failures.append(directory)
                continue

            self.logger.info("Deleted empty directory: %s", directory)
            result.deleted.append(directory)

    @staticmethod
    def _inspect(directory: Path) -> tuple[list[Path], bool]:
        """List the real subdirectories of a directory and whether it has any entry.

        Raises:
            ScanPermissionDenied: If the directory cannot be read.

        """
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except PermissionError as e:
            raise ScanPermissionDenied(f"Permission denied scanning: {directory}", directory) from e

        subdirectories = [Path(entry.path) for entry in entries if entry.is_dir(follow_symlinks=False)]
        return subdirectories, bool(entries)

    @staticmethod
    def _rmdir(directory: Path) -> None:
        """Remove a single empty directory.

        Raises:
            DeleteFailed: If the directory could not be removed.

        """
        try:
            directory.rmdir()
        except OSError as e:
            raise DeleteFailed(f"Failed to delete empty directory {directory}: {e}", directory) from e
