"""Cleanup engine: scan, filter, act and aggregate over all roots."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .cleaner import Cleaner, FolderResult
from .errors import RootNotFound
from .filters import ExclusionFilter, is_old_enough
from .pruner import EmptyDirPruner, PruneResult
from .reporter import RunSummary, format_size
from .scanner import Scanner

if TYPE_CHECKING:
    from .config import CleanupConfig

LOGGER_NAME = "old-files-cleanup"

ConfirmFn = Callable[[str], bool]


class CleanupEngine:
    """Runs one cleanup pass over every configured root."""

    def __init__(
        self,
        config: CleanupConfig,
        logger: logging.Logger | None = None,
        console: Console | None = None,
        confirm: ConfirmFn | None = None,
        now: datetime | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Cleanup configuration.
            logger: Logger instance. Configured from ``config`` if None.
            console: Console for report lines and prompts.
            confirm: Asks the user a yes/no question. Required unless the run
                is a dry run or forced.
            now: Reference time for age checks. Defaults to the run start.

        """
        self.config = config
        self.console = console or Console()
        self.logger = logger or self._setup_logging()
        self.confirm = confirm
        self.now = now

        self.scanner = Scanner(self.logger)
        self.exclusions = ExclusionFilter(config.exclude_patterns)
        self.cleaner = Cleaner(config, self.logger, self.console)
        self.pruner = EmptyDirPruner(config, self.logger, self.console)

    def _setup_logging(self) -> logging.Logger:
        """Set up logging for the run.

        Returns:
            Configured logger instance.

        """
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(logging.DEBUG if self.config.verbose else self.config.log_level_value)

        # Clear existing handlers to avoid duplicates if the engine is recreated
        if logger.handlers:
            logger.handlers.clear()

        # Verbose mode surfaces every decision; otherwise only problems
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_time=self.config.verbose,
            show_path=False,
        )
        console_handler.setLevel(logging.DEBUG if self.config.verbose else logging.WARNING)
        logger.addHandler(console_handler)

        if self.config.log_file is not None:
            self.config.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.config.log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
            logger.addHandler(file_handler)

        return logger

    def _confirmed(self) -> bool:
        """Ask before deleting anything, unless running dry or forced."""
        if self.config.dry_run or self.config.force:
            return True
        if self.confirm is None:
            raise RuntimeError("A confirm callback is required for interactive runs")

        self.console.print(
            f"[yellow]Warning: This will delete files older than {self.config.age_threshold_days} days "
            "from the following folders:[/yellow]"
        )
        for root in self.config.target_roots:
            self.console.print(f"  - {escape(str(root))}", highlight=False)
        self.console.print()
        return self.confirm("Do you want to continue? (y/N): ")

    def process_root(self, root: Path, now: datetime) -> FolderResult:
        """Scan one root and act on every eligible file in it.

        Args:
            root: Root directory.
            now: Reference time for age checks.

        Returns:
            Accumulated result for the root.

        """
        folder = FolderResult(root=root)

        try:
            candidates = self.scanner.scan(root)
        except RootNotFound as e:
            self.logger.warning("%s", e)
            folder.missing = True
            return folder

        self.logger.info("Processing: %s", root)

        for candidate in candidates:
            pattern = self.exclusions.matching_pattern(candidate.path.name)
            if pattern is not None:
                self.logger.info("Excluded: %s (matches %r)", candidate.path, pattern)
                folder.files_excluded += 1
                continue

            if not is_old_enough(candidate.modified_at, self.config.age_threshold_days, now):
                self.logger.debug("Skipping recent file: %s", candidate.path)
                continue

            folder.record(self.cleaner.process(candidate))

        if not self.config.dry_run:
            if folder.files_deleted:
                self.logger.info(
                    "%s: Deleted %d files (%s)",
                    root,
                    folder.files_deleted,
                    format_size(folder.bytes_deleted),
                )
            else:
                self.logger.info("%s: No files found for deletion", root)

        return folder

    def prune_empty_dirs(self) -> list[PruneResult]:
        """Run the empty-directory pass over every existing root."""
        if self.config.dry_run:
            self.logger.info("Searching for empty directories...")
        else:
            self.logger.info("Deleting empty directories...")

        results: list[PruneResult] = []
        for root in self.config.target_roots:
            if not root.is_dir():
                continue
            results.append(self.pruner.prune(root))
        return results

    def run(self) -> RunSummary | None:
        """Run a full cleanup pass.

        Returns:
            Summary of the run, or None if the user declined to continue.

        """
        days = self.config.age_threshold_days
        if self.config.dry_run:
            self.logger.warning("DRY-RUN mode: Files will not actually be deleted")
        elif self.config.force:
            self.logger.info("Force execution mode: Will delete files older than %d days", days)

        if not self._confirmed():
            self.console.print("Process cancelled")
            return None

        now = self.now or datetime.now(UTC)
        self.logger.info("Starting search for files older than %d days...", days)

        folders = [self.process_root(root, now) for root in self.config.target_roots]

        pruned: list[PruneResult] = []
        if self.config.remove_empty_dirs:
            pruned = self.prune_empty_dirs()

        summary = RunSummary.from_results(folders, pruned, dry_run=self.config.dry_run)
        self.logger.info("Process completed")
        return summary
