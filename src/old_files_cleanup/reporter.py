"""Aggregation of per-root results and the final run summary."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rich.console import Console
from rich.filesize import decimal
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from .cleaner import FolderResult
    from .pruner import PruneResult


def format_size(size_bytes: int) -> str:
    """Format a byte count with SI units, e.g. ``1.5 kB``."""
    return decimal(size_bytes)


@dataclass
class RunSummary:
    """Totals for a whole run."""

    dry_run: bool
    folders: list[FolderResult] = field(default_factory=list)
    total_files_deleted: int = 0
    total_bytes_deleted: int = 0
    total_files_reported: int = 0
    total_bytes_reported: int = 0
    total_failures: int = 0
    empty_dirs_deleted: int = 0
    empty_dirs_reported: int = 0
    empty_dir_failures: int = 0

    @classmethod
    def from_results(
        cls,
        folders: Sequence[FolderResult],
        pruned: Sequence[PruneResult] = (),
        *,
        dry_run: bool,
    ) -> RunSummary:
        """Sum per-root results into run totals."""
        return cls(
            dry_run=dry_run,
            folders=list(folders),
            total_files_deleted=sum(f.files_deleted for f in folders),
            total_bytes_deleted=sum(f.bytes_deleted for f in folders),
            total_files_reported=sum(f.files_reported for f in folders),
            total_bytes_reported=sum(f.bytes_reported for f in folders),
            total_failures=sum(f.failures for f in folders),
            empty_dirs_deleted=sum(len(p.deleted) for p in pruned),
            empty_dirs_reported=sum(len(p.reported) for p in pruned),
            empty_dir_failures=sum(len(p.failures) for p in pruned),
        )


class Reporter:
    """Prints the end-of-run summary."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def print_summary(self, summary: RunSummary, *, verbose: bool = False, remove_empty_dirs: bool = False) -> None:
        """Print the execution results.

        Args:
            summary: Totals for the run.
            verbose: Also print a per-folder table.
            remove_empty_dirs: Whether the empty-directory pass ran.

        """
        console = self.console
        console.print()
        console.print("[bold]=== Execution Results ===[/bold]")

        if summary.dry_run:
            console.print(
                f"[yellow]DRY-RUN:[/yellow] {summary.total_files_reported} files are targeted for deletion "
                f"({format_size(summary.total_bytes_reported)})"
            )
        elif summary.total_files_deleted:
            console.print(
                f"[green]Total {summary.total_files_deleted} files deleted "
                f"({format_size(summary.total_bytes_deleted)})[/green]"
            )
        else:
            console.print("No files found for deletion")

        if summary.total_failures:
            console.print(f"[red]{summary.total_failures} files could not be deleted[/red]")

        if remove_empty_dirs:
            self._print_empty_dirs(summary)

        if verbose and summary.folders:
            console.print(self._folder_table(summary))

    def _print_empty_dirs(self, summary: RunSummary) -> None:
        if summary.dry_run:
            if summary.empty_dirs_reported:
                self.console.print(
                    f"[yellow]DRY-RUN:[/yellow] {summary.empty_dirs_reported} empty directories "
                    "are targeted for deletion"
                )
            else:
                self.console.print("No empty directories found for deletion")
            return

        if summary.empty_dirs_deleted:
            self.console.print(f"[green]Total {summary.empty_dirs_deleted} empty directories deleted[/green]")
        else:
            self.console.print("No empty directories found for deletion")
        if summary.empty_dir_failures:
            self.console.print(f"[red]{summary.empty_dir_failures} empty directories could not be deleted[/red]")

    @staticmethod
    def _folder_table(summary: RunSummary) -> Table:
        if summary.dry_run:
            title, count_header = "Per-folder results (dry run)", "Targeted"
        else:
            title, count_header = "Per-folder results", "Deleted"

        table = Table(title=title)
        table.add_column("Folder", style="cyan")
        table.add_column(count_header, justify="right")
        table.add_column("Size", justify="right", style="green")
        table.add_column("Excluded", justify="right", style="dim")
        table.add_column("Failed", justify="right", style="red")

        for folder in summary.folders:
            if folder.missing:
                table.add_row(escape(str(folder.root)), "-", "-", "-", "missing")
                continue
            count = folder.files_reported if summary.dry_run else folder.files_deleted
            size = folder.bytes_reported if summary.dry_run else folder.bytes_deleted
            table.add_row(
                escape(str(folder.root)),
                str(count),
                format_size(size),
                str(folder.files_excluded),
                str(folder.failures),
            )

        return table
