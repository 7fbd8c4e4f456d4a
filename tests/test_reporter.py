"""Tests for run aggregation and the summary output."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from old_files_cleanup.cleaner import FolderResult
from old_files_cleanup.pruner import PruneResult
from old_files_cleanup.reporter import Reporter, RunSummary, format_size


@pytest.fixture
def output() -> io.StringIO:
    """Buffer that receives console output."""
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> Reporter:
    """Create a reporter writing to the buffer."""
    return Reporter(Console(file=output, width=200))


class TestFormatSize:
    """Tests for human-readable sizes."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 bytes"),
            (1, "1 byte"),
            (100, "100 bytes"),
            (1500, "1.5 kB"),
            (2_000_000, "2.0 MB"),
        ],
    )
    def test_format_size(self, size: int, expected: str) -> None:
        """Test SI formatting."""
        assert format_size(size) == expected


class TestRunSummary:
    """Tests for RunSummary aggregation."""

    def test_sums_folders(self, tmp_path: Path) -> None:
        """Test that totals are the sum of every folder."""
        folders = [
            FolderResult(root=tmp_path / "a", files_deleted=2, bytes_deleted=300, failures=1),
            FolderResult(root=tmp_path / "b", files_deleted=1, bytes_deleted=100),
            FolderResult(root=tmp_path / "missing", missing=True),
        ]
        pruned = [
            PruneResult(root=tmp_path / "a", deleted=[tmp_path / "a" / "x", tmp_path / "a" / "y"]),
            PruneResult(root=tmp_path / "b", failures=[tmp_path / "b" / "z"]),
        ]

        summary = RunSummary.from_results(folders, pruned, dry_run=False)

        assert summary.total_files_deleted == 3
        assert summary.total_bytes_deleted == 400
        assert summary.total_failures == 1
        assert summary.empty_dirs_deleted == 2
        assert summary.empty_dir_failures == 1
        assert len(summary.folders) == 3

    def test_empty_run(self) -> None:
        """Test a run with no roots."""
        summary = RunSummary.from_results([], dry_run=True)
        assert summary.total_files_reported == 0
        assert summary.empty_dirs_reported == 0


class TestReporter:
    """Tests for the printed summary."""

    def test_live_summary(self, reporter: Reporter, output: io.StringIO, tmp_path: Path) -> None:
        """Test the live-mode totals line."""
        summary = RunSummary.from_results(
            [FolderResult(root=tmp_path, files_deleted=1, bytes_deleted=100)], dry_run=False
        )

        reporter.print_summary(summary)

        text = output.getvalue()
        assert "=== Execution Results ===" in text
        assert "Total 1 files deleted (100 bytes)" in text
        assert "DRY-RUN" not in text

    def test_live_nothing_deleted(self, reporter: Reporter, output: io.StringIO, tmp_path: Path) -> None:
        """Test the message when nothing matched."""
        reporter.print_summary(RunSummary.from_results([FolderResult(root=tmp_path)], dry_run=False))
        assert "No files found for deletion" in output.getvalue()

    def test_dry_run_summary(self, reporter: Reporter, output: io.StringIO, tmp_path: Path) -> None:
        """Test the dry-run banner and counts."""
        summary = RunSummary.from_results(
            [FolderResult(root=tmp_path, files_reported=1, bytes_reported=100)], dry_run=True
        )

        reporter.print_summary(summary)

        assert "DRY-RUN: 1 files are targeted for deletion (100 bytes)" in output.getvalue()

    def test_failures_reported(self, reporter: Reporter, output: io.StringIO, tmp_path: Path) -> None:
        """Test that failed deletions are counted in the summary."""
        summary = RunSummary.from_results([FolderResult(root=tmp_path, failures=2)], dry_run=False)
        reporter.print_summary(summary)
        assert "2 files could not be deleted" in output.getvalue()

    def test_empty_dirs_live(self, reporter: Reporter, output: io.StringIO, tmp_path: Path) -> None:
        """Test the empty-directory totals in live mode."""
        summary = RunSummary.from_results(
            [FolderResult(root=tmp_path)],
            [PruneResult(root=tmp_path, deleted=[tmp_path / "X", tmp_path / "X" / "Y"])],
            dry_run=False,
        )

        reporter.print_summary(summary, remove_empty_dirs=True)

        assert "Total 2 empty directories deleted" in output.getvalue()

    def test_empty_dirs_dry_run(self, reporter: Reporter, output: io.StringIO, tmp_path: Path) -> None:
        """Test the empty-directory totals in dry-run mode."""
        summary = RunSummary.from_results(
            [FolderResult(root=tmp_path)],
            [PruneResult(root=tmp_path, reported=[tmp_path / "X"])],
            dry_run=True,
        )

        reporter.print_summary(summary, remove_empty_dirs=True)

        assert "DRY-RUN: 1 empty directories are targeted for deletion" in output.getvalue()

    def test_empty_dirs_section_hidden_without_flag(
        self, reporter: Reporter, output: io.StringIO, tmp_path: Path
    ) -> None:
        """Test that the empty-directory lines only appear when the pass ran."""
        reporter.print_summary(RunSummary.from_results([FolderResult(root=tmp_path)], dry_run=False))
        assert "empty directories" not in output.getvalue()

    def test_verbose_table(self, reporter: Reporter, output: io.StringIO, tmp_path: Path) -> None:
        """Test that verbose mode adds a per-folder table."""
        summary = RunSummary.from_results(
            [
                FolderResult(root=tmp_path / "present", files_deleted=3, bytes_deleted=1500, files_excluded=1),
                FolderResult(root=tmp_path / "absent", missing=True),
            ],
            dry_run=False,
        )

        reporter.print_summary(summary, verbose=True)

        text = output.getvalue()
        assert "Per-folder results" in text
        assert "1.5 kB" in text
        assert "missing" in text
