"""Main entry point for the old files cleanup tool."""

from __future__ import annotations

import argparse
import re
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import DEFAULT_AGE_THRESHOLD_DAYS, CleanupConfig
from .engine import CleanupEngine
from .errors import InvalidArgument
from .reporter import Reporter

EPILOG = """\
examples:
  cleanup-old-files --days 30 --dry-run              show files older than 30 days
  cleanup-old-files --days 90 --verbose              delete files older than 90 days
  cleanup-old-files --days 60 --force                delete without confirmation (for cron)
  cleanup-old-files --days 30 --remove-empty-dirs    also delete empty directories
"""

_DAYS_RE = re.compile(r"^[0-9]+$")


def _days(value: str) -> int:
    """Parse the --days option value."""
    if not _DAYS_RE.match(value):
        raise argparse.ArgumentTypeError(f"please specify a non-negative integer, got {value!r}")
    return int(value)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse. Uses ``sys.argv`` if None.

    Returns:
        Parsed arguments.

    """
    parser = argparse.ArgumentParser(
        prog="cleanup-old-files",
        description="Delete files older than a given number of days from the configured folders.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--days",
        type=_days,
        default=None,
        metavar="N",
        help=f"Delete files older than N days (default: {DEFAULT_AGE_THRESHOLD_DAYS} days)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show deletion targets without actually deleting",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Display detailed execution logs",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Delete without confirmation prompt (for cron)",
    )
    parser.add_argument(
        "--remove-empty-dirs",
        action="store_true",
        help="Also delete empty directories",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show the effective configuration and exit",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Create the default configuration file and exit",
    )

    return parser.parse_args(argv)


def confirm_from_terminal(prompt: str) -> bool:
    """Ask a yes/no question on the controlling terminal.

    Only ``y`` or ``Y`` counts as yes; end of input counts as no.
    """
    try:
        reply = Console().input(prompt)
    except EOFError:
        return False
    return reply.strip().lower() == "y"


def cmd_show_config(config: CleanupConfig, console: Console) -> int:
    """Print the effective configuration.

    Args:
        config: Cleanup configuration.
        console: Output console.

    Returns:
        Exit code.

    """
    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Target folders", "\n".join(escape(str(root)) for root in config.target_roots))
    table.add_row("Older than", f"{config.age_threshold_days} days")
    table.add_row("Exclude patterns", "\n".join(escape(repr(p)) for p in config.exclude_patterns))
    table.add_row("Remove empty dirs", str(config.remove_empty_dirs))
    table.add_row("Log file", escape(str(config.log_file)) if config.log_file else "-")
    table.add_row("Log level", config.log_level)

    console.print(table)
    return 0


def cmd_init_config(config: CleanupConfig, config_path: Path | None, console: Console) -> int:
    """Write the configuration file.

    Args:
        config: Configuration to write.
        config_path: Destination. Uses the default path if None.
        console: Output console.

    Returns:
        Exit code.

    """
    config_path = config_path or CleanupConfig.get_config_path()
    if config_path.exists():
        console.print(f"[yellow]Config already exists: {escape(str(config_path))}[/yellow]")
        return 1
    config.save(config_path)
    console.print(f"[green]Created config: {escape(str(config_path))}[/green]")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Command line arguments. Uses ``sys.argv`` if None.

    Returns:
        Exit code.

    """
    args = parse_args(argv)
    console = Console()

    try:
        config = CleanupConfig.load(args.config).with_overrides(
            age_threshold_days=args.days,
            dry_run=args.dry_run,
            verbose=args.verbose,
            force=args.force,
            remove_empty_dirs=args.remove_empty_dirs or None,
        )
    except InvalidArgument as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    if args.show_config:
        return cmd_show_config(config, console)
    if args.init_config:
        return cmd_init_config(config, args.config, console)

    engine = CleanupEngine(config, console=console, confirm=confirm_from_terminal)
    summary = engine.run()
    if summary is None:
        return 0

    Reporter(console).print_summary(
        summary,
        verbose=config.verbose,
        remove_empty_dirs=config.remove_empty_dirs,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
