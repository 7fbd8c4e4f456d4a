"""Error taxonomy for the cleanup engine."""

from __future__ import annotations

from pathlib import Path


class CleanupError(Exception):
    """Base class for all cleanup errors."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class InvalidArgument(CleanupError, ValueError):
    """Malformed configuration or command-line input. Fatal."""


class RootNotFound(CleanupError):
    """A configured root directory does not exist."""


class ScanPermissionDenied(CleanupError):
    """A subtree could not be read during traversal."""


class DeleteFailed(CleanupError):
    """A file or empty directory could not be removed."""


class SizeReadFailed(CleanupError):
    """Metadata for a candidate could not be read."""
