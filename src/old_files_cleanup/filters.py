"""Exclusion and age predicates for cleanup candidates."""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime, timedelta


class ExclusionFilter:
    """Matches base names against a set of exclusion patterns."""

    def __init__(self, patterns: Iterable[str]) -> None:
        """Initialize the filter.

        Args:
            patterns: Regular expressions, searched anywhere in the base name.

        """
        self._patterns = [re.compile(pattern) for pattern in patterns]

    def matching_pattern(self, name: str) -> str | None:
        """Return the first pattern that matches ``name``, if any."""
        for pattern in self._patterns:
            if pattern.search(name):
                return pattern.pattern
        return None

    def is_excluded(self, name: str) -> bool:
        """Check whether a base name is excluded from cleanup.

        Args:
            name: Base name of the file, not its full path.

        Returns:
            True if any pattern matches.

        """
        return self.matching_pattern(name) is not None


def is_old_enough(modified_at: datetime, threshold_days: int, now: datetime) -> bool:
    """Check whether a file is strictly older than the threshold.

    A file modified 60 days and 23 hours ago is eligible with a threshold of
    60; one modified exactly 60 days ago is not. The full timestamp
    difference is compared, unlike ``find -mtime +N``, which rounds ages down to
    whole days first.
    """
    return now - modified_at > timedelta(days=threshold_days)
