"""Configuration management for the old files cleanup tool."""

from __future__ import annotations

import dataclasses
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidArgument

# Finder metadata, the carriage-return terminated folder icon file, and
# Windows thumbnail caches
DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    r"\.DS_Store$",
    "Icon\r$",
    r"Thumbs\.db$",
)

DEFAULT_AGE_THRESHOLD_DAYS = 60

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_bool(value: Any, default: bool) -> bool:
    """Interpret a YAML value as a boolean.

    Args:
        value: Raw value from the config file.
        default: Returned when the value is None.

    Returns:
        Parsed boolean.

    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    return str(value).strip().lower() in ("true", "yes", "on", "1")


def _default_target_roots() -> tuple[Path, ...]:
    home = Path.home()
    return (home / "Downloads", home / ".Trash")


def _expand(path: str | Path) -> Path:
    return Path(os.path.expanduser(str(path))).absolute()


def _list_value(data: dict[str, Any], key: str) -> list[Any]:
    """Return a list-valued config key; a missing or null value is empty.

    Raises:
        InvalidArgument: If the value is not a list.

    """
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidArgument(f"{key} must be a list, got {type(value).__name__}: {value!r}")
    return value


@dataclass(frozen=True)
class CleanupConfig:
    """Immutable configuration for one cleanup run."""

    # Files must be strictly older than this many days to be eligible
    age_threshold_days: int = DEFAULT_AGE_THRESHOLD_DAYS

    # Run mode
    dry_run: bool = False
    verbose: bool = False
    force: bool = False
    remove_empty_dirs: bool = False

    # Directories to clean, processed in order
    target_roots: tuple[Path, ...] = field(default_factory=_default_target_roots)

    # Regular expressions matched against the base name of each file
    exclude_patterns: tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS

    # Logging
    log_file: Path | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        days = self.age_threshold_days
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidArgument(f"Number of days must be an integer, got {days!r}")
        if days < 0:
            raise InvalidArgument(f"Number of days must not be negative, got {days}")

        for pattern in self.exclude_patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise InvalidArgument(f"Invalid exclude pattern {pattern!r}: {e}") from e

        if self.log_level not in _LOG_LEVELS:
            raise InvalidArgument(f"Invalid log_level: {self.log_level!r}")

    @property
    def log_level_value(self) -> int:
        """Numeric logging level for ``log_level``."""
        return getattr(logging, self.log_level)

    def with_overrides(self, **changes: Any) -> CleanupConfig:
        """Return a copy with the given fields replaced.

        Fields whose new value is None are left unchanged, so parsed
        command-line options can be passed straight through.

        Raises:
            InvalidArgument: If the resulting configuration is invalid.

        """
        changes = {key: value for key, value in changes.items() if value is not None}
        return dataclasses.replace(self, **changes)

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the default configuration file path."""
        return Path.home() / "Library/Application Support/old-files-cleanup/config.yaml"

    @classmethod
    def load(cls, config_path: Path | None = None) -> CleanupConfig:
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Uses default if None.

        Returns:
            Loaded configuration.

        Raises:
            InvalidArgument: If the file is not valid YAML or holds invalid values.

        """
        if config_path is None:
            config_path = cls.get_config_path()

        if not config_path.exists():
            return cls()

        try:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidArgument(f"Invalid YAML in {config_path}: {e}", config_path) from e

        if not isinstance(data, dict):
            raise InvalidArgument(f"Config file must contain a mapping: {config_path}", config_path)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> CleanupConfig:
        """Create config from dictionary."""
        kwargs: dict[str, Any] = {}

        if "days" in data:
            kwargs["age_threshold_days"] = data["days"]

        if "remove_empty_dirs" in data:
            kwargs["remove_empty_dirs"] = parse_bool(data["remove_empty_dirs"], False)

        if "target_folders" in data:
            kwargs["target_roots"] = tuple(_expand(p) for p in _list_value(data, "target_folders"))

        # User patterns extend the defaults, never replace them
        if "exclude_patterns" in data:
            extra = tuple(str(p) for p in _list_value(data, "exclude_patterns"))
            kwargs["exclude_patterns"] = DEFAULT_EXCLUDE_PATTERNS + extra

        if "logging" in data:
            logging_cfg = data["logging"] or {}
            if not isinstance(logging_cfg, dict):
                raise InvalidArgument(f"logging must be a mapping, got {type(logging_cfg).__name__}")
            if logging_cfg.get("file"):
                kwargs["log_file"] = _expand(logging_cfg["file"])
            if "level" in logging_cfg:
                kwargs["log_level"] = str(logging_cfg["level"]).upper()

        return cls(**kwargs)

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to YAML file.

        Run-mode flags are command-line only and are not written.

        Args:
            config_path: Path to save config. Uses default if None.

        """
        if config_path is None:
            config_path = self.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        extra_patterns = [p for p in self.exclude_patterns if p not in DEFAULT_EXCLUDE_PATTERNS]
        data = {
            "days": self.age_threshold_days,
            "remove_empty_dirs": self.remove_empty_dirs,
            "target_folders": [str(p) for p in self.target_roots],
            "exclude_patterns": extra_patterns,
            "logging": {
                "file": str(self.log_file) if self.log_file else None,
                "level": self.log_level,
            },
        }

        with config_path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
