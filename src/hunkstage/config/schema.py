"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutputFormat = Literal["terminal", "json"]

OUTPUT_FORMATS: tuple[str, ...] = ("terminal", "json")
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class GitConfig:
    executable: str = "git"
    timeout: int = 30  # seconds per git invocation


@dataclass
class DiffConfig:
    context_lines: int = 3
    detect_renames: bool = True


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class HunkstageConfig:
    version: str = "1.0"
    git: GitConfig = field(default_factory=GitConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
