"""Load and validate configuration from .hunkstage.toml and HUNKSTAGE_* env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from hunkstage.config.defaults import CONFIG_FILENAME
from hunkstage.config.schema import (
    LOG_LEVELS,
    OUTPUT_FORMATS,
    DiffConfig,
    GitConfig,
    HunkstageConfig,
    LoggingConfig,
    OutputConfig,
)


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _non_negative_int(val: str) -> Optional[int]:
    try:
        number = int(val)
    except ValueError:
        return None
    return number if number >= 0 else None


def _merge_env_overrides(cfg: HunkstageConfig) -> None:
    """Apply HUNKSTAGE_* environment variable overrides."""
    if val := os.environ.get("HUNKSTAGE_GIT"):
        cfg.git.executable = val
    if val := os.environ.get("HUNKSTAGE_TIMEOUT"):
        if (timeout := _non_negative_int(val)):
            cfg.git.timeout = timeout
    if val := os.environ.get("HUNKSTAGE_CONTEXT_LINES"):
        if (lines := _non_negative_int(val)) is not None:
            cfg.diff.context_lines = lines
    if val := os.environ.get("HUNKSTAGE_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("HUNKSTAGE_LOG_LEVEL"):
        if val.upper() in LOG_LEVELS:
            cfg.logging.level = val.upper()


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: HunkstageConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format: {cfg.output.format!r}")
    if not isinstance(cfg.git.timeout, int) or cfg.git.timeout <= 0:
        raise ConfigError(f"git.timeout must be a positive integer, got {cfg.git.timeout!r}")
    if not isinstance(cfg.diff.context_lines, int) or cfg.diff.context_lines < 0:
        raise ConfigError(
            f"diff.context_lines must be a non-negative integer, got {cfg.diff.context_lines!r}"
        )
    if not isinstance(cfg.diff.detect_renames, bool):
        raise ConfigError(
            f"diff.detect_renames must be true or false, got {cfg.diff.detect_renames!r}"
        )
    if not isinstance(cfg.output.show_summary, bool):
        raise ConfigError(
            f"output.show_summary must be true or false, got {cfg.output.show_summary!r}"
        )
    level = str(cfg.logging.level).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"Invalid log level: {cfg.logging.level!r}")
    cfg.logging.level = level


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> HunkstageConfig:
    """Load, validate, and return a HunkstageConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = HunkstageConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = HunkstageConfig(
            version=raw.get("version", "1.0"),
            git=_build_section(raw, GitConfig, "git"),
            diff=_build_section(raw, DiffConfig, "diff"),
            output=_build_section(raw, OutputConfig, "output"),
            logging=_build_section(raw, LoggingConfig, "logging"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
