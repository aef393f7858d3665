"""Load and merge configuration from .gitglance.toml and env vars."""

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

from gitglance.config.schema import (
    OUTPUT_FORMATS,
    DiffConfig,
    GitConfig,
    GitGlanceConfig,
    LogConfig,
    OutputConfig,
)

CONFIG_FILENAME = ".gitglance.toml"


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


def _positive_int(value: str) -> Optional[int]:
    try:
        number = int(value)
    except ValueError:
        return None
    return number if number > 0 else None


def _merge_env_overrides(cfg: GitGlanceConfig) -> None:
    """Apply GITGLANCE_* environment variable overrides."""
    if val := os.environ.get("GITGLANCE_GIT"):
        cfg.git.executable = val
    if val := os.environ.get("GITGLANCE_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("GITGLANCE_PAGE_SIZE"):
        if (size := _positive_int(val)) is not None:
            cfg.log.page_size = size
    if val := os.environ.get("GITGLANCE_CONTEXT_LINES"):
        try:
            cfg.diff.context_lines = max(0, int(val))
        except ValueError:
            pass


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: GitGlanceConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format: {cfg.output.format}")
    if not isinstance(cfg.log.page_size, int) or cfg.log.page_size <= 0:
        raise ConfigError(f"log.page_size must be a positive integer: {cfg.log.page_size}")
    if not isinstance(cfg.diff.context_lines, int) or cfg.diff.context_lines < 0:
        raise ConfigError(f"diff.context_lines must be >= 0: {cfg.diff.context_lines}")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> GitGlanceConfig:
    """Load, validate, and return a GitGlanceConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = GitGlanceConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = GitGlanceConfig(
            version=raw.get("version", "1.0"),
            git=_build_section(raw, GitConfig, "git"),
            log=_build_section(raw, LogConfig, "log"),
            diff=_build_section(raw, DiffConfig, "diff"),
            output=_build_section(raw, OutputConfig, "output"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
