"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutputFormat = Literal["terminal", "json", "yaml"]

OUTPUT_FORMATS = ("terminal", "json", "yaml")


@dataclass
class GitConfig:
    executable: str = "git"  # resolved through PATH unless absolute


@dataclass
class LogConfig:
    page_size: int = 50


@dataclass
class DiffConfig:
    context_lines: int = 3


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class GitGlanceConfig:
    version: str = "1.0"
    git: GitConfig = field(default_factory=GitConfig)
    log: LogConfig = field(default_factory=LogConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
