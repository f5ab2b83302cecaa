"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

Scope = Literal["unstaged", "staged", "against-target"]
OutputFormat = Literal["terminal", "json"]

SCOPES: tuple[str, ...] = ("unstaged", "staged", "against-target")
FORMATS: tuple[str, ...] = ("terminal", "json")


@dataclass
class DiffConfig:
    scope: Scope = "against-target"
    target: Optional[str] = None  # ref for against-target; None = HEAD
    context_lines: int = 3
    timeout: int = 30  # seconds per git invocation


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class LoggingConfig:
    debug: bool = False


@dataclass
class VibeDiffConfig:
    version: str = "1.0"
    diff: DiffConfig = field(default_factory=DiffConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
