"""Load and merge configuration from .vibediff.toml and env vars."""

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

from vibediff.config.schema import (
    FORMATS,
    SCOPES,
    DiffConfig,
    LoggingConfig,
    OutputConfig,
    VibeDiffConfig,
)

CONFIG_FILENAME = ".vibediff.toml"

_TRUTHY = ("true", "1", "yes")


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


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: VibeDiffConfig) -> None:
    if cfg.diff.scope not in SCOPES:
        raise ConfigError(f"Invalid diff.scope: {cfg.diff.scope!r} (expected one of {', '.join(SCOPES)})")
    if cfg.output.format not in FORMATS:
        raise ConfigError(f"Invalid output.format: {cfg.output.format!r} (expected one of {', '.join(FORMATS)})")
    if isinstance(cfg.diff.context_lines, bool) or not isinstance(cfg.diff.context_lines, int) or cfg.diff.context_lines < 0:
        raise ConfigError(f"diff.context_lines must be a non-negative integer, got {cfg.diff.context_lines!r}")
    if isinstance(cfg.diff.timeout, bool) or not isinstance(cfg.diff.timeout, int) or cfg.diff.timeout <= 0:
        raise ConfigError(f"diff.timeout must be a positive integer, got {cfg.diff.timeout!r}")
    if cfg.diff.target == "":
        cfg.diff.target = None


def _merge_env_overrides(cfg: VibeDiffConfig) -> None:
    """Apply VIBEDIFF_* environment variable overrides."""
    if val := os.environ.get("VIBEDIFF_DEBUG"):
        cfg.logging.debug = val.lower() in _TRUTHY
    if val := os.environ.get("VIBEDIFF_TARGET"):
        cfg.diff.target = val
    if val := os.environ.get("VIBEDIFF_SCOPE"):
        if val in SCOPES:
            cfg.diff.scope = val  # type: ignore[assignment]
    if val := os.environ.get("VIBEDIFF_FORMAT"):
        if val in FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("VIBEDIFF_CONTEXT"):
        try:
            context = int(val)
        except ValueError:
            pass
        else:
            if context >= 0:
                cfg.diff.context_lines = context


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> VibeDiffConfig:
    """Load, validate, and return a VibeDiffConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = VibeDiffConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = VibeDiffConfig(
                version=raw.get("version", "1.0"),
                diff=_build_section(raw, DiffConfig, "diff"),
                output=_build_section(raw, OutputConfig, "output"),
                logging=_build_section(raw, LoggingConfig, "logging"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc

    _validate(cfg)
    _merge_env_overrides(cfg)
    return cfg
