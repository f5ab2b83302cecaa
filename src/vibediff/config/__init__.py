"""Configuration loading, schema, and defaults."""

from vibediff.config.loader import ConfigError, load_config
from vibediff.config.schema import VibeDiffConfig

__all__ = [
    "ConfigError",
    "VibeDiffConfig",
    "load_config",
]
