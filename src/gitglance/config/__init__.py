"""Configuration loading, schema, and defaults."""

from gitglance.config.loader import ConfigError, load_config
from gitglance.config.schema import OUTPUT_FORMATS, GitGlanceConfig

__all__ = [
    "ConfigError",
    "GitGlanceConfig",
    "OUTPUT_FORMATS",
    "load_config",
]
