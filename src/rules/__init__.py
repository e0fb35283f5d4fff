"""Configuration for drift-unified."""

from rules.config import (
    CONFIG_FILENAME,
    ConfigError,
    DriftConfig,
    NormalizationConfig,
    load_config,
    resolve_output_dir,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DriftConfig",
    "NormalizationConfig",
    "load_config",
    "resolve_output_dir",
]
