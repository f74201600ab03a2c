"""Configuration for coverscope."""

from rules.config import (
    CONFIG_FILENAME,
    ConfigError,
    CoverScopeConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "CoverScopeConfig",
    "load_config",
]
