"""Configuration loading for lintbridge."""

from lintbridge.config.loader import ConfigError, load_config
from lintbridge.config.models import LintBridgeConfig, LinterConfig, RuntimeConfig

__all__ = [
    "ConfigError",
    "LintBridgeConfig",
    "LinterConfig",
    "RuntimeConfig",
    "load_config",
]
