"""Configuration for the theme update resolver."""

from themeupdater.config.loader import ConfigLoadError, YAMLConfigLoader, load_config
from themeupdater.config.models import DAY_IN_SECONDS, UpdaterConfig

__all__ = [
    "ConfigLoadError",
    "DAY_IN_SECONDS",
    "UpdaterConfig",
    "YAMLConfigLoader",
    "load_config",
]
