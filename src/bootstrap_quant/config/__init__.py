"""Convenience exports for the configuration package."""

from .constants import *  # noqa: F401,F403
from .loader import ConfigError, load_config, save_config
from .logging_conf import JSONFormatter, bind_run_context, configure_logging
from .schemas import BootstrapConfig, DataSourceConfig, StatisticConfig
from .settings import ENV_PREFIX, Settings, get_settings, reset_settings_cache

__all__ = [
    "JSONFormatter",
    "bind_run_context",
    "configure_logging",
    "ENV_PREFIX",
    "Settings",
    "get_settings",
    "reset_settings_cache",
    # Schema classes
    "BootstrapConfig",
    "DataSourceConfig",
    "StatisticConfig",
    # Loader functions
    "load_config",
    "save_config",
    "ConfigError",
]
