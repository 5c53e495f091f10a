"""
Configuration management for contract_helper.

Use get_config() to access all configuration settings.

Example:
    from contract_helper.config import get_config

    config = get_config()

    # Batching settings
    window_ms = config.helper.DEBOUNCE_WINDOW_MS

    # Chain settings
    multicall = config.chains.get_multicall_address("ethereum")
"""

from .base import BaseConfig, ConfigError
from .chains import ChainConfig
from .manager import ConfigManager, get_config, reload_config
from .settings import HelperConfig

__all__ = [
    "BaseConfig",
    "ConfigError",
    "ChainConfig",
    "HelperConfig",
    "ConfigManager",
    "get_config",
    "reload_config",
]
