"""
Configuration manager for contract_helper.

Combines all configuration classes into a single easy-to-use interface.
"""

import logging
from typing import Any, Dict, Optional

from .base import BaseConfig, ConfigError
from .chains import ChainConfig
from .settings import HelperConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Centralized configuration manager that combines all configuration classes.

    Ensures configurations are properly initialized and validated.
    """

    def __init__(self, environment: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            environment: Override the environment (local, dev, test, staging, production)
        """
        self._environment = environment
        self._base_config = None
        self._helper_config = None
        self._chain_config = None
        self._initialize_configs()

    def _initialize_configs(self):
        """Initialize all configuration objects."""
        try:
            self._base_config = BaseConfig()
            if self._environment:
                self._base_config.ENVIRONMENT = self._environment
            self._base_config.setup_logging()

            self._helper_config = HelperConfig()
            self._chain_config = ChainConfig()

            logger.info(f"Configuration initialized for environment: {self.environment}")

        except ConfigError:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize configuration: {e}")
            raise ConfigError(f"Configuration initialization failed: {e}")

    @property
    def environment(self) -> str:
        """Get current environment."""
        return self._base_config.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        """Get base configuration."""
        return self._base_config

    @property
    def helper(self) -> HelperConfig:
        """Get batching and transaction settings."""
        return self._helper_config

    @property
    def chains(self) -> ChainConfig:
        """Get chain configuration."""
        return self._chain_config

    def to_dict(self) -> Dict[str, Any]:
        """Get all configuration as a dictionary."""
        return {
            "environment": self.environment,
            "base": self.base.to_dict(),
            "helper": self.helper.to_dict(),
            "chains": self.chains.supported_chains,
        }


# Global configuration instance
_config_manager: Optional[ConfigManager] = None


def get_config(environment: Optional[str] = None) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        environment: Override environment (only used on first call)

    Returns:
        ConfigManager instance
    """
    global _config_manager

    if _config_manager is None:
        _config_manager = ConfigManager(environment)

    return _config_manager


def reload_config(environment: Optional[str] = None) -> ConfigManager:
    """
    Reload configuration (useful for testing or configuration changes).

    Args:
        environment: Override environment

    Returns:
        New ConfigManager instance
    """
    global _config_manager
    _config_manager = ConfigManager(environment)
    return _config_manager
