"""
Environment-backed settings shared by every contract_helper config section.

Settings are read once, at import, from the process environment and an
optional ``.env`` file. Building a section never touches global logging;
``configure_logging`` is applied by the config manager.
"""

import os
import logging
from typing import Any, Dict, Optional
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

ENVIRONMENTS = ("local", "dev", "test", "staging", "production")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


def configure_logging(level: str, fmt: str = LOG_FORMAT) -> None:
    """Install the root handler at ``level``, e.g. ``"DEBUG"``."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"Invalid LOG_LEVEL: {level}")
    logging.basicConfig(level=numeric, format=fmt)


@dataclass
class BaseConfig:
    """Settings common to all sections: environment name and log level."""

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        self._validate_config()

    def setup_logging(self) -> None:
        """Apply ``LOG_LEVEL`` to the root logger."""
        configure_logging(self.LOG_LEVEL)
        logger.debug(f"Logging configured at {self.LOG_LEVEL.upper()}")

    def _validate_config(self):
        """Validate configuration values."""
        if self.ENVIRONMENT not in ENVIRONMENTS:
            raise ConfigError(f"Invalid environment: {self.ENVIRONMENT}")

    @staticmethod
    def get_env(key: str, default: Optional[str] = None, required: bool = False) -> str:
        """
        Read a setting from the environment.

        Args:
            key: Environment variable name
            default: Value used when the variable is unset
            required: Raise instead of returning ``None`` when unset

        Raises:
            ConfigError: If a required variable is missing
        """
        value = os.getenv(key, default)
        if required and value is None:
            raise ConfigError(f"Required environment variable '{key}' is not set")
        return value

    @staticmethod
    def get_env_int(key: str, default: Optional[int] = None, required: bool = False) -> int:
        value = BaseConfig.get_env(key, str(default) if default is not None else None, required)
        try:
            return int(value)
        except (ValueError, TypeError):
            raise ConfigError(f"Environment variable '{key}' must be an integer, got: {value}")

    @staticmethod
    def get_env_bool(key: str, default: bool = False) -> bool:
        value = BaseConfig.get_env(key, str(default))
        return value.lower() in ("true", "1", "yes", "on")

    def to_dict(self) -> Dict[str, Any]:
        """Every setting of this section, by name."""
        return {
            field: getattr(self, field)
            for field in self.__dataclass_fields__
            if not field.startswith('_')
        }
