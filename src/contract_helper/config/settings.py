"""
Batching, formatting and transaction settings.
"""

from dataclasses import dataclass

from .base import BaseConfig, ConfigError
from ..batchers.base import BatchConfig
from ..batchers.formatting import NATIVE_ADDRESS_FORMATTERS, AddressFormat, NumericFormat


@dataclass
class HelperConfig(BaseConfig):
    """Settings of the contract helper."""

    # Lazy call queue
    DEBOUNCE_WINDOW_MS: int = BaseConfig.get_env_int("MULTICALL_DEBOUNCE_MS", 1000)
    MAX_PENDING_LENGTH: int = BaseConfig.get_env_int("MULTICALL_MAX_PENDING_LENGTH", 10)

    # Retry policy, fixed delay between attempts
    MULTICALL_RETRY_ATTEMPTS: int = BaseConfig.get_env_int("MULTICALL_RETRY_ATTEMPTS", 5)
    CALLBACK_RETRY_ATTEMPTS: int = BaseConfig.get_env_int("CALLBACK_RETRY_ATTEMPTS", 5)
    RETRY_DELAY_MS: int = BaseConfig.get_env_int("RETRY_DELAY_MS", 1000)

    # Value formatting
    ADDRESS_FORMAT: str = BaseConfig.get_env("ADDRESS_FORMAT", "checksum")
    NUMERIC_FORMAT: str = BaseConfig.get_env("NUMERIC_FORMAT", "decimal")
    # Chain family for ADDRESS_FORMAT=native: evm or tron
    NATIVE_ADDRESS: str = BaseConfig.get_env("NATIVE_ADDRESS", "evm")

    # Transactions
    SIMULATE_BEFORE_SEND: bool = BaseConfig.get_env_bool("SIMULATE_BEFORE_SEND", True)
    GAS_LIMIT_MULTIPLIER_PERCENT: int = BaseConfig.get_env_int("GAS_LIMIT_MULTIPLIER_PERCENT", 120)
    RECEIPT_POLL_ATTEMPTS: int = BaseConfig.get_env_int("RECEIPT_POLL_ATTEMPTS", 60)
    RECEIPT_POLL_DELAY_MS: int = BaseConfig.get_env_int("RECEIPT_POLL_DELAY_MS", 1000)
    FINAL_CONFIRMATIONS: int = BaseConfig.get_env_int("FINAL_CONFIRMATIONS", 5)

    def _validate_config(self):
        super()._validate_config()
        if self.ADDRESS_FORMAT not in [f.value for f in AddressFormat]:
            raise ConfigError(f"Invalid ADDRESS_FORMAT: {self.ADDRESS_FORMAT}")
        if self.NUMERIC_FORMAT not in [f.value for f in NumericFormat]:
            raise ConfigError(f"Invalid NUMERIC_FORMAT: {self.NUMERIC_FORMAT}")
        if self.NATIVE_ADDRESS not in NATIVE_ADDRESS_FORMATTERS:
            raise ConfigError(f"Invalid NATIVE_ADDRESS: {self.NATIVE_ADDRESS}")
        if self.MAX_PENDING_LENGTH < 1:
            raise ConfigError("MAX_PENDING_LENGTH must be at least 1")
        if self.DEBOUNCE_WINDOW_MS < 0 or self.RETRY_DELAY_MS < 0:
            raise ConfigError("Delays must not be negative")

    def to_batch_config(self) -> BatchConfig:
        """Batching settings in seconds, as used by the engine."""
        return BatchConfig(
            debounce_window=self.DEBOUNCE_WINDOW_MS / 1000,
            max_pending_length=self.MAX_PENDING_LENGTH,
            multicall_attempts=self.MULTICALL_RETRY_ATTEMPTS,
            callback_attempts=self.CALLBACK_RETRY_ATTEMPTS,
            retry_delay=self.RETRY_DELAY_MS / 1000,
        )
