"""Tests for the configuration layer."""

import logging
from unittest.mock import Mock, patch

import pytest

from contract_helper import ContractHelper
from contract_helper.batchers.multicall import MULTICALL3_ADDRESS
from contract_helper.config import (
    BaseConfig,
    ChainConfig,
    ConfigError,
    ConfigManager,
    HelperConfig,
    get_config,
    reload_config,
)
from contract_helper.config.base import configure_logging


class TestHelperConfig:
    """Batching and transaction settings."""

    def test_defaults(self):
        config = HelperConfig()

        assert config.MAX_PENDING_LENGTH >= 1
        assert config.ADDRESS_FORMAT in ("native", "checksum", "hex")
        assert config.NUMERIC_FORMAT in ("decimal", "bigint")

    def test_to_batch_config_uses_seconds(self):
        config = HelperConfig(
            DEBOUNCE_WINDOW_MS=250,
            MAX_PENDING_LENGTH=4,
            MULTICALL_RETRY_ATTEMPTS=3,
            CALLBACK_RETRY_ATTEMPTS=2,
            RETRY_DELAY_MS=500,
        )

        batch = config.to_batch_config()

        assert batch.debounce_window == 0.25
        assert batch.max_pending_length == 4
        assert batch.multicall_attempts == 3
        assert batch.callback_attempts == 2
        assert batch.retry_delay == 0.5

    def test_invalid_address_format(self):
        with pytest.raises(ConfigError, match="ADDRESS_FORMAT"):
            HelperConfig(ADDRESS_FORMAT="base58")

    def test_invalid_numeric_format(self):
        with pytest.raises(ConfigError, match="NUMERIC_FORMAT"):
            HelperConfig(NUMERIC_FORMAT="float")

    def test_max_pending_length_must_be_positive(self):
        with pytest.raises(ConfigError):
            HelperConfig(MAX_PENDING_LENGTH=0)

    def test_negative_delay_rejected(self):
        with pytest.raises(ConfigError):
            HelperConfig(RETRY_DELAY_MS=-1)

    def test_invalid_environment(self):
        with pytest.raises(ConfigError, match="environment"):
            HelperConfig(ENVIRONMENT="moon")

    def test_native_address_family(self):
        assert HelperConfig(NATIVE_ADDRESS="tron").NATIVE_ADDRESS == "tron"
        with pytest.raises(ConfigError, match="NATIVE_ADDRESS"):
            HelperConfig(NATIVE_ADDRESS="solana")

    def test_construction_leaves_logging_alone(self):
        with patch("contract_helper.config.base.logging.basicConfig") as basic_config:
            HelperConfig()
            ChainConfig()

        basic_config.assert_not_called()


class TestChainConfig:

    def test_get_chain_config(self):
        chains = ChainConfig()

        bsc = chains.get_chain_config("BSC")

        assert bsc["chain_id"] == 56
        assert bsc["native_token"] == "BNB"
        assert chains.get_rpc_url("base") == chains.BASE_RPC_URL

    def test_multicall_address_override(self):
        chains = ChainConfig(MULTICALL_ADDRESS="0x1111111111111111111111111111111111111111")

        assert chains.get_multicall_address("arbitrum") == "0x1111111111111111111111111111111111111111"

    def test_default_multicall_address(self):
        assert ChainConfig(MULTICALL_ADDRESS=MULTICALL3_ADDRESS).get_multicall_address(
            "ethereum"
        ) == MULTICALL3_ADDRESS

    def test_unsupported_chain(self):
        with pytest.raises(ValueError, match="Unsupported chain"):
            ChainConfig().get_chain_config("solana")


class TestConfigManager:

    def test_sections(self):
        manager = ConfigManager(environment="test")

        assert manager.environment == "test"
        assert isinstance(manager.helper, HelperConfig)
        assert isinstance(manager.chains, ChainConfig)
        assert set(manager.to_dict()) == {"environment", "base", "helper", "chains"}

    def test_global_instance(self):
        first = reload_config()

        assert get_config() is first
        assert reload_config() is not first


def test_helper_from_config_uses_chain_multicall_address():
    manager = ConfigManager(environment="test")
    manager.chains.MULTICALL_ADDRESS = "0x2222222222222222222222222222222222222222"

    helper = ContractHelper.from_config(Mock(), chain="base", config=manager)

    assert helper.executor.address == "0x2222222222222222222222222222222222222222"
    assert helper.config is manager.helper


class TestLogging:

    def test_manager_configures_logging_once(self):
        with patch("contract_helper.config.base.logging.basicConfig") as basic_config:
            ConfigManager(environment="test")

        basic_config.assert_called_once()
        assert basic_config.call_args.kwargs["level"] == logging.getLevelName(
            BaseConfig().LOG_LEVEL.upper()
        )

    def test_unknown_level_rejected(self):
        with pytest.raises(ConfigError, match="LOG_LEVEL"):
            configure_logging("chatty")
