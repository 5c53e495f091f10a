"""
Chain-specific configuration for contract_helper.
"""

from dataclasses import dataclass
from typing import Dict

from .base import BaseConfig
from ..batchers.multicall import MULTICALL3_ADDRESS


@dataclass
class ChainConfig(BaseConfig):
    """Chain-specific configuration for different blockchains."""

    # Default chain settings
    DEFAULT_CHAIN: str = BaseConfig.get_env("DEFAULT_CHAIN", "ethereum")

    # Chain-specific RPC URLs
    ETHEREUM_RPC_URL: str = BaseConfig.get_env("ETHEREUM_RPC_URL", "https://eth.llamarpc.com")
    BASE_RPC_URL: str = BaseConfig.get_env("BASE_RPC_URL", "https://mainnet.base.org")
    ARBITRUM_RPC_URL: str = BaseConfig.get_env(
        "ARBITRUM_RPC_URL", "https://arb1.arbitrum.io/rpc"
    )
    BSC_RPC_URL: str = BaseConfig.get_env("BSC_RPC_URL", "https://bsc-dataseed.binance.org")

    # Chain IDs
    ETHEREUM_CHAIN_ID: int = 1
    BASE_CHAIN_ID: int = 8453
    ARBITRUM_CHAIN_ID: int = 42161
    BSC_CHAIN_ID: int = 56

    # Aggregate contract, overridable per deployment
    MULTICALL_ADDRESS: str = BaseConfig.get_env("MULTICALL_ADDRESS", MULTICALL3_ADDRESS)

    @property
    def supported_chains(self) -> Dict[str, Dict]:
        """Get configuration for all supported chains."""
        return {
            "ethereum": {
                "chain_id": self.ETHEREUM_CHAIN_ID,
                "rpc_url": self.ETHEREUM_RPC_URL,
                "multicall_address": self.MULTICALL_ADDRESS,
                "native_token": "ETH",
            },
            "base": {
                "chain_id": self.BASE_CHAIN_ID,
                "rpc_url": self.BASE_RPC_URL,
                "multicall_address": self.MULTICALL_ADDRESS,
                "native_token": "ETH",
            },
            "arbitrum": {
                "chain_id": self.ARBITRUM_CHAIN_ID,
                "rpc_url": self.ARBITRUM_RPC_URL,
                "multicall_address": self.MULTICALL_ADDRESS,
                "native_token": "ETH",
            },
            "bsc": {
                "chain_id": self.BSC_CHAIN_ID,
                "rpc_url": self.BSC_RPC_URL,
                "multicall_address": self.MULTICALL_ADDRESS,
                "native_token": "BNB",
            },
        }

    def get_chain_config(self, chain_name: str) -> Dict:
        """
        Get configuration for a specific chain.

        Args:
            chain_name: Name of the blockchain (ethereum, base, arbitrum, bsc)

        Returns:
            Chain configuration dictionary

        Raises:
            ValueError: If chain is not supported
        """
        chain_name = chain_name.lower()
        if chain_name not in self.supported_chains:
            raise ValueError(
                f"Unsupported chain: {chain_name}. Supported: {list(self.supported_chains)}"
            )
        return self.supported_chains[chain_name]

    def get_rpc_url(self, chain_name: str) -> str:
        """Get RPC URL for a specific chain."""
        return self.get_chain_config(chain_name)["rpc_url"]

    def get_multicall_address(self, chain_name: str) -> str:
        """Get the aggregate contract address for a specific chain."""
        return self.get_chain_config(chain_name)["multicall_address"]
