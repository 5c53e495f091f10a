"""Test configuration for transactions."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from hexbytes import HexBytes


async def _resolved(value):
    return value


class FakeEth:
    """Async ``web3.eth`` stand-in with scripted chain state."""

    def __init__(self):
        self.chain_id_value = 1
        self.block_numbers = [100]
        self.max_priority_fee_value = 2
        self.gas_price_value = 30
        self.get_transaction_count = AsyncMock(return_value=7)
        self.get_block = AsyncMock(return_value={"baseFeePerGas": 10})
        self.estimate_gas = AsyncMock(return_value=50_000)
        self.call = AsyncMock(return_value=HexBytes(b""))
        self.send_raw_transaction = AsyncMock(return_value=HexBytes(b"\x12" * 32))
        self.get_transaction_receipt = AsyncMock(return_value=None)

    @property
    def chain_id(self):
        return _resolved(self.chain_id_value)

    @property
    def max_priority_fee(self):
        return _resolved(self.max_priority_fee_value)

    @property
    def gas_price(self):
        return _resolved(self.gas_price_value)

    @property
    def block_number(self):
        # Walks the scripted heights, then stays on the last one.
        if len(self.block_numbers) > 1:
            return _resolved(self.block_numbers.pop(0))
        return _resolved(self.block_numbers[0])


@pytest.fixture
def web3():
    """Web3 client whose ``eth`` module is a FakeEth."""
    return SimpleNamespace(eth=FakeEth())
