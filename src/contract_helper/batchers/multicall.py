"""
Multicall2/Multicall3 ``aggregate`` over an AsyncWeb3 provider.
"""

from typing import List, Union

from eth_utils import to_checksum_address
from web3 import AsyncWeb3

from .abi import MULTICALL2_ABI
from .base import BaseMulticall
from .types import AggregateCall, RawAggregateResponse

# Multicall3 is deployed at the same address on most EVM chains and keeps
# the Multicall2 ``aggregate`` signature.
MULTICALL3_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"


class Web3Multicall(BaseMulticall):
    """Outward multicall backed by an ``aggregate`` contract."""

    def __init__(self, web3: AsyncWeb3, address: str = MULTICALL3_ADDRESS):
        super().__init__(to_checksum_address(address))
        self.web3 = web3
        self.contract = web3.eth.contract(address=self.address, abi=MULTICALL2_ABI)

    async def aggregate(
        self, calls: List[AggregateCall], block_identifier: Union[int, str] = "latest"
    ) -> RawAggregateResponse:
        if not calls:
            return RawAggregateResponse(block_number=0, return_data=[])

        block_number, return_data = await self.contract.functions.aggregate(
            [call.to_tuple() for call in calls]
        ).call(block_identifier=block_identifier)

        self.logger.debug(f"Aggregated {len(calls)} calls at block {block_number}")
        return RawAggregateResponse(
            block_number=block_number,
            return_data=[bytes(data) for data in return_data],
        )

    async def call(
        self, target: str, data: bytes, block_identifier: Union[int, str] = "latest"
    ) -> bytes:
        raw = await self.web3.eth.call(
            {"to": to_checksum_address(target), "data": "0x" + bytes(data).hex()},
            block_identifier,
        )
        return bytes(raw)
