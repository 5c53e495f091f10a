"""Fake chain collaborators and fixtures data for batcher tests."""

from typing import Callable, Dict, List, Tuple

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector

from contract_helper.batchers.base import BaseMulticall
from contract_helper.batchers.multicall import MULTICALL3_ADDRESS
from contract_helper.batchers.types import AggregateCall, RawAggregateResponse

TOKEN_A = "0x1111111111111111111111111111111111111111"
TOKEN_B = "0x2222222222222222222222222222222222222222"
OWNER_1 = "0x3333333333333333333333333333333333333333"
OWNER_2 = "0x4444444444444444444444444444444444444444"

BALANCES: Dict[Tuple[str, str], int] = {
    (TOKEN_A, OWNER_1): 1_500 * 10**18,
    (TOKEN_A, OWNER_2): 7,
    (TOKEN_B, OWNER_1): 0,
}
OWNER_OF_TOKEN = "0xabcdefabcdefabcdefabcdefabcdefabcdefabcd"
SUPPLY = {TOKEN_A: 10**27, TOKEN_B: 2**200}

ERC20_ABI = [
    {
        "inputs": [{"internalType": "address", "name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "totalSupply",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "owner",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "getReserves",
        "outputs": [
            {"internalType": "uint112", "name": "reserve0", "type": "uint112"},
            {"internalType": "uint112", "name": "reserve1", "type": "uint112"},
            {"internalType": "uint32", "name": "blockTimestampLast", "type": "uint32"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "uint256", "name": "amount", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

# Two overloads accepting the same parameters.
OVERLOADED_ABI = ERC20_ABI + [
    {
        "inputs": [
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "uint128", "name": "amount", "type": "uint128"},
        ],
        "name": "transfer",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


def selector(signature: str) -> bytes:
    return function_signature_to_4byte_selector(signature)


def erc20_responder(target: str, data: bytes) -> bytes:
    """Answer ERC20 reads the way a token contract would."""
    if data[:4] == selector("balanceOf(address)"):
        (owner,) = decode(["address"], data[4:])
        return encode(["uint256"], [BALANCES[(target, owner)]])
    if data[:4] == selector("totalSupply()"):
        return encode(["uint256"], [SUPPLY[target]])
    if data[:4] == selector("owner()"):
        return encode(["address"], [OWNER_OF_TOKEN])
    if data[:4] == selector("getReserves()"):
        return encode(["uint112", "uint112", "uint32"], [100, 200, 1700000000])
    raise AssertionError(f"Unexpected call data {data.hex()}")


class FakeMulticall(BaseMulticall):
    """Outward multicall answering from a responder, failing on demand."""

    def __init__(
        self,
        responder: Callable[[str, bytes], bytes] = erc20_responder,
        failures: int = 0,
        block_number: int = 19_000_000,
    ):
        super().__init__(MULTICALL3_ADDRESS)
        self.responder = responder
        self.failures = failures
        self.block_number = block_number
        self.attempts = 0
        self.requests: List[List[AggregateCall]] = []
        self.direct_calls: List[Tuple[str, bytes]] = []

    async def aggregate(self, calls, block_identifier="latest"):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise ConnectionError("connection reset by peer")
        self.requests.append(list(calls))
        return RawAggregateResponse(
            block_number=self.block_number,
            return_data=[self.responder(call.target, call.encoded_data) for call in calls],
        )

    async def call(self, target, data, block_identifier="latest"):
        self.direct_calls.append((target, data))
        return self.responder(target, data)
