"""
Contract helper: batched reads and transaction sending.

Example:
    from web3 import AsyncWeb3
    from contract_helper import CallDescriptor, ContractHelper

    web3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
    async with ContractHelper(web3) as helper:
        balance, supply = await asyncio.gather(
            helper.lazy_call(CallDescriptor(token, "balanceOf", [owner], abi=ERC20_ABI)),
            helper.lazy_call(CallDescriptor(token, "totalSupply", [], abi=ERC20_ABI)),
        )
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Sequence, Union

from web3 import AsyncWeb3

from .batchers.abi import decode_result, encode_call, resolve_function
from .batchers.base import BaseMulticall
from .batchers.engine import BatchEngine, invoke
from .batchers.formatting import ValueFormatter
from .batchers.multicall import MULTICALL3_ADDRESS, Web3Multicall
from .batchers.types import (
    AggregateResult,
    CallDescriptor,
    Callback,
    LazyCall,
    ReceiptSummary,
    new_key,
)
from .config.manager import ConfigManager, get_config
from .config.settings import HelperConfig
from .transactions.receipts import ReceiptChecker
from .transactions.sender import SendTransaction, TransactionSender

logger = logging.getLogger(__name__)


class ContractHelper:
    """
    Batched contract reads and transaction helpers over one web3 client.

    ``lazy_call`` and ``add_lazy_call`` must run inside an event loop; the
    queue is owned by that loop.
    """

    def __init__(
        self,
        web3: AsyncWeb3,
        multicall_address: str = MULTICALL3_ADDRESS,
        config: Optional[HelperConfig] = None,
        executor: Optional[BaseMulticall] = None,
        native_address: Optional[Callable[[str], str]] = None,
    ):
        """
        Args:
            web3: Async web3 client
            multicall_address: Address of the ``aggregate`` contract
            config: Batching, formatting and transaction settings
            executor: Outward multicall, defaults to ``Web3Multicall``
            native_address: Address formatter used for the ``native`` format,
                overriding the ``NATIVE_ADDRESS`` setting
        """
        self.web3 = web3
        self.config = config or HelperConfig()
        self.executor = executor or Web3Multicall(web3, multicall_address)
        self.formatter = ValueFormatter.from_names(
            self.config.ADDRESS_FORMAT,
            self.config.NUMERIC_FORMAT,
            native_chain=self.config.NATIVE_ADDRESS,
            native_address=native_address,
        )
        self.engine = BatchEngine(self.executor, self.formatter, self.config.to_batch_config())
        self.sender = TransactionSender(
            web3,
            simulate=self.config.SIMULATE_BEFORE_SEND,
            gas_limit_multiplier_percent=self.config.GAS_LIMIT_MULTIPLIER_PERCENT,
        )
        self.receipts = ReceiptChecker(
            web3,
            attempts=self.config.RECEIPT_POLL_ATTEMPTS,
            delay=self.config.RECEIPT_POLL_DELAY_MS / 1000,
            final_confirmations=self.config.FINAL_CONFIRMATIONS,
        )
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @classmethod
    def from_config(
        cls,
        web3: AsyncWeb3,
        chain: Optional[str] = None,
        config: Optional[ConfigManager] = None,
        **kwargs,
    ) -> "ContractHelper":
        """Build a helper from the global (or given) configuration."""
        config = config or get_config()
        chain = chain or config.chains.DEFAULT_CHAIN
        return cls(
            web3,
            multicall_address=config.chains.get_multicall_address(chain),
            config=config.helper,
            **kwargs,
        )

    async def __aenter__(self) -> "ContractHelper":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Flush pending lazy calls and wait for every in-flight batch."""
        await self.engine.close()

    # Reads

    async def call(self, descriptor: CallDescriptor) -> Any:
        """
        Call a contract directly, without batching.

        Raises:
            FragmentResolutionError: Before any network call, when the method
                cannot be resolved to exactly one function
        """
        fn = resolve_function(
            descriptor.abi, descriptor.method, descriptor.parameters, target=descriptor.target
        )
        data = encode_call(fn, descriptor.parameters)
        raw = await self.executor.call(descriptor.target, data)
        return self.formatter.format_outputs(fn, decode_result(fn, raw))

    async def multicall(self, descriptors: Sequence[CallDescriptor]) -> AggregateResult:
        """Execute ``descriptors`` as one aggregate call, bypassing the queue."""
        return await self.engine.multicall(descriptors, attempts=1)

    async def lazy_call(
        self,
        descriptor: CallDescriptor,
        transform: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """
        Queue a call and wait for the batch it lands in.

        Args:
            descriptor: Contract call
            transform: Optional success handler; the awaited value is what it
                returns. It is retried like any other success handler.

        Returns:
            The decoded value, or ``transform``'s result
        """
        future = asyncio.get_running_loop().create_future()

        async def success(value):
            result = await invoke(transform, value) if transform is not None else value
            if not future.done():
                future.set_result(result)
            return result

        def error(err: Exception):
            if not future.done():
                future.set_exception(err)

        # Every queued call gets its own key, even when a descriptor is reused.
        self.add_lazy_call(descriptor.with_key(new_key()), Callback(success=success, error=error))
        return await future

    def add_lazy_call(
        self,
        descriptor: CallDescriptor,
        callback: Optional[Callback] = None,
        trigger: bool = False,
    ) -> None:
        """
        Queue a call.

        Without a callback, or with ``trigger``, the queue is flushed at once;
        otherwise after the debounce window or when the queue is full.
        A descriptor without a key is given a fresh one here.
        """
        self.engine.add(LazyCall(descriptor=descriptor.keyed(), callback=callback), trigger)

    async def flush(self, callback: Optional[Callback] = None) -> Any:
        """
        Execute every pending lazy call now.

        Returns:
            The single value when one call was pending, else a list
        """
        return await self.engine.flush(callback)

    @property
    def lazy_calls_length(self) -> int:
        """Number of calls waiting in the queue."""
        return len(self.engine.queue)

    # Transactions

    async def send(
        self,
        from_address: str,
        send_transaction: SendTransaction,
        descriptor: CallDescriptor,
        options: Optional[dict] = None,
    ) -> str:
        """
        Sign the transaction and send it to the network.

        Args:
            from_address: Signer address
            send_transaction: Signs and broadcasts, returns the tx hash
            descriptor: Contract call to execute
            options: Transaction fields (``value``, ``gas``, ``gasPrice``, ...)

        Returns:
            Transaction hash
        """
        return await self.sender.send(from_address, send_transaction, descriptor, options)

    async def check_result(
        self, tx_id: Union[str, bytes], confirmations: Optional[int] = None
    ) -> ReceiptSummary:
        """Wait until ``tx_id`` is ``confirmations`` blocks deep."""
        return await self.receipts.check_result(tx_id, confirmations)

    async def fast_check_result(self, tx_id: Union[str, bytes]) -> ReceiptSummary:
        return await self.receipts.fast_check_result(tx_id)

    async def final_check_result(self, tx_id: Union[str, bytes]) -> ReceiptSummary:
        return await self.receipts.final_check_result(tx_id)

    async def send_and_check_result(
        self,
        from_address: str,
        send_transaction: SendTransaction,
        descriptor: CallDescriptor,
        options: Optional[dict] = None,
        confirmations: Optional[int] = None,
    ) -> ReceiptSummary:
        tx_id = await self.send(from_address, send_transaction, descriptor, options)
        return await self.check_result(tx_id, confirmations)
