"""
Transaction building and submission.

Builds an EIP-1559 (or legacy, when ``gasPrice`` is given) transaction from
a call descriptor, optionally dry-runs it with ``eth_call`` and hands it to
an injected signer.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from eth_utils import to_checksum_address
from hexbytes import HexBytes
from web3 import AsyncWeb3, Web3

from ..batchers.abi import encode_call, resolve_function
from ..batchers.engine import invoke
from ..batchers.types import CallDescriptor

logger = logging.getLogger(__name__)

SendTransaction = Callable[[Dict[str, Any], AsyncWeb3, bool], Union[str, bytes, Awaitable[Any]]]


def to_tx_id(value: Union[str, bytes]) -> str:
    """Normalize a transaction hash to 0x-prefixed hex."""
    return Web3.to_hex(HexBytes(value))


class TransactionSender:
    """Signs and sends contract transactions through an injected signer."""

    def __init__(
        self,
        web3: AsyncWeb3,
        simulate: bool = True,
        gas_limit_multiplier_percent: int = 120,
    ):
        self.web3 = web3
        self.simulate = simulate
        self.gas_limit_multiplier_percent = gas_limit_multiplier_percent
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def build_transaction(
        self,
        from_address: str,
        descriptor: CallDescriptor,
        options: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Build the transaction body for ``descriptor``.

        Args:
            from_address: Sender address
            descriptor: Contract call to execute
            options: Transaction fields overriding the defaults (``value``,
                ``gas``/``gasLimit``, ``gasPrice``, ``maxFeePerGas``, ...)

        Returns:
            Transaction dict ready for signing
        """
        fn = resolve_function(
            descriptor.abi, descriptor.method, descriptor.parameters, target=descriptor.target
        )
        data = encode_call(fn, descriptor.parameters)

        tx: Dict[str, Any] = {**(descriptor.options or {}), **(options or {})}
        if "gasLimit" in tx:
            tx["gas"] = tx.pop("gasLimit")

        sender = to_checksum_address(from_address)
        tx.update(
            {
                "to": to_checksum_address(descriptor.target),
                "data": "0x" + data.hex(),
                "chainId": await self.web3.eth.chain_id,
                "from": sender,
            }
        )
        if tx.get("nonce") is None:
            tx["nonce"] = await self.web3.eth.get_transaction_count(sender)

        await self._fill_fees(tx)

        if not tx.get("gas"):
            estimated = await self.web3.eth.estimate_gas(tx)
            tx["gas"] = estimated * self.gas_limit_multiplier_percent // 100

        return tx

    async def _fill_fees(self, tx: Dict[str, Any]) -> None:
        """
        EIP-1559 fees, or a legacy gas price when the caller gave one or
        the chain reports no base fee.
        """
        if not tx.get("gasPrice") and not (tx.get("maxFeePerGas") and tx.get("maxPriorityFeePerGas")):
            block = await self.web3.eth.get_block("latest")
            base_fee = block.get("baseFeePerGas")
            if base_fee is None:
                tx["gasPrice"] = await self.web3.eth.gas_price
            else:
                if not tx.get("maxPriorityFeePerGas"):
                    tx["maxPriorityFeePerGas"] = await self.web3.eth.max_priority_fee
                if not tx.get("maxFeePerGas"):
                    tx["maxFeePerGas"] = 2 * base_fee + tx["maxPriorityFeePerGas"]

        if tx.get("gasPrice"):
            tx.pop("type", None)
            tx.pop("maxFeePerGas", None)
            tx.pop("maxPriorityFeePerGas", None)
        else:
            tx["type"] = 2

    async def simulate_transaction(self, tx: Dict[str, Any]) -> None:
        """Dry-run ``tx`` with eth_call; any failure is fatal."""
        try:
            await self.web3.eth.call(tx)
        except Exception as e:
            self.logger.error(f"Simulation of {tx.get('to')} failed: {e}")
            raise

    async def send(
        self,
        from_address: str,
        send_transaction: SendTransaction,
        descriptor: CallDescriptor,
        options: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Build, optionally simulate, sign and submit a transaction.

        Returns:
            Transaction hash as 0x-prefixed hex
        """
        tx = await self.build_transaction(from_address, descriptor, options)
        if self.simulate:
            await self.simulate_transaction(tx)

        tx_id = to_tx_id(await invoke(send_transaction, dict(tx), self.web3, False))
        self.logger.info(f"Sent {descriptor.method} to {tx['to']}: {tx_id}")
        return tx_id


def local_account_signer(account) -> SendTransaction:
    """
    Signer for an ``eth_account`` local account.

    With ``dry_run`` the transaction is signed but not broadcast.
    """

    async def send_transaction(tx: Dict[str, Any], web3: AsyncWeb3, dry_run: bool = False) -> str:
        signed = account.sign_transaction(tx)
        if dry_run:
            return to_tx_id(signed.hash)
        return to_tx_id(await web3.eth.send_raw_transaction(signed.raw_transaction))

    return send_transaction
