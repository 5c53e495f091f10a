"""
Receipt polling with a required confirmation depth.
"""

import logging
from typing import Any, Optional, Union

from web3 import AsyncWeb3
from web3.exceptions import TransactionNotFound

from ..batchers.errors import ReceiptPendingError, TransactionReceiptError
from ..batchers.retry import retry
from ..batchers.types import ReceiptSummary
from .sender import to_tx_id

logger = logging.getLogger(__name__)


class ReceiptChecker:
    """
    Polls for a receipt until it is ``confirmations`` blocks deep.

    A missing or shallow receipt is retried with a fixed delay; a reverted
    transaction fails immediately with ``TransactionReceiptError``.
    """

    def __init__(
        self,
        web3: AsyncWeb3,
        attempts: int = 60,
        delay: float = 1.0,
        final_confirmations: int = 5,
    ):
        self.web3 = web3
        self.attempts = attempts
        self.delay = delay
        self.final_confirmations = final_confirmations
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def confirmations(self, receipt: Any) -> int:
        latest = await self.web3.eth.block_number
        return latest - receipt["blockNumber"] + 1

    async def wait_for_receipt(self, tx_id: Union[str, bytes], confirmations: int) -> Any:
        tx_id = to_tx_id(tx_id)

        async def poll():
            try:
                receipt = await self.web3.eth.get_transaction_receipt(tx_id)
            except TransactionNotFound:
                receipt = None
            if receipt is None:
                raise ReceiptPendingError(f"No receipt yet for {tx_id}")

            if confirmations > 0:
                depth = await self.confirmations(receipt)
                if depth < confirmations:
                    raise ReceiptPendingError(
                        f"{tx_id} has {depth}/{confirmations} confirmations"
                    )

            if not receipt["status"]:
                raise TransactionReceiptError(
                    "Transaction execute reverted",
                    tx_id=tx_id,
                    block_number=(
                        int(receipt["blockNumber"])
                        if confirmations >= self.final_confirmations
                        else None
                    ),
                )
            return receipt

        return await retry(poll, attempts=self.attempts, delay=self.delay, label=f"receipt[{tx_id}]")

    async def check_result(
        self, tx_id: Union[str, bytes], confirmations: Optional[int] = None
    ) -> ReceiptSummary:
        """
        Wait for ``tx_id`` and summarize it.

        Args:
            tx_id: Transaction hash
            confirmations: Required depth, defaults to ``final_confirmations``

        Returns:
            ReceiptSummary; the block number is only reported once the
            required depth reaches ``final_confirmations``
        """
        if confirmations is None:
            confirmations = self.final_confirmations
        receipt = await self.wait_for_receipt(tx_id, confirmations)
        summary = ReceiptSummary(tx_id=to_tx_id(receipt["transactionHash"]))
        if confirmations >= self.final_confirmations:
            summary.block_number = int(receipt["blockNumber"])
        self.logger.info(f"Transaction {summary.tx_id} confirmed ({confirmations} blocks)")
        return summary

    async def fast_check_result(self, tx_id: Union[str, bytes]) -> ReceiptSummary:
        return await self.check_result(tx_id, 0)

    async def final_check_result(self, tx_id: Union[str, bytes]) -> ReceiptSummary:
        return await self.check_result(tx_id, self.final_confirmations)
