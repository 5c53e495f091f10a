"""
Transaction sending and confirmation.
"""

from .receipts import ReceiptChecker
from .sender import SendTransaction, TransactionSender, local_account_signer, to_tx_id

__all__ = [
    "ReceiptChecker",
    "SendTransaction",
    "TransactionSender",
    "local_account_signer",
    "to_tx_id",
]
