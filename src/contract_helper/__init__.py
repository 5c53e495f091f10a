"""
contract_helper: batched multicall reads and transaction helpers for EVM chains.
"""

from .batchers import (
    AddressFormat,
    AggregateCallError,
    AggregateResult,
    BatchError,
    CallbackError,
    CallDescriptor,
    Callback,
    DecodeError,
    FragmentResolutionError,
    NumericFormat,
    ReceiptSummary,
    ResultTuple,
    TransactionReceiptError,
    ValidationError,
)
from .config import ConfigManager, HelperConfig, get_config
from .helper import ContractHelper
from .transactions import local_account_signer

__version__ = "0.1.0"

__all__ = [
    "AddressFormat",
    "AggregateCallError",
    "AggregateResult",
    "BatchError",
    "CallbackError",
    "CallDescriptor",
    "Callback",
    "DecodeError",
    "FragmentResolutionError",
    "NumericFormat",
    "ReceiptSummary",
    "ResultTuple",
    "TransactionReceiptError",
    "ValidationError",
    "ConfigManager",
    "HelperConfig",
    "get_config",
    "ContractHelper",
    "local_account_signer",
]
