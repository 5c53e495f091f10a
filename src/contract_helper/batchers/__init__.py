"""
Batched contract calling.

This package coalesces independent contract reads into a single aggregate
call, reducing RPC round trips, and fans the decoded results back out to
each caller.
"""

from .base import BaseMulticall, BatchConfig
from .batch_queue import BatchQueue
from .codec import build_aggregate_call, build_up_aggregate_response
from .engine import BatchEngine
from .errors import (
    AggregateCallError,
    BatchError,
    CallbackError,
    DecodeError,
    FragmentResolutionError,
    ReceiptPendingError,
    TransactionReceiptError,
    ValidationError,
)
from .formatting import AddressFormat, NumericFormat, ResultTuple, ValueFormatter
from .multicall import MULTICALL3_ADDRESS, Web3Multicall
from .retry import retry
from .scheduler import FlushScheduler, SchedulerState
from .types import (
    AggregateCall,
    AggregateResult,
    CallDescriptor,
    Callback,
    CallReturnContext,
    LazyCall,
    RawAggregateResponse,
    ReceiptSummary,
)

__all__ = [
    'BaseMulticall',
    'BatchConfig',
    'BatchQueue',
    'build_aggregate_call',
    'build_up_aggregate_response',
    'BatchEngine',
    'AggregateCallError',
    'BatchError',
    'CallbackError',
    'DecodeError',
    'FragmentResolutionError',
    'ReceiptPendingError',
    'TransactionReceiptError',
    'ValidationError',
    'AddressFormat',
    'NumericFormat',
    'ResultTuple',
    'ValueFormatter',
    'MULTICALL3_ADDRESS',
    'Web3Multicall',
    'retry',
    'FlushScheduler',
    'SchedulerState',
    'AggregateCall',
    'AggregateResult',
    'CallDescriptor',
    'Callback',
    'CallReturnContext',
    'LazyCall',
    'RawAggregateResponse',
    'ReceiptSummary',
]
