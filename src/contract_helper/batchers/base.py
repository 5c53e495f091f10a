"""
Base classes for blockchain batch calling.

This module provides the abstract interface of the outward multicall, the
one network operation a flushed batch costs, and the batching configuration
shared by the engine and the scheduler.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Union

from .errors import ErrorHandler
from .types import AggregateCall, RawAggregateResponse

logger = logging.getLogger(__name__)


@dataclass
class BatchConfig:
    """Configuration for batch operations."""

    debounce_window: float = 1.0
    max_pending_length: int = 10
    multicall_attempts: int = 5
    callback_attempts: int = 5
    retry_delay: float = 1.0


class BaseMulticall(ABC):
    """
    Abstract base class for the outward aggregate call.

    An implementation either returns one raw result per request entry,
    positionally aligned, or raises.
    """

    def __init__(self, address: str):
        self.address = address
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.error_handler = ErrorHandler(self.logger)

    @abstractmethod
    async def aggregate(
        self, calls: List[AggregateCall], block_identifier: Union[int, str] = "latest"
    ) -> RawAggregateResponse:
        """
        Execute every call in one request.

        Args:
            calls: Encoded calls in wire order
            block_identifier: Block to call at

        Returns:
            RawAggregateResponse with one entry per call
        """
        pass

    @abstractmethod
    async def call(
        self, target: str, data: bytes, block_identifier: Union[int, str] = "latest"
    ) -> bytes:
        """
        Execute a single read call without aggregation.

        Args:
            target: Contract address
            data: Encoded call data
            block_identifier: Block to call at

        Returns:
            Raw return bytes
        """
        pass
