"""
Debounce/threshold flush policy for the pending call queue.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from .batch_queue import BatchQueue
from .types import LazyCall

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Whether a quiet-period timer is running."""
    IDLE = "idle"
    ARMED = "armed"


class FlushScheduler:
    """
    Decides when the queue is drained.

    Calls without a callback, explicit triggers and a queue at or above
    ``max_pending_length`` flush immediately. Anything else (re)arms a timer
    so the flush happens once the queue has been quiet for
    ``debounce_window`` seconds.
    """

    def __init__(
        self,
        queue: BatchQueue,
        on_flush: Callable[[], None],
        debounce_window: float = 1.0,
        max_pending_length: int = 10,
    ):
        self.queue = queue
        self.on_flush = on_flush
        self.debounce_window = debounce_window
        self.max_pending_length = max_pending_length
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.ARMED if self._timer is not None else SchedulerState.IDLE

    def notify(self, item: LazyCall, trigger: bool = False) -> None:
        """React to ``item`` having just been enqueued."""
        if item.callback is None or trigger or len(self.queue) >= self.max_pending_length:
            self.flush_now()
        else:
            self._arm()

    def flush_now(self) -> None:
        self.cancel()
        self.on_flush()

    def cancel(self) -> None:
        """Disarm the timer, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm(self) -> None:
        loop = asyncio.get_running_loop()
        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(self.debounce_window, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        logger.debug(f"Debounce window elapsed with {len(self.queue)} pending calls")
        self.on_flush()
