"""
In-memory queue of pending lazy calls.
"""

from typing import List

from .types import LazyCall


class BatchQueue:
    """
    Ordered collection of pending calls.

    Every mutation is a single synchronous step on the event loop thread, so
    a drain never observes a half-finished enqueue and no call is ever
    returned by two drains.
    """

    def __init__(self):
        self._pending: List[LazyCall] = []

    def enqueue(self, item: LazyCall) -> None:
        self._pending.append(item)

    def drain_all(self) -> List[LazyCall]:
        """Empty the queue and return everything it held, in insertion order."""
        drained, self._pending = self._pending, []
        return drained

    def __len__(self) -> int:
        return len(self._pending)

    def __bool__(self) -> bool:
        return bool(self._pending)
