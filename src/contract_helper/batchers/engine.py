"""
Batched multicall execution engine.

Drains the pending queue, performs one aggregate call for the whole batch
and fans the decoded values out to every call's callback.
"""

import asyncio
import inspect
import logging
from typing import Any, List, Optional, Sequence, Set

from .base import BaseMulticall, BatchConfig
from .batch_queue import BatchQueue
from .codec import build_aggregate_call, build_up_aggregate_response
from .errors import AggregateCallError, CallbackError, ErrorHandler, STRUCTURAL_ERRORS
from .formatting import ValueFormatter
from .retry import retry
from .scheduler import FlushScheduler
from .types import (
    AggregateResult,
    CallDescriptor,
    Callback,
    CallReturnContext,
    LazyCall,
)

logger = logging.getLogger(__name__)


async def invoke(fn, *args) -> Any:
    """Call a sync or async handler and return its result."""
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class BatchEngine:
    """
    Queue, flush policy and fan-out/fan-in for lazy contract calls.

    Every queued call's callback settles exactly once: with the value its
    own success handler returned, with a ``CallbackError`` when that handler
    kept failing, or with the error that sank the whole batch.
    """

    def __init__(
        self,
        executor: BaseMulticall,
        formatter: Optional[ValueFormatter] = None,
        config: Optional[BatchConfig] = None,
    ):
        self.executor = executor
        self.formatter = formatter or ValueFormatter()
        self.config = config or BatchConfig()
        self.queue = BatchQueue()
        self.scheduler = FlushScheduler(
            self.queue,
            self.flush_in_background,
            debounce_window=self.config.debounce_window,
            max_pending_length=self.config.max_pending_length,
        )
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.error_handler = ErrorHandler(self.logger)
        self._tasks: Set[asyncio.Task] = set()

    def add(self, item: LazyCall, trigger: bool = False) -> None:
        """Queue ``item`` and let the scheduler decide when it runs."""
        if not item.key:
            item = LazyCall(item.descriptor.keyed(), item.callback)
        self.queue.enqueue(item)
        self.scheduler.notify(item, trigger)

    async def multicall(
        self, descriptors: Sequence[CallDescriptor], attempts: Optional[int] = None
    ) -> AggregateResult:
        """
        Encode, send and decode one aggregate call.

        Structural errors (unresolvable methods, bad parameters) surface
        before any network call and are never retried. Outward failures are
        retried with a fixed delay and end in ``AggregateCallError``.
        """
        descriptors = [descriptor.keyed() for descriptor in descriptors]
        if not descriptors:
            return AggregateResult(block_number=0)

        calls = build_aggregate_call(descriptors)
        attempts = attempts or self.config.multicall_attempts
        made = 0

        async def aggregate():
            nonlocal made
            made += 1
            return await self.executor.aggregate(calls)

        try:
            response = await retry(
                aggregate,
                attempts=attempts,
                delay=self.config.retry_delay,
                error_handler=self.error_handler,
                label=f"multicall[{len(calls)}]",
            )
        except STRUCTURAL_ERRORS:
            raise
        except Exception as e:
            raise AggregateCallError(
                f"Multicall of {len(calls)} calls failed after {made} attempts: {e}",
                attempts=made,
            ) from e

        return build_up_aggregate_response(descriptors, calls, response, self.formatter)

    def flush_in_background(self) -> Optional[asyncio.Task]:
        """Drain the queue now and execute the batch in a tracked task."""
        batch = self.queue.drain_all()
        if not batch:
            return None

        task = asyncio.get_running_loop().create_task(self.execute_batch(batch))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    async def flush(self, callback: Optional[Callback] = None) -> Any:
        """
        Drain the queue and execute it, waiting for every callback.

        Returns:
            The single value when one call was pending, else a list
        """
        self.scheduler.cancel()
        return await self.execute_batch(self.queue.drain_all(), callback)

    async def execute_batch(
        self, batch: List[LazyCall], callback: Optional[Callback] = None
    ) -> Any:
        if not batch:
            return []

        # One entry per queued item, so a repeated key can never hide a callback.
        callbacks: List[Callback] = [item.callback for item in batch if item.callback is not None]
        self.logger.info(f"Executing batch of {len(batch)} calls")

        try:
            aggregate = await self.multicall([item.descriptor for item in batch])
        except Exception as e:
            self.logger.error(f"Batch of {len(batch)} calls failed: {e}")
            await self._dispatch_error(callbacks, e)
            if callback is not None and callback.error is not None:
                await invoke(callback.error, e)
            raise

        outcomes = await asyncio.gather(
            *(
                self._settle(item.key, aggregate.results[item.key], item.callback)
                for item in batch
            ),
            return_exceptions=True,
        )

        failures = [o for o in outcomes if isinstance(o, Exception)]
        if failures:
            self.logger.warning(f"{len(failures)} of {len(outcomes)} calls failed")
            if callback is not None and callback.error is not None:
                await invoke(callback.error, failures[0])
            raise failures[0]

        result = outcomes[0] if len(outcomes) == 1 else list(outcomes)
        if callback is not None:
            await invoke(callback.success, result)
        return result

    async def _settle(
        self, key: str, context: CallReturnContext, callback: Optional[Callback]
    ) -> Any:
        if not context.success:
            if callback is not None:
                await self._safe_error(callback, context.error)
            raise context.error

        if callback is None:
            return context.return_value

        try:
            return await retry(
                lambda: invoke(callback.success, context.return_value),
                attempts=self.config.callback_attempts,
                delay=self.config.retry_delay,
                error_handler=self.error_handler,
                label=f"callback[{key}]",
            )
        except Exception as e:
            error = CallbackError(f"Callback for {key} failed: {e}", key=key)
            error.__cause__ = e
            await self._safe_error(callback, error)
            raise error

    async def _dispatch_error(self, callbacks: List[Callback], error: Exception) -> None:
        await asyncio.gather(
            *(self._safe_error(cb, error) for cb in callbacks),
            return_exceptions=True,
        )

    async def _safe_error(self, callback: Callback, error: Exception) -> None:
        if callback.error is None:
            return
        try:
            await invoke(callback.error, error)
        except Exception as e:
            self.logger.warning(f"Error handler raised: {e}")

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            level = logging.WARNING if isinstance(error, STRUCTURAL_ERRORS + (CallbackError,)) else logging.ERROR
            self.logger.log(level, f"Background batch finished with error: {error}")

    async def wait_idle(self) -> None:
        """Wait for every batch started in the background."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Flush whatever is still queued and wait for in-flight batches."""
        self.scheduler.cancel()
        self.flush_in_background()
        await self.wait_idle()
