"""
Fixed-delay retry for async operations.

Shared by the multicall engine (outward call and every success handler)
and by the receipt poller.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from .errors import ErrorHandler

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 5
DEFAULT_DELAY = 1.0


async def retry(
    operation: Callable[[], Awaitable[Any]],
    attempts: int = DEFAULT_ATTEMPTS,
    delay: float = DEFAULT_DELAY,
    error_handler: Optional[ErrorHandler] = None,
    label: Optional[str] = None,
) -> Any:
    """
    Run ``operation`` until it succeeds or ``attempts`` runs out.

    Args:
        operation: Zero-argument coroutine function
        attempts: Total number of attempts, including the first one
        delay: Seconds to wait between attempts
        error_handler: Classifier deciding which errors are retried
        label: Operation name used in log records

    Returns:
        Whatever ``operation`` returns on its first successful attempt

    Raises:
        The last exception raised by ``operation``
    """
    handler = error_handler or ErrorHandler(logger)
    name = label or getattr(operation, "__name__", str(operation))
    attempts = max(1, attempts)

    for attempt in range(attempts):
        try:
            return await operation()
        except Exception as e:
            handler.log_error(
                e,
                {
                    "attempt": attempt + 1,
                    "max_retries": attempts,
                    "operation": name,
                },
            )

            if not handler.should_retry(e, attempt, attempts):
                raise

            wait = handler.get_retry_delay(e, attempt, delay)
            logger.info(f"Retrying {name} in {wait}s... (attempt {attempt + 1}/{attempts})")
            await asyncio.sleep(wait)
