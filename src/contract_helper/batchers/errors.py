"""
Error handling utilities for batch calling operations.

This module provides the exception taxonomy used by the multicall batcher
and the transaction helpers, plus a small classifier that decides whether a
failure is worth another attempt.
"""

from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class BatchError(Exception):
    """Base exception for batch operations."""
    pass


class ValidationError(BatchError):
    """Raised when a call descriptor is malformed."""
    pass


class FragmentResolutionError(ValidationError):
    """Raised when a method name matches zero or several ABI functions."""

    def __init__(
        self,
        message: str,
        target: Optional[str] = None,
        method: Optional[str] = None,
        candidates: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.target = target
        self.method = method
        self.candidates = candidates or []


class AggregateCallError(BatchError):
    """Raised when the outward multicall failed after every attempt."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class CallbackError(BatchError):
    """Raised when a success handler failed after every attempt."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class DecodeError(BatchError):
    """Raised when one raw result cannot be decoded."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class TransactionReceiptError(BatchError):
    """Raised when a mined transaction reverted."""

    def __init__(
        self,
        message: str,
        tx_id: Optional[str] = None,
        block_number: Optional[int] = None,
    ):
        super().__init__(message)
        self.tx_id = tx_id
        self.block_number = block_number


class ReceiptPendingError(BatchError):
    """Raised while a receipt is missing or not deep enough yet."""
    pass


# Deterministic failures: another attempt would fail the same way.
STRUCTURAL_ERRORS = (ValidationError, TransactionReceiptError, DecodeError)


class ErrorHandler:
    """
    Centralized error handling for batch operations.

    Provides classification, logging, and the retry decision for the
    errors encountered during multicalls, callbacks and receipt polling.
    Delays are fixed; callers rely on the exact spacing between attempts.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify_error(self, error: Exception) -> str:
        """
        Classify an error into a category for appropriate handling.

        Args:
            error: Exception to classify

        Returns:
            Error category string
        """
        if isinstance(error, STRUCTURAL_ERRORS):
            return 'structural'

        if isinstance(error, ReceiptPendingError):
            return 'pending'

        error_str = str(error).lower()

        # Rate limiting errors
        if any(keyword in error_str for keyword in ['rate limit', 'too many requests', '429']):
            return 'rate_limit'

        # Network connectivity errors
        if any(keyword in error_str for keyword in ['connection', 'timeout', 'network', 'dns']):
            return 'network'

        # Contract execution errors
        if any(keyword in error_str for keyword in ['revert', 'execution reverted', 'out of gas']):
            return 'contract'

        return 'unknown'

    def should_retry(self, error: Exception, attempt: int, max_retries: int) -> bool:
        """
        Determine if an error should trigger a retry.

        Args:
            error: Exception that occurred
            attempt: Current attempt number (0-based)
            max_retries: Maximum number of attempts allowed

        Returns:
            True if operation should be retried
        """
        if attempt + 1 >= max_retries:
            return False

        return self.classify_error(error) != 'structural'

    def get_retry_delay(self, error: Exception, attempt: int, delay: float) -> float:
        """Delay in seconds before the next attempt. Fixed, no backoff."""
        return delay

    def log_error(self, error: Exception, context: Dict[str, Any]):
        """
        Log error with appropriate level and context.

        Args:
            error: Exception to log
            context: Additional context for logging
        """
        error_category = self.classify_error(error)

        log_data = {
            'error_type': type(error).__name__,
            'error_category': error_category,
            'error_message': str(error),
            **context
        }

        if error_category == 'structural':
            self.logger.warning("Structural error, not retrying", extra=log_data)
        elif error_category == 'pending':
            self.logger.debug("Still waiting", extra=log_data)
        elif error_category == 'rate_limit':
            self.logger.info("Rate limit encountered", extra=log_data)
        else:
            self.logger.warning("Batch operation error", extra=log_data)
